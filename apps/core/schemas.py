"""
Typed boundary for TMDB payloads.

Raw* models mirror what TMDB sends and default anything missing or null.
SearchResultItem / MediaDetails are what the proxy endpoints return.
"""
from typing import Optional, List
from pydantic import BaseModel, ConfigDict, Field, model_validator
from apps.watchlist.models import MediaType
from apps.watchlist.schemas import CamelModel

class RawModel(BaseModel):
    model_config = ConfigDict(extra="ignore")

    @model_validator(mode="before")
    @classmethod
    def drop_nulls(cls, data):
        # TMDB sends explicit nulls for missing data; let the field defaults apply
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None}
        return data

class RawSearchItem(RawModel):
    id: int
    media_type: Optional[str] = None
    title: Optional[str] = None # movies
    name: Optional[str] = None # tv
    overview: str = ""
    poster_path: Optional[str] = None
    release_date: Optional[str] = None
    first_air_date: Optional[str] = None
    vote_average: float = 0.0

class RawNamed(RawModel):
    name: str = ""

class RawCastMember(RawNamed):
    character: str = ""
    profile_path: Optional[str] = None
    order: int = 0

class RawCrewMember(RawNamed):
    job: str = ""

class RawCredits(RawModel):
    cast: List[RawCastMember] = Field(default_factory=list)
    crew: List[RawCrewMember] = Field(default_factory=list)

class RawExternalIds(RawModel):
    imdb_id: Optional[str] = None

class RawDetails(RawModel):
    id: int
    title: Optional[str] = None
    name: Optional[str] = None
    overview: str = ""
    poster_path: Optional[str] = None
    backdrop_path: Optional[str] = None
    release_date: Optional[str] = None
    first_air_date: Optional[str] = None
    vote_average: float = 0.0
    vote_count: int = 0
    genres: List[RawNamed] = Field(default_factory=list)
    credits: RawCredits = Field(default_factory=RawCredits)
    external_ids: RawExternalIds = Field(default_factory=RawExternalIds)
    # movie only
    runtime: Optional[int] = None
    # tv only
    number_of_seasons: Optional[int] = None
    number_of_episodes: Optional[int] = None
    created_by: List[RawNamed] = Field(default_factory=list)

class SearchResultItem(CamelModel):
    id: int
    title: str
    overview: str = ""
    poster_url: Optional[str] = None
    release_date: str = ""
    media_type: MediaType
    rating: float = 0.0

class CastCredit(CamelModel):
    name: str
    character: str = ""
    profile_url: Optional[str] = None

class MediaDetails(CamelModel):
    id: int
    title: str
    overview: str = ""
    poster_url: Optional[str] = None
    backdrop_url: Optional[str] = None
    release_date: str = ""
    rating: float = 0.0
    vote_count: int = 0
    genres: List[str] = Field(default_factory=list)
    cast: List[CastCredit] = Field(default_factory=list)
    imdb_id: Optional[str] = None
    media_type: MediaType
    runtime: Optional[int] = None
    director: Optional[str] = None
    seasons: Optional[int] = None
    episodes: Optional[int] = None
    creators: Optional[List[str]] = None
