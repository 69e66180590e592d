from typing import Optional
from datetime import date, datetime
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel
from apps.watchlist.models import MediaType

class CamelModel(BaseModel):
    """Base for the JSON contract: camelCase on the wire, snake_case in Python."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

def _to_date(value):
    # Clients send either "2024-05-01" or a full ISO timestamp
    if isinstance(value, str) and "T" in value:
        return datetime.fromisoformat(value.replace("Z", "+00:00")).date()
    return value

class WatchlistEntryRead(CamelModel):
    id: int
    external_media_id: int
    media_type: MediaType
    title: str
    overview: Optional[str] = None
    poster_url: Optional[str] = None
    release_date: Optional[str] = None
    rating: Optional[float] = None
    watched: bool = False
    date_watched: Optional[date] = None
    date_added: Optional[date] = None
    user_rating: Optional[float] = None
    favorite: bool = False
    priority: Optional[int] = None
    recommended_by: Optional[str] = None

class WatchlistEntryCreate(CamelModel):
    external_media_id: int
    media_type: MediaType
    title: str = Field(min_length=1)
    overview: Optional[str] = None
    poster_url: Optional[str] = None
    release_date: Optional[str] = None
    rating: Optional[float] = None
    watched: bool = False
    favorite: bool = False
    date_watched: Optional[date] = None
    user_rating: Optional[float] = Field(default=None, ge=0, le=10)
    priority: Optional[int] = Field(default=None, ge=0, le=2)
    recommended_by: Optional[str] = None

    @field_validator("date_watched", mode="before")
    @classmethod
    def parse_dates(cls, value):
        return _to_date(value)

class WatchlistEntryUpdate(CamelModel):
    """Partial update: only the fields present in the request body are applied."""
    title: Optional[str] = Field(default=None, min_length=1)
    watched: Optional[bool] = None
    favorite: Optional[bool] = None
    date_watched: Optional[date] = None
    date_added: Optional[date] = None
    user_rating: Optional[float] = Field(default=None, ge=0, le=10)
    priority: Optional[int] = Field(default=None, ge=0, le=2)
    recommended_by: Optional[str] = None

    @field_validator("date_watched", "date_added", mode="before")
    @classmethod
    def parse_dates(cls, value):
        return _to_date(value)
