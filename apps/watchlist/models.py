from typing import Optional
from datetime import date
from enum import Enum
from sqlmodel import SQLModel, Field, UniqueConstraint

class MediaType(str, Enum):
    MOVIE = "movie"
    TV = "tv"

class Priority(int, Enum):
    LOW = 0
    MEDIUM = 1
    HIGH = 2

class WatchlistEntry(SQLModel, table=True):
    __table_args__ = (
        UniqueConstraint("external_media_id", "media_type", name="uq_entry_external_media"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    external_media_id: int = Field(index=True) # TMDB id, only unique per media type
    media_type: MediaType = Field(index=True)
    title: str

    # Catalog data captured from the search result at creation time
    overview: Optional[str] = None
    poster_url: Optional[str] = None
    release_date: Optional[str] = None
    rating: Optional[float] = None

    watched: bool = Field(default=False)
    date_watched: Optional[date] = None
    date_added: date = Field(default_factory=date.today)
    user_rating: Optional[float] = Field(default=None, ge=0, le=10) # 0-10
    favorite: bool = Field(default=False)
    priority: Optional[int] = Field(default=None, ge=0, le=2)
    recommended_by: Optional[str] = None
