import os
from dotenv import load_dotenv
from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict

load_dotenv()

class Settings(BaseSettings):
    PROJECT_NAME: str = "Perpetual Watchlist"
    SECRET_KEY: str = os.getenv("SECRET_KEY", "watchlist_secret_key_123")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # Database
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///watchlist.db")

    # TMDB
    TMDB_API_KEY: str = os.getenv("TMDB_API_KEY", "")
    TMDB_BASE_URL: str = "https://api.themoviedb.org/3"
    TMDB_IMAGE_URL: str = "https://image.tmdb.org/t/p/w500"
    TMDB_BACKDROP_URL: str = "https://image.tmdb.org/t/p/w1280"
    SEARCH_RESULT_LIMIT: int = 10

    # Admin (server-side only, never sent to the client)
    ADMIN_EMAIL: Optional[str] = os.getenv("ADMIN_EMAIL")
    # When on, PUT/DELETE require an admin login session instead of trusting the client
    ENFORCE_ADMIN_SESSION: bool = False

    # Auth0
    AUTH0_DOMAIN: Optional[str] = os.getenv("AUTH0_DOMAIN")
    AUTH0_CLIENT_ID: Optional[str] = os.getenv("AUTH0_CLIENT_ID")
    AUTH0_CLIENT_SECRET: Optional[str] = os.getenv("AUTH0_CLIENT_SECRET")

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

settings = Settings()
