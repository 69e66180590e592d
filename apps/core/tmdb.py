import logging
import httpx
from typing import Optional, Dict, Any, List
from pydantic import ValidationError
from config import settings
from apps.core.schemas import RawSearchItem, RawDetails, SearchResultItem, MediaDetails, CastCredit
from apps.watchlist.models import MediaType

logger = logging.getLogger(__name__)

class TMDBNotConfigured(Exception):
    pass

class TMDBService:
    def __init__(
        self,
        client: httpx.AsyncClient,
        api_key: Optional[str] = None,
        image_url: Optional[str] = None,
        backdrop_url: Optional[str] = None,
    ):
        self.client = client
        self.api_key = settings.TMDB_API_KEY if api_key is None else api_key
        self.image_url = image_url or settings.TMDB_IMAGE_URL
        self.backdrop_url = backdrop_url or settings.TMDB_BACKDROP_URL

    @classmethod
    def create_client(cls) -> httpx.AsyncClient:
        return httpx.AsyncClient(base_url=settings.TMDB_BASE_URL, timeout=10.0)

    async def close(self):
        await self.client.aclose()

    def _params(self, **extra) -> Dict[str, Any]:
        if not self.api_key:
            raise TMDBNotConfigured("TMDB API key not configured")
        return {"api_key": self.api_key, "language": "en-US", **extra}

    async def search_multi(self, query: str, page: int = 1) -> Dict[str, Any]:
        """Search for movies and TV shows."""
        response = await self.client.get("/search/multi", params=self._params(query=query, page=page))
        response.raise_for_status()
        return response.json()

    async def get_details(self, media_type: str, tmdb_id: int) -> Dict[str, Any]:
        """Get full details for a movie or TV show, including credits and external ids."""
        response = await self.client.get(
            f"/{media_type}/{tmdb_id}",
            params=self._params(append_to_response="credits,external_ids")
        )
        response.raise_for_status()
        return response.json()

    def get_image_url(self, path: Optional[str], base: Optional[str] = None) -> Optional[str]:
        if not path:
            return None
        return f"{base or self.image_url}{path}"

    async def search(self, query: str, limit: Optional[int] = None) -> List[SearchResultItem]:
        """Movie and TV hits only, titled, capped at `limit`."""
        limit = limit or settings.SEARCH_RESULT_LIMIT
        data = await self.search_multi(query)

        results = []
        for raw in data.get("results") or []:
            try:
                item = RawSearchItem.model_validate(raw)
            except ValidationError as e:
                logger.warning("Skipping malformed TMDB search result: %s", e.errors()[:1])
                continue
            if item.media_type not in ("movie", "tv"):
                continue
            title = item.title or item.name
            if not title:
                continue

            results.append(SearchResultItem(
                id=item.id,
                title=title,
                overview=item.overview,
                poster_url=self.get_image_url(item.poster_path),
                release_date=item.release_date or item.first_air_date or "",
                media_type=MediaType(item.media_type),
                rating=round(item.vote_average, 1),
            ))
            if len(results) >= limit:
                break
        return results

    async def details(self, media_type: MediaType, tmdb_id: int) -> MediaDetails:
        """
        Denormalized detail view: top 10 cast, director for movies,
        creators/season counts for TV. Raises ValidationError if TMDB's
        payload can't be read.
        """
        data = RawDetails.model_validate(await self.get_details(media_type.value, tmdb_id))
        is_movie = media_type == MediaType.MOVIE

        cast = sorted(data.credits.cast, key=lambda c: c.order)[:10]
        info = MediaDetails(
            id=data.id,
            title=(data.title if is_movie else data.name) or data.title or data.name or "",
            overview=data.overview,
            poster_url=self.get_image_url(data.poster_path),
            backdrop_url=self.get_image_url(data.backdrop_path, self.backdrop_url),
            release_date=(data.release_date if is_movie else data.first_air_date) or "",
            rating=round(data.vote_average, 1),
            vote_count=data.vote_count,
            genres=[g.name for g in data.genres if g.name],
            cast=[
                CastCredit(name=c.name, character=c.character, profile_url=self.get_image_url(c.profile_path))
                for c in cast
            ],
            imdb_id=data.external_ids.imdb_id,
            media_type=media_type,
        )

        if is_movie:
            info.runtime = data.runtime
            director = next((p for p in data.credits.crew if p.job == "Director"), None)
            info.director = director.name if director else None
        else:
            info.seasons = data.number_of_seasons
            info.episodes = data.number_of_episodes
            info.creators = [c.name for c in data.created_by]
        return info
