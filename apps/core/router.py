import logging
import httpx
from typing import Optional
from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from apps.core.tmdb import TMDBService, TMDBNotConfigured
from apps.watchlist.models import MediaType

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["catalog"])

def get_tmdb(request: Request) -> TMDBService:
    # Built once in the app lifespan
    return request.app.state.tmdb

@router.get("/search")
async def search(q: Optional[str] = None, tmdb: TMDBService = Depends(get_tmdb)):
    if not q or not q.strip():
        return JSONResponse({"error": "Query parameter is required"}, status_code=400)

    try:
        results = await tmdb.search(q)
    except TMDBNotConfigured as e:
        return JSONResponse({"error": str(e)}, status_code=500)
    except httpx.HTTPError as e:
        logger.error("TMDB search error for %r: %s", q, e)
        return JSONResponse({"error": "Failed to search movies/shows"}, status_code=500)

    logger.debug("Found %d results for %r", len(results), q)
    return {"results": [r.model_dump(mode="json", by_alias=True) for r in results]}

@router.get("/details")
async def details(
    external_id: Optional[int] = Query(None, alias="externalId"),
    media_type: Optional[str] = Query(None, alias="mediaType"),
    tmdb: TMDBService = Depends(get_tmdb)
):
    if external_id is None or not media_type:
        return JSONResponse({"error": "externalId and mediaType parameters are required"}, status_code=400)
    if media_type not in ("movie", "tv"):
        return JSONResponse({"error": 'mediaType must be either "movie" or "tv"'}, status_code=400)

    try:
        info = await tmdb.details(MediaType(media_type), external_id)
    except TMDBNotConfigured as e:
        return JSONResponse({"error": str(e)}, status_code=500)
    except (httpx.HTTPError, ValidationError) as e:
        logger.error("TMDB details error for %s/%s: %s", media_type, external_id, e)
        return JSONResponse({"error": "Failed to fetch details"}, status_code=500)

    return info.model_dump(mode="json", by_alias=True)
