import logging
from contextlib import asynccontextmanager
import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.sessions import SessionMiddleware
from uvicorn.middleware.proxy_headers import ProxyHeadersMiddleware

from config import settings
from database import create_db_and_tables
from apps.auth.router import router as auth_router
from apps.core.router import router as catalog_router
from apps.core.tmdb import TMDBService
from apps.watchlist.router import router as watchlist_router

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    create_db_and_tables()
    app.state.tmdb = TMDBService(TMDBService.create_client())
    if not app.state.tmdb.api_key:
        logger.warning("TMDB_API_KEY is not set; search and details will fail")
    yield
    await app.state.tmdb.close()

app = FastAPI(title=settings.PROJECT_NAME, lifespan=lifespan)

# Middlewares
app.add_middleware(ProxyHeadersMiddleware, trusted_hosts=["*"])
app.add_middleware(SessionMiddleware, secret_key=settings.SECRET_KEY, https_only=False, same_site="lax")

# Every error body is {"error": "..."}
@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    first = exc.errors()[0] if exc.errors() else {}
    field = ".".join(str(p) for p in first.get("loc", ())[1:])
    message = f"Invalid {field}: {first.get('msg')}" if field else "Invalid request body"
    return JSONResponse({"error": message}, status_code=400)

@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse({"error": exc.detail}, status_code=exc.status_code, headers=exc.headers)

# Routers
app.include_router(auth_router)
app.include_router(catalog_router)
app.include_router(watchlist_router)

@app.get("/health")
def health():
    return {"status": "ok", "project": settings.PROJECT_NAME}


if __name__ == "__main__":
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)
