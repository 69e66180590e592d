from __future__ import annotations

from typing import Any

import httpx
import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from apps.core.tmdb import TMDBService
from apps.watchlist import models  # noqa: F401
from database import get_session


@pytest.fixture()
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture()
def tmdb_routes() -> dict[str, tuple[int, Any]]:
    """path -> (status, json body) served by the fake TMDB."""
    return {}


@pytest.fixture()
def tmdb_requests() -> list[httpx.Request]:
    return []


@pytest.fixture()
def tmdb(tmdb_routes, tmdb_requests) -> TMDBService:
    def handler(request: httpx.Request) -> httpx.Response:
        tmdb_requests.append(request)
        route = tmdb_routes.get(request.url.path)
        if route is None:
            return httpx.Response(404, json={"status_message": "The resource could not be found."})
        status, body = route
        return httpx.Response(status, json=body)

    client = httpx.AsyncClient(base_url="https://tmdb.test", transport=httpx.MockTransport(handler))
    return TMDBService(client, api_key="test-key")


@pytest.fixture()
def app(engine, tmdb):
    from main import app

    def override_session():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_session] = override_session
    app.state.tmdb = tmdb
    yield app
    app.dependency_overrides.clear()


@pytest.fixture()
def client(app) -> TestClient:
    return TestClient(app)


@pytest.fixture()
def make_entry(client):
    def _make(external_media_id: int, title: str, media_type: str = "movie", **extra: Any) -> dict[str, Any]:
        body = {"externalMediaId": external_media_id, "mediaType": media_type, "title": title, **extra}
        r = client.post("/api/watchlist", json=body)
        assert r.status_code == 201, r.text
        return r.json()["item"]

    return _make
