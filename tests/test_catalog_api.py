from __future__ import annotations

from typing import Any


def _movie(i: int, **extra: Any) -> dict[str, Any]:
    return {
        "id": i,
        "media_type": "movie",
        "title": f"Movie {i}",
        "overview": "...",
        "poster_path": f"/p{i}.jpg",
        "release_date": "2001-01-01",
        "vote_average": 7.26,
        **extra,
    }


def test_search_formats_and_filters_tmdb_results(client, tmdb_routes, tmdb_requests) -> None:
    tmdb_routes["/search/multi"] = (
        200,
        {
            "results": [
                _movie(1),
                {"id": 2, "media_type": "person", "name": "Keanu Reeves"},
                {"id": 3, "media_type": "tv", "name": "Dark", "first_air_date": "2017-12-01",
                 "vote_average": None, "overview": None, "poster_path": None},
                {"id": 4, "media_type": "movie"},
                {"media_type": "movie", "title": "No id"},
            ]
        },
    )

    r = client.get("/api/search", params={"q": "matrix"})
    assert r.status_code == 200
    results = r.json()["results"]
    assert results == [
        {
            "id": 1,
            "title": "Movie 1",
            "overview": "...",
            "posterUrl": "https://image.tmdb.org/t/p/w500/p1.jpg",
            "releaseDate": "2001-01-01",
            "mediaType": "movie",
            "rating": 7.3,
        },
        {
            "id": 3,
            "title": "Dark",
            "overview": "",
            "posterUrl": None,
            "releaseDate": "2017-12-01",
            "mediaType": "tv",
            "rating": 0.0,
        },
    ]
    assert tmdb_requests[0].url.params["query"] == "matrix"
    assert tmdb_requests[0].url.params["api_key"] == "test-key"


def test_search_caps_results_at_ten(client, tmdb_routes) -> None:
    tmdb_routes["/search/multi"] = (200, {"results": [_movie(i) for i in range(1, 25)]})
    results = client.get("/api/search", params={"q": "movie"}).json()["results"]
    assert len(results) == 10
    assert [r["id"] for r in results] == list(range(1, 11))


def test_search_requires_query(client) -> None:
    r = client.get("/api/search")
    assert r.status_code == 400
    assert r.json() == {"error": "Query parameter is required"}


def test_search_upstream_failure_is_500(client, tmdb_routes) -> None:
    tmdb_routes["/search/multi"] = (503, {"status_message": "down"})
    r = client.get("/api/search", params={"q": "x"})
    assert r.status_code == 500
    assert r.json() == {"error": "Failed to search movies/shows"}


def test_search_without_api_key_is_500(client, tmdb, tmdb_requests) -> None:
    tmdb.api_key = ""
    r = client.get("/api/search", params={"q": "x"})
    assert r.status_code == 500
    assert r.json() == {"error": "TMDB API key not configured"}
    assert tmdb_requests == []


def test_movie_details_are_denormalized(client, tmdb_routes, tmdb_requests) -> None:
    tmdb_routes["/movie/603"] = (
        200,
        {
            "id": 603,
            "title": "The Matrix",
            "overview": "Neo.",
            "poster_path": "/m.jpg",
            "backdrop_path": "/b.jpg",
            "release_date": "1999-03-30",
            "runtime": 136,
            "vote_average": 8.218,
            "vote_count": 25000,
            "genres": [{"id": 28, "name": "Action"}, {"id": 878, "name": "Science Fiction"}],
            "credits": {
                "cast": [
                    {"name": f"Actor {n}", "character": f"Role {n}", "profile_path": None, "order": n}
                    for n in range(12, 0, -1)
                ],
                "crew": [
                    {"name": "Someone", "job": "Producer"},
                    {"name": "Lana Wachowski", "job": "Director"},
                ],
            },
            "external_ids": {"imdb_id": "tt0133093"},
        },
    )

    r = client.get("/api/details", params={"externalId": 603, "mediaType": "movie"})
    assert r.status_code == 200
    info = r.json()
    assert info["title"] == "The Matrix"
    assert info["backdropUrl"] == "https://image.tmdb.org/t/p/w1280/b.jpg"
    assert info["rating"] == 8.2
    assert info["genres"] == ["Action", "Science Fiction"]
    assert info["director"] == "Lana Wachowski"
    assert info["runtime"] == 136
    assert info["imdbId"] == "tt0133093"
    assert len(info["cast"]) == 10
    assert info["cast"][0] == {"name": "Actor 1", "character": "Role 1", "profileUrl": None}
    assert info["seasons"] is None
    assert tmdb_requests[0].url.params["append_to_response"] == "credits,external_ids"


def test_tv_details_tolerate_missing_sections(client, tmdb_routes) -> None:
    tmdb_routes["/tv/1396"] = (
        200,
        {
            "id": 1396,
            "name": "Breaking Bad",
            "first_air_date": "2008-01-20",
            "number_of_seasons": 5,
            "number_of_episodes": 62,
            "created_by": [{"name": "Vince Gilligan"}],
            "genres": None,
            "credits": None,
            "external_ids": None,
            "overview": None,
        },
    )

    info = client.get("/api/details", params={"externalId": 1396, "mediaType": "tv"}).json()
    assert info["title"] == "Breaking Bad"
    assert info["releaseDate"] == "2008-01-20"
    assert info["seasons"] == 5
    assert info["episodes"] == 62
    assert info["creators"] == ["Vince Gilligan"]
    assert info["genres"] == []
    assert info["cast"] == []
    assert info["imdbId"] is None
    assert info["director"] is None


def test_details_parameter_validation(client) -> None:
    assert client.get("/api/details", params={"mediaType": "movie"}).status_code == 400
    r = client.get("/api/details", params={"externalId": 1, "mediaType": "anime"})
    assert r.status_code == 400
    assert r.json() == {"error": 'mediaType must be either "movie" or "tv"'}


def test_details_upstream_404_is_500(client) -> None:
    r = client.get("/api/details", params={"externalId": 42, "mediaType": "movie"})
    assert r.status_code == 500
    assert r.json() == {"error": "Failed to fetch details"}
