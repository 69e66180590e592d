from __future__ import annotations

import asyncio
from typing import Any, Awaitable, Callable

import httpx

from apps.client.api import WatchlistAPI
from apps.client.coordinator import CreateOutcome, EntryForm
from apps.client.filters import WatchedTab
from apps.client.notifications import Notifier
from apps.client.table import WatchlistTable
from apps.core.schemas import SearchResultItem
from apps.watchlist.models import MediaType


def _run(app, scenario: Callable[[WatchlistAPI], Awaitable[Any]]) -> Any:
    async def main() -> Any:
        transport = httpx.ASGITransport(app=app)
        async with httpx.AsyncClient(transport=transport, base_url="http://watchlist.test") as client:
            return await scenario(WatchlistAPI(client))

    return asyncio.run(main())


def test_table_round_trip_against_the_api(app, make_entry) -> None:
    make_entry(603, "The Matrix")
    make_entry(438631, "Dune")
    make_entry(1396, "Breaking Bad", "tv", watched=True, favorite=True)

    async def scenario(api: WatchlistAPI) -> dict[str, Any]:
        table = WatchlistTable(api, Notifier(), is_admin=True)
        assert await table.refresh() is True

        dune = next(e for e in table.snapshot if e.title == "Dune")
        await table.coordinator.toggle_watched(dune.id)

        table.filters.set_tab(WatchedTab.WATCHED)
        table.toggle_sort("title")
        return {
            "rows": [e.title for e in table.page_rows()],
            "columns": table.columns(),
            "server": [i["title"] for i in await api.list_entries() if i["watched"]],
        }

    result = _run(app, scenario)
    assert result["rows"] == ["Breaking Bad", "Dune"]
    assert "watched" not in result["columns"]
    assert "actions" in result["columns"]
    assert sorted(result["server"]) == ["Breaking Bad", "Dune"]


def test_duplicate_create_through_the_client_is_a_conflict(app, make_entry) -> None:
    make_entry(603, "The Matrix")
    matrix = SearchResultItem(id=603, title="The Matrix", media_type=MediaType.MOVIE)

    async def scenario(api: WatchlistAPI) -> tuple[CreateOutcome, int, int, str]:
        notifier = Notifier()
        table = WatchlistTable(api, notifier, is_admin=True)
        await table.refresh()
        outcome = await table.coordinator.create(matrix, EntryForm())
        return outcome, len(table.snapshot), len(await api.list_entries()), notifier.last.message

    outcome, local, remote, message = _run(app, scenario)
    assert outcome == CreateOutcome.CONFLICT
    assert (local, remote) == (1, 1)
    assert message == '"The Matrix" is already in your watchlist!'


def test_unwatch_round_trip_matches_server_state(app, make_entry) -> None:
    entry = make_entry(1396, "Breaking Bad", "tv", watched=True, favorite=True, userRating=10, dateWatched="2020-01-01")

    async def scenario(api: WatchlistAPI):
        table = WatchlistTable(api, is_admin=True)
        await table.refresh()
        await table.coordinator.toggle_watched(entry["id"])
        return table.snapshot.get(entry["id"]), (await api.list_entries())[0]

    local, remote = _run(app, scenario)
    assert (local.watched, local.favorite, local.user_rating, local.date_watched) == (False, False, None, None)
    assert (remote["watched"], remote["favorite"], remote["userRating"], remote["dateWatched"]) == (False, False, None, None)


def test_visitor_table_hides_actions_and_submits_recommendation(app) -> None:
    arrival = SearchResultItem(id=329865, title="Arrival", media_type=MediaType.MOVIE, rating=7.6)

    async def scenario(api: WatchlistAPI):
        table = WatchlistTable(api, is_admin=False)
        await table.refresh()
        outcome = await table.coordinator.create(arrival, EntryForm(recommended_by="Robin", priority=2))
        return outcome, table.columns(), table.snapshot.entries()

    outcome, columns, entries = _run(app, scenario)
    assert outcome == CreateOutcome.CREATED
    assert "actions" not in columns
    assert entries[0].recommended_by == "Robin"
    assert entries[0].priority == 2
    assert entries[0].watched is False


def test_stale_refresh_does_not_overwrite_closed_view() -> None:
    release = asyncio.Event()

    class SlowAPI:
        async def list_entries(self) -> list[dict[str, Any]]:
            await release.wait()
            return [{"id": 1, "externalMediaId": 1, "mediaType": "movie", "title": "Late"}]

    async def scenario() -> tuple[bool, int, bool]:
        table = WatchlistTable(SlowAPI())
        task = asyncio.create_task(table.refresh())
        await asyncio.sleep(0)
        loading = table.loading
        table.close()
        release.set()
        return await task, len(table.snapshot), loading

    applied, size, loading = asyncio.run(scenario())
    assert applied is False
    assert size == 0
    assert loading is True


def test_failed_load_shows_empty_table() -> None:
    class DownAPI:
        async def list_entries(self) -> list[dict[str, Any]]:
            raise httpx.ConnectError("offline")

    async def no_sleep(delay: float) -> None:
        return None

    async def scenario() -> tuple[bool, int]:
        table = WatchlistTable(DownAPI())
        table.fetcher.sleep = no_sleep
        ok = await table.refresh()
        return ok, len(table.page_rows())

    assert asyncio.run(scenario()) == (True, 0)
