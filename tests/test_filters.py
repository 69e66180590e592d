from __future__ import annotations

import itertools
from typing import Any

import pytest

from apps.client.entries import Entry
from apps.client.filters import FilterController, FilterState, WatchedTab, visible_rows
from apps.client.view import Pagination
from apps.watchlist.models import MediaType


def _entry(i: int, title: str, media_type: str = "movie", watched: bool = False, favorite: bool = False) -> Entry:
    return Entry(
        id=i,
        external_media_id=i,
        media_type=MediaType(media_type),
        title=title,
        watched=watched,
        favorite=favorite,
    )


SNAPSHOT = [
    _entry(1, "Dune", watched=True, favorite=True),
    _entry(2, "Dune: Part Two"),
    _entry(3, "Dark", "tv", watched=True),
    _entry(4, "The Bear", "tv"),
    _entry(5, "Heat", watched=True),
]


def _ids(rows: list[Entry]) -> list[int]:
    return [r.id for r in rows]


def test_title_filter_is_case_insensitive_substring() -> None:
    assert _ids(visible_rows(SNAPSHOT, FilterState(title="dUNe"))) == [1, 2]
    assert _ids(visible_rows(SNAPSHOT, FilterState(title="   "))) == [1, 2, 3, 4, 5]


def test_media_type_and_tab_compose_with_and() -> None:
    rows = visible_rows(SNAPSHOT, FilterState(media_type=MediaType.TV, tab=WatchedTab.WATCHED))
    assert _ids(rows) == [3]
    assert _ids(visible_rows(SNAPSHOT, FilterState(tab=WatchedTab.NOT_WATCHED))) == [2, 4]


def test_favorite_tristate() -> None:
    assert _ids(visible_rows(SNAPSHOT, FilterState(favorite=True))) == [1]
    assert _ids(visible_rows(SNAPSHOT, FilterState(tab=WatchedTab.WATCHED, favorite=False))) == [3, 5]


def test_favorite_filter_does_not_apply_on_not_watched_tab() -> None:
    rows = visible_rows(SNAPSHOT, FilterState(tab=WatchedTab.NOT_WATCHED, favorite=True))
    assert _ids(rows) == [2, 4]


@pytest.mark.parametrize(
    "title,media_type,tab,favorite",
    list(itertools.product(["", "d"], [None, MediaType.MOVIE], list(WatchedTab), [None, True, False])),
)
def test_visible_rows_is_an_idempotent_subset(title: str, media_type: Any, tab: WatchedTab, favorite: Any) -> None:
    filters = FilterState(title=title, media_type=media_type, tab=tab, favorite=favorite)
    once = visible_rows(SNAPSHOT, filters)
    assert all(r in SNAPSHOT for r in once)
    assert visible_rows(once, filters) == once


def test_every_filter_change_resets_to_first_page() -> None:
    pagination = Pagination(page_index=3)
    controller = FilterController(pagination)

    for change in (
        lambda: controller.set_title("du"),
        lambda: controller.set_media_type("tv"),
        lambda: controller.set_tab(WatchedTab.WATCHED),
        lambda: controller.set_favorite("true"),
    ):
        pagination.page_index = 3
        change()
        assert pagination.page_index == 0


def test_switching_to_not_watched_clears_and_hides_favorite_filter() -> None:
    controller = FilterController(Pagination())
    controller.set_tab(WatchedTab.WATCHED)
    controller.set_favorite(True)
    assert controller.state.favorite is True

    controller.set_tab(WatchedTab.NOT_WATCHED)
    assert controller.state.favorite is None
    assert controller.show_favorite_filter is False

    controller.set_favorite(True)
    assert controller.state.favorite is None


def test_tab_change_keeps_title_and_media_filters() -> None:
    controller = FilterController(Pagination())
    controller.set_title("dune")
    controller.set_media_type(MediaType.MOVIE)
    controller.set_tab("watched")
    assert controller.state == FilterState(title="dune", media_type=MediaType.MOVIE, tab=WatchedTab.WATCHED)


def test_select_values_map_to_tristate() -> None:
    controller = FilterController(Pagination())
    assert controller.set_favorite("false").favorite is False
    assert controller.set_favorite("").favorite is None
    assert controller.set_media_type("").media_type is None
