from dataclasses import dataclass, replace
from enum import Enum
from typing import Iterable, List, Optional, Union
from apps.client.entries import Entry
from apps.client.view import Pagination
from apps.watchlist.models import MediaType

class WatchedTab(str, Enum):
    WATCHED = "watched"
    NOT_WATCHED = "not-watched"
    ALL = "all"

@dataclass(frozen=True)
class FilterState:
    title: str = ""
    media_type: Optional[MediaType] = None
    tab: WatchedTab = WatchedTab.ALL
    favorite: Optional[bool] = None # None = either

def should_show_favorite_filter(tab: WatchedTab) -> bool:
    # Unwatched entries are never favorites
    return tab != WatchedTab.NOT_WATCHED

def matches(entry: Entry, filters: FilterState) -> bool:
    needle = filters.title.strip().casefold()
    if needle and needle not in entry.title.casefold():
        return False
    if filters.media_type is not None and entry.media_type != filters.media_type:
        return False
    if filters.tab == WatchedTab.WATCHED and not entry.watched:
        return False
    if filters.tab == WatchedTab.NOT_WATCHED and entry.watched:
        return False
    if (
        filters.favorite is not None
        and should_show_favorite_filter(filters.tab)
        and entry.favorite != filters.favorite
    ):
        return False
    return True

def visible_rows(snapshot: Iterable[Entry], filters: FilterState) -> List[Entry]:
    return [entry for entry in snapshot if matches(entry, filters)]

def _parse_tristate(value: Union[bool, str, None]) -> Optional[bool]:
    if value is None or isinstance(value, bool):
        return value
    return {"true": True, "false": False}.get(value.strip().lower())

class FilterController:
    """
    Holds the current filters. Every change sends the pager back to the
    first page so a narrowed result never lands on an empty page.
    """

    def __init__(self, pagination: Pagination, state: Optional[FilterState] = None):
        self.pagination = pagination
        self.state = state or FilterState()

    def _apply(self, **changes) -> FilterState:
        self.state = replace(self.state, **changes)
        self.pagination.reset()
        return self.state

    @property
    def show_favorite_filter(self) -> bool:
        return should_show_favorite_filter(self.state.tab)

    def set_title(self, text: str) -> FilterState:
        return self._apply(title=text or "")

    def set_media_type(self, media_type: Union[MediaType, str, None]) -> FilterState:
        if isinstance(media_type, str):
            media_type = MediaType(media_type) if media_type else None
        return self._apply(media_type=media_type)

    def set_tab(self, tab: Union[WatchedTab, str]) -> FilterState:
        tab = WatchedTab(tab)
        if not should_show_favorite_filter(tab):
            return self._apply(tab=tab, favorite=None)
        return self._apply(tab=tab)

    def set_favorite(self, value: Union[bool, str, None]) -> FilterState:
        """True/False/None, or the select values "true"/"false"/"" """
        if not self.show_favorite_filter:
            return self.state
        return self._apply(favorite=_parse_tristate(value))

    def clear(self) -> FilterState:
        return self._apply(title="", media_type=None, tab=WatchedTab.ALL, favorite=None)
