from enum import Enum
from typing import FrozenSet, List
from apps.client.filters import WatchedTab

ALL_COLUMNS = (
    "title",
    "mediaType",
    "watched",
    "favorite",
    "dateWatched",
    "dateAdded",
    "userRating",
    "priority",
    "recommendedBy",
    "actions",
)

ADMIN_ONLY_COLUMNS = frozenset({"actions"})

HIDDEN_BY_TAB = {
    WatchedTab.WATCHED: frozenset({"watched", "priority"}),
    WatchedTab.NOT_WATCHED: frozenset({"watched", "dateWatched", "favorite"}),
    WatchedTab.ALL: frozenset(),
}

TOGGLE_COLUMNS = frozenset({"watched", "favorite"})

class CellMode(str, Enum):
    INTERACTIVE = "interactive"
    STATIC = "static"

def visible_columns(is_admin: bool, tab: WatchedTab) -> FrozenSet[str]:
    """is_admin comes from the auth collaborator; it is taken as given."""
    hidden = HIDDEN_BY_TAB[WatchedTab(tab)]
    if not is_admin:
        hidden = hidden | ADMIN_ONLY_COLUMNS
    return frozenset(c for c in ALL_COLUMNS if c not in hidden)

def ordered_columns(is_admin: bool, tab: WatchedTab) -> List[str]:
    visible = visible_columns(is_admin, tab)
    return [c for c in ALL_COLUMNS if c in visible]

def cell_mode(column: str, is_admin: bool) -> CellMode:
    if column in TOGGLE_COLUMNS and is_admin:
        return CellMode.INTERACTIVE
    return CellMode.STATIC
