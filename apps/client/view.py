"""
Client-side sorting and pagination over the filtered rows.
"""
import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, List, Optional, Sequence, Tuple
from apps.client.entries import Entry

PAGE_SIZES = (5, 10, 25, 50)
DEFAULT_PAGE_SIZE = 10

# column id -> entry attribute
SORTABLE_COLUMNS = {
    "title": "title",
    "mediaType": "media_type",
    "watched": "watched",
    "favorite": "favorite",
    "dateWatched": "date_watched",
    "dateAdded": "date_added",
    "userRating": "user_rating",
    "priority": "priority",
    "recommendedBy": "recommended_by",
}

@dataclass(frozen=True)
class SortSpec:
    column: str
    descending: bool = False

    def __post_init__(self):
        if self.column not in SORTABLE_COLUMNS:
            raise ValueError(f"Column {self.column!r} is not sortable")

def next_sort(current: Optional[SortSpec], column: str) -> Optional[SortSpec]:
    """Header click cycle: ascending, descending, unsorted."""
    if current is None or current.column != column:
        return SortSpec(column)
    if not current.descending:
        return SortSpec(column, descending=True)
    return None

def _sort_key(value: Any):
    if isinstance(value, Enum):
        value = value.value
    if isinstance(value, str):
        return value.casefold()
    return value

def sort_rows(rows: Sequence[Entry], spec: Optional[SortSpec]) -> List[Entry]:
    """Stable sort on one column. Empty values go last in either direction."""
    if spec is None:
        return list(rows)

    attr = SORTABLE_COLUMNS[spec.column]
    present = [r for r in rows if getattr(r, attr) is not None]
    missing = [r for r in rows if getattr(r, attr) is None]
    present = sorted(present, key=lambda r: _sort_key(getattr(r, attr)), reverse=spec.descending)
    return present + missing

@dataclass
class Pagination:
    page_index: int = 0
    page_size: int = DEFAULT_PAGE_SIZE

    def __post_init__(self):
        if self.page_size not in PAGE_SIZES:
            raise ValueError(f"Page size must be one of {PAGE_SIZES}")

    def reset(self) -> None:
        self.page_index = 0

    def set_page_size(self, size: int) -> None:
        if size not in PAGE_SIZES:
            raise ValueError(f"Page size must be one of {PAGE_SIZES}")
        self.page_size = size
        self.page_index = 0

    def go_to(self, page_index: int) -> None:
        if page_index < 0:
            raise ValueError("Page index cannot be negative")
        self.page_index = page_index

    def page_count(self, total: int) -> int:
        return max(1, math.ceil(total / self.page_size))

    def clamp(self, total: int) -> int:
        last = self.page_count(total) - 1
        if self.page_index > last:
            self.page_index = last
        return self.page_index

    def bounds(self) -> Tuple[int, int]:
        start = self.page_index * self.page_size
        return start, start + self.page_size

def paginate(rows: Sequence[Entry], pagination: Pagination) -> List[Entry]:
    start, end = pagination.bounds()
    return list(rows[start:end])
