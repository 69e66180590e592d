"""
Client-side entry handling: wire parsing and the in-memory snapshot.
"""
import logging
from datetime import date, datetime
from typing import Optional, Dict, Any, List, Iterable, Iterator, Tuple
from pydantic import ValidationError
from pydantic.alias_generators import to_camel
from apps.watchlist.schemas import WatchlistEntryRead

logger = logging.getLogger(__name__)

Entry = WatchlistEntryRead

DATE_FIELDS = ("dateAdded", "dateWatched")

def parse_wire_date(value: Any, field: str = "date") -> Optional[date]:
    """ISO date or timestamp -> date. Anything unreadable becomes None."""
    if value is None or value == "":
        return None
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            if "T" in value or " " in value.strip():
                return datetime.fromisoformat(value.strip().replace("Z", "+00:00")).date()
            return date.fromisoformat(value.strip())
        except ValueError:
            pass
    logger.warning("Malformed %s %r, treating as empty", field, value)
    return None

def parse_entry(raw: Any) -> Optional[Entry]:
    if not isinstance(raw, dict):
        logger.warning("Dropping non-object watchlist item %r", raw)
        return None
    data = dict(raw)
    for field in DATE_FIELDS:
        if field in data:
            data[field] = parse_wire_date(data[field], field)
    try:
        return Entry.model_validate(data)
    except ValidationError as e:
        logger.warning("Dropping unreadable watchlist item %r: %s", raw.get("id"), e.errors()[:1])
        return None

def parse_entries(items: Iterable[Dict[str, Any]]) -> List[Entry]:
    return [e for e in (parse_entry(raw) for raw in items) if e is not None]

def to_wire(changes: Dict[str, Any]) -> Dict[str, Any]:
    """snake_case field changes -> camelCase JSON body."""
    body = {}
    for field, value in changes.items():
        if isinstance(value, date):
            value = value.isoformat()
        body[to_camel(field)] = value
    return body

class Snapshot:
    """Ordered in-memory copy of the watchlist, keyed by entry id."""

    def __init__(self, entries: Iterable[Entry] = ()):
        self._entries: List[Entry] = list(entries)

    def __iter__(self) -> Iterator[Entry]:
        return iter(list(self._entries))

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, entry_id: int) -> bool:
        return self.index_of(entry_id) is not None

    def entries(self) -> List[Entry]:
        return list(self._entries)

    def index_of(self, entry_id: int) -> Optional[int]:
        for i, entry in enumerate(self._entries):
            if entry.id == entry_id:
                return i
        return None

    def get(self, entry_id: int) -> Optional[Entry]:
        i = self.index_of(entry_id)
        return None if i is None else self._entries[i]

    def replace_all(self, entries: Iterable[Entry]) -> None:
        self._entries = list(entries)

    def update(self, entry_id: int, **changes) -> Optional[Entry]:
        """Applies the changes as one replacement; None if the id is gone."""
        i = self.index_of(entry_id)
        if i is None:
            return None
        self._entries[i] = self._entries[i].model_copy(update=changes)
        return self._entries[i]

    def put(self, entry: Entry) -> bool:
        """Replaces the entry with the same id in place. False if it is gone."""
        i = self.index_of(entry.id)
        if i is None:
            return False
        self._entries[i] = entry
        return True

    def insert(self, index: int, entry: Entry) -> None:
        self._entries.insert(min(index, len(self._entries)), entry)

    def remove(self, entry_id: int) -> Tuple[Optional[int], Optional[Entry]]:
        i = self.index_of(entry_id)
        if i is None:
            return None, None
        return i, self._entries.pop(i)
