"""
Optimistic mutations over the client snapshot.

Toggles change the snapshot first and then talk to the server: a success
replaces the entry with the server's copy, a failure puts the toggled field
back. Create and edit wait for the server before touching the snapshot.
"""
import logging
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Optional, Dict, Any, Set, Tuple
import httpx
from apps.client.api import WatchlistAPI
from apps.client.entries import Entry, Snapshot, parse_entry, to_wire
from apps.client.errors import ApiError, Conflict, NotFound, PermissionDenied, ValidationFailed
from apps.client.notifications import Notifier
from apps.core.schemas import SearchResultItem
from apps.watchlist.models import Priority

logger = logging.getLogger(__name__)

class Action(str, Enum):
    WATCHED = "watched"
    FAVORITE = "favorite"
    DELETE = "delete"
    EDIT = "edit"

class CreateOutcome(str, Enum):
    CREATED = "created"
    CONFLICT = "conflict"
    FAILED = "failed"

@dataclass
class EntryForm:
    """Values of the add/edit form."""
    watched: bool = False
    favorite: bool = False
    date_watched: Optional[date] = None
    date_added: Optional[date] = None
    user_rating: Optional[float] = None
    priority: Optional[int] = Priority.MEDIUM.value
    recommended_by: str = ""
    title: Optional[str] = None

    @classmethod
    def from_entry(cls, entry: Entry) -> "EntryForm":
        return cls(
            watched=entry.watched,
            favorite=entry.favorite,
            date_watched=entry.date_watched,
            date_added=entry.date_added,
            user_rating=entry.user_rating,
            priority=entry.priority if entry.priority is not None else Priority.MEDIUM.value,
            recommended_by=entry.recommended_by or "",
            title=entry.title,
        )

    def validate(self, require_recommender: bool = False) -> None:
        if require_recommender and not self.recommended_by.strip():
            raise ValidationFailed("recommended_by", "Please enter your name")
        if self.user_rating is not None and not 0 <= self.user_rating <= 10:
            raise ValidationFailed("user_rating", "Rating must be between 0 and 10")
        if self.priority is not None and self.priority not in {p.value for p in Priority}:
            raise ValidationFailed("priority", "Priority must be low, medium or high")
        if self.title is not None and not self.title.strip():
            raise ValidationFailed("title", "Title cannot be empty")

class MutationCoordinator:
    def __init__(self, api: WatchlistAPI, snapshot: Snapshot, notifier: Notifier, is_admin: bool = False):
        self.api = api
        self.snapshot = snapshot
        self.notifier = notifier
        self.is_admin = is_admin
        self._pending: Set[Tuple[int, Action]] = set()

    # --- bookkeeping ---

    def is_pending(self, entry_id: int, action: Action) -> bool:
        return (entry_id, action) in self._pending

    @contextmanager
    def _in_flight(self, entry_id: int, action: Action):
        self._pending.add((entry_id, action))
        try:
            yield
        finally:
            self._pending.discard((entry_id, action))

    def _require_admin(self, what: str) -> None:
        if not self.is_admin:
            raise PermissionDenied(f"Only the admin can {what}")

    def _reconcile(self, raw: Dict[str, Any]) -> Optional[Entry]:
        # Server wins; an entry deleted meanwhile stays deleted
        entry = parse_entry(raw)
        if entry is not None:
            self.snapshot.put(entry)
        return entry

    # --- toggles ---

    async def toggle_watched(self, entry_id: int) -> bool:
        self._require_admin("change watched status")
        entry = self.snapshot.get(entry_id)
        if entry is None or self.is_pending(entry_id, Action.WATCHED):
            return False

        previous = entry.watched
        changes: Dict[str, Any] = {"watched": not previous}
        if previous:
            changes.update(date_watched=None, user_rating=None, favorite=False)
        self.snapshot.update(entry_id, **changes)

        with self._in_flight(entry_id, Action.WATCHED):
            try:
                item = await self.api.update_entry(entry_id, to_wire(changes))
            except (ApiError, httpx.HTTPError) as e:
                logger.error("Failed to update watched status of %s: %s", entry_id, e)
                self.snapshot.update(entry_id, watched=previous)
                self.notifier.error("Failed to update watched status")
                return False

        self._reconcile(item)
        self.notifier.success(f'Marked "{entry.title}" as {"not watched" if previous else "watched"}')
        return True

    async def toggle_favorite(self, entry_id: int) -> bool:
        self._require_admin("change favorites")
        entry = self.snapshot.get(entry_id)
        if entry is None or self.is_pending(entry_id, Action.FAVORITE):
            return False
        if not entry.watched and not entry.favorite:
            self.notifier.warning(f'Mark "{entry.title}" as watched before adding it to favorites')
            return False

        previous = entry.favorite
        self.snapshot.update(entry_id, favorite=not previous)

        with self._in_flight(entry_id, Action.FAVORITE):
            try:
                item = await self.api.update_entry(entry_id, {"favorite": not previous})
            except (ApiError, httpx.HTTPError) as e:
                logger.error("Failed to update favorite status of %s: %s", entry_id, e)
                self.snapshot.update(entry_id, favorite=previous)
                self.notifier.error("Failed to update favorite status")
                return False

        self._reconcile(item)
        if previous:
            self.notifier.success(f'Removed "{entry.title}" from favorites')
        else:
            self.notifier.success(f'Added "{entry.title}" to favorites')
        return True

    # --- delete ---

    async def delete(self, entry_id: int) -> bool:
        """
        Removes the row right away. If the server refuses, the row goes back
        where it was.
        """
        self._require_admin("delete entries")
        if self.is_pending(entry_id, Action.DELETE):
            return False
        index, entry = self.snapshot.remove(entry_id)
        if entry is None:
            return False

        with self._in_flight(entry_id, Action.DELETE):
            try:
                await self.api.delete_entry(entry_id)
            except NotFound:
                # Already gone on the server, so the local removal stands
                self.notifier.error(f'"{entry.title}" was not found')
                return False
            except (ApiError, httpx.HTTPError) as e:
                logger.error("Failed to delete %s: %s", entry_id, e)
                if entry_id not in self.snapshot:
                    self.snapshot.insert(index, entry)
                self.notifier.error("Failed to delete item")
                return False

        self.notifier.success(f'Deleted "{entry.title}" from watchlist')
        return True

    # --- create / edit ---

    def build_create_payload(self, item: SearchResultItem, form: EntryForm, is_admin: bool) -> Dict[str, Any]:
        watched = is_admin and form.watched
        return {
            "externalMediaId": item.id,
            "mediaType": item.media_type.value,
            "title": item.title,
            "overview": item.overview,
            "posterUrl": item.poster_url,
            "releaseDate": item.release_date,
            "rating": item.rating,
            "watched": watched,
            "favorite": watched and form.favorite,
            "dateWatched": form.date_watched.isoformat() if watched and form.date_watched else None,
            "userRating": form.user_rating if watched else None,
            "priority": None if is_admin else form.priority,
            "recommendedBy": None if is_admin else form.recommended_by.strip(),
        }

    async def create(self, item: SearchResultItem, form: EntryForm) -> CreateOutcome:
        """
        Admins add straight to the list; everyone else submits a
        recommendation, which needs a name. Raises ValidationFailed before
        any request is made.
        """
        form.validate(require_recommender=not self.is_admin)
        payload = self.build_create_payload(item, form, self.is_admin)

        try:
            raw = await self.api.create_entry(payload)
        except Conflict:
            self.notifier.info(f'"{item.title}" is already in your watchlist!')
            return CreateOutcome.CONFLICT
        except (ApiError, httpx.HTTPError) as e:
            logger.error("Failed to add %s/%s: %s", item.media_type.value, item.id, e)
            self.notifier.error("Failed to add item to watchlist")
            return CreateOutcome.FAILED

        entry = parse_entry(raw)
        if entry is not None and entry.id not in self.snapshot:
            self.snapshot.insert(0, entry)
        self.notifier.success(f'Added "{item.title}" to your watchlist!')
        return CreateOutcome.CREATED

    def build_edit_payload(self, form: EntryForm) -> Dict[str, Any]:
        watched = form.watched
        payload = {
            "watched": watched,
            "favorite": watched and form.favorite,
            "dateWatched": form.date_watched.isoformat() if watched and form.date_watched else None,
            "dateAdded": form.date_added.isoformat() if form.date_added else None,
            "userRating": form.user_rating if watched else None,
            "priority": None if watched else form.priority,
            "recommendedBy": form.recommended_by.strip() or None,
        }
        if form.title is not None:
            payload["title"] = form.title.strip()
        return payload

    async def edit(self, entry_id: int, form: EntryForm) -> Optional[Entry]:
        """Full replacement of the editable fields. Nothing changes locally until the server agrees."""
        self._require_admin("edit entries")
        entry = self.snapshot.get(entry_id)
        if entry is None or self.is_pending(entry_id, Action.EDIT):
            return None
        form.validate()

        with self._in_flight(entry_id, Action.EDIT):
            try:
                raw = await self.api.update_entry(entry_id, self.build_edit_payload(form))
            except (ApiError, httpx.HTTPError) as e:
                logger.error("Failed to update %s: %s", entry_id, e)
                self.notifier.error("Failed to update item")
                return None

        updated = self._reconcile(raw)
        self.notifier.success(f'Updated "{entry.title}" successfully!')
        return updated
