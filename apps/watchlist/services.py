import logging
from typing import Optional, List, Tuple
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select
from apps.watchlist.models import WatchlistEntry, MediaType
from apps.watchlist.schemas import WatchlistEntryCreate, WatchlistEntryUpdate

logger = logging.getLogger(__name__)

def normalize_watch_state(entry: WatchlistEntry) -> WatchlistEntry:
    """An unwatched entry carries no watch date, rating or favorite flag."""
    if not entry.watched:
        entry.date_watched = None
        entry.user_rating = None
        entry.favorite = False
    return entry

def _by_external_id(external_media_id: int, media_type: MediaType):
    return select(WatchlistEntry).where(
        WatchlistEntry.external_media_id == external_media_id,
        WatchlistEntry.media_type == media_type,
    )

class WatchlistService:
    def __init__(self, session: Session):
        self.session = session

    def list_entries(self) -> List[WatchlistEntry]:
        return list(self.session.exec(
            select(WatchlistEntry).order_by(WatchlistEntry.date_added.desc(), WatchlistEntry.id.desc())
        ).all())

    def get_entry(self, entry_id: int) -> Optional[WatchlistEntry]:
        return self.session.get(WatchlistEntry, entry_id)

    def find_by_external_id(self, external_media_id: int, media_type: MediaType) -> Optional[WatchlistEntry]:
        return self.session.exec(_by_external_id(external_media_id, media_type)).first()

    def create_entry(self, data: WatchlistEntryCreate) -> Tuple[WatchlistEntry, bool]:
        """
        Adds a title to the watchlist.
        Returns (entry, created). When the external id + media type pair is
        already tracked the existing row comes back with created=False.
        """
        existing = self.find_by_external_id(data.external_media_id, data.media_type)
        if existing:
            logger.info("Duplicate add for %s/%s (entry %s)", data.media_type.value, data.external_media_id, existing.id)
            return existing, False

        entry = WatchlistEntry(**data.model_dump())
        normalize_watch_state(entry)
        self.session.add(entry)
        try:
            self.session.commit()
        except IntegrityError:
            # Another request inserted the same pair after our lookup
            self.session.rollback()
            existing = self.session.exec(_by_external_id(data.external_media_id, data.media_type)).first()
            if existing is None:
                raise
            logger.info("Concurrent add for %s/%s resolved to entry %s", data.media_type.value, data.external_media_id, existing.id)
            return existing, False
        self.session.refresh(entry)
        logger.info("Added entry %s: %s", entry.id, entry.title)
        return entry, True

    def update_entry(self, entry_id: int, data: WatchlistEntryUpdate) -> Optional[WatchlistEntry]:
        entry = self.get_entry(entry_id)
        if not entry:
            return None

        # Only the keys the client actually sent; explicit nulls clear a field
        for field, value in data.model_dump(exclude_unset=True).items():
            if field in ("title", "watched", "favorite", "date_added") and value is None:
                continue
            setattr(entry, field, value)

        normalize_watch_state(entry)
        self.session.add(entry)
        self.session.commit()
        self.session.refresh(entry)
        return entry

    def delete_entry(self, entry_id: int) -> bool:
        entry = self.get_entry(entry_id)
        if not entry:
            return False

        self.session.delete(entry)
        self.session.commit()
        logger.info("Deleted entry %s", entry_id)
        return True
