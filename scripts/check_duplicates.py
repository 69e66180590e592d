import sys
import os
sys.path.append(os.getcwd())

from sqlmodel import Session, select, func
from database import engine
from apps.watchlist.models import WatchlistEntry

def check_duplicates():
    """Lists (external id, media type) pairs stored more than once, from before the unique constraint."""
    with Session(engine) as session:
        query = select(
            WatchlistEntry.external_media_id,
            WatchlistEntry.media_type,
            func.count(WatchlistEntry.id)
        ).group_by(
            WatchlistEntry.external_media_id,
            WatchlistEntry.media_type
        ).having(func.count(WatchlistEntry.id) > 1)

        results = session.exec(query).all()

        if not results:
            print("No duplicates found.")
            return

        print(f"FOUND {len(results)} DUPLICATE GROUPS:")
        for external_id, media_type, count in results:
            ids = session.exec(
                select(WatchlistEntry.id).where(
                    WatchlistEntry.external_media_id == external_id,
                    WatchlistEntry.media_type == media_type
                ).order_by(WatchlistEntry.id)
            ).all()
            print(f"{media_type.value}/{external_id}: {count} rows, ids {list(ids)}")

if __name__ == "__main__":
    check_duplicates()
