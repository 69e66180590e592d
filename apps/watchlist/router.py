import logging
from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session
from database import get_session
from apps.auth.deps import require_admin
from apps.watchlist.schemas import WatchlistEntryCreate, WatchlistEntryUpdate, WatchlistEntryRead
from apps.watchlist.services import WatchlistService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/watchlist", tags=["watchlist"])

def get_service(session: Session = Depends(get_session)) -> WatchlistService:
    return WatchlistService(session)

def serialize(entry) -> dict:
    return WatchlistEntryRead.model_validate(entry).model_dump(mode="json", by_alias=True)

@router.get("")
def list_watchlist(service: WatchlistService = Depends(get_service)):
    try:
        entries = service.list_entries()
    except SQLAlchemyError:
        logger.exception("Error fetching watchlist")
        return JSONResponse({"error": "Failed to fetch watchlist"}, status_code=500)
    return {"items": [serialize(e) for e in entries]}

@router.post("", status_code=status.HTTP_201_CREATED)
def add_to_watchlist(data: WatchlistEntryCreate, service: WatchlistService = Depends(get_service)):
    try:
        entry, created = service.create_entry(data)
    except SQLAlchemyError:
        logger.exception("Error adding to watchlist")
        service.session.rollback()
        return JSONResponse({"error": "Failed to add item to watchlist"}, status_code=500)

    if not created:
        return JSONResponse(
            {"error": "Item already exists in watchlist", "item": serialize(entry)},
            status_code=status.HTTP_409_CONFLICT,
        )
    return {"success": True, "item": serialize(entry)}

@router.put("/{entry_id}", dependencies=[Depends(require_admin)])
def update_watchlist_item(
    entry_id: int,
    data: WatchlistEntryUpdate,
    service: WatchlistService = Depends(get_service)
):
    entry = service.update_entry(entry_id, data)
    if not entry:
        return JSONResponse({"error": "Item not found"}, status_code=status.HTTP_404_NOT_FOUND)
    return {"success": True, "item": serialize(entry)}

@router.delete("/{entry_id}", dependencies=[Depends(require_admin)])
def delete_watchlist_item(entry_id: int, service: WatchlistService = Depends(get_service)):
    if not service.delete_entry(entry_id):
        return JSONResponse({"error": "Item not found"}, status_code=status.HTTP_404_NOT_FOUND)
    return {"success": True, "message": "Item deleted successfully"}
