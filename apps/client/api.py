import httpx
from typing import Dict, Any, List
from apps.client.errors import ApiError, NotFound, Conflict
from apps.core.schemas import SearchResultItem, MediaDetails
from apps.watchlist.models import MediaType

class WatchlistAPI:
    """
    Thin async wrapper over the watchlist REST endpoints.
    The caller owns the httpx client (base_url, auth, transport).
    """

    def __init__(self, client: httpx.AsyncClient):
        self.client = client

    @staticmethod
    def _check(response: httpx.Response) -> Dict[str, Any]:
        try:
            body = response.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}

        if response.is_success:
            return body

        message = body.get("error") or response.reason_phrase or "Request failed"
        if response.status_code == 404:
            raise NotFound(404, message, body)
        if response.status_code == 409:
            raise Conflict(409, message, body)
        raise ApiError(response.status_code, message, body)

    async def list_entries(self) -> List[Dict[str, Any]]:
        response = await self.client.get("/api/watchlist")
        body = self._check(response)
        if "items" in body:
            items = body["items"] or []
            if not isinstance(items, list):
                raise ApiError(response.status_code, "Malformed watchlist response", body)
            return items
        if body.get("error"):
            raise ApiError(response.status_code, body["error"], body)
        return []

    async def create_entry(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        response = await self.client.post("/api/watchlist", json=payload)
        return self._check(response)["item"]

    async def update_entry(self, entry_id: int, payload: Dict[str, Any]) -> Dict[str, Any]:
        response = await self.client.put(f"/api/watchlist/{entry_id}", json=payload)
        return self._check(response)["item"]

    async def delete_entry(self, entry_id: int) -> None:
        response = await self.client.delete(f"/api/watchlist/{entry_id}")
        self._check(response)

    async def search(self, query: str) -> List[SearchResultItem]:
        response = await self.client.get("/api/search", params={"q": query})
        body = self._check(response)
        return [SearchResultItem.model_validate(r) for r in body.get("results") or []]

    async def details(self, external_id: int, media_type: MediaType) -> MediaDetails:
        response = await self.client.get(
            "/api/details", params={"externalId": external_id, "mediaType": media_type.value}
        )
        return MediaDetails.model_validate(self._check(response))

    async def check_admin(self, email: str) -> bool:
        response = await self.client.post("/api/auth/check-admin", json={"email": email})
        try:
            body = self._check(response)
        except ApiError:
            return False
        return bool(body.get("isAdmin"))
