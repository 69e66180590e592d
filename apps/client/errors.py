from typing import Optional, Dict, Any

class ClientError(Exception):
    pass

class ApiError(ClientError):
    def __init__(self, status_code: int, message: str, payload: Optional[Dict[str, Any]] = None):
        super().__init__(f"HTTP {status_code}: {message}")
        self.status_code = status_code
        self.message = message
        self.payload = payload or {}

class NotFound(ApiError):
    pass

class Conflict(ApiError):
    @property
    def item(self) -> Optional[Dict[str, Any]]:
        return self.payload.get("item")

class FetchFailed(ClientError):
    """The list read failed on every attempt."""

class ValidationFailed(ClientError):
    def __init__(self, field: str, message: str):
        super().__init__(message)
        self.field = field
        self.message = message

class PermissionDenied(ClientError):
    pass
