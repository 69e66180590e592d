from typing import Optional
from fastapi import HTTPException, status, Request
from config import settings

def is_admin_email(email: Optional[str]) -> bool:
    if not email or not settings.ADMIN_EMAIL:
        return False
    return email == settings.ADMIN_EMAIL

def get_session_email(request: Request) -> Optional[str]:
    return request.session.get("user_email")

def require_admin(request: Request) -> None:
    """
    Gate for edit/delete endpoints. Only active with ENFORCE_ADMIN_SESSION,
    otherwise admin status stays a client-side concern.
    """
    if not settings.ENFORCE_ADMIN_SESSION:
        return
    if not is_admin_email(get_session_email(request)):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin login required")
