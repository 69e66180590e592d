import logging
from urllib.parse import urlencode
from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse, RedirectResponse
from config import settings
from apps.auth.deps import is_admin_email, get_session_email
from apps.auth.utils import auth0_client

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])

# --- ADMIN CHECK ---

@router.post("/api/auth/check-admin")
async def check_admin(request: Request):
    # Trusts whatever email the client sends; /api/auth/session is the verified variant
    try:
        body = await request.json()
    except ValueError:
        body = {}
    email = body.get("email") if isinstance(body, dict) else None

    if not email:
        return JSONResponse({"isAdmin": False}, status_code=400)

    if not settings.ADMIN_EMAIL:
        logger.warning("ADMIN_EMAIL is not set")
        return {"isAdmin": False, "error": "Admin email not configured"}

    is_admin = is_admin_email(email)
    logger.debug("Admin check result: %s", is_admin)
    return {"isAdmin": is_admin}

@router.get("/api/auth/session")
def session_status(request: Request):
    email = get_session_email(request)
    return {"email": email, "isAdmin": is_admin_email(email)}

# --- AUTH0 ROUTES ---

@router.get("/auth/login")
async def login(request: Request):
    client = auth0_client()
    if not client:
        return JSONResponse({"error": "Authentication service not configured"}, status_code=503)

    redirect_uri = request.url_for('auth_callback')
    return await client.authorize_redirect(request, redirect_uri)

@router.get("/auth/callback", name="auth_callback")
async def auth_callback(request: Request):
    client = auth0_client()
    if not client:
        return JSONResponse({"error": "Authentication service not configured"}, status_code=503)

    token = await client.authorize_access_token(request)
    user_info = token.get('userinfo')
    if not user_info or not user_info.get('email'):
        return JSONResponse({"error": "Failed to get user info"}, status_code=400)

    request.session['user_email'] = user_info['email']
    logger.info("Login: %s (admin=%s)", user_info['email'], is_admin_email(user_info['email']))
    return RedirectResponse(url="/")

@router.get("/auth/logout")
def logout(request: Request):
    request.session.clear()
    if not settings.AUTH0_DOMAIN:
        return RedirectResponse(url="/")

    query = urlencode({"client_id": settings.AUTH0_CLIENT_ID, "returnTo": str(request.base_url)})
    return RedirectResponse(url=f"https://{settings.AUTH0_DOMAIN}/v2/logout?{query}")
