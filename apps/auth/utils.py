import logging
from authlib.integrations.starlette_client import OAuth
from config import settings

logger = logging.getLogger(__name__)

oauth = OAuth()

if settings.AUTH0_DOMAIN and settings.AUTH0_CLIENT_ID and settings.AUTH0_CLIENT_SECRET:
    oauth.register(
        "auth0",
        client_id=settings.AUTH0_CLIENT_ID,
        client_secret=settings.AUTH0_CLIENT_SECRET,
        client_kwargs={
            "scope": "openid profile email",
        },
        server_metadata_url=f'https://{settings.AUTH0_DOMAIN}/.well-known/openid-configuration'
    )
else:
    logger.warning("Auth0 environment variables missing. Admin login will not work.")

def auth0_client():
    return oauth.create_client("auth0")
