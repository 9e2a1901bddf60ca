"""FastAPI dependencies for injection."""
from core.auth import get_current_identity
from core.auth_client import get_auth_client
from core.config import get_settings
from db.session import get_async_session

__all__ = [
    "get_async_session",
    "get_auth_client",
    "get_current_identity",
    "get_settings",
]
