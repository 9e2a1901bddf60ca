"""Authentication module: resolves bearer credentials to a caller Identity."""
import jwt
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from core.auth_client import HostedAuthClient, get_auth_client
from core.config import Settings, get_settings
from schemas.auth import Identity
from services.exceptions import AuthError

# HTTP Bearer token scheme
security = HTTPBearer(auto_error=False)

DEV_USER_ID = "dev|local-development-user"


def decode_jwt(token: str, settings: Settings) -> dict:
    """
    Decode and validate an access token signed with the project's JWT secret.

    Raises:
        AuthError: If token is invalid, expired, or has the wrong audience.
    """
    try:
        return jwt.decode(
            token,
            settings.auth_jwt_secret,
            algorithms=["HS256"],
            audience=settings.auth_jwt_audience,
        )
    except jwt.ExpiredSignatureError:
        raise AuthError("Token has expired")
    except jwt.InvalidAudienceError:
        raise AuthError("Invalid audience")
    except jwt.PyJWTError as e:
        raise AuthError(f"Invalid token: {e}")


def identity_from_claims(payload: dict, token: str) -> Identity:
    """
    Build an Identity from decoded JWT claims.

    Raises:
        AuthError: If the sub claim is missing.
    """
    user_id = payload.get("sub")
    if not user_id:
        raise AuthError("Invalid token: missing sub claim")
    return Identity(
        user_id=user_id,
        token=token,
        email=payload.get("email"),
        user_metadata=payload.get("user_metadata") or {},
    )


async def get_current_identity(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    settings: Settings = Depends(get_settings),
    auth_client: HostedAuthClient = Depends(get_auth_client),
) -> Identity:
    """
    Dependency that validates the bearer token and returns the caller's identity.

    Resolution order:
    - DEV_MODE: a fixed development identity, no token required
    - AUTH_JWT_SECRET configured: verify the JWT locally
    - otherwise: ask the hosted auth service who the token belongs to
    """
    if settings.dev_mode:
        return Identity(user_id=DEV_USER_ID, token="", email="dev@localhost")

    if credentials is None or not credentials.credentials:
        raise AuthError("No token provided or invalid format")

    token = credentials.credentials

    if settings.auth_jwt_secret:
        payload = decode_jwt(token, settings)
        return identity_from_claims(payload, token)

    user = await auth_client.get_user(token)
    return Identity(
        user_id=user.id,
        token=token,
        email=user.email,
        created_at=user.created_at,
        user_metadata=user.user_metadata,
    )
