"""Authentication endpoints backed by the hosted auth service."""
import logging
from typing import Any

from fastapi import APIRouter, Depends

from api.dependencies import get_auth_client, get_current_identity
from core.auth_client import HostedAuthClient
from schemas.auth import Identity, LoginRequest, LoginResponse, RegisterRequest, RegisterResponse
from schemas.envelope import ApiResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.get("/status", response_model=ApiResponse[None], response_model_exclude_none=True)
async def auth_status() -> ApiResponse[None]:
    """Public liveness check for the auth routes."""
    return ApiResponse(message="Auth service is running")


@router.post(
    "/register",
    response_model=ApiResponse[RegisterResponse],
    response_model_exclude_none=True,
    status_code=201,
)
async def register(
    data: RegisterRequest,
    auth_client: HostedAuthClient = Depends(get_auth_client),
) -> ApiResponse[RegisterResponse]:
    """
    Register a new user with the hosted auth service.

    The optional name is accepted for compatibility but not forwarded.
    """
    registered = await auth_client.register(data.email, data.password)
    logger.info("Registered user %s", registered.user.id)
    return ApiResponse(
        message="Registration successful. Please check your email for verification.",
        data=registered,
    )


@router.post("/login", response_model=ApiResponse[LoginResponse], response_model_exclude_none=True)
async def login(
    data: LoginRequest,
    auth_client: HostedAuthClient = Depends(get_auth_client),
) -> ApiResponse[LoginResponse]:
    """Exchange email and password for session tokens."""
    session = await auth_client.login(data.email, data.password)
    return ApiResponse(message="Login successful", data=session)


@router.post("/logout", response_model=ApiResponse[None], response_model_exclude_none=True)
async def logout(
    identity: Identity = Depends(get_current_identity),
    auth_client: HostedAuthClient = Depends(get_auth_client),
) -> ApiResponse[None]:
    """Revoke the caller's session. Requires a bearer token."""
    # Dev-mode identities carry no token, so there is no session to revoke
    if identity.token:
        await auth_client.logout(identity.token)
    return ApiResponse(message="Logout successful")


@router.get("/me", response_model=ApiResponse[dict[str, Any]], response_model_exclude_none=True)
async def me(
    identity: Identity = Depends(get_current_identity),
) -> ApiResponse[dict[str, Any]]:
    """Return the identity resolved from the bearer token."""
    data: dict[str, Any] = {"id": identity.user_id}
    if identity.email:
        data["email"] = identity.email
    if identity.created_at:
        data["created_at"] = identity.created_at
    if identity.user_metadata:
        data["user_metadata"] = identity.user_metadata
    return ApiResponse(data=data)
