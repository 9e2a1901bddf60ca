"""HTTP client for the hosted (GoTrue-compatible) auth service."""
import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

import httpx
from fastapi import Depends

from core.config import Settings, get_settings
from schemas.auth import AuthSession, AuthUser, LoginResponse, RegisterResponse
from services.exceptions import AuthError, AuthServiceError, ServiceError, ValidationError

logger = logging.getLogger(__name__)


def _error_message(response: httpx.Response) -> str:
    """Extract the most specific error message from an auth service response."""
    try:
        body = response.json()
    except ValueError:
        return response.text or f"HTTP {response.status_code}"
    if not isinstance(body, dict):
        return str(body)
    for key in ("msg", "error_description", "message", "error"):
        if body.get(key):
            return str(body[key])
    return f"HTTP {response.status_code}"


def _raise_for_status(
    response: httpx.Response,
    context: str,
    rejected: type[ServiceError],
) -> None:
    """Raise AuthServiceError for 5xx responses and `rejected` for 4xx responses."""
    if response.status_code >= 500:
        raise AuthServiceError(f"{context}: {_error_message(response)}")
    if response.is_error:
        raise rejected(f"{context}: {_error_message(response)}")


@contextmanager
def _parsing(context: str) -> Iterator[None]:
    """Map a success response whose body has the wrong shape to AuthServiceError."""
    try:
        yield
    except (KeyError, TypeError, AttributeError, ValueError) as e:
        logger.warning("%s: unexpected auth service response: %r", context, e)
        raise AuthServiceError(f"{context}: unexpected auth service response") from e


class HostedAuthClient:
    """
    Thin wrapper over the hosted auth REST API.

    Every request carries the project API key. User-scoped calls (logout, get_user)
    also forward the caller's bearer token.
    """

    def __init__(self, base_url: str, api_key: str, timeout: float = 10.0) -> None:
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout

    @classmethod
    def from_settings(cls, settings: Settings) -> "HostedAuthClient":
        """Build a client from application settings."""
        return cls(settings.auth_url, settings.auth_api_key, settings.auth_timeout)

    def _headers(self, token: str | None = None) -> dict[str, str]:
        """Get common headers for auth service requests."""
        headers = {"apikey": self.api_key}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    async def _request(
        self,
        method: str,
        path: str,
        token: str | None = None,
        json: dict[str, Any] | None = None,
        params: dict[str, str] | None = None,
    ) -> httpx.Response:
        """Send a request, mapping transport failures to AuthServiceError."""
        try:
            async with httpx.AsyncClient(base_url=self.base_url, timeout=self.timeout) as client:
                return await client.request(
                    method,
                    path,
                    json=json,
                    params=params,
                    headers=self._headers(token),
                )
        except httpx.HTTPError as e:
            logger.warning("Auth service request %s %s failed: %s", method, path, e)
            raise AuthServiceError(f"Could not reach auth service: {e}") from e

    async def register(self, email: str, password: str) -> RegisterResponse:
        """
        Register a new user.

        Raises:
            ValidationError: If the auth service rejects the registration (e.g. email taken).
            AuthServiceError: If the auth service is unreachable or fails.
        """
        response = await self._request(
            "POST", "/auth/v1/signup", json={"email": email, "password": password},
        )
        _raise_for_status(response, "Registration error", ValidationError)

        with _parsing("Registration error"):
            body = response.json()
            # Signup returns either the user directly or {user, session} when autoconfirm is on
            user = body.get("user") or body
            return RegisterResponse(user=AuthUser.model_validate(user))

    async def login(self, email: str, password: str) -> LoginResponse:
        """
        Exchange email and password for session tokens.

        Raises:
            AuthError: If the credentials are rejected.
            AuthServiceError: If the auth service is unreachable or fails.
        """
        response = await self._request(
            "POST",
            "/auth/v1/token",
            params={"grant_type": "password"},
            json={"email": email, "password": password},
        )
        _raise_for_status(response, "Login error", AuthError)

        with _parsing("Login error"):
            body = response.json()
            return LoginResponse(
                session=AuthSession.model_validate(body),
                user=AuthUser.model_validate(body["user"]),
            )

    async def logout(self, token: str) -> None:
        """
        Revoke the session behind a bearer token.

        Raises:
            AuthError: If the token is rejected.
            AuthServiceError: If the auth service is unreachable or fails.
        """
        response = await self._request("POST", "/auth/v1/logout", token=token)
        _raise_for_status(response, "Logout error", AuthError)

    async def get_user(self, token: str) -> AuthUser:
        """
        Resolve a bearer token to the user it was issued for.

        Raises:
            AuthError: If the token is invalid or expired.
            AuthServiceError: If the auth service is unreachable or fails.
        """
        response = await self._request("GET", "/auth/v1/user", token=token)
        _raise_for_status(response, "Invalid or expired token", AuthError)
        with _parsing("User lookup error"):
            return AuthUser.model_validate(response.json())


def get_auth_client(settings: Settings = Depends(get_settings)) -> HostedAuthClient:
    """Dependency that builds the hosted auth client from settings."""
    return HostedAuthClient.from_settings(settings)
