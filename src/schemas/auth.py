"""Pydantic schemas for authentication endpoints and the resolved caller identity."""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from pydantic import BaseModel, EmailStr, Field


@dataclass(frozen=True)
class Identity:
    """
    The resolved caller of a request.

    user_id is the opaque subject issued by the hosted auth service. The token is
    forwarded for the duration of the request and never persisted.
    created_at is only known when the hosted service resolved the token.
    """

    user_id: str
    token: str
    email: str | None = None
    created_at: datetime | None = None
    user_metadata: dict[str, Any] = field(default_factory=dict)


class RegisterRequest(BaseModel):
    """Schema for registering a new user."""

    email: EmailStr
    password: str = Field(min_length=6)
    name: str | None = None


class LoginRequest(BaseModel):
    """Schema for logging in with email and password."""

    email: EmailStr
    password: str = Field(min_length=1)


class AuthUser(BaseModel):
    """User profile as reported by the hosted auth service."""

    id: str
    email: str | None = None
    created_at: datetime | None = None
    app_metadata: dict[str, Any] = Field(default_factory=dict)
    user_metadata: dict[str, Any] = Field(default_factory=dict)


class AuthSession(BaseModel):
    """Session tokens returned by a successful login."""

    access_token: str
    refresh_token: str | None = None
    expires_at: int | None = None


class LoginResponse(BaseModel):
    """Login payload: session tokens plus the user."""

    session: AuthSession
    user: AuthUser


class RegisterResponse(BaseModel):
    """Registration payload."""

    user: AuthUser
