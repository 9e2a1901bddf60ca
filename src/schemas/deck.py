"""Pydantic schemas for deck endpoints."""
from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from schemas.validators import require_any_field, validate_non_blank

MAX_DECK_NAME_LENGTH = 255


class DeckCreate(BaseModel):
    """Schema for creating a new deck."""

    name: str = Field(max_length=MAX_DECK_NAME_LENGTH)
    archived: bool = False

    @field_validator("name")
    @classmethod
    def check_name_not_empty(cls, v: str) -> str:
        """Validate name is not empty."""
        return validate_non_blank(v, "Deck name")


class DeckUpdate(BaseModel):
    """Schema for updating an existing deck. At least one field must be set."""

    name: str | None = Field(default=None, max_length=MAX_DECK_NAME_LENGTH)
    archived: bool | None = None

    @field_validator("name")
    @classmethod
    def check_name_not_empty(cls, v: str | None) -> str:
        """Validate name is not empty (if provided)."""
        return validate_non_blank(v, "Deck name")

    @field_validator("archived")
    @classmethod
    def check_archived_not_null(cls, v: bool | None) -> bool:
        """Reject an explicit null for archived."""
        if v is None:
            raise ValueError("archived cannot be null")
        return v

    @model_validator(mode="after")
    def check_any_field(self) -> "DeckUpdate":
        """Reject payloads with no recognised fields."""
        require_any_field(self)
        return self


class DeckResponse(BaseModel):
    """Schema for deck responses."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    slug: str
    user_id: str
    archived: bool
    created_at: datetime
    updated_at: datetime


class DeckDeleteResponse(BaseModel):
    """
    Result of a deck delete request.

    outcome is "deleted" when the deck was removed, or "archived" when it still
    contained cards and was archived instead. deck is only present when archived.
    """

    outcome: str
    deck: DeckResponse | None = None
