"""Pydantic schemas for card endpoints."""
from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from schemas.validators import require_any_field, validate_non_blank

MAX_CARD_SIDE_LENGTH = 10_000


class CardCreate(BaseModel):
    """Schema for creating a new card inside a deck."""

    front: str = Field(max_length=MAX_CARD_SIDE_LENGTH)
    back: str = Field(max_length=MAX_CARD_SIDE_LENGTH)
    deck_id: UUID

    @field_validator("front")
    @classmethod
    def check_front_not_empty(cls, v: str) -> str:
        """Validate front is not empty."""
        return validate_non_blank(v, "Front content")

    @field_validator("back")
    @classmethod
    def check_back_not_empty(cls, v: str) -> str:
        """Validate back is not empty."""
        return validate_non_blank(v, "Back content")


class CardUpdate(BaseModel):
    """
    Schema for updating an existing card.

    Setting deck_id moves the card to another deck; the target deck is validated
    the same way as on creation.
    """

    front: str | None = Field(default=None, max_length=MAX_CARD_SIDE_LENGTH)
    back: str | None = Field(default=None, max_length=MAX_CARD_SIDE_LENGTH)
    deck_id: UUID | None = None

    @field_validator("front")
    @classmethod
    def check_front_not_empty(cls, v: str | None) -> str:
        """Validate front is not empty (if provided)."""
        return validate_non_blank(v, "Front content")

    @field_validator("back")
    @classmethod
    def check_back_not_empty(cls, v: str | None) -> str:
        """Validate back is not empty (if provided)."""
        return validate_non_blank(v, "Back content")

    @field_validator("deck_id")
    @classmethod
    def check_deck_id_not_null(cls, v: UUID | None) -> UUID:
        """Reject an explicit null for deck_id."""
        if v is None:
            raise ValueError("deck_id cannot be null")
        return v

    @model_validator(mode="after")
    def check_any_field(self) -> "CardUpdate":
        """Reject payloads with no recognised fields."""
        require_any_field(self)
        return self


class CardResponse(BaseModel):
    """Schema for card responses."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    front: str
    back: str
    deck_id: UUID
    user_id: str
    created_at: datetime
    updated_at: datetime
