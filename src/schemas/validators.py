"""
Shared validation functions for Pydantic schemas.

This module contains validators used across multiple entity schemas (decks, cards).
"""
import re

from pydantic import BaseModel

SLUG_PATTERN = re.compile(r"[^a-z0-9]+")


def validate_non_blank(value: str | None, label: str) -> str:
    """
    Validate that a provided string is not empty or whitespace-only.

    Args:
        value: The submitted value.
        label: Human-readable field label for the error message.

    Returns:
        The value unchanged.

    Raises:
        ValueError: If the value is None, empty, or only whitespace.
    """
    if value is None:
        raise ValueError(f"{label} cannot be null")
    if not value.strip():
        raise ValueError(f"{label} is required")
    return value


def require_any_field(model: BaseModel) -> None:
    """Raise if a partial-update payload sets none of the model's fields."""
    if not model.model_fields_set:
        raise ValueError("At least one field must be provided for update")


def slugify(value: str) -> str:
    """Lowercase a name and collapse non-alphanumeric runs into single hyphens."""
    slug = SLUG_PATTERN.sub("-", value.lower()).strip("-")
    return slug or "deck"
