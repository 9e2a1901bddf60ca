"""Shared utility functions for service layer."""
from datetime import datetime
from typing import Any
from uuid import UUID

from services.exceptions import ValidationError

TRUE_VALUES = {"true", "1", "yes"}
FALSE_VALUES = {"false", "0", "no"}


def page_range(page: int, limit: int) -> tuple[int, int]:
    """
    Return the inclusive (first, last) row indexes for a 1-indexed page.

    page=1, limit=10 -> (0, 9); page=2, limit=10 -> (10, 19).
    """
    if page < 1 or limit < 1:
        raise ValidationError("page and limit must be positive integers")
    first = (page - 1) * limit
    return first, first + limit - 1


def parse_sort(sort: str) -> tuple[str, str]:
    """
    Parse a "field:asc|desc" sort expression.

    The direction defaults to ascending when omitted.

    Raises:
        ValidationError: If the expression is empty or the direction is unknown.
    """
    field, _, direction = sort.partition(":")
    field = field.strip()
    direction = direction.strip().lower() or "asc"
    if not field:
        raise ValidationError(f"Invalid sort expression: '{sort}'")
    if direction not in ("asc", "desc"):
        raise ValidationError(
            f"Invalid sort direction '{direction}'. Use 'asc' or 'desc'.",
        )
    return field, direction


def coerce_filter_value(field: str, value: Any, python_type: type) -> Any:
    """
    Coerce a filter value (usually a query-string value) to a column's Python type.

    Non-string values are returned unchanged.

    Raises:
        ValidationError: If the value cannot be interpreted as the column type.
    """
    if not isinstance(value, str):
        return value
    if python_type is bool:
        lowered = value.lower()
        if lowered in TRUE_VALUES:
            return True
        if lowered in FALSE_VALUES:
            return False
        raise ValidationError(f"Invalid boolean value for '{field}': '{value}'")
    if python_type is UUID:
        try:
            return UUID(value)
        except ValueError:
            raise ValidationError(f"Invalid UUID value for '{field}': '{value}'")
    if python_type is datetime:
        try:
            return datetime.fromisoformat(value)
        except ValueError:
            raise ValidationError(f"Invalid datetime value for '{field}': '{value}'")
    return value
