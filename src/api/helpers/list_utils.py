"""Query-parameter handling for list endpoints."""
from collections.abc import Iterable
from typing import Any

from fastapi import Request
from pydantic import BaseModel

from schemas.list_options import ListOptions

# Query parameters with a fixed meaning; every other parameter is an equality filter.
RESERVED_LIST_PARAMS = frozenset({"page", "limit", "sort", "fields", "include_archived"})


def build_list_options(
    request: Request,
    page: int | None,
    limit: int | None,
    sort: str | None,
    fields: str | None,
    include_archived: bool,
) -> ListOptions:
    """
    Build ListOptions from a list request.

    Args:
        request: The incoming request; non-reserved query parameters become filters.
        page: 1-indexed page number.
        limit: Page size.
        sort: "field" or "field:asc|desc".
        fields: Comma-separated projection (e.g. "id,name").
        include_archived: Include archived records.

    Returns:
        ListOptions for the service layer.
    """
    filters = {
        key: value
        for key, value in request.query_params.items()
        if key not in RESERVED_LIST_PARAMS
    }
    selected = None
    if fields:
        selected = [f.strip() for f in fields.split(",") if f.strip()] or None
    return ListOptions(
        fields=selected,
        filters=filters,
        include_archived=include_archived,
        sort=sort,
        page=page,
        limit=limit,
    )


def serialize_records(
    records: Iterable[Any],
    schema: type[BaseModel],
    fields: list[str] | None = None,
) -> list[dict[str, Any]]:
    """Serialize ORM records through a response schema, keeping only `fields` if given."""
    include = set(fields) if fields else None
    return [
        schema.model_validate(record).model_dump(mode="json", include=include)
        for record in records
    ]
