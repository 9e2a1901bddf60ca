"""Query options accepted by list operations."""
from typing import Any

from pydantic import BaseModel, Field


class ListOptions(BaseModel):
    """
    Options for listing a user's records.

    - fields: projection; only these fields are returned (validated against the model)
    - filters: equality filters; string values are coerced to the column type
    - include_archived: include archived rows for archivable collections
    - sort: "field" or "field:asc|desc" (ascending by default)
    - page / limit: 1-indexed page of `limit` rows
    """

    fields: list[str] | None = None
    filters: dict[str, Any] = Field(default_factory=dict)
    include_archived: bool = False
    sort: str | None = None
    page: int | None = Field(default=None, ge=1)
    limit: int | None = Field(default=None, ge=1)
