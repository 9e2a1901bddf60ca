"""Response envelope shared by every API endpoint."""
from typing import Generic, Literal, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """
    Standard response wrapper.

    - status: "success" or "error"
    - data: payload for successful reads/writes
    - message: human-readable note (errors, delete outcomes)
    - results: item count for list responses
    """

    status: Literal["success", "error"] = "success"
    data: T | None = None
    message: str | None = None
    results: int | None = None


def error_body(message: str) -> dict:
    """Build the JSON body for an error response."""
    return ApiResponse[None](status="error", message=message).model_dump(exclude_none=True)
