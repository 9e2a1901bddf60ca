"""API helper utilities."""
from api.helpers.list_utils import (
    RESERVED_LIST_PARAMS,
    build_list_options,
    serialize_records,
)

__all__ = [
    "RESERVED_LIST_PARAMS",
    "build_list_options",
    "serialize_records",
]
