"""Shared exceptions for service layer operations."""


class ServiceError(Exception):
    """
    Base exception for all service errors.

    Each subclass carries the HTTP status code the API layer responds with, so
    routers never translate errors themselves.
    """

    status_code: int = 500

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ValidationError(ServiceError):
    """Raised when input is malformed or incomplete, before any store access."""

    status_code = 400


class AuthError(ServiceError):
    """Raised when a credential is missing, malformed, or rejected."""

    status_code = 401


class NotFoundError(ServiceError):
    """
    Raised when a record is absent or not owned by the caller.

    The two cases are deliberately indistinguishable so record existence never
    leaks across users.
    """

    status_code = 404

    def __init__(self, entity_name: str, entity_id: object, key: str = "ID") -> None:
        self.entity_name = entity_name
        self.entity_id = entity_id
        super().__init__(f"{entity_name} with {key} {entity_id} not found")


class PolicyConflictError(ServiceError):
    """Raised when a write conflicts with a lifecycle rule."""

    status_code = 400


class ArchivedDeckError(PolicyConflictError):
    """Raised when a card would be added to, or moved into, an archived deck."""

    def __init__(self, deck_id: object, action: str = "add card to") -> None:
        self.deck_id = deck_id
        super().__init__(f"Cannot {action} archived deck with ID {deck_id}")


class UnsupportedOperationError(PolicyConflictError):
    """Raised when an operation is not supported by a collection (e.g. archiving cards)."""

    def __init__(self, operation: str, table_name: str) -> None:
        self.operation = operation
        self.table_name = table_name
        super().__init__(f"Operation '{operation}' is not supported for {table_name}")


class StoreError(ServiceError):
    """
    Opaque failure from the backing store, wrapped with the collection name.

    The message names only the action and table. The driver error, which can
    carry SQL and bound parameters, stays on `cause` for logging.
    """

    status_code = 500

    def __init__(self, table_name: str, action: str, cause: Exception) -> None:
        self.table_name = table_name
        self.action = action
        self.cause = cause
        super().__init__(f"Error {action} {table_name}")


class AuthServiceError(ServiceError):
    """Raised when the hosted auth service cannot be reached."""

    status_code = 503
