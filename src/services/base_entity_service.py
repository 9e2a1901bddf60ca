"""
Base service class for ownership-scoped entity CRUD operations.

Provides shared logic for Deck, Card, and future entity types. Every statement
a service issues is built through `_scoped()`, which appends the caller's
`user_id` predicate; there is no other way to reach the store from a service.
Entity-specific rules (deck validation on card writes, delete-with-children)
are layered on top in the subclasses.
"""
import logging
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from datetime import datetime
from typing import Any, Generic, Protocol, TypeVar
from uuid import UUID

from sqlalchemy import Column, Delete, Select, Update, delete, func, inspect, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from schemas.list_options import ListOptions
from services.exceptions import (
    AuthError,
    NotFoundError,
    StoreError,
    UnsupportedOperationError,
    ValidationError,
)
from services.utils import coerce_filter_value, page_range, parse_sort

logger = logging.getLogger(__name__)

DEFAULT_PAGE_LIMIT = 50

StatementT = TypeVar("StatementT", Select, Update, Delete)


class OwnedEntity(Protocol):
    """Protocol defining the interface for entities owned by a single user."""

    id: UUID
    user_id: str
    created_at: datetime
    updated_at: datetime


T = TypeVar("T", bound=OwnedEntity)


class BaseEntityService(Generic[T]):
    """
    Generic ownership-scoped CRUD over one table.

    Subclasses must define:
    - model: The SQLAlchemy model class
    - entity_name: Human-readable name for error messages (e.g., "Deck")

    Archive support is detected from the model: collections with an `archived`
    column can be archived and hide archived rows from default listings.
    """

    model: type[T]
    entity_name: str

    # Columns callers never write directly. user_id is always injected from the caller.
    protected_fields = frozenset({"id", "user_id", "created_at", "updated_at"})

    # --- Helper Methods ---

    @property
    def table_name(self) -> str:
        """Name of the underlying table, used in store error messages."""
        return self.model.__tablename__

    def _columns(self) -> Mapping[str, Column]:
        """Map attribute names to columns for the model."""
        return inspect(self.model).columns

    @property
    def supports_archive(self) -> bool:
        """Whether the collection has an `archived` column."""
        return "archived" in self._columns()

    def _scoped(self, statement: StatementT, user_id: str) -> StatementT:
        """Restrict a statement to rows owned by `user_id`."""
        if not user_id:
            raise AuthError("Missing caller identity")
        return statement.where(self.model.user_id == user_id)

    def _select(self, user_id: str) -> Select:
        """Build a SELECT of whole entities owned by `user_id`."""
        return self._scoped(select(self.model), user_id)

    @contextmanager
    def _store_errors(self, action: str) -> Iterator[None]:
        """Wrap store failures in StoreError with the table name."""
        try:
            yield
        except SQLAlchemyError as e:
            raise StoreError(self.table_name, action, e) from e

    def _writable(self, fields: Mapping[str, Any]) -> dict[str, Any]:
        """
        Validate a write payload against the model's columns.

        A caller-supplied user_id is dropped; it is always replaced by the caller.

        Raises:
            ValidationError: If a field is unknown or not writable.
        """
        columns = self._columns()
        values = {}
        for field, value in fields.items():
            if field == "user_id":
                continue
            if field not in columns:
                raise ValidationError(f"Unknown field for {self.table_name}: '{field}'")
            if field in self.protected_fields:
                raise ValidationError(f"Field '{field}' cannot be set directly")
            values[field] = value
        return values

    def check_fields(self, fields: list[str]) -> None:
        """
        Validate a projection against the model's columns.

        Raises:
            ValidationError: If any field is unknown.
        """
        columns = self._columns()
        unknown = [f for f in fields if f not in columns]
        if unknown:
            raise ValidationError(
                f"Unknown field(s) for {self.table_name}: {', '.join(unknown)}",
            )

    def _apply_filters(self, query: Select, filters: Mapping[str, Any]) -> Select:
        """Apply equality filters, coercing string values to each column's type."""
        columns = self._columns()
        for field, value in filters.items():
            if field not in columns or field == "user_id":
                raise ValidationError(f"Cannot filter {self.table_name} by '{field}'")
            python_type = columns[field].type.python_type
            coerced = coerce_filter_value(field, value, python_type)
            query = query.where(getattr(self.model, field) == coerced)
        return query

    def _apply_sorting(self, query: Select, sort: str) -> Select:
        """Apply a "field:asc|desc" sort with the id as tiebreaker."""
        field, direction = parse_sort(sort)
        if field not in self._columns():
            raise ValidationError(f"Cannot sort {self.table_name} by '{field}'")
        column = getattr(self.model, field)
        order = column.desc() if direction == "desc" else column.asc()
        return query.order_by(order, self.model.id.asc())

    # --- Common CRUD Operations ---

    async def list_records(
        self,
        db: AsyncSession,
        user_id: str,
        options: ListOptions | None = None,
    ) -> list[T]:
        """
        List entities owned by a user.

        Args:
            db: Database session.
            user_id: Caller's user ID; always applied.
            options: Filters, sorting, pagination, and archive visibility.

        Returns:
            Matching entities (possibly empty), ordered by `options.sort` when given.

        Raises:
            ValidationError: On unknown fields, bad sort syntax, or uncoercible filters.
        """
        options = options or ListOptions()
        if options.fields:
            self.check_fields(options.fields)

        query = self._select(user_id)

        if (
            self.supports_archive
            and not options.include_archived
            and "archived" not in options.filters
        ):
            query = query.where(self.model.archived.is_(False))

        query = self._apply_filters(query, options.filters)

        if options.sort:
            query = self._apply_sorting(query, options.sort)

        if options.page is not None or options.limit is not None:
            first, last = page_range(options.page or 1, options.limit or DEFAULT_PAGE_LIMIT)
            query = query.offset(first).limit(last - first + 1)

        with self._store_errors("fetching"):
            result = await db.execute(query)
            return list(result.scalars().all())

    async def get_by_id(self, db: AsyncSession, user_id: str, entity_id: UUID) -> T:
        """
        Get an entity by ID, scoped to user.

        Raises:
            NotFoundError: If no entity with this ID is owned by the user.
        """
        with self._store_errors("fetching"):
            result = await db.execute(self._select(user_id).where(self.model.id == entity_id))
            entity = result.scalar_one_or_none()
        if entity is None:
            raise NotFoundError(self.entity_name, entity_id)
        return entity

    async def create(
        self,
        db: AsyncSession,
        user_id: str,
        fields: Mapping[str, Any],
    ) -> T:
        """
        Create an entity owned by the caller.

        Any user_id in `fields` is replaced by `user_id`.

        Returns:
            The stored entity including generated id and timestamps.
        """
        values = self._writable(fields)
        entity = self.model(**values, user_id=user_id)
        with self._store_errors("creating"):
            db.add(entity)
            await db.flush()
            await db.refresh(entity)
        return entity

    async def update(
        self,
        db: AsyncSession,
        user_id: str,
        entity_id: UUID,
        fields: Mapping[str, Any],
    ) -> T:
        """
        Apply a partial update to an entity owned by the caller.

        Returns:
            The entity after the update.

        Raises:
            ValidationError: If no writable field is given.
            NotFoundError: If no entity with this ID is owned by the user.
        """
        values = self._writable(fields)
        if not values:
            raise ValidationError("At least one field must be provided for update")
        entity = await self.get_by_id(db, user_id, entity_id)

        for field, value in values.items():
            setattr(entity, field, value)
        entity.updated_at = func.now()

        with self._store_errors("updating"):
            await db.flush()
            await db.refresh(entity)
        return entity

    async def archive(self, db: AsyncSession, user_id: str, entity_id: UUID) -> T:
        """
        Archive an entity. Equivalent to update(entity_id, {"archived": True}).

        Raises:
            UnsupportedOperationError: If the collection has no archived column.
            NotFoundError: If no entity with this ID is owned by the user.
        """
        if not self.supports_archive:
            raise UnsupportedOperationError("archive", self.table_name)
        return await self.update(db, user_id, entity_id, {"archived": True})

    async def delete(self, db: AsyncSession, user_id: str, entity_id: UUID) -> bool:
        """
        Permanently delete an entity owned by the caller.

        Returns:
            True if a row was deleted, False if none matched.
        """
        statement = self._scoped(delete(self.model), user_id).where(self.model.id == entity_id)
        with self._store_errors("deleting"):
            result = await db.execute(statement)
        return result.rowcount > 0
