"""Service layer for deck CRUD operations and the delete-with-children policy."""
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from enum import StrEnum
from typing import Any
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from models.card import Card
from models.deck import MAX_SLUG_LENGTH, Deck
from schemas.list_options import ListOptions
from schemas.validators import slugify
from services.base_entity_service import BaseEntityService
from services.card_service import CardService
from services.exceptions import NotFoundError, ValidationError

logger = logging.getLogger(__name__)

# Every suffixed slug keeps at least this much of its base, so one LIKE finds them all
SLUG_LOOKUP_PREFIX_LENGTH = MAX_SLUG_LENGTH - 32


def _suffixed_slug(base: str, suffix: int) -> str:
    """Append -<suffix> to base, trimming base so the result fits the slug column."""
    tail = f"-{suffix}"
    return base[: MAX_SLUG_LENGTH - len(tail)].rstrip("-") + tail


class DeleteOutcome(StrEnum):
    """What a deck delete request actually did."""

    DELETED = "deleted"
    ARCHIVED = "archived"


@dataclass
class DeckDeleteResult:
    """Tagged result of a deck delete. deck is set only when archived instead."""

    outcome: DeleteOutcome
    deck: Deck | None = None


class DeckService(BaseEntityService[Deck]):
    """
    Deck service with full CRUD operations.

    Extends BaseEntityService with deck-specific:
    - Per-user unique slugs generated on create, with slug lookup
    - Unarchive
    - Card listing for a deck
    - Delete-with-children: a deck that still has cards is archived, not deleted

    Owns the CardService used for child-card queries; that CardService in turn
    validates decks through this instance.
    """

    model = Deck
    entity_name = "Deck"

    def __init__(self, card_service: CardService | None = None) -> None:
        self.card_service = card_service or CardService(deck_service=self)

    async def _unique_slug(self, db: AsyncSession, user_id: str, name: str) -> str:
        """Derive a slug from name that no other deck of this user has."""
        base = slugify(name)[:MAX_SLUG_LENGTH].rstrip("-")
        prefix = base[:SLUG_LOOKUP_PREFIX_LENGTH]
        query = self._scoped(select(Deck.slug), user_id).where(Deck.slug.like(f"{prefix}%"))
        with self._store_errors("fetching"):
            result = await db.execute(query)
            taken = set(result.scalars().all())

        if base not in taken:
            return base
        suffix = 2
        while _suffixed_slug(base, suffix) in taken:
            suffix += 1
        return _suffixed_slug(base, suffix)

    async def create(
        self,
        db: AsyncSession,
        user_id: str,
        fields: Mapping[str, Any],
    ) -> Deck:
        """
        Create a deck with a slug derived from its name.

        Raises:
            ValidationError: If the name is missing or blank.
        """
        name = fields.get("name")
        if not name or not name.strip():
            raise ValidationError("Deck name is required")
        slug = await self._unique_slug(db, user_id, name)
        return await super().create(db, user_id, {**fields, "slug": slug})

    async def get_by_slug(self, db: AsyncSession, user_id: str, slug: str) -> Deck:
        """
        Get a deck by slug, scoped to user. Archived decks are included.

        Raises:
            NotFoundError: If no deck with this slug is owned by the user.
        """
        with self._store_errors("fetching"):
            result = await db.execute(self._select(user_id).where(Deck.slug == slug))
            deck = result.scalar_one_or_none()
        if deck is None:
            raise NotFoundError(self.entity_name, slug, key="slug")
        return deck

    async def get_cards(
        self,
        db: AsyncSession,
        user_id: str,
        deck_id: UUID,
        options: ListOptions | None = None,
    ) -> list[Card]:
        """
        List the cards of a deck owned by the caller.

        Cards of archived decks stay listable.

        Raises:
            NotFoundError: If the deck does not exist or belongs to another user.
        """
        deck = await self.get_by_id(db, user_id, deck_id)
        if deck.archived:
            logger.warning("Fetching cards from archived deck %s", deck_id)
        return await self.card_service.get_by_deck_id(db, user_id, deck_id, options)

    async def unarchive(self, db: AsyncSession, user_id: str, deck_id: UUID) -> Deck:
        """
        Unarchive a deck. This operation is idempotent.

        Raises:
            NotFoundError: If the deck does not exist or belongs to another user.
        """
        return await self.update(db, user_id, deck_id, {"archived": False})

    async def delete(  # type: ignore[override]
        self,
        db: AsyncSession,
        user_id: str,
        deck_id: UUID,
    ) -> DeckDeleteResult:
        """
        Delete a deck, or archive it if it still contains cards.

        Args:
            db: Database session.
            user_id: Caller's user ID.
            deck_id: ID of the deck to delete.

        Returns:
            DELETED outcome when the deck was removed; ARCHIVED outcome with the
            archived deck when it had at least one card.

        Raises:
            NotFoundError: If the deck does not exist or belongs to another user.
        """
        await self.get_by_id(db, user_id, deck_id)

        cards = await self.card_service.get_by_deck_id(
            db, user_id, deck_id, ListOptions(limit=1),
        )
        if cards:
            deck = await self.archive(db, user_id, deck_id)
            logger.info("Deck %s contains cards; archived instead of deleted", deck_id)
            return DeckDeleteResult(outcome=DeleteOutcome.ARCHIVED, deck=deck)

        if not await super().delete(db, user_id, deck_id):
            raise NotFoundError(self.entity_name, deck_id)
        return DeckDeleteResult(outcome=DeleteOutcome.DELETED)
