"""Service layer for card CRUD operations."""
import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from models.card import Card
from schemas.list_options import ListOptions
from services.base_entity_service import BaseEntityService
from services.exceptions import ArchivedDeckError, ValidationError
from services.utils import coerce_filter_value

if TYPE_CHECKING:
    from services.deck_service import DeckService

logger = logging.getLogger(__name__)


class CardService(BaseEntityService[Card]):
    """
    Card service with deck-aware writes.

    Extends BaseEntityService with card-specific:
    - Deck ownership and archived-state validation on create and move
    - Listing a deck's cards

    Deck rules are reached through the DeckService this service holds, not by
    querying the decks table directly.
    """

    model = Card
    entity_name = "Card"

    def __init__(self, deck_service: "DeckService") -> None:
        self.deck_service = deck_service

    async def _check_target_deck(
        self,
        db: AsyncSession,
        user_id: str,
        deck_id: UUID,
        action: str,
    ) -> None:
        """
        Ensure the deck a card is written into exists, is owned, and is not archived.

        Raises:
            NotFoundError: If the deck does not exist or belongs to another user.
            ArchivedDeckError: If the deck is archived.
        """
        deck = await self.deck_service.get_by_id(db, user_id, deck_id)
        if deck.archived:
            raise ArchivedDeckError(deck_id, action)

    async def get_by_deck_id(
        self,
        db: AsyncSession,
        user_id: str,
        deck_id: UUID,
        options: ListOptions | None = None,
    ) -> list[Card]:
        """List the caller's cards in a deck, honouring sort and pagination options."""
        options = options or ListOptions()
        scoped_options = options.model_copy(
            update={"filters": {**options.filters, "deck_id": deck_id}},
        )
        return await self.list_records(db, user_id, scoped_options)

    async def create_with_deck_validation(
        self,
        db: AsyncSession,
        user_id: str,
        fields: Mapping[str, Any],
    ) -> Card:
        """
        Create a card after validating its deck.

        Args:
            db: Database session.
            user_id: Caller's user ID.
            fields: Card fields; deck_id is required.

        Returns:
            The created card.

        Raises:
            ValidationError: If deck_id is missing or malformed.
            NotFoundError: If the deck does not exist or belongs to another user.
            ArchivedDeckError: If the deck is archived.
        """
        if fields.get("deck_id") is None:
            raise ValidationError("deck_id is required")
        deck_id = coerce_filter_value("deck_id", fields["deck_id"], UUID)

        await self._check_target_deck(db, user_id, deck_id, "add card to")
        return await self.create(db, user_id, {**fields, "deck_id": deck_id})

    async def update_with_deck_validation(
        self,
        db: AsyncSession,
        user_id: str,
        card_id: UUID,
        fields: Mapping[str, Any],
    ) -> Card:
        """
        Update a card, validating the target deck when the card is being moved.

        Raises:
            NotFoundError: If the card or the target deck is not found for this user.
            ArchivedDeckError: If the target deck is archived.
        """
        if fields.get("deck_id") is None:
            return await self.update(db, user_id, card_id, fields)

        deck_id = coerce_filter_value("deck_id", fields["deck_id"], UUID)
        await self._check_target_deck(db, user_id, deck_id, "move card to")
        return await self.update(db, user_id, card_id, {**fields, "deck_id": deck_id})
