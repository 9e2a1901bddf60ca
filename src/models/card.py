"""Card model for storing flashcards."""
from typing import TYPE_CHECKING
from uuid import UUID

from sqlalchemy import ForeignKey, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from models.base import Base, OwnedMixin, TimestampMixin, UUIDMixin

if TYPE_CHECKING:
    from models.deck import Deck


class Card(Base, UUIDMixin, OwnedMixin, TimestampMixin):
    """Card model - a front/back pair stored inside a deck."""

    __tablename__ = "cards"

    front: Mapped[str] = mapped_column(Text, nullable=False)
    back: Mapped[str] = mapped_column(Text, nullable=False)
    deck_id: Mapped[UUID] = mapped_column(
        Uuid,
        ForeignKey("decks.id"),
        nullable=False,
        index=True,
    )

    deck: Mapped["Deck"] = relationship(back_populates="cards", lazy="raise")
