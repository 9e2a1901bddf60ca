"""Deck model for grouping flashcards."""
from typing import TYPE_CHECKING

from sqlalchemy import String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from models.base import ArchivableMixin, Base, OwnedMixin, TimestampMixin, UUIDMixin

if TYPE_CHECKING:
    from models.card import Card

MAX_SLUG_LENGTH = 255


class Deck(Base, UUIDMixin, OwnedMixin, TimestampMixin, ArchivableMixin):
    """Deck model - a named, archivable collection of cards owned by one user."""

    __tablename__ = "decks"
    __table_args__ = (
        UniqueConstraint("user_id", "slug", name="uq_decks_user_id_slug"),
    )

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    slug: Mapped[str] = mapped_column(String(MAX_SLUG_LENGTH), nullable=False)

    cards: Mapped[list["Card"]] = relationship(back_populates="deck", lazy="raise")
