"""SQLAlchemy models."""
from models.base import ArchivableMixin, Base, OwnedMixin, TimestampMixin, UUIDMixin
from models.card import Card
from models.deck import Deck

__all__ = [
    "ArchivableMixin",
    "Base",
    "Card",
    "Deck",
    "OwnedMixin",
    "TimestampMixin",
    "UUIDMixin",
]
