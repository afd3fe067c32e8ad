"""Storage layer - Mint ledger schema and repository."""

from crypt_cards.storage.database import DatabaseManager
from crypt_cards.storage.models import Base, MintedCardModel
from crypt_cards.storage.repos import MintedCardDTO, MintedCardRepository

__all__ = [
    "Base",
    "DatabaseManager",
    "MintedCardDTO",
    "MintedCardModel",
    "MintedCardRepository",
]
