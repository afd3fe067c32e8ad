"""Card layer - Classification, narration and display formatting."""

from crypt_cards.cards.builder import build_card, classify_rarity
from crypt_cards.cards.decoration import decorate_card, decorate_cards
from crypt_cards.cards.models import Card, CardType, CardUser, Rarity, TokenFlow
from crypt_cards.cards.narration import NarrationContext, build_narration

__all__ = [
    "Card",
    "CardType",
    "CardUser",
    "NarrationContext",
    "Rarity",
    "TokenFlow",
    "build_card",
    "build_narration",
    "classify_rarity",
    "decorate_card",
    "decorate_cards",
]
