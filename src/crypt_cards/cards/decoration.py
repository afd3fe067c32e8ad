"""Cosmetic decoration applied after card construction.

Social counters are display-only. They are assigned here, after the
deterministic build step, and never influence score, tags or rarity.
"""

from __future__ import annotations

import random
from collections.abc import Iterable

from crypt_cards.cards.models import Card

LIKES_MIN = 100
LIKES_SPAN = 5000
COMMENTS_MIN = 10
COMMENTS_SPAN = 500


def decorate_card(card: Card, rng: random.Random | None = None) -> Card:
    """Assign cosmetic like and comment counters to a card.

    Args:
        card: Card to decorate in place.
        rng: Random source (module RNG if omitted).

    Returns:
        The same card, for chaining.
    """
    source = rng if rng is not None else random
    card.likes = LIKES_MIN + source.randrange(LIKES_SPAN)
    card.comments = COMMENTS_MIN + source.randrange(COMMENTS_SPAN)
    return card


def decorate_cards(cards: Iterable[Card], rng: random.Random | None = None) -> list[Card]:
    """Decorate every card in order."""
    return [decorate_card(card, rng) for card in cards]
