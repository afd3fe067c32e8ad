"""Soundtrack assignment for scanned cards.

Each card type maps to a list of mood queries. The picker walks the
queries in order, takes one of the first few results that no other card
already uses, and falls back to a trending pool. A track is never
assigned to two cards of the same feed.
"""

from __future__ import annotations

import logging
import random
from collections.abc import Sequence
from typing import Protocol

from crypt_cards.audio.audius import Track
from crypt_cards.cards.models import Card, CardType

logger = logging.getLogger(__name__)

MOOD_QUERIES: dict[CardType, tuple[str, ...]] = {
    CardType.SWAP: ("edm", "electronic dance", "house music", "party"),
    CardType.RUG: ("dark bass", "dubstep", "trap beat", "heavy electronic"),
    CardType.MINT: ("hip hop beat", "rap instrumental", "boom bap", "beats"),
    CardType.DIAMOND_HANDS: ("lo-fi", "chill beats", "ambient", "chillhop"),
    CardType.BIG_MOVE: ("cinematic", "epic music", "orchestral", "soundtrack"),
}
FALLBACK_QUERIES = ("electronic",)

DEFAULT_RESULTS_PER_QUERY = 8
DEFAULT_PICK_WINDOW = 3
DEFAULT_TRENDING_POOL = 30


class TrackSource(Protocol):
    """Anything that can search and list trending tracks."""

    async def search_tracks(self, query: str, limit: int = ...) -> list[Track]: ...

    async def get_trending(self, limit: int = ...) -> list[Track]: ...


class SoundtrackPicker:
    """Assigns a distinct track to each card.

    Example:
        ```python
        picker = SoundtrackPicker(AudiusClient())
        soundtracks = await picker.assign(cards)
        track = soundtracks.get(cards[0].id)
        ```
    """

    def __init__(
        self,
        source: TrackSource,
        *,
        results_per_query: int = DEFAULT_RESULTS_PER_QUERY,
        pick_window: int = DEFAULT_PICK_WINDOW,
        trending_pool: int = DEFAULT_TRENDING_POOL,
        rng: random.Random | None = None,
    ) -> None:
        """Initialize the picker.

        Args:
            source: Track search backend.
            results_per_query: Results requested per mood query.
            pick_window: Choose randomly among this many unused results.
            trending_pool: Size of the trending fallback pool.
            rng: Random source for the pick (module random when None).
        """
        self._source = source
        self._results_per_query = results_per_query
        self._pick_window = pick_window
        self._trending_pool = trending_pool
        self._rng = rng or random.Random()
        self._used: set[str] = set()
        self._trending: list[Track] | None = None

    @property
    def used_track_ids(self) -> frozenset[str]:
        return frozenset(self._used)

    async def _load_trending(self) -> list[Track]:
        if self._trending is None:
            self._trending = await self._source.get_trending(self._trending_pool)
            logger.debug("Loaded %d trending fallback tracks", len(self._trending))
        return self._trending

    async def pick(self, card: Card, index: int) -> Track | None:
        """Pick an unused track for one card.

        Args:
            card: Card that needs a soundtrack.
            index: Position of the card in the feed, used by the fallback.

        Returns:
            The picked track, or None when nothing unused is available.
        """
        picked: Track | None = None
        for query in MOOD_QUERIES.get(card.type, FALLBACK_QUERIES):
            results = await self._source.search_tracks(query, self._results_per_query)
            unused = [t for t in results if t.id not in self._used]
            if unused:
                window = min(self._pick_window, len(unused))
                picked = unused[self._rng.randrange(window)]
                break

        if picked is None:
            pool = [t for t in await self._load_trending() if t.id not in self._used]
            if pool:
                picked = pool[index % len(pool)]

        if picked is not None:
            self._used.add(picked.id)
        return picked

    async def assign(self, cards: Sequence[Card]) -> dict[int, Track]:
        """Assign tracks to cards in feed order.

        Returns:
            Mapping of card id to track. Cards without a track are absent.
        """
        soundtracks: dict[int, Track] = {}
        for index, card in enumerate(cards):
            if card.id in soundtracks:
                continue
            track = await self.pick(card, index)
            if track is None:
                logger.info("No soundtrack available for card %d (%s)", card.id, card.type.value)
                continue
            soundtracks[card.id] = track
        logger.info("Assigned %d soundtracks to %d cards", len(soundtracks), len(cards))
        return soundtracks
