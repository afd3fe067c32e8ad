"""Wallet scan pipeline for crypt-cards.

This module provides the WalletScanner that wires together the history
provider, the scorer, the selection rules and the card builder, turning a
wallet address into a short, diverse list of story-worthy cards.

Pipeline flow:
    History Provider → Scorer → Stable Rank → Diversity Selection → Card Builder → Decoration
"""

from __future__ import annotations

import logging
import random
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any

from redis.asyncio import Redis

from crypt_cards.cards.builder import build_card
from crypt_cards.cards.decoration import decorate_card
from crypt_cards.cards.models import Card
from crypt_cards.config import ScanSettings, Settings, get_settings
from crypt_cards.detector.models import ScoreResult
from crypt_cards.detector.scorer import score_transaction
from crypt_cards.ingestor.helius import HeliusClient, HistoryProvider
from crypt_cards.ingestor.models import RawTransaction

logger = logging.getLogger(__name__)

# Default selection parameters
DEFAULT_MAX_PER_TYPE = 2
DEFAULT_MAX_CARDS = 8
DEFAULT_RELAX_BELOW = 5
DEFAULT_RELAX_TARGET = 6
DEFAULT_HISTORY_LIMIT = 100


@dataclass(frozen=True)
class ScoredTransaction:
    """A raw transaction paired with its score."""

    tx: RawTransaction
    result: ScoreResult

    @property
    def score(self) -> int:
        return self.result.score


@dataclass
class ScanStats:
    """Statistics for the scanner."""

    scans: int = 0
    transactions_scored: int = 0
    cards_built: int = 0
    relaxed_scans: int = 0
    errors: int = 0
    last_scan_at: datetime | None = None
    last_error: str | None = None


@dataclass(frozen=True)
class Selection:
    """Result of the selection step."""

    transactions: tuple[RawTransaction, ...]
    relaxed: bool = False


def rank_transactions(
    transactions: Sequence[RawTransaction], wallet: str
) -> list[ScoredTransaction]:
    """Score every transaction and sort descending by score.

    The sort is stable: ties keep the provider's original order.
    """
    scored = [ScoredTransaction(tx, score_transaction(tx, wallet)) for tx in transactions]
    scored.sort(key=lambda s: s.score, reverse=True)
    return scored


def _identity(index: int, tx: RawTransaction) -> str:
    return tx.signature or f"#position:{index}"


def select_story_transactions(
    scored: Sequence[ScoredTransaction],
    *,
    max_per_type: int = DEFAULT_MAX_PER_TYPE,
    max_cards: int = DEFAULT_MAX_CARDS,
    relax_below: int = DEFAULT_RELAX_BELOW,
    relax_target: int = DEFAULT_RELAX_TARGET,
) -> Selection:
    """Pick the story-worthy transactions from a ranked list.

    Primary pass: walk the ranked list, skip non-positive scores, count
    every candidate against its raw type and admit it only while that
    count stays within ``max_per_type``; stop at ``max_cards``.

    Relaxed pass: when fewer than ``relax_below`` were admitted, walk the
    list again ignoring the type cap, skipping non-positive scores and
    transactions already selected (by signature), until ``relax_target``.

    Args:
        scored: Transactions sorted descending by score.
        max_per_type: Diversity cap per raw transaction type.
        max_cards: Primary pass size limit.
        relax_below: Threshold that triggers the relaxed pass.
        relax_target: Relaxed pass size limit.

    Returns:
        Selection in admission order.
    """
    type_counts: dict[str, int] = {}
    selected: list[RawTransaction] = []
    chosen: set[str] = set()

    for index, item in enumerate(scored):
        if len(selected) >= max_cards:
            break
        if item.score <= 0:
            continue
        key = item.tx.diversity_key
        type_counts[key] = type_counts.get(key, 0) + 1
        if type_counts[key] > max_per_type:
            continue
        selected.append(item.tx)
        chosen.add(_identity(index, item.tx))

    if len(selected) >= relax_below:
        return Selection(tuple(selected))

    for index, item in enumerate(scored):
        if len(selected) >= relax_target:
            break
        if item.score <= 0:
            continue
        identity = _identity(index, item.tx)
        if identity in chosen:
            continue
        selected.append(item.tx)
        chosen.add(identity)

    return Selection(tuple(selected), relaxed=True)


class WalletScanner:
    """Turns a wallet address into a ranked, diverse list of cards.

    Any failure fetching history is logged and treated as an empty
    history; the scan then resolves to an empty list.

    Example:
        ```python
        scanner = WalletScanner.from_settings(get_settings())
        cards = await scanner.scan("9WzDXwBbmkg8ZTbNMqUxvQRAyrZzDsGYdLVL9zYtAWWM")
        await scanner.close()
        ```
    """

    def __init__(
        self,
        provider: HistoryProvider,
        *,
        scan_settings: ScanSettings | None = None,
        history_limit: int = DEFAULT_HISTORY_LIMIT,
        rng: random.Random | None = None,
    ) -> None:
        """Initialize the scanner.

        Args:
            provider: Chain history provider.
            scan_settings: Selection limits; defaults come from the environment.
            history_limit: Maximum transactions fetched per scan.
            rng: Random source for narration and decoration.
        """
        self.provider = provider
        self.scan_settings = scan_settings or ScanSettings()
        self.history_limit = history_limit
        self.rng = rng
        self.stats = ScanStats()
        self._owned: list[Any] = []

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> WalletScanner:
        """Build a scanner backed by Helius (and Redis when configured)."""
        settings = settings or get_settings()
        redis = Redis.from_url(settings.redis.url) if settings.redis.url else None
        api_key = settings.helius.api_key.get_secret_value() if settings.helius.api_key else None
        client = HeliusClient(
            api_key,
            base_url=settings.helius.base_url,
            redis=redis,
            cache_ttl_seconds=settings.helius.cache_ttl_seconds,
            timeout=settings.helius.request_timeout_seconds,
        )
        scanner = cls(
            provider=client,
            scan_settings=settings.scan,
            history_limit=settings.helius.history_limit,
        )
        scanner._owned.append(client)
        if redis is not None:
            scanner._owned.append(redis)
        return scanner

    async def close(self) -> None:
        """Release clients created by ``from_settings``."""
        while self._owned:
            resource = self._owned.pop()
            if isinstance(resource, Redis):
                await resource.aclose()
            else:
                await resource.close()

    async def __aenter__(self) -> WalletScanner:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    async def _fetch(self, address: str) -> list[RawTransaction]:
        try:
            return await self.provider.get_history(address, self.history_limit)
        except Exception as e:
            self.stats.errors += 1
            self.stats.last_error = str(e)
            logger.warning("History fetch failed for %s: %s", address[:10] + "...", e)
            return []

    def select(self, transactions: Sequence[RawTransaction], address: str) -> Selection:
        """Rank and select transactions using the configured limits."""
        cfg = self.scan_settings
        return select_story_transactions(
            rank_transactions(transactions, address),
            max_per_type=cfg.max_per_type,
            max_cards=cfg.max_cards,
            relax_below=cfg.relax_below,
            relax_target=cfg.relax_target,
        )

    async def scan(self, address: str, *, now: float | None = None) -> list[Card]:
        """Scan a wallet and build its cards.

        Args:
            address: Wallet address to scan.
            now: Reference time for relative age labels.

        Returns:
            Cards in selection order with ids 1..n; empty when the history
            is empty, unavailable or has nothing story-worthy.
        """
        self.stats.scans += 1
        self.stats.last_scan_at = datetime.now(UTC)

        transactions = await self._fetch(address)
        if not transactions:
            logger.info("No history for %s", address[:10] + "...")
            return []

        self.stats.transactions_scored += len(transactions)
        selection = self.select(transactions, address)
        if selection.relaxed:
            self.stats.relaxed_scans += 1

        cards = [
            decorate_card(build_card(tx, address, rank, rng=self.rng, now=now), self.rng)
            for rank, tx in enumerate(selection.transactions)
        ]
        self.stats.cards_built += len(cards)
        logger.info(
            "Scanned %s: %d transactions, %d cards%s",
            address[:10] + "...",
            len(transactions),
            len(cards),
            " (relaxed)" if selection.relaxed else "",
        )
        return cards
