"""Transaction scorer ranking on-chain events by narrative interest.

This module provides ``score_transaction``, a pure function mapping a raw
transaction plus the scanned wallet address to a ``ScoreResult``.

Scoring Formula:
    score = type base + magnitude tier + venue/memecoin bonuses
            - dust penalty - unknown-type penalties

    Magnitude tiers are evaluated top-down and the first threshold the
    SOL magnitude strictly exceeds wins; the last tier is the fallback.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from crypt_cards.detector.models import ScoreResult
from crypt_cards.ingestor.models import LAMPORTS_PER_SOL, RawTransaction, TxType
from crypt_cards.ingestor.tokens import DEFI_SOURCES, MEMECOINS, lookup_token

logger = logging.getLogger(__name__)

# (threshold in SOL, score delta, tag or None); threshold None is the fallback
Tier = tuple[float | None, int, str | None]

SWAP_BASE = 25
SWAP_TIERS: tuple[Tier, ...] = (
    (100, 80, "whale"),
    (50, 60, "whale"),
    (10, 35, "big"),
    (2, 15, "solid"),
    (0.5, 5, None),
    (None, -5, None),
)
DEFI_VENUE_BONUS = 5
MEMECOIN_BONUS = 25

MINT_BASE = 35
MINT_TIERS: tuple[Tier, ...] = (
    (10, 40, "premium_mint"),
    (2, 20, "mint"),
    (None, 0, "free_mint"),
)

SALE_BASE = 30
SALE_TIERS: tuple[Tier, ...] = (
    (50, 70, "whale_sale"),
    (10, 40, "big_sale"),
    (2, 15, "sale"),
    (None, -5, None),
)
SALE_PROFIT_BONUS = 20

LISTING_TIERS: tuple[Tier, ...] = (
    (20, 30, "high_listing"),
    (None, -10, None),
)

TRANSFER_TIERS: tuple[Tier, ...] = (
    (500, 80, "massive"),
    (100, 55, "whale_move"),
    (20, 25, "big_move"),
    (5, 10, None),
    (None, -15, None),
)

STAKE_TIERS: tuple[Tier, ...] = (
    (100, 50, "whale_stake"),
    (20, 25, "stake"),
    (None, 5, None),
)

TOKEN_MINT_BONUS = 50
BURN_BONUS = 20

DUST_THRESHOLD_SOL = 0.01
DUST_PENALTY = -25
DUST_EXEMPT_TYPES = frozenset(
    {TxType.NFT_MINT, TxType.COMPRESSED_NFT_MINT, TxType.TOKEN_MINT, TxType.BURN, TxType.BURN_NFT}
)
UNKNOWN_TYPE_PENALTY = -20
EMPTY_TYPE_PENALTY = -30


def get_sol(tx: RawTransaction) -> float:
    """Return the largest absolute native transfer amount, in SOL."""
    biggest = 0.0
    for transfer in tx.native_transfers:
        biggest = max(biggest, transfer.amount_sol)
    return biggest


def get_net_sol(tx: RawTransaction, wallet: str) -> float:
    """Return the signed SOL delta to ``wallet`` across native transfers."""
    net = 0.0
    for transfer in tx.native_transfers:
        if transfer.to_user_account == wallet:
            net += transfer.amount / LAMPORTS_PER_SOL
        if transfer.from_user_account == wallet:
            net -= transfer.amount / LAMPORTS_PER_SOL
    return net


class _Tally:
    """Accumulates score contributions, tags and factors."""

    def __init__(self) -> None:
        self.score = 0
        self.tags: list[str] = []
        self.factors: dict[str, int] = {}

    def add(self, factor: str, delta: int, tag: str | None = None) -> None:
        self.score += delta
        if delta:
            self.factors[factor] = self.factors.get(factor, 0) + delta
        if tag is not None:
            self.tags.append(tag)

    def tier(self, factor: str, sol: float, tiers: tuple[Tier, ...]) -> None:
        for threshold, delta, tag in tiers:
            if threshold is None or sol > threshold:
                self.add(factor, delta, tag)
                return


def _score_swap(tally: _Tally, tx: RawTransaction, sol: float, net: float) -> None:
    tally.add("swap_base", SWAP_BASE)
    tally.tier("swap_size", sol, SWAP_TIERS)
    if tx.source in DEFI_SOURCES:
        tally.add("defi_venue", DEFI_VENUE_BONUS)
    for transfer in tx.token_transfers:
        if lookup_token(transfer.mint).symbol in MEMECOINS:
            tally.add("memecoin", MEMECOIN_BONUS, "memecoin")


def _score_mint(tally: _Tally, tx: RawTransaction, sol: float, net: float) -> None:
    tally.add("mint_base", MINT_BASE)
    tally.tier("mint_price", sol, MINT_TIERS)


def _score_sale(tally: _Tally, tx: RawTransaction, sol: float, net: float) -> None:
    tally.add("sale_base", SALE_BASE)
    tally.tier("sale_size", sol, SALE_TIERS)
    if net > 0:
        tally.add("profit", SALE_PROFIT_BONUS, "profit")


def _score_listing(tally: _Tally, tx: RawTransaction, sol: float, net: float) -> None:
    tally.tier("listing_price", sol, LISTING_TIERS)


def _score_transfer(tally: _Tally, tx: RawTransaction, sol: float, net: float) -> None:
    tally.tier("transfer_size", sol, TRANSFER_TIERS)


def _score_stake(tally: _Tally, tx: RawTransaction, sol: float, net: float) -> None:
    tally.tier("stake_size", sol, STAKE_TIERS)


def _score_token_mint(tally: _Tally, tx: RawTransaction, sol: float, net: float) -> None:
    tally.add("creator", TOKEN_MINT_BONUS, "creator")


def _score_burn(tally: _Tally, tx: RawTransaction, sol: float, net: float) -> None:
    tally.add("burn", BURN_BONUS, "burn")


def _score_nothing(tally: _Tally, tx: RawTransaction, sol: float, net: float) -> None:
    return None


TypeRule = Callable[[_Tally, RawTransaction, float, float], None]

TYPE_RULES: dict[TxType, TypeRule] = {
    TxType.SWAP: _score_swap,
    TxType.NFT_MINT: _score_mint,
    TxType.COMPRESSED_NFT_MINT: _score_mint,
    TxType.NFT_SALE: _score_sale,
    TxType.NFT_LISTING: _score_listing,
    TxType.TRANSFER: _score_transfer,
    TxType.SOL_TRANSFER: _score_transfer,
    TxType.STAKE_SOL: _score_stake,
    TxType.UNSTAKE_SOL: _score_stake,
    TxType.TOKEN_MINT: _score_token_mint,
    TxType.BURN: _score_burn,
    TxType.BURN_NFT: _score_burn,
    TxType.UNKNOWN: _score_nothing,
    TxType.NONE: _score_nothing,
    TxType.OTHER: _score_nothing,
}


def score_transaction(tx: RawTransaction, wallet: str) -> ScoreResult:
    """Score a transaction for narrative interest.

    Pure and deterministic: identical inputs always give identical results.

    Args:
        tx: Transaction to score.
        wallet: Address of the wallet being scanned.

    Returns:
        ScoreResult with score, ordered tags, SOL magnitude and net delta.
    """
    tx_type = tx.tx_type
    sol = get_sol(tx)
    net = get_net_sol(tx, wallet)

    tally = _Tally()
    TYPE_RULES[tx_type](tally, tx, sol, net)

    if sol < DUST_THRESHOLD_SOL and tx_type not in DUST_EXEMPT_TYPES:
        tally.add("dust", DUST_PENALTY)
    if tx_type in (TxType.UNKNOWN, TxType.NONE):
        tally.add("unknown_type", UNKNOWN_TYPE_PENALTY)
    # An empty type takes both the unknown and the empty penalty.
    if tx_type is TxType.NONE:
        tally.add("empty_type", EMPTY_TYPE_PENALTY)

    return ScoreResult(
        score=tally.score,
        tags=tuple(tally.tags),
        sol=sol,
        net=net,
        factors=tally.factors,
    )
