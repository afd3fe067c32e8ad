"""Card builder: turns a scored transaction into a displayable card.

Everything except the narration template choice is deterministic for a
given transaction, wallet and rank. Social counters start at zero; the
decoration step fills them in afterwards.
"""

from __future__ import annotations

import random
from collections.abc import Callable

from crypt_cards.cards.formatter import (
    format_amount,
    format_date,
    shorten_address,
    shorten_signature,
    time_ago,
)
from crypt_cards.cards.models import Card, CardType, CardUser, Rarity, TokenFlow
from crypt_cards.cards.narration import NarrationContext, build_narration
from crypt_cards.detector.models import ScoreResult
from crypt_cards.detector.scorer import score_transaction
from crypt_cards.ingestor.models import (
    BURN_TYPES,
    MINT_TYPES,
    NFT_TYPES,
    STAKE_TYPES,
    TRANSFER_TYPES,
    RawTransaction,
    TxType,
)
from crypt_cards.ingestor.tokens import SOL, lookup_token

LEGENDARY_SOL_THRESHOLD = 100
RARE_SOL_THRESHOLD = 10
LEGENDARY_TAGS = ("whale", "massive", "creator")
RARE_TAGS = ("big", "premium_mint", "whale_sale", "memecoin")

UNKNOWN_FLOW = TokenFlow(symbol="???", amount="?", icon="?")


def classify_rarity(result: ScoreResult) -> Rarity:
    """Map a score result to a rarity tier."""
    if result.sol > LEGENDARY_SOL_THRESHOLD or result.has_any(*LEGENDARY_TAGS):
        return Rarity.LEGENDARY
    if result.sol > RARE_SOL_THRESHOLD or result.has_any(*RARE_TAGS):
        return Rarity.RARE
    return Rarity.COMMON


def _sol_flow(sol: float) -> TokenFlow:
    return TokenFlow(symbol=SOL.symbol, amount=format_amount(sol), icon=SOL.icon)


class _Draft:
    """Mutable per-type fields filled in before the card is assembled."""

    def __init__(self, sol: float) -> None:
        self.card_type = CardType.SWAP
        self.title = ""
        self.t_in = _sol_flow(sol)
        self.t_out = UNKNOWN_FLOW
        self.pnl = ""


def _draft_swap(draft: _Draft, tx: RawTransaction, wallet: str, result: ScoreResult) -> None:
    sent = next((t for t in tx.token_transfers if t.from_user_account == wallet), None)
    received = next((t for t in tx.token_transfers if t.to_user_account == wallet), None)
    if sent is not None:
        info = lookup_token(sent.mint)
        draft.t_in = TokenFlow(info.symbol, format_amount(sent.token_amount), info.icon)
    elif result.sol > 0:
        draft.t_in = _sol_flow(result.sol)
    if received is not None:
        info = lookup_token(received.mint)
        draft.t_out = TokenFlow(info.symbol, format_amount(received.token_amount), info.icon)
    else:
        sol_in = next((t for t in tx.native_transfers if t.to_user_account == wallet), None)
        if sol_in is not None:
            draft.t_out = _sol_flow(sol_in.amount_sol)
    draft.card_type = CardType.SWAP
    draft.title = f"{draft.t_in.amount} {draft.t_in.symbol} → {draft.t_out.symbol}"
    draft.pnl = "SWAPPED"


def _draft_mint(draft: _Draft, tx: RawTransaction, wallet: str, result: ScoreResult) -> None:
    sol = format_amount(result.sol)
    draft.card_type = CardType.MINT
    draft.t_in = _sol_flow(result.sol)
    draft.t_out = TokenFlow("NFT", "MINTED", "†")
    draft.title = f"MINTED NFT FOR {sol} SOL" if result.sol > 0 else "FREE MINT"
    draft.pnl = "MINTED"


def _draft_sale(draft: _Draft, tx: RawTransaction, wallet: str, result: ScoreResult) -> None:
    sol = format_amount(result.sol)
    profit = result.net > 0
    draft.card_type = CardType.SWAP if profit else CardType.BIG_MOVE
    draft.t_in = TokenFlow("NFT", "SOLD", "†")
    draft.t_out = _sol_flow(result.sol)
    draft.title = f"NFT SOLD FOR {sol} SOL"
    draft.pnl = f"+{sol}" if profit else sol


def _draft_transfer(draft: _Draft, tx: RawTransaction, wallet: str, result: ScoreResult) -> None:
    sol = format_amount(result.sol)
    is_send = result.net < 0
    draft.card_type = CardType.BIG_MOVE
    draft.title = f"SENT {sol} SOL" if is_send else f"RECEIVED {sol} SOL"
    draft.t_out = TokenFlow("SENT" if is_send else "IN", sol, "↗" if is_send else "↙")
    draft.pnl = "SENT" if is_send else "RECEIVED"


def _draft_stake(draft: _Draft, tx: RawTransaction, wallet: str, result: ScoreResult) -> None:
    sol = format_amount(result.sol)
    staking = tx.tx_type is TxType.STAKE_SOL
    draft.card_type = CardType.DIAMOND_HANDS
    draft.title = f"STAKED {sol} SOL" if staking else f"UNSTAKED {sol} SOL"
    draft.t_out = TokenFlow("STAKED" if staking else "UNSTAKED", sol, "◎")
    draft.pnl = "LOCKED" if staking else "FREED"


def _draft_token_mint(draft: _Draft, tx: RawTransaction, wallet: str, result: ScoreResult) -> None:
    draft.card_type = CardType.MINT
    draft.t_out = TokenFlow("TOKEN", "NEW", "⚡")
    draft.title = "LAUNCHED A TOKEN"
    draft.pnl = "CREATED"


def _draft_burn(draft: _Draft, tx: RawTransaction, wallet: str, result: ScoreResult) -> None:
    draft.card_type = CardType.RUG
    draft.t_out = TokenFlow("BURNED", "X", "X")
    draft.title = "BURNED"
    draft.pnl = "ASH"


def _draft_generic(draft: _Draft, tx: RawTransaction, wallet: str, result: ScoreResult) -> None:
    sol = format_amount(result.sol)
    draft.title = f"{tx.type or 'TX'} via {tx.source or 'SOLANA'}"
    draft.t_out = TokenFlow(tx.source or "TX", sol, "⚡")
    draft.pnl = f"{sol} SOL" if result.sol > 0 else "TX"


Drafter = Callable[[_Draft, RawTransaction, str, ScoreResult], None]


def _drafter(tx_type: TxType) -> Drafter:
    if tx_type is TxType.SWAP:
        return _draft_swap
    if tx_type in MINT_TYPES:
        return _draft_mint
    if tx_type is TxType.NFT_SALE:
        return _draft_sale
    if tx_type in TRANSFER_TYPES:
        return _draft_transfer
    if tx_type in STAKE_TYPES:
        return _draft_stake
    if tx_type is TxType.TOKEN_MINT:
        return _draft_token_mint
    if tx_type in BURN_TYPES:
        return _draft_burn
    return _draft_generic


def build_card(
    tx: RawTransaction,
    wallet: str,
    rank: int,
    *,
    rng: random.Random | None = None,
    now: float | None = None,
) -> Card:
    """Build a card from a raw transaction.

    Args:
        tx: Transaction to summarize.
        wallet: Address of the scanned wallet.
        rank: Zero-based position in the selection; the card id is rank + 1.
        rng: Random source for the narration template choice.
        now: Reference time for the relative age label.

    Returns:
        A new Card with zeroed social counters.
    """
    result = score_transaction(tx, wallet)
    tx_type = tx.tx_type

    draft = _Draft(result.sol)
    _drafter(tx_type)(draft, tx, wallet, result)

    narration = build_narration(
        tx_type,
        result.tags,
        NarrationContext(
            sol=result.sol,
            net=result.net,
            src=tx.source or "Solana",
            in_amt=draft.t_in.amount,
            in_tk=draft.t_in.symbol,
            out_amt=draft.t_out.amount,
            out_tk=draft.t_out.symbol,
        ),
        rng=rng,
    )

    return Card(
        id=rank + 1,
        type=draft.card_type,
        rarity=classify_rarity(result),
        title=draft.title,
        narration=narration,
        user=CardUser(name=f"{wallet[:8]}.sol", addr=shorten_address(wallet)),
        platform=tx.source or tx.type or "Solana",
        date=format_date(tx.timestamp),
        t_in=draft.t_in,
        t_out=draft.t_out,
        pnl=draft.pnl,
        up=result.net >= 0 and draft.pnl != "SENT",
        usd=f"~{format_amount(result.sol)} SOL" if result.sol > 0 else "",
        tx=shorten_signature(tx.signature),
        full_tx=tx.signature,
        nft=tx_type in NFT_TYPES,
        ago=time_ago(tx.timestamp, now),
        timestamp=tx.timestamp,
        tags=result.tags,
        score=result.score,
    )
