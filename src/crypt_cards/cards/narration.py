"""Narration selection for cards.

Narrations are picked in two steps: a per-type rule list is walked in
priority order to find the first matching category, then one template of
that category is chosen uniformly at random and interpolated.

Template fields:
    sol: formatted SOL magnitude
    net: signed net SOL delta (float)
    src: source label
    in_amt, in_tk: amount and symbol flowing in
    out_amt, out_tk: amount and symbol flowing out
"""

from __future__ import annotations

import random
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from crypt_cards.cards.formatter import format_amount
from crypt_cards.ingestor.models import TxType


@dataclass(frozen=True)
class NarrationContext:
    """Values available to narration templates."""

    sol: float
    net: float
    src: str
    in_amt: str
    in_tk: str
    out_amt: str
    out_tk: str

    def fields(self) -> dict[str, object]:
        return {
            "sol": format_amount(self.sol),
            "net": self.net,
            "src": self.src,
            "in_amt": self.in_amt,
            "in_tk": self.in_tk,
            "out_amt": self.out_amt,
            "out_tk": self.out_tk,
        }


TEMPLATES: dict[str, tuple[str, ...]] = {
    "swap_whale": (
        "{in_amt} {in_tk} into {out_tk}. One click, no hesitation. At this size the only real risk is blinking.",
        "Most wallets never move {in_amt} {in_tk} in a year. This one did it in a single transaction on {src}. The chain shrugged. The orderbook did not.",
        "A {in_amt} {in_tk} swap that nudged the price. A chart watcher somewhere spilled their coffee. The whale did not notice.",
    ),
    "swap_memecoin": (
        "Aped {in_amt} {in_tk} into {out_tk}. No whitepaper, no roadmap. Just a ticker and the certainty that this time it is different.",
        "{out_tk} was trending at 3am. {in_amt} {in_tk} later the position was open. Sleep is optional when the candles are green.",
        "{out_tk}. That is the whole thesis. {in_amt} {in_tk} deployed on instinct alone. Memecoins do not need fundamentals. They need believers.",
        "Swapped into {out_tk} like it was destiny. {in_amt} {in_tk} gone on the strength of a group chat screenshot.",
    ),
    "swap_big": (
        "{in_amt} {in_tk} became {out_amt} {out_tk}. Not a casual trade. The kind of decision made after hours of staring at one chart.",
        "Rotated {in_amt} {in_tk} into {out_tk} on {src}. Rebalance or conviction bet? The chain records what happened, never why.",
        "{in_amt} {in_tk} converted to {out_amt} {out_tk}. Big enough to matter, small enough to sleep at night.",
    ),
    "swap_solid": (
        "{in_amt} {in_tk} for {out_amt} {out_tk} via {src}. A clean swap with no drama.",
        "Swapped {in_tk} for {out_tk}. Every portfolio is a story written in trades. This chapter was quiet and deliberate.",
        "Another day, another swap. {in_amt} {in_tk} turned into {out_amt} {out_tk}. The grind never logs off.",
    ),
    "swap_small": (
        "{in_amt} {in_tk} into {out_tk}. A small trade, but it is on the permanent record now.",
        "A modest swap on {src}. Not every move is a whale play. Some positions are built one brick at a time.",
    ),
    "nft_mint_premium": (
        "Paid {sol} SOL to mint. While others waited for a free claim, this wallet paid to be early. A statement of intent.",
        "{sol} SOL on a mint. It either ages like wine or becomes an expensive lesson. Either way it is forever.",
    ),
    "nft_mint": (
        "Minted. One more piece for the collection. Some collect art, some collect status, some just cannot resist the button.",
        "Another NFT lands in the wallet. Every mint is a small act of faith that this image and this moment mean something.",
        "Hit mint. The pause between confirm and the token appearing is the purest form of hope on chain.",
    ),
    "nft_sale_whale": (
        "{sol} SOL from a single sale. Not a flip but a winning ticket. The holder finally let go and the market paid up.",
        "Sold for {sol} SOL. Someone held through every doubt and every obituary for the market. This was the payoff.",
    ),
    "nft_sale": (
        "NFT sold for {sol} SOL. One exit, one entry. The art stays the same while the stories around it change.",
        "Closed a position at {sol} SOL. Actually taking profit is the rarest move in the market.",
    ),
    "transfer_massive": (
        "{sol} SOL just moved. Not a transaction but a migration. Cold storage, an OTC desk, an inheritance? The chain keeps the secret.",
        "{sol} SOL in one transfer. Somewhere between reckless and legendary, the kind of entry that turns an explorer into a thriller.",
    ),
    "transfer_big": (
        "{sol} SOL on the move. Large enough to raise eyebrows. The destination tells one story and the timing tells another.",
        "Moved {sol} SOL. Not a trade, a deliberate relocation of capital. Big wallets run on systems and this was part of one.",
    ),
    "transfer_in": (
        "{sol} SOL landed. The chain says who sent it but never why.",
        "Incoming: {sol} SOL. Payday, profit taking, a friend settling an old debt? The best on-chain stories stay unfinished.",
    ),
    "transfer_out": (
        "{sol} SOL sent out into the void. Every outbound transfer is a small farewell.",
        "Sent {sol} SOL. The wallet got lighter, but lighter is not always worse. Some purchases never show up on chain.",
    ),
    "stake": (
        "{sol} SOL staked. Locked up and earning while traders chase the next tenfold. Patience as a position.",
        "Staked {sol} SOL. The most boring trade in crypto is also the most disciplined one.",
    ),
    "whale_stake": (
        "{sol} SOL locked in stake. Not just yield but a vote of confidence. The biggest bets are the quiet ones.",
    ),
    "unstake": (
        "{sol} SOL unstaked. The lockup is over and the question is open: redeploy, rotate or ride it out?",
    ),
    "token_create": (
        "Launched a token. From nothing to a contract address. Most do not survive the week, but every blue chip started with one deploy.",
        "Token created. The ticker is set and the supply is minted. The community and the chart are still unwritten.",
    ),
    "burn": (
        "Burned. Sent to the void address, never to return. Some things have to go to make room for what comes next.",
        "Burned on chain. Permanent and irreversible. Whatever this was, it is ash now.",
    ),
    "default": (
        "A transaction recorded on Solana. The chain does not judge or editorialize. It just remembers, and now so do you.",
        "On-chain activity. Not every move needs a headline. Some moments only prove the wallet was alive.",
    ),
}

Predicate = Callable[[Sequence[str], NarrationContext], bool]


def _has(*wanted: str) -> Predicate:
    def check(tags: Sequence[str], ctx: NarrationContext) -> bool:
        return any(tag in tags for tag in wanted)

    return check


def _always(tags: Sequence[str], ctx: NarrationContext) -> bool:
    return True


def _net_positive(tags: Sequence[str], ctx: NarrationContext) -> bool:
    return ctx.net > 0


_SWAP_RULES: tuple[tuple[Predicate, str], ...] = (
    (_has("whale"), "swap_whale"),
    (_has("memecoin"), "swap_memecoin"),
    (_has("big"), "swap_big"),
    (_has("solid"), "swap_solid"),
    (_always, "swap_small"),
)
_MINT_RULES = (
    (_has("premium_mint"), "nft_mint_premium"),
    (_always, "nft_mint"),
)
_SALE_RULES = (
    (_has("whale_sale", "big_sale"), "nft_sale_whale"),
    (_always, "nft_sale"),
)
_TRANSFER_RULES = (
    (_has("massive"), "transfer_massive"),
    (_has("whale_move", "big_move"), "transfer_big"),
    (_net_positive, "transfer_in"),
    (_always, "transfer_out"),
)
_STAKE_RULES = (
    (_has("whale_stake"), "whale_stake"),
    (_always, "stake"),
)
_DEFAULT_RULES = ((_always, "default"),)

NARRATION_RULES: dict[TxType, tuple[tuple[Predicate, str], ...]] = {
    TxType.SWAP: _SWAP_RULES,
    TxType.NFT_MINT: _MINT_RULES,
    TxType.COMPRESSED_NFT_MINT: _MINT_RULES,
    TxType.NFT_SALE: _SALE_RULES,
    TxType.NFT_LISTING: _DEFAULT_RULES,
    TxType.TRANSFER: _TRANSFER_RULES,
    TxType.SOL_TRANSFER: _TRANSFER_RULES,
    TxType.STAKE_SOL: _STAKE_RULES,
    TxType.UNSTAKE_SOL: ((_always, "unstake"),),
    TxType.TOKEN_MINT: ((_always, "token_create"),),
    TxType.BURN: ((_always, "burn"),),
    TxType.BURN_NFT: ((_always, "burn"),),
    TxType.UNKNOWN: _DEFAULT_RULES,
    TxType.NONE: _DEFAULT_RULES,
    TxType.OTHER: _DEFAULT_RULES,
}


def select_category(tx_type: TxType, tags: Sequence[str], ctx: NarrationContext) -> str:
    """Return the narration category for a transaction type and its tags."""
    for predicate, category in NARRATION_RULES[tx_type]:
        if predicate(tags, ctx):
            return category
    return "default"


def build_narration(
    tx_type: TxType,
    tags: Sequence[str],
    ctx: NarrationContext,
    rng: random.Random | None = None,
) -> str:
    """Pick and interpolate a narration.

    Args:
        tx_type: Transaction type.
        tags: Scorer tags; earlier rules take precedence when several match.
        ctx: Interpolation values.
        rng: Random source for the template choice (module RNG if omitted).

    Returns:
        The narration string.
    """
    chooser = rng if rng is not None else random
    template = chooser.choice(TEMPLATES[select_category(tx_type, tags, ctx)])
    return template.format(**ctx.fields())
