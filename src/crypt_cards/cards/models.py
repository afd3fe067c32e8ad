"""Data models for trading cards."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class CardType(str, Enum):
    """Display category of a card."""

    SWAP = "swap"
    RUG = "rug"
    MINT = "mint"
    DIAMOND_HANDS = "diamond_hands"
    BIG_MOVE = "big_move"


class Rarity(str, Enum):
    """Ordinal rarity tier: common < rare < legendary."""

    COMMON = "common"
    RARE = "rare"
    LEGENDARY = "legendary"

    @property
    def rank(self) -> int:
        """Return the ordinal position of the tier."""
        return _RARITY_ORDER.index(self)

    def _other_rank(self, other: object) -> int:
        # str mixin: never fall back to string order
        if not isinstance(other, Rarity):
            raise TypeError(f"cannot compare Rarity with {type(other).__name__}")
        return other.rank

    def __lt__(self, other: object) -> bool:
        return self.rank < self._other_rank(other)

    def __le__(self, other: object) -> bool:
        return self.rank <= self._other_rank(other)

    def __gt__(self, other: object) -> bool:
        return self.rank > self._other_rank(other)

    def __ge__(self, other: object) -> bool:
        return self.rank >= self._other_rank(other)


_RARITY_ORDER = (Rarity.COMMON, Rarity.RARE, Rarity.LEGENDARY)


@dataclass(frozen=True)
class TokenFlow:
    """One side of a card's token flow (what went in or came out)."""

    symbol: str
    amount: str
    icon: str

    def to_dict(self) -> dict[str, str]:
        return {"symbol": self.symbol, "amount": self.amount, "icon": self.icon}


@dataclass(frozen=True)
class CardUser:
    """Display identity of the scanned wallet."""

    name: str
    addr: str


@dataclass
class Card:
    """A narrated, rarity-tiered summary of one on-chain transaction.

    Everything except the social counters is derived once at scan time.
    Only ``liked``/``likes`` change afterwards, via ``toggle_like``.

    Attributes:
        id: Rank-based identifier, unique within one scan result.
        type: Display category.
        rarity: Rarity tier.
        title: Headline.
        narration: Templated prose.
        user: Wallet display identity.
        platform: Source label.
        date: Roman-month date string.
        t_in: Token flow into the transaction.
        t_out: Token flow out of the transaction.
        pnl: Outcome label.
        up: Directionality flag.
        usd: Approximate value label.
        tx: Shortened signature.
        full_tx: Full signature.
        nft: Whether the transaction involves an NFT.
        ago: Relative age label at scan time.
        timestamp: Block time in epoch seconds.
        tags: Scorer tags, kept for traceability.
        score: Scorer score.
        likes: Cosmetic like counter.
        comments: Cosmetic comment counter.
        liked: Whether the viewer liked the card.
    """

    id: int
    type: CardType
    rarity: Rarity
    title: str
    narration: str
    user: CardUser
    platform: str
    date: str
    t_in: TokenFlow
    t_out: TokenFlow
    pnl: str
    up: bool
    usd: str
    tx: str
    full_tx: str
    nft: bool
    ago: str
    timestamp: int
    tags: tuple[str, ...] = ()
    score: int = 0
    likes: int = 0
    comments: int = 0
    liked: bool = field(default=False)

    def toggle_like(self) -> bool:
        """Flip the liked flag and adjust the like counter.

        Returns:
            The new liked state.
        """
        self.liked = not self.liked
        self.likes += 1 if self.liked else -1
        return self.liked

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-compatible dictionary."""
        return {
            "id": self.id,
            "type": self.type.value,
            "rarity": self.rarity.value,
            "title": self.title,
            "narration": self.narration,
            "user": {"name": self.user.name, "addr": self.user.addr},
            "platform": self.platform,
            "date": self.date,
            "t_in": self.t_in.to_dict(),
            "t_out": self.t_out.to_dict(),
            "pnl": self.pnl,
            "up": self.up,
            "usd": self.usd,
            "tx": self.tx,
            "full_tx": self.full_tx,
            "nft": self.nft,
            "ago": self.ago,
            "timestamp": self.timestamp,
            "tags": list(self.tags),
            "score": self.score,
            "likes": self.likes,
            "comments": self.comments,
            "liked": self.liked,
        }
