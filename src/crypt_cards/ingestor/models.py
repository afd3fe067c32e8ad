"""Data models for the ingestor module."""

from __future__ import annotations

import contextlib
from dataclasses import dataclass
from enum import Enum
from typing import Any

LAMPORTS_PER_SOL = 1_000_000_000


class TxType(str, Enum):
    """Closed set of enhanced-transaction types the scorer understands.

    ``NONE`` stands for a missing or empty type string and ``OTHER`` for
    any non-empty string outside the known set.
    """

    SWAP = "SWAP"
    NFT_MINT = "NFT_MINT"
    COMPRESSED_NFT_MINT = "COMPRESSED_NFT_MINT"
    NFT_SALE = "NFT_SALE"
    NFT_LISTING = "NFT_LISTING"
    TRANSFER = "TRANSFER"
    SOL_TRANSFER = "SOL_TRANSFER"
    STAKE_SOL = "STAKE_SOL"
    UNSTAKE_SOL = "UNSTAKE_SOL"
    TOKEN_MINT = "TOKEN_MINT"
    BURN = "BURN"
    BURN_NFT = "BURN_NFT"
    UNKNOWN = "UNKNOWN"
    NONE = ""
    OTHER = "OTHER"

    @classmethod
    def parse(cls, raw: str | None) -> TxType:
        """Map a raw provider type string onto the closed enum."""
        if not raw:
            return cls.NONE
        if raw == cls.OTHER.value:
            return cls.OTHER
        try:
            return cls(raw)
        except ValueError:
            return cls.OTHER


MINT_TYPES = frozenset({TxType.NFT_MINT, TxType.COMPRESSED_NFT_MINT})
TRANSFER_TYPES = frozenset({TxType.TRANSFER, TxType.SOL_TRANSFER})
STAKE_TYPES = frozenset({TxType.STAKE_SOL, TxType.UNSTAKE_SOL})
BURN_TYPES = frozenset({TxType.BURN, TxType.BURN_NFT})
NFT_TYPES = frozenset(
    {TxType.NFT_MINT, TxType.NFT_SALE, TxType.COMPRESSED_NFT_MINT, TxType.BURN_NFT}
)


def _to_float(value: Any) -> float:
    with contextlib.suppress(TypeError, ValueError, OverflowError):
        return float(value)
    return 0.0


def _to_int(value: Any) -> int:
    with contextlib.suppress(TypeError, ValueError, OverflowError):
        return int(value)
    return 0


def _to_str(value: Any) -> str:
    return value if isinstance(value, str) else ""


def _as_list(value: Any) -> list[Any]:
    return value if isinstance(value, list) else []


@dataclass(frozen=True)
class NativeTransfer:
    """A SOL transfer leg, amount in lamports."""

    from_user_account: str
    to_user_account: str
    amount: int

    @property
    def amount_sol(self) -> float:
        """Return the absolute amount in SOL."""
        return abs(self.amount) / LAMPORTS_PER_SOL

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> NativeTransfer:
        """Create a NativeTransfer from a provider dictionary."""
        return cls(
            from_user_account=_to_str(data.get("fromUserAccount")),
            to_user_account=_to_str(data.get("toUserAccount")),
            amount=_to_int(data.get("amount")),
        )


@dataclass(frozen=True)
class TokenTransfer:
    """An SPL token transfer leg, amount in UI units."""

    from_user_account: str
    to_user_account: str
    mint: str
    token_amount: float

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TokenTransfer:
        """Create a TokenTransfer from a provider dictionary."""
        return cls(
            from_user_account=_to_str(data.get("fromUserAccount")),
            to_user_account=_to_str(data.get("toUserAccount")),
            mint=_to_str(data.get("mint")),
            token_amount=_to_float(data.get("tokenAmount")),
        )


@dataclass(frozen=True)
class RawTransaction:
    """An enhanced transaction as returned by the chain history provider.

    Attributes:
        type: Raw provider type string (may be empty).
        source: Venue or program label (may be empty).
        signature: Base58 transaction signature.
        timestamp: Block time in epoch seconds.
        native_transfers: SOL legs.
        token_transfers: SPL token legs.
    """

    type: str
    source: str
    signature: str
    timestamp: int
    native_transfers: tuple[NativeTransfer, ...] = ()
    token_transfers: tuple[TokenTransfer, ...] = ()

    @property
    def tx_type(self) -> TxType:
        """Return the transaction type as a closed enum."""
        return TxType.parse(self.type)

    @property
    def diversity_key(self) -> str:
        """Return the key used by the per-type selection cap."""
        return self.type or TxType.UNKNOWN.value

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RawTransaction:
        """Create a RawTransaction from a provider dictionary.

        Missing arrays become empty, missing numbers zero and missing
        strings empty, so malformed records route to fallback branches.
        """
        native = tuple(
            NativeTransfer.from_dict(t)
            for t in _as_list(data.get("nativeTransfers"))
            if isinstance(t, dict)
        )
        tokens = tuple(
            TokenTransfer.from_dict(t)
            for t in _as_list(data.get("tokenTransfers"))
            if isinstance(t, dict)
        )
        return cls(
            type=_to_str(data.get("type")),
            source=_to_str(data.get("source")),
            signature=_to_str(data.get("signature")),
            timestamp=_to_int(data.get("timestamp")),
            native_transfers=native,
            token_transfers=tokens,
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize back to the provider's wire shape."""
        return {
            "type": self.type,
            "source": self.source,
            "signature": self.signature,
            "timestamp": self.timestamp,
            "nativeTransfers": [
                {
                    "fromUserAccount": t.from_user_account,
                    "toUserAccount": t.to_user_account,
                    "amount": t.amount,
                }
                for t in self.native_transfers
            ],
            "tokenTransfers": [
                {
                    "fromUserAccount": t.from_user_account,
                    "toUserAccount": t.to_user_account,
                    "mint": t.mint,
                    "tokenAmount": t.token_amount,
                }
                for t in self.token_transfers
            ],
        }
