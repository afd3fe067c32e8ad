"""Data ingestion layer - Solana wallet history and token metadata."""

from crypt_cards.ingestor.helius import (
    HeliusClient,
    HeliusClientError,
    HeliusDecodeError,
    HeliusHTTPError,
    HistoryProvider,
)
from crypt_cards.ingestor.models import (
    NativeTransfer,
    RawTransaction,
    TokenTransfer,
    TxType,
)
from crypt_cards.ingestor.tokens import TokenInfo, lookup_token

__all__ = [
    "HeliusClient",
    "HeliusClientError",
    "HeliusDecodeError",
    "HeliusHTTPError",
    "HistoryProvider",
    "NativeTransfer",
    "RawTransaction",
    "TokenInfo",
    "TokenTransfer",
    "TxType",
    "lookup_token",
]
