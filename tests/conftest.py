"""Pytest configuration and fixtures."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from crypt_cards.config import clear_settings_cache
from crypt_cards.ingestor.models import (
    LAMPORTS_PER_SOL,
    NativeTransfer,
    RawTransaction,
    TokenTransfer,
)

WALLET = "9WzDXwBbmkg8ZTbNMqUxvQRAyrZzDsGYdLVL9zYtAWWM"
OTHER = "7xKXtg2CW87d97TXJSDpbD5jBkheTqA83TZRuJosgAsU"
BONK_MINT = "DezXAZ8z7PnrnRJjz3wXBoRgixCa6xjnB7YaB1pPB263"


@pytest.fixture(autouse=True)
def _reset_settings_cache():
    """Keep cached settings from leaking between tests."""
    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture
def wallet() -> str:
    """Address of the scanned wallet."""
    return WALLET


@pytest.fixture
def other_wallet() -> str:
    """A counterparty address."""
    return OTHER


@pytest.fixture
def bonk_mint() -> str:
    return BONK_MINT


@pytest.fixture
def make_tx() -> Callable[..., RawTransaction]:
    """Factory for raw transactions.

    ``sent`` and ``received`` are SOL amounts leaving or reaching the
    scanned wallet; ``tokens_in`` is a list of (mint, amount) received.
    """

    def _make(
        tx_type: str = "SWAP",
        *,
        source: str = "JUPITER",
        signature: str = "5sig",
        timestamp: int = 1_700_000_000,
        sent: float = 0.0,
        received: float = 0.0,
        tokens_in: list[tuple[str, float]] | None = None,
        tokens_out: list[tuple[str, float]] | None = None,
    ) -> RawTransaction:
        native = []
        if sent:
            native.append(NativeTransfer(WALLET, OTHER, round(sent * LAMPORTS_PER_SOL)))
        if received:
            native.append(NativeTransfer(OTHER, WALLET, round(received * LAMPORTS_PER_SOL)))
        tokens = [TokenTransfer(WALLET, OTHER, mint, amt) for mint, amt in tokens_out or []]
        tokens += [TokenTransfer(OTHER, WALLET, mint, amt) for mint, amt in tokens_in or []]
        return RawTransaction(
            type=tx_type,
            source=source,
            signature=signature,
            timestamp=timestamp,
            native_transfers=tuple(native),
            token_transfers=tuple(tokens),
        )

    return _make
