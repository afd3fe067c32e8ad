"""Tests for the wallet scan pipeline."""

import random
from collections import Counter
from unittest.mock import AsyncMock

import pytest

from crypt_cards.cards.formatter import UNKNOWN_DATE
from crypt_cards.config import ScanSettings, Settings
from crypt_cards.ingestor.helius import HeliusClient, HeliusHTTPError
from crypt_cards.pipeline import (
    WalletScanner,
    rank_transactions,
    select_story_transactions,
)


@pytest.fixture
def provider() -> AsyncMock:
    provider = AsyncMock()
    provider.get_history.return_value = []
    return provider


@pytest.fixture
def scanner(provider) -> WalletScanner:
    return WalletScanner(provider, scan_settings=ScanSettings(), rng=random.Random(0))


def diverse_history(make_tx) -> list:
    """Four positive transactions each of five types."""
    kinds = [
        ("SWAP", {"sent": 20.0}),
        ("TRANSFER", {"sent": 30.0}),
        ("NFT_MINT", {}),
        ("STAKE_SOL", {"sent": 30.0}),
        ("TOKEN_MINT", {}),
    ]
    return [
        make_tx(tx_type, signature=f"{tx_type}-{i}", **kwargs)
        for tx_type, kwargs in kinds
        for i in range(4)
    ]


class TestRankTransactions:
    """Tests for rank_transactions."""

    def test_descending(self, make_tx, wallet) -> None:
        txs = [
            make_tx("TRANSFER", signature="small", sent=6.0),
            make_tx("TOKEN_MINT", signature="creator"),
            make_tx("SWAP", signature="whale", sent=200.0),
        ]
        ranked = rank_transactions(txs, wallet)
        assert [s.tx.signature for s in ranked] == ["whale", "creator", "small"]

    def test_ties_keep_provider_order(self, make_tx, wallet) -> None:
        txs = [make_tx("NFT_MINT", signature=f"mint-{i}") for i in range(5)]
        ranked = rank_transactions(txs, wallet)
        assert [s.tx.signature for s in ranked] == [f"mint-{i}" for i in range(5)]


class TestSelectStoryTransactions:
    """Tests for select_story_transactions."""

    def test_diversity_cap(self, make_tx, wallet) -> None:
        selection = select_story_transactions(rank_transactions(diverse_history(make_tx), wallet))

        assert not selection.relaxed
        assert len(selection.transactions) == 8
        counts = Counter(tx.type for tx in selection.transactions)
        assert max(counts.values()) <= 2

    def test_relaxed_pass_ignores_cap(self, make_tx, wallet) -> None:
        txs = [make_tx("SWAP", signature=f"swap-{i}", sent=20.0) for i in range(10)]
        selection = select_story_transactions(rank_transactions(txs, wallet))

        assert selection.relaxed
        assert len(selection.transactions) == 6
        assert len({tx.signature for tx in selection.transactions}) == 6

    def test_relaxed_pass_keeps_primary_first(self, make_tx, wallet) -> None:
        txs = [make_tx("SWAP", signature=f"swap-{i}", sent=20.0) for i in range(4)]
        txs.append(make_tx("TOKEN_MINT", signature="creator"))
        selection = select_story_transactions(rank_transactions(txs, wallet))

        # Primary admits the top two swaps and the token mint, relaxed adds the rest.
        assert [tx.signature for tx in selection.transactions] == [
            "swap-0",
            "swap-1",
            "creator",
            "swap-2",
            "swap-3",
        ]

    def test_non_positive_scores_excluded(self, make_tx, wallet) -> None:
        txs = [
            make_tx("", signature="empty"),
            make_tx("TRANSFER", signature="tiny", sent=1.0),
            make_tx("SWAP", signature="dust", sent=0.001),
            make_tx("NFT_MINT", signature="mint"),
        ]
        selection = select_story_transactions(rank_transactions(txs, wallet))
        assert [tx.signature for tx in selection.transactions] == ["mint"]

    def test_duplicate_signatures_selected_once(self, make_tx, wallet) -> None:
        txs = [
            make_tx("SWAP", signature="a", sent=20.0),
            make_tx("SWAP", signature="b", sent=20.0),
            make_tx("SWAP", signature="a", sent=20.0),
        ]
        selection = select_story_transactions(rank_transactions(txs, wallet))
        assert [tx.signature for tx in selection.transactions] == ["a", "b"]

    def test_unsigned_transactions_are_distinct(self, make_tx, wallet) -> None:
        txs = [make_tx("SWAP", signature="", sent=20.0) for _ in range(4)]
        selection = select_story_transactions(rank_transactions(txs, wallet))
        assert len(selection.transactions) == 4

    def test_empty_type_counts_as_unknown(self, make_tx, wallet) -> None:
        txs = [make_tx("UNKNOWN", signature=f"u-{i}", sent=1.0) for i in range(3)]
        txs += [make_tx("", signature=f"e-{i}", sent=1.0) for i in range(3)]
        scored = rank_transactions(txs, wallet)
        assert all(s.score < 0 for s in scored)
        assert [s.tx.diversity_key for s in scored] == ["UNKNOWN"] * 6

    def test_custom_limits(self, make_tx, wallet) -> None:
        selection = select_story_transactions(
            rank_transactions(diverse_history(make_tx), wallet),
            max_per_type=1,
            max_cards=3,
            relax_below=0,
        )
        assert len(selection.transactions) == 3
        assert len({tx.type for tx in selection.transactions}) == 3


class TestWalletScanner:
    """Tests for WalletScanner.scan."""

    @pytest.mark.asyncio
    async def test_empty_history(self, scanner, provider, wallet) -> None:
        assert await scanner.scan(wallet) == []
        assert scanner.stats.scans == 1
        assert scanner.stats.errors == 0

    @pytest.mark.asyncio
    async def test_provider_failure_yields_empty(self, scanner, provider, wallet) -> None:
        provider.get_history.side_effect = HeliusHTTPError(500, "boom")

        assert await scanner.scan(wallet) == []
        assert scanner.stats.errors == 1
        assert "500" in scanner.stats.last_error

    @pytest.mark.asyncio
    async def test_nothing_story_worthy(self, scanner, provider, make_tx, wallet) -> None:
        provider.get_history.return_value = [make_tx("", signature=f"e{i}") for i in range(5)]
        assert await scanner.scan(wallet) == []

    @pytest.mark.asyncio
    async def test_builds_ranked_cards(self, scanner, provider, make_tx, wallet) -> None:
        provider.get_history.return_value = diverse_history(make_tx)

        cards = await scanner.scan(wallet, now=1_700_000_000)

        assert [c.id for c in cards] == list(range(1, 9))
        scores = [c.score for c in cards]
        assert scores == sorted(scores, reverse=True)
        assert all(c.likes >= 100 and c.comments >= 10 for c in cards)
        assert scanner.stats.cards_built == 8
        assert scanner.stats.transactions_scored == 20
        provider.get_history.assert_awaited_once_with(wallet, 100)

    @pytest.mark.asyncio
    async def test_unrepresentable_timestamp_does_not_abort_scan(
        self, scanner, provider, make_tx, wallet
    ) -> None:
        history = diverse_history(make_tx)
        history[0] = make_tx(
            "SWAP", signature="ms-clock", timestamp=1_700_000_000_000_000, sent=420.0
        )
        provider.get_history.return_value = history

        cards = await scanner.scan(wallet, now=1_700_000_000)

        assert len(cards) == 8
        broken = next(c for c in cards if c.full_tx == "ms-clock")
        assert broken.date == UNKNOWN_DATE
        assert broken.ago == "0m"

    @pytest.mark.asyncio
    async def test_relaxed_scan_is_counted(self, scanner, provider, make_tx, wallet) -> None:
        provider.get_history.return_value = [
            make_tx("SWAP", signature=f"s{i}", sent=20.0) for i in range(3)
        ]
        cards = await scanner.scan(wallet)
        assert len(cards) == 3
        assert scanner.stats.relaxed_scans == 1

    @pytest.mark.asyncio
    async def test_history_limit(self, provider, wallet) -> None:
        scanner = WalletScanner(provider, scan_settings=ScanSettings(), history_limit=25)
        await scanner.scan(wallet)
        provider.get_history.assert_awaited_once_with(wallet, 25)

    @pytest.mark.asyncio
    async def test_from_settings(self) -> None:
        scanner = WalletScanner.from_settings(Settings())
        assert isinstance(scanner.provider, HeliusClient)
        assert scanner.history_limit == 100
        await scanner.close()
