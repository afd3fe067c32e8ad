"""Tests for the card builder."""

import random

import pytest

from crypt_cards.cards.builder import build_card, classify_rarity
from crypt_cards.cards.models import CardType, Rarity
from crypt_cards.detector.models import ScoreResult

NOW = 1_700_000_000 + 2 * 86_400


class TestClassifyRarity:
    """Tests for classify_rarity."""

    @pytest.mark.parametrize(
        "sol,tags,expected",
        [
            (150.0, (), Rarity.LEGENDARY),
            (1.0, ("creator",), Rarity.LEGENDARY),
            (1.0, ("massive",), Rarity.LEGENDARY),
            (15.0, (), Rarity.RARE),
            (1.0, ("memecoin",), Rarity.RARE),
            (1.0, ("premium_mint",), Rarity.RARE),
            (1.0, ("solid",), Rarity.COMMON),
            (10.0, (), Rarity.COMMON),
        ],
    )
    def test_tiers(self, sol: float, tags: tuple[str, ...], expected: Rarity) -> None:
        assert classify_rarity(ScoreResult(score=10, tags=tags, sol=sol, net=0.0)) is expected

    def test_monotonic_in_magnitude(self, make_tx, wallet) -> None:
        previous = Rarity.COMMON
        for sol in (0.5, 3, 8, 12, 25, 60, 99, 120, 600, 10_000):
            card = build_card(make_tx("TRANSFER", sent=sol), wallet, 0)
            assert card.rarity >= previous
            previous = card.rarity


class TestBuildCard:
    """Tests for build_card."""

    def test_massive_transfer(self, make_tx, wallet) -> None:
        tx = make_tx("TRANSFER", source="SYSTEM_PROGRAM", sent=10_000.0, signature="5VERv8NMvzbJMEkV8xnr")
        card = build_card(tx, wallet, 0, rng=random.Random(0), now=NOW)

        assert card.id == 1
        assert card.type is CardType.BIG_MOVE
        assert card.rarity is Rarity.LEGENDARY
        assert "massive" in card.tags
        assert card.title == "SENT 10.0K SOL"
        assert card.pnl == "SENT"
        assert card.up is False
        assert card.usd == "~10.0K SOL"
        assert card.platform == "SYSTEM_PROGRAM"

    def test_received_transfer_is_up(self, make_tx, wallet) -> None:
        card = build_card(make_tx("TRANSFER", received=30.0), wallet, 0)
        assert card.pnl == "RECEIVED"
        assert card.up is True
        assert card.title == "RECEIVED 30.00 SOL"

    def test_memecoin_swap(self, make_tx, wallet, bonk_mint) -> None:
        tx = make_tx("SWAP", sent=420.0, tokens_in=[(bonk_mint, 25_000_000.0)])
        card = build_card(tx, wallet, 2, now=NOW)

        assert card.id == 3
        assert card.type is CardType.SWAP
        assert card.rarity is Rarity.LEGENDARY
        assert card.t_in.symbol == "SOL"
        assert card.t_in.amount == "420.00"
        assert card.t_out.symbol == "BONK"
        assert card.t_out.amount == "25.0M"
        assert card.title == "420.00 SOL → BONK"
        assert card.score == 135

    def test_profitable_sale(self, make_tx, wallet) -> None:
        card = build_card(make_tx("NFT_SALE", source="MAGIC_EDEN", received=60.0), wallet, 0)
        assert card.type is CardType.SWAP
        assert card.pnl == "+60.00"
        assert card.nft is True
        assert card.up is True

    def test_losing_sale(self, make_tx, wallet) -> None:
        card = build_card(make_tx("NFT_SALE", source="", sent=3.0), wallet, 0)
        assert card.type is CardType.BIG_MOVE
        assert card.pnl == "3.00"

    def test_free_mint(self, make_tx, wallet) -> None:
        card = build_card(make_tx("NFT_MINT", source="MAGIC_EDEN"), wallet, 0)
        assert card.type is CardType.MINT
        assert card.title == "FREE MINT"
        assert card.usd == ""

    def test_stake(self, make_tx, wallet) -> None:
        card = build_card(make_tx("STAKE_SOL", source="MARINADE", sent=25.0), wallet, 0)
        assert card.type is CardType.DIAMOND_HANDS
        assert card.pnl == "LOCKED"

    def test_burn(self, make_tx, wallet) -> None:
        card = build_card(make_tx("BURN", source=""), wallet, 0)
        assert card.type is CardType.RUG
        assert card.platform == "BURN"

    def test_generic_type(self, make_tx, wallet) -> None:
        card = build_card(make_tx("ADD_LIQUIDITY", source="", sent=2.0), wallet, 0)
        assert card.type is CardType.SWAP
        assert card.title == "ADD_LIQUIDITY via SOLANA"
        assert card.pnl == "2.00 SOL"

    def test_display_fields(self, make_tx, wallet) -> None:
        tx = make_tx("TRANSFER", sent=30.0, signature="5VERv8NMvzbJMEkV8xnrLkEa")
        card = build_card(tx, wallet, 0, now=NOW)

        assert card.user.name == f"{wallet[:8]}.sol"
        assert card.user.addr == "9WzD...AWWM"
        assert card.tx == "5VERv...LkEa"
        assert card.full_tx == "5VERv8NMvzbJMEkV8xnrLkEa"
        assert card.date == "XI.14.2023"
        assert card.ago == "2d"
        assert card.timestamp == 1_700_000_000

    def test_social_counters_start_at_zero(self, make_tx, wallet) -> None:
        card = build_card(make_tx(), wallet, 0)
        assert (card.likes, card.comments, card.liked) == (0, 0, False)

    def test_deterministic_given_rng(self, make_tx, wallet, bonk_mint) -> None:
        tx = make_tx("SWAP", sent=20.0, tokens_in=[(bonk_mint, 1.0)])
        a = build_card(tx, wallet, 0, rng=random.Random(7), now=NOW)
        b = build_card(tx, wallet, 0, rng=random.Random(7), now=NOW)
        assert a == b
