"""Tests for the transaction scorer."""

import pytest

from crypt_cards.cards.builder import classify_rarity
from crypt_cards.cards.models import Rarity
from crypt_cards.detector.scorer import (
    DUST_PENALTY,
    EMPTY_TYPE_PENALTY,
    UNKNOWN_TYPE_PENALTY,
    get_net_sol,
    get_sol,
    score_transaction,
)
from crypt_cards.ingestor.models import NativeTransfer, RawTransaction


class TestMagnitudes:
    """Tests for get_sol and get_net_sol."""

    def test_largest_leg_wins(self, make_tx) -> None:
        tx = make_tx("TRANSFER", sent=3.0, received=5.0)
        assert get_sol(tx) == pytest.approx(5.0)

    def test_net_is_signed(self, make_tx, wallet) -> None:
        tx = make_tx("TRANSFER", sent=3.0, received=5.0)
        assert get_net_sol(tx, wallet) == pytest.approx(2.0)

    def test_self_transfer_nets_to_zero(self, wallet) -> None:
        tx = RawTransaction("TRANSFER", "", "s", 0, (NativeTransfer(wallet, wallet, 10**9),))
        assert get_net_sol(tx, wallet) == 0.0

    def test_no_transfers(self, make_tx, wallet) -> None:
        tx = make_tx("SWAP")
        assert get_sol(tx) == 0.0
        assert get_net_sol(tx, wallet) == 0.0


class TestSwap:
    """Tests for swap scoring."""

    def test_whale_memecoin_swap(self, make_tx, wallet, bonk_mint) -> None:
        tx = make_tx("SWAP", source="JUPITER", sent=420.0, tokens_in=[(bonk_mint, 25_000_000.0)])
        result = score_transaction(tx, wallet)

        assert result.score >= 130
        assert result.score == 25 + 80 + 5 + 25
        assert result.tags == ("whale", "memecoin")
        assert result.sol == pytest.approx(420.0)
        assert result.net == pytest.approx(-420.0)
        assert classify_rarity(result) is Rarity.LEGENDARY

    def test_threshold_is_strict(self, make_tx, wallet) -> None:
        # Exactly 100 SOL falls through to the next tier.
        result = score_transaction(make_tx("SWAP", source="", sent=100.0), wallet)
        assert result.score == 25 + 60
        assert result.tags == ("whale",)

    @pytest.mark.parametrize(
        "sol,delta,tags",
        [
            (150.0, 80, ("whale",)),
            (60.0, 60, ("whale",)),
            (20.0, 35, ("big",)),
            (5.0, 15, ("solid",)),
            (1.0, 5, ()),
            (0.2, -5, ()),
        ],
    )
    def test_size_tiers(self, make_tx, wallet, sol, delta, tags) -> None:
        result = score_transaction(make_tx("SWAP", source="", sent=sol), wallet)
        assert result.score == 25 + delta
        assert result.tags == tags

    def test_memecoin_bonus_per_leg(self, make_tx, wallet, bonk_mint) -> None:
        tx = make_tx(
            "SWAP",
            source="",
            sent=1.0,
            tokens_in=[(bonk_mint, 1.0)],
            tokens_out=[(bonk_mint, 1.0)],
        )
        result = score_transaction(tx, wallet)
        assert result.tags.count("memecoin") == 2
        assert result.factors["memecoin"] == 50

    def test_dust_swap(self, make_tx, wallet) -> None:
        result = score_transaction(make_tx("SWAP", source="JUPITER", sent=0.005), wallet)
        assert result.score == 25 - 5 + 5 + DUST_PENALTY
        assert not result.is_story_worthy


class TestOtherTypes:
    """Tests for the remaining type rules."""

    def test_whale_sale_with_profit(self, make_tx, wallet) -> None:
        tx = make_tx("NFT_SALE", source="MAGIC_EDEN", received=60.0)
        result = score_transaction(tx, wallet)
        assert result.score == 120
        assert result.tags == ("whale_sale", "profit")
        assert classify_rarity(result) is Rarity.RARE

    def test_sale_at_a_loss_gets_no_profit_bonus(self, make_tx, wallet) -> None:
        result = score_transaction(make_tx("NFT_SALE", source="", sent=3.0), wallet)
        assert result.score == 30 + 15
        assert "profit" not in result.tags

    @pytest.mark.parametrize(
        "sol,score,tag",
        [(10_000.0, 80, "massive"), (150.0, 55, "whale_move"), (30.0, 25, "big_move"), (6.0, 10, None)],
    )
    def test_transfer_tiers(self, make_tx, wallet, sol, score, tag) -> None:
        result = score_transaction(make_tx("TRANSFER", source="", sent=sol), wallet)
        assert result.score == score
        assert result.tags == ((tag,) if tag else ())

    def test_small_transfer_is_negative(self, make_tx, wallet) -> None:
        result = score_transaction(make_tx("SOL_TRANSFER", source="", received=1.0), wallet)
        assert result.score == -15

    def test_free_mint_is_dust_exempt(self, make_tx, wallet) -> None:
        result = score_transaction(make_tx("NFT_MINT", source=""), wallet)
        assert result.score == 35
        assert result.tags == ("free_mint",)

    def test_premium_mint(self, make_tx, wallet) -> None:
        result = score_transaction(make_tx("COMPRESSED_NFT_MINT", source="", sent=12.0), wallet)
        assert result.score == 35 + 40
        assert result.tags == ("premium_mint",)

    def test_stake(self, make_tx, wallet) -> None:
        result = score_transaction(make_tx("STAKE_SOL", source="", sent=150.0), wallet)
        assert result.score == 50
        assert result.tags == ("whale_stake",)

    def test_token_mint(self, make_tx, wallet) -> None:
        result = score_transaction(make_tx("TOKEN_MINT", source=""), wallet)
        assert result.score == 50
        assert classify_rarity(result) is Rarity.LEGENDARY

    def test_burn(self, make_tx, wallet) -> None:
        result = score_transaction(make_tx("BURN_NFT", source=""), wallet)
        assert result.score == 20
        assert result.tags == ("burn",)

    def test_high_listing(self, make_tx, wallet) -> None:
        result = score_transaction(make_tx("NFT_LISTING", source="", received=25.0), wallet)
        assert result.score == 30
        assert result.tags == ("high_listing",)


class TestUnknownTypes:
    """Tests for unknown, empty and unrecognized types."""

    def test_empty_type_takes_both_penalties(self, make_tx, wallet) -> None:
        result = score_transaction(make_tx("", source=""), wallet)
        assert result.score == UNKNOWN_TYPE_PENALTY + EMPTY_TYPE_PENALTY + DUST_PENALTY == -75
        assert result.tags == ()

    def test_unknown_type(self, make_tx, wallet) -> None:
        result = score_transaction(make_tx("UNKNOWN", source=""), wallet)
        assert result.score == UNKNOWN_TYPE_PENALTY + DUST_PENALTY

    def test_unrecognized_type_gets_no_type_penalty(self, make_tx, wallet) -> None:
        result = score_transaction(make_tx("ADD_LIQUIDITY", source=""), wallet)
        assert result.score == DUST_PENALTY
        result = score_transaction(make_tx("ADD_LIQUIDITY", source="", sent=1.0), wallet)
        assert result.score == 0


class TestScoreResult:
    """Properties of every score result."""

    @pytest.mark.parametrize(
        "tx_type", ["SWAP", "NFT_SALE", "TRANSFER", "STAKE_SOL", "NFT_MINT", "", "UNKNOWN", "BURN"]
    )
    def test_factors_sum_to_score(self, make_tx, wallet, bonk_mint, tx_type) -> None:
        tx = make_tx(tx_type, sent=7.5, tokens_in=[(bonk_mint, 1.0)])
        result = score_transaction(tx, wallet)
        assert sum(result.factors.values()) == result.score

    def test_pure(self, make_tx, wallet, bonk_mint) -> None:
        tx = make_tx("SWAP", sent=42.0, tokens_in=[(bonk_mint, 1.0)])
        assert score_transaction(tx, wallet) == score_transaction(tx, wallet)

    def test_to_dict(self, make_tx, wallet) -> None:
        data = score_transaction(make_tx("TRANSFER", source="", sent=30.0), wallet).to_dict()
        assert data["score"] == 25
        assert data["tags"] == ["big_move"]
        assert data["factors"] == {"transfer_size": 25}
