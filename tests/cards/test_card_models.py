"""Tests for card data models."""

import pytest

from crypt_cards.cards.models import Card, CardType, CardUser, Rarity, TokenFlow


def make_card(**overrides) -> Card:
    fields = {
        "id": 1,
        "type": CardType.SWAP,
        "rarity": Rarity.RARE,
        "title": "20.00 SOL → BONK",
        "narration": "Aped in.",
        "user": CardUser("9WzDXwBb.sol", "9WzD...AWWM"),
        "platform": "JUPITER",
        "date": "XI.14.2023",
        "t_in": TokenFlow("SOL", "20.00", "◎"),
        "t_out": TokenFlow("BONK", "1.0M", "$"),
        "pnl": "SWAPPED",
        "up": False,
        "usd": "~20.00 SOL",
        "tx": "5VERv...LkEa",
        "full_tx": "5VERv8NMvzbJMEkV8xnrLkEa",
        "nft": False,
        "ago": "2d",
        "timestamp": 1_700_000_000,
    }
    fields.update(overrides)
    return Card(**fields)


class TestRarity:
    """Tests for rarity ordering."""

    def test_ordering(self) -> None:
        assert Rarity.COMMON < Rarity.RARE < Rarity.LEGENDARY
        assert Rarity.LEGENDARY >= Rarity.RARE
        assert Rarity.RARE <= Rarity.RARE
        assert max(Rarity) is Rarity.LEGENDARY

    def test_rank(self) -> None:
        assert [r.rank for r in (Rarity.COMMON, Rarity.RARE, Rarity.LEGENDARY)] == [0, 1, 2]

    def test_comparison_with_other_types(self) -> None:
        with pytest.raises(TypeError):
            Rarity.RARE < 3  # noqa: B015

    @pytest.mark.parametrize("other", ["rare", "legendary", "common"])
    def test_comparison_with_strings_raises(self, other: str) -> None:
        with pytest.raises(TypeError):
            Rarity.LEGENDARY > other  # noqa: B015
        with pytest.raises(TypeError):
            Rarity.COMMON < other  # noqa: B015

    def test_equality_with_value_still_works(self) -> None:
        assert Rarity.RARE == "rare"


class TestCard:
    """Tests for Card."""

    def test_toggle_like(self) -> None:
        card = make_card(likes=10)
        assert card.toggle_like() is True
        assert card.likes == 11
        assert card.toggle_like() is False
        assert card.likes == 10

    def test_to_dict(self) -> None:
        data = make_card(tags=("big",), score=60).to_dict()
        assert data["type"] == "swap"
        assert data["rarity"] == "rare"
        assert data["user"] == {"name": "9WzDXwBb.sol", "addr": "9WzD...AWWM"}
        assert data["t_out"] == {"symbol": "BONK", "amount": "1.0M", "icon": "$"}
        assert data["tags"] == ["big"]
        assert data["liked"] is False
