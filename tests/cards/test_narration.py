"""Tests for narration templates."""

import random

import pytest

from crypt_cards.cards.narration import (
    NARRATION_RULES,
    TEMPLATES,
    NarrationContext,
    build_narration,
    select_category,
)
from crypt_cards.ingestor.models import TxType

CTX = NarrationContext(
    sol=12.5, net=-12.5, src="JUPITER", in_amt="12.50", in_tk="SOL", out_amt="1.0M", out_tk="BONK"
)


def test_every_type_has_rules() -> None:
    assert set(NARRATION_RULES) == set(TxType)


def test_every_rule_category_has_templates() -> None:
    for rules in NARRATION_RULES.values():
        for _, category in rules:
            assert TEMPLATES[category]
    assert TEMPLATES["default"]


@pytest.mark.parametrize("category", sorted(TEMPLATES))
def test_templates_format(category: str) -> None:
    for template in TEMPLATES[category]:
        text = template.format(**CTX.fields())
        assert "{" not in text


@pytest.mark.parametrize(
    "tx_type,tags,expected",
    [
        (TxType.SWAP, ("whale", "memecoin"), "swap_whale"),
        (TxType.SWAP, ("memecoin",), "swap_memecoin"),
        (TxType.SWAP, ("big",), "swap_big"),
        (TxType.SWAP, (), "swap_small"),
        (TxType.NFT_MINT, ("premium_mint",), "nft_mint_premium"),
        (TxType.COMPRESSED_NFT_MINT, ("free_mint",), "nft_mint"),
        (TxType.NFT_SALE, ("big_sale",), "nft_sale_whale"),
        (TxType.TRANSFER, ("massive",), "transfer_massive"),
        (TxType.SOL_TRANSFER, ("whale_move",), "transfer_big"),
        (TxType.TRANSFER, (), "transfer_out"),
        (TxType.STAKE_SOL, ("whale_stake",), "whale_stake"),
        (TxType.UNSTAKE_SOL, (), "unstake"),
        (TxType.TOKEN_MINT, ("creator",), "token_create"),
        (TxType.BURN_NFT, ("burn",), "burn"),
        (TxType.OTHER, (), "default"),
        (TxType.NONE, (), "default"),
    ],
)
def test_select_category(tx_type: TxType, tags: tuple[str, ...], expected: str) -> None:
    assert select_category(tx_type, tags, CTX) == expected


def test_incoming_transfer() -> None:
    ctx = NarrationContext(sol=1.0, net=1.0, src="", in_amt="", in_tk="", out_amt="", out_tk="")
    assert select_category(TxType.TRANSFER, (), ctx) == "transfer_in"


def test_build_narration_interpolates() -> None:
    text = build_narration(TxType.SWAP, ("memecoin",), CTX, rng=random.Random(0))
    assert text in {t.format(**CTX.fields()) for t in TEMPLATES["swap_memecoin"]}


def test_build_narration_seeded() -> None:
    a = build_narration(TxType.SWAP, ("whale",), CTX, rng=random.Random(4))
    b = build_narration(TxType.SWAP, ("whale",), CTX, rng=random.Random(4))
    assert a == b
