"""Mint metadata for cards.

Two shapes are produced from a card:
- NFT-style JSON metadata (name, attributes, soundtrack properties)
- The compact memo payload written on-chain by the memo recorder
"""

from __future__ import annotations

import json
from typing import Any

from crypt_cards.audio.audius import Track
from crypt_cards.cards.models import Card
from crypt_cards.soul.seed import soul_seed_hex

COLLECTION_SYMBOL = "CRYPT"
PROTOCOL = "CRYPT"
PROTOCOL_VERSION = 1
MINT_ACTION = "MINT_CARD"
DEFAULT_EXTERNAL_URL = "https://crypt-phi-two.vercel.app"
DEFAULT_DESCRIPTION = "A resurrected blockchain moment."


def card_tx_hash(card: Card) -> str:
    """Return the full signature, falling back to the shortened one."""
    return card.full_tx or card.tx


def build_card_metadata(
    card: Card,
    soundtrack: Track | None = None,
    artwork_url: str | None = None,
    *,
    external_url: str = DEFAULT_EXTERNAL_URL,
) -> dict[str, Any]:
    """Build NFT-style metadata for a card.

    Args:
        card: Card being minted.
        soundtrack: Track assigned to the card, if any.
        artwork_url: Rendered artwork location, if uploaded.
        external_url: Link back to the app.

    Returns:
        JSON-serializable metadata dictionary.
    """
    files = [{"uri": artwork_url, "type": "image/png"}] if artwork_url else []
    return {
        "name": f"{COLLECTION_SYMBOL} #{card.id} - {card.title}",
        "symbol": COLLECTION_SYMBOL,
        "description": card.narration or DEFAULT_DESCRIPTION,
        "image": artwork_url or "",
        "external_url": external_url,
        "attributes": [
            {"trait_type": "Type", "value": card.type.value},
            {"trait_type": "Rarity", "value": card.rarity.value},
            {"trait_type": "Platform", "value": card.platform},
            {"trait_type": "PnL", "value": card.pnl or "N/A"},
            {"trait_type": "Transaction", "value": card_tx_hash(card)},
        ],
        "properties": {
            "category": "image",
            "files": files,
            "soundtrack": (
                {
                    "title": soundtrack.title,
                    "artist": soundtrack.artist,
                    "audius_id": soundtrack.id,
                }
                if soundtrack
                else None
            ),
        },
    }


def build_memo_payload(card: Card, minted_by: str, timestamp_ms: int) -> dict[str, Any]:
    """Build the on-chain memo payload for a card mint.

    Args:
        card: Card being minted.
        minted_by: Base58 address of the minting wallet.
        timestamp_ms: Mint time in epoch milliseconds.
    """
    tx_hash = card_tx_hash(card)
    return {
        "protocol": PROTOCOL,
        "version": PROTOCOL_VERSION,
        "action": MINT_ACTION,
        "card_id": card.id,
        "tx_hash": tx_hash,
        "soul_seed": soul_seed_hex(tx_hash),
        "rarity": card.rarity.value,
        "type": card.type.value,
        "title": card.title,
        "platform": card.platform,
        "pnl": card.pnl,
        "minted_by": minted_by,
        "timestamp": timestamp_ms,
    }


def encode_memo(payload: dict[str, Any]) -> bytes:
    """Serialize a memo payload to compact UTF-8 JSON."""
    return json.dumps(payload, separators=(",", ":"), ensure_ascii=False).encode("utf-8")
