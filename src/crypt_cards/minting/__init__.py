"""Minting layer - Card metadata and on-chain memo recording."""

from crypt_cards.minting.metadata import build_card_metadata, build_memo_payload, encode_memo
from crypt_cards.minting.recorder import (
    MEMO_PROGRAM_ID,
    MemoMintRecorder,
    MintRecorderError,
    MintResult,
    explorer_url,
    load_keypair,
)

__all__ = [
    "MEMO_PROGRAM_ID",
    "MemoMintRecorder",
    "MintRecorderError",
    "MintResult",
    "build_card_metadata",
    "build_memo_payload",
    "encode_memo",
    "explorer_url",
    "load_keypair",
]
