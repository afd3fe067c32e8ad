"""SQLAlchemy models for persistent storage.

This module defines the mint ledger: one row per card recorded on-chain.
"""

from __future__ import annotations

from datetime import UTC, datetime

from sqlalchemy import DateTime, Index, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""

    pass


class MintedCardModel(Base):
    """A card minted through the memo recorder."""

    __tablename__ = "minted_cards"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    # Mint transaction signature (base58, up to 88 chars)
    signature: Mapped[str] = mapped_column(String(88), nullable=False, unique=True)
    # Signature of the transaction the card narrates
    tx_hash: Mapped[str] = mapped_column(String(128), nullable=False)
    soul_seed: Mapped[str] = mapped_column(String(64), nullable=False)

    owner: Mapped[str] = mapped_column(String(44), nullable=False)
    card_id: Mapped[int] = mapped_column(Integer, nullable=False)
    card_type: Mapped[str] = mapped_column(String(20), nullable=False)
    rarity: Mapped[str] = mapped_column(String(20), nullable=False)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    platform: Mapped[str] = mapped_column(String(64), nullable=False, default="")
    explorer_url: Mapped[str | None] = mapped_column(Text, nullable=True)

    minted_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=lambda: datetime.now(UTC)
    )

    __table_args__ = (
        Index("idx_minted_cards_owner", "owner"),
        Index("idx_minted_cards_tx_hash", "tx_hash"),
        Index("idx_minted_cards_rarity", "rarity"),
    )
