"""Repository pattern implementations for data access.

This module provides the data access abstraction for the mint ledger.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import func, select

from crypt_cards.storage.models import MintedCardModel

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

logger = logging.getLogger(__name__)


@dataclass
class MintedCardDTO:
    """Data transfer object for minted cards."""

    signature: str
    tx_hash: str
    soul_seed: str
    owner: str
    card_id: int
    card_type: str
    rarity: str
    title: str
    platform: str = ""
    explorer_url: str | None = None
    minted_at: datetime | None = None

    @classmethod
    def from_model(cls, model: MintedCardModel) -> MintedCardDTO:
        """Create DTO from SQLAlchemy model."""
        return cls(
            signature=model.signature,
            tx_hash=model.tx_hash,
            soul_seed=model.soul_seed,
            owner=model.owner,
            card_id=model.card_id,
            card_type=model.card_type,
            rarity=model.rarity,
            title=model.title,
            platform=model.platform,
            explorer_url=model.explorer_url,
            minted_at=model.minted_at,
        )


class MintedCardRepository:
    """Repository for the mint ledger.

    Example:
        ```python
        async with db.get_async_session() as session:
            repo = MintedCardRepository(session)
            await repo.add(dto)
            counts = await repo.rarity_counts()
        ```
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def add(self, dto: MintedCardDTO) -> MintedCardDTO:
        """Insert a minted card.

        Args:
            dto: Card data to record.

        Returns:
            The recorded DTO, including its mint time.
        """
        model = MintedCardModel(
            signature=dto.signature,
            tx_hash=dto.tx_hash,
            soul_seed=dto.soul_seed,
            owner=dto.owner,
            card_id=dto.card_id,
            card_type=dto.card_type,
            rarity=dto.rarity,
            title=dto.title,
            platform=dto.platform,
            explorer_url=dto.explorer_url,
        )
        if dto.minted_at is not None:
            model.minted_at = dto.minted_at
        self.session.add(model)
        await self.session.flush()
        logger.debug("Recorded mint %s for %s", dto.signature[:10] + "...", dto.owner[:10] + "...")
        return MintedCardDTO.from_model(model)

    async def get_by_signature(self, signature: str) -> MintedCardDTO | None:
        result = await self.session.execute(
            select(MintedCardModel).where(MintedCardModel.signature == signature)
        )
        model = result.scalar_one_or_none()
        return MintedCardDTO.from_model(model) if model else None

    async def list_by_owner(self, owner: str, *, limit: int = 100) -> list[MintedCardDTO]:
        """List an owner's mints, newest first."""
        result = await self.session.execute(
            select(MintedCardModel)
            .where(MintedCardModel.owner == owner)
            .order_by(MintedCardModel.minted_at.desc(), MintedCardModel.id.desc())
            .limit(limit)
        )
        return [MintedCardDTO.from_model(m) for m in result.scalars().all()]

    async def rarity_counts(self) -> dict[str, int]:
        """Count mints per rarity tier."""
        result = await self.session.execute(
            select(MintedCardModel.rarity, func.count()).group_by(MintedCardModel.rarity)
        )
        return {rarity: int(count) for rarity, count in result.all()}

    async def total(self) -> int:
        result = await self.session.execute(select(func.count()).select_from(MintedCardModel))
        return int(result.scalar_one())
