"""Mint ledger database access.

The ledger is async-only. Plain ``sqlite://`` and ``postgresql://`` URLs
are rewritten to their async drivers (aiosqlite, asyncpg) so a URL copied
from elsewhere still works.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from crypt_cards.storage.models import Base
from crypt_cards.storage.repos import MintedCardRepository

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncEngine

    from crypt_cards.config import Settings

logger = logging.getLogger(__name__)

# sync scheme -> async scheme
ASYNC_DRIVERS = {
    "postgresql://": "postgresql+asyncpg://",
    "sqlite://": "sqlite+aiosqlite://",
}


def _normalize_async_database_url(database_url: str) -> str:
    for sync_scheme, async_scheme in ASYNC_DRIVERS.items():
        if database_url.startswith(sync_scheme):
            logger.warning("Ledger URL uses %s; switching to %s", sync_scheme, async_scheme)
            return async_scheme + database_url[len(sync_scheme) :]
    return database_url


class DatabaseManager:
    """Owns the ledger engine and hands out transactional sessions.

    Example:
        ```python
        db = DatabaseManager.from_settings(settings)
        await db.init_schema_async()
        async with db.ledger() as repo:
            print(await repo.total())
        await db.dispose_async()
        ```
    """

    def __init__(
        self,
        database_url: str,
        *,
        pool_size: int = 5,
        max_overflow: int = 10,
        echo: bool = False,
    ) -> None:
        """Initialize the manager. No connection is opened until first use.

        Args:
            database_url: Ledger connection URL.
            pool_size: Connection pool size (server databases only).
            max_overflow: Extra connections past the pool (server databases only).
            echo: Log emitted SQL.
        """
        self.database_url = _normalize_async_database_url(database_url)
        self._engine_options: dict[str, Any] = {"echo": echo}
        if not self.is_sqlite:
            self._engine_options.update(pool_size=pool_size, max_overflow=max_overflow)
        self._engine: AsyncEngine | None = None
        self._sessions: async_sessionmaker[AsyncSession] | None = None

    @classmethod
    def from_settings(cls, settings: Settings) -> DatabaseManager:
        return cls(settings.database.url)

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")

    @property
    def engine(self) -> AsyncEngine:
        if self._engine is None:
            self._engine = create_async_engine(self.database_url, **self._engine_options)
        return self._engine

    def _session_factory(self) -> async_sessionmaker[AsyncSession]:
        if self._sessions is None:
            self._sessions = async_sessionmaker(bind=self.engine, expire_on_commit=False)
        return self._sessions

    @asynccontextmanager
    async def get_async_session(self) -> AsyncGenerator[AsyncSession, None]:
        """Yield a session that commits on exit and rolls back on error."""
        async with self._session_factory()() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    @asynccontextmanager
    async def ledger(self) -> AsyncGenerator[MintedCardRepository, None]:
        """Yield a minted-card repository bound to a fresh session."""
        async with self.get_async_session() as session:
            yield MintedCardRepository(session)

    async def init_schema_async(self) -> None:
        """Create the ledger tables if they do not exist."""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Mint ledger schema ready at %s", self.database_url.split("@")[-1])

    async def dispose_async(self) -> None:
        """Close pooled connections. Safe to call more than once."""
        if self._engine is None:
            return
        await self._engine.dispose()
        self._engine = None
        self._sessions = None
        logger.info("Mint ledger connections disposed")
