"""Tests for the mint ledger repository."""

from datetime import UTC, datetime, timedelta

import pytest
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from crypt_cards.storage.models import Base
from crypt_cards.storage.repos import MintedCardDTO, MintedCardRepository

OWNER = "9WzDXwBbmkg8ZTbNMqUxvQRAyrZzDsGYdLVL9zYtAWWM"
OTHER_OWNER = "7xKXtg2CW87d97TXJSDpbD5jBkheTqA83TZRuJosgAsU"


@pytest.fixture
async def async_engine():
    """Create an async SQLite engine for testing."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
async def async_session(async_engine) -> AsyncSession:
    """Create an async session for testing."""
    session_factory = async_sessionmaker(bind=async_engine, expire_on_commit=False)
    async with session_factory() as session:
        yield session


@pytest.fixture
def repo(async_session) -> MintedCardRepository:
    return MintedCardRepository(async_session)


def make_dto(
    signature: str = "mintsig1",
    *,
    owner: str = OWNER,
    rarity: str = "rare",
    minted_at: datetime | None = None,
) -> MintedCardDTO:
    """Create a MintedCardDTO for testing."""
    return MintedCardDTO(
        signature=signature,
        tx_hash="5VERv8NMvzbJMEkV8xnrLkEa",
        soul_seed="ab" * 32,
        owner=owner,
        card_id=1,
        card_type="swap",
        rarity=rarity,
        title="20.00 SOL → BONK",
        platform="JUPITER",
        explorer_url="https://explorer.solana.com/tx/mintsig1?cluster=devnet",
        minted_at=minted_at,
    )


class TestMintedCardRepository:
    """Tests for MintedCardRepository."""

    @pytest.mark.asyncio
    async def test_add_and_get(self, repo) -> None:
        added = await repo.add(make_dto())
        assert added.minted_at is not None

        fetched = await repo.get_by_signature("mintsig1")
        assert fetched is not None
        assert fetched.owner == OWNER
        assert fetched.rarity == "rare"
        assert fetched.soul_seed == "ab" * 32
        assert fetched.title == "20.00 SOL → BONK"

    @pytest.mark.asyncio
    async def test_get_missing(self, repo) -> None:
        assert await repo.get_by_signature("nope") is None

    @pytest.mark.asyncio
    async def test_signature_is_unique(self, repo) -> None:
        await repo.add(make_dto())
        with pytest.raises(IntegrityError):
            await repo.add(make_dto())

    @pytest.mark.asyncio
    async def test_list_by_owner_newest_first(self, repo) -> None:
        base = datetime(2024, 1, 1, tzinfo=UTC)
        await repo.add(make_dto("old", minted_at=base))
        await repo.add(make_dto("new", minted_at=base + timedelta(hours=1)))
        await repo.add(make_dto("theirs", owner=OTHER_OWNER, minted_at=base))

        mints = await repo.list_by_owner(OWNER)

        assert [m.signature for m in mints] == ["new", "old"]

    @pytest.mark.asyncio
    async def test_list_by_owner_limit(self, repo) -> None:
        for i in range(5):
            await repo.add(make_dto(f"sig{i}"))
        assert len(await repo.list_by_owner(OWNER, limit=3)) == 3

    @pytest.mark.asyncio
    async def test_rarity_counts_and_total(self, repo) -> None:
        await repo.add(make_dto("a", rarity="common"))
        await repo.add(make_dto("b", rarity="legendary"))
        await repo.add(make_dto("c", rarity="legendary"))

        assert await repo.rarity_counts() == {"common": 1, "legendary": 2}
        assert await repo.total() == 3

    @pytest.mark.asyncio
    async def test_empty_ledger(self, repo) -> None:
        assert await repo.rarity_counts() == {}
        assert await repo.total() == 0
