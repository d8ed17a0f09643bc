"""
Test infrastructure for the Pressroom API.

Strategy
--------
- SQLite in-memory via aiosqlite stands in for Postgres.  StaticPool keeps
  every session on the same connection, since an in-memory SQLite
  database only exists for the connection that created it.
- The app's get_db dependency is overridden so requests use the test
  session factory.
- The ranking cache is a real RankingCache bound to a fakeredis server
  that is created per test, injected by overriding get_ranking.
- All tables are created fresh before each test and dropped after.
"""
import pytest_asyncio
from fakeredis import FakeAsyncRedis, FakeServer
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from pressroom.database import Base, get_db
from pressroom.dependencies import get_ranking
from pressroom.main import app
from pressroom.middleware import install_query_counter
from pressroom.ranking import RankingCache

# ---------------------------------------------------------------------------
# Test database engine
# ---------------------------------------------------------------------------

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

engine_test = create_async_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

install_query_counter(engine_test)

async_session_test = async_sessionmaker(
    engine_test,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def override_get_db():
    async with async_session_test() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


app.dependency_overrides[get_db] = override_get_db


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest_asyncio.fixture(autouse=True)
async def setup_db():
    """Create all tables before each test, drop after to guarantee isolation."""
    async with engine_test.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with engine_test.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest_asyncio.fixture
async def db_session() -> AsyncSession:
    """A live AsyncSession for tests that call services directly."""
    async with async_session_test() as session:
        yield session


@pytest_asyncio.fixture
async def fake_redis() -> FakeAsyncRedis:
    client = FakeAsyncRedis(server=FakeServer(), decode_responses=True)
    yield client
    await client.aclose()


@pytest_asyncio.fixture
async def ranking(fake_redis: FakeAsyncRedis) -> RankingCache:
    return RankingCache(client=fake_redis)


@pytest_asyncio.fixture
async def async_client(ranking: RankingCache) -> AsyncClient:
    """
    Yield an httpx.AsyncClient wired to the FastAPI app via ASGITransport.

    The lifespan does not run under ASGITransport, so the ranking cache is
    supplied through the dependency override instead of app.state.
    """
    app.dependency_overrides[get_ranking] = lambda: ranking
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.pop(get_ranking, None)


@pytest_asyncio.fixture
async def test_engine():
    """The shared test engine, for tests that alter the schema mid-test."""
    return engine_test
