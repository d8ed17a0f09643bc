from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from pressroom.config import settings
from pressroom.middleware import install_query_counter

# Module-level engine variable allows tests to override with a test engine.
engine = create_async_engine(
    settings.DATABASE_URL,
    echo=settings.DEBUG,
    pool_pre_ping=True,
)

install_query_counter(engine)

async_session = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


class Base(DeclarativeBase):
    pass


async def dispose_engine() -> None:
    """Close every pooled connection.  Called once at application shutdown."""
    await engine.dispose()


async def get_db():
    """
    Yield a session for one request.

    The final commit only covers work a service left pending; the engagement
    recorder commits each of its steps on its own, so a rollback here never
    undoes a step that already completed.
    """
    async with async_session() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
