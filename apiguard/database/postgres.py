from collections.abc import AsyncGenerator

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from apiguard.config import settings


class Base(DeclarativeBase):
    pass


_engine: AsyncEngine | None = None
_session_factory: async_sessionmaker[AsyncSession] | None = None


def _get_session_factory() -> async_sessionmaker[AsyncSession]:
    if _session_factory is None:
        raise RuntimeError("Postgres engine not initialised. Call init_postgres() first.")
    return _session_factory


async def init_postgres() -> None:
    """Create the async engine and session factory (called on app startup)."""
    global _engine, _session_factory
    _engine = create_async_engine(
        settings.postgres_dsn,
        pool_size=settings.postgres_pool_size,
        pool_pre_ping=True,
        echo=settings.debug,
    )
    _session_factory = async_sessionmaker(_engine, expire_on_commit=False)


async def close_postgres() -> None:
    """Dispose of the engine and its connection pool (called on app shutdown)."""
    global _engine, _session_factory
    if _engine is not None:
        await _engine.dispose()
        _engine = None
        _session_factory = None


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency that yields a session for one request."""
    factory = _get_session_factory()
    async with factory() as session:
        yield session
