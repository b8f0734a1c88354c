"""
Async SQLAlchemy engine and session factory helpers.

The API process builds one engine at startup.  Celery tasks build a
FRESH engine per task via make_session(), because each task runs its
coroutine with asyncio.run() and pooled asyncpg connections are bound to
the loop that opened them.
"""

from __future__ import annotations

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from orchestrator.core.config import settings


def make_engine(url: str | None = None, **kwargs) -> AsyncEngine:
    """Create an async engine for `url` (defaults to settings.DATABASE_URL)."""
    url = url or settings.DATABASE_URL
    if url.startswith("postgresql"):
        kwargs.setdefault("pool_size", 20)
        kwargs.setdefault("max_overflow", 10)
    kwargs.setdefault("pool_pre_ping", True)
    return create_async_engine(url, echo=False, **kwargs)


def make_session(
    url: str | None = None,
) -> tuple[async_sessionmaker[AsyncSession], AsyncEngine]:
    """Create a fresh engine + session factory.  Caller disposes the engine."""
    engine = make_engine(url)
    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    return factory, engine
