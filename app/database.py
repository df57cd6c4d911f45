"""Async SQLAlchemy setup for the local key-value store.

The store only holds the image and schema cache snapshots, so the default
is a SQLite file next to the process. DATABASE_URL may point at Postgres
instead (asyncpg driver, `postgres` extra).
"""

from __future__ import annotations

import os
from typing import AsyncGenerator

import sqlalchemy
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from design2api import config

_ASYNC_DRIVERS = {
    "postgres://": "postgresql+asyncpg://",
    "postgresql://": "postgresql+asyncpg://",
    "sqlite://": "sqlite+aiosqlite://",
}


def async_database_url(url: str) -> str:
    """Swap a plain scheme for its async driver; URLs with a driver pass through."""
    for scheme, driver in _ASYNC_DRIVERS.items():
        if url.startswith(scheme):
            return driver + url[len(scheme):]
    return url


DATABASE_URL = async_database_url(config.DATABASE_URL)
IS_SQLITE = DATABASE_URL.startswith("sqlite")

engine: AsyncEngine = create_async_engine(
    DATABASE_URL,
    echo=os.getenv("DB_ECHO", "false").lower() == "true",
    **({} if IS_SQLITE else {"pool_size": 5, "max_overflow": 10}),
)

async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


class Base(DeclarativeBase):
    pass


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """Request-scoped session: committed on success, rolled back on error."""
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def init_db() -> None:
    import app.models.db  # noqa: F401

    if IS_SQLITE:
        # journal_mode cannot change inside a transaction that has written
        async with engine.begin() as conn:
            await conn.execute(sqlalchemy.text("PRAGMA journal_mode=WAL"))
            await conn.execute(sqlalchemy.text("PRAGMA busy_timeout=5000"))
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def close_db() -> None:
    await engine.dispose()
