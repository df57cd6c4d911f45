"""Root conftest for API, repository and pipeline tests.

Provides:
- In-memory SQLite database (replaces production engine)
- FastAPI AsyncClient over ASGITransport
- Sample Figma node trees and a stub OpenAI chat response factory
"""

from __future__ import annotations

from types import SimpleNamespace
from typing import AsyncGenerator, Optional

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

import app.database as db_module
from app.database import Base

# Import all ORM models so they register with Base.metadata
import app.models.db  # noqa: F401


# ---------------------------------------------------------------------------
# In-memory async SQLite engine (StaticPool shares one connection)
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture
async def test_engine() -> AsyncGenerator[AsyncEngine, None]:
    """Fresh in-memory SQLite engine per test."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def test_session(test_engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """Per-test database session."""
    factory = async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )
    async with factory() as session:
        yield session
        await session.rollback()


# ---------------------------------------------------------------------------
# FastAPI test client - patches DB engine at module level
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture
async def client(test_engine: AsyncEngine) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client for testing FastAPI routes.

    Replaces the production engine/session_factory in app.database with the
    in-memory test engine, so every get_session() uses the test DB.
    """
    original_engine = db_module.engine
    original_factory = db_module.async_session_factory

    db_module.engine = test_engine
    db_module.async_session_factory = async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )

    try:
        from app.main import app

        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            yield ac
    finally:
        db_module.engine = original_engine
        db_module.async_session_factory = original_factory


# ---------------------------------------------------------------------------
# Sample data
# ---------------------------------------------------------------------------


@pytest.fixture
def login_frame() -> dict:
    """FRAME "LoginForm" with two TEXT children and one RECTANGLE child."""
    return {
        "id": "1:2",
        "name": "LoginForm",
        "type": "FRAME",
        "scrollBehavior": "SCROLLS",
        "children": [
            {
                "id": "1:3",
                "name": "Username",
                "type": "TEXT",
                "characters": "Username",
                "fills": [
                    {"type": "SOLID", "blendMode": "NORMAL",
                     "color": {"r": 0.1, "g": 0.1, "b": 0.1, "a": 1}},
                ],
            },
            {
                "id": "1:4",
                "name": "Password",
                "type": "TEXT",
                "characters": "Password",
            },
            {
                "id": "1:5",
                "name": "SubmitButton",
                "type": "RECTANGLE",
                "fills": [
                    {"type": "SOLID", "blendMode": "NORMAL",
                     "color": {"r": 0.0, "g": 0.4, "b": 1.0, "a": 1}},
                ],
                "strokes": [
                    {"type": "SOLID", "color": {"r": 0, "g": 0, "b": 0, "a": 1}},
                ],
                "children": [],
            },
        ],
    }


@pytest.fixture
def sample_file_response(login_frame) -> dict:
    """Sample Figma /v1/files/:key response."""
    return {
        "name": "Shop App",
        "schemaVersion": 0,
        "components": {},
        "document": {
            "id": "0:0",
            "name": "Document",
            "type": "DOCUMENT",
            "children": [
                {
                    "id": "0:1",
                    "name": "Auth",
                    "type": "CANVAS",
                    "children": [
                        login_frame,
                        {"id": "1:9", "name": "Divider", "type": "VECTOR"},
                    ],
                },
                {"id": "0:2", "name": "Empty Page", "type": "CANVAS", "children": []},
            ],
        },
    }


STUB_ENVELOPE = {
    "status": 200,
    "success": True,
    "data": {"username": "", "password": ""},
    "metadata": {"timestamp": "2024-01-01T00:00:00Z"},
}


def chat_completion(content: Optional[str]) -> SimpleNamespace:
    """Minimal stand-in for an openai ChatCompletion."""
    message = SimpleNamespace(content=content, role="assistant")
    return SimpleNamespace(choices=[SimpleNamespace(index=0, message=message)])
