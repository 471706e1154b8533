"""
Shared fixtures: a fresh SQLite database per test and an in-process client.
"""

import os

# Settings are read at import time, so these must be set before any app import.
os.environ.setdefault("JWT_SECRET", "test-secret-key-0123456789abcdef")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

from typing import Dict

import httpx
import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from database.session import build_engine, get_db_session, init_db
from main import create_app


@pytest_asyncio.fixture
async def session_factory(tmp_path):
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'todo.db'}")
    await init_db(engine)
    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    await engine.dispose()


@pytest_asyncio.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def app(session_factory):
    app = create_app()

    async def _override_session():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db_session] = _override_session
    return app


@pytest_asyncio.fixture
async def client(app):
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


async def login_headers(client: httpx.AsyncClient, username: str, password_hash: str = "hash") -> Dict[str, str]:
    """Register ``username`` (if needed), log in and return bearer headers."""
    await client.post("/register", json={"username": username, "passwordHash": password_hash})
    r = await client.post("/login", json={"username": username, "passwordHash": password_hash})
    assert r.status_code == 200, r.text
    return {"Authorization": f"Bearer {r.json()['token']}"}
