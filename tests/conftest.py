"""
Gameplay checkpoints - pytest fixtures.

Provides:
- A fresh SQLite database per test (schema from the ORM metadata)
- An async HTTP client bound to the ASGI app with `get_db` overridden
- Session-token headers for players and admins
"""
from typing import Callable

import httpx
import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from checkpoint_hub.api import deps
from checkpoint_hub.config import settings
from checkpoint_hub.core.auth.resolver import create_session_token
from checkpoint_hub.db.models import Base
from checkpoint_hub.db.session import build_engine
from checkpoint_hub.main import app


# =============================================================================
# Database
# =============================================================================
@pytest_asyncio.fixture
async def db_engine(tmp_path):
    """Isolated SQLite file per test; NullPool so every session opens its own connection."""
    eng = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'checkpoints.db'}")
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield eng

    await eng.dispose()


@pytest_asyncio.fixture
async def session_factory(db_engine):
    return async_sessionmaker(
        bind=db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest_asyncio.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


# =============================================================================
# HTTP Client
# =============================================================================
@pytest_asyncio.fixture
async def client(session_factory):
    async def _override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[deps.get_db] = _override_get_db
    try:
        transport = httpx.ASGITransport(app=app)
        async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as c:
            yield c
    finally:
        app.dependency_overrides.pop(deps.get_db, None)


# =============================================================================
# Session tokens
# =============================================================================
@pytest.fixture
def make_headers() -> Callable[..., dict]:
    """Build Authorization headers: make_headers("p-1") or make_headers("ops", admin=True)."""

    def _make(subject: str, *, admin: bool = False, **token_kwargs) -> dict:
        roles = [settings.AUTH_ADMIN_ROLE] if admin else []
        token = create_session_token(subject, roles=roles, **token_kwargs)
        return {"Authorization": f"Bearer {token}"}

    return _make


@pytest.fixture
def player_a(make_headers) -> dict:
    return make_headers("p-1")


@pytest.fixture
def player_b(make_headers) -> dict:
    return make_headers("p-2")


@pytest.fixture
def admin(make_headers) -> dict:
    return make_headers("admin-1", admin=True)
