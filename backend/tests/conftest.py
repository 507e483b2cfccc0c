"""
TripLink Backend — Test Configuration (conftest.py)
=====================================================

What:  Shared pytest fixtures for the whole suite.
How:   Every test gets a throwaway SQLite file (aiosqlite) with all tables
       created from Base.metadata, so services run against a real store.

Fixture Hierarchy (all function-scoped):
    db_engine ─┬─ session_factory ─┬─ db_session ─┬─ traveler / provider / admin / outsider
               │                   │              └─ tour_service (price 49.99, by provider)
               │                   └─ test_client (app with get_db_session overridden)
"""

import os

# Settings are read at import time, so the environment must be in place
# before anything from triplink is imported
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["ENVIRONMENT"] = "test"
os.environ["JWT_SECRET"] = "test-secret-not-real"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["RATE_LIMIT_REQUESTS"] = "100000"

from decimal import Decimal
from typing import Dict

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from triplink.database import Base, build_engine, get_db_session
from triplink.models import Role, Service, User
from triplink.security import create_access_token, hash_password

PASSWORD = "secret123"


async def create_user(session: AsyncSession, username: str, role: Role = Role.USER) -> User:
    user = User(
        username=username,
        email=f"{username}@example.com",
        password=hash_password(PASSWORD),
        role=role.value,
        languages=[],
    )
    session.add(user)
    await session.commit()
    return user


def auth_headers(user: User) -> Dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(user.id)}"}


# ══════════════════════════════════════════════════════════════════════════
# Database Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def db_engine(tmp_path):
    """A fresh SQLite database file with every table created."""
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'triplink_test.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


# ══════════════════════════════════════════════════════════════════════════
# Domain Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def traveler(db_session):
    return await create_user(db_session, "traveler")


@pytest_asyncio.fixture
async def provider(db_session):
    return await create_user(db_session, "provider", Role.PROVIDER)


@pytest_asyncio.fixture
async def admin(db_session):
    return await create_user(db_session, "admin", Role.ADMIN)


@pytest_asyncio.fixture
async def outsider(db_session):
    return await create_user(db_session, "outsider")


@pytest_asyncio.fixture
async def tour_service(db_session, provider):
    service = Service(
        title="Old Town Walking Tour",
        description="Three hours through the historic centre",
        price=Decimal("49.99"),
        location="Lisbon, Portugal",
        provider_id=provider.id,
        category="tour",
        images=[],
        availability=[],
    )
    db_session.add(service)
    await db_session.commit()
    return service


# ══════════════════════════════════════════════════════════════════════════
# HTTP Client
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def test_client(session_factory):
    """
    HTTPX AsyncClient talking to the app over ASGITransport.

    Each request gets its own session on the test database. The lifespan is
    not run, so no startup probe touches DATABASE_URL.
    """
    from triplink.main import app

    async def override_get_db_session():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db_session] = override_get_db_session
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()
