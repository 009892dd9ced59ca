"""Pytest configuration and fixtures for backend tests.

Database Handling:
- Uses TEST_DATABASE_URL when set (PostgreSQL with asyncpg)
- Otherwise runs against an in-memory SQLite database through aiosqlite
"""

import os
from collections.abc import AsyncGenerator
from datetime import timedelta

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool, StaticPool

# Set test environment variables before importing app modules
TEST_JWT_SECRET = "test-secret-key-for-jwt-signing-0123456789abcdef"
os.environ["JWT_SECRET_KEY"] = TEST_JWT_SECRET

_SQLITE_URL = "sqlite+aiosqlite:///:memory:"
TEST_DATABASE_URL = os.environ.get("TEST_DATABASE_URL") or _SQLITE_URL
os.environ["DATABASE_URL"] = TEST_DATABASE_URL

# Test user credentials
TEST_USER_EMAIL = "shopper@example.com"
TEST_USER_PASSWORD = "correct-horse-battery"


def _create_test_engine():
    if TEST_DATABASE_URL.startswith("sqlite"):
        return create_async_engine(
            TEST_DATABASE_URL,
            poolclass=StaticPool,  # One shared connection keeps the in-memory DB alive
            connect_args={"check_same_thread": False},
        )
    return create_async_engine(TEST_DATABASE_URL, poolclass=NullPool)


# --- Rate Limiter Reset Fixture ---


@pytest.fixture(autouse=True)
def reset_login_rate_limiter():
    """Clear recorded login attempts so tests don't see each other's 429s."""
    from app.api.auth import reset_login_attempts

    reset_login_attempts()
    yield
    reset_login_attempts()


# --- Database Fixtures ---


@pytest_asyncio.fixture(scope="function")
async def db_engine():
    """Create a database engine with all tables for one test."""
    from app.core.database import Base
    from app.models import Product, RevokedToken, User  # noqa: F401

    engine = _create_test_engine()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def db_session(db_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create a database session for testing."""
    async_session = async_sessionmaker(
        db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with async_session() as session:
        yield session
        await session.rollback()


@pytest_asyncio.fixture(scope="function")
async def async_client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Create an async test client with database override."""
    from app.core.database import get_db
    from app.main import app

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


# --- Token Services ---


@pytest.fixture
def token_codec():
    """Codec signing with the test secret."""
    from app.services.token_codec import TokenCodec

    return TokenCodec(TEST_JWT_SECRET)


@pytest.fixture
def revocation_store(db_session):
    """Revocation store bound to the test session."""
    from app.services.revocation import RevocationStore

    return RevocationStore(db_session)


@pytest.fixture
def lifecycle(token_codec, revocation_store):
    """Token lifecycle manager with default TTLs."""
    from app.services.token_lifecycle import TokenLifecycleManager

    return TokenLifecycleManager(
        token_codec,
        revocation_store,
        access_ttl=timedelta(minutes=15),
        refresh_ttl=timedelta(days=7),
    )


# --- Test Factories ---


@pytest.fixture
def user_factory(db_session):
    """Factory for creating test User objects."""
    from app.models.user import User
    from app.services.passwords import hash_password

    async def _create_user(
        email: str = TEST_USER_EMAIL,
        password: str = TEST_USER_PASSWORD,
        first_name: str = "Test",
        last_name: str = "Shopper",
    ) -> User:
        user = User(
            email=email,
            password_hash=hash_password(password),
            first_name=first_name,
            last_name=last_name,
        )
        db_session.add(user)
        await db_session.flush()
        await db_session.refresh(user)
        return user

    return _create_user


@pytest_asyncio.fixture
async def test_user(user_factory):
    """Create a test user."""
    return await user_factory()


@pytest.fixture
def product_factory(db_session):
    """Factory for creating test Product objects."""
    from app.models.product import Product

    async def _create_product(
        name: str = "Test Product",
        price: float = 19.99,
        description: str | None = "A test product",
    ) -> Product:
        product = Product(name=name, price=price, description=description)
        db_session.add(product)
        await db_session.flush()
        await db_session.refresh(product)
        return product

    return _create_product


@pytest_asyncio.fixture
async def auth_tokens(test_user, lifecycle):
    """Get auth tokens for the test user."""
    pair = lifecycle.issue_pair(test_user)
    return {
        "access_token": pair.access_token,
        "refresh_token": pair.refresh_token,
    }


@pytest_asyncio.fixture
async def auth_headers(auth_tokens) -> dict[str, str]:
    """Headers with JWT token for authenticated requests."""
    return {"Authorization": f"Bearer {auth_tokens['access_token']}"}


# --- Pytest Hooks for Auto-Marking ---


def pytest_collection_modifyitems(config, items):
    """Mark tests using the database as 'integration', everything else as 'unit'."""
    integration_fixtures = {"db_session", "db_engine", "async_client"}

    for item in items:
        if any(mark.name in ("unit", "integration") for mark in item.iter_markers()):
            continue

        if hasattr(item, "fixturenames") and integration_fixtures & set(item.fixturenames):
            item.add_marker(pytest.mark.integration)
        else:
            item.add_marker(pytest.mark.unit)
