"""Storefront Database Configuration - Async SQLAlchemy."""

from collections.abc import AsyncGenerator
from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import declarative_base

from app.core.config import settings


def _engine_options(url: str) -> dict[str, Any]:
    """Connection pool options for the configured driver.

    SQLite (used for local experiments and tests) has no server-side pool,
    so the sizing knobs only apply to real database servers.
    """
    options: dict[str, Any] = {
        "pool_pre_ping": True,  # Verify connection before use
        # Only echo SQL when debug is explicitly enabled
        "echo": settings.debug and settings.log_level == "DEBUG",
    }
    if not url.startswith("sqlite"):
        options.update(
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_timeout=settings.db_pool_timeout,
            pool_recycle=settings.db_pool_recycle,
        )
    return options


engine = create_async_engine(settings.database_url, **_engine_options(settings.database_url))

# Session factory
async_session_maker = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)

# Base class for models
Base = declarative_base()


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Dependency to get database session."""
    async with async_session_maker() as session:
        try:
            yield session
            await session.commit()
        except (Exception, BaseException):
            # BaseException covers asyncio.CancelledError
            await session.rollback()
            raise
        finally:
            await session.close()


async def check_db_connection() -> bool:
    """Check if database is reachable."""
    try:
        async with async_session_maker() as session:
            await session.execute(text("SELECT 1"))
            return True
    except (OSError, ConnectionError) as e:
        from app.core.logging import get_logger

        get_logger("database").debug(f"Database connection check failed: {e}")
        return False
    except Exception as e:
        from app.core.logging import get_logger

        get_logger("database").warning(f"Unexpected error checking database connection: {e}")
        return False
