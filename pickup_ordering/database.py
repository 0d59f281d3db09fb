"""
Database Connection Module
Handles the catalog/order database using the SQLAlchemy async engine.
SQLite (aiosqlite) is the default; PostgreSQL works through psycopg.
"""

import logging
from pathlib import Path
from typing import AsyncIterator

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from pickup_ordering.core.config import get_settings

settings = get_settings()
logger = logging.getLogger(__name__)


def _engine_options(url: str) -> dict:
    """Pool sizing only applies to server databases."""
    if url.startswith("sqlite"):
        return {}
    return {
        "pool_size": 5,  # Connection pool size
        "max_overflow": 10,  # Extra connections when pool is full
        "pool_pre_ping": True,
    }


def build_engine(url: str, echo: bool = False) -> AsyncEngine:
    return create_async_engine(url, echo=echo, **_engine_options(url))


def build_session_maker(bind: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind=bind,
        class_=AsyncSession,
        expire_on_commit=False  # Objects remain accessible after commit
    )


engine = build_engine(settings.database_url, echo=settings.database_echo)

# Session factory - creates new database sessions
async_session_maker = build_session_maker(engine)


# Base class for all our models
class Base(DeclarativeBase):
    pass


async def get_db() -> AsyncIterator[AsyncSession]:
    """
    Dependency injection for FastAPI routes.
    Yields a database session and ensures cleanup.
    """
    async with async_session_maker() as session:
        try:
            yield session
        finally:
            await session.close()


def ensure_sqlite_directory(url: str) -> None:
    """Create the parent directory of a SQLite database file."""
    parsed = make_url(url)
    if not parsed.drivername.startswith("sqlite"):
        return
    database = parsed.database
    if not database or database == ":memory:":
        return
    Path(database).expanduser().resolve().parent.mkdir(parents=True, exist_ok=True)


async def create_tables(bind: AsyncEngine) -> None:
    # Import models so they register with Base.metadata
    from pickup_ordering import models  # noqa: F401

    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def init_db() -> None:
    """
    Create all tables and seed the default menu.
    Called once at application startup.
    """
    from pickup_ordering.services.catalog import seed_default_menu

    ensure_sqlite_directory(settings.database_url)
    await create_tables(engine)
    logger.info("Database tables ready")

    if settings.seed_menu:
        async with async_session_maker() as session:
            inserted = await seed_default_menu(session)
        if inserted:
            logger.info(f"Seeded catalog with {inserted} menu items")
