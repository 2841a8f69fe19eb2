"""Database session management for async SQLAlchemy.

Provides async session creation and dependency injection for FastAPI.
"""

import logging
import uuid
from collections.abc import AsyncGenerator

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlmodel import SQLModel, select

from app.core.config import Settings, get_settings

logger = logging.getLogger(__name__)

DEFAULT_ADMIN_ID = uuid.UUID("3c5ff1b3-b0d6-4dba-b254-a2be667bbd52")
DEFAULT_CATEGORIES = (
    ("General", "#6366f1", "folder"),
    ("Orders", "#f59e0b", "package"),
    ("Refunds", "#ef4444", "receipt"),
)


# Global engine and session maker
_engine: AsyncEngine | None = None
_async_session_maker: async_sessionmaker[AsyncSession] | None = None


def get_engine(settings: Settings | None = None) -> AsyncEngine:
    """Get or create the async database engine.

    Args:
        settings: Optional settings. If None, uses global settings.

    Returns:
        The async SQLAlchemy engine.
    """
    global _engine

    try:
        if _engine is None:
            settings = settings or get_settings()

            logger.info("Creating async database engine")

            engine_kwargs: dict = {
                "echo": settings.log_level == "DEBUG",
                "pool_pre_ping": True,
            }
            # SQLite pools reject sizing arguments
            if not settings.database_url.startswith("sqlite"):
                engine_kwargs.update(pool_size=10, max_overflow=20)

            _engine = create_async_engine(settings.database_url, **engine_kwargs)

            logger.info("Database engine created successfully")

        return _engine

    except Exception as e:
        logger.error(f"Failed to create database engine: {e}", exc_info=True)
        raise


def get_session_maker(settings: Settings | None = None) -> async_sessionmaker[AsyncSession]:
    """Get or create the async session maker.

    Args:
        settings: Optional settings. If None, uses global settings.

    Returns:
        The async session maker.
    """
    global _async_session_maker

    try:
        if _async_session_maker is None:
            engine = get_engine(settings)

            _async_session_maker = async_sessionmaker(
                engine,
                class_=AsyncSession,
                expire_on_commit=False,
                autoflush=False,
            )

            logger.info("Session maker created successfully")

        return _async_session_maker

    except Exception as e:
        logger.error(f"Failed to create session maker: {e}", exc_info=True)
        raise


async def get_async_session(settings: Settings | None = None) -> AsyncGenerator[AsyncSession, None]:
    """Dependency injection for FastAPI to get async database sessions.

    Args:
        settings: Optional settings. If None, uses global settings.

    Yields:
        An async database session.
    """
    session_maker = get_session_maker(settings)
    async with session_maker() as session:
        try:
            yield session
        except SQLAlchemyError as e:
            logger.error(f"Database error: {e}", exc_info=True)
            await session.rollback()
            raise
        except Exception as e:
            logger.error(f"Unexpected error in session: {e}", exc_info=True)
            await session.rollback()
            raise


async def create_all_tables(settings: Settings | None = None) -> None:
    """Create all database tables.

    This uses SQLAlchemy's metadata.create_all for table creation.

    Args:
        settings: Optional settings. If None, uses global settings.
    """
    try:
        # Import models to ensure they're registered with SQLModel metadata
        from app.db import models  # noqa: F401

        engine = get_engine(settings)

        logger.info("Creating database tables...")

        async with engine.begin() as conn:
            await conn.run_sync(SQLModel.metadata.create_all)

        logger.info("Database tables created successfully")

    except Exception as e:
        logger.error(f"Failed to create database tables: {e}", exc_info=True)
        raise


async def drop_all_tables(settings: Settings | None = None) -> None:
    """Drop all database tables.

    WARNING: This will delete all data. Use with caution,
    typically only in test environments.

    Args:
        settings: Optional settings. If None, uses global settings.
    """
    try:
        engine = get_engine(settings)

        logger.warning("Dropping all database tables...")

        async with engine.begin() as conn:
            await conn.run_sync(SQLModel.metadata.drop_all)

        logger.warning("All database tables dropped")

    except Exception as e:
        logger.error(f"Failed to drop database tables: {e}", exc_info=True)
        raise


async def seed_defaults(session: AsyncSession) -> None:
    """Seed a default admin profile and starter categories if missing.

    Args:
        session: An open database session.
    """
    from app.db.models import Category, Profile, UserRole

    try:
        result = await session.execute(select(Profile).limit(1))
        if result.scalar_one_or_none() is None:
            logger.info("Seeding default admin profile...")
            session.add(
                Profile(
                    id=DEFAULT_ADMIN_ID,
                    email="admin@example.com",
                    full_name="Default Admin",
                    role=UserRole.ADMIN,
                )
            )

        result = await session.execute(select(Category).limit(1))
        if result.scalar_one_or_none() is None:
            logger.info("Seeding default categories...")
            for name, color, icon in DEFAULT_CATEGORIES:
                session.add(Category(name=name, color=color, icon=icon))

        await session.commit()

    except Exception as e:
        logger.error(f"Error seeding initial data: {e}", exc_info=True)
        await session.rollback()
        raise


async def init_db(settings: Settings | None = None) -> None:
    """Initialize the database with default data.

    Args:
        settings: Optional settings. If None, uses global settings.
    """
    try:
        await create_all_tables(settings)

        session_maker = get_session_maker(settings)
        async with session_maker() as session:
            await seed_defaults(session)

    except Exception as e:
        logger.error(f"Failed to initialize database: {e}", exc_info=True)
        raise


async def close_db(settings: Settings | None = None) -> None:
    """Close the database engine and all connections.

    Args:
        settings: Optional settings. If None, uses global settings.
    """
    global _engine, _async_session_maker

    try:
        if _engine is not None:
            logger.info("Closing database engine...")
            await _engine.dispose()
            _engine = None
            _async_session_maker = None
            logger.info("Database engine closed")

    except Exception as e:
        logger.error(f"Error closing database engine: {e}", exc_info=True)
        raise
