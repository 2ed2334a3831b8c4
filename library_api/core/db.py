"""
Core database module for the application.

This module provides the declarative base, the ``Database`` handle owning the
async engine and session factory, and column helpers shared by the models.
"""

import logging
import uuid
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any, AsyncIterator, Dict, Optional

from sqlalchemy import DateTime, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base
from sqlalchemy.types import TypeDecorator

logger = logging.getLogger(__name__)


def generate_id() -> str:
    """Opaque identifier assigned to every new document."""
    return uuid.uuid4().hex


def normalize_id(value: Any) -> Optional[str]:
    """Return the canonical form of an identifier, or None when malformed."""
    if not isinstance(value, str) or not value.strip():
        return None
    try:
        return uuid.UUID(value.strip()).hex
    except ValueError:
        return None


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class UTCDateTime(TypeDecorator):
    """Timezone-aware datetime stored as naive UTC.

    SQLite drops tzinfo on the way back, so values are normalised to UTC when
    bound and re-tagged with UTC when loaded.
    """

    impl = DateTime
    cache_ok = True

    def process_bind_param(self, value: Optional[datetime], dialect) -> Optional[datetime]:
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc).replace(tzinfo=None)

    def process_result_value(self, value: Optional[datetime], dialect) -> Optional[datetime]:
        if value is None:
            return None
        return value.replace(tzinfo=timezone.utc)


class CustomBase:
    """Base class for all models with utility methods."""

    def to_dict(self) -> Dict[str, Any]:
        """Convert model to dictionary excluding SQLAlchemy internal attributes."""
        return {c.name: getattr(self, c.name) for c in self.__table__.columns}


Base = declarative_base(cls=CustomBase)


class Database:
    """Owns the engine and session factory.

    Created by the process entry point and handed to request handlers through
    dependencies; nothing in the core reaches for a global connection.
    """

    def __init__(self, url: str, echo: bool = False, **engine_options: Any):
        self.url = url
        if not url.startswith("sqlite"):
            engine_options.setdefault("pool_pre_ping", True)
        self.engine = create_async_engine(url, echo=echo, **engine_options)
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )

    async def connect(self) -> None:
        """Create tables and unique indexes if they do not exist yet."""
        # Register every table on Base.metadata
        from library_api import models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database ready at %s", self.engine.url.render_as_string(hide_password=True))

    async def dispose(self) -> None:
        await self.engine.dispose()
        logger.info("Database connection closed")

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """
        Get a database session.

        Yields:
            AsyncSession: SQLAlchemy async session
        """
        async with self.session_factory() as session:
            try:
                yield session
            except SQLAlchemyError as e:
                logger.error(f"Session error: {e}")
                await session.rollback()
                raise

    async def check_connection(self) -> bool:
        """
        Check if database connection is working.
        Returns True if connection is successful, False otherwise.
        """
        try:
            async with self.session_factory() as session:
                await session.execute(text("SELECT 1"))
                return True
        except Exception as e:
            logger.error(f"Database connection check failed: {e}")
            return False


def create_database(settings) -> Database:
    """Build a ``Database`` from application settings."""
    options: Dict[str, Any] = {}
    if not settings.is_sqlite:
        options["pool_size"] = settings.DATABASE_POOL_SIZE
        options["max_overflow"] = settings.DATABASE_MAX_OVERFLOW
    return Database(settings.DATABASE_URL, echo=settings.DB_ECHO, **options)
