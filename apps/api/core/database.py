"""Database configuration and session management.

The :class:`Database` gateway is the only I/O boundary of the API. One instance
is created per application in the lifespan handler, stored on
``app.state.database`` and handed to request handlers through the
:func:`get_database` / :func:`get_session` dependencies.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, AsyncIterator, Optional, Sequence, Union

from fastapi import Depends, Request
from sqlalchemy import event, text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import Executable

from config import Settings
from core.logging import get_logger

logger = get_logger(__name__)

# Create declarative base
Base = declarative_base()

Statement = Union[Executable, tuple[Executable, dict[str, Any]]]


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    # SQLite leaves foreign key enforcement off per connection
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_engine_for(settings: Settings) -> AsyncEngine:
    """Create the async engine with a bounded connection pool."""
    if settings.is_sqlite:
        # SQLite doesn't support pool_size and max_overflow
        engine = create_async_engine(
            settings.database_url,
            echo=settings.database_echo,
            connect_args={"check_same_thread": False},
        )
        event.listen(engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
        return engine

    return create_async_engine(
        settings.database_url,
        echo=settings.database_echo,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
        pool_pre_ping=True,  # Check connection health
    )


class Database:
    """Process-wide persistence gateway owning the engine and its pool."""

    def __init__(self, settings: Settings, engine: Optional[AsyncEngine] = None):
        self.settings = settings
        self.engine = engine or create_engine_for(settings)
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    async def create_all(self) -> None:
        """Create tables if needed."""
        # Import all models to register them with Base
        from domain.audit import models as audit_models  # noqa
        from domain.investment import models as investment_models  # noqa
        from domain.product import models as product_models  # noqa
        from domain.user import models as user_models  # noqa

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database tables created/verified")

    async def dispose(self) -> None:
        """Drain and close every pooled connection."""
        await self.engine.dispose()
        logger.info("Database pool disposed")

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """Acquire a session; commit on success, roll back on any failure."""
        async with self.session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    async def execute(
        self, statement: Executable, params: Optional[dict[str, Any]] = None
    ) -> Union[list[dict[str, Any]], int]:
        """Run one parameterized statement in its own transaction.

        Returns the fetched rows as dicts for row-returning statements and the
        affected row count otherwise.
        """
        async with self.engine.begin() as conn:
            result = await conn.execute(statement, params or {})
            if result.returns_rows:
                return [dict(row) for row in result.mappings().all()]
            return result.rowcount

    async def run_transaction(self, statements: Sequence[Statement]) -> list[int]:
        """Run statements all-or-nothing and return their row counts."""
        counts: list[int] = []
        try:
            async with self.engine.begin() as conn:
                for item in statements:
                    if isinstance(item, tuple):
                        statement, params = item
                    else:
                        statement, params = item, {}
                    result = await conn.execute(statement, params)
                    counts.append(result.rowcount)
        except Exception as e:
            logger.error("Transaction rolled back", error=str(e), statements=len(statements))
            raise
        return counts

    async def ping(self) -> bool:
        """Check connectivity."""
        async with self.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        return True


def get_database(request: Request) -> Database:
    """FastAPI dependency: the application's persistence gateway."""
    return request.app.state.database


async def get_session(
    database: Database = Depends(get_database),
) -> AsyncGenerator[AsyncSession, None]:
    """Get database session."""
    async with database.session() as session:
        yield session
