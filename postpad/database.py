"""
Postpad — Database Session Management
=======================================

What:  Async SQLAlchemy engine, session factory and FastAPI session dependency.
How:   `Database` is built once from Settings in create_app() and stored on
       `app.state.database`. `get_db_session` hands each request its own
       AsyncSession, rolling back on error and always closing it.
Who:   Route handlers (via Depends), tests, and the application lifespan.

Connection Pooling:
    PostgreSQL (asyncpg): pool_size / max_overflow / pool_pre_ping from settings,
    pool_recycle=3600.
    SQLite (aiosqlite): SQLAlchemy's default pool for the URL; sizing options
    do not apply.
"""

import logging
from typing import AsyncGenerator

from fastapi import Request
from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from postpad.config import Settings

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy ORM models (shared metadata for Alembic)."""
    pass


class Database:
    """
    Owns the engine and session factory for one application instance.

    Lifecycle:
        create_app()  → Database(settings)
        lifespan      → await ping()   (fatal on failure)
                        await create_tables()  (optional)
        shutdown      → await dispose()
    """

    def __init__(self, settings: Settings):
        self.settings = settings
        self.engine: AsyncEngine = create_async_engine(
            settings.database_url,
            echo=settings.log_level == "DEBUG",
            **self._engine_options(settings),
        )
        # expire_on_commit=False: attributes stay readable after commit
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @staticmethod
    def _engine_options(settings: Settings) -> dict:
        if settings.is_sqlite:
            return {}
        return {
            "pool_size": settings.db_pool_size,
            "max_overflow": settings.db_max_overflow,
            "pool_pre_ping": settings.db_pool_pre_ping,
            "pool_recycle": 3600,
        }

    async def ping(self) -> None:
        """Run SELECT 1; raises whatever the driver raises when unreachable."""
        async with self.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))

    async def create_tables(self) -> None:
        # Import registers the models on Base.metadata
        from postpad import models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database tables ensured")

    async def dispose(self) -> None:
        """Close all pooled connections."""
        await self.engine.dispose()


async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency providing one database session per request.

    Flow services commit explicitly once every write of a flow succeeded;
    anything left uncommitted is rolled back here when an error escapes,
    and the session is always closed.

    Example usage in a route:
        @router.get("/profile")
        async def profile(db: AsyncSession = Depends(get_db_session)):
            ...
    """
    database: Database = request.app.state.database
    async with database.session_factory() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()
