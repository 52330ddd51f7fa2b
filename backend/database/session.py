from sqlalchemy import event, text
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession, AsyncEngine
from sqlalchemy.pool import StaticPool
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional
import logging
import time

from config import Settings, settings as default_settings
from database.models import Base

logger = logging.getLogger(__name__)

_ASYNC_DRIVERS = {
    "postgres": "postgresql+asyncpg",
    "postgresql": "postgresql+asyncpg",
    "postgresql+psycopg2": "postgresql+asyncpg",
    "sqlite": "sqlite+aiosqlite",
}


def normalize_database_url(url: str) -> str:
    """Rewrite sync driver URLs (as handed out by hosting providers) to async ones."""
    scheme, sep, rest = url.partition("://")
    if not sep:
        raise ValueError(f"Invalid database URL: {url!r}")
    return f"{_ASYNC_DRIVERS.get(scheme, scheme)}://{rest}"


def _enable_sqlite_transactions(engine: AsyncEngine) -> None:
    """Make SQLite emit its own BEGIN so SAVEPOINT and rollback behave as on PostgreSQL.

    BEGIN IMMEDIATE takes the write lock up front; concurrent writers queue
    on the busy timeout instead of failing half way through.

    Read-only sessions take the same lock, so every transaction on one SQLite
    file runs one at a time. SQLite is the development and test backend;
    production runs on PostgreSQL, where none of these listeners are installed.
    """

    @event.listens_for(engine.sync_engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine.sync_engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")


class DatabaseManager:
    """Owns the async engine and hands out one session per unit of work."""

    def __init__(self, config: Optional[Settings] = None):
        self.config = config or default_settings
        self.engine: Optional[AsyncEngine] = None
        self.session_factory: Optional[async_sessionmaker] = None

    @property
    def url(self) -> str:
        return normalize_database_url(self.config.DATABASE_URL)

    async def initialize(self):
        """Initialize database engine and session factory"""
        try:
            url = make_url(self.url)
            engine_kwargs = {"echo": self.config.DB_ECHO, "pool_pre_ping": True}

            if url.get_backend_name() == "sqlite":
                engine_kwargs["connect_args"] = {"check_same_thread": False}
                if url.database in (None, "", ":memory:"):
                    engine_kwargs["poolclass"] = StaticPool
            else:
                engine_kwargs.update(
                    pool_size=self.config.DB_POOL_SIZE,
                    max_overflow=self.config.DB_MAX_OVERFLOW,
                    pool_timeout=self.config.DB_POOL_TIMEOUT,
                    pool_recycle=self.config.DB_POOL_RECYCLE,
                )

            self.engine = create_async_engine(url, **engine_kwargs)
            if url.get_backend_name() == "sqlite":
                _enable_sqlite_transactions(self.engine)

            self.session_factory = async_sessionmaker(
                bind=self.engine,
                class_=AsyncSession,
                expire_on_commit=False,
                autoflush=True,
            )

            logger.info(
                "Database engine initialized",
                extra={"backend": url.get_backend_name(), "driver": url.get_driver_name()},
            )

        except Exception as e:
            logger.error(f"Failed to initialize database: {e}")
            raise

    async def create_schema(self):
        """Create any missing tables. Existing tables are left untouched."""
        if not self.engine:
            raise RuntimeError("Database not initialized")
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database schema ensured")

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """Yield a session; anything left uncommitted is rolled back on exit."""
        if not self.session_factory:
            raise RuntimeError("Database not initialized")

        session = self.session_factory()
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()

    async def health_check(self) -> dict:
        """Check database health"""
        try:
            start_time = time.time()

            async with self.session() as session:
                result = await session.execute(text("SELECT 1"))
                result.scalar_one()

            response_time = time.time() - start_time

            return {
                "status": "healthy",
                "response_time_ms": round(response_time * 1000, 2),
                "pool": self.engine.sync_engine.pool.status() if self.engine else None,
            }

        except Exception as e:
            logger.error(f"Database health check failed: {e}")
            return {
                "status": "unhealthy",
                "error": type(e).__name__,
            }

    async def close(self):
        """Close database connections"""
        if self.engine:
            await self.engine.dispose()
            self.engine = None
            self.session_factory = None
            logger.info("Database connections closed")
