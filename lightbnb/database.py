"""
Database connection and session management.
Owns the SQLAlchemy async engine (the connection pool) and its lifecycle.
"""

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy import event, text, Integer
from contextlib import asynccontextmanager
from lightbnb.config import Settings
from typing import AsyncIterator, Optional
import logging

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """
    Base class for all database models.
    Every table carries a serial integer primary key.
    """

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    def __repr__(self) -> str:
        """String representation of the model."""
        return f"<{self.__class__.__name__}(id={self.id})>"


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    # SQLite leaves foreign key enforcement off by default
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class Database:
    """
    Process-wide connection pool with an explicit lifecycle.

    Create one at startup, hand it to the stores that need it and call
    ``dispose()`` at shutdown. Every ``session()`` borrows a pooled
    connection for the duration of one call only.
    """

    def __init__(self, url: str, echo: bool = False, **pool_options):
        self.url = url
        self.engine: AsyncEngine = create_async_engine(url, echo=echo, **self._engine_options(url, pool_options))

        if self.engine.dialect.name == "sqlite":
            event.listen(self.engine.sync_engine, "connect", _enable_sqlite_foreign_keys)

        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )
        logger.info(f"Database pool created for {self.engine.url.render_as_string(hide_password=True)}")

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        """Build the pool from application settings."""
        return cls(
            settings.sqlalchemy_url,
            echo=settings.debug,
            pool_size=settings.pool_size,
            max_overflow=settings.max_overflow,
            pool_pre_ping=settings.pool_pre_ping,
            pool_recycle=settings.pool_recycle,
            pool_timeout=settings.pool_timeout,
            application_name=settings.app_name,
        )

    @staticmethod
    def _engine_options(url: str, pool_options: dict) -> dict:
        options = dict(pool_options)
        application_name = options.pop("application_name", None)
        if url.startswith("postgresql+asyncpg") and application_name:
            options["connect_args"] = {
                "server_settings": {"application_name": application_name}
            }
        if ":memory:" in url or url.rstrip("/").endswith("sqlite+aiosqlite:"):
            # In-memory SQLite uses a static pool; sizing options do not apply
            for key in ("pool_size", "max_overflow", "pool_timeout"):
                options.pop(key, None)
        return options

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """
        Borrow a session (and its pooled connection) for a single call.
        Rolls back on failure and always returns the connection to the pool.
        """
        async with self.session_factory() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise
            finally:
                await session.close()

    async def check_connection(self) -> bool:
        """
        Test database connectivity.
        Returns True if connection is successful, False otherwise.
        """
        try:
            async with self.session() as session:
                result = await session.execute(text("SELECT 1"))
                result.scalar()
                logger.info("Database connection successful")
                return True
        except Exception as e:
            logger.error(f"Database connection failed: {e}")
            return False

    async def create_tables(self):
        """Create all database tables."""
        # Register every model on the metadata before creating
        import lightbnb.models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
            logger.info("Database tables created successfully")

    async def drop_tables(self, settings: Optional[Settings] = None):
        """
        Drop all database tables.
        This should only be used in testing or development.
        """
        if settings is not None and settings.is_production:
            raise RuntimeError("Cannot drop tables in production environment")

        import lightbnb.models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)
            logger.info("Database tables dropped successfully")

    def get_pool_status(self) -> dict:
        """Connection pool counters for monitoring."""
        pool = self.engine.pool
        status = {"pool_class": type(pool).__name__}
        for name in ("size", "checkedin", "checkedout", "overflow"):
            counter = getattr(pool, name, None)
            if callable(counter):
                status[name] = counter()
        return status

    async def dispose(self):
        """
        Close every pooled connection.
        This should be called during application shutdown.
        """
        await self.engine.dispose()
        logger.info("Database connections closed")

    async def __aenter__(self) -> "Database":
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.dispose()
