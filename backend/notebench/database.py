"""
Notebench Backend — Database Context and Session Management
=============================================================

What:  An explicitly constructed data-access context (engine + session factory),
       the declarative Base, and the per-request session dependency.
Why:   The engine is owned by the application instance, not by a module-level
       singleton: it is opened in the lifespan handler, stored on app.state,
       and disposed on shutdown. Tests build their own context against SQLite.
How:   `Database` wraps create_async_engine/async_sessionmaker. `get_db_session`
       pulls the context off the request's app and yields one session per request,
       committing on success and rolling back on error.

Startup readiness:
    `Database.wait_until_ready()` runs `SELECT 1` under a tenacity retry with
    exponential backoff. If the store never answers, startup raises and uvicorn
    never begins listening.
"""

import logging
from typing import Any, AsyncGenerator, Dict

from fastapi import Request
from sqlalchemy import event, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase
from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from notebench.config import Settings

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    All models inherit from this class so they share one metadata object,
    which Alembic and `Database.create_all()` read.
    """
    pass


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    # SQLite ships with foreign key enforcement off; ON DELETE CASCADE needs it.
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class Database:
    """
    Data-access context with a defined lifecycle.

    Lifecycle:
        db = Database.from_settings(settings)   # construct (no I/O)
        await db.wait_until_ready()             # startup gate
        ...                                     # serve requests
        await db.dispose()                      # shutdown
    """

    def __init__(self, url: str, echo: bool = False, **engine_kwargs: Any):
        self.url = url
        self.engine: AsyncEngine = create_async_engine(url, echo=echo, **engine_kwargs)
        if url.startswith("sqlite"):
            event.listen(self.engine.sync_engine, "connect", _enable_sqlite_foreign_keys)

        # expire_on_commit=False: response models read attributes after commit
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        engine_kwargs: Dict[str, Any] = {}
        if not settings.is_sqlite:
            engine_kwargs.update(
                pool_size=settings.db_pool_size,
                max_overflow=settings.db_max_overflow,
                pool_pre_ping=settings.db_pool_pre_ping,
                pool_recycle=3600,
            )
        return cls(
            settings.database_url,
            echo=settings.log_level == "DEBUG",
            **engine_kwargs,
        )

    async def ping(self) -> None:
        """Run a trivial query; raises if the store is unreachable."""
        async with self.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))

    async def wait_until_ready(
        self,
        attempts: int = 5,
        min_wait: float = 1,
        max_wait: float = 10,
    ) -> None:
        """
        Block until the store answers, retrying with exponential backoff.

        Raises:
            SQLAlchemyError / OSError: the last failure once attempts are exhausted.
        """
        retrying = AsyncRetrying(
            stop=stop_after_attempt(attempts),
            wait=wait_exponential(multiplier=1, min=min_wait, max=max_wait),
            retry=retry_if_exception_type((SQLAlchemyError, OSError)),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        )
        async for attempt in retrying:
            with attempt:
                await self.ping()
        logger.info("Database is ready")

    async def create_all(self) -> None:
        """Create every table registered on Base.metadata (dev and tests)."""
        # Import models so they register with Base before create_all
        import notebench.models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def dispose(self) -> None:
        """Close all pooled connections."""
        await self.engine.dispose()


# ── Session Dependency ────────────────────────────────────────────────────
async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    The session comes from the Database context stored on app.state by the
    lifespan handler. On success any pending work is committed; on error the
    transaction is rolled back and the exception re-raised for the global
    handlers.
    """
    database: Database = request.app.state.db
    async with database.session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
