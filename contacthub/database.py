from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.orm import declarative_base
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import AsyncIterator, Optional

from contacthub.core.config import settings

DATABASE_URL = settings.DATABASE_URL

# SQLite (local/dev) uses a single-file pool that rejects pool sizing
_engine_options = {}
if not DATABASE_URL.startswith("sqlite"):
    _engine_options = {"pool_pre_ping": True, "pool_size": 5, "max_overflow": 10}


def enable_sqlite_savepoints(async_engine: AsyncEngine) -> None:
    """
    Let SQLAlchemy issue BEGIN itself on SQLite so SAVEPOINT works.

    The sqlite3 driver otherwise defers BEGIN and mishandles SAVEPOINT
    (documented pysqlite/aiosqlite recipe).
    """
    @event.listens_for(async_engine.sync_engine, "connect")
    def _disable_driver_begin(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(async_engine.sync_engine, "begin")
    def _emit_begin(conn):
        conn.exec_driver_sql("BEGIN")


# Create async engine
engine = create_async_engine(
    DATABASE_URL,
    echo=False,
    future=True,
    **_engine_options,
)

if DATABASE_URL.startswith("sqlite"):
    enable_sqlite_savepoints(engine)

# Create async session maker
AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False,
)

# Create declarative base for models
Base = declarative_base()


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """SQLite hands back naive datetimes; treat them as UTC."""
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


@asynccontextmanager
async def session_scope() -> AsyncIterator[AsyncSession]:
    """
    Request-scoped session: commit on success, roll back on any error.
    Usage: async with session_scope() as session: ...
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
