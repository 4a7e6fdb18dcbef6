"""
Async SQLAlchemy database setup.

Holds the calculation history (the record store) and saved comparisons.

A city record is updated read-merge-write, so writers to the same record
must not interleave. On PostgreSQL the store takes a row lock
(SELECT ... FOR UPDATE). SQLite has no row locks, so every SQLite
transaction is opened with BEGIN IMMEDIATE and holds the database write
lock from its first statement to commit.
"""

from typing import AsyncGenerator

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from cpi_app.config import settings

# Seconds a SQLite connection waits for the write lock before failing
SQLITE_LOCK_TIMEOUT = 15


def use_immediate_transactions(engine: AsyncEngine) -> AsyncEngine:
    """
    Make every transaction on a SQLite engine start with BEGIN IMMEDIATE.

    The driver's own implicit BEGIN is switched off so SQLAlchemy controls
    when transactions start; this also makes SAVEPOINT work. No-op for
    other databases.
    """
    if engine.dialect.name != "sqlite":
        return engine

    @event.listens_for(engine.sync_engine, "connect")
    def _disable_driver_begin(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def _begin_immediate(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")

    return engine


def create_engine_for(url: str, echo: bool = False, **kwargs) -> AsyncEngine:
    """Create an async engine for `url` with the locking the record store relies on."""
    if url.startswith("sqlite"):
        connect_args = kwargs.pop("connect_args", {})
        connect_args.setdefault("timeout", SQLITE_LOCK_TIMEOUT)
        kwargs["connect_args"] = connect_args
    return use_immediate_transactions(create_async_engine(url, echo=echo, future=True, **kwargs))


engine = create_engine_for(settings.async_database_url, echo=settings.debug)

async_session_maker = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


class Base(DeclarativeBase):
    pass


async def init_db() -> None:
    """Create the calculation_history and city_comparisons tables if missing."""
    async with engine.begin() as conn:
        from cpi_app.models import calculation  # noqa: F401

        await conn.run_sync(Base.metadata.create_all)


async def close_db() -> None:
    """Release pooled connections on shutdown."""
    await engine.dispose()


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Request-scoped session: committed when the request succeeds, rolled back
    otherwise. Keeps the write lock (SQLite) or row locks (PostgreSQL) taken
    during the request until then.
    """
    async with async_session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
