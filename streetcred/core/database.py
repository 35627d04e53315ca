"""
Database configuration for GetStreetCred.

Provides the async SQLAlchemy engine and session factory builders and the
declarative base class. Engines are built explicitly at startup and owned
by the storage backend; nothing here connects at import time.
"""

from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""
    pass


def build_engine(database_url: str, echo: bool = False, **kwargs) -> AsyncEngine:
    """
    Create an async engine for the given URL.

    Extra keyword arguments are passed through to create_async_engine
    (tests use them for StaticPool and check_same_thread).
    """
    engine = create_async_engine(database_url, echo=echo, future=True, **kwargs)
    if engine.dialect.name == "sqlite":
        # SQLite leaves foreign keys unenforced unless asked per connection
        event.listen(engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
    return engine


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory bound to engine, matching the app's commit semantics."""
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False,
    )


async def create_all_tables(engine: AsyncEngine) -> None:
    """Create all tables in the database (for development/testing)."""
    # Imported for its side effect of registering the models on Base.metadata
    from streetcred import models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

