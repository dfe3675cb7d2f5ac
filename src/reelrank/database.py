"""Database configuration with async SQLAlchemy support."""

from collections.abc import AsyncGenerator

from sqlalchemy import event
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from reelrank.config import get_settings


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


settings = get_settings()

# Create async engine
engine = create_async_engine(
    settings.database_url,
    echo=settings.debug,
    connect_args=(
        {"timeout": settings.database_busy_timeout}
        if settings.database_url.startswith("sqlite")
        else {}
    ),
)

# Create async session factory
async_session = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


def _is_sqlite(dbapi_connection) -> bool:
    return "sqlite" in type(dbapi_connection).__module__


@event.listens_for(Engine, "connect")
def configure_sqlite_connection(dbapi_connection, _connection_record) -> None:
    """Enforce foreign keys on SQLite and let SQLAlchemy manage transactions.

    The driver's own implicit BEGIN is disabled so that SAVEPOINTs nest
    inside a real transaction and transactions start the way
    ``emit_sqlite_begin`` says.
    """
    if not _is_sqlite(dbapi_connection):
        return
    dbapi_connection.isolation_level = None
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


@event.listens_for(Engine, "begin")
def emit_sqlite_begin(conn: Connection) -> None:
    """Start SQLite transactions with the write lock already held.

    SQLite has no row locks, so ``SELECT ... FOR UPDATE`` is a no-op there.
    Taking the lock at BEGIN makes concurrent transactions queue for up to
    the busy timeout instead of failing with "database is locked" when a
    reader tries to upgrade to a writer.
    """
    if conn.dialect.name == "sqlite":
        conn.exec_driver_sql("BEGIN IMMEDIATE")


async def get_db() -> AsyncGenerator[AsyncSession]:
    """Dependency that provides an async database session.

    Yields a session and ensures it's closed after the request. Everything a
    request writes is committed together or rolled back together.
    """
    async with async_session() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
