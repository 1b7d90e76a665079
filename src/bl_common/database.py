"""Store plumbing: declarative base, engine and session factory builders.

The engine is built once at application startup (see src/main.py lifespan)
and disposed at shutdown. Services receive the session factory, never the
engine itself.
"""

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

UNIQUE_VIOLATION = "23505"
FOREIGN_KEY_VIOLATION = "23503"


class Base(DeclarativeBase):
    """Shared declarative base for all ORM models across modules."""

    pass


def build_engine(database_url: str, echo: bool = False) -> AsyncEngine:
    return create_async_engine(
        database_url,
        echo=echo,
        pool_size=20,
        max_overflow=10,
    )


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


def integrity_violation(exc: IntegrityError) -> tuple[str | None, str]:
    """Return (SQLSTATE, message) for a driver-level integrity error.

    asyncpg errors surface through SQLAlchemy's adapter with both ``sqlstate``
    and ``pgcode`` set; the message carries the constraint name.
    """
    orig = exc.orig
    code = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    return code, str(orig)
