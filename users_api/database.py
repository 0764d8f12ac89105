"""
Users API — SQL Engine & Session Management
=============================================

What:  Async SQLAlchemy engine construction, session factory, and the
       declarative base for ORM models.
How:   `build_engine()` creates an async engine with connection pooling
       from a URL; `build_session_factory()` wraps it in an
       async_sessionmaker. Both are used by SqlUserStore and by Alembic.
Who:   Only the SQL backend. The MongoDB backend does not touch this module.

Connection Pooling Strategy:
    pool_size / max_overflow / pool_pre_ping come from settings.
    pool_recycle=3600 recycles connections every hour.
    SQLite URLs skip all pool options: aiosqlite connections are local files
    and SQLAlchemy picks a suitable pool for them on its own.
"""

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from users_api.config import settings


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Every model registers with this metadata, which Alembic reads for
    --autogenerate and SqlUserStore uses to create tables on connect.
    """
    pass


def build_engine(database_url: str) -> AsyncEngine:
    """
    Create an async engine for `database_url`.

    SQL echo is enabled only at DEBUG log level.
    """
    url = make_url(database_url)
    options = {"echo": settings.log_level == "DEBUG"}

    if url.get_backend_name() != "sqlite":
        options.update(
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_pre_ping=settings.db_pool_pre_ping,
            pool_recycle=3600,
        )

    return create_async_engine(url, **options)


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """
    Session factory bound to `engine`.

    expire_on_commit=False keeps attribute access working on objects after
    their session has committed.
    """
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )
