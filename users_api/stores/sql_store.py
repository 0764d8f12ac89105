"""
Users API — SQL Document Store
================================

What:  DocumentStore implementation on top of async SQLAlchemy.
How:   Each operation opens a session from the factory, runs one unit of
       work, and commits on success or rolls back on error.
Who:   Selected by create_store() for any non-Mongo database URL
       (postgresql+asyncpg://..., sqlite+aiosqlite://...). The test suite
       runs the HTTP layer against this store on a temporary SQLite file.

Identifiers are UUIDs; they are exposed to clients as canonical strings and
any string that does not parse as a UUID simply matches no user.
"""

import logging
import uuid
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Dict, List, Optional

from sqlalchemy import select, text
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from users_api.database import Base, build_engine, build_session_factory
from users_api.models.user import User
from users_api.schemas.user import UserCreate, UserResponse
from users_api.stores.base import DocumentStore

logger = logging.getLogger(__name__)

# Columns a client may write; anything else in an update dict is ignored
DOCUMENT_FIELDS = frozenset({"name", "age", "email"})


def _parse_id(user_id: str) -> Optional[uuid.UUID]:
    try:
        return uuid.UUID(str(user_id))
    except ValueError:
        return None


async def _get_row(session: AsyncSession, uid: uuid.UUID) -> Optional[User]:
    result = await session.execute(select(User).where(User.id == uid))
    return result.scalar_one_or_none()


def _to_response(row: User) -> UserResponse:
    return UserResponse(
        id=str(row.id),
        name=row.name,
        age=row.age,
        email=row.email,
    )


class SqlUserStore(DocumentStore):
    """
    User persistence in a single `users` table.

    Args:
        database_url: Async SQLAlchemy URL.
        create_schema: Create the `users` table on connect if it is missing.
            Deployments that manage the schema with Alembic can turn this off.
    """

    def __init__(self, database_url: str, create_schema: bool = True):
        self.database_url = database_url
        self.create_schema = create_schema
        self._engine: Optional[AsyncEngine] = None
        self._session_factory: Optional[async_sessionmaker[AsyncSession]] = None

    # ── Lifecycle ─────────────────────────────────────────────────────────

    async def connect(self) -> None:
        if self._engine is None:
            self._engine = build_engine(self.database_url)
            self._session_factory = build_session_factory(self._engine)

        async with self._engine.begin() as conn:
            await conn.execute(text("SELECT 1"))
            if self.create_schema:
                await conn.run_sync(Base.metadata.create_all)

        logger.info("Connected to SQL store (%s)", self._engine.url.get_backend_name())

    async def close(self) -> None:
        if self._engine is not None:
            await self._engine.dispose()
            logger.info("SQL store connections disposed")
        self._engine = None
        self._session_factory = None

    async def ping(self) -> bool:
        if self._engine is None:
            return False
        try:
            async with self._engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.warning("SQL store ping failed: %s", str(e))
            return False

    @asynccontextmanager
    async def _session(self) -> AsyncGenerator[AsyncSession, None]:
        """
        One session per operation.

        Commits when the block exits cleanly, rolls back and re-raises on any
        error, and always returns the connection to the pool.
        """
        if self._session_factory is None:
            raise RuntimeError("SqlUserStore used before connect()")

        async with self._session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    # ── Queries ───────────────────────────────────────────────────────────

    async def find_all(self) -> List[UserResponse]:
        async with self._session() as session:
            result = await session.execute(
                select(User).order_by(User.seq)
            )
            return [_to_response(row) for row in result.scalars().all()]

    async def find_by_id(self, user_id: str) -> Optional[UserResponse]:
        uid = _parse_id(user_id)
        if uid is None:
            return None
        async with self._session() as session:
            row = await _get_row(session, uid)
            return _to_response(row) if row is not None else None

    async def insert(self, user: UserCreate) -> UserResponse:
        async with self._session() as session:
            row = User(**user.document())
            session.add(row)
            # Flush so the generated id, seq and created_at are populated
            await session.flush()
            return _to_response(row)

    async def update_by_id(
        self, user_id: str, fields: Dict[str, Any]
    ) -> Optional[UserResponse]:
        uid = _parse_id(user_id)
        if uid is None:
            return None
        async with self._session() as session:
            row = await _get_row(session, uid)
            if row is None:
                return None
            for field, value in fields.items():
                if field in DOCUMENT_FIELDS:
                    setattr(row, field, value)
            await session.flush()
            return _to_response(row)

    async def delete_by_id(self, user_id: str) -> Optional[UserResponse]:
        uid = _parse_id(user_id)
        if uid is None:
            return None
        async with self._session() as session:
            row = await _get_row(session, uid)
            if row is None:
                return None
            snapshot = _to_response(row)
            await session.delete(row)
            return snapshot
