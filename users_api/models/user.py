"""
Users API — User SQLAlchemy Model
===================================

What:  ORM model representing the `users` table for the SQL backend.
How:   Inherits from the shared DeclarativeBase; Alembic reads this model
       for migrations and SqlUserStore queries it.

Table layout:
    - seq: autoincrement surrogate key; its order is the insertion order,
      whatever the clock resolution
    - id: public UUID, generated in Python so the value is known before the
      INSERT completes (works the same on PostgreSQL and SQLite)
    - name / age / email: the user document fields, all nullable
    - created_at: UTC insertion time, informational
"""

import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import DateTime, Float, Integer, String, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from users_api.database import Base


class User(Base):
    """
    A stored user record.

    Lifecycle:
        1. Inserted by POST /users with a fresh UUID and the next seq
        2. Mutated in place by PUT /users/{id} (only the fields sent)
        3. Removed by DELETE /users/{id}
    """

    __tablename__ = "users"

    seq: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        nullable=False,
        default=uuid.uuid4,
    )

    name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    age: Mapped[Optional[float]] = mapped_column(Float, nullable=True)

    # Not unique: duplicate emails are allowed
    email: Mapped[Optional[str]] = mapped_column(String(320), nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    __table_args__ = (
        UniqueConstraint("id", name="uq_users_id"),
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, name={self.name!r}, email={self.email!r})>"
