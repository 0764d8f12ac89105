"""Create users table

Revision ID: 001
Revises: None
Create Date: 2026-10-19 00:00:00.000000+00:00

What:  Creates the `users` table used by SqlUserStore.
How:   Portable column types (generic Uuid, timezone-aware DateTime) so the
       same migration runs on PostgreSQL and SQLite.

Rollback: downgrade() drops the table entirely (all user data is lost).
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create the users table; GET /users lists it in `seq` order."""
    op.create_table(
        "users",
        sa.Column("seq", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("id", sa.Uuid(as_uuid=True), nullable=False),
        sa.Column("name", sa.String(255), nullable=True),
        sa.Column("age", sa.Float(), nullable=True),
        # No unique constraint: duplicate emails are accepted
        sa.Column("email", sa.String(320), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("seq"),
        sa.UniqueConstraint("id", name="uq_users_id"),
    )


def downgrade() -> None:
    op.drop_table("users")
