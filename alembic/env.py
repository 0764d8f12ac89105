"""
Alembic Migration Environment
===============================

What:  Configures Alembic for the async SQLAlchemy backend (SqlUserStore).
How:   Takes the store URL from application settings, refuses MongoDB URLs,
       and runs migrations through an async engine via connection.run_sync().
       SQLite gets batch mode so ALTER TABLE migrations on `users` work there
       as they do on PostgreSQL.
When:  `alembic upgrade head` before starting the service against a SQL
       database with SqlUserStore(create_schema=False). MongoDB deployments
       do not use migrations.
"""

import asyncio
from logging.config import fileConfig

from sqlalchemy import pool
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import async_engine_from_config
from alembic import context

from users_api.config import settings
from users_api.database import Base
from users_api.models.user import User  # noqa: F401
from users_api.stores import MONGO_SCHEMES

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata

store_url = settings.database_url
scheme = store_url.split("://", 1)[0].lower()
if scheme in MONGO_SCHEMES:
    raise SystemExit(
        "DATABASE_URL points at MongoDB; Alembic migrations only apply to SQL backends."
    )

# ConfigParser interpolation: a literal % in the URL must be doubled
config.set_main_option("sqlalchemy.url", store_url.replace("%", "%%"))
render_as_batch = scheme.startswith("sqlite")


def run_migrations_offline() -> None:
    """Emit migration SQL for the users table without connecting."""
    context.configure(
        url=store_url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        render_as_batch=render_as_batch,
    )

    with context.begin_transaction():
        context.run_migrations()


def do_run_migrations(connection: Connection) -> None:
    context.configure(
        connection=connection,
        target_metadata=target_metadata,
        compare_type=True,
        render_as_batch=render_as_batch,
    )

    with context.begin_transaction():
        context.run_migrations()


async def run_async_migrations() -> None:
    """Apply pending migrations over a single unpooled async connection."""
    connectable = async_engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    async with connectable.connect() as connection:
        await connection.run_sync(do_run_migrations)

    await connectable.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    asyncio.run(run_async_migrations())
