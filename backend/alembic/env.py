"""Alembic environment — migrations for the products table.

The product service reads DATABASE_URL; migrations read the same variable so a
deploy runs `alembic upgrade head` and the service against one store. alembic.ini
only supplies the docker-compose default.

Design Decisions:
    - URL normalised by shopfront.config.asyncpg_url, the same rewrite ServiceSettings applies
    - compare_type=True: price precision and the timestamp timezone flag are part of
      the contract, so autogenerate must notice when they drift
    - In-memory SQLite is refused: a migration there would vanish with the connection
"""

import asyncio
import os
from logging.config import fileConfig

from sqlalchemy import pool
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import async_engine_from_config

from alembic import context

from shopfront.config import asyncpg_url
from shopfront.db.base import Base
import shopfront.models  # noqa: F401

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def store_url() -> str:
    url = os.environ.get("DATABASE_URL") or config.get_main_option("sqlalchemy.url")
    if not url:
        raise RuntimeError("DATABASE_URL is not set and alembic.ini has no sqlalchemy.url")
    if url.startswith("sqlite") and ":memory:" in url:
        raise RuntimeError("refusing to migrate an in-memory SQLite store")
    return asyncpg_url(url)


def _configure(**kwargs) -> None:
    context.configure(target_metadata=target_metadata, compare_type=True, **kwargs)


def run_migrations_offline() -> None:
    """Emit SQL for the products schema without a live connection."""
    _configure(
        url=store_url(),
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def _migrate(connection: Connection) -> None:
    _configure(connection=connection)
    with context.begin_transaction():
        context.run_migrations()


async def run_async_migrations() -> None:
    configuration = config.get_section(config.config_ini_section, {})
    configuration["sqlalchemy.url"] = store_url()
    connectable = async_engine_from_config(
        configuration,
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )
    try:
        async with connectable.connect() as connection:
            await connection.run_sync(_migrate)
    finally:
        await connectable.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    asyncio.run(run_async_migrations())
