"""
Alembic environment for the cricket data schema (PostgreSQL, asyncpg).

  • The URL comes from cricket_api.core.config, never from alembic.ini.
  • Base.metadata covers the credential store, the usage ledger, the
    13 resource tables, data_versions and sync_status, so autogenerate
    sees every table the gateway and sync engine touch.
  • Tests build their SQLite schema with create_all and never run this.
"""

import asyncio
from logging.config import fileConfig

from alembic import context
from sqlalchemy import pool
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import async_engine_from_config

from cricket_api.core.config import settings
from cricket_api.core.database import Base

# Credential store and usage ledger
import cricket_api.models.api_user  # noqa: F401
import cricket_api.models.api_key  # noqa: F401
import cricket_api.models.api_log  # noqa: F401

# Synced data: resource tables (via the registry), history, health
import cricket_api.resources  # noqa: F401
import cricket_api.models.data_version  # noqa: F401
import cricket_api.models.sync_status  # noqa: F401

config = context.config
config.set_main_option("sqlalchemy.url", settings.DATABASE_URL)

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def _configure(**kwargs) -> None:  # type: ignore[no-untyped-def]
    context.configure(
        target_metadata=target_metadata,
        compare_type=True,
        **kwargs,
    )


def run_migrations_offline() -> None:
    """Emit SQL for the revisions without connecting."""
    _configure(
        url=config.get_main_option("sqlalchemy.url"),
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def _run_with_connection(connection: Connection) -> None:
    _configure(connection=connection)
    with context.begin_transaction():
        context.run_migrations()


async def run_migrations_online() -> None:
    """Apply the revisions over a throwaway async engine."""
    connectable = async_engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )
    try:
        async with connectable.connect() as connection:
            await connection.run_sync(_run_with_connection)
    finally:
        await connectable.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    asyncio.run(run_migrations_online())
