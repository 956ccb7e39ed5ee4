from __future__ import annotations
import asyncio
import os
from logging.config import fileConfig
from sqlalchemy import pool
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import async_engine_from_config
from alembic import context

# Alembic Config
config = context.config
if config.config_file_name:
    fileConfig(config.config_file_name)

# DB-URL aus ENV übernehmen (gleiche async URL wie die App)
from spacetime.core.config import settings  # noqa: E402

db_url = os.getenv("DATABASE_URL") or settings.database_url
config.set_main_option("sqlalchemy.url", db_url)

# Models-Metadata laden
from spacetime.database import Base  # noqa: E402
import spacetime.models  # noqa: E402,F401

target_metadata = Base.metadata

def run_migrations_offline() -> None:
    """Offline: ohne DB-Connection."""
    url = config.get_main_option("sqlalchemy.url")
    context.configure(
        url=url,
        target_metadata=target_metadata,
        literal_binds=True,
        compare_type=True,
        compare_server_default=True,
    )
    with context.begin_transaction():
        context.run_migrations()

def _do_run_migrations(connection: Connection) -> None:
    context.configure(
        connection=connection,
        target_metadata=target_metadata,
        compare_type=True,
        compare_server_default=True,
    )
    with context.begin_transaction():
        context.run_migrations()

async def run_migrations_online() -> None:
    """Online: mit echter (async) Connection."""
    connectable = async_engine_from_config(
        config.get_section(config.config_ini_section) or {},
        prefix="sqlalchemy.",            # WICHTIG: erwartet 'sqlalchemy.url'
        poolclass=pool.NullPool,
    )
    async with connectable.connect() as connection:
        await connection.run_sync(_do_run_migrations)
    await connectable.dispose()

if context.is_offline_mode():
    run_migrations_offline()
else:
    asyncio.run(run_migrations_online())
