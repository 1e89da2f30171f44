"""Migration environment for the community events schema.

The target URL comes from ``Settings.DATABASE_URL`` (so the same `.env` drives
the app and migrations). Importing ``community_events.models`` registers users,
events, RSVPs and volunteers on ``Base.metadata`` for autogenerate.
"""
from logging.config import fileConfig
from sqlalchemy import engine_from_config, pool
from alembic import context

from community_events.config import settings
from community_events.database import Base

# Import all models so they register with Base.metadata
import community_events.models  # noqa: F401

config = context.config
config.set_main_option("sqlalchemy.url", settings.DATABASE_URL)

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def run_migrations_offline() -> None:
    """Run migrations in 'offline' mode."""
    url = config.get_main_option("sqlalchemy.url")
    context.configure(
        url=url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Run migrations in 'online' mode."""
    connectable = engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )
    with connectable.connect() as connection:
        context.configure(connection=connection, target_metadata=target_metadata)
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
