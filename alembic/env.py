"""Alembic environment configuration for the Trust Score Engine."""
from logging.config import fileConfig
from sqlalchemy import engine_from_config, pool
from alembic import context

# Import all ORM models (this is CRITICAL for autogenerate to work)
from trustscore.database.base import Base
from trustscore.database.orm import (  # noqa: F401
    ScoreRecordRow,
    SandboxScoreRecordRow,
    EmploymentRecord,
    Reference,
    Dispute,
    RehireEntry,
    FraudFlag,
    BehavioralVectorRow,
    EmployerAccount,
    IndustryBaselineRow,
    EmployerBaselineRow,
    RiskModelConfigRow,
    SandboxSession,
    SandboxProfile,
)

# Import settings to get database URL
from trustscore.config import get_settings

# Alembic Config object
config = context.config

# Interpret the config file for Python logging
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

# Set target metadata for 'autogenerate' support
target_metadata = Base.metadata


def get_url():
    """Database URL from settings (DATABASE_URL)."""
    return get_settings().database_url


def run_migrations_offline() -> None:
    """
    Run migrations in 'offline' mode.

    This configures the context with just a URL and not an Engine.
    By skipping the Engine creation we don't even need a DBAPI to be available.
    """
    url = get_url()
    context.configure(
        url=url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """
    Run migrations in 'online' mode.

    In this scenario we need to create an Engine and associate a connection with the context.
    """
    # Override sqlalchemy.url in alembic.ini
    configuration = config.get_section(config.config_ini_section) or {}
    configuration["sqlalchemy.url"] = get_url()

    connectable = engine_from_config(
        configuration,
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            render_as_batch=connection.dialect.name == "sqlite",
        )

        with context.begin_transaction():
            context.run_migrations()


# Determine which mode to run in
if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
