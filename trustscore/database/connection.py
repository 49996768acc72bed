"""Database connection and session management."""
from functools import lru_cache

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from trustscore.config import get_settings
from trustscore.database.base import Base


def build_engine(url: str, echo: bool = False) -> Engine:
    """Create an engine for ``url``.

    SQLite connections are shared across the batch worker threads, so the
    same-thread check is disabled there; other backends get a pool.
    """
    if url.startswith("sqlite"):
        return create_engine(
            url,
            echo=echo,
            connect_args={"check_same_thread": False},
        )
    return create_engine(
        url,
        echo=echo,  # Log SQL in debug mode
        pool_pre_ping=True,  # Verify connections before using
        pool_size=5,
        max_overflow=10,
    )


@lru_cache
def get_engine() -> Engine:
    """Create and cache the SQLAlchemy engine from settings."""
    settings = get_settings()
    return build_engine(settings.database_url, echo=settings.debug)


def make_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine, expire_on_commit=False)


@lru_cache
def get_session_factory() -> sessionmaker:
    """Session factory bound to the settings engine."""
    return make_session_factory(get_engine())


def init_db(engine: Engine) -> None:
    """Create all tables (development and tests; production uses alembic)."""
    import trustscore.database.orm  # noqa: F401  registers the models

    Base.metadata.create_all(engine)

