"""
Database session and engine.

The engine is built on first use so a missing DATABASE_URL surfaces as a configuration error
from the caller, not as an import failure.
"""
from functools import lru_cache

from sqlalchemy import create_engine
from sqlalchemy.exc import ArgumentError
from sqlalchemy.orm import Session, sessionmaker

from vacantcourt.config import settings
from vacantcourt.core.errors import ConfigurationError


def make_engine(database_url: str):
    """Engine for DATABASE_URL. Pool options only apply to server databases (not SQLite)."""
    if not database_url:
        raise ConfigurationError(["DATABASE_URL"])
    try:
        if database_url.startswith("sqlite"):
            return create_engine(database_url, connect_args={"check_same_thread": False})
        return create_engine(
            database_url,
            pool_size=8,
            max_overflow=10,
            pool_pre_ping=True,
            pool_recycle=300,
            pool_timeout=30,
        )
    except ArgumentError as e:
        raise ConfigurationError(["DATABASE_URL"]) from e


def make_session_factory(engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@lru_cache(maxsize=1)
def get_engine():
    return make_engine(settings.database_url)


@lru_cache(maxsize=1)
def get_session_factory() -> sessionmaker:
    return make_session_factory(get_engine())


def new_session() -> Session:
    """Session on the configured database; usable wherever a sessionmaker is expected."""
    return get_session_factory()()
