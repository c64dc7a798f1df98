"""Database initialization and utilities."""

from __future__ import annotations

import structlog
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from shiftboard.config import DEFAULT_DB_URL

from .models import Base

log = structlog.get_logger(__name__)


def create_db_engine(db_url: str = DEFAULT_DB_URL, echo: bool = False):
    """Create SQLAlchemy engine."""
    if db_url in ("sqlite://", "sqlite:///:memory:"):
        # One shared connection, otherwise each session sees its own empty database
        return create_engine(
            db_url,
            echo=echo,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    return create_engine(db_url, echo=echo)


def init_database(db_url: str = DEFAULT_DB_URL):
    """Initialize database and create all tables. Returns the engine."""
    engine = create_db_engine(db_url)
    Base.metadata.create_all(engine)
    log.info("database_initialized", db_url=db_url)
    return engine


def get_session_factory(db_url: str = DEFAULT_DB_URL, engine=None) -> sessionmaker:
    """Get a session factory for the database."""
    engine = engine if engine is not None else create_db_engine(db_url)
    return sessionmaker(bind=engine, expire_on_commit=False)


def get_session(db_url: str = DEFAULT_DB_URL) -> Session:
    """Get a new database session."""
    SessionFactory = get_session_factory(db_url)
    return SessionFactory()


def reset_database(db_url: str = DEFAULT_DB_URL) -> None:
    """Drop all tables and recreate (WARNING: deletes all data!)."""
    engine = create_db_engine(db_url)
    Base.metadata.drop_all(engine)
    Base.metadata.create_all(engine)
    log.warning("database_reset", db_url=db_url)
