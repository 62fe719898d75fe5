"""Database configuration and session management."""

from __future__ import annotations

import logging
from collections.abc import Generator

from fastapi.requests import HTTPConnection
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker
from sqlalchemy.pool import StaticPool

from kosthub.config import get_settings


class Base(DeclarativeBase):
    """Base class for SQLAlchemy models."""


logger = logging.getLogger(__name__)


def build_engine(database_url: str) -> Engine:
    """Create an engine for ``database_url``.

    SQLite connections are shared across threads because FastAPI runs sync
    routes in a worker pool; in-memory SQLite additionally needs a single
    static connection or every checkout would see an empty database.
    """

    url = make_url(database_url)
    if url.get_backend_name() == "sqlite":
        options: dict = {"connect_args": {"check_same_thread": False}}
        if url.database in (None, "", ":memory:"):
            options["poolclass"] = StaticPool
        return create_engine(database_url, **options)
    return create_engine(database_url, pool_pre_ping=True)


def build_session_factory(bind: Engine) -> sessionmaker[Session]:
    return sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=bind)


engine = build_engine(get_settings().database_url)
SessionLocal = build_session_factory(engine)


def initialize_database(bind: Engine | None = None) -> None:
    """Ensure all ORM models have corresponding database tables."""

    from kosthub.infrastructure import models  # noqa: F401  # ensure models are imported

    Base.metadata.create_all(bind=bind or engine, checkfirst=True)
    logger.info("Database schema verified")


def get_db(connection: HTTPConnection) -> Generator[Session, None, None]:
    """Yield a database session and close it afterwards.

    The session factory wired into ``app.state`` at startup is preferred so
    tests and alternative deployments can point the API at another database.
    """

    factory = getattr(connection.app.state, "session_factory", None) or SessionLocal
    db = factory()
    try:
        yield db
    finally:
        db.close()


__all__ = [
    "Base",
    "SessionLocal",
    "build_engine",
    "build_session_factory",
    "engine",
    "get_db",
    "initialize_database",
]
