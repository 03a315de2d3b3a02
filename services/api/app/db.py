"""Database session and connectivity helpers for the questions service.

This module centralizes SQLAlchemy engine/session construction and provides the
FastAPI dependency (`get_db`) used by route handlers.

Design goals:
- single source of truth for the database URL (`Settings.database_url`)
- one engine per application, built by `create_app` and kept on `app.state`
- short-lived, request-scoped DB sessions
- safe teardown/rollback on errors
"""

from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from .logging_config import get_logger
from .models import Base

logger = get_logger(__name__)

_MEMORY_URLS = ("sqlite://", "sqlite:///:memory:")


def make_engine(database_url: str, echo: bool = False, **kwargs) -> Engine:
    """Build an engine for `database_url`.

    SQLite connections are shared across the worker threads FastAPI runs sync
    handlers on, so `check_same_thread` is disabled for them. An in-memory
    SQLite database lives on a single connection (`StaticPool`) so every
    session sees the same tables.
    """
    if database_url.startswith("sqlite"):
        connect_args = kwargs.pop("connect_args", {})
        connect_args.setdefault("check_same_thread", False)
        kwargs["connect_args"] = connect_args
        if database_url in _MEMORY_URLS:
            kwargs.setdefault("poolclass", StaticPool)
    return create_engine(database_url, echo=echo, **kwargs)


def make_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


def init_db(bind: Engine) -> None:
    """Create any missing tables on `bind`."""
    Base.metadata.create_all(bind=bind)
    logger.info("database_initialized", url=bind.url.render_as_string(hide_password=True))


def get_db(request: Request):
    """FastAPI dependency that yields a request-scoped SQLAlchemy session.

    Route handlers declare `db: Session = Depends(get_db)` to receive a session
    from the session factory `create_app` stored on `app.state`.

    Args:
        request: The incoming request (injected), used to reach the app state.

    Yields:
        sqlalchemy.orm.Session: An open SQLAlchemy session for the duration of the request.

    Notes:
        Transaction boundaries are controlled by the repository functions, which
        commit on success and roll back before re-raising on failure.
    """
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()
