"""SQLModel engine and session management."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from property_manager.core.config import settings


def make_engine(database_url: str, echo: bool = False) -> Engine:
    """Build an engine; in-memory SQLite shares one connection across threads."""

    if database_url.startswith("sqlite"):
        kwargs: dict = {"connect_args": {"check_same_thread": False}}
        if ":memory:" in database_url or database_url.rstrip("/") == "sqlite:":
            kwargs["poolclass"] = StaticPool
        return create_engine(database_url, echo=echo, **kwargs)
    return create_engine(database_url, echo=echo, pool_pre_ping=True)


engine = make_engine(settings.database_url, echo=settings.database_echo)


def init_db(bind: Engine | None = None) -> None:
    # Table models must be imported before create_all sees them.
    import property_manager.models  # noqa: F401

    SQLModel.metadata.create_all(bind or engine)


@contextmanager
def get_session(bind: Engine | None = None) -> Iterator[Session]:
    """Session as a context manager, used by scripts and the request dependency."""
    session = Session(bind or engine)
    try:
        yield session
    finally:
        session.close()


__all__ = ["engine", "make_engine", "init_db", "get_session"]
