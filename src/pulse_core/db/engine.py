"""Engine setup and session scoping for trade and opportunity persistence."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

import structlog
from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker

from pulse_core.db.base import Base

log = structlog.get_logger("db")

_engine: Engine | None = None
_session_factory: sessionmaker[Session] | None = None


def normalize_url(url: str) -> str:
    """Route plain ``postgresql://`` URLs through the psycopg 3 driver."""
    scheme, sep, rest = url.partition("://")
    if sep and scheme in ("postgres", "postgresql"):
        return f"postgresql+psycopg://{rest}"
    return url


def _engine_kwargs(url: str, overrides: dict[str, Any]) -> dict[str, Any]:
    kwargs: dict[str, Any] = {}
    if url.startswith("sqlite"):
        # Feed-driven persistence callbacks may run off the creating thread.
        kwargs["connect_args"] = {"check_same_thread": False}
    else:
        kwargs["pool_pre_ping"] = True
    kwargs.update(overrides)
    return kwargs


def create_schema(engine: Engine | None = None) -> None:
    """Create the trades and opportunity history tables if missing."""
    import pulse_core.db.tables  # noqa: F401

    Base.metadata.create_all(engine or get_engine())


def init_engine(url: str, *, create_tables: bool = False, **kwargs: Any) -> Engine:
    """Bind the process-wide engine and session factory to *url*."""
    global _engine, _session_factory
    if _engine is not None:
        _engine.dispose()
    url = normalize_url(url)
    _engine = create_engine(url, **_engine_kwargs(url, kwargs))
    _session_factory = sessionmaker(bind=_engine, expire_on_commit=False)
    log.info("database_ready", dialect=_engine.dialect.name)
    if create_tables:
        create_schema(_engine)
    return _engine


def get_engine() -> Engine:
    if _engine is None:
        raise RuntimeError("database engine not initialised; call init_engine() first")
    return _engine


@contextmanager
def session_scope() -> Iterator[Session]:
    """Session for one unit of work, rolled back if the block raises."""
    if _session_factory is None:
        raise RuntimeError("database engine not initialised; call init_engine() first")
    session = _session_factory()
    try:
        yield session
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
