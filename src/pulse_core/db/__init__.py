"""Database layer — engine, session, ORM base."""

from pulse_core.db.base import Base
from pulse_core.db.engine import create_schema, get_engine, init_engine, normalize_url, session_scope

__all__ = ["Base", "create_schema", "get_engine", "init_engine", "normalize_url", "session_scope"]
