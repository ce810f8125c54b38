"""Shared test fixtures."""

from __future__ import annotations

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session

from pulse_core.db.base import Base


@pytest.fixture
def db_session():
    """In-memory SQLite session with all tables created."""
    import pulse_core.db.tables  # noqa: F401

    engine = create_engine("sqlite:///:memory:")
    Base.metadata.create_all(engine)

    session = Session(engine)
    yield session
    session.close()
    engine.dispose()
