"""Tests for engine setup and session scoping."""

from __future__ import annotations

from datetime import timedelta

import pytest
from sqlalchemy import inspect

from helpers import T0, make_opportunity
from pulse_core.db import engine as db_engine
from pulse_core.db import init_engine, normalize_url, session_scope
from pulse_core.models import Trade
from pulse_core.store import load_trades, persist_trade


@pytest.fixture
def file_engine(tmp_path, monkeypatch):
    monkeypatch.setattr(db_engine, "_engine", None)
    monkeypatch.setattr(db_engine, "_session_factory", None)
    engine = init_engine(f"sqlite:///{tmp_path / 'pulse.db'}", create_tables=True)
    yield engine
    engine.dispose()


class TestNormalizeUrl:
    def test_postgres_routed_through_psycopg(self):
        assert normalize_url("postgresql://u:p@db/pulse") == "postgresql+psycopg://u:p@db/pulse"
        assert normalize_url("postgres://u:p@db/pulse") == "postgresql+psycopg://u:p@db/pulse"

    def test_explicit_driver_untouched(self):
        assert normalize_url("postgresql+asyncpg://db/pulse") == "postgresql+asyncpg://db/pulse"
        assert normalize_url("sqlite:///pulse.db") == "sqlite:///pulse.db"


class TestEngine:
    def test_tables_created(self, file_engine):
        tables = set(inspect(file_engine).get_table_names())
        assert {"trades", "opportunity_history"} <= tables

    def test_get_engine_before_init(self, monkeypatch):
        monkeypatch.setattr(db_engine, "_engine", None)
        with pytest.raises(RuntimeError):
            db_engine.get_engine()

    def test_session_scope_before_init(self, monkeypatch):
        monkeypatch.setattr(db_engine, "_session_factory", None)
        with pytest.raises(RuntimeError):
            with session_scope():
                pass


class TestSessionScope:
    def test_trade_visible_in_next_scope(self, file_engine):
        opp = make_opportunity()
        trade = Trade(
            id="t1",
            opportunity_id=opp.id,
            condition=opp.condition,
            asset=opp.asset,
            strategy=opp.strategy,
            executed_at=T0 + timedelta(seconds=5),
            execution_speed=5.0,
        )
        with session_scope() as session:
            persist_trade(session, trade)
        with session_scope() as session:
            assert [t.id for t in load_trades(session)] == ["t1"]

    def test_error_propagates(self, file_engine):
        with pytest.raises(KeyError):
            with session_scope():
                raise KeyError("boom")
