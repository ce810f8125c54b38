"""Pipeline runner — simulated feed through the coordinator with trade persistence."""

from __future__ import annotations

import asyncio

import structlog

from pulse_core.config.loader import load_config
from pulse_core.config.schema import AppConfig
from pulse_core.db.engine import init_engine, session_scope
from pulse_core.feed import SimulatedFeed
from pulse_core.logging.setup import setup_logging
from pulse_core.models import Trade
from pulse_core.opportunities import ArchivedOpportunity
from pulse_core.pipeline.coordinator import PipelineCoordinator
from pulse_core.store import load_trades, persist_archived_opportunity, persist_trade
from pulse_core.trades import TradeLedger

log = structlog.get_logger("pipeline")


def build_coordinator(config: AppConfig) -> PipelineCoordinator:
    """Wire a coordinator whose trades and expired opportunities are persisted."""
    init_engine(config.database.url, create_tables=True)

    with session_scope() as session:
        trades = load_trades(session)
    log.info("trades_restored", count=len(trades))

    coordinator = PipelineCoordinator.from_config(config, ledger=TradeLedger(trades))

    def _save_trade(trade: Trade) -> None:
        with session_scope() as session:
            persist_trade(session, trade)

    def _save_archived(archived: ArchivedOpportunity) -> None:
        with session_scope() as session:
            persist_archived_opportunity(session, archived)

    coordinator.trades.subscribe(_save_trade)
    coordinator.expired.subscribe(_save_archived)
    coordinator.mastery_updates.subscribe(
        lambda m: log.info("mastery_updated", score=round(m.score, 2), win_rate=round(m.win_rate, 3))
    )
    return coordinator


async def run_loop(config: AppConfig, max_ticks: int | None = None) -> int:
    """Drive the coordinator from the simulated feed."""
    coordinator = build_coordinator(config)
    if not coordinator.detectors:
        log.error("no_detectors_enabled")
        return 0

    feed = SimulatedFeed(
        assets=config.assets,
        interval_s=config.feed.interval_s,
        seed=config.feed.seed,
    )
    coordinator.opportunities.subscribe(
        lambda live: log.info("live_opportunities", count=len(live))
    )
    return await coordinator.run(feed, max_ticks=max_ticks)


def main(config_path: str | None = None, max_ticks: int | None = None) -> None:
    """Load config, set up logging and run the async loop."""
    config = load_config(config_path)
    setup_logging(level=config.logging.level, log_format=config.logging.format)
    asyncio.run(run_loop(config, max_ticks=max_ticks))
