"""Pipeline coordinator — snapshot → detectors → registry → subscribers."""

from __future__ import annotations

import asyncio
import uuid
from collections.abc import Callable, Sequence
from datetime import datetime, timezone
from typing import Any

import structlog

from pulse_core.config.schema import AppConfig, ScoringConfig
from pulse_core.detection import DETECTOR_REGISTRY, Detector, HistoryBuffers, HistoryView
from pulse_core.errors import InvalidSnapshotError, SettlementConflictError
from pulse_core.events import Channel
from pulse_core.feed import SnapshotFeed, ensure_valid_snapshot
from pulse_core.interpretation import DefaultInterpreter, Interpreter, interpret
from pulse_core.logging import tick_context
from pulse_core.models import (
    DetectedOpportunity,
    MarketSnapshot,
    MasteryMetrics,
    RankingContext,
    SkillSignals,
    Trade,
    TradeOutcome,
)
from pulse_core.opportunities import ArchivedOpportunity, OpportunityRegistry, TickResult
from pulse_core.scoring import compute_mastery
from pulse_core.trades import SettlementVerdict, TradeLedger

# Ensure all detector modules are imported so @register fires
import pulse_core.detection.detectors  # noqa: F401

log = structlog.get_logger("pipeline")

QUICK_REACTION_S = 10.0


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def instantiate_detectors(config: AppConfig) -> list[Detector]:
    """Build detector instances in registry order, applying per-detector config.

    Detectors absent from config run with defaults; ``enabled: false`` drops one.
    """
    instances: list[Detector] = []
    for name in config.detectors:
        if name not in DETECTOR_REGISTRY:
            log.warning("detector_not_found", detector=name)
    for name, cls in DETECTOR_REGISTRY.items():
        conf = config.detectors.get(name)
        if conf is not None and not conf.enabled:
            log.info("detector_disabled", detector=name)
            continue
        params: dict[str, Any] = dict(conf.params) if conf is not None else {}
        instances.append(cls(**params))
        log.info("detector_loaded", detector=name, params=params)
    return instances


class PipelineCoordinator:
    """Owns one registry, one ledger and per-asset history buffers.

    Ticks are serialised: a tick's evict → dedup → insert → publish finishes
    before the next one starts mutating the registry. Subscribers receive an
    immutable tuple of the live set.
    """

    def __init__(
        self,
        detectors: Sequence[Detector],
        *,
        registry: OpportunityRegistry | None = None,
        ledger: TradeLedger | None = None,
        interpreter: Interpreter | None = None,
        scoring: ScoringConfig | None = None,
        ranking: RankingContext | None = None,
        history_capacity: int = 100,
        parallel_detectors: bool = False,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.detectors = list(detectors)
        self.registry = registry or OpportunityRegistry()
        self.ledger = ledger or TradeLedger()
        self.interpreter: Interpreter = interpreter or DefaultInterpreter()
        self.scoring = scoring or ScoringConfig()
        self.ranking = ranking or RankingContext()
        self.history_capacity = history_capacity
        self.parallel_detectors = parallel_detectors
        self.clock = clock

        self.opportunities: Channel[tuple[DetectedOpportunity, ...]] = Channel("opportunities")
        self.expired: Channel[ArchivedOpportunity] = Channel("expired")
        self.trades: Channel[Trade] = Channel("trades")
        self.mastery_updates: Channel[MasteryMetrics] = Channel("mastery")

        self._history: dict[str, HistoryBuffers] = {}
        self._last_ts: dict[str, datetime] = {}
        self._tick_lock = asyncio.Lock()

    @classmethod
    def from_config(cls, config: AppConfig, **kwargs: Any) -> PipelineCoordinator:
        return cls(
            instantiate_detectors(config),
            registry=OpportunityRegistry(dedup_window_s=config.registry.dedup_window_s),
            scoring=config.scoring,
            history_capacity=config.history.capacity,
            parallel_detectors=config.pipeline.parallel_detectors,
            **kwargs,
        )

    def history_for(self, asset: str) -> HistoryBuffers:
        buffers = self._history.get(asset)
        if buffers is None:
            buffers = self._history[asset] = HistoryBuffers(self.history_capacity)
        return buffers

    # ── Detection ────────────────────────────────────────────

    def _run_detector(
        self,
        detector: Detector,
        snapshot: MarketSnapshot,
        view: HistoryView,
    ) -> list[DetectedOpportunity]:
        try:
            return list(detector.detect(snapshot, view))
        except Exception:
            log.exception("detector_error", detector=detector.name, asset=snapshot.asset)
            return []

    async def _detect(self, snapshot: MarketSnapshot, view: HistoryView) -> list[DetectedOpportunity]:
        """Run every detector; candidates are merged in detector declaration order."""
        if self.parallel_detectors:
            batches = await asyncio.gather(*(
                asyncio.to_thread(self._run_detector, d, snapshot, view) for d in self.detectors
            ))
        else:
            batches = [self._run_detector(d, snapshot, view) for d in self.detectors]
        return [opp for batch in batches for opp in batch]

    async def tick(self, snapshot: MarketSnapshot) -> TickResult | None:
        """Process one snapshot. Returns None when the snapshot is rejected."""
        async with self._tick_lock:
            with tick_context(snapshot.asset, snapshot.ts):
                try:
                    ensure_valid_snapshot(snapshot, self._last_ts.get(snapshot.asset))
                except InvalidSnapshotError as exc:
                    log.warning("tick_skipped", problems=exc.problems)
                    return None
                self._last_ts[snapshot.asset] = snapshot.ts

                history = self.history_for(snapshot.asset)
                history.record(snapshot)
                candidates = await self._detect(snapshot, history.view())

                result = self.registry.apply_tick(candidates, now=snapshot.ts)
                for opp in result.admitted:
                    self._interpret(opp, snapshot.ts)
                for archived in result.expired:
                    self.expired.publish(archived)
                self.opportunities.publish(result.live)

                log.debug(
                    "tick_complete",
                    candidates=len(candidates),
                    admitted=len(result.admitted),
                    expired=len(result.expired),
                    live=len(result.live),
                )
        return result

    def _interpret(self, opp: DetectedOpportunity, now: datetime) -> None:
        try:
            interpretation = interpret(opp, self.interpreter, now)
        except Exception:
            log.exception("interpretation_error", opportunity_id=opp.id)
            return
        self.registry.attach_interpretation(opp.id, interpretation)

    async def run(self, feed: SnapshotFeed, max_ticks: int | None = None) -> int:
        """Consume *feed* until it ends or *max_ticks* snapshots were seen."""
        ticks = 0
        log.info("pipeline_started", detectors=[d.name for d in self.detectors])
        async for snapshot in feed.stream(max_ticks):
            try:
                await self.tick(snapshot)
            except Exception:
                log.exception("tick_error", asset=snapshot.asset)
            ticks += 1
            if max_ticks is not None and ticks >= max_ticks:
                break
        log.info("pipeline_stopped", ticks=ticks)
        return ticks

    # ── Queries ──────────────────────────────────────────────

    def live(self) -> tuple[DetectedOpportunity, ...]:
        return self.registry.live()

    def mastery(self, now: datetime | None = None) -> MasteryMetrics:
        return compute_mastery(
            self.ledger.snapshot(),
            now=now or self.clock(),
            ranking=self.ranking,
            config=self.scoring,
        )

    def _publish_mastery(self) -> None:
        self.mastery_updates.publish(self.mastery())

    # ── User actions (unknown ids are no-ops) ────────────────

    def view(self, opportunity_id: str) -> bool:
        return self.registry.mark_viewed(opportunity_id)

    def execute(self, opportunity_id: str, now: datetime | None = None) -> Trade | None:
        """Mark an opportunity executed and record its Trade.

        Returns None if the id is unknown or the opportunity was already
        executed, so a double dispatch never creates a second trade.
        """
        now = now or self.clock()
        record = self.registry.mark_executed(opportunity_id, now)
        if record is None:
            log.info("execute_ignored", opportunity_id=opportunity_id)
            return None

        opp = record.opportunity
        latency = max(0.0, (now - opp.detected_at).total_seconds())
        trade = Trade(
            id=str(uuid.uuid4()),
            opportunity_id=opp.id,
            condition=opp.condition,
            asset=opp.asset,
            strategy=opp.strategy,
            executed_at=now,
            execution_speed=latency,
            skill_signals=SkillSignals(reacted_quickly=latency < QUICK_REACTION_S),
        )
        self.ledger.record(trade)
        log.info(
            "opportunity_executed",
            opportunity_id=opp.id,
            trade_id=trade.id,
            execution_speed=round(latency, 3),
        )
        self.trades.publish(trade)
        self._publish_mastery()
        return trade

    def settle(self, trade_id: str, outcome: TradeOutcome) -> SettlementVerdict:
        """Attach a settlement outcome; conflicts are rejected, not raised."""
        try:
            result = self.ledger.settle(trade_id, outcome)
        except SettlementConflictError:
            log.warning("settlement_rejected", trade_id=trade_id, reason="conflicting_outcome")
            return SettlementVerdict(
                accepted=False, reason="conflicting_outcome", trade=self.ledger.get(trade_id)
            )
        except ValueError:
            log.warning("settlement_rejected", trade_id=trade_id, reason="settled_before_execution")
            return SettlementVerdict(
                accepted=False, reason="settled_before_execution", trade=self.ledger.get(trade_id)
            )
        if result is None:
            log.info("settlement_ignored", trade_id=trade_id, reason="unknown_trade")
            return SettlementVerdict(accepted=False, reason="unknown_trade")

        trade, changed = result
        if not changed:
            return SettlementVerdict(accepted=True, reason="already_settled", trade=trade)
        self.trades.publish(trade)
        self._publish_mastery()
        return SettlementVerdict(accepted=True, trade=trade)
