"""Opportunity registry — dedup, expiry and urgency ranking of live opportunities."""

from __future__ import annotations

import threading
from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from typing import Iterable, Literal

import structlog

from pulse_core.models import DetectedOpportunity, Interpretation

log = structlog.get_logger("registry")


@dataclass(frozen=True)
class OpportunityRecord:
    """Registry-owned state for one admitted opportunity."""

    opportunity: DetectedOpportunity
    viewed: bool = False
    executed: bool = False
    executed_at: datetime | None = None
    interpretation: Interpretation | None = None


@dataclass(frozen=True)
class ArchivedOpportunity:
    """An opportunity that has left the live set."""

    opportunity: DetectedOpportunity
    reason: Literal["expired", "executed"]
    archived_at: datetime


@dataclass(frozen=True)
class TickResult:
    """What one evict → dedup → insert → publish pass did."""

    admitted: tuple[DetectedOpportunity, ...] = ()
    duplicates: tuple[DetectedOpportunity, ...] = ()
    expired: tuple[ArchivedOpportunity, ...] = ()
    live: tuple[DetectedOpportunity, ...] = ()


def _rank_key(opp: DetectedOpportunity) -> tuple[int, datetime, str]:
    return (opp.urgency.rank, opp.detected_at, opp.id)


class OpportunityRegistry:
    """Single-writer store of admitted opportunities keyed by id.

    Records are immutable; every mutation swaps in a new record under the
    lock, so readers only ever see consistent values. Once past expiry every
    record is archived; executed ones are archived with reason "executed" and
    stay addressable by id through a separate index.
    """

    def __init__(self, dedup_window_s: float = 60.0) -> None:
        self.dedup_window = timedelta(seconds=dedup_window_s)
        self._records: dict[str, OpportunityRecord] = {}
        self._executed: dict[str, OpportunityRecord] = {}
        self._history: list[ArchivedOpportunity] = []
        self._lock = threading.RLock()

    # ── Tick ─────────────────────────────────────────────────

    def apply_tick(self, candidates: Iterable[DetectedOpportunity], now: datetime) -> TickResult:
        """Evict expired, drop duplicates, insert the rest, return the ranked live set."""
        with self._lock:
            expired = self._evict_expired(now)
            admitted: list[DetectedOpportunity] = []
            duplicates: list[DetectedOpportunity] = []
            for candidate in candidates:
                if candidate.id in self._records or self._is_duplicate(candidate):
                    duplicates.append(candidate)
                    continue
                self._records[candidate.id] = OpportunityRecord(opportunity=candidate)
                admitted.append(candidate)
            live = self._live()

        for opp in admitted:
            log.info(
                "opportunity_admitted",
                opportunity_id=opp.id,
                condition=opp.condition.value,
                instrument=opp.primary_instrument,
                urgency=opp.urgency.value,
                confidence=round(opp.confidence, 3),
            )
        if duplicates:
            log.debug("duplicates_dropped", count=len(duplicates))
        return TickResult(
            admitted=tuple(admitted),
            duplicates=tuple(duplicates),
            expired=tuple(expired),
            live=live,
        )

    def evict_expired(self, now: datetime) -> tuple[ArchivedOpportunity, ...]:
        with self._lock:
            return tuple(self._evict_expired(now))

    def _evict_expired(self, now: datetime) -> list[ArchivedOpportunity]:
        archived: list[ArchivedOpportunity] = []
        for opp_id, record in list(self._records.items()):
            if not record.opportunity.expires_at < now:
                continue
            del self._records[opp_id]
            if record.executed:
                self._executed[opp_id] = record
            reason = "executed" if record.executed else "expired"
            entry = ArchivedOpportunity(opportunity=record.opportunity, reason=reason, archived_at=now)
            self._history.append(entry)
            archived.append(entry)
        if archived:
            log.info(
                "opportunities_archived",
                expired=sum(1 for a in archived if a.reason == "expired"),
                executed=sum(1 for a in archived if a.reason == "executed"),
            )
        return archived

    def _is_duplicate(self, candidate: DetectedOpportunity) -> bool:
        instrument = candidate.primary_instrument
        for record in self._records.values():
            existing = record.opportunity
            if (
                existing.condition == candidate.condition
                and existing.primary_instrument == instrument
                and abs(existing.expires_at - candidate.expires_at) < self.dedup_window
            ):
                return True
        return False

    # ── Queries ──────────────────────────────────────────────

    def live(self) -> tuple[DetectedOpportunity, ...]:
        """Non-executed opportunities, critical first, then earliest detection."""
        with self._lock:
            return self._live()

    def _live(self) -> tuple[DetectedOpportunity, ...]:
        return tuple(sorted(
            (r.opportunity for r in self._records.values() if not r.executed),
            key=_rank_key,
        ))

    def get(self, opportunity_id: str) -> DetectedOpportunity | None:
        record = self.record(opportunity_id)
        return record.opportunity if record is not None else None

    def record(self, opportunity_id: str) -> OpportunityRecord | None:
        with self._lock:
            return self._records.get(opportunity_id) or self._executed.get(opportunity_id)

    def records(self) -> tuple[OpportunityRecord, ...]:
        with self._lock:
            return tuple(self._records.values())

    def history(self) -> tuple[ArchivedOpportunity, ...]:
        with self._lock:
            return tuple(self._history)

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    # ── Flag mutations (unknown ids are no-ops) ──────────────

    def mark_viewed(self, opportunity_id: str) -> bool:
        """Set the viewed flag once. Returns True only on the first observation."""
        with self._lock:
            record = self._records.get(opportunity_id)
            if record is None or record.viewed:
                return False
            self._records[opportunity_id] = replace(record, viewed=True)
            return True

    def mark_executed(self, opportunity_id: str, at: datetime) -> OpportunityRecord | None:
        """Flag an opportunity executed.

        Returns the updated record, or None when the id is unknown or the
        opportunity was already executed.
        """
        with self._lock:
            record = self._records.get(opportunity_id)
            if record is None or record.executed:
                return None
            updated = replace(record, executed=True, executed_at=at)
            self._records[opportunity_id] = updated
            return updated

    def attach_interpretation(self, opportunity_id: str, interpretation: Interpretation) -> bool:
        with self._lock:
            record = self._records.get(opportunity_id)
            if record is None:
                return False
            self._records[opportunity_id] = replace(record, interpretation=interpretation)
            return True
