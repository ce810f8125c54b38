"""Trade and opportunity-history persistence — Pydantic models ↔ table rows."""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.orm import Session

from pulse_core.db.tables import OpportunityHistoryRow, TradeRow
from pulse_core.models import (
    DetectedOpportunity,
    MarketCondition,
    OptionsStrategy,
    SkillSignals,
    Trade,
    TradeOutcome,
)
from pulse_core.opportunities import ArchivedOpportunity


def _aware(ts: datetime | None) -> datetime | None:
    """SQLite drops tzinfo; stored timestamps are always UTC."""
    if ts is not None and ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts


def persist_trade(session: Session, trade: Trade) -> str:
    """Insert or update a trade row and return its id."""
    row = session.get(TradeRow, trade.id) or TradeRow(id=trade.id)
    row.opportunity_id = trade.opportunity_id
    row.condition = trade.condition.value
    row.asset = trade.asset
    row.executed_at = trade.executed_at
    row.execution_speed = trade.execution_speed
    row.strategy = trade.strategy.model_dump(mode="json")
    row.skill_signals = trade.skill_signals.model_dump(mode="json")
    if trade.outcome is not None:
        row.settled_at = trade.outcome.settled_at
        row.pnl = trade.outcome.pnl
        row.return_pct = trade.outcome.return_pct
    session.add(row)
    session.commit()
    return row.id


def _row_to_trade(row: TradeRow) -> Trade:
    outcome = None
    if row.settled_at is not None and row.pnl is not None:
        outcome = TradeOutcome(
            settled_at=_aware(row.settled_at),
            pnl=row.pnl,
            return_pct=row.return_pct if row.return_pct is not None else 0.0,
        )
    return Trade(
        id=row.id,
        opportunity_id=row.opportunity_id,
        condition=MarketCondition(row.condition),
        asset=row.asset,
        strategy=OptionsStrategy.model_validate(row.strategy),
        executed_at=_aware(row.executed_at),
        execution_speed=row.execution_speed,
        skill_signals=SkillSignals.model_validate(row.skill_signals or {}),
        outcome=outcome,
    )


def load_trades(session: Session) -> list[Trade]:
    """All stored trades ordered by execution time."""
    rows = session.execute(
        select(TradeRow).order_by(TradeRow.executed_at, TradeRow.id)
    ).scalars().all()
    return [_row_to_trade(r) for r in rows]


def persist_archived_opportunity(session: Session, archived: ArchivedOpportunity) -> str:
    opp = archived.opportunity
    row = session.get(OpportunityHistoryRow, opp.id)
    if row is None:
        row = OpportunityHistoryRow(
            id=opp.id,
            condition=opp.condition.value,
            asset=opp.asset,
            reason=archived.reason,
            archived_at=archived.archived_at,
            payload=opp.model_dump(mode="json"),
        )
        session.add(row)
        session.commit()
    return row.id


def load_archived_opportunities(session: Session, limit: int = 100) -> list[ArchivedOpportunity]:
    """Most recent *limit* archived opportunities, oldest first."""
    rows = session.execute(
        select(OpportunityHistoryRow)
        .order_by(OpportunityHistoryRow.archived_at.desc())
        .limit(limit)
    ).scalars().all()
    return [
        ArchivedOpportunity(
            opportunity=DetectedOpportunity.model_validate(r.payload),
            reason=r.reason,
            archived_at=_aware(r.archived_at),
        )
        for r in reversed(rows)
    ]
