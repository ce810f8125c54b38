"""Mastery engine — recomputes MasteryMetrics from the full trade list."""

from __future__ import annotations

from collections import defaultdict
from datetime import datetime, timedelta, timezone
from statistics import median
from typing import Sequence

from pulse_core.config.schema import ScoringConfig
from pulse_core.models import (
    MarketCondition,
    MasteryMetrics,
    Performance30d,
    RankingContext,
    Trade,
)
from pulse_core.scoring.formulas import (
    composite_score,
    consistency,
    mean,
    sample_variance,
    streaks,
    win_rate,
)


def settled_trades(trades: Sequence[Trade]) -> list[Trade]:
    """Settled trades ordered by execution time (ties by id)."""
    return sorted(
        (t for t in trades if t.outcome is not None),
        key=lambda t: (t.executed_at, t.id),
    )


def performance_window(trades: Sequence[Trade], now: datetime, days: int) -> Performance30d:
    """Aggregates over settled trades executed within *days* of *now*.

    Best and worst trade are 0.0 when the window is empty.
    """
    cutoff = now - timedelta(days=days)
    pnls = [t.outcome.pnl for t in trades if t.outcome is not None and t.executed_at >= cutoff]
    if not pnls:
        return Performance30d()
    total = sum(pnls)
    return Performance30d(
        total_trades=len(pnls),
        profitable_trades=sum(1 for p in pnls if p > 0),
        total_pnl=total,
        avg_pnl_per_trade=total / len(pnls),
        best_trade=max(pnls),
        worst_trade=min(pnls),
    )


def condition_strengths(
    trades: Sequence[Trade],
) -> tuple[list[MarketCondition], list[MarketCondition]]:
    """Conditions whose win rate is strictly above / below the median per-condition win rate."""
    outcomes: dict[MarketCondition, list[bool]] = defaultdict(list)
    for t in trades:
        if t.outcome is not None:
            outcomes[t.condition].append(t.outcome.pnl > 0)
    if len(outcomes) < 2:
        return [], []

    rates = {c: win_rate(sum(wins), len(wins)) for c, wins in outcomes.items()}
    mid = median(rates.values())
    ordered = [c for c in MarketCondition if c in rates]
    return (
        [c for c in ordered if rates[c] > mid],
        [c for c in ordered if rates[c] < mid],
    )


def compute_mastery(
    trades: Sequence[Trade],
    *,
    now: datetime | None = None,
    ranking: RankingContext | None = None,
    config: ScoringConfig | None = None,
) -> MasteryMetrics:
    """Compute all mastery metrics from the trade list.

    Pending trades (no outcome) are ignored. Nothing is carried between
    calls, so replaying the same list always yields the same metrics.
    """
    config = config or ScoringConfig()
    ranking = ranking or RankingContext()
    now = now or datetime.now(timezone.utc)

    settled = settled_trades(trades)
    pnls = [t.outcome.pnl for t in settled]
    wins = sum(1 for p in pnls if p > 0)

    wr = win_rate(wins, len(settled))
    avg_speed = mean([t.execution_speed for t in settled])
    total_pnl = float(sum(pnls))
    stability = consistency(sample_variance(pnls), config.consistency_variance_norm)
    current, longest = streaks(pnls)
    strengths, weaknesses = condition_strengths(settled)

    return MasteryMetrics(
        score=composite_score(
            wr,
            avg_speed,
            stability,
            total_pnl,
            speed_norm_s=config.speed_norm_s,
            pnl_norm=config.pnl_norm,
        ),
        percentile=ranking.percentile,
        rank=ranking.rank,
        win_rate=wr,
        execution_speed=avg_speed,
        consistency=stability,
        yield_optimization=0.0,
        strengths=strengths,
        weaknesses=weaknesses,
        performance_30d=performance_window(settled, now, config.window_days),
        current_streak=current,
        longest_streak=longest,
    )
