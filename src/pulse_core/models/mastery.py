"""Mastery models — derived performance score and aggregates."""

from __future__ import annotations

from pydantic import BaseModel, Field

from pulse_core.models.opportunity import MarketCondition


class Performance30d(BaseModel):
    total_trades: int = 0
    profitable_trades: int = 0
    total_pnl: float = 0.0
    avg_pnl_per_trade: float = 0.0
    best_trade: float = 0.0
    worst_trade: float = 0.0


class RankingContext(BaseModel):
    """Externally supplied leaderboard position."""

    percentile: float = Field(default=50.0, ge=0.0, le=100.0)
    rank: int | None = None


class MasteryMetrics(BaseModel):
    """Composite performance score, recomputed in full from the trade list."""

    score: float = Field(ge=0.0, le=10.0)
    percentile: float = 50.0
    rank: int | None = None
    win_rate: float = 0.0
    execution_speed: float = 0.0
    consistency: float = 0.0
    yield_optimization: float = 0.0
    strengths: list[MarketCondition] = Field(default_factory=list)
    weaknesses: list[MarketCondition] = Field(default_factory=list)
    performance_30d: Performance30d = Field(default_factory=Performance30d)
    current_streak: int = 0
    longest_streak: int = 0
