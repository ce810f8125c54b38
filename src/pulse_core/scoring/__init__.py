"""Mastery scoring — pure formulas and the full-recompute engine."""

from pulse_core.scoring.engine import compute_mastery, performance_window, settled_trades
from pulse_core.scoring.formulas import (
    composite_score,
    consistency,
    sample_variance,
    streaks,
    win_rate,
)

__all__ = [
    "composite_score",
    "compute_mastery",
    "consistency",
    "performance_window",
    "sample_variance",
    "settled_trades",
    "streaks",
    "win_rate",
]
