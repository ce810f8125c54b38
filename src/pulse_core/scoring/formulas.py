"""Pure mastery formulas — no state, no I/O."""

from __future__ import annotations

import math
from typing import Sequence

import numpy as np

WEIGHT_WIN_RATE = 0.4
WEIGHT_SPEED = 0.3
WEIGHT_CONSISTENCY = 0.2
WEIGHT_PNL = 0.1


def win_rate(wins: int, total: int) -> float:
    """Fraction of profitable trades in [0, 1]; 0 when there are none."""
    if total <= 0:
        return 0.0
    return wins / total


def mean(values: Sequence[float]) -> float:
    if not values:
        return 0.0
    return float(np.mean(np.asarray(values, dtype=np.float64)))


def sample_variance(values: Sequence[float]) -> float:
    """Variance with the n-1 divisor; 0 for fewer than two samples."""
    if len(values) < 2:
        return 0.0
    return float(np.var(np.asarray(values, dtype=np.float64), ddof=1))


def consistency(variance: float, norm: float = 10000.0) -> float:
    """Map P&L variance to a stability score: ``max(0, 1 - variance / norm)``."""
    return max(0.0, 1.0 - variance / norm)


def streaks(pnls: Sequence[float]) -> tuple[int, int]:
    """(current, longest) run of profitable trades, in the given order."""
    current = 0
    longest = 0
    for pnl in pnls:
        if pnl > 0:
            current += 1
            longest = max(longest, current)
        else:
            current = 0
    return current, longest


def composite_score(
    win_rate_frac: float,
    avg_speed_s: float,
    consistency_score: float,
    total_pnl: float,
    *,
    speed_norm_s: float = 30.0,
    pnl_norm: float = 1000.0,
) -> float:
    """Weighted 0-10 mastery score.

    The P&L term saturates at +1 but is not floored, so heavy losses drag the
    score down before the final clamp to [0, 10].
    """
    speed_term = 1.0 - min(avg_speed_s / speed_norm_s, 1.0)
    pnl_term = min(total_pnl / pnl_norm, 1.0)
    # fsum so a perfect record scores exactly 10.0.
    raw = 10.0 * math.fsum((
        WEIGHT_WIN_RATE * win_rate_frac,
        WEIGHT_SPEED * speed_term,
        WEIGHT_CONSISTENCY * consistency_score,
        WEIGHT_PNL * pnl_term,
    ))
    return max(0.0, min(10.0, raw))
