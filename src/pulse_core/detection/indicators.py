"""Window statistics — pure functions on scalar series."""

from __future__ import annotations

from typing import Sequence

import numpy as np

from pulse_core.models import UrgencyLevel

ZERO_SPREAD_TOL = 1e-12


def relative_change(series: Sequence[float], lookback: int = 5) -> float | None:
    """``(latest - oldest) / oldest`` over the last *lookback* samples.

    Returns None if there are fewer than *lookback* samples or the oldest
    sample is zero.
    """
    if len(series) < lookback:
        return None
    window = series[-lookback:]
    oldest, latest = window[0], window[-1]
    if oldest == 0:
        return None
    return (latest - oldest) / oldest


def zscore(value: float, window: Sequence[float]) -> float | None:
    """Deviation of *value* from the window mean in population standard deviations.

    Returns None for an empty window or a window with zero spread.
    """
    if len(window) == 0:
        return None
    arr = np.asarray(window, dtype=np.float64)
    mean = float(np.mean(arr))
    std = float(np.std(arr))
    # np.std of a constant window is rounding noise, not exactly 0.
    if std <= ZERO_SPREAD_TOL * max(1.0, abs(mean)):
        return None
    return (value - mean) / std


def urgency_from_magnitude(magnitude: float, base_level: str) -> UrgencyLevel:
    """Shared escalation rule: bigger moves are more urgent.

    |m| > 0.3 is critical, |m| > 0.2 is high, |m| > 0.1 is medium when the
    detector's base level is "high" (otherwise low), anything smaller is low.
    """
    m = abs(magnitude)
    if m > 0.3:
        return UrgencyLevel.CRITICAL
    if m > 0.2:
        return UrgencyLevel.HIGH
    if m > 0.1:
        return UrgencyLevel.MEDIUM if base_level == "high" else UrgencyLevel.LOW
    return UrgencyLevel.LOW
