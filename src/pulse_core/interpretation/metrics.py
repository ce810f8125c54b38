"""Numeric fields the core derives for every interpreted opportunity."""

from __future__ import annotations

import math
from datetime import datetime

from pulse_core.models import DetectedOpportunity, UrgencyLevel

BASE_FILL_PROBABILITY = 0.8
MIN_FILL_PROBABILITY = 0.1
MAX_FILL_PROBABILITY = 0.95


def fill_probability(opp: DetectedOpportunity) -> float:
    """Heuristic chance the order fills before the opportunity is gone.

    Starts at 0.8 and is reduced for urgency, competitive pressure above 0.7
    and liquidity drain above 0.3, then clamped to [0.1, 0.95].
    """
    probability = BASE_FILL_PROBABILITY
    if opp.urgency is UrgencyLevel.CRITICAL:
        probability -= 0.2
    elif opp.urgency is UrgencyLevel.HIGH:
        probability -= 0.1

    if opp.triggers.get("competitivePressure", 0.0) > 0.7:
        probability -= 0.2
    if opp.triggers.get("liquidityDrain", 0.0) > 0.3:
        probability -= 0.15

    return max(MIN_FILL_PROBABILITY, min(MAX_FILL_PROBABILITY, probability))


def minutes_remaining(opp: DetectedOpportunity, now: datetime) -> int:
    """Whole minutes until expiry (half up), never negative."""
    seconds = (opp.expires_at - now).total_seconds()
    return max(0, math.floor(seconds / 60 + 0.5))


def competition_level(opp: DetectedOpportunity) -> float:
    return opp.triggers.get("competitivePressure", 0.0)
