"""Regime classification from IV level, IV drift and book depth."""

from __future__ import annotations

from typing import Sequence

from pulse_core.models import MarketRegime


def classify_volatility(atm_iv: float) -> str:
    if atm_iv < 0.25:
        return "low"
    if atm_iv < 0.40:
        return "normal"
    if atm_iv < 0.60:
        return "elevated"
    return "extreme"


def classify_trend(iv_history: Sequence[float], lookback: int = 10, threshold: float = 0.02) -> str:
    """Drift of the last *lookback* IV samples; neutral with fewer than two."""
    recent = list(iv_history)[-lookback:]
    if len(recent) < 2:
        return "neutral"
    drift = recent[-1] - recent[0]
    if drift > threshold:
        return "bullish"
    if drift < -threshold:
        return "bearish"
    return "neutral"


def classify_liquidity(total_depth: float) -> str:
    if total_depth < 500:
        return "thin"
    if total_depth < 1500:
        return "normal"
    return "deep"


def classify_regime(atm_iv: float, iv_history: Sequence[float], total_depth: float) -> MarketRegime:
    return MarketRegime(
        volatility=classify_volatility(atm_iv),
        trend=classify_trend(iv_history),
        liquidity=classify_liquidity(total_depth),
    )
