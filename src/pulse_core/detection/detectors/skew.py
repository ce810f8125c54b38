"""Skew anomaly — 25-delta skew far from its rolling mean."""

from __future__ import annotations

from datetime import timedelta
from typing import Any

from pulse_core.detection import Detector, HistoryView, instrument_label, opportunity_id, register
from pulse_core.detection.indicators import zscore
from pulse_core.models import (
    DetectedOpportunity,
    MarketCondition,
    MarketSnapshot,
    OptionsStrategy,
    StrategyLeg,
    UrgencyLevel,
)


@register
class SkewAnomaly(Detector):
    """Fire when current skew is more than two population std devs from the window mean.

    z < 0 frames the trade as cheap upside, z > 0 as expensive downside
    protection; the framing is left to the interpreter.
    """

    name = "skew_anomaly"
    condition = MarketCondition.SKEW_ANOMALY
    docs = {
        "thesis": "Skew rarely stays more than two standard deviations from its recent mean. A call spread expresses the mean reversion with capped risk.",
        "data": "Rolling 25-delta skew history (at least 20 samples). Population mean and standard deviation over the full window; current skew from the IV surface.",
        "risk": "Regime changes can move skew permanently. The spread caps both gain and loss.",
    }

    def __init__(self, **params: Any) -> None:
        super().__init__(**params)
        self.min_samples = int(self.params.get("min_samples", 20))
        self.z_threshold = float(self.params.get("z_threshold", 2.0))
        self.horizon = timedelta(minutes=float(self.params.get("horizon_minutes", 12)))

    def detect(self, snapshot: MarketSnapshot, history: HistoryView) -> list[DetectedOpportunity]:
        if len(history.skew) < self.min_samples:
            return []

        z = zscore(snapshot.iv_surface.skew25, history.skew)
        if z is None or abs(z) <= self.z_threshold:
            return []

        spot = snapshot.spot_price
        expiry = snapshot.ts + timedelta(days=14)
        long_strike, short_strike = spot * 1.05, spot * 1.1
        long_leg = instrument_label(snapshot.asset, long_strike, "call")
        strategy = OptionsStrategy(
            type="spread",
            legs=(
                StrategyLeg(instrument=long_leg, side="buy", size=500, strike=long_strike, expiry=expiry),
                StrategyLeg(
                    instrument=instrument_label(snapshot.asset, short_strike, "call"),
                    side="sell",
                    size=500,
                    strike=short_strike,
                    expiry=expiry,
                ),
            ),
            max_gain=230,
            max_loss=50,
            breakeven=(long_strike, short_strike),
            estimated_cost=50,
            estimated_duration="14 days",
        )
        return [
            DetectedOpportunity(
                id=opportunity_id(self.condition, long_leg, snapshot.ts),
                asset=snapshot.asset,
                condition=self.condition,
                confidence=min(0.95, 0.6 + abs(z) * 0.15),
                urgency=UrgencyLevel.CRITICAL if z < -3 else UrgencyLevel.HIGH,
                detected_at=snapshot.ts,
                expires_at=snapshot.ts + self.horizon,
                triggers={
                    "skewDeviation": z,
                    "competitivePressure": 0.9 if abs(z) > 3 else 0.5,
                },
                strategy=strategy,
            )
        ]
