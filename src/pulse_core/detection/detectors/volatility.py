"""Volatility crush — sell premium while implied volatility is collapsing."""

from __future__ import annotations

from datetime import timedelta
from typing import Any

from pulse_core.detection import Detector, HistoryView, instrument_label, opportunity_id, register
from pulse_core.detection.indicators import relative_change, urgency_from_magnitude
from pulse_core.models import (
    DetectedOpportunity,
    MarketCondition,
    MarketSnapshot,
    OptionsStrategy,
    StrategyLeg,
)


@register
class VolatilityCrush(Detector):
    """Fire when ATM IV has fallen more than 10% across the last five samples.

    delta = (latest - oldest) / oldest over the last `lookback` IV samples
    delta < threshold → sell an at-the-money call
    """

    name = "volatility_crush"
    condition = MarketCondition.VOLATILITY_CRUSH
    docs = {
        "thesis": "A sharp drop in implied volatility means premiums are about to cheapen. Selling an at-the-money call now captures the remaining rich premium before it normalises.",
        "data": "Rolling ATM implied-volatility history. Relative change between the oldest and newest of the last 5 samples must be below -10%.",
        "risk": "Short call exposure: a rally above the strike forfeits upside beyond the premium collected. Volatility can re-expand as fast as it fell.",
    }

    def __init__(self, **params: Any) -> None:
        super().__init__(**params)
        self.lookback = int(self.params.get("lookback", 5))
        self.threshold = float(self.params.get("threshold", -0.10))
        self.confidence = float(self.params.get("confidence", 0.8))
        self.horizon = timedelta(minutes=float(self.params.get("horizon_minutes", 8)))

    def detect(self, snapshot: MarketSnapshot, history: HistoryView) -> list[DetectedOpportunity]:
        delta = relative_change(history.volatility, self.lookback)
        if delta is None or not delta < self.threshold:
            return []

        spot = snapshot.spot_price
        instrument = instrument_label(snapshot.asset, spot, "call")
        strategy = OptionsStrategy(
            type="single_leg",
            legs=(
                StrategyLeg(
                    instrument=instrument,
                    side="sell",
                    size=1000,
                    strike=spot,
                    expiry=snapshot.ts + timedelta(days=7),
                ),
            ),
            max_gain=120,
            max_loss=50,
            breakeven=(spot + 120,),
            estimated_cost=0,
            estimated_duration="7 days",
        )
        return [
            DetectedOpportunity(
                id=opportunity_id(self.condition, instrument, snapshot.ts),
                asset=snapshot.asset,
                condition=self.condition,
                confidence=self.confidence,
                urgency=urgency_from_magnitude(delta, "high"),
                detected_at=snapshot.ts,
                expires_at=snapshot.ts + self.horizon,
                triggers={
                    "ivChange": delta * 100,
                    "competitivePressure": 0.6,
                },
                strategy=strategy,
            )
        ]
