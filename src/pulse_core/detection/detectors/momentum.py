"""Momentum play — cheap upside in a calm bullish market."""

from __future__ import annotations

from datetime import timedelta
from typing import Any

from pulse_core.detection import Detector, HistoryView, instrument_label, opportunity_id, register
from pulse_core.models import (
    UNBOUNDED_GAIN,
    DetectedOpportunity,
    MarketCondition,
    MarketSnapshot,
    OptionsStrategy,
    StrategyLeg,
    UrgencyLevel,
)


@register
class MomentumPlay(Detector):
    """Bullish trend + low volatility → buy a slightly out-of-the-money call."""

    name = "momentum_play"
    condition = MarketCondition.MOMENTUM_PLAY
    docs = {
        "thesis": "Options priced for stagnation during a bullish trend underprice momentum. A 5% out-of-the-money call buys that move cheaply.",
        "data": "Regime classification only: trend must be bullish and volatility low.",
        "risk": "The whole premium is lost if the rally does not materialise before expiry.",
    }

    def __init__(self, **params: Any) -> None:
        super().__init__(**params)
        self.otm_ratio = float(self.params.get("otm_ratio", 1.05))
        self.horizon = timedelta(minutes=float(self.params.get("horizon_minutes", 20)))

    def detect(self, snapshot: MarketSnapshot, history: HistoryView) -> list[DetectedOpportunity]:
        regime = snapshot.regime
        if regime.trend != "bullish" or regime.volatility != "low":
            return []

        spot = snapshot.spot_price
        strike = spot * self.otm_ratio
        instrument = instrument_label(snapshot.asset, strike, "call")
        strategy = OptionsStrategy(
            type="single_leg",
            legs=(
                StrategyLeg(
                    instrument=instrument,
                    side="buy",
                    size=500,
                    strike=strike,
                    expiry=snapshot.ts + timedelta(days=14),
                ),
            ),
            max_gain=UNBOUNDED_GAIN,
            max_loss=round(spot * (self.otm_ratio - 1) * 500),
            breakeven=(strike + 50,),
            estimated_cost=150,
            estimated_duration="14 days",
        )
        return [
            DetectedOpportunity(
                id=opportunity_id(self.condition, instrument, snapshot.ts),
                asset=snapshot.asset,
                condition=self.condition,
                confidence=0.7,
                urgency=UrgencyLevel.MEDIUM,
                detected_at=snapshot.ts,
                expires_at=snapshot.ts + self.horizon,
                triggers={"competitivePressure": 0.4},
                strategy=strategy,
            )
        ]
