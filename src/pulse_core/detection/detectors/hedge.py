"""Hedge signal — cheap out-of-the-money puts in a bearish or volatile regime."""

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
class HedgeSignal(Detector):
    """Buy the cheapest ask-side put struck below 95% of spot.

    Only evaluated when trend is bearish or volatility is elevated/extreme.
    """

    name = "hedge_signal"
    condition = MarketCondition.HEDGE_SIGNAL
    docs = {
        "thesis": "Protection is cheapest before volatility fully expands. In bearish or volatile regimes, buying the cheapest out-of-the-money put hedges the book.",
        "data": "Regime classification from the snapshot plus ask-side puts struck below 95% of spot.",
        "risk": "The premium is lost if the market stabilises. Hedges are time critical and expire after five minutes.",
    }

    def __init__(self, **params: Any) -> None:
        super().__init__(**params)
        self.otm_ratio = float(self.params.get("otm_ratio", 0.95))
        self.horizon = timedelta(minutes=float(self.params.get("horizon_minutes", 5)))

    def detect(self, snapshot: MarketSnapshot, history: HistoryView) -> list[DetectedOpportunity]:
        regime = snapshot.regime
        if regime.trend != "bearish" and regime.volatility not in ("elevated", "extreme"):
            return []

        puts = [
            o for o in snapshot.orders
            if o.type == "put" and o.side == "ask" and o.strike < snapshot.spot_price * self.otm_ratio
        ]
        if not puts:
            return []

        cheapest = puts[0]
        for option in puts[1:]:
            if option.price < cheapest.price:
                cheapest = option

        cost = round(cheapest.price * cheapest.size)
        instrument = instrument_label(snapshot.asset, cheapest.strike, "put")
        strategy = OptionsStrategy(
            type="single_leg",
            legs=(
                StrategyLeg(
                    instrument=instrument,
                    side="buy",
                    size=1000,
                    strike=cheapest.strike,
                    expiry=cheapest.expiry,
                ),
            ),
            max_gain=UNBOUNDED_GAIN,
            max_loss=cost,
            breakeven=(cheapest.strike - cheapest.price * cheapest.size / 1000,),
            estimated_cost=cost,
            estimated_duration="7-14 days",
        )
        return [
            DetectedOpportunity(
                id=opportunity_id(self.condition, instrument, snapshot.ts),
                asset=snapshot.asset,
                condition=self.condition,
                confidence=0.75,
                urgency=UrgencyLevel.CRITICAL if regime.volatility == "extreme" else UrgencyLevel.HIGH,
                detected_at=snapshot.ts,
                expires_at=snapshot.ts + self.horizon,
                triggers={"competitivePressure": 0.7},
                strategy=strategy,
            )
        ]
