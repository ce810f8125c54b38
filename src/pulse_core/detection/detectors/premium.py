"""Yield opportunity — near-the-money call premium well above baseline."""

from __future__ import annotations

from datetime import timedelta
from typing import Any

from pulse_core.detection import Detector, HistoryView, instrument_label, opportunity_id, register
from pulse_core.models import (
    DetectedOpportunity,
    MarketCondition,
    MarketSnapshot,
    OptionsStrategy,
    StrategyLeg,
    UrgencyLevel,
)


@register
class YieldOpportunity(Detector):
    """Sell the richest near-the-money call when its yield beats baseline by 30%+.

    yield = premium / notional = price / strike for bid-side calls within 2% of spot
    (best - baseline) / baseline > min_excess → fire
    """

    name = "yield_opportunity"
    condition = MarketCondition.YIELD_OPPORTUNITY
    docs = {
        "thesis": "When buyers pay well above the usual premium for near-term upside, covered call sellers are paid unusually well for the same risk.",
        "data": "Bid-side calls struck within 2% of spot from the current option book. Premium/notional compared against a fixed 2% baseline.",
        "risk": "A rally through the strike caps upside. The baseline is a constant, not a market-implied fair value.",
    }

    def __init__(self, **params: Any) -> None:
        super().__init__(**params)
        self.band = float(self.params.get("band", 0.02))
        self.baseline_yield = float(self.params.get("baseline_yield", 0.02))
        self.min_excess = float(self.params.get("min_excess", 0.3))
        self.high_excess = float(self.params.get("high_excess", 0.7))
        self.horizon = timedelta(minutes=float(self.params.get("horizon_minutes", 15)))

    def detect(self, snapshot: MarketSnapshot, history: HistoryView) -> list[DetectedOpportunity]:
        spot = snapshot.spot_price
        candidates = [
            o for o in snapshot.orders
            if o.type == "call" and o.side == "bid" and o.strike > 0
            and abs(o.strike - spot) / spot < self.band
        ]
        if not candidates:
            return []

        best = candidates[0]
        best_yield = best.price / best.strike
        for option in candidates[1:]:
            option_yield = option.price / option.strike
            if option_yield > best_yield:
                best, best_yield = option, option_yield

        excess = (best_yield - self.baseline_yield) / self.baseline_yield
        if not excess > self.min_excess:
            return []

        triggers = {"yieldAboveBaseline": excess * 100}
        if snapshot.liquidity_drain is not None:
            triggers["liquidityDrain"] = snapshot.liquidity_drain

        instrument = instrument_label(snapshot.asset, best.strike, "call")
        strategy = OptionsStrategy(
            type="single_leg",
            legs=(
                StrategyLeg(
                    instrument=instrument,
                    side="sell",
                    size=1000,
                    strike=best.strike,
                    expiry=best.expiry,
                ),
            ),
            max_gain=round(best.price * best.size),
            max_loss=round((best.strike - spot) * 1000),
            breakeven=(best.strike + best.price * best.size / 1000,),
            estimated_cost=0,
            estimated_duration="7 days",
        )
        return [
            DetectedOpportunity(
                id=opportunity_id(self.condition, instrument, snapshot.ts),
                asset=snapshot.asset,
                condition=self.condition,
                confidence=0.85,
                urgency=UrgencyLevel.HIGH if excess > self.high_excess else UrgencyLevel.MEDIUM,
                detected_at=snapshot.ts,
                expires_at=snapshot.ts + self.horizon,
                triggers=triggers,
                strategy=strategy,
            )
        ]
