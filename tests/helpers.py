"""Snapshot, order and opportunity builders shared across test modules."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from pulse_core.models import (
    DetectedOpportunity,
    IVSurface,
    MarketCondition,
    MarketRegime,
    MarketSnapshot,
    OptionOrder,
    OptionsStrategy,
    StrategyLeg,
    UrgencyLevel,
)

T0 = datetime(2025, 1, 6, 12, 0, tzinfo=timezone.utc)


def make_order(
    strike: float,
    price: float,
    *,
    kind: str = "call",
    side: str = "bid",
    size: float = 100.0,
    asset: str = "ETH",
    ts: datetime = T0,
) -> OptionOrder:
    return OptionOrder(
        id=f"{asset}-{kind}-{strike:.0f}-{side}",
        asset=asset,
        strike=strike,
        expiry=ts + timedelta(days=7),
        type=kind,
        side=side,
        price=price,
        size=size,
        iv=0.5,
        ts=ts,
    )


def make_snapshot(
    *,
    asset: str = "ETH",
    spot: float = 3000.0,
    atm: float = 0.5,
    skew: float = 0.0,
    ts: datetime = T0,
    orders: tuple[OptionOrder, ...] = (),
    volatility: str = "normal",
    trend: str = "neutral",
    liquidity_drain: float | None = None,
) -> MarketSnapshot:
    return MarketSnapshot(
        asset=asset,
        spot_price=spot,
        orders=orders,
        iv_surface=IVSurface(atm=atm, skew25=skew),
        regime=MarketRegime(volatility=volatility, trend=trend),
        ts=ts,
        liquidity_drain=liquidity_drain,
    )


def make_opportunity(
    opp_id: str = "opp-1",
    *,
    condition: MarketCondition = MarketCondition.VOLATILITY_CRUSH,
    instrument: str = "ETH $3000 Call",
    urgency: UrgencyLevel = UrgencyLevel.HIGH,
    detected_at: datetime = T0,
    ttl: timedelta = timedelta(minutes=8),
    triggers: dict[str, float] | None = None,
    asset: str = "ETH",
) -> DetectedOpportunity:
    return DetectedOpportunity(
        id=opp_id,
        asset=asset,
        condition=condition,
        confidence=0.8,
        urgency=urgency,
        detected_at=detected_at,
        expires_at=detected_at + ttl,
        triggers=triggers or {},
        strategy=OptionsStrategy(
            type="single_leg",
            legs=(StrategyLeg(instrument=instrument, side="sell", size=1000, strike=3000.0),),
            max_gain=120,
            max_loss=50,
            breakeven=(3120.0,),
        ),
    )
