"""Opportunity models — conditions, urgency, strategy payloads."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

# Sentinel for "theoretically unlimited" max gain on long option legs.
UNBOUNDED_GAIN = 999999.0


class MarketCondition(str, Enum):
    """Closed set of conditions a detector can report."""

    VOLATILITY_CRUSH = "volatility_crush"
    VOLATILITY_EXPANSION = "volatility_expansion"
    SKEW_ANOMALY = "skew_anomaly"
    YIELD_OPPORTUNITY = "yield_opportunity"
    HEDGE_SIGNAL = "hedge_signal"
    MOMENTUM_PLAY = "momentum_play"
    ARBITRAGE = "arbitrage"


class UrgencyLevel(str, Enum):
    """Urgency, totally ordered critical < high < medium < low for ranking."""

    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def rank(self) -> int:
        return _URGENCY_RANK[self]


_URGENCY_RANK = {
    UrgencyLevel.CRITICAL: 0,
    UrgencyLevel.HIGH: 1,
    UrgencyLevel.MEDIUM: 2,
    UrgencyLevel.LOW: 3,
}


class StrategyLeg(BaseModel):
    """One leg of a proposed options strategy."""

    model_config = ConfigDict(frozen=True)

    instrument: str  # e.g. "ETH $3200 Call"
    side: Literal["buy", "sell"]
    size: float = Field(ge=0.0)
    strike: float | None = None
    expiry: datetime | None = None


class OptionsStrategy(BaseModel):
    """Executable strategy payload attached to an opportunity."""

    model_config = ConfigDict(frozen=True)

    type: Literal["single_leg", "spread", "combo"]
    legs: tuple[StrategyLeg, ...] = Field(min_length=1)
    max_gain: float
    max_loss: float
    breakeven: tuple[float, ...] = ()
    estimated_cost: float = 0.0
    estimated_duration: str | None = None


class DetectedOpportunity(BaseModel):
    """A time-bounded trading suggestion emitted by a detector."""

    model_config = ConfigDict(frozen=True)

    id: str
    asset: str
    condition: MarketCondition
    confidence: float = Field(ge=0.0, le=1.0)
    urgency: UrgencyLevel
    detected_at: datetime
    expires_at: datetime
    triggers: dict[str, float] = Field(default_factory=dict)
    strategy: OptionsStrategy

    @property
    def primary_instrument(self) -> str:
        """Label of the first leg; the dedup key alongside the condition."""
        return self.strategy.legs[0].instrument
