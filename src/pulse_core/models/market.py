"""Market data models — option book, IV surface, regime, snapshots."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

VolatilityRegime = Literal["low", "normal", "elevated", "extreme"]
TrendRegime = Literal["bearish", "neutral", "bullish"]
LiquidityRegime = Literal["thin", "normal", "deep"]


class OptionOrder(BaseModel):
    """One resting order on the option book."""

    model_config = ConfigDict(frozen=True)

    id: str
    asset: str
    strike: float
    expiry: datetime
    type: Literal["call", "put"]
    side: Literal["bid", "ask"]
    price: float
    size: float
    iv: float
    ts: datetime


class LiquidityDepth(BaseModel):
    """Aggregate resting size by contract type."""

    model_config = ConfigDict(frozen=True)

    calls: float = 0.0
    puts: float = 0.0

    @property
    def total(self) -> float:
        return self.calls + self.puts


class IVSurface(BaseModel):
    """Implied-volatility surface summary."""

    model_config = ConfigDict(frozen=True)

    atm: float
    skew25: float
    term_structure: tuple[float, ...] = ()


class MarketRegime(BaseModel):
    """Coarse classification of the current market."""

    model_config = ConfigDict(frozen=True)

    volatility: VolatilityRegime = "normal"
    trend: TrendRegime = "neutral"
    liquidity: LiquidityRegime = "normal"


class MarketSnapshot(BaseModel):
    """Immutable view of one asset's option market, passed to detectors.

    ``liquidity_drain`` is an externally supplied signal (reduction in book
    depth); the core echoes it into triggers but never computes it.
    """

    model_config = ConfigDict(frozen=True)

    asset: str
    spot_price: float
    orders: tuple[OptionOrder, ...] = ()
    liquidity_depth: LiquidityDepth = Field(default_factory=LiquidityDepth)
    iv_surface: IVSurface
    regime: MarketRegime = Field(default_factory=MarketRegime)
    ts: datetime
    liquidity_drain: float | None = None
