"""Bounded rolling windows of scalar series used by detectors."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass

from pulse_core.models import MarketSnapshot

DEFAULT_CAPACITY = 100


class HistorySeries:
    """Fixed-capacity FIFO of floats; push is the only mutation."""

    def __init__(self, capacity: int = DEFAULT_CAPACITY) -> None:
        if capacity < 1:
            raise ValueError("capacity must be >= 1")
        self.capacity = capacity
        self._values: deque[float] = deque(maxlen=capacity)

    def push(self, value: float) -> None:
        self._values.append(float(value))

    def snapshot(self) -> tuple[float, ...]:
        """Current contents, oldest first."""
        return tuple(self._values)

    def __len__(self) -> int:
        return len(self._values)


@dataclass(frozen=True)
class HistoryView:
    """Immutable copy of all history windows, handed to detectors each tick."""

    volatility: tuple[float, ...] = ()
    skew: tuple[float, ...] = ()
    yield_: tuple[float, ...] = ()


def near_money_call_yield(snapshot: MarketSnapshot, band: float = 0.02) -> float | None:
    """Best premium/notional among bid-side calls struck within *band* of spot."""
    spot = snapshot.spot_price
    yields = [
        o.price / o.strike
        for o in snapshot.orders
        if o.type == "call" and o.side == "bid" and o.strike > 0
        and abs(o.strike - spot) / spot < band
    ]
    return max(yields) if yields else None


class HistoryBuffers:
    """Volatility, skew and yield series, advanced once per accepted snapshot."""

    def __init__(self, capacity: int = DEFAULT_CAPACITY) -> None:
        self.volatility = HistorySeries(capacity)
        self.skew = HistorySeries(capacity)
        self.yield_ = HistorySeries(capacity)

    def record(self, snapshot: MarketSnapshot) -> None:
        self.volatility.push(snapshot.iv_surface.atm)
        self.skew.push(snapshot.iv_surface.skew25)
        # No near-the-money calls means no yield observation this tick.
        best_yield = near_money_call_yield(snapshot)
        if best_yield is not None:
            self.yield_.push(best_yield)

    def view(self) -> HistoryView:
        return HistoryView(
            volatility=self.volatility.snapshot(),
            skew=self.skew.snapshot(),
            yield_=self.yield_.snapshot(),
        )
