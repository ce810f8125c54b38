"""Simulated option-market feed — seeded random walk over a synthetic book.

Run: python -m pulse_core.pipeline --ticks 30  (uses this feed)
"""

from __future__ import annotations

import asyncio
import math
import random
from collections import deque
from collections.abc import AsyncIterator, Callable
from datetime import datetime, timedelta, timezone
from typing import Protocol

from pulse_core.feed.regime import classify_regime
from pulse_core.logging import get_logger
from pulse_core.models import IVSurface, LiquidityDepth, MarketSnapshot, OptionOrder

log = get_logger(__name__)

BASE_PRICES = {"ETH": 3000.0, "BTC": 42000.0, "SOL": 100.0}
STRIKE_MULTIPLIERS = (0.925, 0.95, 0.975, 1.0, 1.025, 1.05)
EXPIRY_DAYS = (7, 14, 30)


class SnapshotFeed(Protocol):
    """Anything that yields snapshots; intervals need not be regular."""

    def stream(self, max_snapshots: int | None = None) -> AsyncIterator[MarketSnapshot]: ...


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SimulatedFeed:
    """Reproducible stand-in for a live option-book subscription.

    All randomness comes from one ``random.Random(seed)``; pass *clock* to
    control timestamps in tests.
    """

    def __init__(
        self,
        assets: list[str] | None = None,
        interval_s: float = 2.0,
        seed: int | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.assets = assets or list(BASE_PRICES)
        self.interval_s = interval_s
        self.rng = random.Random(seed)
        self.clock = clock
        self._prices: dict[str, float] = {}
        self._last_atm: dict[str, float] = {}
        self._iv_history: deque[float] = deque(maxlen=100)

    def _next_price(self, asset: str) -> float:
        prev = self._prices.get(asset, BASE_PRICES.get(asset, 100.0))
        price = prev * (1 + (self.rng.random() - 0.5) * 0.02)
        self._prices[asset] = price
        return price

    def _book(self, asset: str, spot: float, iv: float, now: datetime) -> list[OptionOrder]:
        orders: list[OptionOrder] = []
        for mult in STRIKE_MULTIPLIERS:
            strike = spot * mult
            for days in EXPIRY_DAYS:
                expiry = now + timedelta(days=days)
                time_value = iv * math.sqrt(days / 365) * spot * 0.4
                for kind in ("call", "put"):
                    moneyness = spot - strike if kind == "call" else strike - spot
                    fair = max(0.0, moneyness) + time_value
                    for side, skew in (("bid", 0.99), ("ask", 1.01)):
                        orders.append(OptionOrder(
                            id=f"{asset}-{kind}-{strike:.2f}-{days}d-{side}",
                            asset=asset,
                            strike=strike,
                            expiry=expiry,
                            type=kind,
                            side=side,
                            price=fair * skew,
                            size=float(math.floor(50 + self.rng.random() * 200)),
                            iv=iv,
                            ts=now,
                        ))
        return orders

    def next_snapshot(self) -> MarketSnapshot:
        """Generate one snapshot for a randomly chosen asset."""
        now = self.clock()
        asset = self.assets[self.rng.randrange(len(self.assets))]
        spot = self._next_price(asset)

        # Book is priced off the previous ATM level for this asset.
        book_iv = self._last_atm.get(asset, 0.4)
        atm = 0.35 + self.rng.random() * 0.3
        skew25 = (self.rng.random() - 0.5) * 0.2
        self._last_atm[asset] = atm
        self._iv_history.append(atm)

        orders = self._book(asset, spot, book_iv, now)
        depth = LiquidityDepth(
            calls=sum(o.size for o in orders if o.type == "call"),
            puts=sum(o.size for o in orders if o.type == "put"),
        )
        return MarketSnapshot(
            asset=asset,
            spot_price=spot,
            orders=tuple(orders),
            liquidity_depth=depth,
            iv_surface=IVSurface(
                atm=atm,
                skew25=skew25,
                term_structure=(atm, atm * 1.05, atm * 1.1, atm * 1.15),
            ),
            regime=classify_regime(atm, self._iv_history, depth.total),
            ts=now,
        )

    async def stream(self, max_snapshots: int | None = None) -> AsyncIterator[MarketSnapshot]:
        """Yield a snapshot, then sleep ``interval_s``, until *max_snapshots* are produced."""
        produced = 0
        while max_snapshots is None or produced < max_snapshots:
            snapshot = self.next_snapshot()
            produced += 1
            log.debug("snapshot_generated", asset=snapshot.asset, spot=round(snapshot.spot_price, 2))
            yield snapshot
            if max_snapshots is None or produced < max_snapshots:
                await asyncio.sleep(self.interval_s)
