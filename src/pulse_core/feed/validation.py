"""Structural checks applied to every snapshot before detectors see it."""

from __future__ import annotations

import math
from datetime import datetime

from pulse_core.errors import InvalidSnapshotError
from pulse_core.models import MarketSnapshot


def _is_aware(ts: datetime) -> bool:
    return ts.tzinfo is not None and ts.utcoffset() is not None


def validate_snapshot(snapshot: MarketSnapshot, previous_ts: datetime | None = None) -> list[str]:
    """Return a list of problems; an empty list means the snapshot is usable."""
    problems: list[str] = []

    if not math.isfinite(snapshot.spot_price) or snapshot.spot_price <= 0:
        problems.append(f"spot_price must be positive (got {snapshot.spot_price})")
    if not math.isfinite(snapshot.iv_surface.atm) or snapshot.iv_surface.atm < 0:
        problems.append(f"atm iv must be non-negative (got {snapshot.iv_surface.atm})")
    if not math.isfinite(snapshot.iv_surface.skew25):
        problems.append("skew25 must be finite")
    snapshot_aware = _is_aware(snapshot.ts)
    if not snapshot_aware:
        problems.append("snapshot timestamp has no timezone")
    elif previous_ts is not None and snapshot.ts <= previous_ts:
        problems.append(f"timestamp {snapshot.ts.isoformat()} is not after {previous_ts.isoformat()}")

    for order in snapshot.orders:
        if order.size < 0:
            problems.append(f"order {order.id}: negative size {order.size}")
        if order.price < 0 or not math.isfinite(order.price):
            problems.append(f"order {order.id}: invalid price {order.price}")
        if order.strike <= 0:
            problems.append(f"order {order.id}: non-positive strike {order.strike}")
        if not _is_aware(order.ts):
            problems.append(f"order {order.id}: timestamp has no timezone")
        elif snapshot_aware and order.ts > snapshot.ts:
            problems.append(f"order {order.id}: timestamp after snapshot")

    return problems


def ensure_valid_snapshot(snapshot: MarketSnapshot, previous_ts: datetime | None = None) -> None:
    """Raise InvalidSnapshotError listing every problem found."""
    problems = validate_snapshot(snapshot, previous_ts)
    if problems:
        raise InvalidSnapshotError(problems)
