"""Snapshot feed — protocol, simulator, regime classification, validation."""

from pulse_core.feed.regime import classify_regime
from pulse_core.feed.simulator import SimulatedFeed, SnapshotFeed
from pulse_core.feed.validation import ensure_valid_snapshot, validate_snapshot

__all__ = [
    "SimulatedFeed",
    "SnapshotFeed",
    "classify_regime",
    "ensure_valid_snapshot",
    "validate_snapshot",
]
