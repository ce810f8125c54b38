"""Exception types raised inside the pulse core."""

from __future__ import annotations


class PulseError(Exception):
    """Base class for pulse_core errors."""


class InvalidSnapshotError(PulseError):
    """A market snapshot failed structural validation and cannot be evaluated."""

    def __init__(self, problems: list[str]) -> None:
        super().__init__("invalid snapshot: " + "; ".join(problems))
        self.problems = problems


class SettlementConflictError(PulseError):
    """A trade already carries a different settled outcome."""

    def __init__(self, trade_id: str) -> None:
        super().__init__(f"trade {trade_id!r} is already settled with a different outcome")
        self.trade_id = trade_id
