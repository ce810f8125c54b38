"""Detector abstract base class."""

from __future__ import annotations

import uuid
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any

from pulse_core.detection.history import HistoryView
from pulse_core.models import DetectedOpportunity, MarketCondition, MarketSnapshot

_OPPORTUNITY_NAMESPACE = uuid.UUID("6f1c2a4e-93b5-4f0e-8a57-2d1f0c9e7b31")


def opportunity_id(condition: MarketCondition, instrument: str, ts: datetime) -> str:
    """Deterministic id so identical inputs reproduce identical opportunities."""
    return str(uuid.uuid5(_OPPORTUNITY_NAMESPACE, f"{condition.value}|{instrument}|{ts.isoformat()}"))


class Detector(ABC):
    """Base class for all opportunity detectors.

    Subclasses must set the class-level attributes and implement detect().
    Instantiate with keyword params from config to override defaults.
    detect() must not mutate the snapshot, the history view or any shared state.
    """

    name: str
    condition: MarketCondition
    docs: dict[str, str] = {}

    def __init__(self, **params: Any) -> None:
        self.params = params

    @abstractmethod
    def detect(self, snapshot: MarketSnapshot, history: HistoryView) -> list[DetectedOpportunity]:
        """Evaluate a snapshot plus history and return candidate opportunities."""
        ...


def instrument_label(asset: str, strike: float, kind: str) -> str:
    """Display label for an option leg, e.g. ``"ETH $3200 Call"``."""
    return f"{asset} ${strike:.0f} {kind.capitalize()}"
