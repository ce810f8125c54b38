"""Detector framework."""

from pulse_core.detection.base import Detector, instrument_label, opportunity_id
from pulse_core.detection.history import HistoryBuffers, HistorySeries, HistoryView
from pulse_core.detection.registry import DETECTOR_REGISTRY, register

__all__ = [
    "DETECTOR_REGISTRY",
    "Detector",
    "HistoryBuffers",
    "HistorySeries",
    "HistoryView",
    "instrument_label",
    "opportunity_id",
    "register",
]
