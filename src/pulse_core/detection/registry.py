"""Detector registry — decorated classes are auto-registered in declaration order."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pulse_core.detection.base import Detector

DETECTOR_REGISTRY: dict[str, type[Detector]] = {}


def register(cls: type[Detector]) -> type[Detector]:
    """Class decorator that adds a detector to the global registry."""
    if not hasattr(cls, "name") or not cls.name:
        raise ValueError(f"Detector class {cls.__name__} must define a 'name' attribute")
    if cls.name in DETECTOR_REGISTRY:
        raise ValueError(f"Duplicate detector name: {cls.name!r}")
    DETECTOR_REGISTRY[cls.name] = cls
    return cls
