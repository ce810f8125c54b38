"""Configuration system."""

from pulse_core.config.loader import load_config
from pulse_core.config.schema import AppConfig, DetectorParams, ScoringConfig

__all__ = ["AppConfig", "DetectorParams", "ScoringConfig", "load_config"]
