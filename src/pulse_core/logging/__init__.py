"""Structured logging."""

from pulse_core.logging.setup import get_logger, setup_logging, tick_context

__all__ = ["get_logger", "setup_logging", "tick_context"]
