"""Opportunity interpretation — display text plus derived fill/time metrics."""

from pulse_core.interpretation.interpreter import DefaultInterpreter, Interpreter, interpret
from pulse_core.interpretation.metrics import fill_probability, minutes_remaining

__all__ = [
    "DefaultInterpreter",
    "Interpreter",
    "fill_probability",
    "interpret",
    "minutes_remaining",
]
