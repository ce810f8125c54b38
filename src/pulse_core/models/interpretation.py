"""Display bundle returned for an admitted opportunity."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class InterpretationText(BaseModel):
    """Human-readable strings produced by an interpreter."""

    model_config = ConfigDict(frozen=True)

    title: str
    why_now: str
    risk_explanation: str
    outcome_explanation: str
    urgency_reason: str
    suggested_action: str


class Interpretation(InterpretationText):
    """Interpreter text plus the numeric fields the core derives itself."""

    time_value: int = Field(ge=0)  # minutes remaining until expiry
    fill_probability: float = Field(ge=0.0, le=1.0)
    competition_level: float = 0.0
