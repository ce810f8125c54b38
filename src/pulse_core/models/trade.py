"""Trade models — executions and their asynchronous settlement."""

from __future__ import annotations

from pydantic import AwareDatetime, BaseModel, ConfigDict, Field

from pulse_core.models.opportunity import MarketCondition, OptionsStrategy


class TradeOutcome(BaseModel):
    """Settled result of a trade, attached after execution."""

    model_config = ConfigDict(frozen=True)

    settled_at: AwareDatetime
    pnl: float
    return_pct: float


class SkillSignals(BaseModel):
    model_config = ConfigDict(frozen=True)

    reacted_quickly: bool = False


class Trade(BaseModel):
    """An executed opportunity. ``outcome`` is None while pending settlement."""

    model_config = ConfigDict(frozen=True)

    id: str
    opportunity_id: str
    condition: MarketCondition
    asset: str
    strategy: OptionsStrategy
    executed_at: AwareDatetime
    execution_speed: float = Field(ge=0.0)  # seconds from detection to execution
    skill_signals: SkillSignals = Field(default_factory=SkillSignals)
    outcome: TradeOutcome | None = None

    @property
    def settled(self) -> bool:
        return self.outcome is not None
