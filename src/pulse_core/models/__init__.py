"""Pydantic domain models."""

from pulse_core.models.interpretation import Interpretation, InterpretationText
from pulse_core.models.market import (
    IVSurface,
    LiquidityDepth,
    MarketRegime,
    MarketSnapshot,
    OptionOrder,
)
from pulse_core.models.mastery import MasteryMetrics, Performance30d, RankingContext
from pulse_core.models.opportunity import (
    UNBOUNDED_GAIN,
    DetectedOpportunity,
    MarketCondition,
    OptionsStrategy,
    StrategyLeg,
    UrgencyLevel,
)
from pulse_core.models.trade import SkillSignals, Trade, TradeOutcome

__all__ = [
    "DetectedOpportunity",
    "Interpretation",
    "InterpretationText",
    "IVSurface",
    "LiquidityDepth",
    "MarketCondition",
    "MarketRegime",
    "MarketSnapshot",
    "MasteryMetrics",
    "OptionOrder",
    "OptionsStrategy",
    "Performance30d",
    "RankingContext",
    "SkillSignals",
    "StrategyLeg",
    "Trade",
    "TradeOutcome",
    "UNBOUNDED_GAIN",
    "UrgencyLevel",
]
