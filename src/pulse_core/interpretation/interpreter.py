"""Interpreters turn an opportunity into display text."""

from __future__ import annotations

from datetime import datetime
from typing import Callable, Protocol

from pulse_core.interpretation.metrics import competition_level, fill_probability, minutes_remaining
from pulse_core.models import (
    DetectedOpportunity,
    Interpretation,
    InterpretationText,
    MarketCondition,
)


class Interpreter(Protocol):
    """External collaborator producing the human-readable bundle."""

    def describe(self, opp: DetectedOpportunity) -> InterpretationText: ...


def _breakeven(opp: DetectedOpportunity) -> str:
    if not opp.strategy.breakeven:
        return "n/a"
    return f"${opp.strategy.breakeven[0]:.0f}"


def _volatility_crush(opp: DetectedOpportunity) -> InterpretationText:
    leg = opp.strategy.legs[0]
    drop = abs(opp.triggers.get("ivChange", 0.0))
    premium = round(opp.strategy.max_gain)
    return InterpretationText(
        title=f"Earn ${premium} premium right now",
        why_now=f"Implied volatility fell {drop:.0f}% in the last few samples; premiums are about to cheapen.",
        risk_explanation=f"You sell {leg.instrument}. Above the strike you deliver at strike but keep the ${premium}.",
        outcome_explanation=f"Flat or lower: keep ${premium}. Breakeven {_breakeven(opp)}.",
        urgency_reason="Volatility mean-reverts within minutes.",
        suggested_action=f"SELL ${premium} OF PREMIUM",
    )


def _volatility_expansion(opp: DetectedOpportunity) -> InterpretationText:
    return InterpretationText(
        title="Volatility is expanding",
        why_now="Realised and implied volatility are rising together; long optionality gains from a large move either way.",
        risk_explanation="Buying both a call and a put at the same strike loses the premium if price stays put.",
        outcome_explanation=f"Max loss ${opp.strategy.max_loss:.0f} if price pins the strike.",
        urgency_reason="Option prices rise as the crowd bids for volatility.",
        suggested_action="BUY VOLATILITY PLAY",
    )


def _skew_anomaly(opp: DetectedOpportunity) -> InterpretationText:
    z = opp.triggers.get("skewDeviation", 0.0)
    cheap_upside = z < 0
    return InterpretationText(
        title="Upside is unusually cheap" if cheap_upside else "Downside protection is expensive",
        why_now=f"Skew sits {abs(z):.1f} standard deviations from its recent mean.",
        risk_explanation=f"Defined risk spread; max loss ${opp.strategy.max_loss:.0f}.",
        outcome_explanation=f"Max gain ${opp.strategy.max_gain:.0f}, max loss ${opp.strategy.max_loss:.0f}.",
        urgency_reason="Rare market anomaly." if abs(z) > 3 else "Skew normalises quickly.",
        suggested_action=(
            f"BUY UPSIDE (${opp.strategy.max_loss:.0f} max risk)" if cheap_upside else "SELL EXPENSIVE PUTS"
        ),
    )


def _yield_opportunity(opp: DetectedOpportunity) -> InterpretationText:
    leg = opp.strategy.legs[0]
    excess = opp.triggers.get("yieldAboveBaseline", 0.0)
    premium = opp.strategy.max_gain
    return InterpretationText(
        title=f"Premium {excess:.0f}% above normal",
        why_now="Buyers are overpaying for near-term upside on at-the-money calls.",
        risk_explanation=f"You sell the right to buy {leg.instrument} from you at the strike.",
        outcome_explanation=f"Collect ${premium:.0f} now. Breakeven {_breakeven(opp)}.",
        urgency_reason="Premium decays every minute you wait.",
        suggested_action=f"SELL ${premium:.0f} OF PREMIUM",
    )


def _hedge_signal(opp: DetectedOpportunity) -> InterpretationText:
    leg = opp.strategy.legs[0]
    cost = opp.strategy.estimated_cost
    return InterpretationText(
        title=f"Protect downside for ${cost:.0f}",
        why_now="The regime is bearish or volatile and out-of-the-money puts are still cheap.",
        risk_explanation=f"You buy {leg.instrument}; it gains if price falls below the strike.",
        outcome_explanation=f"Cost ${cost:.0f}. Expires worthless if the market holds up.",
        urgency_reason="Protection gets more expensive as volatility expands.",
        suggested_action=f"PROTECT PORTFOLIO (${cost:.0f})",
    )


def _momentum_play(opp: DetectedOpportunity) -> InterpretationText:
    leg = opp.strategy.legs[0]
    cost = opp.strategy.estimated_cost
    return InterpretationText(
        title="Upside is cheap in a calm uptrend",
        why_now="Trend is bullish but volatility is low; options are priced for stagnation.",
        risk_explanation=f"You buy {leg.instrument} for ${cost:.0f}; that is the most you can lose.",
        outcome_explanation=f"Breakeven {_breakeven(opp)}. Unlimited upside.",
        urgency_reason="Call prices rise once the move starts.",
        suggested_action=f"BUY UPSIDE (${cost:.0f} max risk)",
    )


def _arbitrage(opp: DetectedOpportunity) -> InterpretationText:
    profit = opp.strategy.max_gain
    return InterpretationText(
        title=f"Lock in ${profit:.0f} price difference",
        why_now="The same exposure is quoted at two different prices.",
        risk_explanation="Both sides offset; the risk is legging in at different times.",
        outcome_explanation=f"Locked profit ${profit:.0f} when both legs fill together.",
        urgency_reason="Pricing gaps close within seconds.",
        suggested_action=f"LOCK IN ${profit:.0f} PROFIT",
    )


_HANDLERS: dict[MarketCondition, Callable[[DetectedOpportunity], InterpretationText]] = {
    MarketCondition.VOLATILITY_CRUSH: _volatility_crush,
    MarketCondition.VOLATILITY_EXPANSION: _volatility_expansion,
    MarketCondition.SKEW_ANOMALY: _skew_anomaly,
    MarketCondition.YIELD_OPPORTUNITY: _yield_opportunity,
    MarketCondition.HEDGE_SIGNAL: _hedge_signal,
    MarketCondition.MOMENTUM_PLAY: _momentum_play,
    MarketCondition.ARBITRAGE: _arbitrage,
}

_missing = set(MarketCondition) - set(_HANDLERS)
if _missing:
    raise RuntimeError(f"No interpretation handler for: {sorted(c.value for c in _missing)}")


class DefaultInterpreter:
    """Template interpreter with exactly one handler per MarketCondition."""

    def describe(self, opp: DetectedOpportunity) -> InterpretationText:
        return _HANDLERS[opp.condition](opp)


def interpret(
    opp: DetectedOpportunity,
    interpreter: Interpreter,
    now: datetime,
    *,
    fill_override: float | None = None,
) -> Interpretation:
    """Combine interpreter text with the core-derived numeric fields."""
    text = interpreter.describe(opp)
    return Interpretation(
        **text.model_dump(),
        time_value=minutes_remaining(opp, now),
        fill_probability=fill_override if fill_override is not None else fill_probability(opp),
        competition_level=competition_level(opp),
    )
