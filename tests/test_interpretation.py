"""Tests for interpretation metrics and the default interpreter."""

from __future__ import annotations

from datetime import timedelta

import pytest

from helpers import T0, make_opportunity
from pulse_core.interpretation import DefaultInterpreter, fill_probability, interpret, minutes_remaining
from pulse_core.models import InterpretationText, MarketCondition, UrgencyLevel


class TestFillProbability:
    def test_calm_opportunity(self):
        opp = make_opportunity(urgency=UrgencyLevel.MEDIUM)
        assert fill_probability(opp) == pytest.approx(0.8)

    def test_critical_high_pressure_draining(self):
        opp = make_opportunity(
            urgency=UrgencyLevel.CRITICAL,
            triggers={"competitivePressure": 0.9, "liquidityDrain": 0.5},
        )
        assert fill_probability(opp) == pytest.approx(0.25)

    def test_high_urgency(self):
        opp = make_opportunity(urgency=UrgencyLevel.HIGH, triggers={"competitivePressure": 0.7})
        assert fill_probability(opp) == pytest.approx(0.7)

    def test_clamped_to_range(self):
        opp = make_opportunity(
            urgency=UrgencyLevel.CRITICAL,
            triggers={"competitivePressure": 1.0, "liquidityDrain": 1.0},
        )
        assert 0.1 <= fill_probability(opp) <= 0.95


class TestMinutesRemaining:
    def test_rounds_half_up(self):
        opp = make_opportunity(ttl=timedelta(minutes=8))
        assert minutes_remaining(opp, T0) == 8
        assert minutes_remaining(opp, T0 + timedelta(seconds=30)) == 8
        assert minutes_remaining(opp, T0 + timedelta(seconds=31)) == 7

    def test_never_negative(self):
        opp = make_opportunity(ttl=timedelta(minutes=1))
        assert minutes_remaining(opp, T0 + timedelta(hours=1)) == 0


class TestInterpreter:
    @pytest.mark.parametrize("condition", list(MarketCondition))
    def test_every_condition_has_text(self, condition):
        text = DefaultInterpreter().describe(make_opportunity(condition=condition))
        assert isinstance(text, InterpretationText)
        assert text.title
        assert text.suggested_action

    def test_interpret_combines_text_and_metrics(self):
        opp = make_opportunity(urgency=UrgencyLevel.HIGH, triggers={"competitivePressure": 0.6})
        result = interpret(opp, DefaultInterpreter(), T0)
        assert result.time_value == 8
        assert result.fill_probability == pytest.approx(0.7)
        assert result.competition_level == 0.6
        assert result.title

    def test_fill_override(self):
        opp = make_opportunity()
        assert interpret(opp, DefaultInterpreter(), T0, fill_override=0.33).fill_probability == 0.33

    def test_custom_interpreter(self):
        class Fixed:
            def describe(self, opp):
                return InterpretationText(
                    title="t",
                    why_now="w",
                    risk_explanation="r",
                    outcome_explanation="o",
                    urgency_reason="u",
                    suggested_action="a",
                )

        assert interpret(make_opportunity(), Fixed(), T0).title == "t"
