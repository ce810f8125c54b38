"""Tests for mastery formulas and the scoring engine."""

from __future__ import annotations

from datetime import timedelta

import pytest

from helpers import T0, make_opportunity
from pulse_core.config import ScoringConfig
from pulse_core.models import MarketCondition, RankingContext, Trade, TradeOutcome
from pulse_core.scoring import compute_mastery
from pulse_core.scoring.formulas import composite_score, consistency, sample_variance, streaks, win_rate

NOW = T0 + timedelta(days=1)


def _trade(
    trade_id: str,
    pnl: float | None,
    *,
    minutes: int = 0,
    speed: float = 5.0,
    condition: MarketCondition = MarketCondition.VOLATILITY_CRUSH,
) -> Trade:
    opp = make_opportunity(f"opp-{trade_id}", condition=condition)
    executed_at = T0 + timedelta(minutes=minutes)
    outcome = None
    if pnl is not None:
        outcome = TradeOutcome(settled_at=executed_at + timedelta(hours=1), pnl=pnl, return_pct=pnl / 10)
    return Trade(
        id=trade_id,
        opportunity_id=opp.id,
        condition=opp.condition,
        asset=opp.asset,
        strategy=opp.strategy,
        executed_at=executed_at,
        execution_speed=speed,
        outcome=outcome,
    )


class TestFormulas:
    def test_win_rate_empty(self):
        assert win_rate(0, 0) == 0.0

    def test_sample_variance(self):
        assert sample_variance([100.0, -50.0, 30.0]) == pytest.approx(16900.0 / 3)
        assert sample_variance([42.0]) == 0.0

    def test_consistency_floor(self):
        assert consistency(20000.0) == 0.0
        assert consistency(2500.0) == pytest.approx(0.75)

    def test_streaks(self):
        assert streaks([10, 20, -5, 1, 2, 3]) == (3, 3)
        assert streaks([10, 20, 30, -1]) == (0, 3)
        assert streaks([]) == (0, 0)

    def test_zero_pnl_breaks_streak(self):
        assert streaks([10, 0, 10]) == (1, 1)

    def test_composite_clamped_to_range(self):
        assert composite_score(1.0, 0.0, 1.0, 1e9) == 10.0
        assert composite_score(0.0, 120.0, 0.0, -1e9) == 0.0

    def test_perfect_record_scores_exactly_ten(self):
        assert composite_score(1.0, 0.0, 1.0, 1000.0) == 10.0

    def test_composite_pnl_saturates(self):
        assert composite_score(0.5, 15.0, 0.5, 1000.0) == composite_score(0.5, 15.0, 0.5, 5000.0)


class TestComputeMastery:
    def test_empty_trade_list(self):
        m = compute_mastery([], now=NOW)
        assert m.win_rate == 0.0
        assert m.execution_speed == 0.0
        assert m.consistency == 1.0
        assert m.score == pytest.approx(5.0)
        assert m.performance_30d.total_trades == 0
        assert m.performance_30d.best_trade == 0.0
        assert m.performance_30d.worst_trade == 0.0
        assert m.current_streak == 0
        assert m.longest_streak == 0

    def test_three_trade_example(self):
        trades = [_trade("t1", 100.0, minutes=0), _trade("t2", -50.0, minutes=1), _trade("t3", 30.0, minutes=2)]
        m = compute_mastery(trades, now=NOW)
        assert m.win_rate == pytest.approx(2 / 3)
        assert m.performance_30d.total_trades == 3
        assert m.performance_30d.profitable_trades == 2
        assert m.performance_30d.total_pnl == pytest.approx(80.0)
        assert m.performance_30d.avg_pnl_per_trade == pytest.approx(80.0 / 3)
        assert m.performance_30d.best_trade == 100.0
        assert m.performance_30d.worst_trade == -50.0
        assert m.current_streak == 1
        assert m.longest_streak == 1
        assert m.consistency == pytest.approx(1 - (16900.0 / 3) / 10000)

        expected = 10 * (
            0.4 * (2 / 3)
            + 0.3 * (1 - 5.0 / 30)
            + 0.2 * (1 - (16900.0 / 3) / 10000)
            + 0.1 * 0.08
        )
        assert m.score == pytest.approx(expected)

    def test_pending_trades_ignored(self):
        settled = [_trade("t1", 100.0)]
        with_pending = settled + [_trade("t2", None, minutes=5, speed=60.0)]
        assert compute_mastery(settled, now=NOW) == compute_mastery(with_pending, now=NOW)

    def test_streaks_follow_execution_order(self):
        trades = [_trade("late", -10.0, minutes=10), _trade("early", 10.0, minutes=0)]
        m = compute_mastery(trades, now=NOW)
        assert m.current_streak == 0
        assert m.longest_streak == 1

    def test_window_excludes_old_trades(self):
        old = _trade("old", 500.0, minutes=0)
        recent = _trade("recent", -20.0, minutes=0)
        recent = recent.model_copy(update={"executed_at": T0 + timedelta(days=40)})
        m = compute_mastery([old, recent], now=T0 + timedelta(days=41))
        assert m.performance_30d.total_trades == 1
        assert m.performance_30d.total_pnl == -20.0
        assert m.win_rate == 0.5

    def test_score_in_range_for_heavy_losses(self):
        trades = [_trade(f"t{i}", -5000.0, minutes=i, speed=120.0) for i in range(5)]
        m = compute_mastery(trades, now=NOW)
        assert 0.0 <= m.score <= 10.0

    def test_ranking_passed_through(self):
        m = compute_mastery([], now=NOW, ranking=RankingContext(percentile=87.0, rank=12))
        assert m.percentile == 87.0
        assert m.rank == 12

    def test_config_norms_applied(self):
        trades = [_trade("t1", 100.0, speed=10.0)]
        loose = compute_mastery(trades, now=NOW, config=ScoringConfig(speed_norm_s=100.0))
        strict = compute_mastery(trades, now=NOW)
        assert loose.score > strict.score

    def test_strengths_and_weaknesses(self):
        trades = [
            _trade("c1", 10.0, minutes=0, condition=MarketCondition.VOLATILITY_CRUSH),
            _trade("c2", 10.0, minutes=1, condition=MarketCondition.VOLATILITY_CRUSH),
            _trade("y1", 10.0, minutes=2, condition=MarketCondition.YIELD_OPPORTUNITY),
            _trade("y2", -10.0, minutes=3, condition=MarketCondition.YIELD_OPPORTUNITY),
            _trade("h1", -10.0, minutes=4, condition=MarketCondition.HEDGE_SIGNAL),
        ]
        m = compute_mastery(trades, now=NOW)
        assert m.strengths == [MarketCondition.VOLATILITY_CRUSH]
        assert m.weaknesses == [MarketCondition.HEDGE_SIGNAL]

    def test_single_condition_has_no_strengths(self):
        m = compute_mastery([_trade("t1", 10.0)], now=NOW)
        assert m.strengths == []
        assert m.weaknesses == []

    def test_recompute_is_deterministic(self):
        trades = [_trade("t1", 100.0), _trade("t2", -50.0, minutes=1)]
        assert compute_mastery(trades, now=NOW) == compute_mastery(list(reversed(trades)), now=NOW)
