"""Tests for the opportunity registry: dedup, expiry, ranking, flags."""

from __future__ import annotations

from datetime import timedelta

from helpers import T0, make_opportunity
from pulse_core.models import MarketCondition, UrgencyLevel
from pulse_core.opportunities import OpportunityRegistry


class TestDedup:
    def test_same_condition_instrument_and_close_expiry_is_duplicate(self):
        reg = OpportunityRegistry()
        first = make_opportunity("a")
        reg.apply_tick([first], now=T0)

        later = make_opportunity("b", detected_at=T0 + timedelta(seconds=30))
        result = reg.apply_tick([later], now=T0 + timedelta(seconds=30))

        assert result.admitted == ()
        assert result.duplicates == (later,)
        assert reg.get("a") == first
        assert reg.get("b") is None

    def test_within_one_tick_first_wins(self):
        reg = OpportunityRegistry()
        a = make_opportunity("a")
        b = make_opportunity("b", ttl=timedelta(minutes=8, seconds=10))
        result = reg.apply_tick([a, b], now=T0)
        assert result.admitted == (a,)
        assert len(reg) == 1

    def test_expiry_outside_window_is_distinct(self):
        reg = OpportunityRegistry(dedup_window_s=60)
        reg.apply_tick([make_opportunity("a")], now=T0)
        result = reg.apply_tick(
            [make_opportunity("b", detected_at=T0 + timedelta(seconds=60))],
            now=T0 + timedelta(seconds=60),
        )
        assert [o.id for o in result.admitted] == ["b"]

    def test_different_instrument_or_condition_is_distinct(self):
        reg = OpportunityRegistry()
        result = reg.apply_tick([
            make_opportunity("a"),
            make_opportunity("b", instrument="ETH $3100 Call"),
            make_opportunity("c", condition=MarketCondition.YIELD_OPPORTUNITY),
        ], now=T0)
        assert len(result.admitted) == 3

    def test_repeated_id_is_duplicate(self):
        reg = OpportunityRegistry()
        opp = make_opportunity("a")
        reg.apply_tick([opp], now=T0)
        assert reg.apply_tick([opp], now=T0).duplicates == (opp,)

    def test_no_two_live_entries_collide(self):
        reg = OpportunityRegistry()
        for i in range(10):
            reg.apply_tick(
                [make_opportunity(f"o{i}", detected_at=T0 + timedelta(seconds=5 * i))],
                now=T0 + timedelta(seconds=5 * i),
            )
        live = reg.live()
        for x in live:
            for y in live:
                if x.id != y.id:
                    assert not (
                        x.condition == y.condition
                        and x.primary_instrument == y.primary_instrument
                        and abs(x.expires_at - y.expires_at) < reg.dedup_window
                    )


class TestExpiry:
    def test_expired_moved_to_history_once(self):
        reg = OpportunityRegistry()
        opp = make_opportunity("a", ttl=timedelta(minutes=5))
        reg.apply_tick([opp], now=T0)

        later = T0 + timedelta(minutes=6)
        result = reg.apply_tick([], now=later)
        assert [a.opportunity.id for a in result.expired] == ["a"]
        assert result.expired[0].reason == "expired"
        assert result.expired[0].archived_at == later
        assert reg.get("a") is None

        again = reg.apply_tick([], now=later + timedelta(minutes=1))
        assert again.expired == ()
        assert len(reg.history()) == 1

    def test_expiry_is_strict(self):
        reg = OpportunityRegistry()
        opp = make_opportunity("a", ttl=timedelta(minutes=5))
        reg.apply_tick([opp], now=T0)
        assert reg.evict_expired(opp.expires_at) == ()
        assert reg.get("a") == opp

    def test_executed_entries_are_archived_as_executed(self):
        reg = OpportunityRegistry()
        reg.apply_tick([make_opportunity("a", ttl=timedelta(minutes=1))], now=T0)
        reg.mark_executed("a", T0 + timedelta(seconds=10))
        result = reg.apply_tick([], now=T0 + timedelta(hours=1))

        assert [(a.opportunity.id, a.reason) for a in result.expired] == [("a", "executed")]
        assert [a.reason for a in reg.history()] == ["executed"]
        assert len(reg) == 0
        assert reg.record("a").executed is True
        assert reg.get("a").id == "a"

    def test_executed_entry_stays_until_its_expiry(self):
        reg = OpportunityRegistry()
        reg.apply_tick([make_opportunity("a", ttl=timedelta(minutes=1))], now=T0)
        reg.mark_executed("a", T0 + timedelta(seconds=10))
        reg.apply_tick([], now=T0 + timedelta(seconds=30))
        assert reg.history() == ()
        assert len(reg) == 1

    def test_archived_executed_entry_cannot_execute_again(self):
        reg = OpportunityRegistry()
        reg.apply_tick([make_opportunity("a", ttl=timedelta(minutes=1))], now=T0)
        reg.mark_executed("a", T0 + timedelta(seconds=10))
        reg.apply_tick([], now=T0 + timedelta(hours=1))
        assert reg.mark_executed("a", T0 + timedelta(hours=2)) is None
        assert reg.mark_viewed("a") is False

    def test_eviction_frees_dedup_slot(self):
        reg = OpportunityRegistry()
        reg.apply_tick([make_opportunity("a", ttl=timedelta(seconds=30))], now=T0)
        later = T0 + timedelta(seconds=31)
        result = reg.apply_tick(
            [make_opportunity("b", detected_at=later - timedelta(seconds=31), ttl=timedelta(seconds=45))],
            now=later,
        )
        assert [o.id for o in result.admitted] == ["b"]


class TestRanking:
    def test_urgency_then_detection_time(self):
        reg = OpportunityRegistry()
        low = make_opportunity("low", instrument="L", urgency=UrgencyLevel.LOW)
        crit = make_opportunity(
            "crit", instrument="C", urgency=UrgencyLevel.CRITICAL, detected_at=T0 + timedelta(seconds=2)
        )
        high_late = make_opportunity(
            "high_late", instrument="H2", urgency=UrgencyLevel.HIGH, detected_at=T0 + timedelta(seconds=1)
        )
        high_early = make_opportunity("high_early", instrument="H1", urgency=UrgencyLevel.HIGH)
        result = reg.apply_tick([low, high_late, crit, high_early], now=T0 + timedelta(seconds=2))
        assert [o.id for o in result.live] == ["crit", "high_early", "high_late", "low"]

    def test_ties_broken_by_id(self):
        reg = OpportunityRegistry()
        b = make_opportunity("b", instrument="X")
        a = make_opportunity("a", instrument="Y")
        assert [o.id for o in reg.apply_tick([b, a], now=T0).live] == ["a", "b"]

    def test_executed_excluded_from_live(self):
        reg = OpportunityRegistry()
        reg.apply_tick([make_opportunity("a"), make_opportunity("b", instrument="Z")], now=T0)
        reg.mark_executed("a", T0)
        assert [o.id for o in reg.live()] == ["b"]


class TestFlags:
    def test_view_first_time_only(self):
        reg = OpportunityRegistry()
        reg.apply_tick([make_opportunity("a")], now=T0)
        assert reg.mark_viewed("a") is True
        assert reg.mark_viewed("a") is False
        assert reg.record("a").viewed is True

    def test_execute_once(self):
        reg = OpportunityRegistry()
        reg.apply_tick([make_opportunity("a")], now=T0)
        first = reg.mark_executed("a", T0 + timedelta(seconds=3))
        assert first is not None
        assert first.executed_at == T0 + timedelta(seconds=3)
        assert reg.mark_executed("a", T0 + timedelta(seconds=9)) is None
        assert reg.record("a").executed_at == T0 + timedelta(seconds=3)

    def test_unknown_ids_are_noops(self):
        reg = OpportunityRegistry()
        assert reg.mark_viewed("missing") is False
        assert reg.mark_executed("missing", T0) is None
        assert reg.get("missing") is None
        assert len(reg) == 0

    def test_records_are_immutable_snapshots(self):
        reg = OpportunityRegistry()
        reg.apply_tick([make_opportunity("a")], now=T0)
        before = reg.record("a")
        reg.mark_viewed("a")
        assert before.viewed is False
