"""Tests for pipeline module."""
import logging

from idleeconomy.decimal_value import ZERO, DecimalValue
from idleeconomy.ledger import ResourceLedger
from idleeconomy.pipeline import ProductionAggregator


def _make_aggregator() -> ProductionAggregator:
    ledger = ResourceLedger()
    ledger.define_resource("studyPoints")
    ledger.define_resource("knowledge", is_unlocked=False)
    ledger.define_resource("prestigePoints", has_production_rate=False)
    return ProductionAggregator(ledger)


def test_compute_rate():
    rate = ProductionAggregator.compute_rate(10, additive_bonus="0.5", multiplier=2, global_multiplier=3)
    assert rate == 90
    assert ProductionAggregator.compute_rate(4) == 4


def test_rates_sum_across_sources():
    agg = _make_aggregator()
    agg.set_production_per_second("studyPoints", "purchasable:student", 5)
    agg.set_production_per_second("studyPoints", "purchasable:classroom", "2.5")
    assert agg.get_total_production_rate("studyPoints") == DecimalValue("7.5")
    assert agg.get_production_from_source("studyPoints", "purchasable:student") == 5
    assert agg.get_total_production_rate("knowledge") == ZERO


def test_overwrite_does_not_accumulate():
    agg = _make_aggregator()
    agg.set_production_per_second("studyPoints", "a", 3)
    agg.set_production_per_second("studyPoints", "b", 4)
    agg.set_production_per_second("studyPoints", "a", 6)
    # x overwritten with 2x, y unchanged
    assert agg.get_total_production_rate("studyPoints") == 10


def test_negative_rate_stored_as_zero(caplog):
    agg = _make_aggregator()
    with caplog.at_level(logging.WARNING, logger="idleeconomy.pipeline"):
        agg.set_production_per_second("studyPoints", "drain", -5)
    assert agg.get_production_from_source("studyPoints", "drain") == ZERO
    assert "Negative production" in caplog.text


def test_empty_source_key_ignored(caplog):
    agg = _make_aggregator()
    with caplog.at_level(logging.WARNING, logger="idleeconomy.pipeline"):
        agg.set_production_per_second("studyPoints", "", 5)
    assert agg.sources("studyPoints") == {}


def test_clear_source_and_reset():
    agg = _make_aggregator()
    agg.set_production_per_second("studyPoints", "a", 3)
    agg.set_production_per_second("studyPoints", "b", 4)
    agg.clear_source("studyPoints", "a")
    assert agg.sources("studyPoints") == {"b": DecimalValue(4)}
    agg.clear_source("missing", "a")
    agg.reset()
    assert agg.get_total_production_rate("studyPoints") == ZERO


def test_apply_accrues_rate_times_delta():
    agg = _make_aggregator()
    agg.set_production_per_second("studyPoints", "a", "2.5")
    earned = agg.apply(4)
    assert earned == {"studyPoints": DecimalValue(10)}
    assert agg.ledger.get_amount("studyPoints") == 10
    assert agg.ledger.get_total_earned("studyPoints") == 10


def test_apply_zero_delta_is_noop():
    agg = _make_aggregator()
    agg.set_production_per_second("studyPoints", "a", 5)
    assert agg.apply(0) == {}
    assert agg.ledger.get_amount("studyPoints") == ZERO


def test_apply_negative_delta_ignored(caplog):
    agg = _make_aggregator()
    agg.set_production_per_second("studyPoints", "a", 5)
    with caplog.at_level(logging.WARNING, logger="idleeconomy.pipeline"):
        assert agg.apply(-1) == {}
    assert agg.ledger.get_amount("studyPoints") == ZERO


def test_apply_skips_locked_and_rateless_resources():
    agg = _make_aggregator()
    agg.set_production_per_second("knowledge", "a", 5)
    agg.set_production_per_second("prestigePoints", "a", 5)
    assert agg.apply(1) == {}
    assert agg.ledger.get_amount("knowledge") == ZERO
    assert agg.ledger.get_amount("prestigePoints") == ZERO


def test_apply_handles_huge_rates():
    agg = _make_aggregator()
    agg.set_production_per_second("studyPoints", "a", "1e500")
    agg.apply("0.05")
    assert agg.ledger.get_amount("studyPoints") == DecimalValue("5e498")
