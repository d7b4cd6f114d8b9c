"""Tests for simulation module."""
import pytest

from idleeconomy.definition import ClickTarget, EconomyConfig, EconomyDefinition
from idleeconomy.purchasable import PurchasableDef
from idleeconomy.resource import ResourceDef
from idleeconomy.simulation import Simulation


def _simple_game(initial_gold=0, **miner_overrides) -> EconomyDefinition:
    miner = dict(
        id="miner",
        base_cost=10,
        cost_resource_id="gold",
        produces_resource_id="gold",
        production_per_unit=1,
    )
    miner.update(miner_overrides)
    return EconomyDefinition(
        config=EconomyConfig(name="SimpleTest"),
        resources=[ResourceDef("gold", initial_amount=initial_gold)],
        purchasables=[PurchasableDef(**miner)],
        click_targets=[ClickTarget("gold", base_value=1)],
    )


def test_clicks_fund_first_purchase():
    sim = Simulation(_simple_game(), duration=2, clicks_per_second=5)
    result = sim.run()

    assert result.ticks == 2
    assert result.total_time == 2.0
    assert result.purchase_counts() == {"miner": 1}
    assert result.first_purchase_time("miner") == 2.0
    assert result.purchases[0].cost == 10
    assert result.purchases[0].owned_after == 1


def test_no_income_means_no_purchases():
    result = Simulation(_simple_game(), duration=60).run()
    assert result.ticks == 60
    assert result.purchases == []
    assert result.first_purchase_time("miner") is None
    assert result.final_snapshot["resources"]["gold"]["amount"] == "0"


def test_tick_count_rounds_up():
    result = Simulation(_simple_game(), duration=10, tick_resolution=3).run()
    assert result.ticks == 4
    assert result.total_time == pytest.approx(12.0)


def test_fractional_clicks_carry_over():
    sim = Simulation(_simple_game(), duration=4, clicks_per_second=0.5)
    sim.run()
    assert sim.economy.get_amount("gold") == 2


def test_production_compounds():
    result = Simulation(_simple_game(initial_gold=10), duration=30).run()
    counts = result.purchase_counts()
    assert counts["miner"] > 1
    assert result.final_snapshot["owned"]["miner"] == str(counts["miner"])


def test_respects_max_count():
    defn = _simple_game(initial_gold=1000, max_count=2)
    result = Simulation(defn, duration=5).run()
    assert result.purchase_counts() == {"miner": 2}


def test_greedy_buys_cheapest_first():
    defn = EconomyDefinition(
        resources=[ResourceDef("gold", initial_amount=45)],
        purchasables=[
            PurchasableDef("a", base_cost=5, cost_growth_factor=2, cost_resource_id="gold"),
            PurchasableDef("b", base_cost=18, cost_resource_id="gold"),
        ],
    )
    result = Simulation(defn, duration=1).run()
    assert [p.purchasable_id for p in result.purchases] == ["a", "a", "b"]
    assert [p.cost for p in result.purchases] == [5, 10, 18]


def test_default_click_target():
    sim = Simulation(_simple_game(), duration=1)
    assert sim.click_target == "gold"
    assert Simulation(EconomyDefinition(), duration=1).click_target is None


@pytest.mark.parametrize("resolution", [0, -1.0])
def test_rejects_bad_resolution(resolution):
    with pytest.raises(ValueError, match="tick_resolution"):
        Simulation(_simple_game(), duration=10, tick_resolution=resolution)
