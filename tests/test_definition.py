"""Tests for definition module."""
import pytest

from idleeconomy.decimal_value import DecimalValue
from idleeconomy.definition import ClickTarget, EconomyConfig, EconomyDefinition
from idleeconomy.effect import TargetCategory
from idleeconomy.purchasable import PurchasableDef
from idleeconomy.resource import ResourceDef


def _make_definition(**overrides) -> EconomyDefinition:
    kwargs = dict(
        config=EconomyConfig(name="Test"),
        resources=[ResourceDef("gold"), ResourceDef("gems")],
        purchasables=[
            PurchasableDef(
                "miner",
                base_cost=10,
                cost_growth_factor="1.1",
                cost_resource_id="gold",
                produces_resource_id="gold",
                production_per_unit=1,
            ),
        ],
        click_targets=[ClickTarget("gold")],
    )
    kwargs.update(overrides)
    return EconomyDefinition(**kwargs)


def test_valid_definition_has_no_errors():
    assert _make_definition().validate() == []


def test_lookups():
    defn = _make_definition()
    assert defn.get_resource("gold").id == "gold"
    assert defn.get_purchasable("miner").display_name == "miner"
    assert defn.get_click_target("gold").base_value == 1
    assert defn.get_resource("nope") is None


def test_defaults():
    config = EconomyConfig()
    assert config.name == "Untitled"
    assert config.tick_rate == 20
    ct = ClickTarget("gold", rate_fraction="0.05")
    assert ct.rate_fraction == DecimalValue("0.05")


def test_purchasable_defaults():
    p = PurchasableDef("x", base_cost="15", cost_resource_id="gold")
    assert p.base_cost == 15
    assert p.cost_growth_factor == 1
    assert p.category == TargetCategory.PRODUCERS
    assert p.source_key == "purchasable:x"
    assert p.max_count is None


def test_duplicate_ids():
    defn = _make_definition(resources=[ResourceDef("gold"), ResourceDef("gold")])
    assert any("Duplicate resource" in e for e in defn.validate())


def test_unknown_resource_references():
    defn = _make_definition(
        purchasables=[
            PurchasableDef("p", base_cost=1, cost_resource_id="silver", produces_resource_id="copper"),
        ],
        click_targets=[ClickTarget("iron")],
    )
    errors = defn.validate()
    assert any("silver" in e for e in errors)
    assert any("copper" in e for e in errors)
    assert any("iron" in e for e in errors)


def test_bad_pricing_reported():
    defn = _make_definition(
        purchasables=[
            PurchasableDef("free", base_cost=0, cost_resource_id="gold"),
            PurchasableDef("shrink", base_cost=5, cost_growth_factor=-1, cost_resource_id="gold"),
        ]
    )
    errors = defn.validate()
    assert any("non-positive base cost" in e for e in errors)
    assert any("non-positive growth factor" in e for e in errors)


def test_shrinking_growth_warns():
    defn = _make_definition(
        purchasables=[
            PurchasableDef("cheap", base_cost=5, cost_growth_factor="0.9", cost_resource_id="gold"),
        ]
    )
    with pytest.warns(UserWarning, match="priced as a flat cost of 5"):
        errors = defn.validate()
    assert errors == []
