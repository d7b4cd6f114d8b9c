"""Study example: a two-resource economy with producers and a click target."""
from __future__ import annotations

from idleeconomy.decimal_value import DecimalValue
from idleeconomy.definition import ClickTarget, EconomyConfig, EconomyDefinition
from idleeconomy.effect import EffectKind
from idleeconomy.purchasable import PurchasableDef
from idleeconomy.requirement import Req
from idleeconomy.resource import ResourceDef
from idleeconomy.runtime import Economy


def define_game() -> EconomyDefinition:
    return EconomyDefinition(
        config=EconomyConfig(
            name="Study Example",
            tick_rate=20,
        ),
        resources=[
            ResourceDef("studyPoints", name_key="resources.studyPoints"),
            ResourceDef(
                "knowledge",
                name_key="resources.knowledge",
                show_in_ui=False,
                is_unlocked=False,
                unlock_when=Req.owns("professor"),
            ),
        ],
        purchasables=[
            PurchasableDef(
                id="student",
                display_name="Student",
                base_cost=10,
                cost_growth_factor="1.07",
                cost_resource_id="studyPoints",
                produces_resource_id="studyPoints",
                production_per_unit="0.5",
            ),
            PurchasableDef(
                id="classroom",
                display_name="Classroom",
                base_cost=100,
                cost_growth_factor="1.15",
                cost_resource_id="studyPoints",
                produces_resource_id="studyPoints",
                production_per_unit=4,
                requirements=[Req.owns("student")],
            ),
            PurchasableDef(
                id="professor",
                display_name="Professor",
                base_cost=1000,
                cost_growth_factor="1.2",
                cost_resource_id="studyPoints",
                produces_resource_id="knowledge",
                production_per_unit="0.1",
                requirements=[Req.count("classroom", ">=", 1)],
            ),
            PurchasableDef(
                id="library",
                display_name="Library",
                base_cost=50,
                cost_resource_id="knowledge",
                max_count=1,
                requirements=[Req.resource("knowledge", ">=", 10)],
                resets_on_prestige=False,
            ),
        ],
        click_targets=[
            ClickTarget(resource_id="studyPoints", base_value=1, rate_fraction="0.01"),
        ],
    )


def attach_knowledge_bonus(economy: Economy) -> None:
    """Each point of knowledge adds 1% to studyPoints production."""

    def bonus() -> DecimalValue:
        return economy.get_amount("knowledge") * DecimalValue("0.01")

    for pdef in economy.purchasables():
        if pdef.produces_resource_id == "studyPoints":
            economy.register_modifier(
                "knowledge",
                pdef.category,
                pdef.id,
                EffectKind.ADDITIVE_BONUS,
                bonus,
            )
