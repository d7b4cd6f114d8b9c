from __future__ import annotations

from dataclasses import dataclass, field

from idleeconomy.cost_scaling import CostScaling
from idleeconomy.decimal_value import DecimalValue, Numeric
from idleeconomy.effect import TargetCategory
from idleeconomy.requirement import Requirement


@dataclass
class PurchasableDef:
    """Static definition of an exponentially priced purchasable."""

    id: str
    base_cost: Numeric
    cost_resource_id: str
    cost_growth_factor: Numeric = 1
    produces_resource_id: str | None = None
    production_per_unit: Numeric = 0
    display_name: str = ""
    category: str = TargetCategory.PRODUCERS
    max_count: Numeric | None = None
    requirements: list[Requirement] = field(default_factory=list)
    resets_on_prestige: bool = True

    def __post_init__(self) -> None:
        if not self.display_name:
            self.display_name = self.id
        self.base_cost = DecimalValue.new(self.base_cost)
        self.cost_growth_factor = DecimalValue.new(self.cost_growth_factor)
        self.production_per_unit = DecimalValue.new(self.production_per_unit)
        if self.max_count is not None:
            self.max_count = DecimalValue.new(self.max_count)

    @property
    def cost_scaling(self) -> CostScaling:
        return CostScaling(self.cost_growth_factor)

    @property
    def source_key(self) -> str:
        """Production slot written by this purchasable."""
        return f"purchasable:{self.id}"


@dataclass(frozen=True)
class PurchasableStatus:
    """Read-only snapshot of a purchasable for query results."""

    id: str
    display_name: str
    owned: DecimalValue
    available: bool
    affordable: bool
    next_cost: DecimalValue
    cost_resource_id: str
    max_buyable: DecimalValue
    max_count: DecimalValue | None
    category: str
