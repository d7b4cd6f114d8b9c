from __future__ import annotations

from dataclasses import dataclass, field

from idleeconomy.decimal_value import ZERO, DecimalValue, Numeric
from idleeconomy.requirement import Requirement


@dataclass
class ResourceDef:
    """Static definition of a resource."""

    id: str
    name_key: str = ""
    initial_amount: Numeric = 0
    show_in_ui: bool = True
    is_unlocked: bool = True
    has_production_rate: bool = True
    resets_on_prestige: bool = True
    unlock_when: Requirement | None = None

    def __post_init__(self) -> None:
        if not self.name_key:
            self.name_key = self.id
        self.initial_amount = DecimalValue.new(self.initial_amount)

    def same_flags(self, other: ResourceDef) -> bool:
        return (
            self.initial_amount == other.initial_amount
            and self.show_in_ui == other.show_in_ui
            and self.is_unlocked == other.is_unlocked
            and self.has_production_rate == other.has_production_rate
            and self.resets_on_prestige == other.resets_on_prestige
        )


@dataclass
class ResourceState:
    """Mutable runtime state for a resource."""

    amount: DecimalValue = field(default=ZERO)
    is_unlocked: bool = True
    is_visible: bool = True
    total_earned: DecimalValue = field(default=ZERO)

    @classmethod
    def from_definition(cls, rdef: ResourceDef) -> ResourceState:
        amount = DecimalValue.new(rdef.initial_amount)
        if amount < 0:
            amount = ZERO
        return cls(
            amount=amount,
            is_unlocked=rdef.is_unlocked,
            is_visible=rdef.show_in_ui,
        )
