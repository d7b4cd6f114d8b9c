from __future__ import annotations

from enum import Enum, auto

from idleeconomy.decimal_value import ONE, ZERO, DecimalValue

# Matches every target id inside a category.
WILDCARD = "*"


class TargetCategory:
    """Well-known modifier scopes used by the economy runtime."""

    PRODUCERS = "producers"
    RESOURCE_PRODUCTION = "resource_production"
    CLICK = "click"


class EffectKind(Enum):
    MULTIPLIER = auto()
    ADDITIVE_BONUS = auto()
    RESOURCE_GAIN = auto()
    COST_REDUCTION_MULTIPLIER = auto()
    COST_GROWTH_REDUCTION = auto()

    @classmethod
    def coerce(cls, kind: EffectKind | str) -> EffectKind | None:
        """Look up a kind by member or name; None if unknown."""
        if isinstance(kind, EffectKind):
            return kind
        try:
            return cls[str(kind).upper()]
        except KeyError:
            return None


class CombineRule(Enum):
    PRODUCT = auto()
    SUM = auto()

    @property
    def identity(self) -> DecimalValue:
        return ONE if self is CombineRule.PRODUCT else ZERO

    def combine(self, left: DecimalValue, right: DecimalValue) -> DecimalValue:
        if self is CombineRule.PRODUCT:
            return left * right
        return left + right


COMBINE_RULES: dict[EffectKind, CombineRule] = {
    EffectKind.MULTIPLIER: CombineRule.PRODUCT,
    EffectKind.ADDITIVE_BONUS: CombineRule.SUM,
    EffectKind.RESOURCE_GAIN: CombineRule.SUM,
    EffectKind.COST_REDUCTION_MULTIPLIER: CombineRule.PRODUCT,
    EffectKind.COST_GROWTH_REDUCTION: CombineRule.SUM,
}
