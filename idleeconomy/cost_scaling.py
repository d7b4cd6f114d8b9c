"""Closed-form pricing for exponentially priced purchasables.

With base cost C0, growth factor r and k units already owned, unit k+i costs
C0 * r^(k+i).  Buying n units at once costs the geometric series

    cost(k, n) = C0 * r^k * (r^n - 1) / (r - 1)

and the most units a budget B can buy is

    n = floor(log_r(1 + B * (r - 1) / (C0 * r^k)))

Both stay closed-form because owned counts and quantities can be far too
large to iterate over.
"""

from __future__ import annotations

import logging

from idleeconomy.decimal_value import INFINITY, ONE, ZERO, DecimalValue, Numeric
from idleeconomy.errors import ConfigurationFault

logger = logging.getLogger(__name__)

# Below this, (r - 1) is treated as zero and pricing falls back to flat rate.
FLAT_RATE_EPSILON = DecimalValue("1e-12")

# The log-based estimate is within one unit; a few steps absorb rounding.
_MAX_CORRECTION_STEPS = 8


def _validated_terms(base_cost: Numeric, growth_factor: Numeric) -> tuple[DecimalValue, DecimalValue]:
    c0 = DecimalValue.new(base_cost)
    r = DecimalValue.new(growth_factor)
    if c0 <= 0 or not c0.is_finite():
        raise ConfigurationFault(f"Base cost must be positive and finite, got {c0}")
    if r <= 0 or not r.is_finite():
        raise ConfigurationFault(f"Growth factor must be positive and finite, got {r}")
    if r < 1:
        logger.warning("Growth factor %s is below 1; pricing it as flat", r)
        r = ONE
    return c0, r


def _series_cost(
    c0: DecimalValue, r: DecimalValue, owned: DecimalValue, quantity: DecimalValue
) -> DecimalValue:
    if quantity <= 0:
        return ZERO
    if r == ONE:
        return c0 * quantity
    unit = c0 * r**owned
    growth = r - ONE
    if growth * quantity < FLAT_RATE_EPSILON:
        return unit * quantity
    return unit * (r**quantity - ONE) / growth


def _correct(
    estimate: DecimalValue,
    budget: DecimalValue,
    c0: DecimalValue,
    r: DecimalValue,
    owned: DecimalValue,
) -> DecimalValue:
    """Nudge *estimate* until cost(n) <= budget < cost(n + 1)."""
    n = estimate.max(ZERO)
    for _ in range(_MAX_CORRECTION_STEPS):
        if n > 0 and _series_cost(c0, r, owned, n) > budget:
            n = n - ONE
            continue
        following = n + ONE
        if following == n:
            # Beyond the precision of the count; cannot refine further.
            break
        if _series_cost(c0, r, owned, following) <= budget:
            n = following
            continue
        break
    return n


def series_cost(
    base_cost: Numeric,
    growth_factor: Numeric,
    owned: Numeric,
    quantity: Numeric,
) -> DecimalValue:
    """Cost of the next *quantity* units; INFINITY on bad pricing data."""
    n = DecimalValue.new(quantity).floor()
    if n <= 0:
        return ZERO
    try:
        c0, r = _validated_terms(base_cost, growth_factor)
    except ConfigurationFault as fault:
        logger.warning("%s", fault)
        return INFINITY
    return _series_cost(c0, r, DecimalValue.new(owned), n)


def max_affordable(
    budget: Numeric,
    base_cost: Numeric,
    growth_factor: Numeric,
    owned: Numeric,
) -> DecimalValue:
    """Largest n with series_cost(n) <= budget; ZERO on bad pricing data."""
    try:
        c0, r = _validated_terms(base_cost, growth_factor)
    except ConfigurationFault as fault:
        logger.warning("%s", fault)
        return ZERO

    b = DecimalValue.new(budget)
    k = DecimalValue.new(owned)
    if b <= 0:
        return ZERO
    if b.is_infinite():
        return INFINITY
    if r == ONE:
        return (b / c0).floor()

    unit = c0 * r**k
    if unit.is_infinite() or unit > b:
        return ZERO

    growth = r - ONE
    flat_count = (b / unit).floor()
    # Growth over the whole flat count is negligible only when this stays tiny.
    if growth * flat_count < FLAT_RATE_EPSILON:
        estimate = flat_count
    else:
        lhs = ONE + b * growth / unit
        estimate = (lhs.ln() / r.ln()).floor()
    return _correct(estimate, b, c0, r, k)


class CostScaling:
    """Determines how purchasable costs change with owned count."""

    def __init__(self, growth_factor: Numeric = 1) -> None:
        self.growth_factor = DecimalValue.new(growth_factor)

    def cost(self, base_cost: Numeric, owned: Numeric, quantity: Numeric = 1) -> DecimalValue:
        return series_cost(base_cost, self.growth_factor, owned, quantity)

    def max_affordable(self, budget: Numeric, base_cost: Numeric, owned: Numeric) -> DecimalValue:
        return max_affordable(budget, base_cost, self.growth_factor, owned)

    def reduced(self, reduction: Numeric) -> CostScaling:
        """Growth lowered by *reduction*, never below 1."""
        if self.growth_factor <= 0:
            return self
        return CostScaling((self.growth_factor - DecimalValue.new(reduction)).max(ONE))

    @classmethod
    def fixed(cls) -> CostScaling:
        """Cost never changes."""
        return cls(ONE)

    @classmethod
    def exponential(cls, growth_rate: Numeric = "1.15") -> CostScaling:
        """Cost = base * growth_rate^owned."""
        return cls(growth_rate)

    def __repr__(self) -> str:
        return f"CostScaling({str(self.growth_factor)!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CostScaling):
            return NotImplemented
        return self.growth_factor == other.growth_factor

    def __hash__(self) -> int:
        return hash(self.growth_factor)
