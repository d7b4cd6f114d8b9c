from __future__ import annotations

import logging

from idleeconomy.decimal_value import ONE, ZERO, DecimalValue, Numeric
from idleeconomy.ledger import ResourceLedger

logger = logging.getLogger(__name__)


class ProductionAggregator:
    """Per-resource production slots, one per source, summed on read.

    A source recomputing its contribution overwrites its own slot, so totals
    never accumulate stale values.
    """

    def __init__(self, ledger: ResourceLedger) -> None:
        self.ledger = ledger
        self._slots: dict[str, dict[str, DecimalValue]] = {}

    @staticmethod
    def compute_rate(
        base: Numeric,
        additive_bonus: Numeric = ZERO,
        multiplier: Numeric = ONE,
        global_multiplier: Numeric = ONE,
    ) -> DecimalValue:
        """base * (1 + additive_bonus) * multiplier * global_multiplier."""
        return (
            DecimalValue.new(base)
            * (ONE + DecimalValue.new(additive_bonus))
            * DecimalValue.new(multiplier)
            * DecimalValue.new(global_multiplier)
        )

    def set_production_per_second(
        self, resource_id: str, source_key: str, rate: Numeric
    ) -> None:
        if not source_key or not source_key.strip():
            logger.warning("Ignoring production for %r without a source key", resource_id)
            return
        rate_value = DecimalValue.new(rate)
        if rate_value < 0:
            logger.warning(
                "Negative production %s from %r on %r stored as zero",
                rate_value,
                source_key,
                resource_id,
            )
            rate_value = ZERO
        self._slots.setdefault(resource_id, {})[source_key] = rate_value

    def get_production_from_source(self, resource_id: str, source_key: str) -> DecimalValue:
        return self._slots.get(resource_id, {}).get(source_key, ZERO)

    def get_total_production_rate(self, resource_id: str) -> DecimalValue:
        total = ZERO
        for rate in self._slots.get(resource_id, {}).values():
            total = total + rate
        return total

    def sources(self, resource_id: str) -> dict[str, DecimalValue]:
        return dict(self._slots.get(resource_id, {}))

    def clear_source(self, resource_id: str, source_key: str) -> None:
        slots = self._slots.get(resource_id)
        if slots is not None:
            slots.pop(source_key, None)

    def reset(self) -> None:
        self._slots.clear()

    def apply(self, delta_time: Numeric) -> dict[str, DecimalValue]:
        """Accrue one tick of production. Returns the amount added per resource."""
        dt = DecimalValue.new(delta_time)
        if dt < 0:
            logger.warning("Ignoring negative tick length %s", dt)
            return {}
        if dt.is_zero():
            return {}

        # Read every rate before touching any balance.
        rates: dict[str, DecimalValue] = {}
        for rid in self.ledger.ids():
            rdef = self.ledger.get_definition(rid)
            if rdef is None or not rdef.has_production_rate:
                continue
            if not self.ledger.is_unlocked(rid):
                continue
            rate = self.get_total_production_rate(rid)
            if rate > 0:
                rates[rid] = rate

        earned: dict[str, DecimalValue] = {}
        for rid, rate in rates.items():
            amount = rate * dt
            if self.ledger.add_amount(rid, amount):
                earned[rid] = amount
        return earned
