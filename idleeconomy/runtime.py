from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from idleeconomy._types import DynamicDecimal
from idleeconomy.buy_multiplier import BUY_MAX, BuyMultiplier
from idleeconomy.cost_scaling import CostScaling
from idleeconomy.decimal_value import INFINITY, ONE, ZERO, DecimalValue, Numeric
from idleeconomy.definition import ClickTarget, EconomyDefinition
from idleeconomy.effect import EffectKind, TargetCategory
from idleeconomy.errors import ConfigurationFault
from idleeconomy.ledger import ResourceLedger
from idleeconomy.modifier import ModifierRegistry
from idleeconomy.pipeline import ProductionAggregator
from idleeconomy.purchasable import PurchasableDef, PurchasableStatus
from idleeconomy.requirement import Requirement
from idleeconomy.resource import ResourceDef

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResetResult:
    """What a prestige reset cleared."""

    resources_reset: list[str] = field(default_factory=list)
    purchasables_reset: list[str] = field(default_factory=list)


class Economy:
    """One game session's economy.

    Owns the resource ledger, the modifier registry, production slots and
    owned counts.  Features receive the session by handle instead of reaching
    for global state, so independent sessions (and tests) never interfere.
    """

    def __init__(self, definition: EconomyDefinition | None = None) -> None:
        self.definition = definition or EconomyDefinition()
        self.config = self.definition.config
        self.ledger = ResourceLedger()
        self.modifiers = ModifierRegistry()
        self.production = ProductionAggregator(self.ledger)
        self.buy_multiplier = BuyMultiplier()
        self.time_elapsed: float = 0.0
        self._purchasables: dict[str, PurchasableDef] = {}
        self._owned: dict[str, DecimalValue] = {}
        self._unlocked: set[str] = set()
        self._click_targets: dict[str, ClickTarget] = {}
        self._dirty = True

        for error in self.definition.validate():
            logger.warning("%s", ConfigurationFault(error))

        for rdef in self.definition.resources:
            self.ledger.define(rdef)
        for pdef in self.definition.purchasables:
            self._register_purchasable(pdef)
        for ct in self.definition.click_targets:
            self._click_targets.setdefault(ct.resource_id, ct)

        self.refresh_all_production()
        self._update_unlocks()

    # ── Registration ─────────────────────────────────────────────────

    def define_resource(
        self,
        resource_id: str,
        name_key: str = "",
        initial_amount: Numeric = 0,
        show_in_ui: bool = True,
        is_unlocked: bool = True,
        has_production_rate: bool = True,
        resets_on_prestige: bool = True,
        unlock_when: Requirement | None = None,
    ) -> bool:
        return self.ledger.define(
            ResourceDef(
                id=resource_id,
                name_key=name_key,
                initial_amount=initial_amount,
                show_in_ui=show_in_ui,
                is_unlocked=is_unlocked,
                has_production_rate=has_production_rate,
                resets_on_prestige=resets_on_prestige,
                unlock_when=unlock_when,
            )
        )

    def define_purchasable(self, pdef: PurchasableDef) -> bool:
        """Register a purchasable; bad pricing data is logged, not raised."""
        if pdef.base_cost <= 0 or pdef.cost_growth_factor <= 0:
            logger.warning(
                "%s",
                ConfigurationFault(
                    f"Purchasable {pdef.id!r} has base cost {pdef.base_cost} and "
                    f"growth factor {pdef.cost_growth_factor}; it will never be affordable"
                ),
            )
        if not self.ledger.is_defined(pdef.cost_resource_id):
            logger.warning(
                "Purchasable %r is paid with undefined resource %r",
                pdef.id,
                pdef.cost_resource_id,
            )
        return self._register_purchasable(pdef)

    def add_click_target(self, target: ClickTarget) -> None:
        self._click_targets[target.resource_id] = target

    def get_purchasable(self, purchasable_id: str) -> PurchasableDef | None:
        return self._purchasables.get(purchasable_id)

    def purchasables(self) -> list[PurchasableDef]:
        return list(self._purchasables.values())

    def click_targets(self) -> list[ClickTarget]:
        return list(self._click_targets.values())

    # ── Modifiers ────────────────────────────────────────────────────

    def register_modifier(
        self,
        source_id: str,
        target_category: str,
        target_id: str,
        kind: EffectKind | str,
        value: DynamicDecimal,
    ) -> bool:
        registered = self.modifiers.register_modifier(
            source_id, target_category, target_id, kind, value
        )
        if registered:
            self._dirty = True
        return registered

    def remove_modifier(
        self,
        source_id: str,
        target_category: str,
        target_id: str,
        kind: EffectKind | str,
    ) -> bool:
        removed = self.modifiers.remove_modifier(source_id, target_category, target_id, kind)
        if removed:
            self._dirty = True
        return removed

    def get_aggregated_modifier(
        self, target_category: str, target_id: str, kind: EffectKind | str
    ) -> DecimalValue:
        return self.modifiers.get_aggregated_modifier(target_category, target_id, kind)

    # ── Queries ──────────────────────────────────────────────────────

    def get_amount(self, resource_id: str) -> DecimalValue:
        return self.ledger.get_amount(resource_id)

    def get_total_production_rate(self, resource_id: str) -> DecimalValue:
        if self._dirty:
            self.refresh_all_production()
        return self.production.get_total_production_rate(resource_id)

    def owned_count(self, purchasable_id: str) -> DecimalValue:
        return self._owned.get(purchasable_id, ZERO)

    def is_available(self, purchasable_id: str) -> bool:
        pdef = self._purchasables.get(purchasable_id)
        if pdef is None:
            return False
        if purchasable_id in self._unlocked:
            return True
        if self._requirements_met(pdef):
            self._unlocked.add(purchasable_id)
            return True
        return False

    def cost_of(self, purchasable_id: str, quantity: Numeric = 1) -> DecimalValue:
        """Cost of the next *quantity* units, with cost modifiers applied."""
        pdef = self._purchasables.get(purchasable_id)
        if pdef is None:
            return INFINITY
        if quantity == BUY_MAX:
            quantity = self.max_buyable(purchasable_id)
            if quantity.is_zero():
                return INFINITY
        base_cost, scaling = self._effective_pricing(pdef)
        return scaling.cost(base_cost, self.owned_count(purchasable_id), quantity)

    def max_buyable(self, purchasable_id: str) -> DecimalValue:
        """Most units the current balance can buy, capped by max_count."""
        pdef = self._purchasables.get(purchasable_id)
        if pdef is None or not self.ledger.is_unlocked(pdef.cost_resource_id):
            return ZERO
        base_cost, scaling = self._effective_pricing(pdef)
        count = scaling.max_affordable(
            self.ledger.get_amount(pdef.cost_resource_id),
            base_cost,
            self.owned_count(purchasable_id),
        )
        remaining = self._remaining_capacity(pdef)
        if remaining is not None:
            count = count.min(remaining)
        return count

    def time_to_afford(self, purchasable_id: str) -> float | None:
        """Seconds until the next unit is affordable at current rates. None if never."""
        pdef = self._purchasables.get(purchasable_id)
        if pdef is None:
            return None
        cost = self.cost_of(purchasable_id)
        if cost.is_infinite():
            return None
        current = self.ledger.get_amount(pdef.cost_resource_id)
        if current >= cost:
            return 0.0
        rate = self.get_total_production_rate(pdef.cost_resource_id)
        if rate <= 0:
            return None
        return ((cost - current) / rate).to_float()

    def get_purchasable_status(self, purchasable_id: str) -> PurchasableStatus | None:
        pdef = self._purchasables.get(purchasable_id)
        if pdef is None:
            return None
        next_cost = self.cost_of(purchasable_id)
        return PurchasableStatus(
            id=pdef.id,
            display_name=pdef.display_name,
            owned=self.owned_count(purchasable_id),
            available=self.is_available(purchasable_id),
            affordable=self._can_buy_one(pdef, next_cost),
            next_cost=next_cost,
            cost_resource_id=pdef.cost_resource_id,
            max_buyable=self.max_buyable(purchasable_id),
            max_count=pdef.max_count,
            category=pdef.category,
        )

    def get_available_purchases(self) -> list[PurchasableStatus]:
        """Statuses of purchasables whose requirements are met and not maxed out."""
        result: list[PurchasableStatus] = []
        for pid, pdef in self._purchasables.items():
            if not self.is_available(pid):
                continue
            remaining = self._remaining_capacity(pdef)
            if remaining is not None and remaining <= 0:
                continue
            status = self.get_purchasable_status(pid)
            if status is not None:
                result.append(status)
        return result

    def get_affordable_purchases(self) -> list[PurchasableStatus]:
        return [s for s in self.get_available_purchases() if s.affordable]

    # ── Player actions ───────────────────────────────────────────────

    def try_purchase(self, purchasable_id: str, quantity: Numeric | None = None) -> bool:
        """Buy *quantity* units (default: the buy multiplier). Returns True on success."""
        pdef = self._purchasables.get(purchasable_id)
        if pdef is None:
            return False
        if not self.is_available(purchasable_id):
            return False

        if quantity is None:
            quantity = self.buy_multiplier.get()
        if quantity == BUY_MAX:
            count = self.max_buyable(purchasable_id)
        else:
            count = DecimalValue.new(quantity).floor()
        if count <= 0 or not count.is_finite():
            return False

        remaining = self._remaining_capacity(pdef)
        if remaining is not None and count > remaining:
            return False

        cost = self.cost_of(purchasable_id, count)
        if cost.is_infinite():
            return False
        if not self.ledger.spend_amount(pdef.cost_resource_id, cost):
            return False

        self._owned[purchasable_id] = self.owned_count(purchasable_id) + count
        self.refresh_production(purchasable_id)
        self._update_unlocks()
        logger.debug(
            "Purchased %s of %r for %s %s",
            count.format(0),
            purchasable_id,
            cost.format(),
            pdef.cost_resource_id,
        )
        return True

    def buy_max(self, purchasable_id: str) -> DecimalValue:
        """Buy as many units as affordable. Returns how many were bought."""
        count = self.max_buyable(purchasable_id)
        if count > 0 and self.try_purchase(purchasable_id, count):
            return count
        return ZERO

    def click(self, resource_id: str) -> DecimalValue:
        """Perform one manual action on *resource_id*. Returns the amount gained."""
        ct = self._click_targets.get(resource_id)
        if ct is None:
            return ZERO
        rate = self.get_total_production_rate(resource_id)
        mods = self.modifiers
        base = (
            ct.base_value
            + mods.get_aggregated_modifier(TargetCategory.CLICK, resource_id, EffectKind.RESOURCE_GAIN)
            + ct.rate_fraction * rate
        )
        gain = self.production.compute_rate(
            base,
            additive_bonus=mods.get_aggregated_modifier(
                TargetCategory.CLICK, resource_id, EffectKind.ADDITIVE_BONUS
            ),
            multiplier=mods.get_aggregated_modifier(
                TargetCategory.CLICK, resource_id, EffectKind.MULTIPLIER
            ),
            global_multiplier=mods.get_aggregated_modifier(
                TargetCategory.RESOURCE_PRODUCTION, resource_id, EffectKind.MULTIPLIER
            ),
        )
        if not self.ledger.add_amount(resource_id, gain):
            return ZERO
        self._update_unlocks()
        return gain

    # ── Core loop ────────────────────────────────────────────────────

    def tick(self, delta_time: Numeric) -> dict[str, DecimalValue]:
        """Advance the economy by *delta_time* seconds. Returns amounts produced."""
        # Callable modifiers may have changed since the last tick.
        if self._dirty or self.modifiers.has_dynamic():
            self.refresh_all_production()

        earned = self.production.apply(delta_time)

        dt = DecimalValue.new(delta_time)
        if dt > 0:
            self.time_elapsed += dt.to_float()

        self._update_unlocks()
        return earned

    def refresh_production(self, purchasable_id: str) -> None:
        """Re-derive one purchasable's production slot from its owned count."""
        pdef = self._purchasables.get(purchasable_id)
        if pdef is None or pdef.produces_resource_id is None:
            return
        rid = pdef.produces_resource_id
        mods = self.modifiers
        per_unit = pdef.production_per_unit + mods.get_aggregated_modifier(
            pdef.category, pdef.id, EffectKind.RESOURCE_GAIN
        )
        rate = self.production.compute_rate(
            per_unit * self.owned_count(purchasable_id),
            additive_bonus=mods.get_aggregated_modifier(
                pdef.category, pdef.id, EffectKind.ADDITIVE_BONUS
            ),
            multiplier=mods.get_aggregated_modifier(pdef.category, pdef.id, EffectKind.MULTIPLIER),
            global_multiplier=mods.get_aggregated_modifier(
                TargetCategory.RESOURCE_PRODUCTION, rid, EffectKind.MULTIPLIER
            ),
        )
        self.production.set_production_per_second(rid, pdef.source_key, rate)

    def refresh_all_production(self) -> None:
        for pid in self._purchasables:
            self.refresh_production(pid)
        self._dirty = False

    # ── Persistence & resets ─────────────────────────────────────────

    def snapshot(self) -> dict[str, Any]:
        """Export balances and owned counts as canonical decimal strings."""
        return {
            "resources": self.ledger.snapshot(),
            "owned": {pid: str(count) for pid, count in self._owned.items()},
            "unlocked_purchasables": sorted(self._unlocked),
            "time_elapsed": repr(self.time_elapsed),
        }

    def restore(self, data: dict[str, Any]) -> None:
        """Load a snapshot() and re-derive every production slot from it."""
        self.ledger.restore(data.get("resources") or {})

        for pid, raw in (data.get("owned") or {}).items():
            if pid not in self._purchasables:
                logger.warning("Skipping saved count for unknown purchasable %r", pid)
                continue
            self._owned[pid] = DecimalValue.new(raw).floor().max(ZERO)

        self._unlocked.clear()
        for pid in data.get("unlocked_purchasables") or []:
            if pid in self._purchasables:
                self._unlocked.add(pid)

        try:
            self.time_elapsed = max(0.0, float(data.get("time_elapsed", 0.0)))
        except (TypeError, ValueError):
            logger.warning("Invalid saved time %r; starting from zero", data.get("time_elapsed"))
            self.time_elapsed = 0.0

        self.refresh_all_production()
        self._update_unlocks()

    def reset_for_prestige(self) -> ResetResult:
        """Clear resources and owned counts flagged resets_on_prestige."""
        resources_reset = self.ledger.reset_for_prestige()
        purchasables_reset: list[str] = []
        for pid, pdef in self._purchasables.items():
            if pdef.resets_on_prestige:
                self._owned[pid] = ZERO
                self._unlocked.discard(pid)
                purchasables_reset.append(pid)
        self.refresh_all_production()
        self._update_unlocks()
        return ResetResult(resources_reset, purchasables_reset)

    def reset(self) -> None:
        """Full game reset: balances, counts, modifiers and time."""
        self.ledger.reset()
        self.modifiers.reset()
        self.production.reset()
        self.buy_multiplier.reset()
        self._owned = {pid: ZERO for pid in self._purchasables}
        self._unlocked.clear()
        self.time_elapsed = 0.0
        self.refresh_all_production()
        self._update_unlocks()

    # ── Private helpers ──────────────────────────────────────────────

    def _register_purchasable(self, pdef: PurchasableDef) -> bool:
        if pdef.id in self._purchasables:
            logger.warning(
                "%s", ConfigurationFault(f"Purchasable {pdef.id!r} is already defined")
            )
            return False
        self._purchasables[pdef.id] = pdef
        self._owned.setdefault(pdef.id, ZERO)
        self._dirty = True
        return True

    def _effective_pricing(self, pdef: PurchasableDef) -> tuple[DecimalValue, CostScaling]:
        """Apply cost-reduction and growth-reduction modifiers to the base terms."""
        reduction = self.modifiers.get_aggregated_modifier(
            pdef.category, pdef.id, EffectKind.COST_REDUCTION_MULTIPLIER
        )
        growth_reduction = self.modifiers.get_aggregated_modifier(
            pdef.category, pdef.id, EffectKind.COST_GROWTH_REDUCTION
        )
        return pdef.base_cost * reduction, pdef.cost_scaling.reduced(growth_reduction)

    def _remaining_capacity(self, pdef: PurchasableDef) -> DecimalValue | None:
        if pdef.max_count is None:
            return None
        return (pdef.max_count - self.owned_count(pdef.id)).max(ZERO)

    def _can_buy_one(self, pdef: PurchasableDef, next_cost: DecimalValue) -> bool:
        if not self.is_available(pdef.id) or next_cost.is_infinite():
            return False
        remaining = self._remaining_capacity(pdef)
        if remaining is not None and remaining < ONE:
            return False
        return self.ledger.can_afford(pdef.cost_resource_id, next_cost)

    def _requirements_met(self, pdef: PurchasableDef) -> bool:
        if self.owned_count(pdef.id) > 0:
            return True
        return all(req.evaluate(self) for req in pdef.requirements)

    def _update_unlocks(self) -> None:
        """Unlock resources and purchasables whose thresholds are now met."""
        for rid in list(self.ledger.ids()):
            rdef = self.ledger.get_definition(rid)
            if rdef is None or rdef.unlock_when is None:
                continue
            if self.ledger.is_unlocked(rid) and self.ledger.is_visible(rid):
                continue
            if rdef.unlock_when.evaluate(self):
                self.ledger.unlock_resource(rid)
                self.ledger.set_resource_visibility(rid, True)
                logger.debug("Resource %r unlocked", rid)

        for pid in self._purchasables:
            self.is_available(pid)
