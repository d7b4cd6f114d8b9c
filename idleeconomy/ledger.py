from __future__ import annotations

import logging
from typing import Any, Iterator

from idleeconomy.decimal_value import ZERO, DecimalValue, Numeric
from idleeconomy.errors import ConfigurationFault
from idleeconomy.resource import ResourceDef, ResourceState

logger = logging.getLogger(__name__)


class ResourceLedger:
    """The sole mutator of resource balances.

    Amounts never go below zero: spending more than the balance is refused,
    negative deltas are rejected, and restored amounts are clamped.
    """

    def __init__(self) -> None:
        self._definitions: dict[str, ResourceDef] = {}
        self._states: dict[str, ResourceState] = {}

    # ── Definition ───────────────────────────────────────────────────

    def define(self, rdef: ResourceDef) -> bool:
        """Register a resource. Conflicting redefinitions are logged and ignored."""
        if not rdef.id or not rdef.id.strip():
            logger.warning("Resource id must be a non-empty string")
            return False

        existing = self._definitions.get(rdef.id)
        if existing is not None:
            if not existing.same_flags(rdef):
                fault = ConfigurationFault(
                    f"Resource {rdef.id!r} redefined with conflicting settings; "
                    f"keeping the first definition"
                )
                logger.warning("%s", fault)
                return False
            return True

        self._definitions[rdef.id] = rdef
        self._states[rdef.id] = ResourceState.from_definition(rdef)
        logger.debug("Resource %r defined", rdef.id)
        return True

    def define_resource(
        self,
        resource_id: str,
        name_key: str = "",
        initial_amount: Numeric = 0,
        show_in_ui: bool = True,
        is_unlocked: bool = True,
        has_production_rate: bool = True,
        resets_on_prestige: bool = True,
    ) -> bool:
        return self.define(
            ResourceDef(
                id=resource_id,
                name_key=name_key,
                initial_amount=initial_amount,
                show_in_ui=show_in_ui,
                is_unlocked=is_unlocked,
                has_production_rate=has_production_rate,
                resets_on_prestige=resets_on_prestige,
            )
        )

    def is_defined(self, resource_id: str) -> bool:
        return resource_id in self._states

    def get_definition(self, resource_id: str) -> ResourceDef | None:
        return self._definitions.get(resource_id)

    def ids(self) -> Iterator[str]:
        return iter(self._states)

    # ── Queries ──────────────────────────────────────────────────────

    def get_amount(self, resource_id: str) -> DecimalValue:
        rs = self._states.get(resource_id)
        return rs.amount if rs else ZERO

    def get_total_earned(self, resource_id: str) -> DecimalValue:
        rs = self._states.get(resource_id)
        return rs.total_earned if rs else ZERO

    def is_unlocked(self, resource_id: str) -> bool:
        rs = self._states.get(resource_id)
        return rs.is_unlocked if rs else False

    def is_visible(self, resource_id: str) -> bool:
        rs = self._states.get(resource_id)
        return rs.is_visible if rs else False

    def can_afford(self, resource_id: str, cost: Numeric) -> bool:
        rs = self._states.get(resource_id)
        if rs is None or not rs.is_unlocked:
            return False
        cost_value = DecimalValue.new(cost)
        if cost_value < 0:
            return False
        return rs.amount >= cost_value

    # ── Mutations ────────────────────────────────────────────────────

    def spend_amount(self, resource_id: str, cost: Numeric) -> bool:
        """Deduct *cost* if affordable. Insufficient funds is a plain False."""
        if not self.can_afford(resource_id, cost):
            return False
        rs = self._states[resource_id]
        rs.amount = (rs.amount - DecimalValue.new(cost)).max(ZERO)
        return True

    def add_amount(self, resource_id: str, delta: Numeric) -> bool:
        rs = self._states.get(resource_id)
        if rs is None:
            logger.warning("Cannot add to undefined resource %r", resource_id)
            return False
        if not rs.is_unlocked:
            return False
        delta_value = DecimalValue.new(delta)
        if delta_value < 0:
            logger.warning(
                "Rejected negative delta %s for resource %r", delta_value, resource_id
            )
            return False
        rs.amount = rs.amount + delta_value
        rs.total_earned = rs.total_earned + delta_value
        return True

    def set_amount(self, resource_id: str, amount: Numeric) -> bool:
        rs = self._states.get(resource_id)
        if rs is None:
            return False
        rs.amount = DecimalValue.new(amount).max(ZERO)
        return True

    def unlock_resource(self, resource_id: str, unlocked: bool = True) -> None:
        rs = self._states.get(resource_id)
        if rs is not None:
            rs.is_unlocked = unlocked

    def set_resource_visibility(self, resource_id: str, visible: bool) -> None:
        rs = self._states.get(resource_id)
        if rs is not None:
            rs.is_visible = bool(visible)

    # ── Resets ───────────────────────────────────────────────────────

    def reset_for_prestige(self) -> list[str]:
        """Zero every resource flagged resets_on_prestige. Returns the ids reset."""
        reset: list[str] = []
        for rid, rdef in self._definitions.items():
            if rdef.resets_on_prestige:
                self._states[rid].amount = ZERO
                reset.append(rid)
        logger.debug("Prestige reset cleared %d resource(s)", len(reset))
        return reset

    def reset(self) -> None:
        """Rebuild every state from its definition (full game reset)."""
        self._states = {
            rid: ResourceState.from_definition(rdef)
            for rid, rdef in self._definitions.items()
        }

    # ── Persistence ──────────────────────────────────────────────────

    def snapshot(self) -> dict[str, dict[str, Any]]:
        return {
            rid: {
                "amount": str(rs.amount),
                "total_earned": str(rs.total_earned),
                "unlocked": rs.is_unlocked,
                "visible": rs.is_visible,
            }
            for rid, rs in self._states.items()
        }

    def restore(self, data: dict[str, Any]) -> None:
        """Load balances from snapshot(); unknown ids are logged and skipped."""
        for rid, saved in data.items():
            rs = self._states.get(rid)
            if rs is None:
                logger.warning("Skipping saved amount for unknown resource %r", rid)
                continue
            if not isinstance(saved, dict):
                saved = {"amount": saved}
            self.set_amount(rid, saved.get("amount", "0"))
            rs.total_earned = DecimalValue.new(
                saved.get("total_earned", saved.get("amount", "0"))
            ).max(ZERO)
            if "unlocked" in saved:
                rs.is_unlocked = bool(saved["unlocked"])
            if "visible" in saved:
                rs.is_visible = bool(saved["visible"])
