from __future__ import annotations

import warnings
from dataclasses import dataclass, field

from idleeconomy.decimal_value import DecimalValue, Numeric
from idleeconomy.purchasable import PurchasableDef
from idleeconomy.resource import ResourceDef


@dataclass
class EconomyConfig:
    """Top-level economy configuration."""

    name: str = "Untitled"
    tick_rate: int = 20


@dataclass
class ClickTarget:
    """Defines a manual-action resource source."""

    resource_id: str = ""
    base_value: Numeric = 1
    # Share of the resource's current production rate added to each click.
    rate_fraction: Numeric = 0

    def __post_init__(self) -> None:
        self.base_value = DecimalValue.new(self.base_value)
        self.rate_fraction = DecimalValue.new(self.rate_fraction)


@dataclass
class EconomyDefinition:
    """Complete static definition of a game economy."""

    config: EconomyConfig = field(default_factory=EconomyConfig)
    resources: list[ResourceDef] = field(default_factory=list)
    purchasables: list[PurchasableDef] = field(default_factory=list)
    click_targets: list[ClickTarget] = field(default_factory=list)

    # Lookup dicts built in __post_init__
    _resources_by_id: dict[str, ResourceDef] = field(
        default_factory=dict, init=False, repr=False
    )
    _purchasables_by_id: dict[str, PurchasableDef] = field(
        default_factory=dict, init=False, repr=False
    )
    _click_targets_by_resource: dict[str, ClickTarget] = field(
        default_factory=dict, init=False, repr=False
    )

    def __post_init__(self) -> None:
        self._resources_by_id = {r.id: r for r in self.resources}
        self._purchasables_by_id = {p.id: p for p in self.purchasables}
        self._click_targets_by_resource = {
            ct.resource_id: ct for ct in self.click_targets
        }

    def get_resource(self, id: str) -> ResourceDef | None:
        return self._resources_by_id.get(id)

    def get_purchasable(self, id: str) -> PurchasableDef | None:
        return self._purchasables_by_id.get(id)

    def get_click_target(self, resource_id: str) -> ClickTarget | None:
        return self._click_targets_by_resource.get(resource_id)

    def validate(self) -> list[str]:
        """Check for common definition errors. Returns list of error messages."""
        errors: list[str] = []
        resource_ids = {r.id for r in self.resources}

        # Check for duplicate IDs
        seen_r: set[str] = set()
        for r in self.resources:
            if r.id in seen_r:
                errors.append(f"Duplicate resource ID: {r.id!r}")
            seen_r.add(r.id)

        seen_p: set[str] = set()
        for p in self.purchasables:
            if p.id in seen_p:
                errors.append(f"Duplicate purchasable ID: {p.id!r}")
            seen_p.add(p.id)

        # Check pricing and resource references
        for p in self.purchasables:
            if p.cost_resource_id not in resource_ids:
                errors.append(
                    f"Purchasable {p.id!r} is paid with unknown resource {p.cost_resource_id!r}"
                )
            if (
                p.produces_resource_id is not None
                and p.produces_resource_id not in resource_ids
            ):
                errors.append(
                    f"Purchasable {p.id!r} produces unknown resource {p.produces_resource_id!r}"
                )
            if p.base_cost <= 0:
                errors.append(f"Purchasable {p.id!r} has non-positive base cost {p.base_cost}")
            if p.cost_growth_factor <= 0:
                errors.append(
                    f"Purchasable {p.id!r} has non-positive growth factor {p.cost_growth_factor}"
                )
            elif p.cost_growth_factor < 1:
                warnings.warn(
                    f"Purchasable {p.id!r} has growth factor {p.cost_growth_factor} below 1. "
                    f"Prices never fall with owned count, so it is priced as a flat "
                    f"cost of {p.base_cost}.",
                    stacklevel=2,
                )

        # Check click targets reference known resources
        for ct in self.click_targets:
            if ct.resource_id not in resource_ids:
                errors.append(f"ClickTarget references unknown resource {ct.resource_id!r}")

        return errors
