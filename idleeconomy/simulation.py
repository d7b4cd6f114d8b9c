from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Any

from idleeconomy.decimal_value import DecimalValue
from idleeconomy.definition import EconomyDefinition
from idleeconomy.runtime import Economy

logger = logging.getLogger(__name__)

MAX_TICKS = 10_000_000
# Upper bound on single-unit purchases within one tick.
MAX_PURCHASES_PER_TICK = 10_000


@dataclass(frozen=True)
class PurchaseRecord:
    """One unit bought during a simulation."""

    time: float
    purchasable_id: str
    cost: DecimalValue
    owned_after: DecimalValue


@dataclass
class SimulationResult:
    """Outcome of a headless simulation run."""

    total_time: float = 0.0
    ticks: int = 0
    purchases: list[PurchaseRecord] = field(default_factory=list)
    final_snapshot: dict[str, Any] = field(default_factory=dict)

    def purchase_counts(self) -> dict[str, int]:
        counts: dict[str, int] = {}
        for p in self.purchases:
            counts[p.purchasable_id] = counts.get(p.purchasable_id, 0) + 1
        return counts

    def first_purchase_time(self, purchasable_id: str) -> float | None:
        for p in self.purchases:
            if p.purchasable_id == purchasable_id:
                return p.time
        return None


class Simulation:
    """Runs an economy headlessly with a greedy cheapest-first buyer."""

    def __init__(
        self,
        definition: EconomyDefinition,
        duration: float,
        tick_resolution: float = 1.0,
        clicks_per_second: float = 0.0,
        click_target: str | None = None,
    ) -> None:
        if tick_resolution <= 0:
            raise ValueError(f"tick_resolution must be positive, got {tick_resolution}")
        self.definition = definition
        self.duration = duration
        self.tick_resolution = tick_resolution
        self.clicks_per_second = clicks_per_second
        if click_target is None and definition.click_targets:
            click_target = definition.click_targets[0].resource_id
        self.click_target = click_target
        self.economy = Economy(definition)
        self._click_carry = 0.0

    def run(self) -> SimulationResult:
        result = SimulationResult()
        tick_count = math.ceil(self.duration / self.tick_resolution)

        while result.ticks < min(tick_count, MAX_TICKS):
            result.ticks += 1

            # 1. Accrual
            self.economy.tick(self.tick_resolution)

            # 2. Clicks
            self._process_clicks()

            # 3. Greedy purchases
            result.purchases.extend(self._buy_cheapest())

        result.total_time = self.economy.time_elapsed
        result.final_snapshot = self.economy.snapshot()
        logger.debug(
            "Simulation finished after %d ticks with %d purchases",
            result.ticks,
            len(result.purchases),
        )
        return result

    def _process_clicks(self) -> None:
        if self.clicks_per_second <= 0 or self.click_target is None:
            return
        self._click_carry += self.clicks_per_second * self.tick_resolution
        clicks = int(self._click_carry)
        self._click_carry -= clicks
        for _ in range(clicks):
            self.economy.click(self.click_target)

    def _buy_cheapest(self) -> list[PurchaseRecord]:
        records: list[PurchaseRecord] = []
        for _ in range(MAX_PURCHASES_PER_TICK):
            affordable = self.economy.get_affordable_purchases()
            if not affordable:
                break
            cheapest = min(affordable, key=lambda s: s.next_cost)
            if not self.economy.try_purchase(cheapest.id, 1):
                break
            records.append(
                PurchaseRecord(
                    time=self.economy.time_elapsed,
                    purchasable_id=cheapest.id,
                    cost=cheapest.next_cost,
                    owned_after=self.economy.owned_count(cheapest.id),
                )
            )
        return records
