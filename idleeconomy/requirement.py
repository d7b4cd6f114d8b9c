from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Callable

from idleeconomy._types import compare
from idleeconomy.decimal_value import Numeric

if TYPE_CHECKING:
    from idleeconomy.runtime import Economy


class Requirement(ABC):
    """Base class for all requirements: boolean conditions on an economy."""

    @abstractmethod
    def evaluate(self, economy: Economy) -> bool: ...

    def __and__(self, other: Requirement) -> Requirement:
        return _AllRequirement([self, other])

    def __or__(self, other: Requirement) -> Requirement:
        return _AnyRequirement([self, other])


# ── Private implementations ──────────────────────────────────────────


class _ResourceRequirement(Requirement):
    def __init__(self, resource_id: str, op: str, threshold: Numeric) -> None:
        self.resource_id = resource_id
        self.op = op
        self.threshold = threshold

    def evaluate(self, economy: Economy) -> bool:
        return compare(economy.ledger.get_amount(self.resource_id), self.op, self.threshold)


class _TotalEarnedRequirement(Requirement):
    def __init__(self, resource_id: str, op: str, threshold: Numeric) -> None:
        self.resource_id = resource_id
        self.op = op
        self.threshold = threshold

    def evaluate(self, economy: Economy) -> bool:
        return compare(
            economy.ledger.get_total_earned(self.resource_id), self.op, self.threshold
        )


class _CountRequirement(Requirement):
    def __init__(self, purchasable_id: str, op: str, threshold: Numeric) -> None:
        self.purchasable_id = purchasable_id
        self.op = op
        self.threshold = threshold

    def evaluate(self, economy: Economy) -> bool:
        return compare(economy.owned_count(self.purchasable_id), self.op, self.threshold)


class _TimeRequirement(Requirement):
    def __init__(self, op: str, seconds: float) -> None:
        self.op = op
        self.seconds = seconds

    def evaluate(self, economy: Economy) -> bool:
        return compare(economy.time_elapsed, self.op, self.seconds)


class _AllRequirement(Requirement):
    def __init__(self, reqs: list[Requirement]) -> None:
        self.reqs = reqs

    def evaluate(self, economy: Economy) -> bool:
        return all(r.evaluate(economy) for r in self.reqs)


class _AnyRequirement(Requirement):
    def __init__(self, reqs: list[Requirement]) -> None:
        self.reqs = reqs

    def evaluate(self, economy: Economy) -> bool:
        return any(r.evaluate(economy) for r in self.reqs)


class _CustomRequirement(Requirement):
    def __init__(self, fn: Callable[[Economy], bool]) -> None:
        self.fn = fn

    def evaluate(self, economy: Economy) -> bool:
        return self.fn(economy)


# ── Public factory ───────────────────────────────────────────────────


class Req:
    """Factory for built-in requirement types."""

    @staticmethod
    def resource(resource_id: str, op: str, threshold: Numeric) -> Requirement:
        return _ResourceRequirement(resource_id, op, threshold)

    @staticmethod
    def total_earned(resource_id: str, op: str, threshold: Numeric) -> Requirement:
        return _TotalEarnedRequirement(resource_id, op, threshold)

    @staticmethod
    def owns(purchasable_id: str) -> Requirement:
        return _CountRequirement(purchasable_id, ">=", 1)

    @staticmethod
    def count(purchasable_id: str, op: str, threshold: Numeric) -> Requirement:
        return _CountRequirement(purchasable_id, op, threshold)

    @staticmethod
    def time(op: str, seconds: float) -> Requirement:
        return _TimeRequirement(op, seconds)

    @staticmethod
    def all(*reqs: Requirement) -> Requirement:
        return _AllRequirement(list(reqs))

    @staticmethod
    def any(*reqs: Requirement) -> Requirement:
        return _AnyRequirement(list(reqs))

    @staticmethod
    def custom(fn: Callable[[Economy], bool]) -> Requirement:
        return _CustomRequirement(fn)
