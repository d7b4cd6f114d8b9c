from __future__ import annotations

import logging

logger = logging.getLogger(__name__)

# Sentinel quantity meaning "as many as the budget allows".
BUY_MAX = -1

_OPTIONS = (1, 10, 100, BUY_MAX)
_LABELS = {1: "x1", 10: "x10", 100: "x100", BUY_MAX: "Max"}


class BuyMultiplier:
    """How many units a single buy action purchases."""

    def __init__(self) -> None:
        self._current = 1

    def get(self) -> int:
        return self._current

    def set(self, value: int) -> bool:
        if value not in _OPTIONS:
            logger.warning("Ignoring unknown buy multiplier %r", value)
            return False
        self._current = value
        return True

    @staticmethod
    def options() -> list[int]:
        return list(_OPTIONS)

    @staticmethod
    def label(value: int) -> str:
        return _LABELS.get(value, f"x{value}")

    def reset(self) -> None:
        self._current = 1
