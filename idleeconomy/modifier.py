from __future__ import annotations

import logging
from typing import Iterator, NamedTuple

from idleeconomy._types import DynamicDecimal, resolve_value
from idleeconomy.decimal_value import ONE, ZERO, DecimalValue
from idleeconomy.effect import COMBINE_RULES, WILDCARD, EffectKind

logger = logging.getLogger(__name__)


class ModifierKey(NamedTuple):
    target_category: str
    target_id: str
    kind: EffectKind


class ModifierRegistry:
    """Shared namespace where features contribute scoped effects.

    Each contribution is keyed by (source, category, target, kind); a source
    re-registering the same slot replaces its previous value, so a bonus that
    grows over time is never counted twice.  Queries combine the specific
    target's entries with the category's wildcard entries according to
    ``COMBINE_RULES``.
    """

    def __init__(self) -> None:
        self._entries: dict[ModifierKey, dict[str, DynamicDecimal]] = {}

    def register_modifier(
        self,
        source_id: str,
        target_category: str,
        target_id: str,
        kind: EffectKind | str,
        value: DynamicDecimal,
    ) -> bool:
        """Add or replace one source's contribution. Returns False if rejected."""
        effect_kind = EffectKind.coerce(kind)
        if effect_kind is None:
            logger.warning("Ignoring modifier from %r with unknown kind %r", source_id, kind)
            return False
        if not source_id:
            logger.warning("Ignoring %s modifier without a source id", effect_kind.name)
            return False

        if not callable(value):
            value = DecimalValue.new(value)
            if effect_kind is EffectKind.COST_REDUCTION_MULTIPLIER and not (
                ZERO < value <= ONE
            ):
                logger.warning(
                    "Cost reduction multiplier %s from %r is outside (0, 1]",
                    value,
                    source_id,
                )

        key = ModifierKey(target_category, target_id or WILDCARD, effect_kind)
        self._entries.setdefault(key, {})[source_id] = value
        logger.debug(
            "Registered %s on %s/%s from %r",
            effect_kind.name,
            target_category,
            key.target_id,
            source_id,
        )
        return True

    def remove_modifier(
        self,
        source_id: str,
        target_category: str,
        target_id: str,
        kind: EffectKind | str,
    ) -> bool:
        effect_kind = EffectKind.coerce(kind)
        if effect_kind is None:
            return False
        key = ModifierKey(target_category, target_id or WILDCARD, effect_kind)
        sources = self._entries.get(key)
        if not sources or source_id not in sources:
            return False
        del sources[source_id]
        if not sources:
            del self._entries[key]
        logger.debug("Removed %s on %s/%s from %r", effect_kind.name, target_category, key.target_id, source_id)
        return True

    def remove_source(self, source_id: str) -> int:
        """Drop every contribution from *source_id*. Returns how many were removed."""
        removed = 0
        for key in list(self._entries):
            sources = self._entries[key]
            if source_id in sources:
                del sources[source_id]
                removed += 1
                if not sources:
                    del self._entries[key]
        return removed

    def contributions(
        self, target_category: str, target_id: str, kind: EffectKind | str
    ) -> list[tuple[str, str, DecimalValue]]:
        """(source_id, matched target, resolved value) for every matching entry."""
        effect_kind = EffectKind.coerce(kind)
        if effect_kind is None:
            return []
        return [
            (source_id, matched, resolve_value(value))
            for source_id, matched, value in self._matching(
                target_category, target_id, effect_kind
            )
        ]

    def get_aggregated_modifier(
        self, target_category: str, target_id: str, kind: EffectKind | str
    ) -> DecimalValue:
        """Combine every matching contribution; empty slots yield the identity."""
        effect_kind = EffectKind.coerce(kind)
        if effect_kind is None:
            return ONE
        rule = COMBINE_RULES[effect_kind]
        total = rule.identity
        for _source_id, _matched, value in self._matching(
            target_category, target_id, effect_kind
        ):
            total = rule.combine(total, resolve_value(value))
        return total

    def has_dynamic(self) -> bool:
        """True if any registered value is re-evaluated on every query."""
        return any(
            callable(value)
            for sources in self._entries.values()
            for value in sources.values()
        )

    def reset(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return sum(len(sources) for sources in self._entries.values())

    def _matching(
        self, target_category: str, target_id: str, kind: EffectKind
    ) -> Iterator[tuple[str, str, DynamicDecimal]]:
        targets = [target_id or WILDCARD]
        if targets[0] != WILDCARD:
            targets.append(WILDCARD)
        for target in targets:
            sources = self._entries.get(ModifierKey(target_category, target, kind))
            if not sources:
                continue
            for source_id, value in sources.items():
                yield source_id, target, value
