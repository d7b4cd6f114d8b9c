"""MCP server wrapping an Economy session for interactive playtesting."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from mcp.server.fastmcp import FastMCP

from idleeconomy.buy_multiplier import BUY_MAX
from idleeconomy.decimal_value import DecimalValue
from idleeconomy.definition import EconomyDefinition
from idleeconomy.purchasable import PurchasableStatus
from idleeconomy.runtime import Economy

# Maximum seconds per wait() call (24 hours)
_MAX_WAIT = 86400
# Maximum clicks per click() call
_MAX_CLICKS = 1000


@dataclass
class _GameHolder:
    """Holds the active economy definition and session."""

    definition: EconomyDefinition
    economy: Economy


def _status_entry(holder: _GameHolder, status: PurchasableStatus) -> dict[str, Any]:
    time_to_afford = holder.economy.time_to_afford(status.id)
    entry: dict[str, Any] = {
        "id": status.id,
        "display_name": status.display_name,
        "owned": str(status.owned),
        "affordable": status.affordable,
        "next_cost": str(status.next_cost),
        "cost_resource": status.cost_resource_id,
        "max_buyable": str(status.max_buyable),
        "category": status.category,
        "time_to_afford": round(time_to_afford, 2) if time_to_afford is not None else None,
    }
    if status.max_count is not None:
        entry["max_count"] = str(status.max_count)
    return entry


def _resource_summary(holder: _GameHolder) -> dict[str, Any]:
    economy = holder.economy
    resources = {}
    for rid in economy.ledger.ids():
        resources[rid] = {
            "amount": str(economy.get_amount(rid)),
            "rate": str(economy.get_total_production_rate(rid)),
            "unlocked": economy.ledger.is_unlocked(rid),
        }
    return resources


# ── Tool logic functions (testable without MCP protocol) ────────────


def _tool_get_game_info(holder: _GameHolder) -> dict[str, Any]:
    defn = holder.definition
    return {
        "name": defn.config.name,
        "resources": [
            {"id": r.id, "name_key": r.name_key, "show_in_ui": r.show_in_ui}
            for r in defn.resources
        ],
        "purchasables": [
            {
                "id": p.id,
                "display_name": p.display_name,
                "category": p.category,
                "cost_resource": p.cost_resource_id,
                "produces": p.produces_resource_id,
            }
            for p in defn.purchasables
        ],
        "click_targets": [
            {"resource": ct.resource_id, "base_value": str(ct.base_value)}
            for ct in defn.click_targets
        ],
    }


def _tool_get_game_state(holder: _GameHolder) -> dict[str, Any]:
    economy = holder.economy
    return {
        "time_elapsed": round(economy.time_elapsed, 2),
        "resources": _resource_summary(holder),
        "owned": {p.id: str(economy.owned_count(p.id)) for p in economy.purchasables()},
        "buy_multiplier": economy.buy_multiplier.label(economy.buy_multiplier.get()),
    }


def _tool_get_available_purchases(holder: _GameHolder) -> dict[str, Any]:
    return {
        "purchases": [
            _status_entry(holder, s) for s in holder.economy.get_available_purchases()
        ]
    }


def _tool_get_purchasable_info(holder: _GameHolder, purchasable_id: str) -> dict[str, Any]:
    pdef = holder.definition.get_purchasable(purchasable_id)
    status = holder.economy.get_purchasable_status(purchasable_id)
    if pdef is None or status is None:
        return {"error": f"Unknown purchasable: {purchasable_id!r}"}

    result = _status_entry(holder, status)
    result.update(
        {
            "available": status.available,
            "base_cost": str(pdef.base_cost),
            "growth_factor": str(pdef.cost_growth_factor),
            "produces": pdef.produces_resource_id,
            "production_per_unit": str(pdef.production_per_unit),
        }
    )
    return result


def _tool_purchase(
    holder: _GameHolder, purchasable_id: str, quantity: int = 1
) -> dict[str, Any]:
    pdef = holder.definition.get_purchasable(purchasable_id)
    if pdef is None:
        return {"error": f"Unknown purchasable: {purchasable_id!r}"}
    if quantity < 1 and quantity != BUY_MAX:
        return {"error": "Quantity must be at least 1"}

    economy = holder.economy
    if not economy.is_available(purchasable_id):
        return {"success": False, "reason": "Not available (requirements not met)"}
    if pdef.max_count is not None and economy.owned_count(purchasable_id) >= pdef.max_count:
        return {"success": False, "reason": "Already at max count"}

    cost = economy.cost_of(purchasable_id, quantity)
    if not economy.try_purchase(purchasable_id, quantity):
        return {"success": False, "reason": "Cannot afford", "cost": str(cost)}
    return {
        "success": True,
        "purchasable_id": purchasable_id,
        "cost": str(cost),
        "new_count": str(economy.owned_count(purchasable_id)),
    }


def _tool_buy_max(holder: _GameHolder, purchasable_id: str) -> dict[str, Any]:
    if holder.definition.get_purchasable(purchasable_id) is None:
        return {"error": f"Unknown purchasable: {purchasable_id!r}"}
    bought = holder.economy.buy_max(purchasable_id)
    return {
        "success": bought > 0,
        "bought": str(bought),
        "new_count": str(holder.economy.owned_count(purchasable_id)),
    }


def _tool_click(holder: _GameHolder, target: str, count: int = 1) -> dict[str, Any]:
    if count < 1:
        return {"error": "Count must be at least 1"}
    if count > _MAX_CLICKS:
        return {"error": f"Count cannot exceed {_MAX_CLICKS}"}

    ct = holder.definition.get_click_target(target)
    if ct is None:
        return {"error": f"Unknown click target: {target!r}"}

    total = DecimalValue(0)
    for _ in range(count):
        total = total + holder.economy.click(target)
    return {
        "target": target,
        "clicks": count,
        "total_earned": str(total),
        "new_balance": str(holder.economy.get_amount(target)),
    }


def _tool_wait(holder: _GameHolder, seconds: float) -> dict[str, Any]:
    if seconds <= 0:
        return {"error": "Seconds must be positive"}
    if seconds > _MAX_WAIT:
        return {"error": f"Cannot wait more than {_MAX_WAIT} seconds (24h) per call"}

    # Subdivide into 1-second ticks
    remaining = seconds
    while remaining > 0:
        dt = min(1.0, remaining)
        holder.economy.tick(dt)
        remaining -= dt

    return {
        "waited": seconds,
        "time_elapsed": round(holder.economy.time_elapsed, 2),
        "resources": _resource_summary(holder),
    }


def _tool_snapshot(holder: _GameHolder) -> dict[str, Any]:
    return holder.economy.snapshot()


def _tool_restore(holder: _GameHolder, data: dict[str, Any]) -> dict[str, Any]:
    if not isinstance(data, dict):
        return {"error": "Snapshot must be an object"}
    holder.economy.restore(data)
    return {"success": True, "time_elapsed": round(holder.economy.time_elapsed, 2)}


def _tool_new_game(holder: _GameHolder) -> dict[str, Any]:
    holder.economy = Economy(holder.definition)
    return {"success": True, "message": "Game reset to initial state"}


# ── Server factory ──────────────────────────────────────────────────


def create_server(definition: EconomyDefinition) -> FastMCP:
    """Create an MCP server wrapping an Economy for the given definition."""
    holder = _GameHolder(
        definition=definition,
        economy=Economy(definition),
    )

    mcp = FastMCP(
        name=f"IdleEconomy: {definition.config.name}",
    )

    @mcp.tool()
    def get_game_info() -> dict[str, Any]:
        """Get static game overview: resources, purchasables, click targets."""
        return _tool_get_game_info(holder)

    @mcp.tool()
    def get_game_state() -> dict[str, Any]:
        """Get current balances, production rates, owned counts and time."""
        return _tool_get_game_state(holder)

    @mcp.tool()
    def get_available_purchases() -> dict[str, Any]:
        """Get all currently purchasable items with cost and time-to-afford."""
        return _tool_get_available_purchases(holder)

    @mcp.tool()
    def get_purchasable_info(purchasable_id: str) -> dict[str, Any]:
        """Get detailed pricing and production info for one purchasable."""
        return _tool_get_purchasable_info(holder, purchasable_id)

    @mcp.tool()
    def purchase(purchasable_id: str, quantity: int = 1) -> dict[str, Any]:
        """Buy units of a purchasable (-1 buys as many as affordable)."""
        return _tool_purchase(holder, purchasable_id, quantity)

    @mcp.tool()
    def buy_max(purchasable_id: str) -> dict[str, Any]:
        """Buy as many units as the current balance allows."""
        return _tool_buy_max(holder, purchasable_id)

    @mcp.tool()
    def click(target: str, count: int = 1) -> dict[str, Any]:
        """Click a resource target N times (max 1000). Returns total earned."""
        return _tool_click(holder, target, count)

    @mcp.tool()
    def wait(seconds: float) -> dict[str, Any]:
        """Advance game time by the given seconds (max 86400). Time is subdivided into 1s ticks."""
        return _tool_wait(holder, seconds)

    @mcp.tool()
    def snapshot() -> dict[str, Any]:
        """Export the economy state with numbers as decimal strings."""
        return _tool_snapshot(holder)

    @mcp.tool()
    def restore(data: dict[str, Any]) -> dict[str, Any]:
        """Load a state previously returned by snapshot()."""
        return _tool_restore(holder, data)

    @mcp.tool()
    def new_game() -> dict[str, Any]:
        """Reset the game to initial state."""
        return _tool_new_game(holder)

    return mcp
