from __future__ import annotations

from typing import TYPE_CHECKING

from idleeconomy.decimal_value import DecimalValue
from idleeconomy.simulation import SimulationResult

if TYPE_CHECKING:
    from idleeconomy.runtime import Economy


def format_text_report(result: SimulationResult, title: str = "Simulation") -> str:
    """Format a simulation result for console output."""
    lines: list[str] = []

    lines.append("=" * 30 + f" IdleEconomy {title} Report " + "=" * 30)
    lines.append(f"Result: {result.ticks} ticks, {result.total_time:.1f}s simulated")
    lines.append("")

    # Resources
    resources = result.final_snapshot.get("resources", {})
    if resources:
        lines.append("RESOURCES:")
        for rid, entry in resources.items():
            amount = DecimalValue.new(entry["amount"]).format()
            earned = DecimalValue.new(entry["total_earned"]).format()
            lines.append(f"  {rid:.<30s} {amount:>12s} (earned {earned})")
        lines.append("")

    # Purchase summary
    lines.append("PURCHASES:")
    lines.append(f"  Total: {len(result.purchases)}")
    for pid, count in sorted(result.purchase_counts().items()):
        first = result.first_purchase_time(pid)
        lines.append(f"  {pid:.<30s} {count:>6d} (first at {first:.1f}s)")

    return "\n".join(lines)


def format_status(economy: Economy) -> str:
    """One-screen summary of balances, rates and purchasables."""
    lines: list[str] = [f"{economy.config.name} @ {economy.time_elapsed:.1f}s"]
    for rid in economy.ledger.ids():
        if not economy.ledger.is_visible(rid):
            continue
        amount = economy.get_amount(rid).format()
        rate = economy.get_total_production_rate(rid).format()
        lines.append(f"  {rid}: {amount} (+{rate}/s)")
    for status in economy.get_available_purchases():
        marker = "*" if status.affordable else " "
        lines.append(
            f" {marker} {status.display_name} x{status.owned.format(0)}"
            f" next {status.next_cost.format()} {status.cost_resource_id}"
        )
    return "\n".join(lines)
