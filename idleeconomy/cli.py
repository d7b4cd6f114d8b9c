from __future__ import annotations

import argparse
import importlib
import logging
import sys

from idleeconomy.decimal_value import DecimalValue
from idleeconomy.definition import EconomyDefinition
from idleeconomy.formatting import format_status, format_text_report
from idleeconomy.runtime import Economy
from idleeconomy.simulation import Simulation


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="idleeconomy",
        description="IdleEconomy: idle game economy simulation and pricing CLI",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: WARNING)",
    )
    sub = parser.add_subparsers(dest="command")

    sim = sub.add_parser("simulate", help="Run a simulation")
    sim.add_argument("game_module", help="Python module with define_game()")
    sim.add_argument(
        "--duration", type=float, default=3600, help="Simulated time in seconds"
    )
    sim.add_argument(
        "--tick-resolution", type=float, default=1.0, help="Seconds per tick"
    )
    sim.add_argument("--cps", type=float, default=0.0, help="Clicks per second")
    sim.add_argument("--click-target", default=None, help="Resource to click")

    price = sub.add_parser("price", help="Price a bulk purchase")
    price.add_argument("game_module", help="Python module with define_game()")
    price.add_argument("purchasable", help="Purchasable ID")
    price.add_argument("--owned", default="0", help="Units already owned")
    price.add_argument("--quantity", default="1", help="Units to buy")
    price.add_argument("--budget", default=None, help="Budget for max buyable")

    status = sub.add_parser("status", help="Show the initial economy state")
    status.add_argument("game_module", help="Python module with define_game()")

    return parser


def load_game(module_path: str) -> EconomyDefinition:
    """Import module and call define_game()."""
    mod = importlib.import_module(module_path)
    if not hasattr(mod, "define_game"):
        print(f"Error: module {module_path!r} has no define_game() function")
        sys.exit(1)
    return mod.define_game()


def price_report(
    definition: EconomyDefinition,
    purchasable_id: str,
    owned: str = "0",
    quantity: str = "1",
    budget: str | None = None,
) -> str:
    """Cost of *quantity* units after *owned*, and what *budget* can buy."""
    pdef = definition.get_purchasable(purchasable_id)
    if pdef is None:
        return f"Error: unknown purchasable {purchasable_id!r}"

    owned_count = DecimalValue.new(owned)
    scaling = pdef.cost_scaling
    cost = scaling.cost(pdef.base_cost, owned_count, quantity)

    lines = [
        f"{pdef.display_name} (base {pdef.base_cost}, growth {pdef.cost_growth_factor})",
        f"  owned:    {owned_count}",
        f"  cost of {DecimalValue.new(quantity)}: {cost} {pdef.cost_resource_id}"
        f" ({cost.format()})",
    ]
    if budget is not None:
        count = scaling.max_affordable(budget, pdef.base_cost, owned_count)
        spent = scaling.cost(pdef.base_cost, owned_count, count)
        lines.append(f"  budget {DecimalValue.new(budget)} buys {count} for {spent}")
    return "\n".join(lines)


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    definition = load_game(args.game_module)

    if args.command == "simulate":
        sim = Simulation(
            definition=definition,
            duration=args.duration,
            tick_resolution=args.tick_resolution,
            clicks_per_second=args.cps,
            click_target=args.click_target,
        )
        result = sim.run()
        print(format_text_report(result, title=definition.config.name))

    elif args.command == "price":
        print(
            price_report(
                definition,
                args.purchasable,
                owned=args.owned,
                quantity=args.quantity,
                budget=args.budget,
            )
        )
        if definition.get_purchasable(args.purchasable) is None:
            sys.exit(1)

    elif args.command == "status":
        print(format_status(Economy(definition)))

