# idleeconomy: Numeric economy engine for incremental games

import logging

from idleeconomy.errors import EconomyError, InvalidNumericLiteral, ConfigurationFault
from idleeconomy.decimal_value import DecimalValue, Numeric, ZERO, ONE, TEN, INFINITY
from idleeconomy._types import DynamicDecimal, resolve_value, compare
from idleeconomy.effect import EffectKind, CombineRule, COMBINE_RULES, TargetCategory, WILDCARD
from idleeconomy.modifier import ModifierRegistry, ModifierKey
from idleeconomy.resource import ResourceDef, ResourceState
from idleeconomy.ledger import ResourceLedger
from idleeconomy.pipeline import ProductionAggregator
from idleeconomy.cost_scaling import CostScaling, series_cost, max_affordable
from idleeconomy.requirement import Requirement, Req
from idleeconomy.purchasable import PurchasableDef, PurchasableStatus
from idleeconomy.buy_multiplier import BuyMultiplier, BUY_MAX
from idleeconomy.definition import EconomyDefinition, EconomyConfig, ClickTarget
from idleeconomy.runtime import Economy, ResetResult
from idleeconomy.simulation import Simulation, SimulationResult, PurchaseRecord
from idleeconomy.formatting import format_text_report, format_status

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    # Errors
    "EconomyError",
    "InvalidNumericLiteral",
    "ConfigurationFault",
    # Numbers
    "DecimalValue",
    "Numeric",
    "ZERO",
    "ONE",
    "TEN",
    "INFINITY",
    # Types
    "DynamicDecimal",
    "resolve_value",
    "compare",
    # Modifiers
    "EffectKind",
    "CombineRule",
    "COMBINE_RULES",
    "TargetCategory",
    "WILDCARD",
    "ModifierRegistry",
    "ModifierKey",
    # Resources
    "ResourceDef",
    "ResourceState",
    "ResourceLedger",
    # Production
    "ProductionAggregator",
    # Pricing
    "CostScaling",
    "series_cost",
    "max_affordable",
    # Requirements
    "Requirement",
    "Req",
    # Purchasables
    "PurchasableDef",
    "PurchasableStatus",
    "BuyMultiplier",
    "BUY_MAX",
    # Definition
    "EconomyDefinition",
    "EconomyConfig",
    "ClickTarget",
    # Runtime
    "Economy",
    "ResetResult",
    # Simulation
    "Simulation",
    "SimulationResult",
    "PurchaseRecord",
    # Formatting
    "format_text_report",
    "format_status",
]
