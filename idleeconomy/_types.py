from __future__ import annotations

import operator
from typing import Callable, Union

from idleeconomy.decimal_value import DecimalValue, Numeric

# A literal amount, or a zero-argument provider evaluated each time it is read.
DynamicDecimal = Union[Numeric, Callable[[], Numeric]]

_OPS: dict[str, Callable[[DecimalValue, DecimalValue], bool]] = {
    ">=": operator.ge,
    "<=": operator.le,
    ">": operator.gt,
    "<": operator.lt,
    "==": operator.eq,
    "!=": operator.ne,
}


def resolve_value(value: DynamicDecimal) -> DecimalValue:
    """Resolve a literal or a provider callable to a DecimalValue."""
    if callable(value):
        value = value()
    return DecimalValue.new(value)


def compare(left: Numeric, op: str, right: Numeric) -> bool:
    """Compare two amounts using a string operator."""
    fn = _OPS.get(op)
    if fn is None:
        raise ValueError(f"Unknown operator: {op!r}. Expected one of {list(_OPS)}")
    return fn(DecimalValue.new(left), DecimalValue.new(right))
