"""Arbitrary-magnitude decimal numbers for game economies.

Amounts in an incremental game outgrow a float quickly (1e308 and beyond)
and must survive a save/load cycle without drifting.  ``DecimalValue`` wraps
``decimal.Decimal`` under a private context with 40 significant digits and an
exponent limit of +/-9e15, and serializes to a canonical base-10 string.
"""

from __future__ import annotations

import decimal
import logging
from decimal import Decimal
from typing import Callable, Union

from idleeconomy.errors import InvalidNumericLiteral

logger = logging.getLogger(__name__)

PRECISION = 40
EXPONENT_LIMIT = 9 * 10**15

_CONTEXT = decimal.Context(
    prec=PRECISION,
    rounding=decimal.ROUND_HALF_EVEN,
    Emax=EXPONENT_LIMIT,
    Emin=-EXPONENT_LIMIT,
    traps=[decimal.InvalidOperation],
)

# Canonical strings use plain notation inside this exponent window.
_PLAIN_MIN_EXPONENT = -7
_PLAIN_MAX_EXPONENT = 21

_SUFFIXES = ("", "K", "M", "B", "T", "Qa", "Qi", "Sx", "Sp", "Oc", "No", "Dc")
_MAX_DISPLAY_PLACES = 20

_D_ZERO = Decimal(0)
_D_ONE = Decimal(1)
_D_INFINITY = Decimal("Infinity")
_D_THOUSAND = Decimal(1000)
_D_SMALL = Decimal("0.01")


def _parse(value: object) -> Decimal:
    """Convert a supported literal to a Decimal under the economy context."""
    if isinstance(value, DecimalValue):
        return value._value
    if isinstance(value, float):
        # repr() is the shortest string that round-trips, so 1.07 stays 1.07
        if value != value:
            raise InvalidNumericLiteral(value)
        value = repr(value)
    if isinstance(value, str):
        value = value.strip()
    if not isinstance(value, (str, int, Decimal)):
        raise InvalidNumericLiteral(value)
    try:
        result = _CONTEXT.create_decimal(value)
    except decimal.InvalidOperation:
        raise InvalidNumericLiteral(value) from None
    if result.is_nan():
        raise InvalidNumericLiteral(value)
    return result


def _operand(value: object) -> Decimal:
    if isinstance(value, DecimalValue):
        return value._value
    return DecimalValue.new(value)._value


def _compute(operation: Callable[..., Decimal], *operands: Decimal) -> DecimalValue:
    """Run a context operation; undefined results become ZERO, never NaN."""
    try:
        result = operation(*operands)
    except decimal.InvalidOperation:
        logger.warning(
            "Undefined operation %s%r; substituting zero",
            getattr(operation, "__name__", "op"),
            tuple(str(o) for o in operands),
        )
        return ZERO
    return DecimalValue._wrap(result)


def _truncate(value: Decimal, places: int) -> Decimal:
    quantum = _D_ONE.scaleb(-places)
    return value.quantize(quantum, rounding=decimal.ROUND_DOWN, context=_CONTEXT)


def _scientific(value: Decimal, places: int) -> str:
    exponent = value.adjusted()
    mantissa = _truncate(value.scaleb(-exponent, _CONTEXT), places)
    return f"{mantissa}e{exponent}"


class DecimalValue:
    """Immutable signed decimal with an exponent range far beyond float."""

    __slots__ = ("_value",)

    _value: Decimal

    def __init__(self, value: Numeric = 0) -> None:
        object.__setattr__(self, "_value", _normalize_zero(_parse(value)))

    @classmethod
    def _wrap(cls, value: Decimal) -> DecimalValue:
        obj = object.__new__(cls)
        object.__setattr__(obj, "_value", _normalize_zero(value))
        return obj

    @classmethod
    def new(cls, value: object) -> DecimalValue:
        """Coerce *value*, substituting ZERO (and logging) if it cannot be parsed."""
        if isinstance(value, DecimalValue):
            return value
        try:
            return cls(value)  # type: ignore[arg-type]
        except InvalidNumericLiteral as exc:
            logger.warning("%s; substituting zero", exc)
            return ZERO

    def __setattr__(self, name: str, value: object) -> None:
        raise AttributeError("DecimalValue is immutable")

    def __delattr__(self, name: str) -> None:
        raise AttributeError("DecimalValue is immutable")

    def __reduce__(self) -> tuple:
        return (DecimalValue, (str(self),))

    # ── Arithmetic ───────────────────────────────────────────────────

    def add(self, other: Numeric) -> DecimalValue:
        return _compute(_CONTEXT.add, self._value, _operand(other))

    def sub(self, other: Numeric) -> DecimalValue:
        return _compute(_CONTEXT.subtract, self._value, _operand(other))

    def mul(self, other: Numeric) -> DecimalValue:
        return _compute(_CONTEXT.multiply, self._value, _operand(other))

    def div(self, other: Numeric) -> DecimalValue:
        """Divide; division by zero yields INFINITY instead of raising."""
        divisor = _operand(other)
        if divisor.is_zero():
            return INFINITY
        return _compute(_CONTEXT.divide, self._value, divisor)

    def pow(self, exponent: Numeric) -> DecimalValue:
        """Raise to any real power.

        ``x ** 0 == 1`` for every x, including zero; callers rely on this to
        short-circuit a growth factor of exactly 1.
        """
        exp = _operand(exponent)
        if exp.is_zero():
            return ONE
        base = self._value
        if base == _D_ONE:
            return ONE
        if base.is_zero():
            return INFINITY if exp < 0 else ZERO
        return _compute(_CONTEXT.power, base, exp)

    def ln(self) -> DecimalValue:
        return _compute(_CONTEXT.ln, self._value)

    def log10(self) -> DecimalValue:
        return _compute(_CONTEXT.log10, self._value)

    def log(self, base: Numeric) -> DecimalValue:
        return self.ln().div(DecimalValue.new(base).ln())

    def floor(self) -> DecimalValue:
        return DecimalValue._wrap(
            self._value.to_integral_value(rounding=decimal.ROUND_FLOOR, context=_CONTEXT)
        )

    def ceil(self) -> DecimalValue:
        return DecimalValue._wrap(
            self._value.to_integral_value(rounding=decimal.ROUND_CEILING, context=_CONTEXT)
        )

    def max(self, other: Numeric) -> DecimalValue:
        other_value = DecimalValue.new(other)
        return other_value if other_value._value > self._value else self

    def min(self, other: Numeric) -> DecimalValue:
        other_value = DecimalValue.new(other)
        return other_value if other_value._value < self._value else self

    def __add__(self, other: object) -> DecimalValue:
        if not isinstance(other, _NUMERIC_TYPES):
            return NotImplemented
        return self.add(other)

    def __radd__(self, other: object) -> DecimalValue:
        if not isinstance(other, _NUMERIC_TYPES):
            return NotImplemented
        return DecimalValue.new(other).add(self)

    def __sub__(self, other: object) -> DecimalValue:
        if not isinstance(other, _NUMERIC_TYPES):
            return NotImplemented
        return self.sub(other)

    def __rsub__(self, other: object) -> DecimalValue:
        if not isinstance(other, _NUMERIC_TYPES):
            return NotImplemented
        return DecimalValue.new(other).sub(self)

    def __mul__(self, other: object) -> DecimalValue:
        if not isinstance(other, _NUMERIC_TYPES):
            return NotImplemented
        return self.mul(other)

    def __rmul__(self, other: object) -> DecimalValue:
        if not isinstance(other, _NUMERIC_TYPES):
            return NotImplemented
        return DecimalValue.new(other).mul(self)

    def __truediv__(self, other: object) -> DecimalValue:
        if not isinstance(other, _NUMERIC_TYPES):
            return NotImplemented
        return self.div(other)

    def __rtruediv__(self, other: object) -> DecimalValue:
        if not isinstance(other, _NUMERIC_TYPES):
            return NotImplemented
        return DecimalValue.new(other).div(self)

    def __pow__(self, other: object) -> DecimalValue:
        if not isinstance(other, _NUMERIC_TYPES):
            return NotImplemented
        return self.pow(other)

    def __rpow__(self, other: object) -> DecimalValue:
        if not isinstance(other, _NUMERIC_TYPES):
            return NotImplemented
        return DecimalValue.new(other).pow(self)

    def __neg__(self) -> DecimalValue:
        return DecimalValue._wrap(self._value.copy_negate())

    def __pos__(self) -> DecimalValue:
        return self

    def __abs__(self) -> DecimalValue:
        return DecimalValue._wrap(self._value.copy_abs())

    # ── Comparison ───────────────────────────────────────────────────

    def compare(self, other: Numeric) -> int:
        other_value = _operand(other)
        if self._value < other_value:
            return -1
        if self._value > other_value:
            return 1
        return 0

    def lt(self, other: Numeric) -> bool:
        return self.compare(other) < 0

    def lte(self, other: Numeric) -> bool:
        return self.compare(other) <= 0

    def gt(self, other: Numeric) -> bool:
        return self.compare(other) > 0

    def gte(self, other: Numeric) -> bool:
        return self.compare(other) >= 0

    def eq(self, other: Numeric) -> bool:
        return self.compare(other) == 0

    def neq(self, other: Numeric) -> bool:
        return self.compare(other) != 0

    def __eq__(self, other: object) -> bool:
        # Exact values only, so equal operands hash alike. eq() parses literals.
        if isinstance(other, DecimalValue):
            return self._value == other._value
        if isinstance(other, float):
            return other == other and self._value == Decimal(other)
        if isinstance(other, (int, Decimal)):
            return self._value == other
        return NotImplemented

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, _NUMERIC_TYPES):
            return NotImplemented
        return self.lt(other)

    def __le__(self, other: object) -> bool:
        if not isinstance(other, _NUMERIC_TYPES):
            return NotImplemented
        return self.lte(other)

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, _NUMERIC_TYPES):
            return NotImplemented
        return self.gt(other)

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, _NUMERIC_TYPES):
            return NotImplemented
        return self.gte(other)

    def __hash__(self) -> int:
        return hash(self._value)

    # ── Inspection ───────────────────────────────────────────────────

    def is_zero(self) -> bool:
        return self._value.is_zero()

    def is_infinite(self) -> bool:
        return self._value.is_infinite()

    def is_finite(self) -> bool:
        return self._value.is_finite()

    def is_integer(self) -> bool:
        d = self._value
        return d.is_finite() and d == d.to_integral_value(context=_CONTEXT)

    @property
    def sign(self) -> int:
        if self._value.is_zero():
            return 0
        return -1 if self._value.is_signed() else 1

    @property
    def exponent(self) -> int:
        """Base-10 exponent of the leading digit (0 for zero and infinity)."""
        if not self._value.is_finite() or self._value.is_zero():
            return 0
        return self._value.adjusted()

    def to_decimal(self) -> Decimal:
        return self._value

    def to_float(self) -> float:
        return float(self._value)

    def __float__(self) -> float:
        return self.to_float()

    def __bool__(self) -> bool:
        return not self._value.is_zero()

    # ── Text ─────────────────────────────────────────────────────────

    def __str__(self) -> str:
        d = self._value
        if d.is_infinite():
            return "-Infinity" if d.is_signed() else "Infinity"
        if d.is_zero():
            return "0"
        d = d.normalize(_CONTEXT)
        if _PLAIN_MIN_EXPONENT <= d.adjusted() < _PLAIN_MAX_EXPONENT:
            return format(d, "f")
        return format(d, "e")

    def __repr__(self) -> str:
        return f"DecimalValue('{self}')"

    def format(self, decimal_places: int = 2) -> str:
        """Human-readable text: fixed-point, suffixed ("1.23M") or scientific."""
        places = max(0, min(decimal_places, _MAX_DISPLAY_PLACES))
        d = self._value
        if d.is_infinite():
            return str(self)
        if d.is_zero():
            return "0"
        magnitude = d.copy_abs()
        if magnitude < _D_SMALL:
            return _scientific(d, places)
        if magnitude < _D_THOUSAND:
            if d == d.to_integral_value(context=_CONTEXT):
                return f"{d:.0f}"
            return f"{_truncate(d, places)}"
        tier = d.adjusted() // 3
        if tier < len(_SUFFIXES):
            mantissa = _truncate(d.scaleb(-3 * tier, _CONTEXT), places)
            return f"{mantissa}{_SUFFIXES[tier]}"
        return _scientific(d, places)


def _normalize_zero(value: Decimal) -> Decimal:
    # Collapse -0 and 0E-12 so every zero hashes and prints the same.
    return _D_ZERO if value.is_zero() else value


Numeric = Union[DecimalValue, Decimal, int, float, str]

_NUMERIC_TYPES = (DecimalValue, Decimal, int, float, str)

ZERO = DecimalValue._wrap(_D_ZERO)
ONE = DecimalValue._wrap(_D_ONE)
TEN = DecimalValue._wrap(Decimal(10))
INFINITY = DecimalValue._wrap(_D_INFINITY)
