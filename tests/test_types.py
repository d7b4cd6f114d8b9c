"""Tests for _types module."""
import pytest

from idleeconomy._types import compare, resolve_value
from idleeconomy.decimal_value import ZERO, DecimalValue


def test_resolve_value_literal():
    assert resolve_value(42) == DecimalValue(42)
    assert resolve_value("1.5e300") == DecimalValue("1.5e300")


def test_resolve_value_callable():
    counter = {"n": 3}
    fn = lambda: counter["n"] * 2
    assert resolve_value(fn) == 6
    counter["n"] = 10
    assert resolve_value(fn) == 20


def test_resolve_value_bad_literal_is_zero():
    assert resolve_value("garbage") == ZERO
    assert resolve_value(lambda: "garbage") == ZERO


@pytest.mark.parametrize(
    "left,op,right,expected",
    [
        (5, ">=", 5, True),
        (5, ">", 5, False),
        (4, "<", 5, True),
        ("5.0", "==", 5, True),
        (5, "!=", 6, True),
        ("1e400", "<=", "1e401", True),
    ],
)
def test_compare(left, op, right, expected):
    assert compare(left, op, right) is expected


def test_compare_unknown_operator():
    with pytest.raises(ValueError, match="Unknown operator"):
        compare(1, "=>", 2)
