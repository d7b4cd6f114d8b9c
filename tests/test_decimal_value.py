"""Tests for decimal_value module."""
import logging
import pickle
import random
from decimal import Decimal

import pytest

from idleeconomy.decimal_value import INFINITY, ONE, ZERO, DecimalValue
from idleeconomy.errors import EconomyError, InvalidNumericLiteral


# ── Construction ─────────────────────────────────────────────────────


def test_construct_from_supported_types():
    assert DecimalValue(5) == 5
    assert DecimalValue("1.07") == Decimal("1.07")
    assert DecimalValue(1.07) == DecimalValue("1.07")
    assert DecimalValue(Decimal("2.5")) == DecimalValue("2.5")
    assert DecimalValue(DecimalValue(3)) == 3
    assert DecimalValue() == ZERO


def test_strict_constructor_raises_on_garbage():
    with pytest.raises(InvalidNumericLiteral) as exc:
        DecimalValue("twelve")
    assert exc.value.value == "twelve"
    assert isinstance(exc.value, EconomyError)
    assert isinstance(exc.value, ValueError)


def test_nan_is_rejected():
    with pytest.raises(InvalidNumericLiteral):
        DecimalValue(float("nan"))
    with pytest.raises(InvalidNumericLiteral):
        DecimalValue("NaN")


def test_new_recovers_with_zero_and_logs(caplog):
    with caplog.at_level(logging.WARNING, logger="idleeconomy.decimal_value"):
        value = DecimalValue.new("not a number")
    assert value == ZERO
    assert "not a number" in caplog.text


def test_new_rejects_unsupported_type(caplog):
    with caplog.at_level(logging.WARNING):
        assert DecimalValue.new([1, 2]) == ZERO
    assert caplog.records


def test_new_passes_through_existing_value():
    v = DecimalValue("42")
    assert DecimalValue.new(v) is v


def test_immutable():
    v = DecimalValue(1)
    with pytest.raises(AttributeError):
        v._value = Decimal(2)


# ── Canonical string ─────────────────────────────────────────────────


def test_string_round_trip_across_magnitudes():
    rng = random.Random(1234)
    for exponent in range(-9, 309):
        mantissa = Decimal(rng.randint(1, 999_999)) / Decimal(1000)
        original = DecimalValue(mantissa.scaleb(exponent))
        assert DecimalValue(str(original)) == original


def test_string_round_trip_beyond_float_range():
    huge = DecimalValue("1.5e+5000")
    assert DecimalValue(str(huge)) == huge
    assert str(huge) == "1.5e+5000"


def test_canonical_string_forms():
    assert str(DecimalValue("100")) == "100"
    assert str(DecimalValue("1.50")) == "1.5"
    assert str(DecimalValue("0.001")) == "0.001"
    assert str(DecimalValue("1e21")) == "1e+21"
    assert str(DecimalValue("1e-9")) == "1e-9"
    assert str(ZERO) == "0"
    assert str(DecimalValue("-0")) == "0"
    assert str(INFINITY) == "Infinity"


def test_repr():
    assert repr(DecimalValue("1.5")) == "DecimalValue('1.5')"


def test_pickle_round_trip():
    v = DecimalValue("1.234e+400")
    assert pickle.loads(pickle.dumps(v)) == v


# ── Arithmetic ───────────────────────────────────────────────────────


def test_basic_arithmetic():
    a = DecimalValue("1.5")
    b = DecimalValue(2)
    assert a + b == DecimalValue("3.5")
    assert a - b == DecimalValue("-0.5")
    assert a * b == 3
    assert b / a == b.div(a)
    assert a.add(1) == DecimalValue("2.5")
    assert 1 + a == DecimalValue("2.5")
    assert 10 - a == DecimalValue("8.5")
    assert 3 * a == DecimalValue("4.5")
    assert 3 / b == DecimalValue("1.5")
    assert -a == DecimalValue("-1.5")
    assert abs(-a) == a


def test_operators_reject_non_numeric():
    with pytest.raises(TypeError):
        DecimalValue(1) + object()


def test_decimal_addition_is_exact():
    total = ZERO
    for _ in range(10):
        total = total + DecimalValue("0.1")
    assert total == ONE


def test_divide_by_zero_is_infinity():
    assert DecimalValue(5) / 0 == INFINITY
    assert DecimalValue(5).div(ZERO).is_infinite()
    assert ZERO / ZERO == INFINITY


def test_pow_conventions():
    assert ZERO**0 == ONE
    assert DecimalValue(7).pow(0) == ONE
    assert ZERO ** -1 == INFINITY
    assert ZERO**3 == ZERO
    assert ONE ** DecimalValue("1e30") == ONE
    assert DecimalValue(2) ** 10 == 1024
    assert float(DecimalValue(4) ** DecimalValue("0.5")) == pytest.approx(2)
    assert 2 ** DecimalValue(3) == 8


def test_overflow_clamps_to_infinity():
    result = DecimalValue("1.07") ** DecimalValue("1e20")
    assert result.is_infinite()
    assert result > DecimalValue("1e5000")


def test_huge_powers_stay_finite():
    v = DecimalValue("1.07") ** 100_000
    assert v.is_finite()
    assert v.exponent == 2938


def test_undefined_operation_yields_zero(caplog):
    with caplog.at_level(logging.WARNING, logger="idleeconomy.decimal_value"):
        assert INFINITY - INFINITY == ZERO
        assert ZERO * INFINITY == ZERO
    assert "Undefined operation" in caplog.text


def test_logs_and_rounding():
    assert DecimalValue(1000).log10() == 3
    assert float(DecimalValue(8).log(2)) == pytest.approx(3)
    assert float(DecimalValue(1).ln()) == 0.0
    assert DecimalValue("2.7").floor() == 2
    assert DecimalValue("2.1").ceil() == 3
    assert DecimalValue("-2.5").floor() == -3
    assert DecimalValue(3).max(5) == 5
    assert DecimalValue(3).min(5) == 3


# ── Comparison ───────────────────────────────────────────────────────


def test_comparisons():
    a = DecimalValue("13.43")
    b = DecimalValue("13.4392")
    assert a < b
    assert a.lt(b) and a.lte(b) and b.gt(a) and b.gte(a)
    assert a.neq(b)
    assert a.eq("13.430")
    assert a.compare(b) == -1
    assert b.compare(a) == 1
    assert a.compare(a) == 0
    assert a != b
    assert a < 14 and a > 13.0


def test_equality_with_non_numeric():
    assert DecimalValue(1) != "abc"
    assert DecimalValue(1) != object()


def test_hash_consistent_with_equality():
    assert hash(DecimalValue("1.50")) == hash(DecimalValue("1.5"))
    assert hash(DecimalValue(3)) == hash(3)
    assert hash(DecimalValue("0.5")) == hash(0.5)
    assert len({DecimalValue("2"), DecimalValue("2.0"), DecimalValue(2)}) == 1


def test_strings_are_not_equal_to_values():
    one = DecimalValue("1")
    assert one != "1"
    assert not (one == "1")
    assert len({one, "1"}) == 2
    # Parsing comparisons still accept literals.
    assert one.eq("1")


def test_float_equality_is_exact():
    assert DecimalValue("0.5") == 0.5
    assert DecimalValue("0.1") != 0.1
    assert DecimalValue("0.1").eq(0.1)
    assert DecimalValue(1) != float("nan")


def test_inspection():
    assert ZERO.is_zero()
    assert not ZERO
    assert DecimalValue(2)
    assert INFINITY.is_infinite()
    assert not INFINITY.is_finite()
    assert DecimalValue(4).is_integer()
    assert not DecimalValue("4.5").is_integer()
    assert DecimalValue(-3).sign == -1
    assert ZERO.sign == 0
    assert DecimalValue("1234").exponent == 3
    assert DecimalValue("0.5").to_float() == pytest.approx(0.5)
    assert float(DecimalValue("2.25")) == pytest.approx(2.25)
    assert DecimalValue("1.5").to_decimal() == Decimal("1.5")


# ── Display formatting ───────────────────────────────────────────────


@pytest.mark.parametrize(
    "value,expected",
    [
        ("0", "0"),
        ("5", "5"),
        ("123.456", "123.45"),
        ("0.5", "0.50"),
        ("0.005", "5.00e-3"),
        ("1234.5", "1.23K"),
        ("999999", "999.99K"),
        ("2500000", "2.50M"),
        ("1e9", "1.00B"),
        ("1.5e35", "150.00Dc"),
        ("1.2345e45", "1.23e45"),
        ("-1500", "-1.50K"),
    ],
)
def test_format(value, expected):
    assert DecimalValue(value).format() == expected


def test_format_places():
    assert DecimalValue("1234.5678").format(0) == "1K"
    assert DecimalValue("12.3456").format(3) == "12.345"


def test_format_infinity():
    assert INFINITY.format() == "Infinity"
