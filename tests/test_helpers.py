# tests/test_helpers.py

from decimal import Decimal
from fractions import Fraction

import pytest

from numtower.core.context import as_context, decimal_precision, make_context, plain_string, to_decimal
from numtower.core.errors import DomainError, MalformedInputError
from numtower.values.fraction import BigFraction
from numtower.values.helpers import RunningMax, RunningMin, format_with_separators


def test_running_max_min():
    m = RunningMax.of(3, 7, 5)
    assert m.value == 7
    assert m.changed
    assert m.is_positive()
    assert not RunningMax(4).update(1, 2).changed
    n = RunningMin(10).update(12, -3, 4)
    assert n.value == -3
    assert n.changed
    assert RunningMax.of().value == 0


@pytest.mark.parametrize(
    "value, kwargs, expected",
    [
        (1234567, {}, "1,234,567"),
        (-1234, {}, "-1,234"),
        (999, {}, "999"),
        (Decimal("1234.50"), {}, "1,234.5"),
        (1234, {"min_digits": 7}, "0,001,234"),
        (1234567, {"separators": False}, "1234567"),
        (1234567, {"sep": "_"}, "1_234_567"),
    ],
)
def test_format_with_separators(value, kwargs, expected):
    assert format_with_separators(value, **kwargs) == expected


def test_as_context():
    assert as_context(20).prec == 20
    ctx = make_context(5)
    assert as_context(ctx) is ctx
    with pytest.raises(TypeError):
        as_context("20")
    with pytest.raises(ValueError):
        make_context(0)


def test_to_decimal():
    assert to_decimal(3) == 3
    assert to_decimal("  2.50 ") == Decimal("2.50")
    assert to_decimal(0.1) == Decimal("0.1")
    assert to_decimal(Fraction(1, 3), make_context(4)) == Decimal("0.3333")
    assert to_decimal(BigFraction(1, 8)) == Decimal("0.125")
    with pytest.raises(MalformedInputError):
        to_decimal("two")
    with pytest.raises(MalformedInputError):
        to_decimal("NaN")
    with pytest.raises(DomainError):
        to_decimal(float("inf"))


def test_plain_string_and_precision():
    assert plain_string(Decimal("1E+3")) == "1000"
    assert plain_string(Decimal("-0.0")) == "0"
    assert plain_string(Decimal("0.0500")) == "0.05"
    assert decimal_precision(Decimal("123.450")) == 6
