# tests/test_fraction.py

import math
import random
from decimal import Decimal
from fractions import Fraction

import pytest

from numtower.core.context import make_context
from numtower.core.errors import DivideByZeroError, MalformedInputError, PrecisionLossError
from numtower.values.fraction import BigFraction


def test_reduces_to_lowest_terms():
    f = BigFraction(6, 8)
    assert f.numerator == 3
    assert f.denominator == 4


def test_normalization_random():
    """gcd 1, positive denominator and a single zero for arbitrary inputs."""
    random.seed(42)
    for _ in range(500):
        n = random.randint(-10**12, 10**12)
        d = random.choice([-1, 1]) * random.randint(1, 10**12)
        f = BigFraction(n, d)
        assert f.denominator > 0
        assert math.gcd(abs(f.numerator), f.denominator) == 1
        assert f == Fraction(n, d)
        if n == 0:
            assert (f.numerator, f.denominator) == (0, 1)


def test_zero_is_canonical():
    assert BigFraction(0, -17) == BigFraction(0)
    assert BigFraction(0, -17).denominator == 1


def test_zero_denominator_raises():
    with pytest.raises(DivideByZeroError):
        BigFraction(1, 0)
    # usable as the builtin arithmetic errors too
    with pytest.raises(ArithmeticError):
        BigFraction(1, 0)
    with pytest.raises(ZeroDivisionError):
        BigFraction(1, 2) / 0


def test_mixed_parse_then_add():
    total = BigFraction.value_of("1 1/2").add(BigFraction.value_of("1/2"))
    assert total == BigFraction(2, 1)
    assert total.is_whole_number()


@pytest.mark.parametrize(
    "text, expected",
    [
        ("3/4", Fraction(3, 4)),
        ("-3/4", Fraction(-3, 4)),
        ("3,4", Fraction(3, 4)),
        ("3;4", Fraction(3, 4)),
        ("3 4", Fraction(3, 4)),
        ("7", Fraction(7)),
        ("-7", Fraction(-7)),
        ("2 1/3", Fraction(7, 3)),
        ("-2 1/3", Fraction(-7, 3)),
        ("2 -1/3", Fraction(-7, 3)),
        ("1½", Fraction(3, 2)),
        ("1 ½", Fraction(3, 2)),
        ("-1½", Fraction(-3, 2)),
        ("¾", Fraction(3, 4)),
        ("-¾", Fraction(-3, 4)),
        ("⅞", Fraction(7, 8)),
        ("↉", Fraction(0)),
        ("  5/10  ", Fraction(1, 2)),
    ],
)
def test_parse_grammars(text, expected):
    assert BigFraction.parse(text) == expected


@pytest.mark.parametrize("text", ["", "abc", "1.5", "0.5", "1/", "/2", "½½"])
def test_parse_rejects(text):
    with pytest.raises(MalformedInputError) as info:
        BigFraction.parse(text)
    assert info.value.literal == text
    # also a ValueError for callers that do not know the hierarchy
    assert isinstance(info.value, ValueError)


def test_arithmetic_matches_fractions():
    random.seed(42)
    for _ in range(300):
        a = Fraction(random.randint(-1000, 1000), random.randint(1, 1000))
        b = Fraction(random.randint(-1000, 1000), random.randint(1, 1000))
        x, y = BigFraction.value_of(a), BigFraction.value_of(b)
        assert x + y == a + b
        assert x - y == a - b
        assert x * y == a * b
        if b:
            assert x / y == a / b
            assert (x / y) * y == x
            assert x % y == a % b
            assert x // y == a // b


def test_remainder_truncates_modulus_floors():
    x = BigFraction(-7, 2)
    assert x.remainder(2) == BigFraction(-3, 2)
    assert x.modulus(2) == BigFraction(1, 2)
    assert x % 2 == BigFraction(1, 2)
    assert BigFraction(7, 2).remainder(-2) == BigFraction(3, 2)
    assert BigFraction(7, 2).modulus(-2) == BigFraction(-1, 2)


def test_zero_divisors_raise():
    with pytest.raises(DivideByZeroError):
        BigFraction(3).remainder(0)
    with pytest.raises(DivideByZeroError):
        BigFraction(3).modulus(0)
    with pytest.raises(DivideByZeroError):
        BigFraction(0).reciprocal()
    with pytest.raises(DivideByZeroError):
        BigFraction(0).pow(-1)


def test_pow_negative_exponent():
    assert BigFraction(2, 3).pow(-2) == BigFraction(9, 4)
    assert BigFraction(-2, 3) ** 3 == BigFraction(-8, 27)
    assert BigFraction(5, 7) ** 0 == 1


def test_gcd_lcm():
    a = BigFraction(2, 3)
    b = BigFraction(4, 9)
    assert a.gcd(b) == BigFraction(2, 9)
    assert a.lcm(b) == BigFraction(4, 3)


def test_floor_ceil_exact():
    assert BigFraction(-7, 2).floor() == -4
    assert BigFraction(-7, 2).ceil() == -3
    assert math.floor(BigFraction(7, 2)) == 3
    assert math.ceil(BigFraction(7, 2)) == 4
    assert math.trunc(BigFraction(-7, 2)) == -3
    # values far beyond float range stay exact
    big = BigFraction(10**400 + 1, 10**200)
    assert big.floor() == 10**200


def test_compare_and_ordering():
    assert BigFraction(1, 3) < BigFraction(1, 2)
    assert BigFraction(1, 3).compare(BigFraction(2, 6)) == 0
    assert BigFraction(-1, 3) < 0
    assert BigFraction(5, 2) > Fraction(9, 4)
    assert BigFraction(1, 2) <= Decimal("0.5")
    assert sorted([BigFraction(3), BigFraction(1, 2), BigFraction(-1)]) == [-1, Fraction(1, 2), 3]


def test_hash_agrees_with_fraction_and_int():
    assert hash(BigFraction(3)) == hash(3)
    assert hash(BigFraction(1, 2)) == hash(Fraction(1, 2))
    assert {BigFraction(2, 4), Fraction(1, 2)} == {Fraction(1, 2)}


def test_to_integer_exact():
    assert BigFraction(12, 4).to_integer_exact() == 3
    with pytest.raises(PrecisionLossError):
        BigFraction(1, 2).to_integer_exact()
    with pytest.raises(PrecisionLossError):
        BigFraction(2**40).int_value_exact()
    assert BigFraction(-7, 2).to_integer() == -3


def test_to_decimal_precision_and_rounding():
    third = BigFraction(1, 3)
    assert third.to_decimal(5) == Decimal("0.33333")
    assert third.to_decimal(make_context(3)) == Decimal("0.333")
    assert BigFraction(2, 3).to_decimal(4) == Decimal("0.6667")
    assert BigFraction(1, 4).to_decimal() == Decimal("0.25")
    assert BigFraction(100).to_decimal(10) == Decimal(100)


def test_from_decimal_exact():
    assert BigFraction.from_decimal(Decimal("0.125")) == BigFraction(1, 8)
    assert BigFraction.from_decimal(Decimal("-2.50")) == BigFraction(-5, 2)
    assert BigFraction.from_decimal(Decimal("1E+3")) == 1000
    assert BigFraction.from_float(0.1) == BigFraction(1, 10)


def test_strings():
    assert str(BigFraction(3, 4)) == "3/4"
    assert str(BigFraction(8, 4)) == "2"
    assert BigFraction(7, 2).to_proper_string() == "3 1/2"
    assert BigFraction(-7, 2).to_proper_string() == "-3 1/2"
    assert BigFraction(1, 2).to_proper_string() == "1/2"
    assert BigFraction.parse(BigFraction(-7, 2).to_proper_string()) == BigFraction(-7, 2)


def test_mediant_precision_signum():
    assert BigFraction(1, 2).mediant(BigFraction(2, 3)) == BigFraction(3, 5)
    assert BigFraction(12345, 7).precision() == 5
    assert BigFraction(-1, 9).signum() == -1
    assert BigFraction(0).signum() == 0
    assert BigFraction(0).is_zero()
