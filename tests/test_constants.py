# tests/test_constants.py

from decimal import Decimal
from unittest.mock import patch

import pytest

from numtower.core.context import make_context
from numtower.core.engine import EngineContext
from numtower.core.errors import RangeExceededError
from numtower.engines import constants
from numtower.values.fraction import BigFraction

PI_50 = "31415926535897932384626433832795028841971693993751"
E_50 = "27182818284590452353602874713526624977572470936999"


def machin_pi_digits(n: int) -> str:
    """pi = 16 atan(1/5) - 4 atan(1/239) in scaled integers."""
    scale = 10 ** (n + 10)

    def arctan_inv(x: int) -> int:
        total = term = scale // x
        x2 = x * x
        k = 1
        sign = -1
        while term:
            term //= x2
            total += sign * (term // (2 * k + 1))
            sign = -sign
            k += 1
        return total

    return str(16 * arctan_inv(5) - 4 * arctan_inv(239))[:n]


def test_pi_digits_prefix():
    assert constants.pi_digits(50) == PI_50
    assert constants.pi_digits(1) == "3"
    assert constants.pi_digits(0) == ""


def test_pi_digits_against_machin():
    engine = EngineContext()
    assert constants.pi_digits(1000, engine) == machin_pi_digits(1000)


def test_pi_cache_substring():
    """A shorter request after a longer one is served from the cached prefix."""
    engine = EngineContext()
    long_pi = constants.pi(50, engine)
    with patch("numtower.engines.constants._spigot") as spigot:
        short_pi = constants.pi(25, engine)
    spigot.assert_not_called()
    assert str(long_pi).startswith(str(short_pi))
    assert str(short_pi) == "3." + PI_50[1:26]
    assert len(engine.pi_digits) == 51


def test_pi_cache_grows_only():
    engine = EngineContext()
    constants.pi_digits(40, engine)
    constants.pi_digits(10, engine)
    assert len(engine.pi_digits) == 40
    constants.pi_digits(60, engine)
    assert len(engine.pi_digits) == 60


def test_pi_digit_bound():
    with pytest.raises(RangeExceededError) as info:
        constants.pi_digits(12501)
    assert info.value.bound == 12500
    with pytest.raises(ValueError):
        constants.pi(12500)


def test_pi_truncates():
    assert constants.pi(10) == Decimal("3.1415926535")
    assert constants.pi(0) == 3


def test_pi_multiples():
    ctx = make_context(60)
    tol = Decimal("1e-38")
    p = constants.pi(45)
    assert abs(ctx.subtract(constants.two_pi(40), ctx.multiply(p, 2))) < tol
    assert abs(ctx.subtract(constants.half_pi(40), ctx.divide(p, 2))) < tol
    assert abs(ctx.subtract(constants.quarter_pi(40), ctx.divide(p, 4))) < tol
    assert constants.pi_at(5) == Decimal("3.1416")


def test_e_digits():
    assert constants.e_digits(50) == E_50
    assert constants.e(10) == Decimal("2.7182818284")
    engine = EngineContext()
    constants.e(30, engine)
    assert len(engine.e_digits) == 31
    assert constants.e_at(5) == Decimal("2.7183")


def test_phi():
    golden = Decimal("1.618033988749894848204586834365638117720")
    assert abs(constants.phi(35) - golden) < Decimal("1e-34")
    inverse = Decimal("0.618033988749894848204586834365638117720")
    assert abs(constants.phi(35, reciprocal=True) - inverse) < Decimal("1e-34")


@pytest.mark.parametrize("precision", [1, 5, 10, 30])
def test_ratphi(precision):
    golden = Decimal("1.61803398874989484820458683436563811772030917980576")
    approx = constants.ratphi(precision)
    assert abs(approx.to_decimal(50) - golden) < Decimal(1).scaleb(-precision)
    assert constants.ratphi(precision, reciprocal=True) * approx == 1


def test_ratphi_is_fibonacci_ratio():
    # first convergent F(k+2)/F(k+1) with F(k+1)·F(k+2) > 10**4
    assert constants.ratphi(4) == BigFraction(144, 89)
    assert constants.ratphi(4, reciprocal=True) == BigFraction(89, 144)
