# tests/test_trig.py

from decimal import Decimal

import pytest

from numtower.core.context import make_context
from numtower.engines import trig
from numtower.engines.constants import pi_at


def ulp(reference: Decimal, precision: int) -> Decimal:
    return Decimal(1).scaleb(reference.adjusted() - precision + 1)


ARGS = [Decimal("0.5"), Decimal("1"), Decimal("3"), Decimal("10"), Decimal("-7.25"), Decimal("1e-8")]


@pytest.mark.parametrize("prec", [10, 50, 200])
@pytest.mark.parametrize("x", ARGS)
def test_sin_cos_within_one_ulp(prec, x):
    """Compared against the same kernels evaluated with 40 extra digits."""
    for fn in (trig.sin, trig.cos):
        got = fn(x, prec)
        reference = fn(x, prec + 40)
        assert abs(got - reference) <= ulp(reference, prec)


@pytest.mark.parametrize("prec", [10, 50, 200])
def test_pythagorean_identity(prec):
    ctx = make_context(prec + 10)
    for x in ARGS:
        s = trig.sin(x, prec + 5)
        c = trig.cos(x, prec + 5)
        total = ctx.add(ctx.multiply(s, s), ctx.multiply(c, c))
        assert abs(ctx.subtract(total, 1)) <= Decimal(1).scaleb(1 - prec)


def test_known_values():
    assert trig.sin(1, 10) == Decimal("0.8414709848")
    assert trig.cos(1, 10) == Decimal("0.5403023059")
    assert trig.sin(0, 10) == 0
    assert trig.cos(0, 10) == 1
    assert abs(trig.sin(pi_at(60), 50)) < Decimal("1e-49")


@pytest.mark.parametrize("x", [Decimal("0.5"), Decimal("1"), Decimal("-0.25"), Decimal("1.3"), Decimal("4"), Decimal("-2.5")])
def test_tan_matches_sin_over_cos(x):
    prec = 20
    reference = trig.sin(x, 60) / trig.cos(x, 60)
    got = trig.tan(x, prec)
    assert abs(got - reference) <= 2 * ulp(reference, prec)


def test_tan_series_uses_bernoulli_table():
    from numtower.core.engine import EngineContext

    engine = EngineContext()
    trig.tan(Decimal("0.5"), 20, engine)
    assert engine.bernoulli.computed > 0


def test_atan_known_values():
    tol = Decimal("1e-28")
    assert abs(trig.atan(Decimal("0.5"), 30) - Decimal("0.4636476090008061162142562314612144020")) < tol
    assert abs(trig.atan(Decimal("2"), 30) - Decimal("1.107148717794090503017065460178537040")) < tol
    assert abs(trig.atan(Decimal("-2"), 30) + Decimal("1.107148717794090503017065460178537040")) < tol
    assert trig.atan(0, 30) == 0


def test_atan2_quadrants():
    prec = 30
    p = pi_at(prec + 5)
    tol = Decimal("1e-25")
    assert abs(trig.atan2(1, 1, prec) - p / 4) < tol
    assert abs(trig.atan2(1, -1, prec) - 3 * p / 4) < tol
    assert abs(trig.atan2(-1, -1, prec) + 3 * p / 4) < tol
    assert abs(trig.atan2(0, -1, prec) - p) < tol
    assert abs(trig.atan2(1, 0, prec) - p / 2) < tol
    assert abs(trig.atan2(-1, 0, prec) + p / 2) < tol
    assert trig.atan2(0, 0, prec) == 0
    assert trig.atan2(0, 5, prec) == 0


def test_atan2_inverts_sin_cos():
    for y, x in [(3, 4), (-5, 2), (7, -1), (-1, -9), (Decimal("0.001"), 1)]:
        theta = trig.atan2(y, x, 40)
        ctx = make_context(40)
        r = ctx.sqrt(Decimal(y) ** 2 + Decimal(x) ** 2)
        assert abs(ctx.subtract(ctx.multiply(r, trig.cos(theta, 40)), x)) < Decimal("1e-35")
        assert abs(ctx.subtract(ctx.multiply(r, trig.sin(theta, 40)), y)) < Decimal("1e-35")
