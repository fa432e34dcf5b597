"""
numtower.engines.trig
---------------------
Trigonometry on Decimals.

sin/cos
    Maclaurin series after reducing the argument into [-2π, 2π].
tan
    Reduced into (-π/2, π/2]; the Bernoulli series
    tan x = Σ |B_2n| 4^n (4^n - 1) x^(2n-1) / (2n)!
    up to ``EngineSettings.tan_series_limit`` and sin/cos beyond it.
atan2
    Closed forms on the axes and diagonals. Otherwise arctan of |y/x| via
    the Gregory series; |y/x| > 1 goes through the reciprocal identity
    atan(t) = π/2 - atan(1/t), and t > 2 - √3 is shifted with
    atan(t) = π/6 + atan((√3 t - 1) / (t + √3)) so the series argument stays
    below 0.27. The quadrant is fixed up from the signs of x and y.

Every series runs at ``ctx.prec`` plus guard digits and stops on a fixed
point (the partial sum no longer changes). Reaching the term ceiling first
raises ``ArithmeticInvalidError``.
"""

from __future__ import annotations

import logging
from decimal import Context, Decimal, localcontext
from typing import Optional

from ..core.context import ContextLike, as_context, fixup, to_decimal, working_context
from ..core.engine import EngineContext, resolve
from ..core.errors import ArithmeticInvalidError
from ..core.settings import EngineSettings
from .constants import pi_at
from .roots import sqrt

logger = logging.getLogger(__name__)

# =============================================================================
# Series kernels (caller sets the decimal context)
# =============================================================================


def _sin_series(x: Decimal, ceiling: int) -> Decimal:
    x2 = x * x
    term = x
    total = x
    for k in range(1, ceiling):
        term = -term * x2 / ((2 * k) * (2 * k + 1))
        nxt = total + term
        if nxt == total:
            logger.debug("sin series converged after %d terms", k)
            return total
        total = nxt
    raise ArithmeticInvalidError(f"sin series did not converge in {ceiling} terms")


def _cos_series(x: Decimal, ceiling: int) -> Decimal:
    x2 = x * x
    term = Decimal(1)
    total = Decimal(1)
    for k in range(1, ceiling):
        term = -term * x2 / ((2 * k - 1) * (2 * k))
        nxt = total + term
        if nxt == total:
            logger.debug("cos series converged after %d terms", k)
            return total
        total = nxt
    raise ArithmeticInvalidError(f"cos series did not converge in {ceiling} terms")


def _gregory(t: Decimal, ceiling: int) -> Decimal:
    """atan(t) = t - t^3/3 + t^5/5 - ..., for |t| well below 1."""
    t2 = t * t
    power = t
    total = t
    for k in range(1, ceiling):
        power = -power * t2
        nxt = total + power / (2 * k + 1)
        if nxt == total:
            logger.debug("gregory series converged after %d terms", k)
            return total
        total = nxt
    raise ArithmeticInvalidError(f"arctan series did not converge in {ceiling} terms")


def _guard(x: Decimal, settings: EngineSettings) -> int:
    # digits lost when a large argument is reduced modulo a multiple of π
    return settings.guard_digits + max(0, x.adjusted())


def _reduced_2pi(x: Decimal, work: Context, engine: EngineContext) -> Decimal:
    two_pi = 2 * pi_at(work, engine)
    if abs(x) > two_pi:
        x = x % two_pi
    return x


# =============================================================================
# Public functions
# =============================================================================


def sin(x, ctx: ContextLike, engine: Optional[EngineContext] = None) -> Decimal:
    c = as_context(ctx)
    eng = resolve(engine)
    x = to_decimal(x, c)
    if not x:
        return Decimal(0)
    work = working_context(c, _guard(x, eng.settings))
    with localcontext(work):
        r = _reduced_2pi(x, work, eng)
        result = _sin_series(r, eng.settings.series_term_ceiling(work.prec))
    return fixup(result, c)


def cos(x, ctx: ContextLike, engine: Optional[EngineContext] = None) -> Decimal:
    c = as_context(ctx)
    eng = resolve(engine)
    x = to_decimal(x, c)
    if not x:
        return Decimal(1)
    work = working_context(c, _guard(x, eng.settings))
    with localcontext(work):
        r = _reduced_2pi(x, work, eng)
        result = _cos_series(r, eng.settings.series_term_ceiling(work.prec))
    return fixup(result, c)


def tan(x, ctx: ContextLike, engine: Optional[EngineContext] = None) -> Decimal:
    c = as_context(ctx)
    eng = resolve(engine)
    settings = eng.settings
    x = to_decimal(x, c)
    if not x:
        return Decimal(0)
    work = working_context(c, _guard(x, settings))
    ceiling = settings.series_term_ceiling(work.prec)
    with localcontext(work):
        p = pi_at(work, eng)
        half = p / 2
        if abs(x) > half:
            x = x % p
            if x > half:
                x -= p
            elif x < -half:
                x += p
        if abs(x) > settings.tan_series_limit:
            result = _sin_series(x, ceiling) / _cos_series(x, ceiling)
        else:
            result = _tan_series(x, ceiling, eng)
    return fixup(result, c)


def _tan_series(x: Decimal, ceiling: int, engine: EngineContext) -> Decimal:
    x2 = x * x
    power = x  # x^(2n-1)
    four_n = 1  # 4^n
    factorial = 1  # (2n)!
    total = Decimal(0)
    for n in range(1, ceiling):
        four_n *= 4
        factorial *= (2 * n - 1) * (2 * n)
        b = engine.bernoulli.get(2 * n)
        coefficient = Decimal(abs(b.numerator) * four_n * (four_n - 1)) / Decimal(b.denominator * factorial)
        nxt = total + coefficient * power
        if nxt == total:
            logger.debug("tan series converged after %d terms", n)
            return total
        total = nxt
        power *= x2
    raise ArithmeticInvalidError(f"tan series did not converge in {ceiling} terms")


def _atan_positive(t: Decimal, work: Context, engine: EngineContext) -> Decimal:
    """atan(t) for t > 0, in the current (working) context."""
    ceiling = engine.settings.series_term_ceiling(work.prec)
    p = pi_at(work, engine)
    if t > 1:
        return p / 2 - _atan_positive(1 / t, work, engine)
    if t == 1:
        return p / 4
    root3 = sqrt(Decimal(3), work, engine)
    if t > 2 - root3:
        return p / 6 + _gregory((root3 * t - 1) / (t + root3), ceiling)
    return _gregory(t, ceiling)


def atan2(y, x, ctx: ContextLike, engine: Optional[EngineContext] = None) -> Decimal:
    """Angle of the point (x, y) in (-π, π]; ``atan2(0, 0)`` is 0."""
    c = as_context(ctx)
    eng = resolve(engine)
    y = to_decimal(y, c)
    x = to_decimal(x, c)
    work = working_context(c, eng.settings.guard_digits)
    with localcontext(work):
        p = pi_at(work, eng)
        if not y:
            result = Decimal(0) if x >= 0 else p
        elif not x:
            result = p / 2 if y > 0 else -p / 2
        elif abs(x) == abs(y):
            quarter = p / 4 if x > 0 else 3 * p / 4
            result = quarter if y > 0 else -quarter
        else:
            a = _atan_positive(abs(y / x), work, eng)
            if x < 0:
                a = p - a
            result = a if y > 0 else -a
    return fixup(result, c)


def atan(x, ctx: ContextLike, engine: Optional[EngineContext] = None) -> Decimal:
    return atan2(x, 1, ctx, engine)
