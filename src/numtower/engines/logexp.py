"""
numtower.engines.logexp
-----------------------
Logarithms, exponentials and real powers on Decimals.

ln(x)
    Divide or multiply by e until x lies in [1/e, e], then
    ln x = n + 2 Σ t^(2k+1) / (2k+1) with t = (x - 1) / (x + 1).
log2(x)
    Binary digit-by-digit algorithm: normalize into [1, 2), then square
    repeatedly; each time the square reaches 2 the next bit is 1.
e_power(x)
    e^int(x) by binary exponentiation times the Maclaurin series of the
    fractional part; negative exponents go through the reciprocal.
power(base, exponent)
    Integer exponents by binary exponentiation with exact shortcuts for
    bases 2 and 10; a fractional remainder f contributes e^(f ln base).
"""

from __future__ import annotations

import logging
from decimal import Context, Decimal, localcontext
from typing import Optional

from ..core.context import ContextLike, as_context, digit_length, fixup, to_decimal, working_context
from ..core.engine import EngineContext, resolve
from ..core.errors import ArithmeticInvalidError, DivideByZeroError, DomainError
from .constants import e_at

logger = logging.getLogger(__name__)


def _is_integral(x: Decimal) -> bool:
    return x == x.to_integral_value()


def _int_power(base: Decimal, n: int) -> Decimal:
    """base**n in the current context; shortcuts keep 2**n and 10**n exact."""
    if n < 0:
        if not base:
            raise DivideByZeroError("zero to a negative power")
        return 1 / _int_power(base, -n)
    if base == 2:
        return +Decimal(1 << n)
    if base == 10:
        return +Decimal(1).scaleb(n)
    result = Decimal(1)
    while n:
        if n & 1:
            result *= base
        base *= base
        n >>= 1
    return result


def _exp_series(f: Decimal, ceiling: int) -> Decimal:
    term = Decimal(1)
    total = Decimal(1)
    for k in range(1, ceiling):
        term = term * f / k
        nxt = total + term
        if nxt == total:
            logger.debug("exp series converged after %d terms", k)
            return total
        total = nxt
    raise ArithmeticInvalidError(f"exp series did not converge in {ceiling} terms")


def _ln_work(x: Decimal, work: Context, engine: EngineContext) -> Decimal:
    ceiling = engine.settings.series_term_ceiling(work.prec)
    e = e_at(work, engine)
    inv_e = 1 / e
    n = 0
    while x > e:
        x /= e
        n += 1
    while x < inv_e:
        x *= e
        n -= 1
    t = (x - 1) / (x + 1)
    t2 = t * t
    power = t
    total = t
    for k in range(1, ceiling):
        power *= t2
        nxt = total + power / (2 * k + 1)
        if nxt == total:
            logger.debug("ln series converged after %d terms (%d reductions by e)", k, abs(n))
            return 2 * total + n
        total = nxt
    raise ArithmeticInvalidError(f"ln series did not converge in {ceiling} terms")


def _log_guard(x: Decimal, guard: int) -> int:
    # one rounding per reduction step by e
    return guard + digit_length(x.adjusted())


def ln(x, ctx: ContextLike, engine: Optional[EngineContext] = None) -> Decimal:
    """Natural logarithm; ``x <= 0`` raises ``DomainError``."""
    c = as_context(ctx)
    eng = resolve(engine)
    x = to_decimal(x, c)
    if x <= 0:
        raise DomainError(f"logarithm of non-positive number {x}")
    if x == 1:
        return Decimal(0)
    work = working_context(c, _log_guard(x, eng.settings.guard_digits))
    with localcontext(work):
        result = _ln_work(x, work, eng)
    return fixup(result, c)


def log10(x, ctx: ContextLike, engine: Optional[EngineContext] = None) -> Decimal:
    c = as_context(ctx)
    eng = resolve(engine)
    x = to_decimal(x, c)
    if x <= 0:
        raise DomainError(f"logarithm of non-positive number {x}")
    digits = x.as_tuple().digits
    if digits[0] == 1 and not any(digits[1:]):
        return Decimal(x.adjusted())
    work = working_context(c, _log_guard(x, eng.settings.guard_digits))
    with localcontext(work):
        result = _ln_work(x, work, eng) / _ln_work(Decimal(10), work, eng)
    return fixup(result, c)


def log2(x, ctx: ContextLike, engine: Optional[EngineContext] = None) -> Decimal:
    """Base-2 logarithm by the binary digit algorithm."""
    c = as_context(ctx)
    eng = resolve(engine)
    x = to_decimal(x, c)
    if x <= 0:
        raise DomainError(f"logarithm of non-positive number {x}")
    work = working_context(c, eng.settings.guard_digits)
    # bits needed for prec decimal digits: prec * log2(10) < prec * 10 / 3
    bits = (work.prec * 10) // 3 + 1
    with localcontext(work):
        n = 0
        y = x
        while y >= 2:
            y /= 2
            n += 1
        while y < 1:
            y *= 2
            n -= 1
        result = Decimal(n)
        bit = Decimal(1)
        for _ in range(bits):
            if y == 1:
                break
            y *= y
            bit /= 2
            if y >= 2:
                y /= 2
                result += bit
    return fixup(result, c)


def e_power(x, ctx: ContextLike, engine: Optional[EngineContext] = None) -> Decimal:
    """e**x."""
    c = as_context(ctx)
    eng = resolve(engine)
    x = to_decimal(x, c)
    if not x:
        return Decimal(1)
    work = working_context(c, eng.settings.guard_digits + digit_length(int(x)))
    with localcontext(work):
        result = _exp_work(x, work, eng)
    return fixup(result, c)


def power(base, exponent, ctx: ContextLike, engine: Optional[EngineContext] = None) -> Decimal:
    """base**exponent for a real exponent.

    Integer exponents work for any base. A fractional exponent needs a
    positive base (``DomainError`` otherwise); ``0`` to a negative power
    raises ``DivideByZeroError``.
    """
    c = as_context(ctx)
    eng = resolve(engine)
    b = to_decimal(base, c)
    p = to_decimal(exponent, c)
    if not p:
        return Decimal(1)
    whole = int(p)
    frac = p - whole
    if not b:
        if p < 0:
            raise DivideByZeroError("zero to a negative power")
        return Decimal(0)
    if frac and b < 0:
        raise DomainError(f"negative base {b} with fractional exponent {p}")
    work = working_context(c, eng.settings.guard_digits + digit_length(whole))
    with localcontext(work):
        result = _int_power(b, whole)
        if frac:
            result *= _exp_work(frac * _ln_work(b, work, eng), work, eng)
    return fixup(result, c)


def _exp_work(x: Decimal, work: Context, engine: EngineContext) -> Decimal:
    ceiling = engine.settings.series_term_ceiling(work.prec)
    negative = x < 0
    x = abs(x)
    whole = int(x)
    value = _int_power(e_at(work, engine), whole) if whole else Decimal(1)
    value *= _exp_series(x - whole, ceiling)
    return 1 / value if negative else value


def ten_power(x, ctx: ContextLike, engine: Optional[EngineContext] = None) -> Decimal:
    """10**x; integer exponents are an exact scale shift."""
    c = as_context(ctx)
    p = to_decimal(x, c)
    if _is_integral(p):
        return fixup(Decimal(1).scaleb(int(p), c), c)
    return power(Decimal(10), p, c, engine)
