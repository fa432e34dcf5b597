"""
numtower.engines.constants
--------------------------
Digit generation for π and e, and the golden ratio.

π comes from the base-10000 Rabinowitz-Wagon spigot (four digits per outer
pass, fourteen series terms per four digits); e from the series Σ 1/n! in
scaled integer arithmetic. Both keep the longest digit string in the engine's
``DigitCache`` and serve shorter requests by slicing, so ``pi(25)`` after
``pi(50)`` returns a prefix of the earlier result.
"""

from __future__ import annotations

import logging
from decimal import Context, Decimal
from typing import List, Optional

from ..core.context import ContextLike, as_context, fixup, working_context
from ..core.engine import EngineContext, resolve
from ..core.errors import DomainError, RangeExceededError
from ..values.continued_fraction import ContinuedFraction
from ..values.fraction import BigFraction
from .roots import sqrt

logger = logging.getLogger(__name__)

_SCALE = 10000
_SPIGOT_INIT = _SCALE // 5
_GUARD = 8


def _spigot(digits: int) -> str:
    terms = -(-((digits + _GUARD + 1) * 14 // 4) // 14) * 14
    f = [_SPIGOT_INIT] * terms + [0]
    groups: List[int] = []
    carry = 0
    c = terms
    while c > 0:
        d = 0
        g = 2 * c
        b = c
        while True:
            d += f[b] * _SCALE
            g -= 1
            f[b] = d % g
            d //= g
            g -= 1
            b -= 1
            if b == 0:
                break
            d *= b
        group = carry + d // _SCALE
        carry = d % _SCALE
        # a group can overflow four digits; carry the excess into earlier groups
        if group >= _SCALE:
            group -= _SCALE
            k = len(groups) - 1
            while True:
                groups[k] += 1
                if groups[k] < _SCALE:
                    break
                groups[k] = 0
                k -= 1
        groups.append(group)
        c -= 14
    text = "".join("%04d" % g for g in groups)
    logger.debug("pi spigot: %d terms for %d digits", terms, digits)
    return text[:digits]


def pi_digits(digits: int, engine: Optional[EngineContext] = None) -> str:
    """The first ``digits`` decimal digits of π, ``"31415..."``."""
    eng = resolve(engine)
    bound = eng.settings.pi_max_digits
    if digits < 0:
        raise DomainError("digit count must be >= 0")
    if digits > bound:
        raise RangeExceededError(f"cannot generate {digits} digits of pi", bound)
    if digits == 0:
        return ""
    return eng.pi_digits.get(digits, _spigot)


def _e_series(digits: int) -> str:
    scale = 10 ** (digits + 10)
    total = 0
    term = scale
    n = 0
    while term:
        total += term
        n += 1
        term //= n
    logger.debug("e series: %d terms for %d digits", n, digits)
    return str(total)[:digits]


def e_digits(digits: int, engine: Optional[EngineContext] = None) -> str:
    """The first ``digits`` decimal digits of e, ``"27182..."``."""
    if digits < 0:
        raise DomainError("digit count must be >= 0")
    if digits == 0:
        return ""
    return resolve(engine).e_digits.get(digits, _e_series)


def _from_digits(text: str) -> Decimal:
    return Decimal(f"{text[0]}.{text[1:]}") if len(text) > 1 else Decimal(text)


def pi(digits: int, engine: Optional[EngineContext] = None) -> Decimal:
    """π truncated to ``digits`` places after the decimal point."""
    return _from_digits(pi_digits(digits + 1, engine))


def e(digits: int, engine: Optional[EngineContext] = None) -> Decimal:
    """e truncated to ``digits`` places after the decimal point."""
    return _from_digits(e_digits(digits + 1, engine))


def pi_at(ctx: ContextLike, engine: Optional[EngineContext] = None) -> Decimal:
    """π rounded to the precision of ``ctx``."""
    c = as_context(ctx)
    return c.plus(pi(c.prec + 2, engine))


def e_at(ctx: ContextLike, engine: Optional[EngineContext] = None) -> Decimal:
    c = as_context(ctx)
    return c.plus(e(c.prec + 2, engine))


def two_pi(ctx: ContextLike, engine: Optional[EngineContext] = None) -> Decimal:
    c = as_context(ctx)
    return fixup(c.multiply(pi(c.prec + 2, engine), 2), c)


def half_pi(ctx: ContextLike, engine: Optional[EngineContext] = None) -> Decimal:
    c = as_context(ctx)
    return fixup(c.divide(pi(c.prec + 2, engine), 2), c)


def quarter_pi(ctx: ContextLike, engine: Optional[EngineContext] = None) -> Decimal:
    c = as_context(ctx)
    return fixup(c.divide(pi(c.prec + 2, engine), 4), c)


def phi(ctx: ContextLike, reciprocal: bool = False, engine: Optional[EngineContext] = None) -> Decimal:
    """Golden ratio ``(√5 + 1) / 2``, or its reciprocal ``(√5 - 1) / 2``."""
    c = as_context(ctx)
    work: Context = working_context(c, 4)
    root5 = sqrt(Decimal(5), work, engine)
    top = work.subtract(root5, 1) if reciprocal else work.add(root5, 1)
    return fixup(work.divide(top, 2), c)


def ratphi(precision: int, reciprocal: bool = False) -> BigFraction:
    """Rational approximation of φ within ``10**-precision``.

    φ = [1; 1, 1, ...]; consecutive convergents p/q bracket φ and differ by
    1/(q q'), so the first convergent with q q' > 10**precision is close enough.
    """
    if precision < 0:
        raise DomainError("precision must be >= 0")
    bound = 10**precision
    q, q_next = 1, 1
    terms = 0
    while q * q_next <= bound:
        q, q_next = q_next, q + q_next
        terms += 1
    value = ContinuedFraction(1, (1,) * terms).to_fraction()
    return value.reciprocal() if reciprocal else value
