"""
numtower.engines.sequences
--------------------------
Factorial, Fibonacci, Bernoulli and Harmonic numbers.
"""

from __future__ import annotations

import math
import operator
from decimal import Decimal
from typing import List, Optional

from ..core.context import ContextLike, as_context
from ..core.engine import EngineContext, resolve
from ..core.errors import DomainError
from ..values.fraction import BigFraction


def _whole(n, what: str) -> int:
    if isinstance(n, BigFraction):
        if not n.is_whole_number():
            raise DomainError(f"{what} requires a whole number, got {n}")
        return n.numerator
    if isinstance(n, Decimal):
        if not n.is_finite() or n != n.to_integral_value():
            raise DomainError(f"{what} requires a whole number, got {n}")
        return int(n)
    try:
        return operator.index(n)
    except TypeError:
        raise DomainError(f"{what} requires a whole number, got {n!r}") from None


def _table(size: int) -> List[int]:
    values = [1]
    for k in range(1, size):
        values.append(values[-1] * k)
    return values


_FACTORIALS = _table(21)


def factorial(n) -> int:
    """n! for whole ``n >= 0``."""
    n = _whole(n, "factorial")
    if n < 0:
        raise DomainError(f"factorial of negative number {n}")
    if n < len(_FACTORIALS):
        return _FACTORIALS[n]
    return math.prod(range(len(_FACTORIALS), n + 1), start=_FACTORIALS[-1])


def fib(n) -> int:
    """Fibonacci number; ``F(-n) = (-1)**(n+1) F(n)``."""
    n = _whole(n, "fib")
    a, b = 0, 1
    for _ in range(abs(n)):
        a, b = b, a + b
    if n < 0 and n % 2 == 0:
        return -a
    return a


def bernoulli(n, engine: Optional[EngineContext] = None) -> BigFraction:
    """B_n as an exact fraction (``B_1 = +1/2``)."""
    n = _whole(n, "bernoulli")
    if n < 0:
        raise DomainError(f"Bernoulli index must be >= 0, got {n}")
    b = resolve(engine).bernoulli.get(n)
    return BigFraction(b.numerator, b.denominator)


def bernoulli_decimal(n, ctx: ContextLike, engine: Optional[EngineContext] = None) -> Decimal:
    return bernoulli(n, engine).to_decimal(as_context(ctx))


def harmonic(n) -> BigFraction:
    """H_n = 1 + 1/2 + ... + 1/n, normalized once as ``(Σ n!/i) / n!``."""
    n = _whole(n, "harmonic")
    if n < 0:
        raise DomainError(f"harmonic number of negative index {n}")
    if n == 0:
        return BigFraction(0)
    f = factorial(n)
    return BigFraction(sum(f // i for i in range(1, n + 1)), f)


def harmonic_decimal(n, ctx: ContextLike) -> Decimal:
    return harmonic(n).to_decimal(as_context(ctx))
