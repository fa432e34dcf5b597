"""
numtower.engines.roots
----------------------
Square and cube roots by Newton-Raphson.

The seed is a power of ten from the argument's exponent, so the first
iterate is within a factor of ~3 of the root and convergence is quadratic.
Iteration stops on a fixed point (or a one-ulp two-cycle) at the working
precision; hitting ``newton_max_iterations`` first is an error.
"""

from __future__ import annotations

import logging
from decimal import Decimal, localcontext
from typing import Optional

from ..core.context import ContextLike, as_context, fixup, to_decimal, working_context
from ..core.engine import EngineContext, resolve
from ..core.errors import ArithmeticInvalidError, DomainError

logger = logging.getLogger(__name__)


def _newton(step, seed: Decimal, max_iterations: int, label: str) -> Decimal:
    y = seed
    previous = None
    for i in range(max_iterations):
        nxt = step(y)
        if nxt == y or nxt == previous:
            logger.debug("%s converged after %d iterations", label, i + 1)
            return min(y, nxt)
        previous, y = y, nxt
    raise ArithmeticInvalidError(f"{label} did not converge in {max_iterations} iterations")


def sqrt(x, ctx: ContextLike, engine: Optional[EngineContext] = None) -> Decimal:
    """Real square root; negative input raises ``DomainError``."""
    c = as_context(ctx)
    settings = resolve(engine).settings
    x = to_decimal(x, c)
    if x < 0:
        raise DomainError(f"square root of negative number {x}")
    if not x or x == 1:
        return fixup(x, c)
    work = working_context(c, settings.guard_digits)
    seed = Decimal(1).scaleb(x.adjusted() // 2)
    with localcontext(work):
        root = _newton(lambda y: (y + x / y) / 2, seed, settings.newton_max_iterations, "sqrt")
    return fixup(root, c)


def cbrt(x, ctx: ContextLike, engine: Optional[EngineContext] = None) -> Decimal:
    """Real cube root, defined for negative input."""
    c = as_context(ctx)
    settings = resolve(engine).settings
    x = to_decimal(x, c)
    if not x:
        return Decimal(0)
    negative = x < 0
    x = abs(x)
    work = working_context(c, settings.guard_digits)
    seed = Decimal(1).scaleb(x.adjusted() // 3)
    with localcontext(work):
        root = _newton(lambda y: (2 * y + x / (y * y)) / 3, seed, settings.newton_max_iterations, "cbrt")
    root = fixup(root, c)
    return -root if negative else root


def sqrt2(x, ctx: ContextLike, engine: Optional[EngineContext] = None):
    """Square root as a ``ComplexNumber``; pure imaginary for negative input."""
    from ..values.complex_number import ComplexNumber

    c = as_context(ctx)
    x = to_decimal(x, c)
    if x < 0:
        return ComplexNumber.decimal(0, sqrt(-x, c, engine))
    return ComplexNumber.decimal(sqrt(x, c, engine))
