"""
numtower.core.context
---------------------
Precision handling on top of ``decimal``.

A ``decimal.Context`` plays the role of a math context (precision + rounding).
Engine entry points accept either a Context or a bare int precision; ``as_context``
normalizes both. Every decimal result leaves the engine through ``fixup``.
"""

from __future__ import annotations

import decimal
from decimal import Context, Decimal, ROUND_HALF_EVEN
from fractions import Fraction
from typing import Union

from .errors import DomainError, MalformedInputError
from .settings import DECIMAL128

ContextLike = Union[Context, int]


def make_context(precision: int, rounding: str = ROUND_HALF_EVEN) -> Context:
    if precision <= 0:
        raise ValueError("precision must be > 0")
    return Context(
        prec=precision,
        rounding=rounding,
        Emin=decimal.MIN_EMIN,
        Emax=decimal.MAX_EMAX,
        traps=[decimal.InvalidOperation, decimal.DivisionByZero, decimal.Overflow],
    )


DEFAULT_CONTEXT = make_context(DECIMAL128)

# Large enough that add/subtract/multiply of finite operands never round.
EXACT_CONTEXT = make_context(decimal.MAX_PREC)


def as_context(ctx: ContextLike) -> Context:
    if isinstance(ctx, Context):
        return ctx
    if isinstance(ctx, bool) or not isinstance(ctx, int):
        raise TypeError(f"expected decimal.Context or int precision, got {type(ctx).__name__}")
    return make_context(ctx)


def working_context(ctx: Context, extra: int) -> Context:
    """Context with ``extra`` guard digits over ``ctx``, rounding half-even."""
    return make_context(ctx.prec + extra)


def fixup(value: Decimal, ctx: Context) -> Decimal:
    """Round to ``ctx`` and strip non-significant trailing zeros."""
    if not value:
        return Decimal(0)
    return value.normalize(ctx)


def to_decimal(value, ctx: Context = DEFAULT_CONTEXT) -> Decimal:
    """Coerce ints, Fractions, BigFractions, floats and numeric strings to Decimal.

    Ints and decimal strings convert exactly; ratios are divided at ``ctx``.
    """
    if isinstance(value, Decimal):
        if not value.is_finite():
            raise DomainError(f"non-finite decimal {value}")
        return value
    if isinstance(value, bool):
        raise TypeError("bool is not a numeric operand")
    if isinstance(value, int):
        return Decimal(value)
    if isinstance(value, float):
        if value != value or value in (float("inf"), float("-inf")):
            raise DomainError(f"non-finite float {value}")
        return Decimal(repr(value))
    if isinstance(value, str):
        try:
            d = Decimal(value.strip())
        except decimal.InvalidOperation:
            raise MalformedInputError("decimal", value) from None
        if not d.is_finite():
            raise MalformedInputError("decimal", value)
        return d
    if isinstance(value, Fraction):
        return ctx.divide(Decimal(value.numerator), Decimal(value.denominator))
    to_dec = getattr(value, "to_decimal", None)
    if to_dec is not None:
        return to_dec(ctx)
    raise TypeError(f"cannot convert {type(value).__name__} to Decimal")


def digit_length(n: int) -> int:
    """Number of decimal digits of |n| (1 for zero)."""
    n = abs(n)
    if n < 10:
        return 1
    return len(str(n))


def decimal_precision(value: Decimal) -> int:
    """Count of significant digits in the coefficient."""
    return max(1, len(value.as_tuple().digits))


def plain_string(value: Decimal) -> str:
    """Non-exponent string form of a finite decimal, ``"0"`` for any zero."""
    if not value:
        return "0"
    return format(value.normalize(EXACT_CONTEXT), "f")
