from __future__ import annotations

from dataclasses import dataclass
from decimal import Context, Decimal, ROUND_CEILING, ROUND_FLOOR, ROUND_HALF_EVEN
from typing import Literal, Protocol, TypeVar

from ..values.fraction import BigFraction
from .context import DEFAULT_CONTEXT, EXACT_CONTEXT, fixup, to_decimal
from .errors import DivideByZeroError

Num = TypeVar("Num", BigFraction, Decimal)

# Component representation of a complex number or quaternion.
Kind = Literal["rational", "decimal"]


class Backend(Protocol[Num]):
    kind: Kind

    def add(self, a: Num, b: Num) -> Num: ...
    def sub(self, a: Num, b: Num) -> Num: ...
    def mul(self, a: Num, b: Num) -> Num: ...
    def div(self, a: Num, b: Num) -> Num: ...
    def neg(self, a: Num) -> Num: ...
    def floor(self, a: Num) -> Num: ...
    def ceil(self, a: Num) -> Num: ...
    def round_half_even(self, a: Num) -> Num: ...
    def from_int(self, n: int) -> Num: ...
    def coerce(self, value) -> Num: ...
    def finish(self, a: Num) -> Num: ...


@dataclass(frozen=True)
class RationalBackend(Backend[BigFraction]):
    kind: Literal["rational"] = "rational"

    def add(self, a: BigFraction, b: BigFraction) -> BigFraction:
        return a + b

    def sub(self, a: BigFraction, b: BigFraction) -> BigFraction:
        return a - b

    def mul(self, a: BigFraction, b: BigFraction) -> BigFraction:
        return a * b

    def div(self, a: BigFraction, b: BigFraction) -> BigFraction:
        return a / b

    def neg(self, a: BigFraction) -> BigFraction:
        return -a

    def floor(self, a: BigFraction) -> BigFraction:
        return a.floor()

    def ceil(self, a: BigFraction) -> BigFraction:
        return a.ceil()

    def round_half_even(self, a: BigFraction) -> BigFraction:
        return BigFraction(round(a))

    def from_int(self, n: int) -> BigFraction:
        return BigFraction(n)

    def coerce(self, value) -> BigFraction:
        return BigFraction.value_of(value)

    def finish(self, a: BigFraction) -> BigFraction:
        return a


@dataclass(frozen=True)
class DecimalBackend(Backend[Decimal]):
    """Decimal components: add/sub/mul exact, division and ``finish`` rounded to ``ctx``."""

    ctx: Context = DEFAULT_CONTEXT
    kind: Literal["decimal"] = "decimal"

    def add(self, a: Decimal, b: Decimal) -> Decimal:
        return EXACT_CONTEXT.add(a, b)

    def sub(self, a: Decimal, b: Decimal) -> Decimal:
        return EXACT_CONTEXT.subtract(a, b)

    def mul(self, a: Decimal, b: Decimal) -> Decimal:
        return EXACT_CONTEXT.multiply(a, b)

    def div(self, a: Decimal, b: Decimal) -> Decimal:
        if not b:
            raise DivideByZeroError()
        return self.ctx.divide(a, b)

    def neg(self, a: Decimal) -> Decimal:
        return EXACT_CONTEXT.minus(a)

    def floor(self, a: Decimal) -> Decimal:
        return a.to_integral_value(rounding=ROUND_FLOOR)

    def ceil(self, a: Decimal) -> Decimal:
        return a.to_integral_value(rounding=ROUND_CEILING)

    def round_half_even(self, a: Decimal) -> Decimal:
        return a.to_integral_value(rounding=ROUND_HALF_EVEN)

    def from_int(self, n: int) -> Decimal:
        return Decimal(n)

    def coerce(self, value) -> Decimal:
        return to_decimal(value, self.ctx)

    def finish(self, a: Decimal) -> Decimal:
        return fixup(a, self.ctx)


RATIONAL = RationalBackend()


def backend_for(kind: Kind, ctx: Context = DEFAULT_CONTEXT):
    if kind == "rational":
        return RATIONAL
    if kind == "decimal":
        return DecimalBackend(ctx)
    raise ValueError(f"unknown component kind {kind!r}")


def common_kind(*kinds: Kind) -> Kind:
    """Rational only when every operand is rational."""
    return "rational" if all(k == "rational" for k in kinds) else "decimal"
