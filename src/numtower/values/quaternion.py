"""
numtower.values.quaternion
--------------------------
Quaternions ``a + b·i + c·j + d·k`` over exact rationals or decimals.

Same representation rules as ``ComplexNumber``: a ``kind`` tag selects the
component backend and zero components are stored as ``None``. Multiplication
is the Hamilton product and does not commute.
"""

from __future__ import annotations

import operator
import re
from dataclasses import dataclass
from decimal import Decimal
from fractions import Fraction
from typing import Optional, Tuple, Union

from ..core.backend import Backend, Kind, backend_for, common_kind
from ..core.context import DEFAULT_CONTEXT, ContextLike, as_context, decimal_precision, plain_string, to_decimal
from ..core.errors import DivideByZeroError, MalformedInputError, NarrowingError
from ..engines import roots
from .complex_number import ComplexNumber
from .fraction import FRACTION_TOKEN, BigFraction
from .helpers import RunningMax

Part = Union[BigFraction, Decimal]
Parts = Tuple[Part, Part, Part, Part]


@dataclass(frozen=True, eq=False)
class Quaternion:
    kind: Kind
    a: Optional[Part] = None
    b: Optional[Part] = None
    c: Optional[Part] = None
    d: Optional[Part] = None

    def __post_init__(self) -> None:
        B = backend_for(self.kind)
        for name in ("a", "b", "c", "d"):
            value = getattr(self, name)
            object.__setattr__(self, name, None if value is None or not value else B.coerce(value))
        if self.a is None and self.b is None and self.c is None and self.d is None:
            object.__setattr__(self, "a", B.from_int(0))

    @classmethod
    def rational(cls, a=0, b=0, c=0, d=0) -> "Quaternion":
        return cls("rational", *(BigFraction.value_of(x) for x in (a, b, c, d)))

    @classmethod
    def decimal(cls, a=0, b=0, c=0, d=0, ctx: ContextLike = DEFAULT_CONTEXT) -> "Quaternion":
        ctx = as_context(ctx)
        return cls("decimal", *(to_decimal(x, ctx) for x in (a, b, c, d)))

    @classmethod
    def of(cls, a=0, b=0, c=0, d=0) -> "Quaternion":
        if all(isinstance(x, (int, Fraction, BigFraction)) for x in (a, b, c, d)):
            return cls.rational(a, b, c, d)
        return cls.decimal(a, b, c, d)

    @classmethod
    def from_complex(cls, z: ComplexNumber) -> "Quaternion":
        """``re + im·i``; keeps the complex number's kind."""
        return cls(z.kind, z.re, z.im)

    @classmethod
    def value_of(cls, value) -> "Quaternion":
        if isinstance(value, Quaternion):
            return value
        if isinstance(value, ComplexNumber):
            return cls.from_complex(value)
        if isinstance(value, str):
            return cls.parse(value)
        return cls.of(value)

    @classmethod
    def parse(cls, text: str) -> "Quaternion":
        """``( a, b, c, d )``; decimal components first, then fractions."""
        literal = text.strip()
        m = _DECIMAL_PATTERN.fullmatch(literal)
        if m is not None:
            return cls("decimal", *(Decimal(x) for x in m.groups()))
        m = _RATIONAL_PATTERN.fullmatch(literal)
        if m is not None:
            return cls("rational", *(_rational_part(x) for x in m.groups()))
        raise MalformedInputError("quaternion", text)

    # ------------------------------------------------------------------
    # Components
    # ------------------------------------------------------------------

    def parts(self) -> Parts:
        zero = backend_for(self.kind).from_int(0)
        return tuple(zero if x is None else x for x in (self.a, self.b, self.c, self.d))  # type: ignore[return-value]

    def _coerced(self, B: Backend) -> Parts:
        return tuple(B.coerce(x) for x in self.parts())  # type: ignore[return-value]

    def _align(self, other, ctx: ContextLike):
        o = Quaternion.value_of(other)
        B = backend_for(common_kind(self.kind, o.kind), as_context(ctx))
        return B, self._coerced(B), o._coerced(B)

    @staticmethod
    def _make(B: Backend, *parts: Part) -> "Quaternion":
        return Quaternion(B.kind, *(B.finish(x) for x in parts))

    def is_rational(self) -> bool:
        return self.kind == "rational"

    def is_zero(self) -> bool:
        return not any(self.parts())

    def is_pure_real(self) -> bool:
        return self.b is None and self.c is None and self.d is None

    def is_pure_imaginary(self) -> bool:
        """Only the ``i`` component is present, so narrowing to a complex number is lossless."""
        return self.a is None and self.c is None and self.d is None and self.b is not None

    def is_pure_complex(self) -> bool:
        return self.c is None and self.d is None

    def precision(self) -> int:
        return RunningMax.of(*(_precision(x) for x in (self.a, self.b, self.c, self.d) if x is not None)).value

    def to_complex(self) -> ComplexNumber:
        """Narrow to ``a + b·i``; any ``j`` or ``k`` component is a loss of value."""
        if not self.is_pure_complex():
            raise NarrowingError(f"loss of value narrowing {self} to a complex number")
        return ComplexNumber(self.kind, self.a, self.b)

    # ------------------------------------------------------------------
    # Arithmetic
    # ------------------------------------------------------------------

    def add(self, other, ctx: ContextLike = DEFAULT_CONTEXT) -> "Quaternion":
        B, p, q = self._align(other, ctx)
        return self._make(B, *(B.add(x, y) for x, y in zip(p, q)))

    def subtract(self, other, ctx: ContextLike = DEFAULT_CONTEXT) -> "Quaternion":
        B, p, q = self._align(other, ctx)
        return self._make(B, *(B.sub(x, y) for x, y in zip(p, q)))

    def negate(self) -> "Quaternion":
        B = backend_for(self.kind)
        return Quaternion(self.kind, *(B.neg(x) for x in self.parts()))

    def conjugate(self) -> "Quaternion":
        B = backend_for(self.kind)
        a, b, c, d = self.parts()
        return Quaternion(self.kind, a, B.neg(b), B.neg(c), B.neg(d))

    def multiply(self, other, ctx: ContextLike = DEFAULT_CONTEXT) -> "Quaternion":
        """Hamilton product ``self · other``."""
        B, (a1, b1, c1, d1), (a2, b2, c2, d2) = self._align(other, ctx)
        add, sub, mul = B.add, B.sub, B.mul
        w = sub(sub(sub(mul(a1, a2), mul(b1, b2)), mul(c1, c2)), mul(d1, d2))
        x = sub(add(add(mul(a1, b2), mul(b1, a2)), mul(c1, d2)), mul(d1, c2))
        y = add(add(sub(mul(a1, c2), mul(b1, d2)), mul(c1, a2)), mul(d1, b2))
        z = add(sub(add(mul(a1, d2), mul(b1, c2)), mul(c1, b2)), mul(d1, a2))
        return self._make(B, w, x, y, z)

    def magnitude_squared(self) -> Part:
        B = backend_for(self.kind)
        total = B.from_int(0)
        for x in self.parts():
            total = B.add(total, B.mul(x, x))
        return total

    def magnitude(self, ctx: ContextLike = DEFAULT_CONTEXT) -> Decimal:
        c = as_context(ctx)
        return roots.sqrt(to_decimal(self.magnitude_squared(), c), c)

    def inverse(self, ctx: ContextLike = DEFAULT_CONTEXT) -> "Quaternion":
        """``conj(q) / |q|²``."""
        m = self.magnitude_squared()
        if not m:
            raise DivideByZeroError("inverse of zero quaternion")
        B = backend_for(self.kind, as_context(ctx))
        return self._make(B, *(B.div(x, m) for x in self.conjugate().parts()))

    def divide(self, other, ctx: ContextLike = DEFAULT_CONTEXT) -> "Quaternion":
        """Right division ``self · other⁻¹``."""
        return self.multiply(Quaternion.value_of(other).inverse(ctx), ctx)

    def normal(self, ctx: ContextLike = DEFAULT_CONTEXT) -> "Quaternion":
        """Unit quaternion ``q / |q|``, always decimal."""
        c = as_context(ctx)
        m = self.magnitude(c)
        if not m:
            raise DivideByZeroError("normal of zero quaternion")
        B = backend_for("decimal", c)
        return self._make(B, *(B.div(B.coerce(x), m) for x in self.parts()))

    def power(self, exponent: int, ctx: ContextLike = DEFAULT_CONTEXT) -> "Quaternion":
        """Integer power; powers of a single quaternion commute, so binary exponentiation is exact."""
        n = operator.index(exponent)
        base = self
        if n < 0:
            base = self.inverse(ctx)
            n = -n
        result = Quaternion(self.kind, 1)
        while n:
            if n & 1:
                result = result.multiply(base, ctx)
            n >>= 1
            if n:
                base = base.multiply(base, ctx)
        return result

    # ------------------------------------------------------------------
    # Text and protocol
    # ------------------------------------------------------------------

    def __str__(self) -> str:
        return "( " + ", ".join(_format(x) for x in self.parts()) + " )"

    def __add__(self, other):
        return self.add(other) if _operand(other) else NotImplemented

    def __radd__(self, other):
        return Quaternion.value_of(other).add(self) if _operand(other) else NotImplemented

    def __sub__(self, other):
        return self.subtract(other) if _operand(other) else NotImplemented

    def __rsub__(self, other):
        return Quaternion.value_of(other).subtract(self) if _operand(other) else NotImplemented

    def __mul__(self, other):
        return self.multiply(other) if _operand(other) else NotImplemented

    def __rmul__(self, other):
        return Quaternion.value_of(other).multiply(self) if _operand(other) else NotImplemented

    def __truediv__(self, other):
        return self.divide(other) if _operand(other) else NotImplemented

    def __pow__(self, exponent):
        return self.power(exponent) if isinstance(exponent, int) else NotImplemented

    def __neg__(self) -> "Quaternion":
        return self.negate()

    def __abs__(self) -> Decimal:
        return self.magnitude()

    def __bool__(self) -> bool:
        return not self.is_zero()

    def __eq__(self, other) -> bool:
        if not _operand(other):
            return NotImplemented
        o = Quaternion.value_of(other)
        return _fractions(self) == _fractions(o)

    def __hash__(self) -> int:
        if self.is_pure_real():
            return hash(_fractions(self)[0])
        return hash(_fractions(self))


def _operand(value) -> bool:
    return isinstance(value, (Quaternion, ComplexNumber, int, Fraction, BigFraction, Decimal, float))


def _fractions(q: Quaternion) -> Tuple[BigFraction, ...]:
    return tuple(BigFraction.value_of(x) for x in q.parts())


def _precision(part: Part) -> int:
    if isinstance(part, BigFraction):
        return part.precision()
    return decimal_precision(part)


def _format(part: Part) -> str:
    if isinstance(part, BigFraction):
        return part.to_proper_string()
    return plain_string(part)


def _rational_part(text: str) -> BigFraction:
    text = text.strip()
    if re.fullmatch(_SIGNED_NUMBER, text):
        return BigFraction.from_decimal(Decimal(text))
    return BigFraction.parse(text)


_SIGNED_NUMBER = r"[+\-]?(?:0|[1-9][0-9]*)(?:\.[0-9]*)?(?:[Ee][+\-]?[0-9]+)?"


def _four(component: str) -> "re.Pattern[str]":
    part = rf"\s*({component})\s*"
    return re.compile(rf"\({part},{part},{part},{part}\)")


_DECIMAL_PATTERN = _four(_SIGNED_NUMBER)
_RATIONAL_PATTERN = _four(rf"(?:{FRACTION_TOKEN}|{_SIGNED_NUMBER})")
