"""
numtower.values.continued_fraction
----------------------------------
Simple continued fractions ``a0 + 1/(a1 + 1/(a2 + ...))``.

Terms after the integer part are positive. ``[..., a, 1]`` equals
``[..., a + 1]``, and the constructor always folds a trailing 1 so each
rational value has exactly one representation.

Arithmetic converts to ``BigFraction``, operates exactly and converts back.
"""

from __future__ import annotations

import operator
import re
from dataclasses import dataclass
from decimal import ROUND_FLOOR, Decimal, localcontext
from fractions import Fraction
from typing import List, Tuple

from ..core.context import DEFAULT_CONTEXT, ContextLike, make_context, to_decimal
from ..core.errors import DomainError, MalformedInputError
from .fraction import BigFraction
from .helpers import format_with_separators

_INT = r"[+\-]?[0-9]+"
_PATTERN = re.compile(rf"\[\s*({_INT})\s*(?:;\s*((?:[0-9]+\s*(?:,\s*[0-9]+\s*)*)?))?\]")


@dataclass(frozen=True, eq=False)
class ContinuedFraction:
    integer_part: int
    terms: Tuple[int, ...] = ()

    def __post_init__(self) -> None:
        a0 = operator.index(self.integer_part)
        terms = tuple(operator.index(t) for t in self.terms)
        if any(t <= 0 for t in terms):
            raise DomainError(f"partial denominators must be positive: {terms}")
        if terms and terms[-1] == 1:
            if len(terms) == 1:
                a0, terms = a0 + 1, ()
            else:
                terms = terms[:-2] + (terms[-2] + 1,)
        object.__setattr__(self, "integer_part", a0)
        object.__setattr__(self, "terms", terms)

    # ------------------------------------------------------------------
    # Conversions
    # ------------------------------------------------------------------

    @classmethod
    def from_fraction(cls, value) -> "ContinuedFraction":
        """Euclid's algorithm with floor division; proper fractions get a leading 0."""
        f = BigFraction.value_of(value)
        a, b = f.numerator, f.denominator
        q, r = divmod(a, b)
        a0 = q
        terms: List[int] = []
        a, b = b, r
        while b:
            q, r = divmod(a, b)
            terms.append(q)
            a, b = b, r
        return cls(a0, tuple(terms))

    @classmethod
    def from_decimal(cls, value, precision: int) -> "ContinuedFraction":
        """Expand until the remainder drops below ``10**-precision`` or ``precision*5//2`` terms."""
        if precision <= 0:
            raise ValueError("precision must be > 0")
        x = to_decimal(value, make_context(precision))
        epsilon = Decimal(1).scaleb(-precision)
        ceiling = max(1, precision * 5 // 2)
        with localcontext(make_context(precision + 10)):
            a0 = int(x.to_integral_value(rounding=ROUND_FLOOR))
            rest = x - a0
            terms: List[int] = []
            while rest > epsilon and len(terms) < ceiling:
                x = 1 / rest
                a = int(x.to_integral_value(rounding=ROUND_FLOOR))
                terms.append(a)
                rest = x - a
        return cls(a0, tuple(terms))

    @classmethod
    def value_of(cls, value) -> "ContinuedFraction":
        if isinstance(value, ContinuedFraction):
            return value
        if isinstance(value, str):
            return cls.parse(value)
        return cls.from_fraction(value)

    @classmethod
    def parse(cls, text: str) -> "ContinuedFraction":
        """Parse ``"[a0;a1,a2,...]"`` or ``"[a0]"``."""
        m = _PATTERN.fullmatch(text.strip())
        if m is None:
            raise MalformedInputError("continued fraction", text)
        head, tail = m.groups()
        terms = tuple(int(t) for t in tail.split(",")) if tail and tail.strip() else ()
        try:
            return cls(int(head), terms)
        except DomainError:
            raise MalformedInputError("continued fraction", text) from None

    def convergents(self) -> List[BigFraction]:
        """p_k / q_k for every prefix, by the continuant recurrence."""
        p_prev, p = 1, self.integer_part
        q_prev, q = 0, 1
        out = [BigFraction(p, q)]
        for a in self.terms:
            p_prev, p = p, a * p + p_prev
            q_prev, q = q, a * q + q_prev
            out.append(BigFraction(p, q))
        return out

    def to_fraction(self) -> BigFraction:
        p_prev, p = 1, self.integer_part
        q_prev, q = 0, 1
        for a in self.terms:
            p_prev, p = p, a * p + p_prev
            q_prev, q = q, a * q + q_prev
        return BigFraction(p, q)

    def to_decimal(self, ctx: ContextLike = DEFAULT_CONTEXT) -> Decimal:
        return self.to_fraction().to_decimal(ctx)

    # ------------------------------------------------------------------
    # Arithmetic through BigFraction
    # ------------------------------------------------------------------

    def add(self, other) -> "ContinuedFraction":
        return ContinuedFraction.from_fraction(self.to_fraction().add(_fraction(other)))

    def subtract(self, other) -> "ContinuedFraction":
        return ContinuedFraction.from_fraction(self.to_fraction().subtract(_fraction(other)))

    def multiply(self, other) -> "ContinuedFraction":
        return ContinuedFraction.from_fraction(self.to_fraction().multiply(_fraction(other)))

    def divide(self, other) -> "ContinuedFraction":
        return ContinuedFraction.from_fraction(self.to_fraction().divide(_fraction(other)))

    def idivide(self, other) -> "ContinuedFraction":
        return ContinuedFraction(self.to_fraction().divide(_fraction(other)).floor().numerator)

    def remainder(self, other) -> "ContinuedFraction":
        return ContinuedFraction.from_fraction(self.to_fraction().remainder(_fraction(other)))

    def modulus(self, other) -> "ContinuedFraction":
        return ContinuedFraction.from_fraction(self.to_fraction().modulus(_fraction(other)))

    def power(self, exponent: int) -> "ContinuedFraction":
        return ContinuedFraction.from_fraction(self.to_fraction().pow(exponent))

    def negate(self) -> "ContinuedFraction":
        return ContinuedFraction.from_fraction(self.to_fraction().negate())

    def mediant(self, other) -> "ContinuedFraction":
        return ContinuedFraction.from_fraction(self.to_fraction().mediant(_fraction(other)))

    def compare(self, other) -> int:
        return self.to_fraction().compare(_fraction(other))

    # ------------------------------------------------------------------
    # Text
    # ------------------------------------------------------------------

    def __str__(self) -> str:
        if not self.terms:
            return f"[{self.integer_part}]"
        return f"[{self.integer_part};{','.join(map(str, self.terms))}]"

    def to_format_string(self, separators: bool = True, extra_space: bool = False) -> str:
        """Like ``str`` but with digit grouping and optional padding.

        Digits are grouped with ``_`` rather than ``,``, which already separates
        terms. ``extra_space`` pads the brackets and the ``;``: ``[ 3 ; 1, 7 ]``.
        """
        def fmt(value: int) -> str:
            return format_with_separators(value, separators, sep="_")

        head = fmt(self.integer_part)
        pad = " " if extra_space else ""
        if not self.terms:
            return f"[{pad}{head}{pad}]"
        body = f",{pad}".join(fmt(t) for t in self.terms)
        return f"[{pad}{head}{pad};{pad}{body}{pad}]"

    # ------------------------------------------------------------------
    # Python protocol
    # ------------------------------------------------------------------

    def __add__(self, other):
        return self.add(other) if _operand(other) else NotImplemented

    __radd__ = __add__

    def __sub__(self, other):
        return self.subtract(other) if _operand(other) else NotImplemented

    def __rsub__(self, other):
        return ContinuedFraction.value_of(other).subtract(self) if _operand(other) else NotImplemented

    def __mul__(self, other):
        return self.multiply(other) if _operand(other) else NotImplemented

    __rmul__ = __mul__

    def __truediv__(self, other):
        return self.divide(other) if _operand(other) else NotImplemented

    def __rtruediv__(self, other):
        return ContinuedFraction.value_of(other).divide(self) if _operand(other) else NotImplemented

    def __floordiv__(self, other):
        return self.idivide(other) if _operand(other) else NotImplemented

    def __mod__(self, other):
        return self.modulus(other) if _operand(other) else NotImplemented

    def __pow__(self, exponent):
        return self.power(exponent) if isinstance(exponent, int) else NotImplemented

    def __neg__(self) -> "ContinuedFraction":
        return self.negate()

    def __eq__(self, other) -> bool:
        if isinstance(other, ContinuedFraction):
            return self.integer_part == other.integer_part and self.terms == other.terms
        if _operand(other):
            return self.to_fraction() == _fraction(other)
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.to_fraction())

    def __lt__(self, other):
        return self.compare(other) < 0 if _operand(other) else NotImplemented

    def __le__(self, other):
        return self.compare(other) <= 0 if _operand(other) else NotImplemented

    def __gt__(self, other):
        return self.compare(other) > 0 if _operand(other) else NotImplemented

    def __ge__(self, other):
        return self.compare(other) >= 0 if _operand(other) else NotImplemented


def _operand(value) -> bool:
    return isinstance(value, (ContinuedFraction, BigFraction, Fraction, int))


def _fraction(value) -> BigFraction:
    if isinstance(value, ContinuedFraction):
        return value.to_fraction()
    return BigFraction.value_of(value)
