"""
numtower.values.fraction
------------------------
Exact rationals kept in lowest terms.

``BigFraction`` is the exact foundation of the tower. Every constructor and every
arithmetic result passes through ``__post_init__``, which reduces by the gcd,
moves the sign onto the numerator and canonicalizes zero as ``0/1``.

Interoperates with ``int`` and ``fractions.Fraction`` (equal values hash equal).
"""

from __future__ import annotations

import math
import operator
import re
from dataclasses import dataclass
from decimal import Decimal
from fractions import Fraction
from typing import Callable, Optional, Pattern, Tuple, Union

from ..core.context import DEFAULT_CONTEXT, ContextLike, as_context, digit_length, fixup
from ..core.errors import DivideByZeroError, DomainError, MalformedInputError, PrecisionLossError

RationalLike = Union["BigFraction", Fraction, int]

# Unicode vulgar fraction code points.
VULGAR_FRACTIONS = {
    "¼": (1, 4),
    "½": (1, 2),
    "¾": (3, 4),
    "⅐": (1, 7),
    "⅑": (1, 9),
    "⅒": (1, 10),
    "⅓": (1, 3),
    "⅔": (2, 3),
    "⅕": (1, 5),
    "⅖": (2, 5),
    "⅗": (3, 5),
    "⅘": (4, 5),
    "⅙": (1, 6),
    "⅚": (5, 6),
    "⅛": (1, 8),
    "⅜": (3, 8),
    "⅝": (5, 8),
    "⅞": (7, 8),
    "↉": (0, 3),
}

SIGNED_INT = r"[+\-]?[0-9]+"
GLYPH = "[" + "".join(VULGAR_FRACTIONS) + "]"
_SEP = r"(?:\s+|\s*[,/;]\s*)"
# Inside complex literals the comma separates the parts, so it cannot join a fraction.
_PART_SEP = r"(?:\s+|\s*[/;]\s*)"

FRACTION_TOKEN = (
    rf"(?:{SIGNED_INT}{_PART_SEP}{SIGNED_INT}{_PART_SEP}{SIGNED_INT}"
    rf"|{SIGNED_INT}{_PART_SEP}{SIGNED_INT}"
    rf"|{SIGNED_INT}{_PART_SEP}?{GLYPH}"
    rf"|[+\-]?{GLYPH})"
)


def int_lcm(a: int, b: int) -> int:
    g = math.gcd(a, b)
    if g == 0:
        raise DivideByZeroError()
    return abs(a // g * b)


def _trunc_div(n: int, d: int) -> int:
    q = abs(n) // abs(d)
    return q if (n < 0) == (d < 0) else -q


@dataclass(frozen=True, eq=False)
class BigFraction:
    numerator: int
    denominator: int = 1

    def __post_init__(self) -> None:
        n = operator.index(self.numerator)
        d = operator.index(self.denominator)
        if d == 0:
            raise DivideByZeroError("zero denominator")
        if n == 0:
            n, d = 0, 1
        else:
            g = math.gcd(n, d)
            if d < 0:
                g = -g
            n, d = n // g, d // g
        object.__setattr__(self, "numerator", n)
        object.__setattr__(self, "denominator", d)

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def mixed(cls, whole: int, fraction: RationalLike) -> "BigFraction":
        """``w n/d``: negative when either part is, magnitude ``|w| + |n/d|``."""
        frac = _coerce(fraction)
        if frac is None:
            raise TypeError(f"unsupported fractional part {fraction!r}")
        value = abs(frac) + abs(whole)
        return -value if whole < 0 or frac.numerator < 0 else value

    @classmethod
    def from_decimal(cls, value: Decimal) -> "BigFraction":
        """Exact conversion using a power-of-ten denominator."""
        if not value.is_finite():
            raise DomainError(f"cannot convert {value} to a fraction")
        sign, digits, exponent = value.as_tuple()
        unscaled = int("".join(map(str, digits)) or "0")
        if sign:
            unscaled = -unscaled
        if exponent >= 0:
            return cls(unscaled * 10**exponent)
        return cls(unscaled, 10**-exponent)

    @classmethod
    def from_float(cls, value: float) -> "BigFraction":
        """Through the shortest round-tripping repr, so ``0.1`` becomes ``1/10``."""
        if math.isnan(value) or math.isinf(value):
            raise DomainError(f"cannot convert {value} to a fraction")
        return cls.from_decimal(Decimal(repr(value)))

    @classmethod
    def value_of(cls, value) -> "BigFraction":
        if isinstance(value, BigFraction):
            return value
        if isinstance(value, str):
            return cls.parse(value)
        if isinstance(value, Decimal):
            return cls.from_decimal(value)
        if isinstance(value, float):
            return cls.from_float(value)
        frac = _coerce(value)
        if frac is None:
            raise TypeError(f"cannot convert {type(value).__name__} to BigFraction")
        return frac

    @classmethod
    def parse(cls, text: str) -> "BigFraction":
        """Parse ``"n"``, ``"n/d"``, ``"w n/d"``, ``"w½"`` or a bare glyph such as ``"¾"``."""
        literal = text.strip()
        for _name, pattern, build in _GRAMMARS:
            m = pattern.fullmatch(literal)
            if m is not None:
                return build(*m.groups())
        raise MalformedInputError("fraction", text)

    # ------------------------------------------------------------------
    # Arithmetic
    # ------------------------------------------------------------------

    def add(self, other) -> "BigFraction":
        o = BigFraction.value_of(other)
        return BigFraction(
            self.numerator * o.denominator + o.numerator * self.denominator,
            self.denominator * o.denominator,
        )

    def subtract(self, other) -> "BigFraction":
        return self.add(BigFraction.value_of(other).negate())

    def multiply(self, other) -> "BigFraction":
        o = BigFraction.value_of(other)
        return BigFraction(self.numerator * o.numerator, self.denominator * o.denominator)

    def divide(self, other) -> "BigFraction":
        return self.multiply(BigFraction.value_of(other).reciprocal())

    def reciprocal(self) -> "BigFraction":
        if self.numerator == 0:
            raise DivideByZeroError()
        return BigFraction(self.denominator, self.numerator)

    def negate(self) -> "BigFraction":
        return BigFraction(-self.numerator, self.denominator)

    def abs(self) -> "BigFraction":
        return self if self.numerator >= 0 else self.negate()

    def remainder(self, other) -> "BigFraction":
        """Remainder of truncating division; takes the sign of ``self``."""
        o = BigFraction.value_of(other)
        if o.numerator == 0:
            raise DivideByZeroError()
        q = self.divide(o)
        return self.subtract(o.multiply(_trunc_div(q.numerator, q.denominator)))

    def modulus(self, other) -> "BigFraction":
        """``x - y*floor(x/y)``; takes the sign of ``other``."""
        o = BigFraction.value_of(other)
        if o.numerator == 0:
            raise DivideByZeroError()
        q = self.divide(o)
        return self.subtract(o.multiply(q.numerator // q.denominator))

    def pow(self, exponent: int) -> "BigFraction":
        e = operator.index(exponent)
        if e < 0:
            return self.reciprocal().pow(-e)
        return BigFraction(self.numerator**e, self.denominator**e)

    def gcd(self, other) -> "BigFraction":
        o = BigFraction.value_of(other)
        return BigFraction(
            math.gcd(self.numerator, o.numerator),
            int_lcm(self.denominator, o.denominator),
        )

    def lcm(self, other) -> "BigFraction":
        o = BigFraction.value_of(other)
        return BigFraction(
            int_lcm(self.numerator, o.numerator),
            math.gcd(self.denominator, o.denominator),
        )

    def mediant(self, other) -> "BigFraction":
        o = BigFraction.value_of(other)
        return BigFraction(self.numerator + o.numerator, self.denominator + o.denominator)

    def floor(self) -> "BigFraction":
        return BigFraction(self.numerator // self.denominator)

    def ceil(self) -> "BigFraction":
        return BigFraction(-(-self.numerator // self.denominator))

    # ------------------------------------------------------------------
    # Inspection / conversion
    # ------------------------------------------------------------------

    def compare(self, other) -> int:
        o = BigFraction.value_of(other)
        lhs = self.numerator * o.denominator
        rhs = o.numerator * self.denominator
        return (lhs > rhs) - (lhs < rhs)

    def signum(self) -> int:
        return (self.numerator > 0) - (self.numerator < 0)

    def is_zero(self) -> bool:
        return self.numerator == 0

    def is_whole_number(self) -> bool:
        return self.denominator == 1

    def precision(self) -> int:
        return max(digit_length(self.numerator), digit_length(self.denominator))

    def to_integer(self) -> int:
        return _trunc_div(self.numerator, self.denominator)

    def to_integer_exact(self) -> int:
        if self.denominator != 1:
            raise PrecisionLossError(f"{self} is not a whole number")
        return self.numerator

    def int_value_exact(self) -> int:
        value = self.to_integer_exact()
        if not -(2**31) <= value < 2**31:
            raise PrecisionLossError(f"{value} out of 32-bit integer range")
        return value

    def to_decimal(self, ctx: ContextLike = DEFAULT_CONTEXT) -> Decimal:
        c = as_context(ctx)
        return fixup(c.divide(Decimal(self.numerator), Decimal(self.denominator)), c)

    def to_fraction(self) -> Fraction:
        return Fraction(self.numerator, self.denominator)

    def to_proper_string(self) -> str:
        """Mixed form ``"w n/d"`` when the magnitude exceeds one."""
        n, d = self.numerator, self.denominator
        if d == 1 or abs(n) < d:
            return str(self)
        whole, rest = divmod(abs(n), d)
        sign = "-" if n < 0 else ""
        return f"{sign}{whole} {rest}/{d}"

    def __str__(self) -> str:
        if self.denominator == 1:
            return str(self.numerator)
        return f"{self.numerator}/{self.denominator}"

    # ------------------------------------------------------------------
    # Python numeric protocol
    # ------------------------------------------------------------------

    def __add__(self, other):
        o = _coerce(other)
        return NotImplemented if o is None else self.add(o)

    def __radd__(self, other):
        o = _coerce(other)
        return NotImplemented if o is None else o.add(self)

    def __sub__(self, other):
        o = _coerce(other)
        return NotImplemented if o is None else self.subtract(o)

    def __rsub__(self, other):
        o = _coerce(other)
        return NotImplemented if o is None else o.subtract(self)

    def __mul__(self, other):
        o = _coerce(other)
        return NotImplemented if o is None else self.multiply(o)

    def __rmul__(self, other):
        o = _coerce(other)
        return NotImplemented if o is None else o.multiply(self)

    def __truediv__(self, other):
        o = _coerce(other)
        return NotImplemented if o is None else self.divide(o)

    def __rtruediv__(self, other):
        o = _coerce(other)
        return NotImplemented if o is None else o.divide(self)

    def __floordiv__(self, other):
        o = _coerce(other)
        return NotImplemented if o is None else math.floor(self.divide(o))

    def __mod__(self, other):
        o = _coerce(other)
        return NotImplemented if o is None else self.modulus(o)

    def __divmod__(self, other):
        o = _coerce(other)
        if o is None:
            return NotImplemented
        return math.floor(self.divide(o)), self.modulus(o)

    def __pow__(self, exponent):
        if isinstance(exponent, int):
            return self.pow(exponent)
        return NotImplemented

    def __neg__(self) -> "BigFraction":
        return self.negate()

    def __pos__(self) -> "BigFraction":
        return self

    def __abs__(self) -> "BigFraction":
        return self.abs()

    def __bool__(self) -> bool:
        return self.numerator != 0

    def __int__(self) -> int:
        return self.to_integer()

    def __float__(self) -> float:
        return self.numerator / self.denominator

    def __trunc__(self) -> int:
        return self.to_integer()

    def __floor__(self) -> int:
        return self.numerator // self.denominator

    def __ceil__(self) -> int:
        return -(-self.numerator // self.denominator)

    def __round__(self, ndigits: Optional[int] = None):
        r = round(self.to_fraction(), ndigits)
        return r if ndigits is None else BigFraction(r.numerator, r.denominator)

    def __eq__(self, other) -> bool:
        if isinstance(other, BigFraction):
            return self.numerator == other.numerator and self.denominator == other.denominator
        if isinstance(other, (int, Fraction, Decimal, float)):
            return self.to_fraction() == other
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.to_fraction())

    def __lt__(self, other):
        o = _coerce(other)
        if o is None:
            return self.to_fraction() < other if isinstance(other, (Decimal, float)) else NotImplemented
        return self.compare(o) < 0

    def __le__(self, other):
        o = _coerce(other)
        if o is None:
            return self.to_fraction() <= other if isinstance(other, (Decimal, float)) else NotImplemented
        return self.compare(o) <= 0

    def __gt__(self, other):
        o = _coerce(other)
        if o is None:
            return self.to_fraction() > other if isinstance(other, (Decimal, float)) else NotImplemented
        return self.compare(o) > 0

    def __ge__(self, other):
        o = _coerce(other)
        if o is None:
            return self.to_fraction() >= other if isinstance(other, (Decimal, float)) else NotImplemented
        return self.compare(o) >= 0


ZERO = BigFraction(0)
ONE = BigFraction(1)
HALF = BigFraction(1, 2)


def _coerce(value) -> Optional[BigFraction]:
    if isinstance(value, BigFraction):
        return value
    if isinstance(value, int):
        return BigFraction(value)
    if isinstance(value, Fraction):
        return BigFraction(value.numerator, value.denominator)
    return None


def _glyph(sign: str, glyph: str) -> BigFraction:
    n, d = VULGAR_FRACTIONS[glyph]
    return BigFraction(-n if sign == "-" else n, d)


# Ordered: the first grammar that matches the whole literal wins.
_GRAMMARS: Tuple[Tuple[str, Pattern[str], Callable[..., BigFraction]], ...] = (
    (
        "mixed",
        re.compile(rf"({SIGNED_INT}){_SEP}({SIGNED_INT}){_SEP}({SIGNED_INT})"),
        lambda w, n, d: BigFraction.mixed(int(w), BigFraction(int(n), int(d))),
    ),
    (
        "ratio",
        re.compile(rf"({SIGNED_INT}){_SEP}({SIGNED_INT})"),
        lambda n, d: BigFraction(int(n), int(d)),
    ),
    (
        "whole_glyph",
        re.compile(rf"({SIGNED_INT}){_SEP}?({GLYPH})"),
        lambda w, g: BigFraction.mixed(int(w), _glyph("+", g)),
    ),
    (
        "glyph",
        re.compile(rf"([+\-]?)({GLYPH})"),
        _glyph,
    ),
    (
        "integer",
        re.compile(rf"({SIGNED_INT})"),
        lambda n: BigFraction(int(n)),
    ),
)
