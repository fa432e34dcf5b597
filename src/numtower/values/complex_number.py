"""
numtower.values.complex_number
------------------------------
Complex numbers over exact rationals or decimals.

``ComplexNumber`` is a single frozen dataclass tagged by ``kind``:

- ``"rational"``: parts are ``BigFraction``; arithmetic is exact.
- ``"decimal"``: parts are ``Decimal``; division and every operation that
  needs the engine (sqrt, trig, powers) rounds to a ``decimal.Context``.

A zero part is stored as ``None`` ("absent"). When both parts would be
absent the real part is kept as the kind's zero, so zero has a single
representation and ``is_pure_imaginary()`` is false for it.

Binary operations align both operands through ``_align``: the result stays
rational only when both operands are rational, otherwise both are coerced to
decimal first. Plain ints, ``fractions.Fraction`` and ``BigFraction`` operands
count as rational reals; ``Decimal`` and ``float`` as decimal reals.

Text: ``str()`` gives ``( re, im )`` and ``ComplexNumber.parse`` reads it
back. The parser tries the decimal grammars first and the fraction grammars
only when none of them match.
"""

from __future__ import annotations

import operator
import re
from dataclasses import dataclass
from decimal import Decimal
from fractions import Fraction
from typing import Any, Callable, Dict, List, Mapping, Optional, Pattern, Sequence, Tuple, Union

from ..core.backend import Backend, Kind, backend_for, common_kind
from ..core.context import (
    DEFAULT_CONTEXT,
    EXACT_CONTEXT,
    ContextLike,
    as_context,
    decimal_precision,
    fixup,
    make_context,
    plain_string,
    to_decimal,
    working_context,
)
from ..core.engine import resolve
from ..core.errors import DivideByZeroError, MalformedInputError
from ..engines import logexp, roots, trig
from .fraction import FRACTION_TOKEN, BigFraction
from .helpers import RunningMax

Part = Union[BigFraction, Decimal]

IMAGINARY_UNIT = "ⅈ"


def _is_zero(part: Optional[Part]) -> bool:
    return part is None or not part


@dataclass(frozen=True, eq=False)
class ComplexNumber:
    kind: Kind
    re: Optional[Part] = None
    im: Optional[Part] = None

    def __post_init__(self) -> None:
        B = backend_for(self.kind)
        re = None if _is_zero(self.re) else B.coerce(self.re)
        im = None if _is_zero(self.im) else B.coerce(self.im)
        if re is None and im is None:
            re = B.from_int(0)
        object.__setattr__(self, "re", re)
        object.__setattr__(self, "im", im)

    # ------------------------------------------------------------------
    # Smart constructors
    # ------------------------------------------------------------------

    @classmethod
    def rational(cls, re=0, im=0) -> "ComplexNumber":
        return cls("rational", BigFraction.value_of(re), BigFraction.value_of(im))

    @classmethod
    def decimal(cls, re=0, im=0, ctx: ContextLike = DEFAULT_CONTEXT) -> "ComplexNumber":
        c = as_context(ctx)
        return cls("decimal", to_decimal(re, c), to_decimal(im, c))

    @classmethod
    def of(cls, re=0, im=0) -> "ComplexNumber":
        """Rational when every part is exact (int, Fraction, BigFraction), decimal otherwise."""
        if _exact(re) and _exact(im):
            return cls.rational(re, im)
        return cls.decimal(re, im)

    @classmethod
    def value_of(cls, value) -> "ComplexNumber":
        if isinstance(value, ComplexNumber):
            return value
        if isinstance(value, str):
            return cls.parse(value)
        if isinstance(value, complex):
            return cls.decimal(value.real, value.imag)
        return cls.of(value)

    @classmethod
    def polar(cls, radius, theta, ctx: Optional[ContextLike] = None) -> "ComplexNumber":
        """``radius·(cos θ + i sin θ)`` at the larger input precision, floored at
        ``EngineSettings.polar_min_precision`` (and at ``ctx`` when given)."""
        settings = resolve(None).settings
        r = to_decimal(radius)
        t = to_decimal(theta)
        prec = max(decimal_precision(r), decimal_precision(t), settings.polar_min_precision)
        if ctx is not None:
            prec = max(prec, as_context(ctx).prec)
        c = make_context(prec)
        return cls("decimal", c.multiply(r, trig.cos(t, c)), c.multiply(r, trig.sin(t, c)))

    @classmethod
    def from_list(cls, values: Sequence[Any]) -> "ComplexNumber":
        """``[re]``, ``[re, im]`` or ``[re, im, rational]``."""
        if not 1 <= len(values) <= 3:
            raise ValueError(f"expected 1 to 3 items, got {len(values)}")
        re = values[0]
        im = values[1] if len(values) > 1 else 0
        if len(values) == 3:
            return cls.rational(re, im) if values[2] else cls.decimal(re, im)
        return cls.of(re, im)

    @classmethod
    def from_map(cls, values: Mapping[str, Any]) -> "ComplexNumber":
        """Rectangular ``{"r": .., "i": .., "rational": ..}`` or polar
        ``{"radius": .., "theta": ..}`` (aliases ``r``/``rad``, ``θ``/``Θ``/``angle``)."""
        keys = {k.lower() if k.isascii() else k: v for k, v in values.items()}
        theta_key = next((k for k in _THETA_KEYS if k in keys), None)
        if theta_key is not None:
            radius_key = next((k for k in _RADIUS_KEYS if k in keys), None)
            if radius_key is None:
                raise ValueError("polar map needs a radius")
            return cls.polar(keys[radius_key], keys[theta_key])
        re = keys.get("r", 0)
        im = keys.get("i", 0)
        if "rational" in keys:
            return cls.rational(re, im) if keys["rational"] else cls.decimal(re, im)
        return cls.of(re, im)

    # ------------------------------------------------------------------
    # Parts
    # ------------------------------------------------------------------

    @property
    def real(self) -> Part:
        return self.re if self.re is not None else backend_for(self.kind).from_int(0)

    @property
    def imag(self) -> Part:
        return self.im if self.im is not None else backend_for(self.kind).from_int(0)

    def is_rational(self) -> bool:
        return self.kind == "rational"

    def real_decimal(self, ctx: ContextLike = DEFAULT_CONTEXT) -> Decimal:
        return to_decimal(self.real, as_context(ctx))

    def imag_decimal(self, ctx: ContextLike = DEFAULT_CONTEXT) -> Decimal:
        return to_decimal(self.imag, as_context(ctx))

    def real_fraction(self) -> BigFraction:
        return BigFraction.value_of(self.real)

    def imag_fraction(self) -> BigFraction:
        return BigFraction.value_of(self.imag)

    def _parts(self, B: Backend) -> Tuple[Part, Part]:
        return B.coerce(self.real), B.coerce(self.imag)

    def _align(self, other, ctx: ContextLike):
        o = ComplexNumber.value_of(other)
        B = backend_for(common_kind(self.kind, o.kind), as_context(ctx))
        return B, self._parts(B), o._parts(B)

    @staticmethod
    def _make(B: Backend, re: Part, im: Part) -> "ComplexNumber":
        return ComplexNumber(B.kind, B.finish(re), B.finish(im))

    # ------------------------------------------------------------------
    # Predicates
    # ------------------------------------------------------------------

    def is_zero(self) -> bool:
        return self.im is None and not self.re

    def is_pure_real(self) -> bool:
        return self.im is None

    def is_pure_imaginary(self) -> bool:
        return self.re is None

    def is_pure_integer(self) -> bool:
        return all(_is_whole(p) for p in (self.real, self.imag))

    def precision(self) -> int:
        return RunningMax.of(*(_precision(p) for p in (self.re, self.im) if p is not None)).value

    # ------------------------------------------------------------------
    # Arithmetic
    # ------------------------------------------------------------------

    def negate(self) -> "ComplexNumber":
        B = backend_for(self.kind)
        a, b = self._parts(B)
        return ComplexNumber(self.kind, B.neg(a), B.neg(b))

    def conjugate(self) -> "ComplexNumber":
        B = backend_for(self.kind)
        a, b = self._parts(B)
        return ComplexNumber(self.kind, a, B.neg(b))

    def add(self, other, ctx: ContextLike = DEFAULT_CONTEXT) -> "ComplexNumber":
        B, (a, b), (c, d) = self._align(other, ctx)
        return self._make(B, B.add(a, c), B.add(b, d))

    def subtract(self, other, ctx: ContextLike = DEFAULT_CONTEXT) -> "ComplexNumber":
        B, (a, b), (c, d) = self._align(other, ctx)
        return self._make(B, B.sub(a, c), B.sub(b, d))

    def multiply(self, other, ctx: ContextLike = DEFAULT_CONTEXT) -> "ComplexNumber":
        B, (a, b), (c, d) = self._align(other, ctx)
        return self._make(B, B.sub(B.mul(a, c), B.mul(b, d)), B.add(B.mul(a, d), B.mul(b, c)))

    def divide(self, other, ctx: ContextLike = DEFAULT_CONTEXT) -> "ComplexNumber":
        """``self * conj(other) / (other * conj(other))``; the denominator is real."""
        B, (a, b), (c, d) = self._align(other, ctx)
        denominator = B.add(B.mul(c, c), B.mul(d, d))
        if not denominator:
            raise DivideByZeroError()
        re = B.add(B.mul(a, c), B.mul(b, d))
        im = B.sub(B.mul(b, c), B.mul(a, d))
        return self._make(B, B.div(re, denominator), B.div(im, denominator))

    def idivide(self, other, ctx: ContextLike = DEFAULT_CONTEXT) -> "ComplexNumber":
        """Gaussian integer quotient: both parts of the quotient rounded half-even."""
        q = self.divide(other, ctx)
        B = backend_for(q.kind, as_context(ctx))
        a, b = q._parts(B)
        return ComplexNumber(q.kind, B.round_half_even(a), B.round_half_even(b))

    def remainder(self, other, ctx: ContextLike = DEFAULT_CONTEXT) -> "ComplexNumber":
        return self.subtract(self.idivide(other, ctx).multiply(other, ctx), ctx)

    def divide_and_remainder(self, other, ctx: ContextLike = DEFAULT_CONTEXT) -> Tuple["ComplexNumber", "ComplexNumber"]:
        q = self.idivide(other, ctx)
        return q, self.subtract(q.multiply(other, ctx), ctx)

    def modulus(self, other, ctx: ContextLike = DEFAULT_CONTEXT) -> "ComplexNumber":
        """``self - other * floor(self / other)`` with the floor taken per part."""
        q = self.divide(other, ctx)
        B = backend_for(q.kind, as_context(ctx))
        a, b = q._parts(B)
        floored = ComplexNumber(q.kind, B.floor(a), B.floor(b))
        return self.subtract(floored.multiply(other, ctx), ctx)

    def power(self, exponent: int, ctx: ContextLike = DEFAULT_CONTEXT) -> "ComplexNumber":
        """Integer power by binary exponentiation; negative exponents invert first."""
        n = operator.index(exponent)
        base = self
        if n < 0:
            base = ComplexNumber(self.kind, 1).divide(self, ctx)
            n = -n
        result = ComplexNumber(self.kind, 1)
        while n:
            if n & 1:
                result = result.multiply(base, ctx)
            n >>= 1
            if n:
                base = base.multiply(base, ctx)
        return result

    def pow(self, exponent, ctx: ContextLike = DEFAULT_CONTEXT) -> "ComplexNumber":
        """Real power. Whole exponents use ``power``; others use De Moivre.

        A negative real part is handled by raising ``-self`` and negating the
        result, which is the principal value only for some exponents.
        """
        c = as_context(ctx)
        if isinstance(exponent, int):
            return self.power(exponent, c)
        if isinstance(exponent, (BigFraction, Fraction)):
            if exponent.denominator == 1:
                return self.power(exponent.numerator, c)
            n = to_decimal(exponent, working_context(c, 4))
        else:
            n = to_decimal(exponent, c)
            if n == n.to_integral_value():
                return self.power(int(n), c)
        if self.is_zero():
            if n < 0:
                raise DivideByZeroError("zero to a negative power")
            return ComplexNumber("decimal", 0)
        negative = self.real < 0
        base = self.negate() if negative else self
        work = working_context(c, 4)
        theta = base.theta(work)
        radius = base.radius(work)
        magnitude = logexp.power(radius, n, work)
        result = ComplexNumber.polar(magnitude, work.multiply(n, theta), c)
        result = ComplexNumber("decimal", c.plus(result.real), c.plus(result.imag))
        return result.negate() if negative else result

    def sqrt(self, ctx: ContextLike = DEFAULT_CONTEXT) -> "ComplexNumber":
        """Principal square root ``s`` with ``Re(s) >= 0`` and ``Re(s)·Im(s) = b/2``."""
        c = as_context(ctx)
        if self.is_zero():
            return ComplexNumber("decimal", 0)
        work = working_context(c, 4)
        a = self.real_decimal(work)
        b = self.imag_decimal(work)
        r = self.radius(work)
        if a >= 0:
            re = roots.sqrt(work.divide(work.add(r, a), 2), work)
            im = work.divide(b, 2 * re)
        else:
            im = roots.sqrt(work.divide(work.subtract(r, a), 2), work)
            if b < 0:
                im = -im
            re = work.divide(b, 2 * im)
        return ComplexNumber("decimal", c.plus(re), c.plus(im))

    def floor(self) -> "ComplexNumber":
        B = backend_for("decimal")
        a, b = self._parts(B)
        return ComplexNumber("decimal", B.floor(a), B.floor(b))

    def ceil(self) -> "ComplexNumber":
        B = backend_for("decimal")
        a, b = self._parts(B)
        return ComplexNumber("decimal", B.ceil(a), B.ceil(b))

    def dot(self, other, ctx: ContextLike = DEFAULT_CONTEXT) -> Part:
        """``re1·re2 + im1·im2``, treating both values as 2-vectors."""
        B, (a, b), (c, d) = self._align(other, ctx)
        return B.finish(B.add(B.mul(a, c), B.mul(b, d)))

    # ------------------------------------------------------------------
    # Polar view
    # ------------------------------------------------------------------

    def radius(self, ctx: ContextLike = DEFAULT_CONTEXT) -> Decimal:
        c = as_context(ctx)
        if self.is_pure_real():
            return fixup(abs(self.real_decimal(working_context(c, 2))), c)
        if self.is_pure_imaginary():
            return fixup(abs(self.imag_decimal(working_context(c, 2))), c)
        if self.is_rational():
            square = self.real * self.real + self.imag * self.imag
            return roots.sqrt(square.to_decimal(working_context(c, 4)), c)
        a, b = self.re, self.im
        return roots.sqrt(EXACT_CONTEXT.fma(a, a, EXACT_CONTEXT.multiply(b, b)), c)

    def theta(self, ctx: ContextLike = DEFAULT_CONTEXT) -> Decimal:
        c = as_context(ctx)
        work = working_context(c, 4)
        return trig.atan2(self.imag_decimal(work), self.real_decimal(work), c)

    def signum(self, ctx: ContextLike = DEFAULT_CONTEXT) -> "ComplexNumber":
        """Unit value in the direction of ``self`` (zero stays zero)."""
        if self.is_zero():
            return self
        c = as_context(ctx)
        return self.divide(ComplexNumber("decimal", self.radius(working_context(c, 4))), c)

    def compare_to(self, other) -> int:
        """Real order for two pure reals, imaginary order for two pure
        imaginaries, radius order otherwise."""
        o = ComplexNumber.value_of(other)
        if self.is_pure_real() and o.is_pure_real():
            x, y = self.real_fraction(), o.real_fraction()
        elif self.is_pure_imaginary() and o.is_pure_imaginary():
            x, y = self.imag_fraction(), o.imag_fraction()
        else:
            x = self.real_fraction() ** 2 + self.imag_fraction() ** 2
            y = o.real_fraction() ** 2 + o.imag_fraction() ** 2
        return (x > y) - (x < y)

    # ------------------------------------------------------------------
    # Text and containers
    # ------------------------------------------------------------------

    @classmethod
    def parse(cls, text: str) -> "ComplexNumber":
        literal = text.strip()
        for grammars, part in ((_DECIMAL_GRAMMARS, _decimal_part), (_RATIONAL_GRAMMARS, _rational_part)):
            for _name, pattern, build in grammars:
                m = pattern.fullmatch(literal)
                if m is not None:
                    return build(part, *m.groups())
        raise MalformedInputError("complex", text)

    def _format_part(self, part: Part) -> str:
        if isinstance(part, BigFraction):
            return part.to_proper_string()
        return plain_string(part)

    def to_string(self) -> str:
        return f"( {self._format_part(self.real)}, {self._format_part(self.imag)} )"

    __str__ = to_string

    def to_long_string(self) -> str:
        """``a + bⅈ`` form, dropping an absent part."""
        if self.is_pure_real():
            return self._format_part(self.real)
        b = self.imag
        imaginary = f"{self._format_part(abs(b))}{IMAGINARY_UNIT}"
        if self.is_pure_imaginary():
            return f"-{imaginary}" if b < 0 else imaginary
        sign = "-" if b < 0 else "+"
        return f"{self._format_part(self.real)} {sign} {imaginary}"

    def to_polar_string(self, ctx: ContextLike = DEFAULT_CONTEXT) -> str:
        return f"{{ r: {plain_string(self.radius(ctx))}, θ: {plain_string(self.theta(ctx))} }}"

    def to_list(self) -> List[Any]:
        return [self.real, self.imag, self.is_rational()]

    def to_map(self) -> Dict[str, Any]:
        return {"r": self.real, "i": self.imag, "rational": self.is_rational()}

    # ------------------------------------------------------------------
    # Python protocol
    # ------------------------------------------------------------------

    def __add__(self, other):
        return self.add(other) if _operand(other) else NotImplemented

    def __radd__(self, other):
        return ComplexNumber.value_of(other).add(self) if _operand(other) else NotImplemented

    def __sub__(self, other):
        return self.subtract(other) if _operand(other) else NotImplemented

    def __rsub__(self, other):
        return ComplexNumber.value_of(other).subtract(self) if _operand(other) else NotImplemented

    def __mul__(self, other):
        return self.multiply(other) if _operand(other) else NotImplemented

    def __rmul__(self, other):
        return ComplexNumber.value_of(other).multiply(self) if _operand(other) else NotImplemented

    def __truediv__(self, other):
        return self.divide(other) if _operand(other) else NotImplemented

    def __rtruediv__(self, other):
        return ComplexNumber.value_of(other).divide(self) if _operand(other) else NotImplemented

    def __floordiv__(self, other):
        return self.idivide(other) if _operand(other) else NotImplemented

    def __mod__(self, other):
        return self.remainder(other) if _operand(other) else NotImplemented

    def __divmod__(self, other):
        return self.divide_and_remainder(other) if _operand(other) else NotImplemented

    def __pow__(self, exponent):
        if isinstance(exponent, int):
            return self.power(exponent)
        if isinstance(exponent, (Decimal, BigFraction, Fraction)):
            return self.pow(exponent)
        return NotImplemented

    def __neg__(self) -> "ComplexNumber":
        return self.negate()

    def __pos__(self) -> "ComplexNumber":
        return self

    def __abs__(self) -> Decimal:
        return self.radius()

    def __bool__(self) -> bool:
        return not self.is_zero()

    def __complex__(self) -> complex:
        return complex(float(self.real), float(self.imag))

    def __eq__(self, other) -> bool:
        if not _operand(other):
            return NotImplemented
        o = ComplexNumber.value_of(other)
        return self.real_fraction() == o.real_fraction() and self.imag_fraction() == o.imag_fraction()

    def __hash__(self) -> int:
        if self.is_pure_real():
            return hash(self.real_fraction())
        return hash((self.real_fraction(), self.imag_fraction()))


def _exact(value) -> bool:
    return isinstance(value, (int, Fraction, BigFraction))


def _operand(value) -> bool:
    return isinstance(value, (ComplexNumber, int, Fraction, BigFraction, Decimal, float, complex))


def _is_whole(part: Part) -> bool:
    if isinstance(part, BigFraction):
        return part.is_whole_number()
    return part == part.to_integral_value()


def _precision(part: Part) -> int:
    if isinstance(part, BigFraction):
        return part.precision()
    return decimal_precision(part)


# =============================================================================
# Grammar
# =============================================================================

_NUMBER = r"(?:0|[1-9][0-9]*)(?:\.[0-9]*)?(?:[Ee][+\-]?[0-9]+)?"
_SIGNED_NUMBER = rf"[+\-]?{_NUMBER}"
_I = "[iIıΙιℐⅈ]"
_RADIUS_KEYS = ("radius", "rad", "r")
_THETA_KEYS = ("theta", "angle", "θ", "Θ")
_RADIUS = r"(?i:radius|rad|r)"
_THETA = r"(?:(?i:theta|angle)|θ|Θ)"

_PartParser = Callable[[str], Part]


def _decimal_part(text: str) -> Decimal:
    return Decimal(text.replace(" ", ""))


def _rational_part(text: str) -> BigFraction:
    text = text.strip()
    if re.fullmatch(_SIGNED_NUMBER, text):
        return BigFraction.from_decimal(Decimal(text))
    return BigFraction.parse(text)


def _build(kind_of: _PartParser, re_text: str, im_text: str) -> ComplexNumber:
    re_part = kind_of(re_text)
    kind = "rational" if isinstance(re_part, BigFraction) else "decimal"
    return ComplexNumber(kind, re_part, kind_of(im_text))


def _coefficient(kind_of: _PartParser, sign: str, text: Optional[str]) -> Part:
    value = kind_of(text) if text else kind_of("1")
    return -value if sign == "-" else value


def _pair(part, re_text, im_text):
    return _build(part, re_text, im_text)


def _sum(part, re_text, sign, coefficient):
    im = _coefficient(part, sign, coefficient)
    re_part = part(re_text)
    kind = "rational" if isinstance(re_part, BigFraction) else "decimal"
    return ComplexNumber(kind, re_part, im)


def _real(part, re_text):
    re_part = part(re_text)
    kind = "rational" if isinstance(re_part, BigFraction) else "decimal"
    return ComplexNumber(kind, re_part)


def _imaginary(part, sign, coefficient):
    im = _coefficient(part, sign or "+", coefficient)
    kind = "rational" if isinstance(im, BigFraction) else "decimal"
    return ComplexNumber(kind, None, im)


def _polar(part, radius, theta):
    return ComplexNumber.polar(Decimal(radius), Decimal(theta))


def _cascade(signed: str, unsigned: str, polar: bool) -> Tuple[Tuple[str, Pattern[str], Callable[..., ComplexNumber]], ...]:
    s = rf"({signed})"
    u = rf"({unsigned})?"
    grammars = [
        ("pair_paren", rf"\(\s*{s}\s*,\s*{s}\s*\)", _pair),
        ("pair", rf"{s}\s*,\s*{s}", _pair),
        ("sum_paren", rf"\(\s*{s}\s*([+\-])\s*{u}\s*{_I}\s*\)", _sum),
        ("sum", rf"{s}\s*([+\-])\s*{u}\s*{_I}", _sum),
        ("real_paren", rf"\(\s*{s}\s*\)", _real),
        ("real", s, _real),
        ("imaginary_paren", rf"\(\s*([+\-]?)\s*{u}\s*{_I}\s*\)", _imaginary),
        ("imaginary", rf"([+\-]?)\s*{u}\s*{_I}", _imaginary),
    ]
    if polar:
        grammars.append(
            (
                "polar",
                rf"\{{\s*{_RADIUS}\s*:\s*({_SIGNED_NUMBER})\s*,\s*{_THETA}\s*:\s*({_SIGNED_NUMBER})\s*\}}",
                _polar,
            )
        )
    return tuple((name, re.compile(pattern), build) for name, pattern, build in grammars)


# Ordered: the first grammar matching the whole literal wins, decimal before rational.
_DECIMAL_GRAMMARS = _cascade(_SIGNED_NUMBER, _NUMBER, polar=True)
_RATIONAL_GRAMMARS = _cascade(
    rf"(?:{FRACTION_TOKEN}|{_SIGNED_NUMBER})",
    rf"(?:{FRACTION_TOKEN}|{_NUMBER})",
    polar=False,
)
