"""numtower public API.

Exact rationals, continued fractions, complex numbers and quaternions, plus the
decimal engine (roots, trig, logs, constants, primes) they are built on.
"""

import logging

from .core.context import DEFAULT_CONTEXT, make_context
from .core.engine import EngineContext, default_engine, set_default_engine
from .core.errors import (
    ArithmeticInvalidError,
    DivideByZeroError,
    DomainError,
    MalformedInputError,
    NarrowingError,
    NumtowerError,
    PrecisionLossError,
    RangeExceededError,
)
from .core.settings import MAX_PRIME, EngineSettings
from .engines.constants import e, e_digits, half_pi, phi, pi, pi_digits, quarter_pi, ratphi, two_pi
from .engines.logexp import e_power, ln, log2, log10, power, ten_power
from .engines.primes import get_factors, get_prime_factors, is_prime
from .engines.roots import cbrt, sqrt, sqrt2
from .engines.sequences import bernoulli, factorial, fib, harmonic
from .engines.trig import atan, atan2, cos, sin, tan
from .values.complex_number import ComplexNumber
from .values.continued_fraction import ContinuedFraction
from .values.fraction import BigFraction
from .values.helpers import RunningMax, RunningMin, format_with_separators
from .values.quaternion import Quaternion

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "BigFraction",
    "ContinuedFraction",
    "ComplexNumber",
    "Quaternion",
    "EngineContext",
    "EngineSettings",
    "default_engine",
    "set_default_engine",
    "make_context",
    "DEFAULT_CONTEXT",
    "MAX_PRIME",
    "sin",
    "cos",
    "tan",
    "atan",
    "atan2",
    "sqrt",
    "sqrt2",
    "cbrt",
    "ln",
    "log2",
    "log10",
    "power",
    "e_power",
    "ten_power",
    "pi",
    "pi_digits",
    "two_pi",
    "half_pi",
    "quarter_pi",
    "e",
    "e_digits",
    "phi",
    "ratphi",
    "is_prime",
    "get_factors",
    "get_prime_factors",
    "factorial",
    "fib",
    "bernoulli",
    "harmonic",
    "RunningMax",
    "RunningMin",
    "format_with_separators",
    "NumtowerError",
    "MalformedInputError",
    "ArithmeticInvalidError",
    "DivideByZeroError",
    "DomainError",
    "RangeExceededError",
    "PrecisionLossError",
    "NarrowingError",
]
