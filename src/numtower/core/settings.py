"""
numtower.core.settings
----------------------
Tunables for the transcendental / number-theory engine.

Settings are immutable; derive variants with ``dataclasses.replace`` and hand
them to ``EngineContext(settings=...)``.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

MAX_INT = 2**31 - 1
MAX_PRIME = MAX_INT * MAX_INT

# IEEE 754 decimal interchange formats, in significant digits.
DECIMAL32 = 7
DECIMAL64 = 16
DECIMAL128 = 34


@dataclass(frozen=True)
class EngineSettings:
    newton_max_iterations: int = 50
    pi_max_digits: int = 12500
    # above this reduced argument tan() evaluates sin/cos instead of its series
    tan_series_limit: Decimal = Decimal("1.2")
    guard_digits: int = 10
    polar_min_precision: int = DECIMAL128
    max_prime: int = MAX_PRIME

    # prime sieve: growth granularity (in sieve slots) and the largest value
    # answered by direct sieve lookup rather than Miller-Rabin alone
    sieve_chunk: int = 1 << 16
    sieve_direct_limit: int = 1 << 22
    # factor search consults the sieve only up to this value
    sieve_factor_limit: int = 1 << 24

    bernoulli_cache_size: int = 4096

    def __post_init__(self) -> None:
        if self.newton_max_iterations <= 0:
            raise ValueError("newton_max_iterations must be > 0")
        if self.pi_max_digits <= 0:
            raise ValueError("pi_max_digits must be > 0")
        if self.sieve_chunk <= 0 or self.sieve_chunk & (self.sieve_chunk - 1):
            raise ValueError("sieve_chunk must be a positive power of two")
        if self.guard_digits < 2:
            raise ValueError("guard_digits must be >= 2")

    def series_term_ceiling(self, precision: int) -> int:
        """Upper bound on series terms before a computation is declared non-convergent."""
        return 5 * precision + 100
