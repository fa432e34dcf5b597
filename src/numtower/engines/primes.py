"""
numtower.engines.primes
-----------------------
Primality and factoring up to ``MAX_PRIME = (2**31 - 1)**2``.

``is_prime`` rules a value out against a small prime table, then runs
Miller-Rabin with the first twelve prime bases (deterministic far beyond
MAX_PRIME), and for values within ``sieve_direct_limit`` confirms against the
engine's prime sieve. Factoring divides out the table primes, then sieve
primes up to ``min(sqrt(n), sieve_factor_limit)``; a composite cofactor left
over is split with Pollard-Brent rho.
"""

from __future__ import annotations

import logging
import math
import operator
import random
from typing import List, Optional

from ..core.engine import EngineContext, resolve
from ..core.errors import RangeExceededError

logger = logging.getLogger(__name__)

SMALL_PRIMES = (2, 3, 5, 7, 11, 13, 17, 19, 23, 29, 31, 37, 41, 43, 47, 53, 59, 61, 67, 71, 73, 79, 83, 89, 97)
_SMALL_SET = frozenset(SMALL_PRIMES)
_MR_BASES = SMALL_PRIMES[:12]


def _check_range(n: int, engine: EngineContext) -> None:
    bound = engine.settings.max_prime
    if abs(n) > bound:
        raise RangeExceededError(f"{n} is too big", bound)


def is_probable_prime(n: int) -> bool:
    """Miller-Rabin with bases 2..37; exact for n < 3.3e24."""
    if n < 2:
        return False
    if n in _SMALL_SET:
        return True
    if n % 2 == 0:
        return False
    d = n - 1
    s = 0
    while d % 2 == 0:
        d //= 2
        s += 1
    for a in _MR_BASES:
        if a % n == 0:
            continue
        x = pow(a, d, n)
        if x == 1 or x == n - 1:
            continue
        for _ in range(s - 1):
            x = x * x % n
            if x == n - 1:
                break
        else:
            return False
    return True


def is_prime(n: int, engine: Optional[EngineContext] = None) -> bool:
    eng = resolve(engine)
    n = operator.index(n)
    _check_range(n, eng)
    if n <= 1:
        return False
    if n in _SMALL_SET:
        return True
    if any(n % p == 0 for p in SMALL_PRIMES):
        return False
    if not is_probable_prime(n):
        return False
    if n <= eng.settings.sieve_direct_limit:
        return eng.sieve.is_prime(n)
    return True


def _pollard_brent(n: int) -> int:
    """A non-trivial factor of the odd composite ``n``."""
    rng = random.Random(n)
    while True:
        y = rng.randrange(1, n)
        c = rng.randrange(1, n)
        m = 128
        g = r = q = 1
        x = ys = y
        while g == 1:
            x = y
            for _ in range(r):
                y = (y * y + c) % n
            k = 0
            while k < r and g == 1:
                ys = y
                for _ in range(min(m, r - k)):
                    y = (y * y + c) % n
                    q = q * abs(x - y) % n
                g = math.gcd(q, n)
                k += m
            r *= 2
        if g == n:
            g = 1
            while g == 1:
                ys = (ys * ys + c) % n
                g = math.gcd(abs(x - ys), n)
        if g != n:
            return g


def _split(n: int, out: List[int]) -> None:
    if n == 1:
        return
    if is_probable_prime(n):
        out.append(n)
        return
    d = _pollard_brent(n)
    logger.debug("pollard-brent split %d = %d * %d", n, d, n // d)
    _split(d, out)
    _split(n // d, out)


def get_prime_factors(n: int, engine: Optional[EngineContext] = None) -> List[int]:
    """Prime factors with multiplicity in increasing order, ``84 -> [2, 2, 3, 7]``.

    Negative input gets a leading ``-1``; ``0`` has no factors, ``1`` gives ``[1]``.
    """
    eng = resolve(engine)
    n = operator.index(n)
    _check_range(n, eng)
    if n == 0:
        return []
    m = abs(n)
    if m == 1:
        return [n]
    factors: List[int] = []
    for p in SMALL_PRIMES:
        while m % p == 0:
            factors.append(p)
            m //= p
    if m > 1 and not is_probable_prime(m):
        limit = min(math.isqrt(m), eng.settings.sieve_factor_limit)
        for p in eng.sieve.primes(limit):
            if p <= SMALL_PRIMES[-1]:
                continue
            if p * p > m:
                break
            while m % p == 0:
                factors.append(p)
                m //= p
    if m > 1:
        # whatever survived trial division is a prime or a product of large primes
        _split(m, factors)
    factors.sort()
    return [-1] + factors if n < 0 else factors


def get_factors(n: int, engine: Optional[EngineContext] = None) -> List[int]:
    """Every divisor of ``n`` including 1 and ``n``; negatives too when ``n < 0``."""
    eng = resolve(engine)
    n = operator.index(n)
    if n == 0:
        return []
    divisors = [1]
    counts: dict = {}
    for p in get_prime_factors(abs(n), eng):
        if p != 1:
            counts[p] = counts.get(p, 0) + 1
    for p, k in counts.items():
        divisors = [d * p**e for d in divisors for e in range(k + 1)]
    divisors.sort()
    if n < 0:
        return [-d for d in reversed(divisors)] + divisors
    return divisors
