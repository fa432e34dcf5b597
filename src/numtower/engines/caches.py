"""
numtower.engines.caches
-----------------------
Memoization structures owned by an ``EngineContext``.

- ``DigitCache``: longest digit string of a constant computed so far (π, e);
  replaced only by a longer one, shorter requests are served by slicing.
- ``BernoulliTable``: Bernoulli numbers from the Akiyama-Tanigawa recurrence.
  The working row is kept, so extending the table to a larger index resumes
  where the last computation stopped.
- ``PrimeSieve``: odd-only Eratosthenes sieve (slot ``i`` <-> value ``2i+3``),
  grown in whole chunks and never shrunk.

Each structure guards itself with a ``threading.RLock``; results never depend
on cache state.
"""

from __future__ import annotations

import logging
import math
import threading
from fractions import Fraction
from typing import Callable, Iterator, List

import numpy as np
from cachetools import LRUCache

logger = logging.getLogger(__name__)


class DigitCache:
    def __init__(self, name: str):
        self.name = name
        self._digits = ""
        self._lock = threading.RLock()

    def __len__(self) -> int:
        return len(self._digits)

    def get(self, count: int, compute: Callable[[int], str]) -> str:
        """First ``count`` digits, running ``compute(count)`` only when the cache is shorter."""
        with self._lock:
            if len(self._digits) < count:
                text = compute(count)
                if len(text) < count:
                    raise RuntimeError(f"{self.name} generator returned {len(text)} of {count} digits")
                logger.debug("%s digit cache grown from %d to %d", self.name, len(self._digits), len(text))
                self._digits = text
            return self._digits[:count]

    def clear(self) -> None:
        with self._lock:
            self._digits = ""


class BernoulliTable:
    """B_n with the B_1 = +1/2 convention, memoized per even index."""

    def __init__(self, maxsize: int = 4096):
        self._cache: LRUCache = LRUCache(maxsize=maxsize)
        self._row: List[Fraction] = []
        self._lock = threading.RLock()

    @property
    def computed(self) -> int:
        """Highest index the working row has reached (-1 before any use)."""
        return len(self._row) - 1

    def get(self, n: int) -> Fraction:
        if n < 0:
            raise ValueError("Bernoulli index must be >= 0")
        if n == 1:
            return Fraction(1, 2)
        if n % 2:
            return Fraction(0)
        key = n >> 1
        with self._lock:
            try:
                return self._cache[key]
            except KeyError:
                pass
            if n > self.computed:
                self._advance(n)
                return self._cache[key]
        # evicted from the LRU: recompute with a private row
        value = _akiyama_tanigawa(n)
        with self._lock:
            self._cache[key] = value
        return value

    def _advance(self, n: int) -> None:
        row = self._row
        start = len(row)
        for m in range(start, n + 1):
            row.append(Fraction(1, m + 1))
            for j in range(m, 0, -1):
                row[j - 1] = j * (row[j - 1] - row[j])
            if m % 2 == 0:
                self._cache[m >> 1] = row[0]
        logger.debug("Bernoulli table advanced from B_%d to B_%d", start - 1, n)


def _akiyama_tanigawa(n: int) -> Fraction:
    row: List[Fraction] = []
    for m in range(n + 1):
        row.append(Fraction(1, m + 1))
        for j in range(m, 0, -1):
            row[j - 1] = j * (row[j - 1] - row[j])
    return row[0]


def _sieve(size: int) -> np.ndarray:
    composite = np.zeros(size, dtype=bool)
    top = 2 * (size - 1) + 3
    for i in range(size):
        p = 2 * i + 3
        if p * p > top:
            break
        if not composite[i]:
            composite[(p * p - 3) // 2 :: p] = True
    return composite


class PrimeSieve:
    def __init__(self, chunk: int = 1 << 16):
        if chunk <= 0:
            raise ValueError("chunk must be > 0")
        self.chunk = chunk
        self._composite = np.zeros(0, dtype=bool)
        self._lock = threading.RLock()

    @property
    def size(self) -> int:
        return int(self._composite.size)

    @property
    def limit(self) -> int:
        """Largest value the sieve currently answers for."""
        return 2 * self.size + 1 if self.size else 2

    def ensure(self, value: int) -> None:
        if value <= self.limit:
            return
        with self._lock:
            if value <= self.limit:
                return
            needed = (value - 3) // 2 + 1
            self._extend(-(-needed // self.chunk) * self.chunk)

    def _extend(self, size: int) -> None:
        old = self.size
        top = 2 * (size - 1) + 3
        root = math.isqrt(top)
        if old == 0 or root > self.limit:
            self._composite = _sieve(size)
        else:
            segment = np.zeros(size - old, dtype=bool)
            low = 2 * old + 3
            for p in self._odd_primes(root):
                start = max(p * p, -(-low // p) * p)
                if start % 2 == 0:
                    start += p
                if start > top:
                    continue
                segment[(start - 3) // 2 - old :: p] = True
            self._composite = np.concatenate([self._composite, segment])
        logger.debug("prime sieve grown from %d to %d slots (limit %d)", old, size, self.limit)

    def _odd_primes(self, stop: int) -> List[int]:
        count = min(self.size, max(0, (stop - 3) // 2 + 1))
        return (np.flatnonzero(~self._composite[:count]) * 2 + 3).tolist()

    def is_prime(self, n: int) -> bool:
        """Direct sieve lookup; grows the sieve to cover ``n``."""
        if n < 2:
            return False
        if n % 2 == 0:
            return n == 2
        self.ensure(n)
        return not bool(self._composite[(n - 3) // 2])

    def primes(self, stop: int) -> Iterator[int]:
        """Primes ``<= stop`` in increasing order."""
        if stop < 2:
            return
        yield 2
        self.ensure(stop)
        yield from self._odd_primes(stop)
