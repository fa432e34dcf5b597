# tests/test_primes.py

import math
import random
from dataclasses import replace

import pytest

from numtower.core.engine import EngineContext
from numtower.core.errors import RangeExceededError
from numtower.core.settings import MAX_INT, MAX_PRIME, EngineSettings
from numtower.engines import primes

M31 = 2**31 - 1


def naive_is_prime(n: int) -> bool:
    if n < 2:
        return False
    return all(n % d for d in range(2, math.isqrt(n) + 1))


def test_boundaries():
    assert not primes.is_prime(0)
    assert not primes.is_prime(1)
    assert primes.is_prime(2)
    assert primes.is_prime(97)
    assert not primes.is_prime(91)
    assert not primes.is_prime(-7)


def test_agrees_with_trial_division():
    for n in range(3000):
        assert primes.is_prime(n) == naive_is_prime(n), n


@pytest.mark.parametrize("n", [M31, 2**61 - 1, 1000003, 4294967291])
def test_large_primes(n):
    assert primes.is_prime(n)


@pytest.mark.parametrize("n", [561, 1105, 3215031751, M31 * 1000003, MAX_PRIME])
def test_composites(n):
    """Carmichael numbers and strong pseudoprimes to small bases included."""
    assert not primes.is_prime(n)


def test_range_bound():
    assert MAX_PRIME == MAX_INT * MAX_INT
    with pytest.raises(RangeExceededError, match="too big"):
        primes.is_prime(MAX_PRIME + 1)
    with pytest.raises(RangeExceededError):
        primes.get_prime_factors(-(MAX_PRIME + 2))


def test_prime_factors_scenario():
    assert primes.get_prime_factors(84) == [2, 2, 3, 7]


@pytest.mark.parametrize(
    "n, expected",
    [
        (0, []),
        (1, [1]),
        (-1, [-1]),
        (2, [2]),
        (97, [97]),
        (-84, [-1, 2, 2, 3, 7]),
        (1024, [2] * 10),
        (M31, [M31]),
        (101 * 103 * 107, [101, 103, 107]),
    ],
)
def test_prime_factor_table(n, expected):
    assert primes.get_prime_factors(n) == expected


def test_prime_factors_multiply_back():
    random.seed(42)
    for _ in range(100):
        n = random.randint(2, 10**10)
        factors = primes.get_prime_factors(n)
        assert math.prod(factors) == n
        assert factors == sorted(factors)
        assert all(primes.is_probable_prime(p) for p in factors)


def test_large_cofactors_split_by_rho():
    engine = EngineContext(settings=replace(EngineSettings(), sieve_factor_limit=1000))
    assert primes.get_prime_factors(M31 * 1000003, engine) == [1000003, M31]
    assert primes.get_prime_factors(MAX_PRIME, engine) == [M31, M31]


def test_get_factors():
    assert primes.get_factors(12) == [1, 2, 3, 4, 6, 12]
    assert primes.get_factors(1) == [1]
    assert primes.get_factors(0) == []
    assert primes.get_factors(97) == [1, 97]
    assert primes.get_factors(-6) == [-6, -3, -2, -1, 1, 2, 3, 6]
    assert len(primes.get_factors(2**4 * 3**2 * 5)) == 5 * 3 * 2


def test_sieve_backs_direct_lookups():
    engine = EngineContext()
    assert primes.is_prime(65537, engine)
    assert engine.sieve.limit >= 65537
