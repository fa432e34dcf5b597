# tests/test_caches.py

import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import replace
from fractions import Fraction
from unittest.mock import MagicMock

import pytest

from numtower.core import engine as engine_module
from numtower.core.engine import EngineContext, default_engine, resolve, set_default_engine
from numtower.core.settings import EngineSettings
from numtower.engines import constants
from numtower.engines.caches import BernoulliTable, DigitCache, PrimeSieve


def test_digit_cache_computes_once_for_shorter_requests():
    cache = DigitCache("test")
    compute = MagicMock(side_effect=lambda n: "1234567890"[:n])
    assert cache.get(8, compute) == "12345678"
    assert cache.get(3, compute) == "123"
    assert compute.call_count == 1
    assert cache.get(10, compute) == "1234567890"
    assert compute.call_count == 2
    cache.clear()
    assert len(cache) == 0


def test_digit_cache_rejects_short_generator():
    cache = DigitCache("broken")
    with pytest.raises(RuntimeError):
        cache.get(5, lambda n: "12")


def test_bernoulli_table_resumes_and_survives_eviction():
    table = BernoulliTable(maxsize=2)
    assert table.get(2) == Fraction(1, 6)
    assert table.computed == 2
    assert table.get(10) == Fraction(5, 66)
    assert table.computed == 10
    # B_2 was evicted from the two-entry LRU and is recomputed
    assert table.get(2) == Fraction(1, 6)
    assert table.get(1) == Fraction(1, 2)
    assert table.get(7) == 0
    with pytest.raises(ValueError):
        table.get(-1)


def test_sieve_grows_in_chunks_and_never_shrinks():
    sieve = PrimeSieve(chunk=1024)
    assert sieve.size == 0
    assert sieve.is_prime(1009)
    assert sieve.size % 1024 == 0
    size = sieve.size
    assert not sieve.is_prime(1001)
    assert sieve.size == size
    assert sieve.is_prime(100003)
    assert sieve.size > size
    assert sieve.size % 1024 == 0
    assert list(sieve.primes(30)) == [2, 3, 5, 7, 11, 13, 17, 19, 23, 29]


def test_segmented_growth_matches_fresh_sieve():
    grown = PrimeSieve(chunk=256)
    for stop in (100, 1000, 5000, 20000):
        grown.ensure(stop)
    fresh = PrimeSieve(chunk=1 << 15)
    assert list(grown.primes(20000)) == list(fresh.primes(20000))


def test_engine_settings_validation():
    with pytest.raises(ValueError):
        EngineSettings(sieve_chunk=3)
    with pytest.raises(ValueError):
        EngineSettings(newton_max_iterations=0)
    tuned = replace(EngineSettings(), pi_max_digits=100)
    assert EngineContext(settings=tuned).settings.pi_max_digits == 100


def test_default_engine_is_shared_and_replaceable():
    original = default_engine()
    assert default_engine() is original
    assert resolve(None) is original
    mine = EngineContext()
    try:
        set_default_engine(mine)
        assert resolve(None) is mine
    finally:
        set_default_engine(original)
    assert engine_module.default_engine() is original


def test_concurrent_pi_requests_agree():
    engine = EngineContext()
    barrier = threading.Barrier(8)

    def digits(n):
        barrier.wait()
        return constants.pi_digits(n, engine)

    sizes = [50, 400, 120, 400, 10, 300, 200, 400]
    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(digits, sizes))
    longest = max(results, key=len)
    assert all(longest.startswith(r) for r in results)
    assert len(engine.pi_digits) == 400


def test_concurrent_sieve_growth():
    engine = EngineContext(settings=EngineSettings(sieve_chunk=512))
    numbers = list(range(2, 40000, 7))

    def check(n):
        return engine.sieve.is_prime(n)

    with ThreadPoolExecutor(max_workers=8) as pool:
        flags = list(pool.map(check, numbers))
    fresh = PrimeSieve()
    assert flags == [fresh.is_prime(n) for n in numbers]
