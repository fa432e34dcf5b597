from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Optional

from ..engines.caches import BernoulliTable, DigitCache, PrimeSieve
from .settings import EngineSettings


@dataclass
class EngineContext:
    """Settings plus the caches the transcendental engine memoizes into.

    Pass one explicitly (``engine=``) to confine caches to a caller, or rely on
    the process default from ``default_engine()``.
    """

    settings: EngineSettings = field(default_factory=EngineSettings)
    bernoulli: BernoulliTable = field(init=False)
    pi_digits: DigitCache = field(init=False)
    e_digits: DigitCache = field(init=False)
    sieve: PrimeSieve = field(init=False)

    def __post_init__(self) -> None:
        self.bernoulli = BernoulliTable(self.settings.bernoulli_cache_size)
        self.pi_digits = DigitCache("pi")
        self.e_digits = DigitCache("e")
        self.sieve = PrimeSieve(self.settings.sieve_chunk)


_default: Optional[EngineContext] = None
_default_lock = threading.Lock()


def set_default_engine(engine: EngineContext) -> None:
    global _default
    with _default_lock:
        _default = engine


def default_engine() -> EngineContext:
    global _default
    if _default is None:
        with _default_lock:
            if _default is None:
                _default = EngineContext()
    return _default


def resolve(engine: Optional[EngineContext]) -> EngineContext:
    return engine if engine is not None else default_engine()
