"""Running max/min accumulators and thousands-separator formatting."""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Optional, Union

from ..core.context import plain_string


@dataclass
class RunningMax:
    """Largest value seen so far; ``changed`` once any update exceeded the start value."""

    value: int = 0
    initial: int = field(init=False, default=0, repr=False)

    def __post_init__(self) -> None:
        self.initial = self.value

    @classmethod
    def of(cls, *values: int) -> "RunningMax":
        acc = cls(values[0]) if values else cls()
        return acc.update(*values[1:])

    def update(self, *values: int) -> "RunningMax":
        for v in values:
            if v > self.value:
                self.value = v
        return self

    @property
    def changed(self) -> bool:
        return self.value != self.initial

    def is_positive(self) -> bool:
        return self.value > 0


@dataclass
class RunningMin:
    """Smallest value seen so far."""

    value: int = 0
    initial: int = field(init=False, default=0, repr=False)

    def __post_init__(self) -> None:
        self.initial = self.value

    @classmethod
    def of(cls, *values: int) -> "RunningMin":
        acc = cls(values[0]) if values else cls()
        return acc.update(*values[1:])

    def update(self, *values: int) -> "RunningMin":
        for v in values:
            if v < self.value:
                self.value = v
        return self

    @property
    def changed(self) -> bool:
        return self.value != self.initial


def _group(digits: str, sep: str) -> str:
    head = len(digits) % 3 or 3
    parts = [digits[:head]] + [digits[i : i + 3] for i in range(head, len(digits), 3)]
    return sep.join(parts)


def format_with_separators(
    value: Union[int, Decimal],
    separators: bool = True,
    min_digits: Optional[int] = None,
    sep: str = ",",
) -> str:
    """Format an integer or decimal with thousands separators.

    ``min_digits`` zero-pads the integer part before grouping, so
    ``format_with_separators(1234, min_digits=7)`` gives ``"0,001,234"``.
    """
    if isinstance(value, Decimal):
        text = plain_string(value)
    else:
        text = str(int(value))
    sign = ""
    if text.startswith("-"):
        sign, text = "-", text[1:]
    whole, dot, frac = text.partition(".")
    if min_digits is not None and len(whole) < min_digits:
        whole = whole.zfill(min_digits)
    if separators:
        whole = _group(whole, sep)
    return f"{sign}{whole}{dot}{frac}"
