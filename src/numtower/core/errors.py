from __future__ import annotations

from typing import Optional


class NumtowerError(Exception):
    """Base error."""


class MalformedInputError(NumtowerError, ValueError):
    """Raised when a literal matches none of the recognized grammars."""

    def __init__(self, kind: str, literal: str):
        super().__init__(f"unsupported {kind} format: {literal!r}")
        self.kind = kind
        self.literal = literal


class ArithmeticInvalidError(NumtowerError, ArithmeticError):
    """Raised when an operation has no valid result for its operands."""


class DivideByZeroError(ArithmeticInvalidError, ZeroDivisionError):
    def __init__(self, message: str = "divide by zero"):
        super().__init__(message)


class DomainError(ArithmeticInvalidError, ValueError):
    """Argument outside the domain of a real function (sqrt or ln of a negative, ...)."""


class RangeExceededError(NumtowerError, ValueError):
    """Request beyond an algorithm's supported bound."""

    def __init__(self, message: str, bound: Optional[int] = None):
        super().__init__(message if bound is None else f"{message} (limit {bound})")
        self.bound = bound


class PrecisionLossError(NumtowerError, ArithmeticError):
    """Exact integer extraction attempted on a non-whole value."""


class NarrowingError(NumtowerError, ValueError):
    """Conversion to a narrower type would lose value."""
