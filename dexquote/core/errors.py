"""Exception types for the quoting core.

Every failure is raised synchronously to the caller; nothing is retried.
"""

from __future__ import annotations


class DexMathError(ValueError):
    """Base class for all quoting failures."""


class InvalidInputError(DexMathError):
    """Raised when a numeric-like input cannot be used as a finite real number."""


class InvalidDecimalsError(DexMathError):
    """Raised when a token decimals value is missing, negative or not an int."""


class DivisionByZeroError(DexMathError, ZeroDivisionError):
    """Raised when a formula would divide by a zero reserve or supply."""

    def __init__(self, operand: str) -> None:
        self.operand = operand
        super().__init__(f"division by zero: {operand} is 0")
