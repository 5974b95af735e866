"""
Decimal scaling between raw on-chain integers and dimensionless decimal values.

A token with `decimals = d` stores `x` human units as the raw integer `x * 10**d`.
All arithmetic happens on `decimal.Decimal` values; binary floats never enter
the pipeline (a float input is parsed from its shortest repr).

Rounding rules:
- `remove_decimals` and the `apply_decimals` rescale are exact: shifting by a power of
  ten only moves the exponent, whatever the number of digits.
- `apply_decimals` rounds to an integer once, ROUND_HALF_UP unless overridden.
"""

from __future__ import annotations

import decimal
from decimal import Decimal
from typing import Union

from .config import DEFAULT_CONFIG, QuoteConfig
from .errors import InvalidDecimalsError, InvalidInputError

# Anything `to_decimal` accepts.
Numeric = Union[Decimal, int, str, float]

ONE = Decimal(1)
ZERO = Decimal(0)


def to_decimal(value: Numeric) -> Decimal:
    """
    Parse a numeric-like value into a finite Decimal.

    Raises:
        InvalidInputError: for bool, None, NaN, infinities, unparseable strings
            and unsupported types.
    """
    if isinstance(value, bool) or value is None:
        raise InvalidInputError(f"not a number: {value!r}")
    if isinstance(value, Decimal):
        out = value
    elif isinstance(value, int):
        out = Decimal(value)
    elif isinstance(value, float):
        out = Decimal(repr(value))
    elif isinstance(value, str):
        with decimal.localcontext() as ctx:
            ctx.traps[decimal.InvalidOperation] = True
            try:
                out = Decimal(value.strip())
            except decimal.InvalidOperation as exc:
                raise InvalidInputError(f"not a number: {value!r}") from exc
    else:
        raise InvalidInputError(f"unsupported numeric type: {type(value).__name__}")
    if not out.is_finite():
        raise InvalidInputError(f"not a finite number: {value!r}")
    return out


def to_non_negative_decimal(name: str, value: Numeric) -> Decimal:
    """`to_decimal` plus a sign check; `name` is used in the error message."""
    out = to_decimal(value)
    if out < 0:
        raise InvalidInputError(f"{name} must be non-negative: {out}")
    return out


def require_decimals(name: str, value: object) -> int:
    """Validate a token decimals count and return it as an int."""
    if value is None:
        raise InvalidDecimalsError(f"{name} is required")
    if not isinstance(value, int) or isinstance(value, bool):
        raise InvalidDecimalsError(f"{name} must be an int: {value!r}")
    if value < 0:
        raise InvalidDecimalsError(f"{name} must be non-negative: {value}")
    return value


def exponential(n: int) -> Decimal:
    """Return exactly `10**n`."""
    if not isinstance(n, int) or isinstance(n, bool):
        raise InvalidInputError(f"exponent must be an int: {n!r}")
    return ONE.scaleb(n)


def _shift(value: Decimal, places: int) -> Decimal:
    # Exact `value * 10**places`; scaleb would round to the context precision.
    sign, digits, exponent = value.as_tuple()
    return Decimal((sign, digits, exponent + places))


def remove_decimals(amount: Numeric, decimals: int, *, config: QuoteConfig = DEFAULT_CONFIG) -> Decimal:
    """
    Convert a raw amount to its decimal value: `amount / 10**decimals`.

    Raises:
        InvalidInputError: if `amount` is negative or has a fractional part.
    """
    d = require_decimals("decimals", decimals)
    value = to_non_negative_decimal("amount", amount)
    if value != value.to_integral_value():
        raise InvalidInputError(f"raw amount must be an integer: {value}")
    return _shift(value, -d)


def round_units(
    value: Decimal,
    *,
    rounding: str = decimal.ROUND_HALF_UP,
    config: QuoteConfig = DEFAULT_CONFIG,
) -> Decimal:
    """Round `value` to 0 decimal places with an explicit rounding mode."""
    ctx = config.context.copy()
    # Integers longer than the configured precision must still quantize.
    ctx.prec = max(ctx.prec, value.adjusted() + 2)
    try:
        return value.quantize(ONE, rounding=rounding, context=ctx)
    except decimal.InvalidOperation as exc:
        raise InvalidInputError(f"cannot round to an integer: {value}") from exc


def apply_decimals(
    amount: Numeric,
    decimals: int,
    *,
    rounding: str = decimal.ROUND_HALF_UP,
    config: QuoteConfig = DEFAULT_CONFIG,
) -> Decimal:
    """Convert a decimal value to a raw integer amount: `round(amount * 10**decimals)`."""
    d = require_decimals("decimals", decimals)
    value = to_decimal(amount)
    return round_units(_shift(value, d), rounding=rounding, config=config)


__all__ = [
    "Numeric",
    "ONE",
    "ZERO",
    "to_decimal",
    "to_non_negative_decimal",
    "require_decimals",
    "exponential",
    "remove_decimals",
    "round_units",
    "apply_decimals",
]
