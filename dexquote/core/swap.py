"""
Constant Product Market Maker (CPMM) swap quotes.

Exact-in quote, evaluated in the decimal domain:
    amount_in_with_fee = amount_in * (1 - fee)
    amount_out = reserve_out * amount_in_with_fee / (reserve_in + amount_in_with_fee)

The fee stays in the pool, so reserve_in * reserve_out never decreases across a trade.
Raw inputs are rescaled with `remove_decimals` and raw outputs with `apply_decimals`.
"""

from __future__ import annotations

import decimal
from decimal import Decimal
from typing import Optional

import structlog

from .config import DEFAULT_CONFIG, DEFAULT_FEE, QuoteConfig
from .errors import DivisionByZeroError, InvalidInputError
from .scaling import (
    ONE,
    ZERO,
    Numeric,
    apply_decimals,
    remove_decimals,
    require_decimals,
    round_units,
    to_decimal,
    to_non_negative_decimal,
)
from .valuation import value_of

logger = structlog.get_logger()

HUNDRED = Decimal(100)


def _resolve_fee(fee: Optional[Numeric], config: QuoteConfig) -> Decimal:
    if fee is None:
        return config.default_fee
    out = to_decimal(fee)
    if not (0 <= out <= 1):
        raise InvalidInputError(f"fee must be in [0, 1]: {out}")
    return out


def quote_out(
    amount_in: Numeric,
    reserve_in: Numeric,
    reserve_out: Numeric,
    fee: Optional[Numeric] = None,
    *,
    config: QuoteConfig = DEFAULT_CONFIG,
) -> Decimal:
    """
    Unrounded exact-in output for decimal-domain amounts.

    A zero input returns 0 before the fee or reserves are looked at.
    """
    a_in = to_non_negative_decimal("amount_in", amount_in)
    if a_in == 0:
        return ZERO

    r_in = to_non_negative_decimal("reserve_in", reserve_in)
    r_out = to_non_negative_decimal("reserve_out", reserve_out)
    f = _resolve_fee(fee, config)

    with config.local():
        amount_in_with_fee = a_in * (ONE - f)
        denominator = r_in + amount_in_with_fee
        if denominator == 0:
            logger.warning("division_by_zero", operand="reserve_in + amount_in_with_fee")
            raise DivisionByZeroError("reserve_in + amount_in_with_fee")
        return r_out * amount_in_with_fee / denominator


def amount_out(
    amount_in: Numeric,
    decimals_in: int,
    decimals_out: int,
    reserve_in: Numeric,
    reserve_out: Numeric,
    fee: Optional[Numeric] = None,
    *,
    config: QuoteConfig = DEFAULT_CONFIG,
) -> Decimal:
    """
    Raw output amount for swapping a raw `amount_in`.

    Args:
        amount_in: Raw input amount (smallest units of the input token)
        decimals_in: Decimals of the input token
        decimals_out: Decimals of the output token
        reserve_in: Pool reserve of the input token (decimal domain)
        reserve_out: Pool reserve of the output token (decimal domain)
        fee: Fee fraction in [0, 1]; None selects the configured default (0.3%)

    Returns:
        Raw output amount, rounded down to an integer so the quote never
        promises more than the pool pays out (and never the whole reserve).
        A zero input returns 0 without evaluating the formula.
    """
    require_decimals("decimals_out", decimals_out)
    a_in = remove_decimals(amount_in, decimals_in, config=config)
    out = quote_out(a_in, reserve_in, reserve_out, fee, config=config)
    return apply_decimals(out, decimals_out, rounding=decimal.ROUND_DOWN, config=config)


def amount_in(
    amount_out: Numeric,
    decimals_in: int,
    decimals_out: int,
    reserve_in: Numeric,
    reserve_out: Numeric,
    fee: Optional[Numeric] = None,
    *,
    config: QuoteConfig = DEFAULT_CONFIG,
) -> Decimal:
    """
    Raw input amount required to receive a raw `amount_out`.

    Reverse CPMM formula:
        net_in = reserve_in * amount_out / (reserve_out - amount_out)
        amount_in = net_in / (1 - fee)

    The result is rounded up so the quoted input always buys at least `amount_out`.

    Raises:
        InvalidInputError: if `amount_out` would drain the output reserve.
        DivisionByZeroError: if the fee is 100%.
    """
    require_decimals("decimals_in", decimals_in)
    a_out = remove_decimals(amount_out, decimals_out, config=config)
    r_in = to_non_negative_decimal("reserve_in", reserve_in)
    r_out = to_non_negative_decimal("reserve_out", reserve_out)
    f = _resolve_fee(fee, config)

    if a_out == 0:
        return ZERO
    if a_out >= r_out:
        raise InvalidInputError(f"cannot drain full reserve: amount_out ({a_out}) >= reserve_out ({r_out})")
    if f == 1:
        logger.warning("division_by_zero", operand="1 - fee")
        raise DivisionByZeroError("1 - fee")

    with config.local() as ctx:
        ctx.rounding = decimal.ROUND_CEILING
        net_in = r_in * a_out / (r_out - a_out)
        gross_in = net_in / (ONE - f)

    return apply_decimals(gross_in, decimals_in, rounding=decimal.ROUND_CEILING, config=config)


def spot_price(reserve_in: Numeric, reserve_out: Numeric, *, config: QuoteConfig = DEFAULT_CONFIG) -> Decimal:
    """Marginal price of the input token in output-token units, before any trade."""
    r_in = to_non_negative_decimal("reserve_in", reserve_in)
    r_out = to_non_negative_decimal("reserve_out", reserve_out)
    if r_in == 0:
        logger.warning("division_by_zero", operand="reserve_in")
        raise DivisionByZeroError("reserve_in")
    with config.local():
        return r_out / r_in


def _lenient_decimal(value: object) -> Decimal:
    # Anything unusable maps to NaN so the caller's guard can reject it.
    try:
        return to_decimal(value)  # type: ignore[arg-type]
    except InvalidInputError:
        return Decimal("NaN")


def _degenerate(value: Decimal) -> bool:
    return value.is_nan() or value == 0


def price_impact(
    amount_in: object,
    amount_out: object,
    price_in: object,
    price_out: object,
    *,
    config: QuoteConfig = DEFAULT_CONFIG,
) -> Decimal:
    """
    Price impact of a trade as a signed percentage.

        impact = -(1 - value_out / value_in) * 100

    A trade returning less quoted value than it costs yields a negative number.
    If any input or either quoted value is zero or not a number, or the arithmetic
    leaves the decimal range, the impact cannot be computed and 0 is returned;
    this never raises.
    """
    values = [_lenient_decimal(v) for v in (amount_in, amount_out, price_in, price_out)]
    if not any(_degenerate(v) for v in values):
        a_in, a_out, p_in, p_out = values
        try:
            value_out = value_of(a_out, p_out, config=config)
            value_in = value_of(a_in, p_in, config=config)
            if not (_degenerate(value_out) or _degenerate(value_in)):
                with config.local():
                    return -((ONE - value_out / value_in) * HUNDRED)
        except decimal.DecimalException:
            pass

    logger.debug(
        "price_impact_degenerate_input",
        amount_in=str(amount_in),
        amount_out=str(amount_out),
        price_in=str(price_in),
        price_out=str(price_out),
    )
    return ZERO


def minimum_amount_out(
    amount_out: Numeric,
    slippage_tolerance: Optional[Numeric] = None,
    *,
    config: QuoteConfig = DEFAULT_CONFIG,
) -> Decimal:
    """
    Smallest raw output to accept for a quoted raw `amount_out`.

    `slippage_tolerance` is a percentage in [0, 100]; None selects the configured
    default. The result is rounded down.
    """
    out = to_non_negative_decimal("amount_out", amount_out)
    if slippage_tolerance is None:
        tolerance = config.slippage_tolerance
    else:
        tolerance = to_decimal(slippage_tolerance)
        if not (0 <= tolerance <= 100):
            raise InvalidInputError(f"slippage_tolerance must be in [0, 100]: {tolerance}")
    with config.local():
        minimum = out * (ONE - tolerance / HUNDRED)
    return round_units(minimum, rounding=decimal.ROUND_FLOOR, config=config)


__all__ = [
    "DEFAULT_FEE",
    "quote_out",
    "amount_out",
    "amount_in",
    "spot_price",
    "price_impact",
    "minimum_amount_out",
]
