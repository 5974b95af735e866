"""
Liquidity position math: LP mint quotes, pool share and redeemable balances.

Mint rules (Uniswap-v2 style, evaluated in the decimal domain):

    first deposit (total_supply == 0):
        lp = sqrt(amount0 * amount1) - MINIMUM_LIQUIDITY
    subsequent deposits:
        lp = min(amount0 * total_supply / reserve0, amount1 * total_supply / reserve1)

Desired amounts are first clipped to the current reserve ratio; the excess of
either token is not credited. Results are rounded to 0 decimal places exactly
once, at the end.

A division by a zero reserve or a zero supply outside the empty-pool branch
raises `DivisionByZeroError`.
"""

from __future__ import annotations

import decimal
from dataclasses import dataclass
from decimal import Decimal
from typing import TYPE_CHECKING, Tuple

import structlog

from .config import DEFAULT_CONFIG, QuoteConfig
from .errors import DivisionByZeroError
from .scaling import (
    ONE,
    Numeric,
    exponential,
    remove_decimals,
    require_decimals,
    round_units,
    to_non_negative_decimal,
)

if TYPE_CHECKING:
    from ..state.pairs import PairSnapshot

logger = structlog.get_logger()

# Locked out of the very first mint by the pool canister.
MINIMUM_LIQUIDITY = exponential(3)


@dataclass(frozen=True)
class TokenBalances:
    token0: Decimal
    token1: Decimal


def _divide(numerator: Decimal, denominator: Decimal, *, operand: str) -> Decimal:
    if denominator == 0:
        logger.warning("division_by_zero", operand=operand)
        raise DivisionByZeroError(operand)
    return numerator / denominator


def pair_decimals(token0_decimals: int, token1_decimals: int) -> int:
    """Display decimals of an LP token: the floored mean of the two token decimals."""
    d0 = require_decimals("token0_decimals", token0_decimals)
    d1 = require_decimals("token1_decimals", token1_decimals)
    return (d0 + d1) // 2


def _ratio_amounts(
    amount0_desired: Decimal,
    amount1_desired: Decimal,
    reserve0: Decimal,
    reserve1: Decimal,
) -> Tuple[Decimal, Decimal]:
    if reserve0 == 0 and reserve1 == 0:
        return amount0_desired, amount1_desired

    amount1_optimal = _divide(amount0_desired * reserve1, reserve0, operand="reserve0")
    if amount1_desired >= amount1_optimal:
        return amount0_desired, amount1_optimal

    amount0_optimal = _divide(amount1_desired * reserve0, reserve1, operand="reserve1")
    return amount0_optimal, amount1_desired


def add_position(
    *,
    token0_amount: Numeric,
    token1_amount: Numeric,
    token0_decimals: int,
    token1_decimals: int,
    reserve0: Numeric,
    reserve1: Numeric,
    total_supply: Numeric,
    config: QuoteConfig = DEFAULT_CONFIG,
) -> Decimal:
    """
    LP tokens minted for depositing the given raw token amounts.

    The result may be negative for a first deposit whose geometric mean is below
    MINIMUM_LIQUIDITY; rejecting such deposits is left to the caller.

    Raises:
        InvalidInputError: negative or unparseable amounts, reserves or supply.
        InvalidDecimalsError: invalid token decimals.
        DivisionByZeroError: exactly one reserve is zero, or a reserve is zero
            while total_supply is not.
    """
    amount0_desired = remove_decimals(token0_amount, token0_decimals, config=config)
    amount1_desired = remove_decimals(token1_amount, token1_decimals, config=config)
    r0 = to_non_negative_decimal("reserve0", reserve0)
    r1 = to_non_negative_decimal("reserve1", reserve1)
    supply = to_non_negative_decimal("total_supply", total_supply)

    with config.local():
        amount0, amount1 = _ratio_amounts(amount0_desired, amount1_desired, r0, r1)

        if supply == 0:
            lp = (amount0 * amount1).sqrt() - MINIMUM_LIQUIDITY
            if lp < 0:
                logger.warning(
                    "first_deposit_below_minimum_liquidity",
                    amount0=str(amount0),
                    amount1=str(amount1),
                    lp=str(lp),
                )
        else:
            lp0 = _divide(amount0 * supply, r0, operand="reserve0")
            lp1 = _divide(amount1 * supply, r1, operand="reserve1")
            lp = min(lp0, lp1)

    return round_units(lp, rounding=decimal.ROUND_HALF_UP, config=config)


def add_percentage(
    *,
    token0_amount: Numeric,
    token1_amount: Numeric,
    token0_decimals: int,
    token1_decimals: int,
    reserve0: Numeric,
    reserve1: Numeric,
    total_supply: Numeric,
    config: QuoteConfig = DEFAULT_CONFIG,
) -> Decimal:
    """
    Share of the pool (as a fraction, 1 == 100%) the deposit would own after minting.

    A first depositor owns the whole pool.
    """
    supply = to_non_negative_decimal("total_supply", total_supply)
    if supply == 0:
        return ONE

    lp = add_position(
        token0_amount=token0_amount,
        token1_amount=token1_amount,
        token0_decimals=token0_decimals,
        token1_decimals=token1_decimals,
        reserve0=reserve0,
        reserve1=reserve1,
        total_supply=supply,
        config=config,
    )
    with config.local():
        return _divide(lp, lp + supply, operand="lp + total_supply")


def add_position_for_pair(
    pair: "PairSnapshot",
    token0_amount: Numeric,
    token1_amount: Numeric,
    *,
    config: QuoteConfig = DEFAULT_CONFIG,
) -> Decimal:
    """`add_position` reading reserves, supply and decimals from a snapshot."""
    return add_position(
        token0_amount=token0_amount,
        token1_amount=token1_amount,
        token0_decimals=pair.token0_decimals,
        token1_decimals=pair.token1_decimals,
        reserve0=pair.reserve0,
        reserve1=pair.reserve1,
        total_supply=pair.total_supply,
        config=config,
    )


def add_percentage_for_pair(
    pair: "PairSnapshot",
    token0_amount: Numeric,
    token1_amount: Numeric,
    *,
    config: QuoteConfig = DEFAULT_CONFIG,
) -> Decimal:
    """`add_percentage` reading reserves, supply and decimals from a snapshot."""
    return add_percentage(
        token0_amount=token0_amount,
        token1_amount=token1_amount,
        token0_decimals=pair.token0_decimals,
        token1_decimals=pair.token1_decimals,
        reserve0=pair.reserve0,
        reserve1=pair.reserve1,
        total_supply=pair.total_supply,
        config=config,
    )


def token_balances(
    pair: "PairSnapshot",
    lp_balance: Numeric,
    *,
    config: QuoteConfig = DEFAULT_CONFIG,
) -> TokenBalances:
    """
    Token amounts redeemable for `lp_balance` LP tokens.

    Each balance is `reserve * lp_balance / total_supply`, rounded down so the
    sum over all holders never exceeds the reserve.

    Raises:
        DivisionByZeroError: if the pair's total_supply is zero.
    """
    lp = to_non_negative_decimal("lp_balance", lp_balance)
    if lp > pair.total_supply:
        logger.warning(
            "lp_balance_exceeds_total_supply",
            lp_balance=str(lp),
            total_supply=str(pair.total_supply),
        )

    with config.local() as ctx:
        # Floor the division too, or a repeating quotient could round up past the exact share.
        ctx.rounding = decimal.ROUND_FLOOR
        token0 = _divide(pair.reserve0 * lp, pair.total_supply, operand="total_supply")
        token1 = _divide(pair.reserve1 * lp, pair.total_supply, operand="total_supply")

    return TokenBalances(
        token0=round_units(token0, rounding=decimal.ROUND_DOWN, config=config),
        token1=round_units(token1, rounding=decimal.ROUND_DOWN, config=config),
    )


__all__ = [
    "MINIMUM_LIQUIDITY",
    "TokenBalances",
    "pair_decimals",
    "add_position",
    "add_percentage",
    "add_position_for_pair",
    "add_percentage_for_pair",
    "token_balances",
]
