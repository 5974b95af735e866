# [TESTER] v1

from __future__ import annotations

from decimal import Decimal

import pytest
from structlog.testing import capture_logs

from dexquote.core.errors import DivisionByZeroError, InvalidDecimalsError, InvalidInputError
from dexquote.core.liquidity import (
    MINIMUM_LIQUIDITY,
    TokenBalances,
    add_percentage,
    add_position,
    add_position_for_pair,
    pair_decimals,
    token_balances,
)
from dexquote.state.pairs import pair_snapshot


def _position(**overrides: object) -> Decimal:
    params: dict[str, object] = {
        "token0_amount": 10,
        "token1_amount": 20,
        "token0_decimals": 0,
        "token1_decimals": 0,
        "reserve0": 100,
        "reserve1": 200,
        "total_supply": 50,
    }
    params.update(overrides)
    return add_position(**params)  # type: ignore[arg-type]


def test_minimum_liquidity_constant() -> None:
    assert MINIMUM_LIQUIDITY == Decimal(1000)


@pytest.mark.parametrize(
    ("d0", "d1", "expected"),
    [(0, 0, 0), (6, 6, 6), (6, 7, 6), (6, 18, 12), (8, 9, 8), (18, 18, 18)],
)
def test_pair_decimals_floors_the_mean(d0: int, d1: int, expected: int) -> None:
    assert pair_decimals(d0, d1) == expected


def test_pair_decimals_rejects_negative() -> None:
    with pytest.raises(InvalidDecimalsError):
        pair_decimals(-1, 6)


def test_first_deposit_below_minimum_liquidity_mints_negative() -> None:
    # sqrt(2 * 8) - 1000 = -996; the core does not clamp at zero.
    with capture_logs() as logs:
        lp = _position(
            token0_amount=2_000_000,
            token1_amount=8_000_000,
            token0_decimals=6,
            token1_decimals=6,
            reserve0=0,
            reserve1=0,
            total_supply=0,
        )
    assert lp == Decimal(-996)
    assert any(
        e["event"] == "first_deposit_below_minimum_liquidity" and e["log_level"] == "warning"
        for e in logs
    )


def test_first_deposit_uses_geometric_mean() -> None:
    lp = _position(
        token0_amount=4_000_000,
        token1_amount=1_000_000,
        reserve0=0,
        reserve1=0,
        total_supply=0,
    )
    assert lp == Decimal(2_000_000) - MINIMUM_LIQUIDITY


def test_proportional_deposit_mints_min_of_both_sides() -> None:
    # amount1_optimal = 10 * 200 / 100 = 20 == amount1_desired
    assert _position() == Decimal(5)


def test_excess_token1_is_not_credited() -> None:
    assert _position(token1_amount=30) == Decimal(5)


def test_short_token1_caps_token0_at_ratio() -> None:
    # amount1_optimal = 40 > 20, so amount0 = 20 * 100 / 200 = 10
    assert _position(token0_amount=20, token1_amount=20) == Decimal(5)


def test_result_rounds_half_up_once_at_the_end() -> None:
    # 1 * 2 / 4 = 0.5 on both sides
    lp = _position(token0_amount=1, token1_amount=1, reserve0=4, reserve1=4, total_supply=2)
    assert lp == Decimal(1)


def test_reserves_present_but_no_supply_uses_first_mint_formula() -> None:
    # sqrt(10_000 * 20_000) - 1000 = 13142.13...
    lp = _position(token0_amount=10_000, token1_amount=20_000, total_supply=0)
    assert lp == Decimal(13142)


def test_desired_amounts_are_rescaled_by_token_decimals() -> None:
    lp = _position(
        token0_amount=10 * 10**6,
        token1_amount=20 * 10**18,
        token0_decimals=6,
        token1_decimals=18,
    )
    assert lp == Decimal(5)


def test_single_zero_reserve0_raises_division_by_zero() -> None:
    with pytest.raises(DivisionByZeroError) as excinfo:
        _position(reserve0=0, reserve1=100)
    assert excinfo.value.operand == "reserve0"


def test_single_zero_reserve1_raises_division_by_zero() -> None:
    with pytest.raises(DivisionByZeroError) as excinfo:
        _position(reserve0=100, reserve1=0)
    assert excinfo.value.operand == "reserve1"


def test_empty_reserves_with_outstanding_supply_raises() -> None:
    with pytest.raises(DivisionByZeroError):
        _position(reserve0=0, reserve1=0, total_supply=10)


@pytest.mark.parametrize("field", ["token0_amount", "reserve1", "total_supply"])
def test_negative_inputs_are_rejected(field: str) -> None:
    with pytest.raises(InvalidInputError):
        _position(**{field: -1})


def test_add_percentage_first_depositor_owns_the_pool() -> None:
    pct = add_percentage(
        token0_amount=2_000_000,
        token1_amount=8_000_000,
        token0_decimals=6,
        token1_decimals=6,
        reserve0=0,
        reserve1=0,
        total_supply=0,
    )
    assert pct == Decimal(1)


def test_add_percentage_is_share_after_mint() -> None:
    pct = add_percentage(
        token0_amount=10,
        token1_amount=20,
        token0_decimals=0,
        token1_decimals=0,
        reserve0=100,
        reserve1=200,
        total_supply=50,
    )
    # 5 / (5 + 50)
    assert abs(pct - Decimal(1) / Decimal(11)) < Decimal("1e-25")


def test_add_position_for_pair_matches_explicit_call() -> None:
    pair = pair_snapshot(100, 200, 50)
    assert add_position_for_pair(pair, 10, 20) == _position()


def test_token_balances_proportional_share() -> None:
    pair = pair_snapshot(100, 200, 50)
    assert token_balances(pair, 5) == TokenBalances(token0=Decimal(10), token1=Decimal(20))


def test_token_balances_round_down() -> None:
    pair = pair_snapshot(10, 20, 3)
    # 10 / 3 = 3.33..., 20 / 3 = 6.66...
    assert token_balances(pair, 1) == TokenBalances(token0=Decimal(3), token1=Decimal(6))


def test_token_balances_exact_thirds_do_not_lose_a_unit() -> None:
    # Computing reserve * (lp / supply) would give 0.999... and floor to 0.
    pair = pair_snapshot(3, 3, 3)
    assert token_balances(pair, 1) == TokenBalances(token0=Decimal(1), token1=Decimal(1))


def test_token_balances_zero_lp_balance() -> None:
    pair = pair_snapshot(100, 200, 50)
    assert token_balances(pair, 0) == TokenBalances(token0=Decimal(0), token1=Decimal(0))


def test_token_balances_zero_supply_raises() -> None:
    pair = pair_snapshot(100, 200, 0)
    with pytest.raises(DivisionByZeroError, match="total_supply"):
        token_balances(pair, 5)


def test_token_balances_rejects_negative_lp_balance() -> None:
    with pytest.raises(InvalidInputError):
        token_balances(pair_snapshot(100, 200, 50), -1)


def test_token_balances_warns_when_lp_exceeds_supply() -> None:
    with capture_logs() as logs:
        balances = token_balances(pair_snapshot(100, 200, 50), 100)
    assert balances == TokenBalances(token0=Decimal(200), token1=Decimal(400))
    assert [e["event"] for e in logs] == ["lp_balance_exceeds_total_supply"]
