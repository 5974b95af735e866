"""
Pair snapshot: the pool state a quote is computed against.

The snapshot is read from the chain by the caller and handed to the engines as
an immutable value. The core never mutates it and does not judge staleness.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from ..core.liquidity import pair_decimals
from ..core.scaling import Numeric, require_decimals, to_non_negative_decimal


@dataclass(frozen=True)
class PairSnapshot:
    """Reserves, LP supply and token decimals of one trading pair."""

    reserve0: Decimal
    reserve1: Decimal
    total_supply: Decimal
    token0_decimals: int = 0
    token1_decimals: int = 0

    def __post_init__(self) -> None:
        for name in ("reserve0", "reserve1", "total_supply"):
            object.__setattr__(self, name, to_non_negative_decimal(name, getattr(self, name)))
        require_decimals("token0_decimals", self.token0_decimals)
        require_decimals("token1_decimals", self.token1_decimals)

    @property
    def lp_decimals(self) -> int:
        """Display precision of the pair's LP token."""
        return pair_decimals(self.token0_decimals, self.token1_decimals)


def pair_snapshot(
    reserve0: Numeric,
    reserve1: Numeric,
    total_supply: Numeric,
    token0_decimals: int = 0,
    token1_decimals: int = 0,
) -> PairSnapshot:
    """Build a snapshot from loosely-typed numeric inputs (strings, ints, Decimals)."""
    return PairSnapshot(
        reserve0=reserve0,  # type: ignore[arg-type]
        reserve1=reserve1,  # type: ignore[arg-type]
        total_supply=total_supply,  # type: ignore[arg-type]
        token0_decimals=token0_decimals,
        token1_decimals=token1_decimals,
    )
