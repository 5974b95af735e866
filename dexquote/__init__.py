"""
dexquote: deterministic swap and liquidity quotes for constant-product DEX pairs.

Pure functions over `decimal.Decimal`; no network, ledger or cached state.
"""

from .core import (
    DEFAULT_CONFIG,
    DEFAULT_FEE,
    MINIMUM_LIQUIDITY,
    DexMathError,
    DivisionByZeroError,
    InvalidDecimalsError,
    InvalidInputError,
    QuoteConfig,
    TokenBalances,
    add_percentage,
    add_position,
    amount_in,
    amount_out,
    apply_decimals,
    exponential,
    minimum_amount_out,
    pair_decimals,
    price_impact,
    remove_decimals,
    spot_price,
    to_decimal,
    token_balances,
    value_of,
)
from .state import PairSnapshot, pair_snapshot

__version__ = "0.1.0"

__all__ = [
    "DEFAULT_CONFIG",
    "DEFAULT_FEE",
    "MINIMUM_LIQUIDITY",
    "DexMathError",
    "DivisionByZeroError",
    "InvalidDecimalsError",
    "InvalidInputError",
    "QuoteConfig",
    "TokenBalances",
    "add_percentage",
    "add_position",
    "amount_in",
    "amount_out",
    "apply_decimals",
    "exponential",
    "minimum_amount_out",
    "pair_decimals",
    "price_impact",
    "remove_decimals",
    "spot_price",
    "to_decimal",
    "token_balances",
    "value_of",
    "PairSnapshot",
    "pair_snapshot",
]
