"""
Core quoting algorithms: decimal scaling, valuation, swap and liquidity math
"""

from .config import DEFAULT_CONFIG, QuoteConfig, config_from_env, load_config
from .errors import DexMathError, DivisionByZeroError, InvalidDecimalsError, InvalidInputError
from .scaling import apply_decimals, exponential, remove_decimals, round_units, to_decimal
from .valuation import value_of
from .liquidity import (
    MINIMUM_LIQUIDITY,
    TokenBalances,
    add_percentage,
    add_percentage_for_pair,
    add_position,
    add_position_for_pair,
    pair_decimals,
    token_balances,
)
from .swap import (
    DEFAULT_FEE,
    amount_in,
    amount_out,
    minimum_amount_out,
    price_impact,
    quote_out,
    spot_price,
)

__all__ = [
    "DEFAULT_CONFIG",
    "QuoteConfig",
    "config_from_env",
    "load_config",
    "DexMathError",
    "DivisionByZeroError",
    "InvalidDecimalsError",
    "InvalidInputError",
    "apply_decimals",
    "exponential",
    "remove_decimals",
    "round_units",
    "to_decimal",
    "value_of",
    "MINIMUM_LIQUIDITY",
    "TokenBalances",
    "add_percentage",
    "add_percentage_for_pair",
    "add_position",
    "add_position_for_pair",
    "pair_decimals",
    "token_balances",
    "DEFAULT_FEE",
    "amount_in",
    "amount_out",
    "minimum_amount_out",
    "price_impact",
    "quote_out",
    "spot_price",
]
