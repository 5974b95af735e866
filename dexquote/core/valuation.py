"""Express token amounts in a common quote unit."""

from __future__ import annotations

from decimal import Decimal

from .config import DEFAULT_CONFIG, QuoteConfig
from .scaling import Numeric, to_decimal


def value_of(amount: Numeric, price: Numeric, *, config: QuoteConfig = DEFAULT_CONFIG) -> Decimal:
    """Quoted value of `amount` tokens at `price` per token. Price freshness is the caller's concern."""
    with config.local():
        return to_decimal(amount) * to_decimal(price)


__all__ = ["value_of"]
