"""
Runtime configuration for the quoting core.

A `QuoteConfig` is immutable and owns the `decimal.Context` every operation
evaluates in, so results never depend on the caller's thread-local context.
"""

from __future__ import annotations

import decimal
import os
from dataclasses import dataclass, field, fields
from decimal import Decimal
from pathlib import Path
from typing import Any, ContextManager, Mapping, Optional

import structlog
import yaml

logger = structlog.get_logger()

# Enough significant digits for uint256-sized reserves (up to ~10^77).
DEFAULT_PRECISION = 78
MIN_PRECISION = 28
MAX_PRECISION = 1000

ENV_PREFIX = "DEXQUOTE_"

# 0.3%, the pool canister's swap fee.
DEFAULT_FEE = Decimal("0.003")


def _parse_decimal(name: str, value: object) -> Decimal:
    if isinstance(value, bool):
        raise ValueError(f"{name} must be a number, got bool")
    if isinstance(value, float):
        value = repr(value)
    try:
        out = Decimal(value) if isinstance(value, (Decimal, int, str)) else None
    except decimal.InvalidOperation as exc:
        raise ValueError(f"{name} is not a decimal: {value!r}") from exc
    if out is None or not out.is_finite():
        raise ValueError(f"{name} is not a finite decimal: {value!r}")
    return out


@dataclass(frozen=True)
class QuoteConfig:
    """Precision and default policy values shared by the swap and liquidity engines."""

    precision: int = DEFAULT_PRECISION
    default_fee: Decimal = DEFAULT_FEE
    # Percent, e.g. 0.5 means 0.5%.
    slippage_tolerance: Decimal = Decimal("0.5")
    context: decimal.Context = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if not isinstance(self.precision, int) or isinstance(self.precision, bool):
            raise ValueError(f"precision must be an int: {self.precision!r}")
        if not (MIN_PRECISION <= self.precision <= MAX_PRECISION):
            raise ValueError(
                f"precision must be in [{MIN_PRECISION}, {MAX_PRECISION}]: {self.precision}"
            )
        fee = _parse_decimal("default_fee", self.default_fee)
        if not (0 <= fee <= 1):
            raise ValueError(f"default_fee must be in [0, 1]: {fee}")
        tolerance = _parse_decimal("slippage_tolerance", self.slippage_tolerance)
        if not (0 <= tolerance <= 100):
            raise ValueError(f"slippage_tolerance must be in [0, 100]: {tolerance}")

        object.__setattr__(self, "default_fee", fee)
        object.__setattr__(self, "slippage_tolerance", tolerance)
        object.__setattr__(
            self,
            "context",
            decimal.Context(
                prec=self.precision,
                rounding=decimal.ROUND_HALF_EVEN,
                traps=[decimal.InvalidOperation, decimal.DivisionByZero, decimal.Overflow],
            ),
        )

    def local(self) -> ContextManager[decimal.Context]:
        """Return a context manager that evaluates decimal arithmetic under this config."""
        return decimal.localcontext(self.context)


DEFAULT_CONFIG = QuoteConfig()


def _settable_fields() -> set[str]:
    return {f.name for f in fields(QuoteConfig) if f.init}


def config_from_mapping(obj: Mapping[str, Any]) -> QuoteConfig:
    """Build a config from a plain mapping, rejecting unknown keys."""
    if not isinstance(obj, Mapping):
        raise ValueError("config must be a mapping")
    unknown = sorted(set(obj) - _settable_fields())
    if unknown:
        raise ValueError(f"unknown config keys: {', '.join(unknown)}")
    return QuoteConfig(**dict(obj))


def load_config(path: Path | str) -> QuoteConfig:
    """Load a `QuoteConfig` from a YAML file. An empty file yields the defaults."""
    p = Path(path)
    obj = yaml.safe_load(p.read_text(encoding="utf-8"))
    if obj is None:
        obj = {}
    cfg = config_from_mapping(obj)
    logger.info("config_loaded", path=str(p), precision=cfg.precision, default_fee=str(cfg.default_fee))
    return cfg


def config_from_env(
    environ: Optional[Mapping[str, str]] = None,
    *,
    base: QuoteConfig = DEFAULT_CONFIG,
) -> QuoteConfig:
    """
    Overlay `DEXQUOTE_*` environment variables on `base`.

    Recognised: DEXQUOTE_PRECISION, DEXQUOTE_DEFAULT_FEE, DEXQUOTE_SLIPPAGE_TOLERANCE.
    Blank values are ignored.
    """
    env = os.environ if environ is None else environ
    values: dict[str, Any] = {
        "precision": base.precision,
        "default_fee": base.default_fee,
        "slippage_tolerance": base.slippage_tolerance,
    }
    for name in values:
        raw = env.get(ENV_PREFIX + name.upper())
        if raw is None or not raw.strip():
            continue
        raw = raw.strip()
        if name == "precision":
            try:
                values[name] = int(raw)
            except ValueError as exc:
                raise ValueError(f"{ENV_PREFIX}PRECISION must be an int: {raw!r}") from exc
        else:
            values[name] = raw
    return QuoteConfig(**values)
