"""
Command-line quoting tool.

    dexquote swap --amount-in 100 --reserve-in 1000 --reserve-out 1000
    dexquote add --amount0 2000000 --amount1 8000000 --decimals0 6 --decimals1 6 \
        --reserve0 0 --reserve1 0 --total-supply 0
    dexquote redeem --reserve0 100 --reserve1 200 --total-supply 50 --lp-balance 5

Results are printed as JSON with decimals rendered as strings.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from decimal import Decimal
from typing import Any, Dict, List, Optional

import structlog
import yaml

from .core.config import QuoteConfig, config_from_env, load_config
from .core.liquidity import add_percentage_for_pair, add_position_for_pair, token_balances
from .core.scaling import remove_decimals
from .core.swap import amount_out, minimum_amount_out, price_impact, spot_price
from .state.pairs import pair_snapshot


def _configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.WARNING
    structlog.configure(
        logger_factory=structlog.PrintLoggerFactory(sys.stderr),
        wrapper_class=structlog.make_filtering_bound_logger(level),
    )


def _jsonable(obj: Dict[str, Any]) -> Dict[str, Any]:
    return {k: (str(v) if isinstance(v, Decimal) else v) for k, v in obj.items()}


def _cmd_swap(args: argparse.Namespace, cfg: QuoteConfig) -> Dict[str, Any]:
    out = amount_out(
        args.amount_in,
        args.decimals_in,
        args.decimals_out,
        args.reserve_in,
        args.reserve_out,
        args.fee,
        config=cfg,
    )
    result: Dict[str, Any] = {
        "amount_out": out,
        "minimum_amount_out": minimum_amount_out(out, args.slippage, config=cfg),
        "spot_price": spot_price(args.reserve_in, args.reserve_out, config=cfg),
    }
    if args.price_in is not None and args.price_out is not None:
        result["price_impact"] = price_impact(
            remove_decimals(args.amount_in, args.decimals_in, config=cfg),
            remove_decimals(out, args.decimals_out, config=cfg),
            args.price_in,
            args.price_out,
            config=cfg,
        )
    return result


def _cmd_add(args: argparse.Namespace, cfg: QuoteConfig) -> Dict[str, Any]:
    pair = pair_snapshot(args.reserve0, args.reserve1, args.total_supply, args.decimals0, args.decimals1)
    return {
        "lp": add_position_for_pair(pair, args.amount0, args.amount1, config=cfg),
        "percentage": add_percentage_for_pair(pair, args.amount0, args.amount1, config=cfg),
        "lp_decimals": pair.lp_decimals,
    }


def _cmd_redeem(args: argparse.Namespace, cfg: QuoteConfig) -> Dict[str, Any]:
    pair = pair_snapshot(args.reserve0, args.reserve1, args.total_supply)
    balances = token_balances(pair, args.lp_balance, config=cfg)
    return {"token0": balances.token0, "token1": balances.token1}


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="dexquote", description="Constant-product swap and liquidity quotes")
    p.add_argument("--config", default="", help="YAML config file (DEXQUOTE_* env vars override it)")
    p.add_argument("-v", "--verbose", action="store_true", help="Log debug events to stderr")
    sub = p.add_subparsers(dest="command", required=True)

    swap = sub.add_parser("swap", help="Quote an exact-in swap")
    swap.add_argument("--amount-in", required=True, help="Raw input amount")
    swap.add_argument("--decimals-in", type=int, default=0)
    swap.add_argument("--decimals-out", type=int, default=0)
    swap.add_argument("--reserve-in", required=True)
    swap.add_argument("--reserve-out", required=True)
    swap.add_argument("--fee", default=None, help="Fee fraction, e.g. 0.003")
    swap.add_argument("--slippage", default=None, help="Slippage tolerance in percent")
    swap.add_argument("--price-in", default=None)
    swap.add_argument("--price-out", default=None)
    swap.set_defaults(handler=_cmd_swap)

    add = sub.add_parser("add", help="Quote the LP position minted for a deposit")
    add.add_argument("--amount0", required=True, help="Raw token0 amount")
    add.add_argument("--amount1", required=True, help="Raw token1 amount")
    add.add_argument("--decimals0", type=int, default=0)
    add.add_argument("--decimals1", type=int, default=0)
    add.add_argument("--reserve0", required=True)
    add.add_argument("--reserve1", required=True)
    add.add_argument("--total-supply", required=True)
    add.set_defaults(handler=_cmd_add)

    redeem = sub.add_parser("redeem", help="Quote token balances redeemable for an LP balance")
    redeem.add_argument("--reserve0", required=True)
    redeem.add_argument("--reserve1", required=True)
    redeem.add_argument("--total-supply", required=True)
    redeem.add_argument("--lp-balance", required=True)
    redeem.set_defaults(handler=_cmd_redeem)

    return p


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    _configure_logging(args.verbose)

    try:
        base = load_config(args.config) if args.config else QuoteConfig()
        cfg = config_from_env(base=base)
        result = args.handler(args, cfg)
    except (ValueError, OSError, yaml.YAMLError) as exc:
        print(f"[dexquote] FAIL: {exc}", file=sys.stderr)
        return 2

    print(json.dumps(_jsonable(result), sort_keys=True))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
