# [TESTER] v1

from __future__ import annotations

import json
from decimal import Decimal
from pathlib import Path
from typing import Iterator

import pytest
import structlog

from dexquote.cli import main


@pytest.fixture(autouse=True)
def _reset_structlog() -> Iterator[None]:
    yield
    structlog.reset_defaults()


def _run(capsys: pytest.CaptureFixture[str], argv: list[str]) -> dict:
    assert main(argv) == 0
    return json.loads(capsys.readouterr().out)


def test_swap_quote(capsys: pytest.CaptureFixture[str]) -> None:
    out = _run(capsys, ["swap", "--amount-in", "100", "--reserve-in", "1000", "--reserve-out", "1000"])
    assert out == {"amount_out": "90", "minimum_amount_out": "89", "spot_price": "1"}


def test_swap_quote_with_prices_reports_impact(capsys: pytest.CaptureFixture[str]) -> None:
    out = _run(
        capsys,
        [
            "swap",
            "--amount-in", "100",
            "--reserve-in", "1000",
            "--reserve-out", "1000",
            "--price-in", "1",
            "--price-out", "1",
        ],
    )
    # Received 90 for 100 at equal prices.
    assert Decimal(out["price_impact"]) == Decimal(-10)


def test_add_first_deposit(capsys: pytest.CaptureFixture[str]) -> None:
    out = _run(
        capsys,
        [
            "add",
            "--amount0", "2000000",
            "--amount1", "8000000",
            "--decimals0", "6",
            "--decimals1", "6",
            "--reserve0", "0",
            "--reserve1", "0",
            "--total-supply", "0",
        ],
    )
    assert out == {"lp": "-996", "percentage": "1", "lp_decimals": 6}


def test_redeem(capsys: pytest.CaptureFixture[str]) -> None:
    out = _run(
        capsys,
        ["redeem", "--reserve0", "100", "--reserve1", "200", "--total-supply", "50", "--lp-balance", "5"],
    )
    assert out == {"token0": "10", "token1": "20"}


def test_redeem_against_empty_supply_fails(capsys: pytest.CaptureFixture[str]) -> None:
    rc = main(["redeem", "--reserve0", "100", "--reserve1", "200", "--total-supply", "0", "--lp-balance", "5"])
    assert rc == 2
    assert "FAIL: division by zero: total_supply is 0" in capsys.readouterr().err


def test_config_file_sets_default_fee(
    capsys: pytest.CaptureFixture[str], tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.delenv("DEXQUOTE_DEFAULT_FEE", raising=False)
    cfg = tmp_path / "quote.yaml"
    cfg.write_text("default_fee: '0'\n", encoding="utf-8")
    argv = ["swap", "--amount-in", "100", "--decimals-out", "2", "--reserve-in", "1000", "--reserve-out", "1000"]

    assert _run(capsys, argv)["amount_out"] == "9066"
    assert _run(capsys, ["--config", str(cfg), *argv])["amount_out"] == "9090"


def test_env_overrides_config_file(
    capsys: pytest.CaptureFixture[str], tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    cfg = tmp_path / "quote.yaml"
    cfg.write_text("default_fee: '0'\n", encoding="utf-8")
    monkeypatch.setenv("DEXQUOTE_DEFAULT_FEE", "0.003")
    argv = ["--config", str(cfg), "swap", "--amount-in", "100", "--decimals-out", "2", "--reserve-in", "1000", "--reserve-out", "1000"]
    assert _run(capsys, argv)["amount_out"] == "9066"
