"""Tests for dashboard report building and output files."""
import copy
import json
from pathlib import Path
from datetime import date
from typing import Dict, Any, List, cast

import pandas as pd
import pytest
from rich.console import Console

from tradejournal.config import Config, _from_dict
from tradejournal.metrics import PROFIT_FACTOR_CAP
from tradejournal.reporting import (
    build_report,
    format_compact_pnl,
    format_currency,
    generate_all_reports,
    metrics_table,
)
from tradejournal.types import DashboardMetrics, Trade

FULL_CONFIG_DICT: Dict[str, Any] = {
    "run": {"name": "test_reporting_run", "output_dir": ""},
    "account": {"name": "Main", "initial_balance": 10000.0},
    "dashboard": {"timeframe": "7d", "as_of": date(2024, 3, 10)},
    "journal": {"reconcile_pnl_sign": False},
    "reporting": {"output_formats": ["csv", "json", "markdown"]},
}


@pytest.fixture
def test_config(tmp_path: Path) -> Config:
    """Pytest fixture to create a valid Config dataclass object for testing."""
    config_dict = copy.deepcopy(FULL_CONFIG_DICT)
    config_dict["run"]["output_dir"] = str(tmp_path)
    return cast(Config, _from_dict(Config, config_dict))


@pytest.fixture
def sample_trades() -> List[Trade]:
    def trade(day: int, pnl):
        return Trade(position="Long", entry_price=100.0, pnl_amount=pnl, date=date(2024, 3, day))

    return [trade(1, 500.0), trade(5, -200.0), trade(5, 300.0), trade(8, None), trade(9, 1500.0)]


@pytest.mark.parametrize(
    "amount, expected",
    [(1234.5, "$1,234.50"), (-1234.5, "-$1,234.50"), (0, "$0.00"), (999999.999, "$1,000,000.00")],
)
def test_format_currency(amount: float, expected: str):
    assert format_currency(amount) == expected


@pytest.mark.parametrize(
    "amount, expected",
    [(1500, "$1.5k"), (-2300, "-$2.3k"), (250, "$250"), (-42.4, "-$42"), (0, "$0")],
)
def test_format_compact_pnl(amount: float, expected: str):
    assert format_compact_pnl(amount) == expected


def test_build_report(test_config: Config, sample_trades: List[Trade]):
    report = build_report(test_config, sample_trades, today=date(2030, 1, 1))

    # as_of from the config wins over today
    assert report.cutoff == date(2024, 3, 3)
    assert report.account_name == "Main"
    assert report.current_balance == 10000.0 + 2100.0

    assert report.metrics.total_trades == 4
    assert report.metrics.total_pnl == 2100.0

    # Equity curve only covers the 7 day window
    assert report.equity_curve[0].date == date(2024, 3, 4)
    assert [p.pnl for p in report.equity_curve[1:]] == [-200.0, 300.0, 1500.0]
    assert report.equity_curve[-1].balance == 11600.0

    assert [(d.date.day, d.pnl, d.trade_count) for d in report.daily_pnl] == [
        (1, 500.0, 1), (5, 100.0, 2), (9, 1500.0, 1),
    ]


def test_build_report_uses_configured_balance(test_config: Config, sample_trades: List[Trade]):
    config_dict = copy.deepcopy(FULL_CONFIG_DICT)
    config_dict["account"]["current_balance"] = 7777.0
    config = cast(Config, _from_dict(Config, config_dict))
    assert build_report(config, sample_trades, date(2024, 3, 10)).current_balance == 7777.0


def test_metrics_table_renders_capped_profit_factor():
    metrics = DashboardMetrics(total_trades=2, winning_trades=2, win_rate=100.0, profit_factor=PROFIT_FACTOR_CAP)
    console = Console(record=True, width=120)
    console.print(metrics_table(metrics))
    output = console.export_text()
    assert "Profit Factor" in output
    assert "∞" in output
    assert "100.0%" in output


def test_generate_all_reports(test_config: Config, sample_trades: List[Trade], tmp_path: Path):
    report = build_report(test_config, sample_trades, date(2024, 3, 10))
    generate_all_reports(test_config, report, tmp_path, Console(quiet=True))

    summary = json.loads((tmp_path / "summary.json").read_text())
    assert summary["run_name"] == "test_reporting_run"
    assert summary["cutoff"] == "2024-03-03"
    assert summary["metrics"]["total_trades"] == 4
    assert summary["metrics"]["total_pnl"] == 2100.0

    md = (tmp_path / "summary.md").read_text()
    assert "# Trading Summary: test_reporting_run" in md
    assert "| 2024-03-09 | $1.5k | 1 |" in md

    equity = pd.read_csv(tmp_path / "equity_curve.csv")
    assert list(equity.columns) == ["date", "balance", "pnl", "cumulative_pnl"]
    assert len(equity) == 4

    daily = pd.read_csv(tmp_path / "daily_pnl.csv")
    assert daily["trade_count"].sum() == 4


def test_generate_all_reports_respects_formats(test_config: Config, sample_trades: List[Trade], tmp_path: Path):
    config_dict = copy.deepcopy(FULL_CONFIG_DICT)
    config_dict["reporting"]["output_formats"] = ["json"]
    config = cast(Config, _from_dict(Config, config_dict))

    out_dir = tmp_path / "only_json"
    out_dir.mkdir()
    generate_all_reports(config, build_report(config, sample_trades, date(2024, 3, 10)), out_dir, Console(quiet=True))

    assert sorted(p.name for p in out_dir.iterdir()) == ["summary.json"]
