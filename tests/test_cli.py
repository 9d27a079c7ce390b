"""
Tests for CLI interface.
"""
import copy
import json
from pathlib import Path

import yaml
from typer.testing import CliRunner

from cli import app

# Default CliRunner mixes stderr and stdout into the .output attribute,
# which is what we want for testing console output.
runner = CliRunner()


FULL_CONFIG_DICT = {
    "run": {"name": "test_cli_run", "output_dir": ""},
    "account": {"name": "Main", "initial_balance": 10000.0},
    "dashboard": {"timeframe": "all"},
    "journal": {"reconcile_pnl_sign": False},
    "reporting": {"output_formats": ["json", "markdown", "csv"]},
}

LEDGER_CSV = """date,position,entry_price,exit_price,pnl_amount
2024-03-01,Long,100,105,500
2024-03-02,Short,100,102,-200
2024-03-03,Long,100,103,300
"""


def create_temp_config(tmp_path: Path, **overrides) -> Path:
    """Creates a temporary, valid YAML config file for testing."""
    config_path = tmp_path / "test_config.yaml"
    config_dict = copy.deepcopy(FULL_CONFIG_DICT)
    config_dict["run"]["output_dir"] = str(tmp_path / "out")
    for section, values in overrides.items():
        config_dict[section].update(values)
    config_path.write_text(yaml.dump(config_dict))
    return config_path


def create_temp_ledger(tmp_path: Path, content: str = LEDGER_CSV) -> Path:
    path = tmp_path / "trades.csv"
    path.write_text(content)
    return path


def test_cli_help() -> None:
    """Test CLI --help flag."""
    result = runner.invoke(app, ["--help"])
    assert result.exit_code == 0
    assert "dashboard" in result.output
    assert "sentiment" in result.output


def test_cli_dashboard_with_missing_config_file(tmp_path: Path) -> None:
    """Test that `dashboard` exits if the config file does not exist."""
    ledger = create_temp_ledger(tmp_path)
    result = runner.invoke(app, ["dashboard", "--config", "nonexistent.yaml", "--trades", str(ledger)])
    assert result.exit_code == 2


def test_cli_dashboard_writes_reports(tmp_path: Path) -> None:
    config_path = create_temp_config(tmp_path)
    ledger = create_temp_ledger(tmp_path)

    result = runner.invoke(app, ["dashboard", "-c", str(config_path), "-t", str(ledger)])

    assert result.exit_code == 0, result.output
    assert "Dashboard command finished" in result.output
    out_dir = tmp_path / "out"
    for name in ("summary.json", "summary.md", "equity_curve.csv", "daily_pnl.csv"):
        assert (out_dir / name).exists()

    summary = json.loads((out_dir / "summary.json").read_text())
    assert summary["metrics"]["total_trades"] == 3
    assert summary["metrics"]["total_pnl"] == 600.0
    assert summary["current_balance"] == 10600.0


def test_cli_dashboard_timeframe_override(tmp_path: Path) -> None:
    config_path = create_temp_config(tmp_path)
    ledger = create_temp_ledger(tmp_path)

    result = runner.invoke(
        app, ["dashboard", "-c", str(config_path), "-t", str(ledger), "--timeframe", "7d"]
    )

    assert result.exit_code == 0, result.output
    summary = json.loads((tmp_path / "out" / "summary.json").read_text())
    assert summary["timeframe"] == "7d"


def test_cli_dashboard_reconciles_signs_from_config(tmp_path: Path) -> None:
    config_path = create_temp_config(tmp_path, journal={"reconcile_pnl_sign": True})
    ledger = create_temp_ledger(
        tmp_path, "date,position,entry_price,exit_price,pnl_amount\n2024-03-01,Long,100,95,50\n"
    )

    result = runner.invoke(app, ["dashboard", "-c", str(config_path), "-t", str(ledger)])

    assert result.exit_code == 0, result.output
    summary = json.loads((tmp_path / "out" / "summary.json").read_text())
    assert summary["metrics"]["total_pnl"] == -50.0


def test_cli_dashboard_invalid_config(tmp_path: Path) -> None:
    config_path = create_temp_config(tmp_path, account={"initial_balance": -5})
    ledger = create_temp_ledger(tmp_path)

    result = runner.invoke(app, ["dashboard", "-c", str(config_path), "-t", str(ledger)])

    assert result.exit_code == 1
    assert "Configuration Error" in result.output


def test_cli_dashboard_invalid_ledger(tmp_path: Path) -> None:
    config_path = create_temp_config(tmp_path)
    ledger = create_temp_ledger(tmp_path, "date,pnl_amount\n2024-03-01,10\n")

    result = runner.invoke(app, ["dashboard", "-c", str(config_path), "-t", str(ledger)])

    assert result.exit_code == 1
    assert "Data Error" in result.output


def test_cli_sentiment() -> None:
    result = runner.invoke(app, ["sentiment", "--title", "Stocks surge to record high"])
    assert result.exit_code == 0, result.output
    assert "Bullish" in result.output
    assert "+" in result.output


def test_cli_news(tmp_path: Path) -> None:
    feed = tmp_path / "feed.json"
    feed.write_text(json.dumps({"feed": [
        {"title": "Stocks surge to record high", "summary": ""},
        {"title": "Markets crash as losses deepen", "summary": "Investors worry"},
    ]}))

    result = runner.invoke(app, ["news", "--feed", str(feed)])

    assert result.exit_code == 0, result.output
    assert "Bullish: 1, Bearish: 1, Neutral: 0" in result.output


def test_cli_news_rate_limited(tmp_path: Path) -> None:
    feed = tmp_path / "feed.json"
    feed.write_text(json.dumps({"Note": "Please slow down"}))

    result = runner.invoke(app, ["news", "--feed", str(feed)])

    assert result.exit_code == 1
    assert "API rate limit reached" in result.output


def test_cli_dashboard_scalar_config_section(tmp_path: Path) -> None:
    config_path = tmp_path / "scalar.yaml"
    config_dict = copy.deepcopy(FULL_CONFIG_DICT)
    config_dict["account"] = 5
    config_path.write_text(yaml.dump(config_dict))
    ledger = create_temp_ledger(tmp_path)

    result = runner.invoke(app, ["dashboard", "-c", str(config_path), "-t", str(ledger)])

    assert result.exit_code == 1
    assert "Configuration Error" in result.output
