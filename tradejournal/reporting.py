"""
Building and writing dashboard reports.
"""
import json
from dataclasses import dataclass
from datetime import date
from functools import reduce
from pathlib import Path
from typing import Any, Dict, List, Sequence

import pandas as pd
from rich.console import Console
from rich.table import Table

from tradejournal.config import Config
from tradejournal.metrics import (
    PROFIT_FACTOR_CAP,
    compute_daily_pnl,
    compute_metrics,
    generate_equity_curve,
)
from tradejournal.pnl import apply_pnl_to_balance
from tradejournal.timeframe import resolve_cutoff
from tradejournal.types import ChartPoint, DailyPnL, DashboardMetrics, Trade

__all__ = [
    "DashboardReport",
    "build_report",
    "format_currency",
    "format_compact_pnl",
    "metrics_table",
    "generate_all_reports",
]


@dataclass(frozen=True)
class DashboardReport:
    account_name: str
    timeframe: str
    cutoff: date
    current_balance: float
    metrics: DashboardMetrics
    equity_curve: List[ChartPoint]
    daily_pnl: List[DailyPnL]


def format_currency(amount: float) -> str:
    """Formats an amount as US dollars, e.g. "-$1,234.50"."""
    sign = "-" if amount < 0 else ""
    return f"{sign}${abs(amount):,.2f}"


def format_compact_pnl(amount: float) -> str:
    """Short form used in calendar cells: "$1.2k" above a thousand, whole dollars below."""
    sign = "" if amount >= 0 else "-"
    magnitude = abs(amount)
    if magnitude >= 1000:
        return f"{sign}${magnitude / 1000:.1f}k"
    return f"{sign}${magnitude:.0f}"


def _format_profit_factor(value: float) -> str:
    return "∞" if value >= PROFIT_FACTOR_CAP else f"{value:.2f}"


def build_report(config: Config, trades: Sequence[Trade], today: date) -> DashboardReport:
    """
    Computes everything the dashboard shows for the configured account.

    Metrics and the daily calendar cover all trades; the equity curve is
    limited to the configured timeframe. When the configuration does not
    pin a current balance it is derived by booking every recorded P&L on
    top of the initial balance.
    """
    account = config.account
    as_of = config.dashboard.as_of or today
    cutoff = resolve_cutoff(config.dashboard.timeframe, as_of)

    current_balance = account.current_balance
    if current_balance is None:
        current_balance = reduce(
            apply_pnl_to_balance, (t.pnl_amount for t in trades), float(account.initial_balance)
        )

    return DashboardReport(
        account_name=account.name,
        timeframe=config.dashboard.timeframe,
        cutoff=cutoff,
        current_balance=current_balance,
        metrics=compute_metrics(trades),
        equity_curve=generate_equity_curve(trades, account.initial_balance, cutoff),
        daily_pnl=compute_daily_pnl(trades),
    )


def metrics_table(metrics: DashboardMetrics, title: str = "Performance") -> Table:
    """Renders dashboard metrics as a two-column rich table."""
    table = Table(title=title)
    table.add_column("Metric", style="bold")
    table.add_column("Value", justify="right")

    rows = [
        ("Total Trades", str(metrics.total_trades)),
        ("Winning Trades", str(metrics.winning_trades)),
        ("Losing Trades", str(metrics.losing_trades)),
        ("Win Rate", f"{metrics.win_rate:.1f}%"),
        ("Total P&L", format_currency(metrics.total_pnl)),
        ("Average P&L", format_currency(metrics.average_pnl)),
        ("Best Trade", format_currency(metrics.best_trade)),
        ("Worst Trade", format_currency(metrics.worst_trade)),
        ("Average Win", format_currency(metrics.average_win)),
        ("Average Loss", format_currency(metrics.average_loss)),
        ("Profit Factor", _format_profit_factor(metrics.profit_factor)),
        ("Sharpe Ratio", f"{metrics.sharpe_ratio:.2f}"),
    ]
    for name, value in rows:
        table.add_row(name, value)
    return table


def _summary_dict(config: Config, report: DashboardReport) -> Dict[str, Any]:
    return {
        "run_name": config.run.name,
        "account": report.account_name,
        "timeframe": report.timeframe,
        "cutoff": report.cutoff.isoformat(),
        "current_balance": report.current_balance,
        "metrics": report.metrics.model_dump(mode="json"),
    }


# impure
def _generate_summary_json(config: Config, report: DashboardReport, output_dir: Path) -> None:
    """Generates a JSON file with summary metrics."""
    with (output_dir / "summary.json").open("w", encoding="utf-8") as f:
        json.dump(_summary_dict(config, report), f, indent=2)


# impure
def _generate_summary_markdown(config: Config, report: DashboardReport, output_dir: Path) -> None:
    """Generates a Markdown file with a human-readable summary."""
    m = report.metrics
    md = f"# Trading Summary: {config.run.name}\n\n"
    md += f"Account **{report.account_name}**, balance {format_currency(report.current_balance)}\n\n"
    md += "## Key Metrics\n\n"
    md += f"- **Total Trades**: {m.total_trades}\n"
    md += f"- **Win Rate**: {m.win_rate:.1f}%\n"
    md += f"- **Total P&L**: {format_currency(m.total_pnl)}\n"
    md += f"- **Profit Factor**: {_format_profit_factor(m.profit_factor)}\n"
    md += f"- **Sharpe Ratio**: {m.sharpe_ratio:.2f}\n"
    md += f"- **Best Trade**: {format_currency(m.best_trade)}\n"
    md += f"- **Worst Trade**: {format_currency(m.worst_trade)}\n"

    if report.daily_pnl:
        md += "\n## Daily P&L\n\n| Date | P&L | Trades |\n|---|---:|---:|\n"
        for day in sorted(report.daily_pnl, key=lambda d: d.date):
            md += f"| {day.date.isoformat()} | {format_compact_pnl(day.pnl)} | {day.trade_count} |\n"

    (output_dir / "summary.md").write_text(md, encoding="utf-8")


# impure
def _generate_series_csv(report: DashboardReport, output_dir: Path) -> None:
    """Writes the equity curve and the daily P&L series as CSV files."""
    pd.DataFrame([p.model_dump() for p in report.equity_curve]).to_csv(
        output_dir / "equity_curve.csv", index=False
    )
    pd.DataFrame(
        [d.model_dump() for d in report.daily_pnl], columns=["date", "pnl", "trade_count"]
    ).to_csv(output_dir / "daily_pnl.csv", index=False)


# impure
def generate_all_reports(
    config: Config,
    report: DashboardReport,
    run_dir: Path,
    console: Console,
) -> None:
    """
    Orchestrates the generation of all output reports.
    #impure: Writes to the filesystem.
    """
    formats = config.reporting.output_formats

    if "csv" in formats:
        console.print("Generating equity curve and daily P&L CSV...")
        _generate_series_csv(report, run_dir)

    if "json" in formats:
        console.print("Generating summary JSON...")
        _generate_summary_json(config, report, run_dir)

    if "markdown" in formats:
        console.print("Generating summary Markdown...")
        _generate_summary_markdown(config, report, run_dir)

    console.print("All reports generated.")
