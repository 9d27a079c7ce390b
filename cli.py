"""
CLI entry point for the trade journal.
"""
import logging
from dataclasses import replace
from datetime import date
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from tradejournal.config import Config, load_config
from tradejournal.data import load_articles, load_trades
from tradejournal.reporting import build_report, format_currency, generate_all_reports, metrics_table
from tradejournal.sentiment import format_score, icon_for, score_articles, score_financial_text, summarize_sentiment
from tradejournal.timeframe import Timeframe

# Log to stderr to separate from potential data output to stdout.
app = typer.Typer(pretty_exceptions_show_locals=False, help="Trading journal analytics and news sentiment.")
console = Console(stderr=True)


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging.")):
    """Configure logging for every command."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _load_config_or_exit(config_path: Path) -> Config:
    """Helper to load config and exit on failure."""
    try:
        return load_config(config_path)
    except (ValueError, FileNotFoundError) as e:
        console.print(f"[bold red]Configuration Error:[/bold red] {escape(str(e))}")
        raise typer.Exit(code=1)


@app.command()
def dashboard(
    config_path: Path = typer.Option(
        ..., "--config", "-c", help="Path to the YAML configuration file.", exists=True
    ),
    trades_path: Path = typer.Option(
        ..., "--trades", "-t", help="Path to the CSV trade ledger.", exists=True
    ),
    timeframe: Optional[Timeframe] = typer.Option(
        None, "--timeframe", help="Override the equity curve lookback window."
    ),
):
    """Compute dashboard metrics for a trade ledger and write reports."""
    config = _load_config_or_exit(config_path)
    if timeframe is not None:
        config = replace(config, dashboard=replace(config.dashboard, timeframe=timeframe.value))

    try:
        trades = load_trades(trades_path, reconcile_signs=config.journal.reconcile_pnl_sign)
    except (ValueError, FileNotFoundError) as e:
        console.print(f"[bold red]Data Error:[/bold red] {escape(str(e))}")
        raise typer.Exit(code=1)

    report = build_report(config, trades, date.today())
    console.print(metrics_table(report.metrics, title=f"{report.account_name} ({report.timeframe})"))
    console.print(f"Current balance: [cyan]{format_currency(report.current_balance)}[/cyan]")

    run_dir = Path(config.run.output_dir)
    run_dir.mkdir(parents=True, exist_ok=True)
    console.print(f"Reports will be saved to: [cyan]{run_dir}[/cyan]")
    generate_all_reports(config, report, run_dir, console)

    console.print("[bold green]Dashboard command finished.[/bold green]")


@app.command()
def sentiment(
    title: str = typer.Option(..., "--title", help="Headline to score."),
    summary: str = typer.Option("", "--summary", help="Article summary."),
):
    """Score a single headline with the financial sentiment model."""
    result = score_financial_text(title, summary)
    console.print(f"{icon_for(result)} {result.label} {format_score(result.compound)}")


@app.command()
def news(
    feed_path: Path = typer.Option(
        ..., "--feed", "-f", help="Path to a saved NEWS_SENTIMENT JSON response.", exists=True
    ),
):
    """Score every article of a saved news feed."""
    try:
        articles = score_articles(load_articles(feed_path))
    except (ValueError, FileNotFoundError) as e:
        console.print(f"[bold red]Data Error:[/bold red] {escape(str(e))}")
        raise typer.Exit(code=1)

    table = Table(title="News Sentiment")
    table.add_column("")
    table.add_column("Label")
    table.add_column("Score", justify="right")
    table.add_column("Title")
    for article in articles:
        result = article.sentiment
        table.add_row(icon_for(result), result.label, format_score(result.compound), escape(article.title))
    console.print(table)

    counts = summarize_sentiment(articles)
    console.print(", ".join(f"{label}: {count}" for label, count in counts.items()))


if __name__ == "__main__":
    app()
