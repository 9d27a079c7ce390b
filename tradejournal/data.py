"""
Loading trade ledgers and saved news feeds from disk.
"""
import json
import logging
from pathlib import Path
from typing import Any, Dict, List

import pandas as pd
from pydantic import ValidationError

from tradejournal.pnl import reconcile_pnl_sign
from tradejournal.types import NewsArticle, Trade

__all__ = ["load_trades", "load_articles", "REQUIRED_TRADE_COLUMNS"]

log = logging.getLogger(__name__)

REQUIRED_TRADE_COLUMNS = ["date", "position", "entry_price"]
OPTIONAL_TRADE_COLUMNS = ["exit_price", "pnl_amount", "symbol", "lot_size", "notes"]
NUMERIC_TRADE_COLUMNS = ["entry_price", "exit_price", "pnl_amount", "lot_size"]

# Keys Alpha Vantage uses instead of a feed when a request is rejected.
_FEED_ERROR_KEYS = {
    "Note": "API rate limit reached",
    "Information": "API error",
    "Error Message": "API error",
}


def _row_to_record(row: pd.Series) -> Dict[str, Any]:
    """Drops empty cells so the model defaults apply."""
    return {k: v for k, v in row.items() if pd.notna(v) and v != ""}


# impure
def load_trades(path: Path, reconcile_signs: bool = False) -> List[Trade]:
    """
    Reads a CSV trade ledger.

    Args:
        path: CSV file with at least `date`, `position` and `entry_price`
            columns. `exit_price`, `pnl_amount`, `symbol`, `lot_size` and
            `notes` are optional; empty cells mean "not recorded".
        reconcile_signs: Flip recorded P&L signs that contradict the trade
            direction (see `reconcile_pnl_sign`).

    Returns:
        Trades in file order.
    #impure: Reads from the filesystem.
    """
    if not path.is_file():
        raise FileNotFoundError(f"Trade ledger not found: {path}")

    try:
        df = pd.read_csv(path, dtype={"symbol": str, "notes": str, "position": str})
    except (pd.errors.ParserError, pd.errors.EmptyDataError) as e:
        raise ValueError(f"Could not parse trade ledger {path}: {e}") from e

    missing = [c for c in REQUIRED_TRADE_COLUMNS if c not in df.columns]
    if missing:
        raise ValueError(f"Trade ledger {path} is missing required columns: {missing}")

    columns = REQUIRED_TRADE_COLUMNS + [c for c in OPTIONAL_TRADE_COLUMNS if c in df.columns]
    for col in set(columns) & set(NUMERIC_TRADE_COLUMNS):
        try:
            df[col] = df[col].astype(float)
        except ValueError as e:
            raise ValueError(f"Column '{col}' of {path} must be numeric: {e}") from e

    trades = []
    for idx, row in df[columns].iterrows():
        try:
            trade = Trade(**_row_to_record(row))
        except ValidationError as e:
            # +2: header line and 1-based numbering
            raise ValueError(f"Invalid trade on line {idx + 2} of {path}: {e}") from e
        trades.append(reconcile_pnl_sign(trade) if reconcile_signs else trade)

    completed = sum(1 for t in trades if t.is_completed)
    log.info(f"Loaded {len(trades)} trades ({completed} completed) from {path}")
    return trades


# impure
def load_articles(path: Path) -> List[NewsArticle]:
    """
    Reads a saved Alpha Vantage NEWS_SENTIMENT response.

    Raises ValueError when the response is an API error or rate-limit notice
    instead of a feed. Articles without a title are skipped.
    #impure: Reads from the filesystem.
    """
    if not path.is_file():
        raise FileNotFoundError(f"News feed not found: {path}")

    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in {path}: {e}") from e

    if not isinstance(payload, dict):
        raise ValueError(f"News feed {path} must be a JSON object.")

    for key, prefix in _FEED_ERROR_KEYS.items():
        if key in payload:
            raise ValueError(f"{prefix}: {payload[key]}")

    feed = payload.get("feed")
    if not isinstance(feed, list):
        raise ValueError(f"No news data available in {path}.")

    articles = []
    for item in feed:
        title = (item.get("title") or "").strip() if isinstance(item, dict) else ""
        if not title:
            log.warning(f"Skipping feed entry without a title in {path}")
            continue
        articles.append(
            NewsArticle(
                title=title,
                summary=item.get("summary") or "",
                url=item.get("url"),
                source=item.get("source"),
                time_published=item.get("time_published"),
            )
        )

    log.info(f"Loaded {len(articles)} articles from {path}")
    return articles
