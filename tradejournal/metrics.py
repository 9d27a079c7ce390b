"""
Performance metrics and evaluation.

This module turns the trades of one account into dashboard statistics, an
equity curve and a per-day P&L series. Every function is total: empty or
degenerate input yields zero-valued output rather than an exception.
"""
from datetime import date
from typing import List, Optional, Sequence

import numpy as np
import pandas as pd
from dateutil.relativedelta import relativedelta

from tradejournal.timeframe import ALL_TIME_FLOOR
from tradejournal.types import ChartPoint, DailyPnL, DashboardMetrics, Trade

__all__ = [
    "PROFIT_FACTOR_CAP",
    "TRADING_DAYS_PER_YEAR",
    "compute_metrics",
    "generate_equity_curve",
    "compute_daily_pnl",
]

# Stand-in for an unbounded profit factor (wins recorded, no losses).
PROFIT_FACTOR_CAP = 999.0

# Each trade is treated as one daily sample when annualizing the Sharpe ratio.
TRADING_DAYS_PER_YEAR = 252


def _completed_frame(trades: Sequence[Trade]) -> pd.DataFrame:
    """Builds a date/pnl frame from the completed trades, in input order."""
    records = [
        {"date": t.date, "pnl": float(t.pnl_amount)}
        for t in trades
        if t.pnl_amount is not None
    ]
    return pd.DataFrame(records, columns=["date", "pnl"])


def _profit_factor(gross_win: float, gross_loss: float) -> float:
    if gross_loss > 0:
        return gross_win / gross_loss
    if gross_win > 0:
        return PROFIT_FACTOR_CAP
    return 0.0


def _sharpe_ratio(pnls: pd.Series) -> float:
    """
    Annualized Sharpe ratio of per-trade P&L with a zero risk-free rate.

    Uses the sample standard deviation. With several trades on the same day
    the sqrt(252) scaling overstates the ratio; it is kept for comparability
    with figures already shown to users.
    """
    if len(pnls) < 2 or pnls.nunique() == 1:
        return 0.0

    std = pnls.std(ddof=1)
    if not std > 0:
        return 0.0
    return float(pnls.mean() / std * np.sqrt(TRADING_DAYS_PER_YEAR))


def compute_metrics(trades: Sequence[Trade]) -> DashboardMetrics:
    """
    Calculates dashboard statistics over the completed trades.

    Args:
        trades: Trades of a single account, in any order. Trades without a
            recorded P&L are ignored.

    Returns:
        A DashboardMetrics instance. All fields are zero when there are no
        completed trades. Breakeven trades count toward `total_trades` but
        are neither wins nor losses.
    """
    # Summed as a running total in date order, like the equity curve.
    pnls = _completed_frame(sorted(trades, key=lambda t: t.date))["pnl"]
    if pnls.empty:
        return DashboardMetrics()

    wins = pnls[pnls > 0]
    losses = pnls[pnls < 0]
    total_trades = len(pnls)

    gross_win = float(wins.sum())
    gross_loss = float(abs(losses.sum()))
    total_pnl = float(pnls.cumsum().iloc[-1])

    return DashboardMetrics(
        total_trades=total_trades,
        winning_trades=len(wins),
        losing_trades=len(losses),
        win_rate=len(wins) / total_trades * 100,
        total_pnl=total_pnl,
        average_pnl=total_pnl / total_trades,
        best_trade=float(pnls.max()),
        worst_trade=float(pnls.min()),
        profit_factor=_profit_factor(gross_win, gross_loss),
        average_win=gross_win / len(wins) if len(wins) else 0.0,
        average_loss=gross_loss / len(losses) if len(losses) else 0.0,
        sharpe_ratio=_sharpe_ratio(pnls),
    )


def generate_equity_curve(
    trades: Sequence[Trade],
    initial_balance: float,
    cutoff: Optional[date] = None,
) -> List[ChartPoint]:
    """
    Creates the account equity curve from the trades on or after `cutoff`.

    Args:
        trades: Trades of a single account, in any order.
        initial_balance: Account balance before the first trade.
        cutoff: Earliest trade date to include. None includes every trade.

    Returns:
        A list of ChartPoint ordered by date. The first point is a synthetic
        anchor at `initial_balance` one day before the first included trade
        (or at the cutoff when no trade is included, `ALL_TIME_FLOOR` when
        there is neither). Trades without a recorded P&L are skipped.
    """
    included = sorted(
        (t for t in trades if cutoff is None or t.date >= cutoff), key=lambda t: t.date
    )

    if included:
        anchor_date = included[0].date - relativedelta(days=1)
    else:
        anchor_date = cutoff if cutoff is not None else ALL_TIME_FLOOR
    curve = [ChartPoint(date=anchor_date, balance=initial_balance, pnl=None, cumulative_pnl=0.0)]

    completed = _completed_frame(included)
    if completed.empty:
        return curve

    completed["cumulative_pnl"] = completed["pnl"].cumsum()
    completed["balance"] = initial_balance + completed["cumulative_pnl"]

    for row in completed.itertuples(index=False):
        curve.append(
            ChartPoint(
                date=row.date,
                balance=float(row.balance),
                pnl=float(row.pnl),
                cumulative_pnl=float(row.cumulative_pnl),
            )
        )
    return curve


def compute_daily_pnl(trades: Sequence[Trade]) -> List[DailyPnL]:
    """
    Sums the completed trades of each trading day.

    Days are returned in order of first appearance in `trades`; sort the
    result if a chronological calendar is needed.
    """
    completed = _completed_frame(trades)
    if completed.empty:
        return []

    daily = completed.groupby("date", sort=False)["pnl"].agg(["sum", "count"])
    return [
        DailyPnL(date=day, pnl=float(row["sum"]), trade_count=int(row["count"]))
        for day, row in daily.iterrows()
    ]
