"""
Shared data structures for the application.
"""
from datetime import date as Date
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

__all__ = [
    "Trade",
    "DashboardMetrics",
    "ChartPoint",
    "DailyPnL",
    "SentimentResult",
    "NewsArticle",
]

SentimentLabel = Literal["Bullish", "Bearish", "Neutral"]
SentimentColor = Literal["positive", "negative", "neutral"]


class Trade(BaseModel):
    """
    Represents a single journal entry.

    A trade is completed once its P&L has been recorded. The P&L is taken as
    entered; it is not recomputed from the prices.
    """

    model_config = ConfigDict(frozen=True)

    position: Literal["Long", "Short"] = Field(..., description="Direction of the trade.")
    entry_price: float = Field(..., gt=0, description="The price at which the trade was entered.")
    exit_price: Optional[float] = Field(None, description="Exit price, None while the trade is open.")
    pnl_amount: Optional[float] = Field(None, description="Realized P&L in account currency.")
    date: Date = Field(..., description="The trading day the trade belongs to.")
    symbol: Optional[str] = Field(None, description="Instrument traded.")
    lot_size: float = Field(1.0, gt=0, description="Position size multiplier.")
    notes: Optional[str] = Field(None, description="Free-form journal notes.")

    @property
    def is_completed(self) -> bool:
        return self.pnl_amount is not None


class DashboardMetrics(BaseModel):
    """Aggregate statistics over the completed trades of one account."""

    model_config = ConfigDict(frozen=True)

    total_trades: int = 0
    winning_trades: int = 0
    losing_trades: int = 0
    win_rate: float = 0.0
    total_pnl: float = 0.0
    average_pnl: float = 0.0
    best_trade: float = 0.0
    worst_trade: float = 0.0
    profit_factor: float = 0.0
    average_win: float = 0.0
    average_loss: float = 0.0
    sharpe_ratio: float = 0.0


class ChartPoint(BaseModel):
    """A single point of the equity curve."""

    model_config = ConfigDict(frozen=True)

    date: Date
    balance: float
    pnl: Optional[float] = None
    cumulative_pnl: float = 0.0


class DailyPnL(BaseModel):
    model_config = ConfigDict(frozen=True)

    date: Date
    pnl: float
    trade_count: int


class SentimentResult(BaseModel):
    """
    Polarity of a piece of text.

    `compound` drives the label; the three proportions come straight from the
    lexicon scorer and are not adjusted afterwards.
    """

    model_config = ConfigDict(frozen=True)

    compound: float = Field(..., ge=-1.0, le=1.0)
    positive: float = 0.0
    negative: float = 0.0
    neutral: float = 0.0
    label: SentimentLabel = "Neutral"
    color: SentimentColor = "neutral"


class NewsArticle(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str
    summary: str = ""
    url: Optional[str] = None
    source: Optional[str] = None
    time_published: Optional[str] = None
    sentiment: Optional[SentimentResult] = None
