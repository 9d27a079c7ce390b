"""
Dashboard lookback windows.
"""
from datetime import date
from enum import Enum

from dateutil.relativedelta import relativedelta

__all__ = ["Timeframe", "ALL_TIME_FLOOR", "resolve_cutoff"]

# Earliest date considered by the "all" timeframe.
ALL_TIME_FLOOR = date(2000, 1, 1)


class Timeframe(str, Enum):
    SEVEN_DAYS = "7d"
    THIRTY_DAYS = "30d"
    NINETY_DAYS = "90d"
    ALL = "all"

    @property
    def days(self) -> int:
        """Length of the window in days, 0 for all time."""
        return {"7d": 7, "30d": 30, "90d": 90}.get(self.value, 0)


def resolve_cutoff(timeframe: Timeframe, today: date) -> date:
    """
    Turns a lookback window into the earliest trade date it includes.

    Args:
        timeframe: The selected window. Plain strings such as "30d" are accepted.
        today: The reference date, usually the current day.
    """
    timeframe = Timeframe(timeframe)
    if timeframe is Timeframe.ALL:
        return ALL_TIME_FLOOR
    return today - relativedelta(days=timeframe.days)
