"""
Trade-level P&L helpers.

Analytics always take `pnl_amount` as recorded. The sign reconciliation below
is an explicit, opt-in correction applied while loading a ledger.
"""
import logging
from typing import Literal, Optional

from tradejournal.types import Trade

__all__ = ["calculate_pnl", "reconcile_pnl_sign", "apply_pnl_to_balance"]

log = logging.getLogger(__name__)


def calculate_pnl(
    position: Literal["Long", "Short"],
    entry_price: float,
    exit_price: float,
    lot_size: float = 1.0,
) -> float:
    """Price-derived P&L: the price move for Long, its negation for Short."""
    price_movement = exit_price - entry_price
    pnl = price_movement if position == "Long" else -price_movement
    return pnl * lot_size


def reconcile_pnl_sign(trade: Trade) -> Trade:
    """
    Flips the sign of a recorded P&L that contradicts the trade direction.

    Only trades with an exit price and a non-zero P&L are considered. A flat
    exit (exit equal to entry) counts as not profitable, so a positive P&L on
    it is turned negative.

    Returns:
        The original trade if nothing changes, otherwise a corrected copy.
    """
    if trade.exit_price is None or not trade.pnl_amount:
        return trade

    expected_profit = calculate_pnl(trade.position, trade.entry_price, trade.exit_price, trade.lot_size) > 0

    pnl = trade.pnl_amount
    if pnl > 0 and not expected_profit:
        corrected = -abs(pnl)
    elif pnl < 0 and expected_profit:
        corrected = abs(pnl)
    else:
        return trade

    log.info(
        f"Corrected P&L from {pnl:+} to {corrected:+} based on {trade.position} position "
        f"({trade.entry_price} -> {trade.exit_price}) on {trade.date}"
    )
    return trade.model_copy(update={"pnl_amount": corrected})


def apply_pnl_to_balance(current_balance: float, pnl_amount: Optional[float]) -> float:
    """Returns the account balance after booking `pnl_amount`."""
    if not pnl_amount:
        return current_balance
    return current_balance + pnl_amount
