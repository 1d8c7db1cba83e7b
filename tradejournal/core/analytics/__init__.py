# Copyright 2026 TradeJournal
# SPDX-License-Identifier: MIT
"""Performance analytics over trades and missed opportunities."""

from tradejournal.core.analytics.missed import analyze_missed
from tradejournal.core.analytics.trades import (
    INSUFFICIENT_DATA,
    MIN_CLOSED_TRADES,
    analyze_trades,
    day_of_week,
    group_rows,
)

__all__ = [
    "INSUFFICIENT_DATA",
    "MIN_CLOSED_TRADES",
    "analyze_missed",
    "analyze_trades",
    "day_of_week",
    "group_rows",
]
