# Copyright 2026 TradeJournal
# SPDX-License-Identifier: MIT
"""Trade Journal: trades, balance ledger, missed trades, trading plan, checklist records."""

from tradejournal.core.journal.models import BalanceEntry, ChecklistRecord, MissedTrade, Trade, TradingPlan
from tradejournal.core.journal.repository import JournalRepository
from tradejournal.core.journal.service import CloseResult, JournalService

__all__ = [
    "BalanceEntry",
    "ChecklistRecord",
    "MissedTrade",
    "Trade",
    "TradingPlan",
    "JournalRepository",
    "CloseResult",
    "JournalService",
]
