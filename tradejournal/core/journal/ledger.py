# Copyright 2026 TradeJournal
# SPDX-License-Identifier: MIT
"""Balance ledger helpers.

The ledger is append-only; the most recent entry per partition (account) is
the authoritative balance. Entries are expected newest-first, as the
repository returns them.
"""

from __future__ import annotations

from decimal import ROUND_DOWN, Decimal
from typing import Dict, Iterable, List, Optional

from tradejournal.core.journal.models import BalanceEntry, Trade
from tradejournal.core.workspaces.models import WorkspaceConfig

DEPOSIT_REASON = "Deposit"
WITHDRAWAL_REASON = "Withdrawal"


def latest_balance(entries: Iterable[BalanceEntry], account: Optional[str] = None) -> float:
    """Balance of the newest entry (optionally for one account), 0.0 when empty."""
    for entry in entries:
        if account is None or entry.account == account:
            return entry.balance
    return 0.0


def balances_by_account(config: WorkspaceConfig, entries: List[BalanceEntry]) -> Dict[str, float]:
    """Latest balance per configured account (0.0 for accounts with no history)."""
    return {a.value: latest_balance(entries, a.value) for a in config.accounts}


def current_balance(config: WorkspaceConfig, entries: List[BalanceEntry], account: Optional[str] = None) -> float:
    """Balance used for display and risk checks.

    Multi-account workspaces: the selected account's balance, or the sum over
    accounts when none is selected. Otherwise the newest entry.
    """
    if config.has_accounts:
        if account is not None:
            return latest_balance(entries, account)
        return sum(balances_by_account(config, entries).values())
    return latest_balance(entries)


def risk_allowance(balance: float, risk_fraction: float) -> Decimal:
    """Exact balance x fraction, the bound risk amounts are checked against."""
    return Decimal(str(balance)) * Decimal(str(risk_fraction))


def max_risk(balance: float, risk_fraction: float) -> Decimal:
    """Largest allowed risk amount, truncated to the cent for display."""
    return risk_allowance(balance, risk_fraction).quantize(Decimal("0.01"), rounding=ROUND_DOWN)


def risk_exceeded(risk_amount: Optional[float], balance: float, risk_fraction: float) -> bool:
    if risk_amount is None:
        return False
    return Decimal(str(risk_amount)) > risk_allowance(balance, risk_fraction)


def cash_movement_reason(amount: float, reason: Optional[str]) -> str:
    text = (reason or "").strip()
    if text:
        return text
    return DEPOSIT_REASON if amount >= 0 else WITHDRAWAL_REASON


def trade_pnl_reason(trade: Trade) -> str:
    return f"Trade P&L: {trade.instrument} {trade.direction}"
