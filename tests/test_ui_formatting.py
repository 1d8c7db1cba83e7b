# Copyright 2026 TradeJournal
# SPDX-License-Identifier: MIT
"""Tests for UI display helpers (no Streamlit runtime needed)."""

from __future__ import annotations

from tradejournal.core.journal.models import BalanceEntry, MissedTrade, Trade
from tradejournal.core.workspaces import FOREX, OPTIONS, STOCKS
from tradejournal.ui.formatting import (
    balance_frame,
    fmt_currency,
    fmt_date,
    fmt_pct,
    fmt_ratio,
    fmt_signed_currency,
    groups_frame,
    missed_frame,
    trade_label,
    trades_frame,
)


def test_currency_and_percent_text() -> None:
    assert fmt_currency(1234.5) == "$1,234.50"
    assert fmt_currency(-20) == "-$20.00"
    assert fmt_currency(None) == "-"
    assert fmt_currency("n/a") == "-"
    assert fmt_signed_currency(15) == "+$15.00"
    assert fmt_signed_currency(-15) == "-$15.00"
    assert fmt_pct(42.345) == "42.3%"
    assert fmt_pct(3, signed=True) == "+3.0%"
    assert fmt_ratio(None) == "N/A"
    assert fmt_ratio("N/A") == "N/A"
    assert fmt_ratio(1.5) == "1.50"
    assert fmt_date("2026-01-05T14:30:59.123+00:00") == "2026-01-05 14:30"
    assert fmt_date(None) == "-"


def test_trade_label_for_option() -> None:
    trade = Trade(id=1, instrument="SPY", direction="long", option_type="put", strike=480.0,
                  expiry="2026-12-18", entry_date="2026-01-05T14:30:00+00:00")
    assert trade_label(trade) == "SPY LONG PUT @480 exp 2026-12-18 2026-01-05 14:30"


def test_trades_frame_columns_follow_workspace() -> None:
    trade = Trade(id=1, instrument="EURUSD", direction="long", status="closed", pnl=20.0,
                  entry_date="2026-01-05T14:30:00", exit_date="2026-01-06T10:00:00", pattern="Bull Flag")
    frame = trades_frame(FOREX, [trade])
    assert "Currency Pair" in frame.columns
    assert "Pattern Traded" in frame.columns
    assert "Strike" not in frame.columns
    assert frame.iloc[0]["Currency Pair"] == "EURUSD"
    assert frame.iloc[0]["Exit"] == "2026-01-06 10:00"

    frame = trades_frame(OPTIONS, [])
    assert "Strike" in frame.columns
    assert "Risk" not in frame.columns
    assert frame.empty


def test_balance_frame_with_accounts() -> None:
    entry = BalanceEntry(id=1, balance=1050.0, change_amount=50.0, reason="Trade P&L: SHOP long",
                         created_at="2026-01-05T14:30:00", account="CAD")
    frame = balance_frame([entry], with_account=True)
    assert list(frame.columns) == ["Date", "Change", "Balance", "Reason", "Account"]
    assert frame.iloc[0]["Change"] == "+$50.00"


def test_missed_and_groups_frames() -> None:
    missed = MissedTrade(id=1, instrument="NVDA", direction="long", pattern="Breakout", potential_return=12.0)
    frame = missed_frame(STOCKS, [missed])
    assert frame.iloc[0]["Ticker Symbol"] == "NVDA"
    assert frame.iloc[0]["Setup Spotted"] == "Breakout"
    assert frame.iloc[0]["Potential"] == "+12.0%"

    groups = [{"key": "Monday", "count": 2, "wins": 1, "losses": 1, "total": 30.0, "average": 15.0, "win_rate": 50.0}]
    frame = groups_frame(groups)
    assert frame.iloc[0]["Total P&L"] == "+$30.00"
    assert frame.iloc[0]["Win Rate"] == "50.0%"
