# Copyright 2026 TradeJournal
# SPDX-License-Identifier: MIT
"""Display helpers for the journal UI: currency/percent text and pandas tables."""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional, Union

import pandas as pd

from tradejournal.core.journal.models import BalanceEntry, MissedTrade, Trade
from tradejournal.core.workspaces.models import WorkspaceConfig

_TRADE_COLUMN_TITLES = (
    ("entry_date", "Entry"),
    ("instrument", None),
    ("direction", "Direction"),
    ("option_type", "Type"),
    ("strike", "Strike"),
    ("expiry", "Expiry"),
    ("contracts", "Contracts"),
    ("premium", "Premium"),
    ("account", "Account"),
    ("entry_type", "Entry Type"),
    ("rule", "Rule"),
    ("zone", "Zone"),
    ("pattern", None),
    ("risk_amount", "Risk"),
    ("status", "Status"),
    ("pnl", "P&L"),
    ("exit_date", "Exit"),
)


def fmt_currency(val: Any, default: str = "-") -> str:
    if val is None:
        return default
    try:
        v = float(val)
    except (TypeError, ValueError):
        return default
    sign = "-" if v < 0 else ""
    return f"{sign}${abs(v):,.2f}"


def fmt_signed_currency(val: Any, default: str = "-") -> str:
    if val is None:
        return default
    try:
        v = float(val)
    except (TypeError, ValueError):
        return default
    return f"+{fmt_currency(v)}" if v > 0 else fmt_currency(v)


def fmt_pct(val: Any, default: str = "-", signed: bool = False) -> str:
    if val is None:
        return default
    try:
        v = float(val)
    except (TypeError, ValueError):
        return default
    return f"{v:+.1f}%" if signed else f"{v:.1f}%"


def fmt_date(val: Optional[str]) -> str:
    if not val:
        return "-"
    return str(val)[:16].replace("T", " ")


def fmt_ratio(val: Union[float, str, None]) -> str:
    if val is None or isinstance(val, str):
        return val or "N/A"
    return f"{val:.2f}"


def trade_label(trade: Trade) -> str:
    """One-line description used in the close-trade selector."""
    parts = [trade.instrument, trade.direction.upper()]
    if trade.option_type:
        parts.append(trade.option_type.upper())
    if trade.strike is not None:
        parts.append(f"@{trade.strike:g}")
    if trade.expiry:
        parts.append(f"exp {trade.expiry}")
    if trade.account:
        parts.append(f"[{trade.account}]")
    parts.append(fmt_date(trade.entry_date))
    return " ".join(parts)


def trades_frame(config: WorkspaceConfig, trades: Iterable[Trade]) -> pd.DataFrame:
    titles: Dict[str, str] = {}
    for logical, title in _TRADE_COLUMN_TITLES:
        if logical in ("entry_date", "status", "pnl", "exit_date") or config.has_trade_field(logical):
            if logical == "instrument":
                title = config.labels.instrument
            elif logical == "pattern":
                title = config.labels.pattern or "Pattern"
            titles[logical] = title
    rows: List[Dict[str, Any]] = []
    for t in trades:
        d = t.to_dict()
        row = {titles[k]: d.get(k) for k in titles}
        row[titles["entry_date"]] = fmt_date(t.entry_date)
        row[titles["exit_date"]] = fmt_date(t.exit_date)
        rows.append(row)
    return pd.DataFrame(rows, columns=list(titles.values()))


def balance_frame(entries: Iterable[BalanceEntry], with_account: bool = False) -> pd.DataFrame:
    rows = []
    for e in entries:
        row = {
            "Date": fmt_date(e.created_at),
            "Change": fmt_signed_currency(e.change_amount),
            "Balance": fmt_currency(e.balance),
            "Reason": e.reason or "",
        }
        if with_account:
            row["Account"] = e.account or ""
        rows.append(row)
    return pd.DataFrame(rows)


def missed_frame(config: WorkspaceConfig, missed: Iterable[MissedTrade]) -> pd.DataFrame:
    rows = [
        {
            "Date": fmt_date(m.created_at),
            config.labels.instrument: m.instrument,
            "Direction": m.direction,
            config.labels.missed_pattern or "Pattern": m.pattern or "",
            "Potential": fmt_pct(m.potential_return, signed=True),
            "Before": m.before_url or "",
            "After": m.after_url or "",
        }
        for m in missed
    ]
    return pd.DataFrame(rows)


def groups_frame(groups: List[Dict[str, Any]], value_label: str = "Total P&L", percent: bool = False) -> pd.DataFrame:
    fmt = (lambda v: fmt_pct(v, signed=True)) if percent else fmt_signed_currency
    rows = [
        {
            "Group": g["key"],
            "Count": g["count"],
            "Wins": g["wins"],
            "Losses": g["losses"],
            value_label: fmt(g["total"]),
            "Average": fmt(g["average"]),
            "Win Rate": fmt_pct(g["win_rate"]),
        }
        for g in groups
    ]
    return pd.DataFrame(rows)
