# Copyright 2026 TradeJournal
# SPDX-License-Identifier: MIT
"""Tests for trade and missed-trade analytics: thresholds, grouping, ordering, ratios."""

from __future__ import annotations

from typing import List, Optional

from tradejournal.core.analytics import analyze_missed, analyze_trades
from tradejournal.core.analytics.trades import day_of_week, group_rows
from tradejournal.core.journal.models import MissedTrade, Trade
from tradejournal.core.workspaces import FOREX, OPTIONS, STOCKS

# 2026-01-05 is a Monday
MONDAY = "2026-01-05T14:30:00+00:00"
TUESDAY = "2026-01-06T09:00:00+00:00"


def _closed(pnl: float, pattern: Optional[str] = None, instrument: str = "EURUSD", entry_date: str = MONDAY, **kw) -> Trade:
    return Trade(
        id=None,
        instrument=instrument,
        direction="long",
        status="closed",
        entry_date=entry_date,
        exit_date=entry_date,
        pnl=pnl,
        pattern=pattern,
        **kw,
    )


def _missed(n: int, potential: float = 5.0) -> List[MissedTrade]:
    return [
        MissedTrade(id=i, instrument="EURUSD", direction="long", pattern="Bull Flag",
                    potential_return=potential, created_at=MONDAY)
        for i in range(n)
    ]


def test_day_of_week_from_timestamp() -> None:
    assert day_of_week(MONDAY) == "Monday"
    assert day_of_week("2026-01-06") == "Tuesday"
    assert day_of_week("2026-01-11T23:59:00Z") == "Sunday"
    assert day_of_week(None) is None
    assert day_of_week("not a date") is None


def test_trade_analytics_needs_five_closed() -> None:
    trades = [_closed(10.0) for _ in range(4)]
    trades.append(Trade(id=None, instrument="EURUSD", direction="long", status="open", entry_date=MONDAY))
    result = analyze_trades(trades, FOREX)
    assert result["status"] == "INSUFFICIENT DATA"
    assert result["closed_count"] == 4
    assert result["min_required"] == 5

    trades.append(_closed(-5.0))
    result = analyze_trades(trades, FOREX)
    assert result["status"] == "OK"
    assert result["closed_count"] == 5


def test_trade_analytics_summary_numbers() -> None:
    trades = [_closed(100.0), _closed(50.0), _closed(-25.0), _closed(-75.0), _closed(0.0)]
    result = analyze_trades(trades, FOREX)
    assert result["wins"] == 2
    assert result["losses"] == 2
    assert result["win_rate"] == 40.0
    assert result["avg_win"] == 75.0
    assert result["avg_loss"] == 50.0
    assert result["risk_reward"] == 1.5
    assert result["total_pnl"] == 50.0


def test_risk_reward_not_available_without_losses() -> None:
    result = analyze_trades([_closed(10.0) for _ in range(5)], FOREX)
    assert result["avg_loss"] == 0.0
    assert result["risk_reward"] == "N/A"


def test_groups_need_two_trades_sorted_by_total_top_five() -> None:
    trades = []
    for i, total in enumerate([10, 60, 30, 50, 20, 40]):
        pattern = f"P{i}"
        trades += [_closed(total / 2, pattern), _closed(total / 2, pattern)]
    trades.append(_closed(500.0, "Lonely"))

    groups = analyze_trades(trades, FOREX)["dimensions"]["pattern"]["groups"]
    assert [g["key"] for g in groups] == ["P1", "P3", "P5", "P2", "P4"]
    assert all(g["count"] >= 2 for g in groups)
    assert groups[0]["total"] == 60.0
    assert groups[0]["average"] == 30.0


def test_dimensions_follow_workspace_fields() -> None:
    trades = [_closed(10.0, "Bull Flag", zone="Green", entry_type="RE", rule="Impulsive") for _ in range(5)]
    dims = analyze_trades(trades, FOREX)["dimensions"]
    assert set(dims) == {"pattern", "zone", "entry_type", "rule", "instrument", "day"}
    assert dims["pattern"]["label"] == "Top Performing Patterns"
    assert dims["day"]["groups"][0]["key"] == "Monday"

    dims = analyze_trades(trades, OPTIONS)["dimensions"]
    assert set(dims) == {"instrument", "day"}


def test_group_rows_skips_blank_keys() -> None:
    rows = [{"k": None, "v": 1.0}, {"k": "", "v": 2.0}, {"k": "a", "v": 3.0}]
    groups = group_rows(rows, lambda r: r["k"], lambda r: r["v"])
    assert [g["key"] for g in groups] == ["a"]


def test_group_rows_tie_broken_by_key() -> None:
    rows = [{"k": "b", "v": 5.0}, {"k": "a", "v": 5.0}]
    groups = group_rows(rows, lambda r: r["k"], lambda r: r["v"])
    assert [g["key"] for g in groups] == ["a", "b"]


# -----------------------------------------------------------------------------
# Missed trades
# -----------------------------------------------------------------------------


def test_missed_threshold_is_per_workspace() -> None:
    assert analyze_missed(_missed(2), STOCKS)["status"] == "INSUFFICIENT DATA"
    assert analyze_missed(_missed(3), STOCKS)["status"] == "OK"
    assert analyze_missed(_missed(4), FOREX)["status"] == "INSUFFICIENT DATA"
    assert analyze_missed(_missed(5), FOREX)["status"] == "OK"


def test_missed_totals_and_groups_count_blank_potential_as_zero() -> None:
    rows = _missed(3, potential=4.0)
    rows.append(MissedTrade(id=9, instrument="GBPJPY", direction="short", pattern="Hook Point",
                            potential_return=10.0, created_at=TUESDAY))
    rows.append(MissedTrade(id=10, instrument="AUDUSD", direction="long", potential_return=None, created_at=TUESDAY))
    result = analyze_missed(rows, FOREX)
    assert result["status"] == "OK"
    assert result["count"] == 5
    assert result["total_potential_pct"] == 22.0
    assert result["avg_potential_pct"] == 4.4

    by_instrument = result["dimensions"]["instrument"]["groups"]
    assert [(g["key"], g["count"]) for g in by_instrument] == [("EURUSD", 3), ("GBPJPY", 1), ("AUDUSD", 1)]
    by_day = {g["key"]: (g["total"], g["count"]) for g in result["dimensions"]["day"]["groups"]}
    assert by_day == {"Monday": (12.0, 3), "Tuesday": (10.0, 2)}
