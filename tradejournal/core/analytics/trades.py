# Copyright 2026 TradeJournal
# SPDX-License-Identifier: MIT
"""Trade performance analytics: per-dimension grouping over closed trades.

Groups by pattern, zone, entry type, market context (rule), instrument and
day of week. Only groups with at least MIN_GROUP_COUNT trades are shown,
sorted by total P&L descending, top TOP_N.
"""

from __future__ import annotations

from collections import defaultdict
from datetime import datetime
from typing import Any, Callable, Dict, Iterable, List, Optional

from tradejournal.core.journal.models import Trade
from tradejournal.core.workspaces.models import WorkspaceConfig

MIN_CLOSED_TRADES = 5
MIN_GROUP_COUNT = 2
TOP_N = 5

DAY_NAMES = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")

TRADE_DIMENSIONS = ("pattern", "zone", "entry_type", "rule", "instrument", "day")

INSUFFICIENT_DATA = "INSUFFICIENT DATA"
NOT_AVAILABLE = "N/A"


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    text = str(value).strip().replace("Z", "+00:00")
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        try:
            return datetime.strptime(text[:10], "%Y-%m-%d")
        except ValueError:
            return None


def day_of_week(value: Optional[str]) -> Optional[str]:
    ts = parse_timestamp(value)
    return DAY_NAMES[ts.weekday()] if ts else None


def group_rows(
    items: Iterable[Any],
    key: Callable[[Any], Optional[str]],
    value: Callable[[Any], float],
    *,
    min_count: int = 1,
    top_n: int = TOP_N,
) -> List[Dict[str, Any]]:
    """Group items by key; per group count, wins, losses, total, average. Sorted by total desc."""
    buckets: Dict[str, List[float]] = defaultdict(list)
    for item in items:
        k = key(item)
        if k in (None, ""):
            continue
        buckets[str(k)].append(float(value(item)))

    groups = []
    for k, values in buckets.items():
        if len(values) < min_count:
            continue
        total = sum(values)
        wins = sum(1 for v in values if v > 0)
        losses = sum(1 for v in values if v < 0)
        groups.append({
            "key": k,
            "count": len(values),
            "wins": wins,
            "losses": losses,
            "total": round(total, 2),
            "average": round(total / len(values), 2),
            "win_rate": round(wins / len(values) * 100, 1),
        })
    groups.sort(key=lambda g: (-g["total"], g["key"]))
    return groups[:top_n]


def closed_trades(trades: Iterable[Trade]) -> List[Trade]:
    return [t for t in trades if t.status == "closed" and t.pnl is not None]


def _dimension_key(dimension: str) -> Callable[[Trade], Optional[str]]:
    if dimension == "day":
        return lambda t: day_of_week(t.entry_date)
    return lambda t: getattr(t, dimension)


def analyze_trades(
    trades: Iterable[Trade],
    config: WorkspaceConfig,
    min_closed: int = MIN_CLOSED_TRADES,
) -> Dict[str, Any]:
    """Aggregate closed-trade performance for a workspace.

    Returns {"status": "INSUFFICIENT DATA", ...} below ``min_closed`` closed trades.
    """
    closed = closed_trades(trades)
    if len(closed) < min_closed:
        return {
            "status": INSUFFICIENT_DATA,
            "closed_count": len(closed),
            "min_required": min_closed,
            "message": f"Need at least {min_closed} closed trades for analytics ({len(closed)} so far).",
            "dimensions": {},
        }

    labels = dict(config.analytics_labels)
    dimensions: Dict[str, Dict[str, Any]] = {}
    for dim in TRADE_DIMENSIONS:
        if dim != "day" and not config.has_trade_field(dim):
            continue
        dimensions[dim] = {
            "label": labels.get(dim, dim),
            "groups": group_rows(closed, _dimension_key(dim), lambda t: t.pnl, min_count=MIN_GROUP_COUNT),
        }

    wins = [t.pnl for t in closed if t.pnl > 0]
    losses = [t.pnl for t in closed if t.pnl < 0]
    avg_win = sum(wins) / len(wins) if wins else 0.0
    avg_loss = abs(sum(losses) / len(losses)) if losses else 0.0
    total_pnl = sum(t.pnl for t in closed)

    return {
        "status": "OK",
        "closed_count": len(closed),
        "min_required": min_closed,
        "total_pnl": round(total_pnl, 2),
        "wins": len(wins),
        "losses": len(losses),
        "win_rate": round(len(wins) / len(closed) * 100, 1),
        "avg_win": round(avg_win, 2),
        "avg_loss": round(avg_loss, 2),
        "risk_reward": round(avg_win / avg_loss, 2) if avg_loss > 0 else NOT_AVAILABLE,
        "dimensions": dimensions,
    }
