# Copyright 2026 TradeJournal
# SPDX-License-Identifier: MIT
"""Missed-opportunity analytics over potential return %."""

from __future__ import annotations

from typing import Any, Dict, Iterable, List

from tradejournal.core.analytics.trades import INSUFFICIENT_DATA, day_of_week, group_rows
from tradejournal.core.journal.models import MissedTrade
from tradejournal.core.workspaces.models import WorkspaceConfig

MISSED_DIMENSIONS = ("day", "instrument", "pattern")


def _key(dimension: str):
    if dimension == "day":
        return lambda m: day_of_week(m.created_at)
    return lambda m: getattr(m, dimension)


def _potential(m: MissedTrade) -> float:
    """Potential return %, blank counted as 0."""
    return m.potential_return or 0.0


def analyze_missed(missed: Iterable[MissedTrade], config: WorkspaceConfig) -> Dict[str, Any]:
    """Totals and top groups by potential return. Threshold is the workspace's missed_min_sample."""
    rows: List[MissedTrade] = list(missed)
    min_required = config.missed_min_sample
    if len(rows) < min_required:
        return {
            "status": INSUFFICIENT_DATA,
            "count": len(rows),
            "min_required": min_required,
            "message": f"Need at least {min_required} missed trades for analytics ({len(rows)} so far).",
            "dimensions": {},
        }

    total_pct = sum(_potential(m) for m in rows)
    labels = dict(config.missed_analytics_labels)
    dimensions = {
        dim: {
            "label": labels.get(dim, dim),
            "groups": group_rows(rows, _key(dim), _potential),
        }
        for dim in MISSED_DIMENSIONS
    }
    return {
        "status": "OK",
        "count": len(rows),
        "min_required": min_required,
        "total_potential_pct": round(total_pct, 2),
        "avg_potential_pct": round(total_pct / len(rows), 2) if rows else 0.0,
        "dimensions": dimensions,
    }
