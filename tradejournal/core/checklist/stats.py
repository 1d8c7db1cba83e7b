# Copyright 2026 TradeJournal
# SPDX-License-Identifier: MIT
"""Checklist discipline stats over recent gate attempts."""

from __future__ import annotations

from collections import Counter
from typing import Any, Dict, Iterable

from tradejournal.core.checklist.gate import STATUS_FAILED, STATUS_PASSED

RECENT_ATTEMPTS_LIMIT = 200


def summarize_attempts(records: Iterable[Any]) -> Dict[str, Any]:
    """Pass/fail counts, rates and most frequent failure reason.

    records: ChecklistRecord-like objects with ``status`` and ``failure_reason``.
    """
    total = 0
    passes = 0
    fails = 0
    reasons: Counter = Counter()
    for rec in records:
        total += 1
        status = (rec.status or "").lower()
        if status == STATUS_PASSED:
            passes += 1
        elif status == STATUS_FAILED:
            fails += 1
            reasons[rec.failure_reason or "Unspecified"] += 1

    top = reasons.most_common(1)
    return {
        "total": total,
        "passes": passes,
        "fails": fails,
        "pass_rate": round(passes / total * 100, 1) if total else 0.0,
        "fail_rate": round(fails / total * 100, 1) if total else 0.0,
        "fail_reasons": dict(reasons),
        "top_failure": {"reason": top[0][0], "count": top[0][1]} if top else None,
    }
