# Copyright 2026 TradeJournal
# SPDX-License-Identifier: MIT
"""Pre-trade checklist: question catalogue, decision gate, approval token, attempt stats."""

from tradejournal.core.checklist.gate import (
    ChecklistAnswerError,
    ChecklistGate,
    ChecklistSnapshot,
    GateState,
    PendingApproval,
    can_proceed,
    failure_reason,
)
from tradejournal.core.checklist.questions import BOOLEAN_QUESTION_IDS, CHECKLIST_SECTIONS, ZONE_OPTIONS
from tradejournal.core.checklist.stats import summarize_attempts

__all__ = [
    "ChecklistAnswerError",
    "ChecklistGate",
    "ChecklistSnapshot",
    "GateState",
    "PendingApproval",
    "can_proceed",
    "failure_reason",
    "BOOLEAN_QUESTION_IDS",
    "CHECKLIST_SECTIONS",
    "ZONE_OPTIONS",
    "summarize_attempts",
]
