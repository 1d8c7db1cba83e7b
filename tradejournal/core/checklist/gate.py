# Copyright 2026 TradeJournal
# SPDX-License-Identifier: MIT
"""Pre-trade decision gate.

State is derived from the answers given so far:

  UNANSWERED -> IN_PROGRESS -> APPROVED | REJECTED

APPROVED iff every yes/no question is "yes" and the zone is answered and not
Red. REJECTED as soon as any question is "no" or the zone is Red. Answers may
be changed until the gate is approved or an attempt is logged.

Approval yields a PendingApproval token; creating a trade requires one.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Mapping, Optional

from tradejournal.core.checklist.questions import (
    ANSWER_NO,
    ANSWER_YES,
    BLOCKING_ZONE,
    BOOLEAN_QUESTION_IDS,
    ZONE_OPTIONS,
    ZONE_QUESTION_ID,
)

FAILURE_RED_ZONE = "Red Zone"
FAILURE_ZONE_MISSING = "Zone Missing"
FAILURE_ANSWERED_NO = "Checklist answered NO"

STATUS_PASSED = "passed"
STATUS_FAILED = "failed"


class GateState(str, Enum):
    UNANSWERED = "UNANSWERED"
    IN_PROGRESS = "IN_PROGRESS"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class ChecklistAnswerError(ValueError):
    def __init__(self, question_id: str, value: Any) -> None:
        self.question_id = question_id
        self.value = value
        super().__init__(f"Invalid answer {value!r} for checklist question {question_id!r}")


# ---------------------------------------------------------------------------
# Pure evaluation
# ---------------------------------------------------------------------------


def all_yes(responses: Mapping[str, Any]) -> bool:
    return all(responses.get(qid) == ANSWER_YES for qid in BOOLEAN_QUESTION_IDS)


def can_proceed(responses: Mapping[str, Any], zone: Optional[str]) -> bool:
    """True iff every yes/no item is yes and the zone is answered and not Red."""
    return all_yes(responses) and bool(zone) and zone != BLOCKING_ZONE


def failure_reason(responses: Mapping[str, Any], zone: Optional[str]) -> str:
    """Reason recorded for a failed attempt: Red Zone > Zone Missing > answered NO."""
    if zone == BLOCKING_ZONE:
        return FAILURE_RED_ZONE
    if not zone:
        return FAILURE_ZONE_MISSING
    return FAILURE_ANSWERED_NO


def evaluate_state(responses: Mapping[str, Any], zone: Optional[str]) -> GateState:
    if can_proceed(responses, zone):
        return GateState.APPROVED
    if zone == BLOCKING_ZONE or any(responses.get(qid) == ANSWER_NO for qid in BOOLEAN_QUESTION_IDS):
        return GateState.REJECTED
    if zone or any(responses.get(qid) for qid in BOOLEAN_QUESTION_IDS):
        return GateState.IN_PROGRESS
    return GateState.UNANSWERED


# ---------------------------------------------------------------------------
# Snapshot and approval token
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ChecklistSnapshot:
    """Answers captured at the moment of approval or of a logged attempt."""
    responses: Dict[str, str]
    zone: Optional[str]
    recorded_at: str
    all_yes: bool

    @property
    def approved(self) -> bool:
        return can_proceed(self.responses, self.zone)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "responses": dict(self.responses),
            "zone": self.zone,
            "recorded_at": self.recorded_at,
            "all_yes": self.all_yes,
        }

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "ChecklistSnapshot":
        responses = {str(k): str(v) for k, v in (d.get("responses") or {}).items() if v}
        zone = d.get("zone") or responses.get(ZONE_QUESTION_ID) or None
        return cls(
            responses=responses,
            zone=zone,
            recorded_at=d.get("recorded_at") or d.get("recordedAt") or datetime.now(timezone.utc).isoformat(),
            all_yes=all_yes(responses),
        )


@dataclass(frozen=True)
class PendingApproval:
    """Token for a passed gate. approval_id is the recorded attempt id, checked and consumed by create_trade."""
    workspace: str
    snapshot: ChecklistSnapshot
    approval_id: str = field(default_factory=lambda: uuid.uuid4().hex)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "workspace": self.workspace,
            "approval_id": self.approval_id,
            "snapshot": self.snapshot.to_dict(),
        }

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "PendingApproval":
        return cls(
            workspace=str(d.get("workspace") or ""),
            snapshot=ChecklistSnapshot.from_dict(d.get("snapshot") or {}),
            approval_id=str(d.get("approval_id") or uuid.uuid4().hex),
        )

    def is_valid_for(self, workspace: str) -> bool:
        return self.workspace == workspace and self.snapshot.approved


# ---------------------------------------------------------------------------
# Interactive gate
# ---------------------------------------------------------------------------


class ChecklistGate:
    """Mutable answer sheet for one pass through the gate."""

    def __init__(self, workspace: str, responses: Optional[Mapping[str, Any]] = None) -> None:
        self.workspace = workspace
        self._responses: Dict[str, str] = {}
        for qid, value in (responses or {}).items():
            if value:
                self.answer(qid, value)

    @property
    def responses(self) -> Dict[str, str]:
        return dict(self._responses)

    @property
    def zone(self) -> Optional[str]:
        return self._responses.get(ZONE_QUESTION_ID)

    @property
    def state(self) -> GateState:
        return evaluate_state(self._responses, self.zone)

    @property
    def is_approved(self) -> bool:
        return self.state == GateState.APPROVED

    @property
    def has_any_input(self) -> bool:
        return any(bool(v) for v in self._responses.values())

    def answer(self, question_id: str, value: str) -> GateState:
        if question_id == ZONE_QUESTION_ID:
            if value not in ZONE_OPTIONS:
                raise ChecklistAnswerError(question_id, value)
        elif question_id in BOOLEAN_QUESTION_IDS:
            value = str(value).lower()
            if value not in (ANSWER_YES, ANSWER_NO):
                raise ChecklistAnswerError(question_id, value)
        else:
            raise ChecklistAnswerError(question_id, value)
        self._responses[question_id] = value
        return self.state

    def reset(self) -> None:
        self._responses.clear()

    def failure_reason(self) -> str:
        return failure_reason(self._responses, self.zone)

    def snapshot(self) -> ChecklistSnapshot:
        return ChecklistSnapshot(
            responses=dict(self._responses),
            zone=self.zone,
            recorded_at=datetime.now(timezone.utc).isoformat(),
            all_yes=all_yes(self._responses),
        )
