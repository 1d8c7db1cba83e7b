# Copyright 2026 TradeJournal
# SPDX-License-Identifier: MIT
"""Shared fixtures: a throwaway SQLite store and per-workspace services."""

from __future__ import annotations

from typing import Dict

import pytest

from tradejournal.core.checklist.gate import ChecklistGate
from tradejournal.core.checklist.questions import BOOLEAN_QUESTION_IDS, ZONE_QUESTION_ID
from tradejournal.core.journal.service import JournalService
from tradejournal.core.store.sqlite_store import SqliteTableStore
from tradejournal.core.workspaces import get_workspace


def all_yes_responses(zone: str = "Green") -> Dict[str, str]:
    responses = {qid: "yes" for qid in BOOLEAN_QUESTION_IDS}
    responses[ZONE_QUESTION_ID] = zone
    return responses


@pytest.fixture
def yes_responses() -> Dict[str, str]:
    return all_yes_responses()


@pytest.fixture
def store(tmp_path) -> SqliteTableStore:
    return SqliteTableStore(str(tmp_path / "journal.db"))


@pytest.fixture
def make_service(store):
    def _make(workspace: str) -> JournalService:
        return JournalService.for_workspace(get_workspace(workspace), store)

    return _make


@pytest.fixture
def approve(make_service):
    """Pass the decision gate for a service and return the approval token."""

    def _approve(service: JournalService):
        approval, errors = service.approve_checklist(ChecklistGate(service.config.key, all_yes_responses()))
        assert errors == []
        return approval

    return _approve
