# Copyright 2026 TradeJournal
# SPDX-License-Identifier: MIT
"""Journal exceptions and user-facing error rendering."""

from __future__ import annotations


class JournalError(Exception):
    """Base class for journal errors."""


class StoreOperationError(JournalError):
    """Raised when the backing store rejects or fails an operation.

    The store's own message is kept verbatim; there is no retry or rollback.
    """

    def __init__(self, operation: str, table: str, message: str) -> None:
        self.operation = operation
        self.table = table
        self.message = message
        super().__init__(message)


class UnknownWorkspaceError(JournalError):
    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"Unknown workspace: {key}")


class FeatureDisabledError(JournalError):
    def __init__(self, workspace: str, feature: str) -> None:
        self.workspace = workspace
        self.feature = feature
        super().__init__(f"{feature} is not enabled for workspace {workspace}")


class TradeNotFoundError(JournalError):
    def __init__(self, trade_id) -> None:
        self.trade_id = trade_id
        super().__init__(f"Trade {trade_id} not found")


def display_error(exc: BaseException) -> str:
    """Render an exception the way the views show it: 'Error: <message>'."""
    return f"Error: {exc}"
