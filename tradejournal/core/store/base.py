# Copyright 2026 TradeJournal
# SPDX-License-Identifier: MIT
"""Backing-store interface: a thin relational table API.

Implementations: SqliteTableStore (local file, default) and SupabaseTableStore.
All failures surface as StoreOperationError carrying the store's message.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from tradejournal.core.workspaces.models import BalanceColumns, WorkspaceConfig

Row = Dict[str, Any]


def now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class TableStore(ABC):
    """Select / insert / update on named tables plus the atomic ledger append."""

    backend = "abstract"

    @abstractmethod
    def select(
        self,
        table: str,
        *,
        eq: Optional[Mapping[str, Any]] = None,
        in_: Optional[Tuple[str, Iterable[Any]]] = None,
        order_by: Optional[str] = None,
        desc: bool = True,
        limit: Optional[int] = None,
    ) -> List[Row]:
        """Return rows matching every equality filter and the optional membership filter."""

    @abstractmethod
    def insert(self, table: str, row: Mapping[str, Any]) -> Row:
        """Insert one row and return it as stored (with generated id)."""

    @abstractmethod
    def update(self, table: str, values: Mapping[str, Any], *, eq: Mapping[str, Any]) -> List[Row]:
        """Update rows matching eq; return the updated rows."""

    @abstractmethod
    def append_balance(
        self,
        table: str,
        columns: BalanceColumns,
        *,
        change_amount: float,
        reason: str,
        account: Optional[str] = None,
        trade_id: Any = None,
    ) -> Row:
        """Atomically read the latest balance for the partition, add the delta and insert.

        The partition is the account (currency column) when both are given,
        otherwise the whole table. Returns the inserted row.
        """

    def ensure_workspace(self, config: WorkspaceConfig) -> None:
        """Prepare storage for a workspace (no-op where the schema is managed remotely)."""
