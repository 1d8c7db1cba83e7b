# Copyright 2026 TradeJournal
# SPDX-License-Identifier: MIT
"""Supabase table store: hosted Postgres via supabase-py.

Tables are managed remotely (see sql/supabase_schema.sql). The balance
append runs as the ``append_balance_entry`` Postgres function so the
read-latest + insert happens in one transaction on the server.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from supabase import Client, create_client

from tradejournal.core.errors import StoreOperationError
from tradejournal.core.store.base import Row, TableStore
from tradejournal.core.workspaces.models import BalanceColumns

logger = logging.getLogger(__name__)

APPEND_BALANCE_FUNCTION = "append_balance_entry"


def _error_message(resp: Any) -> Optional[str]:
    err = getattr(resp, "error", None)
    if not err:
        return None
    return getattr(err, "message", None) or str(err)


class SupabaseTableStore(TableStore):
    """TableStore over the Supabase PostgREST API."""

    backend = "supabase"

    def __init__(self, client: Client) -> None:
        self.client = client

    @classmethod
    def from_credentials(cls, url: Optional[str], key: Optional[str]) -> "SupabaseTableStore":
        if not url or not key:
            raise RuntimeError("SUPABASE_URL and SUPABASE_KEY must be provided")
        return cls(create_client(url, key))

    def _execute(self, operation: str, table: str, query: Any) -> List[Row]:
        try:
            resp = query.execute()
        except Exception as e:
            logger.error("[STORE] supabase %s on %s failed: %s", operation, table, e)
            raise StoreOperationError(operation, table, getattr(e, "message", None) or str(e)) from e
        message = _error_message(resp)
        if message:
            logger.error("[STORE] supabase %s on %s error: %s", operation, table, message)
            raise StoreOperationError(operation, table, message)
        data = getattr(resp, "data", None)
        if data is None:
            return []
        return data if isinstance(data, list) else [data]

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
        query = self.client.table(table).select("*")
        for col, value in (eq or {}).items():
            query = query.eq(col, value)
        if in_ is not None:
            col, values = in_
            values = list(values)
            if not values:
                return []
            query = query.in_(col, values)
        if order_by:
            query = query.order(order_by, desc=desc)
        if limit is not None:
            query = query.limit(int(limit))
        return self._execute("select", table, query)

    def insert(self, table: str, row: Mapping[str, Any]) -> Row:
        data = self._execute("insert", table, self.client.table(table).insert(dict(row)))
        if not data:
            raise StoreOperationError("insert", table, "Insert returned no row")
        return data[0]

    def update(self, table: str, values: Mapping[str, Any], *, eq: Mapping[str, Any]) -> List[Row]:
        if not eq:
            raise StoreOperationError("update", table, "update requires at least one filter")
        query = self.client.table(table).update(dict(values))
        for col, value in eq.items():
            query = query.eq(col, value)
        return self._execute("update", table, query)

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
        params: Dict[str, Any] = {
            "p_table": table,
            "p_balance_col": columns.balance,
            "p_change_col": columns.change_amount,
            "p_reason_col": columns.reason,
            "p_trade_col": columns.trade_id,
            "p_created_col": columns.created_at,
            "p_currency_col": columns.currency if account is not None else None,
            "p_change_amount": float(change_amount),
            "p_reason": reason,
            "p_trade_id": trade_id,
            "p_account": account if columns.currency is not None else None,
        }
        data = self._execute("append_balance", table, self.client.rpc(APPEND_BALANCE_FUNCTION, params))
        if not data:
            raise StoreOperationError("append_balance", table, "Balance append returned no row")
        return data[0]
