# Copyright 2026 TradeJournal
# SPDX-License-Identifier: MIT
"""Tests for the Supabase store against a mocked client (no network)."""

from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from tradejournal.core.errors import StoreOperationError
from tradejournal.core.store.supabase_store import APPEND_BALANCE_FUNCTION, SupabaseTableStore
from tradejournal.core.workspaces import FOREX, STOCKS


def _client(data=None, error=None) -> MagicMock:
    client = MagicMock()
    query = MagicMock()
    for name in ("select", "eq", "in_", "order", "limit", "insert", "update"):
        getattr(query, name).return_value = query
    query.execute.return_value = SimpleNamespace(data=data, error=error)
    client.table.return_value = query
    client.rpc.return_value.execute.return_value = SimpleNamespace(data=data, error=error)
    return client


def test_select_builds_query() -> None:
    client = _client(data=[{"id": 1}])
    store = SupabaseTableStore(client)
    rows = store.select("trades", eq={"status": "open"}, in_=("id", [1, 2]), order_by="entry_date", limit=10)
    assert rows == [{"id": 1}]
    query = client.table.return_value
    client.table.assert_called_with("trades")
    query.select.assert_called_with("*")
    query.eq.assert_called_with("status", "open")
    query.in_.assert_called_with("id", [1, 2])
    query.order.assert_called_with("entry_date", desc=True)
    query.limit.assert_called_with(10)


def test_select_empty_in_filter_skips_request() -> None:
    client = _client(data=[{"id": 1}])
    assert SupabaseTableStore(client).select("trades", in_=("id", [])) == []
    client.table.return_value.execute.assert_not_called()


def test_insert_returns_first_row() -> None:
    client = _client(data=[{"id": 5, "pair": "EURUSD"}])
    row = SupabaseTableStore(client).insert("trades", {"pair": "EURUSD"})
    assert row["id"] == 5


def test_insert_without_row_raises() -> None:
    with pytest.raises(StoreOperationError):
        SupabaseTableStore(_client(data=[])).insert("trades", {"pair": "EURUSD"})


def test_response_error_raises_with_message() -> None:
    client = _client(error=SimpleNamespace(message="permission denied for table trades"))
    with pytest.raises(StoreOperationError) as exc:
        SupabaseTableStore(client).select("trades")
    assert str(exc.value) == "permission denied for table trades"
    assert exc.value.operation == "select"


def test_client_exception_wrapped() -> None:
    client = _client()
    client.table.return_value.execute.side_effect = RuntimeError("network down")
    with pytest.raises(StoreOperationError) as exc:
        SupabaseTableStore(client).update("trades", {"status": "closed"}, eq={"id": 1})
    assert "network down" in str(exc.value)


def test_update_requires_filter() -> None:
    with pytest.raises(StoreOperationError):
        SupabaseTableStore(_client()).update("trades", {"status": "closed"}, eq={})


def test_append_balance_calls_function() -> None:
    client = _client(data=[{"id": 3, "balance": 1120.5}])
    row = SupabaseTableStore(client).append_balance(
        "balance_history", FOREX.balance_columns, change_amount=120.5, reason="Trade P&L: EURUSD long", trade_id=9,
    )
    assert row["balance"] == 1120.5
    name, params = client.rpc.call_args[0]
    assert name == APPEND_BALANCE_FUNCTION
    assert params["p_table"] == "balance_history"
    assert params["p_change_amount"] == 120.5
    assert params["p_trade_id"] == 9
    assert params["p_account"] is None
    assert params["p_currency_col"] is None


def test_append_balance_with_account() -> None:
    client = _client(data=[{"id": 1, "balance": 100.0, "currency": "CAD"}])
    SupabaseTableStore(client).append_balance(
        "stock_balance_history", STOCKS.balance_columns, change_amount=100.0, reason="Deposit", account="CAD",
    )
    params = client.rpc.call_args[0][1]
    assert params["p_currency_col"] == "currency"
    assert params["p_account"] == "CAD"


def test_from_credentials_requires_both() -> None:
    with pytest.raises(RuntimeError):
        SupabaseTableStore.from_credentials("https://x.supabase.co", None)
