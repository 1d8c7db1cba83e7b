# Copyright 2026 TradeJournal
# SPDX-License-Identifier: MIT
"""Workspace registry: per-product table names, column aliases, flags and vocabularies."""

from tradejournal.core.workspaces.models import (
    ForexTradeFields,
    OptionTradeFields,
    StockTradeFields,
    TradeFields,
    WorkspaceConfig,
)
from tradejournal.core.workspaces.registry import (
    FOREX,
    OPTIONS,
    STOCKS,
    get_workspace,
    list_workspaces,
    validate_workspace,
)
from tradejournal.core.workspaces.payload import missed_payload, parse_trade_fields, trade_payload

__all__ = [
    "ForexTradeFields",
    "OptionTradeFields",
    "StockTradeFields",
    "TradeFields",
    "WorkspaceConfig",
    "FOREX",
    "OPTIONS",
    "STOCKS",
    "get_workspace",
    "list_workspaces",
    "validate_workspace",
    "missed_payload",
    "parse_trade_fields",
    "trade_payload",
]
