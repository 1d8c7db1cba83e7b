# Copyright 2026 TradeJournal
# SPDX-License-Identifier: MIT
"""Tests for workspace registry and form → payload mapping."""

from __future__ import annotations

from dataclasses import replace

import pytest

from tradejournal.core.errors import UnknownWorkspaceError
from tradejournal.core.workspaces import (
    FOREX,
    OPTIONS,
    STOCKS,
    ForexTradeFields,
    OptionTradeFields,
    StockTradeFields,
    get_workspace,
    list_workspaces,
    missed_payload,
    parse_trade_fields,
    trade_payload,
    validate_workspace,
)
from tradejournal.core.workspaces.models import FeatureFlags
from tradejournal.core.workspaces.registry import register_workspace


# -----------------------------------------------------------------------------
# Registry
# -----------------------------------------------------------------------------


def test_builtin_workspaces_registered_and_valid() -> None:
    keys = [w.key for w in list_workspaces()]
    assert keys == ["stocks", "forex", "options"]
    for config in list_workspaces():
        assert validate_workspace(config) == []


def test_get_workspace_unknown_raises() -> None:
    with pytest.raises(UnknownWorkspaceError):
        get_workspace("crypto")


def test_feature_flags_per_workspace() -> None:
    assert STOCKS.features.missed_trades and STOCKS.features.analytics
    assert FOREX.features.missed_trades and FOREX.features.analytics
    assert not OPTIONS.features.missed_trades
    assert not OPTIONS.features.analytics
    assert OPTIONS.features.trading_plan


def test_stocks_has_accounts_with_usd_default() -> None:
    assert STOCKS.has_accounts
    assert [a.value for a in STOCKS.accounts] == ["CAD", "USD"]
    assert STOCKS.default_account == "USD"
    assert not FOREX.has_accounts
    assert FOREX.default_account is None


def test_typed_trade_field_variants() -> None:
    assert STOCKS.trade_fields is StockTradeFields
    assert FOREX.trade_fields is ForexTradeFields
    assert OPTIONS.trade_fields is OptionTradeFields


def test_validate_workspace_reports_missing_tables() -> None:
    broken = replace(FOREX, key="broken", tables=replace(FOREX.tables, missed=None))
    errors = validate_workspace(broken)
    assert any("missed" in e for e in errors)
    with pytest.raises(ValueError):
        register_workspace(broken)


def test_validate_workspace_reports_field_without_column() -> None:
    broken = replace(OPTIONS, key="broken_opts", trade_columns=replace(OPTIONS.trade_columns, strike=None))
    assert any("strike" in e for e in validate_workspace(broken))


def test_validate_workspace_disabled_feature_needs_no_table() -> None:
    ok = replace(
        FOREX,
        key="forex_lite",
        tables=replace(FOREX.tables, missed=None),
        features=FeatureFlags(missed_trades=False),
    )
    assert validate_workspace(ok) == []


# -----------------------------------------------------------------------------
# Form → payload
# -----------------------------------------------------------------------------


def test_forex_payload_uses_pair_column_and_uppercases() -> None:
    fields, errors = parse_trade_fields(FOREX, {"instrument": " eurusd ", "risk_amount": "25"})
    assert errors == []
    payload = trade_payload(FOREX, fields)
    assert payload["pair"] == "EURUSD"
    assert payload["risk_amount"] == 25.0
    assert payload["entrytype"] == "RE"  # form default
    assert payload["rule3"] == "Impulsive"
    assert "ticker" not in payload
    assert "account_currency" not in payload


def test_options_payload_never_contains_inapplicable_columns() -> None:
    form = {
        "instrument": "aapl",
        "direction": "short",
        "option_type": "put",
        "strike": "150",
        "expiry": "2026-12-18",
        "contracts": "2",
        "premium": "1.25",
        "risk_amount": "999",
        "zone": "Green",
        "pattern": "Bull Flag",
    }
    fields, errors = parse_trade_fields(OPTIONS, form)
    assert errors == []
    payload = trade_payload(OPTIONS, fields)
    assert payload["ticker"] == "AAPL"
    assert payload["position_side"] == "short"
    assert payload["strike_price"] == 150.0
    assert payload["expiry_date"] == "2026-12-18"
    for absent in ("risk_amount", "zone", "pattern_traded", "stopsize", "entrytype", "rule3"):
        assert absent not in payload


def test_stocks_payload_defaults_account() -> None:
    fields, errors = parse_trade_fields(STOCKS, {"instrument": "msft"})
    assert errors == []
    assert fields.account == "USD"
    assert trade_payload(STOCKS, fields)["account_currency"] == "USD"


def test_parse_trade_fields_errors() -> None:
    fields, errors = parse_trade_fields(STOCKS, {"instrument": "", "direction": "sideways", "account": "EUR"})
    assert fields is None
    assert any("required" in e for e in errors)
    assert any("direction" in e for e in errors)
    assert any("account" in e for e in errors)


def test_parse_trade_fields_rejects_non_numeric_and_negative() -> None:
    _, errors = parse_trade_fields(FOREX, {"instrument": "GBPJPY", "risk_amount": "abc"})
    assert errors == ["risk_amount must be a number"]
    _, errors = parse_trade_fields(FOREX, {"instrument": "GBPJPY", "risk_amount": "-5"})
    assert errors == ["risk_amount must be >= 0"]
    _, errors = parse_trade_fields(OPTIONS, {"instrument": "SPY", "strike": "0"})
    assert errors == ["strike must be > 0"]


def test_parse_trade_fields_rejects_unknown_option_type() -> None:
    _, errors = parse_trade_fields(OPTIONS, {"instrument": "SPY", "option_type": "straddle"})
    assert any("option_type" in e for e in errors)


def test_missed_payload_maps_columns() -> None:
    payload, errors = missed_payload(
        STOCKS,
        {"instrument": "nvda", "direction": "long", "potential_return": "12.5", "pattern": "Breakout", "before_url": " "},
    )
    assert errors == []
    assert payload["ticker"] == "NVDA"
    assert payload["potential_return"] == 12.5
    assert payload["pattern"] == "Breakout"
    assert payload["before_url"] is None


def test_missed_payload_disabled_workspace() -> None:
    payload, errors = missed_payload(OPTIONS, {"instrument": "SPY"})
    assert payload is None
    assert errors


def test_workspace_to_dict_lists_fields_and_features() -> None:
    d = OPTIONS.to_dict()
    assert d["key"] == "options"
    assert d["features"]["analytics"] is False
    assert "strike" in d["trade_fields"]
    assert "risk_amount" not in d["trade_fields"]
    assert [o["value"] for o in d["option_type_options"]] == ["call", "put"]
