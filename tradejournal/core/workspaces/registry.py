# Copyright 2026 TradeJournal
# SPDX-License-Identifier: MIT
"""Workspace registry: the three built-in workspaces and lookup helpers."""

from __future__ import annotations

from dataclasses import fields
from typing import Dict, List

from tradejournal.core.errors import UnknownWorkspaceError
from tradejournal.core.workspaces.models import (
    OPTION_TYPE_OPTIONS,
    BalanceColumns,
    FeatureFlags,
    ForexTradeFields,
    MissedColumns,
    OptionTradeFields,
    SelectOption,
    StockTradeFields,
    TableNames,
    TradeColumns,
    WorkspaceConfig,
    WorkspaceLabels,
    options,
)


# ---------------------------------------------------------------------------
# Stocks
# ---------------------------------------------------------------------------

STOCKS = WorkspaceConfig(
    key="stocks",
    labels=WorkspaceLabels(
        journal_title="Stock Trading Journal",
        environment_title="Stock Trading Workspace",
        environment_description="Log, update, and review your equity trades with balance tracking and analytics.",
        home_button="Stock Trades",
        menu_tagline="Manage and analyze your stock positions.",
        instrument="Ticker Symbol",
        instrument_placeholder="e.g., AAPL, TSLA",
        new_trade_button="Log Stock Trade",
        update_trade_button="Close Existing Stock Trade",
        view_data_button="View Trade History",
        plan_title="Stock Playbook",
        plan_save="Save Playbook",
        balance_title="Portfolio Balance",
        add_balance_button="Record Cash Movement",
        add_balance_placeholder="e.g., Funding account, Broker fees",
        entry_url_label="Idea/Chart URL (Optional)",
        pattern="Setup Traded",
        missed_pattern="Setup Spotted",
        missed_trade_button="Log Missed Opportunity",
        missed_data_button="Review Missed Opportunities",
        stop_size_label="Stop Distance ($)",
    ),
    tables=TableNames(
        trades="stock_trades",
        balance="stock_balance_history",
        missed="stock_missed_trades",
        plan="stock_trading_plan",
        checklist_logs="stock_checklist_logs",
        checklist_attempts="stock_checklist_attempts",
    ),
    trade_columns=TradeColumns(
        instrument="ticker",
        direction="direction",
        stop_size="stopsize",
        risk_amount="risk_amount",
        entry_type="entrytype",
        rule="rule3",
        zone="zone",
        pattern="pattern_traded",
        account="account_currency",
    ),
    balance_columns=BalanceColumns(currency="currency"),
    missed_columns=MissedColumns(instrument="ticker"),
    trade_fields=StockTradeFields,
    features=FeatureFlags(missed_trades=True, analytics=True, trading_plan=True),
    accounts=(SelectOption("CAD", "CAD Account"), SelectOption("USD", "USD Account")),
    pattern_options=options(
        "Breakout", "Pullback", "Trend Continuation", "Gap and Go",
        "News Catalyst", "Earnings Drift", "Reversal", "Base Breakout",
    ),
    missed_pattern_options=options("Breakout", "Pullback", "Trend Continuation", "Gap and Go", "Reversal"),
    entry_type_options=options("Breakout", "Pullback", "Reversal", "News Catalyst"),
    rule_options=options("Trend", "Range", "Reversal"),
    zone_options=options("Accumulation", "Breakout", "Distribution"),
    analytics_labels=(
        ("pattern", "Top Performing Setups"),
        ("zone", "Price Zone Performance"),
        ("entry_type", "Entry Trigger Performance"),
        ("rule", "Market Context Performance"),
        ("day", "Day of Week Performance"),
        ("instrument", "Ticker Performance"),
    ),
    missed_analytics_labels=(
        ("day", "By Day of Week"),
        ("instrument", "By Ticker"),
        ("pattern", "Top Setups Missed"),
    ),
    form_defaults=(
        ("direction", "long"),
        ("entry_type", "Breakout"),
        ("rule", "Trend"),
        ("zone", "Breakout"),
        ("account", "USD"),
    ),
    missed_min_sample=3,
)


# ---------------------------------------------------------------------------
# Forex
# ---------------------------------------------------------------------------

FOREX = WorkspaceConfig(
    key="forex",
    labels=WorkspaceLabels(
        journal_title="FX Trading Journal",
        environment_title="Forex Trading Workspace",
        environment_description="Enter, update, and review your currency trades with analytics and balance tracking.",
        home_button="Forex Trades",
        menu_tagline="All of your forex tracking in one place.",
        instrument="Currency Pair",
        instrument_placeholder="e.g., EURUSD, GBPJPY",
        new_trade_button="Enter New Trade",
        update_trade_button="Update Existing Trade",
        view_data_button="View Historical Data",
        plan_title="Trading Plan",
        plan_save="Save Plan",
        balance_title="Account Balance",
        add_balance_button="Add Deposit/Withdrawal",
        add_balance_placeholder="e.g., Monthly deposit, Profit withdrawal",
        entry_url_label="Entry Chart/Analysis URL (Optional)",
        pattern="Pattern Traded",
        missed_pattern="Pattern Spotted",
        missed_trade_button="Log Missed Trade",
        missed_data_button="View Missed Trades History",
        stop_size_label="Stop Size",
    ),
    tables=TableNames(
        trades="trades",
        balance="balance_history",
        missed="missed_trades",
        plan="trading_plan",
        checklist_logs="forex_checklist_logs",
        checklist_attempts="forex_checklist_attempts",
    ),
    trade_columns=TradeColumns(
        instrument="pair",
        direction="direction",
        stop_size="stopsize",
        risk_amount="risk_amount",
        entry_type="entrytype",
        rule="rule3",
        zone="zone",
        pattern="pattern_traded",
    ),
    balance_columns=BalanceColumns(),
    missed_columns=MissedColumns(instrument="pair"),
    trade_fields=ForexTradeFields,
    features=FeatureFlags(missed_trades=True, analytics=True, trading_plan=True),
    pattern_options=options(
        "Bull Flag", "Bear Flag", "Flat Flag", "Symmetrical Triangle", "Expanding Triangle",
        "Falcon Flag", "Ascending Channel", "Descending Channel", "Rising Wedge", "Falling Wedge",
        "H&S", "Double Top", "Double Bottom", "The Arc", "Structural Test", "Hook Point",
        "Reverse M Style", "M Style",
    ),
    missed_pattern_options=options(
        "Bull Flag", "Bear Flag", "Falcon Flag", "Hook Point", "Double Top", "Double Bottom",
    ),
    entry_type_options=options("RE", "RRE"),
    rule_options=options("Impulsive", "Structural", "Corrective"),
    zone_options=options("Red", "Yellow", "Green"),
    analytics_labels=(
        ("pattern", "Top Performing Patterns"),
        ("zone", "Zone Performance"),
        ("entry_type", "Entry Type Performance"),
        ("rule", "Rule3 Performance"),
        ("day", "Day of Week Performance"),
        ("instrument", "Currency Pair Performance"),
    ),
    missed_analytics_labels=(
        ("day", "By Day of Week"),
        ("instrument", "By Pair"),
        ("pattern", "Top Patterns Missed"),
    ),
    form_defaults=(
        ("direction", "long"),
        ("entry_type", "RE"),
        ("rule", "Impulsive"),
        ("zone", "Red"),
    ),
    missed_min_sample=5,
)


# ---------------------------------------------------------------------------
# Options
# ---------------------------------------------------------------------------

OPTIONS = WorkspaceConfig(
    key="options",
    labels=WorkspaceLabels(
        journal_title="Options Trading Journal",
        environment_title="Options Trading Workspace",
        environment_description="Track option contracts, cash flow, and post-trade notes for your call and put strategies.",
        home_button="Options Trades",
        menu_tagline="Capture your options trades with full contract details.",
        instrument="Ticker Symbol",
        instrument_placeholder="e.g., AAPL",
        new_trade_button="Log Option Trade",
        update_trade_button="Close Existing Option Trade",
        view_data_button="View Option History",
        plan_title="Options Playbook",
        plan_save="Save Playbook",
        balance_title="Options Account Balance",
        add_balance_button="Add Deposit/Withdrawal",
        add_balance_placeholder="e.g., Funding account, Broker fees",
        entry_url_label="Trade Notes URL (Optional)",
    ),
    tables=TableNames(
        trades="options_trades",
        balance="options_balance_history",
        plan="options_trading_plan",
        checklist_logs="options_checklist_logs",
        checklist_attempts="options_checklist_attempts",
    ),
    trade_columns=TradeColumns(
        instrument="ticker",
        direction="position_side",
        option_type="option_type",
        strike="strike_price",
        expiry="expiry_date",
        contracts="contracts",
        premium="premium",
    ),
    balance_columns=BalanceColumns(),
    trade_fields=OptionTradeFields,
    features=FeatureFlags(missed_trades=False, analytics=False, trading_plan=True),
    option_type_options=OPTION_TYPE_OPTIONS,
    form_defaults=(
        ("direction", "long"),
        ("option_type", "call"),
    ),
)


_WORKSPACES: Dict[str, WorkspaceConfig] = {}


def validate_workspace(config: WorkspaceConfig) -> List[str]:
    """Check a workspace is internally consistent. Returns list of problems (empty = valid)."""
    errors: List[str] = []
    for f in fields(config.trade_fields):
        if config.trade_columns.column(f.name) is None:
            errors.append(f"{config.key}: trade field {f.name!r} has no column")
    if config.features.missed_trades and (config.tables.missed is None or config.missed_columns is None):
        errors.append(f"{config.key}: missed trades enabled without a missed table")
    if config.features.trading_plan and (config.tables.plan is None or config.plan_columns is None):
        errors.append(f"{config.key}: trading plan enabled without a plan table")
    if config.features.checklist and (
        config.tables.checklist_logs is None or config.tables.checklist_attempts is None
    ):
        errors.append(f"{config.key}: checklist enabled without checklist tables")
    if not 0 < config.risk_fraction < 1:
        errors.append(f"{config.key}: risk_fraction must be between 0 and 1")
    return errors


def register_workspace(config: WorkspaceConfig) -> WorkspaceConfig:
    errors = validate_workspace(config)
    if errors:
        raise ValueError("; ".join(errors))
    _WORKSPACES[config.key] = config
    return config


for _config in (STOCKS, FOREX, OPTIONS):
    register_workspace(_config)


def get_workspace(key: str) -> WorkspaceConfig:
    """Return the workspace config for key, or raise UnknownWorkspaceError."""
    try:
        return _WORKSPACES[key]
    except KeyError:
        raise UnknownWorkspaceError(key) from None


def list_workspaces() -> List[WorkspaceConfig]:
    return list(_WORKSPACES.values())
