# Copyright 2026 TradeJournal
# SPDX-License-Identifier: MIT
"""Workspace configuration models.

A workspace (stocks, forex, options) is a static, immutable description of
where its data lives (table names, column aliases) and how its views behave
(feature flags, labels, vocabularies, form defaults, risk fraction).

A column alias of ``None`` means the logical field does not exist for that
workspace. Payload builders omit such fields entirely.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any, Dict, Optional, Tuple, Type, Union


DIRECTIONS = ("long", "short")
OPTION_TYPES = ("call", "put")
TRADE_STATUSES = ("open", "closed")


@dataclass(frozen=True)
class SelectOption:
    value: str
    label: str


def options(*values: str) -> Tuple[SelectOption, ...]:
    """Build a vocabulary where label == value."""
    return tuple(SelectOption(v, v) for v in values)


DIRECTION_OPTIONS = (
    SelectOption("long", "Long (Buy)"),
    SelectOption("short", "Short (Sell)"),
)
OPTION_TYPE_OPTIONS = (
    SelectOption("call", "Call"),
    SelectOption("put", "Put"),
)


# ---------------------------------------------------------------------------
# Tables and column aliases
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class TableNames:
    trades: str
    balance: str
    missed: Optional[str] = None
    plan: Optional[str] = None
    checklist_logs: Optional[str] = None
    checklist_attempts: Optional[str] = None


@dataclass(frozen=True)
class TradeColumns:
    """Physical column per logical trade field. None = not applicable."""
    instrument: str
    direction: str
    status: str = "status"
    pnl: str = "pnl"
    entry_date: str = "entry_date"
    exit_date: str = "exit_date"
    exit_url: str = "exit_url"
    notes: str = "notes"
    entry_url: Optional[str] = "entry_url"
    id: str = "id"
    stop_size: Optional[str] = None
    risk_amount: Optional[str] = None
    entry_type: Optional[str] = None
    rule: Optional[str] = None
    zone: Optional[str] = None
    pattern: Optional[str] = None
    account: Optional[str] = None
    option_type: Optional[str] = None
    strike: Optional[str] = None
    expiry: Optional[str] = None
    contracts: Optional[str] = None
    premium: Optional[str] = None

    def column(self, logical: str) -> Optional[str]:
        return getattr(self, logical, None)


@dataclass(frozen=True)
class BalanceColumns:
    id: str = "id"
    balance: str = "balance"
    change_amount: str = "change_amount"
    reason: str = "change_reason"
    trade_id: str = "trade_id"
    created_at: str = "created_at"
    currency: Optional[str] = None


@dataclass(frozen=True)
class MissedColumns:
    instrument: str
    id: str = "id"
    direction: str = "direction"
    before_url: str = "before_url"
    after_url: str = "after_url"
    pattern: str = "pattern"
    potential: str = "potential_return"
    created_at: str = "created_at"


@dataclass(frozen=True)
class PlanColumns:
    id: str = "id"
    content: str = "content"
    updated_at: str = "updated_at"


@dataclass(frozen=True)
class ChecklistLogColumns:
    id: str = "id"
    trade_id: str = "trade_id"
    answers: str = "answers"
    zone: str = "zone"
    status: str = "status"
    workspace: str = "workspace"
    created_at: str = "created_at"


@dataclass(frozen=True)
class ChecklistAttemptColumns:
    id: str = "id"
    answers: str = "answers"
    zone: str = "zone"
    status: str = "status"
    workspace: str = "workspace"
    failure_reason: str = "failure_reason"
    created_at: str = "created_at"
    used: str = "used"  # set once a passed attempt has unlocked a trade


# ---------------------------------------------------------------------------
# Typed trade-field variants
# ---------------------------------------------------------------------------


@dataclass
class StockTradeFields:
    """Entry fields for an equity trade."""
    instrument: str
    direction: str = "long"
    stop_size: Optional[float] = None
    risk_amount: Optional[float] = None
    entry_url: Optional[str] = None
    entry_type: Optional[str] = None
    rule: Optional[str] = None
    zone: Optional[str] = None
    pattern: Optional[str] = None
    notes: Optional[str] = None
    account: Optional[str] = None


@dataclass
class ForexTradeFields:
    """Entry fields for a currency-pair trade."""
    instrument: str
    direction: str = "long"
    stop_size: Optional[float] = None
    risk_amount: Optional[float] = None
    entry_url: Optional[str] = None
    entry_type: Optional[str] = None
    rule: Optional[str] = None
    zone: Optional[str] = None
    pattern: Optional[str] = None
    notes: Optional[str] = None


@dataclass
class OptionTradeFields:
    """Entry fields for an option contract trade."""
    instrument: str
    direction: str = "long"
    option_type: str = "call"
    strike: Optional[float] = None
    expiry: Optional[str] = None  # YYYY-MM-DD
    contracts: Optional[float] = None
    premium: Optional[float] = None
    entry_url: Optional[str] = None
    notes: Optional[str] = None


TradeFields = Union[StockTradeFields, ForexTradeFields, OptionTradeFields]

NUMERIC_TRADE_FIELDS = frozenset({"stop_size", "risk_amount", "strike", "contracts", "premium"})


# ---------------------------------------------------------------------------
# Flags, labels, workspace
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class FeatureFlags:
    missed_trades: bool = True
    analytics: bool = True
    trading_plan: bool = True
    checklist: bool = True


@dataclass(frozen=True)
class WorkspaceLabels:
    journal_title: str
    environment_title: str
    environment_description: str
    home_button: str
    menu_tagline: str
    instrument: str
    instrument_placeholder: str
    new_trade_button: str
    update_trade_button: str
    view_data_button: str
    plan_title: str
    plan_save: str
    balance_title: str
    add_balance_button: str
    add_balance_placeholder: str
    entry_url_label: str
    notes_label: str = "Notes (Optional)"
    pnl_label: str = "P&L ($)"
    pattern: Optional[str] = None
    missed_pattern: Optional[str] = None
    missed_trade_button: Optional[str] = None
    missed_data_button: Optional[str] = None
    stop_size_label: Optional[str] = None
    account_label: str = "Account"


@dataclass(frozen=True)
class WorkspaceConfig:
    """Immutable per-workspace configuration record."""
    key: str
    labels: WorkspaceLabels
    tables: TableNames
    trade_columns: TradeColumns
    balance_columns: BalanceColumns
    trade_fields: Type[Any]
    features: FeatureFlags = field(default_factory=FeatureFlags)
    missed_columns: Optional[MissedColumns] = None
    plan_columns: Optional[PlanColumns] = field(default_factory=PlanColumns)
    checklist_log_columns: ChecklistLogColumns = field(default_factory=ChecklistLogColumns)
    checklist_attempt_columns: ChecklistAttemptColumns = field(default_factory=ChecklistAttemptColumns)
    accounts: Tuple[SelectOption, ...] = ()
    pattern_options: Tuple[SelectOption, ...] = ()
    missed_pattern_options: Tuple[SelectOption, ...] = ()
    entry_type_options: Tuple[SelectOption, ...] = ()
    rule_options: Tuple[SelectOption, ...] = ()
    zone_options: Tuple[SelectOption, ...] = ()
    option_type_options: Tuple[SelectOption, ...] = ()
    direction_options: Tuple[SelectOption, ...] = DIRECTION_OPTIONS
    analytics_labels: Tuple[Tuple[str, str], ...] = ()
    missed_analytics_labels: Tuple[Tuple[str, str], ...] = ()
    form_defaults: Tuple[Tuple[str, Any], ...] = ()
    risk_fraction: float = 0.005
    missed_min_sample: int = 5
    uppercase_instrument: bool = True
    workspace_value: Optional[str] = None  # value written to checklist "workspace" column

    @property
    def checklist_workspace(self) -> str:
        return self.workspace_value or self.key

    @property
    def has_accounts(self) -> bool:
        return bool(self.accounts) and self.balance_columns.currency is not None

    @property
    def default_account(self) -> Optional[str]:
        if not self.has_accounts:
            return None
        preferred = self.defaults().get("account")
        values = [a.value for a in self.accounts]
        return preferred if preferred in values else values[0]

    def defaults(self) -> Dict[str, Any]:
        return dict(self.form_defaults)

    def trade_field_names(self) -> Tuple[str, ...]:
        return tuple(f.name for f in fields(self.trade_fields))

    def has_trade_field(self, logical: str) -> bool:
        return self.trade_columns.column(logical) is not None

    def to_dict(self) -> Dict[str, Any]:
        """Serializable summary for API consumers."""
        def _opts(items: Tuple[SelectOption, ...]):
            return [{"value": o.value, "label": o.label} for o in items]

        return {
            "key": self.key,
            "title": self.labels.journal_title,
            "environment_title": self.labels.environment_title,
            "description": self.labels.environment_description,
            "features": {
                "missed_trades": self.features.missed_trades,
                "analytics": self.features.analytics,
                "trading_plan": self.features.trading_plan,
                "checklist": self.features.checklist,
            },
            "trade_fields": list(self.trade_field_names()),
            "accounts": _opts(self.accounts),
            "pattern_options": _opts(self.pattern_options),
            "missed_pattern_options": _opts(self.missed_pattern_options),
            "entry_type_options": _opts(self.entry_type_options),
            "rule_options": _opts(self.rule_options),
            "zone_options": _opts(self.zone_options),
            "option_type_options": _opts(self.option_type_options),
            "direction_options": _opts(self.direction_options),
            "form_defaults": self.defaults(),
            "risk_fraction": self.risk_fraction,
            "uppercase_instrument": self.uppercase_instrument,
        }
