# Copyright 2026 TradeJournal
# SPDX-License-Identifier: MIT
"""Trade Journal data models: Trade, BalanceEntry, MissedTrade, TradingPlan, ChecklistRecord.

Rows come back from the store keyed by physical column; ``from_row`` maps
them to logical fields using the workspace's column aliases.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from tradejournal.core.workspaces.models import WorkspaceConfig


def _num(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    return float(value)


@dataclass
class Trade:
    """Journal trade. status=open ⇔ exit_date and pnl are None."""
    id: Any
    instrument: str
    direction: str
    status: str = "open"
    entry_date: Optional[str] = None
    exit_date: Optional[str] = None
    exit_url: Optional[str] = None
    pnl: Optional[float] = None
    notes: Optional[str] = None
    entry_url: Optional[str] = None
    stop_size: Optional[float] = None
    risk_amount: Optional[float] = None
    entry_type: Optional[str] = None
    rule: Optional[str] = None
    zone: Optional[str] = None
    pattern: Optional[str] = None
    account: Optional[str] = None
    option_type: Optional[str] = None
    strike: Optional[float] = None
    expiry: Optional[str] = None
    contracts: Optional[float] = None
    premium: Optional[float] = None

    @property
    def is_open(self) -> bool:
        return self.status == "open"

    @classmethod
    def from_row(cls, config: WorkspaceConfig, row: Dict[str, Any]) -> "Trade":
        tc = config.trade_columns

        def get(logical: str) -> Any:
            column = tc.column(logical)
            return row.get(column) if column else None

        return cls(
            id=row.get(tc.id),
            instrument=get("instrument") or "",
            direction=get("direction") or "long",
            status=get("status") or "open",
            entry_date=get("entry_date"),
            exit_date=get("exit_date"),
            exit_url=get("exit_url"),
            pnl=_num(get("pnl")),
            notes=get("notes"),
            entry_url=get("entry_url"),
            stop_size=_num(get("stop_size")),
            risk_amount=_num(get("risk_amount")),
            entry_type=get("entry_type"),
            rule=get("rule"),
            zone=get("zone"),
            pattern=get("pattern"),
            account=get("account"),
            option_type=get("option_type"),
            strike=_num(get("strike")),
            expiry=get("expiry"),
            contracts=_num(get("contracts")),
            premium=_num(get("premium")),
        )

    def to_dict(self, config: Optional[WorkspaceConfig] = None) -> Dict[str, Any]:
        """Logical-field dict. With a config, fields the workspace lacks are dropped."""
        out = {
            "id": self.id,
            "instrument": self.instrument,
            "direction": self.direction,
            "status": self.status,
            "entry_date": self.entry_date,
            "exit_date": self.exit_date,
            "exit_url": self.exit_url,
            "pnl": self.pnl,
            "notes": self.notes,
            "entry_url": self.entry_url,
            "stop_size": self.stop_size,
            "risk_amount": self.risk_amount,
            "entry_type": self.entry_type,
            "rule": self.rule,
            "zone": self.zone,
            "pattern": self.pattern,
            "account": self.account,
            "option_type": self.option_type,
            "strike": self.strike,
            "expiry": self.expiry,
            "contracts": self.contracts,
            "premium": self.premium,
        }
        if config is not None:
            out = {k: v for k, v in out.items() if k == "id" or config.has_trade_field(k)}
        return out


@dataclass
class BalanceEntry:
    """One ledger row: resulting balance after a signed change."""
    id: Any
    balance: float
    change_amount: Optional[float]
    reason: Optional[str]
    created_at: Optional[str]
    trade_id: Any = None
    account: Optional[str] = None

    @classmethod
    def from_row(cls, config: WorkspaceConfig, row: Dict[str, Any]) -> "BalanceEntry":
        bc = config.balance_columns
        return cls(
            id=row.get(bc.id),
            balance=float(row.get(bc.balance) or 0.0),
            change_amount=_num(row.get(bc.change_amount)),
            reason=row.get(bc.reason),
            created_at=row.get(bc.created_at),
            trade_id=row.get(bc.trade_id),
            account=row.get(bc.currency) if bc.currency else None,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "balance": self.balance,
            "change_amount": self.change_amount,
            "reason": self.reason,
            "created_at": self.created_at,
            "trade_id": self.trade_id,
            "account": self.account,
        }


@dataclass
class MissedTrade:
    id: Any
    instrument: str
    direction: Optional[str]
    before_url: Optional[str] = None
    after_url: Optional[str] = None
    pattern: Optional[str] = None
    potential_return: Optional[float] = None
    created_at: Optional[str] = None

    @classmethod
    def from_row(cls, config: WorkspaceConfig, row: Dict[str, Any]) -> "MissedTrade":
        mc = config.missed_columns
        return cls(
            id=row.get(mc.id),
            instrument=row.get(mc.instrument) or "",
            direction=row.get(mc.direction),
            before_url=row.get(mc.before_url),
            after_url=row.get(mc.after_url),
            pattern=row.get(mc.pattern),
            potential_return=_num(row.get(mc.potential)),
            created_at=row.get(mc.created_at),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "instrument": self.instrument,
            "direction": self.direction,
            "before_url": self.before_url,
            "after_url": self.after_url,
            "pattern": self.pattern,
            "potential_return": self.potential_return,
            "created_at": self.created_at,
        }


@dataclass
class TradingPlan:
    id: Any
    content: str
    updated_at: Optional[str] = None

    @classmethod
    def from_row(cls, config: WorkspaceConfig, row: Dict[str, Any]) -> "TradingPlan":
        pc = config.plan_columns
        return cls(id=row.get(pc.id), content=row.get(pc.content) or "", updated_at=row.get(pc.updated_at))

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "content": self.content, "updated_at": self.updated_at}


@dataclass
class ChecklistRecord:
    """A persisted checklist snapshot: an attempt (pass/fail) or a log tied to a trade."""
    id: Any
    answers: Dict[str, Any] = field(default_factory=dict)
    zone: Optional[str] = None
    status: Optional[str] = None
    workspace: Optional[str] = None
    created_at: Optional[str] = None
    trade_id: Any = None
    failure_reason: Optional[str] = None
    used: bool = False

    @classmethod
    def from_log_row(cls, config: WorkspaceConfig, row: Dict[str, Any]) -> "ChecklistRecord":
        lc = config.checklist_log_columns
        return cls(
            id=row.get(lc.id),
            answers=row.get(lc.answers) or {},
            zone=row.get(lc.zone),
            status=row.get(lc.status),
            workspace=row.get(lc.workspace),
            created_at=row.get(lc.created_at),
            trade_id=row.get(lc.trade_id),
        )

    @classmethod
    def from_attempt_row(cls, config: WorkspaceConfig, row: Dict[str, Any]) -> "ChecklistRecord":
        ac = config.checklist_attempt_columns
        return cls(
            id=row.get(ac.id),
            answers=row.get(ac.answers) or {},
            zone=row.get(ac.zone),
            status=row.get(ac.status),
            workspace=row.get(ac.workspace),
            created_at=row.get(ac.created_at),
            failure_reason=row.get(ac.failure_reason),
            used=bool(row.get(ac.used)),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "answers": self.answers,
            "zone": self.zone,
            "status": self.status,
            "workspace": self.workspace,
            "created_at": self.created_at,
            "trade_id": self.trade_id,
            "failure_reason": self.failure_reason,
            "used": self.used,
        }
