# Copyright 2026 TradeJournal
# SPDX-License-Identifier: MIT
"""Journal service: trade lifecycle, balance ledger, missed trades, plan and checklist.

Rules:
  - A trade can only be created with a PendingApproval from the decision gate
    (workspaces with the checklist enabled)
  - risk_amount must not exceed current balance x risk_fraction
  - Instrument is uppercased when the workspace says so; status is forced to open
  - Closing with non-zero P&L appends one balance entry
  - Secondary writes (checklist log after a trade insert, balance append after
    a close) are logged on failure and never undo the primary write

Validation failures come back as (None, errors). Store failures raise
StoreOperationError.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from tradejournal.core.analytics import analyze_missed, analyze_trades
from tradejournal.core.checklist.gate import STATUS_FAILED, STATUS_PASSED, ChecklistGate, ChecklistSnapshot, PendingApproval
from tradejournal.core.checklist.stats import RECENT_ATTEMPTS_LIMIT, summarize_attempts
from tradejournal.core.errors import FeatureDisabledError, StoreOperationError
from tradejournal.core.journal import ledger
from tradejournal.core.journal.models import BalanceEntry, ChecklistRecord, MissedTrade, Trade, TradingPlan
from tradejournal.core.journal.repository import JournalRepository
from tradejournal.core.store.base import TableStore
from tradejournal.core.workspaces.models import TRADE_STATUSES, WorkspaceConfig
from tradejournal.core.workspaces.payload import missed_payload, parse_trade_fields, to_float

logger = logging.getLogger(__name__)

CHECKLIST_MISSING = "Checklist snapshot missing. Please redo the decision gate."
CHECKLIST_USED = "Checklist approval already used or not recognised. Please redo the decision gate."
TRADE_ADDED = "Trade added successfully!"
TRADE_CLOSED = "Trade updated successfully!"
TRADE_CLOSED_WITH_BALANCE = "Trade updated successfully! Balance automatically adjusted."
MISSED_LOGGED = "Missed trade logged!"
ATTEMPT_LOGGED = "Attempt logged."


@dataclass
class CloseResult:
    trade: Trade
    balance_entry: Optional[BalanceEntry] = None
    message: str = TRADE_CLOSED

    def to_dict(self, config: Optional[WorkspaceConfig] = None) -> Dict[str, Any]:
        return {
            "trade": self.trade.to_dict(config),
            "balance_entry": self.balance_entry.to_dict() if self.balance_entry else None,
            "message": self.message,
        }


class JournalService:
    """Operations behind the workspace views."""

    def __init__(self, repository: JournalRepository) -> None:
        self.repo = repository
        self.config = repository.config

    @classmethod
    def for_workspace(cls, config: WorkspaceConfig, store: TableStore) -> "JournalService":
        return cls(JournalRepository(config, store))

    # ---------------------------------------------------------------------------
    # Decision gate
    # ---------------------------------------------------------------------------

    def begin_checklist(self, responses: Optional[Mapping[str, Any]] = None) -> ChecklistGate:
        return ChecklistGate(self.config.key, responses)

    def approve_checklist(self, gate: ChecklistGate) -> Tuple[Optional[PendingApproval], List[str]]:
        """Record a passed attempt and issue the approval token. Returns (approval, errors)."""
        if not gate.is_approved:
            return None, [f"Checklist not approved: {gate.failure_reason()}"]
        snapshot = gate.snapshot()
        record = self.repo.insert_checklist_attempt(snapshot, STATUS_PASSED)
        return PendingApproval(self.config.key, snapshot, approval_id=str(record.id)), []

    def log_checklist_attempt(self, gate: ChecklistGate) -> Tuple[Optional[ChecklistRecord], List[str]]:
        """Record a failed attempt with its failure reason. Requires at least one answer."""
        if not gate.has_any_input:
            return None, ["Answer at least one checklist item before logging an attempt"]
        record = self.repo.insert_checklist_attempt(gate.snapshot(), STATUS_FAILED, gate.failure_reason())
        return record, []

    def checklist_stats(self) -> Dict[str, Any]:
        return summarize_attempts(self.repo.list_checklist_attempts(RECENT_ATTEMPTS_LIMIT))

    def checklist_logs(self, trade_ids: Iterable[Any]) -> Dict[str, Dict[str, Any]]:
        """Snapshot logged with each trade, keyed by trade id as text."""
        logs = self.repo.list_checklist_logs(trade_ids)
        return {str(k): v.to_dict() for k, v in logs.items()}

    # ---------------------------------------------------------------------------
    # Balance
    # ---------------------------------------------------------------------------

    def current_balance(self, account: Optional[str] = None) -> float:
        return ledger.current_balance(self.config, self.repo.list_balance(), account)

    def risk_limit(self, account: Optional[str] = None) -> Dict[str, Any]:
        if self.config.has_accounts and account is None:
            account = self.config.default_account
        balance = self.current_balance(account)
        return {
            "account": account,
            "balance": balance,
            "risk_fraction": self.config.risk_fraction,
            "max_risk": float(ledger.max_risk(balance, self.config.risk_fraction)),
        }

    def balance_summary(self, account: Optional[str] = None) -> Dict[str, Any]:
        """Current balance and ledger history; with an account, that account's slice."""
        if not self.config.has_accounts:
            account = None
        entries = self.repo.list_balance()
        summary: Dict[str, Any] = {
            "account": account,
            "current_balance": ledger.current_balance(self.config, entries, account),
            "history": [e.to_dict() for e in entries if account is None or e.account == account],
        }
        if self.config.has_accounts:
            summary["accounts"] = ledger.balances_by_account(self.config, entries)
        return summary

    def record_cash_movement(
        self,
        amount: Any,
        reason: Optional[str] = None,
        account: Optional[str] = None,
    ) -> Tuple[Optional[BalanceEntry], List[str]]:
        """Manual deposit (positive) or withdrawal (negative). Returns (entry, errors)."""
        errors: List[str] = []
        try:
            value = to_float(amount)
        except (TypeError, ValueError):
            value = None
        if value is None or value == 0:
            errors.append("amount must be a non-zero number")
        if self.config.has_accounts:
            account = account or self.config.default_account
            allowed = [a.value for a in self.config.accounts]
            if account not in allowed:
                errors.append(f"account must be one of {allowed}")
        else:
            account = None
        if errors:
            return None, errors
        entry = self.repo.append_balance(value, ledger.cash_movement_reason(value, reason), account=account)
        return entry, []

    # ---------------------------------------------------------------------------
    # Trades
    # ---------------------------------------------------------------------------

    def create_trade(
        self,
        form: Mapping[str, Any],
        approval: Optional[PendingApproval],
    ) -> Tuple[Optional[Trade], List[str]]:
        """Validate and insert a new open trade. Returns (trade, errors).

        The approval must name a passed attempt recorded by approve_checklist
        for this workspace. It is marked used once the form validates, so each
        gate pass unlocks one trade.
        """
        gated = self.config.features.checklist
        if gated:
            if approval is None or not approval.is_valid_for(self.config.key):
                return None, [CHECKLIST_MISSING]
            if self.repo.find_open_approval(approval.approval_id) is None:
                return None, [CHECKLIST_USED]

        fields, errors = parse_trade_fields(self.config, form)
        if errors:
            return None, errors

        risk_amount = getattr(fields, "risk_amount", None)
        if self.config.has_trade_field("risk_amount") and risk_amount is not None:
            limit = self.risk_limit(getattr(fields, "account", None))
            if ledger.risk_exceeded(risk_amount, limit["balance"], self.config.risk_fraction):
                return None, [
                    f"Risk amount ${risk_amount:.2f} exceeds the maximum of ${limit['max_risk']:.2f} "
                    f"({self.config.risk_fraction * 100:g}% of ${limit['balance']:.2f})"
                ]

        snapshot: Optional[ChecklistSnapshot] = None
        if gated:
            attempt = self.repo.consume_approval(approval.approval_id)
            if attempt is None:
                return None, [CHECKLIST_USED]
            snapshot = ChecklistSnapshot.from_dict(attempt.answers)

        trade = self.repo.insert_trade(fields)

        if snapshot is not None and self.config.tables.checklist_logs:
            try:
                self.repo.insert_checklist_log(trade.id, snapshot)
            except StoreOperationError as e:
                logger.error("[CHECKLIST] %s: could not log checklist for trade %s: %s", self.config.key, trade.id, e)
        return trade, []

    def list_trades(self, status: Optional[str] = None) -> List[Trade]:
        return self.repo.list_trades(status)

    def open_trades(self) -> List[Trade]:
        return self.repo.list_trades("open")

    def close_trade(
        self,
        trade_id: Any,
        pnl: Any,
        exit_url: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> Tuple[Optional[CloseResult], List[str]]:
        """Close an open trade and, for non-zero P&L, adjust the balance. Returns (result, errors)."""
        errors: List[str] = []
        try:
            pnl_value = to_float(pnl)
        except (TypeError, ValueError):
            pnl_value = None
        if pnl_value is None:
            errors.append("pnl is required and must be a number")
        if trade_id in (None, ""):
            errors.append("trade_id is required")
        if errors:
            return None, errors

        existing = self.repo.get_trade(trade_id)
        if existing is None:
            return None, [f"Trade {trade_id} not found"]
        if not existing.is_open:
            return None, [f"Trade {trade_id} is already closed"]

        trade = self.repo.close_trade(trade_id, exit_url=exit_url, pnl=pnl_value, notes=notes)
        result = CloseResult(trade=trade)
        if pnl_value != 0:
            try:
                result.balance_entry = self.repo.append_balance(
                    pnl_value,
                    ledger.trade_pnl_reason(trade),
                    account=trade.account,
                    trade_id=trade.id,
                )
                result.message = TRADE_CLOSED_WITH_BALANCE
            except StoreOperationError as e:
                logger.error(
                    "[LEDGER] %s: trade %s closed but balance update failed: %s",
                    self.config.key, trade.id, e,
                )
        return result, []

    def history(self, status: Optional[str] = None) -> Dict[str, Any]:
        """Trades (optionally filtered), summary stats, balance and analytics."""
        if status is not None and status not in TRADE_STATUSES:
            status = None
        all_trades = self.repo.list_trades()
        trades = [t for t in all_trades if status is None or t.status == status]
        balance = self.balance_summary()

        with_pnl = [t.pnl for t in all_trades if t.pnl is not None]
        wins = sum(1 for p in with_pnl if p > 0)
        losses = sum(1 for p in with_pnl if p < 0)
        total_pnl = sum(with_pnl)
        current = balance["current_balance"]
        summary = {
            "total": len(all_trades),
            "open": sum(1 for t in all_trades if t.is_open),
            "closed": sum(1 for t in all_trades if t.status == "closed"),
            "wins": wins,
            "losses": losses,
            "win_rate": round(wins / (wins + losses) * 100, 1) if (wins + losses) else 0.0,
            "total_pnl": round(total_pnl, 2),
            "pnl_pct": round(total_pnl / current * 100, 2) if current > 0 else None,
        }

        checklist_logs: Dict[str, Dict[str, Any]] = {}
        if self.config.features.checklist:
            try:
                checklist_logs = self.checklist_logs(t.id for t in trades)
            except StoreOperationError as e:
                logger.warning("[CHECKLIST] %s: could not load checklist logs: %s", self.config.key, e)

        return {
            "workspace": self.config.key,
            "filter": status or "all",
            "trades": [t.to_dict(self.config) for t in trades],
            "summary": summary,
            "balance": balance,
            "analytics": analyze_trades(all_trades, self.config) if self.config.features.analytics else None,
            "checklist_logs": checklist_logs,
        }

    def trade_analytics(self) -> Dict[str, Any]:
        if not self.config.features.analytics:
            raise FeatureDisabledError(self.config.key, "analytics")
        return analyze_trades(self.repo.list_trades(), self.config)

    # ---------------------------------------------------------------------------
    # Missed trades
    # ---------------------------------------------------------------------------

    def log_missed(self, form: Mapping[str, Any]) -> Tuple[Optional[MissedTrade], List[str]]:
        if not self.config.features.missed_trades:
            raise FeatureDisabledError(self.config.key, "missed_trades")
        payload, errors = missed_payload(self.config, form)
        if errors:
            return None, errors
        return self.repo.insert_missed(payload), []

    def missed_history(self) -> Dict[str, Any]:
        if not self.config.features.missed_trades:
            raise FeatureDisabledError(self.config.key, "missed_trades")
        missed = self.repo.list_missed()
        return {
            "missed": [m.to_dict() for m in missed],
            "analytics": analyze_missed(missed, self.config),
        }

    def missed_analytics(self) -> Dict[str, Any]:
        if not self.config.features.missed_trades:
            raise FeatureDisabledError(self.config.key, "missed_trades")
        return analyze_missed(self.repo.list_missed(), self.config)

    # ---------------------------------------------------------------------------
    # Trading plan
    # ---------------------------------------------------------------------------

    def load_plan(self) -> Optional[TradingPlan]:
        if not self.config.features.trading_plan:
            raise FeatureDisabledError(self.config.key, "trading_plan")
        return self.repo.load_plan()

    def save_plan(self, content: str, plan_id: Any = None) -> Tuple[TradingPlan, str]:
        """Save the singleton plan. Returns (plan, message)."""
        if not self.config.features.trading_plan:
            raise FeatureDisabledError(self.config.key, "trading_plan")
        plan, created = self.repo.save_plan(content or "", plan_id)
        verb = "created" if created else "saved"
        return plan, f"{self.config.labels.plan_title} {verb}!"
