# Copyright 2026 TradeJournal
# SPDX-License-Identifier: MIT
"""Journal repository: workspace-aware reads and writes over a TableStore.

Translates logical fields to the workspace's physical columns and keeps a
read cache keyed by (workspace, entity). Every write invalidates the
entities it touches.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

from tradejournal.core.checklist.gate import STATUS_PASSED, ChecklistSnapshot
from tradejournal.core.errors import FeatureDisabledError, TradeNotFoundError
from tradejournal.core.journal.models import BalanceEntry, ChecklistRecord, MissedTrade, Trade, TradingPlan
from tradejournal.core.store.base import TableStore, now_iso
from tradejournal.core.workspaces.models import TradeFields, WorkspaceConfig
from tradejournal.core.workspaces.payload import trade_payload

logger = logging.getLogger(__name__)

CacheKey = Tuple[str, str]


class JournalRepository:
    """Data access for one workspace."""

    def __init__(self, config: WorkspaceConfig, store: TableStore) -> None:
        self.config = config
        self.store = store
        self._cache: Dict[CacheKey, Any] = {}
        self._lock = threading.Lock()
        store.ensure_workspace(config)

    # ---------------------------------------------------------------------------
    # Cache
    # ---------------------------------------------------------------------------

    def _cached(self, entity: str, loader: Callable[[], Any]) -> Any:
        key = (self.config.key, entity)
        with self._lock:
            if key in self._cache:
                return self._cache[key]
        value = loader()
        with self._lock:
            self._cache[key] = value
        return value

    def invalidate(self, *entities: str) -> None:
        """Drop cached entries whose entity equals or starts with one of the given names."""
        with self._lock:
            if not entities:
                self._cache.clear()
                return
            for key in list(self._cache):
                if key[0] == self.config.key and any(
                    key[1] == e or key[1].startswith(e + ":") for e in entities
                ):
                    del self._cache[key]

    def _require(self, table: Optional[str], feature: str) -> str:
        if not table:
            raise FeatureDisabledError(self.config.key, feature)
        return table

    # ---------------------------------------------------------------------------
    # Trades
    # ---------------------------------------------------------------------------

    def list_trades(self, status: Optional[str] = None) -> List[Trade]:
        """Trades newest first, optionally filtered by status."""
        tc = self.config.trade_columns

        def load() -> List[Trade]:
            rows = self.store.select(
                self.config.tables.trades,
                eq={tc.status: status} if status else None,
                order_by=tc.entry_date,
                desc=True,
            )
            return [Trade.from_row(self.config, r) for r in rows]

        return list(self._cached(f"trades:{status or 'all'}", load))

    def get_trade(self, trade_id: Any) -> Optional[Trade]:
        rows = self.store.select(self.config.tables.trades, eq={self.config.trade_columns.id: trade_id}, limit=1)
        return Trade.from_row(self.config, rows[0]) if rows else None

    def insert_trade(self, fields: TradeFields) -> Trade:
        tc = self.config.trade_columns
        payload = trade_payload(self.config, fields)
        payload[tc.status] = "open"
        payload[tc.entry_date] = now_iso()
        row = self.store.insert(self.config.tables.trades, payload)
        self.invalidate("trades")
        trade = Trade.from_row(self.config, row)
        logger.info("[JOURNAL] %s: created trade %s %s", self.config.key, trade.id, trade.instrument)
        return trade

    def close_trade(self, trade_id: Any, *, exit_url: Optional[str], pnl: float, notes: Optional[str]) -> Trade:
        """Set exit timestamp, link, P&L, notes and status=closed on one trade."""
        tc = self.config.trade_columns
        existing = self.get_trade(trade_id)
        if existing is None:
            raise TradeNotFoundError(trade_id)
        values = {
            tc.exit_date: now_iso(),
            tc.exit_url: exit_url or None,
            tc.pnl: float(pnl),
            tc.notes: notes if notes else existing.notes,
            tc.status: "closed",
        }
        rows = self.store.update(self.config.tables.trades, values, eq={tc.id: trade_id})
        self.invalidate("trades")
        if not rows:
            raise TradeNotFoundError(trade_id)
        trade = Trade.from_row(self.config, rows[0])
        logger.info("[JOURNAL] %s: closed trade %s pnl=%s", self.config.key, trade.id, trade.pnl)
        return trade

    # ---------------------------------------------------------------------------
    # Balance ledger
    # ---------------------------------------------------------------------------

    def list_balance(self, account: Optional[str] = None) -> List[BalanceEntry]:
        """Ledger entries newest first, optionally for one account."""
        bc = self.config.balance_columns

        def load() -> List[BalanceEntry]:
            eq = {bc.currency: account} if account is not None and bc.currency else None
            rows = self.store.select(self.config.tables.balance, eq=eq, order_by=bc.created_at, desc=True)
            return [BalanceEntry.from_row(self.config, r) for r in rows]

        return list(self._cached(f"balance:{account or 'all'}", load))

    def latest_balance(self, account: Optional[str] = None) -> float:
        entries = self.list_balance(account)
        return entries[0].balance if entries else 0.0

    def append_balance(
        self,
        change_amount: float,
        reason: str,
        *,
        account: Optional[str] = None,
        trade_id: Any = None,
    ) -> BalanceEntry:
        """Append one ledger row with balance = latest (for the partition) + change_amount."""
        if not self.config.has_accounts:
            account = None
        try:
            row = self.store.append_balance(
                self.config.tables.balance,
                self.config.balance_columns,
                change_amount=change_amount,
                reason=reason,
                account=account,
                trade_id=trade_id,
            )
        finally:
            self.invalidate("balance")
        entry = BalanceEntry.from_row(self.config, row)
        logger.info(
            "[LEDGER] %s: %+.2f (%s) -> %.2f%s",
            self.config.key, change_amount, reason, entry.balance,
            f" [{account}]" if account else "",
        )
        return entry

    # ---------------------------------------------------------------------------
    # Missed trades
    # ---------------------------------------------------------------------------

    def list_missed(self) -> List[MissedTrade]:
        table = self._require(self.config.tables.missed, "missed_trades")
        mc = self.config.missed_columns

        def load() -> List[MissedTrade]:
            rows = self.store.select(table, order_by=mc.created_at, desc=True)
            return [MissedTrade.from_row(self.config, r) for r in rows]

        return list(self._cached("missed", load))

    def insert_missed(self, payload: Dict[str, Any]) -> MissedTrade:
        table = self._require(self.config.tables.missed, "missed_trades")
        row = dict(payload)
        row.setdefault(self.config.missed_columns.created_at, now_iso())
        stored = self.store.insert(table, row)
        self.invalidate("missed")
        return MissedTrade.from_row(self.config, stored)

    # ---------------------------------------------------------------------------
    # Trading plan
    # ---------------------------------------------------------------------------

    def load_plan(self) -> Optional[TradingPlan]:
        table = self._require(self.config.tables.plan, "trading_plan")
        pc = self.config.plan_columns

        def load() -> Optional[TradingPlan]:
            rows = self.store.select(table, order_by=pc.updated_at, desc=True, limit=1)
            return TradingPlan.from_row(self.config, rows[0]) if rows else None

        return self._cached("plan", load)

    def save_plan(self, content: str, plan_id: Any = None) -> Tuple[TradingPlan, bool]:
        """Update the plan row (by id, or the latest existing one) or insert the first. Returns (plan, created)."""
        table = self._require(self.config.tables.plan, "trading_plan")
        pc = self.config.plan_columns
        if plan_id is None:
            existing = self.load_plan()
            plan_id = existing.id if existing else None
        values = {pc.content: content, pc.updated_at: now_iso()}
        try:
            if plan_id is not None:
                rows = self.store.update(table, values, eq={pc.id: plan_id})
                if rows:
                    return TradingPlan.from_row(self.config, rows[0]), False
                logger.warning("[JOURNAL] %s: plan %s not found, inserting", self.config.key, plan_id)
            row = self.store.insert(table, values)
            return TradingPlan.from_row(self.config, row), True
        finally:
            self.invalidate("plan")

    # ---------------------------------------------------------------------------
    # Checklist
    # ---------------------------------------------------------------------------

    def insert_checklist_attempt(
        self,
        snapshot: ChecklistSnapshot,
        status: str,
        failure_reason: Optional[str] = None,
    ) -> ChecklistRecord:
        table = self._require(self.config.tables.checklist_attempts, "checklist")
        ac = self.config.checklist_attempt_columns
        row = self.store.insert(table, {
            ac.workspace: self.config.checklist_workspace,
            ac.status: status,
            ac.answers: snapshot.to_dict(),
            ac.zone: snapshot.zone,
            ac.failure_reason: failure_reason,
            ac.created_at: now_iso(),
            ac.used: False,
        })
        self.invalidate("checklist_attempts")
        logger.info("[CHECKLIST] %s: attempt %s (%s)", self.config.key, status, failure_reason or "-")
        return ChecklistRecord.from_attempt_row(self.config, row)

    def _open_approval_filter(self, approval_id: Any) -> Optional[Dict[str, Any]]:
        """Filter matching this workspace's passed, unused attempt with the given id."""
        try:
            attempt_id = int(str(approval_id))
        except (TypeError, ValueError):
            return None
        ac = self.config.checklist_attempt_columns
        return {
            ac.id: attempt_id,
            ac.workspace: self.config.checklist_workspace,
            ac.status: STATUS_PASSED,
            ac.used: False,
        }

    def find_open_approval(self, approval_id: Any) -> Optional[ChecklistRecord]:
        """The passed attempt behind an approval id, if it has not unlocked a trade yet."""
        table = self._require(self.config.tables.checklist_attempts, "checklist")
        eq = self._open_approval_filter(approval_id)
        if eq is None:
            return None
        rows = self.store.select(table, eq=eq, limit=1)
        return ChecklistRecord.from_attempt_row(self.config, rows[0]) if rows else None

    def consume_approval(self, approval_id: Any) -> Optional[ChecklistRecord]:
        """Mark a passed attempt used. None when it is unknown or already used."""
        table = self._require(self.config.tables.checklist_attempts, "checklist")
        eq = self._open_approval_filter(approval_id)
        if eq is None:
            return None
        rows = self.store.update(table, {self.config.checklist_attempt_columns.used: True}, eq=eq)
        self.invalidate("checklist_attempts")
        if not rows:
            logger.warning("[CHECKLIST] %s: approval %s unknown or already used", self.config.key, approval_id)
            return None
        return ChecklistRecord.from_attempt_row(self.config, rows[0])

    def insert_checklist_log(self, trade_id: Any, snapshot: ChecklistSnapshot) -> ChecklistRecord:
        table = self._require(self.config.tables.checklist_logs, "checklist")
        lc = self.config.checklist_log_columns
        row = self.store.insert(table, {
            lc.workspace: self.config.checklist_workspace,
            lc.trade_id: trade_id,
            lc.answers: snapshot.to_dict(),
            lc.zone: snapshot.zone,
            lc.status: STATUS_PASSED,
            lc.created_at: now_iso(),
        })
        self.invalidate("checklist_logs")
        return ChecklistRecord.from_log_row(self.config, row)

    def list_checklist_logs(self, trade_ids: Iterable[Any]) -> Dict[Any, ChecklistRecord]:
        """Latest checklist log per trade id, for this workspace."""
        table = self.config.tables.checklist_logs
        ids = [t for t in trade_ids if t is not None]
        if not table or not ids:
            return {}
        lc = self.config.checklist_log_columns
        rows = self.store.select(
            table,
            eq={lc.workspace: self.config.checklist_workspace},
            in_=(lc.trade_id, ids),
            order_by=lc.created_at,
            desc=True,
        )
        out: Dict[Any, ChecklistRecord] = {}
        for r in rows:
            rec = ChecklistRecord.from_log_row(self.config, r)
            out.setdefault(rec.trade_id, rec)
        return out

    def list_checklist_attempts(self, limit: int = 200) -> List[ChecklistRecord]:
        table = self._require(self.config.tables.checklist_attempts, "checklist")
        ac = self.config.checklist_attempt_columns

        def load() -> List[ChecklistRecord]:
            rows = self.store.select(
                table,
                eq={ac.workspace: self.config.checklist_workspace},
                order_by=ac.created_at,
                desc=True,
                limit=limit,
            )
            return [ChecklistRecord.from_attempt_row(self.config, r) for r in rows]

        return list(self._cached(f"checklist_attempts:{limit}", load))


__all__ = ["JournalRepository"]
