# Copyright 2026 TradeJournal
# SPDX-License-Identifier: MIT
"""SQLite table store: local single-file backend.

Tables are created from the workspace configuration (physical column names
come from the column aliases). JSON-valued columns (checklist answers) are
stored as TEXT and decoded on read.
"""

from __future__ import annotations

import json
import logging
import re
import sqlite3
import threading
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Set, Tuple

from tradejournal.core.errors import StoreOperationError
from tradejournal.core.store.base import Row, TableStore, now_iso
from tradejournal.core.workspaces.models import NUMERIC_TRADE_FIELDS, BalanceColumns, WorkspaceConfig

logger = logging.getLogger(__name__)

_IDENT_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def _ident(name: str) -> str:
    if not _IDENT_RE.match(name or ""):
        raise StoreOperationError("identifier", str(name), f"Invalid identifier: {name!r}")
    return f'"{name}"'


def _encode(value: Any) -> Any:
    if isinstance(value, (dict, list)):
        return json.dumps(value)
    if isinstance(value, bool):
        return int(value)
    return value


class SqliteTableStore(TableStore):
    """TableStore over a sqlite3 database file."""

    backend = "sqlite"

    def __init__(self, db_path: str) -> None:
        self.db_path = str(db_path)
        Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
        self._json_columns: Dict[str, Set[str]] = {}
        self._schema_lock = threading.Lock()
        self._prepared: Set[str] = set()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path, timeout=10, isolation_level=None)
        conn.row_factory = sqlite3.Row
        return conn

    def _decode(self, table: str, row: sqlite3.Row) -> Row:
        out = dict(row)
        for col in self._json_columns.get(table, ()):
            value = out.get(col)
            if isinstance(value, str) and value:
                try:
                    out[col] = json.loads(value)
                except ValueError:
                    logger.warning("[STORE] Undecodable JSON in %s.%s", table, col)
        return out

    # ---------------------------------------------------------------------------
    # Schema
    # ---------------------------------------------------------------------------

    def ensure_workspace(self, config: WorkspaceConfig) -> None:
        with self._schema_lock:
            if config.key in self._prepared:
                return
            statements = _workspace_ddl(config)
            conn = self._connect()
            try:
                for stmt in statements:
                    conn.execute(stmt)
            except sqlite3.Error as e:
                raise StoreOperationError("create", config.key, str(e)) from e
            finally:
                conn.close()
            if config.tables.checklist_logs:
                self._json_columns.setdefault(config.tables.checklist_logs, set()).add(
                    config.checklist_log_columns.answers
                )
            if config.tables.checklist_attempts:
                self._json_columns.setdefault(config.tables.checklist_attempts, set()).add(
                    config.checklist_attempt_columns.answers
                )
            self._prepared.add(config.key)
            logger.debug("[STORE] Prepared sqlite tables for workspace %s", config.key)

    # ---------------------------------------------------------------------------
    # Table API
    # ---------------------------------------------------------------------------

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
        clauses: List[str] = []
        params: List[Any] = []
        for col, value in (eq or {}).items():
            clauses.append(f"{_ident(col)} = ?")
            params.append(_encode(value))
        if in_ is not None:
            col, values = in_
            values = list(values)
            if not values:
                return []
            clauses.append(f"{_ident(col)} IN ({', '.join('?' for _ in values)})")
            params.extend(values)
        sql = f"SELECT * FROM {_ident(table)}"
        if clauses:
            sql += " WHERE " + " AND ".join(clauses)
        if order_by:
            direction = "DESC" if desc else "ASC"
            sql += f" ORDER BY {_ident(order_by)} {direction}, rowid {direction}"
        if limit is not None:
            sql += " LIMIT ?"
            params.append(int(limit))

        conn = self._connect()
        try:
            rows = conn.execute(sql, params).fetchall()
        except sqlite3.Error as e:
            raise StoreOperationError("select", table, str(e)) from e
        finally:
            conn.close()
        return [self._decode(table, r) for r in rows]

    def insert(self, table: str, row: Mapping[str, Any]) -> Row:
        cols = list(row.keys())
        sql = "INSERT INTO {} ({}) VALUES ({})".format(
            _ident(table),
            ", ".join(_ident(c) for c in cols),
            ", ".join("?" for _ in cols),
        )
        conn = self._connect()
        try:
            cur = conn.execute(sql, [_encode(row[c]) for c in cols])
            stored = conn.execute(
                f"SELECT * FROM {_ident(table)} WHERE rowid = ?", (cur.lastrowid,)
            ).fetchone()
        except sqlite3.Error as e:
            raise StoreOperationError("insert", table, str(e)) from e
        finally:
            conn.close()
        return self._decode(table, stored)

    def update(self, table: str, values: Mapping[str, Any], *, eq: Mapping[str, Any]) -> List[Row]:
        if not eq:
            raise StoreOperationError("update", table, "update requires at least one filter")
        where = " AND ".join(f"{_ident(c)} = ?" for c in eq)
        where_params = [_encode(v) for v in eq.values()]
        assignments = ", ".join(f"{_ident(c)} = ?" for c in values)
        conn = self._connect()
        try:
            conn.execute("BEGIN")
            rowids = [
                r[0] for r in conn.execute(
                    f"SELECT rowid FROM {_ident(table)} WHERE {where}", where_params
                ).fetchall()
            ]
            conn.execute(
                f"UPDATE {_ident(table)} SET {assignments} WHERE {where}",
                [_encode(v) for v in values.values()] + where_params,
            )
            conn.execute("COMMIT")
            if not rowids:
                return []
            rows = conn.execute(
                f"SELECT * FROM {_ident(table)} WHERE rowid IN ({', '.join('?' for _ in rowids)})",
                rowids,
            ).fetchall()
        except sqlite3.Error as e:
            if conn.in_transaction:
                conn.execute("ROLLBACK")
            raise StoreOperationError("update", table, str(e)) from e
        finally:
            conn.close()
        return [self._decode(table, r) for r in rows]

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
        partition = account is not None and columns.currency is not None
        latest_sql = f"SELECT {_ident(columns.balance)} FROM {_ident(table)}"
        params: List[Any] = []
        if partition:
            latest_sql += f" WHERE {_ident(columns.currency)} = ?"
            params.append(account)
        latest_sql += f" ORDER BY {_ident(columns.created_at)} DESC, rowid DESC LIMIT 1"

        conn = self._connect()
        try:
            # IMMEDIATE takes the write lock before the read
            conn.execute("BEGIN IMMEDIATE")
            prev = conn.execute(latest_sql, params).fetchone()
            previous = float(prev[0]) if prev is not None and prev[0] is not None else 0.0
            row: Dict[str, Any] = {
                columns.balance: previous + float(change_amount),
                columns.change_amount: float(change_amount),
                columns.reason: reason,
                columns.created_at: now_iso(),
            }
            if trade_id is not None:
                row[columns.trade_id] = trade_id
            if partition:
                row[columns.currency] = account
            cols = list(row.keys())
            cur = conn.execute(
                "INSERT INTO {} ({}) VALUES ({})".format(
                    _ident(table),
                    ", ".join(_ident(c) for c in cols),
                    ", ".join("?" for _ in cols),
                ),
                [row[c] for c in cols],
            )
            stored = conn.execute(
                f"SELECT * FROM {_ident(table)} WHERE rowid = ?", (cur.lastrowid,)
            ).fetchone()
            conn.execute("COMMIT")
        except sqlite3.Error as e:
            if conn.in_transaction:
                conn.execute("ROLLBACK")
            raise StoreOperationError("append_balance", table, str(e)) from e
        finally:
            conn.close()
        return self._decode(table, stored)


# ---------------------------------------------------------------------------
# DDL
# ---------------------------------------------------------------------------


def _create_table(table: str, columns: List[Tuple[str, str]]) -> str:
    body = ",\n    ".join(f"{_ident(name)} {sql_type}" for name, sql_type in columns)
    return f"CREATE TABLE IF NOT EXISTS {_ident(table)} (\n    {body}\n)"


def _workspace_ddl(config: WorkspaceConfig) -> List[str]:
    pk = "INTEGER PRIMARY KEY AUTOINCREMENT"
    statements: List[str] = []

    tc = config.trade_columns
    trade_cols: List[Tuple[str, str]] = [(tc.id, pk)]
    for logical in config.trade_field_names():
        column = tc.column(logical)
        if column is None or column == tc.notes:
            continue
        trade_cols.append((column, "REAL" if logical in NUMERIC_TRADE_FIELDS else "TEXT"))
    trade_cols += [
        (tc.notes, "TEXT"),
        (tc.status, "TEXT NOT NULL DEFAULT 'open'"),
        (tc.pnl, "REAL"),
        (tc.entry_date, "TEXT"),
        (tc.exit_date, "TEXT"),
        (tc.exit_url, "TEXT"),
    ]
    statements.append(_create_table(config.tables.trades, trade_cols))
    statements.append(
        f"CREATE INDEX IF NOT EXISTS {_ident('idx_' + config.tables.trades + '_entry')} "
        f"ON {_ident(config.tables.trades)}({_ident(tc.entry_date)} DESC)"
    )

    bc = config.balance_columns
    balance_cols = [
        (bc.id, pk),
        (bc.balance, "REAL NOT NULL"),
        (bc.change_amount, "REAL"),
        (bc.reason, "TEXT"),
        (bc.trade_id, "INTEGER"),
        (bc.created_at, "TEXT NOT NULL"),
    ]
    if bc.currency:
        balance_cols.append((bc.currency, "TEXT"))
    statements.append(_create_table(config.tables.balance, balance_cols))

    if config.tables.missed and config.missed_columns:
        mc = config.missed_columns
        statements.append(_create_table(config.tables.missed, [
            (mc.id, pk),
            (mc.instrument, "TEXT NOT NULL"),
            (mc.direction, "TEXT"),
            (mc.before_url, "TEXT"),
            (mc.after_url, "TEXT"),
            (mc.pattern, "TEXT"),
            (mc.potential, "REAL"),
            (mc.created_at, "TEXT"),
        ]))

    if config.tables.plan and config.plan_columns:
        pc = config.plan_columns
        statements.append(_create_table(config.tables.plan, [
            (pc.id, pk),
            (pc.content, "TEXT"),
            (pc.updated_at, "TEXT"),
        ]))

    if config.tables.checklist_logs:
        lc = config.checklist_log_columns
        statements.append(_create_table(config.tables.checklist_logs, [
            (lc.id, pk),
            (lc.trade_id, "INTEGER"),
            (lc.answers, "TEXT"),
            (lc.zone, "TEXT"),
            (lc.status, "TEXT"),
            (lc.workspace, "TEXT"),
            (lc.created_at, "TEXT"),
        ]))
    if config.tables.checklist_attempts:
        ac = config.checklist_attempt_columns
        statements.append(_create_table(config.tables.checklist_attempts, [
            (ac.id, pk),
            (ac.answers, "TEXT"),
            (ac.zone, "TEXT"),
            (ac.status, "TEXT"),
            (ac.workspace, "TEXT"),
            (ac.failure_reason, "TEXT"),
            (ac.created_at, "TEXT"),
            (ac.used, "INTEGER NOT NULL DEFAULT 0"),
        ]))
    return statements
