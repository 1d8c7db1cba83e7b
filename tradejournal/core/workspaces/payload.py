# Copyright 2026 TradeJournal
# SPDX-License-Identifier: MIT
"""Form → typed trade fields → store payload.

Payloads only ever contain columns the workspace defines; a logical field
whose alias is None never reaches the store.
"""

from __future__ import annotations

from dataclasses import fields
from typing import Any, Dict, List, Mapping, Optional, Tuple

from tradejournal.core.workspaces.models import (
    DIRECTIONS,
    NUMERIC_TRADE_FIELDS,
    OPTION_TYPES,
    TradeFields,
    WorkspaceConfig,
)


def _blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and value.strip() == "")


def to_float(value: Any) -> Optional[float]:
    """'' / None → None, otherwise float. Raises ValueError on garbage."""
    if _blank(value):
        return None
    return float(value)


def normalize_instrument(config: WorkspaceConfig, value: Any) -> str:
    text = "" if value is None else str(value).strip()
    return text.upper() if config.uppercase_instrument else text


def parse_trade_fields(
    config: WorkspaceConfig, form: Mapping[str, Any]
) -> Tuple[Optional[TradeFields], List[str]]:
    """Build the workspace's trade-field variant from a form. Returns (fields, errors)."""
    errors: List[str] = []
    defaults = config.defaults()
    values: Dict[str, Any] = {}

    for f in fields(config.trade_fields):
        raw = form.get(f.name)
        if _blank(raw):
            raw = defaults.get(f.name)
        if f.name == "instrument":
            values[f.name] = normalize_instrument(config, raw)
        elif f.name in NUMERIC_TRADE_FIELDS:
            try:
                values[f.name] = to_float(raw)
            except (TypeError, ValueError):
                errors.append(f"{f.name} must be a number")
        elif f.name == "account":
            values[f.name] = raw if not _blank(raw) else config.default_account
        else:
            values[f.name] = None if _blank(raw) else str(raw).strip()

    if not values.get("instrument"):
        errors.append(f"{config.labels.instrument} is required")
    if values.get("direction") not in DIRECTIONS:
        errors.append(f"direction must be one of {list(DIRECTIONS)}")
    if "option_type" in values and values["option_type"] not in OPTION_TYPES:
        errors.append(f"option_type must be one of {list(OPTION_TYPES)}")
    if config.has_accounts and "account" in values:
        allowed = [a.value for a in config.accounts]
        if values["account"] not in allowed:
            errors.append(f"account must be one of {allowed}")
    if values.get("risk_amount") is not None and values["risk_amount"] < 0:
        errors.append("risk_amount must be >= 0")
    for name in ("strike", "contracts", "premium", "stop_size"):
        if values.get(name) is not None and values[name] <= 0:
            errors.append(f"{name} must be > 0")

    if errors:
        return None, errors
    return config.trade_fields(**values), []


def trade_payload(config: WorkspaceConfig, trade_fields: TradeFields) -> Dict[str, Any]:
    """Map a trade-field variant to physical columns, omitting inapplicable fields."""
    payload: Dict[str, Any] = {}
    for f in fields(trade_fields):
        column = config.trade_columns.column(f.name)
        if column is None:
            continue
        payload[column] = getattr(trade_fields, f.name)
    return payload


def missed_payload(config: WorkspaceConfig, form: Mapping[str, Any]) -> Tuple[Optional[Dict[str, Any]], List[str]]:
    """Build a missed-trade insert payload. Returns (payload, errors)."""
    cols = config.missed_columns
    if cols is None:
        return None, [f"Missed trades are not enabled for {config.key}"]
    errors: List[str] = []
    instrument = normalize_instrument(config, form.get("instrument"))
    if not instrument:
        errors.append(f"{config.labels.instrument} is required")
    direction = form.get("direction") or "long"
    if direction not in DIRECTIONS:
        errors.append(f"direction must be one of {list(DIRECTIONS)}")
    potential = None
    try:
        potential = to_float(form.get("potential_return"))
    except (TypeError, ValueError):
        errors.append("potential_return must be a number")
    if errors:
        return None, errors

    def _text(key: str) -> Optional[str]:
        value = form.get(key)
        return None if _blank(value) else str(value).strip()

    return {
        cols.instrument: instrument,
        cols.direction: direction,
        cols.before_url: _text("before_url"),
        cols.after_url: _text("after_url"),
        cols.pattern: _text("pattern"),
        cols.potential: potential,
    }, []
