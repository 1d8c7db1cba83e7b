# Copyright 2026 TradeJournal
# SPDX-License-Identifier: MIT
"""Backing store: table API over SQLite or Supabase, selected by configuration."""

from __future__ import annotations

import logging
import threading
from typing import Optional

from tradejournal.core.store.base import TableStore, now_iso

logger = logging.getLogger(__name__)

_STORE: Optional[TableStore] = None
_STORE_LOCK = threading.Lock()


def build_store() -> TableStore:
    """Create the store configured in config.yaml / environment."""
    from tradejournal.core.settings import load_config

    cfg = load_config().store
    if cfg.backend == "supabase":
        from tradejournal.core.store.supabase_store import SupabaseTableStore
        logger.info("[STORE] Using Supabase backend at %s", cfg.supabase_url)
        return SupabaseTableStore.from_credentials(cfg.supabase_url, cfg.supabase_key)
    from tradejournal.core.store.sqlite_store import SqliteTableStore
    logger.info("[STORE] Using SQLite backend at %s", cfg.sqlite_path)
    return SqliteTableStore(cfg.sqlite_path)


def get_store() -> TableStore:
    """Return the process-wide store, creating it on first use."""
    global _STORE
    with _STORE_LOCK:
        if _STORE is None:
            _STORE = build_store()
        return _STORE


def reset_store() -> None:
    global _STORE
    with _STORE_LOCK:
        _STORE = None


__all__ = ["TableStore", "build_store", "get_store", "now_iso", "reset_store"]
