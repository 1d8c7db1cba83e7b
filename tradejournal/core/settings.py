# Copyright 2026 TradeJournal
# SPDX-License-Identifier: MIT
"""Centralized configuration loader for TradeJournal.

Loads config.yaml from the repository root and provides typed access to settings.
Falls back to sensible defaults if config.yaml is missing or incomplete.
Environment variables (optionally from .env) override config.yaml values.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

import yaml
from dotenv import load_dotenv

logger = logging.getLogger(__name__)

_CONFIG_CACHE: Optional["JournalConfig"] = None

VALID_BACKENDS = ("sqlite", "supabase")


def _repo_root() -> Path:
    """Return the repository root."""
    # tradejournal/core/settings.py -> repo root
    return Path(__file__).resolve().parents[2]


@dataclass(frozen=True)
class StoreConfig:
    """Backing store selection and connection settings."""
    backend: str  # "sqlite" or "supabase"
    sqlite_path: str
    supabase_url: Optional[str]
    supabase_key: Optional[str]


@dataclass(frozen=True)
class ApiConfig:
    """HTTP API settings."""
    api_key: str  # empty = auth disabled
    cors_origins: Tuple[str, ...]


@dataclass(frozen=True)
class JournalConfig:
    """Root configuration object."""
    store: StoreConfig
    api: ApiConfig
    log_level: str


def _load_env() -> None:
    env_file = _repo_root() / ".env"
    if env_file.exists():
        load_dotenv(env_file, override=False)
    load_dotenv()


def _load_yaml_config() -> dict:
    """Load config.yaml from repo root. Returns empty dict if not found or unreadable."""
    config_path = Path(os.getenv("TRADEJOURNAL_CONFIG", str(_repo_root() / "config.yaml")))
    if not config_path.exists():
        return {}
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            return yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        logger.warning("[CONFIG] Could not read %s: %s", config_path, e)
        return {}


def load_config(*, reload: bool = False) -> JournalConfig:
    """Load and return the TradeJournal configuration.

    Priority order (highest to lowest):
    1. Environment variables (TRADEJOURNAL_STORE, TRADEJOURNAL_DB_PATH, SUPABASE_URL, ...)
    2. config.yaml values
    3. Built-in defaults

    Parameters
    ----------
    reload : bool
        If True, force reload from disk. Otherwise use cached config.
    """
    global _CONFIG_CACHE

    if _CONFIG_CACHE is not None and not reload:
        return _CONFIG_CACHE

    _load_env()
    raw = _load_yaml_config()

    store_raw = raw.get("store", {}) or {}
    backend = os.getenv("TRADEJOURNAL_STORE", store_raw.get("backend", "sqlite")).strip().lower()
    if backend not in VALID_BACKENDS:
        logger.warning("[CONFIG] Unknown store backend %r, using sqlite", backend)
        backend = "sqlite"
    sqlite_path = os.getenv(
        "TRADEJOURNAL_DB_PATH",
        store_raw.get("sqlite_path") or str(_repo_root() / "data" / "tradejournal.db"),
    )
    supabase_url = os.getenv("SUPABASE_URL") or store_raw.get("supabase_url")
    supabase_key = (
        os.getenv("SUPABASE_KEY")
        or os.getenv("SUPABASE_SERVICE_ROLE_KEY")
        or store_raw.get("supabase_key")
    )
    store_config = StoreConfig(
        backend=backend,
        sqlite_path=str(sqlite_path),
        supabase_url=supabase_url or None,
        supabase_key=supabase_key or None,
    )

    api_raw = raw.get("api", {}) or {}
    api_key = (os.getenv("TRADEJOURNAL_API_KEY") or str(api_raw.get("api_key") or "")).strip()
    origins_raw = os.getenv("UI_CORS_ORIGINS")
    if origins_raw is not None:
        origins = [o.strip() for o in origins_raw.split(",")]
    else:
        origins = list(api_raw.get("cors_origins") or ["http://localhost:8501"])
    api_config = ApiConfig(
        api_key=api_key,
        cors_origins=tuple(o for o in origins if o) or ("http://localhost:8501",),
    )

    logging_raw = raw.get("logging", {}) or {}
    log_level = os.getenv("LOG_LEVEL", logging_raw.get("level", "INFO")).upper()

    _CONFIG_CACHE = JournalConfig(
        store=store_config,
        api=api_config,
        log_level=log_level,
    )
    return _CONFIG_CACHE


def configure_logging(level: Optional[str] = None) -> None:
    """Configure root logging for entry points (API server, scripts)."""
    name = (level or load_config().log_level).upper()
    logging.basicConfig(
        level=getattr(logging, name, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
