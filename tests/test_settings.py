# Copyright 2026 TradeJournal
# SPDX-License-Identifier: MIT
"""Tests for config loading: yaml values, env overrides, defaults."""

from __future__ import annotations

import pytest

from tradejournal.core import settings
from tradejournal.core.settings import load_config

_ENV_VARS = (
    "TRADEJOURNAL_STORE",
    "TRADEJOURNAL_DB_PATH",
    "SUPABASE_URL",
    "SUPABASE_KEY",
    "SUPABASE_SERVICE_ROLE_KEY",
    "TRADEJOURNAL_API_KEY",
    "UI_CORS_ORIGINS",
    "LOG_LEVEL",
)


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("TRADEJOURNAL_CONFIG", str(tmp_path / "config.yaml"))
    # .env files must not leak into these tests
    monkeypatch.setattr(settings, "_load_env", lambda: None)
    yield tmp_path
    load_config(reload=True)


def test_defaults_without_config_file(clean_env) -> None:
    cfg = load_config(reload=True)
    assert cfg.store.backend == "sqlite"
    assert cfg.store.sqlite_path.endswith("tradejournal.db")
    assert cfg.api.api_key == ""
    assert cfg.api.cors_origins == ("http://localhost:8501",)
    assert cfg.log_level == "INFO"


def test_yaml_values(clean_env) -> None:
    (clean_env / "config.yaml").write_text(
        "store:\n"
        "  backend: supabase\n"
        "  supabase_url: https://x.supabase.co\n"
        "  supabase_key: k\n"
        "api:\n"
        "  api_key: abc\n"
        "  cors_origins: [http://a, http://b]\n"
        "logging:\n"
        "  level: debug\n",
        encoding="utf-8",
    )
    cfg = load_config(reload=True)
    assert cfg.store.backend == "supabase"
    assert cfg.store.supabase_url == "https://x.supabase.co"
    assert cfg.store.supabase_key == "k"
    assert cfg.api.api_key == "abc"
    assert cfg.api.cors_origins == ("http://a", "http://b")
    assert cfg.log_level == "DEBUG"


def test_env_overrides_yaml(clean_env, monkeypatch) -> None:
    (clean_env / "config.yaml").write_text("store:\n  backend: supabase\napi:\n  api_key: abc\n", encoding="utf-8")
    monkeypatch.setenv("TRADEJOURNAL_STORE", "sqlite")
    monkeypatch.setenv("TRADEJOURNAL_DB_PATH", str(clean_env / "x.db"))
    monkeypatch.setenv("TRADEJOURNAL_API_KEY", "from-env")
    monkeypatch.setenv("UI_CORS_ORIGINS", "http://one, http://two")
    monkeypatch.setenv("SUPABASE_SERVICE_ROLE_KEY", "service")
    cfg = load_config(reload=True)
    assert cfg.store.backend == "sqlite"
    assert cfg.store.sqlite_path == str(clean_env / "x.db")
    assert cfg.store.supabase_key == "service"
    assert cfg.api.api_key == "from-env"
    assert cfg.api.cors_origins == ("http://one", "http://two")


def test_unknown_backend_falls_back_to_sqlite(clean_env, monkeypatch) -> None:
    monkeypatch.setenv("TRADEJOURNAL_STORE", "mongodb")
    assert load_config(reload=True).store.backend == "sqlite"


def test_unreadable_yaml_uses_defaults(clean_env) -> None:
    (clean_env / "config.yaml").write_text("store: [unclosed\n", encoding="utf-8")
    assert load_config(reload=True).store.backend == "sqlite"


def test_config_is_cached(clean_env) -> None:
    first = load_config(reload=True)
    assert load_config() is first
