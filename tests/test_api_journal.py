# Copyright 2026 TradeJournal
# SPDX-License-Identifier: MIT
"""API contract tests: workspaces, gate → trade → close flow, balance, missed, plan, auth."""

from __future__ import annotations

from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from tradejournal.api.server import app
from tradejournal.core.settings import ApiConfig, JournalConfig, StoreConfig

from conftest import all_yes_responses


def _config(api_key: str = "") -> JournalConfig:
    return JournalConfig(
        store=StoreConfig(backend="sqlite", sqlite_path=":unused:", supabase_url=None, supabase_key=None),
        api=ApiConfig(api_key=api_key, cors_origins=("http://localhost:8501",)),
        log_level="INFO",
    )


@pytest.fixture
def client(store):
    with patch("tradejournal.api.server._store", return_value=store), \
            patch("tradejournal.api.server.load_config", return_value=_config()):
        yield TestClient(app)


def _approval(client, workspace: str = "forex") -> dict:
    r = client.post(f"/api/{workspace}/checklist/approve", json={"responses": all_yes_responses()})
    assert r.status_code == 200, r.text
    return r.json()["approval"]


def test_health_is_public() -> None:
    with patch("tradejournal.api.server.load_config", return_value=_config("secret")):
        r = TestClient(app).get("/health")
    assert r.status_code == 200
    assert r.json()["ok"] is True


def test_api_key_required_when_configured(store) -> None:
    with patch("tradejournal.api.server._store", return_value=store), \
            patch("tradejournal.api.server.load_config", return_value=_config("secret")):
        c = TestClient(app)
        assert c.get("/api/workspaces").status_code == 401
        assert c.get("/api/workspaces", headers={"X-API-Key": "wrong"}).status_code == 401
        assert c.get("/api/workspaces", headers={"X-API-Key": "secret"}).status_code == 200


def test_list_workspaces(client) -> None:
    data = client.get("/api/workspaces").json()
    assert data["count"] == 3
    assert [w["key"] for w in data["workspaces"]] == ["stocks", "forex", "options"]


def test_unknown_workspace_404(client) -> None:
    assert client.get("/api/workspaces/crypto").status_code == 404
    assert client.get("/api/crypto/trades").status_code == 404


def test_checklist_catalogue(client) -> None:
    data = client.get("/api/forex/checklist").json()
    assert len(data["sections"]) == 4
    assert data["sections"][1]["items"][1]["type"] == "zone"


def test_approve_rejects_red_zone(client) -> None:
    r = client.post("/api/forex/checklist/approve", json={"responses": all_yes_responses("Red")})
    assert r.status_code == 400
    detail = r.json()["detail"]
    assert detail["state"] == "REJECTED"
    assert detail["failure_reason"] == "Red Zone"


def test_approve_invalid_answer_400(client) -> None:
    r = client.post("/api/forex/checklist/approve", json={"responses": {"zone": "Purple"}})
    assert r.status_code == 400


def test_trade_without_approval_400(client) -> None:
    r = client.post("/api/forex/trades", json={"instrument": "EURUSD"})
    assert r.status_code == 400
    assert "Checklist snapshot missing" in r.json()["detail"]["errors"][0]


def test_trade_with_unissued_passing_approval_400(client) -> None:
    made_up = {"workspace": "forex", "snapshot": {"responses": all_yes_responses(), "zone": "Green"}}
    for _ in range(2):
        r = client.post("/api/forex/trades", json={"instrument": "EURUSD", "approval": made_up})
        assert r.status_code == 400
        assert "already used or not recognised" in r.json()["detail"]["errors"][0]
    assert client.get("/api/forex/trades").json()["count"] == 0
    assert client.get("/api/forex/checklist/stats").json()["passes"] == 0


def test_approval_cannot_be_replayed(client) -> None:
    approval = _approval(client)
    r = client.post("/api/forex/trades", json={"instrument": "EURUSD", "approval": approval})
    assert r.status_code == 200, r.text
    r = client.post("/api/forex/trades", json={"instrument": "GBPUSD", "approval": approval})
    assert r.status_code == 400
    assert client.get("/api/forex/trades").json()["count"] == 1


def test_full_trade_flow(client) -> None:
    r = client.post("/api/forex/balance", json={"amount": 10000, "reason": "Initial"})
    assert r.status_code == 200
    assert r.json()["entry"]["balance"] == 10000.0

    assert client.get("/api/forex/risk-limit").json()["max_risk"] == 50.0

    r = client.post("/api/forex/trades", json={"instrument": "eurusd", "risk_amount": 50.01, "approval": _approval(client)})
    assert r.status_code == 400

    r = client.post("/api/forex/trades", json={"instrument": "eurusd", "risk_amount": 50, "approval": _approval(client)})
    assert r.status_code == 200, r.text
    trade = r.json()["trade"]
    assert trade["instrument"] == "EURUSD"
    assert trade["status"] == "open"
    assert "strike" not in trade

    open_trades = client.get("/api/forex/trades", params={"status": "open"}).json()
    assert open_trades["count"] == 1

    r = client.post(f"/api/forex/trades/{trade['id']}/close", json={"pnl": -40, "notes": "stopped out"})
    assert r.status_code == 200
    closed = r.json()
    assert closed["trade"]["status"] == "closed"
    assert closed["balance_entry"]["balance"] == 9960.0

    history = client.get("/api/forex/history").json()
    assert history["summary"]["losses"] == 1
    assert str(trade["id"]) in history["checklist_logs"]

    stats = client.get("/api/forex/checklist/stats").json()
    assert stats["passes"] == 2


def test_close_unknown_trade_400(client) -> None:
    r = client.post("/api/forex/trades/999/close", json={"pnl": 10})
    assert r.status_code == 400


def test_log_attempt(client) -> None:
    r = client.post("/api/stocks/checklist/attempts", json={"responses": {"zone": "Red"}})
    assert r.status_code == 200
    assert r.json()["attempt"]["failure_reason"] == "Red Zone"


def test_analytics_disabled_for_options(client) -> None:
    assert client.get("/api/options/analytics").status_code == 404
    assert client.get("/api/forex/analytics").json()["status"] == "INSUFFICIENT DATA"


def test_missed_endpoints(client) -> None:
    r = client.post("/api/stocks/missed", json={"instrument": "nvda", "potential_return": 7})
    assert r.status_code == 200
    assert r.json()["missed"]["instrument"] == "NVDA"
    data = client.get("/api/stocks/missed").json()
    assert len(data["missed"]) == 1
    assert client.get("/api/options/missed").status_code == 404


def test_plan_round_trip(client) -> None:
    assert client.get("/api/forex/plan").json()["plan"] is None
    r = client.put("/api/forex/plan", json={"content": "Trade the plan"})
    assert r.json()["message"] == "Trading Plan created!"
    r = client.put("/api/forex/plan", json={"content": "Trade the plan. Always."})
    assert r.json()["message"] == "Trading Plan saved!"
    assert client.get("/api/forex/plan").json()["plan"]["content"] == "Trade the plan. Always."


def test_store_error_500(client) -> None:
    from tradejournal.core.errors import StoreOperationError

    with patch(
        "tradejournal.core.journal.repository.JournalRepository.list_trades",
        side_effect=StoreOperationError("select", "trades", "connection refused"),
    ):
        r = client.get("/api/forex/trades")
    assert r.status_code == 500
    assert r.json()["detail"] == "Error: connection refused"


def test_checklist_logs_endpoint(client) -> None:
    r = client.post("/api/forex/trades", json={"instrument": "EURUSD", "approval": _approval(client)})
    trade_id = r.json()["trade"]["id"]
    data = client.get("/api/forex/checklist/logs", params={"trade_id": [trade_id, 999]}).json()
    assert data["count"] == 1
    assert data["logs"][str(trade_id)]["answers"]["zone"] == "Green"


def test_balance_by_account(client) -> None:
    client.post("/api/stocks/balance", json={"amount": 1000, "account": "CAD"})
    client.post("/api/stocks/balance", json={"amount": 3000, "account": "USD"})
    cad = client.get("/api/stocks/balance", params={"account": "CAD"}).json()
    assert cad["current_balance"] == 1000.0
    assert [e["account"] for e in cad["history"]] == ["CAD"]
    total = client.get("/api/stocks/balance").json()
    assert total["current_balance"] == 4000.0
    assert total["accounts"] == {"CAD": 1000.0, "USD": 3000.0}


def test_missed_analytics_endpoint(client) -> None:
    for _ in range(3):
        client.post("/api/stocks/missed", json={"instrument": "AMD", "potential_return": 5})
    data = client.get("/api/stocks/missed/analytics").json()
    assert data["status"] == "OK"
    assert data["total_potential_pct"] == 15.0
    assert client.get("/api/options/missed/analytics").status_code == 404
