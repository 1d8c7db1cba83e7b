# Copyright 2026 TradeJournal
# SPDX-License-Identifier: MIT
"""FastAPI server: per-workspace journal endpoints (trades, balance, missed, plan, checklist, analytics)."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from tradejournal import __version__
from tradejournal.core.checklist import CHECKLIST_SECTIONS, ChecklistAnswerError, PendingApproval
from tradejournal.core.checklist.questions import CHECKLIST_INTRO
from tradejournal.core.errors import (
    FeatureDisabledError,
    StoreOperationError,
    TradeNotFoundError,
    UnknownWorkspaceError,
    display_error,
)
from tradejournal.core.journal.service import (
    ATTEMPT_LOGGED,
    MISSED_LOGGED,
    TRADE_ADDED,
    JournalService,
)
from tradejournal.core.settings import load_config
from tradejournal.core.store import TableStore, get_store
from tradejournal.core.workspaces import get_workspace, list_workspaces

logger = logging.getLogger(__name__)

app = FastAPI(title="TradeJournal API", version=__version__)

_PUBLIC_PATHS = frozenset({"/health", "/api/healthz"})


@app.middleware("http")
async def api_key_middleware(request: Request, call_next):
    """Require X-API-Key for all non-health routes when an API key is configured."""
    path = request.url.path.rstrip("/") or request.url.path
    if path in _PUBLIC_PATHS:
        return await call_next(request)
    api_key = load_config().api.api_key
    if not api_key:
        return await call_next(request)
    key = request.headers.get("X-API-Key") or request.headers.get("x-api-key")
    if key != api_key:
        return JSONResponse(
            status_code=401,
            content={"detail": "Missing or invalid X-API-Key"},
            headers={"WWW-Authenticate": "ApiKey"},
        )
    return await call_next(request)


app.add_middleware(
    CORSMiddleware,
    allow_origins=list(load_config().api.cors_origins),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _store() -> TableStore:
    return get_store()


def _service(workspace: str) -> JournalService:
    try:
        config = get_workspace(workspace)
    except UnknownWorkspaceError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return JournalService.for_workspace(config, _store())


def _raise_for(e: Exception, action: str) -> None:
    """Map journal exceptions to HTTP errors."""
    if isinstance(e, HTTPException):
        raise e
    if isinstance(e, (FeatureDisabledError, TradeNotFoundError, UnknownWorkspaceError)):
        raise HTTPException(status_code=404, detail=str(e))
    if isinstance(e, ChecklistAnswerError):
        raise HTTPException(status_code=400, detail={"errors": [str(e)]})
    if isinstance(e, StoreOperationError):
        logger.error("Store error %s: %s", action, e)
        raise HTTPException(status_code=500, detail=display_error(e))
    logger.exception("Error %s: %s", action, e)
    raise HTTPException(status_code=500, detail=display_error(e))


async def _json_body(request: Request) -> Dict[str, Any]:
    try:
        body = await request.json()
    except Exception:
        body = {}
    return body if isinstance(body, dict) else {}


# ---------------------------------------------------------------------------
# Health and workspaces
# ---------------------------------------------------------------------------


@app.get("/health")
def health() -> Dict[str, Any]:
    """Health check. No auth required."""
    return {"ok": True, "status": "healthy", "version": __version__}


@app.get("/api/healthz")
def api_healthz() -> Dict[str, Any]:
    return {"ok": True}


@app.get("/api/workspaces")
def api_workspaces() -> Dict[str, Any]:
    """List configured workspaces with their feature flags."""
    workspaces = [w.to_dict() for w in list_workspaces()]
    return {"workspaces": workspaces, "count": len(workspaces)}


@app.get("/api/workspaces/{workspace}")
def api_workspace_detail(workspace: str) -> Dict[str, Any]:
    try:
        return get_workspace(workspace).to_dict()
    except UnknownWorkspaceError as e:
        raise HTTPException(status_code=404, detail=str(e))


# ---------------------------------------------------------------------------
# Decision gate
# ---------------------------------------------------------------------------


@app.get("/api/{workspace}/checklist")
def api_checklist(workspace: str) -> Dict[str, Any]:
    """Checklist catalogue: ordered sections of questions."""
    _service(workspace)
    sections = [
        {
            "id": s.id,
            "title": s.title,
            "items": [
                {
                    "id": q.id,
                    "question": q.question,
                    "type": q.kind,
                    "note": q.note,
                    "reminder_title": q.reminder_title,
                    "reminder_points": list(q.reminder_points),
                }
                for q in s.items
            ],
        }
        for s in CHECKLIST_SECTIONS
    ]
    return {"intro": CHECKLIST_INTRO, "sections": sections}


@app.post("/api/{workspace}/checklist/approve")
async def api_checklist_approve(workspace: str, request: Request) -> Dict[str, Any]:
    """Evaluate answers; when all pass, record the attempt and return an approval token."""
    body = await _json_body(request)
    service = _service(workspace)
    try:
        gate = service.begin_checklist(body.get("responses") or {})
        approval, errors = service.approve_checklist(gate)
        if errors:
            raise HTTPException(
                status_code=400,
                detail={"errors": errors, "state": gate.state.value, "failure_reason": gate.failure_reason()},
            )
        return {"approval": approval.to_dict(), "state": gate.state.value}
    except Exception as e:
        _raise_for(e, f"approving checklist for {workspace}")


@app.post("/api/{workspace}/checklist/attempts")
async def api_checklist_attempt(workspace: str, request: Request) -> Dict[str, Any]:
    """Log a failed gate attempt (Log Attempt & Exit)."""
    body = await _json_body(request)
    service = _service(workspace)
    try:
        gate = service.begin_checklist(body.get("responses") or {})
        record, errors = service.log_checklist_attempt(gate)
        if errors:
            raise HTTPException(status_code=400, detail={"errors": errors})
        return {"attempt": record.to_dict(), "message": ATTEMPT_LOGGED}
    except Exception as e:
        _raise_for(e, f"logging checklist attempt for {workspace}")


@app.get("/api/{workspace}/checklist/stats")
def api_checklist_stats(workspace: str) -> Dict[str, Any]:
    service = _service(workspace)
    try:
        return service.checklist_stats()
    except Exception as e:
        _raise_for(e, f"loading checklist stats for {workspace}")


@app.get("/api/{workspace}/checklist/logs")
def api_checklist_logs(workspace: str, trade_id: List[str] = Query(default=[])) -> Dict[str, Any]:
    """Checklist snapshots logged with the given trades (repeat trade_id for several)."""
    service = _service(workspace)
    try:
        logs = service.checklist_logs(trade_id)
        return {"logs": logs, "count": len(logs)}
    except Exception as e:
        _raise_for(e, f"loading checklist logs for {workspace}")


# ---------------------------------------------------------------------------
# Trades
# ---------------------------------------------------------------------------


@app.get("/api/{workspace}/trades")
def api_trades_list(workspace: str, status: Optional[str] = Query(default=None)) -> Dict[str, Any]:
    """List trades newest first; status=open|closed filters."""
    service = _service(workspace)
    try:
        trades = service.list_trades(status if status in ("open", "closed") else None)
        return {"trades": [t.to_dict(service.config) for t in trades], "count": len(trades)}
    except Exception as e:
        _raise_for(e, f"listing trades for {workspace}")


@app.post("/api/{workspace}/trades")
async def api_trade_create(workspace: str, request: Request) -> Dict[str, Any]:
    """Create a trade. Body: trade fields plus "approval" from /checklist/approve."""
    body = await _json_body(request)
    service = _service(workspace)
    try:
        approval_raw = body.pop("approval", None)
        approval = PendingApproval.from_dict(approval_raw) if isinstance(approval_raw, dict) else None
        trade, errors = service.create_trade(body, approval)
        if errors:
            raise HTTPException(status_code=400, detail={"errors": errors})
        return {"trade": trade.to_dict(service.config), "message": TRADE_ADDED}
    except Exception as e:
        _raise_for(e, f"creating trade for {workspace}")


@app.post("/api/{workspace}/trades/{trade_id}/close")
async def api_trade_close(workspace: str, trade_id: str, request: Request) -> Dict[str, Any]:
    """Close a trade with P&L; non-zero P&L adjusts the balance."""
    body = await _json_body(request)
    service = _service(workspace)
    try:
        result, errors = service.close_trade(
            trade_id,
            body.get("pnl"),
            exit_url=body.get("exit_url"),
            notes=body.get("notes"),
        )
        if errors:
            raise HTTPException(status_code=400, detail={"errors": errors})
        return result.to_dict(service.config)
    except Exception as e:
        _raise_for(e, f"closing trade {trade_id} for {workspace}")


@app.get("/api/{workspace}/history")
def api_history(workspace: str, status: Optional[str] = Query(default=None)) -> Dict[str, Any]:
    service = _service(workspace)
    try:
        return service.history(status)
    except Exception as e:
        _raise_for(e, f"loading history for {workspace}")


@app.get("/api/{workspace}/analytics")
def api_analytics(workspace: str) -> Dict[str, Any]:
    service = _service(workspace)
    try:
        return service.trade_analytics()
    except Exception as e:
        _raise_for(e, f"loading analytics for {workspace}")


# ---------------------------------------------------------------------------
# Balance
# ---------------------------------------------------------------------------


@app.get("/api/{workspace}/balance")
def api_balance(workspace: str, account: Optional[str] = Query(default=None)) -> Dict[str, Any]:
    """Current balance and ledger history (newest first); account= narrows multi-account workspaces."""
    service = _service(workspace)
    try:
        return service.balance_summary(account)
    except Exception as e:
        _raise_for(e, f"loading balance for {workspace}")


@app.post("/api/{workspace}/balance")
async def api_balance_movement(workspace: str, request: Request) -> Dict[str, Any]:
    """Record a deposit (positive amount) or withdrawal (negative amount)."""
    body = await _json_body(request)
    service = _service(workspace)
    try:
        entry, errors = service.record_cash_movement(body.get("amount"), body.get("reason"), body.get("account"))
        if errors:
            raise HTTPException(status_code=400, detail={"errors": errors})
        return {"entry": entry.to_dict()}
    except Exception as e:
        _raise_for(e, f"recording cash movement for {workspace}")


@app.get("/api/{workspace}/risk-limit")
def api_risk_limit(workspace: str, account: Optional[str] = Query(default=None)) -> Dict[str, Any]:
    service = _service(workspace)
    try:
        return service.risk_limit(account)
    except Exception as e:
        _raise_for(e, f"computing risk limit for {workspace}")


# ---------------------------------------------------------------------------
# Missed trades
# ---------------------------------------------------------------------------


@app.get("/api/{workspace}/missed")
def api_missed(workspace: str) -> Dict[str, Any]:
    service = _service(workspace)
    try:
        return service.missed_history()
    except Exception as e:
        _raise_for(e, f"loading missed trades for {workspace}")


@app.get("/api/{workspace}/missed/analytics")
def api_missed_analytics(workspace: str) -> Dict[str, Any]:
    service = _service(workspace)
    try:
        return service.missed_analytics()
    except Exception as e:
        _raise_for(e, f"loading missed analytics for {workspace}")


@app.post("/api/{workspace}/missed")
async def api_missed_create(workspace: str, request: Request) -> Dict[str, Any]:
    body = await _json_body(request)
    service = _service(workspace)
    try:
        missed, errors = service.log_missed(body)
        if errors:
            raise HTTPException(status_code=400, detail={"errors": errors})
        return {"missed": missed.to_dict(), "message": MISSED_LOGGED}
    except Exception as e:
        _raise_for(e, f"logging missed trade for {workspace}")


# ---------------------------------------------------------------------------
# Trading plan
# ---------------------------------------------------------------------------


@app.get("/api/{workspace}/plan")
def api_plan(workspace: str) -> Dict[str, Any]:
    service = _service(workspace)
    try:
        plan = service.load_plan()
        return {"plan": plan.to_dict() if plan else None}
    except Exception as e:
        _raise_for(e, f"loading plan for {workspace}")


@app.put("/api/{workspace}/plan")
async def api_plan_save(workspace: str, request: Request) -> Dict[str, Any]:
    body = await _json_body(request)
    service = _service(workspace)
    try:
        plan, message = service.save_plan(body.get("content") or "", body.get("plan_id"))
        return {"plan": plan.to_dict(), "message": message}
    except Exception as e:
        _raise_for(e, f"saving plan for {workspace}")
