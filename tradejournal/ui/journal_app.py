# Copyright 2026 TradeJournal
# SPDX-License-Identifier: MIT
"""Streamlit journal UI: workspace picker, menu, decision gate, trade forms, history, missed trades, plan.

Run: streamlit run tradejournal/ui/journal_app.py  (or python scripts/run_ui.py)
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Tuple

import streamlit as st

from tradejournal.core.checklist import CHECKLIST_SECTIONS, ZONE_OPTIONS, GateState
from tradejournal.core.checklist.questions import CHECKLIST_INTRO
from tradejournal.core.errors import JournalError, display_error
from tradejournal.core.journal import ledger
from tradejournal.core.journal.models import BalanceEntry, MissedTrade, Trade
from tradejournal.core.journal.service import MISSED_LOGGED, TRADE_ADDED, JournalService
from tradejournal.core.settings import configure_logging
from tradejournal.core.store import get_store
from tradejournal.core.workspaces import get_workspace, list_workspaces
from tradejournal.core.workspaces.models import WorkspaceConfig
from tradejournal.core.workspaces.payload import to_float
from tradejournal.ui.formatting import (
    balance_frame,
    fmt_currency,
    fmt_pct,
    fmt_ratio,
    fmt_signed_currency,
    groups_frame,
    missed_frame,
    trade_label,
    trades_frame,
)

logger = logging.getLogger(__name__)

VIEW_MENU = "menu"
VIEW_NEW_TRADE = "new_trade"
VIEW_CLOSE_TRADE = "close_trade"
VIEW_HISTORY = "history"
VIEW_MISSED = "missed"
VIEW_MISSED_HISTORY = "missed_history"
VIEW_PLAN = "plan"

_STATE_DEFAULTS: Dict[str, Any] = {
    "tj_workspace": None,
    "tj_view": VIEW_MENU,
    "tj_gate": {},
    "tj_approval": None,
    "tj_flash": None,
}


@st.cache_resource
def _service(workspace_key: str) -> JournalService:
    return JournalService.for_workspace(get_workspace(workspace_key), get_store())


def _reset_gate() -> None:
    st.session_state["tj_gate"] = {}
    st.session_state["tj_approval"] = None
    for key in [k for k in st.session_state if str(k).startswith("gate_")]:
        del st.session_state[key]


def _go(view: str) -> None:
    st.session_state["tj_view"] = view
    if view != VIEW_NEW_TRADE:
        _reset_gate()


def _flash(message: str, ok: bool = True) -> None:
    st.session_state["tj_flash"] = (message, ok)


def _show_flash() -> None:
    flash = st.session_state.get("tj_flash")
    if not flash:
        return
    message, ok = flash
    (st.success if ok else st.error)(message)
    st.session_state["tj_flash"] = None


def _back_button(label: str = "← Back to Menu") -> None:
    if st.button(label, key=f"back_{st.session_state['tj_view']}"):
        _go(VIEW_MENU)
        st.rerun()


def _select(label: str, opts, key: str, default: Optional[str] = None, blank: Optional[str] = None) -> Optional[str]:
    values = [o.value for o in opts]
    labels = {o.value: o.label for o in opts}
    if blank is not None:
        values = [""] + values
        labels[""] = blank
    index = values.index(default) if default in values else 0
    choice = st.selectbox(label, values, index=index, format_func=lambda v: labels.get(v, v), key=key)
    return choice or None


# ---------------------------------------------------------------------------
# Workspace picker and menu
# ---------------------------------------------------------------------------


def render_workspace_picker() -> None:
    st.title("Trading Journal")
    st.caption("Choose a workspace.")
    for config in list_workspaces():
        with st.container(border=True):
            st.subheader(config.labels.environment_title)
            st.write(config.labels.environment_description)
            if st.button(config.labels.home_button, key=f"ws_{config.key}", use_container_width=True):
                st.session_state["tj_workspace"] = config.key
                _go(VIEW_MENU)
                st.rerun()


def _render_checklist_card(service: JournalService) -> None:
    try:
        stats = service.checklist_stats()
    except JournalError as e:
        st.warning(display_error(e))
        return
    with st.container(border=True):
        st.caption("DECISION GATE DISCIPLINE")
        st.markdown(f"#### Checklist Analytics  ·  last {stats['total']} attempts")
        c1, c2, c3 = st.columns(3)
        c1.metric("Passed", stats["passes"], fmt_pct(stats["pass_rate"]))
        c2.metric("Failed", stats["fails"], fmt_pct(stats["fail_rate"]), delta_color="inverse")
        top = stats["top_failure"]
        c3.metric("Top failure", top["reason"] if top else "-", f"{top['count']}x" if top else None, delta_color="off")


def render_menu(config: WorkspaceConfig, service: JournalService) -> None:
    st.title(config.labels.journal_title)
    st.caption(config.labels.menu_tagline)
    if st.button("← All Workspaces"):
        st.session_state["tj_workspace"] = None
        st.rerun()

    buttons = [
        (config.labels.new_trade_button, VIEW_NEW_TRADE, True),
        (config.labels.update_trade_button, VIEW_CLOSE_TRADE, True),
        (config.labels.view_data_button, VIEW_HISTORY, True),
        (config.labels.missed_trade_button, VIEW_MISSED, config.features.missed_trades),
        (config.labels.missed_data_button, VIEW_MISSED_HISTORY, config.features.missed_trades),
        (config.labels.plan_title, VIEW_PLAN, config.features.trading_plan),
    ]
    for label, view, enabled in buttons:
        if enabled and label and st.button(label, key=f"menu_{view}", use_container_width=True):
            _go(view)
            st.rerun()

    if config.features.checklist:
        _render_checklist_card(service)


# ---------------------------------------------------------------------------
# Decision gate + new trade
# ---------------------------------------------------------------------------


def _render_gate(config: WorkspaceConfig, service: JournalService) -> None:
    st.title("Pre-Trade Decision Gate")
    st.write(CHECKLIST_INTRO)
    st.caption("Log a solid YES for every checkpoint. If something is unclear, the answer is NO.")

    answers: Dict[str, str] = dict(st.session_state.get("tj_gate") or {})
    for section in CHECKLIST_SECTIONS:
        st.subheader(section.title)
        for item in section.items:
            with st.container(border=True):
                st.markdown(f"**{item.question}**")
                if item.note:
                    st.caption(item.note)
                if item.reminder_title:
                    with st.expander(item.reminder_title):
                        for point in item.reminder_points:
                            st.markdown(f"- {point}")
                if item.kind == "zone":
                    opts = [""] + list(ZONE_OPTIONS)
                    current = answers.get(item.id, "")
                    choice = st.radio(
                        "Zone", opts, index=opts.index(current) if current in opts else 0,
                        format_func=lambda v: v or "-", horizontal=True, key=f"gate_{item.id}",
                    )
                else:
                    opts = ["", "yes", "no"]
                    current = answers.get(item.id, "")
                    choice = st.radio(
                        "Answer", opts, index=opts.index(current) if current in opts else 0,
                        format_func=lambda v: v.upper() or "-", horizontal=True, key=f"gate_{item.id}",
                    )
                    if choice == "no":
                        st.error("A NO here invalidates the trade.")
                if choice:
                    answers[item.id] = choice
                else:
                    answers.pop(item.id, None)
    st.session_state["tj_gate"] = answers

    gate = service.begin_checklist(answers)
    state = gate.state
    if state == GateState.APPROVED:
        st.success("Checklist locked. You are cleared to log the trade details.")
    elif gate.zone == "Red":
        st.error("Red Zone means walk away. Revisit the forecast.")
    else:
        st.info("All questions must be YES, and the zone must support the idea.")

    c1, c2, c3 = st.columns(3)
    if c1.button("Cancel"):
        _go(VIEW_MENU)
        st.rerun()
    if c2.button("Log Attempt & Exit", disabled=not gate.has_any_input):
        try:
            _, errors = service.log_checklist_attempt(gate)
            if errors:
                st.error("; ".join(errors))
            else:
                _flash("Attempt logged.")
                _go(VIEW_MENU)
                st.rerun()
        except JournalError as e:
            st.error(display_error(e))
    if c3.button("Proceed to Trade Entry", type="primary", disabled=state != GateState.APPROVED):
        try:
            approval, errors = service.approve_checklist(gate)
            if errors:
                st.error("; ".join(errors))
            else:
                st.session_state["tj_approval"] = approval
                st.rerun()
        except JournalError as e:
            st.error(display_error(e))


def _trade_form(config: WorkspaceConfig, service: JournalService) -> Tuple[Dict[str, Any], bool]:
    """Render the entry form. Returns (form values, risk limit exceeded)."""
    d = config.defaults()
    exceeded = False
    form: Dict[str, Any] = {}
    names = set(config.trade_field_names())
    form["instrument"] = st.text_input(config.labels.instrument, placeholder=config.labels.instrument_placeholder)
    if "account" in names and config.has_accounts:
        form["account"] = _select(config.labels.account_label, config.accounts, "nt_account", config.default_account)
    form["direction"] = _select("Direction", config.direction_options, "nt_direction", d.get("direction"))
    if "option_type" in names:
        form["option_type"] = _select("Option Type", config.option_type_options, "nt_option_type", d.get("option_type"))
        form["strike"] = st.text_input("Strike Price ($)")
        form["expiry"] = st.date_input("Expiration Date", value=None)
        form["contracts"] = st.text_input("Contracts")
        form["premium"] = st.text_input("Premium ($ per contract)")
    if "stop_size" in names:
        form["stop_size"] = st.text_input(config.labels.stop_size_label or "Stop Size")
    if "risk_amount" in names:
        limit = service.risk_limit(form.get("account"))
        st.caption(
            f"{config.labels.balance_title}: {fmt_currency(limit['balance'])}  ·  "
            f"max risk ({config.risk_fraction * 100:g}%): {fmt_currency(limit['max_risk'])}"
        )
        form["risk_amount"] = st.text_input("Risk Amount ($)")
        try:
            risk = to_float(form["risk_amount"])
        except ValueError:
            risk = None
        exceeded = ledger.risk_exceeded(risk, limit["balance"], config.risk_fraction)
        if exceeded:
            st.error(f"Risk exceeds the maximum of {fmt_currency(limit['max_risk'])}.")
    if "entry_type" in names:
        form["entry_type"] = _select("Entry Type", config.entry_type_options, "nt_entry_type", d.get("entry_type"))
    if "rule" in names:
        form["rule"] = _select("Rule", config.rule_options, "nt_rule", d.get("rule"))
    if "zone" in names:
        form["zone"] = _select("Zone", config.zone_options, "nt_zone", d.get("zone"))
    if "pattern" in names:
        form["pattern"] = _select(config.labels.pattern or "Pattern", config.pattern_options, "nt_pattern", blank="Select...")
    form["entry_url"] = st.text_input(config.labels.entry_url_label)
    form["notes"] = st.text_area(config.labels.notes_label)
    if form.get("expiry") is not None and hasattr(form["expiry"], "isoformat"):
        form["expiry"] = form["expiry"].isoformat()
    return form, exceeded


def render_new_trade(config: WorkspaceConfig, service: JournalService) -> None:
    _back_button()
    approval = st.session_state.get("tj_approval")
    if config.features.checklist and approval is None:
        _render_gate(config, service)
        return

    st.title(config.labels.new_trade_button)
    if approval is not None:
        snap = approval.snapshot
        st.success(f"Gate approved, zone {snap.zone or 'N/A'}. Captured at {snap.recorded_at[:19]}")
        if st.button("Reset Checklist"):
            _reset_gate()
            st.rerun()

    form, exceeded = _trade_form(config, service)
    if st.button("Submit Trade", type="primary", disabled=exceeded):
        try:
            trade, errors = service.create_trade(form, approval)
        except JournalError as e:
            st.error(display_error(e))
            return
        if errors:
            for err in errors:
                st.error(err)
            return
        _flash(TRADE_ADDED)
        _reset_gate()
        logger.info("[UI] %s: trade %s added", config.key, trade.id)
        st.rerun()


# ---------------------------------------------------------------------------
# Close trade
# ---------------------------------------------------------------------------


def render_close_trade(config: WorkspaceConfig, service: JournalService) -> None:
    _back_button()
    st.title(config.labels.update_trade_button)
    try:
        trades = service.open_trades()
    except JournalError as e:
        st.error(display_error(e))
        return
    if not trades:
        st.info("No open trades.")
        return
    by_id = {t.id: t for t in trades}
    trade_id = st.selectbox("Open trade", list(by_id), format_func=lambda i: trade_label(by_id[i]))
    trade = by_id[trade_id]
    meta = [v for v in (trade.entry_type, trade.rule, trade.zone, trade.pattern) if v]
    if meta:
        st.caption(" · ".join(meta))
    pnl = st.text_input(config.labels.pnl_label)
    exit_url = st.text_input("Exit Chart URL (Optional)")
    notes = st.text_area(config.labels.notes_label, value=trade.notes or "")
    if st.button("Close Trade", type="primary"):
        try:
            result, errors = service.close_trade(trade_id, pnl, exit_url=exit_url, notes=notes)
        except JournalError as e:
            st.error(display_error(e))
            return
        if errors:
            for err in errors:
                st.error(err)
            return
        _flash(result.message)
        st.rerun()


# ---------------------------------------------------------------------------
# History
# ---------------------------------------------------------------------------


def _render_balance_manager(config: WorkspaceConfig, service: JournalService, balance: Dict[str, Any]) -> None:
    st.subheader(config.labels.balance_title)
    if config.has_accounts:
        cols = st.columns(len(config.accounts) + 1)
        for col, acct in zip(cols, config.accounts):
            col.metric(acct.label, fmt_currency(balance["accounts"].get(acct.value, 0.0)))
        cols[-1].metric("Total", fmt_currency(balance["current_balance"]))
    else:
        st.metric(config.labels.balance_title, fmt_currency(balance["current_balance"]))

    with st.expander(config.labels.add_balance_button):
        amount = st.text_input("Amount (negative for withdrawal)", key="bal_amount")
        reason = st.text_input("Reason", placeholder=config.labels.add_balance_placeholder, key="bal_reason")
        account = None
        if config.has_accounts:
            account = _select(config.labels.account_label, config.accounts, "bal_account", config.default_account)
        if st.button("Record", key="bal_submit"):
            try:
                entry, errors = service.record_cash_movement(amount, reason, account)
            except JournalError as e:
                st.error(display_error(e))
                return
            if errors:
                for err in errors:
                    st.error(err)
                return
            _flash(f"{entry.reason}: {fmt_signed_currency(entry.change_amount)} recorded.")
            st.rerun()

    st.markdown("**Recent Balance Changes**")
    entries = [BalanceEntry(**e) for e in balance["history"][:20]]
    st.dataframe(balance_frame(entries, with_account=config.has_accounts), hide_index=True, use_container_width=True)


def _render_analytics(analytics: Optional[Dict[str, Any]]) -> None:
    if analytics is None:
        st.info("Analytics are not enabled for this workspace.")
        return
    if analytics["status"] != "OK":
        st.info(analytics["message"])
        return
    c1, c2, c3, c4 = st.columns(4)
    c1.metric("Win rate", fmt_pct(analytics["win_rate"]))
    c2.metric("Avg win", fmt_currency(analytics["avg_win"]))
    c3.metric("Avg loss", fmt_currency(analytics["avg_loss"]))
    c4.metric("R:R", fmt_ratio(analytics["risk_reward"]))
    for dim in analytics["dimensions"].values():
        st.markdown(f"**{dim['label']}**")
        if dim["groups"]:
            st.dataframe(groups_frame(dim["groups"]), hide_index=True, use_container_width=True)
        else:
            st.caption("Not enough repeated values yet.")


def _render_checklist_logs(config: WorkspaceConfig, logs: Dict[str, Dict[str, Any]], history: Dict[str, Any]) -> None:
    if not logs:
        return
    trades = {str(t["id"]): t for t in history["trades"]}
    choice = st.selectbox(
        "Checklist snapshot", [""] + list(logs),
        format_func=lambda k: "Select a trade..." if not k else f"{trades.get(k, {}).get('instrument', k)} #{k}",
        key="hist_checklist",
    )
    if not choice:
        return
    snapshot = logs[choice].get("answers") or {}
    responses = snapshot.get("responses") or {}
    st.caption(f"Zone: {snapshot.get('zone') or 'N/A'}  ·  recorded {snapshot.get('recorded_at', '')[:19]}")
    for section in CHECKLIST_SECTIONS:
        for item in section.items:
            if item.kind == "boolean":
                st.markdown(f"- {item.question} **{(responses.get(item.id) or '-').upper()}**")


def render_history(config: WorkspaceConfig, service: JournalService) -> None:
    _back_button()
    st.title(config.labels.view_data_button)
    status = st.radio("Filter", ["all", "open", "closed"], horizontal=True, key="hist_filter")
    try:
        history = service.history(None if status == "all" else status)
    except JournalError as e:
        st.error(display_error(e))
        return

    summary = history["summary"]
    overview, analytics_tab, trades_tab = st.tabs(["Overview", "Analytics", "Trades"])
    with overview:
        c1, c2, c3, c4 = st.columns(4)
        c1.metric("Trades", summary["total"], f"{summary['open']} open")
        c2.metric("Win rate", fmt_pct(summary["win_rate"]))
        c3.metric("Total P&L", fmt_signed_currency(summary["total_pnl"]))
        c4.metric("Return", fmt_pct(summary["pnl_pct"], signed=True))
        _render_balance_manager(config, service, history["balance"])
    with analytics_tab:
        _render_analytics(history["analytics"])
    with trades_tab:
        trades = [Trade(**t) for t in history["trades"]]
        st.dataframe(trades_frame(config, trades), hide_index=True, use_container_width=True)
        _render_checklist_logs(config, history["checklist_logs"], history)


# ---------------------------------------------------------------------------
# Missed trades
# ---------------------------------------------------------------------------


def render_missed(config: WorkspaceConfig, service: JournalService) -> None:
    _back_button()
    st.title(config.labels.missed_trade_button)
    form = {
        "instrument": st.text_input(config.labels.instrument, placeholder=config.labels.instrument_placeholder),
        "direction": _select("Direction", config.direction_options, "mt_direction", "long"),
        "pattern": _select(config.labels.missed_pattern or "Pattern", config.missed_pattern_options, "mt_pattern", blank="Select..."),
        "potential_return": st.text_input("Potential Return (%)"),
        "before_url": st.text_input("Before Chart URL"),
        "after_url": st.text_input("After Chart URL"),
    }
    if st.button("Log Missed Trade", type="primary"):
        try:
            _, errors = service.log_missed(form)
        except JournalError as e:
            st.error(display_error(e))
            return
        if errors:
            for err in errors:
                st.error(err)
            return
        _flash(MISSED_LOGGED)
        st.rerun()


def render_missed_history(config: WorkspaceConfig, service: JournalService) -> None:
    _back_button()
    st.title(config.labels.missed_data_button)
    try:
        data = service.missed_history()
    except JournalError as e:
        st.error(display_error(e))
        return
    analytics = data["analytics"]
    if analytics["status"] != "OK":
        st.info(analytics["message"])
    else:
        c1, c2 = st.columns(2)
        c1.metric("Missed", analytics["count"])
        c2.metric("Avg potential", fmt_pct(analytics["avg_potential_pct"], signed=True))
        for dim in analytics["dimensions"].values():
            st.markdown(f"**{dim['label']}**")
            st.dataframe(groups_frame(dim["groups"], "Total %", percent=True), hide_index=True, use_container_width=True)
    st.dataframe(
        missed_frame(config, [MissedTrade(**m) for m in data["missed"]]),
        hide_index=True,
        use_container_width=True,
    )


# ---------------------------------------------------------------------------
# Trading plan
# ---------------------------------------------------------------------------


def render_plan(config: WorkspaceConfig, service: JournalService) -> None:
    _back_button()
    st.title(config.labels.plan_title)
    try:
        plan = service.load_plan()
    except JournalError as e:
        st.error(display_error(e))
        return
    if plan and plan.updated_at:
        st.caption(f"Last updated {plan.updated_at[:19]}")
    content = st.text_area("Plan", value=plan.content if plan else "", height=480, label_visibility="collapsed")
    if st.button(config.labels.plan_save, type="primary"):
        try:
            _, message = service.save_plan(content, plan.id if plan else None)
        except JournalError as e:
            st.error(display_error(e))
            return
        _flash(message)
        st.rerun()


_VIEWS = {
    VIEW_NEW_TRADE: render_new_trade,
    VIEW_CLOSE_TRADE: render_close_trade,
    VIEW_HISTORY: render_history,
    VIEW_MISSED: render_missed,
    VIEW_MISSED_HISTORY: render_missed_history,
    VIEW_PLAN: render_plan,
}


def main() -> None:
    st.set_page_config(page_title="Trading Journal", layout="wide")
    configure_logging()
    for key, default in _STATE_DEFAULTS.items():
        if key not in st.session_state:
            st.session_state[key] = default

    _show_flash()
    key = st.session_state["tj_workspace"]
    if not key:
        render_workspace_picker()
        return
    config = get_workspace(key)
    try:
        service = _service(key)
    except JournalError as e:
        st.error(display_error(e))
        return
    view = _VIEWS.get(st.session_state["tj_view"])
    if view is None:
        render_menu(config, service)
    else:
        view(config, service)


if __name__ == "__main__":
    main()
