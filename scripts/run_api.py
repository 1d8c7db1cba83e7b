#!/usr/bin/env python3
# Copyright 2026 TradeJournal
# SPDX-License-Identifier: MIT
"""Run the TradeJournal REST API. Serves /api/workspaces and /api/{workspace}/* (trades, balance, missed, plan, checklist)."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

repo_root = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(repo_root))

from dotenv import load_dotenv  # noqa: E402

load_dotenv(repo_root / ".env")


def main() -> int:
    parser = argparse.ArgumentParser(description="Run TradeJournal API server")
    parser.add_argument("--host", default="0.0.0.0", help="Bind host")
    parser.add_argument("--port", type=int, default=8000, help="Port")
    parser.add_argument("--reload", action="store_true", help="Reload on code changes (development)")
    args = parser.parse_args()

    import uvicorn

    from tradejournal.core.settings import configure_logging

    configure_logging()
    if args.reload:
        uvicorn.run("tradejournal.api.server:app", host=args.host, port=args.port, reload=True)
    else:
        from tradejournal.api.server import app
        uvicorn.run(app, host=args.host, port=args.port)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
