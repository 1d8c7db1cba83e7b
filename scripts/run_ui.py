#!/usr/bin/env python3
# Copyright 2026 TradeJournal
# SPDX-License-Identifier: MIT
"""Launch the journal UI.

Convenience wrapper: runs ONLY Streamlit. The UI talks to the configured store
directly; the REST API does not need to be running.
"""

from __future__ import annotations

import argparse
import subprocess
import sys
from pathlib import Path


def main() -> int:
    parser = argparse.ArgumentParser(description="Run TradeJournal Streamlit UI")
    parser.add_argument(
        "--port",
        type=int,
        default=8501,
        help="Port for Streamlit server (default: 8501)",
    )
    args = parser.parse_args()

    repo_root = Path(__file__).resolve().parent.parent
    app_path = repo_root / "tradejournal" / "ui" / "journal_app.py"
    if not app_path.exists():
        print(f"ERROR: UI app not found: {app_path}", file=sys.stderr)
        return 1

    cmd = [
        sys.executable,
        "-m",
        "streamlit",
        "run",
        str(app_path),
        "--server.port",
        str(args.port),
    ]

    print("Starting journal UI (Streamlit)...", file=sys.stderr)
    print(f"  App: {app_path}", file=sys.stderr)
    print(f"  Port: {args.port}", file=sys.stderr)
    return subprocess.call(cmd)


if __name__ == "__main__":
    raise SystemExit(main())
