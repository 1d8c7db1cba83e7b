# Copyright 2026 TradeJournal
# SPDX-License-Identifier: MIT
"""HTTP API (FastAPI)."""
