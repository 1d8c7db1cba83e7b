# Copyright 2026 TradeJournal
# SPDX-License-Identifier: MIT
"""Core journal domain: settings, workspaces, store, journal, checklist, analytics."""
