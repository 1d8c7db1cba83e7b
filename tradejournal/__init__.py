# Copyright 2026 TradeJournal
# SPDX-License-Identifier: MIT
"""TradeJournal: personal trading journal for stocks, forex and options workspaces."""

__version__ = "0.1.0"
