# Copyright 2026 TradeJournal
# SPDX-License-Identifier: MIT
"""Streamlit journal UI."""
