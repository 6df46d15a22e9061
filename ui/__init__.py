#!/usr/bin/env python3
"""
ui — Plain-text presentation of simulation snapshots
=====================================================

Modules
-------
console
    HUD line, train panel and end-of-run report formatting.
"""

from .console import (
    end_report,
    format_seconds,
    hud_line,
    risk_label,
    train_panel,
    trend_arrow,
)

__all__ = [
    "end_report",
    "format_seconds",
    "hud_line",
    "risk_label",
    "train_panel",
    "trend_arrow",
]
