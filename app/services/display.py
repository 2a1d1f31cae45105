"""Render helpers for the stats cards."""

from __future__ import annotations

from app.core.enums import Trend
from app.schemas.stats import StatCards, SummaryStats

NO_DATA = "-"


def format_weight(value: float) -> str:
    """'70.5 kg', or '-' for the no-data sentinel."""
    if value <= 0:
        return NO_DATA
    return f"{value} kg"


def format_change(change: float) -> str:
    """Signed change ('+1.5 kg' / '-1.5 kg'); '-' when unchanged."""
    if change == 0:
        return NO_DATA
    sign = "+" if change > 0 else ""
    return f"{sign}{change} kg"


def trend(change: float) -> Trend:
    if change > 0:
        return Trend.UP
    if change < 0:
        return Trend.DOWN
    return Trend.FLAT


def stat_cards(summary: SummaryStats) -> StatCards:
    return StatCards(
        average=format_weight(summary.average),
        change=format_change(summary.change),
        max=format_weight(summary.max),
        min=format_weight(summary.min),
        trend=trend(summary.change),
    )
