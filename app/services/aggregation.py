"""Stats aggregation: windowing, period buckets, summary statistics.

Pure functions over lists of weight samples. Nothing here touches the store
and nothing here raises: an empty list is a valid input and yields empty
buckets and the all-zero summary.
"""

from __future__ import annotations

import calendar
import math
from collections.abc import Sequence
from datetime import date, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional, Protocol

from app.core.constants import (
    CHART_PADDING_KG,
    DAILY_BUCKET_LIMIT,
    DAILY_WINDOW_DAYS,
    MONTHLY_BUCKET_LIMIT,
    MONTHLY_WINDOW_MONTHS,
    WEEKLY_BUCKET_LIMIT,
    WEEKLY_WINDOW_DAYS,
)
from app.core.enums import Period
from app.schemas.stats import ChartBounds, PeriodBucket, SummaryStats

PERIOD_LABELS = {
    Period.DAILY: "Last 7 days",
    Period.WEEKLY: "Last 4 weeks",
    Period.MONTHLY: "Last 6 months",
}


class Sample(Protocol):
    """Anything with a calendar date and a weight (ORM row, schema, test stub)."""

    date: date
    weight: float


def round1(value: float) -> float:
    """Round to one decimal, halves away from zero (68.25 -> 68.3)."""
    return float(Decimal(repr(value)).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def months_before(day: date, months: int) -> date:
    """Same day-of-month `months` earlier, clamped to the target month's length."""
    total = day.year * 12 + (day.month - 1) - months
    year, month = divmod(total, 12)
    month += 1
    return date(year, month, min(day.day, calendar.monthrange(year, month)[1]))


def week_start(day: date) -> date:
    """The Sunday that starts day's week."""
    # date.weekday(): Monday=0 ... Sunday=6
    return day - timedelta(days=(day.weekday() + 1) % 7)


def window_start(period: Period, today: date) -> date:
    if period == Period.DAILY:
        return today - timedelta(days=DAILY_WINDOW_DAYS)
    if period == Period.WEEKLY:
        return today - timedelta(days=WEEKLY_WINDOW_DAYS)
    return months_before(today, MONTHLY_WINDOW_MONTHS)


def filter_window(samples: Sequence[Sample], period: Period, today: Optional[date] = None) -> list[Sample]:
    """Samples inside the period's window, oldest first."""
    start = window_start(period, today or date.today())
    return sorted((s for s in samples if s.date >= start), key=lambda s: s.date)


def _mean_buckets(groups: dict[date, list[float]], label_fmt) -> list[PeriodBucket]:
    return [
        PeriodBucket(label=label_fmt(key), date=key, weight=round1(sum(ws) / len(ws)))
        for key, ws in sorted(groups.items())
    ]


def bucketize(samples: Sequence[Sample], period: Period) -> list[PeriodBucket]:
    """Group already-filtered samples into chart buckets (ascending, most recent N)."""
    ordered = sorted(samples, key=lambda s: s.date)
    if period == Period.DAILY:
        return [
            PeriodBucket(label=f"{s.date.month}/{s.date.day}", date=s.date, weight=s.weight)
            for s in ordered[-DAILY_BUCKET_LIMIT:]
        ]

    groups: dict[date, list[float]] = {}
    if period == Period.WEEKLY:
        for s in ordered:
            groups.setdefault(week_start(s.date), []).append(s.weight)
        buckets = _mean_buckets(groups, lambda d: f"{d.month}/{d.day}~")
        return buckets[-WEEKLY_BUCKET_LIMIT:]

    for s in ordered:
        groups.setdefault(s.date.replace(day=1), []).append(s.weight)
    buckets = _mean_buckets(groups, lambda d: calendar.month_abbr[d.month])
    return buckets[-MONTHLY_BUCKET_LIMIT:]


def aggregate(samples: Sequence[Sample], period: Period, today: Optional[date] = None) -> list[PeriodBucket]:
    """Window, group and truncate samples for the stats chart."""
    return bucketize(filter_window(samples, period, today), period)


def compute_summary(samples: Sequence[Sample]) -> SummaryStats:
    """Average/max/min/change/latest over the windowed raw samples.

    change is last-minus-first by date over the same set; an empty set gives
    the all-zero summary.
    """
    if not samples:
        return SummaryStats()
    ordered = sorted(samples, key=lambda s: s.date)
    weights = [s.weight for s in ordered]
    first, last = weights[0], weights[-1]
    return SummaryStats(
        average=round1(sum(weights) / len(weights)),
        max=round1(max(weights)),
        min=round1(min(weights)),
        change=round1(last - first),
        latest=round1(last),
    )


def chart_bounds(buckets: Sequence[PeriodBucket], target_weight: Optional[float] = None) -> Optional[ChartBounds]:
    """Y-axis range padded around the bucket extrema; None without buckets."""
    if not buckets:
        return None
    weights = [b.weight for b in buckets]
    return ChartBounds(
        y_min=math.floor(min(weights) - CHART_PADDING_KG),
        y_max=math.ceil(max(weights) + CHART_PADDING_KG),
        target_weight=target_weight,
    )
