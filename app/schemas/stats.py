"""Stats view models for the chart, the summary cards and the goal overlay."""

from __future__ import annotations

import datetime as dt
from typing import Optional

from pydantic import BaseModel

from app.core.enums import BmiCategory, Period, Trend


class PeriodBucket(BaseModel):
    label: str
    date: dt.date
    weight: float


class SummaryStats(BaseModel):
    """All values rounded to 0.1 kg; 0.0 everywhere means no data."""

    average: float = 0.0
    max: float = 0.0
    min: float = 0.0
    change: float = 0.0
    latest: float = 0.0


class ChartBounds(BaseModel):
    y_min: int
    y_max: int
    target_weight: Optional[float] = None


class StatCards(BaseModel):
    """Display strings for the summary cards ("-" when there is no data)."""

    average: str
    change: str
    max: str
    min: str
    trend: Trend


class GoalProgress(BaseModel):
    latest_weight: Optional[float] = None
    target_weight: Optional[float] = None
    delta: Optional[float] = None
    progress_ratio: Optional[float] = None
    bmi: Optional[float] = None
    bmi_category: Optional[BmiCategory] = None
    # BMI the saved target weight would give at the saved height
    target_bmi: Optional[float] = None
    target_bmi_category: Optional[BmiCategory] = None


class StatsRead(BaseModel):
    period: Period
    period_label: str
    buckets: list[PeriodBucket]
    summary: SummaryStats
    cards: StatCards
    chart: Optional[ChartBounds] = None
    goal: GoalProgress
