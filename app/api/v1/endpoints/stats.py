"""Stats endpoint: period buckets, summary cards and goal/BMI overlay."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from app.api.deps import get_store
from app.core.config import get_settings
from app.core.enums import Period
from app.schemas.stats import StatsRead
from app.services.aggregation import PERIOD_LABELS, bucketize, chart_bounds, compute_summary, filter_window
from app.services.display import stat_cards
from app.services.goal import goal_progress
from app.services.record_store import RecordStore

router = APIRouter()


@router.get("", response_model=StatsRead)
async def get_stats(
    period: Period = Query(Period.DAILY),
    store: RecordStore = Depends(get_store),
):
    """
    Chart buckets and summary for the selected period.
    Summary (avg/max/min/change/latest) is computed over the windowed raw samples,
    the same set the chart is built from.
    """
    # Sequential: one AsyncSession must not run concurrent queries
    records = await store.list_records()
    user_settings = await store.get_settings()
    window = filter_window(records, period, get_settings().today())
    buckets = bucketize(window, period)
    summary = compute_summary(window)
    return StatsRead(
        period=period,
        period_label=PERIOD_LABELS[period],
        buckets=buckets,
        summary=summary,
        cards=stat_cards(summary),
        chart=chart_bounds(buckets, user_settings.target_weight),
        goal=goal_progress(summary.latest, user_settings),
    )
