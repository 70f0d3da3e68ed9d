"""
Analytics router.

GET /analytics/heatmap        35 days of activity with totals and trend
GET /analytics/heatmap/cell   activity level for one grid cell
"""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.db.base import get_db
from app.schemas.common import USER_NOT_READY_RESPONSE
from app.schemas.analytics import DailyActivityResponse, HeatmapCellResponse, HeatmapResponse
from app.services import storage
from app.services.container import ServiceContainer, get_container, require_user
from app.services.heatmap import (
    DAYS_PER_WEEK,
    HEATMAP_DAYS,
    HEATMAP_WEEKS,
    DailyActivity,
    activity_for_cell,
    activity_trend,
    build_activity_heatmap,
    heatmap_cell_date,
    total_active_days,
)

router = APIRouter(prefix="/analytics", tags=["analytics"])


def _activities(user_id: str, container: ServiceContainer, db: Session, today) -> list[DailyActivity]:
    entries = storage.to_entry_points(storage.list_entries(db, user_id))
    evaluation_days = [e.day for e in container.evaluations.load_evaluations(db, user_id)]
    return build_activity_heatmap(today, entries, evaluation_days, days=HEATMAP_DAYS)


@router.get(
    "/heatmap",
    response_model=HeatmapResponse,
    summary="Activity heatmap",
    responses={409: USER_NOT_READY_RESPONSE},
)
def get_heatmap(
    user_id: str = Depends(require_user),
    container: ServiceContainer = Depends(get_container),
    db: Session = Depends(get_db),
):
    """
    `days` runs oldest first. `grid[week][day]` uses the display
    coordinates: week 0 is the current week, day 6 is today.
    """
    today = storage.local_today()
    activities = _activities(user_id, container, db, today)
    grid = [
        [activity_for_cell(week, day, activities, today) for day in range(DAYS_PER_WEEK)]
        for week in range(HEATMAP_WEEKS)
    ]
    return HeatmapResponse(
        reference_date=str(today),
        weeks=HEATMAP_WEEKS,
        days=[
            DailyActivityResponse(
                day=str(a.day),
                level=a.level,
                entry_count=a.entry_count,
                has_mood_check=a.has_mood_check,
            )
            for a in activities
        ],
        grid=grid,
        total_active_days=total_active_days(activities),
        activity_trend=activity_trend(activities),
    )


@router.get("/heatmap/cell", response_model=HeatmapCellResponse, summary="One heatmap cell")
def get_heatmap_cell(
    week: int = Query(ge=0, le=HEATMAP_WEEKS - 1, description="0 = current week."),
    day: int = Query(ge=0, le=DAYS_PER_WEEK - 1, description="6 = newest column."),
    user_id: str = Depends(require_user),
    container: ServiceContainer = Depends(get_container),
    db: Session = Depends(get_db),
):
    today = storage.local_today()
    activities = _activities(user_id, container, db, today)
    return HeatmapCellResponse(
        week=week,
        day=day,
        date=str(heatmap_cell_date(week, day, today)),
        level=activity_for_cell(week, day, activities, today),
    )
