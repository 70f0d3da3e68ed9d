"""
Achievements router.

GET /achievements              catalog with progress, optional ?category= filter
GET /achievements/counts       number of achievements per category
GET /achievements/proximity    next level and the closest locked achievements
GET /achievements/{id}         one achievement with progress
"""
from dataclasses import asdict
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.core.errors import AchievementNotFoundError
from app.db.base import get_db
from app.schemas.common import USER_NOT_READY_RESPONSE, ErrorResponse
from app.schemas.achievements import (
    AchievementListResponse,
    AchievementResponse,
    CategoryCountsResponse,
    ProximityItemResponse,
    ProximityResponse,
)
from app.services.achievements import (
    ACHIEVEMENTS,
    Achievement,
    AchievementCategory,
    GameStats,
    UsageCounters,
    achievement_progress,
    categorize,
    category_counts,
    get_achievement,
)
from app.services.container import ServiceContainer, get_container, require_user
from app.services.gamification import ProximityItem, proximity_status

router = APIRouter(prefix="/achievements", tags=["achievements"])


def _achievement_response(
    achievement: Achievement,
    stats: GameStats,
    counters: UsageCounters,
) -> AchievementResponse:
    progress = achievement_progress(achievement, stats, counters)
    category = categorize(achievement, stats, counters)
    requirement = {"kind": achievement.requirement.kind, **asdict(achievement.requirement)}
    return AchievementResponse(
        id=achievement.id,
        title=achievement.title,
        description=achievement.description,
        icon=achievement.icon,
        points=achievement.points,
        requirement=requirement,
        progress=progress,
        progress_percent=int(progress * 100),
        category=category.value,
        is_unlocked=category == AchievementCategory.unlocked,
    )


def _proximity_response(item: ProximityItem) -> ProximityItemResponse:
    return ProximityItemResponse(
        id=item.id,
        type=item.type.value,
        title=item.title,
        description=item.description,
        progress=item.progress,
        points_needed=item.points_needed,
        icon=item.icon,
        urgency=item.urgency.value,
        urgency_message=item.urgency.message,
    )


@router.get(
    "",
    response_model=AchievementListResponse,
    summary="Achievement catalog with progress",
    responses={409: USER_NOT_READY_RESPONSE},
)
def list_achievements(
    category: Optional[AchievementCategory] = Query(
        default=None,
        description='Filter: "Unlocked", "In Progress" or "Locked".',
    ),
    user_id: str = Depends(require_user),
    container: ServiceContainer = Depends(get_container),
    db: Session = Depends(get_db),
):
    """
    Every achievement with its progress in [0, 1] and category. Progress is
    re-evaluated from the current stats on each request.
    """
    stats = container.stats.get_snapshot(db, user_id)
    counters = container.stats.get_counters(db, user_id)
    items = [_achievement_response(a, stats, counters) for a in ACHIEVEMENTS]
    unlocked = sum(1 for i in items if i.is_unlocked)
    if category is not None:
        items = [i for i in items if i.category == category.value]
    return AchievementListResponse(
        total=len(items),
        unlocked_count=unlocked,
        overall_progress=unlocked / len(ACHIEVEMENTS),
        items=items,
    )


@router.get("/counts", response_model=CategoryCountsResponse, summary="Achievements per category")
def achievement_counts(
    user_id: str = Depends(require_user),
    container: ServiceContainer = Depends(get_container),
    db: Session = Depends(get_db),
):
    stats = container.stats.get_snapshot(db, user_id)
    counters = container.stats.get_counters(db, user_id)
    counts = category_counts(ACHIEVEMENTS, stats, counters)
    return CategoryCountsResponse(
        unlocked=counts[AchievementCategory.unlocked],
        in_progress=counts[AchievementCategory.in_progress],
        locked=counts[AchievementCategory.locked],
    )


@router.get("/proximity", response_model=ProximityResponse, summary="What is close to unlocking")
def achievement_proximity(
    user_id: str = Depends(require_user),
    container: ServiceContainer = Depends(get_container),
    db: Session = Depends(get_db),
):
    stats = container.stats.get_snapshot(db, user_id)
    counters = container.stats.get_counters(db, user_id)
    items = [_proximity_response(i) for i in proximity_status(stats, counters)]
    return ProximityResponse(
        has_items=bool(items),
        most_urgent=items[0] if items else None,
        items=items,
    )


@router.get(
    "/{achievement_id}",
    response_model=AchievementResponse,
    summary="One achievement",
    responses={404: {"model": ErrorResponse, "description": "Unknown achievement id."}},
)
def get_one_achievement(
    achievement_id: str,
    user_id: str = Depends(require_user),
    container: ServiceContainer = Depends(get_container),
    db: Session = Depends(get_db),
):
    achievement = get_achievement(achievement_id)
    if achievement is None:
        raise AchievementNotFoundError(achievement_id=achievement_id)
    stats = container.stats.get_snapshot(db, user_id)
    counters = container.stats.get_counters(db, user_id)
    return _achievement_response(achievement, stats, counters)
