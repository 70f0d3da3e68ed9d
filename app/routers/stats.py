"""
Stats router.

GET  /stats               gamification snapshot for the current user
POST /stats/recalculate   rebuild totals and streak from stored history
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.db.base import get_db
from app.schemas.common import USER_NOT_READY_RESPONSE
from app.schemas.achievements import LevelResponse, StatsResponse
from app.services.container import ServiceContainer, get_container, require_user
from app.services.gamification import (
    JournalLevel,
    level_for_points,
    monthly_goal_progress,
    next_level,
    streak_message,
)

router = APIRouter(prefix="/stats", tags=["stats"])


def _level_response(level: JournalLevel) -> LevelResponse:
    return LevelResponse(
        level=level.level,
        title=level.title,
        description=level.description,
        required_points=level.required_points,
        badge=level.badge,
        rewards=list(level.rewards),
    )


def _stats_response(user_id: str, container: ServiceContainer, db: Session) -> StatsResponse:
    stats = container.stats.get_snapshot(db, user_id)
    counters = container.stats.get_counters(db, user_id)
    level = level_for_points(stats.total_points)
    upcoming = next_level(level)
    return StatsResponse(
        user_id=user_id,
        total_entries=stats.total_entries,
        current_streak=stats.current_streak,
        longest_streak=stats.longest_streak,
        total_points=stats.total_points,
        level=_level_response(level),
        next_level=_level_response(upcoming) if upcoming else None,
        last_entry_date=str(stats.last_entry_date) if stats.last_entry_date else None,
        unlocked_achievements=sorted(stats.unlocked_achievement_ids),
        streak_message=streak_message(stats.current_streak),
        monthly_goal_progress=monthly_goal_progress(stats.total_entries),
        voice_usage_count=counters.voice_usage,
        mood_tracking_count=counters.mood_tracking,
    )


@router.get(
    "",
    response_model=StatsResponse,
    summary="Game stats snapshot",
    responses={409: USER_NOT_READY_RESPONSE},
)
def get_stats(
    user_id: str = Depends(require_user),
    container: ServiceContainer = Depends(get_container),
    db: Session = Depends(get_db),
):
    return _stats_response(user_id, container, db)


@router.post(
    "/recalculate",
    response_model=StatsResponse,
    summary="Recalculate stats from history",
    responses={200: {"description": "Stats after recalculation (values never decrease)."}},
)
def recalculate_stats(
    user_id: str = Depends(require_user),
    container: ServiceContainer = Depends(get_container),
    db: Session = Depends(get_db),
):
    """
    Recount reflections (entries, or evaluations when there are more of
    those) and the streak from stored history. Totals, streaks and points
    only ever increase; newly satisfied achievements are unlocked.
    """
    container.stats.recalculate_stats_from_entries(db, user_id)
    return _stats_response(user_id, container, db)
