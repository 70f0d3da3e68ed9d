"""
Achievement and stats response schemas.
"""
from typing import Any, Optional
from pydantic import BaseModel, Field


class AchievementResponse(BaseModel):
    id: str
    title: str
    description: str
    icon: str
    points: int
    requirement: dict[str, Any] = Field(description='{"kind": ..., **parameters}')
    progress: float = Field(ge=0.0, le=1.0)
    progress_percent: int
    category: str = Field(description='"Unlocked" | "In Progress" | "Locked"')
    is_unlocked: bool


class AchievementListResponse(BaseModel):
    total: int
    unlocked_count: int
    overall_progress: float
    items: list[AchievementResponse]


class CategoryCountsResponse(BaseModel):
    unlocked: int
    in_progress: int
    locked: int


class ProximityItemResponse(BaseModel):
    id: str
    type: str
    title: str
    description: str
    progress: float
    points_needed: int
    icon: str
    urgency: str
    urgency_message: str


class ProximityResponse(BaseModel):
    has_items: bool
    most_urgent: Optional[ProximityItemResponse]
    items: list[ProximityItemResponse]


class LevelResponse(BaseModel):
    level: int
    title: str
    description: str
    required_points: int
    badge: str
    rewards: list[str]


class StatsResponse(BaseModel):
    user_id: str
    total_entries: int
    current_streak: int
    longest_streak: int
    total_points: int
    level: LevelResponse
    next_level: Optional[LevelResponse]
    last_entry_date: Optional[str]
    unlocked_achievements: list[str]
    streak_message: str
    monthly_goal_progress: float
    voice_usage_count: int
    mood_tracking_count: int
