from datetime import date
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class EntryCreate(BaseModel):
    content: str = Field(min_length=1, max_length=20_000)
    mood: Optional[int] = Field(default=None, ge=1, le=10)
    gratitude_items: list[str] = Field(default_factory=list, max_length=20)
    used_voice: bool = False
    voice_duration_seconds: Optional[float] = Field(default=None, ge=0)
    day: Optional[date] = Field(default=None, description="Local calendar day. Defaults to today.")


class EntryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: str
    content: str
    mood: Optional[int]
    gratitude_items: list[str]
    used_voice: bool
    voice_duration_display: Optional[str]
    day: str
    created_at: Optional[str]


class UnlockedAchievementBrief(BaseModel):
    id: str
    title: str
    points: int


class EntryCreatedResponse(BaseModel):
    entry: EntryResponse
    points_earned: int
    total_points: int
    current_streak: int
    unlocked: list[UnlockedAchievementBrief]
    level_up: Optional[dict[str, int]] = None


class EntryListResponse(BaseModel):
    total: int
    items: list[EntryResponse]


class EvaluationCreate(BaseModel):
    day: date
    maturity_score: int = Field(ge=0, le=10)
    mood_score: Optional[int] = Field(default=None, ge=1, le=10)
    summary: Optional[str] = None
    entry_count: int = Field(default=0, ge=0)


class EvaluationResponse(BaseModel):
    id: int
    day: str
    maturity_score: int
    maturity_description: str
    mood_score: Optional[int]
    summary: Optional[str]
    entry_count: int


class EvaluationListResponse(BaseModel):
    total: int
    items: list[EvaluationResponse]


class VoiceUsageRequest(BaseModel):
    duration_seconds: Optional[float] = Field(default=None, ge=0)


class VoiceUsageResponse(BaseModel):
    voice_usage_count: int
    duration_display: str
