from pydantic import BaseModel, Field


class DailyActivityResponse(BaseModel):
    day: str
    level: int = Field(ge=0, le=4)
    entry_count: int
    has_mood_check: bool


class HeatmapResponse(BaseModel):
    reference_date: str
    weeks: int
    days: list[DailyActivityResponse] = Field(description="Oldest first.")
    grid: list[list[int]] = Field(description="grid[week][day]; week 0 is the most recent row.")
    total_active_days: int
    activity_trend: str = Field(description='"up" | "down" | "neutral"')


class HeatmapCellResponse(BaseModel):
    week: int
    day: int
    date: str
    level: int
