"""
Home dashboard response schemas.

GET /home → HomeResponse
"""
from typing import Optional
from pydantic import BaseModel, Field


class ReflectionProgressResponse(BaseModel):
    count: int
    target: int
    ratio: float = Field(ge=0.0, le=1.0)
    animate: bool = Field(description="Run the progress transition (ratio moved by > 0.01).")
    haptic_pulse: bool = Field(description="Pulse after the transition (animate and count > 0).")
    animation_delay: float
    pulse_delay: float


class HomeResponse(BaseModel):
    day: str
    user_id: Optional[str]
    user_ready: bool
    energy_state: str = Field(description='"Calm" | "Balanced" | "Elevated" | "High"')
    rhythm: list[float] = Field(description="Raw daily scores, oldest first. 0.0 = no data.")
    display_rhythm: list[float] = Field(description="Rhythm with the flat 5.0 placeholder applied.")
    has_real_data: bool
    day_labels: list[str]
    reflections: ReflectionProgressResponse
    from_cache: bool
    refresh_scheduled: bool
