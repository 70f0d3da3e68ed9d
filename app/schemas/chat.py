from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field


class ChatHistoryItem(BaseModel):
    content: str
    is_from_user: bool
    sent_at: Optional[datetime] = None


class ChatRequest(BaseModel):
    message: str = Field(min_length=1, max_length=4000)
    history: list[ChatHistoryItem] = Field(default_factory=list, max_length=50)
    system_prompt: Optional[str] = None


class ChatResponse(BaseModel):
    reply: str
    fallback: bool = Field(description="True when the canned reply replaced a failed completion.")
    sent_at: str
    sent_at_display: str
    remaining: int = Field(description="Messages left today after this one.")
    daily_limit: int


class ChatUsageResponse(BaseModel):
    used: int
    remaining: int
    daily_limit: int
