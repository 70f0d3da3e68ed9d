from typing import Optional
from pydantic import BaseModel, Field


class SessionRequest(BaseModel):
    user_id: str = Field(min_length=1, max_length=64)


class SessionResponse(BaseModel):
    state: str = Field(description='"ready" | "unready"')
    user_id: Optional[str] = None
    changed: bool = False
