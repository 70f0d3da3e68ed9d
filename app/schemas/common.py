"""
Shared schema primitives used across the API.
"""
from typing import Any, Optional
from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Standard `{code, message, details}` envelope for all 4xx/5xx responses."""
    code: str
    message: str
    details: Optional[dict[str, Any]] = None


USER_NOT_READY_RESPONSE = {
    "model": ErrorResponse,
    "description": "No user session yet (USER_NOT_READY).",
}
