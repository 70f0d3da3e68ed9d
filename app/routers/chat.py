"""
Chat router.

POST /chat         companion reply; falls back to a fixed message on failure
GET  /chat/usage   messages used and left today
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from app.db.base import get_db
from app.schemas.chat import ChatRequest, ChatResponse, ChatUsageResponse
from app.schemas.common import USER_NOT_READY_RESPONSE, ErrorResponse
from app.services.chat import ChatMessage
from app.services.container import ServiceContainer, get_container, require_user
from app.services.formatting import format_time_of_day

router = APIRouter(prefix="/chat", tags=["chat"])


@router.post(
    "",
    response_model=ChatResponse,
    summary="Send a chat message",
    responses={
        200: {"description": "Completion, or the fallback reply when the AI is unreachable."},
        409: USER_NOT_READY_RESPONSE,
        429: {"model": ErrorResponse, "description": "Daily message limit reached (CHAT_LIMIT_REACHED)."},
    },
)
async def send_chat(
    payload: ChatRequest,
    user_id: str = Depends(require_user),
    container: ServiceContainer = Depends(get_container),
    db: Session = Depends(get_db),
):
    """
    Counts against the daily allowance before the completion is requested,
    so fallback replies use it up too. Never fails on transport errors:
    `fallback=true` marks the canned supportive reply.
    """
    usage = await run_in_threadpool(container.chat_limit.consume, db, user_id)
    history = [
        ChatMessage(content=m.content, is_from_user=m.is_from_user, sent_at=m.sent_at)
        for m in payload.history
    ]
    reply = await container.chat.reply(payload.message, history, payload.system_prompt)
    return ChatResponse(
        reply=reply.content,
        fallback=reply.fallback,
        sent_at=reply.sent_at.isoformat(),
        sent_at_display=format_time_of_day(reply.sent_at),
        remaining=usage.remaining,
        daily_limit=usage.daily_limit,
    )


@router.get(
    "/usage",
    response_model=ChatUsageResponse,
    summary="Today's chat allowance",
    responses={409: USER_NOT_READY_RESPONSE},
)
def chat_usage(
    user_id: str = Depends(require_user),
    container: ServiceContainer = Depends(get_container),
    db: Session = Depends(get_db),
):
    usage = container.chat_limit.usage(db, user_id)
    return ChatUsageResponse(used=usage.used, remaining=usage.remaining, daily_limit=usage.daily_limit)
