"""
Journal router.

POST /journal/entries       create an entry and apply it to the stats
GET  /journal/entries       recent entries, newest first
POST /journal/evaluations   record an AI evaluation for a day
GET  /journal/evaluations   list evaluations, newest first
POST /journal/voice-usage   count one voice dictation session
"""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.db.base import get_db
from app.schemas.common import USER_NOT_READY_RESPONSE
from app.models.evaluation import JournalEvaluation
from app.models.journal_entry import JournalEntry
from app.schemas.journal import (
    EntryCreate,
    EntryCreatedResponse,
    EntryListResponse,
    EntryResponse,
    EvaluationCreate,
    EvaluationListResponse,
    EvaluationResponse,
    UnlockedAchievementBrief,
    VoiceUsageRequest,
    VoiceUsageResponse,
)
from app.services import storage
from app.services.container import ServiceContainer, get_container, require_user
from app.services.events import Event, EventType
from app.services.formatting import format_clock, format_recording_time, maturity_description

router = APIRouter(prefix="/journal", tags=["journal"])


def _entry_response(entry: JournalEntry) -> EntryResponse:
    return EntryResponse(
        id=entry.id,
        user_id=entry.user_id,
        content=entry.content,
        mood=entry.mood,
        gratitude_items=storage.gratitude_list(entry),
        used_voice=entry.used_voice,
        voice_duration_display=(
            format_recording_time(entry.voice_duration_seconds)
            if entry.voice_duration_seconds is not None else None
        ),
        day=str(entry.day),
        created_at=entry.created_at.isoformat() if entry.created_at else None,
    )


def _evaluation_response(row: JournalEvaluation) -> EvaluationResponse:
    return EvaluationResponse(
        id=row.id,
        day=str(row.day),
        maturity_score=row.maturity_score,
        maturity_description=maturity_description(row.maturity_score),
        mood_score=row.mood_score,
        summary=row.summary,
        entry_count=row.entry_count,
    )


# ---------------------------------------------------------------------------
# Entries
# ---------------------------------------------------------------------------

@router.post(
    "/entries",
    response_model=EntryCreatedResponse,
    status_code=201,
    summary="Create a journal entry",
    responses={
        201: {"description": "Entry stored; points, streak and unlocks applied."},
        409: USER_NOT_READY_RESPONSE,
        422: {"description": "Validation error."},
    },
)
def create_entry(
    payload: EntryCreate,
    user_id: str = Depends(require_user),
    container: ServiceContainer = Depends(get_container),
    db: Session = Depends(get_db),
):
    """
    Store the entry, award points, recompute the streak and unlock any
    achievements whose rules now hold. The home cache is marked stale.
    """
    entry = storage.create_entry(
        db,
        user_id=user_id,
        content=payload.content,
        mood=payload.mood,
        gratitude_items=payload.gratitude_items,
        used_voice=payload.used_voice,
        voice_duration_seconds=payload.voice_duration_seconds,
        day=payload.day,
    )
    outcome = container.stats.process_new_entry(db, entry)
    db.refresh(entry)
    container.bus.publish(Event(
        type=EventType.ENTRY_SUBMITTED,
        user_id=user_id,
        payload={"entry_id": entry.id, "day": str(entry.day)},
    ))

    return EntryCreatedResponse(
        entry=_entry_response(entry),
        points_earned=outcome.points_earned,
        total_points=outcome.stats.total_points,
        current_streak=outcome.stats.current_streak,
        unlocked=[
            UnlockedAchievementBrief(id=a.id, title=a.title, points=a.points)
            for a in outcome.unlocked
        ],
        level_up=(
            {"previous": outcome.level_up[0], "new": outcome.level_up[1]}
            if outcome.level_up else None
        ),
    )


@router.get("/entries", response_model=EntryListResponse, summary="Recent journal entries")
def list_entries(
    limit: int = Query(default=20, ge=1, le=200),
    user_id: str = Depends(require_user),
    db: Session = Depends(get_db),
):
    entries = storage.get_recent_entries(db, user_id, limit=limit)
    return EntryListResponse(total=len(entries), items=[_entry_response(e) for e in entries])


# ---------------------------------------------------------------------------
# Evaluations
# ---------------------------------------------------------------------------

@router.post(
    "/evaluations",
    response_model=EvaluationResponse,
    status_code=201,
    summary="Record an evaluation",
    responses={
        201: {"description": "Evaluation stored (replaces any for the same day)."},
        409: USER_NOT_READY_RESPONSE,
        422: {"description": "Score out of range or future day."},
    },
)
def create_evaluation(
    payload: EvaluationCreate,
    user_id: str = Depends(require_user),
    container: ServiceContainer = Depends(get_container),
    db: Session = Depends(get_db),
):
    row = container.evaluations.record_evaluation(
        db,
        user_id=user_id,
        day=payload.day,
        maturity_score=payload.maturity_score,
        mood_score=payload.mood_score,
        summary=payload.summary,
        entry_count=payload.entry_count,
    )
    return _evaluation_response(row)


@router.get("/evaluations", response_model=EvaluationListResponse, summary="List evaluations")
def list_evaluations(
    limit: int = Query(default=100, ge=1, le=500),
    user_id: str = Depends(require_user),
    container: ServiceContainer = Depends(get_container),
    db: Session = Depends(get_db),
):
    rows = container.evaluations.list_evaluations(db, user_id, limit=limit)
    return EvaluationListResponse(total=len(rows), items=[_evaluation_response(r) for r in rows])


# ---------------------------------------------------------------------------
# Voice
# ---------------------------------------------------------------------------

@router.post("/voice-usage", response_model=VoiceUsageResponse, summary="Count a voice dictation session")
def record_voice_usage(
    payload: VoiceUsageRequest,
    user_id: str = Depends(require_user),
    container: ServiceContainer = Depends(get_container),
    db: Session = Depends(get_db),
):
    count = container.stats.record_voice_usage(db, user_id)
    return VoiceUsageResponse(
        voice_usage_count=count,
        duration_display=format_clock(payload.duration_seconds or 0.0),
    )
