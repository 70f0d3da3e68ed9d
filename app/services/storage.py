"""
Storage service: journal entries and per-user counters.

Public API
----------
get_recent_entries(db, user_id, limit)  -> list[JournalEntry]   (newest first)
list_entries(db, user_id, limit)        -> list[JournalEntry]
create_entry(db, user_id, ...)          -> JournalEntry         (flush only)
entry_days(db, user_id)                 -> set[date]
get_counter / increment_counter         -> int                  (flush only)
to_entry_point(entry)                   -> EntryPoint
"""
from __future__ import annotations

import json
from datetime import date
from typing import Iterable, Optional

from sqlalchemy.orm import Session

from app.core.errors import InvalidEntryError
from app.models.journal_entry import JournalEntry
from app.models.counter import UserCounter
from app.services.rhythm import EntryPoint


class CounterKey:
    VOICE_USAGE = "voice_usage_count"
    MOOD_TRACKING = "mood_tracking_count"

    @staticmethod
    def long_entries(words: int) -> str:
        return f"long_entries_{words}"

    @staticmethod
    def chat_messages(day: date) -> str:
        return f"chat_messages_{day.isoformat()}"


LONG_ENTRY_THRESHOLDS = (100, 300, 500)


def local_today() -> date:
    """Today in the local calendar (all day-bucketing uses this)."""
    return date.today()


# ---------------------------------------------------------------------------
# Entries
# ---------------------------------------------------------------------------

def get_recent_entries(db: Session, user_id: str, limit: int = 20) -> list[JournalEntry]:
    return (
        db.query(JournalEntry)
        .filter(JournalEntry.user_id == user_id)
        .order_by(JournalEntry.day.desc(), JournalEntry.id.desc())
        .limit(limit)
        .all()
    )


def list_entries(db: Session, user_id: str, limit: int = 1000) -> list[JournalEntry]:
    return get_recent_entries(db, user_id, limit=limit)


def create_entry(
    db: Session,
    user_id: str,
    content: str,
    mood: Optional[int] = None,
    gratitude_items: Optional[list[str]] = None,
    used_voice: bool = False,
    voice_duration_seconds: Optional[float] = None,
    day: Optional[date] = None,
) -> JournalEntry:
    """Raises InvalidEntryError for a day after today."""
    today = local_today()
    day = day or today
    if day > today:
        raise InvalidEntryError(
            message="Entries cannot be written for future days.",
            details={"day": str(day)},
        )
    entry = JournalEntry(
        user_id=user_id,
        content=content,
        mood=mood,
        gratitude_items=json.dumps(gratitude_items) if gratitude_items else None,
        used_voice=used_voice,
        voice_duration_seconds=voice_duration_seconds,
        day=day,
    )
    db.add(entry)
    db.flush()
    return entry


def entry_days(db: Session, user_id: str) -> set[date]:
    rows = db.query(JournalEntry.day).filter(JournalEntry.user_id == user_id).distinct().all()
    return {r.day for r in rows}


def gratitude_list(entry: JournalEntry) -> list[str]:
    if not entry.gratitude_items:
        return []
    try:
        items = json.loads(entry.gratitude_items)
    except (ValueError, TypeError):
        return []
    return [str(i) for i in items] if isinstance(items, list) else []


def to_entry_point(entry: JournalEntry) -> EntryPoint:
    return EntryPoint(day=entry.day, mood=entry.mood)


def to_entry_points(entries: Iterable[JournalEntry]) -> list[EntryPoint]:
    return [to_entry_point(e) for e in entries]


# ---------------------------------------------------------------------------
# Counters
# ---------------------------------------------------------------------------

def _counter_row(db: Session, user_id: str, key: str) -> Optional[UserCounter]:
    return (
        db.query(UserCounter)
        .filter(UserCounter.user_id == user_id, UserCounter.key == key)
        .first()
    )


def get_counter(db: Session, user_id: str, key: str) -> int:
    row = _counter_row(db, user_id, key)
    return row.value if row is not None else 0


def get_counters(db: Session, user_id: str) -> dict[str, int]:
    rows = db.query(UserCounter).filter(UserCounter.user_id == user_id).all()
    return {r.key: r.value for r in rows}


def increment_counter(db: Session, user_id: str, key: str, by: int = 1) -> int:
    row = _counter_row(db, user_id, key)
    if row is None:
        row = UserCounter(user_id=user_id, key=key, value=0)
        db.add(row)
    row.value += by
    db.flush()
    return row.value
