"""
Stats service — owns and mutates the per-user gamification stats.

Every other component reads immutable `GameStats` / `UsageCounters`
snapshots from here; only this module writes `game_stats`,
`unlocked_achievements` and the usage counters.

Events published (after commit):
  ACHIEVEMENT_UNLOCKED — one per newly unlocked achievement
  LEVEL_UP             — when total points cross a level threshold
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from sqlalchemy.orm import Session

from app.models.game_stats import GameStatsRecord, UnlockedAchievement
from app.models.journal_entry import JournalEntry
from app.services import storage
from app.services.achievements import (
    Achievement,
    GameStats,
    UsageCounters,
    newly_met,
)
from app.services.analysis import EvaluationService
from app.services.events import Event, EventBus, EventType
from app.services.gamification import (
    MIN_POINTS_PER_ENTRY,
    level_for_points,
    points_for_entry,
    streak_from_dates,
    word_count,
)
from app.services.storage import CounterKey, LONG_ENTRY_THRESHOLDS

logger = logging.getLogger(__name__)

RECALCULATION_ENTRY_LIMIT = 1000


@dataclass
class EntryOutcome:
    """What recording one entry did to the stats."""
    points_earned: int
    stats: GameStats
    unlocked: list[Achievement] = field(default_factory=list)
    level_up: Optional[tuple[int, int]] = None   # (previous, new)


class StatsService:
    def __init__(self, bus: EventBus, evaluations: EvaluationService):
        self._bus = bus
        self._evaluations = evaluations

    # ------------------------------------------------------------------
    # Snapshots
    # ------------------------------------------------------------------

    def _record(self, db: Session, user_id: str) -> GameStatsRecord:
        record = db.get(GameStatsRecord, user_id)
        if record is None:
            record = GameStatsRecord(
                user_id=user_id,
                total_entries=0,
                current_streak=0,
                longest_streak=0,
                total_points=0,
                level=1,
                average_recent_mood=0.0,
            )
            db.add(record)
            db.flush()
        return record

    def _unlocked_ids(self, db: Session, user_id: str) -> frozenset[str]:
        rows = (
            db.query(UnlockedAchievement.achievement_id)
            .filter(UnlockedAchievement.user_id == user_id)
            .all()
        )
        return frozenset(r.achievement_id for r in rows)

    def get_snapshot(self, db: Session, user_id: str) -> GameStats:
        record = self._record(db, user_id)
        return GameStats(
            total_entries=record.total_entries,
            current_streak=record.current_streak,
            longest_streak=record.longest_streak,
            total_points=record.total_points,
            level=record.level,
            unlocked_achievement_ids=self._unlocked_ids(db, user_id),
            last_entry_date=record.last_entry_date,
        )

    def get_counters(self, db: Session, user_id: str) -> UsageCounters:
        raw = storage.get_counters(db, user_id)
        record = self._record(db, user_id)
        return UsageCounters(
            voice_usage=raw.get(CounterKey.VOICE_USAGE, 0),
            mood_tracking=raw.get(CounterKey.MOOD_TRACKING, 0),
            long_entries={
                words: raw.get(CounterKey.long_entries(words), 0)
                for words in LONG_ENTRY_THRESHOLDS
            },
            average_recent_mood=record.average_recent_mood,
        )

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def _track_entry_characteristics(self, db: Session, record: GameStatsRecord, entry: JournalEntry) -> None:
        words = word_count(entry.content)
        for threshold in LONG_ENTRY_THRESHOLDS:
            if words >= threshold:
                storage.increment_counter(db, entry.user_id, CounterKey.long_entries(threshold))

        if entry.mood is not None:
            storage.increment_counter(db, entry.user_id, CounterKey.MOOD_TRACKING)
            # Simple running average, as displayed in the app.
            current = record.average_recent_mood
            record.average_recent_mood = (
                float(entry.mood) if current == 0 else (current + entry.mood) / 2
            )

        if entry.used_voice:
            storage.increment_counter(db, entry.user_id, CounterKey.VOICE_USAGE)

    def _apply_level(self, record: GameStatsRecord, pending: list[Event]) -> Optional[tuple[int, int]]:
        new_level = level_for_points(record.total_points)
        if new_level.level <= record.level:
            return None
        previous = record.level
        record.level = new_level.level
        logger.info("Level up for %s: %d -> %d", record.user_id, previous, new_level.level)
        pending.append(Event(
            type=EventType.LEVEL_UP,
            user_id=record.user_id,
            payload={
                "previous_level": previous,
                "new_level": new_level.level,
                "title": new_level.title,
                "total_points": record.total_points,
            },
        ))
        return previous, new_level.level

    def _unlock_met(
        self,
        db: Session,
        record: GameStatsRecord,
        pending: list[Event],
        entry_count: Optional[int] = None,
    ) -> list[Achievement]:
        stats = self.get_snapshot(db, record.user_id)
        counters = self.get_counters(db, record.user_id)
        unlocked = newly_met(stats, counters, entry_count=entry_count)
        for achievement in unlocked:
            db.add(UnlockedAchievement(
                user_id=record.user_id,
                achievement_id=achievement.id,
                points_earned=achievement.points,
            ))
            record.total_points += achievement.points
            logger.info("Achievement unlocked for %s: %s", record.user_id, achievement.id)
            pending.append(Event(
                type=EventType.ACHIEVEMENT_UNLOCKED,
                user_id=record.user_id,
                payload={"achievement_id": achievement.id, "points": achievement.points},
            ))
        return unlocked

    def _activity_days(self, db: Session, user_id: str) -> set[date]:
        """Days with an entry or an evaluation. Backdated entries fill gaps."""
        return storage.entry_days(db, user_id) | self._evaluations.evaluation_days(db, user_id)

    def _commit_and_publish(self, db: Session, pending: list[Event]) -> None:
        db.commit()
        for event in pending:
            self._bus.publish(event)

    def process_new_entry(
        self,
        db: Session,
        entry: JournalEntry,
        today: Optional[date] = None,
    ) -> EntryOutcome:
        """Apply a freshly created entry to the user's stats and commit."""
        today = today or storage.local_today()
        record = self._record(db, entry.user_id)
        pending: list[Event] = []

        self._track_entry_characteristics(db, record, entry)

        points = points_for_entry(
            words=word_count(entry.content),
            has_mood=entry.mood is not None,
            gratitude_count=len(storage.gratitude_list(entry)),
            current_streak=record.current_streak,
        )
        record.total_entries += 1
        record.total_points += points

        activity_days = self._activity_days(db, entry.user_id)
        record.current_streak = streak_from_dates(activity_days, today)
        record.longest_streak = max(record.longest_streak, record.current_streak)
        record.last_entry_date = max(activity_days)
        db.flush()

        unlocked = self._unlock_met(db, record, pending)
        level_up = self._apply_level(record, pending)
        self._commit_and_publish(db, pending)

        logger.info(
            "Entry %s processed for %s: +%d points, streak %d",
            entry.id, entry.user_id, points, record.current_streak,
        )
        return EntryOutcome(
            points_earned=points,
            stats=self.get_snapshot(db, entry.user_id),
            unlocked=unlocked,
            level_up=level_up,
        )

    def record_voice_usage(self, db: Session, user_id: str) -> int:
        """Count one dictation session outside of entry creation."""
        record = self._record(db, user_id)
        pending: list[Event] = []
        count = storage.increment_counter(db, user_id, CounterKey.VOICE_USAGE)
        self._unlock_met(db, record, pending)
        self._apply_level(record, pending)
        self._commit_and_publish(db, pending)
        return count

    def recalculate_stats_from_entries(
        self,
        db: Session,
        user_id: str,
        today: Optional[date] = None,
    ) -> GameStats:
        """
        Rebuild totals and streak from stored entries and evaluations.
        Stored values only ever go up; evaluations count as reflections.
        """
        today = today or storage.local_today()
        entries = storage.list_entries(db, user_id, limit=RECALCULATION_ENTRY_LIMIT)
        evaluations = self._evaluations.load_evaluations(db, user_id)

        total = len(entries)
        if len(evaluations) > total:
            total = len(evaluations)
        activity_days = {e.day for e in entries} | {ev.day for ev in evaluations}

        if total == 0 and not activity_days:
            return self.get_snapshot(db, user_id)

        streak = streak_from_dates(activity_days, today)
        record = self._record(db, user_id)
        pending: list[Event] = []

        if total > record.total_entries:
            logger.info("totalEntries for %s: %d -> %d", user_id, record.total_entries, total)
            record.total_entries = total
        if streak > record.current_streak:
            record.current_streak = streak
        if streak > record.longest_streak:
            record.longest_streak = streak
        if activity_days:
            record.last_entry_date = max(activity_days)

        min_points = total * MIN_POINTS_PER_ENTRY
        if record.total_points < min_points:
            record.total_points = min_points
        db.flush()

        self._unlock_met(db, record, pending, entry_count=total)
        self._apply_level(record, pending)
        self._commit_and_publish(db, pending)

        logger.info("Recalculated stats for %s: %d reflections, %d day streak", user_id, total, streak)
        return self.get_snapshot(db, user_id)
