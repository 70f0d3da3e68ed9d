"""
Gamification rules — points, levels, streaks and progress proximity.

Pure functions over plain values; persistence lives in stats_service.
"""
from __future__ import annotations

import enum
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterable, Optional, Sequence

from app.services.achievements import (
    ACHIEVEMENTS,
    Achievement,
    GameStats,
    MoodTracking,
    ReflectionDepth,
    Streak,
    TotalEntries,
    UsageCounters,
)


# ---------------------------------------------------------------------------
# Levels
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class JournalLevel:
    level: int
    title: str
    description: str
    required_points: int
    badge: str
    rewards: tuple[str, ...]


JOURNAL_LEVELS: tuple[JournalLevel, ...] = (
    JournalLevel(1, "Mindful Beginner", "Starting your wellness journey", 0, "🌱",
                 ("Basic journal templates",)),
    JournalLevel(2, "Reflective Soul", "Building awareness", 200, "🪞",
                 ("Mood insights", "Weekly summaries")),
    JournalLevel(3, "Grateful Heart", "Embracing gratitude", 500, "💝",
                 ("Gratitude streaks", "Achievement badges")),
    JournalLevel(4, "Wisdom Seeker", "Deep self-reflection", 1000, "🧠",
                 ("Advanced analytics", "Trend insights")),
    JournalLevel(5, "Zen Master", "Mastering mindfulness", 2000, "🏆",
                 ("Custom themes", "Export options")),
    JournalLevel(6, "Wellness Guru", "Inspiring others", 4000, "👑",
                 ("Premium templates", "Share achievements")),
)


def level_for_points(points: int) -> JournalLevel:
    current = JOURNAL_LEVELS[0]
    for level in JOURNAL_LEVELS:
        if level.required_points <= points:
            current = level
    return current


def next_level(level: JournalLevel) -> Optional[JournalLevel]:
    for candidate in JOURNAL_LEVELS:
        if candidate.level > level.level:
            return candidate
    return None


# ---------------------------------------------------------------------------
# Points
# ---------------------------------------------------------------------------

BASE_ENTRY_POINTS = 20
MIN_POINTS_PER_ENTRY = 20


def word_count(text: str) -> int:
    return len(text.split())


def points_for_entry(
    words: int,
    has_mood: bool,
    gratitude_count: int,
    current_streak: int,
) -> int:
    points = BASE_ENTRY_POINTS
    if has_mood:
        points += 10
    points += gratitude_count * 5
    if words >= 50:
        points += 10
    if words >= 200:
        points += 20
    if words >= 500:
        points += 30
    if current_streak >= 3:
        points += 10
    if current_streak >= 7:
        points += 20
    return points


# ---------------------------------------------------------------------------
# Streaks
# ---------------------------------------------------------------------------

def streak_from_dates(activity_days: Iterable[date], today: date) -> int:
    """Consecutive active days counting back from today (or yesterday). Future days are ignored."""
    streak = 0
    cursor = today
    for day in sorted({d for d in activity_days if d <= today}, reverse=True):
        if day == cursor or day == cursor - timedelta(days=1):
            streak += 1
            cursor = day
        else:
            break
    return streak


def streak_message(streak: int) -> str:
    if streak <= 0:
        return "Start your journaling streak today!"
    if streak == 1:
        return "Great start! Keep it going tomorrow."
    if streak <= 6:
        return f"Building momentum! {streak} days strong."
    if streak <= 13:
        return f"Impressive streak! {streak} days of self-reflection."
    if streak <= 29:
        return f"Amazing dedication! {streak} days of growth."
    return f"Incredible! {streak} days of consistent journaling."


MONTHLY_GOAL = 12


def monthly_goal_progress(total_entries: int, goal: int = MONTHLY_GOAL) -> float:
    if goal <= 0:
        return 0.0
    return min(total_entries / goal, 1.0)


# ---------------------------------------------------------------------------
# Progress proximity
# ---------------------------------------------------------------------------

class ProximityType(str, enum.Enum):
    achievement = "achievement"
    level_up = "level_up"
    streak = "streak"


class UrgencyLevel(str, enum.Enum):
    very_close = "very_close"
    close = "close"
    moderate = "moderate"

    @property
    def message(self) -> str:
        return {
            UrgencyLevel.very_close: "So close!",
            UrgencyLevel.close: "Almost there!",
            UrgencyLevel.moderate: "Within reach!",
        }[self]


@dataclass
class ProximityItem:
    id: str
    type: ProximityType
    title: str
    description: str
    progress: float
    points_needed: int
    icon: str

    @property
    def urgency(self) -> UrgencyLevel:
        if self.progress >= 0.9 or self.points_needed <= 1:
            return UrgencyLevel.very_close
        if self.progress >= 0.7 or self.points_needed <= 3:
            return UrgencyLevel.close
        return UrgencyLevel.moderate


MAX_CLOSE_ACHIEVEMENTS = 3


def _clamped(value: int, target: int) -> float:
    if target <= 0:
        return 0.0
    return max(0.0, min(value / target, 1.0))


def level_proximity(total_points: int) -> Optional[ProximityItem]:
    current = level_for_points(total_points)
    upcoming = next_level(current)
    if upcoming is None:
        return None

    points_needed = upcoming.required_points - total_points
    span = upcoming.required_points - current.required_points
    earned = total_points - current.required_points
    progress = _clamped(earned, span) if earned >= 0 else 0.0

    if progress > 0.5 or points_needed <= 100:
        return ProximityItem(
            id=f"level_{upcoming.level}",
            type=ProximityType.level_up,
            title=f"Level Up: {upcoming.title}",
            description=f"{points_needed} more points to reach level {upcoming.level}",
            progress=progress,
            points_needed=points_needed,
            icon="arrow.up.circle.fill",
        )
    return None


def achievement_proximity(
    achievement: Achievement,
    stats: GameStats,
    counters: UsageCounters,
) -> Optional[ProximityItem]:
    req = achievement.requirement

    def item(description: str, progress: float, needed: int) -> ProximityItem:
        return ProximityItem(
            id=achievement.id,
            type=ProximityType.achievement,
            title=achievement.title,
            description=description,
            progress=progress,
            points_needed=needed,
            icon=achievement.icon,
        )

    if isinstance(req, TotalEntries):
        progress = _clamped(stats.total_entries, req.count)
        remaining = req.count - stats.total_entries
        if progress > 0.6 or remaining <= 5:
            return item(f"{remaining} more entries needed", progress, remaining)
        return None

    if isinstance(req, Streak):
        progress = _clamped(stats.current_streak, req.days)
        remaining = req.days - stats.current_streak
        if progress > 0.5 or remaining <= 3:
            return item(f"{remaining} more days needed", progress, remaining)
        return None

    if isinstance(req, ReflectionDepth):
        if req.words <= 300 and stats.total_entries >= 3:
            return item(f"Write a {req.words}+ word entry", 0.7, 1)
        return None

    if isinstance(req, MoodTracking):
        progress = _clamped(counters.mood_tracking, req.count)
        remaining = req.count - counters.mood_tracking
        if progress > 0.5 or remaining <= 3:
            return item(f"{remaining} more mood logs needed", progress, remaining)
        return None

    if stats.total_entries >= 5:
        return item("Keep journaling to unlock!", 0.6, 1)
    return None


def proximity_status(
    stats: GameStats,
    counters: UsageCounters,
    catalog: Sequence[Achievement] = ACHIEVEMENTS,
) -> list[ProximityItem]:
    """Next level plus the closest locked achievements, closest first."""
    items: list[ProximityItem] = []

    level_item = level_proximity(stats.total_points)
    if level_item is not None:
        items.append(level_item)

    close = [
        p for p in (
            achievement_proximity(a, stats, counters)
            for a in catalog
            if a.id not in stats.unlocked_achievement_ids
        )
        if p is not None
    ]
    close.sort(key=lambda p: p.progress, reverse=True)
    items.extend(close[:MAX_CLOSE_ACHIEVEMENTS])

    items.sort(key=lambda p: p.progress, reverse=True)
    return items
