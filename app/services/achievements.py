"""
Achievements — requirement variants, static catalog, progress and unlock rules.

Two separate questions are answered here:

  achievement_progress()  — how far along the progress bar is (0.0–1.0).
                            Already-unlocked achievements short-circuit to 1.0.
  requirement_met()       — whether the stats collaborator should unlock it now.

They deliberately disagree for several variants. Progress for
MoodImprovement, GratitudePractice, ReflectionDepth and Consistency is
always 0.0, and PositiveMood progress is capped at 0.8: those achievements
only ever read as complete through the unlocked-id set.

Public API
----------
ACHIEVEMENTS / get_achievement(id)
achievement_progress(achievement, stats, counters)   -> float
categorize(achievement, stats, counters)             -> AchievementCategory
category_counts(catalog, stats, counters)            -> dict[AchievementCategory, int]
requirement_met(requirement, stats, counters, entry_count) -> bool
"""
from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import date
from typing import ClassVar, Iterable, Optional, Union


# ---------------------------------------------------------------------------
# Snapshots read by the evaluator
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class GameStats:
    total_entries: int = 0
    current_streak: int = 0
    longest_streak: int = 0
    total_points: int = 0
    level: int = 1
    unlocked_achievement_ids: frozenset[str] = frozenset()
    last_entry_date: Optional[date] = None


@dataclass(frozen=True)
class UsageCounters:
    voice_usage: int = 0
    mood_tracking: int = 0
    # word threshold → number of entries at least that long
    long_entries: dict[int, int] = field(default_factory=dict)
    average_recent_mood: float = 0.0


# ---------------------------------------------------------------------------
# Requirement variants
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class FirstEntry:
    kind: ClassVar[str] = "first_entry"


@dataclass(frozen=True)
class Streak:
    days: int
    kind: ClassVar[str] = "streak"


@dataclass(frozen=True)
class TotalEntries:
    count: int
    kind: ClassVar[str] = "total_entries"


@dataclass(frozen=True)
class MoodImprovement:
    points: int
    kind: ClassVar[str] = "mood_improvement"


@dataclass(frozen=True)
class GratitudePractice:
    days: int
    kind: ClassVar[str] = "gratitude_practice"


@dataclass(frozen=True)
class ReflectionDepth:
    words: int
    kind: ClassVar[str] = "reflection_depth"


@dataclass(frozen=True)
class Consistency:
    weeks: int
    kind: ClassVar[str] = "consistency"


@dataclass(frozen=True)
class TimeOfDay:
    before: Optional[int]    # hour, exclusive
    after: Optional[int]     # hour, inclusive
    count: int
    kind: ClassVar[str] = "time_of_day"


@dataclass(frozen=True)
class WeekendConsistency:
    weeks: int
    kind: ClassVar[str] = "weekend_consistency"


@dataclass(frozen=True)
class VoiceUsage:
    count: int
    kind: ClassVar[str] = "voice_usage"


@dataclass(frozen=True)
class MoodTracking:
    count: int
    kind: ClassVar[str] = "mood_tracking"


@dataclass(frozen=True)
class PositiveMood:
    count: int
    kind: ClassVar[str] = "positive_mood"


Requirement = Union[
    FirstEntry, Streak, TotalEntries, MoodImprovement, GratitudePractice,
    ReflectionDepth, Consistency, TimeOfDay, WeekendConsistency,
    VoiceUsage, MoodTracking, PositiveMood,
]


@dataclass(frozen=True)
class Achievement:
    id: str
    title: str
    description: str
    icon: str
    points: int
    requirement: Requirement


# ---------------------------------------------------------------------------
# Static catalog
# ---------------------------------------------------------------------------

ACHIEVEMENTS: tuple[Achievement, ...] = (
    # Entry milestones
    Achievement("first_steps", "First Steps", "Write your first journal entry",
                "star.circle.fill", 50, FirstEntry()),
    Achievement("getting_started", "Getting Started", "Write 3 journal entries",
                "book.pages.fill", 75, TotalEntries(count=3)),
    Achievement("weekly_explorer", "Weekly Explorer", "Write 7 journal entries",
                "calendar.badge.checkmark", 100, TotalEntries(count=7)),
    Achievement("dedicated_writer", "Dedicated Writer", "Write 15 journal entries",
                "doc.text.fill", 200, TotalEntries(count=15)),
    Achievement("monthly_warrior", "Monthly Warrior", "Complete 30 journal entries",
                "crown.fill", 500, TotalEntries(count=30)),
    # Streaks
    Achievement("streak_starter", "Streak Starter", "Maintain a 3-day journaling streak",
                "flame.fill", 100, Streak(days=3)),
    Achievement("streak_master", "Streak Master", "Maintain a 7-day journaling streak",
                "flame.fill", 200, Streak(days=7)),
    Achievement("streak_champion", "Streak Champion", "Maintain a 14-day journaling streak",
                "flame.fill", 350, Streak(days=14)),
    Achievement("streak_legend", "Streak Legend", "Maintain a 30-day journaling streak",
                "flame.fill", 750, Streak(days=30)),
    # Time based
    Achievement("morning_person", "Morning Person", "Write 5 entries before 10 AM",
                "sun.max.fill", 150, TimeOfDay(before=10, after=None, count=5)),
    Achievement("night_owl", "Night Owl", "Write 5 entries after 8 PM",
                "moon.stars.fill", 150, TimeOfDay(before=None, after=20, count=5)),
    Achievement("weekend_warrior", "Weekend Warrior", "Journal for 4 weekends in a row",
                "calendar.badge.plus", 200, WeekendConsistency(weeks=4)),
    # Content quality
    Achievement("thoughtful_writer", "Thoughtful Writer", "Write an entry with over 100 words",
                "text.alignleft", 75, ReflectionDepth(words=100)),
    Achievement("deep_thinker", "Deep Thinker", "Write a journal entry with over 300 words",
                "brain.head.profile.fill", 150, ReflectionDepth(words=300)),
    Achievement("philosopher", "Philosopher", "Write a journal entry with over 500 words",
                "quote.bubble.fill", 250, ReflectionDepth(words=500)),
    # Voice
    Achievement("voice_explorer", "Voice Explorer", "Use voice dictation for the first time",
                "waveform.circle.fill", 100, VoiceUsage(count=1)),
    Achievement("voice_master", "Voice Master", "Use voice dictation 10 times",
                "mic.fill", 200, VoiceUsage(count=10)),
    # Mood
    Achievement("mood_tracker", "Mood Tracker", "Log your mood 5 times",
                "chart.line.uptrend.xyaxis.circle.fill", 100, MoodTracking(count=5)),
    Achievement("positive_vibes", "Positive Vibes", "Log 10 positive moods (7+ rating)",
                "sun.max.circle.fill", 200, PositiveMood(count=10)),
    Achievement("mood_lifter", "Mood Lifter", "Show positive mood improvement over 2 weeks",
                "arrow.up.heart.fill", 300, MoodImprovement(points=10)),
    # Gratitude
    Achievement("gratitude_beginner", "Gratitude Beginner", "Practice gratitude 3 times",
                "heart.text.square.fill", 100, GratitudePractice(days=3)),
    Achievement("gratitude_guru", "Gratitude Guru", "Practice gratitude for 7 consecutive days",
                "heart.fill", 200, GratitudePractice(days=7)),
    Achievement("gratitude_master", "Gratitude Master", "Practice gratitude for 14 consecutive days",
                "hands.sparkles.fill", 350, GratitudePractice(days=14)),
    # Consistency
    Achievement("weekly_consistent", "Weekly Consistent", "Journal regularly for 1 week",
                "checkmark.circle.fill", 150, Consistency(weeks=1)),
    Achievement("consistency_champion", "Consistency Champion",
                "Journal regularly for 4 consecutive weeks",
                "trophy.fill", 400, Consistency(weeks=4)),
    Achievement("dedication_master", "Dedication Master",
                "Journal regularly for 8 consecutive weeks",
                "star.fill", 750, Consistency(weeks=8)),
)

_BY_ID = {a.id: a for a in ACHIEVEMENTS}


def get_achievement(achievement_id: str) -> Optional[Achievement]:
    return _BY_ID.get(achievement_id)


# ---------------------------------------------------------------------------
# Progress
# ---------------------------------------------------------------------------

TIME_OF_DAY_MIN_ENTRIES = 5
TIME_OF_DAY_PROGRESS = 0.6
WEEKEND_MIN_STREAK = 4
WEEKEND_PROGRESS = 0.8
POSITIVE_MOOD_CAP = 0.8


def _ratio(value: int, target: int, cap: float = 1.0) -> float:
    if target <= 0:
        return 0.0
    return max(0.0, min(value / target, cap))


def requirement_progress(
    requirement: Requirement,
    stats: GameStats,
    counters: UsageCounters,
) -> float:
    """Progress of a requirement ignoring the unlocked set."""
    if isinstance(requirement, FirstEntry):
        return 1.0 if stats.total_entries > 0 else 0.0
    if isinstance(requirement, Streak):
        return _ratio(stats.current_streak, requirement.days)
    if isinstance(requirement, TotalEntries):
        return _ratio(stats.total_entries, requirement.count)
    if isinstance(requirement, (MoodImprovement, GratitudePractice, ReflectionDepth, Consistency)):
        return 0.0
    if isinstance(requirement, TimeOfDay):
        return TIME_OF_DAY_PROGRESS if stats.total_entries >= TIME_OF_DAY_MIN_ENTRIES else 0.0
    if isinstance(requirement, WeekendConsistency):
        return WEEKEND_PROGRESS if stats.current_streak >= WEEKEND_MIN_STREAK else 0.0
    if isinstance(requirement, VoiceUsage):
        return _ratio(counters.voice_usage, requirement.count)
    if isinstance(requirement, MoodTracking):
        return _ratio(counters.mood_tracking, requirement.count)
    if isinstance(requirement, PositiveMood):
        return _ratio(counters.mood_tracking, requirement.count, cap=POSITIVE_MOOD_CAP)
    raise TypeError(f"Unknown achievement requirement: {requirement!r}")


def achievement_progress(
    achievement: Achievement,
    stats: GameStats,
    counters: UsageCounters,
) -> float:
    if achievement.id in stats.unlocked_achievement_ids:
        return 1.0
    return requirement_progress(achievement.requirement, stats, counters)


# ---------------------------------------------------------------------------
# Categories
# ---------------------------------------------------------------------------

class AchievementCategory(str, enum.Enum):
    unlocked = "Unlocked"
    in_progress = "In Progress"
    locked = "Locked"


def categorize(
    achievement: Achievement,
    stats: GameStats,
    counters: UsageCounters,
) -> AchievementCategory:
    if achievement.id in stats.unlocked_achievement_ids:
        return AchievementCategory.unlocked
    progress = achievement_progress(achievement, stats, counters)
    if 0 < progress < 1.0:
        return AchievementCategory.in_progress
    return AchievementCategory.locked


def category_counts(
    catalog: Iterable[Achievement],
    stats: GameStats,
    counters: UsageCounters,
) -> dict[AchievementCategory, int]:
    """Re-evaluates every achievement on each call."""
    counts = {category: 0 for category in AchievementCategory}
    for achievement in catalog:
        counts[categorize(achievement, stats, counters)] += 1
    return counts


# ---------------------------------------------------------------------------
# Unlock rules
# ---------------------------------------------------------------------------

POSITIVE_MOOD_THRESHOLD = 7.0
MOOD_IMPROVEMENT_MIN_LOGS = 10


def requirement_met(
    requirement: Requirement,
    stats: GameStats,
    counters: UsageCounters,
    entry_count: Optional[int] = None,
) -> bool:
    entries = stats.total_entries if entry_count is None else entry_count

    if isinstance(requirement, FirstEntry):
        return entries >= 1
    if isinstance(requirement, Streak):
        return stats.current_streak >= requirement.days
    if isinstance(requirement, TotalEntries):
        return entries >= requirement.count
    if isinstance(requirement, MoodImprovement):
        return counters.mood_tracking >= MOOD_IMPROVEMENT_MIN_LOGS
    if isinstance(requirement, GratitudePractice):
        return stats.current_streak >= requirement.days
    if isinstance(requirement, ReflectionDepth):
        return counters.long_entries.get(requirement.words, 0) > 0
    if isinstance(requirement, Consistency):
        return stats.current_streak >= requirement.weeks * 7
    if isinstance(requirement, TimeOfDay):
        return entries >= requirement.count
    if isinstance(requirement, WeekendConsistency):
        return stats.current_streak >= requirement.weeks * 2
    if isinstance(requirement, VoiceUsage):
        return counters.voice_usage >= requirement.count
    if isinstance(requirement, MoodTracking):
        return counters.mood_tracking >= requirement.count
    if isinstance(requirement, PositiveMood):
        return (
            counters.mood_tracking >= requirement.count
            and counters.average_recent_mood >= POSITIVE_MOOD_THRESHOLD
        )
    raise TypeError(f"Unknown achievement requirement: {requirement!r}")


def newly_met(
    stats: GameStats,
    counters: UsageCounters,
    entry_count: Optional[int] = None,
    catalog: Iterable[Achievement] = ACHIEVEMENTS,
) -> list[Achievement]:
    """Locked achievements whose unlock rule now holds, in catalog order."""
    return [
        a for a in catalog
        if a.id not in stats.unlocked_achievement_ids
        and requirement_met(a.requirement, stats, counters, entry_count)
    ]
