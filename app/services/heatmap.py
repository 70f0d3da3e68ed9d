"""
Activity heatmap — 5 weeks × 7 days of journaling activity.

Grid coordinates
----------------
week 0 is the most recent row. Within a row the day index is inverted:
day 6 is the newest column, day 0 the oldest, so

    days_ago = week * 7 + (6 - day)

(0, 6) is today and (4, 0) is 34 days ago.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterable, Sequence

from app.services.rhythm import EntryPoint


HEATMAP_WEEKS = 5
DAYS_PER_WEEK = 7
HEATMAP_DAYS = HEATMAP_WEEKS * DAYS_PER_WEEK
MAX_ACTIVITY_LEVEL = 3


@dataclass(frozen=True)
class DailyActivity:
    day: date
    level: int            # 0–3
    entry_count: int
    has_mood_check: bool


def heatmap_cell_date(week: int, day: int, today: date) -> date:
    days_ago = week * DAYS_PER_WEEK + (DAYS_PER_WEEK - 1 - day)
    return today - timedelta(days=days_ago)


def activity_for_cell(
    week: int,
    day: int,
    activities: Iterable[DailyActivity],
    today: date,
) -> int:
    target = heatmap_cell_date(week, day, today)
    for activity in activities:
        if activity.day == target:
            return activity.level
    return 0


def build_activity_heatmap(
    today: date,
    entries: Sequence[EntryPoint],
    evaluation_days: Iterable[date],
    days: int = HEATMAP_DAYS,
) -> list[DailyActivity]:
    """One record per day, oldest first. An evaluation counts as one entry."""
    evaluated = set(evaluation_days)
    activities = []
    for offset in range(days - 1, -1, -1):
        day = today - timedelta(days=offset)
        day_entries = [e for e in entries if e.day == day]
        has_evaluation = day in evaluated
        entry_count = max(len(day_entries), 1 if has_evaluation else 0)
        activities.append(DailyActivity(
            day=day,
            level=min(MAX_ACTIVITY_LEVEL, entry_count),
            entry_count=entry_count,
            has_mood_check=has_evaluation or any(e.mood is not None for e in day_entries),
        ))
    return activities


def total_active_days(activities: Iterable[DailyActivity]) -> int:
    return sum(1 for a in activities if a.level > 0)


def activity_trend(activities: Sequence[DailyActivity]) -> str:
    """'up' | 'down' | 'neutral' — last 7 days against the 7 before."""
    recent = sum(a.level for a in activities[-7:])
    earlier = sum(a.level for a in activities[:-7][-7:])
    if recent > earlier:
        return "up"
    if recent < earlier:
        return "down"
    return "neutral"
