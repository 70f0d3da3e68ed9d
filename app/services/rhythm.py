"""
Rhythm service — the 7-day mood/wellness series behind the home graph.

Per-day resolution (first match wins)
-------------------------------------
  1. An evaluation on that day          → its maturity score (0–10)
  2. First entry that day with a mood   → that mood (1–10)
  3. Any entry that day                 → placeholder 5.0
  4. Nothing                            → 0.0  ("no data", not a low score)

The aggregator returns raw zeros. Replacing an all-zero series with a flat
placeholder line is display policy, see `display_series`.

Public API
----------
aggregate_rhythm(today, evaluations, entries, window_days) -> list[float]
display_series(series)                                     -> list[float]
has_real_data(series)                                      -> bool
rhythm_day_labels(today, window_days)                      -> list[str]
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterable, Optional, Sequence


RHYTHM_WINDOW_DAYS = 7
PLACEHOLDER_SCORE = 5.0
NO_DATA_SCORE = 0.0


# ---------------------------------------------------------------------------
# Input records (plain dataclasses, no ORM)
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class EvaluationPoint:
    day: date
    maturity_score: float    # 0–10


@dataclass(frozen=True)
class EntryPoint:
    day: date                # local calendar day
    mood: Optional[int] = None


@dataclass(frozen=True)
class DailyStatPoint:
    day: date
    score: float             # 0.0 means "no data"


# ---------------------------------------------------------------------------
# Core
# ---------------------------------------------------------------------------

def window_days(today: date, days: int = RHYTHM_WINDOW_DAYS) -> list[date]:
    """Calendar days of the window, oldest first, ending on today."""
    return [today - timedelta(days=i) for i in range(days - 1, -1, -1)]


def _score_for_day(
    day: date,
    evaluations: Sequence[EvaluationPoint],
    entries: Sequence[EntryPoint],
) -> float:
    for evaluation in evaluations:
        if evaluation.day == day:
            return float(evaluation.maturity_score)

    day_entries = [e for e in entries if e.day == day]
    for entry in day_entries:
        if entry.mood is not None:
            return float(entry.mood)
    if day_entries:
        return PLACEHOLDER_SCORE
    return NO_DATA_SCORE


def aggregate_points(
    today: date,
    evaluations: Iterable[EvaluationPoint],
    entries: Iterable[EntryPoint],
    days: int = RHYTHM_WINDOW_DAYS,
) -> list[DailyStatPoint]:
    evaluations = list(evaluations)
    entries = list(entries)
    return [
        DailyStatPoint(day=d, score=_score_for_day(d, evaluations, entries))
        for d in window_days(today, days)
    ]


def aggregate_rhythm(
    today: date,
    evaluations: Iterable[EvaluationPoint],
    entries: Iterable[EntryPoint],
    days: int = RHYTHM_WINDOW_DAYS,
) -> list[float]:
    """Ordered daily scores, oldest first, one per day ending on today."""
    return [p.score for p in aggregate_points(today, evaluations, entries, days)]


# ---------------------------------------------------------------------------
# Display policy
# ---------------------------------------------------------------------------

def has_real_data(series: Sequence[float]) -> bool:
    return bool(series) and any(v != NO_DATA_SCORE for v in series)


def display_series(series: Sequence[float], days: int = RHYTHM_WINDOW_DAYS) -> list[float]:
    """Flat placeholder line when there is nothing to plot."""
    if not has_real_data(series):
        return [PLACEHOLDER_SCORE] * days
    return list(series)


def rhythm_day_labels(today: date, days: int = RHYTHM_WINDOW_DAYS) -> list[str]:
    return [d.strftime("%a") for d in window_days(today, days)]
