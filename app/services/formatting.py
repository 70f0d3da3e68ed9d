"""Display formatting for durations, timestamps and evaluation scores."""
from __future__ import annotations

import math
from datetime import datetime


def format_clock(seconds: float) -> str:
    """Zero-padded MM:SS. Non-finite input renders as 00:00."""
    if seconds is None or not math.isfinite(seconds):
        return "00:00"
    total = int(max(0.0, seconds))
    return f"{total // 60:02d}:{total % 60:02d}"


def format_recording_time(seconds: float) -> str:
    """M:SS for voice recordings."""
    if seconds is None or not math.isfinite(seconds):
        return "0:00"
    total = int(max(0.0, seconds))
    return f"{total // 60}:{total % 60:02d}"


def format_time_of_day(moment: datetime) -> str:
    hour = moment.hour % 12 or 12
    suffix = "AM" if moment.hour < 12 else "PM"
    return f"{hour}:{moment.minute:02d} {suffix}"


def maturity_description(score: int) -> str:
    if 1 <= score <= 3:
        return "Developing"
    if 4 <= score <= 6:
        return "Growing"
    if 7 <= score <= 8:
        return "Mature"
    if 9 <= score <= 10:
        return "Highly Mature"
    return "Developing"
