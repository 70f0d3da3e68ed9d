"""
Daily reflection progress: today's entry count against a fixed target.

The tracker remembers the ratio that was last displayed so a reload that
changes nothing does not re-run the progress transition.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Iterable, Optional

from app.services.rhythm import EntryPoint


DAILY_REFLECTION_TARGET = 4
ANIMATION_THRESHOLD = 0.01
# Transition starts after ANIMATION_DELAY; the haptic pulse fires
# PULSE_DELAY after that.
ANIMATION_DELAY_SECONDS = 0.3
PULSE_DELAY_SECONDS = 0.6


def count_today(entries: Iterable[EntryPoint], today: date) -> int:
    return sum(1 for e in entries if e.day == today)


def reflection_ratio(count: int, target: int = DAILY_REFLECTION_TARGET) -> float:
    if target <= 0 or count <= 0:
        return 0.0
    return min(count / target, 1.0)


@dataclass
class ProgressTransition:
    count: int
    ratio: float
    animate: bool
    haptic_pulse: bool
    animation_delay: float = ANIMATION_DELAY_SECONDS
    pulse_delay: float = PULSE_DELAY_SECONDS


class ReflectionProgressTracker:
    def __init__(self, target: int = DAILY_REFLECTION_TARGET):
        self.target = target
        self.displayed_ratio: Optional[float] = None

    def prime(self, count: int) -> float:
        """Show a cached count immediately, without a transition."""
        self.displayed_ratio = reflection_ratio(count, self.target)
        return self.displayed_ratio

    def update(self, count: int) -> ProgressTransition:
        ratio = reflection_ratio(count, self.target)
        previous = self.displayed_ratio if self.displayed_ratio is not None else 0.0
        animate = abs(previous - ratio) > ANIMATION_THRESHOLD
        self.displayed_ratio = ratio
        return ProgressTransition(
            count=count,
            ratio=ratio,
            animate=animate,
            haptic_pulse=animate and count > 0,
        )

    def reset(self) -> None:
        self.displayed_ratio = None
