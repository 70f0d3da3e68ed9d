"""
Energy classifier — coarse four-value summary of the recent rhythm.

Bands over the mean of non-zero daily scores (half-open, fixed):
  [8, 10] → Calm
  [6,  8) → Balanced
  [4,  6) → Elevated
  [0,  4) → High

No usable scores → Elevated (deliberately non-extreme).
"""
from __future__ import annotations

import enum
from typing import Iterable, Optional


class EnergyState(str, enum.Enum):
    calm = "Calm"
    balanced = "Balanced"
    elevated = "Elevated"
    high = "High"


DEFAULT_ENERGY_STATE = EnergyState.elevated


def mean_score(scores: Iterable[Optional[float]]) -> Optional[float]:
    """Mean of the scores that carry data; None when there are none."""
    valid = [s for s in scores if s is not None and s > 0]
    if not valid:
        return None
    return sum(valid) / len(valid)


def classify_mean(mean: float) -> EnergyState:
    if mean >= 8:
        return EnergyState.calm
    if mean >= 6:
        return EnergyState.balanced
    if mean >= 4:
        return EnergyState.elevated
    return EnergyState.high


def classify_energy(scores: Iterable[Optional[float]]) -> EnergyState:
    mean = mean_score(scores)
    if mean is None:
        return DEFAULT_ENERGY_STATE
    return classify_mean(mean)
