"""
Process-wide cache of the last home dashboard computation.

Serves instant renders; `needs_refresh` tells the caller to recompute in
the background. New entries and evaluations mark it stale, a user change
empties it.

Invalidations arrive from worker threads while a refresh may be running.
Each one bumps `generation`; a refresh records the generation before it
fetches and only marks the cache loaded if nothing invalidated it since.
"""
from __future__ import annotations

import logging
import threading
from typing import Optional

from app.services.energy import EnergyState
from app.services.events import Event, EventBus, EventType

logger = logging.getLogger(__name__)


class HomeStateCache:
    def __init__(self) -> None:
        self.energy_state: Optional[EnergyState] = None
        self.rhythm: Optional[list[float]] = None
        self.reflection_count: Optional[int] = None
        self.user_id: Optional[str] = None
        self._loaded = False
        self._generation = 0
        self._lock = threading.Lock()

    @property
    def needs_refresh(self) -> bool:
        return not self._loaded

    @property
    def is_empty(self) -> bool:
        return self.energy_state is None and self.rhythm is None and self.reflection_count is None

    @property
    def generation(self) -> int:
        return self._generation

    def update_energy_state(self, state: EnergyState, generation: Optional[int] = None) -> None:
        """
        Store the energy state and mark the cache loaded, unless `generation`
        is given and an invalidation happened after it was read.
        """
        with self._lock:
            self.energy_state = state
            self._loaded = generation is None or generation == self._generation

    def update_rhythm(self, rhythm: list[float]) -> None:
        self.rhythm = list(rhythm)

    def update_reflection_count(self, count: int) -> None:
        self.reflection_count = count

    def mark_needs_refresh(self) -> None:
        with self._lock:
            self._generation += 1
            self._loaded = False

    def clear(self) -> None:
        with self._lock:
            self._generation += 1
            self.energy_state = None
            self.rhythm = None
            self.reflection_count = None
            self.user_id = None
            self._loaded = False

    # --- event wiring ---

    def _on_data_changed(self, event: Event) -> None:
        logger.debug("Home cache stale after %s", event.type.value)
        self.mark_needs_refresh()

    def _on_user_changed(self, event: Event) -> None:
        logger.debug("Home cache cleared for user %s", event.user_id)
        self.clear()

    def bind(self, bus: EventBus) -> None:
        bus.subscribe(EventType.ENTRY_SUBMITTED, self._on_data_changed)
        bus.subscribe(EventType.EVALUATION_COMPLETED, self._on_data_changed)
        bus.subscribe(EventType.USER_CHANGED, self._on_user_changed)
