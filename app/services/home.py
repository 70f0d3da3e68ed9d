"""
Home dashboard service — energy state, 7-day rhythm, today's reflections.

Flow
----
  cached_state()            instant render from HomeStateCache (may be stale)
  refresh(db)               wait for the user (bounded), then run
                            refresh_for_user in the threadpool
  refresh_for_user(db, id)  blocking part: fetch snapshots, run the pure
                            aggregators, overwrite the cache
  refresh_in_background()   same for the current user, in its own DB
                            session (a sync BackgroundTasks callable)

The fetch always completes before aggregation starts; the aggregators
only ever see the local snapshot lists built here.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Callable, Optional

from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from app.services import storage
from app.services.analysis import EvaluationService
from app.services.energy import DEFAULT_ENERGY_STATE, EnergyState, classify_energy
from app.services.events import Event, EventBus, EventType
from app.services.home_cache import HomeStateCache
from app.services.identity import UserIdentity
from app.services.reflection_progress import (
    DAILY_REFLECTION_TARGET,
    ProgressTransition,
    ReflectionProgressTracker,
    count_today,
)
from app.services.rhythm import aggregate_rhythm

logger = logging.getLogger(__name__)


@dataclass
class HomeState:
    today: date
    energy_state: EnergyState
    rhythm: list[float]
    reflection_count: int
    progress: ProgressTransition
    user_id: Optional[str]
    user_ready: bool
    from_cache: bool
    refresh_scheduled: bool = False


class HomeService:
    def __init__(
        self,
        identity: UserIdentity,
        cache: HomeStateCache,
        evaluations: EvaluationService,
        session_factory: Callable[[], Session],
        reflection_target: int = DAILY_REFLECTION_TARGET,
        ready_timeout: float = 0.5,
        recent_limit: int = 20,
    ):
        self._identity = identity
        self._cache = cache
        self._evaluations = evaluations
        self._session_factory = session_factory
        self._ready_timeout = ready_timeout
        self._recent_limit = recent_limit
        self.tracker = ReflectionProgressTracker(target=reflection_target)
        self._pending_transition: Optional[ProgressTransition] = None

    @property
    def needs_refresh(self) -> bool:
        return self._cache.needs_refresh

    def bind(self, bus: EventBus) -> None:
        bus.subscribe(EventType.USER_CHANGED, self._on_user_changed)

    def _on_user_changed(self, event: Event) -> None:
        self.tracker.reset()
        self._pending_transition = None

    # ------------------------------------------------------------------
    # Cached path
    # ------------------------------------------------------------------

    def cached_state(self) -> Optional[HomeState]:
        cache = self._cache
        if cache.energy_state is None or cache.rhythm is None:
            return None
        if cache.user_id != self._identity.user_id:
            return None

        count = cache.reflection_count or 0
        progress = self._pending_transition
        self._pending_transition = None
        if progress is None:
            ratio = self.tracker.prime(count)
            progress = ProgressTransition(count=count, ratio=ratio, animate=False, haptic_pulse=False)

        return HomeState(
            today=storage.local_today(),
            energy_state=cache.energy_state,
            rhythm=list(cache.rhythm),
            reflection_count=count,
            progress=progress,
            user_id=cache.user_id,
            user_ready=self._identity.is_ready,
            from_cache=True,
        )

    def placeholder_state(self) -> HomeState:
        """Shown while no user is signed in yet."""
        return HomeState(
            today=storage.local_today(),
            energy_state=DEFAULT_ENERGY_STATE,
            rhythm=[],
            reflection_count=0,
            progress=ProgressTransition(count=0, ratio=0.0, animate=False, haptic_pulse=False),
            user_id=None,
            user_ready=False,
            from_cache=False,
        )

    # ------------------------------------------------------------------
    # Refresh path
    # ------------------------------------------------------------------

    async def refresh(self, db: Session, today: Optional[date] = None) -> Optional[HomeState]:
        user_id = await self._identity.wait_ready(timeout=self._ready_timeout)
        if user_id is None:
            logger.debug("Home refresh skipped: waiting for user")
            return None
        return await run_in_threadpool(self.refresh_for_user, db, user_id, today)

    def refresh_for_user(
        self,
        db: Session,
        user_id: str,
        today: Optional[date] = None,
    ) -> Optional[HomeState]:
        today = today or storage.local_today()
        generation = self._cache.generation
        evaluations = list(self._evaluations.load_evaluations(db, user_id))
        entries = storage.to_entry_points(
            storage.get_recent_entries(db, user_id, limit=self._recent_limit)
        )

        rhythm = aggregate_rhythm(today, evaluations, entries)
        energy = classify_energy(rhythm)
        count = count_today(entries, today)

        if self._identity.user_id != user_id:
            # Identity changed while fetching; the snapshot belongs to the old user.
            logger.info("Discarding home refresh for %s after user change", user_id)
            return None

        self._cache.user_id = user_id
        self._cache.update_rhythm(rhythm)
        self._cache.update_reflection_count(count)
        self._cache.update_energy_state(energy, generation=generation)

        transition = self.tracker.update(count)
        logger.debug(
            "Home refreshed for %s: energy=%s today=%d ratio=%.2f",
            user_id, energy.value, count, transition.ratio,
        )
        return HomeState(
            today=today,
            energy_state=energy,
            rhythm=rhythm,
            reflection_count=count,
            progress=transition,
            user_id=user_id,
            user_ready=True,
            from_cache=False,
        )

    def refresh_in_background(self) -> None:
        user_id = self._identity.user_id
        if user_id is None:
            return
        db = self._session_factory()
        try:
            state = self.refresh_for_user(db, user_id)
        except Exception:
            logger.exception("Background home refresh failed")
            return
        finally:
            db.close()
        if state is not None and state.progress.animate:
            self._pending_transition = state.progress
