"""
Home router.

GET /home   energy state, 7-day rhythm and today's reflection progress
"""
from fastapi import APIRouter, BackgroundTasks, Depends, Query
from sqlalchemy.orm import Session

from app.db.base import get_db
from app.schemas.home import HomeResponse, ReflectionProgressResponse
from app.services.container import ServiceContainer, get_container
from app.services.home import HomeState
from app.services.rhythm import display_series, has_real_data, rhythm_day_labels

router = APIRouter(prefix="/home", tags=["home"])


def _to_response(state: HomeState, target: int) -> HomeResponse:
    progress = state.progress
    return HomeResponse(
        day=str(state.today),
        user_id=state.user_id,
        user_ready=state.user_ready,
        energy_state=state.energy_state.value,
        rhythm=state.rhythm,
        display_rhythm=display_series(state.rhythm),
        has_real_data=has_real_data(state.rhythm),
        day_labels=rhythm_day_labels(state.today),
        reflections=ReflectionProgressResponse(
            count=progress.count,
            target=target,
            ratio=progress.ratio,
            animate=progress.animate,
            haptic_pulse=progress.haptic_pulse,
            animation_delay=progress.animation_delay,
            pulse_delay=progress.pulse_delay,
        ),
        from_cache=state.from_cache,
        refresh_scheduled=state.refresh_scheduled,
    )


@router.get(
    "",
    response_model=HomeResponse,
    summary="Home dashboard",
    responses={200: {"description": "Cached or freshly computed home state."}},
)
async def get_home(
    background_tasks: BackgroundTasks,
    fresh: bool = Query(default=False, description="Skip the cache and recompute before responding."),
    container: ServiceContainer = Depends(get_container),
    db: Session = Depends(get_db),
):
    """
    Serve the cached home state immediately when one exists; if it is stale
    a background refresh is scheduled and its progress transition is
    delivered on the next load. Without a cache (or with `fresh=true`) the state is
    computed inline. Before a user is signed in a placeholder is returned.
    """
    home = container.home
    target = container.settings.DAILY_REFLECTION_TARGET

    if not fresh:
        cached = home.cached_state()
        if cached is not None:
            if home.needs_refresh:
                background_tasks.add_task(home.refresh_in_background)
                cached.refresh_scheduled = True
            return _to_response(cached, target)

    state = await home.refresh(db)
    if state is None:
        state = home.placeholder_state()
    return _to_response(state, target)
