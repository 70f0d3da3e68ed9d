"""
Explicitly constructed service graph.

One container per application instance (tests build a fresh one per
test). Routers reach it through `get_container`, never through module
globals.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from app.core.config import Settings
from app.core.errors import UserNotReadyError
from app.services.analysis import EvaluationService
from app.services.chat import ChatClient, ChatService
from app.services.chat_limit import ChatLimitService
from app.services.events import EventBus
from app.services.home import HomeService
from app.services.home_cache import HomeStateCache
from app.services.identity import UserIdentity
from app.services.stats_service import StatsService


@dataclass
class ServiceContainer:
    bus: EventBus
    identity: UserIdentity
    home_cache: HomeStateCache
    evaluations: EvaluationService
    stats: StatsService
    home: HomeService
    chat: ChatService
    chat_limit: ChatLimitService
    settings: Settings


def build_container(
    settings: Settings,
    session_factory: Callable[[], Session],
    chat_client: ChatClient | None = None,
) -> ServiceContainer:
    bus = EventBus()
    identity = UserIdentity(bus)
    cache = HomeStateCache()
    cache.bind(bus)
    evaluations = EvaluationService(bus)
    stats = StatsService(bus, evaluations)
    home = HomeService(
        identity=identity,
        cache=cache,
        evaluations=evaluations,
        session_factory=session_factory,
        reflection_target=settings.DAILY_REFLECTION_TARGET,
        ready_timeout=settings.USER_READY_TIMEOUT,
        recent_limit=settings.RECENT_ENTRIES_LIMIT,
    )
    home.bind(bus)
    client = chat_client or ChatClient(
        api_key=settings.OPENAI_API_KEY,
        model=settings.OPENAI_MODEL,
        max_tokens=settings.OPENAI_MAX_TOKENS,
        temperature=settings.OPENAI_TEMPERATURE,
        timeout=settings.OPENAI_TIMEOUT,
    )
    return ServiceContainer(
        bus=bus,
        identity=identity,
        home_cache=cache,
        evaluations=evaluations,
        stats=stats,
        home=home,
        chat=ChatService(client),
        chat_limit=ChatLimitService(settings.CHAT_DAILY_LIMIT),
        settings=settings,
    )


def get_container(request: Request) -> ServiceContainer:
    return request.app.state.container


async def require_user(container: ServiceContainer = Depends(get_container)) -> str:
    """Current user id, after a bounded wait. 409 USER_NOT_READY otherwise."""
    timeout = container.settings.USER_READY_TIMEOUT
    user_id = await container.identity.wait_ready(timeout=timeout)
    if user_id is None:
        raise UserNotReadyError(waited_seconds=timeout)
    return user_id
