"""
Current user identity with an explicit ready signal.

States: Unready → Ready(user_id). Readers await `wait_ready()` instead of
polling; the wait is bounded so a slow sign-in at startup degrades to a
placeholder rather than an error.

`set_user` may be called from a worker thread (sync routes run in the
threadpool), so waiters are resolved through their own loop.
"""
from __future__ import annotations

import asyncio
import logging
import threading
from typing import Optional

from app.services.events import Event, EventBus, EventType

logger = logging.getLogger(__name__)


def _resolve(waiter: asyncio.Future) -> None:
    if not waiter.done():
        waiter.set_result(None)


class UserIdentity:
    def __init__(self, bus: Optional[EventBus] = None):
        self._bus = bus
        self._user_id: Optional[str] = None
        self._waiters: list[asyncio.Future] = []
        self._lock = threading.Lock()

    @property
    def user_id(self) -> Optional[str]:
        return self._user_id

    @property
    def is_ready(self) -> bool:
        return self._user_id is not None

    @property
    def state(self) -> str:
        return "ready" if self.is_ready else "unready"

    def set_user(self, user_id: str) -> bool:
        """Become Ready(user_id). Returns True if the identity changed."""
        with self._lock:
            previous = self._user_id
            self._user_id = user_id
            waiters, self._waiters = self._waiters, []
        for waiter in waiters:
            loop = waiter.get_loop()
            if not loop.is_closed():
                loop.call_soon_threadsafe(_resolve, waiter)

        if previous == user_id:
            return False
        logger.info("User identity changed: %s -> %s", previous, user_id)
        if self._bus is not None:
            self._bus.publish(Event(
                type=EventType.USER_CHANGED,
                user_id=user_id,
                payload={"previous_user_id": previous},
            ))
        return True

    def clear(self) -> None:
        with self._lock:
            previous = self._user_id
            self._user_id = None
        if previous is not None and self._bus is not None:
            self._bus.publish(Event(
                type=EventType.USER_CHANGED,
                user_id=None,
                payload={"previous_user_id": previous},
            ))

    async def wait_ready(self, timeout: Optional[float] = None) -> Optional[str]:
        """Current user id, or None if still Unready after `timeout` seconds."""
        with self._lock:
            if self._user_id is not None:
                return self._user_id
            waiter = asyncio.get_running_loop().create_future()
            self._waiters.append(waiter)
        try:
            await asyncio.wait_for(waiter, timeout=timeout)
        except asyncio.TimeoutError:
            logger.debug("User identity not ready after %ss", timeout)
            return None
        finally:
            with self._lock:
                if waiter in self._waiters:
                    self._waiters.remove(waiter)
        return self._user_id
