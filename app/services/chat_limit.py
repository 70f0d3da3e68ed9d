"""
Daily chat message allowance.

Each user may send CHAT_DAILY_LIMIT messages per local calendar day. The
count lives in `user_counters` under a per-day key, so a new day starts
from zero without a reset job.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Optional

from sqlalchemy.orm import Session

from app.core.errors import ChatLimitReachedError
from app.services import storage
from app.services.storage import CounterKey

logger = logging.getLogger(__name__)

CHAT_DAILY_LIMIT = 30


@dataclass(frozen=True)
class ChatUsage:
    used: int
    daily_limit: int

    @property
    def remaining(self) -> int:
        return max(0, self.daily_limit - self.used)

    @property
    def at_limit(self) -> bool:
        return self.used >= self.daily_limit


class ChatLimitService:
    def __init__(self, daily_limit: int = CHAT_DAILY_LIMIT):
        self.daily_limit = daily_limit

    def usage(self, db: Session, user_id: str, today: Optional[date] = None) -> ChatUsage:
        today = today or storage.local_today()
        used = storage.get_counter(db, user_id, CounterKey.chat_messages(today))
        return ChatUsage(used=used, daily_limit=self.daily_limit)

    def consume(self, db: Session, user_id: str, today: Optional[date] = None) -> ChatUsage:
        """Count one message, or raise ChatLimitReachedError when none are left."""
        today = today or storage.local_today()
        if self.usage(db, user_id, today).at_limit:
            logger.info("Chat limit reached for %s on %s", user_id, today)
            raise ChatLimitReachedError(daily_limit=self.daily_limit)
        used = storage.increment_counter(db, user_id, CounterKey.chat_messages(today))
        db.commit()
        return ChatUsage(used=used, daily_limit=self.daily_limit)
