"""
UserCounter — flat per-user integer counters (key-value).

Keys in use: voice_usage_count, mood_tracking_count,
long_entries_100, long_entries_300, long_entries_500.
"""
from sqlalchemy import Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base


class UserCounter(Base):
    __tablename__ = "user_counters"
    __table_args__ = (
        UniqueConstraint("user_id", "key", name="uq_user_counter_user_key"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    user_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    key: Mapped[str] = mapped_column(String(64), nullable=False)
    value: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
