from datetime import datetime, date
from sqlalchemy import Integer, String, Text, DateTime, Date, Boolean, Float, func
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base


class JournalEntry(Base):
    __tablename__ = "journal_entries"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    user_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    mood: Mapped[int | None] = mapped_column(Integer, nullable=True)
    # JSON-encoded list of strings
    gratitude_items: Mapped[str | None] = mapped_column(Text, nullable=True)
    used_voice: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    voice_duration_seconds: Mapped[float | None] = mapped_column(Float, nullable=True)
    # Local calendar day the entry was written on
    day: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
