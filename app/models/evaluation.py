"""
JournalEvaluation — one AI journal analysis per (user, day).

maturity_score is on a 0–10 scale and is the first source for the home
rhythm graph; mood_score (1–10) is informational.
"""
from datetime import datetime, date
from sqlalchemy import Integer, String, Text, DateTime, Date, func, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base


class JournalEvaluation(Base):
    __tablename__ = "journal_evaluations"
    __table_args__ = (
        UniqueConstraint("user_id", "day", name="uq_journal_evaluation_user_date"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    user_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    day: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    maturity_score: Mapped[int] = mapped_column(Integer, nullable=False)
    mood_score: Mapped[int | None] = mapped_column(Integer, nullable=True)
    summary: Mapped[str | None] = mapped_column(Text, nullable=True)
    entry_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
