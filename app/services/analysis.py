"""
Evaluation (journal analysis) collaborator.

Evaluations are produced elsewhere (the AI analysis pipeline) and posted
here; this service stores them, keeps the last loaded list in `analyses`
and announces new ones on the event bus.
"""
from __future__ import annotations

import logging
from datetime import date
from typing import Optional

from sqlalchemy.orm import Session

from app.core.errors import InvalidEvaluationError
from app.models.evaluation import JournalEvaluation
from app.services.events import Event, EventBus, EventType
from app.services.rhythm import EvaluationPoint
from app.services.storage import local_today

logger = logging.getLogger(__name__)

MIN_MATURITY_SCORE = 0
MAX_MATURITY_SCORE = 10


class EvaluationService:
    def __init__(self, bus: EventBus):
        self._bus = bus
        self.analyses: list[EvaluationPoint] = []

    def list_evaluations(self, db: Session, user_id: str, limit: int = 100) -> list[JournalEvaluation]:
        return (
            db.query(JournalEvaluation)
            .filter(JournalEvaluation.user_id == user_id)
            .order_by(JournalEvaluation.day.desc())
            .limit(limit)
            .all()
        )

    def evaluation_days(self, db: Session, user_id: str) -> set[date]:
        rows = (
            db.query(JournalEvaluation.day)
            .filter(JournalEvaluation.user_id == user_id)
            .distinct()
            .all()
        )
        return {r.day for r in rows}

    def load_evaluations(self, db: Session, user_id: str) -> list[EvaluationPoint]:
        """Refresh `analyses` from storage and return it."""
        rows = self.list_evaluations(db, user_id)
        self.analyses = [
            EvaluationPoint(day=r.day, maturity_score=float(r.maturity_score))
            for r in rows
        ]
        logger.debug("Loaded %d evaluation(s) for %s", len(self.analyses), user_id)
        return self.analyses

    def record_evaluation(
        self,
        db: Session,
        user_id: str,
        day: date,
        maturity_score: int,
        mood_score: Optional[int] = None,
        summary: Optional[str] = None,
        entry_count: int = 0,
    ) -> JournalEvaluation:
        """Insert or replace the evaluation for (user_id, day)."""
        if not MIN_MATURITY_SCORE <= maturity_score <= MAX_MATURITY_SCORE:
            raise InvalidEvaluationError(
                message=f"maturity_score must be between {MIN_MATURITY_SCORE} and {MAX_MATURITY_SCORE}.",
                details={"maturity_score": maturity_score},
            )
        if day > local_today():
            raise InvalidEvaluationError(
                message="Evaluations cannot be recorded for future days.",
                details={"day": str(day)},
            )

        row = (
            db.query(JournalEvaluation)
            .filter(JournalEvaluation.user_id == user_id, JournalEvaluation.day == day)
            .first()
        )
        if row is None:
            row = JournalEvaluation(user_id=user_id, day=day)
            db.add(row)
        row.maturity_score = maturity_score
        row.mood_score = mood_score
        row.summary = summary
        row.entry_count = entry_count
        db.commit()
        db.refresh(row)

        logger.info("Evaluation recorded for %s on %s (maturity=%d)", user_id, day, maturity_score)
        self._bus.publish(Event(
            type=EventType.EVALUATION_COMPLETED,
            user_id=user_id,
            payload={"day": str(day), "maturity_score": maturity_score},
        ))
        return row
