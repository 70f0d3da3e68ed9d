"""
Tests for the stats service against SQLite: points, streaks, counters,
unlocks, level ups and recalculation.
"""
from datetime import date, timedelta

import pytest

from app.core.errors import InvalidEntryError, InvalidEvaluationError
from app.services import storage
from app.services.analysis import EvaluationService
from app.services.events import EventType
from app.services.stats_service import StatsService

USER = "stats-user"


@pytest.fixture()
def evaluations(bus):
    return EvaluationService(bus)


@pytest.fixture()
def stats_service(bus, evaluations):
    return StatsService(bus, evaluations)


def add_entry(db, stats_service, day, today, content="a short note", **kw):
    entry = storage.create_entry(db, user_id=USER, content=content, day=day, **kw)
    return stats_service.process_new_entry(db, entry, today=today)


class TestProcessNewEntry:
    def test_first_entry(self, db, stats_service, bus):
        unlocked = []
        bus.subscribe(EventType.ACHIEVEMENT_UNLOCKED, unlocked.append)
        today = date.today()

        outcome = add_entry(db, stats_service, today, today)

        assert outcome.points_earned == 20
        assert [a.id for a in outcome.unlocked] == ["first_steps"]
        # 20 for the entry + 50 for First Steps
        assert outcome.stats.total_points == 70
        assert outcome.stats.current_streak == 1
        assert outcome.stats.total_entries == 1
        assert "first_steps" in outcome.stats.unlocked_achievement_ids
        assert [e.payload["achievement_id"] for e in unlocked] == ["first_steps"]

    def test_consecutive_days_build_streak(self, db, stats_service):
        today = date.today()
        for offset in (2, 1, 0):
            outcome = add_entry(db, stats_service, today - timedelta(days=offset), today - timedelta(days=offset))
        assert outcome.stats.current_streak == 3
        assert outcome.stats.longest_streak == 3
        assert "streak_starter" in outcome.stats.unlocked_achievement_ids

    def test_same_day_does_not_extend_streak(self, db, stats_service):
        today = date.today()
        add_entry(db, stats_service, today, today)
        outcome = add_entry(db, stats_service, today, today)
        assert outcome.stats.current_streak == 1
        assert outcome.stats.total_entries == 2

    def test_backdated_entries_do_not_inflate_streak(self, db, stats_service):
        today = date.today()
        yesterday = today - timedelta(days=1)
        add_entry(db, stats_service, today, today)
        for _ in range(3):
            outcome = add_entry(db, stats_service, yesterday, today)
        assert outcome.stats.current_streak == 2
        assert outcome.stats.last_entry_date == today

    def test_backdated_entry_fills_gap(self, db, stats_service):
        today = date.today()
        add_entry(db, stats_service, today - timedelta(days=2), today)
        outcome = add_entry(db, stats_service, today, today)
        assert outcome.stats.current_streak == 1
        outcome = add_entry(db, stats_service, today - timedelta(days=1), today)
        assert outcome.stats.current_streak == 3
        assert outcome.stats.longest_streak == 3

    def test_future_entry_rejected(self, db, stats_service):
        today = date.today()
        for offset in (2, 1, 0):
            add_entry(db, stats_service, today - timedelta(days=offset), today)
        with pytest.raises(InvalidEntryError) as exc:
            storage.create_entry(db, user_id=USER, content="later", day=today + timedelta(days=30))
        assert exc.value.code == "INVALID_ENTRY"
        db.rollback()

        snapshot = stats_service.get_snapshot(db, USER)
        assert snapshot.current_streak == 3
        assert snapshot.last_entry_date == today
        assert add_entry(db, stats_service, today, today).stats.current_streak == 3

    def test_mood_and_voice_counters(self, db, stats_service):
        today = date.today()
        add_entry(db, stats_service, today, today, mood=8, used_voice=True)
        add_entry(db, stats_service, today, today, mood=6)
        counters = stats_service.get_counters(db, USER)
        assert counters.mood_tracking == 2
        assert counters.voice_usage == 1
        assert counters.average_recent_mood == 7.0

    def test_long_entry_unlocks_thoughtful_writer(self, db, stats_service):
        today = date.today()
        outcome = add_entry(db, stats_service, today, today, content="word " * 120)
        ids = {a.id for a in outcome.unlocked}
        assert "thoughtful_writer" in ids
        assert "deep_thinker" not in ids
        assert stats_service.get_counters(db, USER).long_entries[100] == 1

    def test_level_up_event(self, db, stats_service, bus):
        levels = []
        bus.subscribe(EventType.LEVEL_UP, levels.append)
        today = date.today()
        # 20 + 10 mood + 15 gratitude + 10 + 20 length = 75, plus unlocks
        outcome = add_entry(
            db, stats_service, today, today,
            content="word " * 320, mood=9, gratitude_items=["sun", "tea", "friends"], used_voice=True,
        )
        assert outcome.stats.total_points >= 200
        assert outcome.level_up == (1, outcome.stats.level)
        assert levels and levels[0].payload["previous_level"] == 1


class TestVoiceUsage:
    def test_first_voice_use_unlocks(self, db, stats_service):
        assert stats_service.record_voice_usage(db, USER) == 1
        snapshot = stats_service.get_snapshot(db, USER)
        assert "voice_explorer" in snapshot.unlocked_achievement_ids
        assert snapshot.total_points == 100


class TestRecalculation:
    def test_rebuilds_from_entries_and_evaluations(self, db, stats_service, evaluations):
        today = date.today()
        for offset in (0, 1):
            storage.create_entry(db, user_id=USER, content="note", day=today - timedelta(days=offset))
        db.commit()
        evaluations.record_evaluation(db, USER, today - timedelta(days=2), maturity_score=7)

        snapshot = stats_service.recalculate_stats_from_entries(db, USER, today=today)

        assert snapshot.total_entries == 2
        assert snapshot.current_streak == 3
        assert snapshot.last_entry_date == today
        assert snapshot.total_points >= 40
        assert {"first_steps", "streak_starter"} <= snapshot.unlocked_achievement_ids

    def test_never_decreases(self, db, stats_service):
        today = date.today()
        for _ in range(3):
            add_entry(db, stats_service, today, today)
        before = stats_service.get_snapshot(db, USER)

        storage.create_entry(db, user_id="someone-else", content="x", day=today)
        db.commit()
        after = stats_service.recalculate_stats_from_entries(db, USER, today=today)

        assert after.total_entries == before.total_entries
        assert after.total_points >= before.total_points

    def test_empty_history_is_noop(self, db, stats_service):
        snapshot = stats_service.recalculate_stats_from_entries(db, USER)
        assert snapshot.total_entries == 0
        assert snapshot.unlocked_achievement_ids == frozenset()


class TestEvaluations:
    def test_upsert_per_day(self, db, evaluations, bus):
        completed = []
        bus.subscribe(EventType.EVALUATION_COMPLETED, completed.append)
        today = date.today()
        evaluations.record_evaluation(db, USER, today, maturity_score=4)
        evaluations.record_evaluation(db, USER, today, maturity_score=8, summary="steadier")

        rows = evaluations.list_evaluations(db, USER)
        assert len(rows) == 1
        assert rows[0].maturity_score == 8
        assert len(completed) == 2
        assert evaluations.load_evaluations(db, USER)[0].maturity_score == 8.0

    def test_rejects_future_day(self, db, evaluations):
        with pytest.raises(InvalidEvaluationError):
            evaluations.record_evaluation(db, USER, date.today() + timedelta(days=1), maturity_score=5)

    def test_rejects_out_of_range(self, db, evaluations):
        with pytest.raises(InvalidEvaluationError) as exc:
            evaluations.record_evaluation(db, USER, date.today(), maturity_score=11)
        assert exc.value.code == "INVALID_EVALUATION"
