"""
Tests for achievement progress, categories and unlock rules.
"""
from datetime import date

import pytest

from app.services.achievements import (
    ACHIEVEMENTS,
    Achievement,
    AchievementCategory,
    Consistency,
    FirstEntry,
    GameStats,
    GratitudePractice,
    MoodImprovement,
    MoodTracking,
    PositiveMood,
    ReflectionDepth,
    Streak,
    TimeOfDay,
    TotalEntries,
    UsageCounters,
    VoiceUsage,
    WeekendConsistency,
    achievement_progress,
    categorize,
    category_counts,
    get_achievement,
    newly_met,
    requirement_met,
    requirement_progress,
)


def stats(**kw) -> GameStats:
    return GameStats(**kw)


def counters(**kw) -> UsageCounters:
    return UsageCounters(**kw)


class TestCatalog:
    def test_catalog_size_and_unique_ids(self):
        ids = [a.id for a in ACHIEVEMENTS]
        assert len(ids) == 26
        assert len(set(ids)) == 26

    def test_lookup(self):
        assert get_achievement("streak_master").requirement == Streak(days=7)
        assert get_achievement("nope") is None


class TestRequirementProgress:
    def test_first_entry(self):
        assert requirement_progress(FirstEntry(), stats(), counters()) == 0.0
        assert requirement_progress(FirstEntry(), stats(total_entries=1), counters()) == 1.0

    def test_streak_partial(self):
        p = requirement_progress(Streak(days=7), stats(current_streak=3), counters())
        assert p == pytest.approx(3 / 7)

    def test_streak_clamped(self):
        assert requirement_progress(Streak(days=7), stats(current_streak=10), counters()) == 1.0

    def test_total_entries(self):
        assert requirement_progress(TotalEntries(count=15), stats(total_entries=5), counters()) == pytest.approx(1 / 3)

    @pytest.mark.parametrize("req", [
        MoodImprovement(points=10),
        GratitudePractice(days=3),
        ReflectionDepth(words=100),
        Consistency(weeks=1),
    ])
    def test_untracked_variants_are_zero(self, req):
        full = stats(total_entries=100, current_streak=100)
        rich = counters(voice_usage=50, mood_tracking=50, long_entries={100: 3})
        assert requirement_progress(req, full, rich) == 0.0

    def test_time_of_day(self):
        req = TimeOfDay(before=10, after=None, count=5)
        assert requirement_progress(req, stats(total_entries=4), counters()) == 0.0
        assert requirement_progress(req, stats(total_entries=5), counters()) == 0.6

    def test_weekend_consistency(self):
        req = WeekendConsistency(weeks=4)
        assert requirement_progress(req, stats(current_streak=3), counters()) == 0.0
        assert requirement_progress(req, stats(current_streak=4), counters()) == 0.8

    def test_voice_usage(self):
        assert requirement_progress(VoiceUsage(count=10), stats(), counters(voice_usage=4)) == 0.4

    def test_mood_tracking(self):
        assert requirement_progress(MoodTracking(count=5), stats(), counters(mood_tracking=7)) == 1.0

    def test_positive_mood_capped(self):
        assert requirement_progress(PositiveMood(count=10), stats(), counters(mood_tracking=10)) == 0.8
        assert requirement_progress(PositiveMood(count=10), stats(), counters(mood_tracking=5)) == 0.5

    def test_non_positive_target_is_zero(self):
        assert requirement_progress(Streak(days=0), stats(current_streak=5), counters()) == 0.0

    def test_unknown_variant_raises(self):
        with pytest.raises(TypeError):
            requirement_progress(object(), stats(), counters())


class TestCategories:
    def test_unlocked_short_circuits_to_full_progress(self):
        a = get_achievement("streak_legend")
        s = stats(unlocked_achievement_ids=frozenset({"streak_legend"}))
        assert achievement_progress(a, s, counters()) == 1.0
        assert categorize(a, s, counters()) == AchievementCategory.unlocked

    def test_partial_is_in_progress(self):
        a = get_achievement("streak_master")
        assert categorize(a, stats(current_streak=3), counters()) == AchievementCategory.in_progress

    def test_complete_but_not_unlocked_is_locked(self):
        a = get_achievement("streak_starter")
        assert categorize(a, stats(current_streak=3), counters()) == AchievementCategory.locked

    def test_zero_is_locked(self):
        a = get_achievement("voice_master")
        assert categorize(a, stats(), counters()) == AchievementCategory.locked

    def test_counts_cover_catalog(self):
        s = stats(total_entries=2, current_streak=2, unlocked_achievement_ids=frozenset({"first_steps"}))
        counts = category_counts(ACHIEVEMENTS, s, counters(mood_tracking=1))
        assert sum(counts.values()) == len(ACHIEVEMENTS)
        assert counts[AchievementCategory.unlocked] == 1

    def test_counts_reflect_current_stats(self):
        catalog = [Achievement("s", "S", "", "flame", 10, Streak(days=4))]
        before = category_counts(catalog, stats(current_streak=0), counters())
        after = category_counts(catalog, stats(current_streak=2), counters())
        assert before[AchievementCategory.locked] == 1
        assert after[AchievementCategory.in_progress] == 1


class TestUnlockRules:
    def test_first_entry_unlocks_first_steps(self):
        met = newly_met(stats(total_entries=1, current_streak=1), counters())
        assert [a.id for a in met] == ["first_steps"]

    def test_already_unlocked_not_repeated(self):
        s = stats(total_entries=1, unlocked_achievement_ids=frozenset({"first_steps"}))
        assert newly_met(s, counters()) == []

    def test_entry_count_override(self):
        assert requirement_met(TotalEntries(count=3), stats(total_entries=1), counters(), entry_count=3)

    def test_reflection_depth_uses_long_entry_counter(self):
        assert requirement_met(ReflectionDepth(words=300), stats(), counters(long_entries={300: 1}))
        assert not requirement_met(ReflectionDepth(words=500), stats(), counters(long_entries={300: 1}))

    def test_consistency_in_weeks(self):
        assert requirement_met(Consistency(weeks=1), stats(current_streak=7), counters())
        assert not requirement_met(Consistency(weeks=1), stats(current_streak=6), counters())

    def test_positive_mood_needs_high_average(self):
        req = PositiveMood(count=10)
        assert not requirement_met(req, stats(), counters(mood_tracking=10, average_recent_mood=6.5))
        assert requirement_met(req, stats(), counters(mood_tracking=10, average_recent_mood=7.0))

    def test_last_entry_date_not_required(self):
        s = stats(total_entries=3, last_entry_date=date(2026, 3, 1))
        assert requirement_met(TotalEntries(count=3), s, counters())
