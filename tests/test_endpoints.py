"""
Integration tests for API endpoints using SQLite.
"""
from datetime import date, timedelta

from app.core.errors import ChatTransportError
from app.services.chat import FALLBACK_REPLY


def today_str() -> str:
    return str(date.today())


class TestHealth:
    def test_health(self, client):
        r = client.get("/health")
        assert r.status_code == 200
        body = r.json()
        assert body["status"] == "ok"
        assert body["user"] == "unready"


class TestSession:
    def test_set_and_clear(self, client):
        r = client.put("/session", json={"user_id": "alice"})
        assert r.status_code == 200
        assert r.json() == {"state": "ready", "user_id": "alice", "changed": True}

        again = client.put("/session", json={"user_id": "alice"})
        assert again.json()["changed"] is False

        r = client.delete("/session")
        assert r.json()["state"] == "unready"

    def test_empty_user_rejected(self, client):
        r = client.put("/session", json={"user_id": ""})
        assert r.status_code == 422
        assert r.json()["code"] == "VALIDATION_ERROR"


class TestUserNotReady:
    def test_write_endpoints_409(self, client):
        r = client.post("/journal/entries", json={"content": "hello"})
        assert r.status_code == 409
        body = r.json()
        assert body["code"] == "USER_NOT_READY"
        assert "waited_seconds" in body["details"]

    def test_read_endpoints_409(self, client):
        for path in ("/stats", "/achievements", "/analytics/heatmap", "/chat/usage"):
            assert client.get(path).status_code == 409


class TestHome:
    def test_placeholder_without_user(self, client):
        r = client.get("/home")
        assert r.status_code == 200
        body = r.json()
        assert body["user_ready"] is False
        assert body["energy_state"] == "Elevated"
        assert body["rhythm"] == []
        assert body["display_rhythm"] == [5.0] * 7
        assert body["reflections"]["count"] == 0

    def test_new_user_placeholder_line(self, user_client):
        body = user_client.get("/home").json()
        assert body["user_ready"] is True
        assert body["rhythm"] == [0.0] * 7
        assert body["display_rhythm"] == [5.0] * 7
        assert body["has_real_data"] is False
        assert body["energy_state"] == "Elevated"
        assert len(body["day_labels"]) == 7

    def test_entries_drive_home(self, user_client):
        user_client.post("/journal/entries", json={"content": "good day", "mood": 9})
        user_client.post("/journal/entries", json={"content": "still good"})

        body = user_client.get("/home").json()
        assert body["from_cache"] is False
        assert body["rhythm"][-1] == 9.0
        assert body["energy_state"] == "Calm"
        assert body["reflections"]["count"] == 2
        assert body["reflections"]["ratio"] == 0.5
        assert body["reflections"]["target"] == 4

    def test_second_load_served_from_cache(self, user_client):
        user_client.get("/home")
        body = user_client.get("/home").json()
        assert body["from_cache"] is True
        assert body["refresh_scheduled"] is False

    def test_stale_cache_refreshes_in_background(self, user_client):
        user_client.get("/home")
        user_client.post("/journal/entries", json={"content": "new one"})

        stale = user_client.get("/home").json()
        assert stale["from_cache"] is True
        assert stale["refresh_scheduled"] is True
        assert stale["reflections"]["count"] == 0

        updated = user_client.get("/home").json()
        assert updated["from_cache"] is True
        assert updated["reflections"]["count"] == 1
        assert updated["reflections"]["animate"] is True
        assert updated["reflections"]["haptic_pulse"] is True

    def test_fresh_bypasses_cache(self, user_client):
        user_client.get("/home")
        body = user_client.get("/home?fresh=true").json()
        assert body["from_cache"] is False

    def test_switching_user_clears_cache(self, user_client):
        user_client.post("/journal/entries", json={"content": "mine", "mood": 3})
        user_client.get("/home")
        user_client.put("/session", json={"user_id": "another"})
        body = user_client.get("/home").json()
        assert body["from_cache"] is False
        assert body["user_id"] == "another"
        assert body["reflections"]["count"] == 0


class TestJournal:
    def test_create_entry(self, user_client):
        r = user_client.post("/journal/entries", json={
            "content": "grateful for the walk",
            "mood": 7,
            "gratitude_items": ["walk", "sun"],
            "used_voice": True,
            "voice_duration_seconds": 65,
        })
        assert r.status_code == 201
        body = r.json()
        assert body["entry"]["day"] == today_str()
        assert body["entry"]["gratitude_items"] == ["walk", "sun"]
        assert body["entry"]["voice_duration_display"] == "1:05"
        # 20 base + 10 mood + 10 gratitude
        assert body["points_earned"] == 40
        unlocked = {a["id"] for a in body["unlocked"]}
        assert {"first_steps", "voice_explorer"} <= unlocked
        assert body["current_streak"] == 1

    def test_list_entries_newest_first(self, user_client):
        yesterday = str(date.today() - timedelta(days=1))
        user_client.post("/journal/entries", json={"content": "older", "day": yesterday})
        user_client.post("/journal/entries", json={"content": "newer"})
        body = user_client.get("/journal/entries").json()
        assert body["total"] == 2
        assert [e["content"] for e in body["items"]] == ["newer", "older"]

    def test_future_day_rejected(self, user_client):
        tomorrow = str(date.today() + timedelta(days=1))
        r = user_client.post("/journal/entries", json={"content": "ahead", "day": tomorrow})
        assert r.status_code == 422
        assert r.json()["code"] == "INVALID_ENTRY"
        assert r.json()["details"]["day"] == tomorrow
        assert user_client.get("/journal/entries").json()["total"] == 0

    def test_mood_out_of_range(self, user_client):
        r = user_client.post("/journal/entries", json={"content": "x", "mood": 11})
        assert r.status_code == 422
        assert r.json()["details"]["errors"][0]["field"] == "mood"

    def test_evaluations(self, user_client):
        r = user_client.post("/journal/evaluations", json={"day": today_str(), "maturity_score": 8})
        assert r.status_code == 201
        assert r.json()["maturity_description"] == "Mature"

        body = user_client.get("/journal/evaluations").json()
        assert body["total"] == 1
        assert body["items"][0]["maturity_score"] == 8

    def test_future_evaluation_rejected(self, user_client):
        tomorrow = str(date.today() + timedelta(days=1))
        r = user_client.post("/journal/evaluations", json={"day": tomorrow, "maturity_score": 5})
        assert r.status_code == 422
        assert r.json()["code"] == "INVALID_EVALUATION"

    def test_evaluation_marks_home_stale(self, user_client, container):
        user_client.get("/home")
        user_client.post("/journal/evaluations", json={"day": today_str(), "maturity_score": 2})
        assert container.home_cache.needs_refresh
        body = user_client.get("/home?fresh=true").json()
        assert body["energy_state"] == "High"

    def test_voice_usage(self, user_client):
        r = user_client.post("/journal/voice-usage", json={"duration_seconds": 125})
        assert r.status_code == 200
        assert r.json() == {"voice_usage_count": 1, "duration_display": "02:05"}


class TestAchievements:
    def test_catalog(self, user_client):
        body = user_client.get("/achievements").json()
        assert body["total"] == 26
        assert body["unlocked_count"] == 0
        first = next(i for i in body["items"] if i["id"] == "first_steps")
        assert first["requirement"] == {"kind": "first_entry"}
        assert first["category"] == "Locked"

    def test_category_filter_and_counts(self, user_client):
        user_client.post("/journal/entries", json={"content": "first"})
        unlocked = user_client.get("/achievements", params={"category": "Unlocked"}).json()
        assert [i["id"] for i in unlocked["items"]] == ["first_steps"]

        counts = user_client.get("/achievements/counts").json()
        assert counts["unlocked"] == 1
        assert counts["unlocked"] + counts["in_progress"] + counts["locked"] == 26

    def test_bad_category(self, user_client):
        assert user_client.get("/achievements", params={"category": "Nope"}).status_code == 422

    def test_one_achievement(self, user_client):
        body = user_client.get("/achievements/streak_master").json()
        assert body["requirement"] == {"kind": "streak", "days": 7}

    def test_unknown_achievement_404(self, user_client):
        r = user_client.get("/achievements/does_not_exist")
        assert r.status_code == 404
        assert r.json()["code"] == "ACHIEVEMENT_NOT_FOUND"

    def test_proximity(self, user_client):
        body = user_client.get("/achievements/proximity").json()
        assert body["has_items"] is True
        assert body["most_urgent"]["id"] == body["items"][0]["id"]


class TestStats:
    def test_new_user(self, user_client):
        body = user_client.get("/stats").json()
        assert body["total_entries"] == 0
        assert body["level"]["level"] == 1
        assert body["next_level"]["required_points"] == 200
        assert body["streak_message"] == "Start your journaling streak today!"

    def test_after_entry(self, user_client):
        user_client.post("/journal/entries", json={"content": "hello", "mood": 5})
        body = user_client.get("/stats").json()
        assert body["total_entries"] == 1
        assert body["current_streak"] == 1
        assert body["mood_tracking_count"] == 1
        assert body["unlocked_achievements"] == ["first_steps"]

    def test_recalculate_counts_evaluations(self, user_client):
        for offset in (0, 1, 2, 3):
            day = str(date.today() - timedelta(days=offset))
            user_client.post("/journal/evaluations", json={"day": day, "maturity_score": 6})
        body = user_client.post("/stats/recalculate").json()
        assert body["total_entries"] == 4
        assert body["current_streak"] == 4
        assert body["total_points"] >= 80


class TestAnalytics:
    def test_heatmap(self, user_client):
        user_client.post("/journal/entries", json={"content": "a"})
        user_client.post("/journal/entries", json={"content": "b"})
        body = user_client.get("/analytics/heatmap").json()
        assert len(body["days"]) == 35
        assert body["days"][-1]["level"] == 2
        assert body["grid"][0][6] == 2
        assert body["total_active_days"] == 1
        assert body["activity_trend"] == "up"

    def test_cell(self, user_client):
        user_client.post("/journal/entries", json={"content": "a"})
        r = user_client.get("/analytics/heatmap/cell", params={"week": 0, "day": 6})
        assert r.json() == {"week": 0, "day": 6, "date": today_str(), "level": 1}

        oldest = user_client.get("/analytics/heatmap/cell", params={"week": 4, "day": 0}).json()
        assert oldest["date"] == str(date.today() - timedelta(days=34))
        assert oldest["level"] == 0

    def test_cell_out_of_range(self, user_client):
        assert user_client.get("/analytics/heatmap/cell", params={"week": 5, "day": 0}).status_code == 422
        assert user_client.get("/analytics/heatmap/cell", params={"week": 0, "day": 7}).status_code == 422


class TestChat:
    def test_reply(self, user_client, chat_client):
        r = user_client.post("/chat", json={"message": "I feel tense", "history": [
            {"content": "hi", "is_from_user": True},
        ]})
        assert r.status_code == 200
        body = r.json()
        assert body["reply"] == chat_client.reply
        assert body["fallback"] is False
        assert body["sent_at_display"].endswith(("AM", "PM"))
        assert body["daily_limit"] == 30
        assert body["remaining"] == 29
        assert len(chat_client.calls[0][1]) == 1

    def test_fallback(self, user_client, chat_client):
        chat_client.error = ChatTransportError("Network error: timed out")
        body = user_client.post("/chat", json={"message": "hello"}).json()
        assert body["reply"] == FALLBACK_REPLY
        assert body["fallback"] is True
        assert body["remaining"] == 29

    def test_empty_message_rejected(self, user_client):
        assert user_client.post("/chat", json={"message": ""}).status_code == 422

    def test_requires_user(self, client, chat_client):
        r = client.post("/chat", json={"message": "hello"})
        assert r.status_code == 409
        assert r.json()["code"] == "USER_NOT_READY"
        assert chat_client.calls == []


class TestChatLimit:
    def test_limit_reached(self, user_client, container, chat_client):
        container.chat_limit.daily_limit = 2
        first = user_client.post("/chat", json={"message": "one"}).json()
        second = user_client.post("/chat", json={"message": "two"}).json()
        assert [first["remaining"], second["remaining"]] == [1, 0]

        r = user_client.post("/chat", json={"message": "three"})
        assert r.status_code == 429
        body = r.json()
        assert body["code"] == "CHAT_LIMIT_REACHED"
        assert body["details"] == {"daily_limit": 2, "remaining": 0}
        assert len(chat_client.calls) == 2

    def test_usage(self, user_client):
        assert user_client.get("/chat/usage").json() == {"used": 0, "remaining": 30, "daily_limit": 30}
        user_client.post("/chat", json={"message": "hi"})
        assert user_client.get("/chat/usage").json() == {"used": 1, "remaining": 29, "daily_limit": 30}

    def test_limit_is_per_user(self, user_client, container):
        container.chat_limit.daily_limit = 1
        assert user_client.post("/chat", json={"message": "hi"}).status_code == 200
        assert user_client.post("/chat", json={"message": "again"}).status_code == 429
        user_client.put("/session", json={"user_id": "user-2"})
        assert user_client.post("/chat", json={"message": "hi"}).status_code == 200
