"""Tests for practice statistics."""
from __future__ import annotations

from datetime import date, datetime, timedelta

from app.services.stats_service import StatsService, calculate_streak


def test_streak_counts_consecutive_days_ending_today():
    today = date(2025, 10, 10)
    days = [today, today, today - timedelta(days=1), today - timedelta(days=2), today - timedelta(days=4)]

    assert calculate_streak(days, today) == 3


def test_streak_is_zero_without_practice_today():
    today = date(2025, 10, 10)

    assert calculate_streak([today - timedelta(days=1)], today) == 0
    assert calculate_streak([], today) == 0


def test_streak_ignores_future_dates():
    today = date(2025, 10, 10)

    assert calculate_streak([today + timedelta(days=2), today], today) == 1


def test_stats_endpoint(test_client, stored_session):
    now = datetime.utcnow()
    stored_session(created_at=now, duration_min=30, quality_rating=5)
    stored_session(created_at=now - timedelta(days=1), duration_min=20, quality_rating=4)
    stored_session(created_at=now - timedelta(days=20), duration_min=60, quality_rating=1)

    response = test_client.get("/api/stats")

    assert response.status_code == 200
    stats = response.json()["data"]["stats"]
    assert stats == {
        "currentStreak": 2,
        "weeklyMinutes": 50,
        "weeklyAverageQuality": 4.5,
        "weeklySessionCount": 2,
        "totalSessions": 3,
        "totalMinutes": 110,
    }


def test_stats_for_empty_history(test_client):
    stats = test_client.get("/api/stats").json()["data"]["stats"]

    assert stats["currentStreak"] == 0
    assert stats["weeklyAverageQuality"] is None
    assert stats["totalMinutes"] == 0


def test_bpm_evolution_is_oldest_first_and_filtered(test_client, stored_session):
    now = datetime.utcnow()
    stored_session(created_at=now, bpm_target=90, bpm_achieved=85, technical_focus="Ritmo")
    stored_session(created_at=now - timedelta(days=3), bpm_target=80, bpm_achieved=None)
    stored_session(created_at=now - timedelta(days=1), bpm_target=None, bpm_achieved=None)

    points = test_client.get("/api/stats/bpm-evolution").json()["data"]["points"]
    assert [(p["target"], p["achieved"]) for p in points] == [(80, None), (90, 85)]

    points = test_client.get("/api/stats/bpm-evolution", params={"technicalFocus": "Ritmo"}).json()["data"]["points"]
    assert len(points) == 1
    assert points[0]["microObjective"]


def test_kaizen_and_weekly_reflection(test_client, stored_session):
    stored_session(mindset_checklist=None)

    suggestion = test_client.get("/api/stats/kaizen").json()["data"]["suggestion"]
    assert "practicar lento" in suggestion

    reflection = test_client.get("/api/stats/weekly-reflection").json()["data"]
    assert set(reflection) == {"question1", "question2"}


def test_milestones(db_session, stored_session):
    today = datetime.utcnow()
    first = stored_session(created_at=today - timedelta(days=6), duration_min=500)
    service = StatsService(db_session)
    assert service.detect_milestone(first) == "first_session"

    for days_ago in range(5, 0, -1):
        stored_session(created_at=today - timedelta(days=days_ago), duration_min=10)
    seventh = stored_session(created_at=today, duration_min=10)
    assert service.detect_milestone(seventh, today.date()) == "streak_7"

    same_day = stored_session(created_at=today, duration_min=60)
    assert service.detect_milestone(same_day, today.date()) == "total_hours_10"
