"""Integration tests for the daily habits checklist."""
from __future__ import annotations

from datetime import date, timedelta

from app.models.database_models import DailyHabit
from app.services.stats_service import calculate_habit_streak


def _habit(day: date, warmup=True, chords=True, lesson=True) -> DailyHabit:
    return DailyHabit(date=day, warmup_done=warmup, chords_done=chords, class_done=lesson)


def test_unsaved_day_returns_empty_structure(test_client):
    response = test_client.get("/api/habits", params={"date": "2025-10-05"})

    assert response.status_code == 200
    assert response.json()["data"] == {
        "date": "2025-10-05",
        "warmup": {"done": False, "durationMin": None},
        "chords": {"done": False, "durationMin": None, "bpm": None, "notes": None},
        "class": {"done": False, "durationMin": None},
    }


def test_habits_upsert_by_date(test_client):
    body = {
        "date": "2025-10-05",
        "warmup": {"done": True, "durationMin": 10},
        "chords": {"done": True, "durationMin": 15, "bpm": 70, "notes": "G -> C"},
        "class": {"done": False},
    }
    assert test_client.post("/api/habits", json=body).status_code == 200

    body["class"] = {"done": True, "durationMin": 60}
    response = test_client.post("/api/habits", json=body)

    data = response.json()["data"]
    assert data["class"] == {"done": True, "durationMin": 60}
    assert data["chords"]["notes"] == "G -> C"
    assert test_client.get("/api/habits", params={"date": "2025-10-05"}).json()["data"] == data


def test_invalid_dates_are_rejected(test_client):
    assert test_client.get("/api/habits", params={"date": "05/10/2025"}).status_code == 400
    assert test_client.post("/api/habits", json={"warmup": {"done": True}}).status_code == 400
    assert test_client.get("/api/habits/month", params={"month": "2025-13"}).status_code == 400


def test_month_view_lists_days_and_stats(test_client, db_session):
    db_session.add_all(
        [
            _habit(date(2025, 9, 30)),
            _habit(date(2025, 10, 1), lesson=False),
            _habit(date(2025, 10, 2)),
            _habit(date(2025, 10, 3)),
            _habit(date(2025, 11, 1)),
        ]
    )
    db_session.commit()

    response = test_client.get("/api/habits/month", params={"month": "2025-10"})

    data = response.json()["data"]
    assert data["month"] == "2025-10"
    assert [d["date"] for d in data["days"]] == ["2025-10-03", "2025-10-02", "2025-10-01"]
    assert data["stats"] == {
        "warmupCount": 3,
        "chordsCount": 3,
        "classCount": 2,
        "totalDays": 3,
        "currentStreak": 2,
    }


def test_habit_streak_skips_future_days():
    today = date(2025, 10, 10)
    rows = [
        _habit(today + timedelta(days=1), warmup=False),
        _habit(today),
        _habit(today - timedelta(days=1)),
        _habit(today - timedelta(days=2), chords=False),
        _habit(today - timedelta(days=3)),
    ]

    assert calculate_habit_streak(rows, today) == 2
