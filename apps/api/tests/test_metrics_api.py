"""
API tests for the metrics history endpoints.
"""
from datetime import date, datetime, timedelta, timezone

import pytest

from core.events import EventBus, EVENT_HEART_RATE_ZONES_CALCULATED, get_event_bus
from models import WeightTimeSeries
from services.repositories import SqlAlchemyMetricsTimeSeriesRepository


def _onboard(client, auth_headers, **fields):
    payload = {
        "date_of_birth": date(date.today().year - 30, 1, 1).isoformat(),
        "biological_sex": "female",
    }
    payload.update(fields)
    response = client.post("/v1/onboarding/user-info", json=payload, headers=auth_headers)
    assert response.json()["success"] is True


@pytest.mark.parametrize("metric", ["heart-rate-zones", "weight", "height"])
def test_latest_not_found(client, auth_headers, metric):
    response = client.get(f"/v1/metrics/{metric}/latest", headers=auth_headers)
    assert response.status_code == 404


@pytest.mark.parametrize("metric", ["heart-rate-zones", "weight", "height"])
def test_requires_token(client, metric):
    assert client.get(f"/v1/metrics/{metric}/latest").status_code == 401
    assert client.get(f"/v1/metrics/{metric}/history").status_code == 401


def test_latest_heart_rate_zones(client, auth_headers):
    _onboard(client, auth_headers, resting_heart_rate=60)

    response = client.get("/v1/metrics/heart-rate-zones/latest", headers=auth_headers)

    assert response.status_code == 200
    data = response.json()
    assert data["max_heart_rate"] == 190
    assert data["resting_heart_rate"] == 60
    assert data["uses_heart_rate_reserve"] is True
    assert [z["name"] for z in data["zones"]] == [
        "Zone 1 - Recovery",
        "Zone 2 - Aerobic",
        "Zone 3 - Tempo",
        "Zone 4 - Threshold",
        "Zone 5 - VO2Max",
    ]
    assert data["zones"][0]["lower_bound"] == 125
    assert data["zones"][-1]["upper_bound"] == 190


def test_recalculate_requires_profile(client, auth_headers):
    response = client.post("/v1/metrics/heart-rate-zones/recalculate", headers=auth_headers)
    assert response.status_code == 404
    assert response.json()["error_code"] == "NOT_FOUND"


def test_recalculate_requires_token(client):
    assert client.post("/v1/metrics/heart-rate-zones/recalculate").status_code == 401


def test_recalculate_appends_snapshot(client, auth_headers, user_id):
    from main import app

    bus = EventBus()
    received = []
    bus.subscribe(EVENT_HEART_RATE_ZONES_CALCULATED, lambda **kw: received.append(kw))
    app.dependency_overrides[get_event_bus] = lambda: bus
    _onboard(client, auth_headers, resting_heart_rate=60)

    response = client.post("/v1/metrics/heart-rate-zones/recalculate", headers=auth_headers)

    assert response.status_code == 200
    data = response.json()
    assert data["max_heart_rate"] == 190
    assert data["resting_heart_rate"] == 60
    assert data["zones"][0]["lower_bound"] == 125

    latest = client.get("/v1/metrics/heart-rate-zones/latest", headers=auth_headers).json()
    assert latest["id"] == data["id"]
    history = client.get("/v1/metrics/heart-rate-zones/history", headers=auth_headers).json()
    assert len(history) == 2
    # one from onboarding, one from the recalculation
    assert [e["user_id"] for e in received] == [user_id, user_id]


def test_latest_weight_and_height(client, auth_headers):
    _onboard(client, auth_headers, weight=62.5, height=170)

    weight = client.get("/v1/metrics/weight/latest", headers=auth_headers).json()
    height = client.get("/v1/metrics/height/latest", headers=auth_headers).json()

    assert weight["weight_g"] == 62500
    assert weight["weight_kg"] == pytest.approx(62.5)
    assert height["height_mm"] == 1700
    assert height["height_cm"] == pytest.approx(170.0)


def test_history_defaults_to_recent_entries(client, auth_headers):
    _onboard(client, auth_headers, weight=60)
    _onboard(client, auth_headers, weight=61)

    response = client.get("/v1/metrics/weight/history", headers=auth_headers)

    assert response.status_code == 200
    assert [e["weight_g"] for e in response.json()] == [60000, 61000]

    zones = client.get("/v1/metrics/heart-rate-zones/history", headers=auth_headers).json()
    assert len(zones) == 2


def test_history_explicit_range(client, auth_headers, db_session, user_id):
    repo = SqlAlchemyMetricsTimeSeriesRepository(db_session)
    base = datetime(2025, 3, 1, tzinfo=timezone.utc)
    for days, grams in [(0, 70000), (5, 70500), (10, 71000)]:
        entry = WeightTimeSeries(user_id, grams)
        entry.recorded_at = base + timedelta(days=days)
        repo.add_weight(entry)

    response = client.get(
        "/v1/metrics/weight/history",
        params={"start_date": "2025-03-01T00:00:00Z", "end_date": "2025-03-06T00:00:00Z"},
        headers=auth_headers,
    )

    assert response.status_code == 200
    assert [e["weight_g"] for e in response.json()] == [70000, 70500]


def test_history_start_after_end(client, auth_headers):
    response = client.get(
        "/v1/metrics/height/history",
        params={"start_date": "2025-03-02T00:00:00Z", "end_date": "2025-03-01T00:00:00Z"},
        headers=auth_headers,
    )
    assert response.status_code == 400
    assert response.json()["error_code"] == "VALIDATION_ERROR_START_DATE"


def test_history_is_scoped_to_caller(client, auth_headers, db_session):
    repo = SqlAlchemyMetricsTimeSeriesRepository(db_session)
    repo.add_weight(WeightTimeSeries("someone-else", 80000))

    response = client.get("/v1/metrics/weight/history", headers=auth_headers)

    assert response.json() == []
