"""
Tests for the SQLAlchemy profile and metrics stores.

Uses the in-memory database from conftest; each test starts on an empty schema.
"""
from datetime import date, datetime, timedelta, timezone

import pytest

from models import (
    BiologicalSex,
    HeartRateZonesTimeSeries,
    HeightTimeSeries,
    UserPhysicalProfile,
    WeightTimeSeries,
)
from services.heart_rate_zones import HeartRateZoneCalculator
from services.repositories import (
    SqlAlchemyMetricsTimeSeriesRepository,
    SqlAlchemyPhysicalProfileRepository,
)

BASE_TIME = datetime(2025, 1, 10, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def profile_repo(db_session):
    return SqlAlchemyPhysicalProfileRepository(db_session)


@pytest.fixture
def metrics_repo(db_session):
    return SqlAlchemyMetricsTimeSeriesRepository(db_session)


def _weight(user_id, grams, days):
    entry = WeightTimeSeries(user_id, grams)
    entry.recorded_at = BASE_TIME + timedelta(days=days)
    return entry


def _normalize(value):
    # SQLite hands back naive datetimes
    return value.replace(tzinfo=timezone.utc) if value.tzinfo is None else value


class TestPhysicalProfileRepository:

    def _profile(self, user_id="user-1"):
        return UserPhysicalProfile(
            user_id=user_id,
            date_of_birth=date(1990, 1, 1),
            biological_sex=BiologicalSex.FEMALE,
            max_heart_rate=190,
            resting_heart_rate=55,
            height_mm=1700,
        )

    def test_add_and_get(self, profile_repo):
        profile_repo.add(self._profile())

        loaded = profile_repo.get_by_user_id("user-1")
        assert loaded is not None
        assert loaded.max_heart_rate == 190
        assert loaded.height_mm == 1700
        assert loaded.weight_g is None
        assert loaded.biological_sex == BiologicalSex.FEMALE

    def test_get_missing_returns_none(self, profile_repo):
        assert profile_repo.get_by_user_id("nobody") is None

    def test_exists(self, profile_repo):
        assert profile_repo.exists("user-1") is False
        profile_repo.add(self._profile())
        assert profile_repo.exists("user-1") is True

    def test_update_persists_changes(self, profile_repo, db_session):
        profile_repo.add(self._profile())
        profile = profile_repo.get_by_user_id("user-1")
        profile.update_weight(62000)
        profile_repo.update(profile)

        db_session.expire_all()
        assert profile_repo.get_by_user_id("user-1").weight_g == 62000

    def test_user_id_is_unique(self, profile_repo):
        profile_repo.add(self._profile())
        with pytest.raises(Exception):
            profile_repo.add(self._profile())


class TestMetricsTimeSeriesRepository:

    def test_latest_weight(self, metrics_repo):
        metrics_repo.add_weight(_weight("user-1", 70000, 0))
        metrics_repo.add_weight(_weight("user-1", 71000, 2))
        metrics_repo.add_weight(_weight("user-1", 69000, 1))

        assert metrics_repo.get_latest_weight("user-1").weight_g == 71000

    def test_latest_is_per_user(self, metrics_repo):
        metrics_repo.add_weight(_weight("user-1", 70000, 0))
        metrics_repo.add_weight(_weight("user-2", 90000, 5))

        assert metrics_repo.get_latest_weight("user-1").weight_g == 70000
        assert metrics_repo.get_latest_height("user-1") is None

    def test_history_inclusive_and_ascending(self, metrics_repo):
        for grams, days in [(73000, 3), (70000, 0), (72000, 2), (71000, 1), (74000, 4)]:
            metrics_repo.add_weight(_weight("user-1", grams, days))

        history = metrics_repo.get_weight_history(
            "user-1", BASE_TIME + timedelta(days=1), BASE_TIME + timedelta(days=3)
        )

        assert [e.weight_g for e in history] == [71000, 72000, 73000]
        recorded = [_normalize(e.recorded_at) for e in history]
        assert recorded == sorted(recorded)
        assert recorded[0] == BASE_TIME + timedelta(days=1)
        assert recorded[-1] == BASE_TIME + timedelta(days=3)

    def test_history_empty_range(self, metrics_repo):
        metrics_repo.add_weight(_weight("user-1", 70000, 0))
        history = metrics_repo.get_weight_history(
            "user-1", BASE_TIME + timedelta(days=1), BASE_TIME + timedelta(days=2)
        )
        assert history == []

    def test_height_history(self, metrics_repo):
        first = HeightTimeSeries("user-1", 1800)
        first.recorded_at = BASE_TIME
        second = HeightTimeSeries("user-1", 1805)
        second.recorded_at = BASE_TIME + timedelta(days=30)
        metrics_repo.add_height(second)
        metrics_repo.add_height(first)

        history = metrics_repo.get_height_history(
            "user-1", BASE_TIME - timedelta(days=1), BASE_TIME + timedelta(days=31)
        )
        assert [e.height_mm for e in history] == [1800, 1805]
        assert metrics_repo.get_latest_height("user-1").height_mm == 1805

    def test_heart_rate_zones_snapshot_roundtrip(self, metrics_repo, db_session):
        zones = HeartRateZoneCalculator().calculate(190, 60)
        metrics_repo.add_heart_rate_zones(HeartRateZonesTimeSeries("user-1", zones))

        db_session.expire_all()
        latest = metrics_repo.get_latest_heart_rate_zones("user-1")
        assert latest.max_heart_rate == 190
        assert latest.resting_heart_rate == 60
        assert latest.heart_rate_zones == zones

    def test_heart_rate_zones_history(self, metrics_repo):
        calculator = HeartRateZoneCalculator()
        for days, max_hr in [(0, 190), (10, 188)]:
            entry = HeartRateZonesTimeSeries("user-1", calculator.calculate(max_hr))
            entry.recorded_at = BASE_TIME + timedelta(days=days)
            metrics_repo.add_heart_rate_zones(entry)

        history = metrics_repo.get_heart_rate_zones_history(
            "user-1", BASE_TIME, BASE_TIME + timedelta(days=10)
        )
        assert [e.max_heart_rate for e in history] == [190, 188]
