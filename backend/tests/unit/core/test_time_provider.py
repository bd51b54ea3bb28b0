"""Tests for the injected clock sources."""

from datetime import date, datetime, timedelta, timezone

import pytest

from app.core.time_provider import FixedTimeProvider, SystemTimeProvider


@pytest.mark.unit
class TestFixedTimeProvider:
    def test_now_and_today(self):
        provider = FixedTimeProvider("2025-06-10T12:00:00Z")
        assert provider.now().instant == datetime(2025, 6, 10, 12, 0, tzinfo=timezone.utc)
        assert provider.today() == date(2025, 6, 10)

    def test_today_is_the_local_date(self):
        provider = FixedTimeProvider("2025-06-09T22:30:00Z")
        assert provider.today() == date(2025, 6, 10)

    def test_advance_and_set_now(self):
        provider = FixedTimeProvider("2025-06-10T12:00:00Z")
        provider.advance(90)
        assert provider.now().to_time_string() == "15:30"
        provider.set_now("2025-01-01T00:00:00Z")
        assert provider.today() == date(2025, 1, 1)


@pytest.mark.unit
def test_system_time_provider_tracks_the_wall_clock():
    before = datetime.now(timezone.utc)
    now = SystemTimeProvider().now().instant
    assert before - timedelta(seconds=1) <= now <= datetime.now(timezone.utc)
