"""Tests for detecting active parcels outside opening hours."""

import pytest

from app.core.zoned_clock import ZonedClock
from app.domain.outside_hours import (
    active_parcels,
    count_outside_hours_parcels,
    filter_outside_hours_parcels,
    is_active_parcel,
)
from tests.helpers.pickups import parcel_info, schedule_info, weekdays

NOW = ZonedClock("2025-06-10T12:00:00Z")
SCHEDULES = [schedule_info("2025-06-01", "2025-06-30", weekdays("10:00", "16:00"))]


@pytest.mark.unit
class TestOutsideHours:
    def test_only_active_parcels_outside_hours_are_counted(self):
        parcels = [
            parcel_info("inside", "2025-06-11", "10:00"),
            parcel_info("late", "2025-06-11", "17:00"),
            parcel_info("collected", "2025-06-11", "17:00", is_picked_up=True),
            parcel_info("past", "2025-06-09", "17:00"),
            parcel_info("saturday", "2025-06-14", "12:00"),
        ]
        outside = filter_outside_hours_parcels(parcels, SCHEDULES, NOW)
        assert [parcel.id for parcel in outside] == ["late", "saturday"]
        assert count_outside_hours_parcels(parcels, SCHEDULES, NOW) == 2

    def test_window_crossing_closing_time_is_outside(self):
        parcels = [parcel_info("crossing", "2025-06-11", "15:55", minutes=15)]
        assert count_outside_hours_parcels(parcels, SCHEDULES, NOW) == 1

    def test_parcel_starting_now_is_not_active(self):
        starting_now = parcel_info("now", "2025-06-10", "14:00")
        assert not is_active_parcel(starting_now, NOW)
        assert is_active_parcel(starting_now, NOW.add_minutes(-1))

    def test_active_parcels_accepts_datetimes(self):
        parcels = [parcel_info("a", "2025-06-11", "10:00")]
        assert active_parcels(parcels, NOW.instant) == parcels
