"""Tests for opening-hours resolution over dated, overlapping schedules."""

from datetime import date

import pytest

from app.core.enums import AvailabilityReason, Weekday
from app.core.zoned_clock import ZonedClock
from app.domain.location_availability import (
    covers,
    get_available_time_range,
    is_date_available,
    is_instant_available,
    is_time_available,
    is_window_available,
    to_zoned,
)
from tests.helpers.pickups import local, schedule_info, weekdays

JUNE = schedule_info("2025-06-01", "2025-06-30", weekdays("10:00", "16:00"), "june")


@pytest.mark.unit
class TestDateAvailability:
    def test_open_weekday(self):
        result = is_date_available("2025-06-10", [JUNE])
        assert result.is_available
        assert (result.opening_time, result.closing_time) == ("10:00", "16:00")
        assert result.schedule_id == "june"

    def test_weekday_without_entry_is_closed(self):
        result = is_date_available("2025-06-14", [JUNE])
        assert not result.is_available
        assert result.reason == AvailabilityReason.LOCATION_CLOSED
        assert result.message == "This location is closed on Saturdays"

    def test_weekday_marked_closed(self):
        closed_tuesday = schedule_info(
            "2025-06-01",
            "2025-06-30",
            {Weekday.TUESDAY: None, Weekday.WEDNESDAY: ("10:00", "12:00")},
        )
        result = is_date_available(date(2025, 6, 10), [closed_tuesday])
        assert result.reason == AvailabilityReason.LOCATION_CLOSED
        assert result.message == "This location is closed on Tuesdays"

    def test_no_covering_schedule(self):
        result = is_date_available("2025-07-01", [JUNE])
        assert result.reason == AvailabilityReason.NO_SCHEDULE
        assert result.message == "This location has no scheduled opening hours for this date"

    def test_no_schedules_at_all(self):
        assert is_date_available("2025-06-10", []).reason == AvailabilityReason.NO_SCHEDULE

    def test_overlapping_schedules_are_a_union(self):
        saturdays = schedule_info(
            "2025-06-10", "2025-06-20", {Weekday.SATURDAY: ("11:00", "13:00")}, "extra"
        )
        result = is_date_available("2025-06-14", [JUNE, saturdays])
        assert result.is_available
        assert (result.opening_time, result.closing_time) == ("11:00", "13:00")
        assert result.schedule_id == "extra"

    def test_schedule_covers_whole_last_local_day(self):
        ends_today = schedule_info("2025-06-01", "2025-06-10", weekdays("10:00", "16:00"))
        # 23:30 and 00:30 Stockholm time.
        assert covers(ends_today, ZonedClock("2025-06-10T21:30:00Z"))
        assert not covers(ends_today, ZonedClock("2025-06-10T22:30:00Z"))

    def test_instant_is_judged_by_its_local_day(self):
        # Sunday 22:30 UTC is already Monday in Stockholm.
        assert is_date_available(ZonedClock("2025-06-08T22:30:00Z"), [JUNE]).is_available
        assert not is_date_available(ZonedClock("2025-06-07T22:30:00Z"), [JUNE]).is_available


@pytest.mark.unit
class TestTimeAvailability:
    @pytest.mark.parametrize("time_of_day", ["10:00", "12:30", "16:00"])
    def test_opening_and_closing_are_inclusive(self, time_of_day: str):
        assert is_time_available("2025-06-10", time_of_day, [JUNE]).is_available

    @pytest.mark.parametrize("time_of_day", ["09:59", "16:01", "22:00"])
    def test_outside_hours(self, time_of_day: str):
        result = is_time_available("2025-06-10", time_of_day, [JUNE])
        assert not result.is_available
        assert result.reason == AvailabilityReason.OUTSIDE_OPERATING_HOURS
        assert result.message == "This location is only open from 10:00 to 16:00 on Tuesdays"

    def test_closed_day_reason_is_kept(self):
        result = is_time_available("2025-06-14", "12:00", [JUNE])
        assert result.reason == AvailabilityReason.LOCATION_CLOSED

    def test_first_open_schedule_decides_hours(self):
        later_hours = schedule_info(
            "2025-06-01", "2025-06-30", {Weekday.TUESDAY: ("12:00", "18:00")}
        )
        assert not is_time_available("2025-06-10", "17:00", [JUNE, later_hours]).is_available
        assert is_time_available("2025-06-10", "17:00", [later_hours, JUNE]).is_available

    def test_invalid_time_is_rejected(self):
        with pytest.raises(ValueError):
            is_time_available("2025-06-10", "7pm", [JUNE])

    def test_dst_change_day(self):
        sunday = schedule_info("2024-03-01", "2024-03-31", {Weekday.SUNDAY: ("10:00", "14:00")})
        assert is_time_available("2024-03-31", "10:00", [sunday]).is_available
        assert is_instant_available(local("2024-03-31", "13:45"), [sunday]).is_available
        assert not is_instant_available(local("2024-03-31", "14:15"), [sunday]).is_available


@pytest.mark.unit
class TestWindowsAndRanges:
    def test_window_must_fit_at_both_ends(self):
        assert is_window_available(
            local("2025-06-10", "15:45"), local("2025-06-10", "16:00"), [JUNE]
        ).is_available
        result = is_window_available(
            local("2025-06-10", "15:50"), local("2025-06-10", "16:05"), [JUNE]
        )
        assert result.reason == AvailabilityReason.OUTSIDE_OPERATING_HOURS

    def test_available_time_range(self):
        open_range = get_available_time_range("2025-06-10", [JUNE])
        assert open_range.is_open
        assert (open_range.earliest_time, open_range.latest_time) == ("10:00", "16:00")
        assert not get_available_time_range("2025-06-14", [JUNE]).is_open

    def test_to_zoned(self):
        assert to_zoned("2025-06-10") == ZonedClock.for_day(date(2025, 6, 10))
        assert to_zoned("2025-06-10T12:00:00Z") == ZonedClock("2025-06-10T12:00:00Z")
        with pytest.raises(ValueError):
            to_zoned("2025-99-99")
