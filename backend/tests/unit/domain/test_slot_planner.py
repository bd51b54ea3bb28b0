"""Tests for the pickup slot grid."""

from datetime import date

import pytest

from app.core.config import settings
from app.core.enums import Weekday
from app.core.zoned_clock import ZonedClock
from app.domain.location_availability import TimeRange
from app.domain.slot_planner import SlotPlan, plan_slots, plan_slots_for_date, slot_start_for
from tests.helpers.pickups import schedule_info, weekdays


@pytest.mark.unit
class TestSlotPlan:
    def test_slots_end_by_closing_time(self):
        plan = SlotPlan("10:00", "11:00", 15)
        assert list(plan) == ["10:00", "10:15", "10:30", "10:45"]
        assert len(plan) == 4

    def test_partial_last_slot_is_dropped(self):
        plan = SlotPlan("10:00", "11:10", 30)
        assert list(plan) == ["10:00", "10:30"]
        assert len(plan) == 2

    def test_plan_is_restartable(self):
        plan = SlotPlan("10:00", "10:30", 15)
        assert list(plan) == list(plan)

    def test_closed_plan_is_empty(self):
        plan = SlotPlan(None, None, 15)
        assert list(plan) == []
        assert len(plan) == 0

    @pytest.mark.parametrize("duration", [0, -15])
    def test_non_positive_duration_is_rejected(self, duration: int):
        with pytest.raises(ValueError):
            SlotPlan("10:00", "11:00", duration)

    def test_default_duration_comes_from_settings(self, monkeypatch):
        monkeypatch.setattr(settings, "default_slot_duration_minutes", 20)
        assert plan_slots(TimeRange("10:00", "11:00")).slot_duration_minutes == 20
        assert SlotPlan("10:00", "11:00").slot_duration_minutes == 20


@pytest.mark.unit
class TestPlanForDate:
    def test_open_day(self):
        schedules = [schedule_info("2025-06-01", "2025-06-30", weekdays("09:00", "10:00"))]
        plan = plan_slots_for_date("2025-06-10", schedules, 20)
        assert list(plan) == ["09:00", "09:20", "09:40"]

    def test_closed_day(self):
        schedules = [
            schedule_info("2025-06-01", "2025-06-30", {Weekday.MONDAY: ("09:00", "10:00")})
        ]
        assert list(plan_slots_for_date("2025-06-10", schedules)) == []

    def test_slot_start_for(self):
        plan = SlotPlan("10:00", "11:00", 15)
        assert slot_start_for("10:20", plan) == "10:15"
        assert slot_start_for("10:00", plan) == "10:00"
        assert slot_start_for("11:00", plan) is None


# Tuesday 2025-06-10 14:00 in Stockholm.
NOW = ZonedClock("2025-06-10T12:00:00Z")


@pytest.mark.unit
class TestStartedSlotsAreDropped:
    def test_today_keeps_only_slots_after_now(self):
        plan = SlotPlan("10:00", "16:00", 15, day=date(2025, 6, 10), now=NOW)
        slots = list(plan)
        assert "10:00" not in slots
        assert "14:00" not in slots
        assert slots[0] == "14:15"
        assert slots[-1] == "15:45"
        assert len(plan) == 7

    def test_slot_starting_later_this_minute_is_kept(self):
        now = ZonedClock("2025-06-10T11:59:30Z")
        plan = SlotPlan("10:00", "16:00", 15, day=date(2025, 6, 10), now=now)
        assert list(plan)[0] == "14:00"

    def test_past_day_has_no_slots(self):
        plan = SlotPlan("10:00", "16:00", 15, day=date(2025, 6, 9), now=NOW)
        assert list(plan) == []
        assert len(plan) == 0

    def test_future_day_keeps_every_slot(self):
        plan = SlotPlan("10:00", "16:00", 15, day=date(2025, 6, 11), now=NOW)
        assert len(plan) == 24
        assert list(plan)[0] == "10:00"

    def test_filtered_plan_is_restartable(self):
        plan = SlotPlan("10:00", "16:00", 15, day=date(2025, 6, 10), now=NOW)
        assert list(plan) == list(plan)

    def test_now_needs_a_day(self):
        with pytest.raises(ValueError):
            SlotPlan("10:00", "16:00", 15, now=NOW)

    def test_plan_for_date_applies_now(self):
        schedules = [schedule_info("2025-06-01", "2025-06-30", weekdays("10:00", "16:00"))]
        today = plan_slots_for_date("2025-06-10", schedules, 30, now=NOW)
        tomorrow = plan_slots_for_date("2025-06-11", schedules, 30, now=NOW)
        assert list(today) == ["14:30", "15:00", "15:30"]
        assert list(tomorrow)[0] == "10:00"
