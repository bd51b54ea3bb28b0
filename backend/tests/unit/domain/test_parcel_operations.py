"""Tests for the desired-versus-stored parcel diff."""

from datetime import timedelta, timezone

import pytest

from app.core.zoned_clock import ZonedClock
from app.domain.parcel_operations import (
    DesiredParcels,
    ExistingParcel,
    TimeWindow,
    calculate_parcel_operations,
)
from tests.helpers.pickups import window

NOW = ZonedClock("2025-06-10T12:00:00Z")


def time_window(day: str, hhmm: str) -> TimeWindow:
    return TimeWindow(*window(day, hhmm))


def stored(parcel_id: str, location_id: str, day: str, hhmm: str, **kwargs) -> ExistingParcel:
    earliest, latest = window(day, hhmm)
    return ExistingParcel(parcel_id, location_id, earliest, latest, **kwargs)


def apply(existing, operations, prefix="new"):
    """Stored parcels after executing ``operations``."""
    kept = [parcel for parcel in existing if parcel.id not in operations.to_delete]
    added = [
        ExistingParcel(f"{prefix}-{index}", insert.location_id, insert.earliest, insert.latest)
        for index, insert in enumerate(operations.to_insert)
    ]
    return kept + added


@pytest.mark.unit
class TestCalculateParcelOperations:
    def test_keeps_matching_and_inserts_new(self):
        desired = [
            DesiredParcels(
                "loc-a", (time_window("2025-06-11", "10:00"), time_window("2025-06-12", "10:00"))
            )
        ]
        existing = [stored("p1", "loc-a", "2025-06-11", "10:00")]
        operations = calculate_parcel_operations(desired, existing, NOW)
        assert operations.unchanged == ["p1"]
        assert operations.to_delete == []
        assert [insert.earliest for insert in operations.to_insert] == [
            time_window("2025-06-12", "10:00").earliest
        ]

    def test_location_change_is_delete_plus_insert(self):
        desired = [DesiredParcels("loc-b", (time_window("2025-06-11", "10:00"),))]
        existing = [stored("p1", "loc-a", "2025-06-11", "10:00")]
        operations = calculate_parcel_operations(desired, existing, NOW)
        assert operations.to_delete == ["p1"]
        assert [insert.location_id for insert in operations.to_insert] == ["loc-b"]
        assert operations.location_ids == {"loc-b"}

    def test_past_windows_are_skipped_and_history_is_kept(self):
        past = time_window("2025-06-10", "09:00")
        desired = [DesiredParcels("loc-a", (past,))]
        existing = [stored("history", "loc-a", "2025-06-09", "10:00")]
        operations = calculate_parcel_operations(desired, existing, NOW)
        assert operations.skipped_past == [past]
        assert operations.to_insert == []
        assert operations.to_delete == []
        assert operations.is_noop

    def test_same_day_future_parcels_are_reconciled(self):
        desired = [DesiredParcels("loc-a", (time_window("2025-06-10", "16:00"),))]
        existing = [stored("later_today", "loc-a", "2025-06-10", "15:00")]
        operations = calculate_parcel_operations(desired, existing, NOW)
        assert operations.to_delete == ["later_today"]
        assert len(operations.to_insert) == 1

    def test_collected_parcel_is_neither_deleted_nor_reinserted(self):
        collected = stored("collected", "loc-a", "2025-06-11", "10:00", is_picked_up=True)
        desired = [DesiredParcels("loc-a", (time_window("2025-06-11", "10:00"),))]
        operations = calculate_parcel_operations(desired, [collected], NOW)
        assert operations.is_noop
        operations = calculate_parcel_operations([], [collected], NOW)
        assert operations.is_noop

    def test_duplicate_desired_windows_insert_once(self):
        slot = time_window("2025-06-11", "10:00")
        desired = [DesiredParcels("loc-a", (slot, slot)), DesiredParcels("loc-a", (slot,))]
        operations = calculate_parcel_operations(desired, [], NOW)
        assert len(operations.to_insert) == 1

    def test_windows_compare_as_instants(self):
        earliest, latest = window("2025-06-11", "10:00")
        stockholm_summer = timezone(timedelta(hours=2))
        shifted = TimeWindow(
            earliest.astimezone(stockholm_summer), latest.astimezone(stockholm_summer)
        )
        desired = [DesiredParcels("loc-a", (shifted,))]
        existing = [ExistingParcel("p1", "loc-a", earliest, latest)]
        operations = calculate_parcel_operations(desired, existing, NOW)
        assert operations.unchanged == ["p1"]
        assert operations.is_noop

    def test_empty_desired_set_deletes_future_parcels(self):
        existing = [
            stored("future", "loc-a", "2025-06-11", "10:00"),
            stored("past", "loc-a", "2025-06-09", "10:00"),
        ]
        operations = calculate_parcel_operations([], existing, NOW)
        assert operations.to_delete == ["future"]

    def test_reconciling_twice_is_a_noop(self):
        desired = [
            DesiredParcels("loc-a", (time_window("2025-06-11", "10:00"),)),
            DesiredParcels("loc-b", (time_window("2025-06-12", "11:00"),)),
        ]
        existing = [
            stored("p1", "loc-a", "2025-06-13", "10:00"),
            stored("p2", "loc-b", "2025-06-12", "11:00"),
        ]
        first = calculate_parcel_operations(desired, existing, NOW)
        second = calculate_parcel_operations(desired, apply(existing, first), NOW)
        assert second.is_noop


@pytest.mark.unit
def test_time_window_rejects_empty_window():
    earliest, _ = window("2025-06-11", "10:00")
    with pytest.raises(ValueError):
        TimeWindow(earliest, earliest)
