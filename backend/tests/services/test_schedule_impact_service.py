# backend/tests/services/test_schedule_impact_service.py
"""Integration tests for ScheduleImpactService."""

import pytest

from app.core.ulid_helper import generate_ulid
from app.schemas.schedule import ScheduleInput
from app.services.schedule_impact_service import ScheduleImpactService
from tests.helpers.pickups import local, schedule_payload, weekdays


@pytest.fixture
def service(db, time_provider):
    return ScheduleImpactService(db, time_provider)


@pytest.fixture
def june_schedule(location, make_schedule):
    return make_schedule(location, "2025-06-01", "2025-06-30", weekdays("10:00", "16:00"))


@pytest.fixture
def booked(location, household, make_parcel, june_schedule):
    return [
        make_parcel(household, location, local("2025-06-11", "11:00")),
        make_parcel(household, location, local("2025-06-12", "15:00")),
    ]


@pytest.mark.usefixtures("booked")
class TestScheduleChangeImpact:
    def test_shrinking_an_existing_schedule(self, service, location, june_schedule):
        proposed = ScheduleInput.model_validate(schedule_payload(closing="14:00"))
        result = service.check_parcels_affected_by_schedule_change(
            location.id, proposed, exclude_schedule_id=june_schedule.id
        )
        assert result.success
        assert result.affected_count == 1

    def test_new_schedule_strands_nothing(self, service, location):
        proposed = ScheduleInput.model_validate(schedule_payload(closing="14:00"))
        result = service.check_parcels_affected_by_schedule_change(location.id, proposed)
        assert result.affected_count == 0

    def test_unknown_schedule(self, service, location):
        proposed = ScheduleInput.model_validate(schedule_payload())
        result = service.check_parcels_affected_by_schedule_change(
            location.id, proposed, exclude_schedule_id=generate_ulid()
        )
        assert result.first_error_code == "SCHEDULE_NOT_FOUND"

    def test_schedule_of_another_location(self, service, june_schedule, make_location):
        annex = make_location()
        proposed = ScheduleInput.model_validate(schedule_payload())
        result = service.check_parcels_affected_by_schedule_change(
            annex.id, proposed, exclude_schedule_id=june_schedule.id
        )
        assert result.first_error_code == "SCHEDULE_NOT_FOUND"


@pytest.mark.usefixtures("booked")
class TestScheduleDeletionImpact:
    def test_deleting_the_only_schedule(self, service, location, june_schedule):
        result = service.check_parcels_affected_by_schedule_deletion(location.id, june_schedule.id)
        assert result.success
        assert result.affected_count == 2

    def test_overlapping_schedule_keeps_parcels(
        self, service, location, june_schedule, make_schedule
    ):
        make_schedule(location, "2025-06-01", "2025-06-30", weekdays("08:00", "18:00"))
        result = service.check_parcels_affected_by_schedule_deletion(location.id, june_schedule.id)
        assert result.affected_count == 0

    def test_unknown_location(self, service, june_schedule):
        result = service.check_parcels_affected_by_schedule_deletion(
            generate_ulid(), june_schedule.id
        )
        assert result.first_error_code == "LOCATION_NOT_FOUND"
