# backend/tests/services/test_outside_hours_service.py
"""Integration tests for the outside-hours counter."""

import pytest

from app.core.exceptions import RepositoryException
from app.models import PickupLocation
from app.services.outside_hours_service import OutsideHoursService
from tests.helpers.pickups import local, weekdays


@pytest.fixture
def service(db, time_provider):
    return OutsideHoursService(db, time_provider)


@pytest.fixture
def june_schedule(location, make_schedule):
    return make_schedule(location, "2025-06-01", "2025-06-30", weekdays("10:00", "16:00"))


@pytest.mark.usefixtures("june_schedule")
class TestOutsideHoursService:
    def test_recompute_counts_active_parcels_only(
        self, service, db, location, household, make_household, make_parcel
    ):
        late = make_parcel(household, location, local("2025-06-11", "17:00"))
        make_parcel(household, location, local("2025-06-12", "10:00"))
        make_parcel(make_household(), location, local("2025-06-11", "17:00"), is_picked_up=True)
        make_parcel(household, location, local("2025-06-09", "17:00"))

        assert [parcel.id for parcel in service.get_outside_hours_parcels(location.id)] == [late.id]
        assert service.recompute_outside_hours_count(location.id) == 1
        db.expire_all()
        assert db.get(PickupLocation, location.id).outside_hours_count == 1

    def test_total_across_locations(
        self, service, location, household, make_location, make_parcel
    ):
        annex = make_location()
        make_parcel(household, location, local("2025-06-11", "17:00"))
        make_parcel(household, annex, local("2025-06-11", "12:00"))

        assert service.refresh_counts([location.id, annex.id]) == {location.id: 1, annex.id: 1}
        assert service.get_total_outside_hours_count() == 2

    def test_refresh_failure_is_reported_not_raised(self, service, location, monkeypatch):
        def fail(*args, **kwargs):
            raise RepositoryException("database went away")

        monkeypatch.setattr(service.location_repository, "set_outside_hours_count", fail)
        assert service.refresh_counts([location.id]) == {location.id: None}
