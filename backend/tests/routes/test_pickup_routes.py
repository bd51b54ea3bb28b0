# backend/tests/routes/test_pickup_routes.py
"""
HTTP tests for the pickup scheduling API.

Run with: pytest backend/tests/routes/test_pickup_routes.py -v
"""

import pytest

from app.core.ulid_helper import generate_ulid
from tests.helpers.pickups import local, schedule_payload, weekdays, window_payload

API = "/api/v1"


@pytest.fixture
def june_schedule(location, make_schedule):
    return make_schedule(location, "2025-06-01", "2025-06-30", weekdays("10:00", "16:00"))


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


@pytest.mark.usefixtures("june_schedule")
class TestAvailabilityRoutes:
    def test_available(self, client, location):
        response = client.get(
            f"{API}/pickup-locations/{location.id}/availability", params={"date": "2025-06-10"}
        )
        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["available"] is True
        assert body["opening_time"] == "10:00"

    def test_unavailable_time_is_still_200(self, client, location):
        response = client.get(
            f"{API}/pickup-locations/{location.id}/availability",
            params={"date": "2025-06-10", "time": "17:00"},
        )
        assert response.status_code == 200
        assert response.json()["reason"] == "OUTSIDE_OPERATING_HOURS"

    def test_unknown_location_is_404_problem(self, client):
        response = client.get(
            f"{API}/pickup-locations/{generate_ulid()}/availability", params={"date": "2025-06-10"}
        )
        assert response.status_code == 404
        assert response.headers["content-type"].startswith("application/problem+json")
        body = response.json()
        assert body["code"] == "LOCATION_NOT_FOUND"
        assert body["errors"][0]["field"] == "location_id"

    def test_invalid_date_is_400(self, client, location):
        response = client.get(
            f"{API}/pickup-locations/{location.id}/availability", params={"date": "2025-13-01"}
        )
        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_DATE"

    def test_time_slots(self, client, location):
        response = client.get(
            f"{API}/pickup-locations/{location.id}/time-slots", params={"date": "2025-06-11"}
        )
        assert response.status_code == 200
        assert response.json()["slots"][:2] == ["10:00", "10:15"]

    def test_time_slot_counts(self, client, location, household, make_parcel):
        make_parcel(household, location, local("2025-06-11", "10:00"))
        response = client.get(
            f"{API}/pickup-locations/{location.id}/time-slot-counts", params={"date": "2025-06-11"}
        )
        assert response.status_code == 200
        assert response.json()["counts"] == {"10:00": 1}


class TestScheduleRoutes:
    def test_create_update_delete(self, client, location):
        base = f"{API}/pickup-locations/{location.id}/schedules"
        created = client.post(base, json=schedule_payload(name="Summer"))
        assert created.status_code == 201
        schedule_id = created.json()["schedule_id"]

        updated = client.put(f"{base}/{schedule_id}", json=schedule_payload(closing="14:00"))
        assert updated.status_code == 200
        assert updated.json()["affected_count"] == 0

        deleted = client.delete(f"{base}/{schedule_id}")
        assert deleted.status_code == 200
        assert client.delete(f"{base}/{schedule_id}").status_code == 404

    def test_invalid_schedule_body_is_422(self, client, location):
        response = client.post(
            f"{API}/pickup-locations/{location.id}/schedules",
            json=schedule_payload(opening="16:00", closing="10:00"),
        )
        assert response.status_code == 422
        body = response.json()
        assert body["code"] == "VALIDATION_ERROR"
        assert body["errors"]

    def test_impact_endpoints(self, client, location, household, make_parcel, june_schedule):
        make_parcel(household, location, local("2025-06-11", "15:00"))
        base = f"{API}/pickup-locations/{location.id}/schedules"

        change = client.post(
            f"{base}/impact",
            params={"exclude_schedule_id": june_schedule.id},
            json=schedule_payload(closing="14:00"),
        )
        assert change.status_code == 200
        assert change.json()["affected_count"] == 1

        deletion = client.get(f"{base}/{june_schedule.id}/deletion-impact")
        assert deletion.status_code == 200
        assert deletion.json()["affected_count"] == 1


@pytest.mark.usefixtures("june_schedule")
class TestHouseholdParcelRoutes:
    def test_reconcile(self, client, location, household):
        response = client.put(
            f"{API}/households/{household.id}/parcels",
            json=[{"location_id": location.id, "windows": [window_payload("2025-06-11", "10:00")]}],
        )
        assert response.status_code == 200
        assert len(response.json()["inserted_ids"]) == 1

    def test_outside_hours_is_422(self, client, location, household):
        response = client.put(
            f"{API}/households/{household.id}/parcels",
            json=[{"location_id": location.id, "windows": [window_payload("2025-06-11", "18:00")]}],
        )
        assert response.status_code == 422
        body = response.json()
        assert body["code"] == "OUTSIDE_OPERATING_HOURS"
        assert body["errors"][0]["field"] == "windows"

    def test_capacity_is_409(
        self, client, household, make_household, make_location, make_schedule, make_parcel
    ):
        small = make_location(parcels_max_per_day=1)
        make_schedule(small, "2025-06-01", "2025-06-30", weekdays("10:00", "16:00"))
        make_parcel(make_household(), small, local("2025-06-11", "12:00"))
        response = client.put(
            f"{API}/households/{household.id}/parcels",
            json=[{"location_id": small.id, "windows": [window_payload("2025-06-11", "10:00")]}],
        )
        assert response.status_code == 409
        assert response.json()["code"] == "MAX_DAILY_CAPACITY_REACHED"


@pytest.mark.usefixtures("june_schedule")
class TestFoodParcelRoutes:
    @pytest.fixture
    def parcel(self, household, location, make_parcel):
        return make_parcel(household, location, local("2025-06-11", "10:00"))

    def test_reschedule(self, client, parcel):
        response = client.patch(
            f"{API}/food-parcels/{parcel.id}/schedule",
            json={"start_time": window_payload("2025-06-11", "11:00")["earliest"]},
        )
        assert response.status_code == 200
        assert response.json()["parcel_id"] == parcel.id

    def test_pickup_and_no_show(self, client, parcel):
        assert client.post(f"{API}/food-parcels/{parcel.id}/pickup").status_code == 200
        assert client.post(f"{API}/food-parcels/{parcel.id}/no-show").status_code == 200

    def test_unknown_parcel_is_404(self, client):
        response = client.post(f"{API}/food-parcels/{generate_ulid()}/pickup")
        assert response.status_code == 404
        assert response.json()["code"] == "PARCEL_NOT_FOUND"
