"""
Tests for reference data endpoints (locations, categories, salary types,
employment contract types, application statuses).
"""

import pytest

from app.crud import lookup as lookup_crud
from app.models.associations import JobsInLocations
from app.models.lookups import Location


class TestLookupRead:

    def test_list_locations_sorted_by_name(self, client, lookups):
        response = client.get("/api/v1/locations/")

        assert response.status_code == 200
        data = response.json()["data"]
        assert [loc["name"] for loc in data["locations"]] == ["Leeds", "London", "Manchester"]
        assert data["totalRecords"] == 3

    def test_search_and_order(self, client, lookups):
        response = client.get("/api/v1/locations/", params={"q": "l", "order": "desc"})

        assert [loc["name"] for loc in response.json()["data"]["locations"]] == ["London", "Leeds"]

    def test_find_category_includes_description(self, client, lookups):
        response = client.get(f"/api/v1/job-categories/{lookups.engineering.id}")

        assert response.status_code == 200
        category = response.json()["data"]["category"]
        assert category["name"] == "Engineering"
        assert category["description"] == "Software and hardware"

    def test_find_missing_salary_type(self, client, lookups):
        response = client.get("/api/v1/salary-types/9999")

        assert response.status_code == 404
        assert response.json()["message"] == "salary type not found"

    def test_locations_of_a_job(self, client, lookups, make_job):
        job = make_job(locations=[lookups.manchester.id, lookups.london.id])

        response = client.get(f"/api/v1/locations/jobs/{job.id}")

        assert [loc["name"] for loc in response.json()["data"]["locations"]] == ["London", "Manchester"]

    def test_contract_type_of_a_job(self, client, lookups, make_job):
        job = make_job(employment_contract_type_id=lookups.contract.id)

        response = client.get(f"/api/v1/employment-contract-types/jobs/{job.id}")

        types = response.json()["data"]["employmentContractTypes"]
        assert [t["name"] for t in types] == ["Contract"]

    def test_statuses_list(self, client, lookups):
        response = client.get("/api/v1/job-application-statuses/")

        names = [s["name"] for s in response.json()["data"]["jobApplicationStatuses"]]
        assert names == ["shortlisted", "submitted", "withdrawn"]


class TestLookupWrite:

    def test_create_location(self, client, recruiter_headers):
        response = client.post("/api/v1/locations/", json={"name": "Bristol"}, headers=recruiter_headers)

        assert response.status_code == 201
        assert response.json()["data"]["location"]["name"] == "Bristol"

    def test_create_duplicate_name(self, client, lookups, recruiter_headers):
        response = client.post("/api/v1/locations/", json={"name": "London"}, headers=recruiter_headers)

        assert response.status_code == 409

    def test_job_seeker_cannot_create(self, client, user_headers):
        response = client.post("/api/v1/salary-types/", json={"name": "Daily"}, headers=user_headers)

        assert response.status_code == 403

    def test_update_category(self, client, lookups, recruiter_headers):
        response = client.put(
            f"/api/v1/job-categories/{lookups.design.id}",
            json={"name": "Product Design", "description": "UX and UI"},
            headers=recruiter_headers,
        )

        category = response.json()["data"]["category"]
        assert category["name"] == "Product Design"
        assert category["description"] == "UX and UI"

    def test_update_without_details(self, client, lookups, recruiter_headers):
        response = client.put(f"/api/v1/locations/{lookups.leeds.id}", json={}, headers=recruiter_headers)

        assert response.status_code == 400

    def test_rename_to_existing_name(self, client, lookups, recruiter_headers):
        response = client.put(
            f"/api/v1/locations/{lookups.leeds.id}",
            json={"name": "London"},
            headers=recruiter_headers,
        )

        assert response.status_code == 409

    def test_update_null_name_rejected(self, client, lookups, recruiter_headers):
        response = client.put(
            f"/api/v1/locations/{lookups.leeds.id}",
            json={"name": None},
            headers=recruiter_headers,
        )

        assert response.status_code == 400
        assert [err["field"] for err in response.json()["errors"]] == ["name"]
        assert client.get(f"/api/v1/locations/{lookups.leeds.id}").json()["data"]["location"]["name"] == "Leeds"

    def test_concurrent_rename_to_taken_name(self, client, lookups, recruiter_headers, monkeypatch):
        # Another request claimed the name after the uniqueness pre-check
        monkeypatch.setattr(lookup_crud, "get_by_name", lambda db, model, name: None)

        response = client.put(
            f"/api/v1/locations/{lookups.leeds.id}",
            json={"name": "London"},
            headers=recruiter_headers,
        )

        assert response.status_code == 409
        assert client.get(f"/api/v1/locations/{lookups.leeds.id}").status_code == 200

    def test_delete_location_removes_job_links(self, client, db_session, lookups, make_job, recruiter_headers):
        job = make_job(locations=[lookups.london.id, lookups.leeds.id])
        london_id = lookups.london.id

        response = client.delete(f"/api/v1/locations/{london_id}", headers=recruiter_headers)

        assert response.status_code == 200
        assert db_session.query(Location).filter(Location.id == london_id).first() is None
        remaining = {row.location_id for row in db_session.query(JobsInLocations).filter_by(job_id=job.id)}
        assert remaining == {lookups.leeds.id}

    @pytest.mark.parametrize("path, attr", [
        ("salary-types", "annual"),
        ("employment-contract-types", "permanent"),
    ])
    def test_delete_type_in_use(self, client, lookups, make_job, recruiter_headers, path, attr):
        make_job()

        response = client.delete(f"/api/v1/{path}/{getattr(lookups, attr).id}", headers=recruiter_headers)

        assert response.status_code == 400
        assert "in use" in response.json()["message"]

    def test_delete_unused_salary_type(self, client, lookups, recruiter_headers):
        response = client.delete(f"/api/v1/salary-types/{lookups.hourly.id}", headers=recruiter_headers)

        assert response.status_code == 200
        assert response.json()["data"] == {"deleted": 1}
