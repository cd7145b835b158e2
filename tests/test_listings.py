"""
Tests for job and program listings: ownership, validation, projections, ordering.
"""

from datetime import datetime

import pytest

from talentbridge.core.errors import Forbidden, NotFound, ProfileRequired, StoreError
from talentbridge.db.tables import Job
from talentbridge.models.domain import ListingKind, Role
from talentbridge.services.listing_service import ListingService
from talentbridge.services.profile_service import ProfileService

pytestmark = pytest.mark.integration


class TestCreateJob:
    def test_owner_is_callers_profile(self, client, employer, job_payload):
        response = client.post("/api/jobs", json=job_payload, headers=employer.headers)
        assert response.status_code == 200
        body = response.json()
        assert body["employerId"] == employer.profile_id
        assert body["deadline"] == "2025-12-01"
        assert body["jobType"] == "CDI"
        assert body["employer"]["companyName"] == "Nordlys Analytics"

    def test_requires_employer_profile(self, client, make_user, job_payload):
        user = make_user(Role.employer)
        response = client.post("/api/jobs", json=job_payload, headers=user.headers)
        assert response.status_code == 400
        assert response.json() == {"msg": "Employer profile not found"}

    @pytest.mark.parametrize("field,value", [
        ("deadline", "not-a-date"),
        ("jobType", "Gig"),
        ("responsibilities", []),
        ("title", ""),
    ])
    def test_invalid_payload(self, client, employer, job_payload, field, value):
        job_payload[field] = value
        response = client.post("/api/jobs", json=job_payload, headers=employer.headers)
        assert response.status_code == 400
        assert response.json()["errors"][0]["param"] == field

    def test_missing_skills(self, client, employer, job_payload):
        job_payload["requirements"]["skills"] = []
        response = client.post("/api/jobs", json=job_payload, headers=employer.headers)
        assert response.status_code == 400
        assert response.json()["errors"][0]["param"] == "requirements.skills"


class TestUpdateJob:
    def test_owner_can_patch(self, client, employer, job):
        response = client.put(f"/api/jobs/{job['id']}", json={"title": "Data Engineer"},
                              headers=employer.headers)
        assert response.status_code == 200
        body = response.json()
        assert body["title"] == "Data Engineer"
        assert body["description"] == job["description"]
        assert body["createdAt"] == job["createdAt"]

    def test_ownership_fields_ignored(self, client, employer, job):
        response = client.put(f"/api/jobs/{job['id']}",
                              json={"employerId": 999, "id": 999, "createdAt": "2000-01-01T00:00:00"},
                              headers=employer.headers)
        assert response.status_code == 200
        body = response.json()
        assert body["id"] == job["id"]
        assert body["employerId"] == employer.profile_id
        assert body["createdAt"] == job["createdAt"]

    def test_merged_record_is_revalidated(self, client, employer, job):
        response = client.put(f"/api/jobs/{job['id']}", json={"deadline": "31/12/2025"},
                              headers=employer.headers)
        assert response.status_code == 400
        assert response.json()["errors"][0]["param"] == "deadline"

    def test_other_employer_forbidden(self, client, make_user, employer_payload, job):
        intruder = make_user(Role.employer)
        client.post("/api/users/employer", json=employer_payload, headers=intruder.headers)
        response = client.put(f"/api/jobs/{job['id']}", json={"title": "Mine now"}, headers=intruder.headers)
        assert response.status_code == 401
        assert response.json() == {"msg": "Not authorized to update this job"}

    def test_unauthenticated(self, client, job):
        assert client.put(f"/api/jobs/{job['id']}", json={"title": "x"}).status_code == 401
        assert client.delete(f"/api/jobs/{job['id']}").status_code == 401

    def test_unknown_job(self, client, employer):
        response = client.put("/api/jobs/4242", json={"title": "x"}, headers=employer.headers)
        assert response.status_code == 404
        assert response.json() == {"msg": "Job not found"}


class TestDeleteJob:
    def test_owner_deletes(self, client, employer, job):
        response = client.delete(f"/api/jobs/{job['id']}", headers=employer.headers)
        assert response.status_code == 200
        assert response.json() == {"msg": "Job removed"}
        assert client.get(f"/api/jobs/{job['id']}").status_code == 404

    @pytest.mark.unit
    def test_other_employer_forbidden(self, store, make_user, employer_payload, job):
        intruder = make_user(Role.employer)
        ProfileService(store).upsert_profile(intruder.id, Role.employer, employer_payload)
        with pytest.raises(Forbidden):
            ListingService(store, ListingKind.job).delete(job["id"], intruder.id)

    @pytest.mark.unit
    def test_employer_without_profile_forbidden(self, store, make_user, job):
        stranger = make_user(Role.employer)
        with pytest.raises(Forbidden):
            ListingService(store, ListingKind.job).delete(job["id"], stranger.id)


class TestReadJobs:
    def test_detail_has_full_employer_projection(self, client, job):
        response = client.get(f"/api/jobs/{job['id']}")
        assert response.status_code == 200
        employer = response.json()["employer"]
        assert employer["description"] == "Data consultancy"
        assert employer["contact"]["position"] == "Talent Lead"
        assert employer["socialMedia"]["linkedin"].startswith("https://")

    def test_list_has_summary_projection(self, client, job):
        response = client.get("/api/jobs")
        assert response.status_code == 200
        [listed] = response.json()
        assert set(listed["employer"]) == {"id", "companyName", "logo", "industry"}

    @pytest.mark.parametrize("raw", ["abc", "0", "-1", "1.5", "99999999999999"])
    def test_malformed_id_is_not_found(self, client, raw):
        response = client.get(f"/api/jobs/{raw}")
        assert response.status_code == 404

    @pytest.mark.unit
    def test_newest_first(self, store, employer, job_payload):
        service = ListingService(store, ListingKind.job)
        ids = [service.create(employer.id, dict(job_payload, title=f"Job {n}")).id for n in (1, 2, 3)]

        stamps = [datetime(2025, 1, 1), datetime(2025, 1, 2), datetime(2025, 1, 3)]
        with store.session() as session:
            for job_id, stamp in zip(ids, stamps):
                session.get(Job, job_id).created_at = stamp

        assert [listing.id for listing in service.list()] == list(reversed(ids))

    @pytest.mark.unit
    def test_ties_broken_by_id(self, store, employer, job_payload):
        service = ListingService(store, ListingKind.job)
        ids = [service.create(employer.id, job_payload).id for _ in range(3)]
        with store.session() as session:
            for job_id in ids:
                session.get(Job, job_id).created_at = datetime(2025, 1, 1)

        assert [listing.id for listing in service.list()] == sorted(ids, reverse=True)


class TestPrograms:
    def test_create_and_get(self, client, school, program):
        assert program["schoolId"] == school.profile_id
        assert program["startDate"] == "2025-09-15"
        assert program["school"]["name"] == "École Supérieure du Numérique"

        detail = client.get(f"/api/programs/{program['id']}").json()
        assert detail["school"]["contact"]["email"] == "admissions@esn.example.com"
        assert detail["duration"] == {"value": 2, "unit": "years"}

    def test_list(self, client, program):
        [listed] = client.get("/api/programs").json()
        assert set(listed["school"]) == {"id", "name", "logo", "location"}

    def test_employer_cannot_create_program(self, client, employer, program_payload):
        response = client.post("/api/programs", json=program_payload, headers=employer.headers)
        assert response.status_code == 401

    def test_invalid_study_mode(self, client, school, program_payload):
        program_payload["studyMode"] = "Evenings"
        response = client.post("/api/programs", json=program_payload, headers=school.headers)
        assert response.status_code == 400
        assert response.json()["errors"][0]["param"] == "studyMode"

    def test_update_by_other_school_forbidden(self, client, make_user, school_payload, program):
        other = make_user(Role.school)
        client.post("/api/users/school", json=school_payload, headers=other.headers)
        response = client.put(f"/api/programs/{program['id']}", json={"title": "x"}, headers=other.headers)
        assert response.status_code == 401
        assert response.json() == {"msg": "Not authorized to update this program"}

    @pytest.mark.unit
    def test_school_profile_required(self, store, make_user, program_payload):
        user = make_user(Role.school)
        with pytest.raises(ProfileRequired):
            ListingService(store, ListingKind.program).create(user.id, program_payload)

    @pytest.mark.unit
    def test_unknown_program(self, store):
        with pytest.raises(NotFound):
            ListingService(store, ListingKind.program).get("17")


class TestErrorMapping:
    def test_store_failure_is_server_error(self, client, app, monkeypatch):
        def fail():
            raise StoreError("select failed", RuntimeError("connection reset"))

        monkeypatch.setattr(app.state.listings[ListingKind.job], "list", fail)
        response = client.get("/api/jobs")
        assert response.status_code == 500
        assert response.json() == {"msg": "Server Error"}

    def test_non_object_body(self, client, employer):
        response = client.post("/api/jobs", json=["not", "an", "object"], headers=employer.headers)
        assert response.status_code == 400
        assert "errors" in response.json()
