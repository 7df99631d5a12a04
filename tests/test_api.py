"""Tests for the HTTP API."""

import asyncio

import pytest
from fastapi.testclient import TestClient

from hireflow.api.main import create_app
from tests.conftest import STRONG_RESUME, WEAK_RESUME

ADMIN = {"X-Actor-Id": "admin-1", "X-Actor-Role": "admin"}
EMPLOYER = {"X-Actor-Id": "employer-1", "X-Actor-Role": "employer"}
CANDIDATE = {"X-Actor-Id": "candidate-1", "X-Actor-Role": "candidate"}

JOB_PAYLOAD = {
    "title": "Backend Engineer",
    "description": "Build and run APIs",
    "requirements": "Backend experience",
    "required_skills": ["Python", "Django", "PostgreSQL", "Docker"],
    "required_experience_months": 2,
    "job_type": "full-time",
}


@pytest.fixture
def client(workflow):
    return TestClient(create_app(workflow))


@pytest.fixture
def job_id(client):
    response = client.post("/api/v1/jobs", json=JOB_PAYLOAD, headers=EMPLOYER)
    assert response.status_code == 201
    return response.json()["id"]


def submit(client, job_id, text, headers=CANDIDATE):
    return client.post(
        "/api/v1/applications",
        data={"job_id": job_id},
        files={"resume": ("resume.txt", text.encode(), "text/plain")},
        headers=headers,
    )


class TestJobEndpoints:
    """Job posting and deletion."""

    def test_post_job_sets_owner(self, client, job_id):
        jobs = client.get("/api/v1/jobs").json()

        assert [job["id"] for job in jobs] == [job_id]
        assert jobs[0]["owner_id"] == "employer-1"
        assert jobs[0]["status"] == "open"

    def test_candidate_cannot_post_job(self, client):
        response = client.post("/api/v1/jobs", json=JOB_PAYLOAD, headers=CANDIDATE)

        assert response.status_code == 403

    def test_invalid_job_payload(self, client):
        response = client.post("/api/v1/jobs", json={**JOB_PAYLOAD, "title": ""}, headers=EMPLOYER)

        assert response.status_code == 422
        assert response.json()["error"] == "ValidationError"

    def test_delete_job_cascades(self, client, job_id):
        submit(client, job_id, STRONG_RESUME)

        response = client.delete(f"/api/v1/jobs/{job_id}", headers=ADMIN)

        assert response.status_code == 200
        assert response.json()["deleted_applications"] == 1
        assert client.get("/api/v1/applications", headers=ADMIN).json() == []

    def test_delete_job_reports_job_outcome(self, client, job_id):
        body = client.delete(f"/api/v1/jobs/{job_id}", headers=ADMIN).json()

        assert body["job_id"] == job_id
        assert body["job_deleted"] is True
        assert body["deleted_applications"] == 0

    def test_owner_updates_job(self, client, job_id):
        response = client.patch(
            f"/api/v1/jobs/{job_id}",
            json={"title": "Staff Engineer", "status": "closed", "salary": None},
            headers=EMPLOYER,
        )

        assert response.status_code == 200
        body = response.json()
        assert body["title"] == "Staff Engineer"
        assert body["status"] == "closed"
        assert body["owner_id"] == "employer-1"
        assert client.get("/api/v1/jobs").json() == []

    def test_other_employer_cannot_update_job(self, client, job_id):
        response = client.patch(
            f"/api/v1/jobs/{job_id}",
            json={"title": "Hijacked"},
            headers={"X-Actor-Id": "employer-2", "X-Actor-Role": "employer"},
        )

        assert response.status_code == 403
        assert response.json()["error"] == "PermissionDenied"

    def test_update_missing_job(self, client):
        response = client.patch("/api/v1/jobs/missing", json={"title": "Anything"}, headers=ADMIN)

        assert response.status_code == 404

    def test_update_rejects_invalid_values(self, client, job_id):
        response = client.patch(
            f"/api/v1/jobs/{job_id}",
            json={"required_experience_months": -1},
            headers=ADMIN,
        )

        assert response.status_code == 422

    def test_delete_missing_job(self, client):
        response = client.delete("/api/v1/jobs/missing", headers=ADMIN)

        assert response.status_code == 404
        assert response.json()["details"]["entity"] == "job"


class TestApplicationEndpoints:
    """Submission and status changes."""

    def test_admitted_submission(self, client, job_id):
        response = submit(client, job_id, STRONG_RESUME)

        assert response.status_code == 201
        body = response.json()
        assert body["message"] == "Application submitted successfully"
        assert body["skill_match"] == 100
        assert body["experience_match"] is True
        assert body["application"]["status"] == "applied"
        assert body["application"]["candidate_id"] == "candidate-1"

    def test_submission_runs_outside_event_loop(self, client, job_id, workflow):
        real_submit = workflow.submit_application
        loop_running = []

        def recording_submit(*args, **kwargs):
            try:
                asyncio.get_running_loop()
                loop_running.append(True)
            except RuntimeError:
                loop_running.append(False)
            return real_submit(*args, **kwargs)

        workflow.submit_application = recording_submit

        assert submit(client, job_id, STRONG_RESUME).status_code == 201
        # Blocking extraction and storage must not run on the event loop thread
        assert loop_running == [False]

    def test_rejected_submission(self, client, job_id):
        response = submit(client, job_id, WEAK_RESUME)

        assert response.status_code == 400
        body = response.json()
        assert body["message"] == "Your skills or experience do not meet the job requirements"
        assert body["skill_match"] == 0
        assert body["application"] is None

    def test_duplicate_submission(self, client, job_id):
        submit(client, job_id, STRONG_RESUME)

        response = submit(client, job_id, STRONG_RESUME)

        assert response.status_code == 409
        assert response.json()["error"] == "DuplicateApplication"

    def test_unknown_job(self, client):
        assert submit(client, "missing", STRONG_RESUME).status_code == 404

    def test_unreadable_resume(self, client, job_id):
        response = client.post(
            "/api/v1/applications",
            data={"job_id": job_id},
            files={"resume": ("resume.pdf", b"%PDF-1.4 broken", "application/pdf")},
            headers=CANDIDATE,
        )

        assert response.status_code == 400
        assert response.json()["error"] == "DocumentUnreadable"

    def test_missing_actor_header(self, client, job_id):
        response = submit(client, job_id, STRONG_RESUME, headers={})

        assert response.status_code == 401

    def test_status_transition(self, client, job_id):
        application_id = submit(client, job_id, STRONG_RESUME).json()["application"]["id"]

        response = client.patch(
            f"/api/v1/applications/{application_id}/status",
            json={"status": "interviewing"},
            headers=EMPLOYER,
        )

        assert response.status_code == 200
        assert response.json()["status"] == "interviewing"

    def test_invalid_transition(self, client, job_id):
        application_id = submit(client, job_id, STRONG_RESUME).json()["application"]["id"]

        response = client.patch(
            f"/api/v1/applications/{application_id}/status",
            json={"status": "selected"},
            headers=ADMIN,
        )

        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "InvalidTransition"
        assert body["details"] == {"current": "applied", "requested": "selected"}

    def test_candidate_cannot_transition(self, client, job_id):
        application_id = submit(client, job_id, STRONG_RESUME).json()["application"]["id"]

        response = client.patch(
            f"/api/v1/applications/{application_id}/status",
            json={"status": "interviewing"},
            headers=CANDIDATE,
        )

        assert response.status_code == 403

    def test_my_applications(self, client, job_id):
        submit(client, job_id, STRONG_RESUME)

        mine = client.get("/api/v1/applications/mine", headers=CANDIDATE).json()
        theirs = client.get(
            "/api/v1/applications/mine",
            headers={"X-Actor-Id": "candidate-2"},
        ).json()

        assert len(mine) == 1
        assert theirs == []

    def test_delete_application(self, client, job_id):
        application_id = submit(client, job_id, STRONG_RESUME).json()["application"]["id"]

        assert client.delete(f"/api/v1/applications/{application_id}", headers=ADMIN).status_code == 200
        assert client.get(f"/api/v1/applications/{application_id}", headers=ADMIN).status_code == 404


class TestStatsEndpoints:
    """Aggregation views."""

    def test_application_stats(self, client, job_id):
        submit(client, job_id, STRONG_RESUME)

        body = client.get("/api/v1/applications/stats", headers=ADMIN).json()

        assert body["total"] == 1
        assert body["by_status"] == {
            "applied": 1,
            "interviewing": 0,
            "underConsideration": 0,
            "selected": 0,
            "rejected": 0,
        }

    def test_stats_require_admin(self, client):
        assert client.get("/api/v1/applications/stats", headers=EMPLOYER).status_code == 403

    def test_job_stats(self, client, job_id):
        submit(client, job_id, STRONG_RESUME)

        entries = client.get("/api/v1/jobs/stats", headers=ADMIN).json()

        assert entries[0]["job_id"] == job_id
        assert entries[0]["application_count"] == 1


def test_health(client):
    body = client.get("/api/v1/health").json()

    assert body["status"] == "healthy"
    assert body["storage"] == "InMemoryApplicationRepository"
