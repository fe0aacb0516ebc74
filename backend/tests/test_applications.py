from datetime import timedelta

import pytest

from jobboard.utils.timestamps import utcnow


def application(email="ann@example.com", name="Ann Applicant", **extra):
    return {
        "applicant_info": {"name": name, "email": email, "phone": "303-555-0100"},
        "cover_message": "I have ten years on commercial sites.",
        **extra,
    }


@pytest.fixture
def posted_job(client, employer, job_payload):
    h, company_id = employer()
    job = client.post("/api/jobs", json=job_payload(), headers=h).json()
    return h, job


class TestSubmitApplication:
    def test_apply(self, client, posted_job):
        h, job = posted_job
        r = client.post(f"/api/public/jobs/{job['slug']}/applications", json=application())
        assert r.status_code == 201
        data = r.json()
        assert data["status"] == "new"
        assert data["job_id"] == job["id"]
        assert data["applicant_info"]["email"] == "ann@example.com"

    def test_application_count_increments(self, client, posted_job):
        h, job = posted_job
        client.post(f"/api/public/jobs/{job['slug']}/applications", json=application("a@example.com"))
        client.post(f"/api/public/jobs/{job['slug']}/applications", json=application("b@example.com"))
        assert client.get(f"/api/jobs/{job['id']}", headers=h).json()["application_count"] == 2

    def test_duplicate_email_conflicts(self, client, posted_job):
        h, job = posted_job
        url = f"/api/public/jobs/{job['slug']}/applications"
        assert client.post(url, json=application("ann@example.com")).status_code == 201
        r = client.post(url, json=application("  ANN@Example.com "))
        assert r.status_code == 409
        assert r.json()["error"] == "You have already applied to this job"
        assert client.get(f"/api/jobs/{job['id']}", headers=h).json()["application_count"] == 1

    def test_same_email_may_apply_to_other_jobs(self, client, posted_job, job_payload):
        h, job = posted_job
        other = client.post("/api/jobs", json=job_payload(title="Site Supervisor"), headers=h).json()
        assert client.post(f"/api/public/jobs/{job['slug']}/applications", json=application()).status_code == 201
        assert client.post(f"/api/public/jobs/{other['slug']}/applications", json=application()).status_code == 201

    def test_hidden_jobs_refuse_applications(self, client, seed_job):
        seed_job("Draft Job", slug="draft-job", status="draft")
        seed_job("Old Job", slug="old-job", expires_at=utcnow() - timedelta(days=1))
        for slug in ("draft-job", "old-job", "missing"):
            r = client.post(f"/api/public/jobs/{slug}/applications", json=application())
            assert r.status_code == 404

    def test_invalid_applicant(self, client, posted_job):
        _, job = posted_job
        r = client.post(
            f"/api/public/jobs/{job['slug']}/applications",
            json={"applicant_info": {"name": "A", "email": "not-an-email", "phone": "123"}},
        )
        assert r.status_code == 400
        fields = r.json()["fields"]
        assert {"applicant_info.name", "applicant_info.email", "applicant_info.phone"} <= set(fields)


class TestEmployerApplications:
    def test_list_and_filter(self, client, posted_job, job_payload):
        h, job = posted_job
        other = client.post("/api/jobs", json=job_payload(title="Site Supervisor"), headers=h).json()
        client.post(f"/api/public/jobs/{job['slug']}/applications", json=application("a@example.com"))
        client.post(f"/api/public/jobs/{other['slug']}/applications", json=application("b@example.com"))

        r = client.get("/api/applications", headers=h)
        assert r.status_code == 200
        assert r.json()["total"] == 2

        only_first = client.get("/api/applications", params={"job_id": job["id"]}, headers=h).json()
        assert [a["applicant_info"]["email"] for a in only_first["applications"]] == ["a@example.com"]

    def test_other_companies_do_not_see_applications(self, client, posted_job, employer):
        _, job = posted_job
        client.post(f"/api/public/jobs/{job['slug']}/applications", json=application())
        rival, _ = employer("rival@other.test", "Rival Works")
        assert client.get("/api/applications", headers=rival).json()["total"] == 0

    def test_update_status_and_rating(self, client, posted_job):
        h, job = posted_job
        app_id = client.post(f"/api/public/jobs/{job['slug']}/applications", json=application()).json()["id"]
        r = client.patch(
            f"/api/applications/{app_id}",
            json={"status": "interviewing", "rating": 4, "employer_notes": "Strong references"},
            headers=h,
        )
        assert r.status_code == 200
        assert r.json()["status"] == "interviewing"
        assert r.json()["rating"] == 4

        reviewed = client.get("/api/applications", params={"status": "interviewing"}, headers=h).json()
        assert reviewed["total"] == 1

    def test_bad_status_and_rating(self, client, posted_job):
        h, job = posted_job
        app_id = client.post(f"/api/public/jobs/{job['slug']}/applications", json=application()).json()["id"]
        r = client.patch(f"/api/applications/{app_id}", json={"status": "ghosted", "rating": 9}, headers=h)
        assert r.status_code == 400
        assert {"status", "rating"} <= set(r.json()["fields"])

    def test_rival_cannot_update(self, client, posted_job, employer):
        _, job = posted_job
        app_id = client.post(f"/api/public/jobs/{job['slug']}/applications", json=application()).json()["id"]
        rival, _ = employer("rival@other.test", "Rival Works")
        r = client.patch(f"/api/applications/{app_id}", json={"status": "rejected"}, headers=rival)
        assert r.status_code == 403

    def test_missing_application(self, client, posted_job):
        h, _ = posted_job
        assert client.patch("/api/applications/nope", json={"status": "reviewed"}, headers=h).status_code == 404


class TestMyApplications:
    def test_mine_lists_by_signed_in_email(self, client, posted_job, sign_in):
        _, job = posted_job
        client.post(f"/api/public/jobs/{job['slug']}/applications", json=application("Seeker@Example.com"))
        client.post(f"/api/public/jobs/{job['slug']}/applications", json=application("someone@example.com"))

        r = client.get("/api/applications/mine", headers=sign_in("seeker@example.com"))
        assert r.status_code == 200
        assert [a["job_id"] for a in r.json()] == [job["id"]]

    def test_mine_requires_sign_in(self, client):
        assert client.get("/api/applications/mine").status_code == 401
