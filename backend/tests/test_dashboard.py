import pytest

from jobboard.dependencies import require_employer
from jobboard.main import app
from jobboard.schemas.user import CurrentUser


def apply(client, slug, email):
    return client.post(
        f"/api/public/jobs/{slug}/applications",
        json={"applicant_info": {"name": "Applicant", "email": email, "phone": "303-555-0100"}},
    )


class TestDashboard:
    def test_empty_company(self, client, employer):
        h, _ = employer()
        r = client.get("/api/dashboard", headers=h)
        assert r.status_code == 200
        data = r.json()
        assert data["degraded"] is False
        assert data["degraded_sections"] == []
        assert data["stats"] == {
            "total_jobs": 0,
            "active_jobs": 0,
            "total_applications": 0,
            "new_applications": 0,
            "total_views": 0,
            "average_time_to_hire": 0,
        }
        assert data["activity"] == []
        assert data["top_jobs"] == []
        assert len(data["trends"]) == 30

    def test_counts_follow_activity(self, client, employer, job_payload):
        h, _ = employer()
        job = client.post("/api/jobs", json=job_payload(), headers=h).json()
        client.post("/api/jobs", json=job_payload(title="Draft Supervisor", status="draft"), headers=h)
        client.get(f"/api/public/jobs/{job['slug']}")
        apply(client, job["slug"], "a@example.com")

        stats = client.get("/api/dashboard/stats", headers=h).json()
        assert stats["degraded"] is False
        assert stats["stats"]["total_jobs"] == 2
        assert stats["stats"]["active_jobs"] == 1
        assert stats["stats"]["total_applications"] == 1
        assert stats["stats"]["new_applications"] == 1
        assert stats["stats"]["total_views"] == 1

        top = client.get("/api/dashboard/top-jobs", headers=h).json()["top_jobs"]
        assert top[0]["job_id"] == job["id"]
        assert top[0]["conversion_rate"] == 100.0

        activity = client.get("/api/dashboard/activity", params={"limit": 1}, headers=h).json()["activity"]
        assert [a["type"] for a in activity] == ["application"]

        trends = client.get("/api/dashboard/trends", params={"days": 7}, headers=h).json()["trends"]
        assert len(trends) == 7
        assert trends[-1]["count"] == 1

    @pytest.mark.parametrize("days", [0, 366])
    def test_trend_window_bounds(self, client, employer, days):
        h, _ = employer()
        r = client.get("/api/dashboard/trends", params={"days": days}, headers=h)
        assert r.status_code == 400

    def test_requires_employer(self, client, sign_in):
        assert client.get("/api/dashboard").status_code == 401
        assert client.get("/api/dashboard", headers=sign_in()).status_code == 403


class TestDegradedDashboard:
    @pytest.fixture
    def offline_employer(self, offline_client):
        app.dependency_overrides[require_employer] = lambda: CurrentUser(
            id="user1", email="boss@acme.test", role="employer", company_id="company1"
        )
        return offline_client

    def test_sections_fall_back_to_samples(self, offline_employer):
        r = offline_employer.get("/api/dashboard")
        assert r.status_code == 200
        data = r.json()
        assert data["degraded"] is True
        assert set(data["degraded_sections"]) == {"stats", "activity", "top_jobs", "trends"}
        assert data["stats"]["total_jobs"] == 24

    def test_single_section_is_flagged(self, offline_employer):
        body = offline_employer.get("/api/dashboard/top-jobs", params={"limit": 3}).json()
        assert body["degraded"] is True
        assert len(body["top_jobs"]) == 3
