class TestJobsCRUD:
    def test_create_job(self, client, employer, job_payload):
        h, company_id = employer()
        r = client.post("/api/jobs", json=job_payload(), headers=h)
        assert r.status_code == 201
        data = r.json()
        assert data["title"] == "Construction Foreman"
        assert data["slug"] == "construction-foreman"
        assert data["company_id"] == company_id
        assert data["company"]["name"] == "Acme Builders"
        assert data["view_count"] == 0
        assert data["application_count"] == 0
        assert data["published_at"] is not None

    def test_duplicate_titles_get_unique_slugs(self, client, employer, job_payload):
        h, _ = employer()
        slugs = [client.post("/api/jobs", json=job_payload(), headers=h).json()["slug"] for _ in range(3)]
        assert slugs == ["construction-foreman", "construction-foreman-2", "construction-foreman-3"]

    def test_draft_has_no_publish_time(self, client, employer, job_payload):
        h, _ = employer()
        r = client.post("/api/jobs", json=job_payload(status="draft"), headers=h)
        assert r.json()["status"] == "draft"
        assert r.json()["published_at"] is None

    def test_list_own_jobs(self, client, employer, job_payload, seed_job):
        h, _ = employer()
        client.post("/api/jobs", json=job_payload(title="Job Number One"), headers=h)
        client.post("/api/jobs", json=job_payload(title="Job Number Two", status="draft"), headers=h)
        seed_job("Somebody Else's Job")

        r = client.get("/api/jobs", headers=h)
        assert r.status_code == 200
        assert r.json()["total"] == 2
        assert {j["title"] for j in r.json()["jobs"]} == {"Job Number One", "Job Number Two"}

        drafts = client.get("/api/jobs", params={"status": "draft"}, headers=h).json()
        assert [j["title"] for j in drafts["jobs"]] == ["Job Number Two"]

    def test_get_job(self, client, employer, job_payload):
        h, _ = employer()
        job_id = client.post("/api/jobs", json=job_payload(), headers=h).json()["id"]
        r = client.get(f"/api/jobs/{job_id}", headers=h)
        assert r.status_code == 200
        assert r.json()["id"] == job_id

    def test_update_job(self, client, employer, job_payload):
        h, _ = employer()
        job_id = client.post("/api/jobs", json=job_payload(), headers=h).json()["id"]
        r = client.put(f"/api/jobs/{job_id}", json={"title": "Senior Construction Foreman", "is_urgent": True}, headers=h)
        assert r.status_code == 200
        assert r.json()["title"] == "Senior Construction Foreman"
        assert r.json()["is_urgent"] is True
        assert r.json()["salary_min"] == 35

    def test_clear_optional_field(self, client, employer, job_payload):
        h, _ = employer()
        job_id = client.post("/api/jobs", json=job_payload(), headers=h).json()["id"]
        r = client.put(f"/api/jobs/{job_id}", json={"salary_max": None, "title": None}, headers=h)
        assert r.json()["salary_max"] is None
        assert r.json()["title"] == "Construction Foreman"

    def test_delete_job(self, client, employer, job_payload):
        h, _ = employer()
        job_id = client.post("/api/jobs", json=job_payload(), headers=h).json()["id"]
        r = client.delete(f"/api/jobs/{job_id}", headers=h)
        assert r.status_code == 200
        assert r.json()["success"] is True
        assert client.get(f"/api/jobs/{job_id}", headers=h).status_code == 404

    def test_get_missing_job(self, client, employer):
        h, _ = employer()
        r = client.get("/api/jobs/nonexistent", headers=h)
        assert r.status_code == 404
        assert "error" in r.json()


class TestPublishing:
    def test_first_publish_stamps_time_once(self, client, employer, job_payload):
        h, _ = employer()
        job_id = client.post("/api/jobs", json=job_payload(status="draft"), headers=h).json()["id"]

        published = client.put(f"/api/jobs/{job_id}", json={"status": "published"}, headers=h).json()
        stamp = published["published_at"]
        assert stamp is not None

        client.put(f"/api/jobs/{job_id}", json={"status": "draft"}, headers=h)
        again = client.put(f"/api/jobs/{job_id}", json={"status": "published"}, headers=h).json()
        assert again["published_at"] == stamp

    def test_published_job_shows_publicly(self, client, employer, job_payload):
        h, _ = employer()
        job_id = client.post("/api/jobs", json=job_payload(status="draft"), headers=h).json()["id"]
        assert client.get("/api/public/jobs").json()["total"] == 0

        client.put(f"/api/jobs/{job_id}", json={"status": "published"}, headers=h)
        assert client.get("/api/public/jobs").json()["total"] == 1


class TestValidation:
    def test_short_fields_rejected(self, client, employer, job_payload):
        h, _ = employer()
        r = client.post("/api/jobs", json=job_payload(title="Job", description="Too short"), headers=h)
        assert r.status_code == 400
        fields = r.json()["fields"]
        assert "title" in fields
        assert "description" in fields

    def test_bad_zip_code(self, client, employer, job_payload):
        h, _ = employer()
        r = client.post(
            "/api/jobs", json=job_payload(location={"city": "Denver", "county": "Denver", "zip_code": "8020"}), headers=h
        )
        assert r.status_code == 400
        assert "location.zip_code" in r.json()["fields"]

    def test_salary_range_on_create(self, client, employer, job_payload):
        h, _ = employer()
        r = client.post("/api/jobs", json=job_payload(salary_min=50, salary_max=40), headers=h)
        assert r.status_code == 400

    def test_salary_range_checked_against_stored_value(self, client, employer, job_payload):
        h, _ = employer()
        job_id = client.post("/api/jobs", json=job_payload(), headers=h).json()["id"]
        r = client.put(f"/api/jobs/{job_id}", json={"salary_max": 20}, headers=h)
        assert r.status_code == 400
        assert "salary" in r.json()["error"].lower()

    def test_counters_are_not_writable(self, client, employer, job_payload):
        h, _ = employer()
        job_id = client.post("/api/jobs", json=job_payload(view_count=99, application_count=7), headers=h).json()["id"]
        r = client.put(f"/api/jobs/{job_id}", json={"view_count": 500, "application_count": 50}, headers=h)
        assert r.status_code == 200
        assert r.json()["view_count"] == 0
        assert r.json()["application_count"] == 0


class TestAccess:
    def test_requires_sign_in(self, client):
        assert client.get("/api/jobs").status_code == 401
        assert client.post("/api/jobs", json={}).status_code == 401

    def test_jobseeker_is_forbidden(self, client, sign_in):
        r = client.get("/api/jobs", headers=sign_in())
        assert r.status_code == 403

    def test_other_company_cannot_touch_job(self, client, employer, job_payload):
        owner, _ = employer()
        job_id = client.post("/api/jobs", json=job_payload(), headers=owner).json()["id"]
        intruder, _ = employer("rival@other.test", "Rival Works")

        assert client.get(f"/api/jobs/{job_id}", headers=intruder).status_code == 403
        assert client.put(f"/api/jobs/{job_id}", json={"title": "Hijacked Title"}, headers=intruder).status_code == 403
        assert client.delete(f"/api/jobs/{job_id}", headers=intruder).status_code == 403
        assert client.get(f"/api/jobs/{job_id}", headers=owner).json()["title"] == "Construction Foreman"


class TestMetrics:
    def test_metrics_for_new_job(self, client, employer, job_payload):
        h, _ = employer()
        job_id = client.post("/api/jobs", json=job_payload(), headers=h).json()["id"]
        r = client.get(f"/api/jobs/{job_id}/metrics", headers=h)
        assert r.status_code == 200
        data = r.json()
        assert data["views"] == 0
        assert data["conversion_rate"] == 0.0
        assert set(data["applications_by_status"]) == {"new", "reviewed", "interviewing", "hired", "rejected"}
