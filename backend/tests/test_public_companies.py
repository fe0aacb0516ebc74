from datetime import timedelta

from jobboard.utils.timestamps import utcnow


def names(response):
    return [company["name"] for company in response.json()["companies"]]


class TestCompanyListing:
    def test_verified_first_then_name(self, client, seed_company):
        seed_company("Zenith Plumbing", verified=True)
        seed_company("Alpine HVAC")
        seed_company("Bolt Electric", verified=True)
        r = client.get("/api/public/companies")
        assert r.status_code == 200
        assert names(r) == ["Bolt Electric", "Zenith Plumbing", "Alpine HVAC"]
        assert r.json()["total"] == 3

    def test_filters(self, client, seed_company):
        seed_company("Alpine HVAC", size="11-50", locations=[{"city": "Boulder"}])
        seed_company("Bolt Electric", size="1-10", locations=[{"city": "Denver"}, {"city": "Aurora"}])
        assert names(client.get("/api/public/companies", params={"search": "alp"})) == ["Alpine HVAC"]
        assert names(client.get("/api/public/companies", params={"size": "1-10"})) == ["Bolt Electric"]
        assert names(client.get("/api/public/companies", params={"location": "Aurora"})) == ["Bolt Electric"]
        assert client.get("/api/public/companies", params={"size": "enormous"}).status_code == 400

    def test_job_count_tracks_published_jobs(self, client, seed_company, seed_job):
        company = seed_company("Bolt Electric")
        seed_job("Electrician", company_id=company.id)
        seed_job("Apprentice", company_id=company.id)
        seed_job("Draft", company_id=company.id, status="draft")
        assert client.get("/api/public/companies").json()["companies"][0]["job_count"] == 2

    def test_refine(self, client, seed_company):
        seed_company("Alpine HVAC")
        seed_company("Bolt Electric")
        body = client.get("/api/public/companies", params={"refine": "bolt"}).json()
        assert body["refined"] is True
        assert [c["name"] for c in body["companies"]] == ["Bolt Electric"]
        assert body["total"] == 2


class TestCompanyDetail:
    def test_detail_lists_visible_jobs(self, client, seed_company, seed_job):
        company = seed_company("Bolt Electric")
        seed_job("Electrician", slug="live", company_id=company.id)
        seed_job("Draft", slug="draft", company_id=company.id, status="draft")
        seed_job("Old", slug="old", company_id=company.id, expires_at=utcnow() - timedelta(days=1))

        r = client.get("/api/public/companies/bolt-electric")
        assert r.status_code == 200
        assert r.json()["company"]["name"] == "Bolt Electric"
        assert [j["slug"] for j in r.json()["jobs"]] == ["live"]

    def test_unknown_company(self, client):
        assert client.get("/api/public/companies/nope").status_code == 404


class TestCategories:
    def test_ordered_by_rank(self, client, store, run):
        run(store.create("category", {"name": "Plumbing", "slug": "plumbing", "order_rank": 2}))
        run(store.create("category", {"name": "Electrical", "slug": "electrical", "order_rank": 1}))
        r = client.get("/api/public/categories")
        assert r.status_code == 200
        assert [c["slug"] for c in r.json()["categories"]] == ["electrical", "plumbing"]
        assert r.json()["degraded"] is False

    def test_popular_by_job_count(self, client, store, run, seed_job):
        plumbing = run(store.create("category", {"name": "Plumbing", "slug": "plumbing", "order_rank": 5}))
        for _ in range(2):
            seed_job("Plumber", category_id=plumbing.id)
        seed_job("Electrician")
        popular = client.get("/api/public/categories/popular").json()["categories"]
        assert [(c["slug"], c["job_count"]) for c in popular] == [("plumbing", 2), ("construction", 1)]

    def test_offline_falls_back(self, offline_client):
        body = offline_client.get("/api/public/categories").json()
        assert body["degraded"] is True
        assert len(body["categories"]) == 5
