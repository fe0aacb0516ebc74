from jobboard.config import settings


class TestSession:
    def _post(self, client, secret, email="seeker@example.com"):
        return client.post("/api/auth/session", json={"email": email, "name": "Sam"}, headers={"X-Auth-Secret": secret})

    def test_sign_in_creates_jobseeker(self, client):
        r = self._post(client, settings.auth_shared_secret, "  Sam@Example.COM")
        assert r.status_code == 200
        data = r.json()
        assert len(data["token"]) == 64
        assert data["expires_in_seconds"] == settings.session_ttl_seconds
        assert data["user"]["email"] == "sam@example.com"
        assert data["user"]["role"] == "jobseeker"

    def test_sign_in_reuses_user(self, client):
        first = self._post(client, settings.auth_shared_secret).json()
        second = self._post(client, settings.auth_shared_secret).json()
        assert first["user"]["id"] == second["user"]["id"]
        assert first["token"] != second["token"]

    def test_wrong_secret(self, client):
        r = self._post(client, "wrong-secret")
        assert r.status_code == 401
        assert "error" in r.json()

    def test_missing_secret(self, client):
        r = client.post("/api/auth/session", json={"email": "seeker@example.com"})
        assert r.status_code == 400

    def test_me(self, client, sign_in):
        h = sign_in("seeker@example.com")
        r = client.get("/api/auth/me", headers=h)
        assert r.status_code == 200
        assert r.json()["email"] == "seeker@example.com"
        assert r.json()["company_id"] is None

    def test_me_without_token(self, client):
        assert client.get("/api/auth/me").status_code == 401
        assert client.get("/api/auth/me", headers={"Authorization": "Bearer bogus"}).status_code == 401

    def test_sign_out(self, client, sign_in):
        h = sign_in()
        assert client.delete("/api/auth/session", headers=h).status_code == 200
        assert client.get("/api/auth/me", headers=h).status_code == 401

    def test_expired_session(self, client, sign_in, monkeypatch):
        monkeypatch.setattr(settings, "session_ttl_seconds", -1)
        h = sign_in()
        assert client.get("/api/auth/me", headers=h).status_code == 401


class TestOnboarding:
    def test_onboard_makes_employer(self, client, sign_in):
        h = sign_in("owner@example.com")
        r = client.post(
            "/api/companies",
            json={"name": "Peak Roofing", "email": "hello@peak.test", "size": "1-10", "locations": [{"city": "Golden"}]},
            headers=h,
        )
        assert r.status_code == 201
        company = r.json()
        assert company["slug"] == "peak-roofing"
        assert company["verified"] is False

        me = client.get("/api/auth/me", headers=h).json()
        assert me["role"] == "employer"
        assert me["company_id"] == company["id"]

    def test_onboard_twice_conflicts(self, client, employer):
        h, _ = employer()
        r = client.post("/api/companies", json={"name": "Second Company", "email": "x@y.test"}, headers=h)
        assert r.status_code == 409

    def test_company_slugs_are_unique(self, client, employer):
        slugs = []
        for email in ("a@one.test", "b@two.test", "c@three.test"):
            h, _ = employer(email, "Same Name")
            slugs.append(client.get("/api/companies/me", headers=h).json()["slug"])
        assert slugs == ["same-name", "same-name-2", "same-name-3"]

    def test_jobseeker_has_no_company(self, client, sign_in):
        assert client.get("/api/companies/me", headers=sign_in()).status_code == 403

    def test_update_own_company(self, client, employer):
        h, company_id = employer()
        r = client.put(
            "/api/companies/me",
            json={"description": "Family owned since 1987.", "website": "https://acme.test", "size": "51-200"},
            headers=h,
        )
        assert r.status_code == 200
        assert r.json()["id"] == company_id
        assert r.json()["size"] == "51-200"
        assert client.get("/api/companies/me", headers=h).json()["website"] == "https://acme.test"

    def test_update_rejects_bad_size(self, client, employer):
        h, _ = employer()
        r = client.put("/api/companies/me", json={"size": "huge"}, headers=h)
        assert r.status_code == 400
        assert "size" in r.json()["fields"]
