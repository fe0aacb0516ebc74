import asyncio
import itertools
from datetime import timedelta

import pytest
from fastapi.testclient import TestClient

from jobboard.config import settings
from jobboard.dependencies import get_store
from jobboard.errors import StoreError
from jobboard.main import app
from jobboard.services.cache import CachedStore, TaggedCache
from jobboard.services.session_service import session_service
from jobboard.store.base import DocumentStore
from jobboard.store.sql import SqlDocumentStore
from jobboard.utils.timestamps import utcnow

DESCRIPTION = (
    "We are looking for a reliable tradesperson to join a busy crew working on commercial "
    "and residential sites across the region. Full training on our equipment is provided."
)
REQUIREMENTS = "Three or more years of hands-on experience and a valid driving licence."


@pytest.fixture
def store(tmp_path):
    sql_store = SqlDocumentStore.from_path(tmp_path / "jobboard.sqlite")
    cached = CachedStore(sql_store, TaggedCache(60))
    app.dependency_overrides[get_store] = lambda: cached
    yield cached
    app.dependency_overrides.clear()
    asyncio.run(cached.close())


@pytest.fixture
def fresh_sessions():
    """Reset session state for each test."""
    session_service.clear()
    yield session_service
    session_service.clear()


@pytest.fixture
def client(store, fresh_sessions):
    return TestClient(app)


@pytest.fixture
def run():
    return asyncio.run


@pytest.fixture
def sign_in(client):
    def _sign_in(email="seeker@example.com", name="Sam Seeker"):
        r = client.post(
            "/api/auth/session",
            json={"email": email, "name": name},
            headers={"X-Auth-Secret": settings.auth_shared_secret},
        )
        assert r.status_code == 200, r.text
        return {"Authorization": f"Bearer {r.json()['token']}"}

    return _sign_in


@pytest.fixture
def employer(client, sign_in):
    """Signed-in employer headers plus the id of the onboarded company."""

    def _employer(email="boss@acme.test", company="Acme Builders"):
        headers = sign_in(email, "Pat Boss")
        r = client.post(
            "/api/companies",
            json={"name": company, "email": email, "size": "11-50", "locations": [{"city": "Denver"}]},
            headers=headers,
        )
        assert r.status_code == 201, r.text
        return headers, r.json()["id"]

    return _employer


@pytest.fixture
def category(store, run):
    return run(store.create("category", {"name": "Construction", "slug": "construction", "order_rank": 0}))


@pytest.fixture
def job_payload(category):
    def _payload(**overrides):
        payload = {
            "title": "Construction Foreman",
            "description": DESCRIPTION,
            "requirements": REQUIREMENTS,
            "location": {"city": "Denver", "county": "Denver County", "zip_code": "80202"},
            "salary_min": 35,
            "salary_max": 45,
            "salary_type": "hourly",
            "job_type": "full-time",
            "experience_level": "experienced",
            "category_id": category.id,
            "status": "published",
        }
        payload.update(overrides)
        return payload

    return _payload


@pytest.fixture
def seed_company(store, run):
    def _seed(name="Seed Co", slug=None, **fields):
        return run(store.create("company", {"name": name, "slug": slug or name.lower().replace(" ", "-"), **fields}))

    return _seed


@pytest.fixture
def seed_job(store, run, category, seed_company):
    """Insert a job straight into the store, published an hour ago by default."""
    default_company = {}
    serial = itertools.count(1)

    def _seed(title="Electrician", **fields):
        if "company_id" not in fields:
            if "company" not in default_company:
                default_company["company"] = seed_company("Lightning Electric")
            fields["company_id"] = default_company["company"].id
        now = utcnow()
        doc = {
            "title": title,
            "slug": fields.pop("slug", None) or f"{title.lower().replace(' ', '-')}-{next(serial)}",
            "category_id": category.id,
            "description": DESCRIPTION,
            "requirements": REQUIREMENTS,
            "location": {"city": "Boulder", "county": "Boulder County", "zip_code": "80301"},
            "salary_type": "hourly",
            "salary_min": 28,
            "salary_max": 38,
            "job_type": "full-time",
            "experience_level": "intermediate",
            "status": "published",
            "published_at": now - timedelta(hours=1),
        }
        doc.update(fields)
        return run(store.create("job", doc))

    return _seed


class UnreachableStore(DocumentStore):
    """Every call fails the way an unreachable backend does."""

    def __init__(self):
        self.calls = 0

    def _fail(self):
        self.calls += 1
        raise StoreError("connection refused")

    async def fetch(self, query):
        self._fail()

    async def count(self, query):
        self._fail()

    async def get(self, doc_type, doc_id):
        self._fail()

    async def create(self, doc_type, fields):
        self._fail()

    async def commit_patch(self, patch):
        self._fail()

    async def delete(self, doc_type, doc_id):
        self._fail()


@pytest.fixture
def unreachable_store(fresh_sessions):
    broken = UnreachableStore()
    app.dependency_overrides[get_store] = lambda: broken
    yield broken
    app.dependency_overrides.clear()


@pytest.fixture
def offline_client(unreachable_store):
    return TestClient(app)
