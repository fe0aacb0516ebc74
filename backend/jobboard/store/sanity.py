"""
Hosted CMS document store, spoken to over its HTTP query and mutate APIs.

Documents travel in the CMS's camelCase shape with slug objects, typed
references and portable-text descriptions; this module converts them to and
from the snake_case pydantic documents used everywhere else.
"""
import logging
import uuid
from datetime import date, datetime
from typing import Any

import httpx
from pydantic import BaseModel

from jobboard.config import Settings
from jobboard.errors import NotFoundError, StoreError
from jobboard.schemas.application import Application as ApplicationDocument
from jobboard.schemas.category import Category as CategoryDocument
from jobboard.schemas.company import Company as CompanyDocument
from jobboard.schemas.job import Job as JobDocument
from jobboard.schemas.user import Follow as FollowDocument, User as UserDocument
from jobboard.store.base import DocumentStore, Patch
from jobboard.store.groq import DOC_TYPES, camel, compile_count, compile_fetch
from jobboard.store.query import Eq, Query
from jobboard.utils.timestamps import to_iso, utcnow

logger = logging.getLogger(__name__)

_DOCUMENTS = {
    "job": JobDocument,
    "company": CompanyDocument,
    "category": CategoryDocument,
    "application": ApplicationDocument,
    "user": UserDocument,
    "follow": FollowDocument,
}

# snake_case id field -> CMS reference field, per document type
_REFERENCES = {
    "job": {"company_id": "company", "category_id": "category"},
    "application": {"job_id": "job"},
    "follow": {"company_id": "company"},
}

_RICH_TEXT = {"job": {"description"}, "company": {"description"}}


def _snake(name: str) -> str:
    out = []
    for ch in name:
        if ch.isupper():
            out.append("_")
            out.append(ch.lower())
        else:
            out.append(ch)
    return "".join(out)


def _key() -> str:
    return uuid.uuid4().hex[:12]


def plain_text(blocks: Any) -> str | None:
    """Flatten portable-text blocks into paragraphs separated by blank lines."""
    if blocks is None or isinstance(blocks, str):
        return blocks
    paragraphs = []
    for block in blocks:
        if isinstance(block, dict) and block.get("_type") == "block":
            paragraphs.append("".join(child.get("text", "") for child in block.get("children", [])))
    return "\n\n".join(paragraphs)


def rich_text(text: str | None) -> list[dict] | None:
    if text is None:
        return None
    return [
        {
            "_type": "block",
            "_key": _key(),
            "style": "normal",
            "markDefs": [],
            "children": [{"_type": "span", "_key": _key(), "text": paragraph, "marks": []}],
        }
        for paragraph in text.split("\n\n")
    ]


def _to_cms_value(value: Any) -> Any:
    if isinstance(value, BaseModel):
        value = value.model_dump(exclude_none=True)
    if isinstance(value, datetime):
        return to_iso(value)
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, dict):
        return {camel(k): _to_cms_value(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        items = [_to_cms_value(v) for v in value]
        # Arrays of objects need a stable _key in the CMS
        return [{"_key": _key(), **item} if isinstance(item, dict) else item for item in items]
    return value


def to_cms(doc_type: str, fields: dict[str, Any]) -> dict[str, Any]:
    references = _REFERENCES.get(doc_type, {})
    rich = _RICH_TEXT.get(doc_type, set())
    doc: dict[str, Any] = {}
    for key, value in fields.items():
        if key == "id":
            continue
        if key in references:
            doc[references[key]] = {"_type": "reference", "_ref": value} if value else None
        elif key == "slug":
            doc["slug"] = {"_type": "slug", "current": value}
        elif key in rich:
            doc[camel(key)] = rich_text(value)
        else:
            doc[camel(key)] = _to_cms_value(value)
    return doc


def _from_cms_value(value: Any) -> Any:
    if isinstance(value, dict):
        return {_snake(k): _from_cms_value(v) for k, v in value.items() if not k.startswith("_")}
    if isinstance(value, list):
        return [_from_cms_value(v) for v in value]
    return value


def from_cms(doc_type: str, doc: dict[str, Any]):
    data = _from_cms_value(doc)
    for key in _RICH_TEXT.get(doc_type, ()):
        if key in doc or camel(key) in doc:
            data[key] = plain_text(doc.get(camel(key)))
    return _DOCUMENTS[doc_type].model_validate(data)


class SanityDocumentStore(DocumentStore):
    def __init__(
        self,
        project_id: str,
        dataset: str,
        api_version: str = "2024-01-01",
        token: str = "",
        use_cdn: bool = False,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        query_host = "apicdn.sanity.io" if use_cdn else "api.sanity.io"
        self._query_url = f"https://{project_id}.{query_host}/v{api_version}/data/query/{dataset}"
        # Mutations always go to the live API, never the CDN
        self._mutate_url = f"https://{project_id}.api.sanity.io/v{api_version}/data/mutate/{dataset}"
        headers = {"Authorization": f"Bearer {token}"} if token else {}
        self._client = httpx.AsyncClient(headers=headers, timeout=timeout, transport=transport)

    @classmethod
    def from_settings(cls, settings: Settings) -> "SanityDocumentStore":
        return cls(
            project_id=settings.sanity_project_id,
            dataset=settings.sanity_dataset,
            api_version=settings.sanity_api_version,
            token=settings.sanity_token,
            use_cdn=settings.sanity_use_cdn,
            timeout=settings.sanity_timeout_seconds,
        )

    async def _query(self, groq: str, params: dict[str, Any]) -> Any:
        try:
            resp = await self._client.post(self._query_url, json={"query": groq, "params": params})
            resp.raise_for_status()
        except httpx.HTTPError as exc:
            logger.error("CMS query failed: %s", exc)
            raise StoreError(f"CMS query failed: {exc.__class__.__name__}") from exc
        return resp.json().get("result")

    async def _mutate(self, mutations: list[dict]) -> list[dict]:
        try:
            resp = await self._client.post(
                self._mutate_url,
                params={"returnIds": "true", "visibility": "sync"},
                json={"mutations": mutations},
            )
            resp.raise_for_status()
        except httpx.HTTPError as exc:
            logger.error("CMS mutation failed: %s", exc)
            raise StoreError(f"CMS mutation failed: {exc.__class__.__name__}") from exc
        return resp.json().get("results", [])

    async def fetch(self, query: Query) -> list:
        groq, params = compile_fetch(query)
        result = await self._query(groq, params)
        return [from_cms(query.doc_type, doc) for doc in result or []]

    async def count(self, query: Query) -> int:
        groq, params = compile_count(query)
        return int(await self._query(groq, params) or 0)

    async def get(self, doc_type: str, doc_id: str):
        return await self.first(Query(doc_type, (Eq("id", doc_id),)))

    async def create(self, doc_type: str, fields: dict[str, Any]):
        doc_id = fields.get("id") or str(uuid.uuid4())
        doc = to_cms(doc_type, fields)
        doc.update({"_id": doc_id, "_type": DOC_TYPES[doc_type]})
        if "created_at" in _DOCUMENTS[doc_type].model_fields and "createdAt" not in doc:
            doc["createdAt"] = to_iso(utcnow())
        await self._mutate([{"create": doc}])
        created = await self.get(doc_type, doc_id)
        if created is None:
            raise StoreError(f"{doc_type} {doc_id} missing after create")
        return created

    async def commit_patch(self, patch: Patch):
        body: dict[str, Any] = {"id": patch.doc_id}
        if patch.set_fields:
            body["set"] = to_cms(patch.doc_type, patch.set_fields)
        if patch.inc_fields:
            body["inc"] = {camel(k): n for k, n in patch.inc_fields.items()}
        await self._mutate([{"patch": body}])
        updated = await self.get(patch.doc_type, patch.doc_id)
        if updated is None:
            raise NotFoundError(f"{patch.doc_type} {patch.doc_id} not found")
        return updated

    async def delete(self, doc_type: str, doc_id: str) -> None:
        await self._mutate([{"delete": {"id": doc_id}}])

    async def close(self) -> None:
        await self._client.aclose()
