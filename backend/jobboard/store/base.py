from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from jobboard.store.query import Query


class Patch:
    """Accumulates field sets and counter increments for one document."""

    def __init__(self, store: "DocumentStore", doc_type: str, doc_id: str):
        self._store = store
        self.doc_type = doc_type
        self.doc_id = doc_id
        self.set_fields: dict[str, Any] = {}
        self.inc_fields: dict[str, int] = {}

    def set(self, fields: dict[str, Any]) -> "Patch":
        self.set_fields.update(fields)
        return self

    def inc(self, field: str, n: int = 1) -> "Patch":
        self.inc_fields[field] = self.inc_fields.get(field, 0) + n
        return self

    async def commit(self):
        return await self._store.commit_patch(self)


class DocumentStore(ABC):
    """Typed document storage answering declarative queries.

    Every method is a coroutine; each call is one independent request so
    callers may fan several out with ``asyncio.gather``. Documents are
    returned as pydantic models from ``jobboard.schemas``.
    """

    @abstractmethod
    async def fetch(self, query: Query) -> list:
        ...

    @abstractmethod
    async def count(self, query: Query) -> int:
        ...

    @abstractmethod
    async def get(self, doc_type: str, doc_id: str):
        ...

    @abstractmethod
    async def create(self, doc_type: str, fields: dict[str, Any]):
        ...

    def patch(self, doc_type: str, doc_id: str) -> Patch:
        return Patch(self, doc_type, doc_id)

    @abstractmethod
    async def commit_patch(self, patch: Patch):
        ...

    @abstractmethod
    async def delete(self, doc_type: str, doc_id: str) -> None:
        ...

    async def first(self, query: Query):
        rows = await self.fetch(query.sliced(0, 1))
        return rows[0] if rows else None

    async def close(self) -> None:
        pass
