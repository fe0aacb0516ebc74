import time
from typing import Any

from jobboard.store.base import DocumentStore, Patch
from jobboard.store.query import Query

_MISS = object()

# Mutating one document type stales every listing that embeds or counts it
_INVALIDATES = {
    "job": ("jobs", "companies", "categories"),
    "company": ("companies", "jobs"),
    "category": ("categories", "jobs"),
    "application": ("applications",),
    "user": ("users",),
    "follow": ("follows",),
}


class TaggedCache:
    """Process-local TTL cache whose entries carry logical tags for invalidation."""

    def __init__(self, ttl_seconds: int):
        self.ttl_seconds = ttl_seconds
        self._entries: dict[str, tuple[float, Any, frozenset[str]]] = {}  # key -> (expires_at, value, tags)

    def _cleanup_expired(self):
        now = time.time()
        self._entries = {k: e for k, e in self._entries.items() if e[0] > now}

    def get(self, key: str) -> Any:
        entry = self._entries.get(key)
        if entry is None or entry[0] <= time.time():
            return _MISS
        return entry[1]

    def set(self, key: str, value: Any, tags: tuple[str, ...]) -> None:
        if self.ttl_seconds <= 0:
            return
        self._cleanup_expired()
        self._entries[key] = (time.time() + self.ttl_seconds, value, frozenset(tags))

    def invalidate(self, tag: str) -> None:
        self._entries = {k: e for k, e in self._entries.items() if tag not in e[2]}

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        self._cleanup_expired()
        return len(self._entries)


class CachedStore(DocumentStore):
    """Read-through cache in front of another store.

    Only queries that carry tags are cached; untagged (private) reads and
    every mutation go straight through, and mutations drop the tags of the
    listings they affect.
    """

    def __init__(self, inner: DocumentStore, cache: TaggedCache):
        self.inner = inner
        self.cache = cache

    async def _cached(self, query: Query, kind: str, loader):
        if not query.tags:
            return await loader(query)
        # Visibility clauses carry the request time; one key per TTL window
        key = query.cache_key(kind, self.cache.ttl_seconds)
        value = self.cache.get(key)
        if value is _MISS:
            value = await loader(query)
            self.cache.set(key, value, query.tags)
        return value

    async def fetch(self, query: Query) -> list:
        return await self._cached(query, "fetch", self.inner.fetch)

    async def count(self, query: Query) -> int:
        return await self._cached(query, "count", self.inner.count)

    async def get(self, doc_type: str, doc_id: str):
        return await self.inner.get(doc_type, doc_id)

    def _invalidate(self, doc_type: str) -> None:
        for tag in _INVALIDATES.get(doc_type, ()):
            self.cache.invalidate(tag)

    async def create(self, doc_type: str, fields: dict[str, Any]):
        doc = await self.inner.create(doc_type, fields)
        self._invalidate(doc_type)
        return doc

    async def commit_patch(self, patch: Patch):
        doc = await self.inner.commit_patch(patch)
        # View counters tick on every detail page; they may lag by one TTL window
        if set(patch.inc_fields) != {"view_count"} or patch.set_fields:
            self._invalidate(patch.doc_type)
        return doc

    async def delete(self, doc_type: str, doc_id: str) -> None:
        await self.inner.delete(doc_type, doc_id)
        self._invalidate(doc_type)

    async def close(self) -> None:
        await self.inner.close()
