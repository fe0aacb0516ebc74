"""
Weighted fuzzy re-search over a page of results already held in memory.

This only narrows and re-ranks the items it is given. It never sees documents
outside the current page, so "no matches" here means "no matches on this
page", not "no matches in the store".
"""
from typing import Any, Sequence

from rapidfuzz import fuzz, utils

JOB_KEYS = (
    ("title", 0.4),
    ("company.name", 0.3),
    ("location.city", 0.2),
    ("description", 0.1),
)

COMPANY_KEYS = (
    ("name", 0.6),
    ("locations.city", 0.2),
    ("description", 0.2),
)


def _resolve(item: Any, path: str) -> str:
    values = [item]
    for part in path.split("."):
        resolved = []
        for value in values:
            if isinstance(value, dict):
                value = value.get(part)
            else:
                value = getattr(value, part, None)
            if isinstance(value, (list, tuple)):
                resolved.extend(value)
            elif value is not None:
                resolved.append(value)
        values = resolved
    return " ".join(str(v) for v in values)


class FuzzySearcher:
    """Rank items by weighted approximate similarity of their fields to a query.

    ``threshold`` is a distance: 0 accepts only exact (sub)string matches and
    1 accepts everything. An item is kept when its best-matching field scores
    at least ``1 - threshold``; kept items are ordered by the weighted score of
    their accepted fields, ties keeping their original order.
    """

    def __init__(self, keys: Sequence[tuple[str, float]], threshold: float = 0.3):
        if not 0.0 <= threshold <= 1.0:
            raise ValueError("threshold must be between 0 and 1")
        self.keys = tuple(keys)
        self.threshold = threshold
        self._items: Sequence | None = None
        self._index: list[list[str]] = []

    def _ensure_index(self, items: Sequence) -> None:
        # Rebuilt when a different item list is passed in
        if items is self._items:
            return
        self._items = items
        self._index = [
            [utils.default_process(_resolve(item, path)) for path, _ in self.keys] for item in items
        ]

    def score(self, query: str, fields: list[str]) -> float | None:
        needle = utils.default_process(query)
        cutoff = (1.0 - self.threshold) * 100
        best = 0.0
        total = 0.0
        for (path, weight), text in zip(self.keys, fields):
            if not text or not needle:
                continue
            similarity = fuzz.partial_ratio(needle, text)
            best = max(best, similarity)
            if similarity >= cutoff:
                total += weight * similarity / 100
        if best < cutoff:
            return None
        return total

    def search(self, items: Sequence, query: str | None) -> list:
        if not query or not query.strip():
            return list(items)
        self._ensure_index(items)
        scored = []
        for position, (item, fields) in enumerate(zip(items, self._index)):
            relevance = self.score(query, fields)
            if relevance is not None:
                scored.append((relevance, position, item))
        scored.sort(key=lambda entry: (-entry[0], entry[1]))
        return [item for _, _, item in scored]


def refine(items: Sequence, query: str | None, keys: Sequence[tuple[str, float]], threshold: float) -> list:
    return FuzzySearcher(keys, threshold).search(items, query)
