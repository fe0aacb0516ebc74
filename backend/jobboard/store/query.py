"""
Backend-neutral query description for the document store.

A ``Query`` is a document type, a conjunction of clauses, an ordering and an
optional slice. Store adapters compile it to their native language (ORM
filters for SQLite, GROQ for the hosted CMS). Field names are logical dotted
paths such as ``"location.city"`` or ``"company.name"``; each adapter maps
them to columns or document attributes.
"""
from __future__ import annotations

import json
from dataclasses import dataclass, field as dc_field, replace
from datetime import datetime
from typing import Any, Union


@dataclass(frozen=True)
class Eq:
    field: str
    value: Any


@dataclass(frozen=True)
class Ne:
    field: str
    value: Any


@dataclass(frozen=True)
class Gte:
    field: str
    value: Any


@dataclass(frozen=True)
class Gt:
    field: str
    value: Any


@dataclass(frozen=True)
class In:
    field: str
    values: tuple


@dataclass(frozen=True)
class Contains:
    """``value`` is one of the entries of the array at ``field``."""
    field: str
    value: Any


@dataclass(frozen=True)
class Match:
    """Wildcard text match against any of ``fields``; ``*`` matches any run of characters."""
    fields: tuple[str, ...]
    pattern: str


@dataclass(frozen=True)
class AnyOf:
    clauses: tuple


@dataclass(frozen=True)
class Unexpired:
    """``field`` is unset or strictly later than ``at``."""
    field: str
    at: datetime


Clause = Union[Eq, Ne, Gt, Gte, In, Contains, Match, AnyOf, Unexpired]


@dataclass(frozen=True)
class OrderBy:
    field: str
    descending: bool = False


@dataclass(frozen=True)
class Query:
    doc_type: str
    where: tuple = ()
    order: tuple[OrderBy, ...] = ()
    offset: int = 0
    limit: int | None = None
    tags: tuple[str, ...] = dc_field(default=(), compare=False)

    def count_query(self) -> "Query":
        # Same clause tuple, no ordering or slice
        return replace(self, order=(), offset=0, limit=None)

    def sliced(self, start: int, end: int) -> "Query":
        return replace(self, offset=start, limit=max(end - start, 0))

    def cache_key(self, kind: str = "fetch", time_resolution: int = 0) -> str:
        """Canonical key; ``Unexpired`` times are floored to ``time_resolution`` seconds when positive."""
        return json.dumps(
            {
                "kind": kind,
                "type": self.doc_type,
                "where": [_clause_key(c, time_resolution) for c in self.where],
                "order": [(o.field, o.descending) for o in self.order],
                "offset": self.offset,
                "limit": self.limit,
            },
            sort_keys=True,
            default=str,
        )


def wildcard(term: str) -> str:
    """Wrap a free-text term as a substring pattern: ``*term*``."""
    return f"*{term.strip()}*"


def _clause_key(clause, time_resolution: int = 0) -> list:
    if isinstance(clause, AnyOf):
        return ["AnyOf", [_clause_key(c, time_resolution) for c in clause.clauses]]
    if isinstance(clause, Unexpired) and time_resolution > 0:
        return ["Unexpired", clause.field, int(clause.at.timestamp() // time_resolution)]
    return [type(clause).__name__, *(getattr(clause, f) for f in clause.__dataclass_fields__)]
