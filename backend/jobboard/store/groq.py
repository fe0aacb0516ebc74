"""
Compile ``Query`` objects to GROQ for the hosted CMS.

User-supplied values never enter the query text: each one becomes a named
``$pN`` parameter sent alongside the query.
"""
from datetime import date, datetime
from typing import Any

from jobboard.store.query import AnyOf, Contains, Eq, Gt, Gte, In, Match, Ne, Query, Unexpired
from jobboard.utils.timestamps import to_iso

DOC_TYPES = {
    "job": "jobPosting",
    "company": "company",
    "category": "jobCategory",
    "application": "jobApplication",
    "user": "user",
    "follow": "companyFollow",
}

_PUBLISHED_REFS = 'count(*[_type == "jobPosting" && references(^._id) && status == "published"])'

PROJECTIONS = {
    "job": """{
  ...,
  "id": _id,
  "slug": slug.current,
  "companyId": company._ref,
  "categoryId": category._ref,
  "company": company->{"id": _id, name, "slug": slug.current, "logoUrl": logo.asset->url, verified, size, website},
  "category": category->{"id": _id, name, "slug": slug.current}
}""",
    "company": """{
  ...,
  "id": _id,
  "slug": slug.current,
  "logoUrl": logo.asset->url,
  "jobCount": %s
}""" % _PUBLISHED_REFS,
    "category": """{
  ...,
  "id": _id,
  "slug": slug.current,
  "orderRank": orderRank,
  "jobCount": %s
}""" % _PUBLISHED_REFS,
    "application": """{
  ...,
  "id": _id,
  "jobId": job._ref,
  "job": job->{"id": _id, title, "slug": slug.current, "companyId": company._ref}
}""",
    "user": '{..., "id": _id}',
    "follow": '{..., "id": _id, "companyId": company._ref}',
}

# Logical paths whose GROQ spelling is not just the camelCased path
_PATHS = {
    "job": {
        "id": "_id",
        "slug": "slug.current",
        "company_id": "company._ref",
        "category_id": "category._ref",
        "company.name": "company->name",
        "category.slug": "category->slug.current",
    },
    "company": {"id": "_id", "slug": "slug.current", "locations.city": "locations[].city"},
    "category": {"id": "_id", "slug": "slug.current"},
    "application": {
        "id": "_id",
        "job_id": "job._ref",
        "job.company_id": "job->company._ref",
        "applicant_info.email": "applicantInfo.email",
    },
    "user": {"id": "_id"},
    "follow": {"id": "_id", "company_id": "company._ref"},
}


def camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part[:1].upper() + part[1:] for part in rest)


def field_path(doc_type: str, path: str) -> str:
    mapped = _PATHS.get(doc_type, {}).get(path)
    if mapped is not None:
        return mapped
    return ".".join(camel(part) for part in path.split("."))


def _param_value(value: Any) -> Any:
    if isinstance(value, datetime):
        return to_iso(value)
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, tuple):
        return [_param_value(v) for v in value]
    return value


class GroqCompiler:
    def __init__(self, doc_type: str):
        self.doc_type = doc_type
        self.params: dict[str, Any] = {}

    def param(self, value: Any) -> str:
        name = f"p{len(self.params)}"
        self.params[name] = _param_value(value)
        return f"${name}"

    def path(self, field: str) -> str:
        return field_path(self.doc_type, field)

    def clause(self, clause) -> str:
        if isinstance(clause, Eq):
            if clause.value is None:
                return f"!defined({self.path(clause.field)})"
            return f"{self.path(clause.field)} == {self.param(clause.value)}"
        if isinstance(clause, Ne):
            return f"{self.path(clause.field)} != {self.param(clause.value)}"
        if isinstance(clause, Gt):
            return f"{self.path(clause.field)} > {self.param(clause.value)}"
        if isinstance(clause, Gte):
            return f"{self.path(clause.field)} >= {self.param(clause.value)}"
        if isinstance(clause, In):
            return f"{self.path(clause.field)} in {self.param(clause.values)}"
        if isinstance(clause, Contains):
            return f"{self.param(clause.value)} in {self.path(clause.field)}"
        if isinstance(clause, Match):
            pattern = self.param(clause.pattern)
            return "(" + " || ".join(f"{self.path(f)} match {pattern}" for f in clause.fields) + ")"
        if isinstance(clause, AnyOf):
            return "(" + " || ".join(self.clause(c) for c in clause.clauses) + ")"
        if isinstance(clause, Unexpired):
            path = self.path(clause.field)
            return f"(!defined({path}) || {path} > {self.param(clause.at)})"
        raise TypeError(f"Unsupported clause {clause!r}")

    def filter(self, query: Query) -> str:
        parts = [f'_type == "{DOC_TYPES[query.doc_type]}"']
        parts.extend(self.clause(c) for c in query.where)
        return "*[" + " && ".join(parts) + "]"


def compile_fetch(query: Query) -> tuple[str, dict[str, Any]]:
    compiler = GroqCompiler(query.doc_type)
    groq = compiler.filter(query)
    if query.order:
        keys = ", ".join(
            f"{compiler.path(o.field)} {'desc' if o.descending else 'asc'}" for o in query.order
        )
        groq += f" | order({keys})"
    if query.limit is not None:
        start = compiler.param(query.offset)
        end = compiler.param(query.offset + query.limit)
        groq += f" [{start}...{end}]"
    groq += " " + PROJECTIONS[query.doc_type]
    return groq, compiler.params


def compile_count(query: Query) -> tuple[str, dict[str, Any]]:
    compiler = GroqCompiler(query.doc_type)
    return f"count({compiler.filter(query)})", compiler.params
