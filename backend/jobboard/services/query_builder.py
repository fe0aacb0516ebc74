"""
Translate public filter sets into store queries.

Every listing is built as a single ``Query``; the matching count query is
derived from it with ``Query.count_query()`` so the page and the total are
always computed from the same clauses.
"""
from dataclasses import dataclass
from datetime import datetime

from jobboard.errors import InvalidPageSizeError
from jobboard.schemas.filters import CompanyFilters, JobFilters
from jobboard.store.query import AnyOf, Contains, Eq, Gte, Match, Ne, OrderBy, Query, Unexpired, wildcard

JOB_ORDER = (
    OrderBy("featured", descending=True),
    OrderBy("is_urgent", descending=True),
    OrderBy("published_at", descending=True),
)

COMPANY_ORDER = (
    OrderBy("verified", descending=True),
    OrderBy("name"),
)

CATEGORY_ORDER = (OrderBy("order_rank"), OrderBy("name"))


@dataclass(frozen=True)
class Listing:
    page_query: Query
    count_query: Query
    page: int
    page_size: int


def page_bounds(page: int, page_size: int) -> tuple[int, int]:
    """Item range ``[start, end)`` for a 1-based page."""
    if page_size <= 0:
        raise InvalidPageSizeError(page_size)
    if page < 1:
        raise ValueError(f"page must be >= 1, got {page}")
    start = (page - 1) * page_size
    return start, start + page_size


def visible_job_clauses(now: datetime) -> tuple:
    return (Eq("status", "published"), Unexpired("expires_at", now))


def job_filter_clauses(filters: JobFilters, now: datetime) -> tuple:
    clauses = list(visible_job_clauses(now))
    if filters.category:
        clauses.append(Eq("category.slug", filters.category))
    if filters.location:
        clauses.append(AnyOf((Eq("location.city", filters.location), Eq("location.county", filters.location))))
    if filters.job_type:
        clauses.append(Eq("job_type", filters.job_type))
    if filters.experience_level:
        clauses.append(Eq("experience_level", filters.experience_level))
    if filters.salary_min:
        clauses.append(Gte("salary_min", filters.salary_min))
    if filters.search:
        clauses.append(Match(("title", "company.name"), wildcard(filters.search)))
    return tuple(clauses)


def build_job_listing(filters: JobFilters, page: int, page_size: int, now: datetime) -> Listing:
    start, end = page_bounds(page, page_size)
    query = Query("job", job_filter_clauses(filters, now), JOB_ORDER, tags=("jobs",)).sliced(start, end)
    return Listing(query, query.count_query(), page, page_size)


def company_filter_clauses(filters: CompanyFilters) -> tuple:
    clauses = []
    if filters.search:
        clauses.append(Match(("name",), wildcard(filters.search)))
    if filters.size:
        clauses.append(Eq("size", filters.size))
    if filters.location:
        clauses.append(Contains("locations.city", filters.location))
    return tuple(clauses)


def build_company_listing(filters: CompanyFilters, page: int, page_size: int) -> Listing:
    start, end = page_bounds(page, page_size)
    query = Query("company", company_filter_clauses(filters), COMPANY_ORDER, tags=("companies",)).sliced(start, end)
    return Listing(query, query.count_query(), page, page_size)


def featured_jobs_query(now: datetime, limit: int = 6) -> Query:
    return Query(
        "job",
        (*visible_job_clauses(now), Eq("featured", True)),
        (OrderBy("published_at", descending=True),),
        tags=("jobs",),
    ).sliced(0, limit)


def urgent_jobs_query(now: datetime, limit: int = 10) -> Query:
    return Query(
        "job",
        (*visible_job_clauses(now), Eq("is_urgent", True)),
        (OrderBy("published_at", descending=True),),
        tags=("jobs",),
    ).sliced(0, limit)


def job_by_slug_query(slug: str) -> Query:
    return Query("job", (Eq("slug", slug),), tags=("jobs", f"job-{slug}")).sliced(0, 1)


def related_jobs_query(job, now: datetime, limit: int = 4) -> Query:
    """Visible jobs sharing the category or the city of ``job``, newest first."""
    alternatives = []
    if job.category_id:
        alternatives.append(Eq("category_id", job.category_id))
    if job.location and job.location.city:
        alternatives.append(Eq("location.city", job.location.city))
    if not alternatives:
        # Nothing to relate on: match no document
        alternatives.append(Eq("id", None))
    return Query(
        "job",
        (*visible_job_clauses(now), Ne("id", job.id), AnyOf(tuple(alternatives))),
        (OrderBy("published_at", descending=True),),
        tags=("jobs", f"job-{job.slug}"),
    ).sliced(0, limit)


def company_by_slug_query(slug: str) -> Query:
    return Query("company", (Eq("slug", slug),), tags=("companies", f"company-{slug}")).sliced(0, 1)


def company_jobs_query(company_id: str, now: datetime) -> Query:
    return Query(
        "job",
        (*visible_job_clauses(now), Eq("company_id", company_id)),
        JOB_ORDER,
        tags=("jobs", "companies"),
    )


def categories_query() -> Query:
    return Query("category", (), CATEGORY_ORDER, tags=("categories",))
