"""
Public browsing: paginated job and company listings, detail pages and
category lists.

Page and count queries are issued together and joined; a failure of either
fails the page, which then degrades to sample data.
"""
import asyncio
import logging
import math
from dataclasses import dataclass
from datetime import datetime
from typing import Generic, TypeVar

from jobboard.errors import NotFoundError, StoreError
from jobboard.schemas.category import Category
from jobboard.schemas.company import Company
from jobboard.schemas.filters import CompanyFilters, JobFilters
from jobboard.schemas.job import Job
from jobboard.services import query_builder, sample_data
from jobboard.services.fallback import FetchResult, or_empty, with_fallback
from jobboard.services.query_builder import Listing
from jobboard.store.base import DocumentStore
from jobboard.utils.timestamps import utcnow

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class Page(Generic[T]):
    items: list[T]
    total: int
    page: int
    page_size: int

    @property
    def pages(self) -> int:
        return math.ceil(self.total / self.page_size)


async def fetch_page(store: DocumentStore, listing: Listing) -> Page:
    items, total = await asyncio.gather(
        store.fetch(listing.page_query),
        store.count(listing.count_query),
    )
    return Page(items=items, total=total, page=listing.page, page_size=listing.page_size)


def _slice_page(items: list, page: int, page_size: int) -> Page:
    start, end = query_builder.page_bounds(page, page_size)
    return Page(items=items[start:end], total=len(items), page=page, page_size=page_size)


def _sample_job_matches(job: Job, filters: JobFilters, now: datetime) -> bool:
    if not job.is_visible(now):
        return False
    if filters.category and (job.category is None or job.category.slug != filters.category):
        return False
    if filters.location and (
        job.location is None or filters.location not in (job.location.city, job.location.county)
    ):
        return False
    if filters.job_type and job.job_type != filters.job_type:
        return False
    if filters.experience_level and job.experience_level != filters.experience_level:
        return False
    if filters.salary_min and (job.salary_min is None or job.salary_min < filters.salary_min):
        return False
    if filters.search:
        term = filters.search.lower()
        company_name = job.company.name.lower() if job.company else ""
        if term not in job.title.lower() and term not in company_name:
            return False
    return True


def sample_job_page(filters: JobFilters, page: int, page_size: int, now: datetime) -> Page[Job]:
    matches = [j for j in sample_data.jobs(now) if _sample_job_matches(j, filters, now)]
    # Stable sorts applied from the least to the most significant key
    matches.sort(key=lambda j: j.published_at, reverse=True)
    matches.sort(key=lambda j: j.is_urgent, reverse=True)
    matches.sort(key=lambda j: j.featured, reverse=True)
    return _slice_page(matches, page, page_size)


async def list_jobs(
    store: DocumentStore,
    filters: JobFilters,
    page: int,
    page_size: int,
    now: datetime | None = None,
) -> FetchResult[Page[Job]]:
    now = now or utcnow()
    listing = query_builder.build_job_listing(filters, page, page_size, now)
    return await with_fallback(
        "job listing",
        lambda: fetch_page(store, listing),
        lambda: sample_job_page(filters, page, page_size, now),
    )


def sample_company_page(filters: CompanyFilters, page: int, page_size: int) -> Page[Company]:
    matches = []
    for company in sample_data.companies():
        if filters.search and filters.search.lower() not in company.name.lower():
            continue
        if filters.size and company.size != filters.size:
            continue
        if filters.location and filters.location not in [loc.city for loc in company.locations]:
            continue
        matches.append(company)
    matches.sort(key=lambda c: c.name)
    matches.sort(key=lambda c: c.verified, reverse=True)
    return _slice_page(matches, page, page_size)


async def list_companies(
    store: DocumentStore, filters: CompanyFilters, page: int, page_size: int
) -> FetchResult[Page[Company]]:
    listing = query_builder.build_company_listing(filters, page, page_size)
    return await with_fallback(
        "company listing",
        lambda: fetch_page(store, listing),
        lambda: sample_company_page(filters, page, page_size),
    )


async def featured_jobs(store: DocumentStore, now: datetime | None = None) -> FetchResult[list[Job]]:
    now = now or utcnow()
    return await with_fallback(
        "featured jobs",
        lambda: store.fetch(query_builder.featured_jobs_query(now)),
        lambda: [j for j in sample_data.jobs(now) if j.featured],
    )


async def urgent_jobs(store: DocumentStore, now: datetime | None = None) -> FetchResult[list[Job]]:
    now = now or utcnow()
    return await with_fallback(
        "urgent jobs",
        lambda: store.fetch(query_builder.urgent_jobs_query(now)),
        lambda: [j for j in sample_data.jobs(now) if j.is_urgent],
    )


async def get_visible_job(store: DocumentStore, slug: str, now: datetime | None = None) -> Job:
    now = now or utcnow()
    job = await store.first(query_builder.job_by_slug_query(slug))
    if job is None or not job.is_visible(now):
        raise NotFoundError(f"Job '{slug}' not found")
    return job


async def job_detail(store: DocumentStore, slug: str, now: datetime | None = None) -> tuple[Job, list[Job]]:
    """Visible job by slug with its view counted, plus related jobs."""
    now = now or utcnow()
    job = await get_visible_job(store, slug, now)

    async def count_view():
        try:
            return await store.patch("job", job.id).inc("view_count").commit()
        except StoreError as exc:
            logger.warning("Could not count view for job %s: %s", job.id, exc)
            return job

    job, related = await asyncio.gather(
        count_view(),
        or_empty("related jobs", lambda: store.fetch(query_builder.related_jobs_query(job, now))),
    )
    return job, related


async def company_detail(store: DocumentStore, slug: str, now: datetime | None = None) -> tuple[Company, list[Job]]:
    now = now or utcnow()
    company = await store.first(query_builder.company_by_slug_query(slug))
    if company is None:
        raise NotFoundError(f"Company '{slug}' not found")
    jobs = await or_empty("company jobs", lambda: store.fetch(query_builder.company_jobs_query(company.id, now)))
    return company, jobs


async def list_categories(store: DocumentStore) -> FetchResult[list[Category]]:
    return await with_fallback(
        "categories",
        lambda: store.fetch(query_builder.categories_query()),
        sample_data.categories,
    )


async def popular_categories(store: DocumentStore, limit: int = 8) -> FetchResult[list[Category]]:
    result = await list_categories(store)
    ranked = sorted(result.data, key=lambda c: c.job_count, reverse=True)
    result.data = ranked[:limit]
    return result
