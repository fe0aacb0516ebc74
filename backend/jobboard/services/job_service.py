"""
Employer-side job management. Store errors are never masked here.
"""
import asyncio
import logging
from datetime import datetime

from jobboard.errors import ForbiddenError, NotFoundError
from jobboard.schemas.job import Job, JobCreate, JobUpdate
from jobboard.schemas.user import CurrentUser
from jobboard.services.listing_service import Page, fetch_page
from jobboard.services.query_builder import Listing, page_bounds
from jobboard.store.base import DocumentStore
from jobboard.store.query import Eq, In, OrderBy, Query
from jobboard.utils.slug import slugify
from jobboard.utils.timestamps import utcnow

logger = logging.getLogger(__name__)

_CLEARABLE = {"responsibilities", "salary_max", "application_deadline", "start_date", "expires_at"}


async def unique_slug(store: DocumentStore, title: str) -> str:
    base = slugify(title)
    candidate = base
    suffix = 2
    while await store.count(Query("job", (Eq("slug", candidate),))):
        candidate = f"{base}-{suffix}"
        suffix += 1
    return candidate


async def list_company_jobs(
    store: DocumentStore, company_id: str, status: str | None, page: int, page_size: int
) -> Page[Job]:
    clauses = [Eq("company_id", company_id)]
    if status:
        clauses.append(Eq("status", status))
    start, end = page_bounds(page, page_size)
    query = Query("job", tuple(clauses), (OrderBy("created_at", descending=True),)).sliced(start, end)
    return await fetch_page(store, Listing(query, query.count_query(), page, page_size))


async def get_owned_job(store: DocumentStore, job_id: str, user: CurrentUser) -> Job:
    job = await store.get("job", job_id)
    if job is None:
        raise NotFoundError("Job not found")
    if job.company_id != user.company_id:
        raise ForbiddenError("You do not own this job")
    return job


async def create_job(store: DocumentStore, company_id: str, data: JobCreate, now: datetime | None = None) -> Job:
    now = now or utcnow()
    fields = data.model_dump()
    fields.update(
        company_id=company_id,
        slug=await unique_slug(store, data.title),
        view_count=0,
        application_count=0,
        published_at=now if data.status == "published" else None,
    )
    job = await store.create("job", fields)
    logger.info("Created job %s (%s) for company %s", job.id, job.status, company_id)
    return job


async def update_job(store: DocumentStore, job: Job, data: JobUpdate, now: datetime | None = None) -> Job:
    # An explicit null only clears optional fields
    fields = {
        key: value
        for key, value in data.model_dump(exclude_unset=True).items()
        if value is not None or key in _CLEARABLE
    }
    if fields.get("status") == "published" and job.published_at is None:
        # Publish time is stamped on the first publish only
        fields["published_at"] = now or utcnow()
    salary_min = fields.get("salary_min", job.salary_min)
    salary_max = fields.get("salary_max", job.salary_max)
    if salary_min is not None and salary_max is not None and salary_max < salary_min:
        raise ValueError("Maximum salary must be greater than minimum salary")
    if not fields:
        return job
    return await store.patch("job", job.id).set(fields).commit()


async def delete_job(store: DocumentStore, job: Job) -> None:
    await store.delete("job", job.id)
    logger.info("Deleted job %s", job.id)


async def bulk_action(
    store: DocumentStore, user: CurrentUser, action: str, job_ids: list[str], now: datetime | None = None
) -> int:
    """Apply ``action`` to every job in ``job_ids`` or to none of them.

    Ownership of the whole batch is checked before the first mutation.
    """
    ids = list(dict.fromkeys(job_ids))
    owned = await store.fetch(Query("job", (In("id", tuple(ids)), Eq("company_id", user.company_id))))
    if len(owned) != len(ids):
        raise ForbiddenError("One or more jobs not found or unauthorized")

    now = now or utcnow()
    if action == "delete":
        mutations = [store.delete("job", job.id) for job in owned]
    elif action == "expire":
        mutations = [store.patch("job", job.id).set({"status": "expired"}).commit() for job in owned]
    elif action == "publish":
        mutations = [
            store.patch("job", job.id).set({"status": "published", "published_at": job.published_at or now}).commit()
            for job in owned
        ]
    else:
        raise ValueError(f"Invalid action '{action}'")
    await asyncio.gather(*mutations)
    logger.info("Bulk %s applied to %d jobs for company %s", action, len(ids), user.company_id)
    return len(ids)
