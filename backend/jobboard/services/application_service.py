import logging
from datetime import datetime

from jobboard.errors import DuplicateApplicationError, ForbiddenError, NotFoundError, StoreError
from jobboard.schemas.application import Application, ApplicationCreate, ApplicationUpdate
from jobboard.schemas.user import CurrentUser
from jobboard.services.listing_service import Page, fetch_page, get_visible_job
from jobboard.services.query_builder import Listing, page_bounds
from jobboard.store.base import DocumentStore
from jobboard.store.query import Eq, OrderBy, Query
from jobboard.utils.timestamps import utcnow

logger = logging.getLogger(__name__)

NEWEST_FIRST = (OrderBy("applied_date", descending=True),)


def normalize_email(email: str) -> str:
    return email.strip().lower()


async def has_applied(store: DocumentStore, job_id: str, email: str) -> bool:
    query = Query("application", (Eq("job_id", job_id), Eq("applicant_info.email", normalize_email(email))))
    return await store.count(query) > 0


async def submit_application(
    store: DocumentStore, slug: str, data: ApplicationCreate, now: datetime | None = None
) -> Application:
    """Create an application for a publicly visible job.

    The duplicate check and the create are separate calls, so two concurrent
    submissions for the same job and email can both get through. The counter
    increment is a third call; if it fails the application still stands and
    the job's count lags behind.
    """
    now = now or utcnow()
    job = await get_visible_job(store, slug, now)
    email = normalize_email(data.applicant_info.email)
    if await has_applied(store, job.id, email):
        raise DuplicateApplicationError(job.id, email)

    applicant = data.applicant_info.model_dump()
    applicant["email"] = email
    application = await store.create(
        "application",
        {
            "job_id": job.id,
            "applicant_info": applicant,
            "cover_message": data.cover_message,
            "status": "new",
            "applied_date": now,
        },
    )
    try:
        await store.patch("job", job.id).inc("application_count").commit()
    except StoreError:
        logger.exception("Application %s created but job %s count was not incremented", application.id, job.id)
    logger.info("Application %s submitted for job %s", application.id, job.id)
    return application


async def list_company_applications(
    store: DocumentStore,
    company_id: str,
    job_id: str | None,
    status: str | None,
    page: int,
    page_size: int,
) -> Page[Application]:
    clauses = [Eq("job.company_id", company_id)]
    if job_id:
        clauses.append(Eq("job_id", job_id))
    if status:
        clauses.append(Eq("status", status))
    start, end = page_bounds(page, page_size)
    query = Query("application", tuple(clauses), NEWEST_FIRST).sliced(start, end)
    return await fetch_page(store, Listing(query, query.count_query(), page, page_size))


async def applications_for_email(store: DocumentStore, email: str) -> list[Application]:
    return await store.fetch(
        Query("application", (Eq("applicant_info.email", normalize_email(email)),), NEWEST_FIRST)
    )


async def get_owned_application(store: DocumentStore, application_id: str, user: CurrentUser) -> Application:
    application = await store.get("application", application_id)
    if application is None:
        raise NotFoundError("Application not found")
    company_id = application.job.company_id if application.job else None
    if company_id is None:
        job = await store.get("job", application.job_id)
        company_id = job.company_id if job else None
    if company_id != user.company_id:
        raise ForbiddenError("You do not own this application")
    return application


async def update_application(store: DocumentStore, application: Application, data: ApplicationUpdate) -> Application:
    fields = data.model_dump(exclude_unset=True)
    if "status" in fields and fields["status"] is None:
        del fields["status"]
    if not fields:
        return application
    updated = await store.patch("application", application.id).set(fields).commit()
    logger.info("Application %s updated: %s", application.id, ", ".join(sorted(fields)))
    return updated
