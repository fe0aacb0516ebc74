"""
Dashboard aggregates for one company.

The pure functions at the top derive figures from documents already loaded;
the coroutines below load what they need (independent reads fanned out with
``asyncio.gather``) and fall back to flagged sample data on store failure.
"""
import asyncio
import math
from datetime import datetime, timedelta, timezone

from jobboard.config import settings
from jobboard.schemas.application import Application
from jobboard.schemas.common import ApplicationStatus
from jobboard.schemas.dashboard import (
    ActivityItem,
    ActivityMetadata,
    DashboardResponse,
    DashboardStats,
    JobPerformance,
    TrendPoint,
)
from jobboard.schemas.job import Job, JobMetrics
from jobboard.services import sample_data
from jobboard.services.fallback import FetchResult, with_fallback
from jobboard.store.base import DocumentStore
from jobboard.store.query import Eq, Gt, Gte, OrderBy, Query
from jobboard.utils.timestamps import to_iso, utcnow

APPLICATION_STATUSES: tuple[ApplicationStatus, ...] = ("new", "reviewed", "interviewing", "hired", "rejected")
MAX_TREND_DAYS = 365


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def conversion_rate(applications: int, views: int) -> float:
    if not views:
        return 0.0
    return round(applications / views * 100, 1)


def average_time_to_hire(hires: list[Application]) -> int:
    """Mean whole days from application to interview over hired applications.

    Hires without an interview date, or with one recorded before the
    application, have no measurable duration and are left out. No measurable
    hires gives 0.
    """
    durations = [
        math.floor((app.interview_date - app.applied_date).total_seconds() / 86400)
        for app in hires
        if app.interview_date is not None and app.interview_date >= app.applied_date
    ]
    if not durations:
        return 0
    return _round_half_up(sum(durations) / len(durations))


def rank_jobs(jobs: list[Job], limit: int = 5) -> list[JobPerformance]:
    ranked = sorted(jobs, key=lambda j: j.view_count, reverse=True)
    return [
        JobPerformance(
            job_id=job.id,
            title=job.title,
            views=job.view_count,
            applications=job.application_count,
            conversion_rate=conversion_rate(job.application_count, job.view_count),
        )
        for job in ranked[:limit]
    ]


def trend_window_start(now: datetime, days: int) -> datetime:
    """Midnight UTC of the oldest day in a ``days``-day window ending today."""
    today = now.astimezone(timezone.utc).replace(hour=0, minute=0, second=0, microsecond=0)
    return today - timedelta(days=days - 1)


def application_trend(applied: list[datetime], days: int, now: datetime) -> list[TrendPoint]:
    """Bucket application times by UTC calendar day, one point per day, oldest first."""
    if days < 1:
        raise ValueError("days must be at least 1")
    counts: dict[str, int] = {}
    for moment in applied:
        key = moment.astimezone(timezone.utc).date().isoformat()
        counts[key] = counts.get(key, 0) + 1
    today = now.astimezone(timezone.utc).date()
    return [
        TrendPoint(date=day, count=counts.get(day, 0))
        for day in ((today - timedelta(days=offset)).isoformat() for offset in range(days - 1, -1, -1))
    ]


def merge_activity(applications: list[Application], jobs: list[Job], limit: int) -> list[ActivityItem]:
    items = []
    for app in applications:
        title = app.job.title if app.job else None
        items.append(ActivityItem(
            id=app.id,
            type="application",
            title="New application received",
            description=f"{app.applicant_info.name} applied for {title or 'a job'}",
            timestamp=to_iso(app.applied_date),
            metadata=ActivityMetadata(job_title=title, applicant_name=app.applicant_info.name, job_id=app.job_id),
        ))
    for job in jobs:
        if job.published_at is None:
            continue
        items.append(ActivityItem(
            id=job.id,
            type="job_posted",
            title="Job posted",
            description=f"{job.title} is now live",
            timestamp=to_iso(job.published_at),
            metadata=ActivityMetadata(job_title=job.title, job_id=job.id),
        ))
    # ISO timestamps in one format sort chronologically as strings
    items.sort(key=lambda item: item.timestamp, reverse=True)
    return items[:limit]


# --- store-backed ---------------------------------------------------------

def _company_jobs(company_id: str, *clauses) -> Query:
    return Query("job", (Eq("company_id", company_id), *clauses))


def _company_applications(company_id: str, *clauses) -> Query:
    return Query("application", (Eq("job.company_id", company_id), *clauses))


async def _load_stats(store: DocumentStore, company_id: str, now: datetime) -> DashboardStats:
    since = now - timedelta(days=settings.new_application_window_days)
    jobs_query = _company_jobs(company_id)
    total_jobs, active_jobs, total_applications, new_applications, jobs, hires = await asyncio.gather(
        store.count(jobs_query),
        store.count(_company_jobs(company_id, Eq("status", "published"))),
        store.count(_company_applications(company_id)),
        store.count(_company_applications(company_id, Gt("applied_date", since))),
        store.fetch(jobs_query),
        store.fetch(_company_applications(company_id, Eq("status", "hired"))),
    )
    return DashboardStats(
        total_jobs=total_jobs,
        active_jobs=active_jobs,
        total_applications=total_applications,
        new_applications=new_applications,
        total_views=sum(job.view_count for job in jobs),
        average_time_to_hire=average_time_to_hire(hires),
    )


async def dashboard_stats(
    store: DocumentStore, company_id: str, now: datetime | None = None
) -> FetchResult[DashboardStats]:
    now = now or utcnow()
    return await with_fallback(
        "dashboard stats",
        lambda: _load_stats(store, company_id, now),
        sample_data.dashboard_stats,
    )


async def _load_activity(store: DocumentStore, company_id: str, limit: int) -> list[ActivityItem]:
    applications, jobs = await asyncio.gather(
        store.fetch(
            Query(
                "application",
                (Eq("job.company_id", company_id),),
                (OrderBy("applied_date", descending=True),),
            ).sliced(0, limit)
        ),
        store.fetch(
            Query(
                "job",
                (Eq("company_id", company_id), Eq("status", "published")),
                (OrderBy("published_at", descending=True),),
            ).sliced(0, limit)
        ),
    )
    return merge_activity(applications, jobs, limit)


async def recent_activity(
    store: DocumentStore, company_id: str, limit: int = 10, now: datetime | None = None
) -> FetchResult[list[ActivityItem]]:
    now = now or utcnow()
    return await with_fallback(
        "recent activity",
        lambda: _load_activity(store, company_id, limit),
        lambda: sample_data.recent_activity(now, limit),
    )


async def top_jobs(store: DocumentStore, company_id: str, limit: int = 5) -> FetchResult[list[JobPerformance]]:
    query = Query(
        "job",
        (Eq("company_id", company_id), Eq("status", "published")),
        (OrderBy("view_count", descending=True),),
    ).sliced(0, limit)

    async def load():
        return rank_jobs(await store.fetch(query), limit)

    return await with_fallback("top jobs", load, lambda: sample_data.top_jobs(limit))


async def application_trends(
    store: DocumentStore, company_id: str, days: int = 30, now: datetime | None = None
) -> FetchResult[list[TrendPoint]]:
    if not 1 <= days <= MAX_TREND_DAYS:
        raise ValueError(f"days must be between 1 and {MAX_TREND_DAYS}")
    now = now or utcnow()
    query = _company_applications(company_id, Gte("applied_date", trend_window_start(now, days)))

    async def load():
        applications = await store.fetch(query)
        return application_trend([app.applied_date for app in applications], days, now)

    return await with_fallback("application trends", load, lambda: sample_data.application_trend(now, days))


async def dashboard(store: DocumentStore, company_id: str, now: datetime | None = None) -> DashboardResponse:
    now = now or utcnow()
    sections = ("stats", "activity", "top_jobs", "trends")
    results = await asyncio.gather(
        dashboard_stats(store, company_id, now),
        recent_activity(store, company_id, 10, now),
        top_jobs(store, company_id),
        application_trends(store, company_id, 30, now),
    )
    stats, activity, ranked, trends = results
    degraded = [name for name, result in zip(sections, results) if result.degraded]
    return DashboardResponse(
        stats=stats.data,
        activity=activity.data,
        top_jobs=ranked.data,
        trends=trends.data,
        degraded=bool(degraded),
        degraded_sections=degraded,
    )


async def job_metrics(store: DocumentStore, job: Job) -> JobMetrics:
    """Per-job figures for its owner; store errors propagate."""
    counts = await asyncio.gather(*(
        store.count(Query("application", (Eq("job_id", job.id), Eq("status", status))))
        for status in APPLICATION_STATUSES
    ))
    return JobMetrics(
        job_id=job.id,
        title=job.title,
        views=job.view_count,
        applications=job.application_count,
        conversion_rate=conversion_rate(job.application_count, job.view_count),
        applications_by_status=dict(zip(APPLICATION_STATUSES, counts)),
    )
