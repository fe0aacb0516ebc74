"""
Canned sample content served by read paths when the document store is down.

Anything returned from here is flagged ``degraded`` by the caller; none of it
is ever written to the store.
"""
import random
from datetime import datetime, timedelta

from jobboard.schemas.category import Category
from jobboard.schemas.common import Location
from jobboard.schemas.company import Company
from jobboard.schemas.dashboard import (
    ActivityItem,
    ActivityMetadata,
    DashboardStats,
    JobPerformance,
    TrendPoint,
)
from jobboard.schemas.job import CategorySummary, CompanySummary, Job
from jobboard.utils.timestamps import to_iso

_COMPANIES = [
    {
        "id": "company1",
        "name": "ABC Construction",
        "slug": "abc-construction",
        "description": "ABC Construction is a general contractor in Colorado, specializing in "
        "commercial and residential construction projects.",
        "website": "https://abcconstruction.com",
        "email": "careers@abcconstruction.com",
        "phone": "(303) 555-0123",
        "size": "51-200",
        "locations": [{"city": "Denver", "zip_code": "80202"}, {"city": "Aurora", "zip_code": "80012"}],
        "benefits_offered": ["Health Insurance", "Dental Insurance", "401(k) with company match"],
        "verified": True,
        "job_count": 1,
    },
    {
        "id": "company2",
        "name": "Lightning Electric Co.",
        "slug": "lightning-electric",
        "description": "Lightning Electric Co. has served the Boulder area for over 20 years with "
        "residential and commercial electrical work.",
        "website": "https://lightningelectric.com",
        "email": "jobs@lightningelectric.com",
        "phone": "(303) 555-0456",
        "size": "11-50",
        "locations": [{"city": "Boulder", "zip_code": "80301"}, {"city": "Westminster", "zip_code": "80031"}],
        "benefits_offered": ["Health Insurance", "Paid time off", "Tool allowance"],
        "verified": True,
        "job_count": 1,
    },
    {
        "id": "company3",
        "name": "Cool Air Services",
        "slug": "cool-air-services",
        "description": "Cool Air Services provides HVAC installation, maintenance and repair "
        "throughout Colorado Springs.",
        "website": "https://coolairservices.com",
        "email": "careers@coolairservices.com",
        "phone": "(719) 555-0789",
        "size": "11-50",
        "locations": [{"city": "Colorado Springs", "zip_code": "80905"}],
        "benefits_offered": ["Health Insurance", "Paid holidays", "Vehicle provided"],
        "verified": False,
        "job_count": 1,
    },
]

_CATEGORIES = [
    ("cat1", "Construction", "construction", "Construction and building trades", 25),
    ("cat2", "Electrical", "electrical", "Electrical work and installation", 15),
    ("cat3", "HVAC", "hvac", "Heating, ventilation, and air conditioning", 8),
    ("cat4", "Plumbing", "plumbing", "Plumbing installation and repair", 12),
    ("cat5", "Manufacturing", "manufacturing", "Manufacturing and production jobs", 18),
]

# (id, title, slug, company index, category index, salary, city, county, zip, level, urgent, featured, age days, views, applications)
_JOBS = [
    ("1", "Construction Foreman", "construction-foreman-abc", 0, 0, (35, 45), "Denver", "Denver County",
     "80202", "experienced", True, False, 0, 124, 8),
    ("2", "Electrician", "electrician-lightning", 1, 1, (28, 38), "Boulder", "Boulder County",
     "80301", "intermediate", False, True, 1, 89, 12),
    ("3", "HVAC Technician", "hvac-tech-cool-air", 2, 2, (25, 35), "Colorado Springs", "El Paso County",
     "80905", "entry", False, False, 2, 45, 3),
]

_STATS = DashboardStats(
    total_jobs=24,
    active_jobs=18,
    total_applications=156,
    new_applications=23,
    total_views=2847,
    average_time_to_hire=12,
)

# (hours ago, type, title, description, job title, applicant, job id)
_ACTIVITY = [
    (2, "application", "New application received", "John Smith applied for Senior Electrician position",
     "Senior Electrician", "John Smith", "job1"),
    (5, "job_posted", "Job posted", "Construction Foreman position is now live",
     "Construction Foreman", None, "job2"),
    (8, "application", "New application received", "Maria Garcia applied for HVAC Technician position",
     "HVAC Technician", "Maria Garcia", "job3"),
    (12, "interview_scheduled", "Interview scheduled", "Interview scheduled with David Wilson for Welder position",
     "Welder", "David Wilson", "job4"),
    (24, "application", "New application received", "Sarah Johnson applied for Project Manager position",
     "Project Manager", "Sarah Johnson", "job5"),
]

_TOP_JOBS = [
    ("job1", "Senior Electrician", 324, 28),
    ("job2", "Construction Foreman", 298, 22),
    ("job3", "HVAC Technician", 267, 31),
    ("job4", "Welder", 245, 19),
    ("job5", "Project Manager", 189, 15),
]


def companies() -> list[Company]:
    return [Company.model_validate(c) for c in _COMPANIES]


def categories() -> list[Category]:
    return [
        Category(id=cid, name=name, slug=slug, description=desc, order_rank=rank, job_count=count)
        for rank, (cid, name, slug, desc, count) in enumerate(_CATEGORIES)
    ]


def jobs(now: datetime) -> list[Job]:
    result = []
    for (job_id, title, slug, company_idx, category_idx, (low, high), city, county, zip_code,
         level, urgent, featured, age_days, views, applications) in _JOBS:
        company = _COMPANIES[company_idx]
        cid, cname, cslug, _, _ = _CATEGORIES[category_idx]
        result.append(Job(
            id=job_id,
            title=title,
            slug=slug,
            company_id=company["id"],
            category_id=cid,
            description=f"{title} position with {company['name']} in {city}.",
            salary_type="hourly",
            salary_min=low,
            salary_max=high,
            location=Location(city=city, county=county, zip_code=zip_code),
            job_type="full-time",
            experience_level=level,
            benefits=["Health Insurance"],
            is_urgent=urgent,
            featured=featured,
            status="published",
            published_at=now - timedelta(days=age_days),
            view_count=views,
            application_count=applications,
            company=CompanySummary(
                id=company["id"], name=company["name"], slug=company["slug"], verified=company["verified"]
            ),
            category=CategorySummary(id=cid, name=cname, slug=cslug),
        ))
    return result


def dashboard_stats() -> DashboardStats:
    return _STATS.model_copy()


def recent_activity(now: datetime, limit: int = 10) -> list[ActivityItem]:
    items = [
        ActivityItem(
            id=str(i + 1),
            type=kind,
            title=title,
            description=description,
            timestamp=to_iso(now - timedelta(hours=hours)),
            metadata=ActivityMetadata(job_title=job_title, applicant_name=applicant, job_id=job_id),
        )
        for i, (hours, kind, title, description, job_title, applicant, job_id) in enumerate(_ACTIVITY)
    ]
    return items[:limit]


def top_jobs(limit: int = 5) -> list[JobPerformance]:
    return [
        JobPerformance(
            job_id=job_id,
            title=title,
            views=views,
            applications=apps,
            conversion_rate=round(apps / views * 100, 1),
        )
        for job_id, title, views, apps in _TOP_JOBS[:limit]
    ]


def application_trend(now: datetime, days: int = 30) -> list[TrendPoint]:
    """One point per day, oldest first, with 1-8 applications a day."""
    rng = random.Random(days)
    today = now.date()
    return [
        TrendPoint(date=(today - timedelta(days=offset)).isoformat(), count=rng.randint(1, 8))
        for offset in range(days - 1, -1, -1)
    ]
