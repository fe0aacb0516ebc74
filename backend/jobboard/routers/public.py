from fastapi import APIRouter, Depends, Query

from jobboard.config import settings
from jobboard.dependencies import get_store
from jobboard.schemas.application import Application, ApplicationCreate
from jobboard.schemas.category import CategoryListResponse
from jobboard.schemas.common import CompanySize, ExperienceLevel, JobType
from jobboard.schemas.company import CompanyDetailResponse, CompanyListResponse
from jobboard.schemas.filters import CompanyFilters, JobFilters
from jobboard.schemas.job import JobDetailResponse, JobListResponse
from jobboard.services import application_service, listing_service
from jobboard.services.fuzzy_search import COMPANY_KEYS, JOB_KEYS, refine
from jobboard.store.base import DocumentStore

router = APIRouter(prefix="/public", tags=["public"])


@router.get("/jobs", response_model=JobListResponse)
async def list_jobs(
    category: str | None = None,
    location: str | None = None,
    job_type: JobType | None = None,
    experience_level: ExperienceLevel | None = None,
    salary_min: int | None = Query(None, ge=0),
    search: str | None = None,
    refine_query: str | None = Query(None, alias="refine"),
    page: int = Query(1, ge=1),
    page_size: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    store: DocumentStore = Depends(get_store),
):
    filters = JobFilters(
        category=category,
        location=location,
        job_type=job_type,
        experience_level=experience_level,
        salary_min=salary_min,
        search=search,
    )
    result = await listing_service.list_jobs(store, filters, page, page_size)
    page_data = result.data
    jobs = page_data.items
    refined = bool(refine_query and refine_query.strip())
    if refined:
        # Narrows the fetched page only; total still counts the whole listing
        jobs = refine(jobs, refine_query, JOB_KEYS, settings.fuzzy_threshold)
    return JobListResponse(
        jobs=jobs,
        total=page_data.total,
        page=page_data.page,
        page_size=page_data.page_size,
        pages=page_data.pages,
        degraded=result.degraded,
        refined=refined,
    )


@router.get("/jobs/featured", response_model=JobListResponse)
async def featured_jobs(store: DocumentStore = Depends(get_store)):
    result = await listing_service.featured_jobs(store)
    return JobListResponse(
        jobs=result.data, total=len(result.data), page=1, page_size=6, pages=1, degraded=result.degraded
    )


@router.get("/jobs/urgent", response_model=JobListResponse)
async def urgent_jobs(store: DocumentStore = Depends(get_store)):
    result = await listing_service.urgent_jobs(store)
    return JobListResponse(
        jobs=result.data, total=len(result.data), page=1, page_size=10, pages=1, degraded=result.degraded
    )


@router.get("/jobs/{slug}", response_model=JobDetailResponse)
async def get_job(slug: str, store: DocumentStore = Depends(get_store)):
    job, related = await listing_service.job_detail(store, slug)
    return JobDetailResponse(job=job, related=related)


@router.post("/jobs/{slug}/applications", response_model=Application, status_code=201)
async def apply_to_job(slug: str, req: ApplicationCreate, store: DocumentStore = Depends(get_store)):
    return await application_service.submit_application(store, slug, req)


@router.get("/companies", response_model=CompanyListResponse)
async def list_companies(
    search: str | None = None,
    size: CompanySize | None = None,
    location: str | None = None,
    refine_query: str | None = Query(None, alias="refine"),
    page: int = Query(1, ge=1),
    page_size: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    store: DocumentStore = Depends(get_store),
):
    filters = CompanyFilters(search=search, size=size, location=location)
    result = await listing_service.list_companies(store, filters, page, page_size)
    companies = result.data.items
    refined = bool(refine_query and refine_query.strip())
    if refined:
        companies = refine(companies, refine_query, COMPANY_KEYS, settings.fuzzy_threshold)
    return CompanyListResponse(
        companies=companies,
        total=result.data.total,
        page=page,
        page_size=page_size,
        pages=result.data.pages,
        degraded=result.degraded,
        refined=refined,
    )


@router.get("/companies/{slug}", response_model=CompanyDetailResponse)
async def get_company(slug: str, store: DocumentStore = Depends(get_store)):
    company, jobs = await listing_service.company_detail(store, slug)
    return CompanyDetailResponse(company=company, jobs=jobs)


@router.get("/categories", response_model=CategoryListResponse)
async def list_categories(store: DocumentStore = Depends(get_store)):
    result = await listing_service.list_categories(store)
    return CategoryListResponse(categories=result.data, degraded=result.degraded)


@router.get("/categories/popular", response_model=CategoryListResponse)
async def popular_categories(store: DocumentStore = Depends(get_store)):
    result = await listing_service.popular_categories(store)
    return CategoryListResponse(categories=result.data, degraded=result.degraded)
