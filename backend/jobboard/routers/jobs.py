from fastapi import APIRouter, Depends, HTTPException, Query

from jobboard.config import settings
from jobboard.dependencies import get_store, require_employer
from jobboard.schemas.common import JobStatus
from jobboard.schemas.job import (
    BulkActionRequest,
    BulkActionResponse,
    Job,
    JobCreate,
    JobListResponse,
    JobMetrics,
    JobUpdate,
)
from jobboard.schemas.user import CurrentUser
from jobboard.services import job_service, stats_service
from jobboard.store.base import DocumentStore

router = APIRouter(
    prefix="/jobs",
    tags=["jobs"],
    dependencies=[Depends(require_employer)],
)


@router.get("", response_model=JobListResponse)
async def list_jobs(
    status: JobStatus | None = None,
    page: int = Query(1, ge=1),
    page_size: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    user: CurrentUser = Depends(require_employer),
    store: DocumentStore = Depends(get_store),
):
    result = await job_service.list_company_jobs(store, user.company_id, status, page, page_size)
    return JobListResponse(
        jobs=result.items,
        total=result.total,
        page=result.page,
        page_size=result.page_size,
        pages=result.pages,
    )


@router.post("", response_model=Job, status_code=201)
async def create_job(
    req: JobCreate,
    user: CurrentUser = Depends(require_employer),
    store: DocumentStore = Depends(get_store),
):
    return await job_service.create_job(store, user.company_id, req)


@router.post("/bulk", response_model=BulkActionResponse)
async def bulk_action(
    req: BulkActionRequest,
    user: CurrentUser = Depends(require_employer),
    store: DocumentStore = Depends(get_store),
):
    count = await job_service.bulk_action(store, user, req.action, req.job_ids)
    return BulkActionResponse(success=True, count=count)


@router.get("/{job_id}", response_model=Job)
async def get_job(
    job_id: str,
    user: CurrentUser = Depends(require_employer),
    store: DocumentStore = Depends(get_store),
):
    return await job_service.get_owned_job(store, job_id, user)


@router.put("/{job_id}", response_model=Job)
async def update_job(
    job_id: str,
    req: JobUpdate,
    user: CurrentUser = Depends(require_employer),
    store: DocumentStore = Depends(get_store),
):
    job = await job_service.get_owned_job(store, job_id, user)
    try:
        return await job_service.update_job(store, job, req)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


@router.delete("/{job_id}")
async def delete_job(
    job_id: str,
    user: CurrentUser = Depends(require_employer),
    store: DocumentStore = Depends(get_store),
):
    job = await job_service.get_owned_job(store, job_id, user)
    await job_service.delete_job(store, job)
    return {"success": True}


@router.get("/{job_id}/metrics", response_model=JobMetrics)
async def job_metrics(
    job_id: str,
    user: CurrentUser = Depends(require_employer),
    store: DocumentStore = Depends(get_store),
):
    job = await job_service.get_owned_job(store, job_id, user)
    return await stats_service.job_metrics(store, job)
