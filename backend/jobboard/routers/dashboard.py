from fastapi import APIRouter, Depends, Query

from jobboard.dependencies import get_store, require_employer
from jobboard.schemas.dashboard import DashboardResponse
from jobboard.schemas.user import CurrentUser
from jobboard.services import stats_service
from jobboard.store.base import DocumentStore

router = APIRouter(
    prefix="/dashboard",
    tags=["dashboard"],
    dependencies=[Depends(require_employer)],
)


@router.get("", response_model=DashboardResponse)
async def dashboard(
    user: CurrentUser = Depends(require_employer),
    store: DocumentStore = Depends(get_store),
):
    return await stats_service.dashboard(store, user.company_id)


@router.get("/stats")
async def stats(
    user: CurrentUser = Depends(require_employer),
    store: DocumentStore = Depends(get_store),
):
    result = await stats_service.dashboard_stats(store, user.company_id)
    return {"stats": result.data, "degraded": result.degraded}


@router.get("/activity")
async def activity(
    limit: int = Query(10, ge=1, le=50),
    user: CurrentUser = Depends(require_employer),
    store: DocumentStore = Depends(get_store),
):
    result = await stats_service.recent_activity(store, user.company_id, limit)
    return {"activity": result.data, "degraded": result.degraded}


@router.get("/top-jobs")
async def top_jobs(
    limit: int = Query(5, ge=1, le=50),
    user: CurrentUser = Depends(require_employer),
    store: DocumentStore = Depends(get_store),
):
    result = await stats_service.top_jobs(store, user.company_id, limit)
    return {"top_jobs": result.data, "degraded": result.degraded}


@router.get("/trends")
async def trends(
    days: int = Query(30, ge=1, le=stats_service.MAX_TREND_DAYS),
    user: CurrentUser = Depends(require_employer),
    store: DocumentStore = Depends(get_store),
):
    result = await stats_service.application_trends(store, user.company_id, days)
    return {"trends": result.data, "degraded": result.degraded}
