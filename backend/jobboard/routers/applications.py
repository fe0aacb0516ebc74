from fastapi import APIRouter, Depends, Query

from jobboard.config import settings
from jobboard.dependencies import get_store, require_employer, require_user
from jobboard.schemas.application import Application, ApplicationListResponse, ApplicationUpdate
from jobboard.schemas.common import ApplicationStatus
from jobboard.schemas.user import CurrentUser
from jobboard.services import application_service
from jobboard.store.base import DocumentStore

router = APIRouter(prefix="/applications", tags=["applications"])


@router.get("", response_model=ApplicationListResponse)
async def list_applications(
    job_id: str | None = None,
    status: ApplicationStatus | None = None,
    page: int = Query(1, ge=1),
    page_size: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    user: CurrentUser = Depends(require_employer),
    store: DocumentStore = Depends(get_store),
):
    result = await application_service.list_company_applications(
        store, user.company_id, job_id, status, page, page_size
    )
    return ApplicationListResponse(
        applications=result.items, total=result.total, page=result.page, page_size=result.page_size
    )


@router.get("/mine", response_model=list[Application])
async def my_applications(
    user: CurrentUser = Depends(require_user),
    store: DocumentStore = Depends(get_store),
):
    return await application_service.applications_for_email(store, user.email)


@router.patch("/{application_id}", response_model=Application)
async def update_application(
    application_id: str,
    req: ApplicationUpdate,
    user: CurrentUser = Depends(require_employer),
    store: DocumentStore = Depends(get_store),
):
    application = await application_service.get_owned_application(store, application_id, user)
    return await application_service.update_application(store, application, req)
