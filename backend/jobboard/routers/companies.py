from fastapi import APIRouter, Depends

from jobboard.dependencies import get_store, require_employer, require_user
from jobboard.schemas.company import Company, CompanyCreate, CompanyUpdate
from jobboard.schemas.user import CurrentUser
from jobboard.services import company_service
from jobboard.store.base import DocumentStore

router = APIRouter(prefix="/companies", tags=["companies"])


@router.post("", response_model=Company, status_code=201)
async def onboard_company(
    req: CompanyCreate,
    user: CurrentUser = Depends(require_user),
    store: DocumentStore = Depends(get_store),
):
    return await company_service.onboard(store, user, req)


@router.get("/me", response_model=Company)
async def get_my_company(
    user: CurrentUser = Depends(require_employer),
    store: DocumentStore = Depends(get_store),
):
    return await company_service.get_own_company(store, user)


@router.put("/me", response_model=Company)
async def update_my_company(
    req: CompanyUpdate,
    user: CurrentUser = Depends(require_employer),
    store: DocumentStore = Depends(get_store),
):
    return await company_service.update_company(store, user, req)
