from fastapi import APIRouter, Depends

from jobboard.dependencies import get_store, require_user
from jobboard.schemas.user import CurrentUser, Follow, FollowState
from jobboard.services import follow_service
from jobboard.store.base import DocumentStore

router = APIRouter(prefix="/follows", tags=["follows"])


@router.get("", response_model=list[Follow])
async def list_follows(
    user: CurrentUser = Depends(require_user),
    store: DocumentStore = Depends(get_store),
):
    return await follow_service.list_follows(store, user.id)


@router.put("/{company_id}", response_model=FollowState)
async def follow_company(
    company_id: str,
    user: CurrentUser = Depends(require_user),
    store: DocumentStore = Depends(get_store),
):
    return await follow_service.follow(store, user.id, company_id)


@router.delete("/{company_id}", response_model=FollowState)
async def unfollow_company(
    company_id: str,
    user: CurrentUser = Depends(require_user),
    store: DocumentStore = Depends(get_store),
):
    return await follow_service.unfollow(store, user.id, company_id)


@router.post("/{company_id}/toggle", response_model=FollowState)
async def toggle_follow(
    company_id: str,
    user: CurrentUser = Depends(require_user),
    store: DocumentStore = Depends(get_store),
):
    return await follow_service.toggle(store, user.id, company_id)
