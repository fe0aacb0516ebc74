from fastapi import APIRouter, Depends, Header, HTTPException

from jobboard.config import settings
from jobboard.dependencies import bearer_token, get_store, require_user
from jobboard.schemas.user import CurrentUser, SessionResponse, SignInRequest
from jobboard.services.session_service import session_service
from jobboard.store.base import DocumentStore
from jobboard.utils.security import secrets_match

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/session", response_model=SessionResponse)
async def sign_in(
    req: SignInRequest,
    x_auth_secret: str = Header(...),
    store: DocumentStore = Depends(get_store),
):
    # Only the OAuth front-end knows the shared secret; it posts identities it has verified
    if not secrets_match(settings.auth_shared_secret, x_auth_secret):
        raise HTTPException(status_code=401, detail="Invalid auth secret")
    token, user = await session_service.sign_in(store, req)
    return SessionResponse(token=token, expires_in_seconds=settings.session_ttl_seconds, user=user)


@router.delete("/session")
async def sign_out(token: str | None = Depends(bearer_token)):
    if token is None:
        raise HTTPException(status_code=401, detail="Missing bearer token")
    session_service.revoke(token)
    return {"message": "Signed out"}


@router.get("/me", response_model=CurrentUser)
async def me(user: CurrentUser = Depends(require_user)):
    return user
