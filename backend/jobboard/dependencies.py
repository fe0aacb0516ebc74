from fastapi import Depends, Header, HTTPException, Request

from jobboard.config import Settings, settings
from jobboard.schemas.user import CurrentUser
from jobboard.services.cache import CachedStore, TaggedCache
from jobboard.services.session_service import session_service
from jobboard.store.base import DocumentStore
from jobboard.store.sanity import SanityDocumentStore
from jobboard.store.sql import SqlDocumentStore


def build_store(config: Settings = settings) -> DocumentStore:
    if config.store_backend == "sanity":
        inner = SanityDocumentStore.from_settings(config)
    elif config.store_backend == "sql":
        inner = SqlDocumentStore.from_path(config.db_path)
    else:
        raise ValueError(f"Unknown store backend '{config.store_backend}'")
    return CachedStore(inner, TaggedCache(config.cache_ttl_seconds))


def get_store(request: Request) -> DocumentStore:
    store = getattr(request.app.state, "store", None)
    if store is None:
        store = request.app.state.store = build_store()
    return store


def bearer_token(authorization: str | None = Header(None)) -> str | None:
    if not authorization or not authorization.startswith("Bearer "):
        return None
    return authorization[7:]


async def get_current_user(
    token: str | None = Depends(bearer_token),
    store: DocumentStore = Depends(get_store),
) -> CurrentUser | None:
    if token is None:
        return None
    return await session_service.current_user(store, token)


async def require_user(user: CurrentUser | None = Depends(get_current_user)) -> CurrentUser:
    if user is None:
        raise HTTPException(status_code=401, detail="Unauthorized")
    return user


async def require_employer(user: CurrentUser = Depends(require_user)) -> CurrentUser:
    if user.role != "employer":
        raise HTTPException(status_code=403, detail="Employer account required")
    if not user.company_id:
        raise HTTPException(status_code=403, detail="Complete company onboarding first")
    return user
