"""Per-user company follows, stored as ``follow`` documents."""
from jobboard.errors import NotFoundError
from jobboard.schemas.user import Follow, FollowState
from jobboard.store.base import DocumentStore
from jobboard.store.query import Eq, OrderBy, Query


def _query(user_id: str, company_id: str | None = None) -> Query:
    clauses = [Eq("user_id", user_id)]
    if company_id is not None:
        clauses.append(Eq("company_id", company_id))
    return Query("follow", tuple(clauses), (OrderBy("created_at", descending=True),))


async def list_follows(store: DocumentStore, user_id: str) -> list[Follow]:
    return await store.fetch(_query(user_id))


async def is_following(store: DocumentStore, user_id: str, company_id: str) -> bool:
    return await store.count(_query(user_id, company_id).count_query()) > 0


async def follow(store: DocumentStore, user_id: str, company_id: str) -> FollowState:
    if await store.get("company", company_id) is None:
        raise NotFoundError("Company not found")
    if not await is_following(store, user_id, company_id):
        await store.create("follow", {"user_id": user_id, "company_id": company_id})
    return FollowState(company_id=company_id, following=True)


async def unfollow(store: DocumentStore, user_id: str, company_id: str) -> FollowState:
    for existing in await store.fetch(_query(user_id, company_id)):
        await store.delete("follow", existing.id)
    return FollowState(company_id=company_id, following=False)


async def toggle(store: DocumentStore, user_id: str, company_id: str) -> FollowState:
    if await is_following(store, user_id, company_id):
        return await unfollow(store, user_id, company_id)
    return await follow(store, user_id, company_id)
