import logging

from jobboard.errors import ConflictError, NotFoundError
from jobboard.schemas.company import Company, CompanyCreate, CompanyUpdate
from jobboard.schemas.user import CurrentUser
from jobboard.store.base import DocumentStore
from jobboard.store.query import Eq, Query
from jobboard.utils.slug import slugify

logger = logging.getLogger(__name__)


async def unique_company_slug(store: DocumentStore, name: str) -> str:
    base = slugify(name)
    candidate = base
    suffix = 2
    while await store.count(Query("company", (Eq("slug", candidate),))):
        candidate = f"{base}-{suffix}"
        suffix += 1
    return candidate


async def onboard(store: DocumentStore, user: CurrentUser, data: CompanyCreate) -> Company:
    """Create the caller's company and make the caller its employer."""
    if user.company_id:
        raise ConflictError("You already have a company")
    fields = data.model_dump()
    fields.update(slug=await unique_company_slug(store, data.name), owner_id=user.id, verified=False)
    company = await store.create("company", fields)
    await store.patch("user", user.id).set({"role": "employer", "company_id": company.id}).commit()
    logger.info("User %s onboarded company %s", user.id, company.id)
    return company


async def get_own_company(store: DocumentStore, user: CurrentUser) -> Company:
    company = await store.get("company", user.company_id) if user.company_id else None
    if company is None:
        raise NotFoundError("Company not found")
    return company


async def update_company(store: DocumentStore, user: CurrentUser, data: CompanyUpdate) -> Company:
    company = await get_own_company(store, user)
    fields = {k: v for k, v in data.model_dump(exclude_unset=True).items() if v is not None or k == "description"}
    if not fields:
        return company
    return await store.patch("company", company.id).set(fields).commit()
