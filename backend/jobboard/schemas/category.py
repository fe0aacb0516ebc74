from pydantic import BaseModel


class Category(BaseModel):
    id: str
    name: str
    slug: str
    description: str | None = None
    order_rank: int | None = None
    job_count: int = 0


class CategoryListResponse(BaseModel):
    categories: list[Category]
    degraded: bool = False
