from datetime import datetime

from pydantic import BaseModel, Field

from jobboard.schemas.application import EMAIL_PATTERN
from jobboard.schemas.common import CompanySize, Location
from jobboard.schemas.job import Job


class Company(BaseModel):
    id: str
    name: str
    slug: str
    logo_url: str | None = None
    description: str | None = None
    website: str | None = None
    email: str | None = None
    phone: str | None = None
    size: str | None = None
    locations: list[Location] = []
    benefits_offered: list[str] = []
    verified: bool = False
    owner_id: str | None = None
    created_at: datetime | None = None
    job_count: int = 0


class CompanyCreate(BaseModel):
    name: str = Field(min_length=2, max_length=120)
    email: str = Field(pattern=EMAIL_PATTERN)
    description: str | None = Field(default=None, max_length=5000)
    website: str | None = None
    phone: str | None = None
    logo_url: str | None = None
    size: CompanySize | None = None
    locations: list[Location] = []
    benefits_offered: list[str] = []


class CompanyUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=2, max_length=120)
    email: str | None = Field(default=None, pattern=EMAIL_PATTERN)
    description: str | None = Field(default=None, max_length=5000)
    website: str | None = None
    phone: str | None = None
    logo_url: str | None = None
    size: CompanySize | None = None
    locations: list[Location] | None = None
    benefits_offered: list[str] | None = None


class CompanyListResponse(BaseModel):
    companies: list[Company]
    total: int
    page: int
    page_size: int
    pages: int
    degraded: bool = False
    refined: bool = False


class CompanyDetailResponse(BaseModel):
    company: Company
    jobs: list[Job] = []
