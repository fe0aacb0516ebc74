from datetime import date, datetime
from typing import Literal

from pydantic import BaseModel, Field, model_validator

from jobboard.schemas.common import (
    ExperienceLevel,
    JobStatus,
    JobType,
    Location,
    RemoteOption,
    SalaryType,
)


class CompanySummary(BaseModel):
    id: str
    name: str
    slug: str
    logo_url: str | None = None
    verified: bool = False
    size: str | None = None
    website: str | None = None


class CategorySummary(BaseModel):
    id: str
    name: str
    slug: str


class Job(BaseModel):
    id: str
    title: str
    slug: str
    company_id: str
    category_id: str | None = None
    description: str | None = None
    requirements: str | None = None
    responsibilities: str | None = None
    salary_type: str | None = None
    salary_min: float | None = None
    salary_max: float | None = None
    show_salary: bool = True
    location: Location | None = None
    remote_options: str | None = "onsite"
    job_type: str | None = None
    experience_level: str | None = None
    benefits: list[str] = []
    skills: list[str] = []
    certifications: list[str] = []
    application_deadline: date | None = None
    start_date: date | None = None
    is_urgent: bool = False
    featured: bool = False
    status: str = "draft"
    view_count: int = 0
    application_count: int = 0
    published_at: datetime | None = None
    expires_at: datetime | None = None
    created_at: datetime | None = None
    company: CompanySummary | None = None
    category: CategorySummary | None = None

    def is_visible(self, now: datetime) -> bool:
        return self.status == "published" and (self.expires_at is None or self.expires_at > now)


class LocationInput(BaseModel):
    city: str = Field(min_length=2)
    county: str = Field(min_length=2)
    zip_code: str = Field(pattern=r"^\d{5}$")
    coordinates: dict[str, float] | None = None


class JobCreate(BaseModel):
    title: str = Field(min_length=5, max_length=100)
    description: str = Field(min_length=100, max_length=5000)
    requirements: str = Field(min_length=50, max_length=3000)
    responsibilities: str | None = Field(default=None, max_length=3000)
    location: LocationInput
    salary_min: float = Field(ge=0, le=1_000_000)
    salary_max: float | None = Field(default=None, ge=0, le=1_000_000)
    salary_type: SalaryType
    show_salary: bool = True
    job_type: JobType
    experience_level: ExperienceLevel
    remote_options: RemoteOption = "onsite"
    category_id: str = Field(min_length=1)
    benefits: list[str] = []
    skills: list[str] = []
    certifications: list[str] = []
    application_deadline: date | None = None
    start_date: date | None = None
    expires_at: datetime | None = None
    is_urgent: bool = False
    featured: bool = False
    status: Literal["draft", "published"] = "draft"

    @model_validator(mode="after")
    def _salary_range(self):
        if self.salary_max is not None and self.salary_max < self.salary_min:
            raise ValueError("Maximum salary must be greater than minimum salary")
        return self


class JobUpdate(BaseModel):
    # No view_count / application_count: only the system moves them
    title: str | None = Field(default=None, min_length=5, max_length=100)
    description: str | None = Field(default=None, min_length=100, max_length=5000)
    requirements: str | None = Field(default=None, min_length=50, max_length=3000)
    responsibilities: str | None = Field(default=None, max_length=3000)
    location: LocationInput | None = None
    salary_min: float | None = Field(default=None, ge=0, le=1_000_000)
    salary_max: float | None = Field(default=None, ge=0, le=1_000_000)
    salary_type: SalaryType | None = None
    show_salary: bool | None = None
    job_type: JobType | None = None
    experience_level: ExperienceLevel | None = None
    remote_options: RemoteOption | None = None
    category_id: str | None = None
    benefits: list[str] | None = None
    skills: list[str] | None = None
    certifications: list[str] | None = None
    application_deadline: date | None = None
    start_date: date | None = None
    expires_at: datetime | None = None
    is_urgent: bool | None = None
    featured: bool | None = None
    status: JobStatus | None = None

    @model_validator(mode="after")
    def _salary_range(self):
        if (
            self.salary_min is not None
            and self.salary_max is not None
            and self.salary_max < self.salary_min
        ):
            raise ValueError("Maximum salary must be greater than minimum salary")
        return self


class JobListResponse(BaseModel):
    jobs: list[Job]
    total: int
    page: int
    page_size: int
    pages: int
    degraded: bool = False
    # True when ``jobs`` was narrowed in memory by ``refine``; ``total`` still
    # counts the server-side result, not the refined page.
    refined: bool = False


class JobDetailResponse(BaseModel):
    job: Job
    related: list[Job] = []


class BulkActionRequest(BaseModel):
    action: Literal["delete", "expire", "publish"]
    job_ids: list[str] = Field(min_length=1)


class BulkActionResponse(BaseModel):
    success: bool
    count: int


class JobMetrics(BaseModel):
    job_id: str
    title: str
    views: int
    applications: int
    conversion_rate: float
    applications_by_status: dict[str, int]
