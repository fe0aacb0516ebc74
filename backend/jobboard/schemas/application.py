from datetime import datetime

from pydantic import BaseModel, Field

from jobboard.schemas.common import ApplicationStatus

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


class ApplicantInfo(BaseModel):
    name: str
    email: str
    phone: str | None = None
    resume_url: str | None = None
    linked_in: str | None = None


class ApplicantInfoInput(BaseModel):
    model_config = {"str_strip_whitespace": True}

    name: str = Field(min_length=2)
    email: str = Field(pattern=EMAIL_PATTERN)
    phone: str = Field(min_length=10)
    resume_url: str | None = None
    linked_in: str | None = None


class ApplicationJobSummary(BaseModel):
    id: str
    title: str
    slug: str
    company_id: str


class Application(BaseModel):
    id: str
    job_id: str
    applicant_info: ApplicantInfo
    cover_message: str | None = None
    status: str = "new"
    rating: int | None = None
    applied_date: datetime
    employer_notes: str | None = None
    interview_date: datetime | None = None
    job: ApplicationJobSummary | None = None


class ApplicationCreate(BaseModel):
    applicant_info: ApplicantInfoInput
    cover_message: str | None = Field(default=None, max_length=5000)


class ApplicationUpdate(BaseModel):
    status: ApplicationStatus | None = None
    rating: int | None = Field(default=None, ge=1, le=5)
    employer_notes: str | None = Field(default=None, max_length=5000)
    interview_date: datetime | None = None


class ApplicationListResponse(BaseModel):
    applications: list[Application]
    total: int
    page: int
    page_size: int
