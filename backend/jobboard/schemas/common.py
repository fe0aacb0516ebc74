from typing import Literal

from pydantic import BaseModel

JobStatus = Literal["draft", "published", "expired", "filled"]
JobType = Literal["full-time", "part-time", "contract", "temporary"]
ExperienceLevel = Literal["entry", "intermediate", "experienced", "senior"]
SalaryType = Literal["hourly", "salary", "contract"]
RemoteOption = Literal["onsite", "remote", "hybrid"]
ApplicationStatus = Literal["new", "reviewed", "interviewing", "hired", "rejected"]
Role = Literal["jobseeker", "employer", "admin"]
CompanySize = Literal["1-10", "11-50", "51-200", "200+"]


class Coordinates(BaseModel):
    lat: float
    lng: float


class Location(BaseModel):
    city: str
    county: str | None = None
    zip_code: str | None = None
    coordinates: Coordinates | None = None

