from datetime import datetime

from pydantic import BaseModel, Field

from jobboard.schemas.application import EMAIL_PATTERN
from jobboard.schemas.common import Role


class User(BaseModel):
    id: str
    email: str
    name: str | None = None
    image: str | None = None
    role: Role = "jobseeker"
    company_id: str | None = None
    created_at: datetime | None = None


class CurrentUser(BaseModel):
    id: str
    email: str
    role: str
    company_id: str | None = None


class SignInRequest(BaseModel):
    model_config = {"str_strip_whitespace": True}

    email: str = Field(pattern=EMAIL_PATTERN)
    name: str | None = None
    image: str | None = None


class SessionResponse(BaseModel):
    token: str
    expires_in_seconds: int
    user: User


class Follow(BaseModel):
    id: str
    user_id: str
    company_id: str
    created_at: datetime | None = None


class FollowState(BaseModel):
    company_id: str
    following: bool
