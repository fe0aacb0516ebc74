from pydantic import BaseModel, Field, field_validator


def _blank_to_none(value):
    if isinstance(value, str):
        value = value.strip()
        return value or None
    return value


class JobFilters(BaseModel):
    """Structured filter set for the public job listing.

    ``None`` means "no filter" on every dimension; blank strings and a zero
    salary floor are normalised to ``None`` so the two spellings of "unset"
    cannot diverge. Enum-like fields are matched exactly and are not checked
    here: an unknown value simply matches nothing.
    """

    model_config = {"frozen": True}

    category: str | None = None
    location: str | None = None
    job_type: str | None = None
    experience_level: str | None = None
    salary_min: int | None = Field(default=None, ge=0)
    search: str | None = None

    @field_validator("category", "location", "job_type", "experience_level", "search", mode="before")
    @classmethod
    def _blank_is_unset(cls, value):
        return _blank_to_none(value)

    @field_validator("salary_min")
    @classmethod
    def _zero_is_unset(cls, value):
        return value or None


class CompanyFilters(BaseModel):
    model_config = {"frozen": True}

    search: str | None = None
    size: str | None = None
    location: str | None = None

    @field_validator("search", "size", "location", mode="before")
    @classmethod
    def _blank_is_unset(cls, value):
        return _blank_to_none(value)
