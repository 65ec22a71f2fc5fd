# backend/app/schemas/company.py
from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, StrictInt, StrictStr, field_validator


class CompanyIn(BaseModel):
    """
    Request body for create and update.

    Every field is optional at the parsing level so that missing values
    reach the service and fail with a rule-specific message instead of a
    generic schema error. Types are strict: a boolean or a numeric string
    is not a count, and a number is not a name.
    """

    jurisdiction: StrictStr | None = None
    company_name: StrictStr | None = None
    company_address: StrictStr | None = None
    nature_of_business: StrictStr | None = None
    number_of_directors: StrictInt | None = None
    number_of_shareholders: StrictInt | None = None
    sec_code: StrictStr | None = None

    model_config = ConfigDict(extra="ignore")

    @field_validator("nature_of_business", "sec_code", mode="before")
    @classmethod
    def _blank_to_none(cls, v):
        if v is None:
            return None
        if isinstance(v, str):
            stripped = v.strip()
            return stripped or None
        return v


class CompanyOut(BaseModel):
    id: UUID
    jurisdiction: str
    company_name: str
    company_address: str
    nature_of_business: str | None = None
    number_of_directors: int | None = None
    number_of_shareholders: int | None = None
    sec_code: str | None = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class CompanyListOut(BaseModel):
    companies: list[CompanyOut]
    limit: int
    offset: int
    total: int


class ApiMessage(BaseModel):
    error: bool
    msg: str
