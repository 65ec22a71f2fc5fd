from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional
from uuid import UUID
import logging

from ..models.company import Company, JURISDICTION_VALUES
from ..schemas.company import CompanyIn
from .company_repository import CompanyRepository
from .errors import CompanyIntegrityError, CompanyNotFoundError, CompanyValidationError

logger = logging.getLogger(__name__)

DEFAULT_PAGE_LIMIT = 20
MAX_PAGE_LIMIT = 100

MAX_COMPANY_NAME_LEN = 255
MAX_SEC_CODE_LEN = 50
MAX_DIRECTORS = 100
MAX_SHAREHOLDERS = 1000


@dataclass
class CompanyPage:
    companies: List[Company]
    limit: int
    offset: int
    total: int


def _strip(value: Optional[str]) -> str:
    return (value or "").strip()


def validate_company_fields(payload: CompanyIn) -> Dict[str, Any]:
    """
    Check a create/update payload and return the normalized column values.

    Rules run in a fixed order and the first failure wins:

    1. company_name present and at most 255 characters (after trimming)
    2. company_address present (after trimming)
    3. jurisdiction is exactly one of UK / Singapore / Caymens
    4. number_of_directors, if given, in [1, 100]
    5. number_of_shareholders, if given, in [1, 1000]
    6. sec_code, if given, at most 50 characters
    """
    company_name = _strip(payload.company_name)
    if not company_name:
        raise CompanyValidationError("company name is required")
    if len(company_name) > MAX_COMPANY_NAME_LEN:
        raise CompanyValidationError(
            f"company name cannot exceed {MAX_COMPANY_NAME_LEN} characters"
        )

    company_address = _strip(payload.company_address)
    if not company_address:
        raise CompanyValidationError("company address is required")

    if payload.jurisdiction not in JURISDICTION_VALUES:
        raise CompanyValidationError(
            "invalid jurisdiction: must be one of " + ", ".join(JURISDICTION_VALUES)
        )

    directors = payload.number_of_directors
    if directors is not None and not 1 <= directors <= MAX_DIRECTORS:
        raise CompanyValidationError(
            f"number of directors must be between 1 and {MAX_DIRECTORS}"
        )

    shareholders = payload.number_of_shareholders
    if shareholders is not None and not 1 <= shareholders <= MAX_SHAREHOLDERS:
        raise CompanyValidationError(
            f"number of shareholders must be between 1 and {MAX_SHAREHOLDERS}"
        )

    if payload.sec_code is not None and len(payload.sec_code) > MAX_SEC_CODE_LEN:
        raise CompanyValidationError(
            f"sec code cannot exceed {MAX_SEC_CODE_LEN} characters"
        )

    return {
        "jurisdiction": payload.jurisdiction,
        "company_name": company_name,
        "company_address": company_address,
        "nature_of_business": payload.nature_of_business,
        "number_of_directors": directors,
        "number_of_shareholders": shareholders,
        "sec_code": payload.sec_code,
    }


class CompanyService:
    """
    Business rules between the HTTP routes and the company repository.

    Each operation validates its input, issues exactly one repository call
    and turns absence into CompanyNotFoundError. Storage exceptions are not
    caught here; they reach the route untouched.
    """

    def __init__(self, repository: CompanyRepository) -> None:
        self.repository = repository

    def list_companies(
        self,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
        jurisdiction: Optional[str] = None,
    ) -> CompanyPage:
        if limit is None:
            limit = DEFAULT_PAGE_LIMIT
        elif not 1 <= limit <= MAX_PAGE_LIMIT:
            raise CompanyValidationError(f"limit must be between 1 and {MAX_PAGE_LIMIT}")

        if offset is None:
            offset = 0
        elif offset < 0:
            raise CompanyValidationError("offset must be non-negative")

        # Filter values are not checked against the jurisdiction set; an
        # unknown one simply matches nothing.
        companies, total = self.repository.list(limit, offset, jurisdiction)
        return CompanyPage(companies=companies, limit=limit, offset=offset, total=total)

    def get_company(self, company_id: UUID) -> Company:
        company = self.repository.get_by_id(company_id)
        if company is None:
            raise CompanyNotFoundError(company_id)
        return company

    def create_company(self, payload: CompanyIn) -> Company:
        fields = validate_company_fields(payload)
        company = self.repository.create(fields)
        logger.info(
            "Company created",
            extra={"company_id": str(company.id), "step": "create_company"},
        )
        return company

    def update_company(self, company_id: UUID, payload: CompanyIn) -> Company:
        fields = validate_company_fields(payload)
        company = self.repository.update(company_id, fields)
        if company is None:
            raise CompanyNotFoundError(company_id)
        logger.info(
            "Company updated",
            extra={"company_id": str(company_id), "step": "update_company"},
        )
        return company

    def delete_company(self, company_id: UUID) -> None:
        deleted = self.repository.delete(company_id)
        if deleted == 0:
            raise CompanyNotFoundError(company_id)
        if deleted > 1:
            raise CompanyIntegrityError(
                f"delete of company {company_id} affected {deleted} rows"
            )
        logger.info(
            "Company deleted",
            extra={"company_id": str(company_id), "step": "delete_company"},
        )
