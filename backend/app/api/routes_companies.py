from uuid import UUID
import logging
import re

from fastapi import APIRouter, Depends, HTTPException, Request, Response
from sqlalchemy.orm import Session

from ..core.db import get_db
from ..schemas.company import ApiMessage, CompanyIn, CompanyListOut, CompanyOut
from ..services.company_repository import SQLCompanyRepository
from ..services.company_service import CompanyService
from ..services.errors import CompanyNotFoundError

router = APIRouter(tags=["companies"])

logger = logging.getLogger(__name__)


def get_company_service(db: Session = Depends(get_db)) -> CompanyService:
    return CompanyService(SQLCompanyRepository(db))


_INT_PARAM_RE = re.compile(r"[+-]?[0-9]+")
# Query integers are bounded like a signed 64-bit column value
_INT_PARAM_MIN = -(2**63)
_INT_PARAM_MAX = 2**63 - 1


def _parse_int_param(raw: str | None, name: str) -> int | None:
    if raw is None or raw == "":
        return None
    if not _INT_PARAM_RE.fullmatch(raw):
        raise HTTPException(status_code=400, detail=f"Invalid {name} parameter")
    value = int(raw)
    if not _INT_PARAM_MIN <= value <= _INT_PARAM_MAX:
        raise HTTPException(status_code=400, detail=f"Invalid {name} parameter")
    return value


def _parse_company_id(raw: str) -> UUID:
    try:
        return UUID(raw)
    except ValueError:
        logger.info("Invalid company id", extra={"company_id": raw, "step": "parse_id"})
        raise HTTPException(status_code=400, detail="Invalid company ID format")


def _request_id(request: Request) -> str | None:
    return getattr(request.state, "request_id", None)


@router.get("/", response_model=ApiMessage)
def api_status():
    return ApiMessage(error=False, msg="company registry API is running")


@router.get("/companies", response_model=CompanyListOut)
def list_companies(
    request: Request,
    limit: str | None = None,
    offset: str | None = None,
    jurisdiction: str | None = None,
    service: CompanyService = Depends(get_company_service),
):
    """
    Paginated company listing, newest first.

    - limit defaults to 20 (1..100), offset to 0.
    - jurisdiction filters by exact value; an empty value means no filter.
    """
    parsed_limit = _parse_int_param(limit, "limit")
    parsed_offset = _parse_int_param(offset, "offset")

    try:
        page = service.list_companies(
            limit=parsed_limit,
            offset=parsed_offset,
            jurisdiction=jurisdiction or None,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception:
        logger.exception(
            "Failed to list companies",
            extra={"request_id": _request_id(request), "step": "list_companies"},
        )
        raise HTTPException(status_code=500, detail="Failed to retrieve companies")

    return CompanyListOut(
        companies=[CompanyOut.model_validate(c) for c in page.companies],
        limit=page.limit,
        offset=page.offset,
        total=page.total,
    )


@router.get("/companies/{company_id}", response_model=CompanyOut)
def get_company(
    company_id: str,
    request: Request,
    service: CompanyService = Depends(get_company_service),
):
    parsed_id = _parse_company_id(company_id)

    try:
        company = service.get_company(parsed_id)
    except CompanyNotFoundError:
        raise HTTPException(status_code=404, detail="Company not found")
    except Exception:
        logger.exception(
            "Failed to get company",
            extra={
                "request_id": _request_id(request),
                "company_id": company_id,
                "step": "get_company",
            },
        )
        raise HTTPException(status_code=500, detail="Failed to retrieve company")

    return CompanyOut.model_validate(company)


@router.post("/companies", response_model=CompanyOut, status_code=201)
def create_company(
    payload: CompanyIn,
    request: Request,
    service: CompanyService = Depends(get_company_service),
):
    logger.info(
        "Creating company",
        extra={
            "request_id": _request_id(request),
            "step": "create_company",
        },
    )

    try:
        company = service.create_company(payload)
    except ValueError as e:
        # Rule violations carry a message naming the failing rule
        raise HTTPException(status_code=400, detail=str(e))
    except Exception:
        logger.exception(
            "Failed to create company",
            extra={"request_id": _request_id(request), "step": "create_company"},
        )
        raise HTTPException(status_code=500, detail="Failed to create company")

    return CompanyOut.model_validate(company)


@router.put("/companies/{company_id}", response_model=CompanyOut)
def update_company(
    company_id: str,
    payload: CompanyIn,
    request: Request,
    service: CompanyService = Depends(get_company_service),
):
    """
    Replace every mutable field of a company.

    The body is validated exactly like a create; created_at is kept and
    updated_at is refreshed.
    """
    parsed_id = _parse_company_id(company_id)

    try:
        company = service.update_company(parsed_id, payload)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except CompanyNotFoundError:
        raise HTTPException(status_code=404, detail="Company not found")
    except Exception:
        logger.exception(
            "Failed to update company",
            extra={
                "request_id": _request_id(request),
                "company_id": company_id,
                "step": "update_company",
            },
        )
        raise HTTPException(status_code=500, detail="Failed to update company")

    return CompanyOut.model_validate(company)


@router.delete("/companies/{company_id}", status_code=204)
def delete_company(
    company_id: str,
    request: Request,
    service: CompanyService = Depends(get_company_service),
):
    parsed_id = _parse_company_id(company_id)

    try:
        service.delete_company(parsed_id)
    except CompanyNotFoundError:
        raise HTTPException(status_code=404, detail="Company not found")
    except Exception:
        logger.exception(
            "Failed to delete company",
            extra={
                "request_id": _request_id(request),
                "company_id": company_id,
                "step": "delete_company",
            },
        )
        raise HTTPException(status_code=500, detail="Failed to delete company")

    return Response(status_code=204)
