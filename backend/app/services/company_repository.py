from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple
from uuid import UUID
import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..models.company import Company

logger = logging.getLogger(__name__)


class CompanyRepository(ABC):
    """
    Storage capability for company rows.

    Implementations own query shape, ordering and pagination only; no
    business rules live here.
    """

    @abstractmethod
    def list(
        self,
        limit: int,
        offset: int,
        jurisdiction: Optional[str] = None,
    ) -> Tuple[List[Company], int]:
        ...

    @abstractmethod
    def get_by_id(self, company_id: UUID) -> Company | None:
        ...

    @abstractmethod
    def create(self, fields: Dict[str, Any]) -> Company:
        ...

    @abstractmethod
    def update(self, company_id: UUID, fields: Dict[str, Any]) -> Company | None:
        ...

    @abstractmethod
    def delete(self, company_id: UUID) -> int:
        ...


class SQLCompanyRepository(CompanyRepository):
    def __init__(self, db: Session) -> None:
        self.db = db

    def list(
        self,
        limit: int,
        offset: int,
        jurisdiction: Optional[str] = None,
    ) -> Tuple[List[Company], int]:
        """
        Return one page of companies plus the total matching the filter.

        - total ignores limit/offset.
        - Newest first; id breaks created_at ties so pages never overlap.
        """
        query = self.db.query(Company)
        if jurisdiction is not None:
            query = query.filter(Company.jurisdiction == jurisdiction)

        total = query.count()
        rows = (
            query.order_by(Company.created_at.desc(), Company.id.desc())
            .offset(offset)
            .limit(limit)
            .all()
        )
        return rows, total

    def get_by_id(self, company_id: UUID) -> Company | None:
        return self.db.query(Company).filter(Company.id == company_id).first()

    def create(self, fields: Dict[str, Any]) -> Company:
        now = datetime.now(timezone.utc)
        company = Company(**fields, created_at=now, updated_at=now)
        try:
            self.db.add(company)
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise
        self.db.refresh(company)
        return company

    def update(self, company_id: UUID, fields: Dict[str, Any]) -> Company | None:
        company = self.get_by_id(company_id)
        if company is None:
            return None

        try:
            for key, value in fields.items():
                setattr(company, key, value)
            company.updated_at = datetime.now(timezone.utc)
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise
        self.db.refresh(company)
        return company

    def delete(self, company_id: UUID) -> int:
        try:
            deleted = (
                self.db.query(Company)
                .filter(Company.id == company_id)
                .delete(synchronize_session=False)
            )
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise

        logger.debug(
            "Deleted company rows",
            extra={"company_id": str(company_id), "step": "delete", "deleted": deleted},
        )
        return deleted
