from sqlalchemy import CheckConstraint, Column, DateTime, Index, Integer, String, Text, Uuid
from datetime import datetime, timezone
import uuid
import enum
from ..core.db import Base


class Jurisdiction(str, enum.Enum):
    UK = "UK"
    SINGAPORE = "Singapore"
    CAYMENS = "Caymens"


JURISDICTION_VALUES = tuple(j.value for j in Jurisdiction)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Company(Base):
    __tablename__ = "companies"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    jurisdiction = Column(String(20), nullable=False)
    company_name = Column(String(255), nullable=False)
    company_address = Column(Text, nullable=False)
    nature_of_business = Column(Text, nullable=True)
    number_of_directors = Column(Integer, nullable=True)
    number_of_shareholders = Column(Integer, nullable=True)
    sec_code = Column(String(50), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)

    # The service validates all of this first; the table refuses bad rows regardless
    __table_args__ = (
        CheckConstraint(
            "jurisdiction IN (%s)" % ", ".join(f"'{v}'" for v in JURISDICTION_VALUES),
            name="ck_companies_jurisdiction",
        ),
        CheckConstraint("number_of_directors >= 0", name="ck_companies_number_of_directors"),
        CheckConstraint("number_of_shareholders >= 0", name="ck_companies_number_of_shareholders"),
        Index("ix_companies_jurisdiction", "jurisdiction"),
        Index("ix_companies_company_name", "company_name"),
        Index("ix_companies_created_at", "created_at"),
    )
