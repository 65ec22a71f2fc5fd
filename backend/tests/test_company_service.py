"""
Tests for company_service.py

Covers field validation order, pagination defaults and bounds, and the
mapping of repository absence onto CompanyNotFoundError. The repository
is always a double; no database is involved.
"""
import pytest
from unittest.mock import MagicMock
from uuid import uuid4

from app.schemas.company import CompanyIn
from app.services.company_repository import CompanyRepository
from app.services.company_service import (
    CompanyService,
    DEFAULT_PAGE_LIMIT,
    validate_company_fields,
)
from app.services.errors import (
    CompanyIntegrityError,
    CompanyNotFoundError,
    CompanyValidationError,
)

from tests.fixtures.company_fixtures import (
    FULL_COMPANY,
    INVALID_COMPANY_CASES,
    MINIMAL_COMPANY,
    company_payload,
)


def _mock_repo() -> MagicMock:
    return MagicMock(spec=CompanyRepository)


# ---------------------------------------------------------------------------
# Field validation
# ---------------------------------------------------------------------------

class TestValidateCompanyFields:
    """Tests for the ordered rule checks."""

    @pytest.mark.parametrize(
        "case", INVALID_COMPANY_CASES, ids=[c.description for c in INVALID_COMPANY_CASES]
    )
    def test_rule_violation_message(self, case):
        """Each broken rule should produce its own message."""
        with pytest.raises(CompanyValidationError) as exc_info:
            validate_company_fields(CompanyIn(**case.payload))
        assert str(exc_info.value) == case.expected_message

    def test_first_failing_rule_wins(self):
        """With several problems, the earliest rule is the one reported."""
        payload = CompanyIn(
            company_name="",
            company_address="",
            jurisdiction="France",
            number_of_directors=0,
        )
        with pytest.raises(CompanyValidationError, match="company name is required"):
            validate_company_fields(payload)

    def test_address_checked_before_jurisdiction(self):
        payload = CompanyIn(**company_payload(company_address=" ", jurisdiction="France"))
        with pytest.raises(CompanyValidationError, match="company address is required"):
            validate_company_fields(payload)

    def test_name_and_address_are_trimmed(self):
        fields = validate_company_fields(
            CompanyIn(**company_payload(company_name="  Acme Ltd  ", company_address="\t1 Main St\n"))
        )
        assert fields["company_name"] == "Acme Ltd"
        assert fields["company_address"] == "1 Main St"

    def test_name_length_measured_after_trim(self):
        """255 characters of name surrounded by whitespace is still valid."""
        name = "n" * 255
        fields = validate_company_fields(CompanyIn(**company_payload(company_name=f"  {name}  ")))
        assert fields["company_name"] == name

    @pytest.mark.parametrize("jurisdiction", ["UK", "Singapore", "Caymens"])
    def test_every_jurisdiction_accepted(self, jurisdiction):
        fields = validate_company_fields(CompanyIn(**company_payload(jurisdiction=jurisdiction)))
        assert fields["jurisdiction"] == jurisdiction

    @pytest.mark.parametrize(
        "directors, shareholders",
        [(1, 1), (100, 1000), (None, None)],
    )
    def test_numeric_bounds_are_inclusive(self, directors, shareholders):
        fields = validate_company_fields(
            CompanyIn(
                **company_payload(
                    number_of_directors=directors,
                    number_of_shareholders=shareholders,
                )
            )
        )
        assert fields["number_of_directors"] == directors
        assert fields["number_of_shareholders"] == shareholders

    def test_blank_optional_text_becomes_none(self):
        fields = validate_company_fields(
            CompanyIn(**company_payload(nature_of_business="   ", sec_code=""))
        )
        assert fields["nature_of_business"] is None
        assert fields["sec_code"] is None

    def test_full_payload_passes_through(self):
        fields = validate_company_fields(CompanyIn(**FULL_COMPANY))
        assert fields == FULL_COMPANY


# ---------------------------------------------------------------------------
# Listing
# ---------------------------------------------------------------------------

class TestListCompanies:
    """Tests for pagination defaults, bounds and filter pass-through."""

    def test_defaults_applied(self):
        repo = _mock_repo()
        repo.list.return_value = ([], 0)

        page = CompanyService(repo).list_companies()

        repo.list.assert_called_once_with(DEFAULT_PAGE_LIMIT, 0, None)
        assert page.limit == 20
        assert page.offset == 0
        assert page.total == 0
        assert page.companies == []

    @pytest.mark.parametrize("limit", [0, -1, 101, 200])
    def test_limit_out_of_range_rejected(self, limit):
        repo = _mock_repo()
        with pytest.raises(CompanyValidationError, match="limit must be between 1 and 100"):
            CompanyService(repo).list_companies(limit=limit)
        repo.list.assert_not_called()

    def test_negative_offset_rejected(self):
        repo = _mock_repo()
        with pytest.raises(CompanyValidationError, match="offset must be non-negative"):
            CompanyService(repo).list_companies(offset=-1)
        repo.list.assert_not_called()

    @pytest.mark.parametrize("limit", [1, 100])
    def test_limit_bounds_inclusive(self, limit):
        repo = _mock_repo()
        repo.list.return_value = ([], 0)
        page = CompanyService(repo).list_companies(limit=limit, offset=5)
        repo.list.assert_called_once_with(limit, 5, None)
        assert page.limit == limit
        assert page.offset == 5

    def test_jurisdiction_filter_not_validated(self):
        """Unknown filter values are handed to storage unchanged."""
        repo = _mock_repo()
        repo.list.return_value = ([], 0)
        CompanyService(repo).list_companies(jurisdiction="Atlantis")
        repo.list.assert_called_once_with(DEFAULT_PAGE_LIMIT, 0, "Atlantis")

    def test_two_pages_cover_all_records(self, memory_repo):
        service = CompanyService(memory_repo)
        created = [
            service.create_company(CompanyIn(**company_payload(company_name=f"Company {i}")))
            for i in range(15)
        ]

        first = service.list_companies(limit=10, offset=0)
        second = service.list_companies(limit=10, offset=10)

        ids = [c.id for c in first.companies + second.companies]
        assert len(ids) == 15
        assert len(set(ids)) == 15
        assert first.total == second.total == 15
        # Newest first
        assert ids == [c.id for c in reversed(created)]

    def test_total_respects_filter(self, memory_repo):
        service = CompanyService(memory_repo)
        service.create_company(CompanyIn(**company_payload(jurisdiction="UK")))
        service.create_company(CompanyIn(**company_payload(jurisdiction="Caymens")))
        service.create_company(CompanyIn(**company_payload(jurisdiction="Caymens")))

        page = service.list_companies(limit=1, jurisdiction="Caymens")
        assert page.total == 2
        assert len(page.companies) == 1
        assert page.companies[0].jurisdiction == "Caymens"


# ---------------------------------------------------------------------------
# Single-record operations
# ---------------------------------------------------------------------------

class TestCreateCompany:
    def test_validation_failure_never_reaches_storage(self):
        repo = _mock_repo()
        with pytest.raises(CompanyValidationError):
            CompanyService(repo).create_company(CompanyIn(**company_payload(jurisdiction="France")))
        repo.create.assert_not_called()

    def test_normalized_fields_sent_to_storage(self):
        repo = _mock_repo()
        repo.create.return_value = MagicMock(id=uuid4())

        CompanyService(repo).create_company(
            CompanyIn(**company_payload(company_name=" Acme Ltd "))
        )

        repo.create.assert_called_once()
        fields = repo.create.call_args.args[0]
        assert fields["company_name"] == "Acme Ltd"
        assert fields["number_of_directors"] is None
        assert "id" not in fields
        assert "created_at" not in fields

    def test_created_ids_are_unique(self, memory_repo):
        service = CompanyService(memory_repo)
        ids = {service.create_company(CompanyIn(**MINIMAL_COMPANY)).id for _ in range(20)}
        assert len(ids) == 20


class TestGetCompany:
    def test_absent_company_raises_not_found(self):
        repo = _mock_repo()
        repo.get_by_id.return_value = None
        company_id = uuid4()

        with pytest.raises(CompanyNotFoundError) as exc_info:
            CompanyService(repo).get_company(company_id)
        assert exc_info.value.company_id == company_id

    def test_storage_errors_propagate_unchanged(self):
        repo = _mock_repo()
        repo.get_by_id.side_effect = RuntimeError("connection reset")
        with pytest.raises(RuntimeError, match="connection reset"):
            CompanyService(repo).get_company(uuid4())


class TestUpdateCompany:
    def test_update_reruns_validation(self):
        repo = _mock_repo()
        with pytest.raises(CompanyValidationError, match="number of directors"):
            CompanyService(repo).update_company(
                uuid4(), CompanyIn(**company_payload(number_of_directors=500))
            )
        repo.update.assert_not_called()

    def test_update_missing_company_raises_not_found(self, memory_repo):
        with pytest.raises(CompanyNotFoundError):
            CompanyService(memory_repo).update_company(uuid4(), CompanyIn(**MINIMAL_COMPANY))

    def test_update_replaces_fields_and_keeps_created_at(self, memory_repo):
        service = CompanyService(memory_repo)
        original = service.create_company(CompanyIn(**FULL_COMPANY))
        created_at = original.created_at

        updated = service.update_company(original.id, CompanyIn(**MINIMAL_COMPANY))

        assert updated.id == original.id
        assert updated.jurisdiction == "UK"
        assert updated.sec_code is None
        assert updated.number_of_directors is None
        assert updated.created_at == created_at
        assert updated.updated_at > created_at


class TestDeleteCompany:
    def test_zero_rows_is_not_found(self):
        repo = _mock_repo()
        repo.delete.return_value = 0
        with pytest.raises(CompanyNotFoundError):
            CompanyService(repo).delete_company(uuid4())

    def test_multiple_rows_is_integrity_error(self):
        repo = _mock_repo()
        repo.delete.return_value = 2
        with pytest.raises(CompanyIntegrityError):
            CompanyService(repo).delete_company(uuid4())

    def test_delete_then_get_is_not_found(self, memory_repo):
        service = CompanyService(memory_repo)
        company = service.create_company(CompanyIn(**MINIMAL_COMPANY))

        service.delete_company(company.id)

        with pytest.raises(CompanyNotFoundError):
            service.get_company(company.id)
        with pytest.raises(CompanyNotFoundError):
            service.delete_company(company.id)
