"""
Domain errors raised by the company service.

Routes translate these into HTTP status codes:

- CompanyValidationError -> 400 (message names the failing rule)
- CompanyNotFoundError   -> 404
- CompanyIntegrityError  -> 500
"""


class CompanyValidationError(ValueError):
    """A request field or pagination parameter broke a business rule."""


class CompanyNotFoundError(LookupError):
    """No company exists with the requested id."""

    def __init__(self, company_id=None):
        self.company_id = company_id
        super().__init__("company not found")


class CompanyIntegrityError(RuntimeError):
    """The store reported something that unique ids should make impossible."""
