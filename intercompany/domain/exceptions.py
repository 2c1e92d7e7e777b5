"""
Domain Exceptions for Intercompany Allocation.

Custom exceptions enforcing business rules:
- Reference data must exist (no allocation against unknown entities)
- Calculation periods must be well formed
- Share invariants must hold
"""


class DomainError(Exception):
    """Base exception for all domain errors."""

    def __init__(self, message: str, code: str = "DOMAIN_ERROR"):
        self.message = message
        self.code = code
        super().__init__(self.message)


# =============================================================================
# Reference Data Exceptions
# =============================================================================

class CompanyNotFoundError(DomainError):
    """Raised when a company cannot be found in the calculation context."""

    def __init__(self, company_uuid: str):
        message = f"Company with uuid '{company_uuid}' not found"
        super().__init__(message, code="COMPANY_NOT_FOUND")
        self.company_uuid = company_uuid


class AccountNotFoundError(DomainError):
    """Raised when an accounting account cannot be found."""

    def __init__(self, account_uuid: str):
        message = f"Accounting account with uuid '{account_uuid}' not found"
        super().__init__(message, code="ACCOUNT_NOT_FOUND")
        self.account_uuid = account_uuid


class CategoryNotFoundError(DomainError):
    """Raised when an accounting category cannot be found."""

    def __init__(self, category_code: str):
        message = f"Accounting category '{category_code}' not found"
        super().__init__(message, code="CATEGORY_NOT_FOUND")
        self.category_code = category_code


# =============================================================================
# Period Exceptions
# =============================================================================

class InvalidPeriodError(DomainError):
    """Raised when a calculation window or year/month is invalid."""

    def __init__(self, message: str):
        super().__init__(message, code="INVALID_PERIOD")


# =============================================================================
# Invariant Exceptions
# =============================================================================

class InvariantViolationError(DomainError):
    """Raised when a mathematical invariant is violated."""

    def __init__(self, invariant_name: str, expected: str, actual: str):
        message = (
            f"Invariant '{invariant_name}' violated. "
            f"Expected: {expected}, Actual: {actual}"
        )
        super().__init__(message, code="INVARIANT_VIOLATION")
        self.invariant_name = invariant_name
        self.expected = expected
        self.actual = actual
