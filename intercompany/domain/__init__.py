"""
Domain Layer - Intercompany allocation rules, independent of storage.

Services live in intercompany.domain.services and read their inputs through
intercompany.domain.data_source.AllocationDataSource.
"""

from .exceptions import (
    DomainError,
    CompanyNotFoundError,
    AccountNotFoundError,
    CategoryNotFoundError,
    InvalidPeriodError,
    InvariantViolationError,
)

__all__ = [
    'DomainError',
    'CompanyNotFoundError',
    'AccountNotFoundError',
    'CategoryNotFoundError',
    'InvalidPeriodError',
    'InvariantViolationError',
]
