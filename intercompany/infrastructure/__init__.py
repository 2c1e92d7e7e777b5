"""
Infrastructure Layer - Persistence and caching for the allocation engine.

This module provides:
- Repository pattern for data access
- SqlAlchemyDataSource, the database-backed AllocationDataSource
- AvailabilityCache with explicit invalidation
"""

from .cache import AvailabilityCache, CacheStats
from .repositories import (
    BaseRepository,
    CompanyRepository,
    CategoryRepository,
    LedgerRepository,
    LumpSumRepository,
    BiDataRepository,
    SqlAlchemyDataSource,
)

__all__ = [
    'AvailabilityCache',
    'CacheStats',
    'BaseRepository',
    'CompanyRepository',
    'CategoryRepository',
    'LedgerRepository',
    'LumpSumRepository',
    'BiDataRepository',
    'SqlAlchemyDataSource',
]
