"""
Repository implementations for data access layer.
"""
from .base_repository import BaseRepository
from .company_repository import CompanyRepository, CategoryRepository
from .ledger_repository import LedgerRepository, LumpSumRepository
from .bi_data_repository import BiDataRepository
from .sqlalchemy_data_source import SqlAlchemyDataSource

__all__ = [
    'BaseRepository',
    'CompanyRepository',
    'CategoryRepository',
    'LedgerRepository',
    'LumpSumRepository',
    'BiDataRepository',
    'SqlAlchemyDataSource',
]
