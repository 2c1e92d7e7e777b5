"""
SQLAlchemy Data Source - AllocationDataSource backed by the repositories.
"""
from datetime import date
from typing import List

from sqlalchemy.orm import Session

from intercompany.domain.data_source import AllocationDataSource
from intercompany.domain.entities import (
    AccountingCategory,
    AvailabilityDay,
    Company,
    GeneralLedgerRecord,
    LumpSumRecord,
    StaffSalaryDay,
)
from .bi_data_repository import BiDataRepository
from .company_repository import CategoryRepository, CompanyRepository
from .ledger_repository import LedgerRepository, LumpSumRepository


class SqlAlchemyDataSource(AllocationDataSource):
    """
    Reads allocation inputs through one SQLAlchemy session.

    The session is owned by the caller; this class never commits.
    """

    def __init__(self, session: Session):
        self.session = session
        self.companies = CompanyRepository(session)
        self.categories = CategoryRepository(session)
        self.ledger = LedgerRepository(session)
        self.lump_sums = LumpSumRepository(session)
        self.bi_data = BiDataRepository(session)

    def list_companies(self) -> List[Company]:
        return self.companies.list_companies()

    def list_categories_ordered_by_account_code(self) -> List[AccountingCategory]:
        return self.categories.list_ordered_by_account_code()

    def list_availability_records(self, date_from: date, date_to: date) -> List[AvailabilityDay]:
        return self.bi_data.availability_between(date_from, date_to)

    def list_general_ledger_records(self, date_from: date, date_to: date) -> List[GeneralLedgerRecord]:
        return self.ledger.records_between(date_from, date_to)

    def list_general_ledger_records_on(self, day: date) -> List[GeneralLedgerRecord]:
        return self.ledger.records_on(day)

    def list_lump_sum_records(self, date_from: date, date_to: date) -> List[LumpSumRecord]:
        return self.lump_sums.records_between(date_from, date_to)

    def list_lump_sum_records_on(self, day: date) -> List[LumpSumRecord]:
        return self.lump_sums.records_on(day)

    def query_staff_daily_salaries(self, year: int, month: int) -> List[StaffSalaryDay]:
        return self.bi_data.staff_salaries(year, month)
