"""
Allocation Data Source - Query surface the calculation core reads from.

Implementations return domain entities. Query failures propagate unchanged;
the core never substitutes defaults for missing reference data.
"""
from abc import ABC, abstractmethod
from datetime import date
from typing import List

from intercompany.domain.entities import (
    AccountingCategory,
    AvailabilityDay,
    Company,
    GeneralLedgerRecord,
    LumpSumRecord,
    StaffSalaryDay,
)


class AllocationDataSource(ABC):
    """Abstract read-only access to reference, ledger and BI data."""

    @abstractmethod
    def list_companies(self) -> List[Company]:
        """All companies of the group."""
        pass

    @abstractmethod
    def list_categories_ordered_by_account_code(self) -> List[AccountingCategory]:
        """Categories ordered by category code, each with its accounts."""
        pass

    @abstractmethod
    def list_availability_records(self, date_from: date, date_to: date) -> List[AvailabilityDay]:
        """
        Daily availability rows for months in [month(date_from), month(date_to)).

        Only CONSULTANT and STUDENT rows that are not TERMINATED are returned,
        ordered by day then user.
        """
        pass

    @abstractmethod
    def list_general_ledger_records(self, date_from: date, date_to: date) -> List[GeneralLedgerRecord]:
        """Ledger postings dated in [date_from, date_to)."""
        pass

    @abstractmethod
    def list_general_ledger_records_on(self, day: date) -> List[GeneralLedgerRecord]:
        """Ledger postings dated exactly on `day`."""
        pass

    @abstractmethod
    def list_lump_sum_records(self, date_from: date, date_to: date) -> List[LumpSumRecord]:
        """Lump sums registered in [date_from, date_to)."""
        pass

    @abstractmethod
    def list_lump_sum_records_on(self, day: date) -> List[LumpSumRecord]:
        """Lump sums registered exactly on `day`."""
        pass

    @abstractmethod
    def query_staff_daily_salaries(self, year: int, month: int) -> List[StaffSalaryDay]:
        """STAFF salary rows for one calendar month."""
        pass
