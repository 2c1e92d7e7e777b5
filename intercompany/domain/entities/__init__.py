"""
Domain Entities - Immutable reference data, ledger records and calculation contexts.
"""

from .accounting import Company, AccountingAccount, AccountingCategory
from .ledger import GeneralLedgerRecord, LumpSumRecord
from .availability import (
    ConsultantType, StatusType,
    AvailabilityDay, ConsultantAvailabilityRecord, StaffSalaryDay,
)
from .context import (
    CalculationMode, ShareAmounts, AccountShare,
    MonthContext, FiscalYearContext, GLTable, LumpTable,
)
from .distribution import (
    CompanySummary, AccountDistribution, CategoryAggregate,
    IntercompanyOwe, IntercompanyOweCategory, ExpenseDistributionResult,
)

__all__ = [
    'Company', 'AccountingAccount', 'AccountingCategory',
    'GeneralLedgerRecord', 'LumpSumRecord',
    'ConsultantType', 'StatusType',
    'AvailabilityDay', 'ConsultantAvailabilityRecord', 'StaffSalaryDay',
    'CalculationMode', 'ShareAmounts', 'AccountShare',
    'MonthContext', 'FiscalYearContext', 'GLTable', 'LumpTable',
    'CompanySummary', 'AccountDistribution', 'CategoryAggregate',
    'IntercompanyOwe', 'IntercompanyOweCategory', 'ExpenseDistributionResult',
]
