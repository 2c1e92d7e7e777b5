"""
Calculation Contexts - Immutable per-month and per-fiscal-year snapshots.

A MonthContext holds everything the allocation engine reads for one month:
the window, reference data, the two GL aggregate tables, consultant ratios
and the staff baseline. It is built once per request and discarded after.
"""
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Dict, List, Mapping, Tuple

from intercompany.domain.exceptions import CompanyNotFoundError, InvalidPeriodError
from intercompany.domain.money import ZERO
from .accounting import AccountingAccount, AccountingCategory, Company
from .availability import ConsultantAvailabilityRecord

# company uuid -> account code -> amount
GLTable = Mapping[str, Mapping[int, Decimal]]
# account uuid -> amount
LumpTable = Mapping[str, Decimal]


class CalculationMode(Enum):
    """
    Selects which aggregates feed the allocation.

    INVOICE_V1 reads GL and lump sums posted exactly on the first day of the
    month and keeps negative lump sums. DISTRIBUTION_LEGACY reads the whole
    month [from, to) and clamps negative lump sums to zero.
    """
    INVOICE_V1 = "invoice_v1"
    DISTRIBUTION_LEGACY = "distribution_legacy"

    @property
    def uses_exact_day(self) -> bool:
        return self is CalculationMode.INVOICE_V1


@dataclass(frozen=True)
class ShareAmounts:
    """
    Split of one account's GL amount.

    Invariant: base_to_share + origin_remainder == round(max(gl, 0), 2)

    Attributes:
        base_to_share: Portion distributed across the group by ratio
        origin_remainder: Portion retained by the origin company
    """

    base_to_share: Decimal = ZERO
    origin_remainder: Decimal = ZERO


@dataclass(frozen=True)
class AccountShare:
    """
    Result of the share step for one account, in allocation order.

    Attributes:
        category: Category the account belongs to
        account: The account
        gl_amount: GL amount read from the context (before clamping)
        lump_amount: Lump-sum amount for the account
        share: Computed split
    """

    category: AccountingCategory
    account: AccountingAccount
    gl_amount: Decimal
    lump_amount: Decimal
    share: ShareAmounts

    @property
    def origin_uuid(self) -> str:
        return self.account.company_uuid


@dataclass(frozen=True)
class MonthContext:
    """
    Immutable snapshot of one month's allocation inputs.

    Attributes:
        month_from: First day of the window (inclusive)
        month_to: End of the window (exclusive)
        mode: Calculation mode the context was built for
        companies: All companies in the group
        categories: Categories ordered by category code, with their accounts
        availability: Monthly availability records for the window
        gl_range: GL sums per (company, account) for [month_from, month_to)
        gl_exact_day: GL sums per (company, account) for month_from only
        consultant_count: Consultant headcount per company at month_from
        ratio_by_company: Normalized headcount share per company (10 decimals)
        staff_baseline: Salary sharing cap per company (2 decimals)
    """

    month_from: date
    month_to: date
    mode: CalculationMode
    companies: Tuple[Company, ...]
    categories: Tuple[AccountingCategory, ...]
    availability: Tuple[ConsultantAvailabilityRecord, ...]
    gl_range: GLTable
    gl_exact_day: GLTable
    consultant_count: Mapping[str, Decimal]
    ratio_by_company: Mapping[str, Decimal]
    staff_baseline: Mapping[str, Decimal]
    by_uuid: Mapping[str, Company] = field(init=False, repr=False)
    total_consultants: Decimal = field(init=False)

    def __post_init__(self):
        if self.month_from >= self.month_to:
            raise InvalidPeriodError(
                f"Window start {self.month_from} must be before end {self.month_to}"
            )
        object.__setattr__(self, 'by_uuid', {c.uuid: c for c in self.companies})
        object.__setattr__(
            self, 'total_consultants', sum(self.consultant_count.values(), ZERO)
        )

    @property
    def year(self) -> int:
        return self.month_from.year

    @property
    def month(self) -> int:
        return self.month_from.month

    @property
    def has_consultants(self) -> bool:
        return self.total_consultants > 0

    def company(self, company_uuid: str) -> Company:
        """
        Get a company of the group by uuid.

        Raises:
            CompanyNotFoundError: If the uuid is not part of the group
        """
        company = self.by_uuid.get(company_uuid)
        if company is None:
            raise CompanyNotFoundError(company_uuid)
        return company

    def ratio(self, company_uuid: str) -> Decimal:
        """Headcount ratio for a company (zero when unknown)."""
        return self.ratio_by_company.get(company_uuid, ZERO)

    def gl_range_amount(self, company_uuid: str, account_code: int) -> Decimal:
        return self.gl_range.get(company_uuid, {}).get(account_code, ZERO)

    def gl_exact_amount(self, company_uuid: str, account_code: int) -> Decimal:
        return self.gl_exact_day.get(company_uuid, {}).get(account_code, ZERO)

    def gl_amount(self, company_uuid: str, account_code: int) -> Decimal:
        """GL amount for the context's mode (exact day for invoices, month range otherwise)."""
        if self.mode.uses_exact_day:
            return self.gl_exact_amount(company_uuid, account_code)
        return self.gl_range_amount(company_uuid, account_code)

    def accounts(self) -> List[Tuple[AccountingCategory, AccountingAccount]]:
        """All (category, account) pairs in allocation order."""
        return [(category, account) for category in self.categories for account in category.accounts]


@dataclass(frozen=True)
class FiscalYearContext:
    """
    Month contexts for a whole fiscal year, built from one batch of queries.

    Attributes:
        fiscal_from: First day of the fiscal year (inclusive)
        fiscal_to: End of the fiscal year (exclusive)
        mode: Calculation mode used for every month
        companies: All companies in the group
        categories: Categories with their accounts
        per_month: First day of month -> MonthContext, in calendar order
        lumps_by_month: First day of month -> lump amount per account uuid
    """

    fiscal_from: date
    fiscal_to: date
    mode: CalculationMode
    companies: Tuple[Company, ...]
    categories: Tuple[AccountingCategory, ...]
    per_month: Mapping[date, MonthContext]
    lumps_by_month: Mapping[date, LumpTable]

    @property
    def months(self) -> List[date]:
        return list(self.per_month.keys())

    def month(self, month_start: date) -> MonthContext:
        """
        Get the context for a month of this fiscal year.

        Raises:
            InvalidPeriodError: If the month is outside the fiscal year
        """
        context = self.per_month.get(month_start.replace(day=1))
        if context is None:
            raise InvalidPeriodError(
                f"Month {month_start:%Y-%m} is not part of fiscal year "
                f"{self.fiscal_from} - {self.fiscal_to}"
            )
        return context

    def lumps(self, month_start: date) -> Dict[str, Decimal]:
        """Lump amounts per account for a month (empty when none were registered)."""
        return dict(self.lumps_by_month.get(month_start.replace(day=1), {}))
