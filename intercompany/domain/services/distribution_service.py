"""
Expense Distribution Service - Monthly and fiscal-year distribution reports.

Uses the legacy distribution policy (whole-month GL, lump sums clamped at
zero). For each month:
- Company summaries (consultants, staff baseline, staff payable)
- Per-account allocations to every payer company
- Category aggregates per payer
- Owes rows for every cross-company part greater than zero
"""
import logging
from datetime import date
from decimal import Decimal
from typing import Dict, Mapping, Optional, Tuple

from intercompany.config import IntercompanyConfig, get_config
from intercompany.domain.data_source import AllocationDataSource
from intercompany.domain.entities import (
    AccountDistribution,
    AccountShare,
    CalculationMode,
    CategoryAggregate,
    CompanySummary,
    ExpenseDistributionResult,
    IntercompanyOwe,
    IntercompanyOweCategory,
    MonthContext,
)
from intercompany.domain.exceptions import InvariantViolationError
from intercompany.domain.money import ZERO, clamp_non_negative, round_money, round_ratio
from intercompany.domain.periods import month_window
from intercompany.infrastructure.cache import AvailabilityCache
from .allocation_engine import AllocationEngine
from .context_builder import FiscalYearContextBuilder, MonthContextBuilder

logger = logging.getLogger(__name__)

MODE = CalculationMode.DISTRIBUTION_LEGACY


class ExpenseDistributionService:
    """
    Produces ExpenseDistributionResult reports for a month or fiscal year.

    Account shares are computed once per month and reused for every payer.
    """

    def __init__(
        self,
        source: AllocationDataSource,
        config: Optional[IntercompanyConfig] = None,
        cache: Optional[AvailabilityCache] = None,
        engine: Optional[AllocationEngine] = None,
    ):
        self.config = config or get_config()
        self.cache = cache if cache is not None else AvailabilityCache.from_config(self.config)
        self.month_builder = MonthContextBuilder(source, self.config, self.cache)
        self.fiscal_builder = FiscalYearContextBuilder(source, self.config, self.cache)
        self.engine = engine or AllocationEngine()

    def distribute_month(self, year: int, month: int) -> ExpenseDistributionResult:
        """
        Distribute one calendar month.

        Args:
            year: Calendar year (not before the configured minimum year)
            month: Calendar month (1-12)

        Returns:
            ExpenseDistributionResult for the month

        Raises:
            InvalidPeriodError: If year or month is out of range
        """
        month_from, month_to = month_window(year, month, self.config.min_year)
        context = self.month_builder.load_month_data(month_from, month_to, MODE)
        lumps = self.month_builder.lumps_for(context)
        return self.distribute(context, lumps)

    def distribute_fiscal_year(self, start_year: int) -> Dict[date, ExpenseDistributionResult]:
        """
        Distribute every month of the fiscal year beginning in `start_year`.

        Returns:
            First day of month -> result, in calendar order

        Raises:
            InvalidPeriodError: If start_year is before the configured minimum year
        """
        month_window(start_year, self.config.fiscal_year_start_month, self.config.min_year)
        fiscal_year = self.fiscal_builder.for_fiscal_start_year(start_year, MODE)

        results = {}
        for month_start in fiscal_year.months:
            context = fiscal_year.month(month_start)
            if not context.has_consultants:
                logger.debug(f"No consultants in {month_start:%Y-%m}; origins keep every GL amount")
            results[month_start] = self.distribute(context, fiscal_year.lumps(month_start))
        return results

    def distribute(
        self,
        context: MonthContext,
        lumps_by_account: Mapping[str, Decimal],
    ) -> ExpenseDistributionResult:
        """
        Build the distribution report for a prepared month context.

        Raises:
            InvariantViolationError: If an account's split does not add up to its GL amount
            CompanyNotFoundError: If an account's origin is not part of the group
        """
        result = ExpenseDistributionResult(year=context.year, month=context.month)

        summaries: Dict[str, CompanySummary] = {}
        for company in context.companies:
            summary = CompanySummary(
                company_uuid=company.uuid,
                company_name=company.name,
                consultants=round_ratio(context.consultant_count.get(company.uuid, ZERO)),
                staff_cost_origin=context.staff_baseline.get(company.uuid, ZERO),
            )
            summaries[company.uuid] = summary
            result.companies.append(summary)

        category_names: Dict[str, str] = {}
        category_totals: Dict[str, Dict[str, Decimal]] = {}
        owes_by_account: Dict[Tuple[str, str, int], Decimal] = {}
        owes_by_category: Dict[Tuple[str, str, str], Decimal] = {}
        staff_payable: Dict[str, Decimal] = {}

        for account_share in self.engine.account_shares(context, lumps_by_account):
            self._check_split(account_share)

            category = account_share.category
            account = account_share.account
            origin_uuid = account_share.origin_uuid
            category_names[category.account_code] = category.name

            distribution = AccountDistribution(
                account_code=account.account_code,
                account_description=account.description,
                category_code=category.account_code,
                category_name=category.name,
                origin_company_uuid=origin_uuid,
                shared=account.distributable,
                salary=account.salary,
            )

            for payer in context.companies:
                part = self.engine.ratio_part(context, account_share, payer.uuid)
                if part > 0:
                    if payer.uuid != origin_uuid:
                        key = (payer.uuid, origin_uuid, account.account_code)
                        owes_by_account[key] = owes_by_account.get(key, ZERO) + part
                        category_key = (payer.uuid, origin_uuid, category.account_code)
                        owes_by_category[category_key] = owes_by_category.get(category_key, ZERO) + part
                    if account.salary:
                        staff_payable[payer.uuid] = staff_payable.get(payer.uuid, ZERO) + part

                allocation = self.engine.payer_allocation(context, account_share, payer.uuid)
                distribution.allocations[payer.uuid] = round_money(allocation)
                per_payer = category_totals.setdefault(category.account_code, {})
                per_payer[payer.uuid] = per_payer.get(payer.uuid, ZERO) + allocation

            result.accounts.append(distribution)

        for code, per_payer in category_totals.items():
            result.categories.append(CategoryAggregate(
                category_code=code,
                category_name=category_names.get(code, ""),
                allocations={uuid: round_money(amount) for uuid, amount in per_payer.items()},
            ))

        for (payer_uuid, origin_uuid, account_code), amount in owes_by_account.items():
            result.owes_by_account.append(IntercompanyOwe(
                from_company_uuid=payer_uuid,
                to_company_uuid=origin_uuid,
                account_code=account_code,
                amount=round_money(amount),
            ))
        for (payer_uuid, origin_uuid, category_code), amount in owes_by_category.items():
            result.owes_by_category.append(IntercompanyOweCategory(
                from_company_uuid=payer_uuid,
                to_company_uuid=origin_uuid,
                category_code=category_code,
                category_name=category_names.get(category_code, ""),
                amount=round_money(amount),
            ))

        for company_uuid, amount in staff_payable.items():
            summaries[company_uuid].staff_payable = round_money(amount)

        logger.debug(
            f"Distributed {context.year}-{context.month:02d}: {len(result.accounts)} accounts, "
            f"{len(result.owes_by_account)} owes"
        )
        return result

    @staticmethod
    def _check_split(account_share: AccountShare) -> None:
        share = account_share.share
        expected = round_money(clamp_non_negative(account_share.gl_amount))
        actual = share.base_to_share + share.origin_remainder
        if actual != expected:
            raise InvariantViolationError(
                "base_to_share + origin_remainder == gl",
                expected=str(expected),
                actual=str(actual),
            )
