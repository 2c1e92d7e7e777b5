"""
Context Builders - Load allocation inputs once and freeze them into contexts.

MonthContextBuilder:
- One query per input (companies, categories, availability, GL range,
  GL first day, staff salaries) for a single month window

FiscalYearContextBuilder:
- One availability, GL and lump-sum query for the whole fiscal year,
  partitioned by calendar month; staff baseline is queried per month
"""
import logging
from datetime import date
from decimal import Decimal
from typing import TYPE_CHECKING, Dict, List, Optional, Sequence

from intercompany.config import IntercompanyConfig, get_config
from intercompany.domain.data_source import AllocationDataSource
from intercompany.domain.entities import (
    AccountingCategory,
    CalculationMode,
    Company,
    ConsultantAvailabilityRecord,
    FiscalYearContext,
    GLTable,
    MonthContext,
)
from intercompany.domain.periods import (
    fiscal_year_window,
    months_in_window,
    next_month,
    validate_window,
)
from .availability_aggregator import AvailabilityAggregator
from .gl_aggregator import GLAggregator
from .lump_sum_aggregator import LumpSumAggregator
from .ratio_calculator import RatioCalculator
from .staff_baseline_calculator import StaffBaselineCalculator

if TYPE_CHECKING:
    from intercompany.infrastructure.cache import AvailabilityCache

logger = logging.getLogger(__name__)


class _ContextBuilderBase:
    """Shared wiring for the month and fiscal-year builders."""

    def __init__(
        self,
        source: AllocationDataSource,
        config: Optional[IntercompanyConfig] = None,
        cache: Optional["AvailabilityCache"] = None,
    ):
        self.source = source
        self.config = config or get_config()
        self.cache = cache
        self.staff_calculator = StaffBaselineCalculator(self.config.salary_buffer_multiplier)

    def _resolve_mode(self, mode: Optional[CalculationMode]) -> CalculationMode:
        return mode if mode is not None else self.config.default_mode

    def _availability(self, date_from: date, date_to: date) -> List[ConsultantAvailabilityRecord]:
        loader = self.source.list_availability_records
        if self.cache is not None:
            days = self.cache.get_or_load(date_from, date_to, loader)
        else:
            days = loader(date_from, date_to)
        return AvailabilityAggregator.aggregate_monthly(days)

    def _month_context(
        self,
        month_from: date,
        month_to: date,
        mode: CalculationMode,
        companies: Sequence[Company],
        categories: Sequence[AccountingCategory],
        availability: Sequence[ConsultantAvailabilityRecord],
        gl_range: GLTable,
        gl_exact_day: GLTable,
    ) -> MonthContext:
        counts = AvailabilityAggregator.count_by_company(companies, month_from, availability)
        ratios = RatioCalculator.ratios(counts)
        staff_rows = self.source.query_staff_daily_salaries(month_from.year, month_from.month)
        staff_baseline = self.staff_calculator.calculate(staff_rows, companies)

        if RatioCalculator.total(counts) <= 0:
            logger.warning(
                f"No consultants in {month_from:%Y-%m}; nothing will be shared this month"
            )

        return MonthContext(
            month_from=month_from,
            month_to=month_to,
            mode=mode,
            companies=tuple(companies),
            categories=tuple(categories),
            availability=tuple(availability),
            gl_range=gl_range,
            gl_exact_day=gl_exact_day,
            consultant_count=counts,
            ratio_by_company=ratios,
            staff_baseline=staff_baseline,
        )


class MonthContextBuilder(_ContextBuilderBase):
    """
    Builds the MonthContext for a single month.

    Usage:
        builder = MonthContextBuilder(source)
        context = builder.load_month_data(date(2025, 3, 1), date(2025, 4, 1),
                                          CalculationMode.INVOICE_V1)
        lumps = builder.lumps_for(context)
    """

    def load_month_data(
        self,
        month_from: date,
        month_to: date,
        mode: Optional[CalculationMode] = None,
    ) -> MonthContext:
        """
        Query all inputs for [month_from, month_to) and freeze them.

        Args:
            month_from: First day of the window (inclusive)
            month_to: End of the window (exclusive)
            mode: Calculation mode (config default when omitted)

        Returns:
            MonthContext

        Raises:
            InvalidPeriodError: If the window is empty or inverted
        """
        validate_window(month_from, month_to)
        mode = self._resolve_mode(mode)

        companies = self.source.list_companies()
        categories = self.source.list_categories_ordered_by_account_code()
        availability = self._availability(month_from, month_to)

        gl_range = GLAggregator.aggregate_range(
            self.source.list_general_ledger_records(month_from, month_to), month_from, month_to
        )
        gl_exact_day = GLAggregator.aggregate_exact_day(
            self.source.list_general_ledger_records_on(month_from), month_from
        )

        context = self._month_context(
            month_from, month_to, mode, companies, categories, availability, gl_range, gl_exact_day
        )
        logger.debug(
            f"Built {mode.value} context for {month_from} - {month_to}: "
            f"{len(companies)} companies, {len(context.accounts())} accounts, "
            f"{context.total_consultants} consultants"
        )
        return context

    def lumps_for(self, context: MonthContext) -> Dict[str, Decimal]:
        """
        Lump-sum amounts per account for the context's window and mode.

        INVOICE_V1 reads lumps registered on the first day (unclamped);
        DISTRIBUTION_LEGACY reads the whole window (clamped at zero).
        """
        if context.mode.uses_exact_day:
            records = self.source.list_lump_sum_records_on(context.month_from)
        else:
            records = self.source.list_lump_sum_records(context.month_from, context.month_to)
        return LumpSumAggregator.for_mode(context.mode, records, context.month_from, context.month_to)


class FiscalYearContextBuilder(_ContextBuilderBase):
    """Builds month contexts for a whole fiscal year from batched queries."""

    def load_fiscal_year(
        self,
        fiscal_from: date,
        fiscal_to: date,
        mode: Optional[CalculationMode] = None,
    ) -> FiscalYearContext:
        """
        Query the fiscal year once and slice it into month contexts.

        Each month only sees the availability records of its own month.

        Args:
            fiscal_from: First day of the fiscal year (inclusive)
            fiscal_to: End of the fiscal year (exclusive)
            mode: Calculation mode for every month (config default when omitted)

        Returns:
            FiscalYearContext with one MonthContext per calendar month

        Raises:
            InvalidPeriodError: If the window is empty or inverted
        """
        validate_window(fiscal_from, fiscal_to)
        mode = self._resolve_mode(mode)

        companies = self.source.list_companies()
        categories = self.source.list_categories_ordered_by_account_code()
        availability = self._availability(fiscal_from, fiscal_to)

        gl_range_by_month, gl_exact_by_month = GLAggregator.partition_by_month(
            self.source.list_general_ledger_records(fiscal_from, fiscal_to)
        )
        lumps_by_month = LumpSumAggregator.partition_by_month(
            mode, self.source.list_lump_sum_records(fiscal_from, fiscal_to)
        )

        per_month: Dict[date, MonthContext] = {}
        for month_start in months_in_window(fiscal_from, fiscal_to):
            month_availability = [r for r in availability if r.is_in_month(month_start)]
            per_month[month_start] = self._month_context(
                month_start,
                next_month(month_start),
                mode,
                companies,
                categories,
                month_availability,
                gl_range_by_month.get(month_start, {}),
                gl_exact_by_month.get(month_start, {}),
            )

        logger.info(
            f"Loaded fiscal year {fiscal_from} - {fiscal_to} ({mode.value}): "
            f"{len(per_month)} months, {len(availability)} availability records"
        )
        return FiscalYearContext(
            fiscal_from=fiscal_from,
            fiscal_to=fiscal_to,
            mode=mode,
            companies=tuple(companies),
            categories=tuple(categories),
            per_month=per_month,
            lumps_by_month=lumps_by_month,
        )

    def for_fiscal_start_year(
        self,
        start_year: int,
        mode: Optional[CalculationMode] = None,
    ) -> FiscalYearContext:
        """
        Load the fiscal year beginning in `start_year`.

        Example: start_year=2024 with a July start covers 2024-07 .. 2025-06.
        """
        fiscal_from, fiscal_to = fiscal_year_window(start_year, self.config.fiscal_year_start_month)
        return self.load_fiscal_year(fiscal_from, fiscal_to, mode)
