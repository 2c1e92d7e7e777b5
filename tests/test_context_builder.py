"""
Tests for the month and fiscal-year context builders.

Tests business rules:
- Each input is queried once per build
- Fiscal years are queried in bulk and sliced per calendar month
- Calculation mode selects the GL table and lump policy
- Availability can be served from an injected cache
"""
import pytest
from datetime import date, timedelta
from decimal import Decimal
from pathlib import Path

from intercompany.config import IntercompanyConfig
from intercompany.domain.entities import (
    AvailabilityDay,
    CalculationMode,
    ConsultantType,
    GeneralLedgerRecord,
    LumpSumRecord,
    StaffSalaryDay,
    StatusType,
)
from intercompany.domain.exceptions import InvalidPeriodError
from intercompany.domain.services import FiscalYearContextBuilder, MonthContextBuilder
from intercompany.infrastructure.cache import AvailabilityCache

A = "company-a"
B = "company-b"
SHARED_A = "acc-shared-a"
MARCH = date(2025, 3, 1)
APRIL = date(2025, 4, 1)


def consultants(company, count, month_start, prefix):
    return [AvailabilityDay(f"{prefix}{i}", company, month_start) for i in range(count)]


@pytest.fixture
def source(source_class, companies, categories):
    availability = (
        consultants(A, 3, MARCH, "a")
        + consultants(B, 2, MARCH, "b")
        + [
            AvailabilityDay("t1", B, MARCH, status=StatusType.TERMINATED),
            AvailabilityDay("n1", B, MARCH, status=StatusType.NON_PAY_LEAVE),
            AvailabilityDay("s1", A, MARCH, consultant_type=ConsultantType.STUDENT),
        ]
        + consultants(A, 1, APRIL, "a")
        + consultants(B, 1, APRIL, "b")
    )
    gl_records = [
        GeneralLedgerRecord(A, 3000, MARCH, Decimal("400.00")),
        GeneralLedgerRecord(A, 3000, date(2025, 3, 20), Decimal("600.00")),
        GeneralLedgerRecord(A, 2200, date(2025, 3, 31), Decimal("500.00")),
        GeneralLedgerRecord(A, 3000, APRIL, Decimal("77.00")),
    ]
    lump_records = [
        LumpSumRecord(SHARED_A, MARCH, Decimal("-50.00")),
        LumpSumRecord(SHARED_A, date(2025, 3, 10), Decimal("30.00")),
        LumpSumRecord(SHARED_A, APRIL, Decimal("12.00")),
    ]
    staff_rows = [
        StaffSalaryDay("staff-1", A, MARCH + timedelta(days=i), Decimal("300")) for i in range(5)
    ]
    return source_class(
        companies=companies,
        categories=categories,
        availability=availability,
        gl_records=gl_records,
        lump_records=lump_records,
        staff_rows=staff_rows,
    )


class TestMonthContextBuilder:
    """Tests for single-month context builds."""

    def test_builds_counts_ratios_and_tables(self, source, config):
        context = MonthContextBuilder(source, config).load_month_data(
            MARCH, APRIL, CalculationMode.DISTRIBUTION_LEGACY
        )

        assert context.consultant_count == {A: Decimal(3), B: Decimal(2)}
        assert context.ratio(A) == Decimal("0.6000000000")
        assert context.ratio(B) == Decimal("0.4000000000")
        assert context.gl_range_amount(A, 3000) == Decimal("1000.00")
        assert context.gl_exact_amount(A, 3000) == Decimal("400.00")
        assert context.gl_amount(A, 3000) == Decimal("1000.00")
        assert context.staff_baseline == {A: Decimal("306.00"), B: Decimal("0.00")}

    def test_invoice_mode_reads_first_day(self, source, config):
        context = MonthContextBuilder(source, config).load_month_data(
            MARCH, APRIL, CalculationMode.INVOICE_V1
        )
        assert context.gl_amount(A, 3000) == Decimal("400.00")
        assert context.gl_amount(A, 2200) == Decimal(0)

    def test_each_input_queried_once(self, source, config):
        MonthContextBuilder(source, config).load_month_data(MARCH, APRIL)

        for name in (
            'list_companies',
            'list_categories_ordered_by_account_code',
            'list_availability_records',
            'list_general_ledger_records',
            'list_general_ledger_records_on',
            'query_staff_daily_salaries',
        ):
            assert source.calls[name] == 1, name

    def test_default_mode_from_config(self, source, config):
        context = MonthContextBuilder(source, config).load_month_data(MARCH, APRIL)
        assert context.mode == config.default_mode

    def test_lumps_follow_mode(self, source, config):
        builder = MonthContextBuilder(source, config)
        invoice = builder.load_month_data(MARCH, APRIL, CalculationMode.INVOICE_V1)
        legacy = builder.load_month_data(MARCH, APRIL, CalculationMode.DISTRIBUTION_LEGACY)

        assert builder.lumps_for(invoice) == {SHARED_A: Decimal("-50.00")}
        assert source.calls['list_lump_sum_records_on'] == 1
        assert source.calls['list_lump_sum_records'] == 0

        assert builder.lumps_for(legacy) == {SHARED_A: Decimal("30.00")}
        assert source.calls['list_lump_sum_records'] == 1

    def test_inverted_window_rejected(self, source, config):
        with pytest.raises(InvalidPeriodError):
            MonthContextBuilder(source, config).load_month_data(APRIL, MARCH)

    def test_no_consultants_logs_warning(self, source_class, companies, categories, config, caplog):
        empty = source_class(companies=companies, categories=categories)
        with caplog.at_level("WARNING"):
            context = MonthContextBuilder(empty, config).load_month_data(MARCH, APRIL)

        assert not context.has_consultants
        assert context.ratio_by_company == {A: Decimal(0), B: Decimal(0)}
        assert "No consultants" in caplog.text

    def test_multiplier_from_config(self, source, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("allocation:\n  salary_buffer_multiplier: '1.5'\n")
        config = IntercompanyConfig(Path(path))

        context = MonthContextBuilder(source, config).load_month_data(MARCH, APRIL)
        assert context.staff_baseline[A] == Decimal("450.00")


class TestAvailabilityCaching:
    """Tests for the injected availability cache."""

    def test_second_build_served_from_cache(self, source, config):
        cache = AvailabilityCache()
        builder = MonthContextBuilder(source, config, cache)

        first = builder.load_month_data(MARCH, APRIL)
        second = builder.load_month_data(MARCH, APRIL)

        assert source.calls['list_availability_records'] == 1
        assert first.consultant_count == second.consultant_count
        assert cache.stats.hits == 1

    def test_invalidation_forces_reload(self, source, config):
        cache = AvailabilityCache()
        builder = MonthContextBuilder(source, config, cache)
        builder.load_month_data(MARCH, APRIL)

        source.availability.append(AvailabilityDay("late", B, MARCH))
        cache.invalidate_date(date(2025, 3, 17))
        context = builder.load_month_data(MARCH, APRIL)

        assert source.calls['list_availability_records'] == 2
        assert context.consultant_count[B] == Decimal(3)


class TestFiscalYearContextBuilder:
    """Tests for fiscal-year batch builds."""

    def test_bulk_queries_once_staff_per_month(self, source, config):
        FiscalYearContextBuilder(source, config).load_fiscal_year(
            date(2024, 7, 1), date(2025, 7, 1), CalculationMode.DISTRIBUTION_LEGACY
        )

        assert source.calls['list_availability_records'] == 1
        assert source.calls['list_general_ledger_records'] == 1
        assert source.calls['list_lump_sum_records'] == 1
        assert source.calls['list_general_ledger_records_on'] == 0
        assert source.calls['query_staff_daily_salaries'] == 12

    def test_months_sliced_by_calendar_month(self, source, config):
        fiscal_year = FiscalYearContextBuilder(source, config).load_fiscal_year(
            date(2024, 7, 1), date(2025, 7, 1), CalculationMode.DISTRIBUTION_LEGACY
        )

        assert len(fiscal_year.months) == 12
        march = fiscal_year.month(MARCH)
        april = fiscal_year.month(date(2025, 4, 15))

        assert march.consultant_count == {A: Decimal(3), B: Decimal(2)}
        assert april.consultant_count == {A: Decimal(1), B: Decimal(1)}
        assert march.gl_range_amount(A, 3000) == Decimal("1000.00")
        assert march.gl_exact_amount(A, 3000) == Decimal("400.00")
        assert april.gl_range_amount(A, 3000) == Decimal("77.00")
        assert march.staff_baseline[A] == Decimal("306.00")
        assert april.staff_baseline[A] == Decimal("0.00")

        assert not fiscal_year.month(date(2024, 7, 1)).has_consultants

    def test_lumps_per_month_follow_mode(self, source, config):
        builder = FiscalYearContextBuilder(source, config)
        legacy = builder.load_fiscal_year(date(2024, 7, 1), date(2025, 7, 1), CalculationMode.DISTRIBUTION_LEGACY)
        invoice = builder.load_fiscal_year(date(2024, 7, 1), date(2025, 7, 1), CalculationMode.INVOICE_V1)

        assert legacy.lumps(MARCH) == {SHARED_A: Decimal("30.00")}
        assert invoice.lumps(MARCH) == {SHARED_A: Decimal("-50.00")}
        assert legacy.lumps(date(2024, 8, 1)) == {}

    def test_month_outside_fiscal_year(self, source, config):
        fiscal_year = FiscalYearContextBuilder(source, config).load_fiscal_year(
            date(2024, 7, 1), date(2025, 7, 1)
        )
        with pytest.raises(InvalidPeriodError):
            fiscal_year.month(date(2025, 7, 1))

    def test_for_fiscal_start_year_uses_configured_start(self, source, config, tmp_path):
        fiscal_year = FiscalYearContextBuilder(source, config).for_fiscal_start_year(2024)
        assert fiscal_year.fiscal_from == date(2024, 7, 1)
        assert fiscal_year.fiscal_to == date(2025, 7, 1)

        path = tmp_path / "calendar.yaml"
        path.write_text("fiscal_year:\n  start_month: 1\n")
        calendar = FiscalYearContextBuilder(source, IntercompanyConfig(Path(path))).for_fiscal_start_year(2025)
        assert calendar.fiscal_from == date(2025, 1, 1)
        assert calendar.months[-1] == date(2025, 12, 1)
