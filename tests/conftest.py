"""
Shared fixtures: in-memory data source, month context factory and SQLite session.
"""
from collections import Counter
from datetime import date
from decimal import Decimal

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from intercompany.config import get_config
from intercompany.domain.data_source import AllocationDataSource
from intercompany.domain.entities import (
    AccountingAccount,
    AccountingCategory,
    CalculationMode,
    Company,
    ConsultantType,
    MonthContext,
    StatusType,
)
from intercompany.domain.periods import next_month
from intercompany.domain.services import RatioCalculator
from intercompany.models import Base


class InMemoryDataSource(AllocationDataSource):
    """AllocationDataSource over plain lists; counts every query."""

    def __init__(
        self,
        companies=(),
        categories=(),
        availability=(),
        gl_records=(),
        lump_records=(),
        staff_rows=(),
    ):
        self.companies = list(companies)
        self.categories = list(categories)
        self.availability = list(availability)
        self.gl_records = list(gl_records)
        self.lump_records = list(lump_records)
        self.staff_rows = list(staff_rows)
        self.calls = Counter()

    def list_companies(self):
        self.calls['list_companies'] += 1
        return list(self.companies)

    def list_categories_ordered_by_account_code(self):
        self.calls['list_categories_ordered_by_account_code'] += 1
        return sorted(self.categories, key=lambda c: c.account_code)

    def list_availability_records(self, date_from, date_to):
        self.calls['list_availability_records'] += 1
        start, end = date_from.replace(day=1), date_to.replace(day=1)
        rows = [
            d for d in self.availability
            if start <= d.document_date < end
            and d.consultant_type in (ConsultantType.CONSULTANT, ConsultantType.STUDENT)
            and d.status != StatusType.TERMINATED
        ]
        return sorted(rows, key=lambda d: (d.document_date, d.user_uuid))

    def list_general_ledger_records(self, date_from, date_to):
        self.calls['list_general_ledger_records'] += 1
        return [r for r in self.gl_records if date_from <= r.expense_date < date_to]

    def list_general_ledger_records_on(self, day):
        self.calls['list_general_ledger_records_on'] += 1
        return [r for r in self.gl_records if r.expense_date == day]

    def list_lump_sum_records(self, date_from, date_to):
        self.calls['list_lump_sum_records'] += 1
        return [r for r in self.lump_records if date_from <= r.registered_date < date_to]

    def list_lump_sum_records_on(self, day):
        self.calls['list_lump_sum_records_on'] += 1
        return [r for r in self.lump_records if r.registered_date == day]

    def query_staff_daily_salaries(self, year, month):
        self.calls['query_staff_daily_salaries'] += 1
        return [
            r for r in self.staff_rows
            if r.document_date.year == year and r.document_date.month == month
        ]


# =============================================================================
# Reference data
# =============================================================================

COMPANY_A = Company(uuid="company-a", name="Alpha A/S")
COMPANY_B = Company(uuid="company-b", name="Beta ApS")

SHARED_A = AccountingAccount(
    uuid="acc-shared-a", company_uuid=COMPANY_A.uuid, account_code=3000,
    category_uuid="cat-office", description="Rent", shared=True,
)
LOCAL_B = AccountingAccount(
    uuid="acc-local-b", company_uuid=COMPANY_B.uuid, account_code=3100,
    category_uuid="cat-office", description="Local events",
)
SALARY_A = AccountingAccount(
    uuid="acc-salary-a", company_uuid=COMPANY_A.uuid, account_code=2200,
    category_uuid="cat-salary", description="Staff salaries", salary=True,
)

OFFICE = AccountingCategory(uuid="cat-office", account_code="1000", name="Office", accounts=(SHARED_A, LOCAL_B))
SALARIES = AccountingCategory(uuid="cat-salary", account_code="2000", name="Salaries", accounts=(SALARY_A,))


@pytest.fixture
def companies():
    return (COMPANY_A, COMPANY_B)


@pytest.fixture
def categories():
    return (OFFICE, SALARIES)


@pytest.fixture
def source_class():
    """The in-memory data source class, for tests that seed their own rows."""
    return InMemoryDataSource


@pytest.fixture
def make_context(companies, categories):
    """
    Build a MonthContext directly, bypassing the builders.

    Counts default to A=3, B=2 (ratios 0.6 / 0.4).
    """
    def _make(
        gl=None,
        gl_exact=None,
        counts=None,
        staff=None,
        mode=CalculationMode.DISTRIBUTION_LEGACY,
        month_from=date(2025, 3, 1),
        companies_=None,
        categories_=None,
    ):
        group = tuple(companies_ if companies_ is not None else companies)
        counts = counts if counts is not None else {COMPANY_A.uuid: Decimal(3), COMPANY_B.uuid: Decimal(2)}
        staff = staff if staff is not None else {c.uuid: Decimal("0.00") for c in group}
        return MonthContext(
            month_from=month_from,
            month_to=next_month(month_from),
            mode=mode,
            companies=group,
            categories=tuple(categories_ if categories_ is not None else categories),
            availability=(),
            gl_range=gl or {},
            gl_exact_day=gl_exact or {},
            consultant_count=counts,
            ratio_by_company=RatioCalculator.ratios(counts),
            staff_baseline=staff,
        )
    return _make


@pytest.fixture
def config():
    return get_config()


@pytest.fixture(scope="function")
def db_session():
    """Fresh in-memory database for each test."""
    engine = create_engine("sqlite:///:memory:", echo=False)
    Base.metadata.create_all(engine)
    Session = sessionmaker(bind=engine)
    session = Session()

    yield session

    session.close()
    engine.dispose()
