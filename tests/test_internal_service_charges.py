"""
Tests for internal service charges between group companies.
"""
import pytest
from decimal import Decimal

from intercompany.domain.entities import AccountingAccount, AccountingCategory, CalculationMode
from intercompany.domain.exceptions import CompanyNotFoundError
from intercompany.domain.services import InternalServiceCharges

A = "company-a"
B = "company-b"


@pytest.fixture
def charges():
    return InternalServiceCharges()


@pytest.fixture
def invoice_context(make_context):
    gl = {A: {3000: Decimal("1000.00"), 2200: Decimal("500.00")}, B: {3100: Decimal("250.00")}}
    return make_context(
        gl={},
        gl_exact=gl,
        staff={A: Decimal("300.00"), B: Decimal("0.00")},
        mode=CalculationMode.INVOICE_V1,
    )


class TestOwedByCategory:
    """Tests for owed_by_category."""

    def test_payer_owes_ratio_share_of_sender_accounts(self, charges, invoice_context):
        owed = charges.owed_by_category(invoice_context, {}, A, B)
        assert owed == {"1000": Decimal("400.00"), "2000": Decimal("120.00")}

    def test_non_shared_sender_accounts_are_not_charged(self, charges, invoice_context):
        assert charges.owed_by_category(invoice_context, {}, B, A) == {}

    def test_negative_invoice_lump_raises_base(self, charges, invoice_context):
        owed = charges.owed_by_category(invoice_context, {"acc-shared-a": Decimal("-50.00")}, A, B)
        assert owed["1000"] == Decimal("420.00")

    def test_sender_cap_consumed_in_order(self, charges, make_context):
        accounts = tuple(
            AccountingAccount(uuid=f"sal-{code}", company_uuid=A, account_code=code, salary=True)
            for code in (2200, 2300)
        )
        context = make_context(
            gl_exact={A: {2200: Decimal("200.00"), 2300: Decimal("300.00")}},
            staff={A: Decimal("400.00"), B: Decimal("0.00")},
            mode=CalculationMode.INVOICE_V1,
            categories_=[AccountingCategory(uuid="cat", account_code="2000", accounts=accounts)],
        )
        # base 200.00 + 200.00, B's ratio 0.4
        assert charges.owed_by_category(context, {}, A, B) == {"2000": Decimal("160.00")}

    def test_no_consultants_nothing_owed(self, charges, make_context):
        context = make_context(
            gl_exact={A: {3000: Decimal("1000.00")}},
            counts={A: Decimal(0), B: Decimal(0)},
            mode=CalculationMode.INVOICE_V1,
        )
        assert charges.owed_by_category(context, {}, A, B) == {}

    def test_unknown_company_raises(self, charges, invoice_context):
        with pytest.raises(CompanyNotFoundError):
            charges.owed_by_category(invoice_context, {}, "company-x", B)
        with pytest.raises(CompanyNotFoundError):
            charges.owed_by_category(invoice_context, {}, A, "company-x")
