"""
Expense Distribution Result - Monthly intercompany distribution report.

Funds flow: GL account -> shareable base -> payer allocations -> owes rows.
Amounts are serialized as strings so 2-decimal values survive round trips.
"""
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, List

from intercompany.domain.money import ZERO


@dataclass
class CompanySummary:
    """
    Per-company headline figures for a month.

    Attributes:
        company_uuid: Company identifier
        company_name: Display name
        consultants: Consultant headcount (10 decimals)
        staff_cost_origin: Staff baseline of the company
        staff_payable: Sum of salary allocations the company pays
    """

    company_uuid: str
    company_name: str = ""
    consultants: Decimal = ZERO
    staff_cost_origin: Decimal = ZERO
    staff_payable: Decimal = ZERO

    def to_dict(self) -> dict:
        return {
            'company_uuid': self.company_uuid,
            'company_name': self.company_name,
            'consultants': str(self.consultants),
            'staff_cost_origin': str(self.staff_cost_origin),
            'staff_payable': str(self.staff_payable),
        }


@dataclass
class AccountDistribution:
    """One account's allocation to every payer company."""

    account_code: int
    account_description: str
    category_code: str
    category_name: str
    origin_company_uuid: str
    shared: bool
    salary: bool
    allocations: Dict[str, Decimal] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            'account_code': self.account_code,
            'account_description': self.account_description,
            'category_code': self.category_code,
            'category_name': self.category_name,
            'origin_company_uuid': self.origin_company_uuid,
            'shared': self.shared,
            'salary': self.salary,
            'allocations': {k: str(v) for k, v in self.allocations.items()},
        }


@dataclass
class CategoryAggregate:
    """Category total per payer company."""

    category_code: str
    category_name: str = ""
    allocations: Dict[str, Decimal] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            'category_code': self.category_code,
            'category_name': self.category_name,
            'allocations': {k: str(v) for k, v in self.allocations.items()},
        }


@dataclass(frozen=True)
class IntercompanyOwe:
    """Amount a payer owes an origin company on one account."""

    from_company_uuid: str
    to_company_uuid: str
    account_code: int
    amount: Decimal

    def to_dict(self) -> dict:
        return {
            'from_company_uuid': self.from_company_uuid,
            'to_company_uuid': self.to_company_uuid,
            'account_code': self.account_code,
            'amount': str(self.amount),
        }


@dataclass(frozen=True)
class IntercompanyOweCategory:
    """Amount a payer owes an origin company on one category."""

    from_company_uuid: str
    to_company_uuid: str
    category_code: str
    category_name: str
    amount: Decimal

    def to_dict(self) -> dict:
        return {
            'from_company_uuid': self.from_company_uuid,
            'to_company_uuid': self.to_company_uuid,
            'category_code': self.category_code,
            'category_name': self.category_name,
            'amount': str(self.amount),
        }


@dataclass
class ExpenseDistributionResult:
    """
    Complete monthly distribution across the group.

    Attributes:
        year: Calendar year
        month: Calendar month (1-12)
        companies: Company summaries in group order
        accounts: Account distributions in allocation order
        categories: Category aggregates ordered by category code
        owes_by_account: Cross-company owes per account
        owes_by_category: Cross-company owes per category
    """

    year: int
    month: int
    companies: List[CompanySummary] = field(default_factory=list)
    accounts: List[AccountDistribution] = field(default_factory=list)
    categories: List[CategoryAggregate] = field(default_factory=list)
    owes_by_account: List[IntercompanyOwe] = field(default_factory=list)
    owes_by_category: List[IntercompanyOweCategory] = field(default_factory=list)

    def company_summary(self, company_uuid: str) -> CompanySummary:
        for summary in self.companies:
            if summary.company_uuid == company_uuid:
                return summary
        raise KeyError(company_uuid)

    def category_total(self, category_code: str, payer_uuid: str) -> Decimal:
        """Allocated category total for a payer (zero when absent)."""
        for aggregate in self.categories:
            if aggregate.category_code == category_code:
                return aggregate.allocations.get(payer_uuid, ZERO)
        return ZERO

    def total_owed(self, from_company_uuid: str, to_company_uuid: str) -> Decimal:
        """Sum of account owes from one company to another."""
        return sum(
            (
                o.amount for o in self.owes_by_account
                if o.from_company_uuid == from_company_uuid and o.to_company_uuid == to_company_uuid
            ),
            ZERO,
        )

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            'year': self.year,
            'month': self.month,
            'companies': [c.to_dict() for c in self.companies],
            'accounts': [a.to_dict() for a in self.accounts],
            'categories': [c.to_dict() for c in self.categories],
            'owes_by_account': [o.to_dict() for o in self.owes_by_account],
            'owes_by_category': [o.to_dict() for o in self.owes_by_category],
        }
