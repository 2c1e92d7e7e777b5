"""
Accounting reference data - companies, categories and accounts.

These are read-only snapshots of the group's chart of accounts. The
allocation core looks them up but never mutates them.
"""
from dataclasses import dataclass
from typing import Optional, Tuple


@dataclass(frozen=True)
class Company:
    """
    A legal entity in the group.

    Attributes:
        uuid: Unique identifier
        name: Display name
    """

    uuid: str
    name: str = ""


@dataclass(frozen=True)
class AccountingAccount:
    """
    A general-ledger account owned by one company (its origin).

    Attributes:
        uuid: Unique identifier, used to key lump sums
        company_uuid: Origin company owning the account
        account_code: Numeric account code used in the general ledger
        category_uuid: Parent category
        description: Account description
        shared: Non-salary amounts may be distributed across the group
        salary: Amounts may be distributed up to the origin's staff baseline
    """

    uuid: str
    company_uuid: str
    account_code: int
    category_uuid: Optional[str] = None
    description: str = ""
    shared: bool = False
    salary: bool = False

    @property
    def distributable(self) -> bool:
        """True if any part of the account can leave its origin company."""
        return self.shared or self.salary


@dataclass(frozen=True)
class AccountingCategory:
    """
    Reporting group of accounts.

    The order of `accounts` is significant: it is the order in which the
    salary cap is consumed during allocation.

    Attributes:
        uuid: Unique identifier
        account_code: Category code used as the key for category totals
        name: Display name
        accounts: Accounts in this category, ordered by account code
    """

    uuid: str
    account_code: str
    name: str = ""
    accounts: Tuple[AccountingAccount, ...] = ()

    def find_account(self, account_uuid: str) -> Optional[AccountingAccount]:
        """Get an account in this category by uuid."""
        for account in self.accounts:
            if account.uuid == account_uuid:
                return account
        return None
