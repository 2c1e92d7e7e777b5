"""
Ledger Entities - General ledger postings and lump-sum adjustments.
"""
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional


@dataclass(frozen=True)
class GeneralLedgerRecord:
    """
    One posting in a company's general ledger.

    Attributes:
        company_uuid: Company whose ledger holds the posting
        account_number: Account code the amount was posted to
        expense_date: Posting date
        amount: Posted amount (may be negative)
    """

    company_uuid: str
    account_number: int
    expense_date: date
    amount: Decimal = Decimal("0.00")


@dataclass(frozen=True)
class LumpSumRecord:
    """
    Manual adjustment registered against an account.

    Lump sums are never shared between companies. Negative amounts are
    corrections and are kept or clamped depending on the calculation mode.

    Attributes:
        account_uuid: Account the lump sum belongs to
        registered_date: Registration date
        amount: Adjustment amount (may be negative)
        uuid: Optional record identifier
        description: Free-text description
    """

    account_uuid: str
    registered_date: date
    amount: Decimal = Decimal("0.00")
    uuid: Optional[str] = None
    description: str = ""
