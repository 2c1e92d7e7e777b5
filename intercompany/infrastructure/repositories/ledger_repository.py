"""
Ledger Repositories - General ledger postings and account lump sums.

Implements repository pattern for ledger data with:
- Half-open date range queries [from, to)
- Exact-day queries for invoice calculations
- Float to Decimal conversion at the boundary
"""
import uuid
from datetime import date
from typing import List, Optional

from sqlalchemy.orm import Session

from intercompany.models import FinanceDetailsEntity, AccountLumpSumEntity, AccountingAccountEntity
from intercompany.domain.entities import GeneralLedgerRecord, LumpSumRecord
from intercompany.domain.exceptions import AccountNotFoundError
from intercompany.domain.money import to_decimal
from .base_repository import BaseRepository


def to_gl_record(row: FinanceDetailsEntity) -> GeneralLedgerRecord:
    return GeneralLedgerRecord(
        company_uuid=row.company_uuid,
        account_number=row.account_number,
        expense_date=row.expense_date,
        amount=to_decimal(row.amount),
    )


def to_lump_record(row: AccountLumpSumEntity) -> LumpSumRecord:
    return LumpSumRecord(
        account_uuid=row.account_uuid,
        registered_date=row.registered_date,
        amount=to_decimal(row.amount),
        uuid=row.uuid,
        description=row.description or "",
    )


class LedgerRepository(BaseRepository[FinanceDetailsEntity]):
    """Repository for general ledger postings (finance details)."""

    def __init__(self, session: Session):
        super().__init__(session, FinanceDetailsEntity)

    def exists(self, **criteria) -> bool:
        """Check if a posting matching the criteria exists."""
        return self._matches(**criteria)

    def records_between(self, date_from: date, date_to: date) -> List[GeneralLedgerRecord]:
        """
        Get postings dated in [date_from, date_to).

        Args:
            date_from: Window start (inclusive)
            date_to: Window end (exclusive)

        Returns:
            Ledger records ordered by date
        """
        rows = self.session.query(FinanceDetailsEntity).filter(
            FinanceDetailsEntity.expense_date >= date_from,
            FinanceDetailsEntity.expense_date < date_to,
        ).order_by(FinanceDetailsEntity.expense_date, FinanceDetailsEntity.id).all()
        return [to_gl_record(row) for row in rows]

    def records_on(self, day: date) -> List[GeneralLedgerRecord]:
        """Get postings dated exactly on `day`."""
        rows = self.session.query(FinanceDetailsEntity).filter(
            FinanceDetailsEntity.expense_date == day
        ).order_by(FinanceDetailsEntity.id).all()
        return [to_gl_record(row) for row in rows]

    def add_posting(
        self,
        company_uuid: str,
        account_number: int,
        expense_date: date,
        amount: float,
        text: Optional[str] = None,
    ) -> FinanceDetailsEntity:
        """Record a ledger posting."""
        row = FinanceDetailsEntity(
            company_uuid=company_uuid,
            account_number=account_number,
            expense_date=expense_date,
            amount=amount,
            text=text,
        )
        self.add(row)
        self.flush()
        return row


class LumpSumRepository(BaseRepository[AccountLumpSumEntity]):
    """Repository for lump-sum adjustments on accounts."""

    def __init__(self, session: Session):
        super().__init__(session, AccountLumpSumEntity)

    def exists(self, **criteria) -> bool:
        """Check if a lump sum matching the criteria exists."""
        return self._matches(**criteria)

    def records_between(self, date_from: date, date_to: date) -> List[LumpSumRecord]:
        """Get lump sums registered in [date_from, date_to)."""
        rows = self.session.query(AccountLumpSumEntity).filter(
            AccountLumpSumEntity.registered_date >= date_from,
            AccountLumpSumEntity.registered_date < date_to,
        ).order_by(AccountLumpSumEntity.registered_date, AccountLumpSumEntity.id).all()
        return [to_lump_record(row) for row in rows]

    def records_on(self, day: date) -> List[LumpSumRecord]:
        """Get lump sums registered exactly on `day`."""
        rows = self.session.query(AccountLumpSumEntity).filter(
            AccountLumpSumEntity.registered_date == day
        ).order_by(AccountLumpSumEntity.id).all()
        return [to_lump_record(row) for row in rows]

    def register(
        self,
        account_uuid: str,
        registered_date: date,
        amount: float,
        description: Optional[str] = None,
    ) -> AccountLumpSumEntity:
        """
        Register a lump sum against an account.

        Raises:
            AccountNotFoundError: If the account does not exist
        """
        account = self.session.query(AccountingAccountEntity).filter(
            AccountingAccountEntity.uuid == account_uuid
        ).first()
        if account is None:
            raise AccountNotFoundError(account_uuid)

        row = AccountLumpSumEntity(
            uuid=str(uuid.uuid4()),
            account_uuid=account_uuid,
            registered_date=registered_date,
            amount=amount,
            description=description,
        )
        self.add(row)
        self.flush()
        return row
