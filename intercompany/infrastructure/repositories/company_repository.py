"""
Reference Data Repositories - Companies, categories and accounts.

Rows are converted into frozen domain entities on the way out, so the
calculation core never touches ORM objects.
"""
import uuid
from typing import List, Optional

from sqlalchemy.orm import Session, selectinload

from intercompany.models import CompanyEntity, AccountingCategoryEntity, AccountingAccountEntity
from intercompany.domain.entities import Company, AccountingCategory, AccountingAccount
from intercompany.domain.exceptions import CompanyNotFoundError, CategoryNotFoundError
from .base_repository import BaseRepository


def to_company(row: CompanyEntity) -> Company:
    return Company(uuid=row.uuid, name=row.name or "")


def to_account(row: AccountingAccountEntity) -> AccountingAccount:
    return AccountingAccount(
        uuid=row.uuid,
        company_uuid=row.company_uuid,
        account_code=row.account_code,
        category_uuid=row.category_uuid,
        description=row.account_description or "",
        shared=bool(row.shared),
        salary=bool(row.salary),
    )


def to_category(row: AccountingCategoryEntity) -> AccountingCategory:
    """Convert a category row; accounts ordered by account code, then uuid."""
    accounts = sorted(row.accounts, key=lambda a: (a.account_code, a.uuid))
    return AccountingCategory(
        uuid=row.uuid,
        account_code=row.account_code,
        name=row.name or "",
        accounts=tuple(to_account(a) for a in accounts),
    )


class CompanyRepository(BaseRepository[CompanyEntity]):
    """Repository for the companies of the group."""

    def __init__(self, session: Session):
        super().__init__(session, CompanyEntity)

    def exists(self, **criteria) -> bool:
        """Check if a company matching the criteria exists."""
        return self._matches(**criteria)

    def list_companies(self) -> List[Company]:
        """All companies, in creation order."""
        return [to_company(row) for row in self.get_all()]

    def get_company(self, company_uuid: str) -> Company:
        """
        Look up one company.

        Raises:
            CompanyNotFoundError: If no company has `company_uuid`
        """
        row = self.get_by_uuid(company_uuid)
        if row is None:
            raise CompanyNotFoundError(company_uuid)
        return to_company(row)

    def create(self, name: str, company_uuid: Optional[str] = None) -> CompanyEntity:
        """
        Create a company.

        Args:
            name: Display name
            company_uuid: Optional uuid (generated when omitted)

        Returns:
            Created company row
        """
        row = CompanyEntity(uuid=company_uuid or str(uuid.uuid4()), name=name)
        self.add(row)
        self.flush()
        return row


class CategoryRepository(BaseRepository[AccountingCategoryEntity]):
    """
    Repository for accounting categories and their accounts.

    Category order (by category code) and account order within a category
    (by account code, then uuid) decide the salary cap consumption order.
    """

    def __init__(self, session: Session):
        super().__init__(session, AccountingCategoryEntity)

    def exists(self, **criteria) -> bool:
        """Check if a category matching the criteria exists."""
        return self._matches(**criteria)

    def list_ordered_by_account_code(self) -> List[AccountingCategory]:
        """All categories ordered by category code, each with its ordered accounts."""
        rows = self.session.query(AccountingCategoryEntity).options(
            selectinload(AccountingCategoryEntity.accounts)
        ).order_by(
            AccountingCategoryEntity.account_code,
            AccountingCategoryEntity.uuid,
        ).all()
        return [to_category(row) for row in rows]

    def create_category(
        self,
        account_code: str,
        name: str = "",
        category_uuid: Optional[str] = None,
    ) -> AccountingCategoryEntity:
        """Create a category."""
        row = AccountingCategoryEntity(
            uuid=category_uuid or str(uuid.uuid4()),
            account_code=account_code,
            name=name,
        )
        self.add(row)
        self.flush()
        return row

    def add_account(
        self,
        category_code: str,
        company_uuid: str,
        account_code: int,
        description: str = "",
        shared: bool = False,
        salary: bool = False,
        account_uuid: Optional[str] = None,
    ) -> AccountingAccountEntity:
        """
        Register an account under an existing category.

        Raises:
            CategoryNotFoundError: If no category has `category_code`
            CompanyNotFoundError: If the owning company does not exist
        """
        category = self.session.query(AccountingCategoryEntity).filter(
            AccountingCategoryEntity.account_code == category_code
        ).first()
        if category is None:
            raise CategoryNotFoundError(category_code)

        CompanyRepository(self.session).get_company(company_uuid)

        row = AccountingAccountEntity(
            uuid=account_uuid or str(uuid.uuid4()),
            company_uuid=company_uuid,
            category_uuid=category.uuid,
            account_code=account_code,
            account_description=description,
            shared=shared,
            salary=salary,
        )
        self.session.add(row)
        self.flush()
        self.session.expire(category, ['accounts'])
        return row
