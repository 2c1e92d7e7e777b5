"""
Database models and SQLAlchemy setup for the Intercompany Allocation Engine.

Ledger, lump-sum and salary amounts are stored as floats, as delivered by the
accounting and BI feeds, and converted to Decimal when read into the domain.
"""
import os
from datetime import datetime
from sqlalchemy import (
    create_engine, Column, Integer, String, Float, Boolean,
    DateTime, Date, ForeignKey, Index
)
from sqlalchemy.orm import declarative_base, sessionmaker, relationship

from intercompany.config import DATABASE_URL_ENV, DEFAULT_DATABASE_URL

DATABASE_URL = os.getenv(DATABASE_URL_ENV, DEFAULT_DATABASE_URL)
_connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}
engine = create_engine(DATABASE_URL, connect_args=_connect_args)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


# =============================================================================
# Reference Data
# =============================================================================

class CompanyEntity(Base):
    """A legal entity of the group."""
    __tablename__ = "companies"

    id = Column(Integer, primary_key=True, index=True)
    uuid = Column(String(36), unique=True, index=True, nullable=False)
    name = Column(String(200), nullable=False, default="")
    created_at = Column(DateTime, default=datetime.utcnow)

    accounts = relationship("AccountingAccountEntity", back_populates="company")


class AccountingCategoryEntity(Base):
    """
    Reporting category grouping accounts across companies.
    Account order drives salary cap consumption; CategoryRepository fixes it.
    """
    __tablename__ = "accounting_categories"

    id = Column(Integer, primary_key=True, index=True)
    uuid = Column(String(36), unique=True, index=True, nullable=False)
    account_code = Column(String(20), nullable=False, index=True)
    name = Column(String(200), nullable=False, default="")

    accounts = relationship(
        "AccountingAccountEntity",
        back_populates="category",
        order_by="AccountingAccountEntity.account_code",
    )


class AccountingAccountEntity(Base):
    """General-ledger account owned by one company."""
    __tablename__ = "accounting_accounts"

    id = Column(Integer, primary_key=True, index=True)
    uuid = Column(String(36), unique=True, index=True, nullable=False)
    company_uuid = Column(String(36), ForeignKey('companies.uuid'), nullable=False, index=True)
    category_uuid = Column(String(36), ForeignKey('accounting_categories.uuid'), nullable=False, index=True)
    account_code = Column(Integer, nullable=False, index=True)
    account_description = Column(String(500), nullable=True)
    shared = Column(Boolean, default=False)
    salary = Column(Boolean, default=False)

    company = relationship("CompanyEntity", back_populates="accounts")
    category = relationship("AccountingCategoryEntity", back_populates="accounts")
    lump_sums = relationship("AccountLumpSumEntity", back_populates="account", cascade="all, delete-orphan")


# =============================================================================
# Ledger
# =============================================================================

class FinanceDetailsEntity(Base):
    """One general-ledger posting imported from a company's accounting system."""
    __tablename__ = "finance_details"

    id = Column(Integer, primary_key=True, index=True)
    company_uuid = Column(String(36), ForeignKey('companies.uuid'), nullable=False, index=True)
    entry_number = Column(Integer, nullable=True)
    account_number = Column(Integer, nullable=False, index=True)
    expense_date = Column(Date, nullable=False, index=True)
    amount = Column(Float, nullable=False, default=0.0)  # May be negative (credits)
    text = Column(String(500), nullable=True)

    __table_args__ = (
        Index('ix_finance_details_company_date', 'company_uuid', 'expense_date'),
    )


class AccountLumpSumEntity(Base):
    """Manual adjustment registered against an account. Never shared."""
    __tablename__ = "account_lump_sums"

    id = Column(Integer, primary_key=True, index=True)
    uuid = Column(String(36), unique=True, index=True, nullable=False)
    account_uuid = Column(String(36), ForeignKey('accounting_accounts.uuid'), nullable=False, index=True)
    registered_date = Column(Date, nullable=False, index=True)
    amount = Column(Float, nullable=False, default=0.0)  # Negative amounts are corrections
    description = Column(String(500), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    account = relationship("AccountingAccountEntity", back_populates="lump_sums")


# =============================================================================
# BI Data
# =============================================================================

class BiDataPerDayEntity(Base):
    """Daily BI snapshot of one person: employer, type, status and salary."""
    __tablename__ = "bi_data_per_day"

    id = Column(Integer, primary_key=True, index=True)
    document_date = Column(Date, nullable=False, index=True)
    year = Column(Integer, nullable=False)
    month = Column(Integer, nullable=False)
    day = Column(Integer, nullable=False)
    user_uuid = Column(String(36), nullable=False, index=True)
    company_uuid = Column(String(36), nullable=True, index=True)  # Unknown employer on some days
    consultant_type = Column(String(20), nullable=False, index=True)  # CONSULTANT, STUDENT, STAFF, EXTERNAL
    status_type = Column(String(20), nullable=False)  # ACTIVE, TERMINATED, NON_PAY_LEAVE, ...
    salary = Column(Float, nullable=True)

    __table_args__ = (
        Index('ix_bi_data_per_day_year_month', 'year', 'month'),
    )


def init_db():
    """Initialize the database and create all tables."""
    Base.metadata.create_all(bind=engine)


def get_db():
    """Database session generator; closes the session when exhausted."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
