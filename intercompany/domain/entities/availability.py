"""
Availability Entities - Consultant and staff data sourced from BI.

Daily rows come from the BI data-per-day table. They are grouped per user and
month into ConsultantAvailabilityRecord for headcount, and filtered to STAFF
rows as StaffSalaryDay for the salary baseline.
"""
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Optional


class ConsultantType(Enum):
    """Employment category of a person."""
    CONSULTANT = "CONSULTANT"
    STUDENT = "STUDENT"
    STAFF = "STAFF"
    EXTERNAL = "EXTERNAL"


class StatusType(Enum):
    """Employment status of a person on a given day."""
    PREBOARDING = "PREBOARDING"
    ACTIVE = "ACTIVE"
    PAID_LEAVE = "PAID_LEAVE"
    MATERNITY_LEAVE = "MATERNITY_LEAVE"
    NON_PAY_LEAVE = "NON_PAY_LEAVE"
    TERMINATED = "TERMINATED"


@dataclass(frozen=True)
class AvailabilityDay:
    """
    Raw BI row for one person on one day.

    Attributes:
        user_uuid: Person identifier
        company_uuid: Employing company on that day (None if unknown)
        document_date: The day
        consultant_type: Employment category
        status: Employment status
        salary: Monthly salary in effect on that day
    """

    user_uuid: str
    company_uuid: Optional[str]
    document_date: date
    consultant_type: ConsultantType = ConsultantType.CONSULTANT
    status: StatusType = StatusType.ACTIVE
    salary: Decimal = Decimal("0")


@dataclass(frozen=True)
class ConsultantAvailabilityRecord:
    """
    One person's availability for one month.

    Attributes:
        year: Calendar year
        month: Calendar month (1-12)
        company_uuid: Employing company (None if unknown)
        user_uuid: Person identifier
        consultant_type: Employment category
        status: Employment status
        avg_salary: Average daily salary figure over the month
    """

    year: int
    month: int
    company_uuid: Optional[str]
    user_uuid: str
    consultant_type: ConsultantType
    status: StatusType
    avg_salary: Decimal = Decimal("0")

    @property
    def first_day(self) -> date:
        return date(self.year, self.month, 1)

    def is_in_month(self, at_date: date) -> bool:
        return self.year == at_date.year and self.month == at_date.month


@dataclass(frozen=True)
class StaffSalaryDay:
    """
    Salary presence of a STAFF person on one day.

    Attributes:
        user_uuid: Person identifier
        company_uuid: Company the day is attributed to (None if unknown)
        document_date: The day
        salary: Salary figure recorded for the day (None treated as zero)
    """

    user_uuid: str
    company_uuid: Optional[str]
    document_date: date
    salary: Optional[Decimal] = None
