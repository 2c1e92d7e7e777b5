"""
BI Data Repository - Daily per-person snapshots from the BI feed.

Two read paths:
- Availability rows (CONSULTANT and STUDENT, not TERMINATED) for headcount
- STAFF salary rows for the salary baseline
"""
from datetime import date
from typing import List, Optional

from sqlalchemy.orm import Session

from intercompany.models import BiDataPerDayEntity
from intercompany.domain.entities import (
    AvailabilityDay,
    ConsultantType,
    StaffSalaryDay,
    StatusType,
)
from intercompany.domain.money import to_decimal
from .base_repository import BaseRepository

AVAILABILITY_TYPES = (ConsultantType.CONSULTANT.value, ConsultantType.STUDENT.value)


class BiDataRepository(BaseRepository[BiDataPerDayEntity]):
    """Repository for the bi_data_per_day table."""

    def __init__(self, session: Session):
        super().__init__(session, BiDataPerDayEntity)

    def exists(self, **criteria) -> bool:
        """Check if a daily row matching the criteria exists."""
        return self._matches(**criteria)

    def availability_between(self, date_from: date, date_to: date) -> List[AvailabilityDay]:
        """
        Availability rows for whole months in [month(date_from), month(date_to)).

        Args:
            date_from: Any day in the first month
            date_to: Any day in the month after the last one

        Returns:
            Daily rows ordered by day, then user
        """
        rows = self.session.query(BiDataPerDayEntity).filter(
            BiDataPerDayEntity.document_date >= date_from.replace(day=1),
            BiDataPerDayEntity.document_date < date_to.replace(day=1),
            BiDataPerDayEntity.consultant_type.in_(AVAILABILITY_TYPES),
            BiDataPerDayEntity.status_type != StatusType.TERMINATED.value,
        ).order_by(
            BiDataPerDayEntity.document_date,
            BiDataPerDayEntity.user_uuid,
            BiDataPerDayEntity.id,
        ).all()

        return [
            AvailabilityDay(
                user_uuid=row.user_uuid,
                company_uuid=row.company_uuid,
                document_date=row.document_date,
                consultant_type=ConsultantType(row.consultant_type),
                status=StatusType(row.status_type),
                salary=to_decimal(row.salary),
            )
            for row in rows
        ]

    def staff_salaries(self, year: int, month: int) -> List[StaffSalaryDay]:
        """
        STAFF rows for one month.

        Returns:
            Salary rows (salary None when not recorded)
        """
        rows = self.session.query(BiDataPerDayEntity).filter(
            BiDataPerDayEntity.year == year,
            BiDataPerDayEntity.month == month,
            BiDataPerDayEntity.consultant_type == ConsultantType.STAFF.value,
        ).order_by(BiDataPerDayEntity.document_date, BiDataPerDayEntity.user_uuid).all()

        return [
            StaffSalaryDay(
                user_uuid=row.user_uuid,
                company_uuid=row.company_uuid,
                document_date=row.document_date,
                salary=None if row.salary is None else to_decimal(row.salary),
            )
            for row in rows
        ]

    def record_day(
        self,
        user_uuid: str,
        company_uuid: Optional[str],
        document_date: date,
        consultant_type: ConsultantType = ConsultantType.CONSULTANT,
        status: StatusType = StatusType.ACTIVE,
        salary: Optional[float] = None,
    ) -> BiDataPerDayEntity:
        """Store one daily snapshot."""
        row = BiDataPerDayEntity(
            document_date=document_date,
            year=document_date.year,
            month=document_date.month,
            day=document_date.day,
            user_uuid=user_uuid,
            company_uuid=company_uuid,
            consultant_type=consultant_type.value,
            status_type=status.value,
            salary=salary,
        )
        self.add(row)
        return row
