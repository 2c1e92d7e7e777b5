"""
Availability Aggregator - Daily BI rows into monthly headcount.

Rules:
- A person counts once per month, using the company, type and status of the
  first daily row recorded for that month
- Only CONSULTANT type counts; TERMINATED and NON_PAY_LEAVE never count
"""
from collections import OrderedDict
from datetime import date
from decimal import Decimal
from typing import Dict, Iterable, List, Sequence

from intercompany.domain.entities import (
    AvailabilityDay,
    Company,
    ConsultantAvailabilityRecord,
    ConsultantType,
    StatusType,
)
from intercompany.domain.money import ZERO


class AvailabilityAggregator:
    """
    Turns raw availability rows into per-company consultant counts.

    Counts are Decimal so partial counting rules can be introduced without
    changing the ratio arithmetic.
    """

    EXCLUDED_STATUSES = frozenset({StatusType.TERMINATED, StatusType.NON_PAY_LEAVE})
    COUNTED_TYPE = ConsultantType.CONSULTANT

    @staticmethod
    def aggregate_monthly(days: Iterable[AvailabilityDay]) -> List[ConsultantAvailabilityRecord]:
        """
        Group daily rows by (year, month, user).

        Args:
            days: Daily rows, in the order they were recorded

        Returns:
            One record per person and month, in first-seen order
        """
        groups: "OrderedDict[tuple, List[AvailabilityDay]]" = OrderedDict()
        for day in days:
            key = (day.document_date.year, day.document_date.month, day.user_uuid)
            groups.setdefault(key, []).append(day)

        records = []
        for (year, month, user_uuid), rows in groups.items():
            first = rows[0]
            avg_salary = sum((r.salary for r in rows), ZERO) / Decimal(len(rows))
            records.append(ConsultantAvailabilityRecord(
                year=year,
                month=month,
                company_uuid=first.company_uuid,
                user_uuid=user_uuid,
                consultant_type=first.consultant_type,
                status=first.status,
                avg_salary=avg_salary,
            ))
        return records

    @classmethod
    def counts(cls, record: ConsultantAvailabilityRecord) -> bool:
        """True if the record represents an active billable consultant."""
        return (
            record.consultant_type == cls.COUNTED_TYPE
            and record.status not in cls.EXCLUDED_STATUSES
        )

    @classmethod
    def consultant_count(
        cls,
        company_uuid: str,
        at_date: date,
        records: Sequence[ConsultantAvailabilityRecord],
    ) -> Decimal:
        """
        Count consultants of a company in the month of `at_date`.

        Args:
            company_uuid: Company to count for
            at_date: Any day in the month to evaluate (normally the first)
            records: Monthly availability records

        Returns:
            Headcount as Decimal
        """
        count = ZERO
        for record in records:
            if (
                record.is_in_month(at_date)
                and record.company_uuid is not None
                and record.company_uuid == company_uuid
                and cls.counts(record)
            ):
                count += 1
        return count

    @classmethod
    def count_by_company(
        cls,
        companies: Sequence[Company],
        at_date: date,
        records: Sequence[ConsultantAvailabilityRecord],
    ) -> Dict[str, Decimal]:
        """Consultant headcount for every company of the group."""
        return {c.uuid: cls.consultant_count(c.uuid, at_date, records) for c in companies}
