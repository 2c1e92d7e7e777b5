"""
Staff Baseline Calculator - Salary sharing cap per company.

For one month:
    avg_salary(u)     = mean of u's daily salary rows (missing salary = 0)
    days_total(u)     = distinct days recorded for u
    days_in(u, c)     = distinct days recorded for u in company c
    baseline(c)       = round2( multiplier * Σ_u avg_salary(u) * days_in(u, c) / days_total(u) )

The sum is evaluated as an exact rational and rounded once, half-even.
"""
import logging
from collections import defaultdict
from decimal import Decimal
from fractions import Fraction
from typing import Dict, Iterable, Optional, Sequence, Union

from intercompany.domain.entities import Company, StaffSalaryDay
from intercompany.domain.money import SCALE, ZERO, fraction_to_decimal, round_money, to_decimal

logger = logging.getLogger(__name__)


class StaffBaselineCalculator:
    """
    Weighted-average staff salary per company, scaled by a buffer multiplier.

    The multiplier covers pension and similar on-costs (1.02 by default).
    """

    def __init__(self, multiplier: Union[Decimal, float, str] = Decimal("1.02")):
        self.multiplier = to_decimal(multiplier)

    def calculate(
        self,
        rows: Iterable[StaffSalaryDay],
        companies: Optional[Sequence[Company]] = None,
    ) -> Dict[str, Decimal]:
        """
        Compute the baseline for every company.

        Args:
            rows: STAFF salary rows for a single month
            companies: Companies that must appear in the result (zero if no data)

        Returns:
            Company uuid -> baseline rounded to 2 decimals
        """
        salary_sum: Dict[str, Fraction] = defaultdict(Fraction)
        row_count: Dict[str, int] = defaultdict(int)
        days_total: Dict[str, set] = defaultdict(set)
        days_in_company: Dict[str, Dict[str, set]] = defaultdict(lambda: defaultdict(set))

        for row in rows:
            salary_sum[row.user_uuid] += Fraction(to_decimal(row.salary))
            row_count[row.user_uuid] += 1
            days_total[row.user_uuid].add(row.document_date)
            if row.company_uuid is not None:
                days_in_company[row.user_uuid][row.company_uuid].add(row.document_date)

        weighted: Dict[str, Fraction] = defaultdict(Fraction)
        for user_uuid, per_company in days_in_company.items():
            avg_salary = salary_sum[user_uuid] / row_count[user_uuid]
            total_days = len(days_total[user_uuid])
            for company_uuid, days in per_company.items():
                weighted[company_uuid] += avg_salary * Fraction(len(days), total_days)

        multiplier = Fraction(self.multiplier)
        baseline = {
            company_uuid: fraction_to_decimal(amount * multiplier, SCALE)
            for company_uuid, amount in weighted.items()
        }
        for company in companies or ():
            baseline.setdefault(company.uuid, round_money(ZERO))

        logger.debug(f"Staff baseline for {len(days_total)} staff members across {len(baseline)} companies")
        return baseline
