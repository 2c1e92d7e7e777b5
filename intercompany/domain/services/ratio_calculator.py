"""
Ratio Calculator - Consultant headcount into distribution keys.
"""
from decimal import Decimal
from typing import Dict, Mapping

from intercompany.domain.money import RATIO_SCALE, ZERO, divide


class RatioCalculator:
    """
    Converts per-company consultant counts into normalized ratios.

    ratio(c) = count(c) / Σ count, rounded half-even to 10 decimals.
    When the group has no consultants every ratio is zero, so downstream
    arithmetic stays total.
    """

    @staticmethod
    def total(counts: Mapping[str, Decimal]) -> Decimal:
        return sum(counts.values(), ZERO)

    @classmethod
    def ratios(cls, counts: Mapping[str, Decimal]) -> Dict[str, Decimal]:
        """
        Compute ratios for every company in `counts`.

        Args:
            counts: Company uuid -> consultant count

        Returns:
            Company uuid -> ratio at 10 decimals
        """
        total = cls.total(counts)
        if total <= 0:
            return {company_uuid: ZERO for company_uuid in counts}
        return {
            company_uuid: divide(count, total, RATIO_SCALE)
            for company_uuid, count in counts.items()
        }
