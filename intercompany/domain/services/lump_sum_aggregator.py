"""
Lump Sum Aggregator - Lump-sum adjustments per account.

Two policies share one query surface:
- Range-clamped (DISTRIBUTION_LEGACY): [from, to), negatives clamped to zero,
  each amount rounded to 2 decimals before summing
- Exact-day unclamped (INVOICE_V1): registered on the window's first day,
  negatives preserved, no rounding
"""
from datetime import date
from decimal import Decimal
from typing import Dict, Iterable

from intercompany.domain.entities import CalculationMode, LumpSumRecord
from intercompany.domain.money import ZERO, clamp_non_negative, round_money
from intercompany.domain.periods import next_month


class LumpSumAggregator:
    """Sums lump-sum records by account uuid."""

    @staticmethod
    def range_clamped(
        records: Iterable[LumpSumRecord],
        date_from: date,
        date_to: date,
    ) -> Dict[str, Decimal]:
        """
        Legacy distribution policy.

        Returns:
            Account uuid -> summed non-negative amount
        """
        out: Dict[str, Decimal] = {}
        for record in records:
            if not date_from <= record.registered_date < date_to:
                continue
            amount = round_money(clamp_non_negative(record.amount))
            out[record.account_uuid] = out.get(record.account_uuid, ZERO) + amount
        return out

    @staticmethod
    def exact_day_unclamped(
        records: Iterable[LumpSumRecord],
        day: date,
    ) -> Dict[str, Decimal]:
        """
        Invoice policy: amounts registered on `day`, signs preserved.

        Returns:
            Account uuid -> summed amount (may be negative)
        """
        out: Dict[str, Decimal] = {}
        for record in records:
            if record.registered_date != day:
                continue
            out[record.account_uuid] = out.get(record.account_uuid, ZERO) + record.amount
        return out

    @classmethod
    def for_mode(
        cls,
        mode: CalculationMode,
        records: Iterable[LumpSumRecord],
        date_from: date,
        date_to: date,
    ) -> Dict[str, Decimal]:
        """Apply the policy that belongs to `mode`."""
        if mode.uses_exact_day:
            return cls.exact_day_unclamped(records, date_from)
        return cls.range_clamped(records, date_from, date_to)

    @classmethod
    def partition_by_month(
        cls,
        mode: CalculationMode,
        records: Iterable[LumpSumRecord],
    ) -> Dict[date, Dict[str, Decimal]]:
        """
        Slice one multi-month result set into per-month lump tables.

        Returns:
            First day of month -> account uuid -> amount
        """
        by_month: Dict[date, list] = {}
        for record in records:
            by_month.setdefault(record.registered_date.replace(day=1), []).append(record)

        out = {}
        for month_start, month_records in by_month.items():
            if mode.uses_exact_day:
                table = cls.exact_day_unclamped(month_records, month_start)
            else:
                table = cls.range_clamped(month_records, month_start, next_month(month_start))
            if table:
                out[month_start] = table
        return out
