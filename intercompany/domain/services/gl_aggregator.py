"""
GL Aggregator - General ledger sums per (company, account code).

Two windows are produced from the same records:
- Range: expense_date in [from, to)
- Exact day: expense_date == from

No clamping or rounding happens here; amounts are consumed as summed.
"""
from collections import defaultdict
from datetime import date
from decimal import Decimal
from typing import Dict, Iterable, Tuple

from intercompany.domain.entities import GeneralLedgerRecord
from intercompany.domain.money import ZERO

GLTableBuilder = Dict[str, Dict[int, Decimal]]


def _empty_table() -> "defaultdict[str, Dict[int, Decimal]]":
    return defaultdict(dict)


def _add(table, record: GeneralLedgerRecord) -> None:
    accounts = table[record.company_uuid]
    accounts[record.account_number] = accounts.get(record.account_number, ZERO) + record.amount


class GLAggregator:
    """Sums ledger postings by company and account code."""

    @staticmethod
    def aggregate_range(
        records: Iterable[GeneralLedgerRecord],
        date_from: date,
        date_to: date,
    ) -> GLTableBuilder:
        """
        Sum postings dated in [date_from, date_to).

        Returns:
            Company uuid -> account code -> amount
        """
        table = _empty_table()
        for record in records:
            if date_from <= record.expense_date < date_to:
                _add(table, record)
        return dict(table)

    @staticmethod
    def aggregate_exact_day(
        records: Iterable[GeneralLedgerRecord],
        day: date,
    ) -> GLTableBuilder:
        """Sum postings dated exactly on `day`."""
        table = _empty_table()
        for record in records:
            if record.expense_date == day:
                _add(table, record)
        return dict(table)

    @staticmethod
    def partition_by_month(
        records: Iterable[GeneralLedgerRecord],
    ) -> Tuple[Dict[date, GLTableBuilder], Dict[date, GLTableBuilder]]:
        """
        Slice one multi-month result set into per-month tables.

        Returns:
            Tuple of (range tables, first-day tables), both keyed by the
            first day of the month
        """
        range_by_month: Dict[date, defaultdict] = {}
        exact_by_month: Dict[date, defaultdict] = {}
        for record in records:
            month_start = record.expense_date.replace(day=1)
            _add(range_by_month.setdefault(month_start, _empty_table()), record)
            if record.expense_date.day == 1:
                _add(exact_by_month.setdefault(month_start, _empty_table()), record)
        return (
            {m: dict(t) for m, t in range_by_month.items()},
            {m: dict(t) for m, t in exact_by_month.items()},
        )
