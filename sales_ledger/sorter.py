"""
Date ordering for sale records.

Sorting always works on the canonical date value. Comparing the raw text
would order `DD/MM/YYYY` dates by day first, which is not chronological.
"""

from __future__ import annotations

from typing import Iterable, List

from sales_ledger.domain.models import SaleRecord


def sorted_by_date(records: Iterable[SaleRecord]) -> List[SaleRecord]:
    """
    Return a new list ordered by ascending date.

    The sort is stable: records sharing a date keep their input order. The
    input is never mutated.
    """
    return sorted(records, key=lambda record: record.date)


__all__ = ["sorted_by_date"]
