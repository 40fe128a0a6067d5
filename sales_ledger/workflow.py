"""
Phase functions for the sales ledger.

Each phase takes the store explicitly; there is no module-level state. The
usual run is: open the store, apply mutations (each one persisted), then
regenerate the sorted copy and the report.

Usage (example from CLI):
    from sales_ledger.workflow import open_store, update_sale, refresh_outputs

    store = open_store(settings)
    update_sale(store, "SID1000", quantity=5)
    refresh_outputs(store, settings)
"""

from __future__ import annotations

import datetime as dt
from typing import Any, Iterable, List, Optional

from sales_ledger import codec
from sales_ledger.collector import SaleEntry
from sales_ledger.config import Settings
from sales_ledger.domain.models import SaleRecord, generate_sale_id
from sales_ledger.errors import IdNotFoundError
from sales_ledger.reporter import SalesReport, build_report, format_report, write_report
from sales_ledger.sorter import sorted_by_date
from sales_ledger.store import SalesStore
from sales_ledger.utils.logging import get_logger

log = get_logger(__name__)


def open_store(settings: Settings) -> SalesStore:
    return SalesStore.load(
        settings.sales_file,
        date_format=settings.date_format,
        min_year=settings.min_year,
        max_year=settings.max_year,
    )


def add_sales(store: SalesStore, entries: Iterable[SaleEntry]) -> List[SaleRecord]:
    """Assign ids to `entries`, append them, and persist once."""
    added: List[SaleRecord] = []
    with store.mutation():
        taken = store.sale_ids()
        for entry in entries:
            sale_id = generate_sale_id(existing=taken)
            taken.add(sale_id)
            record = SaleRecord(
                date=entry.date,
                sale_id=sale_id,
                item_name=entry.item_name,
                quantity=entry.quantity,
                unit_price=entry.unit_price,
            )
            store.append(record)
            added.append(record)
            log.info(f"[ADD] {sale_id}", extra={"sale_id": sale_id, "item": entry.item_name})
        if added:
            store.persist()
    return added


def update_sale(store: SalesStore, sale_id: str, **changes: Any) -> SaleRecord:
    """
    Update the first sale with `sale_id` and persist.

    Raises IdNotFoundError when no sale carries that id.
    """
    with store.mutation():
        if not store.update(sale_id, **changes):
            log.warning(f"[UPDATE] {sale_id} not found", extra={"sale_id": sale_id})
            raise IdNotFoundError(sale_id)
        store.persist()
    log.info(f"[UPDATE] {sale_id}", extra={"sale_id": sale_id, "fields": sorted(changes)})
    return store.find(sale_id)  # type: ignore[return-value]


def delete_sale(store: SalesStore, sale_id: str) -> int:
    """
    Delete every sale with `sale_id` and persist. Returns how many were removed.

    Raises IdNotFoundError when no sale carries that id.
    """
    with store.mutation():
        before = len(store)
        if not store.delete(sale_id):
            log.warning(f"[DELETE] {sale_id} not found", extra={"sale_id": sale_id})
            raise IdNotFoundError(sale_id)
        removed = before - len(store)
        store.persist()
    log.info(f"[DELETE] {sale_id}", extra={"sale_id": sale_id, "removed": removed})
    return removed


def write_sorted_copy(store: SalesStore, settings: Settings) -> List[SaleRecord]:
    """Write a date-ascending copy of the store to the sorted file."""
    ordered = sorted_by_date(store.all())
    codec.write_file(settings.sorted_file, ordered, settings.date_format)
    log.info(
        "Sorted copy written",
        extra={"path": str(settings.sorted_file), "records": len(ordered)},
    )
    return ordered


def write_sales_report(
    store: SalesStore,
    settings: Settings,
    generated_on: Optional[dt.date] = None,
) -> SalesReport:
    report = build_report(store.all(), generated_on=generated_on)
    write_report(settings.report_file, format_report(report))
    return report


def refresh_outputs(
    store: SalesStore,
    settings: Settings,
    generated_on: Optional[dt.date] = None,
) -> SalesReport:
    """Regenerate the sorted copy and the report from the current store."""
    write_sorted_copy(store, settings)
    return write_sales_report(store, settings, generated_on=generated_on)


__all__ = [
    "add_sales",
    "delete_sale",
    "open_store",
    "refresh_outputs",
    "update_sale",
    "write_sales_report",
    "write_sorted_copy",
]
