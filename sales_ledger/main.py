from __future__ import annotations

import sys
from typing import Any, Dict, Optional

import typer

from sales_ledger.collector import SaleCollector
from sales_ledger.config import Settings, get_settings
from sales_ledger.domain.dates import parse_date
from sales_ledger.domain.models import parse_price, parse_quantity
from sales_ledger.errors import LedgerError
from sales_ledger.reporter import format_report, print_records, print_report
from sales_ledger.sorter import sorted_by_date
from sales_ledger.utils.logging import configure_logging
from sales_ledger.workflow import (
    add_sales,
    delete_sale,
    open_store,
    refresh_outputs,
    update_sale,
    write_sales_report,
    write_sorted_copy,
)

app = typer.Typer(help="Sales ledger CLI.")


def _setup() -> Settings:
    settings = get_settings()
    configure_logging(level=settings.log_level, json_logs=settings.log_json)
    return settings


def _fail(exc: Exception) -> None:
    typer.echo(f"Error: {exc}", err=True)
    raise typer.Exit(code=1)


@app.command()
def info() -> None:
    """
    Show effective configuration values.
    """
    settings = get_settings()
    typer.echo(
        f"sales={settings.sales_file} sorted={settings.sorted_file} report={settings.report_file} | "
        f"date_format={settings.date_format.value} ({settings.date_format.pattern}) "
        f"years={settings.min_year}-{settings.max_year}"
    )


@app.command()
def add() -> None:
    """
    Enter new sales interactively, then refresh the sorted copy and report.
    """
    settings = _setup()
    try:
        store = open_store(settings)
        collector = SaleCollector(
            date_format=settings.date_format,
            min_year=settings.min_year,
            max_year=settings.max_year,
        )
        added = add_sales(store, collector.collect())
        refresh_outputs(store, settings)
    except LedgerError as exc:
        _fail(exc)
    for record in added:
        typer.echo(f"Recorded {record.sale_id}")
    typer.echo(
        f"Data saved to {settings.sales_file} and sorted data saved to {settings.sorted_file}"
    )


@app.command("list")
def list_sales(
    by_date: bool = typer.Option(False, "--sorted", help="Order by date instead of entry order."),
) -> None:
    """
    Print stored sales.
    """
    settings = _setup()
    try:
        store = open_store(settings)
    except LedgerError as exc:
        _fail(exc)
    records = sorted_by_date(store.all()) if by_date else store.all()
    print_records(records)


@app.command()
def update(
    sale_id: str = typer.Argument(..., help="Sale id to update, e.g. SID1700000000."),
    date: Optional[str] = typer.Option(None, "--date", "-d", help="New date in the configured format."),
    item: Optional[str] = typer.Option(None, "--item", "-i", help="New item name."),
    quantity: Optional[str] = typer.Option(None, "--quantity", "-q", help="New quantity."),
    price: Optional[str] = typer.Option(None, "--price", "-p", help="New unit price."),
) -> None:
    """
    Update fields of a sale by id; the id itself never changes.
    """
    settings = _setup()
    try:
        changes: Dict[str, Any] = {}
        if date is not None:
            changes["date"] = parse_date(
                date, settings.date_format, min_year=settings.min_year, max_year=settings.max_year
            )
        if item is not None:
            changes["item_name"] = item
        if quantity is not None:
            changes["quantity"] = parse_quantity(quantity)
        if price is not None:
            changes["unit_price"] = parse_price(price)
        if not changes:
            typer.echo("Nothing to update; pass at least one of --date/--item/--quantity/--price.", err=True)
            raise typer.Exit(code=2)
        store = open_store(settings)
        record = update_sale(store, sale_id, **changes)
        refresh_outputs(store, settings)
    except LedgerError as exc:
        _fail(exc)
    typer.echo(
        f"Updated {record.sale_id}: {record.date} {record.item_name} "
        f"x{record.quantity} @ {record.unit_price:.2f}"
    )


@app.command()
def delete(
    sale_id: str = typer.Argument(..., help="Sale id to delete."),
) -> None:
    """
    Delete every sale carrying the given id.
    """
    settings = _setup()
    try:
        store = open_store(settings)
        removed = delete_sale(store, sale_id)
        refresh_outputs(store, settings)
    except LedgerError as exc:
        _fail(exc)
    typer.echo(f"Deleted {removed} sale(s) with id {sale_id}")


@app.command()
def sort() -> None:
    """
    Write a date-sorted copy of the sales file.
    """
    settings = _setup()
    try:
        ordered = write_sorted_copy(open_store(settings), settings)
    except LedgerError as exc:
        _fail(exc)
    typer.echo(f"Sorted {len(ordered)} sale(s) into {settings.sorted_file}")


@app.command()
def report(
    show: bool = typer.Option(True, "--show/--no-show", help="Also print the report as a table."),
    plain: bool = typer.Option(False, "--plain", help="Print the fixed-width text instead of a table."),
) -> None:
    """
    Write the grouped sales report and optionally display it.
    """
    settings = _setup()
    try:
        built = write_sales_report(open_store(settings), settings)
    except LedgerError as exc:
        _fail(exc)
    if show:
        if plain:
            typer.echo(format_report(built), nl=False)
        else:
            print_report(built)
    typer.echo(f"Report saved to {settings.report_file} (grand total {built.grand_total:.2f})")


def main() -> None:
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)


if __name__ == "__main__":
    main()
