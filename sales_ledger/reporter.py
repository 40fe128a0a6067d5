from __future__ import annotations

import datetime as dt
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple, Union

from rich import box
from rich.console import Console
from rich.table import Table

from sales_ledger.domain.dates import DateFormat, format_date
from sales_ledger.domain.models import CENTS, SaleRecord
from sales_ledger.errors import DestinationUnwritableError
from sales_ledger.utils.logging import get_logger

log = get_logger(__name__)

REPORT_TITLE = "SALES REPORT"
END_MARKER = "END OF REPORT"

# (header, width, alignment)
_COLUMNS: Tuple[Tuple[str, int, str], ...] = (
    ("Date", 12, "<"),
    ("SaleID", 16, "<"),
    ("ItemName", 24, "<"),
    ("Quantity", 10, ">"),
    ("Price", 12, ">"),
    ("SalesAmount", 14, ">"),
)
_LINE_WIDTH = sum(width for _, width, _ in _COLUMNS)
_AMOUNT_WIDTH = _COLUMNS[-1][1]
_ELLIPSIS = "..."


@dataclass(frozen=True)
class ReportLine:
    record: SaleRecord
    sales_amount: Decimal


@dataclass
class DateBucket:
    """All sales sharing one normalized date, in input order."""

    date_key: str
    lines: List[ReportLine] = field(default_factory=list)
    subtotal: Decimal = Decimal("0")


@dataclass
class SalesReport:
    buckets: List[DateBucket]
    grand_total: Decimal
    generated_on: dt.date

    @property
    def record_count(self) -> int:
        return sum(len(bucket.lines) for bucket in self.buckets)


def _money(value: Decimal) -> str:
    """Round half-up to cents for display only."""
    return f"{value.quantize(CENTS, rounding=ROUND_HALF_UP):.2f}"


def build_report(
    records: Iterable[SaleRecord],
    generated_on: Optional[dt.date] = None,
) -> SalesReport:
    """
    Group records by ISO date and compute per-date subtotals and the grand total.

    Buckets are ordered by ascending date regardless of input order. Sums are
    kept at full precision; rounding happens only when rendering.
    """
    grouped: Dict[dt.date, DateBucket] = {}
    for record in records:
        bucket = grouped.get(record.date)
        if bucket is None:
            bucket = grouped[record.date] = DateBucket(date_key=format_date(record.date, DateFormat.ISO))
        amount = record.sales_amount
        bucket.lines.append(ReportLine(record=record, sales_amount=amount))
        bucket.subtotal += amount

    buckets = [grouped[key] for key in sorted(grouped)]
    grand_total = sum((bucket.subtotal for bucket in buckets), Decimal("0"))
    return SalesReport(
        buckets=buckets,
        grand_total=grand_total,
        generated_on=generated_on or dt.date.today(),
    )


def _fit(value: str, width: int, align: str) -> str:
    # text cells keep a blank before the next column; numbers are never cut
    limit = width - 1
    if align == "<" and len(value) > limit:
        return value[: limit - len(_ELLIPSIS)] + _ELLIPSIS
    return value


def _row(values: Iterable[str]) -> str:
    cells = [
        f"{_fit(value, width, align):{align}{width}}"
        for value, (_, width, align) in zip(values, _COLUMNS)
    ]
    return "".join(cells).rstrip()


def _total_line(label: str, value: Decimal) -> str:
    return f"{label:>{_LINE_WIDTH - _AMOUNT_WIDTH}}{_money(value):>{_AMOUNT_WIDTH}}"


def format_report(report: SalesReport) -> str:
    """
    Render a built report as fixed-width text.

    Ids and item names longer than their column are cut and end in "...", so
    the numeric columns always line up. The full values stay in the sales file.
    """
    lines: List[str] = [
        REPORT_TITLE,
        f"Generated on: {format_date(report.generated_on, DateFormat.ISO)}",
        "=" * _LINE_WIDTH,
    ]
    if not report.buckets:
        lines += ["", "No sales recorded."]

    for bucket in report.buckets:
        lines += ["", _row(header for header, _, _ in _COLUMNS), "-" * _LINE_WIDTH]
        for line in bucket.lines:
            record = line.record
            lines.append(
                _row(
                    (
                        bucket.date_key,
                        record.sale_id,
                        record.item_name,
                        str(record.quantity),
                        _money(record.unit_price),
                        _money(line.sales_amount),
                    )
                )
            )
        lines.append(_total_line("Subtotal:", bucket.subtotal))

    lines += [
        "",
        "=" * _LINE_WIDTH,
        _total_line("Grand Total:", report.grand_total),
        "=" * _LINE_WIDTH,
        END_MARKER,
    ]
    return "\n".join(lines) + "\n"


def render_report(
    records: Iterable[SaleRecord],
    generated_on: Optional[dt.date] = None,
) -> str:
    """Build and render the grouped report for `records`."""
    return format_report(build_report(records, generated_on=generated_on))


def write_report(path: Union[Path, str], text: str) -> Path:
    """
    Overwrite `path` with the report text.

    Raises DestinationUnwritableError when the file cannot be opened or written.
    """
    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8") as f:
            f.write(text)
    except OSError as exc:
        raise DestinationUnwritableError(path, exc.strerror or str(exc)) from exc
    log.info("Report written", extra={"path": str(path)})
    return path


def print_report(report: SalesReport, console: Optional[Console] = None) -> None:
    """
    Render the report as a rich table.

    One section per date bucket, each closed by its subtotal row; the grand
    total goes in the caption.
    """
    console = console or Console()

    if not report.buckets:
        console.print("[yellow]No sales to display.[/yellow]")
        return

    table = Table(
        title=f"Sales Report\n[dim]Generated on {format_date(report.generated_on)}[/dim]",
        box=box.ROUNDED,
        caption=f"Grand Total: {_money(report.grand_total)}",
    )
    table.add_column("Date", style="cyan", no_wrap=True)
    table.add_column("SaleID", style="magenta", no_wrap=True)
    table.add_column("ItemName")
    table.add_column("Quantity", justify="right", style="blue")
    table.add_column("Price", justify="right", style="green")
    table.add_column("SalesAmount", justify="right", style="bold green")

    for bucket in report.buckets:
        for line in bucket.lines:
            record = line.record
            table.add_row(
                bucket.date_key,
                record.sale_id,
                record.item_name,
                str(record.quantity),
                _money(record.unit_price),
                _money(line.sales_amount),
            )
        table.add_row("", "", "[dim]Subtotal[/dim]", "", "", _money(bucket.subtotal), end_section=True)

    console.print(table)


def print_records(records: Iterable[SaleRecord], console: Optional[Console] = None) -> None:
    """Render records as a plain rich table, in the order given."""
    console = console or Console()
    records = list(records)
    if not records:
        console.print("[yellow]No sales recorded.[/yellow]")
        return

    table = Table(title="Sales", box=box.ROUNDED)
    table.add_column("Date", style="cyan", no_wrap=True)
    table.add_column("SaleID", style="magenta", no_wrap=True)
    table.add_column("ItemName")
    table.add_column("Quantity", justify="right", style="blue")
    table.add_column("Price", justify="right", style="green")
    for record in records:
        table.add_row(
            format_date(record.date),
            record.sale_id,
            record.item_name,
            str(record.quantity),
            _money(record.unit_price),
        )
    console.print(table)


__all__ = [
    "DateBucket",
    "ReportLine",
    "SalesReport",
    "build_report",
    "format_report",
    "print_records",
    "print_report",
    "render_report",
    "write_report",
]
