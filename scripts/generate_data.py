"""
Synthetic data generator for the sales ledger.

Writes a deterministic pseudo-random sales file in the same delimited format
the ledger reads, handy for demos and for exercising the sort and report
steps on realistic volumes.
"""

from __future__ import annotations

import random
import sys
import time
from datetime import date, timedelta
from decimal import Decimal
from pathlib import Path
from typing import List

import typer

from sales_ledger.codec import write_file
from sales_ledger.domain.dates import DateFormat
from sales_ledger.domain.models import SaleRecord

app = typer.Typer(help="Generate a synthetic sales file.")

ITEMS = ["Coffee", "Tea", "Muffin", "Bagel", "Sandwich", "Juice", "Cookie", "Salad"]


def _generate_records(rows: int, seed: int, start: date, days: int) -> List[SaleRecord]:
    rng = random.Random(seed)
    base_id = 1_700_000_000
    records: List[SaleRecord] = []
    for i in range(rows):
        records.append(
            SaleRecord(
                date=start + timedelta(days=rng.randrange(days)),
                sale_id=f"SID{base_id + i}",
                item_name=rng.choice(ITEMS),
                quantity=rng.randint(1, 20),
                unit_price=Decimal(rng.randint(50, 2_000)) / 100,
            )
        )
    return records


def _generate_sales_csv(
    csv_path: Path,
    rows: int,
    seed: int,
    date_format: DateFormat = DateFormat.ISO,
    start: date = date(2024, 1, 1),
    days: int = 60,
) -> List[SaleRecord]:
    records = _generate_records(rows, seed, start, days)
    write_file(csv_path, records, date_format)
    return records


@app.command()
def main(
    rows: int = typer.Option(
        100,
        "--rows",
        "-r",
        help="Number of sales to generate.",
    ),
    seed: int = typer.Option(
        42,
        "--seed",
        help="Deterministic RNG seed.",
    ),
    output: Path = typer.Option(
        Path("sales.csv"),
        "--output",
        "-o",
        help="Destination file (overwritten).",
    ),
    date_format: DateFormat = typer.Option(
        DateFormat.ISO,
        "--date-format",
        help="On-disk date convention.",
    ),
    days: int = typer.Option(
        60,
        "--days",
        help="Spread sales over this many days starting 2024-01-01.",
    ),
) -> None:
    """
    Generate synthetic sales and write them to the output file.
    """
    start = time.perf_counter()
    typer.echo(f"Generating {rows:,} sales -> {output} (seed={seed}, format={date_format.value})")
    _generate_sales_csv(output, rows=rows, seed=seed, date_format=date_format, days=days)
    duration = time.perf_counter() - start
    typer.echo(f"Generation completed in {duration:.2f}s")


if __name__ == "__main__":
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)
