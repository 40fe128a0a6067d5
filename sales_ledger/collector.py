"""
Interactive collection of new sales.

Prompts for date, item name, quantity, and unit price, re-asking on invalid
input, then asks whether to enter another sale. Yields `SaleEntry` values the
workflow turns into records. The prompt and confirm callables default to
typer's and can be swapped out in tests.
"""

from __future__ import annotations

import datetime as dt
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Callable, Iterator, Optional, TypeVar

import typer

from sales_ledger.domain.dates import DateFormat, parse_date
from sales_ledger.domain.models import parse_price, parse_quantity
from sales_ledger.errors import ValidationFailure

T = TypeVar("T")

PromptFn = Callable[..., Any]
ConfirmFn = Callable[..., bool]
EchoFn = Callable[..., Any]


@dataclass(frozen=True)
class SaleEntry:
    """Validated fields for a new sale; the id is assigned when stored."""

    date: dt.date
    item_name: str
    quantity: int
    unit_price: Decimal


class SaleCollector:
    def __init__(
        self,
        date_format: DateFormat = DateFormat.ISO,
        min_year: int = 1900,
        max_year: int = 2100,
        prompt: PromptFn = typer.prompt,
        confirm: ConfirmFn = typer.confirm,
        echo: EchoFn = typer.echo,
    ) -> None:
        self.date_format = date_format
        self.min_year = min_year
        self.max_year = max_year
        self._prompt = prompt
        self._confirm = confirm
        self._echo = echo

    def _ask(self, label: str, parse: Callable[[str], T]) -> T:
        while True:
            text = str(self._prompt(label))
            try:
                return parse(text)
            except ValidationFailure as exc:
                self._echo(f"Invalid input: {exc}. Please try again.", err=True)

    def _parse_date(self, text: str) -> dt.date:
        return parse_date(text, self.date_format, min_year=self.min_year, max_year=self.max_year)

    def collect_one(self) -> SaleEntry:
        return SaleEntry(
            date=self._ask(f"Enter date ({self.date_format.pattern})", self._parse_date),
            item_name=str(self._prompt("Enter item name")),
            quantity=self._ask("Enter item quantity", parse_quantity),
            unit_price=self._ask("Enter unit price", parse_price),
        )

    def collect(self, limit: Optional[int] = None) -> Iterator[SaleEntry]:
        """
        Yield entries until the user declines to continue (or `limit` is hit).
        """
        count = 0
        while True:
            yield self.collect_one()
            count += 1
            if limit is not None and count >= limit:
                return
            if not self._confirm("Add another sale?", default=False):
                return


__all__ = ["SaleCollector", "SaleEntry"]
