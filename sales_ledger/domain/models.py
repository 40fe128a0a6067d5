"""
Domain models for the sales ledger.

Defines the sale record schema aligned with the persisted columns
(`date,sales_id,item_name,item_quantity,unit_price`) and the id generator
used when new sales are collected.
"""
from __future__ import annotations

import datetime as dt
import time
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Callable, Container, Dict

from pydantic import BaseModel, Field, ValidationInfo, field_validator

from sales_ledger.domain.dates import check_year_range
from sales_ledger.errors import NumericParseError, ValueOutOfDomainError

CENTS = Decimal("0.01")


class SaleRecord(BaseModel):
    """
    A single sale. Frozen once created; updates produce a replacement copy
    that keeps the same `sale_id`.
    """

    date: dt.date = Field(..., description="Calendar date of the sale.")
    sale_id: str = Field(..., min_length=1, description="Opaque identifier, stable for the record's lifetime.")
    item_name: str = Field(..., description="Free-form item name.")
    quantity: int = Field(..., ge=0, description="Units sold.")
    unit_price: Decimal = Field(..., ge=0, description="Price per unit, two decimal places.")

    model_config = {
        "frozen": True,
        "populate_by_name": True,
        "arbitrary_types_allowed": False,
    }

    @field_validator("date")
    @classmethod
    def _year_in_configured_range(cls, value: dt.date, info: ValidationInfo) -> dt.date:
        # validation context ({"min_year", "max_year"}) overrides the settings
        context = info.context or {}
        if "min_year" in context and "max_year" in context:
            min_year, max_year = context["min_year"], context["max_year"]
        else:
            from sales_ledger.config import get_settings

            settings = get_settings()
            min_year, max_year = settings.min_year, settings.max_year
        check_year_range(value.year, min_year, max_year)
        return value

    @field_validator("unit_price")
    @classmethod
    def _two_places(cls, value: Decimal) -> Decimal:
        try:
            return value.quantize(CENTS, rounding=ROUND_HALF_UP)
        except InvalidOperation as exc:
            raise ValueError(f"Price {value} is too large to hold two decimal places") from exc

    @property
    def sales_amount(self) -> Decimal:
        return self.quantity * self.unit_price


def parse_quantity(text: str) -> int:
    """
    Parse a quantity, telling apart text that is not an integer
    (`NumericParseError`) from a negative count (`ValueOutOfDomainError`).
    """
    try:
        value = int(text.strip())
    except ValueError as exc:
        raise NumericParseError(f"Quantity '{text}' is not a whole number") from exc
    if value < 0:
        raise ValueOutOfDomainError(f"Quantity {value} must not be negative")
    return value


def parse_price(text: str) -> Decimal:
    """Parse a unit price the same way `parse_quantity` parses a quantity."""
    try:
        value = Decimal(text.strip())
    except InvalidOperation as exc:
        raise NumericParseError(f"Price '{text}' is not a number") from exc
    if not value.is_finite():
        raise NumericParseError(f"Price '{text}' is not a finite number")
    if value < 0:
        raise ValueOutOfDomainError(f"Price {value} must not be negative")
    try:
        return value.quantize(CENTS, rounding=ROUND_HALF_UP)
    except InvalidOperation as exc:
        raise ValueOutOfDomainError(f"Price '{text}' is too large") from exc


def year_range_context(min_year: int, max_year: int) -> Dict[str, Any]:
    """Validation context that makes `SaleRecord` check years against a given range."""
    return {"min_year": min_year, "max_year": max_year}


def generate_sale_id(
    existing: Container[str] = (),
    clock: Callable[[], float] = time.time,
) -> str:
    """
    Build a sale id from the current unix timestamp (``SID<seconds>``).

    When the id is already taken the seconds are bumped until it is free, so
    several sales entered within the same second still get distinct ids.
    """
    seconds = int(clock())
    sale_id = f"SID{seconds}"
    while sale_id in existing:
        seconds += 1
        sale_id = f"SID{seconds}"
    return sale_id


__all__ = ["SaleRecord", "generate_sale_id", "parse_price", "parse_quantity", "year_range_context", "CENTS"]
