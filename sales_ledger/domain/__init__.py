"""
Domain package for the sales ledger.

Exports the sale record model and the canonical date helpers used across the
codec, store, sorter, and reporter. Keep this package focused on data
definitions and validation concerns.
"""

from sales_ledger.domain.dates import DateFormat, format_date, is_leap_year, make_date, parse_date
from sales_ledger.domain.models import SaleRecord, generate_sale_id, parse_price, parse_quantity

__all__ = [
    "DateFormat",
    "SaleRecord",
    "format_date",
    "generate_sale_id",
    "is_leap_year",
    "make_date",
    "parse_date",
    "parse_price",
    "parse_quantity",
]
