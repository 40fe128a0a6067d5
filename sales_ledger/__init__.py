"""
Sales Ledger - a command-line ledger for daily sales.

Collects sales records (date, id, item, quantity, price), persists them to a
flat comma-delimited file, updates and deletes them by id, writes a
date-sorted copy, and renders a report grouped by date with subtotals and a
grand total.
"""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"

# Public API exports
from sales_ledger.codec import DecodeResult, IssueKind, RowIssue, decode, encode
from sales_ledger.config import Settings, get_settings
from sales_ledger.domain import DateFormat, SaleRecord, format_date, parse_date
from sales_ledger.errors import IdNotFoundError, LedgerError
from sales_ledger.reporter import SalesReport, build_report, render_report
from sales_ledger.sorter import sorted_by_date
from sales_ledger.store import SalesStore
from sales_ledger.utils.logging import configure_logging, get_logger

__all__ = [
    # Version info
    "__version__",
    "__license__",
    # Configuration
    "Settings",
    "get_settings",
    # Domain
    "DateFormat",
    "SaleRecord",
    "format_date",
    "parse_date",
    # Codec
    "DecodeResult",
    "IssueKind",
    "RowIssue",
    "decode",
    "encode",
    # Store, sorting, reporting
    "SalesStore",
    "sorted_by_date",
    "SalesReport",
    "build_report",
    "render_report",
    # Errors
    "LedgerError",
    "IdNotFoundError",
    # Logging
    "configure_logging",
    "get_logger",
]
