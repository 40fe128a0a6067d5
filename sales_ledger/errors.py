"""
Error types for the sales ledger.

Every failure the ledger can report derives from `LedgerError`. None of them
is fatal to the process: callers catch them at the call site and either
report and retry (input collection) or report and abort the current operation
(persisting, reporting, update/delete of an unknown id).
"""

from __future__ import annotations

from pathlib import Path
from typing import Union


class LedgerError(Exception):
    """Base class for all sales ledger errors."""


class ValidationFailure(LedgerError, ValueError):
    """A value failed validation and must not be stored."""


class DateFormatError(ValidationFailure):
    """Date text does not match the expected textual shape."""


class InvalidCalendarDateError(ValidationFailure):
    """Date has the right shape but does not exist on the calendar."""


class DateOutOfRangeError(ValidationFailure):
    """Date year falls outside the configured acceptable range."""


class NumericParseError(ValidationFailure):
    """Quantity or price text is not a number."""


class ValueOutOfDomainError(ValidationFailure):
    """A number parsed fine but is outside its allowed domain (e.g. negative)."""


class MalformedRowError(LedgerError):
    """A persisted row does not have the expected field count."""


class DelimiterInFieldError(LedgerError, ValueError):
    """A text field contains the delimiter or a line break and cannot be encoded."""


class IdNotFoundError(LedgerError, KeyError):
    """No record in the store carries the requested sale id."""

    def __init__(self, sale_id: str) -> None:
        super().__init__(sale_id)
        self.sale_id = sale_id

    def __str__(self) -> str:
        return f"No sale with id '{self.sale_id}'"


class DestinationUnwritableError(LedgerError):
    """A persist or report destination could not be written."""

    def __init__(self, path: Union[str, Path], reason: str) -> None:
        super().__init__(f"Cannot write to {path}: {reason}")
        self.path = Path(path)
        self.reason = reason

    def __str__(self) -> str:
        return f"Cannot write to {self.path}: {self.reason}"


class SourceUnreadableError(LedgerError):
    """A sales file exists but could not be read (a directory, no permission)."""

    def __init__(self, path: Union[str, Path], reason: str) -> None:
        super().__init__(f"Cannot read {path}: {reason}")
        self.path = Path(path)
        self.reason = reason

    def __str__(self) -> str:
        return f"Cannot read {self.path}: {self.reason}"


__all__ = [
    "LedgerError",
    "ValidationFailure",
    "DateFormatError",
    "InvalidCalendarDateError",
    "DateOutOfRangeError",
    "NumericParseError",
    "ValueOutOfDomainError",
    "MalformedRowError",
    "DelimiterInFieldError",
    "IdNotFoundError",
    "DestinationUnwritableError",
    "SourceUnreadableError",
]
