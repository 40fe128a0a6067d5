"""
Delimited text codec for sale records.

File layout:
    date,sales_id,item_name,item_quantity,unit_price
    <date>,<id>,<name>,<int>,<decimal-2dp>

The delimiter is a literal comma with no quoting or escaping, so text fields
must not contain a comma or a line break. `encode` refuses such records
instead of writing a file that would not read back. `decode` never fails as a
whole: bad rows are dropped and reported as `RowIssue`s, itemized by line
number.

Lines end at a line feed (a carriage return before it is dropped). No other character
ends a line, so form feeds or Unicode separators inside an item name survive
a write and a read.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Iterable, List, Tuple, Union

from pydantic import ValidationError

from sales_ledger.domain.dates import DateFormat, format_date, parse_date
from sales_ledger.domain.models import SaleRecord, parse_price, parse_quantity, year_range_context
from sales_ledger.errors import (
    DateOutOfRangeError,
    DelimiterInFieldError,
    DestinationUnwritableError,
    MalformedRowError,
    NumericParseError,
    SourceUnreadableError,
    ValidationFailure,
    ValueOutOfDomainError,
)
from sales_ledger.utils.logging import get_logger

log = get_logger(__name__)

DELIMITER = ","
COLUMNS = ("date", "sales_id", "item_name", "item_quantity", "unit_price")
HEADER = DELIMITER.join(COLUMNS)


class IssueKind(str, Enum):
    MALFORMED_ROW = "malformed_row"
    NUMERIC_PARSE = "numeric_parse"
    OUT_OF_DOMAIN = "out_of_domain"
    INVALID_DATE = "invalid_date"
    DATE_OUT_OF_RANGE = "date_out_of_range"
    ENCODING = "encoding"


@dataclass(frozen=True)
class RowIssue:
    """A row that was dropped while decoding."""

    line_no: int
    kind: IssueKind
    message: str


@dataclass
class DecodeResult:
    records: List[SaleRecord] = field(default_factory=list)
    issues: List[RowIssue] = field(default_factory=list)


def _decode_row(
    fields: List[str],
    date_format: DateFormat,
    min_year: int,
    max_year: int,
) -> SaleRecord:
    date_text, sale_id, item_name, quantity_text, price_text = fields
    if not sale_id:
        raise MalformedRowError("Empty sales_id")
    sale_date = parse_date(date_text, date_format, min_year=min_year, max_year=max_year)
    return SaleRecord.model_validate(
        {
            "date": sale_date,
            "sale_id": sale_id,
            "item_name": item_name,
            "quantity": parse_quantity(quantity_text),
            "unit_price": parse_price(price_text),
        },
        context=year_range_context(min_year, max_year),
    )


def _classify(exc: Exception) -> IssueKind:
    if isinstance(exc, NumericParseError):
        return IssueKind.NUMERIC_PARSE
    if isinstance(exc, ValueOutOfDomainError):
        return IssueKind.OUT_OF_DOMAIN
    if isinstance(exc, DateOutOfRangeError):
        return IssueKind.DATE_OUT_OF_RANGE
    if isinstance(exc, ValidationFailure):
        return IssueKind.INVALID_DATE
    return IssueKind.MALFORMED_ROW


def decode(
    text: str,
    date_format: DateFormat = DateFormat.ISO,
    min_year: int = 1900,
    max_year: int = 2100,
) -> DecodeResult:
    """
    Parse persisted text into records.

    The first line is the header and is skipped without validation. Blank
    lines are ignored. Every other line must have exactly five fields.

    Parameters
    ----------
    text : str
        Full file contents.
    date_format : DateFormat
        Textual date convention used in the first column.
    min_year, max_year : int
        Accepted year range; rows outside it are dropped.

    Returns
    -------
    DecodeResult
        Decoded records in file order, plus one issue per dropped row.
    """
    return _decode_lines(_numbered_lines(text), date_format, min_year, max_year)


def _strip_cr(line: str) -> str:
    return line[:-1] if line.endswith("\r") else line


def _numbered_lines(text: str) -> List[Tuple[int, str]]:
    return [(line_no, _strip_cr(line)) for line_no, line in enumerate(text.split("\n"), start=1)]


def _decode_lines(
    lines: Iterable[Tuple[int, str]],
    date_format: DateFormat,
    min_year: int,
    max_year: int,
) -> DecodeResult:
    result = DecodeResult()
    for line_no, line in lines:
        if line_no == 1 or not line.strip():
            continue
        fields = line.split(DELIMITER)
        if len(fields) != len(COLUMNS):
            result.issues.append(
                RowIssue(
                    line_no,
                    IssueKind.MALFORMED_ROW,
                    f"Expected {len(COLUMNS)} fields, found {len(fields)}",
                )
            )
            continue
        try:
            record = _decode_row(fields, date_format, min_year, max_year)
        except (ValidationFailure, MalformedRowError) as exc:
            result.issues.append(RowIssue(line_no, _classify(exc), str(exc)))
            continue
        except ValidationError as exc:
            error = exc.errors()[0]
            kind = (
                IssueKind.DATE_OUT_OF_RANGE
                if tuple(error["loc"][:1]) == ("date",)
                else IssueKind.MALFORMED_ROW
            )
            result.issues.append(RowIssue(line_no, kind, error["msg"]))
            continue
        result.records.append(record)
    return result


def _check_field(record: SaleRecord, name: str, value: str) -> str:
    if DELIMITER in value or "\n" in value or "\r" in value:
        raise DelimiterInFieldError(
            f"Field '{name}' of sale {record.sale_id} contains a delimiter or line break: {value!r}"
        )
    return value


def encode_record(record: SaleRecord, date_format: DateFormat = DateFormat.ISO) -> str:
    return DELIMITER.join(
        [
            format_date(record.date, date_format),
            _check_field(record, "sales_id", record.sale_id),
            _check_field(record, "item_name", record.item_name),
            str(record.quantity),
            f"{record.unit_price:.2f}",
        ]
    )


def encode(records: Iterable[SaleRecord], date_format: DateFormat = DateFormat.ISO) -> str:
    """Render the header followed by one line per record, newline-terminated."""
    lines = [HEADER]
    lines.extend(encode_record(record, date_format) for record in records)
    return "\n".join(lines) + "\n"


def read_file(
    path: Union[Path, str],
    date_format: DateFormat = DateFormat.ISO,
    min_year: int = 1900,
    max_year: int = 2100,
) -> DecodeResult:
    """
    Decode a persisted file. A missing file yields an empty result.

    Each line is decoded as UTF-8 on its own; a line with invalid bytes is
    dropped as an `ENCODING` issue and the rest of the file still loads.
    Raises SourceUnreadableError when the file exists but cannot be read.
    """
    path = Path(path)
    if not path.exists():
        log.info("No sales file yet, starting empty", extra={"path": str(path)})
        return DecodeResult()
    try:
        data = path.read_bytes()
    except OSError as exc:
        raise SourceUnreadableError(path, exc.strerror or str(exc)) from exc

    lines: List[Tuple[int, str]] = []
    encoding_issues: List[RowIssue] = []
    for line_no, raw in enumerate(data.split(b"\n"), start=1):
        try:
            lines.append((line_no, _strip_cr(raw.decode("utf-8"))))
        except UnicodeDecodeError as exc:
            if line_no > 1:
                encoding_issues.append(
                    RowIssue(line_no, IssueKind.ENCODING, f"Invalid UTF-8 byte at column {exc.start + 1}")
                )
    result = _decode_lines(lines, date_format, min_year, max_year)
    result.issues = sorted(result.issues + encoding_issues, key=lambda issue: issue.line_no)
    return result


def write_file(
    path: Union[Path, str],
    records: Iterable[SaleRecord],
    date_format: DateFormat = DateFormat.ISO,
) -> None:
    """
    Overwrite `path` with the encoded records.

    Encoding happens before the file is opened, so a record that cannot be
    encoded leaves the destination untouched. The write itself is not atomic.
    """
    path = Path(path)
    text = encode(records, date_format)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8", newline="") as f:
            f.write(text)
    except OSError as exc:
        raise DestinationUnwritableError(path, exc.strerror or str(exc)) from exc


__all__ = [
    "COLUMNS",
    "DELIMITER",
    "HEADER",
    "DecodeResult",
    "IssueKind",
    "RowIssue",
    "decode",
    "encode",
    "encode_record",
    "read_file",
    "write_file",
]
