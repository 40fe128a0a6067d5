"""
In-memory record store backed by the persisted sales file.

The store is loaded once, mutated in memory, and flushed back wholesale with
`persist`. Mutations and persists are not atomic with respect to each other;
callers that read, modify, and persist should do so inside `mutation()`.

Usage:
    store = SalesStore.load("sales.csv")
    with store.mutation():
        store.append(record)
        store.persist()
"""

from __future__ import annotations

import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Generator, Iterator, List, Optional, Tuple, Union

from sales_ledger import codec
from sales_ledger.codec import RowIssue
from sales_ledger.domain.dates import DateFormat
from sales_ledger.domain.models import SaleRecord, year_range_context
from sales_ledger.utils.logging import get_logger

log = get_logger(__name__)


class SalesStore:
    """
    Ordered collection of sale records in insertion order.

    Parameters
    ----------
    records : iterable[SaleRecord]
        Initial contents.
    path : Path | None
        Default destination for `persist`.
    date_format : DateFormat
        On-disk date convention used by `persist`.
    issues : list[RowIssue]
        Rows dropped while loading, kept for reporting.
    year_range : tuple[int, int] | None
        Accepted (min, max) year for updated records. None defers to settings.
    """

    def __init__(
        self,
        records: Optional[List[SaleRecord]] = None,
        path: Union[Path, str, None] = None,
        date_format: DateFormat = DateFormat.ISO,
        issues: Optional[List[RowIssue]] = None,
        year_range: Optional[Tuple[int, int]] = None,
    ) -> None:
        self._records: List[SaleRecord] = list(records or [])
        self.path = Path(path) if path is not None else None
        self.date_format = date_format
        self.issues: List[RowIssue] = list(issues or [])
        self.year_range = year_range
        self._lock = threading.RLock()

    @classmethod
    def load(
        cls,
        path: Union[Path, str],
        date_format: DateFormat = DateFormat.ISO,
        min_year: int = 1900,
        max_year: int = 2100,
    ) -> "SalesStore":
        """Load from `path`. A missing file yields an empty store."""
        result = codec.read_file(path, date_format, min_year=min_year, max_year=max_year)
        for issue in result.issues:
            log.warning(
                f"Skipped line {issue.line_no} of {path}: {issue.message}",
                extra={"path": str(path), "line_no": issue.line_no, "kind": issue.kind.value},
            )
        log.info(
            f"Loaded {len(result.records)} sale(s)",
            extra={"path": str(path), "records": len(result.records), "skipped": len(result.issues)},
        )
        return cls(
            result.records,
            path=path,
            date_format=date_format,
            issues=result.issues,
            year_range=(min_year, max_year),
        )

    @contextmanager
    def mutation(self) -> Generator["SalesStore", None, None]:
        """Hold the writer lock for a read-modify-persist sequence."""
        with self._lock:
            yield self

    def append(self, record: SaleRecord) -> None:
        with self._lock:
            self._records.append(record)

    def find(self, sale_id: str) -> Optional[SaleRecord]:
        for record in self._records:
            if record.sale_id == sale_id:
                return record
        return None

    def update(self, sale_id: str, **changes: Any) -> bool:
        """
        Replace the first record matching `sale_id` with a copy carrying
        `changes`. The id itself cannot change. Returns whether a record matched.

        Raises ValueError for keys that are not `SaleRecord` fields.
        """
        unknown = set(changes) - set(SaleRecord.model_fields)
        if unknown:
            raise ValueError(f"Unknown sale field(s): {', '.join(sorted(unknown))}")
        if "sale_id" in changes and changes["sale_id"] != sale_id:
            raise ValueError("sale_id is immutable and cannot be updated")
        context = year_range_context(*self.year_range) if self.year_range else None
        with self._lock:
            for index, record in enumerate(self._records):
                if record.sale_id == sale_id:
                    merged = record.model_dump()
                    merged.update(changes)
                    merged["sale_id"] = sale_id
                    self._records[index] = SaleRecord.model_validate(merged, context=context)
                    return True
        return False

    def delete(self, sale_id: str) -> bool:
        """Remove every record carrying `sale_id`. Returns whether any was removed."""
        with self._lock:
            before = len(self._records)
            self._records = [r for r in self._records if r.sale_id != sale_id]
            return len(self._records) < before

    def persist(
        self,
        path: Union[Path, str, None] = None,
        date_format: Optional[DateFormat] = None,
    ) -> Path:
        """
        Overwrite the destination with the full current sequence.

        Raises DestinationUnwritableError on failure; in-memory state is left
        as it was.
        """
        destination = Path(path) if path is not None else self.path
        if destination is None:
            raise ValueError("No destination given and the store was not loaded from a file")
        with self._lock:
            codec.write_file(destination, self._records, date_format or self.date_format)
            log.info(
                f"Persisted {len(self._records)} sale(s)",
                extra={"path": str(destination), "records": len(self._records)},
            )
        return destination

    def all(self) -> Tuple[SaleRecord, ...]:
        return tuple(self._records)

    def sale_ids(self) -> set:
        return {record.sale_id for record in self._records}

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[SaleRecord]:
        return iter(self.all())


__all__ = ["SalesStore"]
