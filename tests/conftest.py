"""
Pytest configuration for the sales ledger.

Provides fixtures for:
- Isolated settings pointing every file at a temporary directory
- Record construction helpers and a small sample ledger
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from pathlib import Path
from typing import Callable, Generator, List

import pytest

from sales_ledger.config import Settings, get_settings
from sales_ledger.domain.models import SaleRecord


@pytest.fixture(autouse=True)
def _fresh_settings_cache() -> Generator[None, None, None]:
    """Settings are cached process-wide; reset around every test."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def ledger_settings(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Settings:
    """
    Settings with every output file under `tmp_path`, exported through the
    environment so the CLI picks them up too.
    """
    monkeypatch.setenv("SALES_FILE", str(tmp_path / "sales.csv"))
    monkeypatch.setenv("SORTED_FILE", str(tmp_path / "temp.csv"))
    monkeypatch.setenv("REPORT_FILE", str(tmp_path / "sales_report.txt"))
    monkeypatch.setenv("DATE_FORMAT", "iso")
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")
    get_settings.cache_clear()
    return get_settings()


@pytest.fixture
def make_record() -> Callable[..., SaleRecord]:
    def _make(
        sale_id: str = "SID1000",
        on: date = date(2024, 1, 15),
        item_name: str = "Widget",
        quantity: int = 1,
        unit_price: str = "1.00",
    ) -> SaleRecord:
        return SaleRecord(
            date=on,
            sale_id=sale_id,
            item_name=item_name,
            quantity=quantity,
            unit_price=Decimal(unit_price),
        )

    return _make


@pytest.fixture
def sample_records(make_record: Callable[..., SaleRecord]) -> List[SaleRecord]:
    """Three sales in non-chronological entry order."""
    return [
        make_record("SID1000", date(2024, 1, 15), "Widget", 3, "10.00"),
        make_record("SID1001", date(2023, 12, 31), "Gadget", 2, "5.50"),
        make_record("SID1002", date(2024, 1, 1), "Gizmo", 4, "5.00"),
    ]
