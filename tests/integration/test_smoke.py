"""
End-to-end tests for the sales ledger CLI.

These run the real typer app against files in a temporary directory and
verify that:
1. Each command reads and writes the configured files
2. Mutations regenerate the sorted copy and the report
3. Ledger errors are reported with a non-zero exit code instead of a traceback
"""

from __future__ import annotations

from decimal import Decimal

import pytest
from typer.testing import CliRunner

from sales_ledger.codec import HEADER, read_file, write_file
from sales_ledger.main import app

runner = CliRunner()


@pytest.fixture
def seeded(ledger_settings, sample_records):
    write_file(ledger_settings.sales_file, sample_records)
    return ledger_settings


class TestInfo:
    def test_info_shows_configured_files(self, ledger_settings):
        result = runner.invoke(app, ["info"])
        assert result.exit_code == 0
        assert str(ledger_settings.sales_file) in result.output
        assert "YYYY-MM-DD" in result.output


class TestAdd:
    def test_add_single_sale_creates_all_outputs(self, ledger_settings):
        result = runner.invoke(app, ["add"], input="2024-01-15\nWidget\n3\n10.00\nn\n")

        assert result.exit_code == 0, result.output
        assert "Recorded SID" in result.output
        records = read_file(ledger_settings.sales_file).records
        assert len(records) == 1
        assert records[0].unit_price == Decimal("10.00")
        assert ledger_settings.sorted_file.read_text().startswith(HEADER)
        assert "30.00" in ledger_settings.report_file.read_text()

    def test_add_retries_invalid_input(self, ledger_settings):
        result = runner.invoke(
            app, ["add"], input="2023-02-29\n2024-02-29\nWidget\n-1\n2\n1.50\nn\n"
        )

        assert result.exit_code == 0, result.output
        assert "Invalid input" in result.output
        records = read_file(ledger_settings.sales_file).records
        assert records[0].quantity == 2

    def test_add_appends_to_existing_file(self, seeded):
        result = runner.invoke(app, ["add"], input="2024-01-20\nTea\n1\n2\nn\n")

        assert result.exit_code == 0, result.output
        assert len(read_file(seeded.sales_file).records) == 4


class TestUpdateDelete:
    def test_update_changes_fields_and_keeps_id(self, seeded):
        result = runner.invoke(app, ["update", "SID1000", "--quantity", "5", "--price", "2.5"])

        assert result.exit_code == 0, result.output
        records = read_file(seeded.sales_file).records
        assert records[0].sale_id == "SID1000"
        assert records[0].quantity == 5
        assert records[0].unit_price == Decimal("2.50")
        assert [r.sale_id for r in records] == ["SID1000", "SID1001", "SID1002"]

    def test_update_unknown_id_fails_cleanly(self, seeded):
        result = runner.invoke(app, ["update", "SID-missing", "--quantity", "5"])
        assert result.exit_code == 1
        assert "No sale with id 'SID-missing'" in result.output

    def test_update_rejects_invalid_value(self, seeded):
        result = runner.invoke(app, ["update", "SID1000", "--date", "2023-02-29"])
        assert result.exit_code == 1
        assert "Error:" in result.output

    def test_update_without_fields(self, seeded):
        result = runner.invoke(app, ["update", "SID1000"])
        assert result.exit_code == 2

    def test_delete_removes_sale(self, seeded):
        result = runner.invoke(app, ["delete", "SID1001"])

        assert result.exit_code == 0, result.output
        assert "Deleted 1 sale(s)" in result.output
        assert [r.sale_id for r in read_file(seeded.sales_file).records] == ["SID1000", "SID1002"]
        assert "SID1001" not in seeded.report_file.read_text()

    def test_delete_unknown_id_fails_cleanly(self, seeded):
        before = seeded.sales_file.read_text()
        result = runner.invoke(app, ["delete", "SID-missing"])
        assert result.exit_code == 1
        assert seeded.sales_file.read_text() == before


class TestOutputs:
    def test_sort_writes_sorted_copy(self, seeded):
        result = runner.invoke(app, ["sort"])

        assert result.exit_code == 0, result.output
        ordered = read_file(seeded.sorted_file).records
        assert [r.sale_id for r in ordered] == ["SID1001", "SID1002", "SID1000"]
        # source file keeps entry order
        assert [r.sale_id for r in read_file(seeded.sales_file).records][0] == "SID1000"

    def test_report_plain(self, seeded):
        result = runner.invoke(app, ["report", "--plain"])

        assert result.exit_code == 0, result.output
        assert "Grand Total:" in result.output
        assert "grand total 61.00" in result.output
        assert "END OF REPORT" in seeded.report_file.read_text()

    def test_report_table(self, seeded):
        result = runner.invoke(app, ["report"])
        assert result.exit_code == 0, result.output
        assert "Sales Report" in result.output

    def test_list_sorted(self, seeded):
        result = runner.invoke(app, ["list", "--sorted"])
        assert result.exit_code == 0, result.output
        assert result.output.index("SID1001") < result.output.index("SID1000")

    def test_dmy_configuration(self, ledger_settings, monkeypatch):
        monkeypatch.setenv("DATE_FORMAT", "dmy")
        from sales_ledger.config import get_settings

        get_settings.cache_clear()
        ledger_settings.sales_file.write_text(
            f"{HEADER}\n15/01/2024,A,x,1,1.00\n31/12/2023,B,x,1,1.00\n01/01/2024,C,x,1,1.00\n"
        )

        result = runner.invoke(app, ["sort"])

        assert result.exit_code == 0, result.output
        lines = ledger_settings.sorted_file.read_text().splitlines()
        assert [line.split(",")[1] for line in lines[1:]] == ["B", "C", "A"]
        assert lines[1].startswith("31/12/2023")

    def test_unwritable_report_destination(self, seeded, monkeypatch, tmp_path):
        from sales_ledger.config import get_settings

        blocker = tmp_path / "blocker"
        blocker.write_text("")
        monkeypatch.setenv("REPORT_FILE", str(blocker / "report.txt"))
        get_settings.cache_clear()

        result = runner.invoke(app, ["report", "--no-show"])

        assert result.exit_code == 1
        assert "Cannot write to" in result.output

    def test_list_unreadable_sales_file_fails_cleanly(self, ledger_settings, monkeypatch, tmp_path):
        from sales_ledger.config import get_settings

        monkeypatch.setenv("SALES_FILE", str(tmp_path))
        get_settings.cache_clear()

        result = runner.invoke(app, ["list"])

        assert result.exit_code == 1
        assert "Cannot read" in result.output

    def test_list_skips_rows_with_invalid_bytes(self, ledger_settings):
        ledger_settings.sales_file.write_bytes(
            HEADER.encode() + b"\n2024-01-15,SID1,Widget,3,10.00\n2024-01-15,SID2,Caf\xe9,1,2.00\n"
        )

        result = runner.invoke(app, ["list"])

        assert result.exit_code == 0, result.output
        assert "SID1" in result.output
        assert "SID2" not in result.output
