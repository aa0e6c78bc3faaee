"""Shared test fixtures for sheetcsv tests.

Provides a ``FakeReader`` satisfying the ``WorkbookReader`` protocol,
default settings, and factories that write real workbooks with openpyxl
and xlwt.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import openpyxl
import pytest

from sheetcsv.config import ConverterSettings
from sheetcsv.models import SheetGrid

# ZIP local-file header, enough for the pre-flight scanner to accept a
# placeholder .xlsx file that is never actually parsed.
_ZIP_MAGIC = b"PK\x03\x04"


# ---------------------------------------------------------------------------
# Fake reader
# ---------------------------------------------------------------------------


class FakeReader:
    """In-memory reader satisfying ``WorkbookReader``.

    Sheets are given as ``{name: rows}``; insertion order is workbook order.
    Every ``worksheet_range`` call is recorded in ``reads``.
    """

    def __init__(self, sheets: dict[str, list[list[Any]]]) -> None:
        self.sheets = sheets
        self.reads: list[str] = []
        self.closed = False

    def sheet_names(self) -> list[str]:
        return list(self.sheets)

    def worksheet_range(self, name: str) -> SheetGrid:
        self.reads.append(name)
        if name not in self.sheets:
            raise KeyError(name)
        return SheetGrid.from_rows(name, self.sheets[name])

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def fake_reader_factory():
    """Return ``make(sheets) -> (factory, reader)`` for ``SheetRouter``."""

    def _make(sheets: dict[str, list[list[Any]]]):
        reader = FakeReader(sheets)
        return (lambda path: reader), reader

    return _make


@pytest.fixture
def placeholder_xlsx(tmp_path: Path) -> str:
    """A file that passes the pre-flight scan but is never opened."""
    path = tmp_path / "placeholder.xlsx"
    path.write_bytes(_ZIP_MAGIC + b"\x00" * 60)
    return str(path)


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------


@pytest.fixture
def default_settings() -> ConverterSettings:
    """Return a ConverterSettings with all defaults."""
    return ConverterSettings()


# ---------------------------------------------------------------------------
# Real workbook factories
# ---------------------------------------------------------------------------


@pytest.fixture
def make_xlsx(tmp_path: Path):
    """Factory fixture writing ``{sheet: rows}`` to an .xlsx file."""

    def _write(
        sheets: dict[str, list[list[Any]]], filename: str = "book.xlsx"
    ) -> str:
        wb = openpyxl.Workbook()
        wb.remove(wb.active)
        for name, rows in sheets.items():
            ws = wb.create_sheet(name)
            for row in rows:
                ws.append(row)
        file_path = str(tmp_path / filename)
        wb.save(file_path)
        wb.close()
        return file_path

    return _write


@pytest.fixture
def three_sheet_xlsx(make_xlsx) -> str:
    """Workbook with sheets ``Sheet1``, ``Data`` and ``SheetX``."""
    return make_xlsx(
        {
            "Sheet1": [["Name", "Age"], ["Alice", 30], ["Bob", 25]],
            "Data": [["Product", "Price"], ["Widget", 9.5]],
            "SheetX": [["City"], ["Tokyo"]],
        }
    )


@pytest.fixture
def make_xls(tmp_path: Path):
    """Factory fixture writing ``{sheet: rows}`` to a legacy .xls file."""
    xlwt = pytest.importorskip("xlwt")

    def _write(
        sheets: dict[str, list[list[Any]]], filename: str = "book.xls"
    ) -> str:
        wb = xlwt.Workbook()
        date_style = xlwt.XFStyle()
        date_style.num_format_str = "YYYY-MM-DD"
        for name, rows in sheets.items():
            ws = wb.add_sheet(name)
            for r, row in enumerate(rows):
                for c, value in enumerate(row):
                    if value is None:
                        continue
                    if hasattr(value, "year"):
                        ws.write(r, c, value, date_style)
                    else:
                        ws.write(r, c, value)
        file_path = str(tmp_path / filename)
        wb.save(file_path)
        return file_path

    return _write
