"""Reader for binary workbooks (.xlsb) using pyxlsb."""

from __future__ import annotations

import os
from typing import Any

from pyxlsb import biff12  # type: ignore[import-untyped]
from pyxlsb import open_workbook as open_xlsb  # type: ignore[import-untyped]

from sheetcsv.models import SheetGrid
from sheetcsv.readers.base import BaseWorkbookReader

_ERROR_RECORDS = frozenset({biff12.BOOLERR, biff12.FORMULA_BOOLERR})


def _cell_rows(sheet: Any) -> list[list[Any]]:
    """Collect cell values from the sheet's record stream.

    ``Worksheet.rows()`` drops the record type and reports error cells as
    ``hex(code)`` strings, so the records are walked here and error cells
    become ``None``.
    """
    reader = sheet._reader
    reader.seek(sheet._data_offset, os.SEEK_SET)

    rows: list[list[Any]] = []
    current: list[Any] | None = None
    for rectype, rec in reader:
        if rectype == biff12.ROW:
            while len(rows) <= rec.r:
                rows.append([])
            current = rows[rec.r]
        elif biff12.BLANK <= rectype <= biff12.FORMULA_BOOLERR:
            if current is None:
                continue
            if rectype in _ERROR_RECORDS:
                value = None
            elif rectype == biff12.STRING and sheet._stringtable is not None:
                value = sheet._stringtable[rec.v]
            else:
                value = rec.v
            if len(current) <= rec.c:
                current.extend([None] * (rec.c + 1 - len(current)))
            current[rec.c] = value
        elif rectype == biff12.SHEETDATA_END:
            break
    return rows


class PyxlsbReader(BaseWorkbookReader):
    """Read .xlsb workbooks row by row.

    pyxlsb reports dates as serial numbers; they are written as numbers.
    Error cells are reported as empty.
    """

    def __init__(self, file_path: str) -> None:
        super().__init__(file_path)
        self._wb = open_xlsb(file_path)

    def sheet_names(self) -> list[str]:
        return list(self._wb.sheets)

    def worksheet_range(self, name: str) -> SheetGrid:
        self._require_sheet(name)
        with self._wb.get_sheet(name) as sheet:
            rows = _cell_rows(sheet)
        return SheetGrid.from_rows(name, rows)

    def close(self) -> None:
        self._wb.close()
