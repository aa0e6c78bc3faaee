"""Reader for legacy BIFF workbooks (.xls) using xlrd."""

from __future__ import annotations

import logging
from typing import Any

import xlrd  # type: ignore[import-untyped]

from sheetcsv.models import SheetGrid
from sheetcsv.readers.base import BaseWorkbookReader

logger = logging.getLogger("sheetcsv")


class XlrdReader(BaseWorkbookReader):
    """Read .xls workbooks, loading sheets on demand."""

    def __init__(self, file_path: str) -> None:
        super().__init__(file_path)
        self._wb = xlrd.open_workbook(file_path, on_demand=True)

    def sheet_names(self) -> list[str]:
        return list(self._wb.sheet_names())

    def worksheet_range(self, name: str) -> SheetGrid:
        self._require_sheet(name)
        sheet = self._wb.sheet_by_name(name)
        rows = (
            [self._cell_value(sheet.cell(r, c)) for c in range(sheet.ncols)]
            for r in range(sheet.nrows)
        )
        grid = SheetGrid.from_rows(name, rows)
        self._wb.unload_sheet(name)
        return grid

    def _cell_value(self, cell) -> Any:
        """Convert an xlrd cell to a Python-native value."""
        if cell.ctype in (xlrd.XL_CELL_EMPTY, xlrd.XL_CELL_BLANK, xlrd.XL_CELL_ERROR):
            return None
        if cell.ctype == xlrd.XL_CELL_BOOLEAN:
            return bool(cell.value)
        if cell.ctype == xlrd.XL_CELL_DATE:
            try:
                return xlrd.xldate_as_datetime(cell.value, self._wb.datemode)
            except Exception as exc:
                logger.warning(
                    "sheetcsv | file=%s | date conversion failed: %s",
                    self.file_path,
                    exc,
                )
                return None
        # XL_CELL_TEXT or XL_CELL_NUMBER
        return cell.value

    def close(self) -> None:
        self._wb.release_resources()
