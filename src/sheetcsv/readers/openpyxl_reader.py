"""Reader for Office Open XML workbooks (.xlsx, .xlsm, .xltx, .xltm)."""

from __future__ import annotations

import logging

import openpyxl
from openpyxl.chartsheet import Chartsheet

from sheetcsv.models import SheetGrid
from sheetcsv.readers.base import BaseWorkbookReader

logger = logging.getLogger("sheetcsv")


class OpenpyxlReader(BaseWorkbookReader):
    """Read cached cell values with openpyxl (``data_only=True``).

    Formula cells yield the value Excel last calculated.  Error cells
    (``#DIV/0!`` and friends) are reported as empty.
    """

    def __init__(self, file_path: str) -> None:
        super().__init__(file_path)
        self._wb = openpyxl.load_workbook(file_path, data_only=True)

    def sheet_names(self) -> list[str]:
        return list(self._wb.sheetnames)

    def worksheet_range(self, name: str) -> SheetGrid:
        self._require_sheet(name)
        ws = self._wb[name]

        if isinstance(ws, Chartsheet):
            logger.debug("sheetcsv | chart-only sheet has no cells: %s", name)
            return SheetGrid(name=name)

        rows = (
            [None if cell.data_type == "e" else cell.value for cell in row]
            for row in ws.iter_rows()
        )
        return SheetGrid.from_rows(name, rows)

    def close(self) -> None:
        self._wb.close()
