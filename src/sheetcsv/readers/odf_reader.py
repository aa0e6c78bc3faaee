"""Reader for OpenDocument spreadsheets (.ods) via pandas and odfpy."""

from __future__ import annotations

import pandas as pd

from sheetcsv.models import SheetGrid
from sheetcsv.readers.base import BaseWorkbookReader


class OdfReader(BaseWorkbookReader):
    """Read .ods workbooks with ``pandas.ExcelFile(engine="odf")``.

    Every sheet is read without a header row so the first row is data.
    Only empty cells come back as ``None``; text such as ``NA`` or
    ``null`` stays text.
    """

    def __init__(self, file_path: str) -> None:
        super().__init__(file_path)
        self._book = pd.ExcelFile(file_path, engine="odf")

    def sheet_names(self) -> list[str]:
        return [str(name) for name in self._book.sheet_names]

    def worksheet_range(self, name: str) -> SheetGrid:
        self._require_sheet(name)
        df = self._book.parse(
            name, header=None, keep_default_na=False, na_values=[""]
        )
        if df.empty:
            return SheetGrid(name=name)
        values = df.astype(object).where(df.notna(), None)
        return SheetGrid.from_rows(name, values.values.tolist())

    def close(self) -> None:
        self._book.close()
