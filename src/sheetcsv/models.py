"""Data models for sheetcsv.

``SheetGrid`` is the in-memory used range of one worksheet as handed over by
a workbook reader.  ``WrittenSheet`` and ``ConversionResult`` describe the
outcome of a run.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable

from pydantic import BaseModel

from sheetcsv.config import OutputMode
from sheetcsv.errors import ConvertError


# ---------------------------------------------------------------------------
# Sheet grid
# ---------------------------------------------------------------------------


def _is_empty(value: Any) -> bool:
    return value is None


@dataclass
class SheetGrid:
    """Rectangular block of cell values for one sheet.

    Rows hold Python-native values: ``int``, ``float``, ``str``, ``bool``,
    ``datetime`` and ``None`` for empty or error cells.  All rows have
    exactly ``width`` entries.
    """

    name: str
    rows: list[list[Any]] = field(default_factory=list)

    @property
    def height(self) -> int:
        return len(self.rows)

    @property
    def width(self) -> int:
        return len(self.rows[0]) if self.rows else 0

    @property
    def size(self) -> tuple[int, int]:
        return self.height, self.width

    @classmethod
    def from_rows(cls, name: str, rows: Iterable[Iterable[Any]]) -> SheetGrid:
        """Build a grid trimmed to the used range of *rows*.

        Leading and trailing rows and columns that contain no value at all
        are dropped; ragged rows are padded with ``None``.
        """
        materialized = [list(row) for row in rows]

        used_rows = [
            idx
            for idx, row in enumerate(materialized)
            if any(not _is_empty(v) for v in row)
        ]
        if not used_rows:
            return cls(name=name, rows=[])

        first_row, last_row = used_rows[0], used_rows[-1]
        body = materialized[first_row : last_row + 1]

        used_cols = {
            col
            for row in body
            for col, value in enumerate(row)
            if not _is_empty(value)
        }
        first_col, last_col = min(used_cols), max(used_cols)

        width = last_col - first_col + 1
        trimmed: list[list[Any]] = []
        for row in body:
            cells = row[first_col : last_col + 1]
            if len(cells) < width:
                cells = cells + [None] * (width - len(cells))
            trimmed.append(cells)
        return cls(name=name, rows=trimmed)


# ---------------------------------------------------------------------------
# Run results
# ---------------------------------------------------------------------------


class WrittenSheet(BaseModel):
    """One sheet written to a destination (a file path or ``"<stdout>"``)."""

    sheet_name: str
    destination: str
    records: int = 0


class ConversionResult(BaseModel):
    """Final result of a conversion run via ``SheetRouter.run()``."""

    input_path: str
    mode: OutputMode
    sheet_names: list[str] = []
    written: list[WrittenSheet] = []
    errors: list[str] = []
    warnings: list[str] = []
    error_details: list[ConvertError] = []
    processing_time_seconds: float = 0.0

    @property
    def ok(self) -> bool:
        return not self.errors

    @property
    def records_written(self) -> int:
        return sum(w.records for w in self.written)
