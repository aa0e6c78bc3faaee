"""Row projection: typed cell values to display strings, and sheet writing.

Numbers are rendered the way a spreadsheet user reads them: integral floats
without a fractional part and no exponent notation, so ``1.0`` becomes
``"1"`` and ``1e21`` becomes ``"1000000000000000000000"``.
"""

from __future__ import annotations

import csv
import datetime
import math
from decimal import Decimal
from typing import IO, Any, Sequence

from sheetcsv.config import ConverterSettings
from sheetcsv.delimiter import Delimiter
from sheetcsv.models import SheetGrid


def render_float(value: float) -> str:
    """Shortest round-trip representation without an exponent."""
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "inf" if value > 0 else "-inf"
    text = format(Decimal(repr(value)), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def render_cell(value: Any, date_format: str | None = None) -> str:
    """Return the display string for one cell value.

    ``bool`` is checked before ``int`` because it is a subclass of it.
    Values of any other type render as an empty string unless they are
    dates and *date_format* is given.
    """
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return render_float(value)
    if isinstance(value, str):
        return value
    if date_format is not None and isinstance(
        value, (datetime.datetime, datetime.date, datetime.time)
    ):
        return value.strftime(date_format)
    return ""


def project_row(row: Sequence[Any], date_format: str | None = None) -> list[str]:
    """Map one row of cell values to display strings, one per cell."""
    return [render_cell(value, date_format) for value in row]


def make_writer(
    stream: IO[str], delimiter: Delimiter, settings: ConverterSettings
):
    """Create a ``csv.writer`` configured with the run's delimiter and settings."""
    return csv.writer(
        stream,
        delimiter=delimiter.as_char(),
        quotechar=settings.quote_char,
        lineterminator=settings.line_terminator,
        quoting=csv.QUOTE_MINIMAL,
    )


def write_sheet(
    grid: SheetGrid,
    stream: IO[str],
    delimiter: Delimiter,
    settings: ConverterSettings,
) -> int:
    """Write every row of *grid* to *stream*.  Returns the record count.

    A grid with zero rows or zero columns writes nothing.
    """
    height, width = grid.size
    if height == 0 or width == 0:
        return 0

    writer = make_writer(stream, delimiter, settings)
    records = 0
    for row in grid.rows:
        writer.writerow(project_row(row, settings.date_format))
        records += 1
        if settings.flush_each_row:
            stream.flush()
    stream.flush()
    return records
