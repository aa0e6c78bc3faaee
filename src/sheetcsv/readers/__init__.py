"""Workbook readers and format detection.

``open_workbook()`` picks a reader by file extension, falling back to the
file's magic bytes when the extension is unknown:

* ``.xlsx`` / ``.xlsm`` / ``.xltx`` / ``.xltm`` / ``.xlam`` -- openpyxl
* ``.xls`` / ``.xla`` -- xlrd
* ``.xlsb`` -- pyxlsb
* ``.ods`` -- pandas with the odfpy engine

Reader modules are imported lazily so a missing optional library only
matters for the format that needs it.
"""

from __future__ import annotations

import logging
import pathlib
import zipfile
from enum import Enum

from sheetcsv.protocols import WorkbookReader

logger = logging.getLogger("sheetcsv")

OLE2_MAGIC = b"\xd0\xcf\x11\xe0\xa1\xb1\x1a\xe1"
ZIP_MAGIC = b"PK\x03\x04"


class WorkbookFormat(str, Enum):
    """Container formats sheetcsv can read."""

    XLSX = "xlsx"
    XLS = "xls"
    XLSB = "xlsb"
    ODS = "ods"


_EXTENSIONS: dict[str, WorkbookFormat] = {
    ".xlsx": WorkbookFormat.XLSX,
    ".xlsm": WorkbookFormat.XLSX,
    ".xltx": WorkbookFormat.XLSX,
    ".xltm": WorkbookFormat.XLSX,
    ".xlam": WorkbookFormat.XLSX,
    ".xls": WorkbookFormat.XLS,
    ".xla": WorkbookFormat.XLS,
    ".xlsb": WorkbookFormat.XLSB,
    ".ods": WorkbookFormat.ODS,
}

SUPPORTED_EXTENSIONS = frozenset(_EXTENSIONS)


def read_magic(file_path: str, size: int = 8) -> bytes:
    with open(file_path, "rb") as fh:
        return fh.read(size)


def sniff_format(file_path: str) -> WorkbookFormat | None:
    """Guess the container format from the file's contents."""
    header = read_magic(file_path)
    if header.startswith(OLE2_MAGIC):
        return WorkbookFormat.XLS
    if not header.startswith(ZIP_MAGIC):
        return None

    try:
        with zipfile.ZipFile(file_path) as zf:
            members = set(zf.namelist())
    except zipfile.BadZipFile:
        return None

    if "xl/workbook.bin" in members:
        return WorkbookFormat.XLSB
    if "xl/workbook.xml" in members:
        return WorkbookFormat.XLSX
    if "content.xml" in members:
        return WorkbookFormat.ODS
    return None


def detect_format(file_path: str) -> WorkbookFormat | None:
    """Return the workbook format by extension, else by content."""
    suffix = pathlib.Path(file_path).suffix.lower()
    if suffix in _EXTENSIONS:
        return _EXTENSIONS[suffix]
    return sniff_format(file_path)


def open_workbook(file_path: str) -> WorkbookReader:
    """Open *file_path* with the reader matching its format.

    Raises
    ------
    ValueError
        If the format cannot be determined.
    """
    fmt = detect_format(file_path)
    logger.debug("sheetcsv | file=%s | format=%s", file_path, fmt)

    if fmt is WorkbookFormat.XLSX:
        from sheetcsv.readers.openpyxl_reader import OpenpyxlReader

        return OpenpyxlReader(file_path)
    if fmt is WorkbookFormat.XLS:
        from sheetcsv.readers.xlrd_reader import XlrdReader

        return XlrdReader(file_path)
    if fmt is WorkbookFormat.XLSB:
        from sheetcsv.readers.pyxlsb_reader import PyxlsbReader

        return PyxlsbReader(file_path)
    if fmt is WorkbookFormat.ODS:
        from sheetcsv.readers.odf_reader import OdfReader

        return OdfReader(file_path)

    raise ValueError(f"Cannot detect workbook format of {file_path}")


__all__ = [
    "OLE2_MAGIC",
    "ZIP_MAGIC",
    "SUPPORTED_EXTENSIONS",
    "WorkbookFormat",
    "WorkbookReader",
    "detect_format",
    "open_workbook",
    "read_magic",
    "sniff_format",
]
