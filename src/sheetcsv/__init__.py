"""sheetcsv -- convert spreadsheet workbooks to CSV/TSV.

Public API exports for configuration, selectors, delimiters, readers, the
row projector and the ``SheetRouter`` orchestrator.
"""

__version__ = "0.1.0"

from sheetcsv.config import (
    ConverterConfig,
    ConverterSettings,
    OutputMode,
    build_config,
)
from sheetcsv.delimiter import Delimiter, parse_delimiter
from sheetcsv.errors import ConvertError, ErrorCode
from sheetcsv.models import ConversionResult, SheetGrid, WrittenSheet
from sheetcsv.projector import project_row, render_cell, write_sheet
from sheetcsv.protocols import WorkbookReader
from sheetcsv.readers import WorkbookFormat, detect_format, open_workbook
from sheetcsv.router import SheetRouter
from sheetcsv.security import WorkbookSecurityScanner
from sheetcsv.selector import ById, ByName, SheetSelector, parse_selector

__all__ = [
    # Configuration
    "ConverterConfig",
    "ConverterSettings",
    "OutputMode",
    "build_config",
    # Options
    "Delimiter",
    "parse_delimiter",
    "ById",
    "ByName",
    "SheetSelector",
    "parse_selector",
    # Errors
    "ConvertError",
    "ErrorCode",
    # Models
    "SheetGrid",
    "WrittenSheet",
    "ConversionResult",
    # Readers
    "WorkbookReader",
    "WorkbookFormat",
    "detect_format",
    "open_workbook",
    "WorkbookSecurityScanner",
    # Projection and routing
    "project_row",
    "render_cell",
    "write_sheet",
    "SheetRouter",
]
