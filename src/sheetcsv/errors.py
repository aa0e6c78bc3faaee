"""Normalized error codes and structured error model for sheetcsv."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel


class ErrorCode(str, Enum):
    """Normalized error codes for the sheetcsv pipeline.

    Values equal their names so they are stable strings suitable for
    logging and programmatic handling.  Codes prefixed with ``E_`` are
    fatal; codes prefixed with ``W_`` are non-fatal warnings.
    """

    # Configuration
    E_CONFIG_BAD_DELIMITER = "E_CONFIG_BAD_DELIMITER"
    E_CONFIG_BAD_PATTERN = "E_CONFIG_BAD_PATTERN"
    E_CONFIG_CONFLICT = "E_CONFIG_CONFLICT"
    E_CONFIG_MISSING_REQUIREMENT = "E_CONFIG_MISSING_REQUIREMENT"

    # Sheet selection
    E_SELECT_ID_OUT_OF_RANGE = "E_SELECT_ID_OUT_OF_RANGE"
    E_SELECT_NAME_NOT_FOUND = "E_SELECT_NAME_NOT_FOUND"

    # Security / pre-flight
    E_SECURITY_TOO_LARGE = "E_SECURITY_TOO_LARGE"

    # Opening the workbook
    E_OPEN_NOT_FOUND = "E_OPEN_NOT_FOUND"
    E_OPEN_EMPTY = "E_OPEN_EMPTY"
    E_OPEN_UNSUPPORTED_FORMAT = "E_OPEN_UNSUPPORTED_FORMAT"
    E_OPEN_CORRUPT = "E_OPEN_CORRUPT"
    E_OPEN_PASSWORD = "E_OPEN_PASSWORD"
    E_OPEN_NO_SHEETS = "E_OPEN_NO_SHEETS"
    E_READ_SHEET_FAILED = "E_READ_SHEET_FAILED"

    # Writing output
    E_WRITE_OPEN_FAILED = "E_WRITE_OPEN_FAILED"
    E_WRITE_FAILED = "E_WRITE_FAILED"

    # Warnings (non-fatal)
    W_LARGE_FILE = "W_LARGE_FILE"
    W_OUTPUT_COUNT_MISMATCH = "W_OUTPUT_COUNT_MISMATCH"
    W_NO_SHEETS_MATCHED = "W_NO_SHEETS_MATCHED"


class ConvertError(BaseModel):
    """Structured error with code, message, and context.

    Each error carries an ``ErrorCode``, a human-readable message, and
    optional context about which sheet and stage produced it.
    """

    code: ErrorCode
    message: str
    sheet_name: str | None = None
    stage: str | None = None
    recoverable: bool = False

    @property
    def is_fatal(self) -> bool:
        """True for ``E_`` codes."""
        return self.code.value.startswith("E_")
