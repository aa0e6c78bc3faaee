"""Pre-flight checks on the input workbook.

Rejects missing, empty, oversized or unrecognisable files before any reader
library touches them.  All checks are fail-fast: the first fatal error
stops further checks.
"""

from __future__ import annotations

import logging
import os
import pathlib

from sheetcsv.config import ConverterSettings
from sheetcsv.errors import ConvertError, ErrorCode
from sheetcsv.readers import (
    OLE2_MAGIC,
    SUPPORTED_EXTENSIONS,
    WorkbookFormat,
    detect_format,
    read_magic,
)

logger = logging.getLogger("sheetcsv")

_MB = 1024 * 1024


class WorkbookSecurityScanner:
    """File-level scanner for input workbooks.

    Returns a list of errors/warnings.  Fatal errors (``E_*`` codes) mean
    the file should not be opened.
    """

    def __init__(self, settings: ConverterSettings) -> None:
        self._settings = settings

    def scan(self, file_path: str) -> list[ConvertError]:
        errors: list[ConvertError] = []

        # 1. Existence
        if not os.path.isfile(file_path):
            errors.append(
                ConvertError(
                    code=ErrorCode.E_OPEN_NOT_FOUND,
                    message=f"File not found or not readable: {file_path}",
                    stage="security",
                )
            )
            return errors

        # 2. Empty file
        file_size = os.path.getsize(file_path)
        if file_size == 0:
            errors.append(
                ConvertError(
                    code=ErrorCode.E_OPEN_EMPTY,
                    message=f"File is empty (0 bytes): {file_path}",
                    stage="security",
                )
            )
            return errors

        # 3. Size limit
        max_bytes = self._settings.max_file_size_mb * _MB
        if file_size > max_bytes:
            errors.append(
                ConvertError(
                    code=ErrorCode.E_SECURITY_TOO_LARGE,
                    message=(
                        f"File size {file_size} bytes exceeds limit of "
                        f"{max_bytes} bytes ({self._settings.max_file_size_mb} MB)"
                    ),
                    stage="security",
                )
            )
            return errors

        # 4. Large file warning
        if file_size > self._settings.large_file_warning_mb * _MB:
            errors.append(
                ConvertError(
                    code=ErrorCode.W_LARGE_FILE,
                    message=(
                        f"File is {file_size / _MB:.1f} MB "
                        f"(> {self._settings.large_file_warning_mb} MB)"
                    ),
                    stage="security",
                    recoverable=True,
                )
            )

        # 5. Format detection
        try:
            fmt = detect_format(file_path)
        except OSError as exc:
            errors.append(
                ConvertError(
                    code=ErrorCode.E_OPEN_CORRUPT,
                    message=f"Cannot read file header: {exc}",
                    stage="security",
                )
            )
            return errors

        if fmt is None:
            errors.append(
                ConvertError(
                    code=ErrorCode.E_OPEN_UNSUPPORTED_FORMAT,
                    message=(
                        f"Unsupported workbook format: {file_path}. "
                        f"Supported extensions: {sorted(SUPPORTED_EXTENSIONS)}"
                    ),
                    stage="security",
                )
            )
            return errors

        # 6. Encrypted OOXML files are stored inside an OLE2 container
        if fmt is not WorkbookFormat.XLS and read_magic(file_path).startswith(
            OLE2_MAGIC
        ):
            suffix = pathlib.Path(file_path).suffix.lower()
            errors.append(
                ConvertError(
                    code=ErrorCode.E_OPEN_PASSWORD,
                    message=(
                        f"Workbook appears to be password-protected: "
                        f"OLE2 container with '{suffix}' extension"
                    ),
                    stage="security",
                )
            )
            return errors

        return errors
