"""SheetRouter -- orchestrator and public API for a conversion run.

Routes one workbook through the pipeline:

1. Pre-flight scan via :class:`WorkbookSecurityScanner`.
2. Open the workbook with the reader matching its format.
3. List sheet names (a workbook without sheets is fatal).
4. Dispatch on :attr:`ConverterConfig.mode`:

   * ``LIST`` -- print sheet names, one per line.
   * ``NAMED_FILES`` -- write every sheet passing the include/exclude
     filters to ``<workdir>/<sheet>.<ext>``.
   * ``STDOUT`` -- write the selected (or first) sheet to standard output.
   * ``POSITIONAL_FILES`` -- pair sheets with output paths by position.

5. Assemble and return :class:`ConversionResult`.

The router is **fail-closed**: the first fatal error stops the run and is
returned in the result.  Files already written by earlier sheets are left
in place.
"""

from __future__ import annotations

import csv
import logging
import os
import pathlib
import sys
import time
from typing import IO, Callable

from sheetcsv.config import ConverterConfig, ConverterSettings, OutputMode
from sheetcsv.errors import ConvertError, ErrorCode
from sheetcsv.models import ConversionResult, SheetGrid, WrittenSheet
from sheetcsv.projector import write_sheet
from sheetcsv.protocols import WorkbookReader
from sheetcsv.readers import open_workbook
from sheetcsv.security import WorkbookSecurityScanner

logger = logging.getLogger("sheetcsv")

STDOUT_DESTINATION = "<stdout>"

_Handler = Callable[
    [WorkbookReader, list[str], ConverterConfig, ConversionResult],
    "ConvertError | None",
]


class SheetRouter:
    """Top-level orchestrator for sheetcsv.

    Parameters
    ----------
    settings:
        Output and resource settings.  Uses defaults when *None*.
    stdout:
        Stream receiving sheet lists, progress lines and stdout-mode data.
        Defaults to ``sys.stdout`` at the time of the run.
    reader_factory:
        Callable opening a workbook path.  Defaults to
        :func:`sheetcsv.readers.open_workbook`.
    """

    def __init__(
        self,
        settings: ConverterSettings | None = None,
        stdout: IO[str] | None = None,
        reader_factory: Callable[[str], WorkbookReader] | None = None,
    ) -> None:
        self._settings = settings or ConverterSettings()
        self._stdout = stdout
        self._reader_factory = reader_factory or open_workbook
        self._security_scanner = WorkbookSecurityScanner(self._settings)
        self._handlers: dict[OutputMode, _Handler] = {
            OutputMode.LIST: self._list_sheets,
            OutputMode.NAMED_FILES: self._write_named_files,
            OutputMode.STDOUT: self._write_stdout,
            OutputMode.POSITIONAL_FILES: self._write_positional_files,
        }

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def run(self, config: ConverterConfig) -> ConversionResult:
        """Convert the workbook named by *config*.

        Returns
        -------
        ConversionResult
            The assembled result.  ``result.errors`` is non-empty when the
            run was aborted.
        """
        start = time.monotonic()
        mode = config.mode
        result = ConversionResult(input_path=config.input_path, mode=mode)

        # ==============================================================
        # Step 1: Pre-flight scan
        # ==============================================================
        for err in self._security_scanner.scan(config.input_path):
            if err.is_fatal:
                return self._fail(result, err, start)
            self._warn(result, err)

        # ==============================================================
        # Step 2: Open workbook
        # ==============================================================
        try:
            reader = self._reader_factory(config.input_path)
        except Exception as exc:
            return self._fail(result, self._open_error(exc), start)

        try:
            # ==========================================================
            # Step 3: Sheet names
            # ==========================================================
            try:
                names = list(reader.sheet_names())
            except Exception as exc:
                return self._fail(result, self._open_error(exc), start)

            if not names:
                err = ConvertError(
                    code=ErrorCode.E_OPEN_NO_SHEETS,
                    message="input file has zero sheets",
                    stage="open",
                )
                return self._fail(result, err, start)
            result.sheet_names = names

            # ==========================================================
            # Step 4: Dispatch on output mode
            # ==========================================================
            logger.debug(
                "sheetcsv | file=%s | mode=%s | sheets=%d",
                config.input_path,
                mode.value,
                len(names),
            )
            err = self._handlers[mode](reader, names, config, result)
            if err is not None:
                return self._fail(result, err, start)
        finally:
            reader.close()

        result.processing_time_seconds = time.monotonic() - start
        logger.info(
            "sheetcsv | file=%s | mode=%s | sheets_written=%d | records=%d | %.3fs",
            config.input_path,
            mode.value,
            len(result.written),
            result.records_written,
            result.processing_time_seconds,
        )
        return result

    # ------------------------------------------------------------------
    # Output modes
    # ------------------------------------------------------------------

    def _list_sheets(
        self,
        reader: WorkbookReader,
        names: list[str],
        config: ConverterConfig,
        result: ConversionResult,
    ) -> ConvertError | None:
        out = self._out()
        for name in names:
            print(name, file=out)
        out.flush()
        return None

    def _write_named_files(
        self,
        reader: WorkbookReader,
        names: list[str],
        config: ConverterConfig,
        result: ConversionResult,
    ) -> ConvertError | None:
        ext = config.delimiter.to_file_extension()
        workdir = pathlib.Path(config.workdir) if config.workdir else None

        selected = config.filter_sheets(names)
        if not selected:
            self._warn(
                result,
                ConvertError(
                    code=ErrorCode.W_NO_SHEETS_MATCHED,
                    message="No sheet names matched the include/exclude filters",
                    stage="select",
                    recoverable=True,
                ),
            )

        for name in selected:
            filename = f"{name}.{ext}"
            output = workdir / filename if workdir is not None else pathlib.Path(filename)
            err = self._write_to_file(reader, name, str(output), config, result)
            if err is not None:
                return err
        return None

    def _write_stdout(
        self,
        reader: WorkbookReader,
        names: list[str],
        config: ConverterConfig,
        result: ConversionResult,
    ) -> ConvertError | None:
        if config.select is not None:
            resolved = config.select.resolve(names)
            if isinstance(resolved, ConvertError):
                return resolved
            sheet = resolved
        else:
            sheet = names[0]

        grid = self._read_sheet(reader, sheet)
        if isinstance(grid, ConvertError):
            return grid

        out = self._out()
        try:
            records = write_sheet(grid, out, config.delimiter, self._settings)
        except (OSError, csv.Error, ValueError) as exc:
            return self._write_error(sheet, STDOUT_DESTINATION, exc)

        self._record(result, sheet, STDOUT_DESTINATION, records)
        return None

    def _write_positional_files(
        self,
        reader: WorkbookReader,
        names: list[str],
        config: ConverterConfig,
        result: ConversionResult,
    ) -> ConvertError | None:
        if len(names) != len(config.outputs):
            self._warn(
                result,
                ConvertError(
                    code=ErrorCode.W_OUTPUT_COUNT_MISMATCH,
                    message=(
                        f"{len(names)} sheets but {len(config.outputs)} output "
                        f"paths; converting the first "
                        f"{min(len(names), len(config.outputs))}"
                    ),
                    stage="select",
                    recoverable=True,
                ),
            )

        for name, output in zip(names, config.outputs):
            err = self._write_to_file(reader, name, output, config, result)
            if err is not None:
                return err
        return None

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _out(self) -> IO[str]:
        return self._stdout if self._stdout is not None else sys.stdout

    def _read_sheet(
        self, reader: WorkbookReader, sheet: str
    ) -> SheetGrid | ConvertError:
        try:
            return reader.worksheet_range(sheet)
        except Exception as exc:
            return ConvertError(
                code=ErrorCode.E_READ_SHEET_FAILED,
                message=f"Failed to read sheet '{sheet}': {exc}",
                sheet_name=sheet,
                stage="read",
            )

    def _write_to_file(
        self,
        reader: WorkbookReader,
        sheet: str,
        output: str,
        config: ConverterConfig,
        result: ConversionResult,
    ) -> ConvertError | None:
        """Print *output* as a progress line, then write *sheet* into it."""
        out = self._out()
        print(output, file=out)
        out.flush()

        try:
            fh = open(
                output, "w", newline="", encoding=self._settings.encoding
            )
        except OSError as exc:
            return ConvertError(
                code=ErrorCode.E_WRITE_OPEN_FAILED,
                message=f"Cannot open '{output}' for output: {exc}",
                sheet_name=sheet,
                stage="write",
            )

        with fh:
            grid = self._read_sheet(reader, sheet)
            if isinstance(grid, ConvertError):
                return grid
            try:
                records = write_sheet(grid, fh, config.delimiter, self._settings)
            except (OSError, csv.Error, ValueError) as exc:
                return self._write_error(sheet, output, exc)

        self._record(result, sheet, output, records)
        return None

    def _record(
        self, result: ConversionResult, sheet: str, destination: str, records: int
    ) -> None:
        result.written.append(
            WrittenSheet(sheet_name=sheet, destination=destination, records=records)
        )
        logger.info(
            "sheetcsv | sheet=%s | dest=%s | records=%d", sheet, destination, records
        )

    def _write_error(self, sheet: str, destination: str, exc: Exception) -> ConvertError:
        return ConvertError(
            code=ErrorCode.E_WRITE_FAILED,
            message=f"Failed to write sheet '{sheet}' to {destination}: {exc}",
            sheet_name=sheet,
            stage="write",
        )

    def _open_error(self, exc: Exception) -> ConvertError:
        exc_msg = str(exc).lower()
        if "password" in exc_msg or "encrypted" in exc_msg:
            return ConvertError(
                code=ErrorCode.E_OPEN_PASSWORD,
                message=f"Workbook appears to be password-protected: {exc}",
                stage="open",
            )
        return ConvertError(
            code=ErrorCode.E_OPEN_CORRUPT,
            message=f"Failed to open workbook: {exc}",
            stage="open",
        )

    def _warn(self, result: ConversionResult, err: ConvertError) -> None:
        result.warnings.append(err.code.value)
        result.error_details.append(err)
        logger.warning(
            "sheetcsv | file=%s | code=%s | detail=%s",
            os.path.basename(result.input_path),
            err.code.value,
            err.message,
        )

    def _fail(
        self, result: ConversionResult, err: ConvertError, start: float
    ) -> ConversionResult:
        result.errors.append(err.code.value)
        result.error_details.append(err)
        result.processing_time_seconds = time.monotonic() - start
        logger.error(
            "sheetcsv | file=%s | code=%s | detail=%s",
            os.path.basename(result.input_path),
            err.code.value,
            err.message,
        )
        return result
