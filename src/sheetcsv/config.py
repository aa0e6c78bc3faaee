"""Configuration models for sheetcsv.

Provides two models:

* ``ConverterSettings`` -- tunables that are not part of the command-line
  contract (encoding, quoting, size limits, logging).  Defaults reproduce
  the classic output byte for byte; overrides may be loaded from YAML or
  JSON via ``from_file()``.
* ``ConverterConfig`` -- the immutable snapshot of one run's options,
  produced by ``build_config()`` after every option has been validated.
"""

from __future__ import annotations

import json
import pathlib
import re
from enum import Enum
from typing import Sequence

from pydantic import BaseModel, ConfigDict

from sheetcsv.delimiter import DEFAULT_DELIMITER, Delimiter, parse_delimiter
from sheetcsv.errors import ConvertError, ErrorCode
from sheetcsv.selector import SheetSelector, parse_selector


class ConverterSettings(BaseModel):
    """All tunable parameters with sensible defaults."""

    # --- Output encoding ---
    encoding: str = "utf-8"
    line_terminator: str = "\n"
    quote_char: str = '"'
    flush_each_row: bool = True

    # --- Cell rendering ---
    date_format: str | None = None

    # --- Security / resource limits ---
    max_file_size_mb: int = 500
    large_file_warning_mb: int = 50

    # --- Logging ---
    log_level: str = "WARNING"

    @classmethod
    def from_file(cls, path: str) -> ConverterSettings:
        """Load settings from a YAML or JSON file.

        File format is detected by extension: ``.yaml`` / ``.yml`` for YAML,
        ``.json`` for JSON.  Any keys present in the file override the
        corresponding defaults; keys not present retain their defaults.

        Raises:
            FileNotFoundError: If *path* does not exist.
            ValueError: If the file extension is not recognized.
            ImportError: If a YAML file is provided but ``pyyaml`` is not
                installed.
        """
        file_path = pathlib.Path(path)
        if not file_path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        suffix = file_path.suffix.lower()

        if suffix in (".yaml", ".yml"):
            try:
                import yaml  # type: ignore[import-untyped]
            except ImportError as exc:
                raise ImportError(
                    "pyyaml is required to load YAML config files. "
                    "Install it with: pip install pyyaml"
                ) from exc
            with open(file_path) as fh:
                data = yaml.safe_load(fh)
        elif suffix == ".json":
            with open(file_path) as fh:
                data = json.load(fh)
        else:
            raise ValueError(
                f"Unsupported config file extension '{suffix}'. "
                "Use .yaml, .yml, or .json."
            )

        if data is None:
            data = {}

        return cls(**data)


class OutputMode(str, Enum):
    """Where a run sends its output.  Exactly one applies per run."""

    LIST = "list"
    NAMED_FILES = "named_files"
    STDOUT = "stdout"
    POSITIONAL_FILES = "positional_files"


class ConverterConfig(BaseModel):
    """Validated, read-only options for a single conversion run.

    Build instances with :func:`build_config`, which checks option
    conflicts and parses the delimiter, selector and regex patterns before
    any file is touched.
    """

    model_config = ConfigDict(frozen=True)

    input_path: str
    outputs: tuple[str, ...] = ()
    list_sheets: bool = False
    select: SheetSelector | None = None
    use_sheet_names: bool = False
    workdir: str | None = None
    include: str | None = None
    exclude: str | None = None
    ignore_case: bool = False
    delimiter: Delimiter = DEFAULT_DELIMITER

    @property
    def mode(self) -> OutputMode:
        if self.list_sheets:
            return OutputMode.LIST
        if self.use_sheet_names:
            return OutputMode.NAMED_FILES
        if not self.outputs:
            return OutputMode.STDOUT
        return OutputMode.POSITIONAL_FILES

    def _compile(self, pattern: str | None) -> re.Pattern[str] | None:
        if pattern is None:
            return None
        return re.compile(pattern, re.IGNORECASE if self.ignore_case else 0)

    def filter_sheets(self, names: Sequence[str]) -> list[str]:
        """Return *names* passing the include/exclude patterns, in order.

        Both patterns are compiled once per call.  Include is checked
        first; exclude can then veto the name.
        """
        include = self._compile(self.include)
        exclude = self._compile(self.exclude)
        return [
            name
            for name in names
            if (include is None or include.search(name))
            and not (exclude is not None and exclude.search(name))
        ]


def _conflict(first: str, second: str) -> ConvertError:
    return ConvertError(
        code=ErrorCode.E_CONFIG_CONFLICT,
        message=f"argument {first} cannot be used with {second}",
        stage="config",
    )


def _requires(option: str, required: str) -> ConvertError:
    return ConvertError(
        code=ErrorCode.E_CONFIG_MISSING_REQUIREMENT,
        message=f"argument {option} requires {required}",
        stage="config",
    )


def build_config(
    input_path: str,
    outputs: Sequence[str] = (),
    *,
    list_sheets: bool = False,
    select: str | None = None,
    use_sheet_names: bool = False,
    workdir: str | None = None,
    include: str | None = None,
    exclude: str | None = None,
    ignore_case: bool = False,
    delimiter: str = ",",
) -> tuple[ConverterConfig | None, list[ConvertError]]:
    """Validate raw option values and build a ``ConverterConfig``.

    Every problem is collected rather than stopping at the first, so a
    user sees all of them at once.

    Returns
    -------
    tuple[ConverterConfig | None, list[ConvertError]]
        The config (``None`` when any error was found) and the errors.
    """
    errors: list[ConvertError] = []

    # --- Option conflicts ---
    if list_sheets:
        if outputs:
            errors.append(_conflict("-l/--list", "OUTPUT"))
        if select is not None:
            errors.append(_conflict("-l/--list", "-s/--select"))
        if use_sheet_names:
            errors.append(_conflict("-l/--list", "-u/--use-sheet-names"))
    if outputs:
        if select is not None:
            errors.append(_conflict("-s/--select", "OUTPUT"))
        if use_sheet_names:
            errors.append(_conflict("-u/--use-sheet-names", "OUTPUT"))
        if workdir is not None:
            errors.append(_conflict("-w/--workdir", "OUTPUT"))

    # --- Options that only make sense with --use-sheet-names ---
    if not use_sheet_names:
        for option, value in (
            ("-w/--workdir", workdir is not None),
            ("-I/--include", include is not None),
            ("-X/--exclude", exclude is not None),
            ("-i/--ignore-case", ignore_case),
        ):
            if value:
                errors.append(_requires(option, "-u/--use-sheet-names"))

    # --- Delimiter ---
    parsed_delimiter = parse_delimiter(delimiter)
    if isinstance(parsed_delimiter, ConvertError):
        errors.append(parsed_delimiter)

    # --- Regex patterns ---
    flags = re.IGNORECASE if ignore_case else 0
    for option, pattern in (("-I/--include", include), ("-X/--exclude", exclude)):
        if pattern is None:
            continue
        try:
            re.compile(pattern, flags)
        except re.error as exc:
            errors.append(
                ConvertError(
                    code=ErrorCode.E_CONFIG_BAD_PATTERN,
                    message=f"invalid regex for {option} '{pattern}': {exc}",
                    stage="config",
                )
            )

    if errors or isinstance(parsed_delimiter, ConvertError):
        return None, errors

    config = ConverterConfig(
        input_path=input_path,
        outputs=tuple(outputs),
        list_sheets=list_sheets,
        select=parse_selector(select) if select is not None else None,
        use_sheet_names=use_sheet_names,
        workdir=workdir,
        include=include,
        exclude=exclude,
        ignore_case=ignore_case,
        delimiter=parsed_delimiter,
    )
    return config, errors
