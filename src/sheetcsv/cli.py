"""Command-line interface for sheetcsv.

Usage:
    sheetcsv input.xlsx                      # first sheet to stdout
    sheetcsv input.xlsx -s 1                 # second sheet to stdout
    sheetcsv input.xlsx -s Data -d '\\t'      # sheet "Data" as TSV
    sheetcsv input.xlsx a.csv b.csv          # sheets 1 and 2 to files
    sheetcsv input.xlsx -l                   # list sheet names
    sheetcsv input.xlsx -u -w out/           # every sheet to out/<name>.csv
    sheetcsv input.xlsx -u -I 'Sheet' -X 'X' # filter sheets by regex

Sheet ids are zero-based.  In ``--use-sheet-names`` mode the include
pattern is applied first and the exclude pattern second.  The output file
extension follows the delimiter: tab gives ``.tsv``, anything else ``.csv``.
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Sequence

from sheetcsv import __version__
from sheetcsv.config import ConverterSettings, build_config
from sheetcsv.router import SheetRouter

logger = logging.getLogger("sheetcsv")

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sheetcsv",
        description=(
            "Convert spreadsheet workbooks (.xls .xlsx .xlsb .xlsm .ods) "
            "to CSV or TSV."
        ),
        epilog=(
            "If no OUTPUT is given the first sheet (or the one chosen with "
            "--select) is written to stdout."
        ),
    )
    parser.add_argument(
        "xlsx", help="Input Excel-like file: .xls .xlsx .xlsb .xlsm .ods"
    )
    parser.add_argument(
        "output",
        nargs="*",
        help="Output file for each sheet, in workbook order",
    )
    parser.add_argument(
        "-l", "--list", action="store_true", help="List sheet names and exit"
    )
    parser.add_argument(
        "-s",
        "--select",
        metavar="ID_OR_NAME",
        help="Sheet to write to stdout, by 0-based id or by name",
    )
    parser.add_argument(
        "-u",
        "--use-sheet-names",
        "--sheet",
        dest="use_sheet_names",
        action="store_true",
        help="Write every sheet to <sheet name>.<ext> (in --workdir)",
    )
    parser.add_argument(
        "-w",
        "--workdir",
        help="Output directory for --use-sheet-names",
    )
    parser.add_argument(
        "-I",
        "--include",
        metavar="REGEX",
        help="Only sheets whose name matches REGEX, used with -u",
    )
    parser.add_argument(
        "-X",
        "--exclude",
        metavar="REGEX",
        help="Skip sheets whose name matches REGEX, used with -u",
    )
    parser.add_argument(
        "-i",
        "--ignore-case",
        action="store_true",
        help="Match --include/--exclude case-insensitively, used with -u",
    )
    parser.add_argument(
        "-d",
        "--delimiter",
        default=",",
        help=r"Field delimiter, a single ASCII character or \t (default: ,)",
    )
    parser.add_argument(
        "-c",
        "--config",
        metavar="FILE",
        help="Settings file (.yaml, .yml or .json)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Log progress to stderr (-vv for debug output)",
    )
    parser.add_argument(
        "-V", "--version", action="version", version=f"%(prog)s {__version__}"
    )
    return parser


def _configure_logging(verbosity: int, settings: ConverterSettings) -> None:
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = getattr(logging, settings.log_level.upper(), logging.WARNING)
    logging.basicConfig(
        level=level,
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.config:
        try:
            settings = ConverterSettings.from_file(args.config)
        except (OSError, ValueError, ImportError) as exc:
            parser.error(f"cannot load config {args.config}: {exc}")
    else:
        settings = ConverterSettings()

    _configure_logging(args.verbose, settings)

    config, errors = build_config(
        args.xlsx,
        args.output,
        list_sheets=args.list,
        select=args.select,
        use_sheet_names=args.use_sheet_names,
        workdir=args.workdir,
        include=args.include,
        exclude=args.exclude,
        ignore_case=args.ignore_case,
        delimiter=args.delimiter,
    )
    if errors or config is None:
        parser.print_usage(sys.stderr)
        for err in errors:
            print(f"{parser.prog}: error: {err.message}", file=sys.stderr)
        return EXIT_USAGE

    result = SheetRouter(settings).run(config)
    if not result.ok:
        for err in result.error_details:
            if err.is_fatal:
                print(f"{parser.prog}: error: {err.message}", file=sys.stderr)
        return EXIT_FAILURE
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
