"""Tests for sheetcsv.router.SheetRouter across the four output modes."""

from __future__ import annotations

import io
import logging
from pathlib import Path

import pytest

from sheetcsv.config import ConverterConfig, ConverterSettings, OutputMode, build_config
from sheetcsv.errors import ErrorCode
from sheetcsv.router import STDOUT_DESTINATION, SheetRouter


def _config(input_path: str, *outputs: str, **kwargs) -> ConverterConfig:
    config, errors = build_config(input_path, list(outputs), **kwargs)
    assert errors == []
    assert config is not None
    return config


def _run(config: ConverterConfig, **router_kwargs):
    out = io.StringIO()
    result = SheetRouter(stdout=out, **router_kwargs).run(config)
    return result, out.getvalue()


# ---------------------------------------------------------------------------
# List mode
# ---------------------------------------------------------------------------


class TestListMode:
    def test_prints_names_in_order(self, three_sheet_xlsx):
        result, out = _run(_config(three_sheet_xlsx, list_sheets=True))
        assert result.ok
        assert result.mode is OutputMode.LIST
        assert out == "Sheet1\nData\nSheetX\n"
        assert result.written == []

    def test_reads_no_rows(self, placeholder_xlsx, fake_reader_factory, tmp_path):
        factory, reader = fake_reader_factory({"B": [["1"]], "A": [["2"]]})
        result, out = _run(
            _config(placeholder_xlsx, list_sheets=True), reader_factory=factory
        )
        assert out == "B\nA\n"
        assert reader.reads == []
        assert reader.closed
        assert sorted(p.name for p in tmp_path.iterdir()) == ["placeholder.xlsx"]


# ---------------------------------------------------------------------------
# Stdout mode
# ---------------------------------------------------------------------------


class TestStdoutMode:
    def test_first_sheet_by_default(self, three_sheet_xlsx):
        result, out = _run(_config(three_sheet_xlsx))
        assert result.ok
        assert out == "Name,Age\nAlice,30\nBob,25\n"
        assert len(result.written) == 1
        assert result.written[0].sheet_name == "Sheet1"
        assert result.written[0].destination == STDOUT_DESTINATION
        assert result.written[0].records == 3

    def test_select_by_id(self, three_sheet_xlsx):
        result, out = _run(_config(three_sheet_xlsx, select="1"))
        assert result.ok
        assert out == "Product,Price\nWidget,9.5\n"

    def test_select_by_name(self, three_sheet_xlsx):
        result, out = _run(_config(three_sheet_xlsx, select="SheetX"))
        assert out == "City\nTokyo\n"

    def test_select_id_out_of_range(self, three_sheet_xlsx):
        result, out = _run(_config(three_sheet_xlsx, select="3"))
        assert not result.ok
        assert result.errors == [ErrorCode.E_SELECT_ID_OUT_OF_RANGE.value]
        assert out == ""

    def test_select_missing_name(self, three_sheet_xlsx):
        result, out = _run(_config(three_sheet_xlsx, select="Nope"))
        assert result.errors == [ErrorCode.E_SELECT_NAME_NOT_FOUND.value]
        assert "Sheet1, Data, SheetX" in result.error_details[0].message
        assert out == ""

    def test_tab_delimiter(self, make_xlsx):
        path = make_xlsx({"S": [["a", "b"], [1, 2]]})
        result, out = _run(_config(path, delimiter=r"\t"))
        assert out == "a\tb\n1\t2\n"

    def test_semicolon_delimiter(self, make_xlsx):
        path = make_xlsx({"S": [["a;b", "c"]]})
        result, out = _run(_config(path, delimiter=";"))
        assert out == '"a;b";c\n'

    def test_empty_sheet_writes_nothing(self, make_xlsx):
        path = make_xlsx({"Empty": [], "Full": [["x"]]})
        result, out = _run(_config(path))
        assert result.ok
        assert out == ""
        assert result.written[0].records == 0

    def test_projection_of_cell_types(self, make_xlsx):
        path = make_xlsx({"S": [[1, 2.5, "x", True, False]]})
        result, out = _run(_config(path))
        assert out == "1,2.5,x,true,false\n"


# ---------------------------------------------------------------------------
# Positional-files mode
# ---------------------------------------------------------------------------


class TestPositionalFilesMode:
    def test_pairs_sheets_with_outputs(self, three_sheet_xlsx, tmp_path):
        a = str(tmp_path / "a.csv")
        b = str(tmp_path / "b.csv")
        c = str(tmp_path / "c.csv")
        result, out = _run(_config(three_sheet_xlsx, a, b, c))
        assert result.ok
        assert out == f"{a}\n{b}\n{c}\n"
        assert Path(a).read_text() == "Name,Age\nAlice,30\nBob,25\n"
        assert Path(b).read_text() == "Product,Price\nWidget,9.5\n"
        assert Path(c).read_text() == "City\nTokyo\n"
        assert result.warnings == []

    def test_fewer_outputs_than_sheets(self, three_sheet_xlsx, tmp_path):
        a = str(tmp_path / "a.csv")
        b = str(tmp_path / "b.csv")
        result, out = _run(_config(three_sheet_xlsx, a, b))
        assert result.ok
        assert [w.sheet_name for w in result.written] == ["Sheet1", "Data"]
        assert out == f"{a}\n{b}\n"
        assert sorted(p.name for p in tmp_path.iterdir()) == [
            "a.csv",
            "b.csv",
            "book.xlsx",
        ]
        assert result.warnings == [ErrorCode.W_OUTPUT_COUNT_MISMATCH.value]

    def test_more_outputs_than_sheets(self, make_xlsx, tmp_path):
        path = make_xlsx({"Only": [["x"]]})
        a = str(tmp_path / "a.csv")
        b = str(tmp_path / "b.csv")
        result, out = _run(_config(path, a, b))
        assert result.ok
        assert out == f"{a}\n"
        assert not Path(b).exists()
        assert result.warnings == [ErrorCode.W_OUTPUT_COUNT_MISMATCH.value]

    def test_unwritable_output_aborts(self, three_sheet_xlsx, tmp_path):
        a = str(tmp_path / "a.csv")
        bad = str(tmp_path / "missing-dir" / "b.csv")
        c = str(tmp_path / "c.csv")
        result, out = _run(_config(three_sheet_xlsx, a, bad, c))
        assert result.errors == [ErrorCode.E_WRITE_OPEN_FAILED.value]
        assert Path(a).exists()
        assert not Path(c).exists()
        assert [w.sheet_name for w in result.written] == ["Sheet1"]


# ---------------------------------------------------------------------------
# Named-files mode
# ---------------------------------------------------------------------------


class TestNamedFilesMode:
    def test_writes_every_sheet_to_workdir(self, three_sheet_xlsx, tmp_path):
        workdir = tmp_path / "out"
        workdir.mkdir()
        result, out = _run(
            _config(three_sheet_xlsx, use_sheet_names=True, workdir=str(workdir))
        )
        assert result.ok
        expected = [str(workdir / f"{n}.csv") for n in ["Sheet1", "Data", "SheetX"]]
        assert out.splitlines() == expected
        assert (workdir / "Data.csv").read_text() == "Product,Price\nWidget,9.5\n"

    def test_include_then_exclude(self, three_sheet_xlsx, tmp_path):
        result, out = _run(
            _config(
                three_sheet_xlsx,
                use_sheet_names=True,
                workdir=str(tmp_path),
                include="Sheet",
                exclude="X",
            )
        )
        assert result.ok
        assert [w.sheet_name for w in result.written] == ["Sheet1"]
        assert (tmp_path / "Sheet1.csv").exists()
        assert not (tmp_path / "SheetX.csv").exists()
        assert not (tmp_path / "Data.csv").exists()

    def test_ignore_case(self, three_sheet_xlsx, tmp_path):
        result, _ = _run(
            _config(
                three_sheet_xlsx,
                use_sheet_names=True,
                workdir=str(tmp_path),
                include="^data$",
                ignore_case=True,
            )
        )
        assert [w.sheet_name for w in result.written] == ["Data"]

    def test_tab_delimiter_gives_tsv(self, three_sheet_xlsx, tmp_path):
        result, out = _run(
            _config(
                three_sheet_xlsx,
                use_sheet_names=True,
                workdir=str(tmp_path),
                include="Data",
                delimiter=r"\t",
            )
        )
        assert out == f"{tmp_path / 'Data.tsv'}\n"
        assert (tmp_path / "Data.tsv").read_text() == "Product\tPrice\nWidget\t9.5\n"

    def test_pipe_delimiter_still_csv(self, three_sheet_xlsx, tmp_path):
        result, out = _run(
            _config(
                three_sheet_xlsx,
                use_sheet_names=True,
                workdir=str(tmp_path),
                include="Data",
                delimiter="|",
            )
        )
        assert (tmp_path / "Data.csv").read_text() == "Product|Price\nWidget|9.5\n"

    def test_default_workdir_is_cwd(self, three_sheet_xlsx, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        result, out = _run(
            _config(three_sheet_xlsx, use_sheet_names=True, include="City|SheetX")
        )
        assert out == "SheetX.csv\n"
        assert (tmp_path / "SheetX.csv").read_text() == "City\nTokyo\n"

    def test_nothing_matched_warns(self, three_sheet_xlsx, tmp_path):
        result, out = _run(
            _config(
                three_sheet_xlsx,
                use_sheet_names=True,
                workdir=str(tmp_path),
                include="zzz",
            )
        )
        assert result.ok
        assert out == ""
        assert result.warnings == [ErrorCode.W_NO_SHEETS_MATCHED.value]

    def test_missing_workdir_aborts(self, three_sheet_xlsx, tmp_path):
        result, _ = _run(
            _config(
                three_sheet_xlsx,
                use_sheet_names=True,
                workdir=str(tmp_path / "nope"),
            )
        )
        assert result.errors == [ErrorCode.E_WRITE_OPEN_FAILED.value]
        assert result.written == []


# ---------------------------------------------------------------------------
# Failures before any output
# ---------------------------------------------------------------------------


class TestOpenFailures:
    def test_missing_input(self, tmp_path):
        result, out = _run(_config(str(tmp_path / "missing.xlsx")))
        assert result.errors == [ErrorCode.E_OPEN_NOT_FOUND.value]
        assert out == ""

    def test_corrupt_input(self, tmp_path):
        path = tmp_path / "bad.xlsx"
        path.write_bytes(b"PK\x03\x04 definitely not a workbook")
        result, _ = _run(_config(str(path)))
        assert result.errors == [ErrorCode.E_OPEN_CORRUPT.value]

    def test_password_message_mapped(self, placeholder_xlsx):
        def factory(path):
            raise RuntimeError("Workbook is encrypted")

        result, _ = _run(_config(placeholder_xlsx), reader_factory=factory)
        assert result.errors == [ErrorCode.E_OPEN_PASSWORD.value]

    def test_zero_sheets(self, placeholder_xlsx, fake_reader_factory):
        factory, reader = fake_reader_factory({})
        result, out = _run(_config(placeholder_xlsx), reader_factory=factory)
        assert result.errors == [ErrorCode.E_OPEN_NO_SHEETS.value]
        assert reader.closed

    def test_sheet_read_failure(self, placeholder_xlsx, fake_reader_factory):
        factory, reader = fake_reader_factory({"A": [["x"]]})
        def broken(name):
            raise OSError("boom")

        reader.worksheet_range = broken
        result, _ = _run(_config(placeholder_xlsx), reader_factory=factory)
        assert result.errors == [ErrorCode.E_READ_SHEET_FAILED.value]
        assert result.error_details[-1].sheet_name == "A"

    def test_error_is_logged(self, tmp_path, caplog):
        with caplog.at_level(logging.ERROR, logger="sheetcsv"):
            _run(_config(str(tmp_path / "missing.xlsx")))
        assert "E_OPEN_NOT_FOUND" in caplog.text


class TestSettings:
    def test_date_format_applies(self, make_xlsx):
        import datetime

        path = make_xlsx({"D": [[datetime.datetime(2024, 2, 29, 12, 0)]]})
        settings = ConverterSettings(date_format="%Y-%m-%d")
        result, out = _run(_config(path), settings=settings)
        assert out == "2024-02-29\n"

    def test_size_limit_blocks_run(self, three_sheet_xlsx):
        settings = ConverterSettings(max_file_size_mb=0)
        result, out = _run(_config(three_sheet_xlsx), settings=settings)
        assert result.errors == [ErrorCode.E_SECURITY_TOO_LARGE.value]
        assert out == ""
