"""Tests for dolphin.output -- formats, stdout/stderr discipline, logging setup."""

from __future__ import annotations

import json
import logging

import pytest

from dolphin.output import (
    OutputFormat,
    OutputManager,
    _cell,
    get_output,
    reset_output,
    set_output,
)

COLUMNS = [("ID", "id"), ("Name", "name"), ("Region", "region.slug")]
RECORDS = [
    {"id": 1, "name": "web-1", "region": {"slug": "fra1"}},
    {"id": 2, "name": "db-1", "region": {"slug": "ams3"}},
]


class TestCell:
    def test_top_level(self) -> None:
        assert _cell({"id": 3}, "id") == "3"

    def test_dotted_path(self) -> None:
        assert _cell({"region": {"slug": "nyc3"}}, "region.slug") == "nyc3"

    def test_list_index(self) -> None:
        record = {"networks": {"v4": [{"ip_address": "10.0.0.1"}]}}
        assert _cell(record, "networks.v4.0.ip_address") == "10.0.0.1"

    def test_index_out_of_range(self) -> None:
        assert _cell({"networks": {"v4": []}}, "networks.v4.0.ip_address") == ""

    def test_missing_and_none(self) -> None:
        assert _cell({}, "region.slug") == ""
        assert _cell({"image": None}, "image") == ""

    def test_list_value_is_joined(self) -> None:
        assert _cell({"tags": ["web", "prod"]}, "tags") == "web,prod"


class TestPrintRecords:
    def test_plain_is_tab_separated(self, capsys: pytest.CaptureFixture[str]) -> None:
        OutputManager(format=OutputFormat.PLAIN).print_records(RECORDS, COLUMNS)
        lines = capsys.readouterr().out.splitlines()
        assert lines == ["ID\tName\tRegion", "1\tweb-1\tfra1", "2\tdb-1\tams3"]

    def test_json_dumps_records(self, capsys: pytest.CaptureFixture[str]) -> None:
        OutputManager(format=OutputFormat.JSON).print_records(RECORDS, COLUMNS)
        assert json.loads(capsys.readouterr().out) == RECORDS

    def test_rich_renders_table(self, capsys: pytest.CaptureFixture[str]) -> None:
        OutputManager(format=OutputFormat.RICH, no_color=True).print_records(
            RECORDS, COLUMNS, title="Droplets"
        )
        out = capsys.readouterr().out
        assert "Droplets" in out
        assert "web-1" in out
        assert "ams3" in out


class TestFormatResponse:
    def test_json(self, capsys: pytest.CaptureFixture[str]) -> None:
        OutputManager(format=OutputFormat.JSON).format_response({"id": 7})
        assert json.loads(capsys.readouterr().out) == {"id": 7}

    def test_plain_dict(self, capsys: pytest.CaptureFixture[str]) -> None:
        OutputManager(format=OutputFormat.PLAIN).format_response(
            {"id": 7, "tags": ["a", "b"], "image": None}
        )
        assert capsys.readouterr().out.splitlines() == ["id\t7", "tags\ta,b", "image\t"]


class TestDiagnostics:
    def test_messages_go_to_stderr(self, capsys: pytest.CaptureFixture[str]) -> None:
        out = OutputManager(format=OutputFormat.PLAIN, no_color=True)
        out.info("hello")
        out.warning("careful")
        out.error("broken")
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "hello" in captured.err
        assert "Warning: careful" in captured.err
        assert "Error: broken" in captured.err

    def test_quiet_suppresses_info_not_errors(self, capsys: pytest.CaptureFixture[str]) -> None:
        out = OutputManager(format=OutputFormat.PLAIN, no_color=True, quiet=True)
        out.info("hello")
        out.success("done")
        out.error("broken")
        err = capsys.readouterr().err
        assert "hello" not in err
        assert "done" not in err
        assert "broken" in err

    def test_debug_needs_verbose(self, capsys: pytest.CaptureFixture[str]) -> None:
        OutputManager(no_color=True).debug("hidden")
        OutputManager(no_color=True, verbose=True).debug("shown")
        err = capsys.readouterr().err
        assert "hidden" not in err
        assert "[debug] shown" in err


class TestFormatResolution:
    def test_auto_is_plain_when_piped(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("dolphin.output._is_tty", lambda: False)
        assert OutputManager().format == OutputFormat.PLAIN

    def test_no_color_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("NO_COLOR", "1")
        monkeypatch.setattr("dolphin.output._is_tty", lambda: True)
        assert OutputManager().format == OutputFormat.PLAIN


class TestConfigureLogging:
    def test_verbose_enables_debug(self) -> None:
        OutputManager(no_color=True, verbose=True).configure_logging()
        logger = logging.getLogger("dolphin")
        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 1
        assert logger.propagate is False

    def test_default_is_warning(self) -> None:
        OutputManager(no_color=True).configure_logging()
        assert logging.getLogger("dolphin").level == logging.WARNING

    def test_child_records_reach_stderr(self, capsys: pytest.CaptureFixture[str]) -> None:
        OutputManager(no_color=True, verbose=True).configure_logging()
        logging.getLogger("dolphin.cache.cache").debug("Cached 2 bytes")
        assert "[dolphin.cache.cache] Cached 2 bytes" in capsys.readouterr().err


class TestGlobalInstance:
    def test_set_and_reset(self) -> None:
        manager = OutputManager(format=OutputFormat.JSON)
        set_output(manager)
        assert get_output() is manager
        reset_output()
        assert get_output() is not manager
