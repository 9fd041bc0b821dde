"""Tests for the output formatting system.

Covers:
- OutputFormat resolution (auto -> rich/plain based on TTY)
- NO_COLOR / TERM=dumb color disabling
- stdout vs stderr discipline
- Progress markers (begin / done / failed)
- Quiet mode
- Labelled records and JSON documents
- Global instance management
"""

from __future__ import annotations

import json

import pytest

from periodo_cli import output as output_module
from periodo_cli.output import (
    OutputFormat,
    OutputManager,
    _should_disable_color,
    get_output,
    reset_output,
    set_output,
)


# ------------------------------------------------------------------ #
# Fixtures
# ------------------------------------------------------------------ #


@pytest.fixture()
def non_tty(monkeypatch):
    """Patch stdout.isatty() to return False."""
    monkeypatch.setattr("periodo_cli.output._is_tty", lambda: False)


@pytest.fixture()
def tty(monkeypatch):
    """Patch stdout.isatty() to return True."""
    monkeypatch.setattr("periodo_cli.output._is_tty", lambda: True)


@pytest.fixture()
def plain(non_tty) -> OutputManager:
    return OutputManager(format=OutputFormat.PLAIN, no_color=True)


# ------------------------------------------------------------------ #
# OutputFormat resolution
# ------------------------------------------------------------------ #


class TestOutputFormatResolution:
    def test_auto_resolves_to_plain_when_not_tty(self, non_tty):
        mgr = OutputManager(format=OutputFormat.AUTO)
        assert mgr.format == OutputFormat.PLAIN

    def test_auto_resolves_to_rich_when_tty(self, tty, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.delenv("TERM", raising=False)
        mgr = OutputManager(format=OutputFormat.AUTO)
        assert mgr.format == OutputFormat.RICH

    def test_auto_resolves_to_plain_when_tty_but_no_color(self, tty):
        mgr = OutputManager(format=OutputFormat.AUTO)
        assert mgr.format == OutputFormat.PLAIN

    def test_explicit_json_stays_json(self, tty):
        mgr = OutputManager(format=OutputFormat.JSON)
        assert mgr.format == OutputFormat.JSON


class TestColorDisabling:
    def test_no_color_env_any_value(self, monkeypatch):
        monkeypatch.setenv("NO_COLOR", "")
        assert _should_disable_color() is True

    def test_term_dumb_disables_color(self, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.setenv("TERM", "dumb")
        assert _should_disable_color() is True

    def test_normal_term_keeps_color(self, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.setenv("TERM", "xterm-256color")
        assert _should_disable_color() is False


# ------------------------------------------------------------------ #
# stdout vs stderr discipline
# ------------------------------------------------------------------ #


class TestStdoutStderrDiscipline:
    def test_print_data_goes_to_stdout(self, capsys, plain):
        plain.print_data("https://data.perio.do/patches/1/")
        captured = capsys.readouterr()
        assert captured.out == "https://data.perio.do/patches/1/\n"
        assert captured.err == ""

    def test_info_goes_to_stderr(self, capsys, plain):
        plain.info("some info")
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "some info" in captured.err

    def test_error_goes_to_stderr(self, capsys, plain):
        plain.error("Server returned 500")
        captured = capsys.readouterr()
        assert captured.out == ""
        assert captured.err == "Server returned 500\n"


class TestProgressMarkers:
    def test_begin_then_done_on_one_line(self, capsys, plain):
        plain.begin("Deleting graph https://x/graphs/a")
        plain.done()
        captured = capsys.readouterr()
        assert captured.out == ""
        assert captured.err == "Deleting graph https://x/graphs/a ... OK\n"

    def test_begin_then_failed(self, capsys, plain):
        plain.begin("Merging patch https://x/patches/1/")
        plain.failed()
        assert capsys.readouterr().err == "Merging patch https://x/patches/1/ ... failed\n"

    def test_quiet_suppresses_progress_but_not_failure(self, capsys, non_tty):
        mgr = OutputManager(format=OutputFormat.PLAIN, no_color=True, quiet=True)
        mgr.begin("Submitting patch")
        mgr.done()
        mgr.failed()
        mgr.error("boom")
        assert capsys.readouterr().err == "failed\nboom\n"

    def test_no_color_env_wins_over_flag(self, capsys, non_tty):
        # NO_COLOR is set by the autouse fixture in conftest
        mgr = OutputManager(format=OutputFormat.RICH, no_color=False)
        mgr.done()
        assert capsys.readouterr().err == "OK\n"


class TestQuietMode:
    def test_quiet_suppresses_info(self, capsys, non_tty):
        mgr = OutputManager(format=OutputFormat.PLAIN, no_color=True, quiet=True)
        mgr.info("should not appear")
        assert capsys.readouterr().err == ""

    def test_quiet_keeps_stdout_data(self, capsys, non_tty):
        mgr = OutputManager(format=OutputFormat.PLAIN, no_color=True, quiet=True)
        mgr.print_data("data")
        assert capsys.readouterr().out == "data\n"


# ------------------------------------------------------------------ #
# Records and documents
# ------------------------------------------------------------------ #


class TestPrintRecord:
    def test_labels_right_aligned(self, capsys, plain):
        plain.print_record([("url", "u"), ("who", "w"), ("when", "t"), ("view", "v")])
        lines = capsys.readouterr().out.split("\n")
        assert lines[:5] == [" url: u", " who: w", "when: t", "view: v", ""]


class TestPrintJson:
    def test_indented_json_on_stdout(self, capsys, non_tty):
        mgr = OutputManager(format=OutputFormat.JSON)
        mgr.print_json([{"url": "u", "who": " (anonymous)"}])
        captured = capsys.readouterr()
        assert json.loads(captured.out) == [{"url": "u", "who": " (anonymous)"}]
        assert captured.out.startswith("[\n  {")
        assert captured.err == ""


# ------------------------------------------------------------------ #
# Global instance management
# ------------------------------------------------------------------ #


class TestGlobalInstance:
    def test_get_output_creates_default(self):
        reset_output()
        assert isinstance(get_output(), OutputManager)

    def test_set_output_installs_instance(self, plain):
        set_output(plain)
        assert get_output() is plain

    def test_module_error_delegates(self, capsys, plain):
        set_output(plain)
        output_module.error("err")
        captured = capsys.readouterr()
        assert captured.out == ""
        assert captured.err == "err\n"
