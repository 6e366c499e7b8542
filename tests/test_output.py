"""Tests for mandate.output.

Covers:
- OutputFormat resolution (auto -> rich/plain based on TTY)
- NO_COLOR / TERM=dumb color disabling
- stdout vs stderr discipline, quiet and verbose rules
- print_table in all three modes
- Global instance management and convenience functions
"""

from __future__ import annotations

import json

import pytest

from mandate import output as output_module
from mandate.output import (
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
    monkeypatch.setattr("mandate.output._is_tty", lambda: False)


@pytest.fixture()
def tty(monkeypatch):
    monkeypatch.setattr("mandate.output._is_tty", lambda: True)
    monkeypatch.delenv("NO_COLOR", raising=False)
    monkeypatch.delenv("TERM", raising=False)


def _plain(**kwargs) -> OutputManager:
    return OutputManager(format=OutputFormat.PLAIN, no_color=True, **kwargs)


# ------------------------------------------------------------------ #
# Format and colour resolution
# ------------------------------------------------------------------ #


class TestFormatResolution:
    """AUTO is resolved once, from the TTY and colour settings."""

    headers = ["Command"]
    rows = [["build"]]

    def _table(self, capfd, mgr: OutputManager) -> str:
        mgr.print_table(self.headers, self.rows)
        return capfd.readouterr().out

    def test_auto_is_plain_when_piped(self, capfd, non_tty):
        assert self._table(capfd, OutputManager()) == "Command\nbuild\n"

    def test_auto_is_rich_on_terminal(self, capfd, tty):
        out = self._table(capfd, OutputManager())
        assert "build" in out
        assert out != "Command\nbuild\n"

    def test_no_color_flag_forces_plain_on_terminal(self, capfd, tty):
        assert self._table(capfd, OutputManager(no_color=True)) == "Command\nbuild\n"

    def test_explicit_format_kept(self, capfd, tty):
        out = self._table(capfd, OutputManager(format=OutputFormat.JSON))
        assert json.loads(out) == [{"Command": "build"}]


class TestColorDisabling:
    def test_no_color_env_any_value(self, monkeypatch):
        monkeypatch.setenv("NO_COLOR", "")
        assert _should_disable_color() is True

    def test_term_dumb(self, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.setenv("TERM", "dumb")
        assert _should_disable_color() is True

    def test_normal_terminal(self, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.setenv("TERM", "xterm-256color")
        assert _should_disable_color() is False


# ------------------------------------------------------------------ #
# Stream discipline
# ------------------------------------------------------------------ #


class TestStreams:
    """Data goes to stdout, diagnostics to stderr."""

    def test_print_data_to_stdout(self, capfd, non_tty):
        _plain().print_data("Usage: tool [options] <command>")
        captured = capfd.readouterr()
        assert captured.out == "Usage: tool [options] <command>\n"
        assert captured.err == ""

    @pytest.mark.parametrize("method", ["success", "error"])
    def test_diagnostics_to_stderr(self, capfd, non_tty, method):
        getattr(_plain(), method)("message")
        captured = capfd.readouterr()
        assert captured.out == ""
        assert "message" in captured.err

    def test_error_prefix(self, capfd, non_tty):
        _plain().error("Unknown option --bogus")
        assert capfd.readouterr().err == "Error: Unknown option --bogus\n"

    def test_markup_in_message_not_interpreted(self, capfd, non_tty, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.delenv("TERM", raising=False)
        OutputManager(format=OutputFormat.PLAIN).success("Wrote [bold]raw[/bold].pyi")
        assert "Wrote [bold]raw[/bold].pyi" in capfd.readouterr().err


class TestQuietAndVerbose:
    def test_quiet_suppresses_success(self, capfd, non_tty):
        _plain(quiet=True).success("done")
        assert capfd.readouterr().err == ""

    def test_quiet_keeps_error(self, capfd, non_tty):
        _plain(quiet=True).error("failed")
        assert capfd.readouterr().err == "Error: failed\n"

    def test_quiet_keeps_data(self, capfd, non_tty):
        _plain(quiet=True).print_data("v1.0.0")
        assert capfd.readouterr().out == "v1.0.0\n"

    def test_debug_hidden_by_default(self, capfd, non_tty):
        _plain().debug("hidden")
        assert capfd.readouterr().err == ""

    def test_debug_shown_with_verbose(self, capfd, non_tty):
        _plain(verbose=True).debug("Loading spec from cli.yaml")
        assert capfd.readouterr().err == "[debug] Loading spec from cli.yaml\n"


# ------------------------------------------------------------------ #
# print_table
# ------------------------------------------------------------------ #


class TestPrintTable:
    headers = ["Command", "Handler"]
    rows = [["build", "build"], ["remote add", "remote_add"]]

    def test_json(self, capfd, non_tty):
        OutputManager(format=OutputFormat.JSON, no_color=True).print_table(self.headers, self.rows)
        captured = capfd.readouterr()
        assert json.loads(captured.out) == [
            {"Command": "build", "Handler": "build"},
            {"Command": "remote add", "Handler": "remote_add"},
        ]
        assert captured.err == ""

    def test_json_empty(self, capfd, non_tty):
        OutputManager(format=OutputFormat.JSON).print_table(self.headers, [])
        assert json.loads(capfd.readouterr().out) == []

    def test_plain_is_tab_separated_without_title(self, capfd, non_tty):
        _plain().print_table(self.headers, self.rows, title="cli.yaml")
        assert capfd.readouterr().out.splitlines() == [
            "Command\tHandler",
            "build\tbuild",
            "remote add\tremote_add",
        ]

    def test_rich(self, capfd, non_tty):
        OutputManager(format=OutputFormat.RICH, no_color=True).print_table(
            self.headers, self.rows, title="cli.yaml"
        )
        out = capfd.readouterr().out
        assert "cli.yaml" in out
        assert "remote_add" in out


# ------------------------------------------------------------------ #
# Global instance
# ------------------------------------------------------------------ #


class TestGlobalInstance:
    def test_lazily_created(self):
        reset_output()
        assert output_module._output is None
        assert isinstance(get_output(), OutputManager)
        assert get_output() is get_output()

    def test_set_and_reset(self):
        mgr = _plain()
        set_output(mgr)
        assert get_output() is mgr
        reset_output()
        assert get_output() is not mgr

    def test_convenience_functions_use_global(self, capfd, non_tty):
        set_output(_plain(verbose=True))
        output_module.print_data("data")
        output_module.success("done")
        output_module.error("failed")
        output_module.debug("trace")
        output_module.print_table(["Command"], [["build"]])
        captured = capfd.readouterr()
        assert captured.out == "data\nCommand\nbuild\n"
        assert captured.err == "done\nError: failed\n[debug] trace\n"
