"""Tests for mandate.tree.usage -- help and version text."""

from __future__ import annotations

import textwrap

from mandate.models import Spec
from mandate.tree.nodes import App, Command
from mandate.tree.usage import render_app_help, render_command_help, render_version


def _dedent(text: str) -> str:
    return textwrap.dedent(text).strip("\n")


class TestAppHelp:
    def test_builtins_only_with_one_command(self) -> None:
        app = App("tool", "1.0.0")
        app.register_command("build")
        assert render_app_help(app) == _dedent("""
            Usage: tool [options] <command>

            Options:
              -h, --help       Show this help message
              -v, --version    Show version

            Commands:
              build
        """)

    def test_no_commands_block_when_empty(self) -> None:
        help_text = render_app_help(App("tool", "1.0.0"))
        assert "Commands:" not in help_text
        assert help_text.endswith("Show version")

    def test_column_padded_to_longest_flags(self, build_spec: Spec, build_handlers: dict) -> None:
        app = App.from_spec("tool", "1.0.0", build_spec, build_handlers)
        lines = render_app_help(app).splitlines()
        assert "  -q, --quiet      less output" in lines
        assert "  -o, --out        output directory" in lines
        assert lines[-3:] == ["  build", "  remote", "  docs"]

    def test_missing_description_leaves_no_trailing_space(self) -> None:
        app = App("tool", "1.0.0")
        app.register_option("debug", ["--debug"])
        assert "  --debug" in render_app_help(app).splitlines()


class TestCommandHelp:
    def test_leaf_command(self, build_spec: Spec, build_handlers: dict) -> None:
        app = App.from_spec("tool", "1.0.0", build_spec, build_handlers)
        assert render_command_help(app.find_command("build")) == _dedent("""
            Usage: tool build [options] <target>

            Options:
              --verbose        verbose output
              -h, --help       Show this help message
              -v, --version    Show version
              -q, --quiet      less output
              -o, --out        output directory
        """)

    def test_shadowed_app_option_left_out(self, build_spec: Spec, build_handlers: dict) -> None:
        app = App.from_spec("tool", "1.0.0", build_spec, build_handlers)
        add = app.find_command("remote").find_command("add")
        assert render_command_help(add) == _dedent("""
            Usage: tool remote add [options] <name> <url>

            Options:
              -o, --out        remote output
              -h, --help       Show this help message
              -v, --version    Show version
              -q, --quiet      less output
        """)

    def test_lists_sub_commands(self, build_spec: Spec, build_handlers: dict) -> None:
        app = App.from_spec("tool", "1.0.0", build_spec, build_handlers)
        help_text = render_command_help(app.find_command("remote"))
        assert help_text.splitlines()[0] == "Usage: tool remote [options] <command>"
        assert help_text.endswith("Commands:\n  add")

    def test_partially_shadowed_option_still_listed(self) -> None:
        app = App("tool", "1.0.0")
        app.register_option("out", ["-o", "--out"])
        run = app.register_command("run")
        run.register_option("output", ["-o"])
        names = [line.split()[0] for line in render_command_help(run).splitlines()[3:]]
        assert names == ["-o", "-h,", "-v,", "-o,"]

    def test_detached_command(self) -> None:
        command = Command("solo")
        command.register_param("file")
        assert render_command_help(command) == "Usage: solo [options] <file>"


class TestVersion:
    def test_prefixed_with_v(self) -> None:
        assert render_version(App("tool", "1.0.0")) == "v1.0.0"
