"""Shared test fixtures for mandate.

Provides reusable fixtures for spec documents, recording handlers, output
state and the Typer CLI runner. These fixtures are automatically discovered
by pytest and available to all test modules without explicit imports.
"""

from __future__ import annotations

import textwrap
from pathlib import Path
from typing import Any

import pytest

from mandate.models import Spec
from mandate.output import OutputFormat, OutputManager, reset_output, set_output


BUILD_SPEC_YAML = textwrap.dedent("""\
    options:
      quiet:
        flags: ["-q", "--quiet"]
        description: less output
        type: flag
      out:
        flags: ["-o", "--out"]
        description: output directory
    commands:
      build:
        handler: build
        params:
          target: { type: string }
        options:
          verbose: { flags: ["--verbose"], description: "verbose output", type: flag }
      remote:
        handler: remote
        options:
          remote_out: { flags: ["-o", "--out"], description: "remote output" }
        commands:
          add:
            handler: remote_add
            params:
              name: {}
              url: {}
      docs: {}
""")


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time. When capsys or CliRunner redirect those streams and the
    test finishes, the cached references become stale. Resetting forces a
    fresh manager to be created on next use.
    """
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Spec fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def build_spec_raw() -> dict[str, Any]:
    """Decoded form of :data:`BUILD_SPEC_YAML`."""
    import yaml

    return yaml.safe_load(BUILD_SPEC_YAML)


@pytest.fixture
def build_spec(build_spec_raw: dict[str, Any]) -> Spec:
    """Parsed spec with global options, nested commands and a handler-less command."""
    return Spec.parse(build_spec_raw)


@pytest.fixture
def build_spec_file(tmp_path: Path) -> Path:
    """:data:`BUILD_SPEC_YAML` written to a temporary ``cli.yaml``."""
    path = tmp_path / "cli.yaml"
    path.write_text(BUILD_SPEC_YAML, encoding="utf-8")
    return path


# ---------------------------------------------------------------------------
# Handler fixtures
# ---------------------------------------------------------------------------


class Recorder:
    """Collects handler invocations as ``(name, options, params)`` tuples."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, dict[str, str], dict[str, str]]] = []

    def command(self, name: str, delegate: bool = False):
        """Return a synchronous command handler that records and optionally delegates."""

        def handler(options, params, parent):
            self.calls.append((name, dict(options), dict(params)))
            if delegate:
                return parent()
            return None

        return handler

    def root(self, name: str = "default"):
        def handler(options, params):
            self.calls.append((name, dict(options), dict(params)))

        return handler

    @property
    def names(self) -> list[str]:
        return [call[0] for call in self.calls]


@pytest.fixture
def recorder() -> Recorder:
    return Recorder()


@pytest.fixture
def build_handlers(recorder: Recorder) -> dict[str, Any]:
    """Handlers for every name :data:`BUILD_SPEC_YAML` references."""
    return {
        "default": recorder.root(),
        "build": recorder.command("build"),
        "remote": recorder.command("remote"),
        "remote_add": recorder.command("remote_add"),
    }


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def plain_output() -> OutputManager:
    """Install a PLAIN, colourless output manager so captured text is stable."""
    output = OutputManager(format=OutputFormat.PLAIN, no_color=True)
    set_output(output)
    yield output
    reset_output()


# ---------------------------------------------------------------------------
# CLI runner fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()
