"""Typer application and console-script entry point for the ``mandate`` tool.

The tool works on spec files; it never runs the CLIs they describe:

* ``mandate typedef SPEC DEST`` -- render the typed stub module for a spec.
* ``mandate inspect SPEC`` -- print the command tree a spec describes.

The :func:`main` function is the console-script entry point declared in
``pyproject.toml``. It installs a SIGINT handler, invokes the Typer app, and
maps :class:`~mandate.exceptions.MandateError` to its exit code.

See Also:
    :mod:`mandate.output`: Output formatting initialised in :func:`main_callback`.
"""

from __future__ import annotations

import logging
import signal
import sys
from typing import Any, Optional

import typer

from mandate import __version__
from mandate.exceptions import MandateError
from mandate.exit_codes import EXIT_CANCELLED, EXIT_GENERIC_FAILURE
from mandate.models import Spec
from mandate.output import debug, error, print_table, success

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="mandate",
    help="Build command lines from declarative YAML specs.",
    no_args_is_help=True,
    add_completion=False,
)


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"mandate {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    json_output: bool = typer.Option(
        False, "--json", help="JSON output format."
    ),
    plain_output: bool = typer.Option(
        False, "--plain", help="Plain text output."
    ),
    no_color: bool = typer.Option(
        False, "--no-color", help="Disable color output."
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Suppress non-essential output."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-V", help="Enable debug output."
    ),
) -> None:
    """Root callback executed before every sub-command.

    Installs the global :class:`~mandate.output.OutputManager` from the CLI
    flags and, with ``--verbose``, routes the library's debug logging to
    stderr.
    """
    from mandate.output import OutputFormat, OutputManager, set_output

    fmt = OutputFormat.AUTO
    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN

    set_output(OutputManager(format=fmt, no_color=no_color, quiet=quiet, verbose=verbose))

    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="[%(name)s] %(levelname)s: %(message)s",
            stream=sys.stderr,
        )


def _load(spec_path: str) -> Spec:
    """Load *spec_path*, turning failures into a clean exit."""
    from mandate.parser import load_spec

    debug(f"Loading spec from {spec_path}")
    try:
        return load_spec(spec_path)
    except MandateError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None


@app.command("typedef")
def typedef_command(
    spec_path: str = typer.Argument(..., help="Spec file path, URL, or '-' for stdin."),
    dest_path: str = typer.Argument(..., help="Where to write the stub module."),
    module_name: Optional[str] = typer.Option(
        None, "--module-name", "-m", help="Name used in the stub docstring."
    ),
) -> None:
    """Generate a typed stub module for the handlers of a spec.

    Example::

        mandate typedef cli.yaml src/tool/cli_types.pyi
    """
    from mandate.typedef import generate_typedef

    spec = _load(spec_path)
    try:
        written = generate_typedef(spec, dest_path, module_name)
    except MandateError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None
    except OSError as exc:
        error(f"Failed to write {dest_path}: {exc}")
        raise typer.Exit(code=EXIT_GENERIC_FAILURE) from None

    success(f"Wrote {written}")


@app.command("inspect")
def inspect_command(
    spec_path: str = typer.Argument(..., help="Spec file path, URL, or '-' for stdin."),
) -> None:
    """List every command a spec declares with its handler, params and options.

    Example::

        mandate inspect cli.yaml
        mandate --json inspect cli.yaml
    """
    spec = _load(spec_path)

    headers = ["Command", "Handler", "Params", "Options"]
    rows: list[list[str]] = [[
        "(global)",
        "default",
        "",
        ", ".join(spec.options),
    ]]
    for path, command in spec.walk():
        rows.append([
            " ".join(path),
            command.handler,
            " ".join(f"<{name}>" for name in command.params),
            ", ".join(command.options),
        ])

    print_table(headers, rows, title=f"{spec_path} ({len(rows) - 1} commands)")


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(EXIT_CANCELLED)

    signal.signal(signal.SIGINT, _handler)


def main() -> None:
    """CLI entry point invoked by the ``mandate`` console script.

    Unhandled :class:`~mandate.exceptions.MandateError` instances cause a
    clean exit with the error's ``exit_code``. Any other exception is
    reported on stderr (with a traceback under ``--verbose``) and exits
    with :data:`~mandate.exit_codes.EXIT_GENERIC_FAILURE`.

    Raises:
        SystemExit: Always raised (either by Typer or explicitly).
    """
    _setup_signal_handlers()
    try:
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(EXIT_CANCELLED)
    except MandateError as exc:
        error(str(exc))
        sys.exit(exc.exit_code)
    except Exception as exc:
        logger.debug("Unexpected error", exc_info=True)
        error(f"Unexpected error: {exc}")
        sys.exit(EXIT_GENERIC_FAILURE)
