"""mandate -- declarative command lines from a YAML specification.

A developer describes commands, options and positional params in a YAML
document; mandate builds a runtime dispatcher from it and can emit a typed
stub module so handlers get IDE and type-checker support.

Typical workflow::

    import mandate

    spec = mandate.load_spec("cli.yaml")
    app = mandate.create_app("tool", "1.0.0", spec, {"build": build})
    app.run()

    $ mandate typedef cli.yaml tool_cli.pyi   # generate handler stubs

Modules:
    models: Pydantic models for the YAML specification.
    tree: Command tree, tokenizer, binder and dispatcher.
    parser: Spec loading from files, URLs and stdin.
    typedef: Jinja2-based stub generation.
    app: Typer application for the ``mandate`` tool itself.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes following clig.dev conventions.
    output: stdout/stderr formatting system with Rich support.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

__version__ = "0.3.0"

from mandate.exceptions import (  # noqa: E402
    HandlerError,
    InvalidSpecError,
    MandateError,
    TemplateError,
    UnknownHandlerError,
    UnknownOptionError,
)
from mandate.models import Spec, SpecCommand, SpecOption, SpecParam  # noqa: E402
from mandate.parser import load_spec  # noqa: E402
from mandate.tree import App, Command, Option, Param  # noqa: E402
from mandate.typedef import generate_typedef  # noqa: E402


def create_app(
    name: str,
    version: str,
    spec: Spec,
    handlers: Mapping[str, Callable[..., Any]],
) -> App:
    """Build an :class:`~mandate.tree.nodes.App` from *spec* and a handler mapping.

    Raises:
        UnknownHandlerError: If the spec references a handler not in *handlers*.
    """
    return App.from_spec(name, version, spec, handlers)


__all__ = [
    "App",
    "Command",
    "HandlerError",
    "InvalidSpecError",
    "MandateError",
    "Option",
    "Param",
    "Spec",
    "SpecCommand",
    "SpecOption",
    "SpecParam",
    "TemplateError",
    "UnknownHandlerError",
    "UnknownOptionError",
    "create_app",
    "generate_typedef",
    "load_spec",
]
