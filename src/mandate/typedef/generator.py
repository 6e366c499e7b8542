"""Render a typed stub module from a CLI specification.

The stub gives IDEs and type checkers the shapes that handlers receive at
runtime. For a spec it declares:

* ``GlobalOptions`` -- a ``TypedDict`` of the App's options (built-ins
  included).
* ``<Path>Options`` / ``<Path>Params`` -- per command, the options visible
  from that command (its own plus every ancestor's plus the globals) and its
  positional params.
* ``<Path>Handler`` -- a ``Protocol`` for the command's handler signature.
* ``Handlers`` -- a ``TypedDict`` keyed by handler name, suitable for
  annotating the mapping passed to :meth:`~mandate.tree.nodes.App.from_spec`.

All value types are ``str`` because bound values are never coerced; the
declared ``type`` is carried into the stub as a comment.

Class names never repeat: when a command's derived prefix would redefine a
fixed name (``GlobalOptions``, ``DefaultHandler``, ...) or another command's
classes (``add-url`` and ``add_url`` both give ``AddUrl``), a numeric suffix
is appended (``Global2``, ``AddUrl2``).

The generation process:

1. A Jinja2 environment is configured with templates from ``typedef/templates/``.
2. The spec is walked and every command becomes a context entry with
   derived class names.
3. The template is rendered and, for :func:`generate_typedef`, written to disk.
"""

from __future__ import annotations

import functools
import logging
import re
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Optional

import jinja2
from jinja2 import Environment, FileSystemLoader

from mandate.exceptions import TemplateError
from mandate.models import Spec, SpecCommand, SpecOption
from mandate.tree.nodes import DEFAULT_HANDLER, HELP_OPTION, VERSION_OPTION

logger = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).parent / "templates"
"""Path to the Jinja2 template directory (``typedef/templates/``)."""

TYPEDEF_TEMPLATE = "typedef.pyi.j2"

GENERIC_HANDLER = "CommandHandler"
"""Protocol used for handler names shared by several commands."""

RESERVED_NAMES = frozenset(
    {"Parent", "GlobalOptions", "DefaultHandler", GENERIC_HANDLER, "Handlers"}
)
"""Module-level names the template always defines."""

CLASS_SUFFIXES = ("Options", "Params", "Handler")


def generate_typedef(
    spec: Spec,
    dest: str | Path,
    module_name: Optional[str] = None,
) -> Path:
    """Render the stub for *spec* and write it to *dest*.

    Parent directories are created as needed.

    Args:
        spec: The CLI specification.
        dest: Output file path, usually ending in ``.pyi`` or ``.py``.
        module_name: Name shown in the stub's docstring. Defaults to the
            stem of *dest*.

    Returns:
        The resolved output path.

    Raises:
        TemplateError: If the template cannot be loaded or rendered.
    """
    dest_path = Path(dest)
    content = render_typedef(spec, module_name or dest_path.stem)

    dest_path.parent.mkdir(parents=True, exist_ok=True)
    dest_path.write_text(content, encoding="utf-8")
    logger.debug("Wrote typedef for %d command(s) to %s", len(spec.commands), dest_path)
    return dest_path.resolve()


def render_typedef(spec: Spec, module_name: str = "cli") -> str:
    """Return the stub module source for *spec* without writing it."""
    template = _load_template(TYPEDEF_TEMPLATE)
    try:
        return template.render(_build_context(spec, module_name))
    except jinja2.TemplateError as exc:
        raise TemplateError(f"Failed to render {TYPEDEF_TEMPLATE}: {exc}") from exc


@functools.lru_cache(maxsize=None)
def _create_jinja_env() -> Environment:
    """Create the Jinja2 environment for stub templates.

    Autoescape stays off since the output is Python source. The environment
    (and with it the compiled-template cache) is created once per process.
    """
    env = Environment(
        loader=FileSystemLoader(str(TEMPLATE_DIR)),
        autoescape=False,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )
    env.filters["pyrepr"] = repr
    return env


def _load_template(name: str) -> jinja2.Template:
    try:
        return _create_jinja_env().get_template(name)
    except jinja2.TemplateNotFound as exc:
        raise TemplateError(f"Template not found: {name}") from exc
    except jinja2.TemplateSyntaxError as exc:
        raise TemplateError(f"Template {name} is invalid: {exc}") from exc


def _build_context(spec: Spec, module_name: str) -> dict[str, Any]:
    """Assemble template variables for *spec*.

    Returns:
        A dict with ``"module_name"``, ``"global_options"``, ``"commands"``
        and ``"handlers"`` keys.
    """
    global_options = [
        _field(HELP_OPTION.name, HELP_OPTION.type, HELP_OPTION.description),
        _field(VERSION_OPTION.name, VERSION_OPTION.type, VERSION_OPTION.description),
    ]
    global_options += _option_fields(spec.options)

    commands: list[dict[str, Any]] = []
    by_handler: dict[str, list[str]] = {}
    taken = set(RESERVED_NAMES)
    _collect_commands(spec.commands, (), global_options, commands, by_handler, taken)

    handlers = [{"name": DEFAULT_HANDLER, "protocol": "DefaultHandler"}]
    for handler, prefixes in by_handler.items():
        if handler == DEFAULT_HANDLER:
            continue
        protocol = f"{prefixes[0]}Handler" if len(prefixes) == 1 else GENERIC_HANDLER
        handlers.append({"name": handler, "protocol": protocol})

    return {
        "module_name": module_name,
        "global_options": _dedupe(global_options),
        "commands": commands,
        "handlers": handlers,
        "generic_handler": GENERIC_HANDLER,
    }


def _collect_commands(
    nodes: Mapping[str, SpecCommand],
    path: tuple[str, ...],
    inherited: list[dict[str, str]],
    commands: list[dict[str, Any]],
    by_handler: dict[str, list[str]],
    taken: set[str],
) -> None:
    for name, node in nodes.items():
        command_path = path + (name,)
        prefix = _unique_prefix(class_prefix(command_path), taken)
        # Own options come last so they override inherited keys in the TypedDict.
        options = inherited + _option_fields(node.options)
        commands.append({
            "path": " ".join(command_path),
            "prefix": prefix,
            "handler": node.handler,
            "options": _dedupe(options),
            "params": [_field(key, param.type) for key, param in node.params.items()],
        })
        by_handler.setdefault(node.handler, []).append(prefix)
        _collect_commands(node.commands, command_path, options, commands, by_handler, taken)


def _option_fields(options: Mapping[str, SpecOption]) -> list[dict[str, str]]:
    return [_field(key, option.type, option.description) for key, option in options.items()]


def _field(name: str, type_: str, description: Optional[str] = None) -> dict[str, str]:
    comment = type_
    if description:
        comment += ": " + " ".join(description.split())
    return {"name": name, "type": type_, "comment": comment}


def _dedupe(fields: list[dict[str, str]]) -> list[dict[str, str]]:
    """Keep the last field per name, in first-seen order."""
    merged: dict[str, dict[str, str]] = {}
    for entry in fields:
        merged[entry["name"]] = entry
    return list(merged.values())


def _unique_prefix(prefix: str, taken: set[str]) -> str:
    """Return *prefix*, or *prefix* with the first free numeric suffix.

    A prefix is free when none of the classes derived from it is defined yet.
    The chosen names are added to *taken*.
    """
    candidate, counter = prefix, 1
    while any(candidate + suffix in taken for suffix in CLASS_SUFFIXES):
        counter += 1
        candidate = f"{prefix}{counter}"
    taken.update(candidate + suffix for suffix in CLASS_SUFFIXES)
    return candidate


def class_prefix(path: tuple[str, ...]) -> str:
    """Derive a CamelCase class-name prefix from a command path.

    Example::

        >>> class_prefix(("remote", "add-url"))
        'RemoteAddUrl'
    """
    words = [w for part in path for w in re.split(r"[^0-9A-Za-z]+", part) if w]
    prefix = "".join(w[:1].upper() + w[1:] for w in words) or "Command"
    if prefix[0].isdigit():
        prefix = f"Cmd{prefix}"
    return prefix
