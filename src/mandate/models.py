"""Pydantic models describing a declarative CLI specification.

These models are the in-memory form of the YAML document a developer writes
to describe an application's commands, options and positional parameters.
They are produced by :meth:`Spec.parse` (usually via
:func:`~mandate.parser.loader.load_spec`) and consumed by
:meth:`~mandate.tree.nodes.App.from_spec` and the stub generator in
:mod:`mandate.typedef`.

Example document::

    options:
      quiet: { flags: ["-q", "--quiet"], description: "less output", type: flag }
    commands:
      build:
        handler: build
        params:
          target: { type: string }
        options:
          verbose: { flags: ["--verbose"], description: "verbose output", type: flag }

All models are frozen. Mapping order from the source document is preserved
and later defines the order of options, params and commands in the runtime
tree. Validation is deliberately shallow: shapes are checked, but nothing
cross-checks sibling nodes (for example duplicate flags).
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from mandate.exceptions import InvalidSpecError

DEFAULT_TYPE = "string"
"""Type recorded for options and params that do not declare one."""

HELP_HANDLER = "help"
"""Sentinel handler name used by commands that do not declare a handler."""


class _SpecNode(BaseModel):
    """Common configuration for every spec node.

    Keys explicitly set to ``null`` are treated as missing so they fall back
    to the field default, which lets authors leave ``options:`` or
    ``description:`` empty in YAML.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        if isinstance(data, Mapping):
            return {key: value for key, value in data.items() if value is not None}
        return data


class SpecOption(_SpecNode):
    """A named, flag-triggered option.

    ``type`` is advisory metadata; bound values are always raw strings.
    """

    flags: list[str] = Field(default_factory=list)
    description: str = ""
    type: str = DEFAULT_TYPE


class SpecParam(_SpecNode):
    """A positional parameter. Its position is its index in the owning mapping."""

    type: str = DEFAULT_TYPE


class SpecCommand(_SpecNode):
    """A (possibly nested) command bound to a named handler."""

    handler: str = HELP_HANDLER
    options: dict[str, SpecOption] = Field(default_factory=dict)
    params: dict[str, SpecParam] = Field(default_factory=dict)
    commands: dict[str, SpecCommand] = Field(default_factory=dict)


class Spec(_SpecNode):
    """Root of a CLI specification: global options and top-level commands."""

    options: dict[str, SpecOption] = Field(default_factory=dict)
    commands: dict[str, SpecCommand] = Field(default_factory=dict)

    @classmethod
    def parse(cls, raw: Any) -> Spec:
        """Build a :class:`Spec` from a decoded YAML/JSON value.

        Args:
            raw: The decoded document, expected to be a mapping.

        Returns:
            The validated specification.

        Raises:
            InvalidSpecError: If *raw* is not a mapping or any nested node
                does not have the expected shape.
        """
        if not isinstance(raw, Mapping):
            kind = "empty document" if raw is None else type(raw).__name__
            raise InvalidSpecError(f"Spec must be a mapping (got {kind})")
        try:
            return cls.model_validate(dict(raw))
        except ValidationError as exc:
            raise InvalidSpecError(_describe_validation_error(exc)) from exc

    def walk(self) -> Iterator[tuple[tuple[str, ...], SpecCommand]]:
        """Yield ``(path, command)`` for every command, parents before children."""
        yield from _walk_commands((), self.commands)


def _walk_commands(
    prefix: tuple[str, ...],
    commands: Mapping[str, SpecCommand],
) -> Iterator[tuple[tuple[str, ...], SpecCommand]]:
    for name, command in commands.items():
        path = prefix + (name,)
        yield path, command
        yield from _walk_commands(path, command.commands)


def _describe_validation_error(exc: ValidationError) -> str:
    """Collapse a pydantic error into a one-line-per-problem message."""
    lines = ["Invalid spec:"]
    for err in exc.errors():
        location = ".".join(str(part) for part in err["loc"]) or "<root>"
        lines.append(f"  {location}: {err['msg']}")
    return "\n".join(lines)
