"""Single-pass argument tokenizer and command matcher.

Walks the argument list once, left to right, without backtracking:

* A token starting with ``-`` is an option. ``--out=dist`` splits on the
  first ``=``. Otherwise the next token becomes the value unless it starts
  with ``-``, there is no next token, or the flag resolves (against the App
  and the commands matched so far) to an option of a boolean ``type``; in
  those cases the value is ``"true"``.
* Any other token that names a child of the deepest matched command (or of
  the App) descends into that command.
* Everything else is positional.

A positional value that happens to equal a child command's name is read as
the command. There is no lookahead to tell the two apart.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from mandate.tree.binder import resolve_option

if TYPE_CHECKING:
    from mandate.tree.nodes import App, Command

FLAG_VALUE = "true"
"""Value bound for an option given without an explicit value."""

BOOLEAN_TYPES = frozenset({"flag", "bool", "boolean"})
"""Option types that never consume the following token."""


@dataclass
class Match:
    """Result of tokenizing one argument list.

    Attributes:
        commands: Matched command path, outermost first. Empty when the
            arguments select no command.
        options: ``(flag, raw_value)`` pairs in command-line order.
        params: Positional tokens in command-line order.
    """

    commands: list[Command] = field(default_factory=list)
    options: list[tuple[str, str]] = field(default_factory=list)
    params: list[str] = field(default_factory=list)


def tokenize(app: App, args: Sequence[str]) -> Match:
    """Split *args* (invocation tokens already removed) into a :class:`Match`."""
    match = Match()
    index = 0
    while index < len(args):
        token = args[index]
        index += 1

        if token.startswith("-"):
            flag, sep, value = token.partition("=")
            if not sep:
                has_next = index < len(args) and not args[index].startswith("-")
                if has_next and _takes_value(app, match.commands, flag):
                    value = args[index]
                    index += 1
                else:
                    value = FLAG_VALUE
            match.options.append((flag, value))
            continue

        scope = match.commands[-1] if match.commands else app
        command = scope.find_command(token)
        if command is not None:
            match.commands.append(command)
        else:
            match.params.append(token)

    return match


def _takes_value(app: App, commands: Sequence[Command], flag: str) -> bool:
    option = resolve_option(app, commands, flag)
    return option is None or option.type not in BOOLEAN_TYPES
