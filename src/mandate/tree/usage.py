"""Plain-text help and version rendering for apps and commands.

App help::

    Usage: tool [options] <command>

    Options:
      -h, --help       Show this help message
      -v, --version    Show version

    Commands:
      build

The flag column is padded to the longest joined flag string plus four
spaces. Command help lists the command's own options first, then those of
its ancestors (innermost first), then the App's, leaving out any option
whose flags are all shadowed by one listed earlier.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from mandate.tree.nodes import App, Command, Option

COLUMN_PADDING = 4


def render_app_help(app: App) -> str:
    lines = [f"Usage: {app.name} [options] <command>"]
    lines += _options_block(app.options)
    lines += _commands_block(app.commands)
    return "\n".join(lines)


def render_command_help(command: Command) -> str:
    app = command.app
    usage = " ".join([app.name if app is not None else "", *command.path]).strip()
    usage += " [options]"
    for param in command.params:
        usage += f" <{param.name}>"
    if command.commands:
        usage += " <command>"

    lines = [f"Usage: {usage}"]
    lines += _options_block(_visible_options(command))
    lines += _commands_block(command.commands)
    return "\n".join(lines)


def render_version(app: App) -> str:
    return f"v{app.version}"


def _visible_options(command: Command) -> list[Option]:
    """Options reachable from *command*, most specific first, shadowed ones dropped."""
    scopes: list[Iterable[Option]] = []
    node = command
    while node is not None:
        scopes.append(node.options)
        node = node.parent_command
    if command.app is not None:
        scopes.append(command.app.options)

    seen: set[str] = set()
    visible: list[Option] = []
    for options in scopes:
        for option in options:
            if seen.issuperset(option.flags):
                continue
            seen.update(option.flags)
            visible.append(option)
    return visible


def _options_block(options: list[Option]) -> list[str]:
    if not options:
        return []
    labels = [", ".join(option.flags) for option in options]
    width = max(len(label) for label in labels) + COLUMN_PADDING
    lines = ["", "Options:"]
    for label, option in zip(labels, options):
        lines.append(f"  {label.ljust(width)}{option.description or ''}".rstrip())
    return lines


def _commands_block(commands: list[Command]) -> list[str]:
    if not commands:
        return []
    return ["", "Commands:", *(f"  {command.name}" for command in commands)]
