"""Bind raw option and positional tokens to declared options and params.

Flag lookup walks the App's options first and then every matched command
from outermost to innermost; a match in a deeper scope replaces a shallower
one, so sub-command options shadow ancestors that share a flag. Within a
single scope the first declared option wins, which is what lets the App's
built-in ``-h``/``-v`` take precedence over later global options.

Values are bound under the option's ``name`` as the raw strings typed on the
command line. Nothing is coerced; ``type`` is for readers and stubs only.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from typing import TYPE_CHECKING, Optional

from mandate.exceptions import UnknownOptionError

if TYPE_CHECKING:
    from mandate.tree.nodes import App, Command, Option

logger = logging.getLogger(__name__)


def resolve_option(app: App, commands: Sequence[Command], flag: str) -> Optional[Option]:
    """Return the innermost option declaring *flag*, or ``None``."""
    option = _first_match(app.options, flag)
    for command in commands:
        option = _first_match(command.options, flag) or option
    return option


def bind_options(
    app: App,
    commands: Sequence[Command],
    raw_options: Iterable[tuple[str, str]],
) -> dict[str, str]:
    """Map ``(flag, value)`` pairs to ``{option.name: value}``.

    Raises:
        UnknownOptionError: For the first flag no scope declares.
    """
    bound: dict[str, str] = {}
    for flag, value in raw_options:
        option = resolve_option(app, commands, flag)
        if option is None:
            raise UnknownOptionError(flag)
        bound[option.name] = value
    return bound


def bind_params(commands: Sequence[Command], positionals: Sequence[str]) -> dict[str, str]:
    """Zip positional tokens against the deepest matched command's params.

    Surplus tokens are dropped and params without a token are left out of the
    result. With no matched command there is nothing to bind to.
    """
    if not commands:
        if positionals:
            logger.debug("Dropping positional tokens with no matched command: %r", positionals)
        return {}

    declared = commands[-1].params
    if len(positionals) > len(declared):
        logger.debug("Dropping surplus positional tokens: %r", positionals[len(declared):])
    return {param.name: value for param, value in zip(declared, positionals)}


def _first_match(options: Iterable[Option], flag: str) -> Optional[Option]:
    return next((o for o in options if o.matches(flag)), None)
