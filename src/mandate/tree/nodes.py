"""Runtime command tree: :class:`Option`, :class:`Param`, :class:`Command`, :class:`App`.

A tree is built once, either from a :class:`~mandate.models.Spec` via
:meth:`App.from_spec` or imperatively with the ``register_*`` methods, and is
treated as read-only once :meth:`App.handle` has been called. Both styles may
be mixed on the same tree.

Ownership only points downwards: an App owns its top-level commands, a
command owns its options, params and sub-commands. Upward navigation
(:attr:`Command.app`, :attr:`Command.parent_command`) goes through the
weak side tables in :mod:`mandate.tree.registry`.

Example::

    app = App("tool", "1.2.0")
    build = app.register_command("build", build_handler)
    build.register_param("target")
    build.register_option("verbose", ["--verbose"], "verbose output", type="flag")

    app.run()  # reads sys.argv, exits with 0 on success
"""

from __future__ import annotations

import asyncio
import logging
import sys
from collections.abc import Awaitable, Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any, NoReturn, Optional

from mandate.exceptions import MandateError, UnknownHandlerError
from mandate.exit_codes import EXIT_CANCELLED, EXIT_GENERIC_FAILURE, EXIT_SUCCESS
from mandate.models import DEFAULT_TYPE, HELP_HANDLER, Spec, SpecCommand, SpecOption, SpecParam
from mandate.output import error, print_data
from mandate.tree import dispatch, usage
from mandate.tree.binder import bind_options, bind_params
from mandate.tree.dispatch import Continuation
from mandate.tree.registry import registry, register_subtree
from mandate.tree.tokenizer import tokenize

logger = logging.getLogger(__name__)

OptionValues = dict[str, str]
ParamValues = dict[str, str]

CommandHandler = Callable[[OptionValues, ParamValues, Continuation], Optional[Awaitable[None]]]
DefaultHandler = Callable[[OptionValues, ParamValues], Optional[Awaitable[None]]]

DEFAULT_HANDLER = "default"
"""Key under which the App's own handler is looked up in a handler mapping."""


@dataclass(frozen=True)
class Option:
    """A named, flag-triggered, string-valued setting.

    Attributes:
        name: Key under which the value is bound, e.g. ``verbose``.
        flags: Non-empty tuple of flag strings, e.g. ``("-v", "--verbose")``.
        description: Help text shown next to the flags.
        type: Advisory type name. ``flag`` marks a boolean switch that never
            consumes the following token as its value.
    """

    name: str
    flags: tuple[str, ...]
    description: Optional[str] = None
    type: str = DEFAULT_TYPE

    def __post_init__(self) -> None:
        object.__setattr__(self, "flags", tuple(self.flags))
        if not self.flags:
            raise ValueError(f"Option {self.name!r} needs at least one flag")

    @classmethod
    def from_spec(cls, name: str, spec_option: SpecOption) -> Option:
        """Build an option from its spec node; a flagless node gets ``--<name>``."""
        flags = tuple(spec_option.flags) or (f"--{name}",)
        return cls(name, flags, spec_option.description or None, spec_option.type)

    def matches(self, flag: str) -> bool:
        return flag in self.flags


@dataclass(frozen=True)
class Param:
    """A named positional argument, bound by its index in the owning command."""

    name: str
    type: str = DEFAULT_TYPE

    @classmethod
    def from_spec(cls, name: str, spec_param: SpecParam) -> Param:
        return cls(name, spec_param.type)


HELP_OPTION = Option("help", ("-h", "--help"), "Show this help message", "flag")
VERSION_OPTION = Option("version", ("-v", "--version"), "Show version", "flag")


class Command:
    """A named, dispatchable node with options, positional params and sub-commands.

    Commands compare and hash by identity, which is what the back-reference
    registry keys on.

    Args:
        name: The literal token that selects this command on the command line.
        handler: Called as ``handler(options, params, parent)``. ``None``
            makes the command print its own help.
        options: Options declared on this command.
        params: Positional params, in binding order.
        commands: Sub-commands.
    """

    def __init__(
        self,
        name: str,
        handler: Optional[CommandHandler] = None,
        options: Optional[Iterable[Option]] = None,
        params: Optional[Iterable[Param]] = None,
        commands: Optional[Iterable[Command]] = None,
    ) -> None:
        self.name = name
        self.handler = handler
        self.options: list[Option] = list(options or [])
        self.params: list[Param] = list(params or [])
        self.commands: list[Command] = list(commands or [])

        register_subtree(self.commands, self.app, self)

    def __repr__(self) -> str:
        return f"Command({self.name!r})"

    @classmethod
    def from_spec(
        cls,
        name: str,
        spec_command: SpecCommand,
        handlers: Mapping[str, Callable[..., Any]],
    ) -> Command:
        """Recursively build a command from its spec node.

        Raises:
            UnknownHandlerError: If the node names a handler missing from
                *handlers*. A node without a ``handler`` key falls back to
                the ``help`` sentinel, which only resolves if the mapping
                supplies one and otherwise leaves the command handler-less.
        """
        if spec_command.handler in handlers:
            handler = handlers[spec_command.handler]
        elif spec_command.handler == HELP_HANDLER:
            handler = None
        else:
            raise UnknownHandlerError(spec_command.handler, name)

        return cls(
            name,
            handler,
            options=[Option.from_spec(key, value) for key, value in spec_command.options.items()],
            params=[Param.from_spec(key, value) for key, value in spec_command.params.items()],
            commands=[
                Command.from_spec(key, value, handlers)
                for key, value in spec_command.commands.items()
            ],
        )

    # ------------------------------------------------------------------ #
    # Navigation
    # ------------------------------------------------------------------ #

    @property
    def app(self) -> Optional[App]:
        """The App this command belongs to, or ``None`` while detached."""
        return registry.app_of(self)

    @property
    def parent_command(self) -> Optional[Command]:
        """The enclosing command, or ``None`` for a top-level command."""
        return registry.parent_of(self)

    @property
    def path(self) -> tuple[str, ...]:
        """Command names from the top-level command down to this one."""
        names = [self.name]
        parent = self.parent_command
        while parent is not None:
            names.append(parent.name)
            parent = parent.parent_command
        return tuple(reversed(names))

    def find_command(self, name: str) -> Optional[Command]:
        return next((c for c in self.commands if c.name == name), None)

    # ------------------------------------------------------------------ #
    # Programmatic construction
    # ------------------------------------------------------------------ #

    def register_option(
        self,
        name: str,
        flags: Sequence[str],
        description: Optional[str] = None,
        type: str = DEFAULT_TYPE,
    ) -> Option:
        option = Option(name, tuple(flags), description, type)
        self.options.append(option)
        return option

    def register_param(self, name: str, type: str = DEFAULT_TYPE) -> Param:
        param = Param(name, type)
        self.params.append(param)
        return param

    def register_command(self, name: str, handler: Optional[CommandHandler] = None) -> Command:
        return self.add_command(Command(name, handler))

    def add_command(self, command: Command) -> Command:
        """Attach an already-built *command* (with its whole subtree)."""
        self.commands.append(command)
        register_subtree([command], self.app, self)
        return command

    # ------------------------------------------------------------------ #
    # Dispatch and help
    # ------------------------------------------------------------------ #

    async def handle(self, options: OptionValues, params: ParamValues) -> None:
        """Run this command's handler with parent delegation available."""
        await dispatch.invoke_command(self, options, params)

    def output_help(self) -> None:
        print_data(usage.render_command_help(self))

    def output_version(self) -> None:
        app = self.app
        if app is None:
            logger.debug("Command %r is not attached to an app; no version to show", self.name)
            return
        app.output_version()


class App:
    """Root of a command tree: global options, top-level commands, default handler.

    The built-in ``help`` (``-h``/``--help``) and ``version``
    (``-v``/``--version``) options always come first in :attr:`options`, so
    they win flag lookups among the App's options and lead the help listing.

    Args:
        name: Program name used in help output.
        version: Version string printed by ``--version``.
        handler: Called as ``handler(options, params)`` when no command
            matched. ``None`` prints the App help.
        options: Additional global options.
        commands: Top-level commands.
    """

    def __init__(
        self,
        name: str,
        version: str,
        handler: Optional[DefaultHandler] = None,
        options: Optional[Iterable[Option]] = None,
        commands: Optional[Iterable[Command]] = None,
    ) -> None:
        self.name = name
        self.version = version
        self.handler = handler
        self.options: list[Option] = [HELP_OPTION, VERSION_OPTION, *(options or [])]
        self.commands: list[Command] = list(commands or [])

        register_subtree(self.commands, self, None)

    def __repr__(self) -> str:
        return f"App({self.name!r}, {self.version!r})"

    @classmethod
    def from_spec(
        cls,
        name: str,
        version: str,
        spec: Spec,
        handlers: Mapping[str, Callable[..., Any]],
    ) -> App:
        """Build a complete tree from *spec*, binding handlers by name.

        ``handlers["default"]``, when present, becomes the App handler.

        Raises:
            UnknownHandlerError: If any command names a missing handler.
        """
        logger.debug("Building app %r from spec with %d command(s)", name, len(spec.commands))
        return cls(
            name,
            version,
            handlers.get(DEFAULT_HANDLER),
            options=[Option.from_spec(key, value) for key, value in spec.options.items()],
            commands=[
                Command.from_spec(key, value, handlers)
                for key, value in spec.commands.items()
            ],
        )

    def find_command(self, name: str) -> Optional[Command]:
        return next((c for c in self.commands if c.name == name), None)

    # ------------------------------------------------------------------ #
    # Programmatic construction
    # ------------------------------------------------------------------ #

    def register_option(
        self,
        name: str,
        flags: Sequence[str],
        description: Optional[str] = None,
        type: str = DEFAULT_TYPE,
    ) -> Option:
        option = Option(name, tuple(flags), description, type)
        self.options.append(option)
        return option

    def register_command(self, name: str, handler: Optional[CommandHandler] = None) -> Command:
        return self.add_command(Command(name, handler))

    def add_command(self, command: Command) -> Command:
        """Attach an already-built *command* (with its whole subtree)."""
        self.commands.append(command)
        register_subtree([command], self, None)
        return command

    # ------------------------------------------------------------------ #
    # Dispatch
    # ------------------------------------------------------------------ #

    async def handle(self, args: Sequence[str]) -> None:
        """Tokenize, bind and dispatch a raw argument list.

        Args:
            args: Process arguments *including* the two invocation tokens
                (interpreter and script), which are skipped.

        Raises:
            UnknownOptionError: If a flag is not declared on the App or any
                matched command.
            Exception: Whatever the invoked handler raises, unchanged.
        """
        match = tokenize(self, list(args)[2:])
        options = bind_options(self, match.commands, match.options)
        params = bind_params(match.commands, match.params)
        logger.debug(
            "Dispatching %s with options=%r params=%r",
            " ".join(c.name for c in match.commands) or "<root>",
            options,
            params,
        )
        await dispatch.dispatch(self, match.commands, options, params)

    def run(self, argv: Optional[Sequence[str]] = None) -> NoReturn:
        """Handle *argv* and terminate the process with a meaningful exit code.

        When *argv* is ``None`` the interpreter path is prepended to
        :data:`sys.argv` so the two leading invocation tokens line up with
        what :meth:`handle` skips.
        """
        if argv is None:
            argv = [sys.executable, *sys.argv]
        try:
            asyncio.run(self.handle(argv))
        except KeyboardInterrupt:
            sys.stderr.write("\nCancelled.\n")
            sys.exit(EXIT_CANCELLED)
        except MandateError as exc:
            error(str(exc))
            sys.exit(exc.exit_code)
        except Exception as exc:
            logger.debug("Handler failed", exc_info=True)
            error(str(exc) or type(exc).__name__)
            sys.exit(EXIT_GENERIC_FAILURE)
        sys.exit(EXIT_SUCCESS)

    # ------------------------------------------------------------------ #
    # Help
    # ------------------------------------------------------------------ #

    def output_help(self) -> None:
        print_data(usage.render_app_help(self))

    def output_version(self) -> None:
        print_data(usage.render_version(self))
