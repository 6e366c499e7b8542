"""Handler invocation with built-in help/version handling and parent delegation.

Every handler runs inside a wrapper that applies the same precedence:

1. ``help`` bound to a truthy value -- print contextual help, stop.
2. ``version`` bound to a truthy value -- print ``v<version>``, stop.
3. Otherwise call the handler; with no handler, print help.

Command handlers receive a third argument, a :class:`Continuation`. Calling
it runs the parent command's wrapped handler (which gets its own
continuation) or, for a top-level command, the App's handler, with the same
bound options and params. This allows middleware-style chains where a
sub-command defers cases it does not handle.

Handlers may be plain functions or coroutine functions. The continuation
always returns an awaitable: ``await parent()`` from an async handler, or
just ``parent()`` from a synchronous one. Delegations the handler did not
await are awaited once the handler returns, so their errors still surface.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Generator, Sequence
from typing import TYPE_CHECKING, Any, Optional

if TYPE_CHECKING:
    from mandate.tree.nodes import App, Command

logger = logging.getLogger(__name__)

HELP = "help"
VERSION = "version"

FALSE_VALUES = frozenset({"", "0", "false", "no", "off"})


async def dispatch(
    app: App,
    commands: Sequence[Command],
    options: dict[str, str],
    params: dict[str, str],
) -> None:
    """Invoke the deepest matched command, or the App when nothing matched."""
    if commands:
        await invoke_command(commands[-1], options, params)
    else:
        await invoke_app(app, options, params)


async def invoke_app(app: App, options: dict[str, str], params: dict[str, str]) -> None:
    if is_set(options.get(HELP)):
        app.output_help()
    elif is_set(options.get(VERSION)):
        app.output_version()
    elif app.handler is None:
        app.output_help()
    else:
        await _settle(app.handler(options, params))


async def invoke_command(command: Command, options: dict[str, str], params: dict[str, str]) -> None:
    if is_set(options.get(HELP)):
        command.output_help()
    elif is_set(options.get(VERSION)):
        command.output_version()
    elif command.handler is None:
        command.output_help()
    else:
        parent = Continuation(command, options, params)
        await _settle(command.handler(options, params, parent))
        await parent.drain()


def is_set(value: Optional[str]) -> bool:
    """Whether a bound option value counts as switched on."""
    return value is not None and value.strip().lower() not in FALSE_VALUES


class Continuation:
    """The ``parent`` callable handed to a command handler.

    Args:
        command: The command whose handler receives this continuation.
        options: Bound options, passed through unchanged.
        params: Bound params, passed through unchanged.
    """

    def __init__(self, command: Command, options: dict[str, str], params: dict[str, str]) -> None:
        self._command = command
        self._options = options
        self._params = params
        self._pending: list[_Delegation] = []

    def __call__(self) -> _Delegation:
        parent = self._command.parent_command
        if parent is not None:
            logger.debug("Delegating from %r to parent command %r", self._command.name, parent.name)
            coro = invoke_command(parent, self._options, self._params)
        else:
            app = self._command.app
            logger.debug("Delegating from %r to the app handler", self._command.name)
            coro = invoke_app(app, self._options, self._params) if app is not None else _noop()

        delegation = _Delegation(asyncio.ensure_future(coro))
        self._pending.append(delegation)
        return delegation

    async def drain(self) -> None:
        """Await delegations the handler started but did not await itself."""
        outstanding = [d.task for d in self._pending if not d.awaited]
        if outstanding:
            await asyncio.gather(*outstanding)


class _Delegation:
    """Awaitable wrapper that records whether the handler awaited it."""

    __slots__ = ("task", "awaited")

    def __init__(self, task: asyncio.Future[None]) -> None:
        self.task = task
        self.awaited = False

    def __await__(self) -> Generator[Any, None, None]:
        self.awaited = True
        return self.task.__await__()


async def _settle(result: Any) -> None:
    if inspect.isawaitable(result):
        await result


async def _noop() -> None:
    return None
