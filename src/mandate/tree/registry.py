"""Back-reference index for the command tree.

Commands own their children, but help rendering and parent delegation need
to walk *upwards*: from a command to its parent command and to the
:class:`~mandate.tree.nodes.App` at the root. Rather than storing those
pointers on the command itself, this module keeps two identity-keyed side
tables:

* command -> owning App
* command -> immediate parent Command (absent for top-level commands)

Keys are held weakly (:class:`weakref.WeakKeyDictionary`) and values are
:func:`weakref.ref` objects, so the index never keeps any part of a tree
alive and never introduces an ownership cycle.

The index is populated by :func:`register_subtree`, a deep walk that runs
every time an App or Command gains child commands.
"""

from __future__ import annotations

import logging
import weakref
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from mandate.tree.nodes import App, Command

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Identity-keyed, non-owning map of command back-references."""

    def __init__(self) -> None:
        self._apps: weakref.WeakKeyDictionary[Command, weakref.ref[App]] = (
            weakref.WeakKeyDictionary()
        )
        self._parents: weakref.WeakKeyDictionary[Command, weakref.ref[Command]] = (
            weakref.WeakKeyDictionary()
        )

    def app_of(self, command: Command) -> Optional[App]:
        """Return the App owning *command*, or ``None`` if not attached yet."""
        ref = self._apps.get(command)
        return ref() if ref is not None else None

    def parent_of(self, command: Command) -> Optional[Command]:
        """Return the immediate parent of *command*, or ``None`` at the top level."""
        ref = self._parents.get(command)
        return ref() if ref is not None else None

    def register(
        self,
        command: Command,
        app: Optional[App],
        parent: Optional[Command],
    ) -> None:
        """Record back-references for *command* and every descendant.

        Args:
            command: Root of the subtree to register.
            app: The owning App. ``None`` while the subtree is being assembled
                under a detached command; an App recorded earlier is kept.
            parent: The immediate parent command, or ``None`` when *command*
                hangs directly off the App.
        """
        if app is not None:
            self._apps[command] = weakref.ref(app)
        if parent is not None:
            self._parents[command] = weakref.ref(parent)
        else:
            self._parents.pop(command, None)

        for child in command.commands:
            self.register(child, app if app is not None else self.app_of(command), command)


registry = CommandRegistry()
"""Process-wide registry used by :class:`~mandate.tree.nodes.Command`."""


def register_subtree(
    commands: list[Command],
    app: Optional[App],
    parent: Optional[Command],
) -> None:
    """Register each of *commands* (and their descendants) under *app* / *parent*."""
    for command in commands:
        registry.register(command, app, parent)
    if commands:
        logger.debug(
            "Registered %d command(s) under %s",
            len(commands),
            parent.name if parent is not None else (app.name if app is not None else "<detached>"),
        )
