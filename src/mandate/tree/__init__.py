"""Command tree runtime -- build, match, bind and dispatch.

This sub-package turns a :class:`~mandate.models.Spec` (or imperative
``register_*`` calls) into a tree of commands and runs process arguments
against it.

Typical usage::

    from mandate.tree import App

    app = App.from_spec("tool", "1.0.0", spec, {"build": build, "default": root})
    await app.handle(sys.argv)

Sub-modules:

* :mod:`~mandate.tree.nodes` -- ``Option``, ``Param``, ``Command`` and ``App``.
* :mod:`~mandate.tree.registry` -- weak back-references from commands to
  their App and parent command.
* :mod:`~mandate.tree.tokenizer` -- single-pass tokenizer and command matcher.
* :mod:`~mandate.tree.binder` -- flag resolution and positional binding.
* :mod:`~mandate.tree.dispatch` -- handler wrappers and parent continuations.
* :mod:`~mandate.tree.usage` -- help and version text.
"""

from mandate.tree.dispatch import Continuation
from mandate.tree.nodes import App, Command, Option, Param
from mandate.tree.tokenizer import Match, tokenize

__all__ = ["App", "Command", "Continuation", "Match", "Option", "Param", "tokenize"]
