"""Exception hierarchy for mandate.

All exceptions inherit from :class:`MandateError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`mandate.exit_codes`.
The process boundaries (:meth:`mandate.tree.nodes.App.run` and
:func:`mandate.app.main`) catch ``MandateError`` and exit with the
appropriate code. Anything else raised by a handler propagates untouched and
ends the process with :data:`EXIT_GENERIC_FAILURE`.

Subclass hierarchy::

    MandateError (exit 1)
    +-- InvalidSpecError     (exit 7)
    +-- UnknownHandlerError  (exit 8)
    +-- UnknownOptionError   (exit 2)
    +-- HandlerError         (exit 1)
    +-- TemplateError        (exit 9)
"""

from mandate.exit_codes import (
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_SPEC_PARSE_ERROR,
    EXIT_TEMPLATE_ERROR,
    EXIT_UNKNOWN_HANDLER,
)


class MandateError(Exception):
    """Base exception for all mandate errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`mandate.exit_codes`.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidSpecError(MandateError):
    """Raised when a CLI specification is not a mapping or a node has the wrong shape."""

    exit_code = EXIT_SPEC_PARSE_ERROR


class UnknownHandlerError(MandateError):
    """Raised at build time when the spec references a handler that was not supplied.

    Args:
        handler: The handler name as written in the spec.
        command: Name of the command that referenced it.
    """

    exit_code = EXIT_UNKNOWN_HANDLER

    def __init__(self, handler: str, command: str):
        super().__init__(f"Unknown handler {handler!r} for command {command!r}")
        self.handler = handler
        self.command = command


class UnknownOptionError(MandateError):
    """Raised when a flag on the command line matches no declared option.

    Args:
        flag: The exact flag string as typed, e.g. ``--bogus``.
    """

    exit_code = EXIT_INVALID_USAGE

    def __init__(self, flag: str):
        super().__init__(f"Unknown option {flag}")
        self.flag = flag


class HandlerError(MandateError):
    """Convenience base for errors raised deliberately by application handlers.

    The dispatcher never wraps or catches handler exceptions; raising this
    type only changes how the process boundary reports the failure (the
    message is printed without a debug traceback).
    """


class TemplateError(MandateError):
    """Raised when a stub template is missing or fails to render."""

    exit_code = EXIT_TEMPLATE_ERROR
