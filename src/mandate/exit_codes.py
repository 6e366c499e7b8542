"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~mandate.exceptions.MandateError` subclass.
Shell wrappers can inspect the exit code to tell a bad command line apart
from a broken spec without parsing stderr.

Example::

    $ mycli build --bogus
    $ echo $?
    2   # EXIT_INVALID_USAGE -- the flag is not declared anywhere
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred, including errors raised by handlers."""

EXIT_INVALID_USAGE = 2
"""The command line contained a flag that no matched command declares."""

EXIT_SPEC_PARSE_ERROR = 7
"""The CLI specification could not be loaded, parsed or validated."""

EXIT_UNKNOWN_HANDLER = 8
"""The specification names a handler that the application did not supply."""

EXIT_TEMPLATE_ERROR = 9
"""A stub template could not be found or rendered."""

EXIT_CANCELLED = 130
"""The process was interrupted (Ctrl-C)."""
