"""Errors raised by specflat.

Each error class names the process exit code the CLI should use for it
(see :mod:`specflat.exit_codes`). :func:`specflat.app.main` turns a
:class:`SpecflatError` into that exit code; anything else is treated as a
crash.

Inside the conversion core only :class:`SpecParseError` is raised, and
:func:`~specflat.parser.converter.convert` reports it as a
``success=False`` result. Dangling references and schema cycles are data,
not errors.

::

    SpecflatError (exit 1)
    +-- InvalidUsageError   (exit 2)
    +-- SourceError         (exit 6)
    +-- SpecParseError      (exit 7)
    +-- ConfigError         (exit 1)
"""

from specflat.exit_codes import (
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_SOURCE_ERROR,
    EXIT_SPEC_PARSE_ERROR,
)


class SpecflatError(Exception):
    """Root of the specflat error tree.

    Args:
        message: Text shown to the user on stderr.
        exit_code: Replaces the class default for this instance.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(SpecflatError):
    """Bad CLI arguments, or a name that the document does not define."""

    exit_code = EXIT_INVALID_USAGE


class SourceError(SpecflatError):
    """A spec source (file, URL, stdin) could not be read."""

    exit_code = EXIT_SOURCE_ERROR


class SpecParseError(SpecflatError):
    """Document text is neither JSON nor YAML, or is not a mapping."""

    exit_code = EXIT_SPEC_PARSE_ERROR


class ConfigError(SpecflatError):
    """Unreadable config file, unknown key, or a value outside its choices."""

    exit_code = EXIT_GENERIC_FAILURE
