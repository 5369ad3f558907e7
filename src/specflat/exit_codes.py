"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~specflat.exceptions.SpecflatError` subclass.
Shell scripts and batch importers can inspect the exit code to tell a bad
document apart from an unreachable one without parsing stderr.

Example::

    $ specflat view broken.yaml
    $ echo $?
    7   # EXIT_SPEC_PARSE_ERROR -- the document is neither JSON nor YAML
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments or an unknown name."""

EXIT_SOURCE_ERROR = 6
"""The spec source could not be read (missing file, HTTP failure, empty stdin)."""

EXIT_SPEC_PARSE_ERROR = 7
"""The API description could not be parsed as JSON or YAML."""
