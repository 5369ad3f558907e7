"""Shared helpers for commands that take a SOURCE argument."""

from __future__ import annotations

from typing import NoReturn

import typer

from specflat.exceptions import SpecflatError, SpecParseError
from specflat.models import NormalizedDocument
from specflat.output import debug, error, warning
from specflat.parser import convert, read_source


def abort(exc: SpecflatError) -> NoReturn:
    """Print *exc* on stderr and exit with its exit code."""
    error(str(exc))
    raise typer.Exit(code=exc.exit_code)


def load_document(source: str) -> NormalizedDocument:
    """Read *source*, convert it and report warnings on stderr.

    Args:
        source: File path, ``http(s)://`` URL, or ``-`` for stdin.

    Raises:
        typer.Exit: With the error's exit code when the source cannot be
            read (6) or is neither JSON nor YAML (7).
    """
    try:
        text, hint = read_source(source)
        debug(f"Read {len(text)} characters from {source} (hint: {hint or 'none'})")
        result = convert(text, hint=hint)
        if not result.success or result.data is None:
            raise SpecParseError(result.error or "Conversion failed")
    except SpecflatError as exc:
        abort(exc)

    for message in result.warnings:
        warning(message)
    return result.data
