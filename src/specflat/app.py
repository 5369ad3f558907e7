"""Typer application and console-script entry point for specflat.

The root callback resolves configuration and installs the global
:class:`~specflat.output.OutputManager`; :func:`register_commands` attaches
the built-in commands (``convert``, ``view``, ``fields``, ``inspect``,
``config``). :func:`main` wraps everything with signal handling, maps
:class:`~specflat.exceptions.SpecflatError` to its exit code and writes a
crash log for anything unexpected.
"""

from __future__ import annotations

import logging
import signal
import sys
import traceback
from datetime import datetime
from typing import Any, Optional

import typer

from specflat import __version__
from specflat.exit_codes import EXIT_GENERIC_FAILURE


app = typer.Typer(
    name="specflat",
    help="Flatten OpenAPI 3.x / Swagger 2.0 documents and project their schemas.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)

_registered = False


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"specflat {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    json_output: bool = typer.Option(False, "--json", help="JSON output format."),
    plain_output: bool = typer.Option(False, "--plain", help="Plain text output."),
    no_color: bool = typer.Option(False, "--no-color", help="Disable color output."),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Suppress informational output and warnings."
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug output."),
    output_file: Optional[str] = typer.Option(
        None, "-o", "--output", help="Write data to this file instead of stdout."
    ),
) -> None:
    """Root callback executed before every sub-command.

    Resolves the effective :class:`~specflat.models.GlobalConfig` (CLI flags
    over ``SPECFLAT_*`` env vars over ``./specflat.json`` over the user file)
    and stores it in ``ctx.obj["config"]`` for sub-commands.
    """
    from specflat.config import resolve_config
    from specflat.exceptions import ConfigError
    from specflat.output import OutputFormat, OutputManager, error, set_output

    cli_format: Optional[str] = None
    if json_output:
        cli_format = OutputFormat.JSON.value
    elif plain_output:
        cli_format = OutputFormat.PLAIN.value

    try:
        config = resolve_config(cli_format=cli_format)
    except ConfigError as exc:
        set_output(OutputManager(no_color=no_color))
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    output = OutputManager(
        format=OutputFormat(config.output.format),
        no_color=no_color,
        quiet=quiet,
        verbose=verbose,
        output_file=output_file,
    )
    set_output(output)

    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="[debug] %(name)s: %(message)s",
            stream=sys.stderr,
            force=True,
        )

    ctx.ensure_object(dict)
    ctx.obj["config"] = config
    ctx.obj["verbose"] = verbose


def register_commands() -> None:
    """Attach the built-in commands to :data:`app` (idempotent)."""
    global _registered
    if _registered:
        return

    from specflat.commands.config import config_app
    from specflat.commands.convert import convert_command
    from specflat.commands.inspect import inspect_app
    from specflat.commands.view import fields_command, view_command

    app.command("convert")(convert_command)
    app.command("view")(view_command)
    app.command("fields")(fields_command)
    app.add_typer(inspect_app, name="inspect", help="Summarize a document as tables.")
    app.add_typer(config_app, name="config", help="Configuration management.")
    _registered = True


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def _write_crash_log() -> str:
    """Write the current traceback under the data directory; return its path."""
    from specflat.config import get_data_dir

    logs_dir = get_data_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    log_path = logs_dir / f"crash-{timestamp}.log"
    log_path.write_text(traceback.format_exc(), encoding="utf-8")
    return str(log_path)


def main() -> None:
    """CLI entry point invoked by the ``specflat`` console script.

    Raises:
        SystemExit: Always raised (either by Typer or explicitly).
    """
    _setup_signal_handlers()
    try:
        register_commands()
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)
    except Exception as exc:
        from specflat.exceptions import SpecflatError
        from specflat.output import error

        if isinstance(exc, SpecflatError):
            error(str(exc))
            sys.exit(exc.exit_code)
        log_path = _write_crash_log()
        error(f"Unexpected error. Debug log: {log_path}")
        sys.exit(EXIT_GENERIC_FAILURE)
