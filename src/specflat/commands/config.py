"""Config commands -- view and modify the user configuration.

``specflat config show|set|reset`` operate on the
:class:`~specflat.models.GlobalConfig` file in the specflat config
directory. Project files (``./specflat.json``) and environment variables
are not touched; ``show --effective`` displays the merged result.
"""

from __future__ import annotations

import typer

from specflat.config import (
    global_config_path,
    load_global_config,
    resolve_config,
    save_global_config,
    set_config_value,
)
from specflat.exceptions import ConfigError
from specflat.exit_codes import EXIT_INVALID_USAGE
from specflat.models import GlobalConfig
from specflat.output import emit, error, info, success


config_app = typer.Typer(no_args_is_help=True)


@config_app.command("show")
def config_show(
    effective: bool = typer.Option(
        False, "--effective", help="Show the merged config (project file and env applied)."
    ),
) -> None:
    """Show the current configuration.

    Example::

        specflat config show
        specflat --json config show --effective
    """
    try:
        config = resolve_config() if effective else load_global_config()
    except ConfigError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None
    info(f"Config file: {global_config_path()}")
    emit(config.model_dump(mode="json"))


@config_app.command("set")
def config_set(
    key: str = typer.Argument(help="Config key in dot notation, e.g. 'views.default'."),
    value: str = typer.Argument(help="Value to set."),
) -> None:
    """Set a configuration value.

    Example::

        specflat config set output.format json
        specflat config set views.default field
        specflat config set views.include_schemas false
    """
    try:
        config = set_config_value(load_global_config(), key, value)
    except ConfigError as exc:
        error(str(exc))
        raise typer.Exit(code=EXIT_INVALID_USAGE) from None

    save_global_config(config)
    success(f"Set {key} = {value}")


@config_app.command("reset")
def config_reset(
    force: bool = typer.Option(False, "--force", "-f", help="Skip confirmation."),
) -> None:
    """Reset the configuration to defaults."""
    if not force and not typer.confirm("Reset all config to defaults?"):
        info("Cancelled.")
        raise typer.Exit()

    save_global_config(GlobalConfig())
    success("Configuration reset to defaults.")
