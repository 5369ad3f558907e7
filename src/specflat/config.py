"""User and project configuration for the specflat CLI.

* **Directories** -- XDG Base Directory layout on Linux/BSD
  (``$XDG_CONFIG_HOME/specflat``, ``$XDG_DATA_HOME/specflat``), ``~/.specflat``
  elsewhere. The data directory only holds crash logs.
* **Global config** -- one :class:`~specflat.models.GlobalConfig` JSON file,
  written atomically.
* **Precedence** -- :func:`resolve_config` layers CLI flags over environment
  variables over ``./specflat.json`` over the user file over defaults.

The conversion core never reads configuration; only the CLI does.
"""

from __future__ import annotations

import json
import os
import platform
import tempfile
from pathlib import Path
from typing import Any, Optional

from specflat.exceptions import ConfigError
from specflat.models import GlobalConfig

_APP_NAME = "specflat"
_CONFIG_FILENAME = "config.json"
_PROJECT_CONFIG_FILENAME = "specflat.json"

OUTPUT_FORMATS = ("auto", "json", "plain", "rich")
VIEW_KINDS = ("simplified", "field", "normalized")

ENV_FORMAT = "SPECFLAT_FORMAT"
ENV_VIEW = "SPECFLAT_VIEW"


# --- Directories ---


def _is_xdg_platform() -> bool:
    system = platform.system()
    return system == "Linux" or system.endswith("BSD")


def _xdg_dir(env_var: str, default_segments: tuple[str, ...], fallback: str) -> Path:
    if not _is_xdg_platform():
        path = Path.home() / f".{_APP_NAME}"
        return path / fallback if fallback else path
    env_value = os.environ.get(env_var, "")
    base = Path(env_value) if env_value else Path.home().joinpath(*default_segments)
    return base / _APP_NAME


def get_config_dir() -> Path:
    """Return the configuration directory, creating it if necessary."""
    path = _xdg_dir("XDG_CONFIG_HOME", (".config",), "")
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_data_dir() -> Path:
    """Return the data directory (crash logs live in its ``logs/``), creating it if necessary."""
    path = _xdg_dir("XDG_DATA_HOME", (".local", "share"), "data")
    path.mkdir(parents=True, exist_ok=True)
    return path


# --- Atomic writes ---


def _atomic_write(path: Path, data: str) -> None:
    """Write *data* to a temp file beside *path*, then rename it over *path*."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with tempfile.NamedTemporaryFile(
        mode="w",
        dir=path.parent,
        prefix=f".{path.name}.",
        suffix=".tmp",
        delete=False,
        encoding="utf-8",
    ) as tmp:
        tmp_path = Path(tmp.name)
        try:
            tmp.write(data)
            tmp.flush()
            os.fsync(tmp.fileno())
        except BaseException:
            tmp.close()
            tmp_path.unlink(missing_ok=True)
            raise
    try:
        os.replace(tmp_path, path)
    except OSError:
        tmp_path.unlink(missing_ok=True)
        raise


# --- Global config ---


def global_config_path() -> Path:
    return get_config_dir() / _CONFIG_FILENAME


def load_global_config() -> GlobalConfig:
    """Load the user config file; a missing file yields defaults.

    Raises:
        ConfigError: If the file is not valid JSON or fails validation.
    """
    path = global_config_path()
    if not path.is_file():
        return GlobalConfig()
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        return GlobalConfig.model_validate(data)
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid global config at {path}: {exc}") from exc


def save_global_config(config: GlobalConfig) -> None:
    data = config.model_dump(mode="json")
    _atomic_write(global_config_path(), json.dumps(data, indent=2) + "\n")


def set_config_value(config: GlobalConfig, key: str, value: str) -> GlobalConfig:
    """Return a copy of *config* with the dotted *key* set to *value*.

    The string value is coerced to the type of the current setting.

    Raises:
        ConfigError: For an unknown key or a value the setting does not accept.
    """
    data = config.model_dump(mode="json")
    section_name, _, field_name = key.partition(".")
    section = data.get(section_name)
    if not isinstance(section, dict) or field_name not in section:
        raise ConfigError(f"Unknown config key: {key}")

    current = section[field_name]
    coerced: Any = value
    if isinstance(current, bool):
        lowered = value.lower()
        if lowered not in ("true", "false", "1", "0", "yes", "no"):
            raise ConfigError(f"Expected true or false for {key}, got: {value}")
        coerced = lowered in ("true", "1", "yes")
    section[field_name] = coerced

    try:
        new_config = GlobalConfig.model_validate(data)
    except ValueError as exc:
        raise ConfigError(f"Invalid value for {key}: {exc}") from exc
    _validate_choices(new_config)
    return new_config


def _validate_choices(config: GlobalConfig) -> None:
    if config.output.format not in OUTPUT_FORMATS:
        raise ConfigError(
            f"Invalid output format '{config.output.format}' "
            f"(expected one of: {', '.join(OUTPUT_FORMATS)})"
        )
    if config.views.default not in VIEW_KINDS:
        raise ConfigError(
            f"Invalid view '{config.views.default}' "
            f"(expected one of: {', '.join(VIEW_KINDS)})"
        )


# --- Project config ---


def load_project_config() -> Optional[dict[str, Any]]:
    """Load ``./specflat.json`` if present.

    The file uses the same shape as the user config, e.g.
    ``{"views": {"default": "field"}}``.

    Raises:
        ConfigError: If the file exists but is not a JSON object.
    """
    path = Path.cwd() / _PROJECT_CONFIG_FILENAME
    if not path.is_file():
        return None
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid project config at {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Invalid project config at {path}: expected a JSON object")
    return data


# --- Precedence resolution ---


def resolve_config(
    cli_format: Optional[str] = None,
    cli_view: Optional[str] = None,
) -> GlobalConfig:
    """Return the effective configuration.

    Precedence (high to low):
        1. CLI flags (``cli_format``, ``cli_view``)
        2. Environment variables (``SPECFLAT_FORMAT``, ``SPECFLAT_VIEW``)
        3. Project config (``./specflat.json``)
        4. User config (``~/.config/specflat/config.json``)
        5. Defaults

    Raises:
        ConfigError: If any layer supplies an unknown format or view.
    """
    data = load_global_config().model_dump(mode="json")

    project = load_project_config()
    if project is not None:
        for section in ("output", "views"):
            overrides = project.get(section)
            if isinstance(overrides, dict):
                data[section].update(overrides)

    fmt = cli_format or os.environ.get(ENV_FORMAT)
    if fmt:
        data["output"]["format"] = fmt
    view = cli_view or os.environ.get(ENV_VIEW)
    if view:
        data["views"]["default"] = view

    try:
        config = GlobalConfig.model_validate(data)
    except ValueError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc
    _validate_choices(config)
    return config
