"""Tests for specflat.config -- XDG paths, atomic writes, precedence."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any
from unittest.mock import patch

import pytest

from specflat.config import (
    _atomic_write,
    get_config_dir,
    get_data_dir,
    global_config_path,
    load_global_config,
    load_project_config,
    resolve_config,
    save_global_config,
    set_config_value,
)
from specflat.exceptions import ConfigError
from specflat.models import GlobalConfig, OutputConfig, ViewConfig


def _write_json(path: Path, data: Any) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2), encoding="utf-8")


# ---------------------------------------------------------------------------
# XDG path resolution
# ---------------------------------------------------------------------------


class TestXDGPaths:
    def test_config_dir_xdg_default(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("specflat.config._is_xdg_platform", lambda: True)
        monkeypatch.delenv("XDG_CONFIG_HOME", raising=False)
        monkeypatch.setattr(Path, "home", lambda: tmp_path)
        assert get_config_dir() == tmp_path / ".config" / "specflat"
        assert get_config_dir().is_dir()

    def test_config_dir_xdg_custom(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("specflat.config._is_xdg_platform", lambda: True)
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
        assert get_config_dir() == tmp_path / "xdg" / "specflat"

    def test_data_dir_xdg_custom(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("specflat.config._is_xdg_platform", lambda: True)
        monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
        assert get_data_dir() == tmp_path / "data" / "specflat"

    def test_fallback_dirs(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("specflat.config._is_xdg_platform", lambda: False)
        monkeypatch.setattr(Path, "home", lambda: tmp_path)
        assert get_config_dir() == tmp_path / ".specflat"
        assert get_data_dir() == tmp_path / ".specflat" / "data"


# ---------------------------------------------------------------------------
# Atomic writes
# ---------------------------------------------------------------------------


class TestAtomicWrite:
    def test_creates_file_and_parents(self, tmp_path: Path) -> None:
        target = tmp_path / "a" / "b" / "config.json"
        _atomic_write(target, "{}\n")
        assert target.read_text(encoding="utf-8") == "{}\n"

    def test_overwrites_existing_file(self, tmp_path: Path) -> None:
        target = tmp_path / "config.json"
        target.write_text("old", encoding="utf-8")
        _atomic_write(target, "new")
        assert target.read_text(encoding="utf-8") == "new"

    def test_no_temp_files_left_on_error(self, tmp_path: Path) -> None:
        target = tmp_path / "config.json"
        with patch("specflat.config.os.replace", side_effect=OSError("disk full")):
            with pytest.raises(OSError):
                _atomic_write(target, "data")
        assert list(tmp_path.iterdir()) == []


# ---------------------------------------------------------------------------
# Global config
# ---------------------------------------------------------------------------


class TestGlobalConfig:
    def test_defaults_when_missing(self, isolated_config: Path) -> None:
        config = load_global_config()
        assert config.output.format == "auto"
        assert config.views.default == "simplified"
        assert config.views.include_schemas is True

    def test_save_and_load_roundtrip(self, isolated_config: Path) -> None:
        save_global_config(GlobalConfig(views=ViewConfig(default="field")))
        assert load_global_config().views.default == "field"
        assert json.loads(global_config_path().read_text(encoding="utf-8"))["views"]["default"] == "field"

    def test_invalid_json(self, isolated_config: Path) -> None:
        _write_json(global_config_path(), {})
        global_config_path().write_text("{nope", encoding="utf-8")
        with pytest.raises(ConfigError, match="Invalid global config"):
            load_global_config()

    def test_invalid_schema(self, isolated_config: Path) -> None:
        _write_json(global_config_path(), {"views": {"include_schemas": "maybe"}})
        with pytest.raises(ConfigError):
            load_global_config()


class TestSetConfigValue:
    def test_sets_string(self) -> None:
        config = set_config_value(GlobalConfig(), "output.format", "json")
        assert config.output.format == "json"

    @pytest.mark.parametrize(("raw", "expected"), [("false", False), ("YES", True), ("0", False)])
    def test_coerces_bool(self, raw: str, expected: bool) -> None:
        config = set_config_value(GlobalConfig(), "views.include_schemas", raw)
        assert config.views.include_schemas is expected

    def test_rejects_non_bool(self) -> None:
        with pytest.raises(ConfigError, match="Expected true or false"):
            set_config_value(GlobalConfig(), "views.include_schemas", "sometimes")

    @pytest.mark.parametrize("key", ["cache.ttl", "views", "views.missing", "output"])
    def test_unknown_key(self, key: str) -> None:
        with pytest.raises(ConfigError, match="Unknown config key"):
            set_config_value(GlobalConfig(), key, "x")

    def test_rejects_unknown_choice(self) -> None:
        with pytest.raises(ConfigError, match="Invalid view"):
            set_config_value(GlobalConfig(), "views.default", "tree")

    def test_original_unchanged(self) -> None:
        original = GlobalConfig()
        set_config_value(original, "output.format", "plain")
        assert original.output.format == "auto"


# ---------------------------------------------------------------------------
# Project config and precedence
# ---------------------------------------------------------------------------


class TestProjectConfig:
    def test_none_when_missing(self, isolated_config: Path) -> None:
        assert load_project_config() is None

    def test_loads_object(self, isolated_config: Path) -> None:
        _write_json(isolated_config / "specflat.json", {"views": {"default": "field"}})
        assert load_project_config() == {"views": {"default": "field"}}

    def test_rejects_non_object(self, isolated_config: Path) -> None:
        _write_json(isolated_config / "specflat.json", ["field"])
        with pytest.raises(ConfigError, match="expected a JSON object"):
            load_project_config()


class TestResolveConfig:
    def test_defaults(self, isolated_config: Path) -> None:
        assert resolve_config() == GlobalConfig()

    def test_user_config(self, isolated_config: Path) -> None:
        save_global_config(GlobalConfig(output=OutputConfig(format="plain")))
        assert resolve_config().output.format == "plain"

    def test_project_overrides_user(self, isolated_config: Path) -> None:
        save_global_config(GlobalConfig(views=ViewConfig(default="field")))
        _write_json(isolated_config / "specflat.json", {"views": {"default": "normalized"}})
        config = resolve_config()
        assert config.views.default == "normalized"
        assert config.views.include_schemas is True

    def test_env_overrides_project(
        self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        _write_json(isolated_config / "specflat.json", {"output": {"format": "plain"}})
        monkeypatch.setenv("SPECFLAT_FORMAT", "rich")
        monkeypatch.setenv("SPECFLAT_VIEW", "field")
        config = resolve_config()
        assert config.output.format == "rich"
        assert config.views.default == "field"

    def test_cli_overrides_env(
        self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("SPECFLAT_FORMAT", "rich")
        config = resolve_config(cli_format="json", cli_view="simplified")
        assert config.output.format == "json"
        assert config.views.default == "simplified"

    def test_invalid_value_from_any_layer(
        self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("SPECFLAT_VIEW", "tree")
        with pytest.raises(ConfigError, match="Invalid view"):
            resolve_config()
