"""Shared test fixtures for specflat.

Provides fixture documents (raw and converted), config isolation, output
state management, and a CLI runner. Discovered automatically by pytest.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import pytest
import yaml

from specflat.models import NormalizedDocument
from specflat.output import OutputFormat, OutputManager, reset_output, set_output
from specflat.parser import convert


FIXTURES_DIR = Path(__file__).parent / "fixtures"


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager keeps references to sys.stdout/sys.stderr. CliRunner
    swaps those streams per invocation, so a manager left over from one test
    would write to a closed file in the next.
    """
    yield
    reset_output()


@pytest.fixture(autouse=True)
def _reset_logging_between_tests() -> None:
    """Drop the stderr handler that `--verbose` installs on the root logger."""
    yield
    root = logging.getLogger()
    for handler in root.handlers[:]:
        if type(handler) is logging.StreamHandler:
            root.removeHandler(handler)
    root.setLevel(logging.WARNING)


# ---------------------------------------------------------------------------
# Fixture documents
# ---------------------------------------------------------------------------


@pytest.fixture
def petstore_path() -> Path:
    return FIXTURES_DIR / "petstore.yaml"


@pytest.fixture
def swagger_path() -> Path:
    return FIXTURES_DIR / "swagger.json"


@pytest.fixture
def petstore_raw(petstore_path: Path) -> dict[str, Any]:
    """Raw OpenAPI 3.0 petstore dict (YAML fixture)."""
    with open(petstore_path, encoding="utf-8") as f:
        return yaml.safe_load(f)


@pytest.fixture
def swagger_raw(swagger_path: Path) -> dict[str, Any]:
    """Raw Swagger 2.0 user service dict (JSON fixture)."""
    with open(swagger_path, encoding="utf-8") as f:
        return json.load(f)


@pytest.fixture
def petstore_doc(petstore_path: Path) -> NormalizedDocument:
    result = convert(petstore_path.read_text(encoding="utf-8"))
    assert result.success, result.error
    return result.data


@pytest.fixture
def swagger_doc(swagger_path: Path) -> NormalizedDocument:
    result = convert(swagger_path.read_text(encoding="utf-8"))
    assert result.success, result.error
    return result.data


# ---------------------------------------------------------------------------
# Config isolation
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point XDG dirs at tmp_path, clear SPECFLAT_* vars and chdir there.

    Returns:
        The tmp_path root directory for additional file creation.
    """
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    for var in ("SPECFLAT_FORMAT", "SPECFLAT_VIEW", "NO_COLOR"):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def quiet_output() -> OutputManager:
    """Install a quiet PLAIN-format output manager."""
    output = OutputManager(format=OutputFormat.PLAIN, quiet=True)
    set_output(output)
    yield output
    reset_output()


@pytest.fixture
def json_output() -> OutputManager:
    """Install a JSON-format output manager."""
    output = OutputManager(format=OutputFormat.JSON)
    set_output(output)
    yield output
    reset_output()


# ---------------------------------------------------------------------------
# CLI runner
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    """Typer CLI test runner with stderr captured separately."""
    from typer.testing import CliRunner

    try:
        return CliRunner(mix_stderr=False)
    except TypeError:
        # Click 8.2 always captures stderr separately
        return CliRunner()
