"""Read API descriptions from a URL, local file, or stdin and parse them.

This module handles all I/O for fetching raw documents and turning their text
into Python dictionaries. JSON and YAML are both accepted, with JSON tried
first, and both OpenAPI 3.x and Swagger 2.0 are recognised.

The public functions are:

* :func:`read_source` -- Return the raw text of a document from any supported
  source. Used by the CLI; the conversion core works on text only.
* :func:`parse_content` -- Parse document text into a dict.
* :func:`detect_spec_version` -- Report the dialect and version string.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any

import httpx
import yaml

from specflat.exceptions import SourceError, SpecParseError


def read_source(source: str) -> tuple[str, str]:
    """Read a document from URL, file path, or stdin ('-').

    Args:
        source: A URL (http/https), file path, or '-' for stdin.

    Returns:
        A ``(text, hint)`` tuple where *hint* is ``"json"``, ``"yaml"`` or
        ``""`` depending on the file extension or response content type.

    Raises:
        SourceError: If the source cannot be read or is empty.
    """
    if source == "-":
        return _read_from_stdin(), ""
    elif source.startswith(("http://", "https://")):
        return _read_from_url(source)
    else:
        return _read_from_file(source)


def _read_from_stdin() -> str:
    """Read all available input from stdin.

    Raises:
        SourceError: If stdin cannot be read or is empty.
    """
    try:
        content = sys.stdin.read()
    except Exception as exc:
        raise SourceError(f"Failed to read from stdin: {exc}") from exc

    if not content.strip():
        raise SourceError("No input received from stdin")

    return content


def _read_from_url(url: str) -> tuple[str, str]:
    """Fetch a document over HTTP(S).

    Args:
        url: The HTTP(S) URL to fetch.

    Returns:
        The response text and a format hint derived from ``Content-Type``.

    Raises:
        SourceError: If the URL cannot be fetched.
    """
    try:
        response = httpx.get(url, timeout=30.0, follow_redirects=True)
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise SourceError(
            f"HTTP {exc.response.status_code} fetching spec from {url}"
        ) from exc
    except httpx.RequestError as exc:
        raise SourceError(f"Failed to fetch spec from {url}: {exc}") from exc

    # Use content-type as a hint for parsing
    content_type = response.headers.get("content-type", "")
    hint = ""
    if "json" in content_type:
        hint = "json"
    elif "yaml" in content_type or "yml" in content_type:
        hint = "yaml"

    return response.text, hint


def _read_from_file(path: str) -> tuple[str, str]:
    """Read a document from a local file.

    Supports .json, .yaml, and .yml extensions as hints. Other extensions
    fall back to content-based detection.

    Raises:
        SourceError: If the file is missing, unreadable, or empty.
    """
    file_path = Path(path)
    if not file_path.is_file():
        raise SourceError(f"Spec file not found: {path}")

    try:
        content = file_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise SourceError(f"Failed to read spec file {path}: {exc}") from exc

    if not content.strip():
        raise SourceError(f"Spec file is empty: {path}")

    suffix = file_path.suffix.lower()
    hint = ""
    if suffix == ".json":
        hint = "json"
    elif suffix in (".yaml", ".yml"):
        hint = "yaml"

    return content, hint


def parse_content(content: str, hint: str = "") -> dict[str, Any]:
    """Parse content as JSON or YAML.

    Tries JSON first (unless hint is 'yaml'), then falls back to YAML.
    Valid JSON is also valid YAML, but JSON parsing is stricter and faster.
    A ``"json"`` hint does not disable the YAML fallback: editors routinely
    save YAML under a ``.json`` name while a document is being converted.

    Args:
        content: The raw string content.
        hint: Optional format hint ('json' or 'yaml').

    Returns:
        The parsed dictionary.

    Raises:
        SpecParseError: If the content cannot be parsed as either format,
            or does not contain a mapping at the top level.
    """
    json_error: Exception | None = None
    yaml_error: Exception | None = None

    if hint != "yaml":
        try:
            result = json.loads(content)
        except json.JSONDecodeError as exc:
            json_error = exc
        else:
            return _require_mapping(result)

    try:
        result = yaml.safe_load(content)
    except yaml.YAMLError as exc:
        yaml_error = exc
    else:
        return _require_mapping(result)

    msg = "Failed to parse spec as JSON or YAML"
    if json_error:
        msg += f"\n  JSON error: {json_error}"
    if yaml_error:
        msg += f"\n  YAML error: {yaml_error}"
    raise SpecParseError(msg)


def _require_mapping(result: Any) -> dict[str, Any]:
    if not isinstance(result, dict):
        got = type(result).__name__ if result is not None else "empty document"
        raise SpecParseError(f"Spec must be a JSON/YAML object (got {got})")
    return result


def detect_spec_version(spec: dict[str, Any]) -> tuple[str, str | None]:
    """Return the document's dialect and version string.

    Returns:
        ``("swagger", "2.0")``, ``("openapi", "3.0.3")``, or
        ``("unknown", None)`` when neither field is present. Unknown or
        future versions are reported, not rejected.
    """
    if "swagger" in spec:
        return "swagger", str(spec["swagger"])
    if "openapi" in spec:
        return "openapi", str(spec["openapi"])
    return "unknown", None
