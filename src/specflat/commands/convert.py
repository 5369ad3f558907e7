"""``specflat convert`` -- print the normalized document."""

from __future__ import annotations

from typing import Any

import typer

from specflat.commands.source import load_document
from specflat.models import NormalizedDocument
from specflat.output import emit


def document_payload(document: NormalizedDocument) -> dict[str, Any]:
    """Return the camelCase exchange shape of *document*."""
    return document.model_dump(mode="json", by_alias=True, exclude_none=True)


def convert_command(
    source: str = typer.Argument(help="Spec file path, http(s) URL, or '-' for stdin."),
) -> None:
    """Convert an OpenAPI 3.x or Swagger 2.0 document into the normalized store.

    Every ``$ref`` is rewritten to the stable ID of its target and every
    entity is emitted once in a flat collection.

    Example::

        specflat convert petstore.yaml
        curl -s https://example.com/openapi.json | specflat --json convert -
    """
    emit(document_payload(load_document(source)))
