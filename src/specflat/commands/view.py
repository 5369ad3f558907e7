"""``specflat view`` and ``specflat fields`` -- projected views of a document.

Both commands convert SOURCE first, then project it:

* ``view --kind simplified`` -- ``"METHOD path"`` keyed, one type per field.
* ``view --kind field`` -- path/method keyed, with the schemas section
  controlled by ``views.include_schemas`` or ``--schemas/--no-schemas``.
* ``view --kind normalized`` -- same output as ``specflat convert``.
* ``fields SCHEMA`` -- the field tree of one named schema.

When ``--kind`` is omitted the configured ``views.default`` is used.
"""

from __future__ import annotations

from typing import Optional

import typer

from specflat.commands.convert import document_payload
from specflat.commands.source import abort, load_document
from specflat.config import VIEW_KINDS
from specflat.exceptions import InvalidUsageError
from specflat.models import GlobalConfig, NormalizedDocument, Schema
from specflat.output import emit, print_fields
from specflat.parser.identifiers import sanitize
from specflat.views import FieldProjector, SchemaResolver, to_field_view, to_simplified_view


def _config(ctx: typer.Context) -> GlobalConfig:
    if ctx.obj and isinstance(ctx.obj.get("config"), GlobalConfig):
        return ctx.obj["config"]
    return GlobalConfig()


def view_command(
    ctx: typer.Context,
    source: str = typer.Argument(help="Spec file path, http(s) URL, or '-' for stdin."),
    kind: Optional[str] = typer.Option(
        None, "--kind", "-k", help="View to produce: simplified, field, normalized."
    ),
    schemas: Optional[bool] = typer.Option(
        None, "--schemas/--no-schemas", help="Include the schemas section (field view)."
    ),
) -> None:
    """Print a projected view of an API description.

    Example::

        specflat view petstore.yaml
        specflat view petstore.yaml --kind field --no-schemas
    """
    config = _config(ctx)
    kind = kind or config.views.default
    if kind not in VIEW_KINDS:
        abort(InvalidUsageError(
            f"Unknown view '{kind}' (expected one of: {', '.join(VIEW_KINDS)})"
        ))

    document = load_document(source)
    if kind == "normalized":
        emit(document_payload(document))
    elif kind == "field":
        include = config.views.include_schemas if schemas is None else schemas
        view = to_field_view(document, include_schemas=include)
        emit(view.model_dump(mode="json", by_alias=True, exclude_none=True))
    else:
        emit(to_simplified_view(document).model_dump(mode="json", exclude_none=True))


def _find_schema(document: NormalizedDocument, name: str) -> Optional[Schema]:
    for schema in document.schemas:
        if schema.name == name or schema.id == name:
            return schema
    # Fall back to a case-insensitive match on the derived ID
    wanted = f"schema-{sanitize(name)}"
    return next((schema for schema in document.schemas if schema.id == wanted), None)


def fields_command(
    source: str = typer.Argument(help="Spec file path, http(s) URL, or '-' for stdin."),
    schema_name: str = typer.Argument(help="Schema name (e.g. 'Pet') or ID ('schema-pet')."),
) -> None:
    """Print the field tree of one schema, with cycles cut at ``circular-ref``.

    Example::

        specflat fields petstore.yaml Category
    """
    document = load_document(source)
    schema = _find_schema(document, schema_name)
    if schema is None:
        abort(InvalidUsageError(f"Schema '{schema_name}' not found"))

    projector = FieldProjector(SchemaResolver.for_document(document))
    print_fields(projector.project_named(schema.id), title=schema.name or schema.id)
