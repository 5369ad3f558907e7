"""Inspect commands -- summarize a converted document as tables.

``specflat inspect paths|schemas|auth|info SOURCE`` convert SOURCE and list
what the normalized store holds. Output follows the active format: a Rich
table on a terminal, JSON records with ``--json``, tab-separated lines with
``--plain``.
"""

from __future__ import annotations

from typing import Any

import typer

from specflat.commands.source import load_document
from specflat.output import emit, get_output, info


inspect_app = typer.Typer(no_args_is_help=True)

_SOURCE_HELP = "Spec file path, http(s) URL, or '-' for stdin."


@inspect_app.command("paths")
def inspect_paths(source: str = typer.Argument(help=_SOURCE_HELP)) -> None:
    """List every operation with its endpoint ID.

    Example::

        specflat inspect paths petstore.yaml
    """
    document = load_document(source)

    rows: list[list[str]] = []
    for endpoint in sorted(document.endpoints, key=lambda e: (e.path, e.method)):
        rows.append([
            endpoint.method,
            endpoint.path,
            endpoint.id,
            endpoint.summary or "-",
            "Yes" if endpoint.deprecated else "",
        ])

    get_output().print_table(
        ["Method", "Path", "ID", "Summary", "Deprecated"],
        rows,
        title=f"{document.metadata.title} -- Paths ({len(rows)})",
    )


@inspect_app.command("schemas")
def inspect_schemas(source: str = typer.Argument(help=_SOURCE_HELP)) -> None:
    """List named schemas with their type and up to five property names."""
    document = load_document(source)
    if not document.schemas:
        info("No schemas defined in this spec.")
        return

    rows: list[list[str]] = []
    for schema in sorted(document.schemas, key=lambda s: s.id):
        prop_names = list(schema.properties or {})
        props = ", ".join(prop_names[:5])
        if len(prop_names) > 5:
            props += "..."
        rows.append([schema.name or "-", schema.id, schema.type, props])

    get_output().print_table(
        ["Schema", "ID", "Type", "Properties"], rows, title=f"Schemas ({len(rows)})"
    )


@inspect_app.command("auth")
def inspect_auth(source: str = typer.Argument(help=_SOURCE_HELP)) -> None:
    """Show the security schemes the document declares."""
    document = load_document(source)
    if not document.security_schemes:
        info("No security schemes defined.")
        return

    rows: list[list[str]] = []
    for scheme in document.security_schemes:
        flows = ", ".join(scheme.flows) if scheme.flows else "-"
        rows.append([
            scheme.id,
            scheme.type,
            scheme.scheme or flows,
            scheme.location or "-",
            (scheme.description or "-")[:60],
        ])

    get_output().print_table(
        ["ID", "Type", "Scheme/Flows", "Location", "Description"],
        rows,
        title="Security Schemes",
    )


@inspect_app.command("info")
def inspect_info(source: str = typer.Argument(help=_SOURCE_HELP)) -> None:
    """Show API metadata and entity counts."""
    document = load_document(source)
    metadata = document.metadata

    data: dict[str, Any] = {
        "title": metadata.title,
        "version": metadata.version,
        "spec_version": metadata.spec_version or "-",
        "description": metadata.description or "-",
        "servers": [server.url for server in metadata.servers],
        "tags": metadata.tags,
        "endpoints": len(document.endpoints),
        "schemas": len(document.schemas),
        "parameters": len(document.parameters),
        "responses": len(document.responses),
        "request_bodies": len(document.request_bodies),
        "security_schemes": [s.id for s in document.security_schemes or []],
    }
    if metadata.contact and metadata.contact.email:
        data["contact"] = metadata.contact.email
    if metadata.license and metadata.license.name:
        data["license"] = metadata.license.name

    emit(data)
