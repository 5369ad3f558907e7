"""Build the projected views of a normalized document.

Two views are produced from the same :class:`~specflat.models.NormalizedDocument`:

* **Field view** -- indexed by path and method, with every media-type schema
  and every named schema projected into a field tree.
* **Simplified view** -- indexed by ``"METHOD path"``, one line of parameter
  types per endpoint plus the JSON request and first-success response fields.

Both are pure functions of the document. References that do not resolve are
never fatal: the field view shows a placeholder, the simplified view leaves
the entry out.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from specflat.models import (
    Endpoint,
    FieldApiInfo,
    FieldContent,
    FieldOperation,
    FieldParameter,
    FieldRequestBody,
    FieldResponse,
    FieldSchema,
    FieldView,
    MediaType,
    NormalizedDocument,
    Parameter,
    Schema,
    SimplifiedEndpoint,
    SimplifiedView,
)
from specflat.schema_utils import first_type
from specflat.views.projector import FieldProjector
from specflat.views.resolver import ParameterResolver, SchemaResolver

logger = logging.getLogger(__name__)

UNRESOLVED_LOCATION = "unknown"
UNRESOLVED_TYPE = "unresolved"


def to_field_view(document: NormalizedDocument, include_schemas: bool = True) -> FieldView:
    """Return the operation-indexed field view of *document*."""
    return ViewBuilder(document).field_view(include_schemas=include_schemas)


def to_simplified_view(document: NormalizedDocument) -> SimplifiedView:
    """Return the endpoint-indexed, type-collapsed view of *document*."""
    return ViewBuilder(document).simplified_view()


class ViewBuilder:
    """Shared lookups for building either view of one document.

    Args:
        document: The normalized store. It is read, never modified.
    """

    def __init__(self, document: NormalizedDocument) -> None:
        self._document = document
        self._schemas = SchemaResolver.for_document(document)
        self._parameters = ParameterResolver.for_document(document)
        self._projector = FieldProjector(self._schemas)
        self._responses = {response.id: response for response in document.responses}
        self._request_bodies = {body.id: body for body in document.request_bodies}

    # ------------------------------------------------------------------ #
    # Field view
    # ------------------------------------------------------------------ #

    def field_view(self, include_schemas: bool = True) -> FieldView:
        metadata = self._document.metadata
        paths: dict[str, dict[str, FieldOperation]] = {}
        for endpoint in self._document.endpoints:
            paths.setdefault(endpoint.path, {})[endpoint.method.lower()] = self._field_operation(
                endpoint
            )

        schemas: dict[str, FieldSchema] = {}
        if include_schemas:
            for schema in self._document.schemas:
                schemas[_schema_key(schema)] = self._field_schema(schema)

        logger.debug(
            "Field view: %d operations, %d schemas", len(self._document.endpoints), len(schemas)
        )
        return FieldView(
            api_info=FieldApiInfo(
                title=metadata.title,
                version=metadata.version,
                description=metadata.description,
                base_url=metadata.base_url,
                servers=metadata.servers,
            ),
            paths=paths,
            schemas=schemas,
        )

    def _field_operation(self, endpoint: Endpoint) -> FieldOperation:
        parameters: dict[str, FieldParameter] = {}
        for ref in endpoint.parameter_refs:
            parameter = self._parameters.resolve(ref)
            if parameter is None:
                parameters[ref] = FieldParameter(
                    location=UNRESOLVED_LOCATION,
                    type=UNRESOLVED_TYPE,
                    description=f"Unresolved parameter reference: {ref}",
                )
                continue
            schema = self._schemas.resolve(parameter.schema_) or {}
            parameters[parameter.name] = FieldParameter(
                location=parameter.location.value,
                type=self._parameter_type(parameter),
                required=parameter.required,
                description=parameter.description,
                default=schema.get("default"),
                example=parameter.example,
            )

        request_body: Optional[FieldRequestBody] = None
        if endpoint.request_body_ref:
            body = self._request_bodies.get(endpoint.request_body_ref)
            if body is None:
                request_body = FieldRequestBody(
                    description=f"Unresolved request body reference: {endpoint.request_body_ref}"
                )
            else:
                request_body = FieldRequestBody(
                    required=body.required,
                    description=body.description,
                    content_types=self._field_content(body.content),
                )

        responses: dict[str, FieldResponse] = {}
        for status, ref in endpoint.responses.items():
            response = self._responses.get(ref)
            if response is None:
                responses[status] = FieldResponse(
                    description=f"Unresolved response reference: {ref}"
                )
            else:
                responses[status] = FieldResponse(
                    description=response.description,
                    content_types=self._field_content(response.content),
                )

        return FieldOperation(
            operation_id=endpoint.operation_id,
            summary=endpoint.summary,
            description=endpoint.description,
            tags=list(endpoint.tags),
            parameters=parameters,
            request_body=request_body,
            responses=responses,
            deprecated=bool(endpoint.deprecated),
        )

    def _field_content(self, content: dict[str, MediaType]) -> dict[str, FieldContent]:
        return {
            media_type: FieldContent(
                schema=self._projector.project_schema(media.schema_)
                if media.schema_ is not None
                else None,
                example=media.example,
            )
            for media_type, media in content.items()
        }

    def _field_schema(self, schema: Schema) -> FieldSchema:
        projected = self._projector.project_named(schema.id)
        properties: Any = None
        items: Any = None
        if isinstance(projected, dict):
            properties = projected
        elif isinstance(projected, list):
            items = projected[0]
        return FieldSchema(
            type=schema.type,
            properties=properties,
            items=items,
            required=schema.required,
            description=schema.description,
        )

    # ------------------------------------------------------------------ #
    # Simplified view
    # ------------------------------------------------------------------ #

    def simplified_view(self) -> SimplifiedView:
        metadata = self._document.metadata
        endpoints: dict[str, SimplifiedEndpoint] = {}
        for endpoint in self._document.endpoints:
            parameters: dict[str, str] = {}
            for ref in endpoint.parameter_refs:
                parameter = self._parameters.resolve(ref)
                if parameter is not None:
                    parameters[parameter.name] = self._parameter_type(parameter)

            endpoints[f"{endpoint.method} {endpoint.path}"] = SimplifiedEndpoint(
                summary=endpoint.summary,
                parameters=parameters,
                request_fields=self._request_fields(endpoint),
                response_fields=self._response_fields(endpoint),
            )

        return SimplifiedView(api=f"{metadata.title} v{metadata.version}", endpoints=endpoints)

    def _request_fields(self, endpoint: Endpoint) -> Any:
        body = self._request_bodies.get(endpoint.request_body_ref or "")
        if body is None:
            return {}
        return self._top_level_fields(body.content)

    def _response_fields(self, endpoint: Endpoint) -> Any:
        success = sorted(status for status in endpoint.responses if status.startswith("2"))
        if not success:
            return {}
        response = self._responses.get(endpoint.responses[success[0]])
        if response is None:
            return {}
        return self._top_level_fields(response.content)

    def _top_level_fields(self, content: dict[str, MediaType]) -> Any:
        media = _json_media(content)
        if media is None or media.schema_ is None:
            return {}
        projected = self._projector.project_schema(media.schema_)
        # A bare primitive has no fields to show
        return projected if isinstance(projected, (dict, list)) else {}

    def _parameter_type(self, parameter: Parameter) -> str:
        schema = self._schemas.resolve(parameter.schema_)
        if not schema:
            return "string"
        return first_type(schema.get("type")) or "string"


def _json_media(content: dict[str, MediaType]) -> Optional[MediaType]:
    if "application/json" in content:
        return content["application/json"]
    for media_type, media in content.items():
        base = media_type.split(";", 1)[0].strip().lower()
        if base == "application/json" or base.endswith("+json"):
            return media
    return None


def _schema_key(schema: Schema) -> str:
    if schema.name:
        return schema.name
    if schema.id.startswith("schema-"):
        return schema.id[len("schema-"):]
    return schema.id
