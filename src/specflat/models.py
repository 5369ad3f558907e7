"""Canonical Pydantic models shared across all specflat modules.

This is the single source of truth for data shapes in the project. Every other
module imports from here rather than defining its own models. The models fall
into three groups:

**Configuration models** -- serialised as JSON in the user's config directory:
    :class:`OutputConfig`, :class:`ViewConfig`, and :class:`GlobalConfig`.

**Normalized store** -- produced by the normalizer, one instance per
conversion call and never mutated afterwards:
    :class:`License`, :class:`Contact`, :class:`Server`, :class:`Metadata`,
    :class:`Endpoint`, :class:`Schema`, :class:`Parameter`,
    :class:`MediaType`, :class:`Response`, :class:`RequestBody`,
    :class:`SecurityScheme`, :class:`NormalizedDocument`, and
    :class:`ConversionResult`.

**Projected views** -- built from a :class:`NormalizedDocument` by
:mod:`specflat.views.builder`:
    :class:`FieldView` (path/method addressable) and
    :class:`SimplifiedView` (``"METHOD path"`` keyed).

Store models are frozen and use snake_case attribute names with camelCase
aliases, so ``model_dump(by_alias=True)`` yields the exchange shape consumed by
the reverse converter and persistence layers. Field trees inside the views
are plain JSON values (strings, dicts, one-element lists).
"""

from __future__ import annotations

import enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


# --- Config models ---


class OutputConfig(BaseModel):
    """Default output format preferences stored in :class:`GlobalConfig`."""

    format: str = Field(
        default="auto", description="Output format: auto, json, plain, rich"
    )


class ViewConfig(BaseModel):
    """Defaults for ``specflat view``."""

    default: str = Field(
        default="simplified",
        description="View produced when --kind is omitted: simplified, field, normalized",
    )
    include_schemas: bool = Field(
        default=True, description="Include the schemas section in the field view"
    )


class GlobalConfig(BaseModel):
    """User-wide configuration persisted at ``~/.config/specflat/config.json``.

    Loaded and saved by :func:`~specflat.config.load_global_config` and
    :func:`~specflat.config.save_global_config`. Fields here have the
    lowest precedence and can be overridden by project config, environment
    variables, or CLI flags. See :func:`~specflat.config.resolve_config`
    for the full precedence chain.
    """

    output: OutputConfig = Field(default_factory=OutputConfig)
    views: ViewConfig = Field(default_factory=ViewConfig)


# --- Normalized store ---


class HTTPMethod(str, enum.Enum):
    """HTTP methods recognised on OpenAPI / Swagger path-item objects."""

    GET = "get"
    POST = "post"
    PUT = "put"
    DELETE = "delete"
    PATCH = "patch"
    OPTIONS = "options"
    HEAD = "head"
    TRACE = "trace"


class ParameterLocation(str, enum.Enum):
    """Locations where an API parameter can appear, per the ``in`` field."""

    PATH = "path"
    QUERY = "query"
    HEADER = "header"
    COOKIE = "cookie"


class _Entity(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)


class License(_Entity):
    name: Optional[str] = None
    url: Optional[str] = None


class Contact(_Entity):
    name: Optional[str] = None
    email: Optional[str] = None
    url: Optional[str] = None


class Server(_Entity):
    """A server entry; the first one provides :attr:`Metadata.base_url`."""

    url: str
    description: Optional[str] = None


class Metadata(_Entity):
    """API metadata extracted from ``info`` plus the derived base URL."""

    title: str
    version: str
    description: Optional[str] = None
    base_url: Optional[str] = Field(default=None, alias="baseUrl")
    license: Optional[License] = None
    contact: Optional[Contact] = None
    terms_of_service: Optional[str] = Field(default=None, alias="termsOfService")
    servers: list[Server] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    spec_version: Optional[str] = Field(default=None, alias="specVersion")


class Endpoint(_Entity):
    """One path + method pair.

    All references are entity IDs. A reference that could not be honoured
    is kept as its original string so that views can report it.
    """

    id: str
    path: str
    method: str
    operation_id: Optional[str] = Field(default=None, alias="operationId")
    summary: Optional[str] = None
    description: Optional[str] = None
    tags: list[str] = Field(default_factory=list)
    parameter_refs: list[str] = Field(default_factory=list, alias="parameterRefs")
    request_body_ref: Optional[str] = Field(default=None, alias="requestBodyRef")
    responses: dict[str, str] = Field(default_factory=dict)
    security: Optional[list[dict[str, list[str]]]] = None
    deprecated: bool = False


class Schema(_Entity):
    """A named schema from ``components.schemas`` / ``definitions``.

    ``properties`` values, ``items`` and ``additional_properties`` are either
    inline schema fragments or ``{"$ref": <schema id>}`` markers. A schema may
    reference itself; that is valid input.
    """

    id: str
    name: Optional[str] = None
    type: str = "object"
    required: Optional[list[str]] = None
    properties: Optional[dict[str, Any]] = None
    items: Any = None
    additional_properties: Any = Field(default=None, alias="additionalProperties")
    all_of: Optional[list[Any]] = Field(default=None, alias="allOf")
    one_of: Optional[list[Any]] = Field(default=None, alias="oneOf")
    any_of: Optional[list[Any]] = Field(default=None, alias="anyOf")
    enum: Optional[list[Any]] = None
    format: Optional[str] = None
    description: Optional[str] = None
    example: Any = None
    default: Any = None
    nullable: Optional[bool] = None
    min_items: Optional[int] = Field(default=None, alias="minItems")
    max_items: Optional[int] = Field(default=None, alias="maxItems")

    def as_fragment(self) -> dict[str, Any]:
        """Return the schema as a raw JSON-Schema-style dict (no id/name)."""
        return self.model_dump(by_alias=True, exclude_none=True, exclude={"id", "name"})


class Parameter(_Entity):
    id: str
    name: str
    location: ParameterLocation = Field(alias="in")
    required: Optional[bool] = None
    schema_: Any = Field(default=None, alias="schema")
    description: Optional[str] = None
    example: Any = None
    deprecated: Optional[bool] = None
    style: Optional[str] = None
    explode: Optional[bool] = None


class MediaType(_Entity):
    schema_: Any = Field(default=None, alias="schema")
    example: Any = None
    examples: Optional[dict[str, Any]] = None


class Response(_Entity):
    id: str
    description: Optional[str] = None
    headers: Optional[dict[str, Any]] = None
    content: dict[str, MediaType] = Field(default_factory=dict)


class RequestBody(_Entity):
    id: str
    description: Optional[str] = None
    required: Optional[bool] = None
    content: dict[str, MediaType] = Field(default_factory=dict)


class SecurityScheme(_Entity):
    """An entry of ``components.securitySchemes`` / ``securityDefinitions``."""

    id: str
    type: str
    name: Optional[str] = None
    location: Optional[str] = Field(default=None, alias="in")
    scheme: Optional[str] = None
    bearer_format: Optional[str] = Field(default=None, alias="bearerFormat")
    flows: Optional[dict[str, Any]] = None
    open_id_connect_url: Optional[str] = Field(default=None, alias="openIdConnectUrl")
    description: Optional[str] = None


class NormalizedDocument(_Entity):
    """Root aggregate of one conversion call.

    The store is a graph: schemas may reference each other or themselves.
    Anything that walks it must carry cycle protection (see
    :class:`~specflat.views.projector.FieldProjector`).
    """

    metadata: Metadata
    endpoints: list[Endpoint] = Field(default_factory=list)
    schemas: list[Schema] = Field(default_factory=list)
    parameters: list[Parameter] = Field(default_factory=list)
    responses: list[Response] = Field(default_factory=list)
    request_bodies: list[RequestBody] = Field(default_factory=list, alias="requestBodies")
    security_schemes: Optional[list[SecurityScheme]] = Field(
        default=None, alias="securitySchemes"
    )

    def schema_by_id(self, entity_id: str) -> Optional[Schema]:
        return next((s for s in self.schemas if s.id == entity_id), None)

    def parameter_by_id(self, entity_id: str) -> Optional[Parameter]:
        return next((p for p in self.parameters if p.id == entity_id), None)

    def response_by_id(self, entity_id: str) -> Optional[Response]:
        return next((r for r in self.responses if r.id == entity_id), None)

    def request_body_by_id(self, entity_id: str) -> Optional[RequestBody]:
        return next((b for b in self.request_bodies if b.id == entity_id), None)


class ConversionResult(BaseModel):
    """Structured outcome of :func:`~specflat.parser.converter.convert`.

    Only a parse failure sets ``success=False``; in that case ``data`` is
    ``None`` and ``error`` holds a human-readable message.
    """

    success: bool
    data: Optional[NormalizedDocument] = None
    error: Optional[str] = None
    warnings: list[str] = Field(default_factory=list)


# --- Views ---


class FieldParameter(BaseModel):
    location: str
    type: str = "string"
    required: Optional[bool] = None
    description: Optional[str] = None
    default: Any = None
    example: Any = None


class FieldContent(BaseModel):
    """One media type entry; ``schema`` holds the projected field tree."""

    schema_: Any = Field(default=None, alias="schema")
    example: Any = None

    model_config = ConfigDict(populate_by_name=True)


class FieldRequestBody(BaseModel):
    required: Optional[bool] = None
    description: Optional[str] = None
    content_types: dict[str, FieldContent] = Field(default_factory=dict)


class FieldResponse(BaseModel):
    description: Optional[str] = None
    content_types: dict[str, FieldContent] = Field(default_factory=dict)


class FieldOperation(BaseModel):
    operation_id: Optional[str] = None
    summary: Optional[str] = None
    description: Optional[str] = None
    tags: list[str] = Field(default_factory=list)
    parameters: dict[str, FieldParameter] = Field(default_factory=dict)
    request_body: Optional[FieldRequestBody] = None
    responses: dict[str, FieldResponse] = Field(default_factory=dict)
    deprecated: bool = False


class FieldSchema(BaseModel):
    type: str
    properties: Any = None
    items: Any = None
    required: Optional[list[str]] = None
    description: Optional[str] = None


class FieldApiInfo(BaseModel):
    title: str
    version: str
    description: Optional[str] = None
    base_url: Optional[str] = None
    servers: list[Server] = Field(default_factory=list)


class FieldView(BaseModel):
    """Operation-indexed view: ``paths[path][method]`` with projected schemas."""

    api_info: FieldApiInfo
    paths: dict[str, dict[str, FieldOperation]] = Field(default_factory=dict)
    schemas: dict[str, FieldSchema] = Field(default_factory=dict)


class SimplifiedEndpoint(BaseModel):
    summary: Optional[str] = None
    parameters: dict[str, str] = Field(default_factory=dict)
    request_fields: Any = Field(default_factory=dict)
    response_fields: Any = Field(default_factory=dict)


class SimplifiedView(BaseModel):
    """Endpoint-indexed view keyed by ``"METHOD path"``, fully type-collapsed."""

    api: str
    endpoints: dict[str, SimplifiedEndpoint] = Field(default_factory=dict)
