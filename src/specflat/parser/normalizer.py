"""Flatten a raw OpenAPI / Swagger document into an ID-addressed entity store.

Unlike a resolver that inlines ``$ref`` targets (and so has to stop at cycles),
the normalizer never follows references. It rewrites each one to the stable
ID of its target and emits flat collections of entities:

* ``_build_reference_index`` -- pre-registers every component name so that
  forward references resolve.
* ``_extract_metadata`` -- ``info``, servers / base URL, tags.
* ``_extract_endpoints`` -- every path + HTTP method, synthesizing inline
  parameter, request body and response entities on the way.
* ``_extract_schemas`` -- ``components.schemas`` / ``definitions`` with
  ``$ref`` markers rewritten to IDs.
* ``_extract_component_*`` -- shared parameters, responses, request bodies
  and security schemes.

Swagger 2.0 documents go through the same walk: ``in: body`` and
``in: formData`` parameters become request bodies, and a response's
top-level ``schema`` becomes a media-type entry.

The public entry point is :func:`normalize`. Nothing here raises on document
content; anomalies are appended to :attr:`Normalizer.warnings`.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from specflat.models import (
    Contact,
    Endpoint,
    HTTPMethod,
    License,
    MediaType,
    Metadata,
    NormalizedDocument,
    Parameter,
    ParameterLocation,
    RequestBody,
    Response,
    Schema,
    SecurityScheme,
    Server,
)
from specflat.parser.identifiers import IdGenerator
from specflat.parser.loader import detect_spec_version
from specflat.parser.references import ReferenceIndex
from specflat.schema_utils import first_type

logger = logging.getLogger(__name__)

_HTTP_METHODS = tuple(m.value for m in HTTPMethod)

_SCHEMA_KEYS = (
    "required",
    "properties",
    "items",
    "additionalProperties",
    "allOf",
    "oneOf",
    "anyOf",
    "enum",
    "format",
    "description",
    "example",
    "default",
    "nullable",
    "minItems",
    "maxItems",
)

# Swagger 2.0 keeps type keywords on the parameter itself
_SWAGGER_PARAM_SCHEMA_KEYS = (
    "type",
    "format",
    "items",
    "enum",
    "default",
    "collectionFormat",
    "minimum",
    "maximum",
    "pattern",
)

# (kind, OpenAPI 3.x components key, Swagger 2.0 top-level key)
_COMPONENT_SECTIONS: tuple[tuple[str, str, Optional[str]], ...] = (
    ("schema", "schemas", "definitions"),
    ("param", "parameters", "parameters"),
    ("response", "responses", "responses"),
    ("request-body", "requestBodies", None),
    ("security", "securitySchemes", "securityDefinitions"),
)

_SWAGGER_BODY_LOCATIONS = ("body", "formData")


def normalize(raw_document: dict[str, Any]) -> NormalizedDocument:
    """Normalize a parsed document. See :class:`Normalizer`."""
    return Normalizer(raw_document).run()


class Normalizer:
    """One normalization run over one document.

    All mutable state -- the ID counters, the reference index, the entity
    collections and the warning list -- lives on the instance, so each
    conversion call must use its own ``Normalizer``.

    Args:
        raw: The parsed document (any mapping; missing sections are fine).
    """

    def __init__(self, raw: dict[str, Any]) -> None:
        self._raw = raw
        self._dialect, self._version = detect_spec_version(raw)
        self._ids = IdGenerator()
        self._index = ReferenceIndex(self._ids)
        self.warnings: list[str] = []
        self._unresolved: set[str] = set()

        self._component_ids: dict[tuple[str, str], str] = {}
        self._aliases: set[str] = set()
        self._param_keys: dict[tuple[Any, Any], str] = {}
        self._swagger_body_params: dict[str, dict[str, Any]] = {}

        self._parameters: dict[str, Parameter] = {}
        self._responses: dict[str, Response] = {}
        self._request_bodies: dict[str, RequestBody] = {}

    @property
    def index(self) -> ReferenceIndex:
        return self._index

    def run(self) -> NormalizedDocument:
        """Walk the document once and return the normalized store."""
        self._check_sections()
        self._build_reference_index()

        endpoints = self._extract_endpoints()
        schemas = self._extract_schemas()
        self._extract_component_parameters()
        self._extract_component_responses()
        self._extract_component_request_bodies()
        security_schemes = self._extract_security_schemes()

        logger.debug(
            "Normalized %d endpoints, %d schemas, %d parameters, %d responses, %d request bodies",
            len(endpoints),
            len(schemas),
            len(self._parameters),
            len(self._responses),
            len(self._request_bodies),
        )

        return NormalizedDocument(
            metadata=self._extract_metadata(endpoints),
            endpoints=endpoints,
            schemas=schemas,
            parameters=list(self._parameters.values()),
            responses=list(self._responses.values()),
            request_bodies=list(self._request_bodies.values()),
            security_schemes=security_schemes,
        )

    # ------------------------------------------------------------------ #
    # Document sections
    # ------------------------------------------------------------------ #

    def _check_sections(self) -> None:
        if self._dialect == "unknown":
            self.warnings.append("No OpenAPI or Swagger version specified")
        if not self._paths():
            self.warnings.append("No paths defined in the specification")
        if not isinstance(self._raw.get("components"), dict) and not isinstance(
            self._raw.get("definitions"), dict
        ):
            self.warnings.append("No components or definitions section found")

    def _paths(self) -> dict[str, Any]:
        paths = self._raw.get("paths")
        return paths if isinstance(paths, dict) else {}

    def _section(self, openapi_key: str, swagger_key: Optional[str]) -> dict[str, Any]:
        """Return ``components.<openapi_key>``, else the Swagger 2.0 top-level section."""
        components = self._raw.get("components")
        if isinstance(components, dict):
            section = components.get(openapi_key)
            if isinstance(section, dict):
                return section
        if swagger_key:
            section = self._raw.get(swagger_key)
            if isinstance(section, dict):
                return section
        return {}

    def _media_types(self, operation: dict[str, Any], key: str) -> list[str]:
        """Operation- or document-level ``consumes`` / ``produces`` (Swagger 2.0)."""
        for holder in (operation, self._raw):
            value = holder.get(key)
            if isinstance(value, list) and value:
                return [str(v) for v in value]
        return ["application/json"]

    # ------------------------------------------------------------------ #
    # Step 1: reference index
    # ------------------------------------------------------------------ #

    def _build_reference_index(self) -> None:
        for kind, openapi_key, swagger_key in _COMPONENT_SECTIONS:
            for name, raw in self._section(openapi_key, swagger_key).items():
                name = str(name)
                entity_id = self._index.register_component(kind, name)
                self._component_ids[(kind, name)] = entity_id
                if kind != "param" or not isinstance(raw, dict):
                    continue
                if raw.get("in") in _SWAGGER_BODY_LOCATIONS:
                    self._swagger_body_params[entity_id] = raw
                elif "$ref" not in raw:
                    key = (_text(raw.get("name")) or name, _text(raw.get("in")))
                    self._param_keys.setdefault(key, entity_id)

        self._link_aliases()

    def _link_aliases(self) -> None:
        """Point components that are themselves a ``$ref`` at their target.

        Schemas are exempt: an aliased schema is kept as its own entity that
        composes the target (see :meth:`_extract_schemas`).
        """
        for kind, openapi_key, swagger_key in _COMPONENT_SECTIONS:
            if kind == "schema":
                continue
            for name, raw in self._section(openapi_key, swagger_key).items():
                if not isinstance(raw, dict) or "$ref" not in raw:
                    continue
                alias_id = self._component_ids[(kind, str(name))]
                target = self._index.resolve(str(raw["$ref"]), kind)
                if target is None or target == alias_id:
                    self._note_unresolved(str(raw["$ref"]))
                    continue
                for spelling in self._index.spellings(alias_id):
                    self._index.register(spelling, target)
                self._aliases.add(alias_id)

    def _resolve(self, ref: Any, kind: str) -> str:
        """Resolve *ref* through the index, keeping the raw string when unresolved."""
        ref = str(ref)
        resolved = self._index.resolve(ref, kind)
        if resolved is None:
            self._note_unresolved(ref)
            return ref
        return resolved

    def _note_unresolved(self, ref: str) -> None:
        if ref not in self._unresolved:
            self._unresolved.add(ref)
            self.warnings.append(f"Unresolved reference: {ref}")
            logger.debug("Unresolved reference: %s", ref)

    # ------------------------------------------------------------------ #
    # Step 2: metadata
    # ------------------------------------------------------------------ #

    def _extract_metadata(self, endpoints: list[Endpoint]) -> Metadata:
        info = self._raw.get("info")
        if not isinstance(info, dict):
            info = {}
        license_info = info.get("license")
        contact = info.get("contact")
        servers = self._extract_servers()

        return Metadata(
            title=_text(info.get("title")) or "Untitled API",
            version=_text(info.get("version")) or "0.0.0",
            description=_text(info.get("description")),
            base_url=servers[0].url if servers else None,
            license=License(name=_text(license_info.get("name")), url=_text(license_info.get("url")))
            if isinstance(license_info, dict)
            else None,
            contact=Contact(
                name=_text(contact.get("name")),
                email=_text(contact.get("email")),
                url=_text(contact.get("url")),
            )
            if isinstance(contact, dict)
            else None,
            terms_of_service=_text(info.get("termsOfService")),
            servers=servers,
            tags=self._collect_tags(endpoints),
            spec_version=self._version,
        )

    def _extract_servers(self) -> list[Server]:
        servers = self._raw.get("servers")
        if isinstance(servers, list) and servers:
            return [
                Server(
                    url=_text(server.get("url")) or "/",
                    description=_text(server.get("description")),
                )
                for server in servers
                if isinstance(server, dict)
            ]

        host = self._raw.get("host")
        if host:
            schemes = self._raw.get("schemes") or ["https"]
            base_path = self._raw.get("basePath") or ""
            return [Server(url=f"{scheme}://{host}{base_path}") for scheme in schemes]

        return []

    def _collect_tags(self, endpoints: list[Endpoint]) -> list[str]:
        tags: dict[str, None] = {}
        for endpoint in endpoints:
            for tag in endpoint.tags:
                tags.setdefault(tag, None)
        declared = self._raw.get("tags")
        if isinstance(declared, list):
            for tag in declared:
                if isinstance(tag, dict) and tag.get("name"):
                    tags.setdefault(str(tag["name"]), None)
        return list(tags)

    # ------------------------------------------------------------------ #
    # Step 3: endpoints
    # ------------------------------------------------------------------ #

    def _extract_endpoints(self) -> list[Endpoint]:
        endpoints: list[Endpoint] = []
        global_security = self._raw.get("security")

        for path, path_item in self._paths().items():
            if not isinstance(path_item, dict):
                continue
            path = str(path)
            path_params = path_item.get("parameters")
            if not isinstance(path_params, list):
                path_params = []

            for method in _HTTP_METHODS:
                operation = path_item.get(method)
                if not isinstance(operation, dict):
                    continue

                operation_id = _text(operation.get("operationId"))
                base = operation_id or f"{method}-{path}"
                endpoint_id = self._ids.claim("endpoint", base, ("endpoint", method, path))
                op_params = operation.get("parameters")
                if not isinstance(op_params, list):
                    op_params = []

                parameter_refs, body_params = self._operation_parameters(path_params + op_params)

                # Operation-level security overrides the document-level list
                security = operation.get("security")
                if security is None:
                    security = global_security

                tags = operation.get("tags")
                endpoints.append(
                    Endpoint(
                        id=endpoint_id,
                        path=path,
                        method=method.upper(),
                        operation_id=operation_id,
                        summary=_text(operation.get("summary")),
                        description=_text(operation.get("description")),
                        tags=[str(t) for t in tags] if isinstance(tags, list) else [],
                        parameter_refs=parameter_refs,
                        request_body_ref=self._operation_request_body(
                            operation, body_params, base, method, path
                        ),
                        responses=self._operation_responses(operation, base, method, path),
                        security=_security_requirements(security),
                        deprecated=operation.get("deprecated") is True,
                    )
                )

        return endpoints

    def _operation_parameters(
        self, raw_params: list[Any]
    ) -> tuple[list[str], list[dict[str, Any]]]:
        """Return the endpoint's parameter refs plus any Swagger body/formData params.

        Path-level and operation-level parameters are appended, not merged:
        a duplicate ``(name, in)`` pair yields the same ID twice in the list.
        """
        refs: list[str] = []
        body_params: list[dict[str, Any]] = []

        for raw_param in raw_params:
            if not isinstance(raw_param, dict):
                continue
            if "$ref" in raw_param:
                ref = self._resolve(raw_param["$ref"], "param")
                if ref in self._swagger_body_params:
                    body_params.append(self._swagger_body_params[ref])
                else:
                    refs.append(ref)
                continue
            if raw_param.get("in") in _SWAGGER_BODY_LOCATIONS:
                body_params.append(raw_param)
                continue
            param_id = self._inline_parameter(raw_param)
            if param_id is not None:
                refs.append(param_id)

        return refs, body_params

    def _inline_parameter(self, raw_param: dict[str, Any]) -> Optional[str]:
        """Return the entity ID for an inline parameter, creating it on first sight."""
        name = _text(raw_param.get("name"))
        location = _text(raw_param.get("in"))
        key = (name, location)
        if key in self._param_keys:
            return self._param_keys[key]

        param_id = self._ids.claim("param", name, key)
        parameter = self._build_parameter(param_id, raw_param, name or param_id)
        if parameter is None:
            return None
        self._param_keys[key] = param_id
        self._parameters[param_id] = parameter
        return param_id

    def _build_parameter(
        self, param_id: str, raw_param: dict[str, Any], name: str
    ) -> Optional[Parameter]:
        location_str = raw_param.get("in")
        try:
            location = ParameterLocation(location_str)
        except ValueError:
            self.warnings.append(
                f"Skipping parameter '{name}' with unsupported location '{location_str}'"
            )
            return None

        if "schema" in raw_param:
            schema = self._normalize_schema(raw_param["schema"])
        else:
            schema = self._swagger_parameter_schema(raw_param)

        # Path parameters are always required
        required = _flag(raw_param.get("required"))
        if location == ParameterLocation.PATH:
            required = True

        return Parameter(
            id=param_id,
            name=name,
            location=location,
            required=required,
            schema=schema,
            description=_text(raw_param.get("description")),
            example=raw_param.get("example"),
            deprecated=_flag(raw_param.get("deprecated")),
            style=_text(raw_param.get("style")),
            explode=_flag(raw_param.get("explode")),
        )

    def _swagger_parameter_schema(self, raw_param: dict[str, Any]) -> Optional[dict[str, Any]]:
        schema = {
            key: raw_param[key] for key in _SWAGGER_PARAM_SCHEMA_KEYS if key in raw_param
        }
        return self._normalize_schema(schema) if schema else None

    def _operation_request_body(
        self,
        operation: dict[str, Any],
        body_params: list[dict[str, Any]],
        base: str,
        method: str,
        path: str,
    ) -> Optional[str]:
        raw_body = operation.get("requestBody")
        if isinstance(raw_body, dict) and "$ref" in raw_body:
            return self._resolve(raw_body["$ref"], "request-body")

        if isinstance(raw_body, dict):
            body = raw_body
            content = self._normalize_content(raw_body.get("content"))
        elif body_params:
            body, content = self._swagger_request_body(operation, body_params)
        else:
            return None

        body_id = self._ids.claim("request-body", base, ("request-body", method, path))
        self._request_bodies[body_id] = RequestBody(
            id=body_id,
            description=_text(body.get("description")),
            required=_flag(body.get("required")),
            content=content,
        )
        return body_id

    def _swagger_request_body(
        self, operation: dict[str, Any], body_params: list[dict[str, Any]]
    ) -> tuple[dict[str, Any], dict[str, MediaType]]:
        """Build a request body from Swagger 2.0 ``in: body`` / ``in: formData`` params."""
        consumes = self._media_types(operation, "consumes")
        body_param = next((p for p in body_params if p.get("in") == "body"), None)
        if body_param is not None:
            schema = self._normalize_schema(body_param.get("schema") or {})
            return body_param, {consumes[0]: MediaType(schema=schema)}

        properties: dict[str, Any] = {}
        required: list[str] = []
        has_file = False
        for param in body_params:
            name = str(param.get("name", ""))
            properties[name] = self._swagger_parameter_schema(param) or {}
            has_file = has_file or param.get("type") == "file"
            if param.get("required"):
                required.append(name)

        if has_file:
            media_type = "multipart/form-data"
        else:
            media_type = next(
                (mt for mt in consumes if mt.startswith(("multipart/", "application/x-www-form"))),
                "application/x-www-form-urlencoded",
            )
        schema: dict[str, Any] = {"type": "object", "properties": properties}
        if required:
            schema["required"] = required
        return {"required": bool(required)}, {media_type: MediaType(schema=schema)}

    def _operation_responses(
        self, operation: dict[str, Any], base: str, method: str, path: str
    ) -> dict[str, str]:
        raw_responses = operation.get("responses")
        if not isinstance(raw_responses, dict):
            return {}

        produces = self._media_types(operation, "produces")
        responses: dict[str, str] = {}
        for code, raw_response in raw_responses.items():
            code = str(code)
            if not isinstance(raw_response, dict):
                continue
            if "$ref" in raw_response:
                responses[code] = self._resolve(raw_response["$ref"], "response")
                continue
            response_id = self._ids.claim(
                "response", f"{base}-{code}", ("response", method, path, code)
            )
            self._responses[response_id] = self._build_response(
                response_id, raw_response, produces
            )
            responses[code] = response_id
        return responses

    def _build_response(
        self, response_id: str, raw_response: dict[str, Any], produces: list[str]
    ) -> Response:
        content = self._normalize_content(raw_response.get("content"))
        if not content and "schema" in raw_response:
            media_type = produces[0]
            examples = raw_response.get("examples")
            content = {
                media_type: MediaType(
                    schema=self._normalize_schema(raw_response["schema"]),
                    example=examples.get(media_type) if isinstance(examples, dict) else None,
                )
            }

        headers = raw_response.get("headers")
        return Response(
            id=response_id,
            description=_text(raw_response.get("description")),
            headers=self._normalize_headers(headers) if isinstance(headers, dict) else None,
            content=content,
        )

    def _normalize_headers(self, headers: dict[str, Any]) -> dict[str, Any]:
        normalized: dict[str, Any] = {}
        for name, header in headers.items():
            # Header components are not entities; their refs stay as written
            if isinstance(header, dict) and "schema" in header and "$ref" not in header:
                normalized[name] = {**header, "schema": self._normalize_schema(header["schema"])}
            else:
                normalized[name] = header
        return normalized

    def _normalize_content(self, content: Any) -> dict[str, MediaType]:
        if not isinstance(content, dict):
            return {}
        normalized: dict[str, MediaType] = {}
        for media_type, media in content.items():
            if not isinstance(media, dict):
                normalized[str(media_type)] = MediaType()
                continue
            examples = media.get("examples")
            normalized[str(media_type)] = MediaType(
                schema=self._normalize_schema(media["schema"]) if "schema" in media else None,
                example=media.get("example"),
                examples=examples if isinstance(examples, dict) else None,
            )
        return normalized

    # ------------------------------------------------------------------ #
    # Step 4: schemas
    # ------------------------------------------------------------------ #

    def _extract_schemas(self) -> list[Schema]:
        schemas: list[Schema] = []
        for name, raw in self._section("schemas", "definitions").items():
            name = str(name)
            schema_id = self._component_ids[("schema", name)]
            if not isinstance(raw, dict):
                raw = {}
            if "$ref" in raw:
                # An aliased schema composes its target
                raw = {**{k: v for k, v in raw.items() if k != "$ref"}, "allOf": [raw]}

            fragment = self._normalize_schema(raw)
            fields = _schema_fields(fragment)
            schemas.append(
                Schema(id=schema_id, name=name, type=_infer_type(fragment), **fields)
            )
        return schemas

    def _normalize_schema(self, schema: Any, _active: frozenset[int] = frozenset()) -> Any:
        """Return a copy of *schema* with every nested ``$ref`` rewritten to a marker.

        Only reference-bearing keywords are rewritten; all other keywords are
        preserved as-is. *_active* guards against self-containing YAML anchors.
        """
        if not isinstance(schema, dict):
            return schema
        if id(schema) in _active:
            return {}
        active = _active | {id(schema)}

        if "$ref" in schema:
            return {"$ref": self._resolve(schema["$ref"], "schema")}

        normalized: dict[str, Any] = {}
        for key, value in schema.items():
            if key == "properties" and isinstance(value, dict):
                normalized[key] = {
                    str(prop): self._normalize_schema(prop_schema, active)
                    for prop, prop_schema in value.items()
                }
            elif key in ("items", "additionalProperties", "not") and isinstance(value, dict):
                normalized[key] = self._normalize_schema(value, active)
            elif key in ("items", "allOf", "oneOf", "anyOf") and isinstance(value, list):
                normalized[key] = [self._normalize_schema(member, active) for member in value]
            else:
                normalized[key] = value
        return normalized

    # ------------------------------------------------------------------ #
    # Step 5: shared components
    # ------------------------------------------------------------------ #

    def _shared(self, kind: str, openapi_key: str, swagger_key: Optional[str]):
        """Yield ``(entity_id, name, raw)`` for non-alias components of *kind*."""
        for name, raw in self._section(openapi_key, swagger_key).items():
            entity_id = self._component_ids[(kind, str(name))]
            if entity_id in self._aliases or not isinstance(raw, dict):
                continue
            yield entity_id, str(name), raw

    def _extract_component_parameters(self) -> None:
        for param_id, name, raw in self._shared("param", "parameters", "parameters"):
            if param_id in self._swagger_body_params:
                continue
            parameter = self._build_parameter(param_id, raw, _text(raw.get("name")) or name)
            if parameter is not None:
                self._parameters[param_id] = parameter

    def _extract_component_responses(self) -> None:
        for response_id, _, raw in self._shared("response", "responses", "responses"):
            self._responses[response_id] = self._build_response(
                response_id, raw, self._media_types({}, "produces")
            )

    def _extract_component_request_bodies(self) -> None:
        for body_id, _, raw in self._shared("request-body", "requestBodies", None):
            self._request_bodies[body_id] = RequestBody(
                id=body_id,
                description=_text(raw.get("description")),
                required=_flag(raw.get("required")),
                content=self._normalize_content(raw.get("content")),
            )

    def _extract_security_schemes(self) -> Optional[list[SecurityScheme]]:
        schemes: list[SecurityScheme] = []
        for scheme_id, name, raw in self._shared(
            "security", "securitySchemes", "securityDefinitions"
        ):
            flows = raw.get("flows")
            if not isinstance(flows, dict) and raw.get("flow"):
                # Swagger 2.0 single-flow oauth2
                flows = {
                    str(raw["flow"]): {
                        key: raw[key]
                        for key in ("authorizationUrl", "tokenUrl", "scopes")
                        if key in raw
                    }
                }
            schemes.append(
                SecurityScheme(
                    id=scheme_id,
                    type=str(raw.get("type") or "unknown"),
                    name=_text(raw.get("name")) or name,
                    location=_text(raw.get("in")),
                    scheme=_text(raw.get("scheme")),
                    bearer_format=_text(raw.get("bearerFormat")),
                    flows=flows if isinstance(flows, dict) else None,
                    open_id_connect_url=_text(raw.get("openIdConnectUrl")),
                    description=_text(raw.get("description")),
                )
            )
        return schemes or None


def _text(value: Any) -> Optional[str]:
    """Coerce a scalar document value to ``str``; containers and ``None`` become ``None``."""
    if value is None or isinstance(value, (dict, list)):
        return None
    return str(value)


def _flag(value: Any) -> Optional[bool]:
    return value if isinstance(value, bool) else None


def _security_requirements(value: Any) -> Optional[list[dict[str, list[str]]]]:
    if not isinstance(value, list):
        return None
    return [
        {
            str(scheme): [str(scope) for scope in scopes] if isinstance(scopes, list) else []
            for scheme, scopes in requirement.items()
        }
        for requirement in value
        if isinstance(requirement, dict)
    ]


def _schema_fields(fragment: dict[str, Any]) -> dict[str, Any]:
    """Pick the :class:`Schema` keywords out of *fragment*, dropping malformed values."""
    fields: dict[str, Any] = {}
    for key in _SCHEMA_KEYS:
        if key not in fragment:
            continue
        value = fragment[key]
        if key == "required":
            if isinstance(value, list):
                fields[key] = [str(v) for v in value]
        elif key == "properties":
            if isinstance(value, dict):
                fields[key] = value
        elif key in ("allOf", "oneOf", "anyOf", "enum"):
            if isinstance(value, list):
                fields[key] = value
        elif key in ("format", "description"):
            if _text(value) is not None:
                fields[key] = _text(value)
        elif key == "nullable":
            if isinstance(value, bool):
                fields[key] = value
        elif key in ("minItems", "maxItems"):
            if isinstance(value, int) and not isinstance(value, bool):
                fields[key] = value
        else:
            fields[key] = value
    return fields


def _infer_type(fragment: dict[str, Any]) -> str:
    """Return the declared type, or a best guess from the schema's shape."""
    declared = first_type(fragment.get("type"))
    if declared:
        return declared
    if "items" in fragment:
        return "array"
    if "enum" in fragment and "properties" not in fragment:
        return "string"
    return "object"
