"""Tests for specflat.parser.normalizer."""

from __future__ import annotations

from typing import Any

import pytest

from specflat.models import NormalizedDocument, ParameterLocation
from specflat.parser.normalizer import Normalizer, normalize


def _run(raw: dict[str, Any]) -> tuple[NormalizedDocument, list[str]]:
    normalizer = Normalizer(raw)
    return normalizer.run(), normalizer.warnings


# ---------------------------------------------------------------------------
# OpenAPI 3.x
# ---------------------------------------------------------------------------


class TestOpenAPIDocument:
    """Normalize the OpenAPI 3.0 petstore fixture."""

    def test_metadata(self, petstore_raw: dict[str, Any]) -> None:
        metadata = normalize(petstore_raw).metadata
        assert metadata.title == "Petstore API"
        assert metadata.version == "1.0.0"
        assert metadata.base_url == "https://petstore.example.com/v1"
        assert metadata.spec_version == "3.0.3"
        assert metadata.license is not None and metadata.license.name == "MIT"
        assert metadata.contact is not None
        assert metadata.contact.email == "api@petstore.example.com"
        assert metadata.tags == ["pets", "store"]

    def test_endpoint_ids(self, petstore_raw: dict[str, Any]) -> None:
        doc = normalize(petstore_raw)
        ids = [e.id for e in doc.endpoints]
        assert ids == [
            "endpoint-listpets",
            "endpoint-createpet",
            "endpoint-showpetbyid",
            "endpoint-delete--pets--petid-",
            "endpoint-getinventory",
        ]
        assert [e.method for e in doc.endpoints][:2] == ["GET", "POST"]

    def test_schema_refs_rewritten_to_ids(self, petstore_raw: dict[str, Any]) -> None:
        doc = normalize(petstore_raw)
        pet = doc.schema_by_id("schema-pet")
        assert pet is not None
        assert pet.name == "Pet"
        assert pet.properties["category"] == {"$ref": "schema-category"}
        category = doc.schema_by_id("schema-category")
        assert category.properties["parent"] == {"$ref": "schema-category"}
        assert category.properties["children"]["items"] == {"$ref": "schema-category"}

    def test_parameter_refs(self, petstore_raw: dict[str, Any]) -> None:
        doc, warnings = _run(petstore_raw)
        list_pets = doc.endpoints[0]
        assert list_pets.parameter_refs == [
            "param-limit",
            "param-pagetoken",
            "#/components/parameters/Missing",
        ]
        assert "Unresolved reference: #/components/parameters/Missing" in warnings

    def test_inline_parameter_entity(self, petstore_raw: dict[str, Any]) -> None:
        doc = normalize(petstore_raw)
        limit = doc.parameter_by_id("param-limit")
        assert limit.name == "limit"
        assert limit.location == ParameterLocation.QUERY
        assert limit.schema_ == {"type": "integer", "default": 20}

    def test_path_level_params_shared_and_required(self, petstore_raw: dict[str, Any]) -> None:
        doc = normalize(petstore_raw)
        show, delete = doc.endpoints[2], doc.endpoints[3]
        assert show.parameter_refs == ["param-petid"] == delete.parameter_refs
        assert doc.parameter_by_id("param-petid").required is True
        assert len([p for p in doc.parameters if p.name == "petId"]) == 1

    def test_request_body_and_responses(self, petstore_raw: dict[str, Any]) -> None:
        doc = normalize(petstore_raw)
        list_pets, create = doc.endpoints[0], doc.endpoints[1]

        assert list_pets.responses == {
            "200": "response-listpets-200",
            "default": "response-error",
        }
        response = doc.response_by_id("response-listpets-200")
        assert response.content["application/json"].schema_ == {
            "type": "array",
            "items": {"$ref": "schema-pet"},
        }

        assert create.request_body_ref == "request-body-createpet"
        body = doc.request_body_by_id("request-body-createpet")
        assert body.required is True
        assert body.content["application/json"].schema_ == {"$ref": "schema-newpet"}

    def test_component_response(self, petstore_raw: dict[str, Any]) -> None:
        doc = normalize(petstore_raw)
        error = doc.response_by_id("response-error")
        assert error.description == "Unexpected error"
        assert error.content["application/json"].schema_ == {"$ref": "schema-error"}

    def test_security(self, petstore_raw: dict[str, Any]) -> None:
        doc = normalize(petstore_raw)
        assert doc.endpoints[0].security == [{"api_key": []}]
        assert doc.security_schemes is not None
        scheme = doc.security_schemes[0]
        assert scheme.id == "security-api-key"
        assert scheme.location == "header"
        assert scheme.name == "X-API-Key"

    def test_deprecated(self, petstore_raw: dict[str, Any]) -> None:
        doc = normalize(petstore_raw)
        assert doc.endpoints[3].deprecated is True
        assert doc.endpoints[0].deprecated is False

    def test_by_alias_dump_uses_camel_case(self, petstore_raw: dict[str, Any]) -> None:
        dumped = normalize(petstore_raw).model_dump(by_alias=True, exclude_none=True)
        endpoint = dumped["endpoints"][0]
        assert endpoint["operationId"] == "listPets"
        assert endpoint["parameterRefs"][0] == "param-limit"
        assert "requestBodies" in dumped
        assert dumped["parameters"][0]["in"] in ("query", "path")


# ---------------------------------------------------------------------------
# Swagger 2.0
# ---------------------------------------------------------------------------


class TestSwaggerDocument:
    """Normalize the Swagger 2.0 fixture through the same walk."""

    def test_servers_from_host(self, swagger_raw: dict[str, Any]) -> None:
        metadata = normalize(swagger_raw).metadata
        assert metadata.base_url == "https://api.example.com/v2"
        assert metadata.spec_version == "2.0"

    def test_definitions_become_schemas(self, swagger_raw: dict[str, Any]) -> None:
        doc = normalize(swagger_raw)
        user = doc.schema_by_id("schema-user")
        assert user.required == ["id", "email"]
        assert user.properties["manager"] == {"$ref": "schema-user"}

    def test_response_schema_becomes_content(self, swagger_raw: dict[str, Any]) -> None:
        doc = normalize(swagger_raw)
        response = doc.response_by_id("response-listusers-200")
        assert response.content["application/json"].schema_ == {
            "type": "array",
            "items": {"$ref": "schema-user"},
        }

    def test_parameter_schema_synthesized(self, swagger_raw: dict[str, Any]) -> None:
        page = normalize(swagger_raw).parameter_by_id("param-page")
        assert page.schema_ == {"type": "integer", "default": 1}

    def test_body_parameter_becomes_request_body(self, swagger_raw: dict[str, Any]) -> None:
        doc = normalize(swagger_raw)
        create = next(e for e in doc.endpoints if e.operation_id == "createUser")
        assert create.parameter_refs == []
        body = doc.request_body_by_id(create.request_body_ref)
        assert body.required is True
        assert body.content["application/json"].schema_ == {"$ref": "schema-user"}

    def test_form_data_becomes_multipart_body(self, swagger_raw: dict[str, Any]) -> None:
        doc = normalize(swagger_raw)
        upload = next(e for e in doc.endpoints if e.operation_id == "uploadAvatar")
        assert upload.parameter_refs == ["param-userid"]
        body = doc.request_body_by_id(upload.request_body_ref)
        schema = body.content["multipart/form-data"].schema_
        assert schema["properties"]["file"] == {"type": "file"}
        assert schema["required"] == ["file"]

    def test_oauth2_flow(self, swagger_raw: dict[str, Any]) -> None:
        scheme = normalize(swagger_raw).security_schemes[0]
        assert scheme.id == "security-oauth"
        assert scheme.flows == {
            "implicit": {
                "authorizationUrl": "https://auth.example.com/authorize",
                "scopes": {"users:read": "Read users"},
            }
        }


# ---------------------------------------------------------------------------
# Edge cases
# ---------------------------------------------------------------------------


class TestEdgeCases:
    def test_empty_document_warns(self) -> None:
        doc, warnings = _run({})
        assert doc.endpoints == []
        assert doc.metadata.title == "Untitled API"
        assert "No OpenAPI or Swagger version specified" in warnings
        assert "No paths defined in the specification" in warnings
        assert "No components or definitions section found" in warnings

    def test_unresolved_schema_ref_kept_raw(self) -> None:
        raw = {
            "openapi": "3.0.0",
            "components": {
                "schemas": {
                    "A": {"properties": {"b": {"$ref": "#/components/schemas/B"}}},
                }
            },
        }
        doc, warnings = _run(raw)
        assert doc.schemas[0].properties["b"] == {"$ref": "#/components/schemas/B"}
        assert warnings.count("Unresolved reference: #/components/schemas/B") == 1

    def test_forward_reference_resolves(self) -> None:
        raw = {
            "openapi": "3.0.0",
            "components": {
                "schemas": {
                    "First": {"properties": {"next": {"$ref": "#/components/schemas/Second"}}},
                    "Second": {"type": "string"},
                }
            },
        }
        doc = normalize(raw)
        assert doc.schemas[0].properties["next"] == {"$ref": "schema-second"}
        assert doc.schemas[1].type == "string"

    def test_component_param_wins_over_inline_duplicate(self) -> None:
        raw = {
            "openapi": "3.0.0",
            "paths": {
                "/a": {"get": {"parameters": [{"name": "limit", "in": "query"}]}},
            },
            "components": {
                "parameters": {
                    "Limit": {"name": "limit", "in": "query", "schema": {"type": "integer"}},
                }
            },
        }
        doc = normalize(raw)
        assert doc.endpoints[0].parameter_refs == ["param-limit"]
        assert len(doc.parameters) == 1
        assert doc.parameters[0].schema_ == {"type": "integer"}

    def test_same_name_different_location(self) -> None:
        raw = {
            "openapi": "3.0.0",
            "paths": {
                "/a/{id}": {
                    "get": {
                        "parameters": [
                            {"name": "id", "in": "path"},
                            {"name": "id", "in": "query"},
                        ]
                    }
                }
            },
        }
        doc = normalize(raw)
        assert doc.endpoints[0].parameter_refs == ["param-id", "param-id-2"]

    def test_unsupported_location_skipped(self) -> None:
        raw = {
            "openapi": "3.0.0",
            "paths": {"/a": {"get": {"parameters": [{"name": "x", "in": "body-ish"}]}}},
        }
        doc, warnings = _run(raw)
        assert doc.endpoints[0].parameter_refs == []
        assert any("unsupported location 'body-ish'" in w for w in warnings)

    def test_schema_alias_composes_target(self) -> None:
        raw = {
            "openapi": "3.0.0",
            "components": {
                "schemas": {
                    "Base": {"properties": {"id": {"type": "integer"}}},
                    "Alias": {"$ref": "#/components/schemas/Base"},
                }
            },
        }
        alias = normalize(raw).schema_by_id("schema-alias")
        assert alias.all_of == [{"$ref": "schema-base"}]

    def test_aliased_parameter_points_at_target(self) -> None:
        raw = {
            "openapi": "3.0.0",
            "paths": {
                "/a": {"get": {"parameters": [{"$ref": "#/components/parameters/Alias"}]}},
            },
            "components": {
                "parameters": {
                    "Real": {"name": "q", "in": "query"},
                    "Alias": {"$ref": "#/components/parameters/Real"},
                }
            },
        }
        doc = normalize(raw)
        assert doc.endpoints[0].parameter_refs == ["param-real"]
        assert [p.id for p in doc.parameters] == ["param-real"]

    def test_malformed_values_do_not_raise(self) -> None:
        raw = {
            "openapi": "3.0.0",
            "info": {"title": ["not", "a", "string"], "version": 2},
            "paths": {
                "/a": {
                    "get": {
                        "summary": {"oops": True},
                        "tags": "pets",
                        "parameters": "nope",
                        "responses": {"200": "bad"},
                    }
                },
                "/b": "not an object",
            },
        }
        doc = normalize(raw)
        assert doc.metadata.title == "Untitled API"
        assert doc.metadata.version == "2"
        assert doc.endpoints[0].summary is None
        assert doc.endpoints[0].tags == []

    def test_self_containing_yaml_anchor(self) -> None:
        node: dict[str, Any] = {"type": "object"}
        node["properties"] = {"self": node}
        raw = {"openapi": "3.0.0", "components": {"schemas": {"Loop": node}}}
        doc = normalize(raw)
        assert doc.schemas[0].properties["self"] == {}
