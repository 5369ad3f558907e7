"""Project schemas into field-name -> type-descriptor trees.

A type descriptor is one of:

* a primitive type name (``"string"``, ``"integer"``, ``"any"``, ...)
* a nested mapping of field names to descriptors
* a one-element list whose element describes the array item
* ``{"[key: string]": <descriptor>}`` for dictionary-like objects
* :data:`CIRCULAR_REF` where following a reference would revisit a schema
  already on the current path

Cycle protection uses an immutable ``frozenset`` of schema IDs. Each branch
extends its own copy, so a schema that appears in two sibling properties is
expanded in both; only a genuine back-edge is cut.
"""

from __future__ import annotations

import logging
from typing import Any

from specflat.schema_utils import first_type
from specflat.views.resolver import (
    InlineSchema,
    SchemaReference,
    SchemaResolver,
    to_schema_ref,
)

logger = logging.getLogger(__name__)

CIRCULAR_REF = "circular-ref"
ADDITIONAL_PROPERTIES_KEY = "[key: string]"


class FieldProjector:
    """Walk schemas through a :class:`SchemaResolver` and emit field trees.

    Args:
        resolver: Resolver over the store's schema collection.
    """

    def __init__(self, resolver: SchemaResolver) -> None:
        self._resolver = resolver

    def project(
        self, properties: Any, visited: frozenset[str] = frozenset()
    ) -> dict[str, Any]:
        """Project a ``properties`` mapping into ``{field: descriptor}``.

        Args:
            properties: Mapping of property name to inline schema or reference.
            visited: Schema IDs already on the current path.

        Returns:
            A new dict; non-mapping input yields ``{}``.
        """
        if not isinstance(properties, dict):
            return {}
        return {
            str(name): self.project_schema(prop, visited)
            for name, prop in properties.items()
        }

    extract_fields = project

    def project_schema(self, schema: Any, visited: frozenset[str] = frozenset()) -> Any:
        """Return the type descriptor for a single schema of any shape."""
        schema_ref = to_schema_ref(schema)
        if schema_ref is None:
            return "any"
        if isinstance(schema_ref, SchemaReference):
            return self._project_reference(schema_ref, visited)
        return self._project_inline(schema_ref, visited)

    def project_named(self, schema_id: str) -> Any:
        """Project the schema stored under *schema_id* as if reached by reference."""
        return self._project_reference(SchemaReference(schema_id), frozenset())

    def _project_reference(self, ref: SchemaReference, visited: frozenset[str]) -> Any:
        ref_id = self._resolver.reference_id(ref)
        if ref_id in visited:
            logger.debug("Cycle cut at %s", ref_id)
            return CIRCULAR_REF

        target = self._resolver.resolve(ref)
        if target is None:
            return "any"
        return self._project_inline(InlineSchema(target), visited | {ref_id})

    def _project_inline(self, inline: InlineSchema, visited: frozenset[str]) -> Any:
        schema = inline.schema
        declared = first_type(schema.get("type"))

        all_of = schema.get("allOf")
        if isinstance(all_of, list) and all_of:
            return self._project_all_of(schema, all_of, declared, visited)

        for keyword in ("oneOf", "anyOf"):
            members = schema.get(keyword)
            if isinstance(members, list) and members and "properties" not in schema:
                return self.project_schema(members[0], visited)

        properties = schema.get("properties")
        if isinstance(properties, dict) and declared in (None, "object"):
            return self.project(properties, visited)

        if declared == "array" or (declared is None and "items" in schema):
            return self._project_array(schema, visited)

        if declared in (None, "object") and "additionalProperties" in schema:
            additional = schema["additionalProperties"]
            if additional is True:
                return {ADDITIONAL_PROPERTIES_KEY: "any"}
            if additional is not False:
                return {ADDITIONAL_PROPERTIES_KEY: self.project_schema(additional, visited)}

        if "enum" in schema:
            return declared or "string"
        return declared or "any"

    def _project_array(self, schema: dict[str, Any], visited: frozenset[str]) -> list[Any]:
        items = schema.get("items")
        # Tuple-style items: the first entry stands for the element type
        if isinstance(items, list):
            items = items[0] if items else None
        if items is None:
            return ["any"]
        return [self.project_schema(items, visited)]

    def _project_all_of(
        self,
        schema: dict[str, Any],
        members: list[Any],
        declared: Any,
        visited: frozenset[str],
    ) -> Any:
        merged: dict[str, Any] = {}
        fallback: Any = None
        for member in members:
            projected = self.project_schema(member, visited)
            if isinstance(projected, dict):
                merged.update(projected)
            elif fallback is None:
                fallback = projected

        own = schema.get("properties")
        if isinstance(own, dict):
            merged.update(self.project(own, visited))

        if merged:
            return merged
        if fallback is not None:
            return fallback
        return declared or "object"
