"""Look up schema and parameter entities in a normalized store.

A schema reference reaches the projector in one of three spellings: an inline
schema dict, a ``{"$ref": ...}`` marker, or a bare string. :func:`to_schema_ref`
turns all of them into one of two tagged variants -- :class:`InlineSchema` or
:class:`SchemaReference` -- so the projector only ever branches on that tag.

Lookups are pure: nothing here mutates the store, and an unknown target
resolves to ``None`` rather than raising. Besides canonical IDs, targets
spelled as document pointers (``#/components/schemas/Status``) or bare names
are accepted by deriving an ID from the trailing segment, so hand-built or
partially normalized stores still resolve. Parameters are only matched by
exact ID.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any, Optional, Union

from specflat.models import NormalizedDocument, Parameter, Schema
from specflat.parser.identifiers import sanitize
from specflat.parser.references import unescape_pointer_segment


@dataclass(frozen=True)
class InlineSchema:
    schema: dict[str, Any]


@dataclass(frozen=True)
class SchemaReference:
    target: str


SchemaRef = Union[InlineSchema, SchemaReference]


def to_schema_ref(value: Any) -> Optional[SchemaRef]:
    """Classify *value* as an inline schema or a reference; anything else is ``None``."""
    if isinstance(value, (InlineSchema, SchemaReference)):
        return value
    if isinstance(value, str):
        return SchemaReference(value) if value else None
    if isinstance(value, dict):
        ref = value.get("$ref")
        if ref is not None:
            return SchemaReference(str(ref))
        return InlineSchema(value)
    return None


def _derived_id(kind: str, target: str) -> Optional[str]:
    trailing = unescape_pointer_segment(target.rsplit("/", 1)[-1])
    return f"{kind}-{sanitize(trailing)}" if trailing else None


class SchemaResolver:
    """Resolve :data:`SchemaRef` values against a schema collection.

    Args:
        schemas: The store's schemas (``NormalizedDocument.schemas``).
    """

    def __init__(self, schemas: Iterable[Schema]) -> None:
        self._by_id: dict[str, Schema] = {schema.id: schema for schema in schemas}
        self._fragments: dict[str, dict[str, Any]] = {}

    @classmethod
    def for_document(cls, document: NormalizedDocument) -> "SchemaResolver":
        return cls(document.schemas)

    def reference_id(self, ref: SchemaReference) -> str:
        """Return the canonical ID for *ref*; the raw target when nothing matches.

        This is the key the projector stores in its visited set, so two
        spellings of the same schema are recognised as the same node.
        """
        if ref.target in self._by_id:
            return ref.target
        derived = _derived_id("schema", ref.target)
        if derived is not None and derived in self._by_id:
            return derived
        return ref.target

    def lookup(self, entity_id: str) -> Optional[Schema]:
        return self._by_id.get(entity_id)

    def resolve(self, ref: Any) -> Optional[dict[str, Any]]:
        """Return the concrete schema for *ref* as a dict, or ``None`` if unknown.

        Inline schemas are returned as-is; references are looked up by ID
        (then by derived ID).
        """
        schema_ref = to_schema_ref(ref)
        if schema_ref is None:
            return None
        if isinstance(schema_ref, InlineSchema):
            return schema_ref.schema
        entity_id = self.reference_id(schema_ref)
        if entity_id not in self._fragments:
            entity = self._by_id.get(entity_id)
            if entity is None:
                return None
            self._fragments[entity_id] = entity.as_fragment()
        return self._fragments[entity_id]


class ParameterResolver:
    """Resolve endpoint parameter references by exact ``param-*`` ID.

    Unlike schemas there is no fallback to a derived ID. Inline parameters
    share the ``param-*`` namespace with components, so a raw pointer left
    unresolved by the normalizer would otherwise land on an unrelated inline
    parameter that happens to have the same name.
    """

    def __init__(self, parameters: Iterable[Parameter]) -> None:
        self._by_id: dict[str, Parameter] = {param.id: param for param in parameters}

    @classmethod
    def for_document(cls, document: NormalizedDocument) -> "ParameterResolver":
        return cls(document.parameters)

    def resolve(self, ref: str) -> Optional[Parameter]:
        if not isinstance(ref, str) or not ref:
            return None
        return self._by_id.get(ref)
