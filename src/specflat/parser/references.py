"""Map every spelling of a document reference to its canonical entity ID.

OpenAPI and Swagger documents spell the same target in several ways:

* ``#/components/schemas/Order`` (OpenAPI 3.x pointer)
* ``#/definitions/Order`` (Swagger 2.0 pointer)
* ``Order`` (bare name, used by hand-written documents and some tools)
* ``schema-order`` (an ID this package already produced)

:class:`ReferenceIndex` is filled once per document, before any extraction,
so forward references made by entities visited later still resolve. It is
namespaced per entity kind: a parameter and a schema that share a human name
map to ``param-*`` and ``schema-*`` respectively and never collide.
"""

from __future__ import annotations

from typing import Optional

from specflat.parser.identifiers import IdGenerator

# Pointer section name -> entity kind
SECTION_KINDS: dict[str, str] = {
    "schemas": "schema",
    "definitions": "schema",
    "parameters": "param",
    "responses": "response",
    "requestBodies": "request-body",
    "securitySchemes": "security",
    "securityDefinitions": "security",
}

# Entity kind -> pointer prefixes under which components of that kind live
_POINTER_PREFIXES: dict[str, tuple[str, ...]] = {
    "schema": ("#/components/schemas/", "#/definitions/"),
    "param": ("#/components/parameters/", "#/parameters/"),
    "response": ("#/components/responses/", "#/responses/"),
    "request-body": ("#/components/requestBodies/",),
    "security": ("#/components/securitySchemes/", "#/securityDefinitions/"),
}


def escape_pointer_segment(name: str) -> str:
    """Escape a component name for use in a JSON pointer (RFC 6901)."""
    return name.replace("~", "~0").replace("/", "~1")


def unescape_pointer_segment(segment: str) -> str:
    """Reverse :func:`escape_pointer_segment`."""
    return segment.replace("~1", "/").replace("~0", "~")


def pointer_kind(raw_ref: str) -> Optional[str]:
    """Return the entity kind implied by a pointer's section, if any.

    ``#/components/parameters/Limit`` -> ``"param"``; a bare name -> ``None``.
    """
    segments = raw_ref.split("/")
    if len(segments) < 2:
        return None
    return SECTION_KINDS.get(segments[-2])


class ReferenceIndex:
    """Bidirectional reference-spelling -> entity-ID map for one document.

    Args:
        ids: The conversion call's :class:`IdGenerator`. Its naming rule is
            used for the trailing-segment fallback in :meth:`resolve`.
    """

    def __init__(self, ids: IdGenerator) -> None:
        self._ids = ids
        self._refs: dict[str, str] = {}
        self._names: dict[tuple[str, str], str] = {}
        self._known: set[str] = set()
        self._spellings: dict[str, list[str]] = {}

    def register(self, raw_ref: str, entity_id: str) -> None:
        """Record that *raw_ref* points at *entity_id*."""
        self._refs[raw_ref] = entity_id
        self._known.add(entity_id)
        self._spellings.setdefault(entity_id, []).append(raw_ref)

    def register_component(self, kind: str, name: str) -> str:
        """Register every spelling of the component *name* of *kind*.

        Returns:
            The claimed entity ID (``schema-order`` for ``("schema", "Order")``).
        """
        entity_id = self._ids.claim(kind, name, (kind, name))
        escaped = escape_pointer_segment(name)
        for prefix in _POINTER_PREFIXES.get(kind, ()):
            self.register(prefix + escaped, entity_id)
        self.register(entity_id, entity_id)
        self._names[(kind, name)] = entity_id
        return entity_id

    def resolve(self, raw_ref: str, kind: Optional[str] = None) -> Optional[str]:
        """Return the entity ID for *raw_ref*, or ``None`` if it cannot be honoured.

        Resolution order: exact registered spelling, then a bare name inside
        the *kind* namespace, then an ID derived from the trailing pointer
        segment -- accepted only when that ID was registered.

        Args:
            raw_ref: Any reference spelling.
            kind: Namespace for bare names and for pointers whose section is
                not recognised. Defaults to ``"schema"``.
        """
        if not isinstance(raw_ref, str) or not raw_ref:
            return None

        exact = self._refs.get(raw_ref)
        if exact is not None:
            return exact

        namespace = kind or "schema"
        if not raw_ref.startswith("#"):
            named = self._names.get((namespace, raw_ref))
            if named is not None:
                return named

        trailing = unescape_pointer_segment(raw_ref.rsplit("/", 1)[-1])
        if not trailing:
            return None
        derived = self._ids.generate(pointer_kind(raw_ref) or namespace, trailing)
        if derived in self._known:
            return derived
        return None

    def resolve_or_keep(self, raw_ref: str, kind: Optional[str] = None) -> str:
        """Like :meth:`resolve`, but hand back *raw_ref* unchanged when unresolved.

        Callers treat a returned value that is not a known ID as "this
        reference could not be honoured" and degrade at the point of use.
        """
        resolved = self.resolve(raw_ref, kind)
        return resolved if resolved is not None else raw_ref

    def is_known(self, entity_id: str) -> bool:
        return entity_id in self._known

    def spellings(self, entity_id: str) -> list[str]:
        """Every registered spelling that resolves to *entity_id*."""
        return list(self._spellings.get(entity_id, []))
