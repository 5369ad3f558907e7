"""Projected views over a normalized document.

* :mod:`~specflat.views.resolver` -- Schema and parameter lookups by ID.
* :mod:`~specflat.views.projector` -- Cycle-safe field-tree projection.
* :mod:`~specflat.views.builder` -- Field view and simplified view.
"""

from specflat.views.builder import to_field_view, to_simplified_view
from specflat.views.projector import CIRCULAR_REF, FieldProjector
from specflat.views.resolver import ParameterResolver, SchemaResolver

__all__ = [
    "CIRCULAR_REF",
    "FieldProjector",
    "ParameterResolver",
    "SchemaResolver",
    "to_field_view",
    "to_simplified_view",
]
