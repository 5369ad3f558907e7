"""Helpers for reading schema keywords, shared by the parser and the views."""

from __future__ import annotations

from typing import Any, Optional


def first_type(type_value: Any) -> Optional[str]:
    """Normalise a ``type`` keyword, including OpenAPI 3.1 type arrays.

    ``["string", "null"]`` -> ``"string"``; a missing type -> ``None``.
    """
    if isinstance(type_value, list):
        non_null = [t for t in type_value if t != "null"]
        return str(non_null[0]) if non_null else None
    if type_value:
        return str(type_value)
    return None
