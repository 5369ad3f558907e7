"""Deterministic ID synthesis for entities extracted from a raw document.

Named entities get ``<kind>-<sanitised name>`` (``Order`` in the ``schema``
kind becomes ``schema-order``), so two passes over the same name always agree.
Anonymous entities get ``<kind>-<n>`` from a per-kind counter.

An :class:`IdGenerator` belongs to exactly one conversion call; the
normalizer creates a fresh one every time, which is what resets the counters.
"""

from __future__ import annotations

import re
from collections import defaultdict
from collections.abc import Hashable
from typing import Optional

_UNSAFE_CHARS = re.compile(r"[^a-z0-9]")


def sanitize(name: str) -> str:
    """Lowercase *name* and replace every character outside ``[a-z0-9]`` with ``-``."""
    return _UNSAFE_CHARS.sub("-", name.lower())


class IdGenerator:
    """Per-conversion ID factory.

    :meth:`generate` is the pure naming rule. :meth:`claim` layers ownership
    on top of it so that IDs stay unique within a collection even when two
    different entities sanitise to the same name (``id`` in the path and
    ``id`` in the query, or ``Order`` and ``order``).
    """

    def __init__(self) -> None:
        self._counters: dict[str, int] = defaultdict(int)
        self._owners: dict[str, Hashable] = {}

    def generate(self, kind: str, name: Optional[str] = None) -> str:
        """Return the ID for ``(kind, name)``; anonymous entities use a counter.

        Args:
            kind: Entity namespace, e.g. ``"schema"`` or ``"param"``.
            name: Human name. When ``None`` or empty the next counter value
                for *kind* is used instead.

        Returns:
            The synthesized ID. Never raises.
        """
        if name:
            return f"{kind}-{sanitize(str(name))}"
        self._counters[kind] += 1
        return f"{kind}-{self._counters[kind]}"

    def claim(self, kind: str, name: Optional[str], key: Hashable) -> str:
        """Return a collection-unique ID for the entity identified by *key*.

        Claiming an ID a second time with the same *key* returns the same
        ID. If the derived ID already belongs to another key, ``-2``,
        ``-3`` ... suffixes are tried until a free or matching one is found.
        """
        base = self.generate(kind, name)
        candidate = base
        suffix = 1
        while candidate in self._owners and self._owners[candidate] != key:
            suffix += 1
            candidate = f"{base}-{suffix}"
        self._owners[candidate] = key
        return candidate

    def owner(self, entity_id: str) -> Optional[Hashable]:
        """Return the key that claimed *entity_id*, or ``None``."""
        return self._owners.get(entity_id)
