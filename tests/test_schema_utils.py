"""Tests for specflat.schema_utils."""

from __future__ import annotations

from typing import Any

import pytest

from specflat.schema_utils import first_type


class TestFirstType:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("string", "string"),
            (["string", "null"], "string"),
            (["null", "integer"], "integer"),
            (["null"], None),
            ([], None),
            (None, None),
            ("", None),
        ],
    )
    def test_first_type(self, value: Any, expected: Any) -> None:
        assert first_type(value) == expected
