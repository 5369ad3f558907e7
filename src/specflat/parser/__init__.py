"""API description parser -- load, normalize, and rewrite ``$ref`` pointers to IDs.

This sub-package is responsible for the first half of the specflat pipeline:
turning raw OpenAPI 3.x / Swagger 2.0 text (JSON or YAML) into a
:class:`~specflat.models.NormalizedDocument` that the view builder consumes.

Typical usage::

    from specflat.parser import convert

    result = convert(open("petstore.yaml").read())
    if result.success:
        for endpoint in result.data.endpoints:
            print(endpoint.method, endpoint.path)

Sub-modules:

* :mod:`~specflat.parser.loader` -- I/O layer (URL, file, stdin) plus
  JSON/YAML parsing and dialect detection.
* :mod:`~specflat.parser.identifiers` -- Deterministic entity ID synthesis.
* :mod:`~specflat.parser.references` -- Reference spelling -> ID index.
* :mod:`~specflat.parser.normalizer` -- The single-pass flattening walk.
* :mod:`~specflat.parser.converter` -- Text-in, result-out entry point.
"""

from specflat.parser.converter import SpecConverter, convert
from specflat.parser.loader import detect_spec_version, parse_content, read_source
from specflat.parser.normalizer import normalize

__all__ = [
    "SpecConverter",
    "convert",
    "detect_spec_version",
    "normalize",
    "parse_content",
    "read_source",
]
