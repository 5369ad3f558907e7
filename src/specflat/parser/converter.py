"""Text-in, structured-result-out conversion entry point.

:func:`convert` is what editors and batch importers call: it never raises on
document content. A document that is neither JSON nor YAML yields
``ConversionResult(success=False, error=...)``; anything else that parses
yields ``success=True`` plus whatever warnings normalization collected.
"""

from __future__ import annotations

import logging

from specflat.exceptions import SpecParseError
from specflat.models import ConversionResult
from specflat.parser.loader import parse_content
from specflat.parser.normalizer import Normalizer

logger = logging.getLogger(__name__)


class SpecConverter:
    """Reusable converter object.

    Holds no per-document state: every :meth:`convert` call builds its own
    :class:`~specflat.parser.normalizer.Normalizer` (and with it a fresh ID
    generator and reference index), so one instance may serve concurrent
    callers.

    Args:
        hint: Default format hint passed to
            :func:`~specflat.parser.loader.parse_content`.
    """

    def __init__(self, hint: str = "") -> None:
        self._hint = hint

    def convert(self, document_text: str, hint: str | None = None) -> ConversionResult:
        """Parse and normalize *document_text*.

        Args:
            document_text: OpenAPI 3.x or Swagger 2.0, as JSON or YAML.
            hint: Per-call override of the format hint.

        Returns:
            A :class:`~specflat.models.ConversionResult`.
        """
        if not isinstance(document_text, str) or not document_text.strip():
            return ConversionResult(success=False, error="Document is empty")

        try:
            raw = parse_content(document_text, hint=self._hint if hint is None else hint)
        except SpecParseError as exc:
            logger.debug("Parse failure: %s", exc)
            return ConversionResult(success=False, error=str(exc) or "Unknown parse error")

        normalizer = Normalizer(raw)
        document = normalizer.run()
        return ConversionResult(success=True, data=document, warnings=normalizer.warnings)


def convert(document_text: str, hint: str = "") -> ConversionResult:
    """Convert document text into a normalized store. See :class:`SpecConverter`."""
    return SpecConverter(hint=hint).convert(document_text)
