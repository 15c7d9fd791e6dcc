"""Long text normalizer for CSV exports."""

from collections.abc import Mapping
from typing import Any

from ..models import TextLong


class TextLongNormalizer:
    """Normalizes long text values for CSV exports."""

    FORMAT = "csv"

    def supports_normalization(self, data: Any, format: str | None = None) -> bool:
        """Check whether this normalizer handles the value in the given format."""
        return isinstance(data, TextLong) and format == self.FORMAT

    def normalize(
        self,
        item: TextLong,
        format: str | None = None,
        context: Mapping[str, Any] | None = None,
    ) -> str | dict[str, str]:
        """
        Normalize a long text value.

        If context["processed_text"] is set, return the processed text when
        it is truthy and the raw user input when it is falsy. Otherwise
        return every property of the value.
        """
        context = context or {}

        if context.get("processed_text") is not None:
            if context["processed_text"]:
                return item.processed
            return item.value

        return {
            "value": item.value,
            "format": item.format,
            "processed": item.processed,
        }
