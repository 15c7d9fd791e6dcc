"""Field normalizers for exports."""

from .text_long import TextLongNormalizer

__all__ = ["TextLongNormalizer"]
