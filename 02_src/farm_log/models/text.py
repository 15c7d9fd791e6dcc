"""Long text field values."""

import html
import re
from dataclasses import dataclass

_PARAGRAPH_BREAK = re.compile(r"\n\s*\n")


@dataclass
class TextLong:
    """Formatted long text, e.g. log notes."""

    value: str
    format: str = "plain_text"  # "plain_text", "basic_html", "full_html"

    @property
    def processed(self) -> str:
        """Rendered HTML for this value."""
        if self.format != "plain_text":
            return self.value

        text = self.value.replace("\r\n", "\n").strip()
        if not text:
            return ""
        paragraphs = _PARAGRAPH_BREAK.split(text)
        return "".join(
            "<p>" + html.escape(p.strip()).replace("\n", "<br>\n") + "</p>\n"
            for p in paragraphs
        )
