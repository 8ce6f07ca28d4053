"""Input sanitization for free text stored in knowledge items, tickets and departments.

Knowledge content is fed to AI drafting, so stored text is stripped of markup
before it reaches the database.
"""

import re
from typing import ClassVar

import nh3


class InputSanitizer:
    """Strip markup and normalize user-provided text.

    Use parameterized queries as the primary defense; these helpers
    add a second layer for display and prompt construction.
    """

    ALLOWED_TAGS: ClassVar[set[str]] = set()
    BUSINESS_NAME_PATTERN: ClassVar[re.Pattern[str]] = re.compile(r"[^\w\s-]")

    @classmethod
    def clean_text(cls, value: str) -> str:
        """Remove all HTML tags (nh3, strict) and surrounding whitespace.

        Args:
            value: Raw string that may contain HTML.

        Returns:
            Sanitized, trimmed string.
        """
        if not value:
            return ""
        return nh3.clean(value, tags=cls.ALLOWED_TAGS, attributes={}).strip()

    @classmethod
    def clean_tags(cls, values: list[str] | None) -> list[str]:
        """Sanitize a tag list: clean each entry, drop empties and duplicates (order kept)."""
        seen: set[str] = set()
        tags: list[str] = []
        for raw in values or []:
            tag = cls.clean_text(raw)
            if tag and tag not in seen:
                seen.add(tag)
                tags.append(tag)
        return tags

    @classmethod
    def business_name(cls, value: str) -> str:
        """Trim and drop characters other than word characters, spaces and hyphens."""
        return cls.BUSINESS_NAME_PATTERN.sub("", value.strip())
