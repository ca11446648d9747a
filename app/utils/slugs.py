"""
URL slug helpers
"""

import re
import unicodedata

_NON_WORD = re.compile(r"[^a-z0-9\s-]")
_SEPARATORS = re.compile(r"[\s_-]+")

# leaves room in the 255 character column for a "-N" suffix
MAX_SLUG_LENGTH = 200


def slugify(value: str, max_length: int = MAX_SLUG_LENGTH) -> str:
    """Lowercase ASCII slug: "DevFest 2024!" -> "devfest-2024" """
    value = unicodedata.normalize("NFKD", value).encode("ascii", "ignore").decode("ascii")
    value = _NON_WORD.sub("", value.lower())
    value = _SEPARATORS.sub("-", value).strip("-")
    return value[:max_length].rstrip("-")


def with_suffix(slug: str, n: int) -> str:
    return slug if n < 2 else f"{slug}-{n}"
