"""
Utility functions for articlebot.

Text processing helpers shared by the writer, SEO and persistence stages.
"""

import math
import re
import unicodedata
from typing import Optional

from bs4 import BeautifulSoup

SLUG_MAX_LENGTH = 60
WORDS_PER_MINUTE = 200

_CONTROL_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")


def slugify(text: str, max_length: int = SLUG_MAX_LENGTH) -> str:
    """
    Convert text to URL-safe slug.

    Lower-cases, drops anything outside ``[a-z0-9\\s-]``, turns whitespace
    runs into hyphens and collapses repeated hyphens. The same title always
    yields the same slug.

    Args:
        text: Text to convert
        max_length: Maximum slug length

    Returns:
        URL-safe slug, ``"post"`` when nothing usable remains
    """
    if not text:
        return "post"

    # Normalize unicode and remove accents
    normalized = unicodedata.normalize("NFKD", text)
    ascii_only = normalized.encode("ascii", "ignore").decode("ascii")

    slug = ascii_only.lower()
    slug = re.sub(r"[^a-z0-9\s-]", "", slug)
    slug = re.sub(r"\s+", "-", slug)
    slug = re.sub(r"-+", "-", slug)
    slug = slug.strip("-")

    if len(slug) > max_length:
        slug = slug[:max_length].rstrip("-")

    return slug or "post"


def suffixed_slug(base: str, counter: int, max_length: int = SLUG_MAX_LENGTH) -> str:
    """Append ``-counter`` to base, trimming base so the result fits max_length."""
    suffix = f"-{counter}"
    trimmed = base[:max_length - len(suffix)].rstrip("-") or "post"
    return f"{trimmed}{suffix}"


def strip_html(content: str) -> str:
    """Remove style/script blocks and tags, unescape entities, squash whitespace."""
    if not content:
        return ""
    soup = BeautifulSoup(content, "html.parser")
    for element in soup(["script", "style"]):
        element.decompose()
    text = soup.get_text(" ")
    return re.sub(r"\s+", " ", text).strip()


def count_words(content: str) -> int:
    """Count words in the visible text of an HTML fragment."""
    text = strip_html(content)
    return len(text.split()) if text else 0


def reading_time_minutes(content: str) -> int:
    """Estimated reading time, at least one minute."""
    return max(1, math.ceil(count_words(content) / WORDS_PER_MINUTE))


def strip_control_chars(text: str) -> str:
    return _CONTROL_RE.sub("", text)


def truncate_text(text: str, max_length: int, suffix: str = "...") -> str:
    """
    Truncate text at a word boundary.

    Args:
        text: Text to truncate
        max_length: Maximum length including the suffix
        suffix: Appended when truncation happens

    Returns:
        Text no longer than max_length
    """
    text = (text or "").strip()
    if len(text) <= max_length:
        return text

    cut = text[:max_length - len(suffix)]
    last_space = cut.rfind(" ")
    if last_space > 0:
        cut = cut[:last_space]
    return cut.rstrip(" ,.;:-") + suffix


def stable_hash(text: Optional[str]) -> int:
    """
    Deterministic 32-bit rolling hash of text.

    ``h = (h << 5) - h + ord(c)`` wrapped to signed 32 bits, returned as an
    absolute value. Callers rely on this exact value, so it must not change.
    """
    h = 0
    for char in text or "":
        h = ((h << 5) - h + ord(char)) & 0xFFFFFFFF
    if h & 0x80000000:
        h -= 0x100000000
    return abs(h)
