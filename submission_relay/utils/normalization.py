"""Text normalization for field labels and identifiers."""

import re
import unicodedata
from typing import Optional


_TAG_RE = re.compile(r"<[^>]*>")
_ENTITY_RE = re.compile(r"&[^;\s]+;")
_QUOTES_RE = re.compile(r"[\"'‘’“”`]")
_NON_SLUG_RE = re.compile(r"[^a-z0-9_]+")

SLUG_WORD_SEPARATOR = "__"


def _strip_accents(value: str) -> str:
    """Remove diacritics so "Café" and "Cafe" produce the same key."""
    return "".join(
        ch for ch in unicodedata.normalize("NFKD", value) if not unicodedata.combining(ch)
    )


def sanitize_title(title: Optional[str]) -> str:
    """
    Title-to-slug normalization with hyphen separators.

    - Strip HTML tags and entities
    - Strip accents
    - Lowercase
    - Drop quotes/apostrophes ("Author's" -> "authors")
    - Collapse every other non [a-z0-9_] run into one hyphen, trimmed
    """
    if not title:
        return ""
    text = _TAG_RE.sub("", title)
    text = _ENTITY_RE.sub("", text)
    text = _strip_accents(text).lower()
    text = _QUOTES_RE.sub("", text)
    text = _NON_SLUG_RE.sub("-", text)
    return text.strip("-")


def slugify_label(label: Optional[str]) -> str:
    """
    Derive a payload key from a human-readable field label.

    Examples:
        "Company Name" -> "company__name"
        "White Paper Authors" -> "white__paper__authors"
        "" -> ""

    Idempotent: the output only contains [a-z0-9_], which sanitize_title
    leaves untouched. Distinct labels may collapse to the same key; callers
    decide what a collision means.
    """
    return sanitize_title(label).replace("-", SLUG_WORD_SEPARATOR)


def normalize_name_part(value: object) -> Optional[str]:
    """
    Clean one name component (prefix/first/middle/last/suffix).

    Returns None for missing or whitespace-only values.
    """
    if value is None:
        return None
    text = " ".join(str(value).split())
    return text or None


def split_identifier_list(raw: object) -> list[str]:
    """
    Split a comma-separated identifier list ("5, 3,9") into clean tokens.

    Blank tokens are dropped; order is preserved.
    """
    if raw is None:
        return []
    return [token.strip() for token in str(raw).split(",") if token.strip()]
