"""Utility modules."""

from submission_relay.utils.normalization import (
    normalize_name_part,
    sanitize_title,
    slugify_label,
    split_identifier_list,
)

__all__ = [
    "normalize_name_part",
    "sanitize_title",
    "slugify_label",
    "split_identifier_list",
]
