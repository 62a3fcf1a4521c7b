"""Escaping of keys and values in .properties files."""

from .codec import (
    ends_with_continuation,
    escape,
    escape_key,
    escape_unicode,
    escape_value,
    has_malformed_escape,
    unescape,
)

__all__ = [
    "ends_with_continuation",
    "escape",
    "escape_key",
    "escape_unicode",
    "escape_value",
    "has_malformed_escape",
    "unescape",
]
