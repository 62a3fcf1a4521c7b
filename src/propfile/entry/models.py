"""Data models for the entries of a .properties document."""

from dataclasses import dataclass
from typing import Union

from ..escaping import escape_key, escape_value, unescape


@dataclass(unsafe_hash=True)
class VerbatimEntry:
    """A part of the document that is not a property.

    Comment lines, blank lines and lines that could not be parsed are kept
    as they are, including their line ending.

    Attributes:
        text: The exact text of the entry.
    """
    text: str

    def to_text(self) -> str:
        """Return the text of this entry as written to the document."""
        return self.text

    @property
    def line_ending(self) -> str:
        """The line terminator at the end of the text, if any."""
        if self.text.endswith("\r\n"):
            return "\r\n"
        if self.text.endswith(("\r", "\n")):
            return self.text[-1]
        return ""


@dataclass(unsafe_hash=True)
class PropertyEntry:
    """A key/value pair of the document.

    Every part is stored exactly as found in the document, so an unmodified
    entry is written back unchanged. The key and value are stored in their
    raw (escaped) form; ``key`` and ``value`` give the logical text.

    Attributes:
        leading_whitespace: Whitespace before the key.
        raw_key: The key as written in the document.
        separator: Everything between key and value, e.g. ``" = "``.
        raw_value: The value as written, including line continuations.
        line_ending: The line terminator, empty for a final unterminated line.
    """
    leading_whitespace: str
    raw_key: str
    separator: str
    raw_value: str
    line_ending: str = ""

    @classmethod
    def create(
        cls,
        key: str,
        value: str,
        separator: str = "=",
        line_ending: str = "\n",
        leading_whitespace: str = ""
    ) -> "PropertyEntry":
        """Create an entry from a logical key and value.

        Args:
            key: Logical key.
            value: Logical value.
            separator: Separator between key and value.
            line_ending: Line terminator.
            leading_whitespace: Whitespace before the key.

        Returns:
            New PropertyEntry with escaped key and value.
        """
        return cls(
            leading_whitespace=leading_whitespace,
            raw_key=escape_key(key),
            separator=separator,
            raw_value=escape_value(value),
            line_ending=line_ending
        )

    @property
    def key(self) -> str:
        """The logical key."""
        return unescape(self.raw_key)

    @property
    def value(self) -> str:
        """The logical value."""
        return unescape(self.raw_value)

    @value.setter
    def value(self, value: str) -> None:
        self.set_value(value)

    def set_value(self, value: str, default_separator: str = "=") -> None:
        """Replace the logical value, keeping the rest of the line.

        A key-only line gets ``default_separator`` once it has a value. A
        separator made of whitespace alone cannot delimit a value starting
        with ``=`` or ``:``, so that character is escaped.

        Args:
            value: New logical value.
            default_separator: Separator used when the entry has none.
        """
        raw_value = escape_value(value)
        if raw_value and not self.separator:
            self.separator = default_separator
        if raw_value[:1] in ("=", ":") and not any(c in "=:" for c in self.separator):
            raw_value = "\\" + raw_value
        self.raw_value = raw_value

    def to_text(self) -> str:
        """Return the text of this entry as written to the document."""
        return (
            self.leading_whitespace
            + self.raw_key
            + self.separator
            + self.raw_value
            + self.line_ending
        )


Entry = Union[VerbatimEntry, PropertyEntry]


def copy_entry(entry: Entry) -> Entry:
    """Return an independent copy of an entry."""
    if isinstance(entry, VerbatimEntry):
        return VerbatimEntry(entry.text)
    if isinstance(entry, PropertyEntry):
        return PropertyEntry(
            leading_whitespace=entry.leading_whitespace,
            raw_key=entry.raw_key,
            separator=entry.separator,
            raw_value=entry.raw_value,
            line_ending=entry.line_ending
        )
    raise TypeError(f"Unexpected entry type: {type(entry).__name__}")
