"""The ordered, format-preserving model of a .properties document."""

import io
import logging
import re
from pathlib import Path
from typing import BinaryIO, Iterable, Iterator, Optional, Union

from ..config import LINE_ENDINGS, MissingKeyAction, Options, DEFAULT_OPTIONS
from ..entry import Entry, PropertyEntry, VerbatimEntry, copy_entry
from ..io import PropertiesParser, PropertyFileWriter, format_entries, write_file

logger = logging.getLogger(__name__)


class PropertyFile:
    """A .properties document.

    Holds the entries of the document in order and an index from logical
    key to the property entries with that key. The index refers to the very
    entry objects of the sequence and is updated by every method that
    changes the sequence; it is never exposed.

    A key may occur several times. Reading uses the last occurrence while
    ``keys()`` reports each key at its first occurrence.
    """

    def __init__(
        self,
        entries: Optional[Iterable[Entry]] = None,
        options: Optional[Options] = None
    ):
        """Initialize the document.

        Args:
            entries: Entries to append, in document order.
            options: Options used for defaults of appended entries and I/O.
        """
        self.options = options or DEFAULT_OPTIONS
        self._entries: list[Entry] = []
        self._index: dict[str, list[PropertyEntry]] = {}

        for entry in entries or ():
            self.append_entry(entry)

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------
    @classmethod
    def from_text(cls, content: str, options: Optional[Options] = None) -> "PropertyFile":
        """Parse a document from text."""
        return cls(PropertiesParser(options).parse(content), options)

    @classmethod
    def from_bytes(cls, data: bytes, options: Optional[Options] = None) -> "PropertyFile":
        """Parse a document from bytes in the configured encoding."""
        return cls(PropertiesParser(options).parse_bytes(data), options)

    @classmethod
    def from_stream(cls, stream: BinaryIO, options: Optional[Options] = None) -> "PropertyFile":
        """Parse a document from a stream.

        Read errors of the stream propagate unchanged.
        """
        return cls(PropertiesParser(options).parse_stream(stream), options)

    @classmethod
    def from_file(cls, path: Union[str, Path], options: Optional[Options] = None) -> "PropertyFile":
        """Parse a document from a file."""
        return cls(PropertiesParser(options).parse_file(Path(path)), options)

    # ------------------------------------------------------------------
    # Map-like access
    # ------------------------------------------------------------------
    def get(self, key: str) -> Optional[str]:
        """Return the value of the last property with this key, or None."""
        occurrences = self._index.get(key)
        if not occurrences:
            return None
        return occurrences[-1].value

    def set_value(self, key: str, value: str) -> None:
        """Set the value of a key.

        Updates the last occurrence of the key in place, keeping its
        whitespace, separator and line ending. Other occurrences are left
        untouched. A key that does not exist yet is appended to the end of
        the document.
        """
        occurrences = self._index.get(key)
        if occurrences:
            occurrences[-1].set_value(value, self.options.default_separator)
            return

        line_ending = self._default_line_ending()
        self._terminate_last_entry(line_ending)
        logger.debug("Appending new property %r", key)
        self.append_entry(PropertyEntry.create(
            key,
            value,
            separator=self.options.default_separator,
            line_ending=line_ending
        ))

    def remove(self, key: str) -> None:
        """Remove every occurrence of a key. Absent keys are ignored."""
        occurrences = self._index.pop(key, None)
        if not occurrences:
            return

        removed = {id(entry) for entry in occurrences}
        self._entries = [e for e in self._entries if id(e) not in removed]
        logger.debug("Removed %d occurrence(s) of %r", len(occurrences), key)

    def contains_key(self, key: str) -> bool:
        """Check whether at least one property has this key."""
        return key in self._index

    def keys(self) -> list[str]:
        """Return the distinct keys in the order of their first occurrence."""
        return list(self._index)

    def values(self) -> list[str]:
        """Return one value per key (the last occurrence), in key order."""
        return [occurrences[-1].value for occurrences in self._index.values()]

    def to_map(self) -> dict[str, str]:
        """Return a dict of key to value of its last occurrence."""
        return {
            key: occurrences[-1].value
            for key, occurrences in self._index.items()
        }

    def properties_size(self) -> int:
        """Return the number of distinct keys."""
        return len(self._index)

    def entries_size(self) -> int:
        """Return the number of entries, including verbatim ones."""
        return len(self._entries)

    # ------------------------------------------------------------------
    # Document-like access
    # ------------------------------------------------------------------
    def append_entry(self, entry: Entry) -> None:
        """Append an entry to the end of the document.

        The entry is taken as it is; it should end with a line ending
        unless it is meant to be the last line.
        """
        if isinstance(entry, PropertyEntry):
            self._entries.append(entry)
            self._index.setdefault(entry.key, []).append(entry)
        elif isinstance(entry, VerbatimEntry):
            self._entries.append(entry)
        else:
            raise TypeError(f"Unexpected entry type: {type(entry).__name__}")

    def get_all_entries(self) -> list[Entry]:
        """Return the entries in document order.

        The list is a copy; the entries themselves are shared with this
        document.
        """
        return list(self._entries)

    def get_property_entries(self, key: str) -> list[PropertyEntry]:
        """Return every occurrence of a key in document order."""
        return list(self._index.get(key, ()))

    def clear(self) -> None:
        """Remove all entries."""
        self._entries.clear()
        self._index.clear()

    def copy(self) -> "PropertyFile":
        """Return a deep copy of this document."""
        return PropertyFile((copy_entry(e) for e in self._entries), self.options)

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------
    def to_text(self) -> str:
        """Return the document as text."""
        return format_entries(self._entries)

    def to_bytes(self, options: Optional[Options] = None) -> bytes:
        """Return the document encoded with the given options."""
        buffer = io.BytesIO()
        self.write_to(buffer, options)
        return buffer.getvalue()

    def write_to(self, stream: BinaryIO, options: Optional[Options] = None) -> None:
        """Write the document to a binary stream."""
        with PropertyFileWriter(stream, options or self.options) as writer:
            writer.write_entries(self._entries)

    def save_to(self, path: Union[str, Path], options: Optional[Options] = None) -> None:
        """Write the document to a file, replacing its content."""
        write_file(Path(path), self._entries, options or self.options)

    def update(self, path: Union[str, Path], options: Optional[Options] = None) -> "PropertyFile":
        """Write the values of this document into an existing file.

        The file keeps its own formatting: values of existing keys are set
        in place and keys only in this document are appended. Keys only in
        the file are handled according to ``options.missing_key_action``.
        A missing file is created.

        Returns:
            The updated document as written to the file.
        """
        options = options or self.options
        path = Path(path)

        if path.exists():
            target = PropertyFile.from_file(path, options)
        else:
            target = PropertyFile(options=options)

        for key in target.keys():
            if self.contains_key(key):
                continue
            if options.missing_key_action == MissingKeyAction.DELETE:
                target.remove(key)
            elif options.missing_key_action == MissingKeyAction.COMMENT:
                target._comment_out(key)

        for key, value in self.to_map().items():
            target.set_value(key, value)

        target.save_to(path, options)
        return target

    # ------------------------------------------------------------------
    # Python protocols
    # ------------------------------------------------------------------
    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[Entry]:
        return iter(list(self._entries))

    def __contains__(self, key: object) -> bool:
        return key in self._index

    def __eq__(self, other: object) -> bool:
        if other is self:
            return True
        if not isinstance(other, PropertyFile):
            return NotImplemented
        return self._entries == other._entries

    def __hash__(self) -> int:
        return hash(tuple(self._entries))

    def __repr__(self) -> str:
        return (
            f"PropertyFile(entries={len(self._entries)}, "
            f"properties={len(self._index)})"
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _default_line_ending(self) -> str:
        if self.options.default_line_ending is not None:
            return self.options.default_line_ending
        for entry in self._entries:
            if entry.line_ending in LINE_ENDINGS:
                return entry.line_ending
        return "\n"

    def _terminate_last_entry(self, line_ending: str) -> None:
        """Make sure appending does not join the new entry to the last line."""
        if not self._entries:
            return
        last = self._entries[-1]
        if last.line_ending:
            return
        if isinstance(last, PropertyEntry):
            last.line_ending = line_ending
        elif isinstance(last, VerbatimEntry):
            last.text += line_ending

    def _comment_out(self, key: str) -> None:
        """Replace every occurrence of a key with a comment of its text."""
        occurrences = self._index.pop(key, None)
        if not occurrences:
            return

        commented = {
            id(entry): VerbatimEntry(_as_comment(entry.to_text()))
            for entry in occurrences
        }
        self._entries = [commented.get(id(e), e) for e in self._entries]


def _as_comment(text: str) -> str:
    """Prefix every physical line of the text with a comment character."""
    return "#" + re.sub(r'(\r\n|\r|\n)(?=.)', r'\1#', text, flags=re.DOTALL)
