"""Writer for .properties documents."""

import io
import logging
from pathlib import Path
from typing import BinaryIO, Iterable, Optional

from ..config import Options, UnicodeHandling, DEFAULT_OPTIONS
from ..entry import Entry, PropertyEntry, VerbatimEntry
from ..escaping import escape_unicode

logger = logging.getLogger(__name__)


def format_entries(entries: Iterable[Entry]) -> str:
    """Format entries as .properties content.

    Args:
        entries: Entries in document order.

    Returns:
        The document text, exactly as the entries describe it.
    """
    return ''.join(_entry_text(entry) for entry in entries)


class PropertyFileWriter:
    """Writes entries to a binary stream.

    Entries are written in the order given, without reordering, merging or
    reformatting. Each entry is encoded and written as soon as it is passed
    in, so a failing stream leaves the entries before it written and none
    written twice.
    """

    def __init__(self, stream: BinaryIO, options: Optional[Options] = None):
        """Initialize the writer.

        Args:
            stream: Binary stream to write to. The writer does not close it.
            options: Options for encoding the output.
        """
        self.stream = stream
        self.options = options or DEFAULT_OPTIONS
        self.entries_written = 0

    def __enter__(self) -> "PropertyFileWriter":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is None:
            self.flush()

    def write_entry(self, entry: Entry) -> None:
        """Write a single entry."""
        self.stream.write(self.encode(_entry_text(entry)))
        self.entries_written += 1

    def write_entries(self, entries: Iterable[Entry]) -> int:
        """Write all entries in order.

        Returns:
            Number of entries written.
        """
        count = 0
        for entry in entries:
            self.write_entry(entry)
            count += 1
        logger.debug("Wrote %d entries", count)
        return count

    def flush(self) -> None:
        """Flush the underlying stream."""
        self.stream.flush()

    def encode(self, text: str) -> bytes:
        """Encode text according to the unicode handling option."""
        handling = self.options.unicode_handling
        if handling == UnicodeHandling.ESCAPE:
            text = escape_unicode(text, "ascii")
        elif handling == UnicodeHandling.BY_CHARSET:
            text = escape_unicode(text, self.options.encoding)
        return text.encode(self.options.encoding)


def write_entries(
    stream: BinaryIO,
    entries: Iterable[Entry],
    options: Optional[Options] = None
) -> int:
    """Write entries to a binary stream.

    Args:
        stream: Binary stream to write to.
        entries: Entries in document order.
        options: Options for encoding the output.

    Returns:
        Number of entries written.
    """
    with PropertyFileWriter(stream, options) as writer:
        return writer.write_entries(entries)


def write_file(
    path: Path,
    entries: Iterable[Entry],
    options: Optional[Options] = None
) -> None:
    """Write entries to a .properties file.

    The whole document is encoded before the file is opened, so an
    encoding error leaves an existing file untouched.

    Args:
        path: Path to the output file.
        entries: Entries in document order.
        options: Options for encoding the output.
    """
    path = Path(path)
    buffer = io.BytesIO()
    write_entries(buffer, entries, options)

    # Ensure parent directory exists
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(buffer.getvalue())


def _entry_text(entry: Entry) -> str:
    if isinstance(entry, VerbatimEntry):
        return entry.text
    if isinstance(entry, PropertyEntry):
        return entry.to_text()
    raise TypeError(f"Unexpected entry type: {type(entry).__name__}")
