"""Parser for Java-style .properties files."""

import logging
import re
from pathlib import Path
from typing import BinaryIO, Optional, TextIO, Union

from ..config import Options, DEFAULT_OPTIONS
from ..entry import Entry, PropertyEntry, VerbatimEntry
from ..escaping import ends_with_continuation, has_malformed_escape
from ..escaping.codec import KEY_TERMINATORS, WHITESPACE

logger = logging.getLogger(__name__)


class PropertiesParser:
    """Parser for .properties files.

    Produces the ordered list of entries of a document. Every physical line
    ends up in exactly one entry, together with its line terminator, so the
    entries can be written back byte for byte. Lines that cannot be parsed
    are kept as VerbatimEntry; parsing never fails on content.
    """

    # One physical line: its content and its terminator
    LINE_PATTERN = re.compile(r'([^\r\n]*)(\r\n|\r|\n|$)')

    # Whitespace, at most one '=' or ':', whitespace
    SEPARATOR_PATTERN = re.compile(r'[ \t\f]*[=:]?[ \t\f]*')

    def __init__(self, options: Optional[Options] = None):
        """Initialize the parser.

        Args:
            options: Options for decoding byte input.
        """
        self.options = options or DEFAULT_OPTIONS

    def parse(self, content: str) -> list[Entry]:
        """Parse .properties content into entries.

        Args:
            content: The content of a .properties file.

        Returns:
            List of entries in document order.
        """
        lines = self._split_lines(content)
        entries: list[Entry] = []
        i = 0

        while i < len(lines):
            body, terminator = lines[i]
            stripped = body.lstrip(WHITESPACE)

            # Comments and blank lines never continue
            if not stripped or stripped[0] in '#!':
                entries.append(VerbatimEntry(body + terminator))
                i += 1
                continue

            raw = body
            dangling = False
            j = i
            while ends_with_continuation(lines[j][0]):
                if j + 1 >= len(lines):
                    dangling = True
                    break
                raw += lines[j][1] + lines[j + 1][0]
                j += 1
            line_ending = lines[j][1]

            if dangling or has_malformed_escape(raw):
                logger.debug("Keeping malformed line %d verbatim: %r", i + 1, raw)
                entries.append(VerbatimEntry(raw + line_ending))
            else:
                entries.append(self._parse_property(raw, line_ending))

            i = j + 1

        return entries

    def parse_bytes(self, data: bytes) -> list[Entry]:
        """Decode and parse .properties content.

        Args:
            data: Raw bytes in the configured encoding.

        Returns:
            List of entries in document order.
        """
        return self.parse(data.decode(self.options.encoding))

    def parse_stream(self, stream: Union[BinaryIO, TextIO]) -> list[Entry]:
        """Read a stream to its end and parse it.

        Binary streams are decoded with the configured encoding, text
        streams are used as they are.
        """
        data = stream.read()
        if isinstance(data, bytes):
            return self.parse_bytes(data)
        return self.parse(data)

    def parse_file(self, path: Path) -> list[Entry]:
        """Parse a .properties file.

        Args:
            path: Path to the .properties file.

        Returns:
            List of entries in document order.
        """
        return self.parse_bytes(Path(path).read_bytes())

    def _split_lines(self, content: str) -> list[tuple[str, str]]:
        """Split content into (line content, terminator) pairs."""
        lines = []
        pos = 0
        while pos < len(content):
            match = self.LINE_PATTERN.match(content, pos)
            lines.append((match.group(1), match.group(2)))
            pos = match.end()
        return lines

    def _parse_property(self, raw: str, line_ending: str) -> PropertyEntry:
        """Split a logical line into the parts of a PropertyEntry."""
        key_start = len(raw) - len(raw.lstrip(WHITESPACE))
        key_end = self._find_key_end(raw, key_start)
        separator = self.SEPARATOR_PATTERN.match(raw, key_end).group(0)
        value_start = key_end + len(separator)

        return PropertyEntry(
            leading_whitespace=raw[:key_start],
            raw_key=raw[key_start:key_end],
            separator=separator,
            raw_value=raw[value_start:],
            line_ending=line_ending
        )

    @staticmethod
    def _find_key_end(raw: str, pos: int) -> int:
        """Find the index of the first unescaped key terminator."""
        while pos < len(raw):
            char = raw[pos]
            if char == '\\':
                pos += 1
                if raw.startswith('\r\n', pos):
                    pos += 2
                elif pos < len(raw) and raw[pos] in '\r\n':
                    pos += 1
                else:
                    pos += 1
                    continue
                # Indentation of a continued key belongs to the key
                while pos < len(raw) and raw[pos] in WHITESPACE:
                    pos += 1
            elif char in KEY_TERMINATORS:
                break
            else:
                pos += 1
        return min(pos, len(raw))
