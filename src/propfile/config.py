"""Configuration for reading and writing .properties files."""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional


ISO_8859_1 = "iso-8859-1"
UTF_8 = "utf-8"

# Terminators recognised in a .properties document, longest first
LINE_ENDINGS = ("\r\n", "\r", "\n")


class UnicodeHandling(Enum):
    """How characters are written that the target encoding may not support."""
    BY_CHARSET = "by_charset"
    ESCAPE = "escape"
    DO_NOTHING = "do_nothing"


class MissingKeyAction(Enum):
    """What to do with keys that only exist in the file being updated."""
    NOTHING = "nothing"
    DELETE = "delete"
    COMMENT = "comment"


@dataclass(frozen=True)
class Options:
    """Options for reading and writing .properties files.

    Attributes:
        encoding: Character encoding of the byte stream.
        unicode_handling: How to write characters outside the encoding.
        default_separator: Separator used for newly appended properties.
        default_line_ending: Line ending used for newly appended entries.
            None uses the first line ending found in the document.
        missing_key_action: How PropertyFile.update treats keys that only
            exist in the updated file.
    """
    encoding: str = UTF_8
    unicode_handling: UnicodeHandling = UnicodeHandling.BY_CHARSET
    default_separator: str = "="
    default_line_ending: Optional[str] = None
    missing_key_action: MissingKeyAction = MissingKeyAction.NOTHING

    def with_(self, **changes) -> "Options":
        """Return a copy of these options with the given fields replaced."""
        return replace(self, **changes)


DEFAULT_OPTIONS = Options()
