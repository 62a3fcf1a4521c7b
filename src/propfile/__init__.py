"""Format-preserving reading and writing of .properties files."""

__version__ = "0.1.0"

from .config import ISO_8859_1, UTF_8, MissingKeyAction, Options, UnicodeHandling
from .core import PropertyFile
from .entry import Entry, PropertyEntry, VerbatimEntry
from .errors import PropfileError, UnsupportedOperationError
from .compat import Properties

__all__ = [
    "ISO_8859_1",
    "UTF_8",
    "Entry",
    "MissingKeyAction",
    "Options",
    "Properties",
    "PropertyEntry",
    "PropertyFile",
    "PropfileError",
    "UnicodeHandling",
    "UnsupportedOperationError",
    "VerbatimEntry",
]
