"""Reading and writing of .properties documents."""

from .reader import PropertiesParser
from .writer import PropertyFileWriter, format_entries, write_entries, write_file

__all__ = [
    "PropertiesParser",
    "PropertyFileWriter",
    "format_entries",
    "write_entries",
    "write_file",
]
