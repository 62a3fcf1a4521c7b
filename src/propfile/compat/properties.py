"""A dict-like view of a PropertyFile with classic properties semantics.

``Properties`` behaves like the familiar properties map: string keys and
values, a chain of default properties and load/store methods. Unlike a
plain map it keeps the formatting of the loaded document, so storing it
again only changes what was actually modified.
"""

import functools
import io
import sys
import threading
import xml.etree.ElementTree as ET
from collections.abc import Mapping, MutableMapping
from typing import BinaryIO, Callable, Iterator, Optional, TextIO, Union

from ..config import ISO_8859_1, UTF_8, Options
from ..core import PropertyFile
from ..entry import VerbatimEntry
from ..errors import UnsupportedOperationError
from ..escaping import unescape
from ..io import PropertyFileWriter

_MISSING = object()

# Longer values are shortened by list_properties()
LIST_VALUE_WIDTH = 40

XML_DOCTYPE = '<!DOCTYPE properties SYSTEM "http://java.sun.com/dtd/properties.dtd">'


def synchronized(method):
    """Run the method while holding the instance lock."""
    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        with self._lock:
            return method(self, *args, **kwargs)
    return wrapper


class Properties(MutableMapping):
    """Properties map backed by a format-preserving PropertyFile.

    Lookups through the map protocol only see this object's own
    properties; ``get_property`` and ``property_names`` also consult the
    defaults. Operations that would rewrite values through a function
    (``compute``, ``merge`` ...) are not supported, since they cannot
    preserve the document's formatting.
    """

    def __init__(
        self,
        defaults: Optional[Mapping] = None,
        property_file: Optional[PropertyFile] = None
    ):
        """Initialize the properties.

        Args:
            defaults: Properties consulted by get_property for missing keys.
            property_file: Document to wrap. Defaults to an empty one.
        """
        self.defaults = defaults
        self._property_file = property_file if property_file is not None else PropertyFile()
        self._lock = threading.RLock()

    @property
    def property_file(self) -> PropertyFile:
        """The wrapped document."""
        return self._property_file

    # ------------------------------------------------------------------
    # Loading and storing
    # ------------------------------------------------------------------
    @synchronized
    def load(self, stream: BinaryIO) -> None:
        """Replace the content with a document read from an ISO-8859-1 stream."""
        self._property_file = PropertyFile.from_stream(stream, Options(encoding=ISO_8859_1))

    @synchronized
    def load_text(self, source: Union[str, TextIO]) -> None:
        """Replace the content with a document read from text.

        Args:
            source: The document text or a text stream to read it from.
        """
        content = source if isinstance(source, str) else source.read()
        self._property_file = PropertyFile.from_text(content, Options(encoding=UTF_8))

    @synchronized
    def store(self, stream: BinaryIO, comments: Optional[str] = None) -> None:
        """Write the document to a stream in ISO-8859-1.

        Characters outside ISO-8859-1 are written as \\uXXXX escapes.

        Args:
            stream: Binary stream to write to.
            comments: Optional comment written as a leading comment line.
        """
        self._store(stream, comments, Options(encoding=ISO_8859_1))

    @synchronized
    def store_text(self, comments: Optional[str] = None) -> str:
        """Return the document as text, optionally with a leading comment."""
        buffer = io.BytesIO()
        self._store(buffer, comments, Options(encoding=UTF_8))
        return buffer.getvalue().decode(UTF_8)

    @synchronized
    def load_from_xml(self, stream: BinaryIO) -> None:
        """Add the entries of a properties XML document.

        Args:
            stream: Stream containing ``<properties>`` with ``<entry key="...">``
                elements.

        Raises:
            ValueError: If the document is not a properties XML document.
        """
        try:
            root = ET.parse(stream).getroot()
        except ET.ParseError as e:
            raise ValueError(f"Invalid properties XML: {e}") from e

        if root.tag != "properties":
            raise ValueError(f"Invalid properties XML: unexpected root element <{root.tag}>")

        for element in root.iter("entry"):
            key = element.get("key")
            if key is None:
                raise ValueError("Invalid properties XML: <entry> without key attribute")
            self.put(key, element.text or "")

    @synchronized
    def store_to_xml(
        self,
        stream: BinaryIO,
        comment: Optional[str] = None,
        encoding: str = "UTF-8"
    ) -> None:
        """Write the properties as a properties XML document.

        Only keys and values are written; the formatting of the document is
        not part of the XML format.
        """
        root = ET.Element("properties")
        if comment is not None:
            ET.SubElement(root, "comment").text = comment
        for key, value in self._property_file.to_map().items():
            ET.SubElement(root, "entry", key=key).text = value
        ET.indent(root)

        header = f'<?xml version="1.0" encoding="{encoding}" standalone="no"?>\n{XML_DOCTYPE}\n'
        body = ET.tostring(root, encoding="unicode") + "\n"
        stream.write((header + body).encode(encoding, "xmlcharrefreplace"))

    def _store(self, stream: BinaryIO, comments: Optional[str], options: Options) -> None:
        with PropertyFileWriter(stream, options) as writer:
            if comments is not None:
                writer.write_entry(VerbatimEntry(_comment_text(comments)))
            writer.write_entries(self._property_file.get_all_entries())

    # ------------------------------------------------------------------
    # Map protocol
    # ------------------------------------------------------------------
    def __getitem__(self, key: str) -> str:
        value = self._property_file.get(key)
        if value is None:
            raise KeyError(key)
        return value

    def __setitem__(self, key: str, value: str) -> None:
        self.put(key, value)

    def __delitem__(self, key: str) -> None:
        with self._lock:
            if not self._property_file.contains_key(key):
                raise KeyError(key)
            self._property_file.remove(key)

    def __iter__(self) -> Iterator[str]:
        return iter(self._property_file.keys())

    def __len__(self) -> int:
        return self._property_file.properties_size()

    def __contains__(self, key: object) -> bool:
        return self._property_file.contains_key(key)

    @synchronized
    def put(self, key: str, value: str) -> Optional[str]:
        """Set a value and return the previous one."""
        _require_string(key, "keys")
        _require_string(value, "values")
        previous = self._property_file.get(key)
        self._property_file.set_value(key, value)
        return previous

    @synchronized
    def put_all(self, mapping: Mapping) -> None:
        for key, value in mapping.items():
            self.put(key, value)

    @synchronized
    def put_if_absent(self, key: str, value: str) -> Optional[str]:
        """Set a value only if the key is missing; return the current value."""
        current = self._property_file.get(key)
        if current is None:
            return self.put(key, value)
        return current

    @synchronized
    def remove(self, key: str, value=_MISSING):
        """Remove a key.

        Without a value, removes the key and returns its previous value.
        With a value, removes the key only if it currently has that value
        and returns whether it did.
        """
        previous = self._property_file.get(key)
        if value is not _MISSING:
            if previous is None or previous != value:
                return False
            self._property_file.remove(key)
            return True

        self._property_file.remove(key)
        return previous

    @synchronized
    def replace(self, key: str, value: str) -> Optional[str]:
        """Set a value only if the key exists; return the previous value."""
        if self.contains_key(key):
            return self.put(key, value)
        return None

    @synchronized
    def replace_if(self, key: str, old_value: str, new_value: str) -> bool:
        """Set a value only if the key currently has old_value."""
        if self.contains_key(key) and self._property_file.get(key) == old_value:
            self.put(key, new_value)
            return True
        return False

    @synchronized
    def clear(self) -> None:
        self._property_file.clear()

    def contains_key(self, key: str) -> bool:
        return self._property_file.contains_key(key)

    def contains_value(self, value: str) -> bool:
        return value in self._property_file.values()

    contains = contains_value

    def get_or_default(self, key: str, default: Optional[str] = None) -> Optional[str]:
        if self._property_file.contains_key(key):
            return self._property_file.get(key)
        return default

    def is_empty(self) -> bool:
        return self._property_file.properties_size() == 0

    def elements(self) -> Iterator[str]:
        return iter(self._property_file.values())

    @synchronized
    def for_each(self, action: Callable[[str, str], None]) -> None:
        for key, value in self._property_file.to_map().items():
            action(key, value)

    # ------------------------------------------------------------------
    # Properties with defaults
    # ------------------------------------------------------------------
    def get_property(self, key: str, default: Optional[str] = None) -> Optional[str]:
        """Return the value of a key, falling back to the defaults.

        Args:
            key: The key to look up.
            default: Value returned when neither this object nor the
                defaults contain the key.
        """
        if self._property_file.contains_key(key):
            return self._property_file.get(key)
        if isinstance(self.defaults, Properties):
            return self.defaults.get_property(key, default)
        if self.defaults is not None:
            return self.defaults.get(key, default)
        return default

    @synchronized
    def set_property(self, key: str, value: str) -> Optional[str]:
        return self.put(key, value)

    def property_names(self) -> list[str]:
        """Return all keys including those of the defaults, defaults first."""
        return self.string_property_names()

    def string_property_names(self) -> list[str]:
        names = dict.fromkeys(self._default_names())
        names.update(dict.fromkeys(self._property_file.keys()))
        return list(names)

    def list_properties(self, out: Optional[TextIO] = None) -> None:
        """Print all properties including defaults, shortening long values."""
        out = out or sys.stdout
        print("-- listing properties --", file=out)

        merged = {key: self.get_property(key) for key in self._default_names()}
        merged.update(self._property_file.to_map())
        for key, value in merged.items():
            if len(value) > LIST_VALUE_WIDTH:
                value = value[:LIST_VALUE_WIDTH - 3] + "..."
            print(f"{key}={value}", file=out)

    def _default_names(self) -> list[str]:
        if isinstance(self.defaults, Properties):
            return self.defaults.string_property_names()
        if self.defaults is not None:
            return list(self.defaults.keys())
        return []

    # ------------------------------------------------------------------
    # Unsupported remapping operations
    # ------------------------------------------------------------------
    def compute(self, key, remapping_function):
        raise UnsupportedOperationError("compute")

    def compute_if_absent(self, key, mapping_function):
        raise UnsupportedOperationError("compute_if_absent")

    def compute_if_present(self, key, remapping_function):
        raise UnsupportedOperationError("compute_if_present")

    def merge(self, key, value, remapping_function):
        raise UnsupportedOperationError("merge")

    def replace_all(self, function):
        raise UnsupportedOperationError("replace_all")

    # ------------------------------------------------------------------
    # Object protocol
    # ------------------------------------------------------------------
    @synchronized
    def clone(self) -> "Properties":
        """Return a copy with independent copies of all entries."""
        return Properties(self.defaults, self._property_file.copy())

    __copy__ = clone

    def __eq__(self, other: object) -> bool:
        if other is self:
            return True
        if not isinstance(other, Properties):
            return NotImplemented
        return self._property_file == other._property_file

    def __hash__(self) -> int:
        return hash(self._property_file)

    def __str__(self) -> str:
        entries = self._property_file.get_all_entries()
        if not entries:
            return "{}"
        lines = "".join(
            unescape(entry.to_text().rstrip("\r\n")) + "\n"
            for entry in entries
        )
        return "{\n" + lines + "}"

    def __repr__(self) -> str:
        return f"Properties({self._property_file.to_map()!r})"


def _comment_text(comments: str) -> str:
    """Turn free text into comment lines, one per line of the text."""
    lines = comments.replace("\r\n", "\n").replace("\r", "\n").split("\n")
    return "".join(
        (line if line[:1] in ("#", "!") else "#" + line) + "\n"
        for line in lines
    )


def _require_string(value, name: str) -> None:
    if not isinstance(value, str):
        raise TypeError(f"{name} must be str, but got: {type(value).__name__} {value!r}")
