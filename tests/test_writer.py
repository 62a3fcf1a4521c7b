"""Tests for writing entries."""

import io
import tempfile
from pathlib import Path

import pytest

from propfile.config import ISO_8859_1, Options, UnicodeHandling
from propfile.entry import PropertyEntry, VerbatimEntry
from propfile.io import PropertyFileWriter, format_entries, write_entries, write_file


class FailingStream(io.BytesIO):
    """A stream that fails after a number of writes."""

    def __init__(self, fail_after: int):
        super().__init__()
        self.fail_after = fail_after
        self.writes = 0

    def write(self, data):
        if self.writes >= self.fail_after:
            raise OSError("disk full")
        self.writes += 1
        return super().write(data)


@pytest.fixture
def entries():
    """Create a small document."""
    return [
        VerbatimEntry("# comment\n"),
        PropertyEntry("  ", "key", " = ", "wert ä", "\n"),
        VerbatimEntry("\n"),
        PropertyEntry("", "last", ":", "1", ""),
    ]


class TestFormatEntries:
    """Tests for format_entries."""

    def test_format(self, entries):
        """Test that entries are joined exactly."""
        assert format_entries(entries) == "# comment\n  key = wert ä\n\nlast:1"

    def test_format_empty(self):
        """Test formatting no entries."""
        assert format_entries([]) == ""

    def test_format_unknown_entry(self):
        """Test that unknown entry types are rejected."""
        with pytest.raises(TypeError):
            format_entries(["key=value\n"])


class TestPropertyFileWriter:
    """Tests for PropertyFileWriter."""

    def test_write_utf8(self, entries):
        """Test writing UTF-8."""
        stream = io.BytesIO()
        count = write_entries(stream, entries)

        assert count == 4
        assert stream.getvalue() == "# comment\n  key = wert ä\n\nlast:1".encode("utf-8")

    def test_write_iso_8859_1_by_charset(self):
        """Test that only unsupported characters are escaped."""
        stream = io.BytesIO()
        write_entries(
            stream,
            [PropertyEntry("", "a", "=", "ä", "\n"), PropertyEntry("", "b", "=", "€", "\n")],
            Options(encoding=ISO_8859_1)
        )
        assert stream.getvalue() == b"a=\xe4\nb=\\u20ac\n"

    def test_write_escape_all(self):
        """Test escaping every non-ASCII character."""
        stream = io.BytesIO()
        write_entries(
            stream,
            [PropertyEntry("", "a", "=", "ä", "\n")],
            Options(unicode_handling=UnicodeHandling.ESCAPE)
        )
        assert stream.getvalue() == b"a=\\u00e4\n"

    def test_write_do_nothing_fails_on_unsupported(self):
        """Test that encoding errors surface without escaping."""
        stream = io.BytesIO()
        options = Options(encoding=ISO_8859_1, unicode_handling=UnicodeHandling.DO_NOTHING)
        with pytest.raises(UnicodeEncodeError):
            write_entries(stream, [PropertyEntry("", "b", "=", "€", "\n")], options)

    def test_write_failure_aborts(self, entries):
        """Test that a failing stream stops writing without duplicates."""
        stream = FailingStream(fail_after=2)
        writer = PropertyFileWriter(stream)

        with pytest.raises(OSError):
            writer.write_entries(entries)

        assert writer.entries_written == 2
        assert stream.getvalue() == "# comment\n  key = wert ä\n".encode("utf-8")

    def test_write_single_entries(self):
        """Test writing entry by entry."""
        stream = io.BytesIO()
        with PropertyFileWriter(stream) as writer:
            writer.write_entry(VerbatimEntry("#x\n"))
            writer.write_entry(PropertyEntry.create("k", "v"))

        assert stream.getvalue() == b"#x\nk=v\n"
        assert writer.entries_written == 2

    def test_write_file(self, entries):
        """Test writing to a file in a new directory."""
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "conf" / "app.properties"
            write_file(path, entries)

            assert path.read_bytes() == format_entries(entries).encode("utf-8")

    def test_write_file_encoding_error_keeps_file(self):
        """Test that an encoding error does not truncate an existing file."""
        options = Options(encoding=ISO_8859_1, unicode_handling=UnicodeHandling.DO_NOTHING)
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "app.properties"
            path.write_bytes(b"a=1\n")

            with pytest.raises(UnicodeEncodeError):
                write_file(path, [PropertyEntry.create("a", "€")], options)

            assert path.read_bytes() == b"a=1\n"
