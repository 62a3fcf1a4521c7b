"""Integration tests for the command-line interface."""

from unittest.mock import Mock, patch

import pytest
from click.testing import CliRunner

from propfile.cli import cli


CONTENT = "# Application\n  app.name = Demo\r\ncolor:blue\ncolor:green\n"


@pytest.fixture
def runner():
    """Create a CLI runner."""
    return CliRunner()


@pytest.fixture
def properties_file(tmp_path):
    """Create a .properties file."""
    path = tmp_path / "app.properties"
    path.write_bytes(CONTENT.encode("utf-8"))
    return path


class TestReadCommands:
    """Tests for commands that only read."""

    def test_show(self, runner, properties_file):
        """Test listing entries."""
        result = runner.invoke(cli, ["show", str(properties_file)])

        assert result.exit_code == 0
        assert "Entries (4 total, 2 properties)" in result.output
        assert "app.name = 'Demo'" in result.output
        assert "# Application" in result.output

    def test_show_empty(self, runner, tmp_path):
        """Test an empty file."""
        path = tmp_path / "empty.properties"
        path.write_bytes(b"")

        result = runner.invoke(cli, ["show", str(path)])
        assert result.exit_code == 0
        assert "No entries found." in result.output

    def test_get(self, runner, properties_file):
        """Test printing a value, last occurrence wins."""
        result = runner.invoke(cli, ["get", str(properties_file), "color"])

        assert result.exit_code == 0
        assert result.output == "green\n"

    def test_get_missing(self, runner, properties_file):
        """Test a missing key."""
        result = runner.invoke(cli, ["get", str(properties_file), "missing"])
        assert result.exit_code == 1

    def test_keys(self, runner, properties_file):
        """Test listing keys."""
        result = runner.invoke(cli, ["keys", str(properties_file)])
        assert result.output == "app.name\ncolor\n"

    def test_check(self, runner, properties_file):
        """Test the round-trip check."""
        result = runner.invoke(cli, ["check", str(properties_file)])

        assert result.exit_code == 0
        assert "Round-trip OK." in result.output

    def test_check_iso_8859_1(self, runner, tmp_path):
        """Test the round-trip check with another encoding."""
        path = tmp_path / "latin.properties"
        path.write_bytes(b"name=M\xfcller\n")

        result = runner.invoke(cli, ["--encoding", "iso-8859-1", "check", str(path)])
        assert result.exit_code == 0


class TestWriteCommands:
    """Tests for commands that modify files."""

    def test_set_existing(self, runner, properties_file):
        """Test updating a value in place."""
        result = runner.invoke(cli, ["set", str(properties_file), "app.name", "Other"])

        assert result.exit_code == 0
        assert properties_file.read_bytes() == (
            b"# Application\n  app.name = Other\r\ncolor:blue\ncolor:green\n"
        )

    def test_set_new(self, runner, properties_file):
        """Test appending a new key."""
        result = runner.invoke(cli, ["set", str(properties_file), "size", "L"])

        assert result.exit_code == 0
        assert properties_file.read_bytes() == (CONTENT + "size=L\n").encode("utf-8")

    def test_remove(self, runner, properties_file):
        """Test removing every occurrence of a key."""
        result = runner.invoke(cli, ["remove", str(properties_file), "color"])

        assert result.exit_code == 0
        assert "2 occurrence(s)" in result.output
        assert properties_file.read_bytes() == b"# Application\n  app.name = Demo\r\n"

    def test_remove_missing(self, runner, properties_file):
        """Test removing a missing key leaves the file alone."""
        result = runner.invoke(cli, ["remove", str(properties_file), "missing"])

        assert result.exit_code == 0
        assert properties_file.read_bytes() == CONTENT.encode("utf-8")

    def test_update(self, runner, properties_file, tmp_path):
        """Test updating one file from another."""
        target = tmp_path / "target.properties"
        target.write_bytes(b"# target\ncolor = red\nold=1\n")

        result = runner.invoke(
            cli,
            ["update", str(properties_file), str(target), "--missing", "delete"]
        )

        assert result.exit_code == 0
        assert target.read_bytes() == b"# target\ncolor = green\napp.name=Demo\n"


class TestDiffCommand:
    """Tests for the diff command."""

    def test_diff(self, runner, properties_file):
        """Test showing changes against a git revision."""
        with patch(
            "propfile.diff.detector.subprocess.run",
            return_value=Mock(stdout=b"app.name=Demo\ncolor=red\nremoved=x\n")
        ):
            result = runner.invoke(cli, ["diff", str(properties_file), "--base", "HEAD"])

        assert result.exit_code == 0
        assert "Modified (1):" in result.output
        assert "~ color" in result.output
        assert "Removed (1):" in result.output
        assert "- removed" in result.output

    def test_diff_no_changes(self, runner, properties_file):
        """Test a file without changes."""
        with patch(
            "propfile.diff.detector.subprocess.run",
            return_value=Mock(stdout=CONTENT.encode("utf-8"))
        ):
            result = runner.invoke(cli, ["diff", str(properties_file)])

        assert "No changes detected." in result.output
