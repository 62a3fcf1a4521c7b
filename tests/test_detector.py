"""Tests for the change detector."""

import subprocess
from pathlib import Path
from unittest.mock import Mock, patch

import pytest

from propfile.core import PropertyFile
from propfile.diff import DiffDetector, PropertyChange, ChangeType


class TestDiffDetector:
    """Tests for DiffDetector."""

    @pytest.fixture
    def detector(self):
        """Create detector instance."""
        return DiffDetector()

    def test_compare_no_changes(self, detector):
        """Test comparing identical documents."""
        document = PropertyFile.from_text("key1=value1\nkey2=value2\n")

        changes = detector.compare(document, document)
        assert len(changes) == 0

    def test_compare_ignores_formatting(self, detector):
        """Test that only keys and values are compared."""
        base = PropertyFile.from_text("# old\nkey1=value1\n")
        head = PropertyFile.from_text("  key1 : value1\n# new\n")

        assert detector.compare(base, head) == []

    def test_compare_added(self, detector):
        """Test detecting added keys."""
        base = PropertyFile.from_text("key1=value1\n")
        head = PropertyFile.from_text("key1=value1\nkey2=value2\n")

        changes = detector.compare(base, head)
        assert len(changes) == 1
        assert changes[0].change_type == ChangeType.ADDED
        assert changes[0].key == "key2"
        assert changes[0].new_value == "value2"

    def test_compare_removed(self, detector):
        """Test detecting removed keys."""
        base = PropertyFile.from_text("key1=value1\nkey2=value2\n")
        head = PropertyFile.from_text("key1=value1\n")

        changes = detector.compare(base, head)
        assert len(changes) == 1
        assert changes[0].change_type == ChangeType.REMOVED
        assert changes[0].key == "key2"
        assert changes[0].old_value == "value2"

    def test_compare_modified(self, detector):
        """Test detecting modified values, last occurrence wins."""
        base = PropertyFile.from_text("key1=old_value\n")
        head = PropertyFile.from_text("key1=old_value\nkey1=new_value\n")

        changes = detector.compare(base, head)
        assert changes == [
            PropertyChange("key1", ChangeType.MODIFIED, "old_value", "new_value")
        ]

    def test_compare_order(self, detector):
        """Test that changes follow document order."""
        base = PropertyFile.from_text("remove=gone\nkeep=same\nmodify=old\n")
        head = PropertyFile.from_text("add=fresh\nkeep=same\nmodify=new\n")

        changes = detector.compare(base, head)
        assert [(c.key, c.change_type) for c in changes] == [
            ("add", ChangeType.ADDED),
            ("modify", ChangeType.MODIFIED),
            ("remove", ChangeType.REMOVED),
        ]

    def test_detect_changes_between_refs(self, tmp_path):
        """Test loading both versions through git."""
        detector = DiffDetector(repo_path=tmp_path)

        def fake_git(args, **kwargs):
            if args[2].startswith("HEAD~1:"):
                raise subprocess.CalledProcessError(128, args)
            return Mock(stdout=b"greeting=Hello\n")

        with patch("propfile.diff.detector.subprocess.run", side_effect=fake_git) as run:
            changes = detector.detect_changes(Path("app.properties"))

        assert changes == [PropertyChange("greeting", ChangeType.ADDED, new_value="Hello")]
        assert run.call_args_list[0].args[0] == ["git", "show", "HEAD~1:app.properties"]
        assert run.call_args_list[1].args[0] == ["git", "show", "HEAD:app.properties"]

    def test_detect_changes_from_working_tree(self, tmp_path):
        """Test comparing a git ref with the file on disk."""
        path = tmp_path / "app.properties"
        path.write_text("greeting=Hi\nnew=1\n", encoding="utf-8")
        detector = DiffDetector(repo_path=tmp_path)

        with patch(
            "propfile.diff.detector.subprocess.run",
            return_value=Mock(stdout=b"greeting=Hello\n")
        ):
            changes = detector.detect_changes_from_working_tree(path)

        assert changes == [
            PropertyChange("greeting", ChangeType.MODIFIED, "Hello", "Hi"),
            PropertyChange("new", ChangeType.ADDED, new_value="1"),
        ]

    def test_get_changed_keys(self, tmp_path):
        """Test listing only added and modified keys."""
        detector = DiffDetector(repo_path=tmp_path)
        versions = iter([b"a=1\nb=2\n", b"a=3\nc=4\n"])

        with patch(
            "propfile.diff.detector.subprocess.run",
            side_effect=lambda args, **kwargs: Mock(stdout=next(versions))
        ):
            assert detector.get_changed_keys(Path("app.properties")) == ["a", "c"]


class TestPropertyChange:
    """Tests for PropertyChange dataclass."""

    def test_added_change(self):
        """Test creating an added change."""
        change = PropertyChange(
            key="new_key",
            change_type=ChangeType.ADDED,
            new_value="New Value"
        )
        assert change.key == "new_key"
        assert change.change_type == ChangeType.ADDED
        assert change.old_value is None
        assert change.new_value == "New Value"

    def test_removed_change(self):
        """Test creating a removed change."""
        change = PropertyChange(
            key="del_key",
            change_type=ChangeType.REMOVED,
            old_value="Gone"
        )
        assert change.change_type == ChangeType.REMOVED
        assert change.old_value == "Gone"
        assert change.new_value is None
