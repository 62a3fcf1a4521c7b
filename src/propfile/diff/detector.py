"""Change detection between versions of .properties files."""

import logging
import subprocess
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional

from ..config import Options, DEFAULT_OPTIONS
from ..core import PropertyFile

logger = logging.getLogger(__name__)


class ChangeType(Enum):
    """Type of change detected in a .properties file."""
    ADDED = "added"
    MODIFIED = "modified"
    REMOVED = "removed"


@dataclass
class PropertyChange:
    """Represents a change to a property.

    Attributes:
        key: The key that changed.
        change_type: Type of change (added, modified, removed).
        old_value: Previous value (None for added properties).
        new_value: New value (None for removed properties).
    """
    key: str
    change_type: ChangeType
    old_value: Optional[str] = None
    new_value: Optional[str] = None


class DiffDetector:
    """Detects key-level changes between versions of .properties files."""

    def __init__(self, repo_path: Optional[Path] = None, options: Optional[Options] = None):
        """Initialize the detector.

        Args:
            repo_path: Path to the git repository. Defaults to current directory.
            options: Options for decoding the files.
        """
        self.repo_path = repo_path or Path.cwd()
        self.options = options or DEFAULT_OPTIONS

    def compare(self, base: PropertyFile, head: PropertyFile) -> list[PropertyChange]:
        """Compare two documents by their logical key/value pairs.

        Formatting and comments are ignored; for duplicate keys the last
        occurrence counts.

        Args:
            base: The older document.
            head: The newer document.

        Returns:
            Added and modified keys in the order of head, followed by
            removed keys in the order of base.
        """
        base_map = base.to_map()
        head_map = head.to_map()
        changes = []

        for key, value in head_map.items():
            if key not in base_map:
                changes.append(PropertyChange(
                    key=key,
                    change_type=ChangeType.ADDED,
                    new_value=value
                ))
            elif base_map[key] != value:
                changes.append(PropertyChange(
                    key=key,
                    change_type=ChangeType.MODIFIED,
                    old_value=base_map[key],
                    new_value=value
                ))

        for key, value in base_map.items():
            if key not in head_map:
                changes.append(PropertyChange(
                    key=key,
                    change_type=ChangeType.REMOVED,
                    old_value=value
                ))

        return changes

    def detect_changes(
        self,
        file_path: Path,
        base_ref: str = "HEAD~1",
        head_ref: str = "HEAD"
    ) -> list[PropertyChange]:
        """Detect changes to a .properties file between two git refs.

        Args:
            file_path: Path to the .properties file (relative to repo root).
            base_ref: Base git reference (commit, branch, tag). Default: HEAD~1.
            head_ref: Head git reference. Default: HEAD.

        Returns:
            List of PropertyChange objects describing the changes.
        """
        base = self._load_at_ref(file_path, base_ref)
        head = self._load_at_ref(file_path, head_ref)
        return self.compare(base, head)

    def detect_changes_from_working_tree(
        self,
        file_path: Path,
        base_ref: str = "HEAD"
    ) -> list[PropertyChange]:
        """Detect changes between a git ref and the current working tree.

        Args:
            file_path: Path to the .properties file.
            base_ref: Base git reference to compare against.

        Returns:
            List of PropertyChange objects describing the changes.
        """
        base = self._load_at_ref(file_path, base_ref)

        abs_path = self.repo_path / file_path if not file_path.is_absolute() else file_path
        if abs_path.exists():
            current = PropertyFile.from_file(abs_path, self.options)
        else:
            current = PropertyFile(options=self.options)

        return self.compare(base, current)

    def _load_at_ref(self, file_path: Path, ref: str) -> PropertyFile:
        """Load a file as it was at a git reference.

        A file that does not exist at that reference is an empty document.
        """
        content = self._get_file_at_ref(file_path, ref)
        if content is None:
            return PropertyFile(options=self.options)
        return PropertyFile.from_bytes(content, self.options)

    def _get_file_at_ref(self, file_path: Path, ref: str) -> Optional[bytes]:
        """Get file content at a specific git reference.

        Args:
            file_path: Path to the file (relative to repo root).
            ref: Git reference.

        Returns:
            Raw file content, or None if file doesn't exist at that ref.
        """
        # Normalize path to be relative to repo root
        try:
            if file_path.is_absolute():
                file_path = file_path.relative_to(self.repo_path)
        except ValueError:
            logger.debug("%s is outside of %s", file_path, self.repo_path)

        try:
            result = subprocess.run(
                ["git", "show", f"{ref}:{file_path.as_posix()}"],
                capture_output=True,
                cwd=self.repo_path,
                check=True
            )
        except subprocess.CalledProcessError:
            # File doesn't exist at this ref
            return None
        return result.stdout

    def get_changed_keys(
        self,
        file_path: Path,
        base_ref: str = "HEAD~1",
        head_ref: str = "HEAD"
    ) -> list[str]:
        """Get the keys that were added or modified between two refs."""
        return [
            c.key for c in self.detect_changes(file_path, base_ref, head_ref)
            if c.change_type in (ChangeType.ADDED, ChangeType.MODIFIED)
        ]
