"""Change detection for .properties files."""

from .detector import DiffDetector, PropertyChange, ChangeType

__all__ = ["DiffDetector", "PropertyChange", "ChangeType"]
