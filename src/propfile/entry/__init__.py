"""Entries of a .properties document."""

from .models import Entry, PropertyEntry, VerbatimEntry, copy_entry

__all__ = ["Entry", "PropertyEntry", "VerbatimEntry", "copy_entry"]
