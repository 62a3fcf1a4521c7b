"""The PropertyFile document model."""

from .property_file import PropertyFile

__all__ = ["PropertyFile"]
