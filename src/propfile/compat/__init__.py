"""Compatibility layer exposing a PropertyFile as a classic properties map."""

from .properties import Properties

__all__ = ["Properties"]
