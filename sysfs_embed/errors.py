"""
Base exception for user-facing errors.

All expected errors that should be displayed to the user
as clean messages (without stack traces) must inherit from EmbedUserError.

Programming errors and bugs should NOT inherit from EmbedUserError -
they will propagate with full tracebacks.
"""

from __future__ import annotations

from typing import Optional

from .types import SourceLocation


class EmbedUserError(Exception):
    """
    Base class for all user-facing errors in sysfs-embed.

    These errors indicate problems that the user can fix:
    broken module syntax, invalid configuration, missing inputs.
    """
    pass


class ModuleParseError(EmbedUserError):
    """The module source could not be parsed; the whole module transform is aborted."""

    def __init__(self, module_id: str, message: str, location: Optional[SourceLocation] = None):
        self.module_id = module_id
        self.location = location
        where = str(location) if location else module_id
        super().__init__(f"Failed to parse {where}: {message}")


class ConfigError(EmbedUserError):
    """Invalid sysfs-embed.yaml."""
    pass


__all__ = ["EmbedUserError", "ModuleParseError", "ConfigError"]
