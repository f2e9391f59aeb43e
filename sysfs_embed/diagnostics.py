"""
Diagnostics sink for the embed transform.

The transform never talks to a particular host directly: it reports
through a Diagnostics object passed in by the caller. Warnings are
always non-fatal; errors mark a call (or a whole module) as failed,
and the caller decides what that means for the build.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Protocol

from .types import Diagnostic, SourceLocation

logger = logging.getLogger(__name__)


class Diagnostics(Protocol):
    def warn(self, message: str, location: Optional[SourceLocation] = None) -> None: ...

    def error(self, message: str, location: Optional[SourceLocation] = None) -> None: ...


class DiagnosticsCollector:
    """
    Default Diagnostics implementation.

    Keeps every reported entry in order and mirrors it to the
    "sysfs_embed.diagnostics" logger.
    """

    def __init__(self, *, echo: bool = True):
        self.entries: List[Diagnostic] = []
        self._echo = echo

    def warn(self, message: str, location: Optional[SourceLocation] = None) -> None:
        entry = Diagnostic("warning", message, location)
        self.entries.append(entry)
        if self._echo:
            logger.warning("%s", entry)

    def error(self, message: str, location: Optional[SourceLocation] = None) -> None:
        entry = Diagnostic("error", message, location)
        self.entries.append(entry)
        if self._echo:
            logger.error("%s", entry)

    @property
    def warnings(self) -> List[Diagnostic]:
        return [d for d in self.entries if d.severity == "warning"]

    @property
    def errors(self) -> List[Diagnostic]:
        return [d for d in self.entries if d.severity == "error"]

    @property
    def has_errors(self) -> bool:
        return any(d.severity == "error" for d in self.entries)


__all__ = ["Diagnostics", "DiagnosticsCollector"]
