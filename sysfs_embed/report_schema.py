from __future__ import annotations

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field


class ModuleStatus(str, Enum):
    unchanged = "unchanged"
    rewritten = "rewritten"
    failed = "failed"
    skipped = "skipped"


class DiagnosticEntry(BaseModel):
    severity: str
    message: str
    line: Optional[int] = None
    column: Optional[int] = None


class ModuleReport(BaseModel):
    path: str
    status: ModuleStatus
    embedded_calls: int = 0
    embedded_files: int = 0
    diagnostics: List[DiagnosticEntry] = Field(default_factory=list)


class Totals(BaseModel):
    modules: int = 0
    rewritten: int = 0
    failed: int = 0
    warnings: int = 0
    errors: int = 0


class BuildReport(BaseModel):
    tool_version: str
    root: str
    out: Optional[str] = None
    dry_run: bool = False
    modules: List[ModuleReport] = Field(default_factory=list)
    totals: Totals = Field(default_factory=Totals)

    @property
    def ok(self) -> bool:
        return self.totals.errors == 0 and self.totals.failed == 0


__all__ = ["ModuleStatus", "DiagnosticEntry", "ModuleReport", "Totals", "BuildReport"]
