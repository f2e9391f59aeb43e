from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import List, Optional

from . import __version__
from .config import EmbedConfig
from .diagnostics import DiagnosticsCollector
from .embed.transform import StaticEmbedTransform, TransformOptions, TransformResult
from .errors import ModuleParseError
from .filtering import ModuleFilter, iter_modules
from .report_schema import BuildReport, DiagnosticEntry, ModuleReport, ModuleStatus, Totals

logger = logging.getLogger(__name__)


def build_transform(root: Path, cfg: EmbedConfig) -> StaticEmbedTransform:
    module_filter = ModuleFilter(root, cfg.include, cfg.exclude)
    options = TransformOptions(marker=cfg.marker, encoding=cfg.encoding, sourcemap=cfg.sourcemap)
    return StaticEmbedTransform(options, module_filter)


def _entries(diagnostics: DiagnosticsCollector) -> List[DiagnosticEntry]:
    return [
        DiagnosticEntry(
            severity=d.severity,
            message=d.message,
            line=d.location.line if d.location else None,
            column=d.location.column if d.location else None,
        )
        for d in diagnostics.entries
    ]


def write_result(dest: Path, result: TransformResult) -> None:
    """Rewritten module plus <name>.map next to it when a map was produced."""
    dest.parent.mkdir(parents=True, exist_ok=True)
    code = result.code
    if result.map is not None:
        map_path = dest.with_name(dest.name + ".map")
        map_path.write_text(result.map.to_json(), encoding="utf-8")
        if not code.endswith("\n"):
            code += "\n"
        code += f"//# sourceMappingURL={map_path.name}\n"
    dest.write_text(code, encoding="utf-8")


def _process_module(
    path: Path,
    src: Path,
    out: Optional[Path],
    transform: StaticEmbedTransform,
    *,
    dry_run: bool,
) -> ModuleReport:
    rel = path.relative_to(src).as_posix()
    diagnostics = DiagnosticsCollector()

    try:
        code = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        diagnostics.error(f"Cannot read module {path}: {e}")
        return ModuleReport(path=rel, status=ModuleStatus.failed, diagnostics=_entries(diagnostics))

    if transform.module_filter is not None and not transform.module_filter(str(path)):
        status = ModuleStatus.skipped
        result = None
    else:
        try:
            result = transform.transform(code, str(path), diagnostics)
        except ModuleParseError:
            return ModuleReport(path=rel, status=ModuleStatus.failed, diagnostics=_entries(diagnostics))
        status = ModuleStatus.rewritten if result is not None else ModuleStatus.unchanged

    if out is not None and not dry_run:
        dest = out / rel
        if result is not None:
            write_result(dest, result)
        else:
            dest.parent.mkdir(parents=True, exist_ok=True)
            shutil.copyfile(path, dest)

    return ModuleReport(
        path=rel,
        status=status,
        embedded_calls=result.stats.calls_rewritten if result else 0,
        embedded_files=result.stats.files_embedded if result else 0,
        diagnostics=_entries(diagnostics),
    )


def run_build(src: Path, out: Optional[Path], cfg: EmbedConfig, *, dry_run: bool = False) -> BuildReport:
    """
    Transform every module under src and mirror the tree into out.

    Unchanged and filtered-out modules are copied as is; modules that
    fail to parse are reported and not written.
    """
    src = src.resolve()
    out = out.resolve() if out is not None else None
    transform = build_transform(src, cfg)
    pruner = transform.module_filter.prunes_dir if transform.module_filter is not None else None

    reports: List[ModuleReport] = []
    for path in iter_modules(src, extensions=set(cfg.extensions), dir_pruner=pruner):
        if out is not None and out in path.parents:
            # Output directory nested inside the source tree
            continue
        report = _process_module(path, src, out, transform, dry_run=dry_run)
        logger.debug("%s: %s", report.path, report.status.value)
        reports.append(report)

    totals = Totals(
        modules=len(reports),
        rewritten=sum(1 for r in reports if r.status == ModuleStatus.rewritten),
        failed=sum(1 for r in reports if r.status == ModuleStatus.failed),
        warnings=sum(1 for r in reports for d in r.diagnostics if d.severity == "warning"),
        errors=sum(1 for r in reports for d in r.diagnostics if d.severity == "error"),
    )
    return BuildReport(
        tool_version=__version__,
        root=str(src),
        out=str(out) if out is not None else None,
        dry_run=dry_run,
        modules=reports,
        totals=totals,
    )


__all__ = ["run_build", "build_transform", "write_result"]
