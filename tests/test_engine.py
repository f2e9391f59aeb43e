import json
from pathlib import Path

import pytest

from sysfs_embed.config import EmbedConfig
from sysfs_embed.engine import run_build
from sysfs_embed.report_schema import ModuleStatus
from tests.infrastructure.file_utils import write


@pytest.fixture
def src(tmp_path: Path) -> Path:
    root = tmp_path / "src"
    write(root / "data.txt", "payload")
    write(root / "index.ts", 'export const data = constSysfsExpr("data.txt");\n')
    write(root / "plain.js", "export const x = 1;\n")
    write(root / "broken.ts", "const x = constSysfsExpr(\n")
    write(root / "warn.ts", "const y = constSysfsExpr(unknownVar);\n")
    write(root / "node_modules" / "lib" / "i.js", 'constSysfsExpr("data.txt");\n')
    return root


def _by_path(report):
    return {m.path: m for m in report.modules}


def test_build_writes_tree_and_reports(src: Path, tmp_path: Path):
    out = tmp_path / "out"
    report = run_build(src, out, EmbedConfig())
    mods = _by_path(report)

    assert set(mods) == {"index.ts", "plain.js", "broken.ts", "warn.ts"}
    assert mods["index.ts"].status == ModuleStatus.rewritten
    assert mods["index.ts"].embedded_calls == 1
    assert mods["index.ts"].embedded_files == 1
    assert mods["plain.js"].status == ModuleStatus.unchanged
    assert mods["broken.ts"].status == ModuleStatus.failed
    assert mods["warn.ts"].status == ModuleStatus.unchanged
    assert mods["warn.ts"].diagnostics[0].severity == "warning"

    code = (out / "index.ts").read_text(encoding="utf-8")
    assert code.endswith("//# sourceMappingURL=index.ts.map\n")
    literal = code.splitlines()[0][len("export const data = "):-1]
    assert json.loads(literal)["content"] == "payload"
    smap = json.loads((out / "index.ts.map").read_text(encoding="utf-8"))
    assert smap["version"] == 3

    assert (out / "plain.js").read_text(encoding="utf-8") == "export const x = 1;\n"
    assert not (out / "broken.ts").exists()
    assert not (out / "node_modules").exists()

    assert report.totals.modules == 4
    assert report.totals.rewritten == 1
    assert report.totals.failed == 1
    assert not report.ok


def test_dry_run_writes_nothing(src: Path, tmp_path: Path):
    out = tmp_path / "out"
    report = run_build(src, out, EmbedConfig(sourcemap=False), dry_run=True)
    assert report.dry_run
    assert not out.exists()


def test_filtered_modules_are_copied_as_skipped(src: Path, tmp_path: Path):
    out = tmp_path / "out"
    cfg = EmbedConfig(exclude=("node_modules/", "index.ts"), sourcemap=False)
    mods = _by_path(run_build(src, out, cfg))
    assert mods["index.ts"].status == ModuleStatus.skipped
    assert "constSysfsExpr" in (out / "index.ts").read_text(encoding="utf-8")


def test_output_nested_in_source_is_ignored(src: Path):
    out = src / "dist"
    run_build(src, out, EmbedConfig(sourcemap=False))
    report = run_build(src, out, EmbedConfig(sourcemap=False))
    assert not any(m.path.startswith("dist/") for m in report.modules)


def test_report_serializes_to_json(src: Path, tmp_path: Path):
    report = run_build(src, None, EmbedConfig(), dry_run=True)
    data = json.loads(report.model_dump_json())
    assert data["out"] is None
    assert {m["status"] for m in data["modules"]} == {"rewritten", "unchanged", "failed"}
