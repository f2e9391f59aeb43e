import os
import warnings
from pathlib import Path

import pytest

from sysfs_embed.diagnostics import DiagnosticsCollector
from sysfs_embed.embed.loader import ContentLoader, decode_content, expand_pattern
from sysfs_embed.types import FileRecord, SearchPlan, SourceLocation
from tests.infrastructure.file_utils import write, write_bytes

LOC = SourceLocation("/p/mod.ts", 1, 0)


@pytest.fixture
def tree(tmp_path: Path) -> Path:
    for rel in ["b.txt", "a.txt", "c.md", "sub/d.txt", "sub/deep/e.txt", ".hidden.txt", ".cfg/f.txt"]:
        write(tmp_path / rel, rel)
    return tmp_path


def test_star_matches_top_level_only(tree: Path):
    assert expand_pattern(str(tree), "*.txt") == ["a.txt", "b.txt"]


def test_globstar_is_recursive_and_sorted(tree: Path):
    assert expand_pattern(str(tree), "**/*.txt") == ["a.txt", "b.txt", "sub/d.txt", "sub/deep/e.txt"]


def test_prefix_and_character_class(tree: Path):
    assert expand_pattern(str(tree), "sub/*.txt") == ["sub/d.txt"]
    assert expand_pattern(str(tree), "[ab].txt") == ["a.txt", "b.txt"]
    assert expand_pattern(str(tree), "./c.md") == ["c.md"]


def test_dot_entries_only_when_named(tree: Path):
    assert ".hidden.txt" not in expand_pattern(str(tree), "**/*")
    assert expand_pattern(str(tree), ".hidden.txt") == [".hidden.txt"]
    assert expand_pattern(str(tree), ".cfg/*.txt") == [".cfg/f.txt"]


def test_directories_are_never_matched(tree: Path):
    assert expand_pattern(str(tree), "sub") == []
    assert expand_pattern(str(tree), "*") == ["a.txt", "b.txt", "c.md"]


def test_missing_root_and_negation(tree: Path):
    assert expand_pattern(str(tree / "missing"), "*") == []
    assert expand_pattern(str(tree), "!a.txt") == []


@pytest.mark.parametrize("encoding,raw,expected", [
    ("utf8", "héllo".encode("utf-8"), "héllo"),
    ("UTF-8", b"ok", "ok"),
    ("latin1", b"\xe9", "é"),
    ("binary", b"\xff", "\xff"),
    ("utf16le", "hi".encode("utf-16-le"), "hi"),
    ("ascii", b"abc", "abc"),
    ("hex", b"\x00\xffA", "00ff41"),
    ("base64", b"\x00\x01\x02\x03", "AAECAw=="),
    ("base64url", b"\xfb\xff", "-_8"),
])
def test_decode_content(encoding, raw, expected):
    assert decode_content(raw, encoding) == expected


def test_invalid_utf8_is_replaced():
    assert decode_content(b"a\xffb", "utf8") == "a�b"


def test_unknown_encoding_raises():
    with pytest.raises(LookupError):
        decode_content(b"x", "no-such-encoding")


def test_single_file_record(tmp_path: Path):
    write(tmp_path / "assets" / "a.txt", "A")
    diags = DiagnosticsCollector(echo=False)
    plan = SearchPlan(root=str(tmp_path / "assets"), pattern="a.txt", single_file=True)
    rec = ContentLoader(diags).load(plan, "utf8", LOC)
    assert rec == FileRecord(content="A", file_path=str(tmp_path / "assets" / "a.txt"), file_name="a.txt")


def test_single_file_read_error_is_reported(tmp_path: Path):
    write(tmp_path / "a.txt", "A")
    diags = DiagnosticsCollector(echo=False)
    plan = SearchPlan(root=str(tmp_path), pattern="a.txt", single_file=True)
    assert ContentLoader(diags).load(plan, "bogus-encoding", LOC) is None
    (err,) = diags.errors
    assert err.message.startswith("Error reading file")
    assert err.location == LOC


def test_pattern_records_use_native_relative_names(tmp_path: Path):
    write_bytes(tmp_path / "x" / "1.bin", b"\x01")
    write_bytes(tmp_path / "x" / "2.bin", b"\x02")
    diags = DiagnosticsCollector(echo=False)
    plan = SearchPlan(root=str(tmp_path), pattern="**/*.bin", single_file=False)
    recs = ContentLoader(diags).load(plan, "hex", LOC)
    assert [(r.file_name, r.content) for r in recs] == [
        (str(Path("x", "1.bin")), "01"),
        (str(Path("x", "2.bin")), "02"),
    ]
    assert diags.entries == []


def test_brace_alternatives_are_merged_and_sorted(tree: Path):
    assert expand_pattern(str(tree), "*.{md,txt}") == ["a.txt", "b.txt", "c.md"]
    assert expand_pattern(str(tree), "{sub,.}/*.txt") == ["a.txt", "b.txt", "sub/d.txt"]
    assert expand_pattern(str(tree), "@(a|c).*") == ["a.txt", "c.md"]


def test_parent_prefix_leaves_the_root(tree: Path):
    root = tree / "sub" / "deep"
    assert expand_pattern(str(root), "../*.txt") == ["../d.txt"]
    assert expand_pattern(str(root), str(tree) + "/*.md") == [
        Path(os.path.relpath(tree / "c.md", root)).as_posix()
    ]


def test_unsupported_pattern_warns_and_skips(tmp_path: Path):
    write(tmp_path / "a.txt", "A")
    diags = DiagnosticsCollector(echo=False)
    plan = SearchPlan(root=str(tmp_path), pattern="+(a).txt", single_file=False)
    assert ContentLoader(diags).load(plan, "utf8", LOC) is None
    (w,) = diags.warnings
    assert w.message.startswith('Unsupported pattern "+(a).txt"')
    assert w.location == LOC


def test_parent_prefix_records_keep_names_relative_to_root(tmp_path: Path):
    write(tmp_path / "shared" / "x.json", "{}")
    root = tmp_path / "locales"
    root.mkdir()
    diags = DiagnosticsCollector(echo=False)
    plan = SearchPlan(root=str(root), pattern="../shared/*.json", single_file=False)
    (rec,) = ContentLoader(diags).load(plan, "utf8", LOC)
    assert rec.file_path == str(tmp_path / "shared" / "x.json")
    assert rec.file_name == os.path.join("..", "shared", "x.json")


def test_pattern_matching_emits_no_deprecation_warnings(tree: Path):
    with warnings.catch_warnings():
        warnings.simplefilter("error", DeprecationWarning)
        assert expand_pattern(str(tree), "**/*.{txt,md}") == ["a.txt", "b.txt", "c.md", "sub/d.txt", "sub/deep/e.txt"]
