"""
Source Map v3 generation for rewritten modules.

Unchanged text maps segment-by-segment to its original position (one
segment per line piece); every replacement maps to the start of the
call it replaced. Columns are counted in UTF-16 code units.
"""

from __future__ import annotations

import base64
import json
from dataclasses import dataclass, field
from typing import Dict, Any, Iterable, List, Optional, Tuple

from .range_edits import Edit

_B64 = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789+/"

Segment = Tuple[int, int, int]  # generated column, original line, original column


def encode_vlq(value: int) -> str:
    v = ((-value) << 1) | 1 if value < 0 else value << 1
    out = []
    while True:
        digit = v & 31
        v >>= 5
        if v:
            digit |= 32
        out.append(_B64[digit])
        if not v:
            return "".join(out)


def _u16(text: str) -> int:
    return len(text.encode("utf-16-le")) // 2


@dataclass(frozen=True)
class SourceMap:
    sources: List[str]
    mappings: str
    sources_content: List[Optional[str]] = field(default_factory=list)
    names: List[str] = field(default_factory=list)
    file: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {"version": 3}
        if self.file is not None:
            d["file"] = self.file
        d["sources"] = list(self.sources)
        d["sourcesContent"] = list(self.sources_content)
        d["names"] = list(self.names)
        d["mappings"] = self.mappings
        return d

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False, separators=(",", ":"))

    def to_url(self) -> str:
        payload = base64.b64encode(self.to_json().encode("utf-8")).decode("ascii")
        return "data:application/json;charset=utf-8;base64," + payload


class _MappingsBuilder:

    def __init__(self):
        self.lines: List[List[Segment]] = [[]]
        self.gen_col = 0
        self.orig_line = 0
        self.orig_col = 0

    def mark(self) -> None:
        segs = self.lines[-1]
        if segs and segs[-1][0] == self.gen_col:
            return
        segs.append((self.gen_col, self.orig_line, self.orig_col))

    def copy(self, text: str) -> None:
        """Text present in both original and generated output."""
        for i, piece in enumerate(text.split("\n")):
            if i:
                self.lines.append([])
                self.gen_col = 0
                self.orig_line += 1
                self.orig_col = 0
            if piece:
                self.mark()
                self.gen_col += _u16(piece)
                self.orig_col += _u16(piece)

    def replace(self, original: str, replacement: str) -> None:
        for i, piece in enumerate(replacement.split("\n")):
            if i:
                self.lines.append([])
                self.gen_col = 0
            if piece:
                self.mark()
                self.gen_col += _u16(piece)
        pieces = original.split("\n")
        if len(pieces) > 1:
            self.orig_line += len(pieces) - 1
            self.orig_col = _u16(pieces[-1])
        else:
            self.orig_col += _u16(original)

    def encode(self) -> str:
        prev_line = prev_col = 0
        out: List[str] = []
        for segs in self.lines:
            prev_gen = 0
            parts = []
            for gen_col, line, col in segs:
                parts.append(
                    encode_vlq(gen_col - prev_gen)
                    + encode_vlq(0)
                    + encode_vlq(line - prev_line)
                    + encode_vlq(col - prev_col)
                )
                prev_gen, prev_line, prev_col = gen_col, line, col
            out.append(",".join(parts))
        return ";".join(out)


def build_source_map(
    original: str,
    edits: Iterable[Edit],
    source: str,
    *,
    file: Optional[str] = None,
    include_content: bool = True,
) -> SourceMap:
    """Map of the text produced by applying edits (ascending, non-overlapping) to original."""
    builder = _MappingsBuilder()
    cursor = 0
    for edit in sorted(edits, key=lambda e: e.range.start_char):
        builder.copy(original[cursor:edit.range.start_char])
        builder.replace(original[edit.range.start_char:edit.range.end_char], edit.replacement)
        cursor = edit.range.end_char
    builder.copy(original[cursor:])

    return SourceMap(
        sources=[source],
        mappings=builder.encode(),
        sources_content=[original if include_content else None],
        file=file,
    )


__all__ = ["SourceMap", "build_source_map", "encode_vlq"]
