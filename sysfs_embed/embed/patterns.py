"""
Glob pattern preprocessing for the content loader.

pathspec implements gitwildmatch, which has no alternation. Brace
alternation ("*.{svg,png}", "{1..3}.txt") and the extglob forms that are
plain alternations ("@(a|b)", "?(a|b)") are expanded here into several
gitwildmatch patterns. Repetition and negation extglobs cannot be
expressed that way and are rejected.
"""

from __future__ import annotations

import re
from typing import List, Optional

_RANGE_RE = re.compile(r"^(-?\d+)\.\.(-?\d+)$")
_CHAR_RANGE_RE = re.compile(r"^([A-Za-z])\.\.([A-Za-z])$")
_UNSUPPORTED_EXTGLOB_RE = re.compile(r"[+*!]\(")


class PatternError(ValueError):
    """Pattern uses a construct the matcher cannot honour."""
    pass


def _find_closing(text: str, open_at: int, opening: str, closing: str) -> int:
    depth = 0
    for i in range(open_at, len(text)):
        if text[i] == opening:
            depth += 1
        elif text[i] == closing:
            depth -= 1
            if depth == 0:
                return i
    return -1


def _split_top_level(body: str, sep: str) -> List[str]:
    parts: List[str] = []
    depth = 0
    current = []
    for ch in body:
        if ch in "{(":
            depth += 1
        elif ch in "})":
            depth -= 1
        if ch == sep and depth == 0:
            parts.append("".join(current))
            current = []
        else:
            current.append(ch)
    parts.append("".join(current))
    return parts


def translate_extglobs(pattern: str) -> str:
    """
    Rewrite "@(a|b)" as "{a,b}" and "?(a|b)" as "{,a,b}".

    Raises:
        PatternError: "+(...)", "*(...)" or "!(...)" extglobs, or unbalanced parentheses
    """
    m = _UNSUPPORTED_EXTGLOB_RE.search(pattern)
    if m:
        raise PatternError(f'extglob "{m.group(0)}...)" is not supported')

    out: List[str] = []
    i = 0
    while i < len(pattern):
        ch = pattern[i]
        if ch in "@?" and pattern.startswith("(", i + 1):
            close = _find_closing(pattern, i + 1, "(", ")")
            if close < 0:
                raise PatternError("unbalanced parentheses")
            alts = _split_top_level(translate_extglobs(pattern[i + 2:close]), "|")
            if ch == "?":
                alts.insert(0, "")
            out.append("{" + ",".join(alts) + "}")
            i = close + 1
        else:
            out.append(ch)
            i += 1
    return "".join(out)


def _brace_alternatives(body: str) -> Optional[List[str]]:
    parts = _split_top_level(body, ",")
    if len(parts) > 1:
        return parts

    m = _RANGE_RE.match(body)
    if m:
        lo, hi = int(m.group(1)), int(m.group(2))
        step = 1 if hi >= lo else -1
        return [str(n) for n in range(lo, hi + step, step)]

    m = _CHAR_RANGE_RE.match(body)
    if m:
        lo, hi = ord(m.group(1)), ord(m.group(2))
        step = 1 if hi >= lo else -1
        return [chr(c) for c in range(lo, hi + step, step)]

    return None


def expand_braces(pattern: str) -> List[str]:
    """
    Bash-style brace expansion, left to right, nested braces included.

    A brace pair without a comma or a range stays literal.
    """
    open_at = pattern.find("{")
    if open_at < 0:
        return [pattern]
    close = _find_closing(pattern, open_at, "{", "}")
    if close < 0:
        return [pattern]

    head = pattern[:open_at]
    body = pattern[open_at + 1:close]
    tails = expand_braces(pattern[close + 1:])

    alts = _brace_alternatives(body)
    if alts is None:
        return [head + "{" + b + "}" + t for b in expand_braces(body) for t in tails]

    out: List[str] = []
    for alt in alts:
        for expanded in expand_braces(alt):
            out.extend(head + expanded + t for t in tails)
    return out


def expand_alternatives(pattern: str) -> List[str]:
    """All gitwildmatch patterns a glob pattern stands for, without duplicates."""
    seen = set()
    out: List[str] = []
    for p in expand_braces(translate_extglobs(pattern)):
        if p not in seen:
            seen.add(p)
            out.append(p)
    return out


__all__ = ["PatternError", "expand_alternatives", "expand_braces", "translate_extglobs"]
