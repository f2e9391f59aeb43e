"""
Content loader: reads the file(s) a call refers to into FileRecords.
"""

from __future__ import annotations

import base64
import codecs
import logging
import os
import re
from typing import Iterator, List, Optional, Tuple

from pathspec.patterns import GitWildMatchPattern

from ..diagnostics import Diagnostics
from ..types import EmbedResult, FileRecord, SearchPlan, SourceLocation
from .paths import split_static_prefix
from .patterns import PatternError, expand_alternatives

logger = logging.getLogger(__name__)

# Node-style encoding names mapped to Python codecs.
_TEXT_ENCODINGS = {
    "utf8": "utf-8",
    "utf-8": "utf-8",
    "ascii": "ascii",
    "latin1": "latin-1",
    "binary": "latin-1",
    "utf16le": "utf-16-le",
    "utf-16le": "utf-16-le",
    "ucs2": "utf-16-le",
    "ucs-2": "utf-16-le",
}


def decode_content(raw: bytes, encoding: str) -> str:
    """
    Turn raw file bytes into the embedded string.

    base64/base64url/hex produce an encoded text of the bytes; other names
    are text codecs. Unknown names raise LookupError.
    """
    name = encoding.lower()
    if name == "base64":
        return base64.b64encode(raw).decode("ascii")
    if name == "base64url":
        return base64.urlsafe_b64encode(raw).decode("ascii").rstrip("=")
    if name == "hex":
        return raw.hex()
    codec = _TEXT_ENCODINGS.get(name) or codecs.lookup(name).name
    return raw.decode(codec, errors="replace")


def read_file(path: str, encoding: str) -> str:
    with open(path, "rb") as f:
        raw = f.read()
    return decode_content(raw, encoding)


def _compile_pattern(pattern: str) -> Optional[re.Pattern]:
    """
    Compile a root-anchored gitwildmatch pattern.

    Negations and comments select nothing.
    """
    while pattern.startswith("./"):
        pattern = pattern[2:]
    if not pattern or pattern.startswith("!"):
        return None
    regex, include = GitWildMatchPattern.pattern_to_regex("/" + pattern)
    if regex is None or not include:
        return None
    return re.compile(regex)


def _direct_match(regex: re.Pattern, rel_posix: str) -> bool:
    # gitwildmatch also matches everything below a matching directory;
    # that part is captured by a named group, which must stay empty here
    m = regex.match(rel_posix)
    return m is not None and all(v is None for v in m.groupdict().values())


def _wants_dot_entries(pattern: str) -> bool:
    return any(seg.startswith(".") and seg not in (".", "..") for seg in pattern.split("/"))


def _walk_matches(walk_root: str, pattern: str) -> Iterator[str]:
    """Absolute paths of regular files under walk_root matching pattern."""
    regex = _compile_pattern(pattern)
    if regex is None or not os.path.isdir(walk_root):
        return

    allow_dot = _wants_dot_entries(pattern)
    for dirpath, dirnames, filenames in os.walk(walk_root):
        if not allow_dot:
            dirnames[:] = [d for d in dirnames if not d.startswith(".")]
        dirnames.sort()
        for fn in filenames:
            if not allow_dot and fn.startswith("."):
                continue
            full = os.path.join(dirpath, fn)
            if not os.path.isfile(full):
                continue
            rel_posix = os.path.relpath(full, walk_root).replace(os.sep, "/")
            if _direct_match(regex, rel_posix):
                yield full


def expand_pattern(root: str, pattern: str) -> List[str]:
    """
    Relative POSIX paths (from root) of regular files matching pattern,
    sorted lexicographically.

    Brace and simple extglob alternatives are expanded first. The static
    directory prefix of each alternative, ".." and absolute prefixes
    included, moves the walk out of root; such matches come back as
    "../..."-style paths. Dot entries are skipped unless the pattern names
    one explicitly.

    Raises:
        PatternError: the pattern uses an unsupported construct
    """
    found = set()
    for alt in expand_alternatives(pattern):
        prefix, rest = split_static_prefix(alt)
        walk_root = os.path.normpath(os.path.join(root, prefix))
        for full in _walk_matches(walk_root, rest):
            found.add(os.path.relpath(full, root).replace(os.sep, "/"))
    return sorted(found)


class ContentLoader:

    def __init__(self, diagnostics: Diagnostics):
        self.diagnostics = diagnostics

    def load(self, plan: SearchPlan, encoding: str, location: SourceLocation) -> Optional[EmbedResult]:
        """
        Read the file(s) of a search plan.

        Returns None when the single file of a single-file plan cannot be read
        (reported as an error) or when the pattern cannot be matched (reported
        as a warning). In pattern mode unreadable files are reported as
        warnings and left out.
        """
        if plan.single_file:
            return self._load_single(plan, encoding, location)
        return self._load_pattern(plan, encoding, location)

    def _load_single(self, plan: SearchPlan, encoding: str, location: SourceLocation) -> Optional[FileRecord]:
        file_path = os.path.normpath(os.path.join(plan.root, plan.pattern))
        logger.info('Mode: Single file ("%s" resolved to "%s" relative to "%s")', plan.pattern, file_path, plan.root)
        try:
            content = read_file(file_path, encoding)
        except (OSError, LookupError, UnicodeError) as e:
            self.diagnostics.error(f"Error reading file {file_path}: {e}", location)
            return None
        return FileRecord(content=content, file_path=file_path, file_name=os.path.relpath(file_path, plan.root))

    def _load_pattern(
        self,
        plan: SearchPlan,
        encoding: str,
        location: SourceLocation,
    ) -> Optional[Tuple[FileRecord, ...]]:
        logger.info('Mode: Multi-file (searching "%s" in "%s", encoding: %s)', plan.pattern, plan.root, encoding)
        try:
            matches = expand_pattern(plan.root, plan.pattern)
        except PatternError as e:
            self.diagnostics.warn(f'Unsupported pattern "{plan.pattern}": {e}', location)
            return None

        records: List[FileRecord] = []
        for rel_posix in matches:
            full = os.path.normpath(os.path.join(plan.root, *rel_posix.split("/")))
            try:
                content = read_file(full, encoding)
            except (OSError, LookupError, UnicodeError) as e:
                self.diagnostics.warn(f"Error reading file {full}: {e}")
                continue
            records.append(FileRecord(content=content, file_path=full, file_name=os.path.relpath(full, plan.root)))
        return tuple(records)


__all__ = ["ContentLoader", "expand_pattern", "decode_content", "read_file"]
