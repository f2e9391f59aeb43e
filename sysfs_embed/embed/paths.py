"""
Path & mode resolver.

Computes the absolute search root for a call and decides between
single-file mode and pattern mode.
"""

from __future__ import annotations

import os
import re
from typing import Tuple

from ..types import ResolvedCall, SearchPlan

GLOB_CHARS = re.compile(r"[?*+!@()\[\]{}]")


def has_glob_chars(pattern: str) -> bool:
    return bool(GLOB_CHARS.search(pattern))


def split_static_prefix(pattern: str) -> Tuple[str, str]:
    """
    Split a relative path or pattern into (directory component, remainder).

    The directory component is the run of leading segments without glob
    characters, never including the last segment:
    "assets/logo.png" -> ("assets", "logo.png"),
    "src/**/*.txt" -> ("src", "**/*.txt").
    """
    segments = pattern.split("/")
    static = []
    for seg in segments[:-1]:
        if has_glob_chars(seg):
            break
        static.append(seg)
    prefix = "/".join(static)
    if static and not prefix:
        # Leading "/" of an absolute pattern
        prefix = "/"
    rest = "/".join(segments[len(static):])
    return prefix, rest


def resolve_search(call: ResolvedCall, module_id: str) -> SearchPlan:
    module_dir = os.path.dirname(os.path.abspath(module_id))
    target = call.path_or_pattern
    base_path = call.options.base_path
    is_pattern = has_glob_chars(target)

    if base_path:
        root = base_path if os.path.isabs(base_path) else os.path.join(module_dir, base_path)
        pattern = target
    elif os.path.isabs(target) and not is_pattern:
        root, pattern = os.path.dirname(target), os.path.basename(target)
    else:
        prefix, pattern = split_static_prefix(target)
        root = os.path.join(module_dir, prefix)

    root = os.path.normpath(root)
    single_file = (
        not is_pattern
        and bool(pattern)
        and os.path.isfile(os.path.join(root, pattern))
    )
    return SearchPlan(root=root, pattern=pattern, single_file=single_file)


__all__ = ["resolve_search", "split_static_prefix", "has_glob_chars", "GLOB_CHARS"]
