from __future__ import annotations

import os
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Sequence, Set

import pathspec


def _compile(patterns: Sequence[str]) -> Optional[pathspec.PathSpec]:
    lines = [p.strip() for p in patterns if p and p.strip() and not p.strip().startswith("#")]
    if not lines:
        return None
    return pathspec.PathSpec.from_lines("gitwildmatch", lines)


class ModuleFilter:
    """
    include/exclude filter over module ids.

    Patterns are gitwildmatch lines matched against the module path
    relative to root (POSIX). Exclude wins over include; an empty include
    list accepts everything. Modules outside root are only accepted
    when there is no include list.
    """

    def __init__(self, root: Path, include: Sequence[str] = (), exclude: Sequence[str] = ()):
        self.root = root.resolve()
        self.include_spec = _compile(include)
        self.exclude_spec = _compile(exclude)

    def rel_posix(self, module_id: str) -> Optional[str]:
        try:
            return Path(module_id).resolve().relative_to(self.root).as_posix()
        except ValueError:
            return None

    def __call__(self, module_id: str) -> bool:
        rel = self.rel_posix(module_id)
        if rel is None:
            return self.include_spec is None
        if self.exclude_spec and self.exclude_spec.match_file(rel):
            return False
        if self.include_spec and not self.include_spec.match_file(rel):
            return False
        return True

    def prunes_dir(self, rel_dir: str) -> bool:
        """True when a whole directory is excluded and need not be walked."""
        return bool(self.exclude_spec and self.exclude_spec.match_file(rel_dir + "/"))


def iter_modules(
    root: Path,
    *,
    extensions: Set[str],
    dir_pruner: Optional[Callable[[str], bool]] = None,
) -> Iterable[Path]:
    """
    Recursive module iterator with early directory pruning.
    Yields files with a known extension in sorted order.
    """
    root = root.resolve()
    for dirpath, dirnames, filenames in os.walk(root):
        if ".git" in dirnames:
            dirnames.remove(".git")

        if dir_pruner:
            keep: List[str] = []
            for d in dirnames:
                rel_dir = Path(dirpath, d).relative_to(root).as_posix()
                if not dir_pruner(rel_dir):
                    keep.append(d)
            dirnames[:] = keep
        dirnames.sort()

        for fn in sorted(filenames):
            p = Path(dirpath, fn)
            if p.suffix.lower() not in extensions:
                continue
            yield p


__all__ = ["ModuleFilter", "iter_modules"]
