"""
Shared test infrastructure for sysfs-embed.

Modules:
- file_utils: creating files and module trees
- embed_utils: running the transform and reading back embedded literals
"""

from .file_utils import write, write_bytes
from .embed_utils import run_transform, embedded_value, run_cli

__all__ = ["write", "write_bytes", "run_transform", "embedded_value", "run_cli"]
