"""
sysfs-embed: compile-time static asset embedding for JavaScript/TypeScript plugin modules.
"""

from importlib import metadata

from .diagnostics import Diagnostics, DiagnosticsCollector
from .embed import SourceMap, StaticEmbedTransform, TransformOptions, TransformResult, transform_module
from .errors import ConfigError, EmbedUserError, ModuleParseError
from .types import FileRecord, OptionsSpec, SourceLocation

try:
    __version__ = metadata.version("sysfs-embed")
except metadata.PackageNotFoundError:
    # Source checkout without an installed distribution
    __version__ = "0.0.0"

__all__ = [
    "__version__",
    "Diagnostics",
    "DiagnosticsCollector",
    "SourceMap",
    "StaticEmbedTransform",
    "TransformOptions",
    "TransformResult",
    "transform_module",
    "ConfigError",
    "EmbedUserError",
    "ModuleParseError",
    "FileRecord",
    "OptionsSpec",
    "SourceLocation",
]
