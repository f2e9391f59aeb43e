from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from .errors import ConfigError
from .lang.documents import MODULE_EXTENSIONS
from .types import DEFAULT_ENCODING, DEFAULT_MARKER

DEFAULT_CFG_FILE = "sysfs-embed.yaml"

# --------------------------------------------------------------------------- #
# DEFAULTS
# --------------------------------------------------------------------------- #
_DEFAULT_CFG: Dict[str, Any] = {
    "marker": DEFAULT_MARKER,
    "encoding": DEFAULT_ENCODING,
    "extensions": sorted(MODULE_EXTENSIONS),
    "include": [],
    "exclude": ["node_modules/", ".git/"],
    "sourcemap": True,
}

_yaml = YAML(typ="safe")


@dataclass(frozen=True)
class EmbedConfig:
    marker: str = DEFAULT_MARKER
    encoding: str = DEFAULT_ENCODING
    extensions: Tuple[str, ...] = tuple(sorted(MODULE_EXTENSIONS))
    include: Tuple[str, ...] = ()
    exclude: Tuple[str, ...] = ("node_modules/", ".git/")
    sourcemap: bool = True
    path: Optional[Path] = field(default=None, compare=False)


# --------------------------------------------------------------------------- #
# HELPERS
# --------------------------------------------------------------------------- #
def _merge_defaults(raw: Dict[str, Any]) -> Dict[str, Any]:
    """User values on top of the defaults."""
    cfg = _DEFAULT_CFG.copy()
    cfg.update(raw)
    return cfg


def _str_list(cfg: Dict[str, Any], key: str) -> Tuple[str, ...]:
    val = cfg[key]
    if isinstance(val, str):
        val = [val]
    if not isinstance(val, list) or not all(isinstance(x, str) for x in val):
        raise ConfigError(f"{key}: expected a string or a list of strings")
    return tuple(val)


def _str(cfg: Dict[str, Any], key: str) -> str:
    val = cfg[key]
    if not isinstance(val, str) or not val:
        raise ConfigError(f"{key}: expected a non-empty string")
    return val


def _normalize_ext(ext: str) -> str:
    ext = ext.strip().lower()
    return ext if ext.startswith(".") else "." + ext


# --------------------------------------------------------------------------- #
# PUBLIC API
# --------------------------------------------------------------------------- #
def from_dict(raw: Dict[str, Any], path: Optional[Path] = None) -> EmbedConfig:
    unknown = sorted(set(raw) - set(_DEFAULT_CFG))
    if unknown:
        raise ConfigError(f"Unknown config key(s): {', '.join(unknown)}")

    cfg = _merge_defaults(raw)
    if not isinstance(cfg["sourcemap"], bool):
        raise ConfigError("sourcemap: expected true or false")

    return EmbedConfig(
        marker=_str(cfg, "marker"),
        encoding=_str(cfg, "encoding"),
        extensions=tuple(_normalize_ext(e) for e in _str_list(cfg, "extensions")),
        include=_str_list(cfg, "include"),
        exclude=_str_list(cfg, "exclude"),
        sourcemap=cfg["sourcemap"],
        path=path,
    )


def load_config(path: Path) -> EmbedConfig:
    """
    Load sysfs-embed.yaml.

    • Missing file -> defaults.
    • Empty file -> defaults.
    • Anything but a mapping at the top level is an error.
    """
    if not path.exists():
        return EmbedConfig()

    try:
        with path.open(encoding="utf-8") as f:
            raw = _yaml.load(f) or {}
    except YAMLError as e:
        raise ConfigError(f"{path}: invalid YAML: {e}") from e

    if not isinstance(raw, dict):
        raise ConfigError(f"{path}: top-level value must be a mapping")

    try:
        return from_dict(raw, path)
    except ConfigError as e:
        raise ConfigError(f"{path}: {e}") from e


def find_config(root: Path, explicit: Optional[Path] = None) -> Path:
    """Explicit --config path, else sysfs-embed.yaml in root."""
    if explicit is not None:
        if not explicit.is_file():
            raise ConfigError(f"Config file not found: {explicit}")
        return explicit
    return root / DEFAULT_CFG_FILE


__all__ = ["EmbedConfig", "load_config", "find_config", "from_dict", "DEFAULT_CFG_FILE"]
