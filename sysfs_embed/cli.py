from __future__ import annotations

import argparse
import logging
import os
import sys
from dataclasses import replace
from pathlib import Path
from typing import Optional

from .config import EmbedConfig, find_config, load_config
from .diagnostics import DiagnosticsCollector
from .embed.transform import StaticEmbedTransform, TransformOptions
from .engine import run_build
from .errors import ConfigError, ModuleParseError
from . import __version__

LOG_FORMAT = "[%(levelname)s] %(message)s"


def _setup_logging(verbose: bool, quiet: bool) -> None:
    if verbose or os.environ.get("SYSFS_EMBED_DEBUG"):
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    else:
        level = logging.INFO
    log = logging.getLogger("sysfs_embed")
    log.setLevel(level)
    if not log.handlers:
        h = logging.StreamHandler(sys.stderr)
        h.setFormatter(logging.Formatter(LOG_FORMAT))
        log.addHandler(h)


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="sysfs-embed",
        description="Compile-time static asset embedding for plugin modules",
        add_help=True,
    )
    p.add_argument("-v", "--version", action="version", version=f"%(prog)s {__version__}")
    sub = p.add_subparsers(dest="cmd", required=True)

    # Common arguments for every subcommand
    def add_common(sp: argparse.ArgumentParser) -> None:
        sp.add_argument(
            "--config",
            type=Path,
            help="path to sysfs-embed.yaml (default: ./sysfs-embed.yaml if present)",
        )
        sp.add_argument("--verbose", action="store_true", help="debug logging")
        sp.add_argument("--quiet", action="store_true", help="only warnings and errors")

    sp_transform = sub.add_parser("transform", help="Rewrite a single module (result to stdout or --out)")
    sp_transform.add_argument("file", type=Path, help="module to transform")
    sp_transform.add_argument("--out", type=Path, help="write the rewritten module here instead of stdout")
    sp_transform.add_argument("--map", type=Path, help="write the source map JSON here")
    sp_transform.add_argument("--marker", help="marker function name (overrides config)")
    sp_transform.add_argument("--encoding", help="default file encoding (overrides config)")
    add_common(sp_transform)

    sp_build = sub.add_parser("build", help="Transform a source tree into an output tree (JSON report)")
    sp_build.add_argument("src", type=Path, help="source directory")
    sp_build.add_argument("out", type=Path, nargs="?", help="output directory (required unless --dry-run)")
    sp_build.add_argument("--dry-run", action="store_true", help="report only, write nothing")
    add_common(sp_build)

    return p


def _load_cfg(root: Path, explicit: Optional[Path]) -> EmbedConfig:
    return load_config(find_config(root, explicit))


def _cmd_transform(ns: argparse.Namespace) -> int:
    cfg = _load_cfg(Path.cwd(), ns.config)
    if ns.marker:
        cfg = replace(cfg, marker=ns.marker)
    if ns.encoding:
        cfg = replace(cfg, encoding=ns.encoding)

    path: Path = ns.file.resolve()
    try:
        code = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        sys.stderr.write(f"Cannot read {path}: {e}\n")
        return 2

    transform = StaticEmbedTransform(
        TransformOptions(marker=cfg.marker, encoding=cfg.encoding, sourcemap=ns.map is not None)
    )
    diagnostics = DiagnosticsCollector()
    try:
        result = transform.transform(code, str(path), diagnostics)
    except ModuleParseError:
        return 1

    out_text = result.code if result is not None else code
    if ns.out is not None:
        ns.out.parent.mkdir(parents=True, exist_ok=True)
        ns.out.write_text(out_text, encoding="utf-8")
    else:
        sys.stdout.write(out_text)

    if ns.map is not None and result is not None and result.map is not None:
        ns.map.parent.mkdir(parents=True, exist_ok=True)
        ns.map.write_text(result.map.to_json(), encoding="utf-8")

    return 1 if diagnostics.has_errors else 0


def _cmd_build(ns: argparse.Namespace) -> int:
    if ns.out is None and not ns.dry_run:
        sys.stderr.write("build: OUT is required unless --dry-run is given\n")
        return 2
    src: Path = ns.src.resolve()
    if not src.is_dir():
        sys.stderr.write(f"Source directory not found: {src}\n")
        return 2

    cfg = _load_cfg(src, ns.config)
    report = run_build(src, ns.out, cfg, dry_run=bool(ns.dry_run))
    sys.stdout.write(report.model_dump_json())
    return 0 if report.ok else 1


def main(argv: list[str] | None = None) -> int:
    ns = _build_parser().parse_args(argv)
    _setup_logging(ns.verbose, ns.quiet)

    try:
        if ns.cmd == "transform":
            return _cmd_transform(ns)
        if ns.cmd == "build":
            return _cmd_build(ns)
    except ConfigError as e:
        sys.stderr.write(str(e).rstrip() + "\n")
        return 2
    except OSError as e:
        sys.stderr.write(str(e).rstrip() + "\n")
        return 2

    return 2


if __name__ == "__main__":
    raise SystemExit(main())
