"""
Per-module static embed transform.

parse -> bind variables -> match marker calls -> for each call:
resolve options -> resolve search root and mode -> load content ->
queue a replacement. The module is rewritten only when at least one
replacement was queued.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Tuple

from ..diagnostics import Diagnostics, DiagnosticsCollector
from ..errors import ModuleParseError
from ..lang.documents import create_document
from ..lang.tree_sitter_support import TreeSitterDocument
from ..types import (
    DEFAULT_ENCODING,
    DEFAULT_MARKER,
    EmbedCall,
    EmbedResult,
    FileRecord,
    TransformStats,
    VariableBinding,
)
from .binder import collect_bindings
from .loader import ContentLoader
from .matcher import MarkerCallMatcher
from .options import OptionResolver
from .paths import resolve_search
from .range_edits import RangeEditor
from .source_map import SourceMap, build_source_map

logger = logging.getLogger(__name__)

ModuleFilterFn = Callable[[str], bool]


@dataclass(frozen=True)
class TransformOptions:
    marker: str = DEFAULT_MARKER
    encoding: str = DEFAULT_ENCODING  # default for calls without an explicit encoding
    sourcemap: bool = True


@dataclass(frozen=True)
class TransformResult:
    code: str
    map: Optional[SourceMap]
    stats: TransformStats


def serialize_embed(result: EmbedResult) -> str:
    """Compact JSON literal of an embed result (same text JSON.stringify produces)."""
    if isinstance(result, FileRecord):
        payload = result.to_json_obj()
    else:
        payload = [r.to_json_obj() for r in result]
    return json.dumps(payload, ensure_ascii=False, separators=(",", ":"))


class StaticEmbedTransform:
    """
    Rewrites marker calls of one module at a time.

    Instances hold configuration only; every transform() call builds its
    own document, bindings and edits, so one instance may serve many modules.
    """

    def __init__(self, options: Optional[TransformOptions] = None, module_filter: Optional[ModuleFilterFn] = None):
        self.options = options or TransformOptions()
        self.module_filter = module_filter

    def should_transform(self, code: str, module_id: str) -> bool:
        if self.module_filter is not None and not self.module_filter(module_id):
            logger.debug("Module filtered out: %s", module_id)
            return False
        return self.options.marker in code

    def parse(self, code: str, module_id: str, diagnostics: Diagnostics) -> TreeSitterDocument:
        try:
            doc = create_document(code, module_id)
        except UnicodeError as e:
            diagnostics.error(f"Failed to parse {module_id}: {e}")
            raise ModuleParseError(module_id, str(e)) from e

        if doc.has_error():
            errors = doc.get_errors()
            location = doc.get_location(errors[0]) if errors else None
            message = "syntax error" if not errors or errors[0].type == "ERROR" else f"missing {errors[0].type}"
            diagnostics.error(f"Failed to parse {module_id}: {message}", location)
            raise ModuleParseError(module_id, message, location)
        return doc

    def transform(self, code: str, module_id: str, diagnostics: Diagnostics) -> Optional[TransformResult]:
        """
        Returns None when the module is left untouched.

        Raises:
            ModuleParseError: module text cannot be parsed
        """
        if not self.should_transform(code, module_id):
            return None

        marker = self.options.marker
        doc = self.parse(code, module_id, diagnostics)

        # Bindings must be complete before any call is resolved
        bindings = collect_bindings(doc)
        calls = MarkerCallMatcher(marker, diagnostics).match(doc)

        resolver = OptionResolver(marker, self.options.encoding, diagnostics)
        loader = ContentLoader(diagnostics)
        editor = RangeEditor(code)
        embedded_counts: Dict[Tuple[int, int], int] = {}

        for call in calls:
            embedded = self._embed_call(call, bindings, module_id, resolver, loader, diagnostics)
            if embedded is None:
                continue
            replacement, count = embedded
            if editor.add_replacement(call.start, call.end, replacement):
                embedded_counts[(call.start, call.end)] = count

        if not editor.has_edits():
            return None

        new_code, _ = editor.apply_edits()
        smap = build_source_map(code, editor.edits, module_id) if self.options.sourcemap else None
        stats = TransformStats(
            calls_matched=len(calls),
            calls_rewritten=len(editor.edits),
            # Absorbed edits no longer count
            files_embedded=sum(embedded_counts[(e.range.start_char, e.range.end_char)] for e in editor.edits),
        )
        return TransformResult(code=new_code, map=smap, stats=stats)

    def _embed_call(
        self,
        call: EmbedCall,
        bindings: VariableBinding,
        module_id: str,
        resolver: OptionResolver,
        loader: ContentLoader,
        diagnostics: Diagnostics,
    ) -> Optional[Tuple[str, int]]:
        resolved = resolver.resolve(call, bindings)
        if resolved is None:
            return None

        try:
            plan = resolve_search(resolved, module_id)
            result = loader.load(plan, resolved.options.encoding, call.location)
        except OSError as e:
            diagnostics.error(f"Could not process files for {self.options.marker}: {e}", call.location)
            return None
        if result is None:
            return None

        if isinstance(result, FileRecord):
            count = 1
            logger.info("Embedded 1 specific file for call at %s", call.location)
        else:
            count = len(result)
            logger.info("Embedded %d file(s) matching pattern for call at %s", count, call.location)
        return serialize_embed(result), count


def transform_module(
    code: str,
    module_id: str,
    *,
    marker: str = DEFAULT_MARKER,
    encoding: str = DEFAULT_ENCODING,
    sourcemap: bool = True,
) -> Tuple[Optional[TransformResult], DiagnosticsCollector]:
    """
    One-shot helper: transform a module and collect its diagnostics.
    ModuleParseError propagates.
    """
    diagnostics = DiagnosticsCollector()
    transform = StaticEmbedTransform(TransformOptions(marker=marker, encoding=encoding, sourcemap=sourcemap))
    return transform.transform(code, module_id, diagnostics), diagnostics


__all__ = [
    "StaticEmbedTransform",
    "TransformOptions",
    "TransformResult",
    "transform_module",
    "serialize_embed",
]
