"""
Concrete documents for the module languages the transform accepts.
"""

from __future__ import annotations

from pathlib import PurePath

from tree_sitter import Language

from .tree_sitter_support import TreeSitterDocument

JAVASCRIPT_EXTENSIONS = {".js", ".jsx", ".mjs", ".cjs"}
TYPESCRIPT_EXTENSIONS = {".ts", ".mts", ".cts"}
TSX_EXTENSIONS = {".tsx"}
MODULE_EXTENSIONS = JAVASCRIPT_EXTENSIONS | TYPESCRIPT_EXTENSIONS | TSX_EXTENSIONS


class JavaScriptDocument(TreeSitterDocument):

    def get_language(self) -> Language:
        import tree_sitter_javascript as tsjs
        return Language(tsjs.language())


class TypeScriptDocument(TreeSitterDocument):

    def get_language(self) -> Language:
        import tree_sitter_typescript as tsts
        # TS and TSX are two different grammars in one package.
        if self.ext == ".tsx":
            return Language(tsts.language_tsx())
        return Language(tsts.language_typescript())


def create_document(text: str, module_id: str) -> TreeSitterDocument:
    """
    Parse module text with the grammar matching the module extension.

    Unknown extensions are parsed as TSX, which accepts plain JavaScript,
    TypeScript and JSX alike.
    """
    ext = PurePath(module_id).suffix.lower()
    if ext in JAVASCRIPT_EXTENSIONS:
        return JavaScriptDocument(text, ext, module_id)
    if ext in TYPESCRIPT_EXTENSIONS:
        return TypeScriptDocument(text, ext, module_id)
    return TypeScriptDocument(text, ".tsx", module_id)


__all__ = [
    "JavaScriptDocument",
    "TypeScriptDocument",
    "create_document",
    "MODULE_EXTENSIONS",
]
