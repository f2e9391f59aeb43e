from .documents import create_document, JavaScriptDocument, TypeScriptDocument, MODULE_EXTENSIONS
from .tree_sitter_support import TreeSitterDocument

__all__ = [
    "create_document",
    "JavaScriptDocument",
    "TypeScriptDocument",
    "TreeSitterDocument",
    "MODULE_EXTENSIONS",
]
