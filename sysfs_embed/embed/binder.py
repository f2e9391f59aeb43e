"""
Variable binder: top-level `name = "literal"` declarations of a module.
"""

from __future__ import annotations

from typing import Dict, Iterator

from tree_sitter import Node

from ..lang.literals import string_value
from ..lang.tree_sitter_support import TreeSitterDocument
from ..types import VariableBinding

_DECLARATION_TYPES = {"lexical_declaration", "variable_declaration"}


def _top_level_declarations(root: Node) -> Iterator[Node]:
    for child in root.named_children:
        if child.type in _DECLARATION_TYPES:
            yield child
        elif child.type == "export_statement":
            decl = child.child_by_field_name("declaration")
            if decl is not None and decl.type in _DECLARATION_TYPES:
                yield decl


def collect_bindings(doc: TreeSitterDocument) -> VariableBinding:
    """
    Map every top-level `identifier = string-literal` declarator to its value.

    Non-literal initializers and destructuring patterns are ignored.
    A later declaration of the same name overrides an earlier one.
    """
    bindings: Dict[str, str] = {}
    for decl in _top_level_declarations(doc.root_node):
        for declarator in doc.get_children_by_type(decl, "variable_declarator"):
            name = declarator.child_by_field_name("name")
            value = declarator.child_by_field_name("value")
            if name is None or value is None or name.type != "identifier":
                continue
            literal = string_value(doc, value)
            if literal is not None:
                bindings[doc.get_node_text(name)] = literal
    return bindings


__all__ = ["collect_bindings"]
