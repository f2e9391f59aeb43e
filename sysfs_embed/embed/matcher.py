"""
Marker call matcher.

Walks the syntax tree in document order and turns every call of the
marker function into an EmbedCall with its argument form decided once.
Calls with an unsupported argument shape are reported and skipped.
"""

from __future__ import annotations

from typing import List, Optional

from tree_sitter import Node

from ..diagnostics import Diagnostics
from ..lang.literals import string_value, unwrap_parenthesized
from ..lang.tree_sitter_support import TreeSitterDocument
from ..types import (
    ArgumentForm,
    EmbedCall,
    LiteralArg,
    OptionProperty,
    OptionsLiteral,
    OptionsOnly,
    VariableRef,
)

OPTION_KEYS = ("basePath", "include", "encoding")


def _call_arguments(call: Node) -> Optional[List[Node]]:
    args_node = call.child_by_field_name("arguments")
    # Tagged templates put a template_string here
    if args_node is None or args_node.type != "arguments":
        return None
    return [unwrap_parenthesized(c) for c in args_node.named_children if c.type != "comment"]


def _property_key(doc: TreeSitterDocument, key: Node) -> Optional[str]:
    if key.type == "property_identifier":
        return doc.get_node_text(key)
    if key.type == "string":
        return string_value(doc, key)
    return None


def read_options_object(doc: TreeSitterDocument, obj: Node) -> OptionsLiteral:
    """
    Collect the recognized keys of an object literal.

    Spreads, methods, computed keys and unknown keys are ignored.
    Shorthand properties are kept with value None (not a literal).
    """
    props: List[OptionProperty] = []
    for child in obj.named_children:
        if child.type == "pair":
            key_node = child.child_by_field_name("key")
            value_node = child.child_by_field_name("value")
            if key_node is None or value_node is None:
                continue
            value_node = unwrap_parenthesized(value_node)
            key = _property_key(doc, key_node)
            if key not in OPTION_KEYS:
                continue
            props.append(OptionProperty(
                key=key,
                value=string_value(doc, value_node),
                node_type=value_node.type,
                location=doc.get_location(value_node),
            ))
        elif child.type == "shorthand_property_identifier":
            key = doc.get_node_text(child)
            if key in OPTION_KEYS:
                props.append(OptionProperty(key, None, "identifier", doc.get_location(child)))
    return tuple(props)


class MarkerCallMatcher:
    """Finds calls whose callee is exactly the marker identifier."""

    def __init__(self, marker: str, diagnostics: Diagnostics):
        self.marker = marker
        self.diagnostics = diagnostics

    def is_marker_call(self, doc: TreeSitterDocument, node: Node) -> bool:
        if node.type != "call_expression":
            return False
        callee = node.child_by_field_name("function")
        return callee is not None and callee.type == "identifier" and doc.get_node_text(callee) == self.marker

    def match(self, doc: TreeSitterDocument) -> List[EmbedCall]:
        calls: List[EmbedCall] = []
        for node in doc.walk_tree():
            if not self.is_marker_call(doc, node):
                continue
            call = self._match_call(doc, node)
            if call is not None:
                calls.append(call)
        return calls

    def _match_call(self, doc: TreeSitterDocument, node: Node) -> Optional[EmbedCall]:
        location = doc.get_location(node)
        start, end = doc.get_node_range(node)
        if end <= start:
            self.diagnostics.warn(f"Missing start/end offset info for {self.marker} call.", location)
            return None

        args = _call_arguments(node)
        if not args:
            self._warn_shape(location)
            return None

        first = args[0]
        form: ArgumentForm
        options: OptionsLiteral = ()

        if first.type in ("string", "identifier") and len(args) <= 2:
            if first.type == "string":
                value = string_value(doc, first)
                if value is None:
                    self._warn_shape(location)
                    return None
                form = LiteralArg(value)
            else:
                form = VariableRef(doc.get_node_text(first), doc.get_location(first))

            if len(args) == 2:
                if args[1].type != "object":
                    self.diagnostics.warn(
                        f"Second argument of {self.marker} must be an options object literal. "
                        f"Found type: {args[1].type}",
                        doc.get_location(args[1]),
                    )
                    return None
                options = read_options_object(doc, args[1])

        elif first.type == "object" and len(args) == 1:
            form = OptionsOnly(read_options_object(doc, first))

        else:
            self._warn_shape(location)
            return None

        return EmbedCall(start=start, end=end, form=form, location=location, options=options)

    def _warn_shape(self, location) -> None:
        self.diagnostics.warn(
            f"{self.marker} requires a path/pattern string/variable or an options object as the first argument.",
            location,
        )


__all__ = ["MarkerCallMatcher", "read_options_object", "OPTION_KEYS"]
