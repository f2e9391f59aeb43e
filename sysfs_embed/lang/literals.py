"""
String literal helpers for JavaScript/TypeScript syntax trees.

Only quoted `string` nodes count as string literals. Template strings
are rejected even without substitutions.
"""

from __future__ import annotations

import re
from typing import Optional

from tree_sitter import Node

from .tree_sitter_support import TreeSitterDocument

_SIMPLE_ESCAPES = {
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "b": "\b",
    "f": "\f",
    "v": "\v",
    "0": "\0",
}

_ESCAPE_RE = re.compile(
    r"\\(?:"
    r"x(?P<hex>[0-9A-Fa-f]{2})"
    r"|u\{(?P<code>[0-9A-Fa-f]+)\}"
    r"|u(?P<uni>[0-9A-Fa-f]{4})"
    r"|(?P<newline>\r\n|[\n\r\u2028\u2029])"
    r"|(?P<char>.)"
    r")",
    re.DOTALL,
)


def _unescape_match(m: re.Match) -> str:
    if m.group("hex") is not None:
        return chr(int(m.group("hex"), 16))
    if m.group("code") is not None:
        code = int(m.group("code"), 16)
        return chr(code) if code <= 0x10FFFF else m.group(0)
    if m.group("uni") is not None:
        return chr(int(m.group("uni"), 16))
    if m.group("newline") is not None:
        # Line continuation
        return ""
    ch = m.group("char")
    return _SIMPLE_ESCAPES.get(ch, ch)


def unescape_js_string(body: str) -> str:
    """
    Decode the escape sequences of a string literal body (quotes removed).

    \\uD83D\\uDE00 style surrogate pairs are joined into one code point.
    """
    decoded = _ESCAPE_RE.sub(_unescape_match, body)
    if any("\ud800" <= ch <= "\udfff" for ch in decoded):
        decoded = decoded.encode("utf-16", "surrogatepass").decode("utf-16", "replace")
    return decoded


def unwrap_parenthesized(node: Node) -> Node:
    """Inner expression of `((expr))`, or the node itself."""
    while node.type == "parenthesized_expression":
        inner = [c for c in node.named_children if c.type != "comment"]
        if len(inner) != 1:
            break
        node = inner[0]
    return node


def is_string_literal(node: Node) -> bool:
    return node.type == "string"


def string_value(doc: TreeSitterDocument, node: Node) -> Optional[str]:
    """Value of a quoted string literal node, or None for any other node."""
    node = unwrap_parenthesized(node)
    if not is_string_literal(node):
        return None
    raw = doc.get_node_text(node)
    if len(raw) < 2 or raw[0] not in "'\"" or raw[-1] != raw[0]:
        return None
    return unescape_js_string(raw[1:-1])


__all__ = ["unescape_js_string", "unwrap_parenthesized", "is_string_literal", "string_value"]
