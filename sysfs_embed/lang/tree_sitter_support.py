"""
Tree-sitter infrastructure for module documents.
Provides grammar-independent parsing, traversal and position utilities.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterator, List, Optional, Tuple

from tree_sitter import Language, Node, Parser, Tree

from ..types import SourceLocation


class TreeSitterDocument(ABC):
    """
    Wrapper for a Tree-sitter parsed module.

    Tree-sitter works on UTF-8 bytes, the rewriter works on Python str;
    every position that leaves this class is a character offset.
    """

    def __init__(self, text: str, ext: str, module_id: str = "<module>"):
        self.text = text
        self.ext = ext
        self.module_id = module_id
        self.tree: Optional[Tree] = None
        self._text_bytes = text.encode("utf-8")
        self._parse()

    @abstractmethod
    def get_language(self) -> Language:
        """
        Get Language instance for this document.

        Returns:
            Language instance
        """
        pass

    def get_parser(self) -> Parser:
        return Parser(self.get_language())

    def _parse(self):
        """Parse the document with Tree-sitter."""
        parser = self.get_parser()
        self.tree = parser.parse(self._text_bytes)

    @property
    def root_node(self) -> Node:
        """Get the root node of the parsed tree."""
        if not self.tree:
            raise RuntimeError("Document not parsed")
        return self.tree.root_node

    def walk_tree(self, start_node: Optional[Node] = None) -> Iterator[Node]:
        """
        Walk the tree using TreeCursor for efficient traversal.

        Args:
            start_node: Node to start from (default: root)

        Yields:
            Node objects in depth-first (document) order
        """
        if start_node is None:
            start_node = self.root_node

        cursor = start_node.walk()
        visited_children = False

        while True:
            if not visited_children:
                yield cursor.node

                if not cursor.goto_first_child():
                    visited_children = True
            elif cursor.goto_next_sibling():
                visited_children = False
            elif not cursor.goto_parent():
                break
            else:
                visited_children = True

    def get_node_text(self, node: Node) -> str:
        """Get text content for a node."""
        return self._text_bytes[node.start_byte:node.end_byte].decode("utf-8")

    def get_node_range(self, node: Node) -> Tuple[int, int]:
        """Get char range for a node."""
        start_char = self.byte_to_char_position(node.start_byte)
        end_char = self.byte_to_char_position(node.end_byte)
        return start_char, end_char

    def get_location(self, node: Node) -> SourceLocation:
        """Line (1-based) and column (0-based, in characters) of the node start."""
        start_char = self.byte_to_char_position(node.start_byte)
        line_start = self.text.rfind("\n", 0, start_char) + 1
        return SourceLocation(self.module_id, node.start_point[0] + 1, start_char - line_start)

    @staticmethod
    def get_children_by_type(node: Node, node_type: str) -> List[Node]:
        """Get direct children of a specific type."""
        return [child for child in node.children if child.type == node_type]

    def has_error(self) -> bool:
        """Check if the tree has any syntax errors."""
        if not self.tree:
            return True
        return self.root_node.has_error

    def get_errors(self) -> List[Node]:
        """Get all ERROR and MISSING nodes in document order."""
        return [n for n in self.walk_tree() if n.type == "ERROR" or n.is_missing]

    def byte_to_char_position(self, byte_pos: int) -> int:
        """
        Correctly convert byte position to character position in Unicode text.
        Guarantees that if position points to the middle of a multi-byte character,
        returns position before that character.
        """
        if byte_pos <= 0:
            return 0
        if byte_pos >= len(self._text_bytes):
            return len(self.text)

        # UTF-8 guarantees maximum 4 bytes per character
        start = max(0, byte_pos - 4)
        for end in range(byte_pos, start - 1, -1):
            try:
                decoded = self._text_bytes[:end].decode("utf-8")
                return len(decoded)
            except UnicodeDecodeError:
                continue
        return 0
