"""
Range-based text editing for call-site replacements.
Edits are collected first and applied once, from the end of the text backwards.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Tuple

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TextRange:
    """Represents a range in text by character positions."""
    start_char: int
    end_char: int

    def __post_init__(self):
        if self.start_char > self.end_char:
            raise ValueError(f"Invalid range: start_char ({self.start_char}) > end_char ({self.end_char})")

    @property
    def length(self) -> int:
        return self.end_char - self.start_char

    def overlaps(self, other: TextRange) -> bool:
        """Check if this range overlaps with another."""
        return not (self.end_char <= other.start_char or other.end_char <= self.start_char)


@dataclass(frozen=True)
class Edit:
    """A single replacement of an original text range."""
    range: TextRange
    replacement: str


class RangeEditor:
    """
    Unicode-safe range editor working with character positions.

    Ranges never overlap: a wider edit absorbs narrower ones it overlaps,
    and among equally wide edits the first one wins.
    """

    def __init__(self, original_text: str):
        self.original_text = original_text
        self.edits: List[Edit] = []

    def add_replacement(self, start_char: int, end_char: int, replacement: str) -> bool:
        """Register a replacement; returns False when an existing edit takes precedence."""
        char_range = TextRange(start_char, end_char)
        new_width = char_range.length

        absorbed = []
        for i, existing in enumerate(self.edits):
            if char_range.overlaps(existing.range):
                if new_width > existing.range.length:
                    absorbed.append(i)
                else:
                    logger.debug("Skipping edit %s: overlaps %s", char_range, existing.range)
                    return False

        for i in reversed(absorbed):
            logger.debug("Edit %s absorbed by wider edit %s", self.edits[i].range, char_range)
            del self.edits[i]

        self.edits.append(Edit(char_range, replacement))
        return True

    def has_edits(self) -> bool:
        return bool(self.edits)

    def sorted_edits(self) -> List[Edit]:
        """Edits in ascending start order."""
        return sorted(self.edits, key=lambda e: e.range.start_char)

    def validate_edits(self) -> List[str]:
        errors = []
        for i, edit in enumerate(self.edits):
            if edit.range.start_char < 0:
                errors.append(f"Edit {i}: start_char ({edit.range.start_char}) is negative")
            if edit.range.end_char > len(self.original_text):
                errors.append(f"Edit {i}: end_char ({edit.range.end_char}) exceeds text length ({len(self.original_text)})")
        return errors

    def apply_edits(self) -> Tuple[str, Dict[str, Any]]:
        """
        Apply all edits and return the modified text and statistics.

        Returns:
            Tuple of (modified_text, statistics)
        """
        validation_errors = self.validate_edits()
        if validation_errors:
            raise ValueError(f"Edit validation failed: {'; '.join(validation_errors)}")

        stats = {"edits_applied": len(self.edits), "chars_removed": 0, "chars_added": 0}
        if not self.edits:
            return self.original_text, stats

        # Apply from the end so earlier offsets stay valid
        parts: List[str] = []
        cursor = len(self.original_text)
        for edit in reversed(self.sorted_edits()):
            parts.append(self.original_text[edit.range.end_char:cursor])
            parts.append(edit.replacement)
            cursor = edit.range.start_char
            stats["chars_removed"] += edit.range.length
            stats["chars_added"] += len(edit.replacement)
        parts.append(self.original_text[:cursor])

        return "".join(reversed(parts)), stats


__all__ = ["TextRange", "Edit", "RangeEditor"]
