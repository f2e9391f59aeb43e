import pytest

from sysfs_embed.embed.range_edits import RangeEditor, TextRange


def test_multiple_edits_and_stats():
    text = "const a = X(1);\nconst b = X(2);\n"
    ed = RangeEditor(text)

    first = text.index("X(1)")
    second = text.index("X(2)")
    # Added out of order on purpose
    assert ed.add_replacement(second, second + 4, '"two"')
    assert ed.add_replacement(first, first + 4, '"one"')

    result, stats = ed.apply_edits()
    assert result == 'const a = "one";\nconst b = "two";\n'
    assert stats == {"edits_applied": 2, "chars_removed": 8, "chars_added": 10}


def test_equal_width_overlap_first_wins():
    ed = RangeEditor("hello world")
    assert ed.add_replacement(0, 5, "hi")
    assert not ed.add_replacement(1, 6, "XXXXX")
    result, stats = ed.apply_edits()
    assert result == "hi world"
    assert stats["edits_applied"] == 1


def test_wider_edit_absorbs_nested_ones():
    text = "f(g(1), g(2))"
    ed = RangeEditor(text)
    assert ed.add_replacement(2, 6, "A")
    assert ed.add_replacement(8, 12, "B")
    assert ed.add_replacement(0, len(text), "OUTER")
    # Narrower edits inside an accepted wider one are rejected
    assert not ed.add_replacement(2, 6, "C")
    result, _ = ed.apply_edits()
    assert result == "OUTER"


def test_unicode_positions_are_characters():
    text = "const s = 'привет'; X;"
    ed = RangeEditor(text)
    pos = text.index("X")
    ed.add_replacement(pos, pos + 1, "😀")
    result, _ = ed.apply_edits()
    assert result == "const s = 'привет'; 😀;"


def test_no_edits_returns_original():
    ed = RangeEditor("abc")
    assert not ed.has_edits()
    assert ed.apply_edits() == ("abc", {"edits_applied": 0, "chars_removed": 0, "chars_added": 0})


def test_invalid_ranges():
    with pytest.raises(ValueError):
        TextRange(5, 2)
    ed = RangeEditor("abc")
    ed.add_replacement(1, 10, "x")
    assert ed.validate_edits()
    with pytest.raises(ValueError):
        ed.apply_edits()
