# =============================================================================
# test_errors.py - Error Hierarchy Tests
# =============================================================================
# Tests for source locations and error message formatting.
# =============================================================================

import pytest

from keymap_edit.errors import (
    InconsistentLayerSizeError,
    KeymapError,
    KeymapSyntaxError,
    MissingTokenError,
    NoInvocationsFoundError,
    SourceLocation,
    UnexpectedKeyCountError,
    source_line_at,
)


class TestSourceLocation:
    """Test offset to line/column conversion."""

    def test_first_character(self):
        assert SourceLocation.from_offset("abc", 0) == SourceLocation(0, 1, 1)

    def test_second_line(self):
        loc = SourceLocation.from_offset("ab\ncd", 4)
        assert (loc.line, loc.column) == (2, 2)

    def test_offset_at_newline(self):
        """The newline itself belongs to the line it ends."""
        loc = SourceLocation.from_offset("ab\ncd", 2)
        assert (loc.line, loc.column) == (1, 3)

    def test_offset_past_end_is_clamped(self):
        loc = SourceLocation.from_offset("ab", 10)
        assert loc.offset == 2

    def test_str(self):
        assert str(SourceLocation(5, 3, 7)) == "3:7"

    def test_source_line_at(self):
        text = "one\ntwo\nthree"
        assert source_line_at(text, 5) == "two"
        assert source_line_at(text, 0) == "one"
        assert source_line_at(text, len(text)) == "three"


class TestErrorFormatting:
    """Test the rendered error messages."""

    def test_without_location(self):
        err = MissingTokenError(12)
        assert str(err).startswith("error: missing token (at offset 12)")
        assert err.offset == 12

    def test_with_context(self):
        """Errors built from text show the line and a caret."""
        err = MissingTokenError.at("KEYMAP(A,,B)", 9)
        lines = str(err).splitlines()
        assert lines[0] == "1:10: error: missing token"
        assert lines[1] == "    KEYMAP(A,,B)"
        assert lines[2] == " " * 13 + "^"
        assert lines[3].startswith("hint:")

    def test_hierarchy(self):
        """Every syntax error is a KeymapError."""
        for err in (
            NoInvocationsFoundError(),
            MissingTokenError(0),
            InconsistentLayerSizeError(2, 3, 1, offset=0),
            UnexpectedKeyCountError(4, 3, offset=0),
        ):
            assert isinstance(err, KeymapSyntaxError)
            assert isinstance(err, KeymapError)

    def test_catch_all(self):
        with pytest.raises(KeymapError):
            raise NoInvocationsFoundError.at("", 0, "LAYOUT")

    def test_macro_in_message(self):
        err = NoInvocationsFoundError.at("text", 0, "LAYOUT")
        assert "no LAYOUT( invocations found" in str(err)

    def test_key_count_attributes(self):
        err = UnexpectedKeyCountError.at("KEYMAP(A)", 0, 2, 1)
        assert (err.expected, err.actual, err.offset) == (2, 1, 0)
        assert "1 expected: 2" in str(err)
