"""
Keymap Edit Error Hierarchy
===========================

This module defines the exception hierarchy for the keymap parser and
editor. All exceptions inherit from KeymapError, allowing callers to catch
every failure raised by the package with a single except clause.

Exception Hierarchy
-------------------
KeymapError (base)
└── KeymapSyntaxError - structural error in KEYMAP(...) source
    ├── NoInvocationsFoundError - no KEYMAP( marker in the text
    ├── MissingTokenError - empty argument slot
    ├── MissingFunctionNameError - '(' with no name before it
    ├── InvalidFunctionNameError - call name containing whitespace
    ├── UnexpectedWhitespaceError - argument broken by whitespace
    ├── UnbalancedParenthesesError - parenthesis depth not back to zero
    ├── NestingTooDeepError - calls nested beyond the recursion limit
    ├── InconsistentLayerSizeError - layers disagree on key count
    └── UnexpectedKeyCountError - key count differs from the layout's

Every syntax error records the absolute character offset of the problem,
so an editor can point the user at the exact character. Messages follow
this format:

    line:column: error: description
        source_line_text
            ^
    hint: suggestion for fixing (when available)
"""

from dataclasses import dataclass
from typing import Optional


# =============================================================================
# Base Exception Class
# =============================================================================

class KeymapError(Exception):
    """
    Base exception for all keymap-edit errors.

        try:
            text = set_key(text, 0, 3, "KC_ESC")
        except KeymapError as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Source Location Tracking
# =============================================================================

@dataclass(frozen=True)
class SourceLocation:
    """
    A position in keymap source text.

    Attributes:
        offset: Absolute character index (0-indexed)
        line: Line number (1-indexed)
        column: Column number (1-indexed)
    """
    offset: int
    line: int
    column: int

    def __str__(self) -> str:
        return f"{self.line}:{self.column}"

    @classmethod
    def from_offset(cls, text: str, offset: int) -> "SourceLocation":
        """Compute line and column for an absolute offset into text."""
        offset = max(0, min(offset, len(text)))
        line = text.count("\n", 0, offset) + 1
        line_start = text.rfind("\n", 0, offset) + 1
        return cls(offset, line, offset - line_start + 1)


def source_line_at(text: str, offset: int) -> str:
    """Return the full line of text containing offset, without newline."""
    offset = max(0, min(offset, len(text)))
    line_start = text.rfind("\n", 0, offset) + 1
    line_end = text.find("\n", offset)
    if line_end == -1:
        line_end = len(text)
    return text[line_start:line_end]


# =============================================================================
# Syntax Errors
# =============================================================================

class KeymapSyntaxError(KeymapError):
    """
    Structural error found while parsing KEYMAP(...) invocations.

    Attributes:
        message: The error description
        offset: Absolute offset of the offending character
        location: Line/column of the offset (when the text was available)
        hint: A suggestion for fixing the error (optional)
        source_line: The source line containing the offset (optional)
    """

    def __init__(
        self,
        message: str,
        offset: int,
        location: Optional[SourceLocation] = None,
        hint: Optional[str] = None,
        source_line: Optional[str] = None,
    ):
        self.message = message
        self.offset = offset
        self.location = location
        self.hint = hint
        self.source_line = source_line
        super().__init__(self._format_message())

    @classmethod
    def at(cls, text: str, offset: int, *args, **kwargs) -> "KeymapSyntaxError":
        """Build the error with location and source line taken from text."""
        return cls(
            *args,
            offset=offset,
            location=SourceLocation.from_offset(text, offset),
            source_line=source_line_at(text, offset),
            **kwargs,
        )

    def _format_message(self) -> str:
        """
        Format the error message with location, source context, and hint.

        Example output:
            3:17: error: missing token
                KEYMAP(KC_A, , KC_C)
                            ^
            hint: remove the extra ',' or add a key
        """
        parts = []

        if self.location:
            parts.append(f"{self.location}: error: {self.message}")
        else:
            parts.append(f"error: {self.message} (at offset {self.offset})")

        if self.source_line is not None and self.location is not None:
            parts.append(f"    {self.source_line}")
            padding = " " * (4 + self.location.column - 1)
            parts.append(f"{padding}^")

        if self.hint:
            parts.append(f"hint: {self.hint}")

        return "\n".join(parts)


class NoInvocationsFoundError(KeymapSyntaxError):
    """The source contains no KEYMAP( invocation at all."""

    def __init__(self, macro: str = "KEYMAP", offset: int = 0, **kwargs):
        self.macro = macro
        super().__init__(
            f"no {macro}( invocations found",
            offset=offset,
            **kwargs,
        )


class MissingTokenError(KeymapSyntaxError):
    """
    An argument slot is empty.

    Raised for leading, doubled or trailing commas, and for empty
    argument lists such as KEYMAP() or LT().
    """

    def __init__(self, offset: int, **kwargs):
        kwargs.setdefault("hint", "every ',' and ')' must follow a key")
        super().__init__("missing token", offset=offset, **kwargs)


class MissingFunctionNameError(KeymapSyntaxError):
    """An opening parenthesis has no call name before it."""

    def __init__(self, offset: int, **kwargs):
        super().__init__("function name required", offset=offset, **kwargs)


class InvalidFunctionNameError(KeymapSyntaxError):
    """A call name contains whitespace."""

    def __init__(self, name: str, offset: int, **kwargs):
        self.name = name
        super().__init__(
            f"function name can't have spaces: {name!r}",
            offset=offset,
            **kwargs,
        )


class UnexpectedWhitespaceError(KeymapSyntaxError):
    """
    An argument is not a single unbroken token.

    Raised when a trimmed word still contains whitespace, and when two
    tokens end up in one argument slot (for example a key split by a
    comment, or a word following a call without a comma).
    """

    def __init__(self, token: str, offset: int, **kwargs):
        self.token = token
        kwargs.setdefault("hint", "separate keys with ','")
        super().__init__(
            f"whitespace is not allowed inside a key: {token!r}",
            offset=offset,
            **kwargs,
        )


class UnbalancedParenthesesError(KeymapSyntaxError):
    """The text ended before every '(' was closed."""

    def __init__(self, offset: int, **kwargs):
        kwargs.setdefault("hint", "add the missing ')'")
        super().__init__("KEYMAP parenthesis unbalanced", offset=offset, **kwargs)


class NestingTooDeepError(KeymapSyntaxError):
    """Calls are nested deeper than the parser can follow."""

    def __init__(self, offset: int, **kwargs):
        super().__init__("calls nested too deeply", offset=offset, **kwargs)


class InconsistentLayerSizeError(KeymapSyntaxError):
    """Two invocations in the same source have different key counts."""

    def __init__(self, expected: int, actual: int, layer: int, offset: int, **kwargs):
        self.expected = expected
        self.actual = actual
        self.layer = layer
        super().__init__(
            f"incompatible amount of keys in layers: layer {layer} has "
            f"{actual}, layer 0 has {expected}",
            offset=offset,
            **kwargs,
        )


class UnexpectedKeyCountError(KeymapSyntaxError):
    """The key count does not match the caller's layout."""

    def __init__(self, expected: int, actual: int, offset: int, **kwargs):
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"number of keys in KEYMAP are incorrect for this layout: "
            f"{actual} expected: {expected}",
            offset=offset,
            **kwargs,
        )
