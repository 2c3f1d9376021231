"""
Keymap Parser
=============

This module implements a recursive descent parser for the KEYMAP(...)
invocations found in keyboard firmware sources. It turns raw text into
position-annotated syntax trees without modifying or normalising the text,
so that the editor can later splice values back in by offset.

Grammar
-------
    invocation  'KEYMAP(' arguments ')'
    arguments   argument { ',' argument }*
    argument    word | call
    call        name '(' arguments ')'
    word        any run of characters without whitespace, ',', '(' or ')'

Between tokens the parser skips:
- spaces, tabs and newlines
- block comments: /* ... */
- line comments: // ... (through the newline)
- line continuations: a backslash immediately followed by a newline

Every KEYMAP( occurrence in the text produces one layer. All layers must
have the same number of keys.

Example Usage
-------------
>>> from keymap_edit.parser import parse_keymaps
>>> layers = parse_keymaps("KEYMAP(LT(1, KC_A), KC_B)")
>>> layers[0][0].name, [p.content for p in layers[0][0].params]
('LT', ['1', 'KC_A'])
>>> layers[0][1]
Word('KC_B', 20:24)
"""

import logging
from typing import Optional

from keymap_edit.ast import Call, Layer, Node, ParseResult, Word
from keymap_edit.errors import (
    InconsistentLayerSizeError,
    InvalidFunctionNameError,
    MissingFunctionNameError,
    MissingTokenError,
    NestingTooDeepError,
    NoInvocationsFoundError,
    UnbalancedParenthesesError,
    UnexpectedKeyCountError,
    UnexpectedWhitespaceError,
)

logger = logging.getLogger(__name__)

# Macro name recognised as the start of a layer
DEFAULT_MACRO = "KEYMAP"


# =============================================================================
# Parser Implementation
# =============================================================================

class KeymapParser:
    """
    Parses every KEYMAP(...) invocation in a source text.

    The parser owns all of its mutable state (cursor and parenthesis
    depth), so one instance parses one text and separate instances can be
    used concurrently.

    Usage:
        parser = KeymapParser(source_text, key_count=61)
        result = parser.parse()
        for layer in result.layers:
            ...

    Attributes:
        text: The source text being parsed
        key_count: Expected number of keys per layer, or None to accept any
        macro: Name of the macro that opens a layer
    """

    def __init__(
        self,
        text: str,
        key_count: Optional[int] = None,
        macro: str = DEFAULT_MACRO,
    ):
        self.text = text
        self.key_count = key_count
        self.macro = macro

        self._marker = macro + "("
        self._pos = 0
        self._depth = 0
        self._open: list[int] = []

    def parse(self) -> ParseResult:
        """
        Parse all invocations in the text.

        Returns:
            ParseResult with one layer per invocation and the cursor just
            after the last one

        Raises:
            KeymapSyntaxError: If any invocation is malformed, or the layers
                disagree on their key count
        """
        layers: list[Layer] = []
        starts: list[int] = []

        while True:
            found = self.text.find(self._marker, self._pos)
            if found == -1:
                break

            paren = found + len(self.macro)
            self._pos = paren + 1
            self._depth = 1  # The parenthesis of KEYMAP(
            self._open = [paren]

            try:
                layer = self._parse_arguments(paren)
            except RecursionError:
                raise NestingTooDeepError.at(self.text, self._open[-1]) from None
            if self._depth != 0:
                raise UnbalancedParenthesesError.at(self.text, paren)

            logger.debug(
                f"Parsed layer {len(layers)} at offset {found}: {len(layer)} keys"
            )
            layers.append(layer)
            starts.append(found)

        if not layers:
            raise NoInvocationsFoundError.at(self.text, 0, self.macro)

        self._check_layer_sizes(layers, starts)
        return ParseResult(layers=layers, end_position=self._pos)

    # =========================================================================
    # Argument Lists
    # =========================================================================

    def _parse_arguments(self, open_paren: int) -> list[Node]:
        """
        Parse a comma separated argument list up to its closing parenthesis.

        The cursor starts just past the opening parenthesis at open_paren.
        On success the cursor is left just past the closing parenthesis and
        the depth counter has been decremented. If the text ends first, the
        arguments seen so far are returned with the depth left unchanged.
        """
        text = self.text
        args: list[Node] = []
        start = self._pos
        # True once a node has been produced since the last separator
        filled = False

        while self._pos < len(text):
            char = text[self._pos]
            pair = text[self._pos:self._pos + 2]

            if pair == "\\\n":
                filled = self._flush_word(args, start, self._pos, filled)
                self._pos += 2
                start = self._pos
                continue

            if pair == "/*":
                filled = self._flush_word(args, start, self._pos, filled)
                close = text.find("*/", self._pos + 2)
                self._pos = len(text) if close == -1 else close + 2
                start = self._pos
                continue

            if pair == "//":
                filled = self._flush_word(args, start, self._pos, filled)
                newline = text.find("\n", self._pos + 2)
                self._pos = len(text) if newline == -1 else newline + 1
                start = self._pos
                continue

            self._pos += 1

            if char == ",":
                filled = self._flush_word(args, start, self._pos - 1, filled)
                self._require_token(filled, self._pos - 1)
                filled = False
                start = self._pos

            elif char == "(":
                call = self._parse_call(start, self._pos - 1)
                if filled:
                    self._reject_second_token(args, call.offset, call.end)
                args.append(call)
                filled = True
                start = self._pos

            elif char == ")":
                filled = self._flush_word(args, start, self._pos - 1, filled)
                self._require_token(filled, self._pos - 1)
                self._depth -= 1
                return args

        return args

    def _parse_call(self, start: int, paren: int) -> Call:
        """Parse a call whose name spans start..paren and whose '(' is at paren."""
        offset, name = self._trim(start, paren)
        if not name:
            raise MissingFunctionNameError.at(self.text, paren)
        if _has_whitespace(name):
            raise InvalidFunctionNameError.at(self.text, offset, name)

        self._depth += 1
        depth = self._depth
        self._open.append(paren)
        params = self._parse_arguments(paren)
        self._open.pop()
        if self._depth != depth - 1:
            raise UnbalancedParenthesesError.at(self.text, paren)

        end = self._pos
        return Call(
            name=name,
            params=tuple(params),
            offset=offset,
            end=end,
            content=self.text[offset:end],
        )

    # =========================================================================
    # Token Helpers
    # =========================================================================

    def _trim(self, start: int, end: int) -> tuple[int, str]:
        """Strip surrounding whitespace from text[start:end], keeping its offset."""
        span = self.text[start:end]
        stripped = span.lstrip()
        return start + len(span) - len(stripped), stripped.rstrip()

    def _flush_word(self, args: list[Node], start: int, end: int, filled: bool) -> bool:
        """
        Add the pending span as a Word if it holds a token.

        Returns:
            The updated "slot filled" flag
        """
        if end <= start:
            return filled

        offset, token = self._trim(start, end)
        if not token:
            return filled

        if _has_whitespace(token):
            gap = next(i for i, c in enumerate(token) if c.isspace())
            raise UnexpectedWhitespaceError.at(self.text, offset + gap, token)
        if filled:
            self._reject_second_token(args, offset, offset + len(token))

        args.append(Word(content=token, offset=offset, end=offset + len(token)))
        return True

    def _reject_second_token(self, args: list[Node], offset: int, end: int) -> None:
        """Raise for a token that shares an argument slot with the previous one."""
        raise UnexpectedWhitespaceError.at(
            self.text, offset, self.text[args[-1].offset:end]
        )

    def _require_token(self, filled: bool, separator: int) -> None:
        if not filled:
            raise MissingTokenError.at(self.text, separator)

    # =========================================================================
    # Layer Validation
    # =========================================================================

    def _check_layer_sizes(self, layers: list[Layer], starts: list[int]) -> None:
        size = len(layers[0])
        for index, layer in enumerate(layers):
            if len(layer) != size:
                raise InconsistentLayerSizeError.at(
                    self.text, starts[index], size, len(layer), index
                )

        if self.key_count is not None and size != self.key_count:
            raise UnexpectedKeyCountError.at(
                self.text, starts[0], self.key_count, size
            )


def _has_whitespace(token: str) -> bool:
    return any(c.isspace() for c in token)


# =============================================================================
# Convenience Functions
# =============================================================================

def parse_keymaps(
    text: str,
    key_count: Optional[int] = None,
    macro: str = DEFAULT_MACRO,
) -> list[Layer]:
    """
    Parse every KEYMAP(...) invocation in text.

    Args:
        text: Source text containing one or more invocations
        key_count: Expected keys per layer; None accepts any count
        macro: Name of the layer macro

    Returns:
        List of layers in source order

    Raises:
        KeymapSyntaxError: On any grammar violation (never a partial result)
    """
    return KeymapParser(text, key_count, macro).parse().layers


def parse_keymaps_with_end(
    text: str,
    key_count: Optional[int] = None,
    macro: str = DEFAULT_MACRO,
) -> ParseResult:
    """Like parse_keymaps, but also report where the last invocation ends."""
    return KeymapParser(text, key_count, macro).parse()
