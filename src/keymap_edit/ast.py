"""
Keymap Syntax Tree Definitions
==============================

This module defines the node types produced by the keymap parser.

Node Types
----------
Node
├── Word - a leaf argument such as KC_A or 1
└── Call - a function-style argument such as LT(1, KC_A)

A Layer is the list of nodes making up the top-level argument list of one
KEYMAP(...) invocation, one node per key. A ParseResult holds every layer
found in the source, in source order.

Offsets
-------
Every node records ``offset``, the absolute index of its first significant
character, and ``end``, the index just past its last one. ``content`` is
always the exact original text ``source[offset:end]``; the editor relies on
this to splice new values in without disturbing surrounding bytes.

Design Notes
------------
- Nodes are frozen dataclasses, built once per parse and never patched.
- Node is a closed union of Word and Call; consumers check both cases with
  isinstance rather than walking a visitor hierarchy.
"""

from dataclasses import dataclass, field
from typing import Union


# =============================================================================
# Node Types
# =============================================================================

@dataclass(frozen=True)
class Word:
    """
    A leaf argument token.

    Attributes:
        content: The token text, trimmed, with no internal whitespace
        offset: Absolute index of the first character
        end: Index just past the last character
    """
    content: str
    offset: int
    end: int

    def __repr__(self) -> str:
        return f"Word({self.content!r}, {self.offset}:{self.end})"


@dataclass(frozen=True)
class Call:
    """
    A function-style argument, e.g. ``LT(1, KC_A)``.

    Attributes:
        name: The function name (``LT``)
        params: Argument nodes, never empty
        offset: Absolute index of the first character of the name
        end: Index just past the closing parenthesis
        content: Source text from the name through the closing parenthesis
    """
    name: str
    params: tuple["Node", ...]
    offset: int
    end: int
    content: str

    def __repr__(self) -> str:
        return f"Call({self.name!r}, {len(self.params)} params, {self.offset}:{self.end})"


Node = Union[Word, Call]
Layer = list[Node]


@dataclass
class ParseResult:
    """
    All layers found in a source text.

    Attributes:
        layers: One layer per KEYMAP( invocation, in source order
        end_position: Cursor just after the last invocation's closing
            parenthesis; used to decide where a new layer is inserted
    """
    layers: list[Layer] = field(default_factory=list)
    end_position: int = 0

    @property
    def layer_count(self) -> int:
        return len(self.layers)

    @property
    def key_count(self) -> int:
        """Number of keys per layer (0 when there are no layers)."""
        return len(self.layers[0]) if self.layers else 0


# =============================================================================
# Tree Printer
# =============================================================================

class ASTPrinter:
    """
    Pretty printer for syntax tree debugging.

    Usage:
        printer = ASTPrinter()
        print(printer.print(result))
    """

    def __init__(self):
        self.output: list[str] = []
        self.indent_level = 0

    def print(self, result: ParseResult) -> str:
        """Print every layer of a parse result and return it as a string."""
        self.output = []
        self.indent_level = 0
        for index, layer in enumerate(result.layers):
            self._emit(f"Layer {index} ({len(layer)} keys)")
            self._indent()
            for key, node in enumerate(layer):
                self._emit_node(node, prefix=f"[{key}] ")
            self._dedent()
        return "\n".join(self.output)

    def print_node(self, node: Node) -> str:
        """Print a single node and return it as a string."""
        self.output = []
        self.indent_level = 0
        self._emit_node(node)
        return "\n".join(self.output)

    def _emit(self, text: str) -> None:
        indent = "  " * self.indent_level
        self.output.append(f"{indent}{text}")

    def _indent(self) -> None:
        self.indent_level += 1

    def _dedent(self) -> None:
        self.indent_level = max(0, self.indent_level - 1)

    def _emit_node(self, node: Node, prefix: str = "") -> None:
        if isinstance(node, Word):
            self._emit(f"{prefix}Word: {node.content} @{node.offset}")
        elif isinstance(node, Call):
            self._emit(f"{prefix}Call: {node.name} @{node.offset}")
            self._indent()
            for param in node.params:
                self._emit_node(param)
            self._dedent()
        else:
            raise TypeError(f"not a keymap node: {node!r}")


def format_node(node: Node) -> str:
    """Return an indented dump of a single node."""
    return ASTPrinter().print_node(node)
