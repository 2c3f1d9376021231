"""
Keymap Edit - Surgical Editing of KEYMAP(...) Layers
====================================================

This package parses and edits the KEYMAP(...) invocations of keyboard
firmware sources. It is meant for editors that change one key, or add one
layer, inside an otherwise untouched file: comments, whitespace and
formatting outside the edited span are preserved byte for byte.

Main Components
---------------
- **parser**: recursive descent parser producing offset-annotated trees
    Each KEYMAP( invocation becomes a layer of Word and Call nodes

- **evaluator**: resolves a key's value against a caller-supplied
    symbol table of call names to Python callables

- **editor**: text splicing operations
    set_key replaces one key; append_layer adds a placeholder layer

- **cli**: the ``kmedit`` command-line tool

Quick Start
-----------
Parse layers:
    >>> from keymap_edit import parse_keymaps
    >>> layers = parse_keymaps("KEYMAP(LT(1, KC_A), KC_B)")
    >>> layers[0][0].name
    'LT'

Change a key:
    >>> from keymap_edit import set_key
    >>> set_key("KEYMAP(KC_A, KC_B)", 0, 1, "KC_ESC")
    'KEYMAP(KC_A, KC_ESC)'

Evaluate a key:
    >>> from keymap_edit import evaluate
    >>> evaluate(layers[0][0], {"LT": lambda layer, key: f"{key}@{layer}"})
    'KC_A@1'

Or use the command-line tool:
    $ kmedit show keymap.c
    $ kmedit set keymap.c 0 5 KC_ESC --in-place
    $ kmedit add-layer keymap.c --in-place
"""

__version__ = "1.0.0"

# =============================================================================
# Public API Exports
# =============================================================================

from keymap_edit.ast import ASTPrinter, Call, Layer, Node, ParseResult, Word, format_node
from keymap_edit.config import EditorConfig
from keymap_edit.editor import DEFAULT_PLACEHOLDER, LayerTemplate, append_layer, set_key
from keymap_edit.errors import (
    KeymapError,
    KeymapSyntaxError,
    SourceLocation,
    NoInvocationsFoundError,
    MissingTokenError,
    MissingFunctionNameError,
    InvalidFunctionNameError,
    UnexpectedWhitespaceError,
    UnbalancedParenthesesError,
    NestingTooDeepError,
    InconsistentLayerSizeError,
    UnexpectedKeyCountError,
)
from keymap_edit.evaluator import SymbolTable, evaluate, evaluate_layer
from keymap_edit.parser import (
    DEFAULT_MACRO,
    KeymapParser,
    parse_keymaps,
    parse_keymaps_with_end,
)

__all__ = [
    # Version info
    "__version__",
    # Syntax tree
    "Word",
    "Call",
    "Node",
    "Layer",
    "ParseResult",
    "ASTPrinter",
    "format_node",
    # Parser
    "DEFAULT_MACRO",
    "KeymapParser",
    "parse_keymaps",
    "parse_keymaps_with_end",
    # Evaluator
    "SymbolTable",
    "evaluate",
    "evaluate_layer",
    # Editor
    "DEFAULT_PLACEHOLDER",
    "LayerTemplate",
    "set_key",
    "append_layer",
    # Configuration
    "EditorConfig",
    # Exception hierarchy
    "KeymapError",
    "KeymapSyntaxError",
    "SourceLocation",
    "NoInvocationsFoundError",
    "MissingTokenError",
    "MissingFunctionNameError",
    "InvalidFunctionNameError",
    "UnexpectedWhitespaceError",
    "UnbalancedParenthesesError",
    "NestingTooDeepError",
    "InconsistentLayerSizeError",
    "UnexpectedKeyCountError",
]
