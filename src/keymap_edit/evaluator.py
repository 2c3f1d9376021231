"""
Keymap Expression Evaluator
===========================

Resolves the value of a parsed key against a caller-supplied symbol table.

A symbol table maps call names to Python callables:

    symbols = {
        "LT": lambda layer, key: f"{key} / layer {layer}",
        "MO": lambda layer: f"momentary {layer}",
    }

Words evaluate to their text. Calls evaluate their parameters first, then
invoke the matching callable with the results as positional arguments.
Evaluation is lenient: a call whose name is not in the table, or whose
callable returns a falsy value, evaluates to None instead of raising, so
partial symbol tables can be used while a layout is being described.
"""

import logging
from typing import Any, Callable, Mapping, Optional, Union

from keymap_edit.ast import Call, Layer, Node, Word

logger = logging.getLogger(__name__)

SymbolTable = Mapping[str, Callable[..., Any]]


def evaluate(node: Union[Node, str, None], symbols: SymbolTable) -> Optional[Any]:
    """
    Evaluate a key expression.

    Args:
        node: A parsed node; a plain string evaluates to itself and None
            evaluates to None
        symbols: Mapping of call names to callables

    Returns:
        The resolved value, or None if it cannot be resolved
    """
    if node is None:
        return None
    if isinstance(node, str):
        return node
    if isinstance(node, Word):
        return node.content
    if isinstance(node, Call):
        values = [evaluate(param, symbols) for param in node.params]
        func = symbols.get(node.name)
        if func is None:
            logger.debug(f"No symbol for '{node.name}' at offset {node.offset}")
            return None
        return func(*values) or None
    return None


def evaluate_layer(layer: Layer, symbols: SymbolTable) -> list[Optional[Any]]:
    """Evaluate every key of a layer, in order."""
    return [evaluate(node, symbols) for node in layer]
