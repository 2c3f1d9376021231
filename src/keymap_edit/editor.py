"""
Keymap Text Editor
==================

Edits keymap source text in place by splicing at parser offsets. Only the
characters of the edited key (or the inserted layer) change; comments,
whitespace and formatting elsewhere are preserved byte for byte.

Operations
----------
set_key
    Replace one key's text. Strict: the result is re-parsed and any
    syntax error is raised, so the returned text is always valid.

append_layer
    Add a new layer of placeholder keys after the last invocation.
    Lenient: if the input does not parse, it is returned unchanged.

Example
-------
>>> from keymap_edit.editor import set_key, append_layer
>>> set_key("KEYMAP(KC_A, /* x */ KC_B)", 0, 1, "KC_ESC")
'KEYMAP(KC_A, /* x */ KC_ESC)'
>>> print(append_layer("[0] = KEYMAP(KC_A, KC_B)"))
[0] = KEYMAP(KC_A, KC_B),
 [1] = KEYMAP(KC_TRANSPARENT,KC_TRANSPARENT)
"""

import logging
from dataclasses import dataclass
from typing import Optional

from keymap_edit.errors import KeymapError
from keymap_edit.parser import DEFAULT_MACRO, KeymapParser

logger = logging.getLogger(__name__)

# Key value meaning "no mapping on this layer"
DEFAULT_PLACEHOLDER = "KC_TRANSPARENT"


# =============================================================================
# Layer Template
# =============================================================================

@dataclass(frozen=True)
class LayerTemplate:
    """
    Describes the text synthesised for a new layer.

    With the defaults a layer with index 2 and three keys renders as:

        ,\\n [2] = KEYMAP(KC_TRANSPARENT,KC_TRANSPARENT,KC_TRANSPARENT)

    Attributes:
        macro: Layer macro name
        placeholder: Token used for every key of the new layer
        index_format: Layer index annotation; ``{index}`` is substituted
        separator: Text inserted between the previous layer and the new one
        joiner: Text between placeholder keys
    """
    macro: str = DEFAULT_MACRO
    placeholder: str = DEFAULT_PLACEHOLDER
    index_format: str = "[{index}] = "
    separator: str = ",\n "
    joiner: str = ","

    def render(self, index: int, key_count: int) -> str:
        """Render the layer invocation (without the leading separator)."""
        keys = self.joiner.join([self.placeholder] * key_count)
        return f"{self.index_format.format(index=index)}{self.macro}({keys})"


# =============================================================================
# Editing Operations
# =============================================================================

def set_key(
    text: str,
    layer: int,
    key: int,
    value: str,
    key_count: Optional[int] = None,
    macro: str = DEFAULT_MACRO,
) -> str:
    """
    Return text with one key replaced by value.

    Selecting a layer or key that does not exist is not an error: the
    text is returned unchanged.

    Args:
        text: Keymap source text
        layer: Layer index
        key: Key index within the layer
        value: New key text
        key_count: Expected keys per layer, checked on both parses
        macro: Layer macro name

    Returns:
        The edited text

    Raises:
        KeymapSyntaxError: If text does not parse, or the edited text
            would not parse
    """
    layers = KeymapParser(text, key_count, macro).parse().layers

    if not 0 <= layer < len(layers) or not 0 <= key < len(layers[layer]):
        logger.debug(f"Key {layer}/{key} does not exist, text left unchanged")
        return text

    node = layers[layer][key]
    start = node.offset
    stop = node.offset + len(node.content)
    edited = text[:start] + value + text[stop:]

    KeymapParser(edited, key_count, macro).parse()
    logger.debug(f"Set key {layer}/{key}: {node.content!r} -> {value!r}")
    return edited


def append_layer(
    text: str,
    template: Optional[LayerTemplate] = None,
    validate: bool = False,
) -> str:
    """
    Return text with a new placeholder layer after the last invocation.

    If text cannot be parsed, it is returned unchanged.

    Args:
        text: Keymap source text
        template: How the new layer is written (defaults to LayerTemplate())
        validate: Re-parse the result and raise if it is not valid

    Returns:
        The text with one more layer

    Raises:
        KeymapSyntaxError: Only when validate is set and the result does
            not parse
    """
    template = template or LayerTemplate()

    try:
        result = KeymapParser(text, macro=template.macro).parse()
    except KeymapError as e:
        logger.debug(f"Not adding a layer, source does not parse: {e}")
        return text

    pos = result.end_position
    addition = template.separator + template.render(result.layer_count, result.key_count)
    edited = text[:pos] + addition + text[pos:]

    if validate:
        KeymapParser(edited, result.key_count, template.macro).parse()

    logger.debug(
        f"Added layer {result.layer_count} with {result.key_count} keys at offset {pos}"
    )
    return edited
