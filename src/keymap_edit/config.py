"""
Keymap Edit Configuration
=========================

Editor defaults, taken from this module or from environment variables:

    KMEDIT_MACRO            Layer macro name (default: KEYMAP)
    KMEDIT_PLACEHOLDER      Key used to fill new layers (default: KC_TRANSPARENT)
    KMEDIT_KEY_COUNT        Expected keys per layer (default: unchecked)
    KMEDIT_VALIDATE_APPEND  Re-parse after adding a layer (1/true/yes)

Command-line options override both.
"""

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional

from keymap_edit.editor import DEFAULT_PLACEHOLDER, LayerTemplate
from keymap_edit.parser import DEFAULT_MACRO

logger = logging.getLogger(__name__)

_TRUE_VALUES = ("1", "true", "yes", "on")


@dataclass
class EditorConfig:
    """
    Settings shared by the parser and editor.

    Attributes:
        macro: Layer macro name
        placeholder: Key used for every key of a new layer
        key_count: Expected keys per layer, or None to accept any
        validate_append: Re-parse the text produced by append_layer
    """

    macro: str = DEFAULT_MACRO
    placeholder: str = DEFAULT_PLACEHOLDER
    key_count: Optional[int] = None
    validate_append: bool = False

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "EditorConfig":
        """
        Create an EditorConfig from environment variables.

        Args:
            environ: Mapping to read instead of os.environ

        Returns:
            EditorConfig with environment overrides applied
        """
        env = os.environ if environ is None else environ
        config = cls()

        if macro := env.get("KMEDIT_MACRO"):
            config.macro = macro

        if placeholder := env.get("KMEDIT_PLACEHOLDER"):
            config.placeholder = placeholder

        if key_count := env.get("KMEDIT_KEY_COUNT"):
            try:
                config.key_count = int(key_count)
            except ValueError:
                logger.warning(f"Ignoring invalid KMEDIT_KEY_COUNT: {key_count!r}")

        if validate := env.get("KMEDIT_VALIDATE_APPEND"):
            config.validate_append = validate.strip().lower() in _TRUE_VALUES

        return config

    def layer_template(self) -> LayerTemplate:
        """Build the template used when adding layers."""
        return LayerTemplate(macro=self.macro, placeholder=self.placeholder)
