"""
Keymap Edit Command-Line Interface
==================================

This package provides the ``kmedit`` command-line tool for inspecting and
editing KEYMAP(...) layers in keyboard firmware sources:

- **kmedit show**: list layers and keys, or dump syntax trees
- **kmedit set**: change a single key
- **kmedit add-layer**: append a layer of placeholder keys

The tool is implemented as a Click-based CLI application.
"""

__all__ = ["kmedit"]
