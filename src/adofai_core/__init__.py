"""
ADOFAI Level Core Package

Reads, rewrites and exports `.adofai` level files.

The level format is a relaxed JSON dialect. A generic JSON library cannot
reproduce its on-disk layout, so this package carries its own:
    - Lenient recursive-descent parser (string_parser)
    - Configurable JSON-style serializer (serialization)
    - Canonical level pretty-printer (backends.adofai_format)
    - Version upgrade/downgrade pipeline (level_utils)

This package never touches the filesystem except in the CLI layer.
Every other module works on plain dicts, lists and scalars.
"""

__version__ = "0.1.0"
