"""
Canonical `.adofai` text generator.

Converts a parsed level into the on-disk layout used by the level
ecosystem. This is NOT generic JSON formatting:
    - Root object: always multi-line, one member per line
    - Arrays of scalars: one line, no inner spaces  ([1,2,3])
    - Arrays holding any container: one element per line, each element
      flattened to a single line  ({"floor": 1, "eventType": "Twirl"})
    - Nested objects: multi-line at their own indent

Files written this way diff cleanly against files saved by the game.
"""

import json
from typing import Any

from adofai_core.config import FormatOptions
from adofai_core.model import is_container
from adofai_core.serialization import format_number


def _scalar_to_json(value: Any) -> str:
    """JSON text for a non-container value."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return format_number(value)
    if isinstance(value, str):
        return json.dumps(value, ensure_ascii=False)
    return json.dumps(str(value), ensure_ascii=False)


def _key_to_json(key: Any) -> str:
    return json.dumps(str(key), ensure_ascii=False)


def export_as_adofai(value: Any, indent_level: int = 0, is_root: bool = False,
                     indent_char: str = "\t", indent_step: int = 1) -> str:
    """
    Render a value in the canonical level layout.

    Args:
        value: Parsed level (or any sub-value)
        indent_level: Current indent, in units of indent_char
        is_root: True for the top-level document
        indent_char: Indent unit (default tab)
        indent_step: Units added per nesting level

    Returns:
        Level text
    """
    if not is_container(value):
        return _scalar_to_json(value)

    if isinstance(value, (list, tuple)):
        if not any(is_container(item) for item in value):
            return "[" + ",".join(_scalar_to_json(item) for item in value) + "]"

        spaces = indent_char * indent_level
        item_indent = indent_char * (indent_level + indent_step)
        items = ",\n".join(item_indent + format_as_single_line(item, indent_char) for item in value)
        return "[\n" + items + "\n" + spaces + "]"

    if is_root:
        child_indent = indent_char * indent_step
        members = ",\n".join(
            child_indent + _key_to_json(key) + ": "
            + export_as_adofai(item, indent_step, False, indent_char, indent_step)
            for key, item in value.items()
        )
        return "{\n" + members + "\n}"

    spaces = indent_char * indent_level
    members = ",\n".join(
        spaces + indent_char * indent_step + _key_to_json(key) + ": "
        + export_as_adofai(item, indent_level + indent_step, False, indent_char, indent_step)
        for key, item in value.items()
    )
    return "{\n" + members + "\n" + spaces + "}"


def format_as_single_line(value: Any, indent_char: str = "\t") -> str:
    """
    Flatten a value onto one line.

    Objects render as {"k": v, "k2": v2}; arrays as [v,v2].
    Used for the elements of multi-line arrays (events, decorations).
    """
    if not is_container(value):
        return export_as_adofai(value, 0, False, indent_char)

    if isinstance(value, (list, tuple)):
        return "[" + ",".join(format_as_single_line(item, indent_char) for item in value) + "]"

    entries = ", ".join(
        _key_to_json(key) + ": " + format_as_single_line(item, indent_char)
        for key, item in value.items()
    )
    return "{" + entries + "}"


def export_level(document: Any, options: FormatOptions = None) -> str:
    """Export a whole level document as root, using FormatOptions for the indent."""
    if options is None:
        options = FormatOptions()
    return export_as_adofai(document, 0, True, options.indent_char, options.indent_step)


__all__ = ["export_as_adofai", "format_as_single_line", "export_level"]
