"""
Serialization helpers for parsed level values.

Provides a JSON.stringify-style writer (compact or indented) with
replacer support, plus a YAML bridge for inspection exports.

Output rules kept stable on purpose:
    - Non-ASCII and control characters are escaped (\\uXXXX); with
      ensure_ascii off only control characters and lone surrogates are
    - Non-finite numbers are written as null, negative zero as 0.0
    - Empty arrays never span lines; empty objects do when indented
"""
from __future__ import annotations

import math
from typing import Any, Dict, List, Optional, Union

import yaml

from adofai_core.model import KeyAllowList, Replacer


_SHORT_ESCAPES = {
    "\b": "\\b",
    "\t": "\\t",
    "\n": "\\n",
    "\f": "\\f",
    "\r": "\\r",
    '"': '\\"',
    "\\": "\\\\",
}

MAX_INDENT = 10


def format_number(value: Union[int, float]) -> str:
    """
    Format a number the way the parser reads it back.

    Integers print as-is, or in float form past the interpreter's digit
    limit. Floats use repr; an exponent form without a decimal point gets
    one (1e-07 -> 1.0e-07) so it re-parses as a float. Non-finite values
    print as null and -0.0 prints as 0.0.
    """
    if isinstance(value, int):
        try:
            return str(int(value))
        except ValueError:
            try:
                value = float(value)
            except OverflowError:
                return "null"
    if not math.isfinite(value):
        return "null"
    # -0.0 == 0, and the parser reads "-0.0" back as 0.0
    if value == 0:
        value = 0.0
    text = repr(float(value))
    if "e" in text and "." not in text:
        mantissa, exponent = text.split("e", 1)
        text = f"{mantissa}.0e{exponent}"
    return text


def escape_string(text: str, ensure_ascii: bool = True) -> str:
    """
    Quote a string, escaping control characters and everything outside printable ASCII.

    With ensure_ascii=False, characters from U+007F up are written raw,
    except lone surrogates, which cannot be encoded as UTF-8.
    """
    parts = ['"']
    for char in text:
        if char in _SHORT_ESCAPES:
            parts.append(_SHORT_ESCAPES[char])
            continue
        code = ord(char)
        if 32 <= code <= 126:
            parts.append(char)
        elif not ensure_ascii and code >= 127 and not 0xD800 <= code <= 0xDFFF:
            parts.append(char)
        elif code > 0xFFFF:
            code -= 0x10000
            parts.append("\\u%04x\\u%04x" % (0xD800 + (code >> 10), 0xDC00 + (code & 0x3FF)))
        else:
            parts.append("\\u%04x" % code)
    parts.append('"')
    return "".join(parts)


def _indent_unit(space: Any) -> str:
    if space is None or isinstance(space, bool):
        return ""
    if isinstance(space, (int, float)):
        return " " * int(min(MAX_INDENT, max(0, space)))
    if isinstance(space, str):
        return space[:MAX_INDENT]
    return ""


class Serializer:
    """
    Writer for value trees.

    Args:
        replacer: Callable (key, value) -> value, or a key allow-list
            (KeyAllowList or any list/tuple/set of strings)
        space: Indent width 0-10, or an indent string (first 10 chars used).
            Falsy means compact output.
        ensure_ascii: Escape everything outside printable ASCII (default).
            Off, non-ASCII text is written raw like JSON.stringify does.
    """

    def __init__(self, replacer: Optional[Replacer] = None, space: Union[int, str, None] = None,
                 ensure_ascii: bool = True):
        if isinstance(replacer, (list, tuple, set, frozenset)):
            replacer = KeyAllowList.of(replacer)
        self.replacer = replacer
        self.indent_str = _indent_unit(space)
        self.ensure_ascii = ensure_ascii
        self._parts: List[str] = []
        self._depth = 0

    def serialize(self, value: Any) -> str:
        self._parts = []
        self._depth = 0
        self._serialize_value(value, "")
        return "".join(self._parts)

    def _emit_newline_indent(self) -> None:
        if self.indent_str:
            self._parts.append("\n")
            self._parts.append(self.indent_str * self._depth)

    def _serialize_value(self, value: Any, key: str) -> None:
        if callable(self.replacer):
            value = self.replacer(key, value)

        if value is None:
            self._parts.append("null")
        elif isinstance(value, str):
            self._parts.append(escape_string(value, self.ensure_ascii))
        elif isinstance(value, bool):
            self._parts.append("true" if value else "false")
        elif isinstance(value, (list, tuple)):
            self._serialize_array(value)
        elif isinstance(value, dict):
            self._serialize_object(value)
        elif isinstance(value, (int, float)):
            self._parts.append(format_number(value))
        else:
            self._parts.append(escape_string(str(value), self.ensure_ascii))

    def _serialize_object(self, obj: Dict[str, Any]) -> None:
        members = [
            (str(key), item) for key, item in obj.items()
            if not isinstance(self.replacer, KeyAllowList) or self.replacer.allows(str(key))
        ]
        self._parts.append("{")
        if not members:
            if self.indent_str:
                self._parts.append("\n")
                self._emit_newline_indent()
            self._parts.append("}")
            return

        self._depth += 1
        for index, (key, item) in enumerate(members):
            if index:
                self._parts.append(",")
            self._emit_newline_indent()
            self._parts.append(escape_string(key, self.ensure_ascii))
            self._parts.append(": " if self.indent_str else ":")
            self._serialize_value(item, key)
        self._depth -= 1
        self._emit_newline_indent()
        self._parts.append("}")

    def _serialize_array(self, array: Union[List[Any], tuple]) -> None:
        if not array:
            self._parts.append("[]")
            return

        self._parts.append("[")
        self._depth += 1
        for index, item in enumerate(array):
            if index:
                self._parts.append(",")
            self._emit_newline_indent()
            self._serialize_value(item, str(index))
        self._depth -= 1
        self._emit_newline_indent()
        self._parts.append("]")


def stringify(value: Any, replacer: Optional[Replacer] = None, space: Union[int, str, None] = None,
              ensure_ascii: bool = True) -> str:
    """Serialize a value tree; see Serializer for the arguments."""
    return Serializer(replacer, space, ensure_ascii).serialize(value)


def document_to_yaml(value: Any) -> str:
    """Dump a value tree as YAML, keeping key order."""
    return yaml.safe_dump(value, sort_keys=False, allow_unicode=True)


def document_from_yaml(text: str) -> Any:
    return yaml.safe_load(text)


__all__ = [
    "Serializer",
    "stringify",
    "escape_string",
    "format_number",
    "document_to_yaml",
    "document_from_yaml",
]
