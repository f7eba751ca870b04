"""
Lenient level-text parser (Layer 1: Raw Text → Value Tree).

Converts the relaxed JSON dialect used by `.adofai` files into plain
Python values (dict, list, str, int, float, bool, None).

Dialect Notes:
    - Trailing commas are accepted (commas are simply skipped)
    - A leading byte-order mark is ignored
    - Unknown string escapes are dropped, never an error
    - Unparseable numbers become 0 / 0.0, never an error
    - Structural damage makes parse() return None instead of raising

An optional stop key lets callers read only the leading metadata of a
level: when a mapping reaches that key, the mapping is returned as read
so far and the rest of the text is never materialized.
"""

import re
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from adofai_core.config import METADATA_STOP_KEY
from adofai_core.model import Reviver


class LevelParseError(Exception):
    """Raised by parse_or_raise when the text is not a parseable level."""
    pass


class Token(Enum):
    """Classes of the next significant character."""
    NONE = 0
    CURLY_OPEN = 1
    CURLY_CLOSE = 2
    SQUARED_OPEN = 3
    SQUARED_CLOSE = 4
    COLON = 5
    COMMA = 6
    STRING = 7
    NUMBER = 8
    TRUE = 9
    FALSE = 10
    NULL = 11


WHITE_SPACE = " \t\n\r\ufeff"
WORD_BREAK = ' \t\n\r{}[],:"'
NUMBER_START = "-0123456789"

_SIMPLE_ESCAPES = {
    '"': '"',
    "/": "/",
    "\\": "\\",
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
}

_INT_PREFIX_RE = re.compile(r"[+-]?\d+", re.ASCII)
_FLOAT_PREFIX_RE = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?", re.ASCII)
_HEX_PREFIX_RE = re.compile(r"[+-]?[0-9a-fA-F]+", re.ASCII)

_EOF = ""


def _lenient_int(word: str) -> Union[int, float]:
    match = _INT_PREFIX_RE.match(word)
    if not match:
        return 0
    try:
        return int(match.group())
    except ValueError:
        # past the int digit limit; float() gives inf or a rounded value
        return float(match.group())


def _lenient_float(word: str) -> float:
    match = _FLOAT_PREFIX_RE.match(word)
    if not match:
        return 0.0
    value = float(match.group())
    # -0.0 collapses to 0.0
    return value or 0.0


def _lenient_hex(digits: str) -> int:
    match = _HEX_PREFIX_RE.match(digits)
    if not match:
        return 0
    return int(match.group(), 16) & 0xFFFF


class Parser:
    """
    Single-use scanner over one level text.

    Cursor state is local to the instance; create one Parser per parse.

    Args:
        text: Source text
        stop_key: Optional key at which reading stops. The mapping holding
            it is returned as read so far, and so is every enclosing
            container.
    """

    def __init__(self, text: str, stop_key: Optional[str] = None):
        self.text = text
        self.position = 0
        self.stop_key = stop_key
        self.stopped = False
        if self._peek() == "\ufeff":
            self._read()

    # ------------------------------------------------------------------
    # Cursor primitives
    # ------------------------------------------------------------------

    def _peek(self) -> str:
        if self.position >= len(self.text):
            return _EOF
        return self.text[self.position]

    def _read(self) -> str:
        if self.position >= len(self.text):
            return _EOF
        char = self.text[self.position]
        self.position += 1
        return char

    def _eat_whitespace(self) -> None:
        while True:
            char = self._peek()
            if char == _EOF or char not in WHITE_SPACE:
                return
            self.position += 1

    def _next_word(self) -> str:
        start = self.position
        while True:
            char = self._peek()
            if char == _EOF or char in WORD_BREAK:
                break
            self.position += 1
        return self.text[start:self.position]

    def _next_token(self) -> Token:
        """Classify the next significant character, consuming , ] } and bare words."""
        self._eat_whitespace()
        char = self._peek()
        if char == _EOF:
            return Token.NONE

        if char == '"':
            return Token.STRING
        if char == ",":
            self._read()
            return Token.COMMA
        if char in NUMBER_START:
            return Token.NUMBER
        if char == ":":
            return Token.COLON
        if char == "[":
            return Token.SQUARED_OPEN
        if char == "]":
            self._read()
            return Token.SQUARED_CLOSE
        if char == "{":
            return Token.CURLY_OPEN
        if char == "}":
            self._read()
            return Token.CURLY_CLOSE

        word = self._next_word()
        if word == "false":
            return Token.FALSE
        if word == "true":
            return Token.TRUE
        if word == "null":
            return Token.NULL
        return Token.NONE

    # ------------------------------------------------------------------
    # Grammar
    # ------------------------------------------------------------------

    def parse_value(self) -> Any:
        """Parse the value at the cursor. None on malformed structure."""
        return self._parse_by_token(self._next_token())

    def _parse_by_token(self, token: Token) -> Any:
        if token == Token.CURLY_OPEN:
            return self._parse_object()
        if token == Token.SQUARED_OPEN:
            return self._parse_array()
        if token == Token.STRING:
            return self._parse_string()
        if token == Token.NUMBER:
            return self._parse_number()
        if token == Token.TRUE:
            return True
        if token == Token.FALSE:
            return False
        return None

    def _parse_object(self) -> Optional[Dict[str, Any]]:
        obj: Dict[str, Any] = {}
        self._read()  # {

        while True:
            token = self._next_token()
            while token == Token.COMMA:
                token = self._next_token()
            if token == Token.NONE:
                return None
            if token == Token.CURLY_CLOSE:
                return obj
            if token != Token.STRING:
                return None

            key = self._parse_string()
            if self._next_token() != Token.COLON:
                return None
            if self.stop_key is not None and key == self.stop_key:
                self.stopped = True
                return obj

            self._read()  # :
            obj[key] = self.parse_value()
            if self.stopped:
                return obj

    def _parse_array(self) -> Optional[List[Any]]:
        array: List[Any] = []
        self._read()  # [

        while True:
            token = self._next_token()
            if token == Token.NONE:
                return None
            if token == Token.SQUARED_CLOSE:
                return array
            if token == Token.COMMA:
                continue
            if token == Token.COLON:
                # A colon is never consumed by the value grammar
                return None
            array.append(self._parse_by_token(token))
            if self.stopped:
                return array

    def _parse_string(self) -> str:
        chars: List[str] = []
        self._read()  # opening quote

        while True:
            char = self._read()
            if char == _EOF or char == '"':
                break
            if char != "\\":
                chars.append(char)
                continue

            escaped = self._read()
            if escaped == _EOF:
                break
            if escaped in _SIMPLE_ESCAPES:
                chars.append(_SIMPLE_ESCAPES[escaped])
            elif escaped == "u":
                digits = "".join(self._read() or "\0" for _ in range(4))
                self._append_code_unit(chars, _lenient_hex(digits))
            # any other escaped character is dropped

        return "".join(chars)

    @staticmethod
    def _append_code_unit(chars: List[str], code: int) -> None:
        """Append a UTF-16 code unit, joining it with a preceding high surrogate."""
        if 0xDC00 <= code <= 0xDFFF and chars and 0xD800 <= ord(chars[-1]) <= 0xDBFF:
            high = ord(chars.pop())
            chars.append(chr(0x10000 + ((high - 0xD800) << 10) + (code - 0xDC00)))
            return
        chars.append(chr(code))

    def _parse_number(self):
        word = self._next_word()
        if "." not in word:
            return _lenient_int(word)
        return _lenient_float(word)


def apply_reviver(key: str, value: Any, reviver: Reviver) -> Any:
    """
    Walk a parsed tree bottom-up and replace each node with reviver(key, node).

    Children are visited before their parent. List elements receive their
    index as a string key. Containers are updated in place.
    """
    if isinstance(value, list):
        for index, item in enumerate(value):
            value[index] = apply_reviver(str(index), item, reviver)
    elif isinstance(value, dict):
        for prop in list(value.keys()):
            value[prop] = apply_reviver(prop, value[prop], reviver)
    return reviver(key, value)


def parse(text: Optional[str], reviver: Optional[Reviver] = None, stop_key: Optional[str] = None) -> Any:
    """
    Parse level text into a value tree.

    Args:
        text: Source text (None yields None)
        reviver: Optional reviver applied to the finished tree
        stop_key: Optional key at which mappings stop reading

    Returns:
        The parsed value, or None if the text is structurally malformed
    """
    if text is None:
        return None
    result = Parser(text, stop_key=stop_key).parse_value()
    if callable(reviver):
        return apply_reviver("", result, reviver)
    return result


def parse_level_metadata(text: Optional[str], stop_key: str = METADATA_STOP_KEY) -> Any:
    """
    Parse only the leading part of a level (angle data and settings).

    Reading stops at `stop_key` (default "actions"), so the large event
    and decoration lists are never built.
    """
    return parse(text, stop_key=stop_key)


def parse_or_raise(text: Optional[str], reviver: Optional[Reviver] = None, stop_key: Optional[str] = None) -> Any:
    """
    Like parse(), but raise LevelParseError instead of returning None.

    A text that legitimately holds the literal `null` also raises, since
    a level can never be null.
    """
    result = parse(text, reviver=reviver, stop_key=stop_key)
    if result is None:
        raise LevelParseError("Text is not a parseable level document")
    return result


__all__ = [
    "Parser",
    "Token",
    "LevelParseError",
    "apply_reviver",
    "parse",
    "parse_level_metadata",
    "parse_or_raise",
]
