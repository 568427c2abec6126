"""JSON parser producing the shared value model."""

import logging
import re
from typing import List, Optional, Tuple

from ..models.value import (
    NULL,
    Array,
    Bool,
    Float,
    Integer,
    Map,
    TextString,
    Value,
)
from ..types import ErrorKind, JsonParseError, JsonParserInterface
from .constants import DEFAULT_MAX_DEPTH

_WHITESPACE = re.compile(r"[ \t\n\r]*")
_NUMBER = re.compile(r"-?(?:0|[1-9][0-9]*)(\.[0-9]+)?([eE][-+]?[0-9]+)?")
_STRING_CHUNK = re.compile(r'[^"\\\x00-\x1f]*')
_HEX4 = re.compile(r"[0-9a-fA-F]{4}")
_SURROGATE = re.compile(r"[\ud800-\udfff]")

_SIMPLE_ESCAPES = {
    '"': '"',
    "\\": "\\",
    "/": "/",
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
}

_LITERALS = (
    ("true", Bool(True)),
    ("false", Bool(False)),
    ("null", NULL),
)


class JsonParser(JsonParserInterface):
    """
    Recursive descent JSON parser.

    Integers and floats are kept apart by their literal form, object
    members keep their written order (duplicates included) and nesting
    is bounded by an explicit depth counter.
    """

    def __init__(self, max_depth: int = DEFAULT_MAX_DEPTH,
                 logger: Optional[logging.Logger] = None):
        """
        Initialize the JSON parser.

        Args:
            max_depth: Maximum nesting of arrays and objects
            logger: Optional logger instance
        """
        if max_depth < 1:
            raise ValueError("max_depth must be positive")
        self.max_depth = max_depth
        self.logger = logger or logging.getLogger(__name__)

    def parse(self, text: str) -> Value:
        """
        Parse exactly one JSON value.

        Args:
            text: JSON text, optionally surrounded by whitespace

        Returns:
            Parsed value

        Raises:
            JsonParseError: On malformed syntax, bad escapes, excessive
                nesting or content after the value
        """
        if not isinstance(text, str):
            raise TypeError(f"JSON input must be str, got {type(text).__name__}")

        pos = _WHITESPACE.match(text, 0).end()
        try:
            value, pos = self._parse_value(text, pos, 0)
        except RecursionError:
            raise self._error(text, pos, "Nesting too deep for the interpreter stack",
                              ErrorKind.DEPTH_EXCEEDED)

        pos = _WHITESPACE.match(text, pos).end()
        if pos != len(text):
            raise self._error(text, pos, "Extra data after JSON value", ErrorKind.TRAILING_DATA)

        self.logger.debug(f"Parsed {len(text)} characters of JSON into {type(value).__name__}")
        return value

    def _error(self, text: str, pos: int, message: str,
               kind: ErrorKind = ErrorKind.SYNTAX_ERROR) -> JsonParseError:
        lineno = text.count("\n", 0, pos) + 1
        colno = pos - text.rfind("\n", 0, pos)
        return JsonParseError(message, kind, pos, lineno, colno)

    def _parse_value(self, text: str, pos: int, depth: int) -> Tuple[Value, int]:
        """Parse the value starting at ``pos`` (whitespace already skipped)."""
        if pos >= len(text):
            raise self._error(text, pos, "Expecting value")

        ch = text[pos]
        if ch == "{":
            return self._parse_object(text, pos, depth)
        elif ch == "[":
            return self._parse_array(text, pos, depth)
        elif ch == '"':
            string, pos = self._parse_string(text, pos)
            return TextString(string), pos
        elif ch == "-" or ch.isdigit():
            return self._parse_number(text, pos)

        for literal, value in _LITERALS:
            if text.startswith(literal, pos):
                return value, pos + len(literal)

        raise self._error(text, pos, "Expecting value")

    def _parse_number(self, text: str, pos: int) -> Tuple[Value, int]:
        m = _NUMBER.match(text, pos)
        if not m:
            raise self._error(text, pos, "Invalid number literal")

        end = m.end()
        if end < len(text) and (text[end].isdigit() or text[end] in ".eE"):
            raise self._error(text, pos, "Invalid number literal")

        literal = m.group(0)
        if m.group(1) or m.group(2):
            return Float(float(literal)), end
        try:
            return Integer(int(literal)), end
        except ValueError:
            raise self._error(text, pos, "Integer literal too long")

    def _parse_string(self, text: str, pos: int) -> Tuple[str, int]:
        """Parse a string literal; ``text[pos]`` is the opening quote."""
        start = pos
        pos += 1
        parts: List[str] = []

        while True:
            chunk = _STRING_CHUNK.match(text, pos)
            surrogate = _SURROGATE.search(chunk.group(0))
            if surrogate:
                raise self._error(text, pos + surrogate.start(), "Surrogate code point in string")
            parts.append(chunk.group(0))
            pos = chunk.end()

            if pos >= len(text):
                raise self._error(text, start, "Unterminated string starting")

            ch = text[pos]
            if ch == '"':
                return "".join(parts), pos + 1
            if ch != "\\":
                raise self._error(text, pos, "Invalid control character in string")

            if pos + 1 >= len(text):
                raise self._error(text, start, "Unterminated string starting")

            esc = text[pos + 1]
            if esc in _SIMPLE_ESCAPES:
                parts.append(_SIMPLE_ESCAPES[esc])
                pos += 2
            elif esc == "u":
                char, pos = self._parse_unicode_escape(text, pos)
                parts.append(char)
            else:
                raise self._error(text, pos, f"Invalid escape {text[pos:pos + 2]!r}",
                                  ErrorKind.INVALID_ESCAPE)

    def _parse_unicode_escape(self, text: str, pos: int) -> Tuple[str, int]:
        """Decode ``\\uXXXX`` at ``pos``, joining surrogate pairs."""
        code = self._read_hex4(text, pos)
        if 0xDC00 <= code <= 0xDFFF:
            raise self._error(text, pos, "Unpaired low surrogate", ErrorKind.INVALID_ESCAPE)
        if not 0xD800 <= code <= 0xDBFF:
            return chr(code), pos + 6

        low_pos = pos + 6
        if not text.startswith("\\u", low_pos):
            raise self._error(text, pos, "Unpaired high surrogate", ErrorKind.INVALID_ESCAPE)
        low = self._read_hex4(text, low_pos)
        if not 0xDC00 <= low <= 0xDFFF:
            raise self._error(text, pos, "Unpaired high surrogate", ErrorKind.INVALID_ESCAPE)

        combined = 0x10000 + ((code - 0xD800) << 10) + (low - 0xDC00)
        return chr(combined), low_pos + 6

    def _read_hex4(self, text: str, pos: int) -> int:
        m = _HEX4.match(text, pos + 2)
        if not m:
            raise self._error(text, pos, "Invalid \\uXXXX escape", ErrorKind.INVALID_ESCAPE)
        return int(m.group(0), 16)

    def _check_depth(self, text: str, pos: int, depth: int) -> None:
        if depth >= self.max_depth:
            raise self._error(text, pos, f"Nesting depth exceeds the limit of {self.max_depth}",
                              ErrorKind.DEPTH_EXCEEDED)

    def _parse_object(self, text: str, pos: int, depth: int) -> Tuple[Map, int]:
        self._check_depth(text, pos, depth)
        pairs = []
        pos = _WHITESPACE.match(text, pos + 1).end()

        if pos < len(text) and text[pos] == "}":
            return Map(()), pos + 1

        while True:
            if pos >= len(text) or text[pos] != '"':
                raise self._error(text, pos, "Expecting property name enclosed in double quotes")
            key, pos = self._parse_string(text, pos)

            pos = _WHITESPACE.match(text, pos).end()
            if pos >= len(text) or text[pos] != ":":
                raise self._error(text, pos, "Expecting ':' delimiter")
            pos = _WHITESPACE.match(text, pos + 1).end()

            value, pos = self._parse_value(text, pos, depth + 1)
            pairs.append((TextString(key), value))

            pos = _WHITESPACE.match(text, pos).end()
            if pos < len(text) and text[pos] == "}":
                return Map(tuple(pairs)), pos + 1
            if pos >= len(text) or text[pos] != ",":
                raise self._error(text, pos, "Expecting ',' delimiter")
            pos = _WHITESPACE.match(text, pos + 1).end()

    def _parse_array(self, text: str, pos: int, depth: int) -> Tuple[Array, int]:
        self._check_depth(text, pos, depth)
        items = []
        pos = _WHITESPACE.match(text, pos + 1).end()

        if pos < len(text) and text[pos] == "]":
            return Array(()), pos + 1

        while True:
            value, pos = self._parse_value(text, pos, depth + 1)
            items.append(value)

            pos = _WHITESPACE.match(text, pos).end()
            if pos < len(text) and text[pos] == "]":
                return Array(tuple(items)), pos + 1
            if pos >= len(text) or text[pos] != ",":
                raise self._error(text, pos, "Expecting ',' delimiter")
            pos = _WHITESPACE.match(text, pos + 1).end()
