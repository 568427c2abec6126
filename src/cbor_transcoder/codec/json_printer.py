"""JSON printer for the shared value model."""

import json
import logging
import math
from typing import List, Optional

from ..models.value import (
    Array,
    Bool,
    ByteString,
    Float,
    Integer,
    Map,
    Null,
    Simple,
    Tag,
    TextString,
    Value,
)
from ..types import BytesPolicy, ErrorKind, JsonPrinterInterface, JsonPrintError
from ..utils.base64_codec import Base64Codec
from .constants import DEFAULT_MAX_DEPTH


def stringify_key(key: Value) -> str:
    """
    Map key policy: text keys are used as-is, integer keys become their
    decimal form, every other key is rejected.

    Raises:
        JsonPrintError: NonStringMapKey for keys with no string form
    """
    if isinstance(key, TextString):
        return key.value
    if isinstance(key, Integer):
        return str(key.value)
    raise JsonPrintError(
        f"Map key of type {type(key).__name__} has no JSON string form",
        ErrorKind.NON_STRING_MAP_KEY,
        context=key,
    )


def format_float(number: float) -> str:
    """Shortest round-trip literal; non-finite values have no JSON form and print as null."""
    if math.isnan(number) or math.isinf(number):
        return "null"
    return repr(number)


class JsonPrinter(JsonPrinterInterface):
    """
    Renders a value tree as single-line JSON.

    Items are joined by a bare ``,`` and keys are followed by ``": "``
    (``":"`` when compact). Tags print their content only.
    """

    def __init__(self, bytes_policy: BytesPolicy = BytesPolicy.BASE64,
                 compact: bool = False, ensure_ascii: bool = False,
                 max_depth: int = DEFAULT_MAX_DEPTH,
                 logger: Optional[logging.Logger] = None):
        """
        Initialize the printer.

        Args:
            bytes_policy: How byte strings are rendered
            compact: Drop the space after ``:``
            ensure_ascii: Escape non-ASCII characters in strings
            max_depth: Maximum nesting of arrays, maps and tags
            logger: Optional logger instance
        """
        self.bytes_policy = bytes_policy
        self.key_separator = ":" if compact else ": "
        self.ensure_ascii = ensure_ascii
        self.max_depth = max_depth
        self.logger = logger or logging.getLogger(__name__)

    def print(self, value: Value) -> str:
        """
        Render a value as JSON text.

        Args:
            value: Value to print

        Returns:
            JSON text without trailing newline

        Raises:
            JsonPrintError: On non-string map keys, rejected byte strings or
                excessive nesting
        """
        parts: List[str] = []
        try:
            self._write(value, parts, 0)
        except RecursionError:
            raise JsonPrintError("Nesting too deep for the interpreter stack",
                                 ErrorKind.DEPTH_EXCEEDED)
        text = "".join(parts)
        self.logger.debug(f"Printed {type(value).__name__} as {len(text)} characters of JSON")
        return text

    def _quote(self, text: str) -> str:
        return json.dumps(text, ensure_ascii=self.ensure_ascii)

    def _check_depth(self, depth: int) -> None:
        if depth >= self.max_depth:
            raise JsonPrintError(f"Nesting depth exceeds the limit of {self.max_depth}",
                                 ErrorKind.DEPTH_EXCEEDED)

    def _write(self, value: Value, parts: List[str], depth: int) -> None:
        if isinstance(value, Null):
            parts.append("null")
        elif isinstance(value, Bool):
            parts.append("true" if value.value else "false")
        elif isinstance(value, Integer):
            parts.append(str(value.value))
        elif isinstance(value, Float):
            parts.append(format_float(value.value))
        elif isinstance(value, TextString):
            parts.append(self._quote(value.value))
        elif isinstance(value, ByteString):
            parts.append(self._quote(self._project_bytes(value.value)))
        elif isinstance(value, Array):
            self._check_depth(depth)
            parts.append("[")
            for i, item in enumerate(value.items):
                if i:
                    parts.append(",")
                self._write(item, parts, depth + 1)
            parts.append("]")
        elif isinstance(value, Map):
            self._check_depth(depth)
            parts.append("{")
            for i, (key, item) in enumerate(value.pairs):
                if i:
                    parts.append(",")
                parts.append(self._quote(stringify_key(key)))
                parts.append(self.key_separator)
                self._write(item, parts, depth + 1)
            parts.append("}")
        elif isinstance(value, Tag):
            self._check_depth(depth)
            self._write(value.value, parts, depth + 1)
        elif isinstance(value, Simple):
            parts.append("null")
        else:
            raise JsonPrintError(f"Cannot print {type(value).__name__} as JSON",
                                 ErrorKind.UNSUPPORTED_VALUE)

    def _project_bytes(self, data: bytes) -> str:
        if self.bytes_policy == BytesPolicy.BASE64:
            return Base64Codec.encode(data)
        if self.bytes_policy == BytesPolicy.BASE64URL:
            return Base64Codec.encode(data, url_safe=True)
        raise JsonPrintError(
            f"Byte string of {len(data)} bytes has no JSON form",
            ErrorKind.UNSUPPORTED_VALUE,
        )
